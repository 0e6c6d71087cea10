"""Test helper utilities for Auth Starter tests."""

from .fake_engine import FakeEngine, create_fake_engine

__all__ = ["FakeEngine", "create_fake_engine"]
