"""Tests for logging context propagation."""

import asyncio

from auth_starter.logging.context import (
    clear_log_context,
    get_log_context,
    log_context,
    pop_log_context,
    push_log_context,
)


def test_empty_context():
    """Test that context starts empty."""
    assert get_log_context() == {}


def test_push_and_pop():
    """Test pushing fields and restoring the previous context."""
    token = push_log_context(request_id="abc123", auth_path="/sign-in")
    assert get_log_context() == {"request_id": "abc123", "auth_path": "/sign-in"}
    pop_log_context(token)
    assert get_log_context() == {}


def test_nested_context():
    """Test nested pushes merge and unwind in order."""
    token1 = push_log_context(request_id="abc123")
    token2 = push_log_context(notification_kind="otp")
    assert get_log_context() == {"request_id": "abc123", "notification_kind": "otp"}

    pop_log_context(token2)
    assert get_log_context() == {"request_id": "abc123"}
    pop_log_context(token1)
    assert get_log_context() == {}


def test_inner_scope_overrides_field():
    """Test an inner scope can shadow a field and restore it on exit."""
    with log_context(auth_path="/sign-up"):
        with log_context(auth_path="/verify-email"):
            assert get_log_context()["auth_path"] == "/verify-email"
        assert get_log_context()["auth_path"] == "/sign-up"


def test_context_manager_restores_on_exception():
    """Test the context is restored even when the block raises."""
    try:
        with log_context(request_id="boom"):
            raise RuntimeError("fail")
    except RuntimeError:
        pass

    assert get_log_context() == {}


def test_returned_copy_is_detached():
    """Test mutating the returned dict does not change the context."""
    with log_context(request_id="abc"):
        snapshot = get_log_context()
        snapshot["request_id"] = "changed"
        assert get_log_context()["request_id"] == "abc"


def test_clear_log_context():
    push_log_context(request_id="abc")
    clear_log_context()
    assert get_log_context() == {}


def test_concurrent_tasks_are_isolated():
    """Test concurrent requests never see each other's fields."""

    async def handle(request_id):
        with log_context(request_id=request_id):
            await asyncio.sleep(0)
            return get_log_context()["request_id"]

    async def run():
        return await asyncio.gather(*(handle(f"req-{i}") for i in range(5)))

    assert asyncio.run(run()) == [f"req-{i}" for i in range(5)]
