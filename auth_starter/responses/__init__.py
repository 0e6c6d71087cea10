"""Uniform response envelope and its constructors."""

from .builder import (
    error,
    forbidden,
    internal_server_error,
    not_found,
    success,
    unauthorized,
    validation_error,
)
from .models import Envelope, ErrorDetail

__all__ = [
    "Envelope",
    "ErrorDetail",
    "success",
    "error",
    "validation_error",
    "unauthorized",
    "forbidden",
    "not_found",
    "internal_server_error",
]
