"""Utility functions for the EFS Request Operator."""

from .errors import sanitize_error_message, sanitize_exception
from .events import (
    emit_creation_failed,
    emit_event,
    emit_file_system_creating,
    emit_reconcile_failed,
    object_reference,
)

__all__ = [
    "emit_event",
    "emit_reconcile_failed",
    "emit_file_system_creating",
    "emit_creation_failed",
    "object_reference",
    "sanitize_error_message",
    "sanitize_exception",
]
