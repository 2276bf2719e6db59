"""Exceptions for the EFS Request Operator."""

from __future__ import annotations

__all__ = [
    "ConfigurationError",
    "EfsOperatorError",
    "InvalidRequestError",
    "InvalidStatusError",
]


class EfsOperatorError(Exception):
    """Base class for errors raised by the operator."""


class ConfigurationError(EfsOperatorError):
    """Raised when operator configuration validation fails."""


class InvalidRequestError(EfsOperatorError):
    """The EfsRequest spec is missing required fields."""


class InvalidStatusError(EfsOperatorError):
    """The persisted status document cannot be decoded."""
