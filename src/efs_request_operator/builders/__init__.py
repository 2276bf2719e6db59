"""Builders for operator collaborators."""

from .provider import create_provider_from_config

__all__ = ["create_provider_from_config"]
