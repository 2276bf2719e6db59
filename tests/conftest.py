"""Shared fixtures for the EFS Request Operator tests."""

from __future__ import annotations

from typing import Iterator
from unittest.mock import MagicMock, patch

import pytest


@pytest.fixture(autouse=True)
def mock_kopf_event() -> Iterator[MagicMock]:
    """Keep event emission away from a real kopf posting queue."""
    with patch("efs_request_operator.utils.events.kopf.event") as mock_event:
        yield mock_event
