"""Base file system provider interface."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Protocol, Union


class FailureKind(str, Enum):
    """Broad category of a provider failure."""

    SERVICE = "service"
    TRANSPORT = "transport"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class FileSystemCreated:
    """The provider accepted a creation request."""

    file_system_id: str


@dataclass(frozen=True)
class ProviderFailure:
    """A provider error flattened into a single description."""

    kind: FailureKind
    detail: str
    code: str | None = None

    @property
    def message(self) -> str:
        return self.detail


CreateResult = Union[FileSystemCreated, ProviderFailure]


class FileSystemProvider(Protocol):
    """Protocol defining file system provider operations."""

    def create_file_system(
        self,
        name: str,
        owner: str,
        creation_token: str | None = None,
    ) -> CreateResult:
        """Request creation of a file system tagged with ``name`` and ``owner``.

        Implementations never raise; every error is returned as a
        ``ProviderFailure``.
        """
        ...

    def test_connectivity(self) -> bool:
        """Test connectivity to the provider."""
        ...
