"""Resource model for EfsRequest objects and their status documents."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from .constants import (
    CONDITION_PHASE,
    CONDITION_REASON,
    STATUS_CONDITION,
    STATUS_FILE_SYSTEM_ID,
)
from .exceptions import InvalidRequestError, InvalidStatusError


class Phase(str, Enum):
    """Lifecycle phases of an EfsRequest.

    The values are the discriminator strings persisted under
    ``status.condition.phase``.
    """

    INITIALISED = "Initialised"
    CREATING_FILE_SYSTEM = "CreatingFileSystem"
    CREATING_MOUNT_TARGETS = "CreatingMountTargets"
    SUCCESS = "Success"
    FAILED = "Failed"


# Phases that have moved past the creation call.
PROVISIONED_PHASES = frozenset(
    {Phase.CREATING_FILE_SYSTEM, Phase.CREATING_MOUNT_TARGETS, Phase.SUCCESS}
)


@dataclass(frozen=True)
class Condition:
    """A phase together with its payload.

    Only ``Phase.FAILED`` carries a reason; every other phase has none.
    """

    phase: Phase = Phase.INITIALISED
    reason: str | None = None

    def __post_init__(self) -> None:
        if self.phase is Phase.FAILED and self.reason is None:
            object.__setattr__(self, "reason", "")
        elif self.phase is not Phase.FAILED and self.reason is not None:
            raise ValueError(f"phase {self.phase.value} does not carry a reason")

    @classmethod
    def of(cls, phase: Phase) -> Condition:
        """Build a payload-free condition for ``phase``."""
        return cls(phase=phase)

    @classmethod
    def failed(cls, reason: str) -> Condition:
        """Build a Failed condition carrying ``reason``."""
        return cls(phase=Phase.FAILED, reason=reason)

    @property
    def is_failed(self) -> bool:
        return self.phase is Phase.FAILED

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {CONDITION_PHASE: self.phase.value}
        if self.is_failed:
            data[CONDITION_REASON] = self.reason
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> Condition:
        """Decode a ``condition`` document.

        Raises:
            InvalidStatusError: If the phase discriminator is missing or unknown
        """
        if not data:
            raise InvalidStatusError("status.condition is missing")

        raw_phase = data.get(CONDITION_PHASE)
        try:
            phase = Phase(raw_phase)
        except ValueError as e:
            raise InvalidStatusError(f"unknown phase {raw_phase!r}") from e

        if phase is Phase.FAILED:
            return cls.failed(str(data.get(CONDITION_REASON) or ""))
        return cls.of(phase)


@dataclass(frozen=True)
class EfsRequestSpec:
    """User-declared desired state of an EfsRequest."""

    name: str
    owner: str

    @classmethod
    def from_dict(cls, spec: dict[str, Any] | None) -> EfsRequestSpec:
        """Build the spec from the ``.spec`` field of a custom resource.

        Raises:
            InvalidRequestError: If ``name`` or ``owner`` is missing or empty
        """
        spec = spec or {}
        name = spec.get("name")
        owner = spec.get("owner")
        if not isinstance(name, str) or not name:
            raise InvalidRequestError("spec.name is required")
        if not isinstance(owner, str) or not owner:
            raise InvalidRequestError("spec.owner is required")
        return cls(name=name, owner=owner)


@dataclass(frozen=True)
class EfsRequestStatus:
    """Controller-owned status of an EfsRequest."""

    file_system_id: str | None = None
    condition: Condition = field(default_factory=Condition)

    @classmethod
    def default(cls) -> EfsRequestStatus:
        """Status synthesized on first observation: Initialised, no id."""
        return cls()

    @property
    def phase(self) -> Phase:
        return self.condition.phase

    def to_dict(self) -> dict[str, Any]:
        """Encode to the persisted status document."""
        return {
            STATUS_FILE_SYSTEM_ID: self.file_system_id,
            STATUS_CONDITION: self.condition.to_dict(),
        }

    def to_patch(self) -> dict[str, Any]:
        """Encode as a JSON merge patch for the status subresource.

        A merge patch merges nested objects, so a stale ``reason`` left by a
        previous Failed condition is removed explicitly with a null.
        """
        data = self.to_dict()
        if not self.condition.is_failed:
            data[STATUS_CONDITION][CONDITION_REASON] = None
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any] | None) -> EfsRequestStatus | None:
        """Decode a persisted status document.

        Returns:
            The decoded status, or None when the object carries no status yet

        Raises:
            InvalidStatusError: If the document cannot be decoded
        """
        if not data:
            return None
        if STATUS_CONDITION not in data:
            if data.get(STATUS_FILE_SYSTEM_ID) is not None:
                raise InvalidStatusError(
                    "status.file_system_id is set but status.condition is missing"
                )
            # Status written by something other than this controller (e.g. kopf
            # bookkeeping only); treat as not yet initialised.
            return None

        file_system_id = data.get(STATUS_FILE_SYSTEM_ID)
        if file_system_id is not None and not isinstance(file_system_id, str):
            raise InvalidStatusError("status.file_system_id must be a string")

        return cls(
            file_system_id=file_system_id,
            condition=Condition.from_dict(data.get(STATUS_CONDITION)),
        )


@dataclass(frozen=True)
class EfsRequest:
    """A snapshot of an EfsRequest object as read from the cluster."""

    namespace: str
    name: str
    spec: EfsRequestSpec
    status: EfsRequestStatus | None = None
    uid: str | None = None

    @property
    def key(self) -> str:
        return make_key(self.namespace, self.name)

    @classmethod
    def from_object(cls, obj: dict[str, Any]) -> EfsRequest:
        """Build a snapshot from a raw custom object returned by the API."""
        meta = obj.get("metadata", {})
        return cls(
            namespace=meta.get("namespace", "default"),
            name=meta.get("name", "unknown"),
            uid=meta.get("uid"),
            spec=EfsRequestSpec.from_dict(obj.get("spec")),
            status=EfsRequestStatus.from_dict(obj.get("status")),
        )


def make_key(namespace: str, name: str) -> str:
    """Key identifying a request within the cluster."""
    return f"{namespace}/{name}"


def split_key(key: str) -> tuple[str, str]:
    """Split a ``namespace/name`` key into its parts."""
    namespace, _, name = key.partition("/")
    if not namespace or not name:
        raise ValueError(f"invalid request key {key!r}")
    return namespace, name
