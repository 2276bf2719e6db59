"""Utilities for emitting Kubernetes events."""

from __future__ import annotations

from typing import Any

import kopf

from ..constants import (
    API_GROUP_VERSION,
    EVENT_REASON_CREATION_FAILED,
    EVENT_REASON_FILE_SYSTEM_CREATING,
    EVENT_REASON_RECONCILE_FAILED,
    KIND_EFS_REQUEST,
)


def object_reference(namespace: str, name: str, uid: str | None = None) -> dict[str, Any]:
    """Build the minimal object body kopf needs to attach an event."""
    metadata: dict[str, Any] = {"namespace": namespace, "name": name}
    if uid:
        metadata["uid"] = uid
    return {
        "apiVersion": API_GROUP_VERSION,
        "kind": KIND_EFS_REQUEST,
        "metadata": metadata,
    }


def emit_event(
    body: dict[str, Any],
    reason: str,
    message: str,
    type_: str = "Normal",
) -> None:
    """Emit a Kubernetes event.

    Args:
        body: Object the event refers to
        reason: Event reason
        message: Event message
        type_: Event type (Normal or Warning)
    """
    kopf.event(
        body,
        reason=reason,
        message=message,
        type=type_,
    )


def emit_reconcile_failed(body: dict[str, Any], message: str) -> None:
    """Emit reconcile failed event."""
    emit_event(body, EVENT_REASON_RECONCILE_FAILED, message, type_="Warning")


def emit_file_system_creating(body: dict[str, Any], file_system_id: str) -> None:
    """Emit file system creating event."""
    emit_event(body, EVENT_REASON_FILE_SYSTEM_CREATING, f"File system {file_system_id} is being created")


def emit_creation_failed(body: dict[str, Any], message: str) -> None:
    """Emit file system creation failed event."""
    emit_event(body, EVENT_REASON_CREATION_FAILED, message, type_="Warning")
