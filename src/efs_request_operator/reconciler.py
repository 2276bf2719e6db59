"""Reconciliation state machine for EfsRequest objects.

Each reconciliation looks at the current status of a request and performs at
most one externally visible step:

- no status yet: synthesize the default ``Initialised`` status
- ``Initialised``: ask the provider to create the file system
- ``CreatingFileSystem``, ``Success``, ``Failed``: hold, status unchanged
- ``CreatingMountTargets``: reset to the default status

A crash between the provider call and the status patch leaves the phase at
``Initialised`` and the creation is attempted again on the next pass. The
request uid is sent as the creation token so the provider can recognise the
repeat.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from .constants import DEFAULT_REQUEUE_AFTER_SECONDS
from .models import Condition, EfsRequest, EfsRequestStatus, Phase
from .services.efs.base import CreateResult, FileSystemCreated, FileSystemProvider, ProviderFailure
from .utils.errors import sanitize_error_message

logger = logging.getLogger(__name__)


class Action(str, Enum):
    """External action required by a decision."""

    NONE = "none"
    CREATE_FILE_SYSTEM = "create_file_system"


@dataclass(frozen=True)
class Decision:
    """Outcome of the pure decision step.

    For ``Action.NONE`` the status is the candidate to persist. For
    ``Action.CREATE_FILE_SYSTEM`` the candidate depends on the provider answer
    and ``status`` is the current status.
    """

    action: Action
    status: EfsRequestStatus


@dataclass(frozen=True)
class ReconcileResult:
    """Result of one reconciliation of a request."""

    status: EfsRequestStatus
    requeue_after: float
    action: Action = Action.NONE
    failure: ProviderFailure | None = None


def decide(status: EfsRequestStatus | None) -> Decision:
    """Map the current status to the next action and candidate status.

    Only the status drives the table; the request spec is read when the
    action is carried out.
    """
    if status is None:
        return Decision(Action.NONE, EfsRequestStatus.default())

    phase = status.phase
    if phase is Phase.INITIALISED:
        return Decision(Action.CREATE_FILE_SYSTEM, status)
    if phase is Phase.CREATING_MOUNT_TARGETS:
        # Mount target creation is not implemented; start over.
        return Decision(Action.NONE, EfsRequestStatus.default())
    return Decision(Action.NONE, status)


def status_after_create(result: CreateResult) -> EfsRequestStatus:
    """Status recorded once the provider answered a creation request."""
    if isinstance(result, FileSystemCreated):
        return EfsRequestStatus(
            file_system_id=result.file_system_id,
            condition=Condition.of(Phase.CREATING_FILE_SYSTEM),
        )
    return EfsRequestStatus(
        file_system_id=None,
        condition=Condition.failed(sanitize_error_message(result.message)),
    )


class Reconciler:
    """Runs the decision for a request and executes its provider step."""

    def __init__(
        self,
        provider: FileSystemProvider,
        requeue_after: float = DEFAULT_REQUEUE_AFTER_SECONDS,
    ) -> None:
        self.provider = provider
        self.requeue_after = requeue_after

    async def reconcile(self, request: EfsRequest) -> ReconcileResult:
        """Compute the next status of ``request``.

        Provider failures are returned as a ``Failed`` status, never raised.
        """
        decision = decide(request.status)

        if decision.action is Action.NONE:
            if request.status is not None and request.status.phase is Phase.CREATING_MOUNT_TARGETS:
                logger.warning(
                    f"EfsRequest {request.key} is in phase CreatingMountTargets, "
                    "resetting to Initialised"
                )
            return ReconcileResult(status=decision.status, requeue_after=self.requeue_after)

        logger.info(
            f"Creating file system {request.spec.name} for {request.spec.owner} ({request.key})"
        )
        result = await asyncio.to_thread(
            self.provider.create_file_system,
            request.spec.name,
            request.spec.owner,
            request.uid,
        )
        return ReconcileResult(
            status=status_after_create(result),
            requeue_after=self.requeue_after,
            action=decision.action,
            failure=result if isinstance(result, ProviderFailure) else None,
        )
