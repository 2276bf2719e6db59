"""Scheduling loop that drives EfsRequest objects through reconciliation.

The driver is the only component that writes to the object store. It keeps at
most one reconciliation in flight per request key, reads the object fresh at
the start of every pass, patches the status subresource only when the
candidate status differs from the stored one, and schedules the next pass
after either the reconciler's delay or the error backoff delay.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass
from enum import Enum
from typing import Any

from . import metrics
from .constants import DEFAULT_ERROR_REQUEUE_AFTER_SECONDS, KIND_EFS_REQUEST
from .handlers.base import BaseHandler
from .models import EfsRequest, EfsRequestStatus, split_key
from .reconciler import Action, Reconciler
from .store import RequestStore
from .utils.errors import sanitize_exception
from .utils.events import (
    emit_creation_failed,
    emit_file_system_creating,
    emit_reconcile_failed,
    object_reference,
)


class KeyState(str, Enum):
    """Scheduling state of a single request key."""

    IDLE = "Idle"
    PROCESSING = "Processing"
    ERROR_BACKOFF = "ErrorBackoff"


@dataclass(frozen=True)
class ReconcileOutcome:
    """Result of one driver pass over a request key.

    ``requeue_after`` is None when the object no longer exists and the key
    has been forgotten.
    """

    key: str
    requeue_after: float | None
    status: EfsRequestStatus | None = None
    patched: bool = False
    error: Exception | None = None


class Driver(BaseHandler):
    """Per-key reconciliation scheduler for EfsRequest objects."""

    def __init__(
        self,
        store: RequestStore,
        reconciler: Reconciler,
        error_requeue_after: float = DEFAULT_ERROR_REQUEUE_AFTER_SECONDS,
        max_concurrent_reconciles: int = 4,
    ) -> None:
        super().__init__(KIND_EFS_REQUEST)
        self.store = store
        self.reconciler = reconciler
        self.error_requeue_after = error_requeue_after

        self._semaphore = asyncio.Semaphore(max_concurrent_reconciles)
        self._locks: dict[str, asyncio.Lock] = {}
        self._states: dict[str, KeyState] = {}
        self._workers: dict[str, asyncio.Task[None]] = {}
        self._timers: dict[str, asyncio.TimerHandle] = {}
        self._dirty: set[str] = set()
        self._forgotten: set[str] = set()
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def state(self, key: str) -> KeyState:
        return self._states.get(key, KeyState.IDLE)

    def tracked_keys(self) -> set[str]:
        """Keys with a worker running or a pass scheduled."""
        return set(self._workers) | set(self._timers)

    def start(self) -> None:
        self._running = True

    async def stop(self) -> None:
        """Cancel scheduled passes and wait for in-flight ones to finish."""
        self._running = False
        for handle in self._timers.values():
            handle.cancel()
        self._timers.clear()
        workers = list(self._workers.values())
        for task in workers:
            task.cancel()
        if workers:
            await asyncio.gather(*workers, return_exceptions=True)
        self._workers.clear()
        self._dirty.clear()
        metrics.tracked_requests.set(0)

    def enqueue(self, key: str) -> None:
        """Request a reconciliation pass for ``key`` as soon as possible.

        Notifications for a key that is already being processed collapse into
        one follow-up pass.
        """
        if not self._running:
            return

        self._forgotten.discard(key)
        handle = self._timers.pop(key, None)
        if handle is not None:
            handle.cancel()

        if key in self._workers:
            self._dirty.add(key)
            return

        self._workers[key] = asyncio.create_task(self._work(key), name=f"reconcile:{key}")
        metrics.tracked_requests.set(len(self.tracked_keys()))

    def forget(self, key: str) -> None:
        """Stop scheduling ``key``; an in-flight pass completes but is not requeued."""
        if key in self._workers:
            self._forgotten.add(key)
        self._dirty.discard(key)
        handle = self._timers.pop(key, None)
        if handle is not None:
            handle.cancel()
        lock = self._locks.get(key)
        if lock is not None and not lock.locked():
            del self._locks[key]
        self._states.pop(key, None)
        metrics.tracked_requests.set(len(self.tracked_keys()))

    def _schedule(self, key: str, delay: float) -> None:
        loop = asyncio.get_running_loop()
        self._timers[key] = loop.call_later(delay, self._fire, key)

    def _fire(self, key: str) -> None:
        self._timers.pop(key, None)
        self.enqueue(key)

    async def _work(self, key: str) -> None:
        outcome: ReconcileOutcome | None = None
        try:
            while True:
                self._dirty.discard(key)
                async with self._semaphore:
                    outcome = await self.reconcile_key(key)
                if key not in self._dirty or not self._running:
                    break
        finally:
            self._workers.pop(key, None)

        if key in self._forgotten:
            self._forgotten.discard(key)
            self._states.pop(key, None)
            self._locks.pop(key, None)
        elif self._running and outcome is not None and outcome.requeue_after is not None:
            self._schedule(key, outcome.requeue_after)
        metrics.tracked_requests.set(len(self.tracked_keys()))

    def _lock_for(self, key: str) -> asyncio.Lock:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        return lock

    async def reconcile_key(self, key: str) -> ReconcileOutcome:
        """Run one full reconciliation pass for ``key``.

        Processing errors (store failures, invalid objects) are logged and
        answered with the error backoff delay; they are never raised.
        """
        namespace, name = split_key(key)
        meta: dict[str, Any] = {"namespace": namespace, "name": name}

        async with self._lock_for(key):
            self._states[key] = KeyState.PROCESSING
            try:
                outcome = await self.reconcile_with_metrics(
                    meta, lambda: self._reconcile(key, namespace, name, meta)
                )
            except Exception as e:
                self._states[key] = KeyState.ERROR_BACKOFF
                emit_reconcile_failed(
                    object_reference(namespace, name, meta.get("uid")),
                    f"Reconciliation failed: {sanitize_exception(e)}",
                )
                return ReconcileOutcome(key=key, requeue_after=self.error_requeue_after, error=e)

            if outcome.requeue_after is not None:
                self._states[key] = KeyState.IDLE
                return outcome

        # The object is gone; drop its per-key state once the lock is released.
        self._states.pop(key, None)
        self._locks.pop(key, None)
        return outcome

    async def _reconcile(
        self,
        key: str,
        namespace: str,
        name: str,
        meta: dict[str, Any],
    ) -> ReconcileOutcome:
        obj = await asyncio.to_thread(self.store.get, namespace, name)
        if obj is None:
            self.log_info(meta, "EfsRequest no longer exists, forgetting it", reason="NotFound")
            self.forget(key)
            return ReconcileOutcome(key=key, requeue_after=None)

        meta["uid"] = obj.get("metadata", {}).get("uid", "unknown")
        request = EfsRequest.from_object(obj)
        current = request.status

        result = await self.reconciler.reconcile(request)

        if result.status == current:
            metrics.status_patch_total.labels(result="skipped").inc()
            self.log_info(meta, "No status change", reason="Unchanged", phase=result.status.phase.value)
            return ReconcileOutcome(key=key, requeue_after=result.requeue_after, status=result.status)

        await asyncio.to_thread(self.store.patch_status, namespace, name, result.status.to_patch())
        metrics.status_patch_total.labels(result="patched").inc()

        from_phase = current.phase.value if current is not None else "None"
        to_phase = result.status.phase.value
        metrics.phase_transitions_total.labels(from_phase=from_phase, to_phase=to_phase).inc()
        self.log_info(
            meta,
            f"Status patched from {from_phase} to {to_phase}",
            event="status",
            reason="StatusPatched",
            file_system_id=result.status.file_system_id,
        )

        if result.action is Action.CREATE_FILE_SYSTEM:
            body = object_reference(namespace, name, meta["uid"])
            if result.failure is not None:
                emit_creation_failed(body, f"File system creation failed: {result.status.condition.reason}")
            elif result.status.file_system_id:
                emit_file_system_creating(body, result.status.file_system_id)

        return ReconcileOutcome(
            key=key,
            requeue_after=result.requeue_after,
            status=result.status,
            patched=True,
        )
