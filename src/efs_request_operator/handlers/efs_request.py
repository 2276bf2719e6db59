"""Handlers wiring EfsRequest notifications into the driver."""

from __future__ import annotations

import asyncio
from typing import Any

import kopf
from kubernetes import client
from kubernetes.client.exceptions import ApiException

from ..builders.provider import create_provider_from_config
from ..config import OperatorConfig
from ..constants import API_GROUP_VERSION, CRD_NAME, KIND_EFS_REQUEST
from ..crd import register_crd
from ..driver import Driver
from ..models import make_key
from ..reconciler import Reconciler
from ..store import KubernetesRequestStore, get_k8s_client
from ..utils.errors import sanitize_exception


def build_driver(config: OperatorConfig, api: client.CustomObjectsApi) -> Driver:
    """Assemble the driver and its collaborators from configuration."""
    provider = create_provider_from_config(config)
    reconciler = Reconciler(provider, requeue_after=config.requeue_after_seconds)
    return Driver(
        store=KubernetesRequestStore(api),
        reconciler=reconciler,
        error_requeue_after=config.error_requeue_after_seconds,
        max_concurrent_reconciles=config.max_concurrent_reconciles,
    )


@kopf.on.startup()
async def start_driver(memo: kopf.Memo, **kwargs: Any) -> None:
    """Register the CRD and start the reconciliation driver.

    A registration failure other than "already exists" stops the operator.
    """
    config = OperatorConfig.from_env()
    api = get_k8s_client()

    try:
        await asyncio.to_thread(register_crd, client.ApiextensionsV1Api())
    except ApiException as e:
        raise kopf.PermanentError(
            f"Failed to register CRD {CRD_NAME}: {sanitize_exception(e)}"
        ) from e

    driver = build_driver(config, api)
    driver.start()
    memo.driver = driver


@kopf.on.cleanup()
async def stop_driver(memo: kopf.Memo, **kwargs: Any) -> None:
    """Stop the reconciliation driver."""
    driver = getattr(memo, "driver", None)
    if driver is not None:
        await driver.stop()


@kopf.on.event(API_GROUP_VERSION, KIND_EFS_REQUEST)
async def handle_efs_request_event(
    event: dict[str, Any],
    namespace: str,
    name: str,
    memo: kopf.Memo,
    **kwargs: Any,
) -> None:
    """Hand EfsRequest notifications to the driver.

    Every notification other than a deletion requests a fresh pass; the
    driver re-reads the object, so duplicated or reordered events are harmless.
    """
    key = make_key(namespace, name)
    if event.get("type") == "DELETED":
        memo.driver.forget(key)
    else:
        memo.driver.enqueue(key)
