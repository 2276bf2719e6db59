"""Access to EfsRequest objects stored in the Kubernetes API."""

from __future__ import annotations

import time
from typing import Any, Protocol

from kubernetes import client
from kubernetes.client.exceptions import ApiException

from . import metrics
from .constants import API_GROUP, API_VERSION, PLURAL_EFS_REQUESTS


class RequestStore(Protocol):
    """Protocol defining the object store operations used by the driver."""

    def get(self, namespace: str, name: str) -> dict[str, Any] | None:
        """Read the current object, including status, or None if it is gone."""
        ...

    def patch_status(self, namespace: str, name: str, status: dict[str, Any]) -> dict[str, Any]:
        """Merge ``status`` into the status subresource of the object."""
        ...


def get_k8s_client() -> client.CustomObjectsApi:
    """Get Kubernetes CustomObjectsApi client.

    Returns:
        CustomObjectsApi instance
    """
    from kubernetes import config

    try:
        config.load_incluster_config()
    except config.ConfigException:
        config.load_kube_config()

    return client.CustomObjectsApi()


class KubernetesRequestStore:
    """RequestStore backed by the Kubernetes custom objects API."""

    def __init__(self, api: client.CustomObjectsApi) -> None:
        self.api = api

    def get(self, namespace: str, name: str) -> dict[str, Any] | None:
        """Read an EfsRequest.

        Raises:
            ApiException: For any API error other than 404
        """
        start_time = time.time()
        try:
            obj = self.api.get_namespaced_custom_object(
                group=API_GROUP,
                version=API_VERSION,
                namespace=namespace,
                plural=PLURAL_EFS_REQUESTS,
                name=name,
            )
            metrics.api_call_total.labels(api_type="k8s", operation="get_efs_request", result="success").inc()
            return obj
        except ApiException as e:
            if e.status == 404:
                metrics.api_call_total.labels(api_type="k8s", operation="get_efs_request", result="not_found").inc()
                return None
            metrics.api_call_total.labels(api_type="k8s", operation="get_efs_request", result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation="get_efs_request").observe(duration)

    def patch_status(self, namespace: str, name: str, status: dict[str, Any]) -> dict[str, Any]:
        """Merge-patch the status subresource of an EfsRequest.

        Only ``.status`` is sent; the spec is never touched.

        Raises:
            ApiException: If the patch is rejected
        """
        start_time = time.time()
        try:
            obj = self.api.patch_namespaced_custom_object_status(
                group=API_GROUP,
                version=API_VERSION,
                namespace=namespace,
                plural=PLURAL_EFS_REQUESTS,
                name=name,
                body={"status": status},
                _content_type="application/merge-patch+json",
            )
            metrics.api_call_total.labels(api_type="k8s", operation="patch_efs_request_status", result="success").inc()
            return obj
        except ApiException:
            metrics.api_call_total.labels(api_type="k8s", operation="patch_efs_request_status", result="error").inc()
            raise
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="k8s", operation="patch_efs_request_status").observe(duration)
