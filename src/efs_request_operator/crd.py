"""CustomResourceDefinition for EfsRequest and its registration at startup."""

from __future__ import annotations

import logging
from typing import Any

from kubernetes import client
from kubernetes.client.exceptions import ApiException

from .constants import (
    API_GROUP,
    API_VERSION,
    CRD_NAME,
    KIND_EFS_REQUEST,
    PLURAL_EFS_REQUESTS,
    SHORTNAME_EFS_REQUEST,
)
from .models import Phase

logger = logging.getLogger(__name__)

PRINTER_COLUMNS = [
    {
        "name": "Efs Name",
        "type": "string",
        "description": "name of efs volume",
        "jsonPath": ".spec.name",
    },
    {
        "name": "FsID",
        "type": "string",
        "description": "file_system_id of efs volume request",
        "jsonPath": ".status.file_system_id",
    },
    {
        "name": "Phase",
        "type": "string",
        "description": "phase of efs volume request",
        "jsonPath": ".status.condition.phase",
    },
    {
        "name": "Reason",
        "type": "string",
        "description": "reason for efs volume phase",
        "jsonPath": ".status.condition.reason",
    },
]


def build_crd() -> dict[str, Any]:
    """Build the EfsRequest CustomResourceDefinition manifest."""
    schema = {
        "type": "object",
        "properties": {
            "spec": {
                "type": "object",
                "required": ["name", "owner"],
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "owner": {"type": "string", "minLength": 1},
                },
            },
            "status": {
                "type": "object",
                "properties": {
                    "file_system_id": {"type": "string", "nullable": True},
                    "condition": {
                        "type": "object",
                        "required": ["phase"],
                        "properties": {
                            "phase": {
                                "type": "string",
                                "enum": [phase.value for phase in Phase],
                            },
                            "reason": {"type": "string"},
                        },
                    },
                },
            },
        },
    }

    return {
        "apiVersion": "apiextensions.k8s.io/v1",
        "kind": "CustomResourceDefinition",
        "metadata": {"name": CRD_NAME},
        "spec": {
            "group": API_GROUP,
            "scope": "Namespaced",
            "names": {
                "kind": KIND_EFS_REQUEST,
                "plural": PLURAL_EFS_REQUESTS,
                "singular": KIND_EFS_REQUEST.lower(),
                "shortNames": [SHORTNAME_EFS_REQUEST],
            },
            "versions": [
                {
                    "name": API_VERSION,
                    "served": True,
                    "storage": True,
                    "schema": {"openAPIV3Schema": schema},
                    "subresources": {"status": {}},
                    "additionalPrinterColumns": PRINTER_COLUMNS,
                }
            ],
        },
    }


def register_crd(api: client.ApiextensionsV1Api) -> bool:
    """Create the EfsRequest CRD in the cluster.

    Args:
        api: ApiextensionsV1Api instance

    Returns:
        True if the CRD was created, False if it already existed

    Raises:
        ApiException: For any failure other than 409 Conflict
    """
    try:
        api.create_custom_resource_definition(body=build_crd())
    except ApiException as e:
        if e.status == 409:
            logger.info(f"CRD {CRD_NAME} already exists")
            return False
        raise
    logger.info(f"Created CRD {CRD_NAME} in cluster")
    return True
