"""AWS EFS client implementation."""

from __future__ import annotations

import logging
import time
from typing import Any

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from ... import metrics
from ...constants import TAG_NAME, TAG_OWNER
from ..efs.base import CreateResult, FailureKind, FileSystemCreated, ProviderFailure

logger = logging.getLogger(__name__)

ALREADY_EXISTS_CODE = "FileSystemAlreadyExists"


def format_client_error(error: ClientError) -> tuple[str, str | None]:
    """Flatten a botocore ClientError into a message and error code.

    Service errors carry a parsed ``Error`` member. When the body could not be
    parsed (unknown or opaque error payloads) the message falls back to the
    error code and then to the raw exception text.
    """
    err = error.response.get("Error", {}) if error.response else {}
    code = err.get("Code") or None
    message = err.get("Message") or err.get("message")
    if message:
        return str(message), code
    if code and code != "Unknown":
        return code, code
    return str(error), code


def format_provider_error(error: Exception) -> ProviderFailure:
    """Translate any provider-side exception into a ProviderFailure."""
    if isinstance(error, ClientError):
        message, code = format_client_error(error)
        return ProviderFailure(kind=FailureKind.SERVICE, detail=message, code=code)
    if isinstance(error, BotoCoreError):
        return ProviderFailure(kind=FailureKind.TRANSPORT, detail=str(error))
    return ProviderFailure(kind=FailureKind.UNKNOWN, detail=str(error) or type(error).__name__)


def _existing_file_system_id(error: ClientError) -> str | None:
    """Return the id reported by a FileSystemAlreadyExists error, if any."""
    response = error.response or {}
    err = response.get("Error", {})
    if err.get("Code") != ALREADY_EXISTS_CODE:
        return None
    return response.get("FileSystemId") or err.get("FileSystemId")


class EfsProvider:
    """AWS EFS provider implementation."""

    def __init__(
        self,
        region: str,
        endpoint_url: str | None = None,
        performance_mode: str = "generalPurpose",
        encrypted: bool = False,
        client: Any = None,
    ) -> None:
        """Initialize AWS EFS provider.

        Args:
            region: AWS region
            endpoint_url: Optional EFS endpoint URL
            performance_mode: EFS performance mode for new file systems
            encrypted: Whether new file systems are encrypted at rest
            client: Optional pre-built boto3 EFS client
        """
        self.region = region
        self.endpoint_url = endpoint_url
        self.performance_mode = performance_mode
        self.encrypted = encrypted

        if client is None:
            # Retries are the reconciliation loop's job, not botocore's.
            config = Config(retries={"max_attempts": 1, "mode": "standard"})
            client = boto3.client(
                "efs",
                region_name=region,
                endpoint_url=endpoint_url,
                config=config,
            )
        self.client = client

    def create_file_system(
        self,
        name: str,
        owner: str,
        creation_token: str | None = None,
    ) -> CreateResult:
        """Request creation of a file system tagged with name and owner.

        Args:
            name: Value of the ``Name`` tag
            owner: Value of the ``Owner`` tag
            creation_token: Optional idempotency token sent as ``CreationToken``

        Returns:
            FileSystemCreated with the new id, or ProviderFailure
        """
        params: dict[str, Any] = {
            "PerformanceMode": self.performance_mode,
            "Encrypted": self.encrypted,
            "Tags": [
                {"Key": TAG_NAME, "Value": name},
                {"Key": TAG_OWNER, "Value": owner},
            ],
        }
        if creation_token:
            params["CreationToken"] = creation_token

        logger.info(f"Creating EFS file system {name} for {owner}")

        start_time = time.time()
        try:
            response = self.client.create_file_system(**params)
            file_system_id = response["FileSystemId"]
        except ClientError as e:
            existing_id = _existing_file_system_id(e)
            if existing_id:
                logger.info(f"EFS file system for {name} already exists as {existing_id}")
                metrics.api_call_total.labels(api_type="efs", operation="create_file_system", result="exists").inc()
                return FileSystemCreated(file_system_id=existing_id)
            failure = format_provider_error(e)
            logger.error(f"Failed to create EFS file system {name}: {failure.message}")
            metrics.api_call_total.labels(api_type="efs", operation="create_file_system", result="error").inc()
            return failure
        except Exception as e:
            failure = format_provider_error(e)
            logger.error(f"Failed to create EFS file system {name}: {failure.message}")
            metrics.api_call_total.labels(api_type="efs", operation="create_file_system", result="error").inc()
            return failure
        finally:
            duration = time.time() - start_time
            metrics.api_call_duration_seconds.labels(api_type="efs", operation="create_file_system").observe(duration)

        metrics.api_call_total.labels(api_type="efs", operation="create_file_system", result="success").inc()
        return FileSystemCreated(file_system_id=file_system_id)

    def test_connectivity(self) -> bool:
        """Test connectivity to the provider."""
        try:
            self.client.describe_file_systems(MaxItems=1)
            return True
        except (BotoCoreError, ClientError) as e:
            logger.warning(f"EFS connectivity test failed: {format_provider_error(e).message}")
            return False
