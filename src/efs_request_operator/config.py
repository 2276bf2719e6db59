"""Operator configuration loaded from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass

from .constants import DEFAULT_ERROR_REQUEUE_AFTER_SECONDS, DEFAULT_REQUEUE_AFTER_SECONDS
from .exceptions import ConfigurationError

DEFAULT_REGION = "us-east-1"
DEFAULT_METRICS_PORT = 8080
DEFAULT_MAX_CONCURRENT_RECONCILES = 4

PERFORMANCE_MODES = ("generalPurpose", "maxIO")


def _get_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _get_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _get_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class OperatorConfig:
    """Runtime configuration of the operator.

    Environment Variables:
        AWS_REGION: Region in which file systems are created (default: us-east-1)
        EFS_ENDPOINT_URL: Optional EFS endpoint override
        EFS_PERFORMANCE_MODE: generalPurpose or maxIO (default: generalPurpose)
        EFS_ENCRYPTED: Request encrypted file systems (default: false)
        REQUEUE_AFTER_SECONDS: Delay before re-evaluating a request (default: 20)
        ERROR_REQUEUE_AFTER_SECONDS: Delay after a processing error (default: 60)
        MAX_CONCURRENT_RECONCILES: Parallel reconciliations across keys (default: 4)
        METRICS_PORT: Port for /metrics, /healthz and /readyz (default: 8080)
        WATCH_NAMESPACE: Restrict watching to one namespace (default: cluster-wide)
    """

    region: str = DEFAULT_REGION
    endpoint_url: str | None = None
    performance_mode: str = "generalPurpose"
    encrypted: bool = False
    requeue_after_seconds: float = DEFAULT_REQUEUE_AFTER_SECONDS
    error_requeue_after_seconds: float = DEFAULT_ERROR_REQUEUE_AFTER_SECONDS
    max_concurrent_reconciles: int = DEFAULT_MAX_CONCURRENT_RECONCILES
    metrics_port: int = DEFAULT_METRICS_PORT
    watch_namespace: str | None = None

    def __post_init__(self) -> None:
        if not self.region:
            raise ConfigurationError("region must not be empty")
        if self.performance_mode not in PERFORMANCE_MODES:
            raise ConfigurationError(
                f"performance mode must be one of {', '.join(PERFORMANCE_MODES)}, "
                f"got {self.performance_mode!r}"
            )
        if self.requeue_after_seconds <= 0:
            raise ConfigurationError("requeue delay must be positive")
        if self.error_requeue_after_seconds <= 0:
            raise ConfigurationError("error requeue delay must be positive")
        if self.max_concurrent_reconciles < 1:
            raise ConfigurationError("max concurrent reconciles must be at least 1")
        if not 0 < self.metrics_port < 65536:
            raise ConfigurationError(f"invalid metrics port {self.metrics_port}")

    @property
    def clusterwide(self) -> bool:
        return self.watch_namespace is None

    @classmethod
    def from_env(cls) -> OperatorConfig:
        """Load configuration from environment variables.

        Raises:
            ConfigurationError: If a variable holds an invalid value
        """
        return cls(
            region=os.getenv("AWS_REGION") or os.getenv("AWS_DEFAULT_REGION") or DEFAULT_REGION,
            endpoint_url=os.getenv("EFS_ENDPOINT_URL") or None,
            performance_mode=os.getenv("EFS_PERFORMANCE_MODE", "generalPurpose"),
            encrypted=_get_bool("EFS_ENCRYPTED", False),
            requeue_after_seconds=_get_float(
                "REQUEUE_AFTER_SECONDS", DEFAULT_REQUEUE_AFTER_SECONDS
            ),
            error_requeue_after_seconds=_get_float(
                "ERROR_REQUEUE_AFTER_SECONDS", DEFAULT_ERROR_REQUEUE_AFTER_SECONDS
            ),
            max_concurrent_reconciles=_get_int(
                "MAX_CONCURRENT_RECONCILES", DEFAULT_MAX_CONCURRENT_RECONCILES
            ),
            metrics_port=_get_int("METRICS_PORT", DEFAULT_METRICS_PORT),
            watch_namespace=os.getenv("WATCH_NAMESPACE") or None,
        )
