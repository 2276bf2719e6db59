"""Builder for EFS provider instances."""

from __future__ import annotations

from ..config import OperatorConfig
from ..services.aws.client import EfsProvider


def create_provider_from_config(config: OperatorConfig) -> EfsProvider:
    """Create an EFS provider instance from operator configuration.

    Credentials are resolved through the boto3 default chain (environment,
    shared config, web identity, instance profile).

    Args:
        config: Operator configuration

    Returns:
        Configured EFS provider instance
    """
    return EfsProvider(
        region=config.region,
        endpoint_url=config.endpoint_url,
        performance_mode=config.performance_mode,
        encrypted=config.encrypted,
    )
