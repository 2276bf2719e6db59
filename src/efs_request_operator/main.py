"""Main entry point for the EFS Request Operator."""

from __future__ import annotations

import asyncio
from typing import Any

import kopf

from . import health
from . import logging as structured_logging
from .config import OperatorConfig
from .handlers import efs_request  # noqa: F401


@kopf.on.startup()
def configure(settings: kopf.OperatorSettings, memo: kopf.Memo, **_: Any) -> None:
    """Configure the operator."""
    # Set up structured JSON logging
    structured_logging.setup_structured_logging()

    settings.posting.level = 0
    settings.networking.request_timeout = 30.0
    settings.execution.max_workers = 4

    # Start metrics HTTP server with health check endpoints
    config = OperatorConfig.from_env()
    memo.metrics_server = health.start_metrics_server(
        config.metrics_port,
        ready_check=lambda: bool(getattr(memo, "driver", None) and memo.driver.running),
    )


@kopf.on.cleanup()
async def shutdown_metrics_server(memo: kopf.Memo, **_: Any) -> None:
    """Stop the metrics HTTP server."""
    server = getattr(memo, "metrics_server", None)
    if server is not None:
        await asyncio.to_thread(server.shutdown)


def main() -> None:
    """Run the operator against the configured namespace or the whole cluster."""
    config = OperatorConfig.from_env()
    kopf.run(
        standalone=True,
        clusterwide=config.clusterwide,
        namespaces=[config.watch_namespace] if config.watch_namespace else (),
    )


if __name__ == "__main__":
    main()
