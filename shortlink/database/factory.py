"""Select the link store backend from configuration."""

import logging
from typing import Optional

from ..metrics import MetricsSink
from .base import LinkStoreBase
from .memory import InMemoryLinkStore


def create_store(
    config,
    metrics: Optional[MetricsSink] = None,
    logger: Optional[logging.Logger] = None,
    backend: Optional[str] = None,
) -> LinkStoreBase:
    """Build the store named by ``config.storage_backend`` (or ``backend``).

    Args:
        config: Application configuration
        metrics: Optional metrics sink shared with the rest of the app
        logger: Optional logger
        backend: Override for the configured backend

    Returns:
        Link store instance

    Raises:
        ValueError: If the backend name is unknown
    """
    name = (backend or config.storage_backend).strip().lower()
    timeout_seconds = config.db_timeout_ms / 1000

    if name == "memory":
        return InMemoryLinkStore(timeout_seconds=timeout_seconds, metrics=metrics, logger=logger)

    if name == "postgres":
        # Local import keeps the memory backend usable without a database driver loaded
        from .postgres import PostgresLinkStore

        return PostgresLinkStore(
            database_url=config.database_url,
            require_ssl=config.database_require_ssl,
            pool_min_size=config.db_pool_min_size,
            pool_max_size=config.db_pool_max_size,
            create_tables=config.db_create_tables,
            timeout_seconds=timeout_seconds,
            metrics=metrics,
            logger=logger,
        )

    raise ValueError(f"Unknown storage backend: {name!r}")
