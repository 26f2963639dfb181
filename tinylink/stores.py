"""Build the configured link store."""

import logging
from typing import Optional

from .config import Config
from .database.base import LinkStore
from .database.memory import InMemoryLinkStore


def build_store(config: Config, logger: Optional[logging.Logger] = None) -> LinkStore:
    """Create the store selected by config.store_backend.

    Driver modules are imported lazily so a memory-only deployment does not
    load asyncpg or redis.

    Raises:
        ValueError: If the redis backend is selected without a redis_url
    """
    logger = logger or logging.getLogger(__name__)

    if config.store_backend == "postgres":
        from .database.postgres import PostgresLinkStore

        logger.info("Using PostgreSQL link store")
        return PostgresLinkStore(
            db_config=config.database_url,
            pool_max_size=config.database_pool_max_size,
            connection_timeout_seconds=config.store_timeout_seconds,
            create_tables=config.database_create_tables,
            logger=logger,
        )

    if config.store_backend == "redis":
        if not config.redis_url:
            raise ValueError("REDIS_URL is required when STORE_BACKEND=redis")
        from .database.redis_store import RedisLinkStore

        logger.info(f"Using Redis link store at {config.redis_url}")
        return RedisLinkStore(
            redis_url=config.redis_url,
            key_prefix=config.redis_key_prefix,
            socket_timeout_seconds=config.store_timeout_seconds,
            logger=logger,
        )

    logger.info("Using in-memory link store")
    return InMemoryLinkStore(logger=logger)
