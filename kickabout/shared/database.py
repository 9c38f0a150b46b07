"""PostgreSQL connection pool management.

Pooler modes:
  - Session (direct connection or session pooler): prepared statements allowed
  - Transaction pooler (PgBouncer, port 6543): no prepared statements, no session state
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any

import asyncpg

logger = logging.getLogger(__name__)


@dataclass
class PoolConfig:
    """Database pool configuration."""

    min_size: int = 1
    max_size: int = 10
    timeout: float = 5.0
    command_timeout: float = 15.0
    max_inactive_connection_lifetime: float = 300.0
    max_retries: int = 3
    retry_delay: float = 2.0
    # asyncpg ssl mode: "require", "prefer", "disable", ...
    ssl: str = "require"


class DatabaseManager:
    """Owns the asyncpg pool for one process.

    Detects the pooler mode from the URL, retries the initial connection with
    exponential backoff and exposes a cheap health probe.
    """

    def __init__(self, database_url: str, config: PoolConfig | None = None):
        self.database_url = database_url
        self.config = config or PoolConfig()
        self._pool: asyncpg.Pool | None = None
        self._pooler_mode: str = "transaction" if ":6543" in database_url else "session"

    def _ssl_kwarg(self) -> str | bool:
        return False if self.config.ssl == "disable" else self.config.ssl

    def _session_pool_kwargs(self) -> dict[str, Any]:
        cfg = self.config
        return {
            "dsn": self.database_url,
            "min_size": cfg.min_size,
            "max_size": cfg.max_size,
            "timeout": cfg.timeout,
            "command_timeout": cfg.command_timeout,
            "ssl": self._ssl_kwarg(),
            "statement_cache_size": 100,
            "max_inactive_connection_lifetime": cfg.max_inactive_connection_lifetime,
        }

    def _transaction_pool_kwargs(self) -> dict[str, Any]:
        """PgBouncer transaction mode: no statement cache, no idle connections."""
        cfg = self.config
        return {
            "dsn": self.database_url,
            "min_size": 0,
            "max_size": cfg.max_size,
            "timeout": cfg.timeout,
            "command_timeout": cfg.command_timeout,
            "ssl": self._ssl_kwarg(),
            "statement_cache_size": 0,
            "max_inactive_connection_lifetime": 0,
        }

    async def connect(self) -> None:
        """Create the pool, retrying with backoff. Raises after the last attempt."""
        if self._pool is not None:
            logger.warning("Database pool already initialized")
            return

        builders = {
            "session": self._session_pool_kwargs,
            "transaction": self._transaction_pool_kwargs,
        }
        pool_kwargs = builders[self._pooler_mode]()
        logger.info(f"Connecting with {self._pooler_mode} pooler mode")

        cfg = self.config
        for attempt in range(1, cfg.max_retries + 1):
            try:
                self._pool = await asyncpg.create_pool(**pool_kwargs)
                async with self._pool.acquire() as conn:
                    await conn.fetchval("SELECT 1")
                logger.info(
                    f"Database pool ready (mode={self._pooler_mode}, "
                    f"size={pool_kwargs['min_size']}-{cfg.max_size})"
                )
                return
            except Exception as e:
                await self._discard_pool()
                if attempt >= cfg.max_retries:
                    logger.exception(
                        f"Database connection failed after {cfg.max_retries} attempts: "
                        f"{type(e).__name__}: {e}"
                    )
                    raise
                delay = cfg.retry_delay * (2 ** (attempt - 1))
                logger.warning(
                    f"Database connection attempt {attempt}/{cfg.max_retries} failed: "
                    f"{type(e).__name__}: {e}, retrying in {delay}s"
                )
                await asyncio.sleep(delay)

    async def _discard_pool(self) -> None:
        if self._pool is None:
            return
        pool, self._pool = self._pool, None
        try:
            await pool.close()
        except Exception as e:
            logger.debug(f"Ignoring error while discarding pool: {e}")

    async def disconnect(self) -> None:
        if self._pool is None:
            return
        try:
            await self._pool.close()
            self._pool = None
            logger.info("Database pool closed")
        except Exception as e:
            logger.exception(f"Error closing database pool: {e}")

    async def check_health(self) -> bool:
        """Run a trivial query with a short acquire timeout."""
        if self._pool is None:
            return False
        try:
            async with self._pool.acquire(timeout=2.0) as conn:
                await conn.fetchval("SELECT 1")
            return True
        except Exception:
            return False

    @property
    def is_connected(self) -> bool:
        return self._pool is not None

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("Database pool not initialized. Call connect() first.")
        return self._pool
