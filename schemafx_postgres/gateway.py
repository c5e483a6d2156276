"""Execution gateway running statements through cached asyncpg pools."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Protocol, Sequence

import asyncpg

from .config import GatewaySettings
from .credentials import CredentialPayload, PoolIdentity

LOG = logging.getLogger(__name__)


class ExecutionFailedError(RuntimeError):
    """Raised when the store rejects a statement or cannot be reached."""


class ExecutionGateway(Protocol):
    """Interface implemented by statement executors."""

    async def execute(
        self,
        credentials: CredentialPayload,
        text: str,
        args: Sequence[Any] = (),
    ) -> list[dict[str, Any]]: ...

    async def close(self) -> None: ...


class AsyncpgGateway:
    """Runs statements against PostgreSQL, keeping one pool per credential set."""

    def __init__(self, settings: GatewaySettings | None = None) -> None:
        self._settings = settings or GatewaySettings()
        self._pools: dict[PoolIdentity, asyncpg.Pool] = {}
        self._lock = asyncio.Lock()

    @property
    def pool_count(self) -> int:
        return len(self._pools)

    async def execute(
        self,
        credentials: CredentialPayload,
        text: str,
        args: Sequence[Any] = (),
    ) -> list[dict[str, Any]]:
        pool = await self._pool_for(credentials)
        LOG.debug("Executing statement", extra={"statement": text, "arg_count": len(args)})
        try:
            async with pool.acquire() as conn:
                records = await conn.fetch(text, *args)
        except Exception as exc:
            LOG.exception("Database query failed", extra={"host": credentials.host, "database": credentials.database})
            raise ExecutionFailedError("An error occurred while executing the database query.") from exc
        return [dict(record) for record in records]

    async def close(self) -> None:
        """Close every cached pool."""

        async with self._lock:
            pools = list(self._pools.values())
            self._pools.clear()
        for pool in pools:
            try:
                await pool.close()
            except Exception:  # pragma: no cover - best effort cleanup
                LOG.exception("Failed to close connection pool")

    async def _pool_for(self, credentials: CredentialPayload) -> asyncpg.Pool:
        identity = credentials.identity()
        pool = self._pools.get(identity)
        if pool is not None:
            return pool
        async with self._lock:
            pool = self._pools.get(identity)
            if pool is None:
                pool = await self._create_pool(credentials)
                self._pools[identity] = pool
        return pool

    async def _create_pool(self, credentials: CredentialPayload) -> asyncpg.Pool:
        kwargs: dict[str, object] = {
            "host": credentials.host or "localhost",
            "port": credentials.port_number,
            "min_size": self._settings.min_pool_size,
            "max_size": self._settings.max_pool_size,
            "timeout": self._settings.connect_timeout,
        }
        if credentials.user:
            kwargs["user"] = credentials.user
        if credentials.password:
            kwargs["password"] = credentials.password
        if credentials.database:
            kwargs["database"] = credentials.database
        LOG.debug("Creating connection pool", extra={"host": kwargs["host"], "port": kwargs["port"]})
        try:
            context = credentials.ssl_context()
            if context is not None:
                kwargs["ssl"] = context
            return await asyncpg.create_pool(**kwargs)
        except Exception as exc:
            LOG.exception("Failed to create connection pool", extra={"host": kwargs["host"]})
            raise ExecutionFailedError("An error occurred while connecting to the database.") from exc


__all__ = ["AsyncpgGateway", "ExecutionFailedError", "ExecutionGateway"]
