"""PostgreSQL connector exposed to the SchemaFX host framework."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Mapping, Protocol, Sequence, runtime_checkable

from .config import ConnectorSettings
from .credentials import CredentialPayload
from .diff import diff_tables
from .gateway import AsyncpgGateway, ExecutionGateway
from .models import Column, Row, TableData, TableDefinition, TableEntry
from .statements import (
    LIST_TABLES,
    InvalidTableError,
    Statement,
    alter_table,
    create_table,
    delete_rows,
    describe_table,
    drop_table,
    insert_rows,
    physical_name,
    rename_table,
    select_all,
    update_rows,
)
from .typemap import from_native_type

LOG = logging.getLogger(__name__)

Payload = CredentialPayload | Mapping[str, Any]

AUTH_TYPE = "Basic"
AUTH_PROPS: Mapping[str, str] = {
    "host": "Text",
    "port": "Number",
    "user": "Text",
    "password": "Password",
    "database": "Text",
    "certificate": "Password",
}


@runtime_checkable
class Connector(Protocol):
    """Capability surface the host framework calls on every connector."""

    name: str
    auth_type: str
    auth_props: Mapping[str, str]

    async def read_tables(self, connection_path: Sequence[str], payload: Payload) -> list[TableEntry]: ...

    async def read_table(self, connection_path: Sequence[str], payload: Payload) -> TableDefinition: ...

    async def create_table(self, table: TableDefinition, payload: Payload) -> TableDefinition: ...

    async def update_table(
        self, old_table: TableDefinition, new_table: TableDefinition, payload: Payload
    ) -> TableDefinition: ...

    async def delete_table(self, table: TableDefinition, payload: Payload) -> TableDefinition: ...

    async def read_data(self, tables: Sequence[TableDefinition], payload: Payload) -> list[TableData]: ...

    async def create_data(self, table: TableDefinition, rows: Sequence[Row], payload: Payload) -> list[Row]: ...

    async def update_data(self, table: TableDefinition, rows: Sequence[Row], payload: Payload) -> list[Row]: ...

    async def delete_data(self, table: TableDefinition, rows: Sequence[Row], payload: Payload) -> list[Row]: ...

    async def aclose(self) -> None: ...


class PostgreSQLConnector:
    """Connector backed by PostgreSQL through an execution gateway."""

    auth_type = AUTH_TYPE
    auth_props = AUTH_PROPS

    def __init__(
        self,
        name: str | None = None,
        *,
        gateway: ExecutionGateway | None = None,
        settings: ConnectorSettings | None = None,
    ) -> None:
        self._settings = settings or ConnectorSettings()
        self.name = name or self._settings.name
        self._gateway = gateway or AsyncpgGateway(self._settings.gateway)

    async def read_tables(self, connection_path: Sequence[str], payload: Payload) -> list[TableEntry]:
        """List user tables; every entry is final since the namespace is flat."""

        rows = await self._run(payload, LIST_TABLES)
        return [
            TableEntry(name=str(row["tablename"]), connection_path=(str(row["tablename"]),), final=True)
            for row in rows
        ]

    async def read_table(self, connection_path: Sequence[str], payload: Payload) -> TableDefinition:
        """Read a table definition from the catalog."""

        if not connection_path:
            raise InvalidTableError("Cannot read a table from an empty connection path.")
        credentials = CredentialPayload.from_payload(payload)
        table_name = connection_path[0]
        rows = await self._run(credentials, describe_table(table_name))
        columns = tuple(
            Column(
                name=str(row["column_name"]),
                type=from_native_type(str(row["data_type"])),
                key=bool(row["is_primary_key"]),
            )
            for row in rows
        )
        return TableDefinition(
            name=table_name,
            connection_path=tuple(connection_path),
            columns=columns,
            connector=self.name,
            connection="",
            connection_payload=(
                credentials.model_dump(exclude_none=True)
                if isinstance(payload, CredentialPayload)
                else dict(payload)
            ),
            connection_time_zone="",
        )

    async def create_table(self, table: TableDefinition, payload: Payload) -> TableDefinition:
        await self._run(payload, create_table(table))
        return table

    async def update_table(
        self, old_table: TableDefinition, new_table: TableDefinition, payload: Payload
    ) -> TableDefinition:
        """Apply the column diff in one ALTER, then rename the table if needed."""

        diff = diff_tables(old_table, new_table)
        credentials = CredentialPayload.from_payload(payload)
        statement = alter_table(physical_name(old_table), diff.alterations)
        LOG.debug(
            "Updating table",
            extra={
                "table": physical_name(old_table),
                "alterations": len(diff.alterations),
                "rename": diff.rename is not None,
            },
        )
        if statement is not None:
            await self._run(credentials, statement)
        if diff.rename is not None:
            await self._run(credentials, rename_table(diff.rename))
        return new_table

    async def delete_table(self, table: TableDefinition, payload: Payload) -> TableDefinition:
        await self._run(payload, drop_table(table))
        return table

    async def read_data(self, tables: Sequence[TableDefinition], payload: Payload) -> list[TableData]:
        """Read every table concurrently; results follow the order of ``tables``."""

        credentials = CredentialPayload.from_payload(payload)
        statements = [select_all(table) for table in tables]
        results = await asyncio.gather(*(self._run(credentials, statement) for statement in statements))
        return [TableData(table=table, rows=rows) for table, rows in zip(tables, results)]

    async def create_data(self, table: TableDefinition, rows: Sequence[Row], payload: Payload) -> list[Row]:
        if not rows:
            return []
        await self._run(payload, insert_rows(table, rows))
        return list(rows)

    async def update_data(self, table: TableDefinition, rows: Sequence[Row], payload: Payload) -> list[Row]:
        if not rows:
            return []
        await self._run(payload, update_rows(table, rows))
        return list(rows)

    async def delete_data(self, table: TableDefinition, rows: Sequence[Row], payload: Payload) -> list[Row]:
        if not rows:
            return []
        await self._run(payload, delete_rows(table, rows))
        return list(rows)

    async def aclose(self) -> None:
        """Release pooled connections held by the gateway."""

        await self._gateway.close()

    async def _run(self, payload: Payload, statement: Statement) -> list[dict[str, Any]]:
        credentials = CredentialPayload.from_payload(payload)
        return await self._gateway.execute(credentials, statement.text, statement.args)


__all__ = ["AUTH_PROPS", "AUTH_TYPE", "Connector", "Payload", "PostgreSQLConnector"]
