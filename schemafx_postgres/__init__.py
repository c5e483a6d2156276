"""PostgreSQL connector for the SchemaFX schema-management framework."""

from __future__ import annotations

__version__ = "0.1.0"

from .config import ConnectorSettings, CredentialProfile, GatewaySettings, load_settings
from .connector import AUTH_PROPS, AUTH_TYPE, Connector, PostgreSQLConnector
from .credentials import CredentialPayload, PoolIdentity
from .diff import SchemaDiff, diff_tables
from .gateway import AsyncpgGateway, ExecutionFailedError, ExecutionGateway
from .models import (
    AddColumn,
    Alteration,
    Column,
    ColumnType,
    DropColumn,
    RenameColumn,
    RenameTable,
    RetypeColumn,
    Row,
    TableData,
    TableDefinition,
    TableEntry,
)
from .registry import ConnectorRegistry, ConnectorRegistryError, UnknownConnectorError
from .statements import InvalidTableError, MissingKeyColumnError, Statement
from .typemap import UnsupportedTypeError, from_native_type, to_native_type

__all__ = [
    "AUTH_PROPS",
    "AUTH_TYPE",
    "AddColumn",
    "Alteration",
    "AsyncpgGateway",
    "Column",
    "ColumnType",
    "Connector",
    "ConnectorRegistry",
    "ConnectorRegistryError",
    "ConnectorSettings",
    "CredentialPayload",
    "CredentialProfile",
    "DropColumn",
    "ExecutionFailedError",
    "ExecutionGateway",
    "GatewaySettings",
    "InvalidTableError",
    "MissingKeyColumnError",
    "PoolIdentity",
    "PostgreSQLConnector",
    "RenameColumn",
    "RenameTable",
    "RetypeColumn",
    "Row",
    "SchemaDiff",
    "Statement",
    "TableData",
    "TableDefinition",
    "TableEntry",
    "UnknownConnectorError",
    "UnsupportedTypeError",
    "diff_tables",
    "from_native_type",
    "load_settings",
    "to_native_type",
]
