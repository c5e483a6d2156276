"""Shared dataclasses describing tables, columns, rows, and alterations."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any, Mapping, Sequence

Row = Mapping[str, Any]


class ColumnType(StrEnum):
    """Store-agnostic column types understood by the framework."""

    STRING = "string"
    NUMBER = "number"
    DATE = "date"
    DATETIME = "datetime"


@dataclass(frozen=True, slots=True)
class Column:
    """Single column of a table definition."""

    name: str
    type: str
    key: bool = False


@dataclass(frozen=True, slots=True)
class TableDefinition:
    """Framework-level description of a table.

    Only ``connection_path[0]`` names the physical table; ``name`` is a label
    for display and may drift from it. The connection fields are carried
    through untouched.
    """

    name: str
    connection_path: tuple[str, ...]
    columns: tuple[Column, ...] = ()
    connector: str = ""
    connection: str = ""
    connection_payload: Mapping[str, Any] = field(default_factory=dict)
    connection_time_zone: str = ""


@dataclass(frozen=True, slots=True)
class TableEntry:
    """Listing entry returned while browsing tables."""

    name: str
    connection_path: tuple[str, ...]
    final: bool = True


@dataclass(frozen=True, slots=True)
class TableData:
    """Rows read from one table."""

    table: TableDefinition
    rows: Sequence[dict[str, Any]]


@dataclass(frozen=True, slots=True)
class AddColumn:
    name: str
    type: str


@dataclass(frozen=True, slots=True)
class DropColumn:
    name: str


@dataclass(frozen=True, slots=True)
class RetypeColumn:
    name: str
    new_type: str


@dataclass(frozen=True, slots=True)
class RenameColumn:
    old_name: str
    new_name: str


@dataclass(frozen=True, slots=True)
class RenameTable:
    """Physical table rename, always applied after column alterations."""

    old_name: str
    new_name: str


Alteration = AddColumn | DropColumn | RetypeColumn | RenameColumn


__all__ = [
    "AddColumn",
    "Alteration",
    "Column",
    "ColumnType",
    "DropColumn",
    "RenameColumn",
    "RenameTable",
    "RetypeColumn",
    "Row",
    "TableData",
    "TableDefinition",
    "TableEntry",
]
