"""Builders turning table operations into parameterized PostgreSQL statements.

Every builder is a pure function returning a :class:`Statement`. Identifiers
always go through :func:`quote_identifier`; row values are only ever bound as
``$n`` parameters, never rendered into the text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Sequence

from sqlglot import exp

from .models import (
    AddColumn,
    Alteration,
    Column,
    DropColumn,
    RenameColumn,
    RenameTable,
    RetypeColumn,
    Row,
    TableDefinition,
)
from .typemap import to_native_type

DIALECT = "postgres"


class InvalidTableError(ValueError):
    """Raised when a table definition has no physical identifier."""


class MissingKeyColumnError(ValueError):
    """Raised when a row operation needs a key column the table lacks."""


@dataclass(frozen=True, slots=True)
class Statement:
    """Statement text plus its positional arguments."""

    text: str
    args: tuple[Any, ...] = ()


LIST_TABLES = Statement(
    "SELECT tablename FROM pg_catalog.pg_tables "
    "WHERE schemaname != 'pg_catalog' AND schemaname != 'information_schema'"
)

_DESCRIBE_TABLE = """
    SELECT
        a.attname AS column_name,
        format_type(a.atttypid, a.atttypmod) AS data_type,
        coalesce(i.indisprimary, false) AS is_primary_key
    FROM pg_attribute a
    JOIN pg_class c ON c.oid = a.attrelid
    LEFT JOIN pg_index i ON i.indrelid = a.attrelid AND a.attnum = any(i.indkey)
    WHERE c.relname = $1 AND a.attnum > 0 AND NOT a.attisdropped
    ORDER BY a.attnum
"""


def quote_identifier(name: str) -> str:
    """Render ``name`` as a quoted PostgreSQL identifier."""

    return exp.to_identifier(name, quoted=True).sql(dialect=DIALECT)


def placeholder(index: int) -> str:
    return f"${index}"


def physical_name(table: TableDefinition) -> str:
    if not table.connection_path:
        raise InvalidTableError(f"Table '{table.name}' has an empty connection path.")
    return table.connection_path[0]


def key_column(table: TableDefinition) -> Column:
    """Return the column flagged as primary key."""

    for column in table.columns:
        if column.key:
            return column
    raise MissingKeyColumnError(f"Table '{table.name}' must include a key column for row updates and deletes.")


def describe_table(name: str) -> Statement:
    return Statement(_DESCRIBE_TABLE, (name,))


def create_table(table: TableDefinition) -> Statement:
    target = quote_identifier(physical_name(table))
    columns = ", ".join(_column_definition(column) for column in table.columns)
    return Statement(f"CREATE TABLE {target} ({columns});")


def alter_table(name: str, alterations: Sequence[Alteration]) -> Statement | None:
    """Combine column alterations into one ALTER TABLE, or ``None`` if empty."""

    if not alterations:
        return None
    clauses = ",\n".join(_alteration_clause(alteration) for alteration in alterations)
    return Statement(f"ALTER TABLE {quote_identifier(name)} {clauses};")


def rename_table(rename: RenameTable) -> Statement:
    return Statement(
        f"ALTER TABLE {quote_identifier(rename.old_name)} RENAME TO {quote_identifier(rename.new_name)};"
    )


def drop_table(table: TableDefinition) -> Statement:
    return Statement(f"DROP TABLE {quote_identifier(physical_name(table))};")


def select_all(table: TableDefinition) -> Statement:
    return Statement(f"SELECT * FROM {quote_identifier(physical_name(table))};")


def insert_rows(table: TableDefinition, rows: Sequence[Row]) -> Statement:
    """Multi-row INSERT with placeholders numbered row-major by column order."""

    target = quote_identifier(physical_name(table))
    names = [column.name for column in table.columns]
    column_list = ", ".join(quote_identifier(name) for name in names)
    values = _values_tuples(len(rows), len(names))
    return Statement(
        f"INSERT INTO {target} ({column_list}) VALUES {values};",
        _flatten(rows, names),
    )


def update_rows(table: TableDefinition, rows: Sequence[Row]) -> Statement:
    """UPDATE ... FROM (VALUES ...) joined on the key column.

    The VALUES rows carry every column, key included, so the placeholders
    follow the same row-major layout as :func:`insert_rows`.
    """

    name = physical_name(table)
    key = quote_identifier(key_column(table).name)
    target = quote_identifier(name)
    names = [column.name for column in table.columns]
    assignments = ", ".join(
        f"{quote_identifier(column.name)} = updates.{quote_identifier(column.name)}"
        for column in table.columns
        if not column.key
    )
    aliases = ", ".join(quote_identifier(column) for column in names)
    values = _values_tuples(len(rows), len(names))
    return Statement(
        f"UPDATE {target} SET {assignments} FROM (VALUES {values}) AS updates ({aliases}) "
        f"WHERE {target}.{key} = updates.{key};",
        _flatten(rows, names),
    )


def delete_rows(table: TableDefinition, rows: Sequence[Row]) -> Statement:
    name = physical_name(table)
    key = key_column(table)
    markers = ", ".join(placeholder(index) for index in range(1, len(rows) + 1))
    return Statement(
        f"DELETE FROM {quote_identifier(name)} WHERE {quote_identifier(key.name)} IN ({markers});",
        tuple(row.get(key.name) for row in rows),
    )


def _column_definition(column: Column) -> str:
    definition = f"{quote_identifier(column.name)} {to_native_type(column.type)}"
    if column.key:
        definition += " PRIMARY KEY"
    return definition


def _alteration_clause(alteration: Alteration) -> str:
    if isinstance(alteration, DropColumn):
        return f"DROP COLUMN {quote_identifier(alteration.name)}"
    if isinstance(alteration, RetypeColumn):
        return f"ALTER COLUMN {quote_identifier(alteration.name)} TYPE {to_native_type(alteration.new_type)}"
    if isinstance(alteration, AddColumn):
        return f"ADD COLUMN {quote_identifier(alteration.name)} {to_native_type(alteration.type)}"
    if isinstance(alteration, RenameColumn):
        return f"RENAME COLUMN {quote_identifier(alteration.old_name)} TO {quote_identifier(alteration.new_name)}"
    raise TypeError(f"Unknown alteration: {alteration!r}")


def _values_tuples(row_count: int, column_count: int) -> str:
    tuples: list[str] = []
    for row in range(row_count):
        start = row * column_count + 1
        markers = ", ".join(placeholder(index) for index in range(start, start + column_count))
        tuples.append(f"({markers})")
    return ", ".join(tuples)


def _flatten(rows: Sequence[Row], names: Sequence[str]) -> tuple[Any, ...]:
    return tuple(row.get(name) for row in rows for name in names)


__all__ = [
    "DIALECT",
    "InvalidTableError",
    "LIST_TABLES",
    "MissingKeyColumnError",
    "Statement",
    "alter_table",
    "create_table",
    "delete_rows",
    "describe_table",
    "drop_table",
    "insert_rows",
    "key_column",
    "physical_name",
    "placeholder",
    "quote_identifier",
    "rename_table",
    "select_all",
    "update_rows",
]
