"""Mapping between framework column types and PostgreSQL type names."""

from __future__ import annotations

from .models import ColumnType


class UnsupportedTypeError(ValueError):
    """Raised when a column type has no PostgreSQL equivalent."""


_NATIVE_TYPES: dict[ColumnType, str] = {
    ColumnType.STRING: "TEXT",
    ColumnType.NUMBER: "DOUBLE PRECISION",
    ColumnType.DATE: "DATE",
    ColumnType.DATETIME: "TIMESTAMP",
}

# Keys are lower-case format_type() names plus their short aliases; anything
# else, including parameterized names like numeric(10,2), reads back as text.
_ABSTRACT_TYPES: dict[str, ColumnType] = {
    "integer": ColumnType.NUMBER,
    "smallint": ColumnType.NUMBER,
    "bigint": ColumnType.NUMBER,
    "decimal": ColumnType.NUMBER,
    "numeric": ColumnType.NUMBER,
    "real": ColumnType.NUMBER,
    "double precision": ColumnType.NUMBER,
    "date": ColumnType.DATE,
    "timestamp": ColumnType.DATETIME,
    "timestamptz": ColumnType.DATETIME,
    "timestamp without time zone": ColumnType.DATETIME,
    "timestamp with time zone": ColumnType.DATETIME,
}


def to_native_type(column_type: str) -> str:
    """Return the PostgreSQL type used to store the given column type."""

    try:
        return _NATIVE_TYPES[ColumnType(column_type)]
    except (KeyError, ValueError) as exc:
        raise UnsupportedTypeError(f"Unsupported data type: {column_type}") from exc


def from_native_type(native_type: str) -> ColumnType:
    """Classify a PostgreSQL type name, defaulting to ``string``."""

    return _ABSTRACT_TYPES.get(native_type.strip().lower(), ColumnType.STRING)


__all__ = ["UnsupportedTypeError", "from_native_type", "to_native_type"]
