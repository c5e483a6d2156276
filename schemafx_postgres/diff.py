"""Structural diff between two table definitions."""

from __future__ import annotations

from dataclasses import dataclass

from .models import (
    AddColumn,
    Alteration,
    Column,
    DropColumn,
    RenameColumn,
    RenameTable,
    RetypeColumn,
    TableDefinition,
)
from .statements import physical_name


@dataclass(frozen=True, slots=True)
class SchemaDiff:
    """Column alterations plus an optional physical rename of the table."""

    alterations: tuple[Alteration, ...] = ()
    rename: RenameTable | None = None

    @property
    def is_empty(self) -> bool:
        return not self.alterations and self.rename is None


def diff_tables(old: TableDefinition, new: TableDefinition) -> SchemaDiff:
    """Compute the alterations turning ``old`` into ``new``.

    Columns are matched by name first. Among the leftovers, each dropped
    column (in old order) is paired with the first added column of the same
    type (in new order) and the pair becomes a rename. The pairing is greedy
    and purely positional: two unrelated same-typed columns swapped at once
    will be reported as renames of each other.
    """

    old_columns = {column.name: column for column in old.columns}
    new_columns = {column.name: column for column in new.columns}

    alterations: list[Alteration] = []
    for column in old.columns:
        counterpart = new_columns.get(column.name)
        if counterpart is None:
            alterations.append(DropColumn(column.name))
        elif counterpart.type != column.type:
            alterations.append(RetypeColumn(column.name, counterpart.type))

    for column in new.columns:
        if column.name not in old_columns:
            alterations.append(AddColumn(column.name, column.type))

    dropped = [column for column in old.columns if column.name not in new_columns]
    added = [column for column in new.columns if column.name not in old_columns]
    for old_column, new_column in _match_renames(dropped, added):
        drop_index = alterations.index(DropColumn(old_column.name))
        alterations[drop_index] = RenameColumn(old_column.name, new_column.name)
        alterations.remove(AddColumn(new_column.name, new_column.type))

    old_name, new_name = physical_name(old), physical_name(new)
    rename = RenameTable(old_name, new_name) if old_name != new_name else None

    return SchemaDiff(alterations=tuple(alterations), rename=rename)


def _match_renames(dropped: list[Column], added: list[Column]) -> list[tuple[Column, Column]]:
    pending = list(added)
    pairs: list[tuple[Column, Column]] = []
    for old_column in dropped:
        match = next((column for column in pending if column.type == old_column.type), None)
        if match is None:
            continue
        pending.remove(match)
        pairs.append((old_column, match))
    return pairs


__all__ = ["SchemaDiff", "diff_tables"]
