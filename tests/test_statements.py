"""Tests for the statement builders."""

from __future__ import annotations

import pytest

from schemafx_postgres.models import AddColumn, Column, DropColumn, RenameColumn, RenameTable, RetypeColumn, TableDefinition
from schemafx_postgres.statements import (
    LIST_TABLES,
    InvalidTableError,
    MissingKeyColumnError,
    alter_table,
    create_table,
    delete_rows,
    describe_table,
    drop_table,
    insert_rows,
    key_column,
    quote_identifier,
    rename_table,
    select_all,
    update_rows,
)
from schemafx_postgres.typemap import UnsupportedTypeError

ACCOUNTS = TableDefinition(
    name="Accounts",
    connection_path=("accounts",),
    columns=(
        Column("id", "number", key=True),
        Column("email", "string"),
        Column("joined", "date"),
    ),
)

KEYLESS = TableDefinition(
    name="Events",
    connection_path=("events",),
    columns=(Column("name", "string"), Column("at", "datetime")),
)

PATHLESS = TableDefinition(name="Ghost", connection_path=(), columns=(Column("id", "number", key=True),))


def test_quote_identifier_wraps_and_escapes() -> None:
    assert quote_identifier("accounts") == '"accounts"'
    assert quote_identifier("Mixed Case") == '"Mixed Case"'
    assert quote_identifier('we"ird') == '"we""ird"'


def test_create_table_lists_columns_with_native_types() -> None:
    statement = create_table(ACCOUNTS)

    assert statement.text == (
        'CREATE TABLE "accounts" ("id" DOUBLE PRECISION PRIMARY KEY, "email" TEXT, "joined" DATE);'
    )
    assert statement.args == ()


def test_create_table_uses_physical_name_not_label() -> None:
    table = TableDefinition(name="Pretty", connection_path=("raw_table", "ignored"), columns=(Column("a", "string"),))

    assert create_table(table).text.startswith('CREATE TABLE "raw_table" ')


def test_create_table_rejects_unknown_type() -> None:
    table = TableDefinition(name="t", connection_path=("t",), columns=(Column("flag", "boolean"),))

    with pytest.raises(UnsupportedTypeError):
        create_table(table)


def test_alter_table_joins_clauses() -> None:
    statement = alter_table(
        "accounts",
        [
            DropColumn("legacy"),
            RetypeColumn("score", "number"),
            AddColumn("notes", "string"),
            RenameColumn("mail", "email"),
        ],
    )

    assert statement is not None
    assert statement.text == (
        'ALTER TABLE "accounts" DROP COLUMN "legacy",\n'
        'ALTER COLUMN "score" TYPE DOUBLE PRECISION,\n'
        'ADD COLUMN "notes" TEXT,\n'
        'RENAME COLUMN "mail" TO "email";'
    )
    assert statement.args == ()


def test_alter_table_without_changes_is_none() -> None:
    assert alter_table("accounts", []) is None


def test_rename_table_statement() -> None:
    statement = rename_table(RenameTable("accounts", "customers"))

    assert statement.text == 'ALTER TABLE "accounts" RENAME TO "customers";'


def test_drop_and_select_target_physical_name() -> None:
    assert drop_table(ACCOUNTS).text == 'DROP TABLE "accounts";'
    assert select_all(ACCOUNTS).text == 'SELECT * FROM "accounts";'
    assert select_all(ACCOUNTS).args == ()


@pytest.mark.parametrize("builder", [create_table, drop_table, select_all])
def test_builders_reject_empty_connection_path(builder) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(InvalidTableError):
        builder(PATHLESS)


def test_insert_numbers_placeholders_row_major() -> None:
    rows = [
        {"email": "a@example.com", "id": 1, "joined": "2024-01-01"},
        {"id": 2, "joined": "2024-02-02", "email": "b@example.com"},
    ]

    statement = insert_rows(ACCOUNTS, rows)

    assert statement.text == (
        'INSERT INTO "accounts" ("id", "email", "joined") VALUES ($1, $2, $3), ($4, $5, $6);'
    )
    assert statement.args == (1, "a@example.com", "2024-01-01", 2, "b@example.com", "2024-02-02")


def test_insert_binds_missing_values_as_null() -> None:
    statement = insert_rows(ACCOUNTS, [{"id": 7}])

    assert statement.args == (7, None, None)


def test_values_never_appear_in_statement_text() -> None:
    hostile = "x'); DROP TABLE accounts; --"

    statement = insert_rows(ACCOUNTS, [{"id": 1, "email": hostile, "joined": None}])

    assert hostile not in statement.text
    assert hostile in statement.args


def test_update_joins_values_table_on_key() -> None:
    rows = [
        {"id": 1, "email": "a@example.com", "joined": "2024-01-01"},
        {"id": 2, "email": "b@example.com", "joined": "2024-02-02"},
    ]

    statement = update_rows(ACCOUNTS, rows)

    assert statement.text == (
        'UPDATE "accounts" SET "email" = updates."email", "joined" = updates."joined" '
        'FROM (VALUES ($1, $2, $3), ($4, $5, $6)) AS updates ("id", "email", "joined") '
        'WHERE "accounts"."id" = updates."id";'
    )
    assert statement.args == (1, "a@example.com", "2024-01-01", 2, "b@example.com", "2024-02-02")


def test_delete_binds_one_key_per_row() -> None:
    rows = [{"id": 3, "email": "c@example.com"}, {"id": 9}]

    statement = delete_rows(ACCOUNTS, rows)

    assert statement.text == 'DELETE FROM "accounts" WHERE "id" IN ($1, $2);'
    assert statement.args == (3, 9)


@pytest.mark.parametrize("builder", [update_rows, delete_rows])
def test_row_mutations_require_key_column(builder) -> None:  # type: ignore[no-untyped-def]
    with pytest.raises(MissingKeyColumnError):
        builder(KEYLESS, [{"name": "signup"}])


def test_key_column_returns_first_flagged_column() -> None:
    assert key_column(ACCOUNTS).name == "id"


def test_catalog_queries_bind_table_name() -> None:
    describe = describe_table("accounts")

    assert describe.args == ("accounts",)
    assert "$1" in describe.text
    assert "accounts" not in describe.text
    assert "pg_tables" in LIST_TABLES.text
