"""Command-line probe for checking a connection profile."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Sequence

from .config import ConnectorSettings, load_settings
from .connector import PostgreSQLConnector
from .gateway import ExecutionFailedError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="schemafx-postgres", description=__doc__)
    parser.add_argument("--config", type=Path, default=None, help="Path to config.toml")
    parser.add_argument("--profile", default=None, help="Connection profile name")
    commands = parser.add_subparsers(dest="command", required=True)
    commands.add_parser("tables", help="List user tables")
    describe = commands.add_parser("describe", help="Show a table definition")
    describe.add_argument("table")
    return parser


async def run(args: argparse.Namespace, settings: ConnectorSettings) -> list[str]:
    profile = settings.profile(args.profile)
    connector = PostgreSQLConnector(settings=settings)
    try:
        if args.command == "tables":
            entries = await connector.read_tables([], profile)
            return [entry.name for entry in entries]
        table = await connector.read_table([args.table], profile)
        lines: list[str] = []
        for column in table.columns:
            marker = "\tkey" if column.key else ""
            lines.append(f"{column.name}\t{column.type}{marker}")
        return lines
    finally:
        await connector.aclose()


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    settings = load_settings(args.config)
    logging.basicConfig(level=settings.log_level)
    try:
        lines = asyncio.run(run(args, settings))
    except (ExecutionFailedError, ValueError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    for line in lines:
        print(line)
    return 0
