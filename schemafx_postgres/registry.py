"""Connector registry used by hosts to hold connectors behind one interface."""

from __future__ import annotations

import importlib.metadata as metadata
import inspect
import logging
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from .config import ConnectorSettings
from .connector import Connector, PostgreSQLConnector

LOG = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "schemafx.connectors"

ConnectorFactory = Callable[..., Connector]


class ConnectorRegistryError(RuntimeError):
    """Raised when a connector cannot be built from its entry point."""


class UnknownConnectorError(LookupError):
    """Raised when looking up a connector name nobody registered."""


@dataclass(slots=True, frozen=True)
class DiscoveredConnector:
    """Connector factory captured from entry point discovery."""

    name: str
    entry_point: metadata.EntryPoint
    factory: ConnectorFactory | Connector


class ConnectorRegistry:
    """Discovers connectors exposed via entry points and keeps them by name.

    Entry points may point at a connector instance or at a factory; factories
    are called with the entry point name and a ``settings`` keyword argument.
    """

    def __init__(
        self,
        *,
        settings: ConnectorSettings | None = None,
        entry_point_group: str = ENTRY_POINT_GROUP,
        enabled_connectors: Iterable[str] | None = None,
        builtin_connectors: Iterable[ConnectorFactory | Connector] | None = None,
    ) -> None:
        self._settings = settings or ConnectorSettings()
        self._entry_point_group = entry_point_group
        self._enabled: set[str] | None = set(enabled_connectors) if enabled_connectors is not None else None
        self._builtins = list(builtin_connectors) if builtin_connectors is not None else [PostgreSQLConnector]
        self._discovered: list[DiscoveredConnector] = []
        self._connectors: dict[str, Connector] = {}

    def discover(self) -> list[DiscoveredConnector]:
        """Enumerate connector factories from entry points and builtins."""

        eps = metadata.entry_points()
        group = eps.select(group=self._entry_point_group)
        discovered: dict[str, DiscoveredConnector] = {}
        for entry_point in sorted(group, key=lambda ep: ep.name):
            try:
                factory = entry_point.load()
            except Exception:  # pragma: no cover - defensive logging path
                LOG.warning("Skipping connector that failed to import", extra={"connector": entry_point.name})
                continue
            discovered[entry_point.name] = DiscoveredConnector(
                name=entry_point.name,
                entry_point=entry_point,
                factory=factory,
            )
        for builtin in self._iter_builtins():
            discovered.setdefault(builtin.name, builtin)
        self._discovered = list(discovered.values())
        return self._discovered

    def load(self) -> list[Connector]:
        """Instantiate every discovered connector that is enabled."""

        if not self._discovered:
            self.discover()

        loaded: list[Connector] = []
        for entry in self._discovered:
            if self._enabled is not None and entry.name not in self._enabled:
                LOG.debug("Skipping disabled connector", extra={"connector": entry.name})
                continue
            connector = self._build(entry)
            self._connectors[connector.name] = connector
            loaded.append(connector)
        return loaded

    def register(self, connector: Connector) -> None:
        """Register an already-built connector, replacing any with its name."""

        if not isinstance(connector, Connector):
            raise ConnectorRegistryError(f"{connector!r} does not implement the connector interface")
        self._connectors[connector.name] = connector

    def get(self, name: str) -> Connector:
        try:
            return self._connectors[name]
        except KeyError:
            raise UnknownConnectorError(f"Connector '{name}' is not registered.") from None

    @property
    def connectors(self) -> Sequence[Connector]:
        return tuple(self._connectors.values())

    async def aclose(self) -> None:
        """Release resources held by every registered connector."""

        for connector in self._connectors.values():
            try:
                await connector.aclose()
            except Exception:  # pragma: no cover - defensive logging path
                LOG.exception("Connector shutdown failed", extra={"connector": connector.name})

    def _build(self, entry: DiscoveredConnector) -> Connector:
        factory = entry.factory
        try:
            connector: Any = (
                factory(entry.name, settings=self._settings)
                if inspect.isclass(factory) or inspect.isfunction(factory)
                else factory
            )
        except Exception as exc:  # pragma: no cover - defensive logging path
            LOG.exception("Connector construction failed", extra={"connector": entry.name})
            raise ConnectorRegistryError(f"Failed to build connector '{entry.name}'") from exc
        if not isinstance(connector, Connector):
            raise ConnectorRegistryError(f"Entry point '{entry.name}' does not provide a connector")
        return connector

    def _iter_builtins(self) -> list[DiscoveredConnector]:
        builtins: list[DiscoveredConnector] = []
        for builtin in self._builtins:
            if inspect.isclass(builtin):
                name = self._settings.name if builtin is PostgreSQLConnector else builtin.__name__
                target = builtin
            else:
                name = builtin.name
                target = builtin.__class__
            entry_point = metadata.EntryPoint(
                name=name,
                value=f"{target.__module__}:{target.__qualname__}",
                group=self._entry_point_group,
            )
            builtins.append(DiscoveredConnector(name=name, entry_point=entry_point, factory=builtin))
        return builtins


__all__ = [
    "ConnectorRegistry",
    "ConnectorRegistryError",
    "DiscoveredConnector",
    "ENTRY_POINT_GROUP",
    "UnknownConnectorError",
]
