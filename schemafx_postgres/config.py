"""Connector settings loading helpers."""

from __future__ import annotations

import logging
from pathlib import Path

import tomllib

from pydantic import BaseModel, Field, ValidationError, field_validator

from .credentials import CredentialPayload

CONFIG_FILE = Path.home() / ".config" / "schemafx-postgres" / "config.toml"

LOG = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class GatewaySettings(BaseModel):
    """Pool sizing and connect behaviour for the execution gateway."""

    min_pool_size: int = Field(default=1, ge=0)
    max_pool_size: int = Field(default=10, ge=1)
    connect_timeout: float = Field(default=5.0, gt=0)


class CredentialProfile(CredentialPayload):
    """Named credential set stored in config.toml for command-line use."""

    name: str


class ConnectorSettings(BaseModel):
    """Shape of the connector configuration file."""

    name: str = "postgresql"
    log_level: str = "WARNING"
    gateway: GatewaySettings = Field(default_factory=GatewaySettings)
    profiles: list[CredentialProfile] = Field(default_factory=list)
    active_profile: str | None = None

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}, got {value!r}")
        return level

    def profile(self, name: str | None = None) -> CredentialProfile:
        """Return the named profile, else the active one, else the first."""

        wanted = name or self.active_profile
        if wanted is None:
            if not self.profiles:
                raise ValueError("No connection profiles configured.")
            return self.profiles[0]
        for profile in self.profiles:
            if profile.name == wanted:
                return profile
        raise ValueError(f"Profile '{wanted}' not found.")


def load_settings(path: Path | None = None) -> ConnectorSettings:
    """Load settings from disk; fall back to defaults if missing or invalid."""

    config_path = path or CONFIG_FILE
    try:
        with config_path.open("rb") as handle:
            raw = tomllib.load(handle)
    except FileNotFoundError:
        return ConnectorSettings()
    except (tomllib.TOMLDecodeError, OSError):
        LOG.warning("Ignoring unreadable settings file", extra={"path": str(config_path)})
        return ConnectorSettings()

    try:
        return ConnectorSettings.model_validate(raw)
    except ValidationError as exc:
        LOG.warning("Ignoring invalid settings file", extra={"path": str(config_path)})
        LOG.debug(str(exc))
        return ConnectorSettings()


__all__ = [
    "CONFIG_FILE",
    "ConnectorSettings",
    "CredentialProfile",
    "GatewaySettings",
    "load_settings",
]
