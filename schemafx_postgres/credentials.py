"""Credential payloads and the pool identity derived from them."""

from __future__ import annotations

import ssl
from typing import Mapping, NamedTuple

from pydantic import BaseModel, ConfigDict, field_validator


class PoolIdentity(NamedTuple):
    """Normalized credential tuple; equal identities share one pool."""

    host: str
    port: int
    user: str
    password: str
    database: str
    certificate: str | None


class CredentialPayload(BaseModel):
    """Connection payload entered by the user through the host framework."""

    model_config = ConfigDict(frozen=True)

    host: str = ""
    port: str = "5432"
    user: str = ""
    password: str = ""
    database: str = ""
    certificate: str | None = None

    @field_validator("port", mode="before")
    @classmethod
    def _validate_port(cls, value: object) -> str:
        text = str(value).strip()
        if not (text.isascii() and text.isdigit()):
            raise ValueError(f"port must be a non-negative integer, got {value!r}")
        return text

    @field_validator("certificate", mode="before")
    @classmethod
    def _blank_certificate(cls, value: object) -> object:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_payload(cls, payload: CredentialPayload | Mapping[str, object]) -> CredentialPayload:
        """Accept either a payload model or the raw mapping sent by the host."""

        if isinstance(payload, cls):
            return payload
        return cls.model_validate(dict(payload))

    @property
    def port_number(self) -> int:
        return int(self.port)

    def identity(self) -> PoolIdentity:
        return PoolIdentity(
            host=self.host,
            port=self.port_number,
            user=self.user,
            password=self.password,
            database=self.database,
            certificate=self.certificate,
        )

    def ssl_context(self) -> ssl.SSLContext | None:
        """TLS context trusting the supplied CA certificate, if any."""

        if not self.certificate:
            return None
        return ssl.create_default_context(cadata=self.certificate)


__all__ = ["CredentialPayload", "PoolIdentity"]
