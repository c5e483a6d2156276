"""Tests for credential payload normalization."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from schemafx_postgres.credentials import CredentialPayload, PoolIdentity


def test_identity_ignores_mapping_order() -> None:
    first = CredentialPayload.from_payload(
        {"host": "db", "port": "5432", "user": "app", "password": "pw", "database": "main"}
    )
    second = CredentialPayload.from_payload(
        {"database": "main", "password": "pw", "user": "app", "port": "5432", "host": "db"}
    )

    assert first.identity() == second.identity()
    assert first.identity() == PoolIdentity("db", 5432, "app", "pw", "main", None)


def test_certificate_participates_in_identity() -> None:
    plain = CredentialPayload(host="db", port="5432")
    secured = CredentialPayload(host="db", port="5432", certificate="-----BEGIN CERTIFICATE-----")

    assert plain.identity() != secured.identity()


def test_blank_certificate_is_treated_as_absent() -> None:
    payload = CredentialPayload(host="db", certificate="   ")

    assert payload.certificate is None
    assert payload.ssl_context() is None


def test_numeric_port_is_accepted() -> None:
    payload = CredentialPayload.from_payload({"host": "db", "port": 6543})

    assert payload.port == "6543"
    assert payload.port_number == 6543


@pytest.mark.parametrize("port", ["-1", "abc", "54.32", "", "\u00b2", "\u0663"])
def test_invalid_port_is_rejected(port: str) -> None:
    with pytest.raises(ValidationError):
        CredentialPayload(host="db", port=port)


def test_from_payload_returns_existing_model() -> None:
    payload = CredentialPayload(host="db")

    assert CredentialPayload.from_payload(payload) is payload
