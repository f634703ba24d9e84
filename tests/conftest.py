"""Shared fixtures for unit tests."""

from __future__ import annotations

from typing import Any

import pytest

from euplatesc.gateway import Gateway
from euplatesc.settings import Settings
from euplatesc.signing.hmac import sign_fields

FIXED_TIMESTAMP = "20240101120000"
FIXED_NONCE = "abc123"


@pytest.fixture()
def secret_key() -> str:
    return "00112233445566778899aabbccddeeff"


@pytest.fixture()
def merchant_id() -> str:
    return "44840981234"


@pytest.fixture()
def test_settings(merchant_id: str, secret_key: str) -> Settings:
    return Settings(merchant_id=merchant_id, secret_key=secret_key, sandbox=True)


@pytest.fixture()
def gateway(merchant_id: str, secret_key: str) -> Gateway:
    return Gateway(
        merchant_id=merchant_id,
        secret_key=secret_key,
        clock=lambda: FIXED_TIMESTAMP,
        nonce_factory=lambda: FIXED_NONCE,
    )


@pytest.fixture()
def gateway_response(merchant_id: str, secret_key: str) -> dict[str, Any]:
    """Signed response as posted back by the gateway."""
    data: dict[str, Any] = {
        "amount": "12.00",
        "curr": "RON",
        "invoice_id": "INV-000042",
        "ep_id": "934AEE6E29F32D225164AA36350F7800B1F5BA56",
        "merch_id": merchant_id,
        "action": "0",
        "message": "Approved",
        "approval": "123456",
        "timestamp": FIXED_TIMESTAMP,
        "nonce": FIXED_NONCE,
    }
    data["fp_hash"] = sign_fields(data, secret_key).upper()
    data["lang"] = "ro"
    return data
