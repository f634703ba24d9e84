"""Tests for the authorization request endpoint."""

from __future__ import annotations

from typing import Any

import pytest
from httpx import ASGITransport, AsyncClient

from euplatesc.api.app import create_app
from euplatesc.constants import REQUEST_ENDPOINTS
from euplatesc.gateway import Gateway
from euplatesc.signing.hmac import sign_fields


@pytest.fixture()
def app_with_gateway(gateway: Gateway) -> Any:
    a = create_app()
    a.state.gateway = gateway
    return a


@pytest.mark.anyio()
async def test_authorize_returns_signed_ordered_fields(app_with_gateway: Any, secret_key: str) -> None:
    async with AsyncClient(transport=ASGITransport(app=app_with_gateway), base_url="http://test") as client:
        resp = await client.post(
            "/payments/authorize",
            json={
                "amount": "1.00",
                "invoice_id": "123456789",
                "order_description": "Test order",
                "billing_details": {"first_name": "Test", "email": "test.test@example.com"},
            },
        )

    assert resp.status_code == 200
    body = resp.json()
    assert body["endpoint"] == REQUEST_ENDPOINTS["live"]
    fields = body["fields"]
    assert list(fields)[:8] == [
        "amount",
        "curr",
        "invoice_id",
        "order_desc",
        "merch_id",
        "timestamp",
        "nonce",
        "fp_hash",
    ]
    signed = dict(list(fields.items())[:7])
    assert fields["fp_hash"] == sign_fields(signed, secret_key)
    assert fields["fname"] == "Test"
    assert fields["email"] == "test.test@example.com"


@pytest.mark.anyio()
async def test_authorize_rejects_non_positive_amount(app_with_gateway: Any) -> None:
    async with AsyncClient(transport=ASGITransport(app=app_with_gateway), base_url="http://test") as client:
        resp = await client.post("/payments/authorize", json={"amount": "0", "invoice_id": "123456789"})

    assert resp.status_code == 422
    assert resp.json()["error_code"] == "INVALID_REQUEST"


@pytest.mark.anyio()
async def test_authorize_without_gateway_is_503() -> None:
    app = create_app()
    app.state.gateway = None
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        resp = await client.post("/payments/authorize", json={"amount": "1.00", "invoice_id": "123456789"})

    assert resp.status_code == 503
    assert resp.json()["error_code"] == "GATEWAY_NOT_CONFIGURED"
