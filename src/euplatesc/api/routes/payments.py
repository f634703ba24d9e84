"""Authorization request endpoint."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, Request, status
from pydantic import BaseModel

from euplatesc.gateway import Gateway
from euplatesc.models import AuthorizationRequest

router = APIRouter()

__all__ = ["get_gateway", "router"]

logger = logging.getLogger(__name__)


class AuthorizeResponse(BaseModel):
    """Signed form fields and the URL they must be posted to."""

    endpoint: str
    fields: dict[str, str]


def get_gateway(request: Request) -> Gateway:
    """Return the configured gateway or fail closed with 503."""
    gateway: Gateway | None = getattr(request.app.state, "gateway", None)
    if gateway is None:
        logger.error("Gateway credentials not set, rejecting request (fail-closed)")
        raise HTTPException(status_code=503, detail="Payment gateway not configured")
    return gateway


@router.post(
    "/payments/authorize",
    response_model=AuthorizeResponse,
    status_code=status.HTTP_200_OK,
    summary="Build a signed authorization request",
    operation_id="authorize_payment",
)
async def authorize_payment(payload: AuthorizationRequest, request: Request) -> AuthorizeResponse:
    """Return the ordered fields the browser must POST to the gateway."""
    gateway = get_gateway(request)
    fields = gateway.prepare_authorization_request(payload)
    return AuthorizeResponse(endpoint=gateway.requests_endpoint, fields=fields)
