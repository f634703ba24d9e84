"""Gateway callbacks: browser return and server-to-server notification."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Request
from pydantic import BaseModel

from euplatesc.api.routes.health import record_verification
from euplatesc.api.routes.payments import get_gateway
from euplatesc.errors import GatewayError
from euplatesc.models import GatewayResponse

router = APIRouter()

__all__ = ["router"]

logger = logging.getLogger(__name__)


class CallbackResponse(BaseModel):
    status: str
    approved: bool
    payment: GatewayResponse


async def _verify_callback(request: Request) -> GatewayResponse:
    """Parse the form body and verify its fp_hash.

    Field order is kept as received; the gateway signs in that order.
    """
    gateway = get_gateway(request)
    form = await request.form()
    data: dict[str, str] = {k: str(v) for k, v in form.items()}

    try:
        response = gateway.parse_gateway_response(data)
    except GatewayError as exc:
        record_verification(ok=False)
        logger.warning("Rejected gateway callback: %s", exc.error_code)
        raise
    record_verification(ok=True)
    return response


@router.post(
    "/payments/return",
    response_model=CallbackResponse,
    summary="Customer returned from the gateway",
    operation_id="payment_return",
)
async def payment_return(request: Request) -> CallbackResponse:
    """Browser redirect back from the payment page."""
    payment = await _verify_callback(request)
    return CallbackResponse(status="verified", approved=payment.is_approved, payment=payment)


@router.post(
    "/webhook/euplatesc",
    response_model=CallbackResponse,
    summary="Silent payment notification",
    operation_id="euplatesc_webhook",
)
async def euplatesc_webhook(request: Request) -> CallbackResponse:
    """Server-to-server notification; carries ``backurl`` for confirmation."""
    payment = await _verify_callback(request)
    logger.info(
        "Payment notification: invoice=%s action=%s",
        payment.invoice_id,
        payment.action,
    )
    return CallbackResponse(status="accepted", approved=payment.is_approved, payment=payment)
