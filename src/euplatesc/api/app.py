"""FastAPI application factory."""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import JSONResponse

from euplatesc.api.routes import health, payments, webhook_euplatesc
from euplatesc.errors import ConfigError, GatewayError, MissingFieldError, SignatureMismatchError
from euplatesc.gateway import Gateway
from euplatesc.logging import configure_logging, new_correlation_id
from euplatesc.settings import Settings

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

__all__ = ["create_app"]

logger = logging.getLogger(__name__)

_ERROR_CODE_BY_STATUS: dict[int, str] = {
    401: "SIGNATURE_INVALID",
    503: "GATEWAY_NOT_CONFIGURED",
}


class ObservabilityMiddleware(BaseHTTPMiddleware):
    """Inject correlation_id and record request metrics."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        cid = request.headers.get("x-correlation-id") or new_correlation_id()
        request.state.request_id = cid

        start = time.perf_counter()
        response = await call_next(request)
        duration = time.perf_counter() - start

        response.headers["x-correlation-id"] = cid
        response.headers["x-request-duration-ms"] = f"{duration * 1000:.1f}"

        health.record_request(response.status_code)

        return response


def _resolve_request_id(request: Request) -> str:
    request_id = getattr(request.state, "request_id", "")
    if not request_id:
        request_id = request.headers.get("x-correlation-id") or new_correlation_id()
        request.state.request_id = request_id
    return request_id


def _error_payload(error_code: str, message: str, request_id: str, *, details: Any = None) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "error_code": error_code,
        "message": message,
        "request_id": request_id,
    }
    if details is not None:
        payload["details"] = details
    return payload


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    request_id = _resolve_request_id(request)
    status_code = exc.status_code
    error_code = _ERROR_CODE_BY_STATUS.get(status_code) or (
        "INVALID_REQUEST" if 400 <= status_code < 500 else "INTERNAL_ERROR"
    )
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=status_code,
        content=_error_payload(error_code, message, request_id),
    )


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    request_id = _resolve_request_id(request)
    return JSONResponse(
        status_code=422,
        content=_error_payload(
            "INVALID_REQUEST",
            "Request validation failed",
            request_id,
            details=exc.errors(),
        ),
    )


async def _gateway_exception_handler(request: Request, exc: GatewayError) -> JSONResponse:
    """Map signing/verification failures onto the error payload.

    The recomputed hash is never echoed back to the caller.
    """
    request_id = _resolve_request_id(request)
    if isinstance(exc, SignatureMismatchError):
        return JSONResponse(
            status_code=401,
            content=_error_payload("SIGNATURE_INVALID", "Invalid signature", request_id),
        )
    if isinstance(exc, MissingFieldError):
        return JSONResponse(
            status_code=400,
            content=_error_payload(
                "INVALID_REQUEST",
                exc.message,
                request_id,
                details={"missing_fields": list(exc.fields)},
            ),
        )
    if isinstance(exc, ConfigError):
        logger.error("Gateway misconfigured: %s", exc.message)
        return JSONResponse(
            status_code=503,
            content=_error_payload("GATEWAY_NOT_CONFIGURED", "Payment gateway not configured", request_id),
        )
    logger.error("Gateway error: %s", exc.message)
    return JSONResponse(
        status_code=500,
        content=_error_payload("INTERNAL_ERROR", "Internal server error", request_id),
    )


async def _unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    request_id = _resolve_request_id(request)
    logger.exception("Unhandled application exception", exc_info=exc)
    return JSONResponse(
        status_code=500,
        content=_error_payload("INTERNAL_ERROR", "Internal server error", request_id),
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = Settings()
    configure_logging(json_output=settings.log_json, level=settings.log_level)

    gateway: Gateway | None = None
    if settings.is_configured:
        gateway = Gateway.from_settings(settings)
    else:
        logger.warning("EUPLATESC_MERCHANT_ID / EUPLATESC_SECRET_KEY not set, payment routes disabled")

    app.state.settings = settings
    app.state.gateway = gateway

    yield

    if gateway:
        gateway.close()


def create_app() -> FastAPI:
    app = FastAPI(
        title="EuPlatesc Gateway",
        version="0.1.0",
        description="Signed authorization requests and verified callbacks for the EuPlatesc card gateway.",
        lifespan=lifespan,
    )
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.add_exception_handler(GatewayError, _gateway_exception_handler)
    app.add_exception_handler(Exception, _unhandled_exception_handler)
    app.add_middleware(ObservabilityMiddleware)
    app.include_router(health.router, tags=["health"])
    app.include_router(payments.router, tags=["payments"])
    app.include_router(webhook_euplatesc.router, tags=["webhook"])
    return app


app = create_app()
