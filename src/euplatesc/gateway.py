"""EuPlatesc gateway client: builds signed requests, verifies responses."""

from __future__ import annotations

import secrets
from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from euplatesc.constants import (
    LIVE_MODE,
    REQUEST_ENDPOINTS,
    RESPONSE_REQUIRED_FIELDS,
    RESPONSE_UNSIGNED_FIELDS,
    SANDBOX_MODE,
    SIGNATURE_FIELD,
)
from euplatesc.errors import ConfigError, MissingFieldError, SignatureMismatchError
from euplatesc.logging import get_logger
from euplatesc.models import AuthorizationRequest, GatewayResponse, client_info_to_fields
from euplatesc.signing.hmac import SecretKey, sign_fields, verify_fields

if TYPE_CHECKING:
    from types import TracebackType

    from euplatesc.settings import Settings

__all__ = ["Gateway", "gateway_timestamp", "generate_nonce"]

logger = get_logger(component="gateway")

SHIPPING_PREFIX = "s"


def generate_nonce() -> str:
    """32 random bytes, hex encoded."""
    return secrets.token_hex(32)


def gateway_timestamp(now: datetime | None = None) -> str:
    """UTC time formatted as ``YYYYMMDDHHMMSS``."""
    now = now or datetime.now(UTC)
    return now.astimezone(UTC).strftime("%Y%m%d%H%M%S")


class Gateway:
    """Client for one merchant account.

    The secret key is decoded once at construction and shared read-only by
    every signing and verification call; ``close()`` wipes it.
    """

    def __init__(
        self,
        merchant_id: str,
        secret_key: str,
        sandbox: bool = False,
        *,
        clock: Callable[[], str] | None = None,
        nonce_factory: Callable[[], str] | None = None,
    ) -> None:
        if not secret_key:
            msg = "Missing secret key"
            raise ConfigError(msg)
        if not merchant_id:
            msg = "Missing merchant ID"
            raise ConfigError(msg)

        self.merchant_id = merchant_id
        self.sandbox = sandbox
        self._key = SecretKey(secret_key)
        self._clock = clock or gateway_timestamp
        self._nonce_factory = nonce_factory or generate_nonce

    @classmethod
    def from_settings(cls, settings: Settings) -> Gateway:
        return cls(
            merchant_id=settings.merchant_id,
            secret_key=settings.secret_key.get_secret_value(),
            sandbox=settings.sandbox,
        )

    @property
    def requests_endpoint(self) -> str:
        return REQUEST_ENDPOINTS[SANDBOX_MODE if self.sandbox else LIVE_MODE]

    def sign(self, fields: Mapping[str, Any]) -> str:
        """fp_hash for ``fields`` in their current order."""
        return sign_fields(fields, self._key)

    def prepare_authorization_request(self, request: AuthorizationRequest) -> dict[str, str]:
        """Build the ordered form fields to post to :attr:`requests_endpoint`.

        Only the core transaction fields are signed; client details and
        ExtraData are appended after ``fp_hash``.
        """
        data: dict[str, str] = {
            "amount": request.formatted_amount,
            "curr": request.currency,
            "invoice_id": request.invoice_id,
            "order_desc": request.order_description,
            "merch_id": self.merchant_id,
            "timestamp": self._clock(),
            "nonce": self._nonce_factory(),
        }
        data[SIGNATURE_FIELD] = self.sign(data)

        if request.billing_details:
            data.update(client_info_to_fields(request.billing_details))
        if request.shipping_details:
            data.update(client_info_to_fields(request.shipping_details, prefix=SHIPPING_PREFIX))
        if request.extra_data:
            data["ExtraData"] = request.extra_data

        logger.info(
            "authorization_prepared",
            invoice_id=request.invoice_id,
            amount=data["amount"],
            currency=request.currency,
        )
        return data

    def parse_gateway_response(self, data: Mapping[str, str]) -> GatewayResponse:
        """Verify a gateway response and return it renamed.

        Raises:
            MissingFieldError: listing every required field that is absent.
            SignatureMismatchError: fp_hash does not match the payload.
        """
        missing = [field for field in RESPONSE_REQUIRED_FIELDS if field not in data]
        if missing:
            logger.warning("response_missing_fields", missing_fields=missing)
            raise MissingFieldError(tuple(missing))

        try:
            verify_fields(
                data,
                data[SIGNATURE_FIELD],
                self._key,
                exclude_keys=RESPONSE_UNSIGNED_FIELDS,
            )
        except SignatureMismatchError:
            logger.warning(
                "response_signature_mismatch",
                invoice_id=data.get("invoice_id"),
                transaction_id=data.get("ep_id"),
            )
            raise

        response = GatewayResponse(
            amount=data["amount"],
            currency=data["curr"],
            invoice_id=data["invoice_id"],
            transaction_id=data["ep_id"],
            merchant_id=data["merch_id"],
            action=data["action"],
            message=data["message"],
            approval=data["approval"],
            timestamp=data["timestamp"],
            back_url=data.get("backurl") or None,
            extra_data=data.get("ExtraData") or None,
        )
        logger.info(
            "response_verified",
            invoice_id=response.invoice_id,
            transaction_id=response.transaction_id,
            action=response.action,
        )
        return response

    def close(self) -> None:
        self._key.wipe()

    def __enter__(self) -> Gateway:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"Gateway(merchant_id={self.merchant_id!r}, sandbox={self.sandbox})"
