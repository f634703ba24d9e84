"""Request and response models exchanged with the gateway client."""

from __future__ import annotations

from decimal import Decimal

from pydantic import BaseModel, Field

__all__ = [
    "AuthorizationRequest",
    "ClientInfo",
    "GatewayResponse",
    "client_info_to_fields",
]

# ClientInfo attribute -> gateway form field
_CLIENT_INFO_FIELDS: dict[str, str] = {
    "first_name": "fname",
    "last_name": "lname",
    "company": "company",
    "address": "add",
    "city": "city",
    "state": "state",
    "zip": "zip",
    "country": "country",
    "phone": "phone",
    "fax": "fax",
    "email": "email",
}


class ClientInfo(BaseModel):
    """Billing or shipping contact details."""

    first_name: str | None = None
    last_name: str | None = None
    company: str | None = None
    address: str | None = None
    city: str | None = None
    state: str | None = None
    zip: str | None = None
    country: str | None = None
    phone: str | None = None
    fax: str | None = None
    email: str | None = None


class AuthorizationRequest(BaseModel):
    """Payment authorization to be posted to the gateway."""

    amount: Decimal = Field(gt=0, decimal_places=2)
    currency: str = Field(default="RON", min_length=3, max_length=3)
    invoice_id: str = Field(min_length=6, max_length=27)
    order_description: str = ""
    billing_details: ClientInfo | None = None
    shipping_details: ClientInfo | None = None
    extra_data: str | None = None

    @property
    def formatted_amount(self) -> str:
        """Amount with exactly two decimals, e.g. ``12.50``."""
        return str(self.amount.quantize(Decimal("0.01")))


class GatewayResponse(BaseModel):
    """Verified gateway response, renamed for downstream use."""

    amount: str
    currency: str
    invoice_id: str
    transaction_id: str
    merchant_id: str
    action: str
    message: str
    approval: str
    timestamp: str
    back_url: str | None = None
    extra_data: str | None = None

    @property
    def is_approved(self) -> bool:
        # "0" is success, negative codes are errors
        return self.action == "0"


def client_info_to_fields(info: ClientInfo, prefix: str = "") -> dict[str, str]:
    """Map client details onto gateway form fields, skipping unset entries."""
    result: dict[str, str] = {}
    for attr, field in _CLIENT_INFO_FIELDS.items():
        value = getattr(info, attr)
        if value is not None:
            result[f"{prefix}{field}"] = value
    return result
