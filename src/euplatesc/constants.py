"""Gateway endpoints and protocol field names."""

from __future__ import annotations

__all__ = [
    "LIVE_MODE",
    "REQUEST_ENDPOINTS",
    "RESPONSE_REQUIRED_FIELDS",
    "RESPONSE_UNSIGNED_FIELDS",
    "SANDBOX_MODE",
    "SIGNATURE_FIELD",
]

LIVE_MODE = "live"
SANDBOX_MODE = "sandbox"

# EuPlatesc serves test merchants from the same URL; the merchant id decides.
REQUEST_ENDPOINTS: dict[str, str] = {
    LIVE_MODE: "https://secure.euplatesc.ro/tdsprocess/tranzactd.php",
    SANDBOX_MODE: "https://secure.euplatesc.ro/tdsprocess/tranzactd.php",
}

SIGNATURE_FIELD = "fp_hash"

RESPONSE_REQUIRED_FIELDS: tuple[str, ...] = (
    "amount",
    "curr",
    "invoice_id",
    "ep_id",
    "merch_id",
    "action",
    "message",
    "approval",
    "timestamp",
    "nonce",
    SIGNATURE_FIELD,
)

# Sent by the gateway but not covered by fp_hash
RESPONSE_UNSIGNED_FIELDS: frozenset[str] = frozenset(
    {SIGNATURE_FIELD, "backurl", "lang", "ExtraData[rate]"}
)
