"""Error hierarchy for gateway signing and verification.

Every error carries a machine-readable ``error_code`` so the HTTP layer can
turn it into the standard error payload without inspecting messages.
"""

from __future__ import annotations

from typing import Any

__all__ = [
    "ConfigError",
    "GatewayError",
    "KeyFormatError",
    "MissingFieldError",
    "SignatureMismatchError",
]


class GatewayError(Exception):
    """Base class for all gateway client errors."""

    error_code = "GATEWAY_ERROR"

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigError(GatewayError):
    """Merchant id or secret key missing at construction time."""

    error_code = "CONFIG_INVALID"


class KeyFormatError(ConfigError):
    """Secret key is not a valid hexadecimal string."""

    error_code = "KEY_FORMAT_INVALID"


class MissingFieldError(GatewayError):
    """Inbound message lacks one or more required fields.

    ``fields`` lists every missing field in protocol order; ``field`` is the
    first of them.
    """

    error_code = "MISSING_FIELD"

    def __init__(self, fields: str | tuple[str, ...] | list[str]) -> None:
        if isinstance(fields, str):
            fields = (fields,)
        self.fields: tuple[str, ...] = tuple(fields)
        self.field = self.fields[0] if self.fields else ""
        names = ", ".join(f"'{f}'" for f in self.fields)
        super().__init__(
            f"Invalid response data: missing {names} field{'s' if len(self.fields) > 1 else ''}",
            {"missing_fields": list(self.fields)},
        )


class SignatureMismatchError(GatewayError):
    """Recomputed fp_hash differs from the supplied one."""

    error_code = "SIGNATURE_INVALID"

    def __init__(self, computed: str, supplied: str) -> None:
        self.computed = computed
        self.supplied = supplied
        super().__init__(
            f"Invalid response hash {computed} - {supplied}",
            {"computed": computed, "supplied": supplied},
        )
