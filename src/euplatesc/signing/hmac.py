"""HMAC-MD5 signing and verification of gateway field sets.

WARNING: MD5 is required by the EuPlatesc wire protocol. It is used here only
for compatibility with the remote party and must not be reused for anything
that needs a strong hash. Keep it behind :func:`legacy_gateway_digest`.
"""

from __future__ import annotations

import binascii
import hashlib
import hmac as hmac_mod
from collections.abc import Iterable

from euplatesc.constants import SIGNATURE_FIELD
from euplatesc.errors import KeyFormatError, SignatureMismatchError
from euplatesc.signing.canonical import FieldSet, FieldValue, as_pairs, canonicalise

__all__ = [
    "SecretKey",
    "decode_key",
    "legacy_gateway_digest",
    "sign_fields",
    "verify_fields",
]

KeyMaterial = str | bytes | bytearray


class SecretKey:
    """Decoded merchant key held in a wipeable buffer."""

    __slots__ = ("_buffer",)

    def __init__(self, hex_key: str) -> None:
        self._buffer = decode_key(hex_key)

    @property
    def material(self) -> bytearray:
        if not self._buffer:
            msg = "Secret key has been wiped"
            raise KeyFormatError(msg)
        return self._buffer

    def wipe(self) -> None:
        """Zero the key bytes in place."""
        for i in range(len(self._buffer)):
            self._buffer[i] = 0
        self._buffer = bytearray()

    def __repr__(self) -> str:
        return "SecretKey(***)"


def decode_key(hex_key: str) -> bytearray:
    """Decode a hex-encoded merchant key into raw bytes."""
    if not hex_key:
        msg = "Secret key is empty"
        raise KeyFormatError(msg)
    if len(hex_key) % 2:
        msg = "Secret key must have an even number of hex digits"
        raise KeyFormatError(msg)
    try:
        return bytearray(binascii.unhexlify(hex_key))
    except (binascii.Error, ValueError) as exc:
        msg = "Secret key must be hexadecimal"
        raise KeyFormatError(msg) from exc


def legacy_gateway_digest(key: bytes | bytearray, message: bytes) -> str:
    """HMAC-MD5 hex digest, as mandated by the gateway protocol."""
    return hmac_mod.new(key, message, hashlib.md5).hexdigest()


def _key_bytes(key: KeyMaterial | SecretKey) -> bytes | bytearray:
    if isinstance(key, SecretKey):
        return key.material
    if isinstance(key, str):
        return decode_key(key)
    return key


def sign_fields(fields: FieldSet, key: KeyMaterial | SecretKey) -> str:
    """Sign a field set and return the lowercase hex fp_hash.

    ``key`` may be the hex string from the merchant panel or already decoded
    bytes.
    """
    canonical = canonicalise(fields)
    return legacy_gateway_digest(_key_bytes(key), canonical.encode("utf-8"))


def verify_fields(
    fields: FieldSet,
    supplied_signature: str | None,
    key: KeyMaterial | SecretKey,
    exclude_keys: Iterable[str] = (SIGNATURE_FIELD,),
) -> list[tuple[str, FieldValue]]:
    """Check ``supplied_signature`` against the recomputed one.

    Fields named in ``exclude_keys`` are dropped before signing. The supplied
    signature is compared case-insensitively.

    Returns:
        The signed (name, value) pairs, in order.

    Raises:
        SignatureMismatchError: when the signatures differ.
    """
    excluded = frozenset(exclude_keys)
    signed = [(name, value) for name, value in as_pairs(fields) if name not in excluded]
    computed = sign_fields(signed, key)
    supplied = (supplied_signature or "").lower()
    if not supplied or not hmac_mod.compare_digest(computed.encode("ascii"), supplied.encode("utf-8")):
        raise SignatureMismatchError(computed, supplied)
    return signed
