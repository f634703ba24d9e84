"""Length-prefixed canonical serialisation of gateway field sets."""

from __future__ import annotations

import math
from collections.abc import Iterable, Mapping
from decimal import Decimal

__all__ = ["EMPTY_TOKEN", "FieldSet", "FieldValue", "as_pairs", "canonicalise", "encode_value"]

EMPTY_TOKEN = "-"

FieldValue = str | int | float | Decimal | bool | None
FieldSet = Mapping[str, FieldValue] | Iterable[tuple[str, FieldValue]]


def as_pairs(fields: FieldSet) -> list[tuple[str, FieldValue]]:
    """Return ``fields`` as an explicit list of (name, value) pairs.

    Mappings are read in insertion order. The gateway recomputes the hash
    over the same order, so callers must populate fields in protocol order.
    """
    if isinstance(fields, Mapping):
        return list(fields.items())
    return [(name, value) for name, value in fields]


def _format_float(value: float) -> str:
    """Render a float the way ECMAScript ``Number.prototype.toString`` does.

    Plain notation for decimal exponents in (-7, 21), exponent form outside.
    """
    if value == 0:
        return "0"
    sign, digits, exponent = Decimal(repr(value)).normalize().as_tuple()
    shortest = "".join(map(str, digits))
    k = len(shortest)
    n = exponent + k  # type: ignore[operator]
    if k <= n <= 21:
        body = shortest + "0" * (n - k)
    elif 0 < n <= 21:
        body = f"{shortest[:n]}.{shortest[n:]}"
    elif -6 < n <= 0:
        body = "0." + "0" * -n + shortest
    else:
        mantissa = shortest[0] + (f".{shortest[1:]}" if k > 1 else "")
        body = f"{mantissa}e{'+' if n > 0 else '-'}{abs(n - 1)}"
    return f"-{body}" if sign else body


def _stringify(value: FieldValue) -> str:
    if isinstance(value, str):
        return value
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "1" if value else "0"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, Decimal):
        if not value.is_finite():
            msg = f"Cannot encode non-finite number {value!r}"
            raise ValueError(msg)
        return format(value, "f")
    if isinstance(value, float):
        if not math.isfinite(value):
            msg = f"Cannot encode non-finite number {value!r}"
            raise ValueError(msg)
        return _format_float(value)
    msg = f"Unsupported field value type: {type(value).__name__}"
    raise TypeError(msg)


def encode_value(value: FieldValue) -> str:
    """Encode one field value as ``<length><value>``, or ``-`` when empty.

    Length is counted in UTF-16 code units, as JavaScript's String.length
    does, so astral characters such as emoji count twice.
    """
    if value is None or value == "":
        return EMPTY_TOKEN
    text = _stringify(value)
    length = len(text.encode("utf-16-le")) // 2
    return f"{length}{text}"


def canonicalise(fields: FieldSet, exclude_keys: Iterable[str] | None = None) -> str:
    """Produce the canonical string the gateway signs.

    Args:
        fields: Ordered field set (mapping or sequence of pairs).
        exclude_keys: Field names to drop before encoding (e.g. {"fp_hash"}).

    Returns:
        Concatenation of every field's encoded value, in order, with no
        delimiter.
    """
    excluded = frozenset(exclude_keys or ())
    return "".join(encode_value(value) for name, value in as_pairs(fields) if name not in excluded)
