"""Scalar type coercion for raw INI values."""

from __future__ import annotations

import re
from typing import Any, Mapping, Optional

TRUE_WORDS = frozenset({"true", "yes", "on"})
FALSE_WORDS = frozenset({"false", "no", "off"})
NULL_WORDS = frozenset({"null"})

NUMERIC_RE = re.compile(
    r"^\s*(?P<sign>[+-]?)(?P<mantissa>\d+(?:\.\d*)?|\.\d+)(?:[eE](?P<exponent>[+-]?\d+))?\s*$",
    re.ASCII,
)

# integers saturate at the signed 64-bit range
INT_MAX = 2**63 - 1
INT_MIN = -(2**63)
_INT_DIGITS = len(str(INT_MAX))


def is_numeric(value: str) -> bool:
    """Check whether a string is a decimal or integer numeric literal.

    Accepts an optional sign, ASCII digits with an optional fraction, an
    optional exponent and surrounding whitespace.
    """
    return NUMERIC_RE.match(value) is not None


def _exponent(text: Optional[str]) -> int:
    if not text:
        return 0
    magnitude = text.lstrip("+-").lstrip("0")
    if len(magnitude) > _INT_DIGITS:
        # far outside the integer range either way
        return -(10**_INT_DIGITS) if text.startswith("-") else 10**_INT_DIGITS
    return int(text)


def _to_int(match: "re.Match[str]") -> int:
    """Convert a dotless numeric literal to an int, truncating toward zero."""
    negative = match.group("sign") == "-"
    digits = match.group("mantissa").lstrip("0")
    exponent = _exponent(match.group("exponent"))
    if not digits:
        return 0
    if exponent < 0:
        if -exponent >= len(digits):
            return 0
        digits, exponent = digits[:exponent], 0
    if len(digits) + exponent > _INT_DIGITS:
        return INT_MIN if negative else INT_MAX
    value = int(digits) * 10**exponent
    if negative:
        return max(INT_MIN, -value)
    return min(INT_MAX, value)


def coerce(raw: Any) -> Any:
    """Convert a raw INI value to its native Python type.

    Mappings and lists are coerced element by element. Already-typed scalars
    (bool, None, int, float) are returned unchanged, so coercion is
    idempotent.

    String rules, in order:

    - ``true``/``yes``/``on`` (any case) -> ``True``
    - ``false``/``no``/``off`` (any case) -> ``False``
    - ``null`` (any case) -> ``None``
    - numeric strings containing a ``.`` -> ``float``
    - other numeric strings -> ``int`` (``"1e10"`` -> ``10000000000``),
      saturated to the signed 64-bit range
    - anything else -> the string itself

    Args:
        raw: Raw value as produced by a source.

    Returns:
        The coerced value.
    """
    if isinstance(raw, Mapping):
        return {key: coerce(value) for key, value in raw.items()}
    if isinstance(raw, list):
        return [coerce(value) for value in raw]
    if raw is None or isinstance(raw, (bool, int, float)):
        return raw

    text = str(raw)
    lowered = text.lower()
    if lowered in TRUE_WORDS:
        return True
    if lowered in FALSE_WORDS:
        return False
    if lowered in NULL_WORDS:
        return None

    match = NUMERIC_RE.match(text)
    if match:
        # int vs float is decided by the literal dot only, not the exponent
        if "." in text:
            return float(text)
        return _to_int(match)

    return text
