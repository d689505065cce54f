"""
Scalar parsers: one raw string -> one typed value. Pure functions.

Each parser raises ``ParseError`` on malformed or out-of-range input. When a
library parser rejected the text, its exception is chained and its message
is reused as-is.
"""

from __future__ import annotations

import math
import re
import struct
from datetime import UTC, datetime, timedelta, timezone

from query_binding.domain.fields import IntWidth
from query_binding.exceptions import ParseError

_SIGNED = re.compile(r"[+-]?[0-9]+")
_UNSIGNED = re.compile(r"[0-9]+")

# RFC 3339 date-time: 2006-01-02T15:04:05.999999999Z07:00
_RFC3339 = re.compile(
    r"(?P<year>[0-9]{4})-(?P<month>[0-9]{2})-(?P<day>[0-9]{2})"
    r"[Tt]"
    r"(?P<hour>[0-9]{2}):(?P<minute>[0-9]{2}):(?P<second>[0-9]{2})"
    r"(?:\.(?P<fraction>[0-9]+))?"
    r"(?P<offset>[Zz]|[+-][0-9]{2}:[0-9]{2})"
)

_TRUE = frozenset({"1", "t", "true"})
_FALSE = frozenset({"0", "f", "false"})
_INFINITY = frozenset({"inf", "infinity"})


def _describe(width: IntWidth) -> str:
    return f"{'int' if width.signed else 'uint'}{width.bits}"


def parse_integer(raw: str, width: IntWidth) -> int:
    """Parse a base-10 integer and check it fits ``width``."""
    target = _describe(width)
    pattern = _SIGNED if width.signed else _UNSIGNED
    if not pattern.fullmatch(raw):
        raise ParseError(target, raw, f"parsing {raw!r}: invalid syntax")
    try:
        value = int(raw)
    except ValueError as exc:
        # Digit strings past the interpreter's conversion limit
        raise ParseError(target, raw, str(exc)) from exc
    return check_integer_range(value, width, raw)


def check_integer_range(value: int, width: IntWidth, raw: str) -> int:
    low, high = width.bounds
    if not low <= value <= high:
        raise ParseError(_describe(width), raw, f"parsing {raw!r}: value out of range")
    return value


def parse_float(raw: str, bits: int = 64) -> float:
    """Parse a base-10 floating point literal, rounding to ``bits`` precision."""
    target = f"float{bits}"
    if not raw or raw != raw.strip() or "_" in raw:
        raise ParseError(target, raw, f"parsing {raw!r}: invalid syntax")
    try:
        value = float(raw)
    except ValueError as exc:
        raise ParseError(target, raw, str(exc)) from exc
    # float() saturates to inf on overflow; only a spelled-out infinity may be inf
    if math.isinf(value) and raw.lstrip("+-").lower() not in _INFINITY:
        raise ParseError(target, raw, f"parsing {raw!r}: value out of range")
    return narrow_float(value, bits, raw)


def narrow_float(value: float, bits: int, raw: str) -> float:
    if bits != 32:
        return value
    try:
        narrowed = struct.unpack("f", struct.pack("f", value))[0]
    except OverflowError as exc:
        raise ParseError("float32", raw, f"parsing {raw!r}: value out of range") from exc
    if math.isinf(narrowed) and not math.isinf(value):
        raise ParseError("float32", raw, f"parsing {raw!r}: value out of range")
    return narrowed


def parse_boolean(raw: str) -> bool:
    """Parse 1/t/true or 0/f/false, case-insensitive."""
    folded = raw.lower()
    if folded in _TRUE:
        return True
    if folded in _FALSE:
        return False
    raise ParseError("bool", raw, f"parsing {raw!r}: invalid syntax")


def parse_timestamp(raw: str, cls: type = datetime) -> datetime:
    """Parse an RFC 3339 date-time into a timezone-aware ``cls`` instance."""
    match = _RFC3339.fullmatch(raw)
    if match is None:
        raise ParseError(
            "timestamp",
            raw,
            f"parsing time {raw!r} as RFC 3339: cannot parse",
        )
    parts = match.groupdict()
    fraction = parts["fraction"] or ""
    microsecond = int((fraction + "000000")[:6])
    try:
        return cls(
            int(parts["year"]),
            int(parts["month"]),
            int(parts["day"]),
            int(parts["hour"]),
            int(parts["minute"]),
            int(parts["second"]),
            microsecond,
            tzinfo=_offset(parts["offset"]),
        )
    except ValueError as exc:
        raise ParseError("timestamp", raw, str(exc)) from exc


def _offset(text: str) -> timezone:
    if text in ("Z", "z"):
        return UTC
    sign = -1 if text[0] == "-" else 1
    hours, minutes = int(text[1:3]), int(text[4:6])
    if minutes >= 60:
        raise ValueError(f"time zone offset minutes out of range: {text}")
    return timezone(sign * timedelta(hours=hours, minutes=minutes))
