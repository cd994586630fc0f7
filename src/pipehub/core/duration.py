from __future__ import annotations

import re
from datetime import timedelta
from decimal import Decimal, InvalidOperation

from pipehub.core.exceptions import DurationParseError


# Nanoseconds per unit, following the Go duration literal syntax.
_UNITS = {
    "ns": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek mu
    "ms": 1_000_000,
    "s": 1_000_000_000,
    "m": 60 * 1_000_000_000,
    "h": 3600 * 1_000_000_000,
}

_COMPONENT = re.compile(r"([0-9]*\.?[0-9]*)([^0-9.]+)")

# Largest magnitude a duration may carry, in nanoseconds (signed 64-bit).
_MAX_NS = 2**63 - 1


def parse_duration(raw: str) -> timedelta:
    """Parse a duration literal such as ``"10s"``, ``"1h30m"`` or ``"1.5h"``.

    A literal is an optionally signed sequence of decimal numbers, each with an
    optional fraction and a mandatory unit (``ns``, ``us``, ``ms``, ``s``,
    ``m``, ``h``). ``"0"`` is accepted on its own. Sub-microsecond precision is
    truncated.
    """
    if not isinstance(raw, str):
        raise DurationParseError(str(raw), "duration must be a string")

    text = raw
    sign = 1
    if text[:1] in ("-", "+"):
        sign = -1 if text[0] == "-" else 1
        text = text[1:]

    if text == "0":
        return timedelta(0)
    if not text:
        raise DurationParseError(raw, "invalid duration")

    total_ns = Decimal(0)
    pos = 0
    while pos < len(text):
        match = _COMPONENT.match(text, pos)
        if match is None:
            raise DurationParseError(raw, "invalid duration")
        number, unit = match.group(1), match.group(2)
        if number in ("", "."):
            raise DurationParseError(raw, "invalid duration")
        if unit not in _UNITS:
            raise DurationParseError(raw, f"unknown unit {unit!r} in duration")
        try:
            total_ns += Decimal(number) * _UNITS[unit]
        except InvalidOperation as exc:
            raise DurationParseError(raw, "invalid duration") from exc
        pos = match.end()

    if total_ns > _MAX_NS:
        raise DurationParseError(raw, "invalid duration")

    microseconds = int(total_ns) // 1_000
    return timedelta(microseconds=sign * microseconds)
