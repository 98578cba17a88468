"""Parsing of unit-suffixed numeric strings such as ``"45ms"`` or ``"1.2Mbps"``.

Values are converted to a base unit: milliseconds for durations, bits per
second for bitrates.  Anything that does not start with a number, carries an
unknown unit or is not finite parses to ``None`` so that a missing value is
never confused with a legitimate zero.
"""
from __future__ import annotations

import logging
import math
import re

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Unit tables
# ---------------------------------------------------------------------------

DURATION_UNITS: dict[str, float] = {
    "": 1.0,
    "ms": 1.0,
    "s": 1000.0,
    "sec": 1000.0,
    "us": 0.001,
    "µs": 0.001,
}

BITRATE_UNITS: dict[str, float] = {
    "": 1.0,
    "bps": 1.0,
    "b/s": 1.0,
    "kbps": 1_000.0,
    "kb/s": 1_000.0,
    "mbps": 1_000_000.0,
    "mb/s": 1_000_000.0,
    "gbps": 1_000_000_000.0,
    "gb/s": 1_000_000_000.0,
}

_NUMBER_WITH_UNIT = re.compile(
    r"^\s*(?P<number>[-+]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][-+]?\d+)?)\s*(?P<unit>[^\s\d]*)\s*$"
)


def parse_unit_value(value: object, units: dict[str, float]) -> float | None:
    """Parse *value* and scale it into the base unit of *units*.

    Parameters
    ----------
    value:
        A string such as ``"24kbps"``, a plain number, or anything else.
    units:
        Mapping of lower-case unit suffix to its multiplier into the base
        unit.  The empty suffix stands for a bare number.

    Returns
    -------
    float | None
        The scaled value, or ``None`` when it cannot be parsed.

    Examples
    --------
    >>> parse_unit_value("24kbps", BITRATE_UNITS)
    24000.0
    >>> parse_unit_value("N/A", BITRATE_UNITS) is None
    True
    """
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, (int, float)):
        number = float(value)
        return number if math.isfinite(number) else None
    if not isinstance(value, str):
        return None

    match = _NUMBER_WITH_UNIT.match(value)
    if match is None:
        logger.debug("Unparseable measurement %r", value)
        return None

    unit = match.group("unit").lower()
    multiplier = units.get(unit)
    if multiplier is None:
        logger.debug("Unknown unit %r in %r", unit, value)
        return None

    number = float(match.group("number")) * multiplier
    return number if math.isfinite(number) else None


def parse_duration_ms(value: object) -> float | None:
    """Parse a duration such as ``"45ms"`` into milliseconds."""
    return parse_unit_value(value, DURATION_UNITS)


def parse_bitrate_bps(value: object) -> float | None:
    """Parse a bitrate such as ``"1.2Mbps"`` into bits per second."""
    return parse_unit_value(value, BITRATE_UNITS)


def format_kbps(bps: float) -> str:
    """Render *bps* as kilobits per second with two decimals."""
    return f"{bps / 1000:.2f} Kbps"


__all__ = [
    "BITRATE_UNITS",
    "DURATION_UNITS",
    "format_kbps",
    "parse_bitrate_bps",
    "parse_duration_ms",
    "parse_unit_value",
]
