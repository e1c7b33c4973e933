r"""Duration parsing and saturating arithmetic on ``timedelta``.

Durations are ``datetime.timedelta`` values everywhere in backpace.
This module parses human-readable duration text for the loader layer
and provides arithmetic helpers that clamp at ``timedelta.max``
instead of raising ``OverflowError``, so growth curves never fail while
they are iterated.
"""

from __future__ import annotations

__all__ = [
    "parse_duration",
    "saturating_add",
    "saturating_from_microseconds",
    "saturating_mul",
]

import re
from datetime import timedelta
from decimal import Decimal

# Number of nanoseconds in one unit
_UNIT_NANOSECONDS: dict[str, int] = {
    "ns": 1,
    "nanos": 1,
    "us": 1_000,
    "µs": 1_000,  # micro sign
    "μs": 1_000,  # greek mu
    "micros": 1_000,
    "ms": 1_000_000,
    "millis": 1_000_000,
    "s": 1_000_000_000,
    "sec": 1_000_000_000,
    "secs": 1_000_000_000,
    "second": 1_000_000_000,
    "seconds": 1_000_000_000,
    "m": 60_000_000_000,
    "min": 60_000_000_000,
    "mins": 60_000_000_000,
    "minute": 60_000_000_000,
    "minutes": 60_000_000_000,
    "h": 3_600_000_000_000,
    "hr": 3_600_000_000_000,
    "hour": 3_600_000_000_000,
    "hours": 3_600_000_000_000,
    "d": 86_400_000_000_000,
    "day": 86_400_000_000_000,
    "days": 86_400_000_000_000,
}

_TERM_PATTERN = re.compile(r"(?P<value>\d+(?:\.\d*)?|\.\d+)\s*(?P<unit>[a-zµμ]*)", re.IGNORECASE)
_SEPARATOR_PATTERN = re.compile(r"[\s+]*")


def parse_duration(text: str) -> timedelta:
    """Parse a human-readable duration.

    The text is one or more ``<number><unit>`` terms, optionally
    separated by whitespace or ``+``. The terms are summed. A single
    number without unit is a number of seconds. Precision below one
    microsecond is rounded to the nearest microsecond.

    Supported units: ``ns``, ``us``/``µs``, ``ms``, ``s``/``sec``/
    ``second(s)``, ``m``/``min``/``minute(s)``, ``h``/``hr``/``hour(s)``
    and ``d``/``day(s)``.

    Args:
        text: The duration text, e.g. ``"150ms"``, ``"5 s"`` or
            ``"1m 30s"``.

    Returns:
        The parsed duration.

    Raises:
        ValueError: If the text is empty, malformed, uses an unknown
            unit, or is out of the ``timedelta`` range.

    Example:
        ```pycon
        >>> from backpace.utils.duration import parse_duration
        >>> parse_duration("150ms")
        datetime.timedelta(microseconds=150000)
        >>> parse_duration("5 s")
        datetime.timedelta(seconds=5)
        >>> parse_duration("1m 30s")
        datetime.timedelta(seconds=90)
        >>> parse_duration("2.5")
        datetime.timedelta(seconds=2, microseconds=500000)

        ```
    """
    stripped = text.strip()
    if not stripped:
        msg = "duration must not be empty"
        raise ValueError(msg)

    total = Decimal(0)
    terms = 0
    unitless = False
    position = 0
    while position < len(stripped):
        match = _TERM_PATTERN.match(stripped, position)
        if match is None:
            msg = f"invalid duration {text!r}: unexpected text at position {position}"
            raise ValueError(msg)
        unit = match["unit"].lower()
        if not unit:
            unit = "s"
            unitless = True
        if unit not in _UNIT_NANOSECONDS:
            msg = f"invalid duration {text!r}: unknown unit {match['unit']!r}"
            raise ValueError(msg)
        total += Decimal(match["value"]) * _UNIT_NANOSECONDS[unit]
        terms += 1
        position = _SEPARATOR_PATTERN.match(stripped, match.end()).end()
        if position == len(stripped) and position > match.end():
            msg = f"invalid duration {text!r}: expected a term after the separator"
            raise ValueError(msg)

    if unitless and terms > 1:
        msg = f"invalid duration {text!r}: a unit is required when combining terms"
        raise ValueError(msg)

    try:
        return timedelta(microseconds=int(round(total / 1000)))
    except OverflowError as exc:
        msg = f"duration {text!r} is too large"
        raise ValueError(msg) from exc


def saturating_add(left: timedelta, right: timedelta) -> timedelta:
    """Add two durations, clamping at ``timedelta.max``.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from backpace.utils.duration import saturating_add
        >>> saturating_add(timedelta(seconds=1), timedelta(seconds=2))
        datetime.timedelta(seconds=3)
        >>> saturating_add(timedelta.max, timedelta(seconds=1)) == timedelta.max
        True

        ```
    """
    try:
        return left + right
    except OverflowError:
        return timedelta.max


def saturating_mul(delay: timedelta, factor: float) -> timedelta:
    """Scale a duration by a non-negative factor, clamping at
    ``timedelta.max``.

    The product is rounded to the nearest microsecond (ties to even),
    which is deterministic for a given duration and factor.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from backpace.utils.duration import saturating_mul
        >>> saturating_mul(timedelta(milliseconds=100), 2.0)
        datetime.timedelta(microseconds=200000)
        >>> saturating_mul(timedelta.max, 2.0) == timedelta.max
        True

        ```
    """
    try:
        return delay * factor
    except OverflowError:
        return timedelta.max


_MAX_MICROSECONDS = timedelta.max // timedelta(microseconds=1)


def saturating_from_microseconds(microseconds: float) -> timedelta:
    """Convert a non-negative number of microseconds to a duration,
    clamping at ``timedelta.max``.

    Fractional microseconds are rounded to the nearest microsecond
    (ties to even).

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from backpace.utils.duration import saturating_from_microseconds
        >>> saturating_from_microseconds(2224.6)
        datetime.timedelta(microseconds=2225)
        >>> saturating_from_microseconds(float("inf")) == timedelta.max
        True

        ```
    """
    if microseconds >= _MAX_MICROSECONDS:
        return timedelta.max
    return timedelta(microseconds=microseconds)
