r"""Validation of strategy descriptor fields.

Every check raises ``InvalidConfigurationError`` so that impossible
bounds surface when a descriptor is built, never while a generator is
iterated.
"""

from __future__ import annotations

__all__ = [
    "validate_duration",
    "validate_factor",
    "validate_jitter_enabled",
    "validate_jitter_seed",
    "validate_max_retries",
]

import math
import struct
from datetime import timedelta

from backpace.exceptions import InvalidConfigurationError

MAX_JITTER_SEED = 2**64 - 1


def validate_duration(name: str, value: timedelta | None, *, nullable: bool = False) -> None:
    """Validate a duration field.

    Args:
        name: The field name, used in error messages.
        value: The duration to validate.
        nullable: Whether ``None`` (unbounded) is accepted.

    Raises:
        InvalidConfigurationError: If the value is not a ``timedelta``
            or is negative.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from backpace.config.validation import validate_duration
        >>> validate_duration("delay", timedelta(0))
        >>> validate_duration("max_delay", None, nullable=True)
        >>> validate_duration("delay", timedelta(seconds=-1))  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        backpace.exceptions.InvalidConfigurationError: delay must be >= 0, got -1 day, 23:59:59

        ```
    """
    if value is None and nullable:
        return
    if not isinstance(value, timedelta):
        msg = f"{name} must be a timedelta, got {value!r}"
        raise InvalidConfigurationError(msg)
    if value < timedelta(0):
        msg = f"{name} must be >= 0, got {value}"
        raise InvalidConfigurationError(msg)


def validate_max_retries(max_retries: int | None) -> None:
    """Validate ``max_retries``: ``None`` (unbounded) or an integer >=
    0."""
    if max_retries is None:
        return
    if isinstance(max_retries, bool) or not isinstance(max_retries, int):
        msg = f"max_retries must be an int or None, got {max_retries!r}"
        raise InvalidConfigurationError(msg)
    if max_retries < 0:
        msg = f"max_retries must be >= 0, got {max_retries}"
        raise InvalidConfigurationError(msg)


def validate_factor(factor: float) -> None:
    """Validate the exponential growth factor.

    The factor must be a finite number > 0 that fits in a 32-bit float,
    which is the precision used by the exponential generator.

    Raises:
        InvalidConfigurationError: If the factor is not a positive,
            finite, single-precision representable number.

    Example:
        ```pycon
        >>> from backpace.config.validation import validate_factor
        >>> validate_factor(2.0)
        >>> validate_factor(0.0)  # doctest: +SKIP
        Traceback (most recent call last):
        ...
        backpace.exceptions.InvalidConfigurationError: factor must be > 0, got 0.0

        ```
    """
    if isinstance(factor, bool) or not isinstance(factor, (int, float)):
        msg = f"factor must be a number, got {factor!r}"
        raise InvalidConfigurationError(msg)
    if not math.isfinite(factor):
        msg = f"factor must be finite, got {factor}"
        raise InvalidConfigurationError(msg)
    if factor <= 0:
        msg = f"factor must be > 0, got {factor}"
        raise InvalidConfigurationError(msg)
    try:
        (single,) = struct.unpack("f", struct.pack("f", factor))
    except OverflowError as exc:
        msg = f"factor must fit in a 32-bit float, got {factor}"
        raise InvalidConfigurationError(msg) from exc
    if math.isinf(single):
        msg = f"factor must fit in a 32-bit float, got {factor}"
        raise InvalidConfigurationError(msg)
    if single == 0:
        msg = f"factor rounds to 0 as a 32-bit float, got {factor}"
        raise InvalidConfigurationError(msg)


def validate_jitter_enabled(jitter_enabled: bool) -> None:
    if not isinstance(jitter_enabled, bool):
        msg = f"jitter_enabled must be a bool, got {jitter_enabled!r}"
        raise InvalidConfigurationError(msg)


def validate_jitter_seed(jitter_seed: int | None) -> None:
    """Validate ``jitter_seed``: ``None`` or an unsigned 64-bit
    integer."""
    if jitter_seed is None:
        return
    if isinstance(jitter_seed, bool) or not isinstance(jitter_seed, int):
        msg = f"jitter_seed must be an int or None, got {jitter_seed!r}"
        raise InvalidConfigurationError(msg)
    if not 0 <= jitter_seed <= MAX_JITTER_SEED:
        msg = f"jitter_seed must be in [0, {MAX_JITTER_SEED}], got {jitter_seed}"
        raise InvalidConfigurationError(msg)
