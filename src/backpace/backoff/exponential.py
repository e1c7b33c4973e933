r"""Exponential backoff generator."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

import struct
from datetime import timedelta
from typing import TYPE_CHECKING

from backpace.backoff.base import BaseBackoff
from backpace.utils.duration import saturating_add, saturating_from_microseconds

if TYPE_CHECKING:
    from backpace.backoff.jitter import Jitter


def _to_float32(value: float) -> float:
    (single,) = struct.unpack("f", struct.pack("f", value))
    return single


class ExponentialBackoff(BaseBackoff):
    """Exponential backoff generator.

    The un-capped delays are obtained by repeated multiplication:
    ``initial_delay``, ``initial_delay * factor``,
    ``initial_delay * factor * factor``, ... The factor is rounded to a
    32-bit float. The magnitude is kept as an exact number of
    microseconds and only rounded when a delay is emitted, so small
    factors keep growing. Very large magnitudes saturate at
    ``timedelta.max``.

    For every attempt the magnitude is capped at ``max_delay``, then
    jittered; a jittered delay is capped again so no delay ever exceeds
    ``max_delay``. If the resulting candidate would push the sum of all
    emitted delays above ``max_total_delay``, the candidate is dropped
    (not truncated) and the generator is exhausted.

    Args:
        initial_delay: The first delay.
        factor: The growth factor, > 0.
        max_delay: Optional cap of every single delay.
        max_retries: Maximum number of delays, or ``None`` for no limit.
        max_total_delay: Optional budget for the sum of all delays.
        jitter: Optional jitter transform.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from backpace.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(
        ...     initial_delay=timedelta(milliseconds=100),
        ...     factor=2.0,
        ...     max_delay=timedelta(milliseconds=800),
        ...     max_retries=5,
        ... )
        >>> [delay // timedelta(milliseconds=1) for delay in backoff]
        [100, 200, 400, 800, 800]

        ```
    """

    def __init__(
        self,
        initial_delay: timedelta,
        factor: float,
        max_delay: timedelta | None = None,
        max_retries: int | None = None,
        max_total_delay: timedelta | None = None,
        jitter: Jitter | None = None,
    ) -> None:
        super().__init__(max_retries=max_retries, jitter=jitter)
        self.initial_delay = initial_delay
        self.factor = _to_float32(factor)
        self.max_delay = max_delay
        self.max_total_delay = max_total_delay
        # Un-capped magnitude in microseconds, unrounded
        self._magnitude: float = initial_delay // timedelta(microseconds=1)

    def _next_candidate(self) -> timedelta | None:
        candidate = saturating_from_microseconds(self._magnitude)
        if self.max_delay is not None:
            # Jitter never pushes a delay above the cap
            candidate = min(self.jitter.apply(min(candidate, self.max_delay)), self.max_delay)
        else:
            candidate = self.jitter.apply(candidate)

        if (
            self.max_total_delay is not None
            and saturating_add(self.cumulative_delay, candidate) > self.max_total_delay
        ):
            self._exhaust("max_total_delay")
            return None

        self._magnitude *= self.factor
        return candidate
