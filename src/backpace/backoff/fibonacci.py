r"""Fibonacci backoff generator."""

from __future__ import annotations

__all__ = ["FibonacciBackoff"]

from typing import TYPE_CHECKING

from backpace.backoff.base import BaseBackoff
from backpace.utils.duration import saturating_add

if TYPE_CHECKING:
    from datetime import timedelta

    from backpace.backoff.jitter import Jitter


class FibonacciBackoff(BaseBackoff):
    """Fibonacci backoff generator.

    The un-capped delays follow the Fibonacci recurrence with
    ``initial_delay`` as unit: ``initial_delay`` times 1, 1, 2, 3, 5, 8,
    ... Each delay is capped at ``max_delay``, then jittered and
    capped again. This ramps up more gradually than exponential backoff.

    Args:
        initial_delay: The unit of the sequence.
        max_delay: Optional cap of every single delay.
        max_retries: Maximum number of delays, or ``None`` for no limit.
        jitter: Optional jitter transform.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from backpace.backoff import FibonacciBackoff
        >>> backoff = FibonacciBackoff(
        ...     initial_delay=timedelta(milliseconds=100),
        ...     max_delay=timedelta(milliseconds=800),
        ...     max_retries=7,
        ... )
        >>> [delay // timedelta(milliseconds=1) for delay in backoff]
        [100, 100, 200, 300, 500, 800, 800]

        ```
    """

    def __init__(
        self,
        initial_delay: timedelta,
        max_delay: timedelta | None = None,
        max_retries: int | None = None,
        jitter: Jitter | None = None,
    ) -> None:
        super().__init__(max_retries=max_retries, jitter=jitter)
        self.initial_delay = initial_delay
        self.max_delay = max_delay
        # The next two un-capped magnitudes of the sequence
        self._current = initial_delay
        self._following = initial_delay

    def _next_candidate(self) -> timedelta:
        magnitude = self._current
        self._current, self._following = (
            self._following,
            saturating_add(self._current, self._following),
        )
        if self.max_delay is None:
            return self.jitter.apply(magnitude)
        return min(self.jitter.apply(min(magnitude, self.max_delay)), self.max_delay)
