r"""Constant backoff generator."""

from __future__ import annotations

__all__ = ["ConstantBackoff"]

from typing import TYPE_CHECKING

from backpace.backoff.base import BaseBackoff

if TYPE_CHECKING:
    from datetime import timedelta

    from backpace.backoff.jitter import Jitter


class ConstantBackoff(BaseBackoff):
    """Constant backoff generator.

    Produces ``delay`` (jittered if enabled) ``max_retries`` times. With
    ``max_retries=None`` it never stops on its own and the caller must
    apply its own stopping policy.

    Args:
        delay: The delay between two attempts.
        max_retries: Maximum number of delays, or ``None`` for no limit.
        jitter: Optional jitter transform.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from backpace.backoff import ConstantBackoff
        >>> backoff = ConstantBackoff(delay=timedelta(seconds=1), max_retries=3)
        >>> [delay.total_seconds() for delay in backoff]
        [1.0, 1.0, 1.0]
        >>> backoff.exhausted
        True

        ```
    """

    def __init__(
        self, delay: timedelta, max_retries: int | None = None, jitter: Jitter | None = None
    ) -> None:
        super().__init__(max_retries=max_retries, jitter=jitter)
        self.delay = delay

    def _next_candidate(self) -> timedelta:
        return self.jitter.apply(self.delay)
