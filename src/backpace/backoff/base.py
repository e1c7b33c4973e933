r"""Abstract base class for backoff generators."""

from __future__ import annotations

__all__ = ["BaseBackoff"]

import logging
from abc import ABC, abstractmethod
from datetime import timedelta
from typing import TYPE_CHECKING

from backpace.backoff.jitter import Jitter
from backpace.utils.duration import saturating_add
from backpace.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Iterator

logger: logging.Logger = logging.getLogger(__name__)


class BaseBackoff(ABC):
    """Abstract base class for backoff generators.

    A backoff generator produces the delays to wait between the
    attempts of one retry series. It is created right before the first
    attempt and advanced once per failed attempt, until it is exhausted
    or the operation succeeds. Exhaustion is terminal: once a generator
    has signalled it, every later call signals it again.

    Generators are iterators: ``next()`` returns the next delay or
    raises ``StopIteration`` when exhausted. ``next_delay()`` does the
    same but returns ``None`` instead of raising.

    Args:
        max_retries: Maximum number of delays to produce, or ``None``
            for no limit.
        jitter: The jitter transform applied to every delay. Defaults
            to no jitter.

    Attributes:
        max_retries: Maximum number of delays to produce.
        jitter: The jitter transform.
    """

    def __init__(self, max_retries: int | None = None, jitter: Jitter | None = None) -> None:
        self.max_retries = max_retries
        self.jitter = jitter if jitter is not None else Jitter()
        self._attempt = 0
        self._cumulative_delay = timedelta(0)
        self._exhausted = False

    def __iter__(self) -> Iterator[timedelta]:
        return self

    def __next__(self) -> timedelta:
        delay = self.next_delay()
        if delay is None:
            raise StopIteration
        return delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(attempt={self._attempt}, "
            f"max_retries={self.max_retries}, exhausted={self._exhausted})"
        )

    @property
    def attempt(self) -> int:
        """The number of delays produced so far."""
        return self._attempt

    @property
    def cumulative_delay(self) -> timedelta:
        """The sum of all delays produced so far."""
        return self._cumulative_delay

    @property
    def exhausted(self) -> bool:
        """Whether the generator has signalled that no more delays
        follow."""
        return self._exhausted

    def next_delay(self) -> timedelta | None:
        """Return the delay to wait before the next attempt.

        Returns:
            The next delay, or ``None`` when the generator is exhausted
            and the caller should stop retrying.
        """
        if self._exhausted:
            return None
        if self.max_retries is not None and self._attempt >= self.max_retries:
            self._exhaust("max_retries")
            return None
        delay = self._next_candidate()
        if delay is None:
            return None
        self._attempt += 1
        self._cumulative_delay = saturating_add(self._cumulative_delay, delay)
        return delay

    def _exhaust(self, reason: str) -> None:
        self._exhausted = True
        log_structured(
            logger,
            logging.DEBUG,
            f"{self.__class__.__qualname__} exhausted after {self._attempt} delay(s) ({reason})",
            strategy=self.__class__.__qualname__,
            attempt=self._attempt,
            cumulative_delay=self._cumulative_delay,
            reason=reason,
        )

    @abstractmethod
    def _next_candidate(self) -> timedelta | None:
        """Compute the next delay, jitter included.

        Called only while the generator is active and below
        ``max_retries``. Implementations that hit their own stopping
        condition call ``_exhaust`` and return ``None``.

        Returns:
            The next delay, or ``None`` if the generator became
            exhausted.
        """
