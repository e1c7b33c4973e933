r"""Disabled backoff: never retry with a delay."""

from __future__ import annotations

__all__ = ["NoBackoff"]

from typing import TYPE_CHECKING

from backpace.backoff.base import BaseBackoff

if TYPE_CHECKING:
    from datetime import timedelta


class NoBackoff(BaseBackoff):
    """Backoff generator that is exhausted from creation.

    Example:
        ```pycon
        >>> from backpace.backoff import NoBackoff
        >>> backoff = NoBackoff()
        >>> backoff.next_delay() is None
        True
        >>> list(backoff)
        []

        ```
    """

    def __init__(self) -> None:
        super().__init__()

    def _next_candidate(self) -> timedelta | None:
        self._exhaust("disabled")
        return None
