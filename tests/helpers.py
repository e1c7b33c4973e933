from __future__ import annotations

__all__ = ["drain", "to_millis"]

from datetime import timedelta
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from backpace.backoff import BaseBackoff


def drain(backoff: BaseBackoff, limit: int = 1000) -> list[timedelta]:
    """Collect the delays of a generator, at most ``limit`` of them."""
    delays = []
    for delay in backoff:
        delays.append(delay)
        if len(delays) >= limit:
            break
    return delays


def to_millis(delays: list[timedelta]) -> list[int]:
    """Convert delays to whole milliseconds for readable assertions."""
    return [delay // timedelta(milliseconds=1) for delay in delays]
