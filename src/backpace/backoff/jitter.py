r"""Random jitter applied to backoff delays.

Jitter spreads the retries of many clients that failed at the same
time, so they do not hit the recovering service together. Each delay is
scaled by a multiplier drawn uniformly from
``[JITTER_MIN_MULTIPLIER, JITTER_MAX_MULTIPLIER]``, which keeps the
rough magnitude of the delay and never makes it negative.
"""

from __future__ import annotations

__all__ = ["JITTER_MAX_MULTIPLIER", "JITTER_MIN_MULTIPLIER", "Jitter", "system_entropy"]

import random
import secrets
from typing import TYPE_CHECKING

from backpace.utils.duration import saturating_mul

if TYPE_CHECKING:
    from datetime import timedelta

JITTER_MIN_MULTIPLIER = 0.5
JITTER_MAX_MULTIPLIER = 1.5


def system_entropy() -> int:
    """Return a 64-bit seed drawn from the operating system's random
    source."""
    return secrets.randbits(64)


class Jitter:
    """Jitter transform backed by a dedicated random generator.

    With no random generator, the transform is the identity. Otherwise
    every call to ``apply`` consumes exactly one draw from the
    generator, so two transforms built from the same seed perturb the
    same delays identically.

    Args:
        rng: The random generator, or ``None`` to disable jitter.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from backpace.backoff import Jitter
        >>> Jitter().apply(timedelta(seconds=1))
        datetime.timedelta(seconds=1)
        >>> first = Jitter.from_seed(1337).apply(timedelta(seconds=1))
        >>> second = Jitter.from_seed(1337).apply(timedelta(seconds=1))
        >>> first == second
        True
        >>> timedelta(seconds=0.5) <= first <= timedelta(seconds=1.5)
        True

        ```
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng

    @classmethod
    def from_seed(cls, seed: int) -> Jitter:
        """Create an enabled jitter transform seeded with ``seed``."""
        return cls(random.Random(seed))  # noqa: S311

    @property
    def enabled(self) -> bool:
        """Whether delays are perturbed."""
        return self.rng is not None

    def apply(self, delay: timedelta) -> timedelta:
        """Perturb a delay.

        Args:
            delay: The un-jittered delay.

        Returns:
            The delay scaled by a random multiplier, or the delay
            unchanged if jitter is disabled.
        """
        if self.rng is None:
            return delay
        return saturating_mul(delay, self.rng.uniform(JITTER_MIN_MULTIPLIER, JITTER_MAX_MULTIPLIER))
