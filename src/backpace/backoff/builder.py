r"""Build backoff generators from strategy descriptors."""

from __future__ import annotations

__all__ = ["build_backoff", "build_jitter"]

import logging
from typing import TYPE_CHECKING

from backpace.backoff.constant import ConstantBackoff
from backpace.backoff.exponential import ExponentialBackoff
from backpace.backoff.fibonacci import FibonacciBackoff
from backpace.backoff.jitter import Jitter, system_entropy
from backpace.backoff.no_backoff import NoBackoff
from backpace.config.strategy import (
    ConstantBackoffConfig,
    ExponentialBackoffConfig,
    FibonacciBackoffConfig,
    NoBackoffConfig,
)

if TYPE_CHECKING:
    from collections.abc import Callable

    from backpace.backoff.base import BaseBackoff
    from backpace.config.strategy import BackoffConfig

logger: logging.Logger = logging.getLogger(__name__)


def build_jitter(
    jitter_enabled: bool, jitter_seed: int | None, entropy: Callable[[], int] | None = None
) -> Jitter:
    """Build the jitter transform of a new generator.

    Args:
        jitter_enabled: Whether jitter is enabled.
        jitter_seed: Explicit seed, or ``None`` to draw one from
            ``entropy``.
        entropy: Source of seeds used when no explicit seed is given.
            Defaults to ``system_entropy``.

    Returns:
        The jitter transform. It is the identity if jitter is disabled,
        and no seed is drawn in that case.

    Example:
        ```pycon
        >>> from backpace.backoff import build_jitter
        >>> build_jitter(False, None).enabled
        False
        >>> build_jitter(True, 1337).enabled
        True

        ```
    """
    if not jitter_enabled:
        return Jitter()
    if jitter_seed is None:
        jitter_seed = (entropy or system_entropy)()
    return Jitter.from_seed(jitter_seed)


def build_backoff(config: BackoffConfig, entropy: Callable[[], int] | None = None) -> BaseBackoff:
    """Build a new backoff generator from a strategy descriptor.

    Build one generator per retry series: generators are stateful and
    must not be shared between concurrent series. The descriptor itself
    is not modified and can be reused.

    Args:
        config: The strategy descriptor.
        entropy: Source of jitter seeds used when the descriptor has
            jitter enabled but no explicit ``jitter_seed``. Defaults to
            ``system_entropy``. A generator built with
            ``entropy=lambda: s`` produces the same delays as one built
            from a descriptor with ``jitter_seed=s``.

    Returns:
        The backoff generator.

    Raises:
        TypeError: If ``config`` is not a strategy descriptor.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from backpace.backoff import build_backoff
        >>> from backpace.config import ConstantBackoffConfig
        >>> config = ConstantBackoffConfig(
        ...     delay=timedelta(seconds=1), max_retries=3, jitter_enabled=False
        ... )
        >>> [delay.total_seconds() for delay in build_backoff(config)]
        [1.0, 1.0, 1.0]

        ```
    """
    if isinstance(config, NoBackoffConfig):
        backoff: BaseBackoff = NoBackoff()
    elif isinstance(config, ConstantBackoffConfig):
        backoff = ConstantBackoff(
            delay=config.delay,
            max_retries=config.max_retries,
            jitter=build_jitter(config.jitter_enabled, config.jitter_seed, entropy),
        )
    elif isinstance(config, ExponentialBackoffConfig):
        backoff = ExponentialBackoff(
            initial_delay=config.initial_delay,
            factor=config.factor,
            max_delay=config.max_delay,
            max_retries=config.max_retries,
            max_total_delay=config.max_total_delay,
            jitter=build_jitter(config.jitter_enabled, config.jitter_seed, entropy),
        )
    elif isinstance(config, FibonacciBackoffConfig):
        backoff = FibonacciBackoff(
            initial_delay=config.initial_delay,
            max_delay=config.max_delay,
            max_retries=config.max_retries,
            jitter=build_jitter(config.jitter_enabled, config.jitter_seed, entropy),
        )
    else:
        msg = f"Expected a backoff strategy descriptor, got {type(config).__qualname__}"
        raise TypeError(msg)

    logger.debug(f"Built {backoff!r} from {config!r}")
    return backoff
