r"""Strategy descriptors: immutable, validated descriptions of a backoff
curve and its bounds.

A descriptor is one of four frozen dataclasses. Omitted fields take the
defaults of ``backpace.config.defaults``; bounds explicitly set to
``None`` are unbounded. Descriptors hold no iteration state and can be
reused to build any number of independent generators with
``backpace.backoff.build_backoff``.
"""

from __future__ import annotations

__all__ = [
    "BackoffConfig",
    "ConstantBackoffConfig",
    "ExponentialBackoffConfig",
    "FibonacciBackoffConfig",
    "NoBackoffConfig",
    "STRATEGY_NAMES",
    "make_backoff_config",
]

from dataclasses import dataclass, fields
from datetime import timedelta
from typing import Any, Union

from backpace.config.defaults import (
    DEFAULT_DELAY,
    DEFAULT_FACTOR,
    DEFAULT_JITTER_ENABLED,
    DEFAULT_JITTER_SEED,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_TOTAL_DELAY,
)
from backpace.config.validation import (
    validate_duration,
    validate_factor,
    validate_jitter_enabled,
    validate_jitter_seed,
    validate_max_retries,
)
from backpace.exceptions import InvalidConfigurationError, UnknownStrategyError


@dataclass(frozen=True)
class NoBackoffConfig:
    """Descriptor of the disabled strategy: never retry with a delay.

    Example:
        ```pycon
        >>> from backpace.config import NoBackoffConfig
        >>> NoBackoffConfig()
        NoBackoffConfig()

        ```
    """


@dataclass(frozen=True)
class ConstantBackoffConfig:
    """Descriptor of the constant strategy.

    Every delay equals ``delay`` (before jitter).

    Args:
        delay: The delay between two attempts. Must be >= 0.
        max_retries: Maximum number of delays, or ``None`` for an
            unbounded sequence. Must be >= 0.
        jitter_enabled: Whether each delay is randomly perturbed.
        jitter_seed: Seed of the jitter generator, or ``None`` to seed
            it from process entropy. Must fit in 64 unsigned bits.

    Raises:
        InvalidConfigurationError: If a field is out of range.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from backpace.config import ConstantBackoffConfig
        >>> config = ConstantBackoffConfig(delay=timedelta(seconds=1), max_retries=3)
        >>> config.jitter_enabled
        True
        >>> config.max_retries
        3

        ```
    """

    delay: timedelta = DEFAULT_DELAY
    max_retries: int | None = DEFAULT_MAX_RETRIES
    jitter_enabled: bool = DEFAULT_JITTER_ENABLED
    jitter_seed: int | None = DEFAULT_JITTER_SEED

    def __post_init__(self) -> None:
        validate_duration("delay", self.delay)
        validate_max_retries(self.max_retries)
        validate_jitter_enabled(self.jitter_enabled)
        validate_jitter_seed(self.jitter_seed)


@dataclass(frozen=True)
class ExponentialBackoffConfig:
    """Descriptor of the exponential strategy.

    The un-capped delays are ``initial_delay``, ``initial_delay * factor``,
    ``initial_delay * factor ** 2``, ... Each delay is capped at
    ``max_delay`` and the sequence stops before the sum of the emitted
    delays would exceed ``max_total_delay``.

    Args:
        initial_delay: The first delay. Must be >= 0.
        factor: Growth factor applied after each delay. Must be > 0.
            It is used with single (32-bit) float precision.
        max_delay: Cap of every single delay, or ``None`` for no cap.
        max_retries: Maximum number of delays, or ``None`` for an
            unbounded sequence.
        max_total_delay: Budget for the sum of all delays, or ``None``
            for no budget.
        jitter_enabled: Whether each delay is randomly perturbed.
        jitter_seed: Seed of the jitter generator, or ``None`` to seed
            it from process entropy.

    Raises:
        InvalidConfigurationError: If a field is out of range, e.g. a
            non-positive factor.

    Example:
        ```pycon
        >>> from datetime import timedelta
        >>> from backpace.config import ExponentialBackoffConfig
        >>> config = ExponentialBackoffConfig(factor=3.5, max_delay=None)
        >>> config.initial_delay
        datetime.timedelta(microseconds=500000)
        >>> config.max_delay is None
        True
        >>> config.max_total_delay
        datetime.timedelta(seconds=60)

        ```
    """

    initial_delay: timedelta = DEFAULT_DELAY
    factor: float = DEFAULT_FACTOR
    max_delay: timedelta | None = DEFAULT_MAX_DELAY
    max_retries: int | None = DEFAULT_MAX_RETRIES
    max_total_delay: timedelta | None = DEFAULT_MAX_TOTAL_DELAY
    jitter_enabled: bool = DEFAULT_JITTER_ENABLED
    jitter_seed: int | None = DEFAULT_JITTER_SEED

    def __post_init__(self) -> None:
        validate_duration("initial_delay", self.initial_delay)
        validate_factor(self.factor)
        validate_duration("max_delay", self.max_delay, nullable=True)
        validate_max_retries(self.max_retries)
        validate_duration("max_total_delay", self.max_total_delay, nullable=True)
        validate_jitter_enabled(self.jitter_enabled)
        validate_jitter_seed(self.jitter_seed)


@dataclass(frozen=True)
class FibonacciBackoffConfig:
    """Descriptor of the Fibonacci strategy.

    The un-capped delays are ``initial_delay`` times 1, 1, 2, 3, 5, 8,
    ... Each delay is capped at ``max_delay``. There is no total budget.

    Args:
        initial_delay: The unit of the sequence. Must be >= 0.
        max_delay: Cap of every single delay, or ``None`` for no cap.
        max_retries: Maximum number of delays, or ``None`` for an
            unbounded sequence.
        jitter_enabled: Whether each delay is randomly perturbed.
        jitter_seed: Seed of the jitter generator, or ``None`` to seed
            it from process entropy.

    Raises:
        InvalidConfigurationError: If a field is out of range.
    """

    initial_delay: timedelta = DEFAULT_DELAY
    max_delay: timedelta | None = DEFAULT_MAX_DELAY
    max_retries: int | None = DEFAULT_MAX_RETRIES
    jitter_enabled: bool = DEFAULT_JITTER_ENABLED
    jitter_seed: int | None = DEFAULT_JITTER_SEED

    def __post_init__(self) -> None:
        validate_duration("initial_delay", self.initial_delay)
        validate_duration("max_delay", self.max_delay, nullable=True)
        validate_max_retries(self.max_retries)
        validate_jitter_enabled(self.jitter_enabled)
        validate_jitter_seed(self.jitter_seed)


BackoffConfig = Union[
    NoBackoffConfig, ConstantBackoffConfig, ExponentialBackoffConfig, FibonacciBackoffConfig
]

# Strategy tags (lower case) mapped to their descriptor class
STRATEGY_NAMES: dict[str, type[BackoffConfig]] = {
    "nobackoff": NoBackoffConfig,
    "disabled": NoBackoffConfig,
    "constant": ConstantBackoffConfig,
    "exponential": ExponentialBackoffConfig,
    "fibonacci": FibonacciBackoffConfig,
}


def make_backoff_config(strategy: str, **fields_: Any) -> BackoffConfig:
    """Build a strategy descriptor from a tag and optional fields.

    Omitted fields take their default value. Pass ``None`` to make a
    bound (``max_retries``, ``max_delay``, ``max_total_delay``)
    explicitly unbounded.

    Args:
        strategy: The strategy tag, matched case-insensitively:
            ``"Constant"``, ``"Exponential"``, ``"Fibonacci"``, or
            ``"NoBackoff"`` / ``"Disabled"``.
        **fields_: The descriptor fields of that strategy.

    Returns:
        The validated descriptor.

    Raises:
        UnknownStrategyError: If the tag names no known strategy.
        InvalidConfigurationError: If a field does not belong to the
            strategy or is out of range.

    Example:
        ```pycon
        >>> from backpace.config import make_backoff_config
        >>> config = make_backoff_config("Exponential", factor=3.0, max_retries=None)
        >>> config.factor, config.max_retries
        (3.0, None)
        >>> make_backoff_config("disabled")
        NoBackoffConfig()

        ```
    """
    config_cls = STRATEGY_NAMES.get(strategy.lower()) if isinstance(strategy, str) else None
    if config_cls is None:
        raise UnknownStrategyError(strategy)

    known = {field.name for field in fields(config_cls)}
    unknown = sorted(set(fields_) - known)
    if unknown:
        msg = (
            f"unknown field(s) for {config_cls.__name__}: {', '.join(unknown)} "
            f"(expected a subset of: {', '.join(sorted(known)) or 'no fields'})"
        )
        raise InvalidConfigurationError(msg)
    return config_cls(**fields_)
