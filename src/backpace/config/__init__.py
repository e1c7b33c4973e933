r"""Strategy descriptors, their defaults, validation and loading."""

from __future__ import annotations

__all__ = [
    "DEFAULT_DELAY",
    "DEFAULT_FACTOR",
    "DEFAULT_JITTER_ENABLED",
    "DEFAULT_JITTER_SEED",
    "DEFAULT_MAX_DELAY",
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_MAX_TOTAL_DELAY",
    "BackoffConfig",
    "BackoffSettings",
    "ConstantBackoffConfig",
    "ExponentialBackoffConfig",
    "FibonacciBackoffConfig",
    "NoBackoffConfig",
    "load_backoff_config_from_env",
    "load_backoff_config_from_toml",
    "make_backoff_config",
    "parse_backoff_config",
]

from backpace.config.defaults import (
    DEFAULT_DELAY,
    DEFAULT_FACTOR,
    DEFAULT_JITTER_ENABLED,
    DEFAULT_JITTER_SEED,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_TOTAL_DELAY,
)
from backpace.config.loader import (
    BackoffSettings,
    load_backoff_config_from_env,
    load_backoff_config_from_toml,
    parse_backoff_config,
)
from backpace.config.strategy import (
    BackoffConfig,
    ConstantBackoffConfig,
    ExponentialBackoffConfig,
    FibonacciBackoffConfig,
    NoBackoffConfig,
    make_backoff_config,
)
