r"""backpace - Declarative backoff strategies for retry pacing.

This package turns a declarative backoff strategy (constant,
exponential, Fibonacci, or disabled), with bounds on the delay, the
number of retries and the total wait, plus optional jitter, into the
concrete sequence of delays to sleep between retry attempts. It does
not sleep or retry by itself: the retry loop of the caller pulls one
delay per failed attempt and stops when the sequence is exhausted.

Key Features:
    - Immutable, validated strategy descriptors with documented defaults
    - Constant, exponential and Fibonacci growth, with per-delay cap
    - Total delay budget for exponential backoff
    - Reproducible jitter from an explicit seed or injected entropy
    - Loading from mappings, environment variables and TOML files

Example:
    ```pycon
    >>> from datetime import timedelta
    >>> from backpace import ExponentialBackoffConfig, build_backoff
    >>> config = ExponentialBackoffConfig(
    ...     initial_delay=timedelta(milliseconds=100),
    ...     max_delay=timedelta(milliseconds=800),
    ...     max_retries=5,
    ...     max_total_delay=timedelta(milliseconds=1501),
    ...     jitter_enabled=False,
    ... )
    >>> [delay // timedelta(milliseconds=1) for delay in build_backoff(config)]
    [100, 200, 400, 800]

    ```
"""

from __future__ import annotations

__all__ = [
    "BackoffConfig",
    "BackoffError",
    "BaseBackoff",
    "ConstantBackoffConfig",
    "ExponentialBackoffConfig",
    "FibonacciBackoffConfig",
    "InvalidConfigurationError",
    "NoBackoffConfig",
    "UnknownStrategyError",
    "__version__",
    "build_backoff",
    "load_backoff_config_from_env",
    "load_backoff_config_from_toml",
    "make_backoff_config",
    "parse_backoff_config",
]

from importlib.metadata import PackageNotFoundError, version

from backpace.backoff import BaseBackoff, build_backoff
from backpace.config import (
    BackoffConfig,
    ConstantBackoffConfig,
    ExponentialBackoffConfig,
    FibonacciBackoffConfig,
    NoBackoffConfig,
    load_backoff_config_from_env,
    load_backoff_config_from_toml,
    make_backoff_config,
    parse_backoff_config,
)
from backpace.exceptions import BackoffError, InvalidConfigurationError, UnknownStrategyError

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
