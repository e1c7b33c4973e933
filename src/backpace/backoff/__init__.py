r"""Backoff generators producing retry delay sequences.

This package provides one generator per backoff strategy (disabled,
constant, exponential and Fibonacci), the jitter transform, and
``build_backoff`` which turns a strategy descriptor into a generator.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoff",
    "ConstantBackoff",
    "ExponentialBackoff",
    "FibonacciBackoff",
    "JITTER_MAX_MULTIPLIER",
    "JITTER_MIN_MULTIPLIER",
    "Jitter",
    "NoBackoff",
    "build_backoff",
    "build_jitter",
    "system_entropy",
]

from backpace.backoff.base import BaseBackoff
from backpace.backoff.builder import build_backoff, build_jitter
from backpace.backoff.constant import ConstantBackoff
from backpace.backoff.exponential import ExponentialBackoff
from backpace.backoff.fibonacci import FibonacciBackoff
from backpace.backoff.jitter import (
    JITTER_MAX_MULTIPLIER,
    JITTER_MIN_MULTIPLIER,
    Jitter,
    system_entropy,
)
from backpace.backoff.no_backoff import NoBackoff
