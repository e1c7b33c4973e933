r"""Unit tests for ExponentialBackoff generator."""

from __future__ import annotations

from datetime import timedelta

import pytest

from backpace.backoff import ExponentialBackoff, Jitter
from tests.helpers import drain, to_millis


def test_exponential_backoff_basic() -> None:
    """Test basic exponential growth without caps."""
    backoff = ExponentialBackoff(
        initial_delay=timedelta(milliseconds=100), factor=2.0, max_retries=5
    )
    assert to_millis(drain(backoff)) == [100, 200, 400, 800, 1600]


def test_exponential_backoff_with_max_delay() -> None:
    """Test that every delay is capped at max_delay."""
    backoff = ExponentialBackoff(
        initial_delay=timedelta(milliseconds=100),
        factor=2.0,
        max_delay=timedelta(milliseconds=800),
        max_retries=5,
    )
    assert to_millis(drain(backoff)) == [100, 200, 400, 800, 800]


def test_exponential_backoff_with_max_total_delay() -> None:
    """Test that the delay exceeding the total budget is dropped."""
    backoff = ExponentialBackoff(
        initial_delay=timedelta(milliseconds=100),
        factor=2.0,
        max_delay=timedelta(milliseconds=800),
        max_retries=5,
        max_total_delay=timedelta(milliseconds=1501),
    )
    assert to_millis(drain(backoff)) == [100, 200, 400, 800]
    assert backoff.exhausted
    assert backoff.cumulative_delay == timedelta(milliseconds=1500)


def test_exponential_backoff_max_total_delay_reached_exactly() -> None:
    """Test that a delay reaching the budget exactly is still
    emitted."""
    backoff = ExponentialBackoff(
        initial_delay=timedelta(milliseconds=100),
        factor=2.0,
        max_retries=None,
        max_total_delay=timedelta(milliseconds=700),
    )
    assert to_millis(drain(backoff)) == [100, 200, 400]


def test_exponential_backoff_budget_drop_is_not_truncated() -> None:
    """Test that the last delay is not shortened to fit the budget."""
    backoff = ExponentialBackoff(
        initial_delay=timedelta(seconds=1),
        factor=2.0,
        max_retries=None,
        max_total_delay=timedelta(seconds=10),
    )
    # 1 + 2 + 4 = 7, the next delay (8) would exceed 10 and is dropped
    assert to_millis(drain(backoff)) == [1000, 2000, 4000]


def test_exponential_backoff_budget_exhaustion_is_terminal() -> None:
    """Test that the generator stays exhausted once over budget."""
    backoff = ExponentialBackoff(
        initial_delay=timedelta(seconds=2),
        factor=1.0,
        max_retries=None,
        max_total_delay=timedelta(seconds=3),
    )
    assert backoff.next_delay() == timedelta(seconds=2)
    assert backoff.next_delay() is None
    assert backoff.next_delay() is None


def test_exponential_backoff_zero_max_retries() -> None:
    backoff = ExponentialBackoff(initial_delay=timedelta(seconds=1), factor=2.0, max_retries=0)
    assert drain(backoff) == []


def test_exponential_backoff_fractional_factor() -> None:
    """Test growth with a non-integer factor."""
    backoff = ExponentialBackoff(initial_delay=timedelta(milliseconds=100), factor=1.5, max_retries=4)
    assert to_millis(drain(backoff)) == [100, 150, 225, 337]


def test_exponential_backoff_decreasing_factor_below_cap() -> None:
    """Test that a factor below 1 shrinks the delays under the cap."""
    backoff = ExponentialBackoff(
        initial_delay=timedelta(seconds=8),
        factor=0.5,
        max_delay=timedelta(seconds=1),
        max_retries=6,
    )
    assert to_millis(drain(backoff)) == [1000, 1000, 1000, 1000, 500, 250]


def test_exponential_backoff_factor_single_precision() -> None:
    """Test that the factor is used with 32-bit float precision."""
    backoff = ExponentialBackoff(initial_delay=timedelta(seconds=1), factor=1.1)
    assert backoff.factor == pytest.approx(1.1, rel=1e-7)
    assert backoff.factor != 1.1


def test_exponential_backoff_zero_initial_delay() -> None:
    backoff = ExponentialBackoff(initial_delay=timedelta(0), factor=2.0, max_retries=3)
    assert drain(backoff) == [timedelta(0)] * 3


def test_exponential_backoff_saturates_instead_of_overflowing() -> None:
    """Test that unbounded growth saturates at timedelta.max."""
    backoff = ExponentialBackoff(initial_delay=timedelta(days=1), factor=1000.0, max_retries=None)
    delays = drain(backoff, limit=10)
    assert len(delays) == 10
    assert delays[-1] == timedelta.max


def test_exponential_backoff_with_jitter_never_exceeds_max_delay() -> None:
    """Test that jitter does not push delays above max_delay."""
    backoff = ExponentialBackoff(
        initial_delay=timedelta(milliseconds=100),
        factor=2.0,
        max_delay=timedelta(milliseconds=800),
        max_retries=100,
        jitter=Jitter.from_seed(7),
    )
    delays = drain(backoff)
    assert len(delays) == 100
    assert max(delays) <= timedelta(milliseconds=800)


def test_exponential_backoff_with_jitter_respects_budget() -> None:
    """Test that jittered delays never exceed the total budget."""
    backoff = ExponentialBackoff(
        initial_delay=timedelta(milliseconds=100),
        factor=2.0,
        max_delay=timedelta(seconds=1),
        max_retries=None,
        max_total_delay=timedelta(seconds=5),
        jitter=Jitter.from_seed(1337),
    )
    delays = drain(backoff)
    assert backoff.exhausted
    assert sum(delays, timedelta(0)) <= timedelta(seconds=5)
    assert backoff.cumulative_delay == sum(delays, timedelta(0))


def test_exponential_backoff_small_factor_keeps_growing() -> None:
    """Test that a factor close to 1 is not lost to per-step rounding."""
    backoff = ExponentialBackoff(
        initial_delay=timedelta(milliseconds=1), factor=1.0004, max_retries=2000
    )
    delays = drain(backoff, limit=2000)
    expected = timedelta(microseconds=1000 * backoff.factor**1999)
    assert len(delays) == 2000
    assert delays[-1] > timedelta(milliseconds=2)
    assert abs(delays[-1] - expected) <= timedelta(microseconds=1)


def test_exponential_backoff_fractional_factor_rounds_exact_magnitude() -> None:
    """Test that each delay is the exact magnitude rounded, not the
    product of rounded delays."""
    backoff = ExponentialBackoff(
        initial_delay=timedelta(microseconds=3), factor=1.5, max_retries=6
    )
    assert drain(backoff) == [timedelta(microseconds=us) for us in (3, 4, 7, 10, 15, 23)]
