r"""Unit tests for duration parsing and saturating arithmetic."""

from __future__ import annotations

from datetime import timedelta

import pytest

from backpace.utils.duration import (
    parse_duration,
    saturating_add,
    saturating_from_microseconds,
    saturating_mul,
)

####################################
#     Tests for parse_duration     #
####################################


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("150ms", timedelta(milliseconds=150)),
        ("5 s", timedelta(seconds=5)),
        ("123s", timedelta(seconds=123)),
        ("750ms", timedelta(milliseconds=750)),
        ("250us", timedelta(microseconds=250)),
        ("250µs", timedelta(microseconds=250)),
        ("250μs", timedelta(microseconds=250)),
        ("2m", timedelta(minutes=2)),
        ("2 min", timedelta(minutes=2)),
        ("3 minutes", timedelta(minutes=3)),
        ("1h", timedelta(hours=1)),
        ("1 hr", timedelta(hours=1)),
        ("2 hours", timedelta(hours=2)),
        ("1d", timedelta(days=1)),
        ("7 days", timedelta(days=7)),
        ("10 sec", timedelta(seconds=10)),
        ("1 second", timedelta(seconds=1)),
        ("1.5s", timedelta(seconds=1, milliseconds=500)),
        (".5s", timedelta(milliseconds=500)),
        ("0", timedelta(0)),
        ("0ms", timedelta(0)),
        ("2.5", timedelta(seconds=2, milliseconds=500)),
        ("  30s  ", timedelta(seconds=30)),
        ("1MS", timedelta(milliseconds=1)),
    ],
)
def test_parse_duration(text: str, expected: timedelta) -> None:
    assert parse_duration(text) == expected


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        ("1m 30s", timedelta(seconds=90)),
        ("1m30s", timedelta(seconds=90)),
        ("1h + 30m", timedelta(minutes=90)),
        ("1d 2h 3m 4s 5ms", timedelta(days=1, hours=2, minutes=3, seconds=4, milliseconds=5)),
    ],
)
def test_parse_duration_combined_terms(text: str, expected: timedelta) -> None:
    assert parse_duration(text) == expected


def test_parse_duration_rounds_nanoseconds() -> None:
    assert parse_duration("123456789ns") == timedelta(microseconds=123457)


def test_parse_duration_sub_microsecond() -> None:
    assert parse_duration("400ns") == timedelta(0)


@pytest.mark.parametrize("text", ["", "   "])
def test_parse_duration_empty(text: str) -> None:
    with pytest.raises(ValueError, match=r"duration must not be empty"):
        parse_duration(text)


@pytest.mark.parametrize("text", ["soon", "-5s", "5s!", "ms", "1.2.3s"])
def test_parse_duration_malformed(text: str) -> None:
    with pytest.raises(ValueError, match=r"invalid duration"):
        parse_duration(text)


@pytest.mark.parametrize("text", ["5 parsecs", "3 weeks", "10y"])
def test_parse_duration_unknown_unit(text: str) -> None:
    with pytest.raises(ValueError, match=r"unknown unit"):
        parse_duration(text)


def test_parse_duration_unitless_combined() -> None:
    with pytest.raises(ValueError, match=r"a unit is required when combining terms"):
        parse_duration("1m 30")


@pytest.mark.parametrize("text", ["1s+", "1s + ", "1m 30s +", "5ms++"])
def test_parse_duration_trailing_separator(text: str) -> None:
    """Test that a separator must be followed by another term."""
    with pytest.raises(ValueError, match=r"expected a term after the separator"):
        parse_duration(text)


def test_parse_duration_too_large() -> None:
    with pytest.raises(ValueError, match=r"is too large"):
        parse_duration("1000000000d")


####################################
#     Tests for saturating_add     #
####################################


def test_saturating_add() -> None:
    assert saturating_add(timedelta(seconds=1), timedelta(milliseconds=500)) == timedelta(
        seconds=1, milliseconds=500
    )


def test_saturating_add_zero() -> None:
    assert saturating_add(timedelta(0), timedelta(0)) == timedelta(0)


def test_saturating_add_overflow() -> None:
    assert saturating_add(timedelta.max, timedelta(microseconds=1)) == timedelta.max


def test_saturating_add_max() -> None:
    assert saturating_add(timedelta.max, timedelta(0)) == timedelta.max


####################################
#     Tests for saturating_mul     #
####################################


@pytest.mark.parametrize(
    ("factor", "expected"),
    [
        (0.0, timedelta(0)),
        (0.5, timedelta(milliseconds=50)),
        (1.0, timedelta(milliseconds=100)),
        (2.0, timedelta(milliseconds=200)),
        (3.5, timedelta(milliseconds=350)),
    ],
)
def test_saturating_mul(factor: float, expected: timedelta) -> None:
    assert saturating_mul(timedelta(milliseconds=100), factor) == expected


def test_saturating_mul_overflow() -> None:
    assert saturating_mul(timedelta.max, 2.0) == timedelta.max


def test_saturating_mul_large_factor() -> None:
    assert saturating_mul(timedelta(days=1), 1e30) == timedelta.max


##################################################
#     Tests for saturating_from_microseconds     #
##################################################


@pytest.mark.parametrize(
    ("microseconds", "expected"),
    [
        (0, timedelta(0)),
        (0.4, timedelta(0)),
        (4.5, timedelta(microseconds=4)),
        (6.75, timedelta(microseconds=7)),
        (2224.6, timedelta(microseconds=2225)),
        (1_000_000, timedelta(seconds=1)),
    ],
)
def test_saturating_from_microseconds(microseconds: float, expected: timedelta) -> None:
    assert saturating_from_microseconds(microseconds) == expected


@pytest.mark.parametrize("microseconds", [1e17, 1e300, float("inf")])
def test_saturating_from_microseconds_overflow(microseconds: float) -> None:
    assert saturating_from_microseconds(microseconds) == timedelta.max
