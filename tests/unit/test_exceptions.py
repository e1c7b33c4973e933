r"""Unit tests for the exception hierarchy."""

from __future__ import annotations

import pytest

from backpace.exceptions import BackoffError, InvalidConfigurationError, UnknownStrategyError

###############################################
#     Tests for InvalidConfigurationError     #
###############################################


def test_invalid_configuration_error_hierarchy() -> None:
    err = InvalidConfigurationError("factor must be > 0, got 0.0")
    assert isinstance(err, BackoffError)
    assert isinstance(err, ValueError)
    assert str(err) == "factor must be > 0, got 0.0"


def test_invalid_configuration_error_caught_as_value_error() -> None:
    with pytest.raises(ValueError, match=r"impossible"):
        raise InvalidConfigurationError("impossible bounds")


##########################################
#     Tests for UnknownStrategyError     #
##########################################


def test_unknown_strategy_error_default_message() -> None:
    err = UnknownStrategyError("Linear")
    assert err.strategy == "Linear"
    assert str(err) == "unknown backoff strategy 'Linear'"


def test_unknown_strategy_error_custom_message() -> None:
    err = UnknownStrategyError("Linear", message="linear backoff is not supported")
    assert err.strategy == "Linear"
    assert str(err) == "linear backoff is not supported"


def test_unknown_strategy_error_hierarchy() -> None:
    err = UnknownStrategyError("x")
    assert isinstance(err, BackoffError)
    assert isinstance(err, ValueError)
    assert not isinstance(err, InvalidConfigurationError)
