r"""Exceptions raised while building backoff strategies.

All of them are raised eagerly, when a strategy descriptor is built or
loaded. A backoff generator never raises while it is iterated:
exhaustion is signalled with ``StopIteration`` (or ``None`` from
``next_delay``), which is not an error.
"""

from __future__ import annotations

__all__ = ["BackoffError", "InvalidConfigurationError", "UnknownStrategyError"]


class BackoffError(Exception):
    """Base class for all errors raised by backpace."""


class InvalidConfigurationError(BackoffError, ValueError):
    """Raised when a strategy descriptor has impossible bounds.

    Examples are a non-positive growth factor, a negative delay, or a
    loader value that cannot be converted to the expected type.

    Example:
        ```pycon
        >>> from backpace.exceptions import InvalidConfigurationError
        >>> err = InvalidConfigurationError("factor must be > 0, got 0.0")
        >>> isinstance(err, ValueError)
        True

        ```
    """


class UnknownStrategyError(BackoffError, ValueError):
    """Raised when a strategy tag does not name a known backoff
    strategy.

    Args:
        strategy: The unrecognized strategy tag.
        message: Optional custom error message.

    Attributes:
        strategy: The unrecognized strategy tag.

    Example:
        ```pycon
        >>> from backpace.exceptions import UnknownStrategyError
        >>> err = UnknownStrategyError("Linear")
        >>> err.strategy
        'Linear'
        >>> str(err)
        "unknown backoff strategy 'Linear'"

        ```
    """

    def __init__(self, strategy: str, message: str | None = None) -> None:
        if message is None:
            message = f"unknown backoff strategy {strategy!r}"
        super().__init__(message)
        self.strategy = strategy
