r"""Opt-in structured (JSON) logging for backpace.

Generators and loaders log through the standard ``logging`` module
under the ``backpace`` logger hierarchy. Events such as generator
exhaustion carry extra fields (strategy name, attempt, cumulative
delay) which are rendered as JSON keys by ``StructuredFormatter``.

Example:
    Route backpace logs to stderr as JSON lines:

    ```python
    import logging
    from backpace.utils.structured_logging import StructuredFormatter

    handler = logging.StreamHandler()
    handler.setFormatter(StructuredFormatter())

    logger = logging.getLogger("backpace")
    logger.addHandler(handler)
    logger.setLevel(logging.DEBUG)
    ```

    Tag every event of one retry series:

    ```python
    from backpace.utils.structured_logging import series_scope

    with series_scope("fetch-orders-42"):
        for delay in build_backoff(config):
            ...
    ```
"""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "get_series_id",
    "log_structured",
    "series_scope",
]

import contextvars
import json
import logging
import time
from contextlib import contextmanager
from datetime import timedelta
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Iterator

_series_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "backpace_series_id", default=None
)

# Attributes every LogRecord carries; anything else was passed via ``extra``
_RECORD_ATTRIBUTES = frozenset(logging.makeLogRecord({}).__dict__) | {"message", "asctime"}


def get_series_id() -> str | None:
    """Return the retry series identifier of the current context, if
    any.

    Example:
        ```pycon
        >>> from backpace.utils.structured_logging import get_series_id, series_scope
        >>> get_series_id() is None
        True
        >>> with series_scope("job-1"):
        ...     get_series_id()
        ...
        'job-1'

        ```
    """
    return _series_id.get()


@contextmanager
def series_scope(series_id: str) -> Iterator[None]:
    """Attach a retry series identifier to every log event emitted in
    the block.

    The identifier lives in a context variable, so concurrent threads
    and tasks each see their own value.

    Args:
        series_id: Identifier of the retry series, e.g. a request id.
    """
    token = _series_id.set(series_id)
    try:
        yield
    finally:
        _series_id.reset(token)


def _to_json_value(value: Any) -> Any:
    if isinstance(value, timedelta):
        return value.total_seconds()
    return value


class StructuredFormatter(logging.Formatter):
    """Format log records as single-line JSON objects.

    The object always contains ``timestamp`` (ISO 8601, UTC), ``level``,
    ``logger`` and ``message``. ``series_id`` is added when a series
    scope is active, ``exception`` when the record carries exception
    info, and every field passed through ``extra``. ``timedelta``
    values are rendered as seconds.

    Example:
        ```pycon
        >>> import json
        >>> import logging
        >>> from backpace.utils.structured_logging import StructuredFormatter
        >>> record = logging.makeLogRecord(
        ...     {"name": "backpace", "levelname": "DEBUG", "msg": "exhausted", "attempt": 4}
        ... )
        >>> data = json.loads(StructuredFormatter().format(record))
        >>> data["message"], data["attempt"]
        ('exhausted', 4)

        ```
    """

    def format(self, record: logging.LogRecord) -> str:
        data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        series_id = get_series_id()
        if series_id is not None:
            data["series_id"] = series_id
        if record.exc_info:
            data["exception"] = self.formatException(record.exc_info)
        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRIBUTES:
                data[key] = _to_json_value(value)
        return json.dumps(data, default=str)

    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: ARG002
        """Format the record creation time as ISO 8601 with
        milliseconds."""
        seconds = time.strftime("%Y-%m-%dT%H:%M:%S", time.gmtime(record.created))
        return f"{seconds}.{int(record.msecs):03d}Z"


def log_structured(logger: logging.Logger, level: int, message: str, **fields: Any) -> None:
    """Log a message with structured fields.

    Args:
        logger: Logger to use.
        level: Log level, e.g. ``logging.DEBUG``.
        message: Log message.
        **fields: Extra fields, rendered as JSON keys by
            ``StructuredFormatter``.
    """
    if logger.isEnabledFor(level):
        logger.log(level, message, extra=fields)
