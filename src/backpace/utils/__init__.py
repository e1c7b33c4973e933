r"""Utilities shared by the backoff generators and the loader."""

from __future__ import annotations

__all__ = [
    "StructuredFormatter",
    "log_structured",
    "parse_duration",
    "saturating_add",
    "saturating_from_microseconds",
    "saturating_mul",
    "series_scope",
]

from backpace.utils.duration import (
    parse_duration,
    saturating_add,
    saturating_from_microseconds,
    saturating_mul,
)
from backpace.utils.structured_logging import StructuredFormatter, log_structured, series_scope
