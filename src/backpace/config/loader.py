r"""Load strategy descriptors from key/value data.

Raw values (typically text from environment variables or TOML files)
are validated by pydantic models, one per strategy, selected by the
``strategy`` key. The typed fields are then handed to
``make_backoff_config`` for defaults and range validation. The loader
distinguishes a key that is absent (use the default) from a key set to
``"null"`` (explicitly unbounded).

Example:
    ```pycon
    >>> from backpace.config import parse_backoff_config
    >>> config = parse_backoff_config(
    ...     {"strategy": "Exponential", "initial_delay": "750ms", "max_delay": "null"}
    ... )
    >>> config.initial_delay
    datetime.timedelta(microseconds=750000)
    >>> config.max_delay is None
    True

    ```
"""

from __future__ import annotations

__all__ = [
    "NULL",
    "BackoffSettings",
    "load_backoff_config_from_env",
    "load_backoff_config_from_toml",
    "parse_backoff_config",
]

import logging
import tomllib
from datetime import timedelta
from pathlib import Path
from typing import TYPE_CHECKING, Annotated, Any, Literal, Optional, Union

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, TypeAdapter, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from backpace.config.defaults import (
    DEFAULT_DELAY,
    DEFAULT_FACTOR,
    DEFAULT_JITTER_ENABLED,
    DEFAULT_JITTER_SEED,
    DEFAULT_MAX_DELAY,
    DEFAULT_MAX_RETRIES,
    DEFAULT_MAX_TOTAL_DELAY,
)
from backpace.config.strategy import STRATEGY_NAMES, make_backoff_config
from backpace.exceptions import InvalidConfigurationError, UnknownStrategyError
from backpace.utils.duration import parse_duration

if TYPE_CHECKING:
    from collections.abc import Mapping

    from backpace.config.strategy import BackoffConfig

logger: logging.Logger = logging.getLogger(__name__)

# Literal marking a bound as explicitly unbounded
NULL = "null"

STRATEGY_KEY = "strategy"


def _null_to_none(value: Any) -> Any:
    if isinstance(value, str) and value.strip().lower() == NULL:
        return None
    return value


def _not_null(value: Any) -> Any:
    value = _null_to_none(value)
    if value is None:
        msg = "cannot be null"
        raise ValueError(msg)
    return value


def _duration(value: Any) -> Any:
    value = _not_null(value)
    if isinstance(value, bool):
        msg = f"expected a duration, got {value!r}"
        raise ValueError(msg)
    if isinstance(value, str):
        return parse_duration(value)
    return value


def _nullable_duration(value: Any) -> Any:
    value = _null_to_none(value)
    return None if value is None else _duration(value)


def _nullable_integer(value: Any) -> Any:
    value = _null_to_none(value)
    if isinstance(value, bool):
        msg = f"expected an integer, got {value!r}"
        raise ValueError(msg)
    if isinstance(value, str):
        return value.strip()
    return value


Duration = Annotated[timedelta, BeforeValidator(_duration)]
NullableDuration = Annotated[Optional[timedelta], BeforeValidator(_nullable_duration)]
NullableInteger = Annotated[Optional[int], BeforeValidator(_nullable_integer)]
Factor = Annotated[float, BeforeValidator(_not_null)]
Flag = Annotated[bool, BeforeValidator(_not_null)]


class _StrategyFields(BaseModel):
    # Unknown fields are kept and reported by make_backoff_config
    model_config = ConfigDict(extra="allow")

    def to_config(self) -> BackoffConfig:
        fields = self.model_dump(exclude={STRATEGY_KEY}, exclude_unset=True)
        fields.update(self.model_extra or {})
        return make_backoff_config(self.strategy, **fields)


class _NoBackoffFields(_StrategyFields):
    strategy: Literal["nobackoff", "disabled"]


class _ConstantFields(_StrategyFields):
    strategy: Literal["constant"]
    delay: Duration = DEFAULT_DELAY
    max_retries: NullableInteger = DEFAULT_MAX_RETRIES
    jitter_enabled: Flag = DEFAULT_JITTER_ENABLED
    jitter_seed: NullableInteger = DEFAULT_JITTER_SEED


class _ExponentialFields(_StrategyFields):
    strategy: Literal["exponential"]
    initial_delay: Duration = DEFAULT_DELAY
    factor: Factor = DEFAULT_FACTOR
    max_delay: NullableDuration = DEFAULT_MAX_DELAY
    max_retries: NullableInteger = DEFAULT_MAX_RETRIES
    max_total_delay: NullableDuration = DEFAULT_MAX_TOTAL_DELAY
    jitter_enabled: Flag = DEFAULT_JITTER_ENABLED
    jitter_seed: NullableInteger = DEFAULT_JITTER_SEED


class _FibonacciFields(_StrategyFields):
    strategy: Literal["fibonacci"]
    initial_delay: Duration = DEFAULT_DELAY
    max_delay: NullableDuration = DEFAULT_MAX_DELAY
    max_retries: NullableInteger = DEFAULT_MAX_RETRIES
    jitter_enabled: Flag = DEFAULT_JITTER_ENABLED
    jitter_seed: NullableInteger = DEFAULT_JITTER_SEED


_FIELDS_ADAPTER: TypeAdapter[_StrategyFields] = TypeAdapter(
    Annotated[
        Union[_NoBackoffFields, _ConstantFields, _ExponentialFields, _FibonacciFields],
        Field(discriminator=STRATEGY_KEY),
    ]
)


def _format_errors(exc: ValidationError) -> str:
    # The first location item is the strategy tag of the union member
    return "; ".join(
        f"invalid value for {'.'.join(str(part) for part in error['loc'][1:])}: {error['msg']}"
        for error in exc.errors()
    )


def parse_backoff_config(data: Mapping[str, Any]) -> BackoffConfig:
    """Parse a strategy descriptor from key/value data.

    Keys are matched case-insensitively. The ``strategy`` key selects
    the variant; the other keys are descriptor fields. Values can be
    native (``timedelta``, numbers, booleans) or text: durations such as
    ``"150ms"`` or ``"5 s"`` (a bare number is a number of seconds),
    integers, floats, and booleans (``true``/``false``, ``1``/``0``,
    ``yes``/``no``, ``on``/``off``). ``"null"`` or ``None`` makes
    ``max_retries``, ``max_delay``, ``max_total_delay`` unbounded and
    ``jitter_seed`` unset.

    Args:
        data: The raw key/value data.

    Returns:
        The validated strategy descriptor.

    Raises:
        InvalidConfigurationError: If the strategy key is missing, a
            key is duplicated, a field is unknown, or a value cannot be
            converted or is out of range.
        UnknownStrategyError: If the strategy tag is not recognized.

    Example:
        ```pycon
        >>> from backpace.config import parse_backoff_config
        >>> parse_backoff_config({"STRATEGY": "Constant", "DELAY": "1s", "MAX_RETRIES": "3"})
        ConstantBackoffConfig(delay=datetime.timedelta(seconds=1), max_retries=3, jitter_enabled=True, jitter_seed=None)

        ```
    """
    normalized: dict[str, Any] = {}
    for key, value in data.items():
        name = str(key).strip().lower()
        if name in normalized:
            msg = f"duplicate key {key!r} (keys are case-insensitive)"
            raise InvalidConfigurationError(msg)
        normalized[name] = value

    if STRATEGY_KEY not in normalized:
        msg = f"missing {STRATEGY_KEY!r} key, got keys: {sorted(normalized)}"
        raise InvalidConfigurationError(msg)
    strategy = normalized[STRATEGY_KEY]
    if not isinstance(strategy, str):
        msg = f"{STRATEGY_KEY} must be a string, got {strategy!r}"
        raise InvalidConfigurationError(msg)
    tag = strategy.strip().lower()
    if tag not in STRATEGY_NAMES:
        raise UnknownStrategyError(strategy)
    normalized[STRATEGY_KEY] = tag

    try:
        fields = _FIELDS_ADAPTER.validate_python(normalized)
    except ValidationError as exc:
        raise InvalidConfigurationError(_format_errors(exc)) from exc
    return fields.to_config()


class BackoffSettings(BaseSettings):
    """Raw strategy values read from environment variables.

    Variable names are the field names behind a prefix (default
    ``BACKOFF__``), matched case-insensitively, e.g.
    ``BACKOFF__STRATEGY=Exponential`` or ``BACKOFF__MAX_DELAY=20s``.
    Values stay text here and are typed by ``parse_backoff_config``.
    Only the variables actually set end up in ``model_fields_set``.
    """

    model_config = SettingsConfigDict(
        env_prefix="BACKOFF__",
        case_sensitive=False,
        extra="ignore",
    )

    strategy: Optional[str] = None
    delay: Optional[str] = None
    initial_delay: Optional[str] = None
    factor: Optional[str] = None
    max_delay: Optional[str] = None
    max_retries: Optional[str] = None
    max_total_delay: Optional[str] = None
    jitter_enabled: Optional[str] = None
    jitter_seed: Optional[str] = None

    def to_mapping(self) -> dict[str, Any]:
        """Return the values of the variables that are set."""
        return {name: getattr(self, name) for name in sorted(self.model_fields_set)}


def load_backoff_config_from_env(prefix: str = "BACKOFF__") -> BackoffConfig:
    """Load a strategy descriptor from environment variables.

    Args:
        prefix: Prefix of the variable names, matched
            case-insensitively.

    Returns:
        The validated strategy descriptor.

    Raises:
        InvalidConfigurationError: If no ``strategy`` variable is set
            or a value is invalid.
        UnknownStrategyError: If the strategy tag is not recognized.

    Example:
        ```python
        # APP__BACKOFF__STRATEGY=Fibonacci
        # APP__BACKOFF__MAX_RETRIES=null
        config = load_backoff_config_from_env("APP__BACKOFF__")
        assert config.max_retries is None
        ```
    """
    data = BackoffSettings(_env_prefix=prefix).to_mapping()
    logger.debug(f"Loading backoff config from {len(data)} environment variable(s) ({prefix}*)")
    return parse_backoff_config(data)


def load_backoff_config_from_toml(path: str | Path, table: str = "backoff") -> BackoffConfig:
    """Load a strategy descriptor from a table of a TOML file.

    TOML has no null value: use the string ``"null"`` to make a bound
    explicitly unbounded.

    ```toml
    [backoff]
    strategy = "Exponential"
    initial_delay = "750 ms"
    factor = 3.5
    max_delay = "null"
    ```

    Args:
        path: Path of the TOML file.
        table: Dotted path of the table holding the strategy, e.g.
            ``"service.backoff"``.

    Returns:
        The validated strategy descriptor.

    Raises:
        InvalidConfigurationError: If the file is not valid TOML, the
            table is missing, or a value is invalid.
        UnknownStrategyError: If the strategy tag is not recognized.
        OSError: If the file cannot be read.
    """
    path = Path(path)
    with path.open("rb") as file:
        try:
            document = tomllib.load(file)
        except tomllib.TOMLDecodeError as exc:
            msg = f"invalid TOML in {path}: {exc}"
            raise InvalidConfigurationError(msg) from exc

    data: Any = document
    for part in table.split("."):
        if not isinstance(data, dict) or part not in data:
            msg = f"missing table [{table}] in {path}"
            raise InvalidConfigurationError(msg)
        data = data[part]
    if not isinstance(data, dict):
        msg = f"[{table}] in {path} must be a table, got {type(data).__name__}"
        raise InvalidConfigurationError(msg)

    logger.debug(f"Loading backoff config from [{table}] in {path}")
    return parse_backoff_config(data)
