"""Logger and handler options.

Options may be given as pydantic models or as plain mappings using either
the camelCase option names (``flushFrequency``) or the snake_case field
names (``flush_frequency``). Unknown keys are rejected.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from datetime import UTC, tzinfo
from typing import Any, Literal, TypeVar
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field

from .formatter import DEFAULT_SEQUENCE_FORMAT

DEFAULT_EVENT_FORMAT = "[{date}] [{LEVELNAME}] {message}"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S.%f"
TIMEZONE_ENV = "CHAINLOG_TIMEZONE"

LOGGER = logging.getLogger(__name__)

OptionsT = TypeVar("OptionsT", bound="_Options")


class _Options(BaseModel):
    model_config = ConfigDict(extra="forbid", populate_by_name=True, frozen=True)

    @classmethod
    def coerce(cls: type[OptionsT], options: OptionsT | Mapping[str, Any] | None) -> OptionsT:
        """Return ``options`` as a validated model of this class."""
        if options is None:
            return cls()
        if isinstance(options, cls):
            return options
        return cls.model_validate(dict(options))


class LoggerOptions(_Options):
    microseconds: bool = Field(default=True, description="Keep sub-second precision.")
    timezone: str | None = Field(default=None, description="IANA zone name; unset falls back to the environment.")


class HandlerOptions(_Options):
    event_format: str = Field(default=DEFAULT_EVENT_FORMAT, alias="eventFormat")
    date_format: str = Field(default=DEFAULT_DATE_FORMAT, alias="dateFormat")
    bubble: bool = True


class FileHandlerOptions(HandlerOptions):
    append_context: bool = Field(default=False, alias="appendContext")
    filename: str | None = None
    write_mode: Literal["a", "w", "x"] = Field(default="a", alias="writeMode")
    prefix: str = "log_"
    extension: str = "log"
    flush_frequency: int = Field(
        default=1,
        ge=0,
        alias="flushFrequency",
        description="Flush every N lines; 0 leaves flushing to the file buffer.",
    )


class StreamHandlerOptions(HandlerOptions):
    color: bool = False
    sequence_format: str = Field(default=DEFAULT_SEQUENCE_FORMAT, alias="sequenceFormat")


def resolve_timezone(name: str | None = None) -> tzinfo:
    """Resolve the timestamp zone once.

    Order: explicit name, ``CHAINLOG_TIMEZONE``, ``TZ``, then UTC.
    """
    if name:
        return _zone(name)

    env = os.getenv(TIMEZONE_ENV)
    if env:
        return _zone(env)

    # TZ may hold POSIX rules or a path that ZoneInfo cannot load.
    process = os.getenv("TZ")
    if process:
        try:
            return _zone(process.lstrip(":"))
        except ValueError:
            LOGGER.debug("Ignoring unusable TZ=%r", process)
    return UTC


def _zone(name: str) -> tzinfo:
    if name.upper() == "UTC":
        return UTC
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(f"Unknown timezone '{name}'") from exc
