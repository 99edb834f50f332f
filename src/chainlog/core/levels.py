"""Severity level table.

Ranks follow the syslog protocol (RFC 5424): 0 is the most severe,
7 the least. A handler or processor with threshold T acts on every
rank <= T.
"""

from __future__ import annotations

from enum import IntEnum

from .errors import InvalidLevelError


class Level(IntEnum):
    """Syslog severity ranks."""

    EMERGENCY = 0  # system is unusable
    ALERT = 1  # action must be taken immediately
    CRITICAL = 2  # component unavailable, unexpected exception
    ERROR = 3  # runtime errors
    WARNING = 4  # exceptional occurrences that are not errors
    NOTICE = 5  # uncommon events
    INFO = 6  # interesting events
    DEBUG = 7  # detailed debug information


LEVEL_NAMES: tuple[str, ...] = tuple(level.name.lower() for level in Level)


def to_level_code(level: str | int) -> int:
    """Resolve a level name (case-insensitive) or rank to a rank.

    Integer ranks are returned unchanged.
    """
    if isinstance(level, str):
        try:
            return int(Level[level.strip().upper()])
        except KeyError as e:
            valid = ", ".join(LEVEL_NAMES)
            raise InvalidLevelError(
                level, f'Level "{level}" is not defined, use one of: {valid}'
            ) from e
    return level


def to_level_name(code: int) -> str:
    """Return the canonical lower-case name for a rank."""
    try:
        return Level(code).name.lower()
    except ValueError as e:
        raise InvalidLevelError(code, f"Invalid log level: {code}") from e
