"""Core data models for event dispatch."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True, slots=True)
class Event:
    """A single log event, built once per ``Logger.log`` call.

    Fields are fixed after construction; processors only add keys to ``meta``.
    """

    level: int
    level_name: str  # canonical lower-case name
    message: str
    context: dict[str, Any]
    channel: str
    datetime: datetime
    meta: dict[str, Any] = field(default_factory=dict)  # filled by processors

    def fields(self) -> dict[str, Any]:
        """Placeholder values available to event format templates."""
        return {
            "level": self.level,
            "levelName": self.level_name,
            "LEVELNAME": self.level_name.upper(),
            "message": self.message,
            "context": self.context,
            "channel": self.channel,
            "date": self.datetime,
            "meta": self.meta,
        }
