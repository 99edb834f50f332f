"""Logger: turns (level, message, context) into events and dispatches them.

Dispatch runs in two passes over the handler stack. The first pass only
checks thresholds and returns early when no handler would record the event.
The second pass hands the event to each handler in order and stops after
the first handler that does not allow bubbling.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable, Mapping
from datetime import datetime, tzinfo
from typing import Any

from .config import LoggerOptions, resolve_timezone
from .handlers.base import Handler
from .levels import Level, to_level_code, to_level_name
from .models import Event
from .processors.base import Processor
from .stack import Stack

LOGGER = logging.getLogger(__name__)


class Logger:
    """Dispatch events for one channel through handler and processor stacks.

    ``handlers`` and ``processors`` are installed so that the first item in
    each list runs first; ``push_*`` puts a new item in front of all others.
    """

    def __init__(
        self,
        channel: str,
        *,
        handlers: Iterable[Handler] = (),
        processors: Iterable[Processor] = (),
        options: LoggerOptions | Mapping[str, Any] | None = None,
    ):
        self._channel = channel
        self._options = LoggerOptions.coerce(options)
        self._timezone = resolve_timezone(self._options.timezone)
        self._lock = threading.RLock()
        self._handlers: Stack[Handler] = Stack(handlers, kind="handler")
        self._processors: Stack[Processor] = Stack(processors, kind="processor")

    @classmethod
    def from_options(cls, channel: str, options: Mapping[str, Any]) -> Logger:
        """Build a logger from a single mapping that may include
        ``handlers`` and ``processors`` alongside the logger options."""
        opts = dict(options)
        handlers = opts.pop("handlers", ())
        processors = opts.pop("processors", ())
        return cls(channel, handlers=handlers, processors=processors, options=opts)

    @property
    def channel(self) -> str:
        return self._channel

    @property
    def timezone(self) -> tzinfo:
        return self._timezone

    # Handler stack

    def push_handler(self, handler: Handler) -> Logger:
        with self._lock:
            self._handlers.push(handler)
        return self

    def pop_handler(self) -> Handler:
        with self._lock:
            return self._handlers.pop()

    def set_handlers(self, handlers: Iterable[Handler]) -> Logger:
        with self._lock:
            self._handlers.replace(handlers)
        return self

    @property
    def handlers(self) -> list[Handler]:
        return list(self._handlers)

    # Processor stack

    def push_processor(self, processor: Processor) -> Logger:
        with self._lock:
            self._processors.push(processor)
        return self

    def pop_processor(self) -> Processor:
        with self._lock:
            return self._processors.pop()

    def set_processors(self, processors: Iterable[Processor]) -> Logger:
        with self._lock:
            self._processors.replace(processors)
        return self

    @property
    def processors(self) -> list[Processor]:
        return list(self._processors)

    # Dispatch

    def is_handling(self, level: str | int) -> bool:
        """Return True if at least one handler accepts events of ``level``."""
        rank = to_level_code(level)
        with self._lock:
            return any(handler.threshold(rank) for handler in self._handlers)

    def log(self, level: str | int, message: str, context: Mapping[str, Any] | None = None) -> None:
        rank = to_level_code(level)

        with self._lock:
            if not any(handler.threshold(rank) for handler in self._handlers):
                LOGGER.debug("No handler accepts level %s on channel %s", rank, self._channel)
                return

            event = Event(
                level=rank,
                level_name=to_level_name(rank),
                message=message,
                context=dict(context or {}),
                channel=self._channel,
                datetime=self._now(),
            )

            for processor in self._processors:
                processor(event)

            for handler in self._handlers:
                handler.emit(event)
                if not handler.bubble_enabled():
                    break

    def _now(self) -> datetime:
        now = datetime.now(self._timezone)
        if not self._options.microseconds:
            now = now.replace(microsecond=0)
        return now

    # Level verbs

    def emergency(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(Level.EMERGENCY, message, context)

    def alert(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(Level.ALERT, message, context)

    def critical(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(Level.CRITICAL, message, context)

    def error(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(Level.ERROR, message, context)

    def warning(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(Level.WARNING, message, context)

    def notice(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(Level.NOTICE, message, context)

    def info(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(Level.INFO, message, context)

    def debug(self, message: str, context: Mapping[str, Any] | None = None) -> None:
        self.log(Level.DEBUG, message, context)

    def close(self) -> None:
        """Close every handler in stack order."""
        with self._lock:
            for handler in self._handlers:
                handler.close()

    def __repr__(self) -> str:
        return f"Logger(channel={self._channel!r}, handlers={len(self._handlers)})"
