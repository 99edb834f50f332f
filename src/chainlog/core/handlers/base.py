"""Handler interface and shared threshold / bubbling behavior."""

from __future__ import annotations

import logging
import threading
from typing import Any, Protocol

from ..levels import Level, to_level_code
from ..models import Event

LOGGER = logging.getLogger(__name__)


class Handler(Protocol):
    """Destination for events dispatched by a Logger."""

    def threshold(self, level: int) -> bool:
        """Return True if this handler acts on events of rank ``level``."""
        ...

    def emit(self, event: Event) -> bool:
        """Record the event if it passes the threshold; return whether it did."""
        ...

    def open(self) -> None: ...

    def close(self) -> None: ...

    def bubble_enabled(self) -> bool:
        """Return False to stop later handlers from seeing the event."""
        ...


class BaseHandler:
    """Threshold, bubbling and lifecycle shared by concrete handlers.

    ``close()`` is the explicit release and propagates failures.
    ``release()`` is best-effort: it never raises and is what runs at
    garbage collection.
    """

    def __init__(self, level: str | int = Level.DEBUG, *, bubble: bool = True):
        self._level = to_level_code(level)
        self._bubble = bubble
        self._lock = threading.Lock()

    @property
    def level(self) -> int:
        return self._level

    def set_level(self, level: str | int) -> None:
        self._level = to_level_code(level)

    def threshold(self, level: int) -> bool:
        return level <= self._level

    def bubble_enabled(self) -> bool:
        return self._bubble

    def set_bubble(self, bubble: bool) -> None:
        self._bubble = bubble

    def emit(self, event: Event) -> bool:
        raise NotImplementedError

    def open(self) -> None:
        pass

    def close(self) -> None:
        pass

    def release(self) -> None:
        try:
            self.close()
        except Exception:
            LOGGER.debug("Ignoring error while releasing %r", self, exc_info=True)

    def __enter__(self) -> BaseHandler:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __del__(self) -> None:
        self.release()
