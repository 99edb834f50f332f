"""Proxy handler: forwards events to another logger object."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Protocol

from ..levels import Level
from ..models import Event
from .base import BaseHandler


class ExternalLogger(Protocol):
    def log(self, level_name: str, message: str, context: Mapping[str, Any]) -> None: ...


class ProxyHandler(BaseHandler):
    """Pass accepted events to ``logger.log(level_name, message, context)``."""

    def __init__(
        self,
        logger: ExternalLogger,
        level: str | int = Level.DEBUG,
        *,
        bubble: bool = True,
    ):
        super().__init__(level, bubble=bubble)
        self._logger = logger

    @property
    def logger(self) -> ExternalLogger:
        return self._logger

    def emit(self, event: Event) -> bool:
        if not self.threshold(event.level):
            return False
        with self._lock:
            self._logger.log(event.level_name, event.message, event.context)
        return True
