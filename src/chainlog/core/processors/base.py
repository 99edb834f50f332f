"""Processor interface and shared threshold behavior."""

from __future__ import annotations

from typing import Protocol

from ..levels import Level, to_level_code
from ..models import Event


class Processor(Protocol):
    """Enriches ``event.meta`` in place before handlers run."""

    def __call__(self, event: Event) -> None: ...


class BaseProcessor:
    def __init__(self, level: str | int = Level.DEBUG):
        self._level = to_level_code(level)

    @property
    def level(self) -> int:
        return self._level

    def set_level(self, level: str | int) -> None:
        self._level = to_level_code(level)

    def threshold(self, level: int) -> bool:
        return level <= self._level

    def __call__(self, event: Event) -> None:
        if self.threshold(event.level):
            self.process(event)

    def process(self, event: Event) -> None:
        raise NotImplementedError
