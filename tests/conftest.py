from __future__ import annotations

from collections.abc import Callable, Mapping
from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import pytest

from chainlog.core.handlers.base import BaseHandler
from chainlog.core.levels import Level, to_level_name
from chainlog.core.models import Event


class RecordingHandler(BaseHandler):
    """In-memory handler that records every event it accepts."""

    def __init__(self, level: str | int = Level.DEBUG, *, bubble: bool = True, name: str = ""):
        super().__init__(level, bubble=bubble)
        self.name = name
        self.events: list[Event] = []
        self.calls = 0
        self.closed = False

    def emit(self, event: Event) -> bool:
        self.calls += 1
        if not self.threshold(event.level):
            return False
        self.events.append(event)
        return True

    def close(self) -> None:
        self.closed = True


class RecordingLogger:
    """Stand-in for an external logger used by ProxyHandler."""

    def __init__(self) -> None:
        self.records: list[tuple[str, str, dict[str, Any]]] = []

    def log(self, level_name: str, message: str, context: Mapping[str, Any]) -> None:
        self.records.append((level_name, message, dict(context)))


@pytest.fixture(autouse=True)
def _clear_timezone_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("CHAINLOG_TIMEZONE", raising=False)
    monkeypatch.delenv("TZ", raising=False)


@pytest.fixture
def log_dir(tmp_path: Path) -> Path:
    return tmp_path / "logs"


@pytest.fixture
def recording_handler() -> Callable[..., RecordingHandler]:
    return RecordingHandler


@pytest.fixture
def recording_logger() -> RecordingLogger:
    return RecordingLogger()


@pytest.fixture
def make_event() -> Callable[..., Event]:
    def _make(
        level: int = Level.INFO,
        message: str = "hello",
        context: dict[str, Any] | None = None,
        channel: str = "test",
    ) -> Event:
        return Event(
            level=level,
            level_name=to_level_name(level),
            message=message,
            context=context or {},
            channel=channel,
            datetime=datetime(2026, 10, 19, 8, 12, 4, 123456, tzinfo=UTC),
        )

    return _make


@pytest.fixture
def write_lines() -> Callable[[Path, list[str]], None]:
    def _write(path: Path, lines: list[str]) -> None:
        path.write_text("".join(line + "\n" for line in lines), encoding="utf-8")

    return _write
