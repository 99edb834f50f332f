from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from chainlog.core.config import FileHandlerOptions
from chainlog.core.errors import (
    OpenFailedError,
    PathNotWritableError,
    ResourceUnavailableError,
    WriteFailedError,
)
from chainlog.core.handlers import FileHandler, resolve_log_path
from chainlog.core.levels import Level
from chainlog.core.logger import Logger


def test_default_path_uses_prefix_date_and_extension(log_dir: Path) -> None:
    path = resolve_log_path(log_dir, FileHandlerOptions(), today=date(2026, 10, 19))
    assert path == log_dir / "log_2026-10-19.log"
    assert log_dir.is_dir()


def test_custom_prefix_and_extension(log_dir: Path) -> None:
    h = FileHandler(log_dir, Level.ERROR, {"prefix": "error_", "extension": "txt"})
    assert h.path.name.startswith("error_")
    assert h.path.suffix == ".txt"
    assert h.path.exists()
    h.close()


@pytest.mark.parametrize(
    ("filename", "expected"),
    [
        ("app", "app.log"),
        ("app.log", "app.log"),
        ("notes.txt", "notes.txt"),
        ("app.v2", "app.v2.log"),
    ],
)
def test_explicit_filename_extension(log_dir: Path, filename: str, expected: str) -> None:
    path = resolve_log_path(log_dir, FileHandlerOptions(filename=filename))
    assert path.name == expected


def test_nested_directories_are_created(tmp_path: Path) -> None:
    h = FileHandler(tmp_path / "a" / "b" / "c")
    assert h.path.parent == tmp_path / "a" / "b" / "c"
    h.close()


def test_existing_unwritable_path_raises(log_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    log_dir.mkdir()
    (log_dir / "locked.log").write_text("", encoding="utf-8")
    monkeypatch.setattr("chainlog.core.handlers.file.os.access", lambda *_: False)

    with pytest.raises(PathNotWritableError) as exc:
        FileHandler(log_dir, options={"filename": "locked.log"})
    assert exc.value.target == log_dir / "locked.log"


def test_open_failure_raises(log_dir: Path) -> None:
    (log_dir / "taken.log").mkdir(parents=True)
    with pytest.raises(OpenFailedError):
        FileHandler(log_dir, options={"filename": "taken.log"})


def test_emit_writes_formatted_line(log_dir: Path, make_event) -> None:
    h = FileHandler(log_dir, options={"filename": "app"})

    assert h.emit(make_event(Level.INFO, "service started")) is True
    h.close()

    content = h.path.read_text(encoding="utf-8")
    assert content == "[2026-10-19 08:12:04.123456] [INFO] service started\n"


def test_emit_respects_threshold(log_dir: Path, make_event) -> None:
    h = FileHandler(log_dir, Level.WARNING)
    assert h.emit(make_event(Level.NOTICE)) is False
    assert h.emit(make_event(Level.WARNING)) is True
    assert h.line_count == 1
    h.close()


def test_custom_event_and_date_format(log_dir: Path, make_event) -> None:
    h = FileHandler(
        log_dir,
        options={"eventFormat": "{date}|{channel}|{levelName}|{message}|{nope}", "dateFormat": "%H:%M"},
    )
    h.emit(make_event(Level.DEBUG, "m", channel="jobs"))
    assert h.last_line == "08:12|jobs|debug|m|{nope}"
    h.close()


def test_counters_track_every_write(log_dir: Path, make_event) -> None:
    h = FileHandler(log_dir)
    for i in range(5):
        h.emit(make_event(message=f"event {i}"))
    assert h.line_count == 5
    assert h.last_line.endswith("[INFO] event 4")
    h.close()


def test_tail_read_agrees_with_last_line(log_dir: Path) -> None:
    h = FileHandler(log_dir)
    logger = Logger("durability", handlers=[h])

    assert h.read_last_line() == h.last_line == ""

    logger.info("first")
    assert h.read_last_line() == h.last_line

    # Lines longer than one 64-byte chunk force several backward reads.
    for i in range(30):
        logger.warning(f"entry {i} " + "x" * 150)
        assert h.read_last_line() == h.last_line
    assert h.line_count == 31
    h.close()


def test_tail_read_agrees_for_every_level_code(log_dir: Path) -> None:
    h = FileHandler(log_dir)
    logger = Logger("codes", handlers=[h])
    for code in Level:
        logger.log(int(code), "by code")
        assert h.read_last_line() == h.last_line
    h.close()


def test_append_context_writes_indented_json(log_dir: Path, make_event) -> None:
    h = FileHandler(log_dir, options={"appendContext": True})
    h.emit(make_event(Level.ERROR, "boom", context={"id": 1}))
    h.emit(make_event(Level.ERROR, "plain"))
    h.close()

    lines = h.path.read_text(encoding="utf-8").splitlines()
    assert lines[0].endswith("[ERROR] boom")
    assert lines[1:4] == ["    {", '        "id": 1', "    }"]
    assert lines[4].endswith("[ERROR] plain")
    assert h.line_count == 2


def test_append_context_tail_read_returns_final_physical_line(log_dir: Path) -> None:
    h = FileHandler(log_dir, options={"appendContext": True})
    logger = Logger("ctx", handlers=[h])

    logger.error("boom", {"id": 1})
    assert h.last_line.startswith("[")
    assert h.last_line.endswith('[ERROR] boom\n    {\n        "id": 1\n    }')
    assert h.read_last_line() == "}"

    # Without a context block the two agree again.
    logger.error("plain")
    assert h.read_last_line() == h.last_line
    h.close()


def test_flush_frequency_batches_flushes(log_dir: Path, make_event) -> None:
    h = FileHandler(log_dir, options={"flushFrequency": 3})
    h.emit(make_event(message="one"))
    h.emit(make_event(message="two"))
    assert h.path.read_text(encoding="utf-8") == ""

    h.emit(make_event(message="three"))
    assert h.read_last_line() == h.last_line
    h.close()


def test_write_mode_w_truncates(log_dir: Path, make_event) -> None:
    log_dir.mkdir()
    (log_dir / "app.log").write_text("old line\n", encoding="utf-8")

    h = FileHandler(log_dir, options={"filename": "app", "writeMode": "w"})
    h.emit(make_event(message="new"))
    h.close()

    assert "old line" not in h.path.read_text(encoding="utf-8")


def test_write_after_close_raises(log_dir: Path, make_event) -> None:
    h = FileHandler(log_dir)
    h.close()
    h.close()
    assert h.closed
    with pytest.raises(ResourceUnavailableError):
        h.emit(make_event())


def test_reopen_after_close_appends(log_dir: Path, make_event) -> None:
    h = FileHandler(log_dir)
    h.emit(make_event(message="before"))
    h.close()
    h.open()
    h.emit(make_event(message="after"))
    h.close()
    assert h.path.read_text(encoding="utf-8").count("\n") == 2


def test_write_failure_raises(log_dir: Path, make_event) -> None:
    class _Broken:
        def write(self, _: str) -> int:
            raise OSError("disk full")

        def close(self) -> None:
            pass

    h = FileHandler(log_dir)
    h.close()
    h._file = _Broken()

    with pytest.raises(WriteFailedError) as exc:
        h.emit(make_event())
    assert isinstance(exc.value.__cause__, OSError)
    assert h.line_count == 0


def test_release_swallows_close_errors(log_dir: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    h = FileHandler(log_dir)

    def _fail() -> None:
        raise OSError("close failed")

    monkeypatch.setattr(h, "close", _fail)
    with pytest.raises(OSError):
        h.close()
    h.release()


def test_context_manager_closes(log_dir: Path, make_event) -> None:
    with FileHandler(log_dir) as h:
        h.emit(make_event())
    assert h.closed
