"""File handler: appends rendered events to a dated log file."""

from __future__ import annotations

import json
import logging
import os
from collections.abc import Mapping
from datetime import date
from pathlib import Path
from typing import Any, TextIO

from ..config import FileHandlerOptions
from ..errors import (
    OpenFailedError,
    PathNotWritableError,
    ResourceUnavailableError,
    WriteFailedError,
)
from ..formatter import indent, render
from ..levels import Level
from ..models import Event
from ..tail import read_last_line
from .base import BaseHandler

LOGGER = logging.getLogger(__name__)

RECOGNIZED_EXTENSIONS = frozenset({".log", ".txt"})
DIRECTORY_MODE = 0o777


def resolve_log_path(
    directory: str | Path,
    options: FileHandlerOptions,
    *,
    today: date | None = None,
) -> Path:
    """Create ``directory`` if needed and return the log file path inside it.

    An explicit filename gets ``options.extension`` appended unless it
    already ends in .log or .txt; otherwise the name is
    ``<prefix><YYYY-MM-DD>.<extension>``.
    """
    base = Path(directory)
    if not base.exists():
        try:
            base.mkdir(mode=DIRECTORY_MODE, parents=True, exist_ok=True)
        except OSError as exc:
            raise PathNotWritableError(base, "The log directory could not be created.") from exc

    if options.filename:
        name = options.filename
        if Path(name).suffix.lower() not in RECOGNIZED_EXTENSIONS:
            name = f"{name}.{options.extension}"
    else:
        day = today or date.today()
        name = f"{options.prefix}{day.isoformat()}.{options.extension}"

    path = base / name
    if path.exists() and not os.access(path, os.W_OK):
        raise PathNotWritableError(path, "The file could not be written to. Check permissions.")
    return path


class FileHandler(BaseHandler):
    """Write one line per event to a file opened at construction."""

    def __init__(
        self,
        directory: str | Path,
        level: str | int = Level.DEBUG,
        options: FileHandlerOptions | Mapping[str, Any] | None = None,
    ):
        self._options = FileHandlerOptions.coerce(options)
        super().__init__(level, bubble=self._options.bubble)

        self._file: TextIO | None = None
        self._line_count = 0
        self._last_line = ""
        self._path = resolve_log_path(directory, self._options)

        self.open()

    @property
    def options(self) -> FileHandlerOptions:
        return self._options

    @property
    def path(self) -> Path:
        return self._path

    @property
    def line_count(self) -> int:
        return self._line_count

    @property
    def last_line(self) -> str:
        return self._last_line

    @property
    def closed(self) -> bool:
        return self._file is None

    def open(self) -> None:
        with self._lock:
            if self._file is not None:
                return
            try:
                self._file = self._path.open(self._options.write_mode, encoding="utf-8", newline="")
            except OSError as exc:
                raise OpenFailedError(self._path, "The file could not be opened. Check permissions.") from exc
        LOGGER.debug("Opened log file %s (mode=%s)", self._path, self._options.write_mode)

    def close(self) -> None:
        with self._lock:
            f, self._file = self._file, None
        if f is not None:
            f.close()
            LOGGER.debug("Closed log file %s", self._path)

    def format(self, event: Event) -> str:
        """Render an event to its entry text (no trailing separator)."""
        fields = event.fields()
        fields["date"] = event.datetime.strftime(self._options.date_format)
        entry = render(self._options.event_format, fields)

        if self._options.append_context and event.context:
            entry += "\n" + indent(json.dumps(event.context, indent=4, default=str))
        return entry

    def emit(self, event: Event) -> bool:
        if not self.threshold(event.level):
            return False
        self.write(self.format(event) + "\n")
        return True

    def write(self, line: str) -> None:
        """Write ``line`` verbatim and update the counters."""
        with self._lock:
            if self._file is None:
                raise ResourceUnavailableError(self._path, "The file handle is closed.")
            try:
                self._file.write(line)
            except OSError as exc:
                raise WriteFailedError(self._path, "The file could not be written to.") from exc

            self._last_line = line.strip()
            self._line_count += 1

            freq = self._options.flush_frequency
            if freq and self._line_count % freq == 0:
                try:
                    self._file.flush()
                except OSError as exc:
                    raise WriteFailedError(self._path, "The file could not be flushed.") from exc

    def read_last_line(self) -> str:
        """Read the last line back from disk, independent of ``last_line``."""
        return read_last_line(self._path)

    def __repr__(self) -> str:
        return f"FileHandler(path={str(getattr(self, '_path', None))!r})"
