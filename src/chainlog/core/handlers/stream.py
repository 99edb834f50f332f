"""Stream handler: writes rendered events to stdout, stderr or memory."""

from __future__ import annotations

import io
import logging
import os
import sys
from collections.abc import Mapping
from typing import Any, BinaryIO

from ..config import StreamHandlerOptions
from ..errors import (
    OpenFailedError,
    ResourceUnavailableError,
    UnsupportedTargetError,
    WriteFailedError,
)
from ..formatter import Style, StyleFormatter, render
from ..levels import Level
from ..models import Event
from .base import BaseHandler

LOGGER = logging.getLogger(__name__)

STREAM_TARGETS: tuple[str, ...] = ("stdout", "stderr", "memory")
ENCODING = "utf-8"


class StreamHandler(BaseHandler):
    """Write one line per event to an in-process stream.

    With ``color`` enabled the written bytes are wrapped in ANSI escape
    sequences, while ``last_line`` and ``line_count`` track the plain text.
    """

    def __init__(
        self,
        target: str,
        level: str | int = Level.DEBUG,
        options: StreamHandlerOptions | Mapping[str, Any] | None = None,
        *,
        styles: Mapping[str, Style] | None = None,
    ):
        self._options = StreamHandlerOptions.coerce(options)
        super().__init__(level, bubble=self._options.bubble)

        if target not in STREAM_TARGETS:
            allowed = ", ".join(STREAM_TARGETS)
            raise UnsupportedTargetError(target, f"The target should be one of: {allowed}")

        self._target = target
        self._stream: BinaryIO | None = None
        self._styles = StyleFormatter(styles, sequence_format=self._options.sequence_format)
        self._line_count = 0
        self._last_line = ""

        self.open()

    @property
    def target(self) -> str:
        return self._target

    @property
    def options(self) -> StreamHandlerOptions:
        return self._options

    @property
    def styles(self) -> StyleFormatter:
        return self._styles

    @property
    def line_count(self) -> int:
        return self._line_count

    @property
    def last_line(self) -> str:
        return self._last_line

    @property
    def closed(self) -> bool:
        return self._stream is None

    def open(self) -> None:
        with self._lock:
            if self._stream is not None:
                return
            try:
                self._stream = self._open_target()
            except (OSError, ValueError, AttributeError) as exc:
                raise OpenFailedError(self._target, "The stream could not be opened.") from exc
        LOGGER.debug("Opened %s stream", self._target)

    def _open_target(self) -> BinaryIO:
        if self._target == "memory":
            return io.BytesIO()
        source = sys.stdout if self._target == "stdout" else sys.stderr
        # Own a duplicate descriptor so closing the handler leaves sys.stdout/err intact.
        return os.fdopen(os.dup(source.fileno()), "wb")

    def close(self) -> None:
        with self._lock:
            stream, self._stream = self._stream, None
        if stream is not None:
            stream.close()
            LOGGER.debug("Closed %s stream", self._target)

    def format(self, event: Event) -> str:
        """Render an event to its plain entry text (no color, no separator)."""
        fields = event.fields()
        fields["date"] = event.datetime.strftime(self._options.date_format)
        return render(self._options.event_format, fields)

    def emit(self, event: Event) -> bool:
        if not self.threshold(event.level):
            return False

        entry = self.format(event)
        written = self._styles.colorize(event.level_name, entry) if self._options.color else entry
        self._write(written + "\n", plain=entry)
        return True

    def write(self, line: str) -> None:
        """Write ``line`` verbatim and update the counters."""
        self._write(line, plain=line)

    def _write(self, data: str, *, plain: str) -> None:
        with self._lock:
            if self._stream is None:
                raise ResourceUnavailableError(self._target, "The stream is closed.")
            try:
                if self._stream.seekable():
                    self._stream.seek(0, os.SEEK_END)
                self._stream.write(data.encode(ENCODING))
                self._stream.flush()
            except OSError as exc:
                raise WriteFailedError(self._target, "The stream could not be written to.") from exc

            self._last_line = plain.strip()
            self._line_count += 1

    def read_last_line_from_stream(self) -> str:
        """Read the last line back from the stream itself.

        The offset is ``size - len(last_line) - (2 if color else 1)``. This
        only holds for a single-line last entry written without color; with
        color the escape sequences shift the offset and the result is not
        the plain line.
        """
        with self._lock:
            if self._stream is None:
                raise ResourceUnavailableError(self._target, "The stream is closed.")
            if not (self._stream.seekable() and self._stream.readable()):
                raise ResourceUnavailableError(self._target, "The stream cannot be read back.")

            length = len(self._last_line.encode(ENCODING)) + (2 if self._options.color else 1)
            size = self._stream.seek(0, os.SEEK_END)
            self._stream.seek(max(size - length, 0))
            data = self._stream.read(length)

        return data.split(b"\n", 1)[0].decode(ENCODING, errors="replace")

    def getvalue(self) -> str:
        """Return everything written so far to a memory stream."""
        with self._lock:
            if not isinstance(self._stream, io.BytesIO):
                raise ResourceUnavailableError(self._target, "Only open memory streams hold their contents.")
            return self._stream.getvalue().decode(ENCODING, errors="replace")

    def __repr__(self) -> str:
        return f"StreamHandler(target={getattr(self, '_target', None)!r})"
