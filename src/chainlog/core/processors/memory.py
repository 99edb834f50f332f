"""Memory usage processor."""

from __future__ import annotations

import os
import resource
import sys
import tracemalloc
from pathlib import Path

from ..levels import Level
from ..models import Event
from .base import BaseProcessor

UNITS: tuple[str, ...] = ("B", "KB", "MB", "GB", "TB", "PB")
_STATM = Path("/proc/self/statm")


def _peak_rss() -> int:
    peak = resource.getrusage(resource.RUSAGE_SELF).ru_maxrss
    # ru_maxrss is bytes on macOS, kilobytes elsewhere.
    return peak if sys.platform == "darwin" else peak * 1024


def _current_rss() -> int:
    try:
        resident_pages = int(_STATM.read_text().split()[1])
    except (OSError, IndexError, ValueError):
        return _peak_rss()
    return resident_pages * os.sysconf("SC_PAGE_SIZE")


def _memory_limit() -> int:
    soft, _ = resource.getrlimit(resource.RLIMIT_AS)
    return -1 if soft == resource.RLIM_INFINITY else soft


class MemoryProcessor(BaseProcessor):
    """Attach current usage, peak usage and the address-space limit.

    ``real_usage`` reports resident memory of the process; otherwise the
    memory allocated by the interpreter as tracked by ``tracemalloc``
    (tracing starts on construction if it is not already running).
    """

    def __init__(
        self,
        level: str | int = Level.DEBUG,
        *,
        real_usage: bool = True,
        use_formatting: bool = True,
    ):
        super().__init__(level)
        self.real_usage = bool(real_usage)
        self.use_formatting = bool(use_formatting)
        if not self.real_usage and not tracemalloc.is_tracing():
            tracemalloc.start()

    def process(self, event: Event) -> None:
        event.meta["memory_peak_usage"] = self.format_bytes(self.peak_usage())
        event.meta["memory_usage"] = self.format_bytes(self.usage())
        event.meta["memory_limit"] = self.format_bytes(_memory_limit())

    def usage(self) -> int:
        if self.real_usage:
            return _current_rss()
        current, _ = tracemalloc.get_traced_memory()
        return current

    def peak_usage(self) -> int:
        if self.real_usage:
            return _peak_rss()
        _, peak = tracemalloc.get_traced_memory()
        return peak

    def format_bytes(self, size: int) -> int | str:
        """Human readable size (``"2 KB"``), or ``size`` itself when formatting is off."""
        size = int(size)
        if not self.use_formatting:
            return size
        if size < 0:
            return "unlimited"
        if size == 0:
            return "0 B"

        # floor(log_1024(size)), computed on integers
        i = 0
        while i < len(UNITS) - 1 and size >= 1024 ** (i + 1):
            i += 1
        value = round(size / 1024**i, 2)
        return f"{value:g} {UNITS[i]}"
