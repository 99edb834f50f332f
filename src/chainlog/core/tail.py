"""Reverse tail-reading of log files.

Reads backwards from the end of a file in chunks until enough line
separators have been seen, so only the tail of the file is loaded.
"""

from __future__ import annotations

import os
from pathlib import Path

import aiofiles

_NEWLINE = b"\n"


def chunk_size(lines: int, *, adaptive: bool = True) -> int:
    """Bytes to read per backward step; small when few lines are wanted."""
    if not adaptive:
        return 4096
    if lines < 2:
        return 64
    if lines < 10:
        return 512
    return 4096


def _trim(output: bytes, remaining: int) -> bytes:
    # The last chunk may reach past the wanted lines; drop the surplus.
    while remaining < 0:
        output = output[output.index(_NEWLINE) + 1 :]
        remaining += 1
    return output


def _decode(output: bytes, encoding: str) -> str:
    return output.decode(encoding, errors="replace").strip()


def tail(
    log_path: str | Path,
    lines: int = 1,
    *,
    adaptive: bool = True,
    encoding: str = "utf-8",
) -> str:
    """Return the last ``lines`` lines of a file, stripped."""
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")
    if lines < 1:
        raise ValueError("lines must be >= 1")

    buffer = chunk_size(lines, adaptive=adaptive)

    with path.open("rb") as f:
        pos = f.seek(0, os.SEEK_END)
        if pos == 0:
            return ""

        # A file that does not end with a separator has one fewer to find.
        f.seek(-1, os.SEEK_END)
        remaining = lines if f.read(1) == _NEWLINE else lines - 1

        output = b""
        while pos > 0 and remaining >= 0:
            step = min(pos, buffer)
            pos -= step
            f.seek(pos)
            chunk = f.read(step)
            output = chunk + output
            remaining -= chunk.count(_NEWLINE)

    return _decode(_trim(output, remaining), encoding)


def read_last_line(log_path: str | Path, *, encoding: str = "utf-8") -> str:
    """Return the last line of a file without reading it fully."""
    return tail(log_path, 1, encoding=encoding)


async def tail_async(
    log_path: str | Path,
    lines: int = 1,
    *,
    adaptive: bool = True,
    encoding: str = "utf-8",
) -> str:
    """Async variant of :func:`tail` backed by aiofiles."""
    path = Path(log_path)
    if not path.is_file():
        raise FileNotFoundError(f"Log file not found: {path}")
    if lines < 1:
        raise ValueError("lines must be >= 1")

    buffer = chunk_size(lines, adaptive=adaptive)

    async with aiofiles.open(path, "rb") as f:
        pos = await f.seek(0, os.SEEK_END)
        if pos == 0:
            return ""

        await f.seek(pos - 1)
        remaining = lines if await f.read(1) == _NEWLINE else lines - 1

        output = b""
        while pos > 0 and remaining >= 0:
            step = min(pos, buffer)
            pos -= step
            await f.seek(pos)
            chunk = await f.read(step)
            output = chunk + output
            remaining -= chunk.count(_NEWLINE)

    return _decode(_trim(output, remaining), encoding)
