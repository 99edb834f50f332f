"""Command line interface.

    chainlog emit error "disk full" --dir ./logs --context '{"mount": "/var"}'
    chainlog tail ./logs/log_2026-10-19.log -n 5
    chainlog levels
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from collections.abc import Sequence
from typing import Any


from chainlog.core.errors import ChainLogError
from chainlog.core.handlers import STREAM_TARGETS, FileHandler, StreamHandler
from chainlog.core.handlers.base import BaseHandler
from chainlog.core.levels import LEVEL_NAMES, Level, to_level_code
from chainlog.core.logger import Logger
from chainlog.core.tail import tail_async

LOGGER = logging.getLogger(__name__)


def _configure_logging() -> None:
    """Configure diagnostics for the library itself (stderr)."""
    level_name = os.getenv("CHAINLOG_LOG_LEVEL", "WARNING").upper()
    level = getattr(logging, level_name, logging.WARNING)
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _parse_level(s: str) -> int:
    try:
        return to_level_code(s)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from e


def _parse_context(s: str) -> dict[str, Any]:
    try:
        value = json.loads(s)
    except json.JSONDecodeError as e:
        raise argparse.ArgumentTypeError(f"context must be JSON: {e}") from e
    if not isinstance(value, dict):
        raise argparse.ArgumentTypeError("context must be a JSON object")
    return value


def _build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="chainlog", description="Leveled event logging to files and streams.")
    sub = p.add_subparsers(dest="command", required=True)

    emit = sub.add_parser("emit", help="Log a single event")
    emit.add_argument("level", type=_parse_level, help=f"One of: {', '.join(LEVEL_NAMES)}")
    emit.add_argument("message")
    emit.add_argument("--channel", default="cli")
    emit.add_argument("--context", type=_parse_context, default=None, help="JSON object")
    emit.add_argument("--dir", dest="directory", default=None, help="Write to a log file in this directory")
    emit.add_argument("--filename", default=None)
    emit.add_argument("--prefix", default="log_")
    emit.add_argument("--extension", default="log")
    emit.add_argument("--append-context", action="store_true", help="Write context below the entry")
    emit.add_argument("--stream", choices=[t for t in STREAM_TARGETS if t != "memory"], default=None)
    emit.add_argument("--color", action="store_true", help="Colorize stream output")
    emit.add_argument("--threshold", type=_parse_level, default=Level.DEBUG, help="Least severe level recorded")
    emit.add_argument("--timezone", default=None)

    t = sub.add_parser("tail", help="Print the last lines of a log file")
    t.add_argument("log_path")
    t.add_argument("-n", "--lines", type=int, default=1)

    sub.add_parser("levels", help="List severity levels")
    return p


def _build_handlers(args: argparse.Namespace) -> list[BaseHandler]:
    handlers: list[BaseHandler] = []
    try:
        if args.directory:
            handlers.append(
                FileHandler(
                    args.directory,
                    args.threshold,
                    {
                        "filename": args.filename,
                        "prefix": args.prefix,
                        "extension": args.extension,
                        "appendContext": args.append_context,
                    },
                )
            )
        if args.stream or not handlers:
            handlers.append(StreamHandler(args.stream or "stderr", args.threshold, {"color": args.color}))
    except Exception:
        for handler in handlers:
            handler.release()
        raise
    return handlers


def _emit(args: argparse.Namespace) -> None:
    logger = Logger(args.channel, options={"timezone": args.timezone})
    handlers = _build_handlers(args)
    logger.set_handlers(handlers)
    try:
        logger.log(args.level, args.message, args.context)
    finally:
        logger.close()

    for h in handlers:
        if isinstance(h, FileHandler):
            print(h.path)


def main(argv: Sequence[str] | None = None) -> None:
    _configure_logging()
    args = _build_parser().parse_args(argv)
    LOGGER.debug("Running command %s", args.command)

    try:
        if args.command == "emit":
            _emit(args)
        elif args.command == "tail":
            print(asyncio.run(tail_async(args.log_path, args.lines)))
        elif args.command == "levels":
            for level in Level:
                print(f"{level.value} {level.name.lower()}")
    except FileNotFoundError as e:
        print(str(e), file=sys.stderr)
        raise SystemExit(2)
    except (ChainLogError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(2)


if __name__ == "__main__":
    main()
