"""Event handlers.

Handlers decide per event whether to record it and whether later handlers
in the stack still see it.
"""

from __future__ import annotations

from .base import BaseHandler, Handler
from .file import FileHandler, resolve_log_path
from .proxy import ExternalLogger, ProxyHandler
from .stream import STREAM_TARGETS, StreamHandler

__all__ = [
    "BaseHandler",
    "ExternalLogger",
    "FileHandler",
    "Handler",
    "ProxyHandler",
    "STREAM_TARGETS",
    "StreamHandler",
    "resolve_log_path",
]
