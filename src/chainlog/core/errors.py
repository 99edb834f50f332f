"""Error taxonomy for loggers, handlers and stacks."""

from __future__ import annotations


class ChainLogError(Exception):
    """Base class for all chainlog errors."""


class InvalidLevelError(ChainLogError, ValueError):
    def __init__(self, level: object, message: str):
        self.level = level
        super().__init__(message)


class EmptyStackError(ChainLogError, IndexError):
    pass


class HandlerError(ChainLogError):
    """A handler failed to acquire, use or release its output resource."""

    def __init__(self, target: object, reason: str):
        self.target = target
        self.reason = reason
        super().__init__(reason)


class OpenFailedError(HandlerError):
    pass


class PathNotWritableError(HandlerError):
    pass


class UnsupportedTargetError(HandlerError):
    pass


class WriteFailedError(HandlerError):
    pass


class ResourceUnavailableError(HandlerError):
    pass
