"""Event processors."""

from __future__ import annotations

from .base import BaseProcessor, Processor
from .memory import MemoryProcessor

__all__ = ["BaseProcessor", "MemoryProcessor", "Processor"]
