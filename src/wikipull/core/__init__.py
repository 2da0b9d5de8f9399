"""Core service for wikipull."""

from .protocols import PageSource
from .service import PageService

__all__ = ["PageService", "PageSource"]
