"""Concurrency management for wikipull."""

from .manager import ConcurrencyManager

__all__ = ["ConcurrencyManager"]
