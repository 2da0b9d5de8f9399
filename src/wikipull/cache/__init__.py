"""In-process result caching for wikipull."""

from .keys import CacheKey, normalize_page_name
from .memory import DEFAULT_MAX_SIZE, DEFAULT_TTL_SECONDS, BoundedCache, CacheEntry

__all__ = [
    "BoundedCache",
    "CacheEntry",
    "CacheKey",
    "normalize_page_name",
    "DEFAULT_MAX_SIZE",
    "DEFAULT_TTL_SECONDS",
]
