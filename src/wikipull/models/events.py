"""Event types emitted while pages move through the pipeline."""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional


class EventType(str, Enum):
    """Types of events emitted during page processing."""

    # Cache
    CACHE_HIT = "cache_hit"
    CACHE_MISS = "cache_miss"
    PAGE_CACHED = "page_cached"

    # Transformation stages
    PAGE_SANITIZED = "page_sanitized"
    PAGE_NORMALIZED = "page_normalized"
    COMPONENTS_EXTRACTED = "components_extracted"
    PAGE_CONVERTED = "page_converted"

    # Failures
    PAGE_FAILED = "page_failed"


@dataclass
class PipelineEvent:
    """
    Event emitted during page processing.

    Example:
        def on_event(event: PipelineEvent) -> None:
            if event.type == EventType.PAGE_FAILED:
                print(f"{event.page} failed at {event.stage}: {event.error}")
    """

    type: EventType

    # Timestamp (always UTC)
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    page: Optional[str] = None
    stage: Optional[str] = None
    message: Optional[str] = None
    error: Optional[str] = None

    @property
    def is_error(self) -> bool:
        """Check if this is an error event."""
        return self.type == EventType.PAGE_FAILED


@dataclass
class ServiceStats:
    """Cumulative statistics for a PageService instance."""

    pages_processed: int = 0
    pages_failed: int = 0
    cache_hits: int = 0
    cache_misses: int = 0

    @property
    def hit_rate(self) -> float:
        """Cache hit rate as a percentage."""
        total = self.cache_hits + self.cache_misses
        if total == 0:
            return 0.0
        return (self.cache_hits / total) * 100

    def to_dict(self) -> dict:
        """Convert stats to dictionary for serialization."""
        return {
            "pages_processed": self.pages_processed,
            "pages_failed": self.pages_failed,
            "cache_hits": self.cache_hits,
            "cache_misses": self.cache_misses,
            "hit_rate": round(self.hit_rate, 1),
        }
