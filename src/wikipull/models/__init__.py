"""Wikipull configuration, record and event models."""

from .config import (
    DEFAULT_BASE_URL,
    CacheConfig,
    ImageConfig,
    LinkConfig,
    MarkdownConfig,
    PerformanceConfig,
    SanitizerConfig,
    WikipullConfig,
)
from .document import (
    BatchResult,
    Category,
    ContentComponents,
    ImageRecord,
    InfoboxRecord,
    LanguageLink,
    MarkdownStats,
    OutputFormat,
    PageInfo,
    PageMetadata,
    PageStats,
    RawPage,
    RenderedOutput,
    Section,
    TableRecord,
    TocEntry,
)
from .events import EventType, PipelineEvent, ServiceStats

__all__ = [
    # Config
    "DEFAULT_BASE_URL",
    "CacheConfig",
    "ImageConfig",
    "LinkConfig",
    "MarkdownConfig",
    "PerformanceConfig",
    "SanitizerConfig",
    "WikipullConfig",
    # Records
    "BatchResult",
    "Category",
    "ContentComponents",
    "ImageRecord",
    "InfoboxRecord",
    "LanguageLink",
    "MarkdownStats",
    "OutputFormat",
    "PageInfo",
    "PageMetadata",
    "PageStats",
    "RawPage",
    "RenderedOutput",
    "Section",
    "TableRecord",
    "TocEntry",
    # Events
    "EventType",
    "PipelineEvent",
    "ServiceStats",
]
