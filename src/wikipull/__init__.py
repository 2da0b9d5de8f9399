"""
wikipull - Turn rendered MediaWiki pages into clean HTML and Markdown.

Usage:
    from wikipull import OutputFormat, PageInfo, PageService

    service = PageService()
    output = service.process(html, PageInfo(title="Creeper"), OutputFormat.BOTH)
    print(output.markdown)
"""

__version__ = "1.0.0"

from .cache import BoundedCache, CacheKey, normalize_page_name
from .conversion import (
    ComponentExtractor,
    DocumentSanitizer,
    MarkdownRenderer,
    ReferenceNormalizer,
    SanitizedTree,
)
from .core import PageService, PageSource
from .errors import ConversionError, ExtractionError, InvalidDocument, PageFetchError, WikipullError
from .models.config import (
    CacheConfig,
    ImageConfig,
    LinkConfig,
    MarkdownConfig,
    PerformanceConfig,
    SanitizerConfig,
    WikipullConfig,
)
from .models.document import (
    BatchResult,
    ContentComponents,
    MarkdownStats,
    OutputFormat,
    PageInfo,
    PageStats,
    RawPage,
    RenderedOutput,
)
from .models.events import EventType, PipelineEvent, ServiceStats
from .pipeline import TransformPipeline, default_pipeline

__all__ = [
    "__version__",
    # Core
    "PageService",
    "PageSource",
    "TransformPipeline",
    "default_pipeline",
    # Conversion
    "DocumentSanitizer",
    "SanitizedTree",
    "ReferenceNormalizer",
    "ComponentExtractor",
    "MarkdownRenderer",
    # Cache
    "BoundedCache",
    "CacheKey",
    "normalize_page_name",
    # Config
    "WikipullConfig",
    "SanitizerConfig",
    "ImageConfig",
    "LinkConfig",
    "MarkdownConfig",
    "CacheConfig",
    "PerformanceConfig",
    # Records
    "BatchResult",
    "ContentComponents",
    "MarkdownStats",
    "OutputFormat",
    "PageInfo",
    "PageStats",
    "RawPage",
    "RenderedOutput",
    # Events
    "EventType",
    "PipelineEvent",
    "ServiceStats",
    # Errors
    "WikipullError",
    "InvalidDocument",
    "ExtractionError",
    "ConversionError",
    "PageFetchError",
]
