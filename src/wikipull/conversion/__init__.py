"""Content conversion for wikipull (sanitize, normalize, extract, Markdown)."""

from .extractor import ComponentExtractor, count_words, text_content
from .markdown import MarkdownRenderer
from .nodes import NodeKind, classify_node
from .normalizer import LinkKind, ReferenceNormalizer
from .page_info import extract_page_metadata
from .protocols import ComponentHarvester, MarkdownConverter, TreeNormalizer, TreeSanitizer
from .sanitizer import DocumentSanitizer, SanitizedTree

__all__ = [
    # Protocols
    "TreeSanitizer",
    "TreeNormalizer",
    "ComponentHarvester",
    "MarkdownConverter",
    # Implementations
    "DocumentSanitizer",
    "SanitizedTree",
    "ReferenceNormalizer",
    "LinkKind",
    "ComponentExtractor",
    "MarkdownRenderer",
    "NodeKind",
    "classify_node",
    "extract_page_metadata",
    "text_content",
    "count_words",
]
