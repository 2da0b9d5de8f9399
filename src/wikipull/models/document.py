"""Records produced by the transformation pipeline."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Optional, Union


class OutputFormat(str, Enum):
    """Which artifacts a request wants materialized."""

    HTML = "html"
    MARKDOWN = "markdown"
    BOTH = "both"

    @property
    def wants_markdown(self) -> bool:
        return self in (OutputFormat.MARKDOWN, OutputFormat.BOTH)


@dataclass(frozen=True)
class PageInfo:
    """
    Lightweight metadata supplied alongside raw HTML by the fetch layer.

    Attributes:
        title: Requested page title (used as the page identity)
        namespace: Wiki namespace, if known
        source_url: URL the HTML was fetched from
    """

    title: str = ""
    namespace: str = ""
    source_url: Optional[str] = None


@dataclass(frozen=True)
class Section:
    level: int
    text: str
    anchor_id: str = ""

    @property
    def anchor(self) -> str:
        return f"#{self.anchor_id}" if self.anchor_id else ""


@dataclass(frozen=True)
class ImageRecord:
    url: str
    alt: str = ""
    caption: Optional[str] = None
    width: Optional[int] = None
    height: Optional[int] = None


@dataclass(frozen=True)
class TableRecord:
    caption: Optional[str]
    row_count: int
    col_count: int
    has_header_row: bool


@dataclass(frozen=True)
class InfoboxRecord:
    title: str
    kind: str
    has_image: bool = False
    fields: tuple[tuple[str, str], ...] = ()


@dataclass(frozen=True)
class TocEntry:
    text: str
    href: str
    level: int = 1


@dataclass(frozen=True)
class ContentComponents:
    """
    Structured records harvested from a sanitized tree, in document order.

    ``toc`` is a flat tuple; each entry's ``level`` gives its depth in the
    nested contents list. None when the page has no TOC.
    """

    sections: tuple[Section, ...] = ()
    images: tuple[ImageRecord, ...] = ()
    tables: tuple[TableRecord, ...] = ()
    infoboxes: tuple[InfoboxRecord, ...] = ()
    toc: Optional[tuple[TocEntry, ...]] = None

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        for infobox in data["infoboxes"]:
            infobox["fields"] = [{"label": label, "value": value} for label, value in infobox["fields"]]
        return data


@dataclass(frozen=True)
class PageStats:
    word_count: int = 0
    image_count: int = 0
    table_count: int = 0
    section_count: int = 0

    @classmethod
    def from_components(cls, components: ContentComponents, word_count: int) -> PageStats:
        """Derive counts from the component lists so they can never disagree."""
        return cls(
            word_count=word_count,
            image_count=len(components.images),
            table_count=len(components.tables),
            section_count=len(components.sections),
        )


@dataclass(frozen=True)
class MarkdownStats:
    """Size figures for one HTML to Markdown conversion."""

    original_length: int = 0
    converted_length: int = 0
    compression_ratio: float = 0.0
    lines_count: int = 0
    words_count: int = 0

    @classmethod
    def measure(cls, html: str, markdown: str, words_count: int) -> MarkdownStats:
        return cls(
            original_length=len(html),
            converted_length=len(markdown),
            compression_ratio=round(len(markdown) / len(html), 2) if html else 0.0,
            lines_count=len(markdown.split("\n")),
            words_count=words_count,
        )


@dataclass(frozen=True)
class Category:
    name: str
    url: str


@dataclass(frozen=True)
class LanguageLink:
    name: str
    url: str
    code: Optional[str] = None


@dataclass(frozen=True)
class PageMetadata:
    """Page-level information read from the chrome around the content."""

    title: str = ""
    subtitle: str = ""
    namespace: str = ""
    categories: tuple[Category, ...] = ()
    languages: tuple[LanguageLink, ...] = ()
    last_modified: Optional[str] = None


@dataclass(frozen=True)
class RenderedOutput:
    """
    Materialized result for one (page, format) request.

    Immutable once produced; this is what the cache stores.
    """

    page: str
    format: OutputFormat
    html: str
    components: ContentComponents
    stats: PageStats
    text: str = ""
    markdown: Optional[str] = None
    markdown_stats: Optional[MarkdownStats] = None
    metadata: PageMetadata = field(default_factory=PageMetadata)

    def to_dict(self) -> dict[str, Any]:
        """
        Serialize for response assembly.

        Markdown-only requests carry neither the HTML nor the components,
        matching what callers of the markdown endpoint expect.
        """
        content: dict[str, Any] = {"text": self.text}
        if self.format != OutputFormat.MARKDOWN:
            content["html"] = self.html
            content["components"] = self.components.to_dict()
        if self.markdown is not None:
            content["markdown"] = self.markdown
        if self.markdown_stats is not None:
            content["markdown_stats"] = asdict(self.markdown_stats)

        return {
            "page": self.page,
            "format": self.format.value,
            "metadata": asdict(self.metadata),
            "content": content,
            "stats": asdict(self.stats),
        }


@dataclass(frozen=True)
class RawPage:
    """HTML for one page as delivered by the fetch layer."""

    html: Union[str, bytes]
    info: PageInfo = field(default_factory=PageInfo)


@dataclass
class BatchResult:
    """
    Outcome of a multi-page request.

    One page failing never aborts its siblings; each failure is recorded
    under the page name it was requested with.
    """

    results: dict[str, RenderedOutput] = field(default_factory=dict)
    errors: dict[str, Exception] = field(default_factory=dict)

    @property
    def succeeded(self) -> int:
        return len(self.results)

    @property
    def failed(self) -> int:
        return len(self.errors)

    def to_dict(self) -> dict[str, Any]:
        errors: dict[str, Any] = {}
        for name, error in self.errors.items():
            to_dict = getattr(error, "to_dict", None)
            errors[name] = to_dict() if callable(to_dict) else {"message": str(error)}
        return {
            "results": {name: output.to_dict() for name, output in self.results.items()},
            "errors": errors,
            "succeeded": self.succeeded,
            "failed": self.failed,
        }
