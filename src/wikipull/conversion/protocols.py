"""Protocol definitions for content conversion."""

from typing import Any, Optional, Protocol, Union

from ..models.document import ContentComponents, PageInfo
from .sanitizer import SanitizedTree


class TreeSanitizer(Protocol):
    """
    Protocol for turning raw page HTML into a cleaned content tree.

    Implementations isolate the article body and remove page chrome.
    """

    def sanitize(self, raw_html: Union[str, bytes], page: Optional[PageInfo] = None) -> SanitizedTree:
        """
        Sanitize a raw page.

        Args:
            raw_html: Page HTML
            page: Metadata from the fetch layer

        Returns:
            SanitizedTree owned by the caller
        """
        ...


class TreeNormalizer(Protocol):
    """Protocol for in-place link and image rewriting."""

    def normalize(self, tree: SanitizedTree, page_url: Optional[str] = None) -> SanitizedTree: ...


class ComponentHarvester(Protocol):
    """Protocol for read-only extraction of structured components."""

    def extract(self, tree: SanitizedTree) -> ContentComponents: ...


class MarkdownConverter(Protocol):
    """
    Protocol for converting a content tree to Markdown.

    Implementations must not mutate the tree they are given.
    """

    def render(self, tree: Any, page_url: Optional[str] = None) -> str:
        """
        Convert a tree to Markdown.

        Args:
            tree: SanitizedTree, Tag or HTML string
            page_url: Source URL (for resolving relative links)

        Returns:
            Markdown string
        """
        ...
