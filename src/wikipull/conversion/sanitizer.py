"""Structural sanitization of rendered wiki pages."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from ..errors import ExtractionError, InvalidDocument
from ..models.config import DEFAULT_BASE_URL, WikipullConfig
from ..models.document import PageInfo, PageMetadata
from .page_info import extract_page_metadata
from .rules import (
    CONTENT_SELECTORS,
    EMPTY_LEAF_TAGS,
    KEEP_CLASS_FRAGMENTS,
    KEEP_CLASS_NAMES,
    PRESERVE_SELECTORS,
    REMOVE_SELECTORS,
    TABLE_PRESENTATION_ATTRS,
    VALIDITY_MARKERS,
)

logger = logging.getLogger(__name__)

_BLANK_RUN_RE = re.compile(r"\n\s*\n\s*\n")


@dataclass
class SanitizedTree:
    """
    A cleaned content tree owned by one pipeline invocation.

    Attributes:
        soup: Document holding the content container
        root: The content container (``.mw-parser-output`` or a fallback)
        metadata: Page-level info read before the container was isolated
    """

    soup: BeautifulSoup
    root: Tag
    metadata: PageMetadata = field(default_factory=PageMetadata)

    @property
    def html(self) -> str:
        """Serialized content container, outer element included."""
        return str(self.root)


class DocumentSanitizer:
    """
    Loads raw wiki HTML and strips it down to the article body.

    Steps, in order: sanity check, content isolation, rule-based removal,
    markup simplification, single-pass empty-leaf cleanup, blank-line
    collapsing.

    Example:
        sanitizer = DocumentSanitizer()
        tree = sanitizer.sanitize(raw_html)
        print(tree.html)
    """

    def __init__(
        self,
        remove_selectors: Optional[list[str]] = None,
        preserve_selectors: Optional[list[str]] = None,
        simplify_markup: bool = True,
        base_url: str = DEFAULT_BASE_URL,
    ):
        """
        Initialize the sanitizer.

        Args:
            remove_selectors: CSS selectors to remove (extends defaults)
            preserve_selectors: CSS selectors never removed (extends defaults)
            simplify_markup: Unwrap decorative wrappers and strip noise attributes
            base_url: Wiki origin, used for page-level metadata links
        """
        self._remove_selectors = list(REMOVE_SELECTORS)
        if remove_selectors:
            self._remove_selectors.extend(remove_selectors)
        self._preserve_selectors = list(PRESERVE_SELECTORS)
        if preserve_selectors:
            self._preserve_selectors.extend(preserve_selectors)
        self._simplify_markup = simplify_markup
        self._base_url = base_url

    @classmethod
    def from_config(cls, config: WikipullConfig) -> DocumentSanitizer:
        return cls(
            remove_selectors=config.sanitizer.extra_remove_selectors,
            preserve_selectors=config.sanitizer.extra_preserve_selectors,
            simplify_markup=config.sanitizer.simplify_markup,
            base_url=config.base_url,
        )

    @property
    def remove_selectors(self) -> list[str]:
        return list(self._remove_selectors)

    @property
    def preserve_selectors(self) -> list[str]:
        return list(self._preserve_selectors)

    def _detect_encoding(self, html: bytes) -> str:
        """Detect character encoding from HTML content."""
        head = html[:2048].decode("latin-1", errors="ignore")
        charset_match = re.search(r'charset=["\']?([^"\'\s>;]+)', head, re.IGNORECASE)
        if charset_match:
            return charset_match.group(1).strip()
        return "utf-8"

    def _decode(self, raw_html: Union[str, bytes]) -> str:
        if isinstance(raw_html, str):
            return raw_html
        encoding = self._detect_encoding(raw_html)
        try:
            return raw_html.decode(encoding, errors="replace")
        except LookupError:
            return raw_html.decode("utf-8", errors="replace")

    def _is_preserved(self, tag: Tag) -> bool:
        return any(tag.css.match(selector) for selector in self._preserve_selectors)

    def _find_main_content(self, soup: BeautifulSoup) -> Optional[Tag]:
        """Find the content container, trying fallbacks in priority order."""
        for selector in CONTENT_SELECTORS:
            element = soup.select_one(selector)
            if element is not None:
                return element
        return None

    def _remove_unwanted(self, root: Tag) -> int:
        """Delete subtrees matching removal rules; preserved nodes are skipped."""
        removed = 0
        for selector in self._remove_selectors:
            for element in root.select(selector):
                if element.decomposed or self._is_preserved(element):
                    continue
                element.decompose()
                removed += 1
        return removed

    def _remove_empty_leaves(self, root: Tag) -> int:
        """
        Delete p/div/span elements with no child elements and no text.

        Runs exactly once: a parent emptied by this pass is not revisited.
        """
        empty = [
            tag
            for tag in root.find_all(EMPTY_LEAF_TAGS)
            if tag.find(True) is None and not tag.get_text().strip() and not self._is_preserved(tag)
        ]
        for tag in empty:
            tag.decompose()
        return len(empty)

    def _filter_classes(self, tag: Tag) -> None:
        classes = tag.get("class")
        if not classes:
            return
        kept = [
            cls
            for cls in classes
            if cls in KEEP_CLASS_NAMES or any(fragment in cls.lower() for fragment in KEEP_CLASS_FRAGMENTS)
        ]
        if kept:
            tag["class"] = kept
        else:
            del tag["class"]

    def _simplify(self, root: Tag) -> None:
        """Strip presentation noise and unwrap wrappers that carry no meaning."""
        for tag in [root, *root.find_all(True)]:
            for attr in [a for a in tag.attrs if a == "style" or a.startswith("data-")]:
                del tag[attr]
            self._filter_classes(tag)

        for table in root.find_all("table"):
            for attr in TABLE_PRESENTATION_ATTRS:
                table.attrs.pop(attr, None)
            classes = table.get("class") or []
            if "wikitable" not in classes:
                table["class"] = [*classes, "wikitable"]

        for br in root.find_all("br"):
            previous = br.previous_sibling
            if isinstance(previous, Tag) and previous.name == "br":
                br.decompose()

        # Deepest first, so a parent sees its final child list
        for tag in reversed(root.find_all(["span", "div"])):
            if tag.get("id") or tag.get("class") or self._is_preserved(tag):
                continue
            if tag.name == "span":
                tag.unwrap()
            elif len(tag.find_all(True, recursive=False)) <= 1 and not any(
                isinstance(child, str) and child.strip() for child in tag.children
            ):
                tag.unwrap()

    def _collapse_blank_lines(self, root: Tag) -> tuple[BeautifulSoup, Tag]:
        """Collapse runs of blank lines in the serialized tree and reparse it."""
        html = _BLANK_RUN_RE.sub("\n\n", str(root))
        soup = BeautifulSoup(html, "html.parser")
        new_root = soup.find(True)
        if not isinstance(new_root, Tag):
            raise ExtractionError("Content container vanished during whitespace cleanup")
        return soup, new_root

    def sanitize(
        self,
        raw_html: Union[str, bytes],
        page: Optional[PageInfo] = None,
    ) -> SanitizedTree:
        """
        Sanitize a raw wiki page.

        Args:
            raw_html: Page HTML (str or bytes)
            page: Optional metadata from the fetch layer

        Returns:
            SanitizedTree with the cleaned content container

        Raises:
            InvalidDocument: Empty input, wrong type, or no wiki markers
            ExtractionError: No content container could be located
        """
        page_name = page.title if page else None

        if not isinstance(raw_html, (str, bytes)):
            raise InvalidDocument(
                f"HTML must be str or bytes, got {type(raw_html).__name__}",
                page=page_name,
            )
        text = self._decode(raw_html)
        if not text.strip():
            raise InvalidDocument("HTML content is empty", page=page_name)

        document = BeautifulSoup(text, "html.parser")
        if not any(document.select_one(marker) is not None for marker in VALIDITY_MARKERS):
            raise InvalidDocument("Not a rendered wiki page: no content markers found", page=page_name)

        metadata = extract_page_metadata(document, page, self._base_url)

        main_content = self._find_main_content(document)
        if main_content is None:
            raise ExtractionError("Main content container not found", page=page_name)

        # Work on a private copy of the container
        soup = BeautifulSoup(str(main_content), "html.parser")
        root = soup.find(True)
        if not isinstance(root, Tag):
            raise ExtractionError("Main content container is empty", page=page_name)

        removed = self._remove_unwanted(root)
        if self._simplify_markup:
            self._simplify(root)
        emptied = self._remove_empty_leaves(root)
        soup, root = self._collapse_blank_lines(root)

        logger.debug(f"Sanitized {page_name or 'page'}: removed {removed} nodes, {emptied} empty leaves")
        return SanitizedTree(soup=soup, root=root, metadata=metadata)
