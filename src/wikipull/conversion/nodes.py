"""Node classification and shared tree helpers.

Every element is classified once into a closed ``NodeKind``; the extractor
and the Markdown rule engine dispatch on the kind instead of re-matching
class strings.
"""

from __future__ import annotations

import re
from enum import Enum
from typing import Optional

from bs4 import Tag

from .rules import (
    CHROME_CLASS_FRAGMENTS,
    EDIT_SECTION_CLASS,
    FOOTNOTE_CLASS_FRAGMENTS,
    IMAGE_BLOCK_CLASSES,
    IMAGE_CAPTION_SELECTORS,
    INFOBOX_CLASS,
    INFOBOX_TITLE_SELECTORS,
    TOC_MAX_LEVEL,
    TOC_SELECTORS,
)

HEADING_TAGS = ("h1", "h2", "h3", "h4", "h5", "h6")
CHROME_TAGS = ("div", "table", "aside", "nav", "section")

_DIMENSION_RE = re.compile(r"^\s*(\d+)")


class NodeKind(str, Enum):
    """Closed set of element kinds the pipeline treats specially."""

    FOOTNOTE = "footnote"
    EDIT_SECTION = "edit_section"
    CHROME = "chrome"
    TOC = "toc"
    INFOBOX = "infobox"
    IMAGE_BLOCK = "image_block"
    TABLE = "table"
    IMAGE = "image"
    HEADING = "heading"
    GENERIC = "generic"


def class_tokens(tag: Tag) -> list[str]:
    """Return the element's class tokens as a list."""
    classes = tag.get("class") or []
    if isinstance(classes, str):
        classes = classes.split()
    return list(classes)


def has_class_fragment(tag: Tag, fragments: tuple[str, ...]) -> bool:
    """True if any class token contains any fragment (case-insensitive)."""
    for token in class_tokens(tag):
        lowered = token.lower()
        if any(fragment in lowered for fragment in fragments):
            return True
    return False


def classify_node(tag: Tag) -> NodeKind:
    """
    Classify an element. Checks run in precedence order, so an element that
    qualifies for several kinds gets the first one.
    """
    name = tag.name
    classes = class_tokens(tag)

    if name == "sup" and has_class_fragment(tag, FOOTNOTE_CLASS_FRAGMENTS):
        return NodeKind.FOOTNOTE
    if name == "span" and EDIT_SECTION_CLASS in classes:
        return NodeKind.EDIT_SECTION
    if name in CHROME_TAGS and has_class_fragment(tag, CHROME_CLASS_FRAGMENTS):
        return NodeKind.CHROME
    if tag.get("id") == "toc" or "toc" in classes:
        return NodeKind.TOC
    if INFOBOX_CLASS in classes:
        return NodeKind.INFOBOX
    if name == "figure" or any(cls in classes for cls in IMAGE_BLOCK_CLASSES):
        return NodeKind.IMAGE_BLOCK
    if name == "table":
        return NodeKind.TABLE
    if name == "img":
        return NodeKind.IMAGE
    if name in HEADING_TAGS:
        return NodeKind.HEADING
    return NodeKind.GENERIC


def node_text(tag: Tag) -> str:
    """Visible text with whitespace runs collapsed to single spaces."""
    return " ".join(tag.get_text().split())


def parse_dimension(value: object) -> Optional[int]:
    """Parse a declared width/height ("20", "20px"); None when absent or invalid."""
    if value is None:
        return None
    match = _DIMENSION_RE.match(str(value))
    if not match:
        return None
    return int(match.group(1))


def first_text(node: Tag, selectors: list[str]) -> str:
    """Try each selector in order, returning the first non-empty text found."""
    for selector in selectors:
        for element in node.select(selector):
            text = node_text(element)
            if text:
                return text
    return ""


def find_toc(root: Tag) -> Optional[Tag]:
    """Locate the table-of-contents subtree, including the root itself."""
    if classify_node(root) == NodeKind.TOC:
        return root
    for selector in TOC_SELECTORS:
        toc = root.select_one(selector)
        if toc is not None:
            return toc
    return None


def toc_level(link: Tag, toc: Tag) -> int:
    """Nesting depth of a TOC link: one per enclosing list, capped."""
    level = 0
    for parent in link.parents:
        if parent is toc:
            break
        if parent.name in ("ul", "ol"):
            level += 1
    return min(max(level, 1), TOC_MAX_LEVEL)


def image_wrapper(img: Tag) -> Optional[Tag]:
    """Nearest enclosing image block (thumb, thumbinner or figure)."""
    for parent in img.parents:
        if not isinstance(parent, Tag) or parent.name == "[document]":
            return None
        if classify_node(parent) == NodeKind.IMAGE_BLOCK:
            return parent
    return None


def image_caption(img: Tag) -> str:
    """Caption text of the image block an image sits in, or empty."""
    wrapper = image_wrapper(img)
    if wrapper is None:
        return ""
    return first_text(wrapper, IMAGE_CAPTION_SELECTORS)


def own_rows(table: Tag) -> list[Tag]:
    """Rows that belong to this table, not to tables nested inside it."""
    return [row for row in table.find_all("tr") if row.find_parent("table") is table]


def row_cells(row: Tag) -> list[Tag]:
    return row.find_all(["th", "td"], recursive=False)


def infobox_title(node: Tag) -> str:
    return first_text(node, INFOBOX_TITLE_SELECTORS)


def infobox_fields(node: Tag) -> list[tuple[str, str]]:
    """
    Label/value pairs of an info box.

    Table-shaped boxes use rows with at least two cells; otherwise
    consecutive dt/dd pairs are used.
    """
    fields: list[tuple[str, str]] = []
    rows = node.find_all("tr")

    if rows:
        for row in rows:
            cells = row_cells(row)
            if len(cells) >= 2:
                label = node_text(cells[0])
                value = node_text(cells[1])
                if label and value:
                    fields.append((label, value))
    else:
        terms = node.find_all(["dt", "dd"])
        for i in range(0, len(terms) - 1, 2):
            label = node_text(terms[i])
            value = node_text(terms[i + 1])
            if label and value:
                fields.append((label, value))

    return fields


def infobox_kind(node: Tag) -> str:
    for token in class_tokens(node):
        if INFOBOX_CLASS in token.lower():
            return token
    return INFOBOX_CLASS


def toc_entry_text(link: Tag) -> str:
    """Label of a TOC link: the ``.toctext`` part when present, else all text."""
    return first_text(link, [".toctext"]) or node_text(link)


def in_subtree(node: Tag, ancestor: Optional[Tag]) -> bool:
    return ancestor is not None and (node is ancestor or ancestor in node.parents)
