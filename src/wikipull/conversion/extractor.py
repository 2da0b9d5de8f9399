"""Structured component extraction from sanitized wiki trees."""

from __future__ import annotations

import logging
import re
from typing import Optional, Union

from bs4 import BeautifulSoup, Tag

from ..models.document import (
    ContentComponents,
    ImageRecord,
    InfoboxRecord,
    Section,
    TableRecord,
    TocEntry,
)
from .nodes import (
    HEADING_TAGS,
    NodeKind,
    classify_node,
    find_toc,
    image_caption,
    in_subtree,
    infobox_fields,
    infobox_kind,
    infobox_title,
    node_text,
    own_rows,
    parse_dimension,
    row_cells,
    toc_entry_text,
    toc_level,
)
from .sanitizer import SanitizedTree

logger = logging.getLogger(__name__)

# Subtrees excluded from the plain-text rendition
TEXT_EXCLUDE_SELECTORS = ["script", "style", ".infobox", "#toc", ".toc", ".navbox"]

_CJK_CHAR_RE = re.compile(r"[\u4e00-\u9fff]")
_LATIN_WORD_RE = re.compile(r"[a-zA-Z]+")


def _root_of(tree: Union[SanitizedTree, Tag]) -> Tag:
    return tree.root if isinstance(tree, SanitizedTree) else tree


class ComponentExtractor:
    """
    Harvests sections, images, tables, info boxes and the TOC from a tree.

    Extraction never mutates the tree. Records come out in document order.

    Example:
        components = ComponentExtractor().extract(tree)
        for section in components.sections:
            print(section.level, section.text)
    """

    def extract(self, tree: Union[SanitizedTree, Tag]) -> ContentComponents:
        """
        Extract all component records in a single walk.

        Args:
            tree: Sanitized tree (or its content root)

        Returns:
            ContentComponents with records in document order
        """
        root = _root_of(tree)
        toc = find_toc(root)

        sections: list[Section] = []
        images: list[ImageRecord] = []
        tables: list[TableRecord] = []
        infoboxes: list[InfoboxRecord] = []

        for node in [root, *root.find_all(True)]:
            kind = classify_node(node)

            if kind == NodeKind.INFOBOX:
                infoboxes.append(self._infobox(node))

            # Info box tables are tables too
            if node.name == "table":
                tables.append(self._table(node))
            elif node.name == "img":
                image = self._image(node)
                if image is not None:
                    images.append(image)
            elif node.name in HEADING_TAGS and not in_subtree(node, toc):
                section = self._section(node)
                if section is not None:
                    sections.append(section)

        components = ContentComponents(
            sections=tuple(sections),
            images=tuple(images),
            tables=tuple(tables),
            infoboxes=tuple(infoboxes),
            toc=self._toc(toc) if toc is not None else None,
        )
        logger.debug(
            f"Extracted {len(sections)} sections, {len(images)} images, "
            f"{len(tables)} tables, {len(infoboxes)} infoboxes"
        )
        return components

    def _section(self, heading: Tag) -> Optional[Section]:
        text = node_text(heading)
        if not text:
            return None
        anchor_id = heading.get("id") or ""
        if not anchor_id:
            headline = heading.select_one(".mw-headline[id]")
            if headline is not None:
                anchor_id = headline["id"]
        return Section(level=int(heading.name[1]), text=text, anchor_id=anchor_id)

    def _image(self, img: Tag) -> Optional[ImageRecord]:
        src = img.get("src")
        if not src:
            return None
        return ImageRecord(
            url=src,
            alt=img.get("alt", ""),
            caption=image_caption(img) or None,
            width=parse_dimension(img.get("width")),
            height=parse_dimension(img.get("height")),
        )

    def _table(self, table: Tag) -> TableRecord:
        rows = own_rows(table)
        widths = [len(row_cells(row)) for row in rows]
        caption = table.find("caption", recursive=False)
        return TableRecord(
            caption=(node_text(caption) or None) if caption is not None else None,
            row_count=len(rows),
            col_count=max(widths, default=0),
            has_header_row=bool(rows) and rows[0].find("th", recursive=False) is not None,
        )

    def _infobox(self, node: Tag) -> InfoboxRecord:
        return InfoboxRecord(
            title=infobox_title(node),
            kind=infobox_kind(node),
            has_image=node.find("img") is not None,
            fields=tuple(infobox_fields(node)),
        )

    def _toc(self, toc: Tag) -> tuple[TocEntry, ...]:
        """
        Flatten the TOC into entries in document order.

        Nesting is carried by ``level`` (1 for top-level entries), so a
        level-2 entry belongs to the nearest preceding level-1 entry.
        """
        entries = []
        for link in toc.find_all("a", href=True):
            text = toc_entry_text(link)
            if text:
                entries.append(TocEntry(text=text, href=link["href"], level=toc_level(link, toc)))
        return tuple(entries)


def text_content(tree: Union[SanitizedTree, Tag]) -> str:
    """Plain article text without info boxes, TOC, navboxes or scripts."""
    soup = BeautifulSoup(str(_root_of(tree)), "html.parser")
    for selector in TEXT_EXCLUDE_SELECTORS:
        for element in soup.select(selector):
            if not element.decomposed:
                element.decompose()
    return " ".join(soup.get_text(" ").split())


def count_words(text: str) -> int:
    """Count CJK ideographs individually plus runs of Latin letters."""
    return len(_CJK_CHAR_RE.findall(text)) + len(_LATIN_WORD_RE.findall(text))
