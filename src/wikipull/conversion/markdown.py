"""Rule-driven HTML to Markdown conversion for wiki content."""

from __future__ import annotations

import logging
import re
import uuid
from typing import Any, Callable, Optional

import html2text
from bs4 import BeautifulSoup, Tag

from ..errors import ConversionError
from ..models.config import DEFAULT_BASE_URL, WikipullConfig
from .nodes import (
    NodeKind,
    classify_node,
    first_text,
    infobox_fields,
    infobox_title,
    node_text,
    own_rows,
    row_cells,
    toc_entry_text,
    toc_level,
)
from .rules import CJK_PUNCTUATION, IMAGE_CAPTION_SELECTORS
from .sanitizer import SanitizedTree

logger = logging.getLogger(__name__)

# Kinds whose output stays inside the surrounding line
INLINE_KINDS = frozenset({NodeKind.FOOTNOTE, NodeKind.IMAGE})

_CJK_BEFORE_RE = re.compile(rf"[ \t]+([{CJK_PUNCTUATION}])")
_CJK_AFTER_RE = re.compile(rf"([{CJK_PUNCTUATION}])[ \t]+")
_LINK_LABEL_RE = re.compile(r"\[[ \t]+([^\]\n]*?)[ \t]*\]\(|\[([^\]\n]*?)[ \t]+\]\(")
_ALT_SPECIAL_RE = re.compile(r"([\[\]])")
_EMPHASIS_SPECIAL_RE = re.compile(r"([*_])")


def _is_table_line(line: str) -> bool:
    return line.lstrip().startswith("|")


class MarkdownRenderer:
    """
    Converts a sanitized wiki tree to Markdown.

    Special nodes (info boxes, tables, image blocks, the TOC, footnote
    markers, navigation chrome) are rendered by a rule per ``NodeKind``;
    everything else goes through html2text in the same pass. Rule output is
    spliced in via opaque placeholder tokens, so html2text never sees it.

    Example:
        renderer = MarkdownRenderer(base_url="https://zh.minecraft.wiki")
        markdown = renderer.render(tree)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        toc_heading: str = "Table of Contents",
        infobox_fallback_title: str = "Information",
        image_captions: bool = True,
        body_width: int = 0,
        inline_links: bool = True,
        wrap_links: bool = False,
        protect_links: bool = False,
        unicode_snob: bool = True,
        escape_snob: bool = True,
    ):
        """
        Initialize the renderer.

        Args:
            base_url: Wiki origin for resolving relative links
            toc_heading: Heading emitted above the TOC list
            infobox_fallback_title: Heading for info boxes without a title
            image_captions: Emit italic captions under image blocks
            body_width: Max line width (0 = no wrapping)
            inline_links: Use inline [text](url) vs reference style
            wrap_links: Wrap long links
            protect_links: Wrap link targets in angle brackets
            unicode_snob: Use Unicode chars where possible
            escape_snob: Escape special Markdown chars
        """
        self.base_url = base_url
        self.toc_heading = toc_heading
        self.infobox_fallback_title = infobox_fallback_title
        self.image_captions = image_captions
        self._converter_options: dict[str, Any] = {
            "body_width": body_width,
            "inline_links": inline_links,
            "wrap_links": wrap_links,
            "protect_links": protect_links,
            "unicode_snob": unicode_snob,
            "escape_snob": escape_snob,
            "default_image_alt": "",
            "single_line_break": False,
        }
        self._rules: dict[NodeKind, Callable[[Tag], str]] = {
            NodeKind.INFOBOX: self._render_infobox,
            NodeKind.TABLE: self._render_table,
            NodeKind.IMAGE_BLOCK: self._render_image_block,
            NodeKind.IMAGE: self._render_image,
            NodeKind.TOC: self._render_toc,
            NodeKind.FOOTNOTE: self._render_footnote,
            NodeKind.CHROME: lambda node: "",
            NodeKind.EDIT_SECTION: lambda node: "",
        }

    @classmethod
    def from_config(cls, config: WikipullConfig) -> MarkdownRenderer:
        return cls(
            base_url=config.base_url,
            toc_heading=config.markdown.toc_heading,
            infobox_fallback_title=config.markdown.infobox_fallback_title,
            image_captions=config.markdown.image_captions,
        )

    def _new_converter(self, base_url: str) -> html2text.HTML2Text:
        # HTML2Text is a stateful parser; one instance per conversion
        converter = html2text.HTML2Text(baseurl=base_url)
        for name, value in self._converter_options.items():
            setattr(converter, name, value)
        return converter

    # Rules

    def _render_infobox(self, node: Tag) -> str:
        title = infobox_title(node) or self.infobox_fallback_title
        fields = infobox_fields(node)
        if fields:
            lines = [f"## {title}", ""]
            lines.extend(f"**{label}**: {value}" for label, value in fields)
            return "\n".join(lines)

        # No structured rows: keep whatever the box contains
        fragment = BeautifulSoup(node.decode_contents(), "html.parser")
        inner = self._to_markdown(fragment, self.base_url).strip()
        return f"## {title}\n\n{inner}" if inner else f"## {title}"

    def _cell_text(self, cell: Tag) -> str:
        return node_text(cell).replace("|", "\\|")

    def _render_table(self, node: Tag) -> str:
        lines = []
        caption = node.find("caption", recursive=False)
        caption_text = node_text(caption) if caption is not None else ""
        if caption_text:
            lines.extend([f"**{caption_text}**", ""])

        first = True
        for row in own_rows(node):
            cells = row_cells(row)
            if not cells:
                continue
            lines.append("| " + " | ".join(self._cell_text(cell) for cell in cells) + " |")
            if first and row.find("th", recursive=False) is not None:
                lines.append("| " + " | ".join("---" for _ in cells) + " |")
            first = False

        return "\n".join(lines)

    def _render_image(self, node: Tag) -> str:
        src = node.get("src")
        if not src:
            return ""
        alt = _ALT_SPECIAL_RE.sub(r"\\\1", node.get("alt", ""))
        return f"![{alt}]({src})"

    def _render_image_block(self, node: Tag) -> str:
        images = [self._render_image(img) for img in node.find_all("img")]
        parts = [image for image in images if image]
        if not parts:
            fragment = BeautifulSoup(node.decode_contents(), "html.parser")
            return self._to_markdown(fragment, self.base_url).strip()

        if self.image_captions:
            caption = first_text(node, IMAGE_CAPTION_SELECTORS)
            if caption:
                caption = _EMPHASIS_SPECIAL_RE.sub(r"\\\1", caption)
                parts.append(f"*{caption}*")
        return "\n\n".join(parts)

    def _render_toc(self, node: Tag) -> str:
        lines = [f"## {self.toc_heading}", ""]
        for link in node.find_all("a", href=True):
            text = toc_entry_text(link)
            if not text:
                continue
            indent = "  " * (toc_level(link, node) - 1)
            lines.append(f"{indent}- [{text}]({link['href']})")
        return "\n".join(lines)

    def _render_footnote(self, node: Tag) -> str:
        marker = node_text(node).strip("[]").strip()
        return f"[^{marker}]" if marker else ""

    # Tree walk

    def _apply_rules(self, node: Tag, replacements: dict[str, str], prefix: str) -> None:
        """Replace every special node, outermost first, with a placeholder."""
        for child in list(node.children):
            if not isinstance(child, Tag):
                continue
            kind = classify_node(child)
            rule = self._rules.get(kind)
            if rule is None:
                self._apply_rules(child, replacements, prefix)
                continue

            output = rule(child)
            if not output:
                child.decompose()
                continue

            token = f"{prefix}{len(replacements)}X"
            replacements[token] = output
            if kind in INLINE_KINDS:
                child.replace_with(token)
            else:
                holder = BeautifulSoup(f"<p>{token}</p>", "html.parser").p
                child.replace_with(holder)

    def _to_markdown(self, fragment: BeautifulSoup, base_url: str) -> str:
        """Rules plus html2text over a private fragment (mutated)."""
        replacements: dict[str, str] = {}
        prefix = f"WIKIPULL{uuid.uuid4().hex.upper()}R"
        self._apply_rules(fragment, replacements, prefix)

        markdown = self._new_converter(base_url).handle(str(fragment))
        for token, output in replacements.items():
            markdown = markdown.replace(token, output)
        return markdown

    # Post-processing

    def _space_tables(self, markdown: str) -> str:
        """Exactly one blank line before and after every pipe-table block."""
        out: list[str] = []
        in_table = False
        for line in markdown.split("\n"):
            is_table = _is_table_line(line)
            if is_table and not in_table:
                while out and not out[-1].strip():
                    out.pop()
                if out:
                    out.append("")
            elif not is_table and in_table and line.strip():
                out.append("")
            out.append(line)
            in_table = is_table
        return "\n".join(out)

    def _tidy_link_label(self, match: re.Match[str]) -> str:
        label = match.group(1) if match.group(1) is not None else match.group(2)
        return f"[{label.strip()}]("

    def postprocess(self, markdown: str) -> str:
        """Clean up the converted Markdown."""
        # Remove excessive blank lines
        markdown = re.sub(r"\n{3,}", "\n\n", markdown)

        markdown = self._space_tables(markdown)

        # No spaces around full-width punctuation
        markdown = _CJK_BEFORE_RE.sub(r"\1", markdown)
        markdown = _CJK_AFTER_RE.sub(r"\1", markdown)

        markdown = _LINK_LABEL_RE.sub(self._tidy_link_label, markdown)

        # Remove trailing whitespace on each line
        markdown = "\n".join(line.rstrip() for line in markdown.split("\n"))
        markdown = re.sub(r"\n{3,}", "\n\n", markdown)

        markdown = markdown.strip()
        return markdown + "\n" if markdown else ""

    def render(self, tree: Any, page_url: Optional[str] = None) -> str:
        """
        Render a tree to Markdown.

        Args:
            tree: SanitizedTree, content Tag, or an HTML string
            page_url: Source URL for resolving relative links (defaults to base_url)

        Returns:
            Markdown string ("" for empty content)

        Raises:
            ConversionError: tree is None or not a renderable type
        """
        if tree is None:
            raise ConversionError("Cannot render Markdown from None")
        if isinstance(tree, SanitizedTree):
            html = tree.html
        elif isinstance(tree, Tag):
            html = str(tree)
        elif isinstance(tree, str):
            html = tree
        else:
            raise ConversionError(f"Cannot render Markdown from {type(tree).__name__}")

        if not html.strip():
            return ""

        # Rules mutate the tree, so work on a private copy
        fragment = BeautifulSoup(html, "html.parser")
        try:
            markdown = self._to_markdown(fragment, page_url or self.base_url)
        except Exception as e:
            logger.error(f"Failed to convert HTML to Markdown: {e}")
            # Return plain text as fallback
            text: str = BeautifulSoup(html, "html.parser").get_text(separator="\n")
            markdown = text

        return self.postprocess(markdown)
