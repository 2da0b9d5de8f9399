"""Link and image normalization for sanitized wiki trees."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from enum import Enum
from typing import Optional
from urllib.parse import urlparse

from bs4 import Tag

from ..models.config import DEFAULT_BASE_URL, WikipullConfig
from .nodes import class_tokens, find_toc, first_text, in_subtree, parse_dimension
from .rules import (
    EDIT_LINK_MARKERS,
    IMAGE_CAPTION_SELECTORS,
    SELF_LINK_CLASS,
    SMALL_IMAGE_WRAPPERS,
    UTILITY_LINK_CLASSES,
    UTILITY_NAMESPACES,
)
from .sanitizer import SanitizedTree
from .urls import absolutize, fragment_url, is_wiki_host

logger = logging.getLogger(__name__)


class LinkKind(str, Enum):
    """Anchor classes, listed in the order they are tested."""

    EDIT = "edit"
    SELF = "self"
    INTERNAL = "internal"
    TOC_ANCHOR = "toc_anchor"
    EXTERNAL = "external"


class ReferenceNormalizer:
    """
    Rewrites image sources and strips wiki-internal links in place.

    Internal wiki links are demoted to their text so the page reads as
    prose; links to other sites and table-of-contents anchors survive.

    Example:
        normalizer = ReferenceNormalizer(base_url="https://zh.minecraft.wiki")
        normalizer.normalize(tree)
    """

    def __init__(
        self,
        base_url: str = DEFAULT_BASE_URL,
        wiki_hosts: Optional[Iterable[str]] = None,
        convert_images_to_absolute: bool = True,
        remove_small_images: bool = True,
        min_width: int = 50,
        min_height: int = 50,
        convert_toc_links: bool = True,
        preserve_external_links: bool = True,
    ):
        """
        Initialize the normalizer.

        Args:
            base_url: Wiki origin for absolute URLs
            wiki_hosts: Extra hosts treated as the wiki itself
            convert_images_to_absolute: Rewrite root-relative image sources
            remove_small_images: Drop images whose declared size is below the minimum
            min_width: Minimum width in pixels
            min_height: Minimum height in pixels
            convert_toc_links: Rewrite TOC anchors to absolute URLs
            preserve_external_links: Keep links to non-wiki hosts
        """
        self.base_url = base_url.rstrip("/")
        self.wiki_hosts = {h.lower() for h in (wiki_hosts or [])}
        self.wiki_hosts.add((urlparse(self.base_url).hostname or "").lower())
        self.convert_images_to_absolute = convert_images_to_absolute
        self.remove_small_images = remove_small_images
        self.min_width = min_width
        self.min_height = min_height
        self.convert_toc_links = convert_toc_links
        self.preserve_external_links = preserve_external_links

    @classmethod
    def from_config(cls, config: WikipullConfig) -> ReferenceNormalizer:
        return cls(
            base_url=config.base_url,
            wiki_hosts=config.wiki_hosts,
            convert_images_to_absolute=config.images.convert_to_absolute,
            remove_small_images=config.images.remove_small_images,
            min_width=config.images.min_width,
            min_height=config.images.min_height,
            convert_toc_links=config.links.convert_toc_links,
            preserve_external_links=config.links.preserve_external_links,
        )

    # Images

    def is_small(self, img: Tag) -> bool:
        """
        An image is small when a declared dimension is below the minimum.

        A missing, unparsable or zero dimension counts as undeclared.
        """
        width = parse_dimension(img.get("width")) or 0
        height = parse_dimension(img.get("height")) or 0
        return 0 < width < self.min_width or 0 < height < self.min_height

    def _image_wrapper(self, img: Tag) -> Optional[Tag]:
        """The outermost known wrapper of an image, if any."""
        for selector in SMALL_IMAGE_WRAPPERS:
            wrapper = img.css.closest(selector)
            if wrapper is not None:
                return wrapper
        return None

    def _process_images(self, root: Tag) -> int:
        dropped = 0
        for img in root.find_all("img"):
            if img.decomposed:
                continue
            src = img.get("src")
            if not src:
                continue

            if self.convert_images_to_absolute:
                img["src"] = absolutize(src, self.base_url)

            if self.remove_small_images and self.is_small(img):
                # Inline icons without a figure wrapper stay in the text
                wrapper = self._image_wrapper(img)
                if wrapper is not None:
                    wrapper.decompose()
                    dropped += 1
                    continue

            if not img.get("alt"):
                caption = self._wrapper_caption(img)
                if caption:
                    img["alt"] = caption
        return dropped

    def _wrapper_caption(self, img: Tag) -> str:
        for selector in SMALL_IMAGE_WRAPPERS:
            wrapper = img.css.closest(selector)
            if wrapper is not None:
                caption = first_text(wrapper, IMAGE_CAPTION_SELECTORS)
                if caption:
                    return caption
        return ""

    # Links

    def classify_link(self, link: Tag, toc: Optional[Tag] = None) -> LinkKind:
        """
        Classify an anchor. The order matters: edit and self links are
        recognised before any href-shape test.
        """
        href = link.get("href", "")
        classes = class_tokens(link)
        off_wiki = href.startswith(("http://", "https://", "//")) and not is_wiki_host(
            absolutize(href, self.base_url), self.wiki_hosts
        )

        if any(marker in href for marker in EDIT_LINK_MARKERS):
            return LinkKind.EDIT
        if SELF_LINK_CLASS in classes or "selflink" in classes:
            return LinkKind.SELF
        if not off_wiki and (
            any(ns in href for ns in UTILITY_NAMESPACES) or any(cls in classes for cls in UTILITY_LINK_CLASSES)
        ):
            return LinkKind.INTERNAL
        if href.startswith("#"):
            if in_subtree(link, toc):
                return LinkKind.TOC_ANCHOR
            return LinkKind.INTERNAL
        if off_wiki:
            return LinkKind.EXTERNAL
        return LinkKind.INTERNAL

    def _process_links(self, root: Tag, page_url: Optional[str] = None) -> dict[LinkKind, int]:
        toc = find_toc(root)
        counts = {kind: 0 for kind in LinkKind}

        for link in root.find_all("a"):
            kind = self.classify_link(link, toc)
            counts[kind] += 1

            if kind == LinkKind.TOC_ANCHOR:
                if self.convert_toc_links:
                    link["href"] = fragment_url(link["href"], page_url or self.base_url)
            elif kind == LinkKind.EXTERNAL and self.preserve_external_links:
                continue
            else:
                link.unwrap()

        for link in root.find_all("a"):
            if not link.contents:
                link.decompose()

        return counts

    def normalize(self, tree: SanitizedTree, page_url: Optional[str] = None) -> SanitizedTree:
        """
        Normalize images and links in place.

        Args:
            tree: Sanitized tree (mutated)
            page_url: URL of the page, used as the base of TOC anchors

        Returns:
            The same tree, for chaining
        """
        dropped = self._process_images(tree.root)
        counts = self._process_links(tree.root, page_url)
        logger.debug(
            f"Normalized references: {dropped} small images dropped, "
            f"{counts[LinkKind.EXTERNAL]} external links kept, "
            f"{counts[LinkKind.INTERNAL] + counts[LinkKind.EDIT] + counts[LinkKind.SELF]} links unwrapped"
        )
        return tree
