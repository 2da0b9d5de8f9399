"""Page-level metadata read from the chrome around the article body."""

from __future__ import annotations

import re
from typing import Optional

from bs4 import BeautifulSoup

from ..models.document import Category, LanguageLink, PageInfo, PageMetadata
from .urls import absolutize

_LASTMOD_PATTERNS = [
    re.compile(r"(\d{4}年\d{1,2}月\d{1,2}日)"),
    re.compile(r"(\d{1,2} [A-Z][a-z]+ \d{4})"),
    re.compile(r"(\d{4}-\d{2}-\d{2})"),
]


def _extract_last_modified(soup: BeautifulSoup) -> Optional[str]:
    element = soup.select_one("#footer-info-lastmod")
    if element is None:
        return None
    text = element.get_text().strip()
    for pattern in _LASTMOD_PATTERNS:
        match = pattern.search(text)
        if match:
            return match.group(1)
    return None


def extract_page_metadata(
    soup: BeautifulSoup,
    page: Optional[PageInfo],
    base_url: str,
) -> PageMetadata:
    """
    Read title, subtitle, categories, language links and last-modified date.

    Must run on the full document, before the content container is isolated
    and before category links are removed.

    Args:
        soup: Parsed full page
        page: Metadata supplied by the fetch layer (title fallback, namespace)
        base_url: Origin used to absolutize category links

    Returns:
        PageMetadata record
    """
    page = page or PageInfo()

    heading = soup.select_one("#firstHeading")
    title = heading.get_text().strip() if heading else ""
    subtitle_el = soup.select_one("#contentSub")

    categories = []
    for link in soup.select("#mw-normal-catlinks li a"):
        name = link.get_text().strip()
        if name:
            categories.append(Category(name=name, url=absolutize(link.get("href", ""), base_url)))

    languages = []
    for link in soup.select("#p-lang a[hreflang]"):
        name = link.get_text().strip()
        href = link.get("href")
        if name and href:
            languages.append(LanguageLink(name=name, url=href, code=link.get("hreflang")))

    return PageMetadata(
        title=title or page.title,
        subtitle=subtitle_el.get_text().strip() if subtitle_el else "",
        namespace=page.namespace,
        categories=tuple(categories),
        languages=tuple(languages),
        last_modified=_extract_last_modified(soup),
    )
