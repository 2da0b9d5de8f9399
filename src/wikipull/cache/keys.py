"""Cache keys: normalized page identity plus requested output format."""

from __future__ import annotations

from typing import NamedTuple, Union

from ..models.document import OutputFormat


def _capitalize_first(text: str) -> str:
    return text[:1].upper() + text[1:]


def normalize_page_name(name: str) -> str:
    """
    Canonical page identity, as MediaWiki resolves titles.

    Trims, turns underscores into spaces, collapses runs of spaces and
    upper-cases the first letter of the namespace and of the title.

    Example:
        >>> normalize_page_name("  category:redstone_circuits ")
        'Category:Redstone circuits'
    """
    name = " ".join(name.replace("_", " ").split())
    if ":" in name:
        namespace, _, title = name.partition(":")
        return f"{_capitalize_first(namespace.strip())}:{_capitalize_first(title.strip())}"
    return _capitalize_first(name)


class CacheKey(NamedTuple):
    """Composite cache key: one entry per (page, format) pair."""

    page: str
    format: OutputFormat

    @classmethod
    def for_page(cls, page_name: str, output_format: Union[OutputFormat, str]) -> CacheKey:
        return cls(normalize_page_name(page_name), OutputFormat(output_format))

    def __str__(self) -> str:
        return f"{self.page}:{self.format.value}"
