"""URL helpers shared by the normalizer and page-info extraction."""

from __future__ import annotations

from collections.abc import Iterable
from urllib.parse import urlparse


def absolutize(url: str, base_url: str) -> str:
    """
    Resolve a wiki-relative URL against the base origin.

    Root-relative ("/w/Foo") and protocol-relative ("//host/x") URLs are made
    absolute; fragments and already-absolute URLs pass through unchanged.

    Example:
        >>> absolutize("/images/a.png", "https://zh.minecraft.wiki")
        'https://zh.minecraft.wiki/images/a.png'
    """
    if not url:
        return url
    if url.startswith("//"):
        scheme = urlparse(base_url).scheme or "https"
        return f"{scheme}:{url}"
    if url.startswith("/"):
        return base_url.rstrip("/") + url
    return url


def fragment_url(fragment: str, base_url: str) -> str:
    """Absolute form of an in-page anchor ("#Intro")."""
    return base_url.rstrip("/") + fragment


def is_wiki_host(url: str, wiki_hosts: Iterable[str]) -> bool:
    """True if the URL's host is one of the wiki hosts or a subdomain of one."""
    host = (urlparse(url).hostname or "").lower()
    if not host:
        return False
    for wiki_host in wiki_hosts:
        wiki_host = wiki_host.lower()
        if host == wiki_host or host.endswith("." + wiki_host):
            return True
    return False
