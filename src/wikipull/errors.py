"""Typed failures raised by the transformation pipeline."""

from __future__ import annotations

from typing import Any


class WikipullError(Exception):
    """
    Base class for pipeline failures.

    Carries enough context for a caller to build a user-facing response:
    which stage failed and for which page.

    Attributes:
        code: Stable machine-readable error code
        stage: Pipeline stage that failed (sanitize, normalize, extract, render, fetch)
        page: Normalized page identity, if known
        details: Optional extra context
    """

    code = "WIKIPULL_ERROR"
    default_stage: str | None = None

    def __init__(
        self,
        message: str,
        *,
        stage: str | None = None,
        page: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.stage = stage or self.default_stage
        self.page = page
        self.details = details

    def to_dict(self) -> dict[str, Any]:
        """Serialize the error for response assembly."""
        return {
            "code": self.code,
            "message": self.message,
            "stage": self.stage,
            "page": self.page,
            "details": self.details,
        }

    def __str__(self) -> str:
        if self.page:
            return f"{self.message} (page={self.page!r}, stage={self.stage})"
        return self.message


class InvalidDocument(WikipullError):
    """Input is not HTML, or carries none of the wiki content markers."""

    code = "INVALID_DOCUMENT"
    default_stage = "sanitize"


class ExtractionError(WikipullError):
    """The primary content container is missing."""

    code = "EXTRACTION_ERROR"
    default_stage = "sanitize"


class ConversionError(WikipullError):
    """Markdown rendering received a non-renderable input."""

    code = "CONVERSION_ERROR"
    default_stage = "render"


class PageFetchError(WikipullError):
    """The page source failed to deliver HTML for a page."""

    code = "PAGE_FETCH_ERROR"
    default_stage = "fetch"
