"""Pipeline step for structural sanitization."""

import logging
from typing import Optional

from ...conversion.protocols import TreeSanitizer
from ...conversion.sanitizer import DocumentSanitizer
from ...models.events import EventType, PipelineEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class SanitizeStep:
    """
    Pipeline step that isolates and cleans the article body.

    Reads ctx.raw_html, writes ctx.tree.

    Example:
        step = SanitizeStep(DocumentSanitizer())
        ctx = step.execute(ctx, emit=callback)
    """

    name = "sanitize"

    def __init__(self, sanitizer: Optional[TreeSanitizer] = None):
        self._sanitizer = sanitizer or DocumentSanitizer()

    def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        ctx.tree = self._sanitizer.sanitize(ctx.raw_html, ctx.info)

        if emit:
            emit(
                PipelineEvent(
                    type=EventType.PAGE_SANITIZED,
                    page=ctx.page,
                    stage=self.name,
                    message=f"Sanitized to {len(ctx.tree.html)} characters of HTML",
                )
            )
        return ctx
