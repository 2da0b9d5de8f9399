"""Pipeline step for Markdown rendering."""

import logging
from typing import Optional

from ...conversion.extractor import count_words
from ...conversion.markdown import MarkdownRenderer
from ...conversion.protocols import MarkdownConverter
from ...models.document import MarkdownStats
from ...models.events import EventType, PipelineEvent
from ..base import EventEmitter, PageContext

logger = logging.getLogger(__name__)


class RenderStep:
    """
    Pipeline step that converts the tree to Markdown.

    Does nothing for HTML-only requests, so those never pay for rendering.

    Example:
        step = RenderStep(MarkdownRenderer())
        ctx = step.execute(ctx, emit=callback)
        # ctx.markdown now contains the converted content
    """

    name = "render"

    def __init__(self, renderer: Optional[MarkdownConverter] = None):
        self._renderer = renderer or MarkdownRenderer()

    def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        if not ctx.output_format.wants_markdown:
            return ctx

        tree = ctx.require_tree(self.name)
        ctx.markdown = self._renderer.render(tree, ctx.info.source_url)
        ctx.markdown_stats = MarkdownStats.measure(tree.html, ctx.markdown, count_words(ctx.markdown))

        if emit:
            emit(
                PipelineEvent(
                    type=EventType.PAGE_CONVERTED,
                    page=ctx.page,
                    stage=self.name,
                    message=f"Converted to {len(ctx.markdown)} characters of Markdown",
                )
            )

        logger.debug(f"Converted {ctx.page or 'page'} to {len(ctx.markdown)} characters of Markdown")
        return ctx
