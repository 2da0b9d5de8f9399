"""Pipeline step for component extraction."""

from typing import Optional

from ...conversion.extractor import ComponentExtractor, count_words, text_content
from ...conversion.protocols import ComponentHarvester
from ...models.events import EventType, PipelineEvent
from ..base import EventEmitter, PageContext


class ExtractStep:
    """
    Pipeline step that harvests component records and the plain text.

    Writes ctx.components, ctx.text and ctx.word_count; the tree is not
    modified.
    """

    name = "extract"

    def __init__(self, extractor: Optional[ComponentHarvester] = None):
        self._extractor = extractor or ComponentExtractor()

    def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        tree = ctx.require_tree(self.name)
        ctx.components = self._extractor.extract(tree)
        ctx.text = text_content(tree)
        ctx.word_count = count_words(ctx.text)

        if emit:
            emit(
                PipelineEvent(
                    type=EventType.COMPONENTS_EXTRACTED,
                    page=ctx.page,
                    stage=self.name,
                    message=(
                        f"{len(ctx.components.sections)} sections, {len(ctx.components.images)} images, "
                        f"{len(ctx.components.tables)} tables"
                    ),
                )
            )
        return ctx
