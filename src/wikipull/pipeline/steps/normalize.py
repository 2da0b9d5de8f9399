"""Pipeline step for link and image normalization."""

from typing import Optional

from ...conversion.normalizer import ReferenceNormalizer
from ...conversion.protocols import TreeNormalizer
from ...models.events import EventType, PipelineEvent
from ..base import EventEmitter, PageContext


class NormalizeStep:
    """
    Pipeline step that rewrites images and strips internal links in place.

    TOC anchors are made absolute against the page's source URL when the
    fetch layer supplied one.
    """

    name = "normalize"

    def __init__(self, normalizer: Optional[TreeNormalizer] = None):
        self._normalizer = normalizer or ReferenceNormalizer()

    def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        tree = ctx.require_tree(self.name)
        self._normalizer.normalize(tree, ctx.info.source_url)

        if emit:
            emit(PipelineEvent(type=EventType.PAGE_NORMALIZED, page=ctx.page, stage=self.name))
        return ctx
