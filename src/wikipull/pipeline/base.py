"""Base classes for the page transformation pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol, Union, runtime_checkable

from ..conversion.sanitizer import SanitizedTree
from ..errors import WikipullError
from ..models.document import (
    ContentComponents,
    MarkdownStats,
    OutputFormat,
    PageInfo,
    PageStats,
    RenderedOutput,
)
from ..models.events import EventType, PipelineEvent

# Type alias for event emitter function
EventEmitter = Callable[[PipelineEvent], None]


@dataclass
class PageContext:
    """
    Context object passed through pipeline steps.

    Holds everything produced for one page, accumulated as it moves through
    the steps. The tree is private to this context.

    Attributes:
        page: Normalized page identity
        raw_html: Page HTML as received from the fetch layer
        info: Fetch-layer metadata (title, namespace, source URL)
        output_format: Which artifacts to materialize
        tree: Sanitized (then normalized) content tree
        components: Extracted component records
        text: Plain-text rendition used for word counting
        word_count: CJK characters plus Latin words
        markdown: Rendered Markdown (MARKDOWN/BOTH only)
        markdown_stats: Conversion size figures for the Markdown
    """

    page: str
    raw_html: Union[str, bytes]
    info: PageInfo = field(default_factory=PageInfo)
    output_format: OutputFormat = OutputFormat.HTML

    # Accumulated through the pipeline
    tree: Optional[SanitizedTree] = None
    components: Optional[ContentComponents] = None
    text: str = ""
    word_count: int = 0
    markdown: Optional[str] = None
    markdown_stats: Optional[MarkdownStats] = None

    def require_tree(self, stage: str) -> SanitizedTree:
        if self.tree is None:
            raise WikipullError("No sanitized tree available", stage=stage, page=self.page)
        return self.tree

    def to_output(self) -> RenderedOutput:
        """Assemble the immutable result once every step has run."""
        tree = self.require_tree("assemble")
        components = self.components or ContentComponents()
        return RenderedOutput(
            page=self.page,
            format=self.output_format,
            html=tree.html,
            components=components,
            stats=PageStats.from_components(components, self.word_count),
            text=self.text,
            markdown=self.markdown,
            markdown_stats=self.markdown_stats,
            metadata=tree.metadata,
        )


@runtime_checkable
class TransformStep(Protocol):
    """
    Protocol for pipeline steps.

    Each step receives a PageContext, processes it, and returns the
    (possibly modified) context. Steps are synchronous and do no I/O.

    Error Handling Contract:
    - Raise a WikipullError subclass for expected failures
    - The pipeline fills in stage and page, emits PAGE_FAILED and re-raises

    Example implementation:
        class UppercaseTitleStep:
            name = "title"

            def execute(self, ctx: PageContext, emit: Optional[EventEmitter] = None) -> PageContext:
                ctx.info = replace(ctx.info, title=ctx.info.title.upper())
                return ctx
    """

    name: str

    def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Execute this pipeline step.

        Args:
            ctx: The page context with accumulated state
            emit: Optional callback to emit events

        Returns:
            The (possibly modified) page context
        """
        ...


@dataclass
class TransformPipeline:
    """
    Pipeline turning raw HTML into a RenderedOutput.

    Steps run in order. The first failure stops the pipeline: a PAGE_FAILED
    event is emitted and the error is raised with stage and page filled in.
    No partial output is ever returned.

    Example:
        pipeline = TransformPipeline(steps=[
            SanitizeStep(sanitizer),
            NormalizeStep(normalizer),
            ExtractStep(extractor),
            RenderStep(renderer),
        ])

        output = pipeline.run(html, PageInfo(title="Creeper"), OutputFormat.BOTH)
    """

    steps: list[TransformStep]

    def execute(
        self,
        ctx: PageContext,
        emit: Optional[EventEmitter] = None,
    ) -> PageContext:
        """
        Run every step over a context.

        Raises:
            WikipullError: The failing step's error (non-typed errors are wrapped)
        """
        for step in self.steps:
            try:
                ctx = step.execute(ctx, emit)
            except WikipullError as e:
                e.stage = e.stage or step.name
                e.page = e.page or ctx.page
                self._emit_failure(emit, ctx, e)
                raise
            except Exception as e:
                error = WikipullError(f"{step.name}: {e}", stage=step.name, page=ctx.page)
                self._emit_failure(emit, ctx, error)
                raise error from e
        return ctx

    def run(
        self,
        raw_html: Union[str, bytes],
        info: Optional[PageInfo] = None,
        output_format: OutputFormat = OutputFormat.HTML,
        page: Optional[str] = None,
        emit: Optional[EventEmitter] = None,
    ) -> RenderedOutput:
        """
        Run the pipeline for one page and assemble its output.

        Args:
            raw_html: Page HTML
            info: Fetch-layer metadata
            output_format: Requested artifacts
            page: Page identity (defaults to info.title)
            emit: Optional callback for emitting events

        Returns:
            RenderedOutput for the page
        """
        info = info or PageInfo()
        ctx = PageContext(
            page=page if page is not None else info.title,
            raw_html=raw_html,
            info=info,
            output_format=OutputFormat(output_format),
        )
        return self.execute(ctx, emit).to_output()

    def _emit_failure(self, emit: Optional[EventEmitter], ctx: PageContext, error: WikipullError) -> None:
        if emit:
            emit(
                PipelineEvent(
                    type=EventType.PAGE_FAILED,
                    page=ctx.page,
                    stage=error.stage,
                    error=error.message,
                )
            )

    def add_step(self, step: TransformStep) -> TransformPipeline:
        """
        Add a step to the pipeline (fluent API).

        Args:
            step: The step to add

        Returns:
            Self for chaining
        """
        self.steps.append(step)
        return self
