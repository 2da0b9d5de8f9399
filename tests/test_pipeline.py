"""Tests for the transformation pipeline."""

from typing import Optional

import pytest
from pages import BASE_URL, wiki_page
from wikipull.errors import InvalidDocument, WikipullError
from wikipull.models import EventType, OutputFormat, PageInfo, PipelineEvent, WikipullConfig
from wikipull.pipeline import PageContext, TransformPipeline, default_pipeline
from wikipull.pipeline.base import EventEmitter


class ExplodingStep:
    name = "explode"

    def execute(self, ctx: PageContext, emit: Optional[EventEmitter] = None) -> PageContext:
        raise RuntimeError("boom")


class RecordingStep:
    name = "record"

    def __init__(self):
        self.calls = 0

    def execute(self, ctx: PageContext, emit: Optional[EventEmitter] = None) -> PageContext:
        self.calls += 1
        return ctx


@pytest.fixture
def pipeline() -> TransformPipeline:
    return default_pipeline(WikipullConfig())


@pytest.fixture
def events() -> list[PipelineEvent]:
    return []


class TestDefaultPipeline:
    """Tests for the standard four-step pipeline."""

    def test_step_order(self, pipeline):
        assert [step.name for step in pipeline.steps] == ["sanitize", "normalize", "extract", "render"]

    def test_markdown_run(self, pipeline, events, scenario_a_page):
        output = pipeline.run(scenario_a_page, PageInfo(title="Creeper"), OutputFormat.MARKDOWN, emit=events.append)

        assert output.page == "Creeper"
        assert output.format == OutputFormat.MARKDOWN
        assert "## Intro" in output.markdown
        assert output.components.sections[0].text == "Intro"
        assert [event.type for event in events] == [
            EventType.PAGE_SANITIZED,
            EventType.PAGE_NORMALIZED,
            EventType.COMPONENTS_EXTRACTED,
            EventType.PAGE_CONVERTED,
        ]
        assert all(event.page == "Creeper" for event in events)

    def test_html_run_skips_render(self, pipeline, events, scenario_a_page):
        output = pipeline.run(scenario_a_page, PageInfo(title="Creeper"), OutputFormat.HTML, emit=events.append)

        assert output.markdown is None
        assert "<h2" in output.html
        assert EventType.PAGE_CONVERTED not in [event.type for event in events]

    def test_both(self, pipeline, scenario_a_page):
        output = pipeline.run(scenario_a_page, output_format=OutputFormat.BOTH)

        assert output.markdown is not None
        assert "hello" in output.html

    def test_stats_match_components(self, pipeline, full_page):
        output = pipeline.run(full_page, PageInfo(title="Creeper"), OutputFormat.HTML)

        assert output.stats.section_count == len(output.components.sections) == 3
        assert output.stats.image_count == len(output.components.images) == 3
        assert output.stats.table_count == len(output.components.tables) == 2
        assert output.stats.word_count > 0

    def test_markdown_stats(self, pipeline, scenario_a_page):
        output = pipeline.run(scenario_a_page, PageInfo(title="Creeper"), OutputFormat.MARKDOWN)
        stats = output.markdown_stats

        assert output.markdown == "## Intro\n\nhello\n"
        assert stats.original_length == len(output.html)
        assert stats.converted_length == len(output.markdown)
        assert stats.compression_ratio == round(len(output.markdown) / len(output.html), 2)
        assert stats.lines_count == 4
        assert stats.words_count == 2

    def test_html_run_has_no_markdown_stats(self, pipeline, scenario_a_page):
        output = pipeline.run(scenario_a_page, output_format=OutputFormat.HTML)

        assert output.markdown_stats is None

    def test_metadata_carried(self, pipeline, full_page):
        output = pipeline.run(full_page, PageInfo(title="Creeper"))

        assert output.metadata.title == "Creeper"
        assert len(output.metadata.categories) == 2

    def test_source_url_used_for_toc(self, pipeline):
        html = wiki_page('<div id="toc" class="toc"><ul><li><a href="#Drops">Drops</a></li></ul></div>')
        info = PageInfo(title="Creeper", source_url=f"{BASE_URL}/w/Creeper")
        output = pipeline.run(html, info, OutputFormat.MARKDOWN)

        assert output.components.toc[0].href == f"{BASE_URL}/w/Creeper#Drops"
        assert f"[Drops]({BASE_URL}/w/Creeper#Drops)" in output.markdown

    def test_page_identity_override(self, pipeline, scenario_a_page):
        output = pipeline.run(scenario_a_page, PageInfo(title="creeper"), page="Creeper")

        assert output.page == "Creeper"


class TestFailures:
    """Tests for error propagation."""

    def test_typed_failure(self, pipeline, events):
        with pytest.raises(InvalidDocument) as exc_info:
            pipeline.run("", PageInfo(title="Creeper"), OutputFormat.MARKDOWN, emit=events.append)

        assert exc_info.value.stage == "sanitize"
        assert exc_info.value.page == "Creeper"
        assert len(events) == 1
        assert events[0].type == EventType.PAGE_FAILED
        assert events[0].is_error
        assert events[0].stage == "sanitize"

    def test_failure_stops_pipeline(self, scenario_a_page):
        recorder = RecordingStep()
        pipeline = TransformPipeline(steps=[ExplodingStep(), recorder])

        with pytest.raises(WikipullError):
            pipeline.run(scenario_a_page)

        assert recorder.calls == 0

    def test_untyped_failure_wrapped(self, scenario_a_page, events):
        pipeline = TransformPipeline(steps=[ExplodingStep()])

        with pytest.raises(WikipullError) as exc_info:
            pipeline.run(scenario_a_page, PageInfo(title="Creeper"), emit=events.append)

        error = exc_info.value
        assert error.stage == "explode"
        assert error.page == "Creeper"
        assert isinstance(error.__cause__, RuntimeError)
        assert events[0].error == "explode: boom"

    def test_missing_tree(self):
        """Steps after sanitize need a tree."""
        pipeline = default_pipeline(WikipullConfig())
        pipeline.steps = pipeline.steps[1:]

        with pytest.raises(WikipullError) as exc_info:
            pipeline.run("<p>x</p>", PageInfo(title="Creeper"))

        assert exc_info.value.stage == "normalize"


class TestAddStep:
    def test_fluent(self, scenario_a_page):
        recorder = RecordingStep()
        pipeline = default_pipeline(WikipullConfig()).add_step(recorder)

        pipeline.run(scenario_a_page)

        assert recorder.calls == 1
        assert len(pipeline.steps) == 5
