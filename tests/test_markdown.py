"""Tests for Markdown rendering."""

import pytest
from pages import BASE_URL, FULL_BODY, prepare
from wikipull.conversion import MarkdownRenderer
from wikipull.errors import ConversionError
from wikipull.models import WikipullConfig


@pytest.fixture
def renderer() -> MarkdownRenderer:
    return MarkdownRenderer(base_url=BASE_URL)


@pytest.fixture
def full_markdown(renderer) -> str:
    return renderer.render(prepare(FULL_BODY))


class TestScenarios:
    """End-to-end rendering of small pages."""

    def test_heading_and_paragraph(self, renderer):
        markdown = renderer.render(prepare('<h2 id="x">Intro</h2><p>hello</p>'))

        assert "## Intro" in markdown
        assert "hello" in markdown

    def test_header_row_table(self, renderer):
        markdown = renderer.render(
            prepare("<table><tr><th>Item</th><th>Count</th></tr><tr><td>Gunpowder</td><td>2</td></tr></table>")
        )

        lines = markdown.splitlines()
        header = lines.index("| Item | Count |")
        assert lines[header + 1] == "| --- | --- |"
        assert lines[header + 2] == "| Gunpowder | 2 |"

    def test_small_image_caption_absent(self, renderer):
        tree = prepare(
            '<div class="thumb"><div class="thumbinner">'
            '<img src="/images/Tiny.png" width="20" height="20">'
            '<div class="thumbcaption">Tiny caption</div></div></div>'
            '<p><img src="/images/x.png" alt="x"></p>',
            min_width=50,
            min_height=50,
        )
        markdown = renderer.render(tree)

        assert "Tiny caption" not in markdown
        assert f"![x]({BASE_URL}/images/x.png)" in markdown


class TestRules:
    """Tests for the per-kind rendering rules."""

    def test_infobox_fields(self, renderer):
        markdown = renderer.render(
            '<table class="infobox"><caption>Creeper</caption>'
            "<tr><th>Health</th><td>20</td></tr><tr><th>Spawn</th><td>Overworld</td></tr></table>"
        )

        assert "## Creeper\n\n**Health**: 20\n**Spawn**: Overworld" in markdown
        assert "|" not in markdown

    def test_infobox_without_title_or_fields(self, renderer):
        markdown = renderer.render('<div class="infobox"><p>Just text</p></div>')

        assert markdown == "## Information\n\nJust text\n"

    def test_infobox_fallback_title_configurable(self):
        renderer = MarkdownRenderer(infobox_fallback_title="信息")
        markdown = renderer.render('<div class="infobox"><p>Just text</p></div>')

        assert markdown.startswith("## 信息")

    def test_table_without_header_has_no_separator(self, renderer):
        markdown = renderer.render("<table><tr><td>a</td><td>b</td></tr><tr><td>c</td><td>d</td></tr></table>")

        assert "| a | b |\n| c | d |" in markdown
        assert "---" not in markdown

    def test_table_caption(self, renderer):
        markdown = renderer.render("<table><caption>Drops</caption><tr><th>Item</th></tr></table>")

        assert "**Drops**\n\n| Item |\n| --- |" in markdown

    def test_pipe_in_cell_escaped(self, renderer):
        markdown = renderer.render("<table><tr><td>a|b</td><td>c</td></tr></table>")

        assert "| a\\|b | c |" in markdown

    def test_footnote_marker(self, renderer):
        markdown = renderer.render('<p>Creepers explode.<sup class="reference">[1]</sup></p>')

        assert markdown == "Creepers explode.[^1]\n"

    def test_empty_footnote_dropped(self, renderer):
        markdown = renderer.render('<p>Creepers explode.<sup class="reference">[]</sup></p>')

        assert markdown == "Creepers explode.\n"

    def test_chrome_dropped(self, renderer):
        markdown = renderer.render('<div class="navbox">Mobs | Zombie</div><p>Body</p>')

        assert markdown == "Body\n"

    def test_edit_section_dropped(self, renderer):
        markdown = renderer.render('<h2>Behavior<span class="mw-editsection">[edit]</span></h2>')

        assert markdown == "## Behavior\n"

    def test_image_block_with_caption(self, full_markdown):
        image = f"![A creeper exploding]({BASE_URL}/images/thumb/Creeper_explosion.png)"

        assert f"{image}\n\n*A creeper exploding*" in full_markdown

    def test_image_captions_disabled(self):
        renderer = MarkdownRenderer(base_url=BASE_URL, image_captions=False)
        markdown = renderer.render(prepare(FULL_BODY))

        assert "*A creeper exploding*" not in markdown
        assert "Creeper_explosion.png" in markdown

    def test_brackets_in_alt_escaped(self, renderer):
        markdown = renderer.render('<p><img src="https://x/a.png" alt="a] (b"></p>')

        assert "![a\\] (b](https://x/a.png)" in markdown

    def test_emphasis_in_caption_escaped(self, renderer):
        markdown = renderer.render(
            '<div class="thumb"><div class="thumbinner">'
            '<img src="https://x/a.png" width="180" height="120">'
            '<div class="thumbcaption">c*d_e*</div></div></div>'
        )

        assert "*c\\*d\\_e\\**" in markdown

    def test_toc_list(self, full_markdown):
        expected = "\n".join(
            [
                "## Table of Contents",
                "",
                f"- [Behavior]({BASE_URL}#Behavior)",
                f"  - [Explosion]({BASE_URL}#Explosion)",
                f"- [Drops]({BASE_URL}#Drops)",
            ]
        )

        assert expected in full_markdown
        assert "## Contents" not in full_markdown

    def test_toc_heading_from_config(self):
        config = WikipullConfig.model_validate({"markdown": {"toc_heading": "目录"}})
        renderer = MarkdownRenderer.from_config(config)
        markdown = renderer.render(prepare(FULL_BODY))

        assert "## 目录" in markdown
        assert "## Table of Contents" not in markdown


class TestFullPage:
    def test_components_in_order(self, full_markdown):
        positions = [
            full_markdown.index("## Creeper"),
            full_markdown.index("## Table of Contents"),
            full_markdown.index("## Behavior"),
            full_markdown.index("### Explosion"),
            full_markdown.index("## Drops"),
            full_markdown.index("| Item | Count |"),
        ]

        assert positions == sorted(positions)

    def test_internal_links_are_plain_text(self, full_markdown):
        assert "hostile mob" in full_markdown
        assert "/w/Hostile_mob" not in full_markdown
        assert "/w/" not in full_markdown

    def test_external_link_kept(self, full_markdown):
        assert "[explosion study](https://www.example.com/creepers)" in full_markdown

    def test_inline_icon_kept(self, full_markdown):
        assert f"![icon]({BASE_URL}/images/Icon.png) Small icon line." in full_markdown

    def test_no_chrome_or_scripts(self, full_markdown):
        assert "Zombie" not in full_markdown
        assert "var x" not in full_markdown

    def test_relative_links_resolved_against_page_url(self, renderer):
        markdown = renderer.render(
            '<p><a href="docs/more">more</a></p>',
            page_url=f"{BASE_URL}/w/Creeper/",
        )

        assert f"[more]({BASE_URL}/w/Creeper/docs/more)" in markdown


class TestPostprocess:
    """Tests for the Markdown cleanup pass."""

    def test_blank_line_runs(self, renderer):
        assert renderer.postprocess("a\n\n\n\n\nb") == "a\n\nb\n"

    def test_tables_surrounded_by_one_blank_line(self, renderer):
        markdown = renderer.postprocess("Intro\n| a |\n| b |\nAfter")

        assert markdown == "Intro\n\n| a |\n| b |\n\nAfter\n"

    def test_extra_blank_lines_around_table_collapsed(self, renderer):
        markdown = renderer.postprocess("Intro\n\n\n| a |\n\n\nAfter")

        assert markdown == "Intro\n\n| a |\n\nAfter\n"

    def test_cjk_punctuation_spacing(self, renderer):
        assert renderer.postprocess("你好 ， 世界 。") == "你好，世界。\n"

    def test_cjk_spacing_keeps_newlines(self, renderer):
        assert renderer.postprocess("第一行 。\n第二行") == "第一行。\n第二行\n"

    def test_link_label_whitespace(self, renderer):
        assert renderer.postprocess("[ text ](https://www.example.com)") == "[text](https://www.example.com)\n"

    def test_trailing_whitespace(self, renderer):
        assert renderer.postprocess("line one   \nline two\t") == "line one\nline two\n"

    def test_empty(self, renderer):
        assert renderer.postprocess("\n\n  \n") == ""


class TestErrors:
    """Tests for invalid input and conversion failures."""

    def test_none_rejected(self, renderer):
        with pytest.raises(ConversionError) as exc_info:
            renderer.render(None)

        assert exc_info.value.code == "CONVERSION_ERROR"
        assert exc_info.value.stage == "render"

    @pytest.mark.parametrize("value", [123, ["<p>x</p>"], b"<p>x</p>"])
    def test_unrenderable_types(self, renderer, value):
        with pytest.raises(ConversionError):
            renderer.render(value)

    @pytest.mark.parametrize("value", ["", "   \n"])
    def test_empty_input(self, renderer, value):
        assert renderer.render(value) == ""

    def test_converter_failure_falls_back_to_text(self, renderer, monkeypatch):
        def boom(fragment, base_url):
            raise RuntimeError("converter exploded")

        monkeypatch.setattr(renderer, "_to_markdown", boom)
        markdown = renderer.render("<p>hello</p><p>world</p>")

        assert "hello" in markdown
        assert "world" in markdown

    def test_render_does_not_mutate_tree(self, renderer):
        tree = prepare(FULL_BODY)
        before = tree.html
        renderer.render(tree)

        assert tree.html == before
