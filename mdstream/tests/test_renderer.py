# mdstream/tests/test_renderer.py
"""Tests for MarkdownRenderer and StreamingSession."""

import json
from unittest import mock

import pytest

from mdstream.renderer import MarkdownRenderer, StreamingSession


class FailingFormatter:

    @property
    def name(self):
        return "failing"

    @property
    def priority(self):
        return 60

    def format(self, text, stash):
        raise RuntimeError("boom")

    def reset(self):
        pass


class TestMarkdownRenderer:

    def test_alias_reaches_highlighter(self, recording_highlighter):
        renderer = MarkdownRenderer(highlighter=recording_highlighter)
        renderer.render("```py\nprint(1)\n```")
        renderer.render("```\nlet a\n```")
        assert recording_highlighter.calls == [
            ("print(1)", "python"),
            ("let a", "javascript"),
        ]

    def test_config_dict_disables_formatter(self):
        renderer = MarkdownRenderer(config={
            "formatters": [{"name": "paragraph_formatter", "enabled": False}]
        })
        assert renderer.render("hello") == "hello"

    def test_config_file_from_env(self, tmp_path, monkeypatch):
        config_path = tmp_path / "formatters.json"
        config_path.write_text(json.dumps({
            "formatters": [{"name": "header_formatter", "enabled": False}]
        }))
        monkeypatch.setenv("MDSTREAM_FORMATTERS_CONFIG", str(config_path))
        renderer = MarkdownRenderer()
        assert "header_formatter" not in renderer.pipeline.list_formatters()
        assert renderer.render("# x") == '<p class="md-p"># x</p>'

    def test_highlighting_disabled_by_env(self, monkeypatch):
        monkeypatch.setenv("MDSTREAM_HIGHLIGHT", "off")
        html = MarkdownRenderer().render("```py\nx\n```")
        assert html == '<pre class="scrollable-code"><code>x</code></pre>'

    def test_failing_formatter_does_not_break_render(self):
        renderer = MarkdownRenderer()
        renderer.pipeline.register(FailingFormatter())
        assert renderer.render("hello") == '<p class="md-p">hello</p>'

    def test_render_never_raises(self):
        renderer = MarkdownRenderer()
        with mock.patch.object(renderer.pipeline, "format", side_effect=RuntimeError("x")):
            assert renderer.render("hello") == "hello"

    def test_renderer_is_stateless(self):
        renderer = MarkdownRenderer()
        html = renderer.render("```py\nx")
        assert "md-provisional" not in html


class TestStreamingSession:

    def test_sessions_are_independent(self):
        first = StreamingSession()
        second = StreamingSession()
        first.render("Some **bold")
        second.render("plain")
        assert first.state.bold.open is True
        assert second.state.bold.open is False

    def test_state_tracks_every_construct(self):
        session = StreamingSession()
        session.render("- a\n- *it")
        assert session.state.list.open is True
        assert session.state.italic.open is True
        session.render("```sh\nls")
        assert session.state.code_block.open is True
        assert session.state.code_block.language == "sh"
        assert session.state.list.open is False
        assert session.state.italic.open is False

    def test_reset(self):
        session = StreamingSession()
        session.render("```py\nx")
        session.reset()
        assert session.state.has_open_construct is False
        assert session.state.code_block.content == ""

    def test_injected_highlighter_used_for_closed_blocks(self, recording_highlighter):
        session = StreamingSession(highlighter=recording_highlighter)
        session.render("```rb\nputs 1")
        assert recording_highlighter.calls == []
        session.render("```rb\nputs 1\n```")
        assert recording_highlighter.calls == [("puts 1", "ruby")]

    def test_closed_graphics_render_while_streaming(self):
        session = StreamingSession()
        html = session.render(
            '<graphic type="bar-diagram" title="X">'
            '<item label="A" color="red" width="5%"/></graphic>\nmore'
        )
        assert 'class="graphic-bar-diagram"' in html

    def test_final_frame_matches_complete_render(self):
        document = "# T\n\n- a\n- b\n\nText with **bold** and `code`.\n\n```py\nx = 1\n```\n\nEnd."
        session = StreamingSession()
        for end in range(1, len(document) + 1):
            html = session.render(document[:end])
        assert session.state.has_open_construct is False
        assert html == MarkdownRenderer().render(document)

    @pytest.mark.parametrize("document", [
        "Wrap code in ``` fences.\n\n```py\nprint(1)\n```\n\nDone.",
        "Shell:\n\n```sh\necho ~~~ a ~~~ b\n```",
        "**a*b*c** then *a **b** c*",
    ])
    def test_final_frame_matches_complete_render_for_tricky_markers(self, document):
        session = StreamingSession()
        for end in range(1, len(document) + 1):
            html = session.render(document[:end])
        assert session.state.has_open_construct is False
        assert html == MarkdownRenderer().render(document)

    def test_disabled_stateful_formatter(self):
        session = StreamingSession(config={
            "formatters": [{"name": "list_formatter", "enabled": False}]
        })
        session.render("- a")
        assert session.state.list.open is False

    def test_render_never_raises(self):
        session = StreamingSession()
        with mock.patch.object(session.pipeline, "format", side_effect=RuntimeError("x")):
            assert session.render("**x") == "**x"
