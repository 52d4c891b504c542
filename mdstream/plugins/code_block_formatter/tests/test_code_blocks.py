# mdstream/plugins/code_block_formatter/tests/test_code_blocks.py
"""Tests for fenced code block rendering and open block tracking."""

import pytest

from mdstream.plugins.code_block_formatter.plugin import CodeBlockFormatterPlugin
from mdstream.plugins.formatter_pipeline.stash import BlockStash
from mdstream.streaming.state import CodeBlockState


class RecordingHighlighter:
    """Highlighter fake that records calls and wraps code in a marker tag."""

    def __init__(self, supported=("python", "javascript", "cs"), fail=False):
        self.supported = set(supported)
        self.fail = fail
        self.calls = []

    def supports_language(self, name):
        return name in self.supported

    def highlight(self, code, name):
        self.calls.append((code, name))
        if self.fail:
            raise RuntimeError("highlighter exploded")
        return f"<hl>{code}</hl>"


def _format(plugin, text):
    stash = BlockStash()
    return stash.expand(plugin.format(text, stash))


@pytest.fixture(autouse=True)
def _highlight_env(monkeypatch):
    monkeypatch.delenv("MDSTREAM_HIGHLIGHT", raising=False)


@pytest.fixture
def highlighter():
    return RecordingHighlighter()


@pytest.fixture
def plugin(highlighter):
    plugin = CodeBlockFormatterPlugin(highlighter=highlighter)
    plugin.initialize()
    return plugin


class TestRenderCode:

    def test_alias_reaches_highlighter_as_canonical_id(self, plugin, highlighter):
        _format(plugin, "```py\nprint(1)\n```")
        assert highlighter.calls == [("print(1)", "python")]

    def test_untagged_fence_uses_default_language(self, plugin, highlighter):
        html = _format(plugin, "```\nlet a = 1\n```")
        assert highlighter.calls == [("let a = 1", "javascript")]
        assert 'class="language-javascript scrollable-code"' in html

    def test_highlighted_block_markup(self, plugin):
        html = _format(plugin, "```c#\nvar x;\n```")
        assert html.strip() == (
            '<pre class="language-cs scrollable-code">'
            '<code class="language-cs"><hl>var x;</hl></code></pre>'
        )

    def test_unsupported_language_falls_back_to_escaped_block(self, plugin, highlighter, caplog):
        html = _format(plugin, "```brainfuck\n<+>\n```")
        assert html.strip() == '<pre class="scrollable-code"><code>&lt;+&gt;</code></pre>'
        assert highlighter.calls == []
        assert "No highlighting support" in caplog.text

    def test_highlighter_error_falls_back(self, caplog):
        plugin = CodeBlockFormatterPlugin(highlighter=RecordingHighlighter(fail=True))
        plugin.initialize()
        html = _format(plugin, "```py\na & b\n```")
        assert html.strip() == '<pre class="scrollable-code"><code>a &amp; b</code></pre>'
        assert "Error highlighting python code" in caplog.text

    def test_no_highlighter_renders_plain(self):
        plugin = CodeBlockFormatterPlugin()
        plugin.set_highlighter(None)
        html = _format(plugin, "```py\nx\n```")
        assert html.strip() == '<pre class="scrollable-code"><code>x</code></pre>'

    def test_highlight_disabled_by_config(self, highlighter):
        plugin = CodeBlockFormatterPlugin(highlighter=highlighter)
        plugin.initialize({"highlight": False})
        html = _format(plugin, "```py\nx\n```")
        assert highlighter.calls == []
        assert "scrollable-code" in html

    def test_highlight_disabled_by_env(self, highlighter, monkeypatch):
        monkeypatch.setenv("MDSTREAM_HIGHLIGHT", "off")
        plugin = CodeBlockFormatterPlugin(highlighter=highlighter)
        plugin.initialize()
        _format(plugin, "```py\nx\n```")
        assert highlighter.calls == []

    def test_code_keeps_inner_blank_lines(self, plugin, highlighter):
        _format(plugin, "```py\n\na\n\nb\n\n```")
        assert highlighter.calls == [("a\n\nb", "python")]

    def test_code_is_hidden_from_later_formatters(self, plugin):
        stash = BlockStash()
        text = plugin.format("before\n```py\n**not bold**\n```\nafter", stash)
        assert "**" not in text
        assert stash.placeholder(0) in text


class TestSecondaryFences:

    def test_tilde_fence(self, plugin, highlighter):
        _format(plugin, "~~~py\nx = 1\n~~~")
        assert highlighter.calls == [("x = 1", "python")]

    def test_one_line_backtick_fence(self, plugin, highlighter):
        _format(plugin, "```py print(1)```")
        assert highlighter.calls == [("print(1)", "python")]

    def test_one_line_tilde_fence(self, plugin, highlighter):
        _format(plugin, "~~~ let a ~~~")
        assert highlighter.calls == [("let a", "javascript")]

    def test_tilde_fence_keeps_inner_blank_lines(self, plugin, highlighter):
        _format(plugin, "~~~py\na\n\nb\n~~~")
        assert highlighter.calls == [("a\n\nb", "python")]

    def test_fences_mentioned_in_prose_stay_text(self, plugin, highlighter):
        text = "Type ``` to open a fence, then ``` to close."
        assert _format(plugin, text) == text
        assert highlighter.calls == []

    def test_fence_starting_a_line_needs_closing_at_line_end(self, plugin, highlighter):
        text = "``` opens, and ``` closes a block."
        assert _format(plugin, text) == text
        assert highlighter.calls == []

    def test_tilde_fences_inside_a_line_stay_text(self, plugin, highlighter):
        text = "echo ~~~ a ~~~ b"
        assert _format(plugin, text) == text
        assert highlighter.calls == []


class TestRenderedBlocks:

    def test_existing_pre_block_is_untouched(self, plugin):
        block = '<pre class="language-python scrollable-code"><code>**a** _b_</code></pre>'
        stash = BlockStash()
        text = plugin.format(block, stash)
        assert "**" not in text
        assert stash.expand(text).strip() == block

    def test_rendering_prior_output_is_idempotent(self, plugin):
        once = _format(plugin, "```py\nx\n```")
        assert _format(plugin, once).strip() == once.strip()


class TestOpenBlockTracking:

    @pytest.fixture
    def state(self, plugin):
        state = CodeBlockState()
        plugin.bind_state(state)
        return state

    def test_unbound_plugin_leaves_open_fence(self, plugin):
        assert not plugin.streaming
        assert _format(plugin, "```py\nx") == "```py\nx"

    def test_open_block_renders_provisionally(self, plugin, state):
        html = _format(plugin, "Hello ```js\nconsole.log(1)")
        assert plugin.streaming
        assert state.open is True
        assert state.language == "js"
        assert state.content == "console.log(1)"
        assert (
            '<pre class="md-provisional scrollable-code">'
            '<code>console.log(1)</code></pre>'
        ) in html
        assert html.startswith("Hello ")

    def test_provisional_content_is_escaped(self, plugin, state):
        html = _format(plugin, "```\nif (a < b)")
        assert "<code>if (a &lt; b)</code>" in html

    def test_fence_without_newline_yet(self, plugin, state):
        _format(plugin, "```py")
        assert state.open is True
        assert state.language == "py"
        assert state.content == ""

    def test_closing_fence_closes_state(self, plugin, state, highlighter):
        _format(plugin, "Hello ```js\nconsole.log(1)")
        html = _format(plugin, "Hello ```js\nconsole.log(1)\n```")
        assert state.open is False
        assert state.content == ""
        assert highlighter.calls == [("console.log(1)", "javascript")]
        assert 'class="language-javascript scrollable-code"' in html
        assert "md-provisional" not in html

    def test_open_block_after_closed_block(self, plugin, state):
        _format(plugin, "```py\na\n```\ntext\n```sh\nls")
        assert state.open is True
        assert state.language == "sh"
        assert state.content == "ls"

    def test_fence_mentioned_before_open_block(self, plugin, state, highlighter):
        html = _format(plugin, "Wrap code in ``` fences.\n\n```py\nprint(1)")
        assert state.open is True
        assert state.language == "py"
        assert state.content == "print(1)"
        assert highlighter.calls == []
        assert html.startswith("Wrap code in ``` fences.\n\n")

    def test_fence_mentioned_in_prose_is_not_open(self, plugin, state):
        text = "Wrap code in ``` fences."
        assert _format(plugin, text) == text
        assert state.open is False

    def test_stream_closes_after_fence_mentioned_in_prose(self, plugin, state, highlighter):
        _format(plugin, "Wrap code in ``` fences.\n\n```py\nprint(1)")
        html = _format(plugin, "Wrap code in ``` fences.\n\n```py\nprint(1)\n```")
        assert state.open is False
        assert highlighter.calls == [("print(1)", "python")]
        assert "md-provisional" not in html

    def test_tilde_pair_inside_open_block_stays_code(self, plugin, state, highlighter):
        html = _format(plugin, "```sh\necho ~~~ a ~~~ b")
        assert state.content == "echo ~~~ a ~~~ b"
        assert "<code>echo ~~~ a ~~~ b</code>" in html
        assert "mdstream-block" not in html
        assert highlighter.calls == []

    def test_tilde_block_inside_open_block_stays_code(self, plugin, state, highlighter):
        html = _format(plugin, "```md\n~~~\nx\n~~~")
        assert state.open is True
        assert state.content == "~~~\nx\n~~~"
        assert "<code>~~~\nx\n~~~</code>" in html
        assert highlighter.calls == []

    def test_tilde_block_before_open_block_is_rendered(self, plugin, state, highlighter):
        _format(plugin, "~~~py\na\n~~~\n\n```sh\nls")
        assert highlighter.calls == [("a", "python")]
        assert state.open is True
        assert state.content == "ls"

    def test_reset_closes_state(self, plugin, state):
        _format(plugin, "```py\nx")
        plugin.reset()
        assert state.open is False
        assert state.language == ""
