# mdstream/plugins/list_formatter/tests/test_lists.py
"""Tests for list run detection, rendering and open run tracking."""

import pytest

from mdstream.plugins.formatter_pipeline.stash import BlockStash
from mdstream.plugins.list_formatter.plugin import (
    ListFormatterPlugin,
    item_kind,
    render_list,
)
from mdstream.streaming.state import ListKind, ListState


UL_AB = '<ul class="md-ul"><li class="md-li">a</li><li class="md-li">b</li></ul>'


def _run(plugin, text):
    return plugin.format(text, BlockStash())


@pytest.fixture
def plugin():
    plugin = ListFormatterPlugin()
    plugin.initialize()
    return plugin


class TestItemKind:

    @pytest.mark.parametrize("line, kind", [
        ("- item", ListKind.UNORDERED),
        ("1. item", ListKind.ORDERED),
        ("42. item", ListKind.ORDERED),
        ("-item", None),
        ("1.item", None),
        ("* item", None),
        ("text", None),
    ])
    def test_item_kind(self, line, kind):
        assert item_kind(line) is kind


class TestCompleteLists:

    def test_unordered_run(self, plugin):
        assert _run(plugin, "- a\n- b").strip() == UL_AB

    def test_ordered_run(self, plugin):
        html = _run(plugin, "1. x\n2. y")
        assert html.strip() == (
            '<ol class="md-ol"><li class="md-li">x</li><li class="md-li">y</li></ol>'
        )

    def test_kind_change_starts_new_list(self, plugin):
        html = _run(plugin, "- a\n1. b")
        assert html.count("<ul") == 1
        assert html.count("<ol") == 1

    def test_list_isolated_from_surrounding_text(self, plugin):
        html = _run(plugin, "Intro\n- a\n- b\nOutro")
        assert html == f"Intro\n\n\n{UL_AB}\n\n\nOutro"

    def test_render_list(self):
        assert render_list(ListKind.UNORDERED, ["- a", "- b"]) == UL_AB


class TestOpenListTracking:

    @pytest.fixture
    def state(self, plugin):
        state = ListState()
        plugin.bind_state(state)
        return state

    def test_trailing_run_stays_raw_and_open(self, plugin, state):
        assert _run(plugin, "- a\n- b") == "- a\n- b"
        assert state.open is True
        assert state.kind is ListKind.UNORDERED
        assert state.content == "- a\n- b"

    def test_empty_partial_line_keeps_run_open(self, plugin, state):
        _run(plugin, "- a\n- b\n")
        assert state.open is True

    @pytest.mark.parametrize("partial", ["-", "- ", "3", "3.", "3. "])
    def test_partial_marker_keeps_run_open(self, plugin, state, partial):
        _run(plugin, "- a\n" + partial)
        assert state.open is True

    def test_ordered_run_open(self, plugin, state):
        _run(plugin, "1. a\n2. b")
        assert state.open is True
        assert state.kind is ListKind.ORDERED

    def test_blank_line_closes_run(self, plugin, state):
        _run(plugin, "- a\n- b")
        html = _run(plugin, "- a\n- b\n\n")
        assert state.open is False
        assert state.content == ""
        assert UL_AB in html

    def test_following_text_closes_run(self, plugin, state):
        html = _run(plugin, "- a\n- b\nThen")
        assert state.open is False
        assert UL_AB in html

    def test_earlier_runs_render_while_last_is_open(self, plugin, state):
        html = _run(plugin, "- a\n- b\n\n1. c")
        assert UL_AB in html
        assert html.endswith("1. c")
        assert state.kind is ListKind.ORDERED

    def test_reset_closes_state(self, plugin, state):
        _run(plugin, "- a")
        plugin.reset()
        assert state.open is False
