"""Tests for the terminal surface and command parsing."""

from reader.terminal import Command, parse_command, render_node, resolve_node_id
from story.graph import StoryGraph
from story.models import Choice, StoryNode


class TestParseCommand:
    def test_numbers_choose_one_based(self):
        assert parse_command("1") == Command("choose", index=0)
        assert parse_command(" 3 ") == Command("choose", index=2)

    def test_empty_and_n_go_forward(self):
        assert parse_command("") == Command("forward")
        assert parse_command("N") == Command("forward")

    def test_jump_keeps_typed_text(self):
        assert parse_command("j 12") == Command("jump", target="12")
        assert parse_command("j attic") == Command("jump", target="attic")

    def test_single_letter_commands(self):
        assert parse_command("b").action == "back"
        assert parse_command("r").action == "restart"
        assert parse_command("m").action == "mute"
        assert parse_command("h").action == "history"
        assert parse_command("q").action == "quit"

    def test_unknown_input(self):
        assert parse_command("dance") is None
        assert parse_command("j") is None
        assert parse_command("b now") is None


class TestRenderNode:
    def test_renders_content_choices_and_page(self):
        node = StoryNode(
            id=2,
            page=2,
            images=("attic.png",),
            scenes=("First line\nSecond line",),
            choices=(Choice("Speak", 3), Choice("Run", 4)),
        )
        text = render_node(node)
        assert "[image: attic.png]" in text
        assert "First line\n\nSecond line" in text
        assert "  1. Speak" in text
        assert "  2. Run" in text
        assert text.endswith("Page 2")

    def test_terminal_node_shows_ending(self):
        text = render_node(StoryNode(id=9, scenes=("Fin.",)))
        assert "The End" in text
        assert "Page" not in text


class TestResolveNodeId:
    def test_integer_ids(self):
        graph = StoryGraph.load([{"id": 1}, {"id": 2}])
        assert resolve_node_id(graph, "2") == 2

    def test_numeric_string_ids(self):
        graph = StoryGraph.load([{"id": "1"}, {"id": "2"}, {"id": "3"}])
        assert resolve_node_id(graph, "2") == "2"

    def test_non_numeric_ids(self):
        graph = StoryGraph.load([{"id": "attic"}])
        assert resolve_node_id(graph, "attic") == "attic"

    def test_int_form_wins_when_both_exist(self):
        graph = StoryGraph.load([{"id": 2}, {"id": "2"}])
        assert resolve_node_id(graph, "2") == 2
