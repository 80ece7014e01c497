"""Tests for building and querying the story graph."""

import pytest

from story.graph import MalformedStoryError, NodeNotFoundError, StoryGraph


def _records() -> list[dict]:
    return [
        {"id": 1, "choices": [{"text": "next", "page": 2}]},
        {"id": 2, "choices": [{"text": "left", "page": 3}, {"text": "right", "page": 4}]},
        {"id": 3},
        {"id": 4, "choices": [{"text": "again", "page": 1}]},
    ]


class TestLoad:
    def test_flat_sequence(self):
        graph = StoryGraph.load(_records())
        assert len(graph) == 4
        assert graph.node_ids() == [1, 2, 3, 4]

    @pytest.mark.parametrize("container", ["story", "pages", "nodes"])
    def test_nested_container_is_flattened(self, container):
        graph = StoryGraph.load({container: _records()})
        assert graph.node_ids() == [1, 2, 3, 4]

    def test_first_node_is_definition_order(self):
        records = _records()
        records.reverse()
        assert StoryGraph.load(records).first_node_id() == 4

    def test_duplicate_ids_rejected(self):
        with pytest.raises(MalformedStoryError, match="Duplicate"):
            StoryGraph.load([{"id": 1}, {"id": 2}, {"id": 1}])

    @pytest.mark.parametrize("definition", [None, 42, "story", {"chapters": []}, [], {"story": []}, [1, 2]])
    def test_not_a_node_sequence(self, definition):
        with pytest.raises(MalformedStoryError):
            StoryGraph.load(definition)

    def test_cycles_are_allowed(self):
        graph = StoryGraph.load(_records())
        assert graph[4].choices[0].target == 1


class TestLookup:
    def test_get_known_and_unknown(self):
        graph = StoryGraph.load(_records())
        assert graph.get(2).id == 2
        assert graph.get(99) is None
        assert graph.get([1]) is None

    def test_string_and_int_ids_are_distinct(self):
        graph = StoryGraph.load([{"id": 1}, {"id": "1"}])
        assert graph.get(1) is not graph.get("1")
        assert len(graph) == 2

    def test_getitem_raises_not_found(self):
        graph = StoryGraph.load(_records())
        with pytest.raises(NodeNotFoundError) as excinfo:
            graph[99]
        assert isinstance(excinfo.value, KeyError)
        assert "99" in str(excinfo.value)

    def test_contains(self):
        graph = StoryGraph.load(_records())
        assert 3 in graph
        assert 5 not in graph
        assert True not in graph
