"""Lookup structure over story nodes, built once from a loaded definition."""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from typing import Any

from .models import MalformedStoryError, NodeId, StoryError, StoryNode

logger = logging.getLogger(__name__)

# Container fields some story files nest their node list under
_CONTAINER_KEYS = ("story", "pages", "nodes")

__all__ = ["MalformedStoryError", "NodeNotFoundError", "StoryError", "StoryGraph"]


class NodeNotFoundError(StoryError, KeyError):
    """Raised when a node identifier is not part of the graph."""

    def __init__(self, node_id: Any):
        self.node_id = node_id
        super().__init__(node_id)

    def __str__(self) -> str:
        return f"Story node not found: {self.node_id!r}"


def _flatten(definition: Any) -> Sequence[Any]:
    """Return the flat record sequence, unwrapping a container field if needed."""
    if isinstance(definition, Mapping):
        for key in _CONTAINER_KEYS:
            if key in definition:
                return _flatten(definition[key])
        raise MalformedStoryError(
            f"Story object has none of the expected container fields {', '.join(_CONTAINER_KEYS)}"
        )
    if isinstance(definition, (str, bytes)) or not isinstance(definition, Sequence):
        raise MalformedStoryError(f"Story definition must be a list of nodes, got {type(definition).__name__}")
    return definition


class StoryGraph:
    """Immutable mapping from node identifier to :class:`StoryNode`."""

    def __init__(self, nodes: Sequence[StoryNode]):
        if not nodes:
            raise MalformedStoryError("Story definition contains no nodes")
        by_id: dict[NodeId, StoryNode] = {}
        for node in nodes:
            if node.id in by_id:
                raise MalformedStoryError(f"Duplicate story node id: {node.id!r}")
            by_id[node.id] = node
        self._nodes = by_id
        self._first_id = nodes[0].id

    @classmethod
    def load(cls, definition: Any) -> StoryGraph:
        """Build a graph from raw decoded story data (flat or nested)."""
        records = _flatten(definition)
        graph = cls([StoryNode.from_record(record) for record in records])
        logger.debug("Loaded story graph with %d nodes (entry: %r)", len(graph), graph.first_node_id())
        return graph

    def get(self, node_id: Any) -> StoryNode | None:
        if isinstance(node_id, bool):
            return None
        try:
            return self._nodes.get(node_id)
        except TypeError:  # unhashable
            return None

    def __getitem__(self, node_id: Any) -> StoryNode:
        node = self.get(node_id)
        if node is None:
            raise NodeNotFoundError(node_id)
        return node

    def __contains__(self, node_id: object) -> bool:
        return self.get(node_id) is not None

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self) -> Iterator[StoryNode]:
        return iter(self._nodes.values())

    def first_node_id(self) -> NodeId:
        """The entry point: the first node in definition order."""
        return self._first_id

    def node_ids(self) -> list[NodeId]:
        return list(self._nodes)
