"""Ordered record of visited story nodes."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from story.models import NodeId


class HistoryUnderflowError(Exception):
    """Raised when popping would leave the history empty."""


class HistoryStack:
    """Visited node ids, oldest first.

    The top entry is always the node the reader is on. Consecutive
    duplicates are never stored. ``unique_count`` remembers every id ever
    recorded, so it never goes down when entries are popped or truncated.
    """

    def __init__(self, entries: Iterable[NodeId] = ()):
        self._entries: list[NodeId] = []
        self._seen: set[NodeId] = set()
        for node_id in entries:
            self.push(node_id)

    def push(self, node_id: NodeId) -> bool:
        """Append ``node_id`` unless it is already on top."""
        if self._entries and self._entries[-1] == node_id:
            return False
        self._entries.append(node_id)
        self._seen.add(node_id)
        return True

    def pop(self) -> NodeId:
        if len(self._entries) <= 1:
            raise HistoryUnderflowError("Cannot pop the last history entry")
        return self._entries.pop()

    def truncate_after(self, node_id: NodeId) -> bool:
        """Drop every entry after the first occurrence of ``node_id``."""
        try:
            index = self._entries.index(node_id)
        except ValueError:
            return False
        del self._entries[index + 1:]
        return True

    def reset(self, node_id: NodeId) -> None:
        self._entries = [node_id]
        self._seen.add(node_id)

    def top(self) -> NodeId:
        if not self._entries:
            raise HistoryUnderflowError("History is empty")
        return self._entries[-1]

    def unique_count(self) -> int:
        return len(self._seen)

    def as_list(self) -> list[NodeId]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[NodeId]:
        return iter(list(self._entries))

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._entries

    def __repr__(self) -> str:
        return f"HistoryStack({self._entries!r})"
