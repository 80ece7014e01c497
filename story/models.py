"""Data models for story definition records."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Union

NodeId = Union[str, int]


class StoryError(Exception):
    """Base class for story definition errors."""


class MalformedStoryError(StoryError):
    """Raised when a story definition fails structural validation."""


def is_node_id(value: Any) -> bool:
    # bool is an int subclass but never a valid identifier
    return isinstance(value, (str, int)) and not isinstance(value, bool)


def _require_id(value: Any, context: str) -> NodeId:
    if not is_node_id(value):
        raise MalformedStoryError(f"{context} must be a string or integer, got {value!r}")
    return value


def _str_tuple(data: dict, key: str, node_id: NodeId) -> tuple[str, ...]:
    value = data.get(key)
    if value is None:
        return ()
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise MalformedStoryError(f"Node {node_id!r}: '{key}' must be a list of strings")
    return tuple(value)


@dataclass(frozen=True)
class Choice:
    label: str
    target: NodeId

    @classmethod
    def from_record(cls, data: Any, node_id: NodeId) -> Choice:
        """Build a choice; accepts ``text``/``label`` and ``page``/``target``."""
        if not isinstance(data, dict):
            raise MalformedStoryError(f"Node {node_id!r}: choice must be an object, got {data!r}")
        label = data.get("text", data.get("label", ""))
        if not isinstance(label, str):
            raise MalformedStoryError(f"Node {node_id!r}: choice label must be a string")
        target = data.get("page", data.get("target"))
        return cls(label=label, target=_require_id(target, f"Node {node_id!r}: choice target"))


@dataclass(frozen=True)
class StoryNode:
    """One unit of story content.

    Optional fields are normalized at load time so consumers never have to
    check for their presence: missing lists become empty tuples, missing scalars
    become ``None``.
    """

    id: NodeId
    page: int | None = None
    images: tuple[str, ...] = ()
    scenes: tuple[str, ...] = ()
    sound: str | None = None
    choices: tuple[Choice, ...] = ()

    @property
    def is_terminal(self) -> bool:
        return not self.choices

    @property
    def is_forced(self) -> bool:
        """Exactly one way out: the reader can simply continue."""
        return len(self.choices) == 1

    @property
    def is_decision(self) -> bool:
        return len(self.choices) >= 2

    @classmethod
    def from_record(cls, data: Any) -> StoryNode:
        if not isinstance(data, dict):
            raise MalformedStoryError(f"Story node must be an object, got {type(data).__name__}")
        node_id = _require_id(data.get("id"), "Story node 'id'")

        page = data.get("page")
        if page is not None and (not isinstance(page, int) or isinstance(page, bool)):
            raise MalformedStoryError(f"Node {node_id!r}: 'page' must be an integer")

        sound = data.get("sound")
        if sound is not None and not isinstance(sound, str):
            raise MalformedStoryError(f"Node {node_id!r}: 'sound' must be a string")

        raw_choices = data.get("choices")
        if raw_choices is None:
            raw_choices = []
        if not isinstance(raw_choices, list):
            raise MalformedStoryError(f"Node {node_id!r}: 'choices' must be a list")

        return cls(
            id=node_id,
            page=page,
            images=_str_tuple(data, "images", node_id),
            scenes=_str_tuple(data, "scenes", node_id),
            sound=sound or None,
            choices=tuple(Choice.from_record(choice, node_id) for choice in raw_choices),
        )
