"""Story definitions: nodes, choices and the graph built from them."""

from .graph import MalformedStoryError, NodeNotFoundError, StoryError, StoryGraph
from .models import Choice, StoryNode
from .source import StoryLoadError, load_definition, load_story

__all__ = [
    "Choice",
    "MalformedStoryError",
    "NodeNotFoundError",
    "StoryError",
    "StoryGraph",
    "StoryLoadError",
    "StoryNode",
    "load_definition",
    "load_story",
]
