"""Reader core: the navigation state machine and its collaborators."""

from .audio import AudioController, Clip, MixerClip, MixerClipFactory, SilentClip
from .history import HistoryStack, HistoryUnderflowError
from .navigation import (
    NavigationController,
    NavigationMode,
    NavigationState,
    NavigationUsageError,
    Phase,
    RenderSurface,
)
from .persistence import HistoryStore, KeyValueFile

__all__ = [
    "AudioController",
    "Clip",
    "HistoryStack",
    "HistoryStore",
    "HistoryUnderflowError",
    "KeyValueFile",
    "MixerClip",
    "MixerClipFactory",
    "NavigationController",
    "NavigationMode",
    "NavigationState",
    "NavigationUsageError",
    "Phase",
    "RenderSurface",
    "SilentClip",
]
