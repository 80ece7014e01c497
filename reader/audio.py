"""Background audio for story nodes: at most one clip plays at a time."""

from __future__ import annotations

import abc
import logging
from pathlib import Path
from typing import Callable, Optional

import pygame

from story.models import StoryNode

logger = logging.getLogger(__name__)


class Clip(abc.ABC):
    """Handle to one playable sound."""

    def __init__(self, path: Path, loop: bool = True):
        self.path = path
        self.loop = loop

    @abc.abstractmethod
    def play(self) -> None:
        ...

    @abc.abstractmethod
    def pause(self) -> None:
        ...

    @abc.abstractmethod
    def rewind(self) -> None:
        ...

    def release(self) -> None:
        pass


class MixerClip(Clip):
    """Clip played through ``pygame.mixer``."""

    def __init__(self, path: Path, loop: bool = True):
        super().__init__(path, loop)
        self._sound: pygame.mixer.Sound | None = pygame.mixer.Sound(str(path))
        self._channel: pygame.mixer.Channel | None = None

    def play(self) -> None:
        if self._sound is None:
            raise RuntimeError(f"Clip {self.path} was released")
        self._channel = self._sound.play(loops=-1 if self.loop else 0)

    def pause(self) -> None:
        if self._channel is not None:
            self._channel.stop()

    def rewind(self) -> None:
        # A stopped channel restarts from the beginning on the next play().
        if self._channel is not None:
            self._channel.stop()
            self._channel = None

    def release(self) -> None:
        self._channel = None
        self._sound = None


class MixerClipFactory:
    """Builds :class:`MixerClip` objects, initializing the mixer on first use.

    When the mixer cannot start (no audio device, say) the failure is logged
    once and every later call returns None, so no clip is started.
    """

    def __init__(self) -> None:
        self._ready: bool | None = None

    def _init_mixer(self) -> bool:
        if self._ready is None:
            try:
                if pygame.mixer.get_init() is None:
                    pygame.mixer.init()
                self._ready = True
            except pygame.error as exc:
                logger.warning("Audio unavailable, reading without sound: %s", exc)
                self._ready = False
        return self._ready

    def __call__(self, path: Path) -> MixerClip | None:
        if not self._init_mixer():
            return None
        return MixerClip(path)


class SilentClip(Clip):
    """Clip that tracks playback state without producing sound."""

    def __init__(self, path: Path, loop: bool = True):
        super().__init__(path, loop)
        self.playing = False
        self.position = 0.0
        self.released = False

    def play(self) -> None:
        self.playing = True
        logger.debug("Playing %s (loop=%s)", self.path, self.loop)

    def pause(self) -> None:
        self.playing = False

    def rewind(self) -> None:
        self.position = 0.0

    def release(self) -> None:
        self.released = True


# Returning None means no audio backend is available.
ClipFactory = Callable[[Path], Optional[Clip]]


class AudioController:
    """Keeps a single active clip tied to the current node."""

    def __init__(
        self,
        clip_factory: ClipFactory | None = None,
        sounds_dir: str | Path = "sounds",
        muted: bool = False,
    ):
        self._clip_factory = clip_factory or MixerClipFactory()
        self._sounds_dir = Path(sounds_dir)
        self._muted = muted
        self._active: Clip | None = None
        self._node: StoryNode | None = None

    @property
    def muted(self) -> bool:
        return self._muted

    @property
    def active_clip(self) -> Clip | None:
        return self._active

    @property
    def current_node(self) -> StoryNode | None:
        return self._node

    def stop(self) -> None:
        """Pause, rewind and release the active clip, if any."""
        clip, self._active = self._active, None
        if clip is None:
            return
        try:
            clip.pause()
            clip.rewind()
            clip.release()
        except Exception as exc:
            logger.warning("Error stopping audio %s: %s", clip.path, exc)

    def play_for_node(self, node: StoryNode | None) -> None:
        self.stop()
        self._node = node
        if node is None or not node.sound or self._muted:
            return

        path = self._sounds_dir / node.sound
        clip: Clip | None = None
        try:
            clip = self._clip_factory(path)
            if clip is None:
                return
            clip.loop = True
            clip.play()
        except Exception as exc:
            logger.error("Error playing audio %s: %s", path, exc)
            if clip is not None:
                try:
                    clip.release()
                except Exception as release_exc:
                    logger.warning("Error releasing audio %s: %s", path, release_exc)
            return
        self._active = clip

    def set_muted(self, muted: bool) -> None:
        if muted == self._muted:
            return
        self._muted = muted
        if muted:
            self.stop()
        else:
            self.play_for_node(self._node)
