"""Navigation state machine: where the reader is and how they move.

Each transition: guard -> validate -> exit -> (delay) -> mutate -> enter -> (delay) -> idle.
Only one transition runs at a time; requests that arrive mid-transition are dropped.
"""

from __future__ import annotations

import asyncio
import enum
import logging
from dataclasses import dataclass

from story.graph import StoryGraph
from story.models import NodeId, StoryNode

from .audio import AudioController
from .history import HistoryStack
from .persistence import HistoryStore

logger = logging.getLogger(__name__)

DEFAULT_EXIT_DELAY = 0.3
DEFAULT_SETTLE_DELAY = 0.05


class Phase(enum.Enum):
    IDLE = "idle"
    TRANSITIONING = "transitioning"


class NavigationMode(enum.Enum):
    FORWARD = "forward"
    BACK = "back"
    JUMP = "jump"
    RESTART = "restart"


class NavigationUsageError(ValueError):
    """Raised when a caller asks for a navigation that contradicts the history."""


@dataclass(frozen=True)
class NavigationState:
    """Read-only snapshot of the navigation state."""

    current_node_id: NodeId
    history: tuple[NodeId, ...]
    phase: Phase


class RenderSurface:
    """Receives exit/enter signals from the controller. Override what you need."""

    def exit(self, node: StoryNode) -> None:
        pass

    def enter(self, node: StoryNode) -> None:
        pass

    def settled(self, controller: NavigationController) -> None:
        pass


class NavigationController:
    """Owns the current node and history; the only code that mutates them."""

    def __init__(
        self,
        graph: StoryGraph,
        store: HistoryStore,
        audio: AudioController | None = None,
        surface: RenderSurface | None = None,
        exit_delay: float = DEFAULT_EXIT_DELAY,
        settle_delay: float = DEFAULT_SETTLE_DELAY,
    ):
        self._graph = graph
        self._store = store
        self._audio = audio or AudioController()
        self._surface = surface or RenderSurface()
        self._exit_delay = exit_delay
        self._settle_delay = settle_delay

        self._history: HistoryStack | None = None
        self._current: NodeId | None = None
        self._phase = Phase.IDLE

    # ── Startup ─────────────────────────────────────────────────

    def start(self) -> NodeId:
        """Seed state from the saved session, or from the story's first node."""
        if self._history is not None:
            raise RuntimeError("Navigation already started")

        saved = self._store.load_history() or []
        unknown = [node_id for node_id in saved if node_id not in self._graph]
        if saved and not unknown:
            history = HistoryStack(saved)
            logger.info("Resuming saved session at node %r (%d entries)", history.top(), len(history))
        else:
            if unknown:
                logger.warning("Saved session refers to unknown nodes %r; starting over", unknown)
            history = HistoryStack([self._graph.first_node_id()])

        self._history = history
        self._current = history.top()
        node = self._graph[self._current]
        self._audio.play_for_node(node)
        self._surface.enter(node)
        self._surface.settled(self)
        return self._current

    def _require_started(self) -> HistoryStack:
        if self._history is None:
            raise RuntimeError("Navigation not started; call start() first")
        return self._history

    # ── Queries ─────────────────────────────────────────────────

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def current_node_id(self) -> NodeId:
        self._require_started()
        return self._current

    @property
    def current_node(self) -> StoryNode:
        return self._graph[self.current_node_id]

    @property
    def history(self) -> tuple[NodeId, ...]:
        return tuple(self._require_started())

    @property
    def graph(self) -> StoryGraph:
        return self._graph

    @property
    def audio(self) -> AudioController:
        return self._audio

    def state(self) -> NavigationState:
        return NavigationState(self.current_node_id, self.history, self._phase)

    def can_go_back(self) -> bool:
        return len(self._require_started()) > 1 and self._phase is Phase.IDLE

    def can_go_forward(self) -> bool:
        return self.current_node.is_forced and self._phase is Phase.IDLE

    def progress(self) -> float:
        total = len(self._graph)
        if total == 0:
            return 0.0
        return min(1.0, max(0.0, self._require_started().unique_count() / total))

    # ── Transitions ─────────────────────────────────────────────

    def _validate(self, history: HistoryStack, target: NodeId | None, mode: NavigationMode) -> NodeId | None:
        """Resolve the node the transition will land on, or None to drop it."""
        if mode is NavigationMode.RESTART:
            return self._graph.first_node_id()

        if mode is NavigationMode.BACK:
            if len(history) <= 1:
                logger.info("Back requested at the start of history; ignoring")
                return None
            previous = history.as_list()[-2]
            if target is not None and target != previous:
                raise NavigationUsageError(
                    f"Back must land on the previous node {previous!r}, not {target!r}"
                )
            return previous

        if target not in self._graph:
            logger.warning("Navigation target %r not found in story; ignoring", target)
            return None
        if mode is NavigationMode.JUMP and target not in history:
            logger.warning("Cannot jump to %r: not in reading history", target)
            return None
        return target

    def _mutate(self, history: HistoryStack, target: NodeId, mode: NavigationMode) -> None:
        if mode is NavigationMode.FORWARD:
            history.push(target)
        elif mode is NavigationMode.BACK:
            history.pop()
        elif mode is NavigationMode.JUMP:
            history.truncate_after(target)
        else:
            history.reset(target)

    async def navigate(self, target: NodeId | None, mode: NavigationMode = NavigationMode.FORWARD) -> bool:
        """Run one transition. Returns False when the request was dropped."""
        history = self._require_started()
        if self._phase is Phase.TRANSITIONING:
            logger.debug("Transition in progress; dropping %s to %r", mode.value, target)
            return False

        destination = self._validate(history, target, mode)
        if destination is None:
            return False

        self._phase = Phase.TRANSITIONING
        try:
            self._surface.exit(self.current_node)
            self._audio.stop()
            await asyncio.sleep(self._exit_delay)

            self._mutate(history, destination, mode)
            self._current = destination
            logger.debug("Now at node %r via %s (history length %d)", destination, mode.value, len(history))

            self._store.save_history(history)
            node = self._graph[destination]
            self._audio.play_for_node(node)
            self._surface.enter(node)

            await asyncio.sleep(self._settle_delay)
        finally:
            self._phase = Phase.IDLE
        self._surface.settled(self)
        return True

    # ── Reader controls ─────────────────────────────────────────

    async def choose(self, index: int) -> bool:
        """Follow the choice at ``index`` (0-based) of the current node."""
        choices = self.current_node.choices
        if not 0 <= index < len(choices):
            logger.info("No choice %d on node %r", index, self.current_node_id)
            return False
        return await self.navigate(choices[index].target, NavigationMode.FORWARD)

    async def go_back(self) -> bool:
        if not self.can_go_back():
            return False
        return await self.navigate(None, NavigationMode.BACK)

    async def go_forward(self) -> bool:
        if not self.can_go_forward():
            return False
        return await self.navigate(self.current_node.choices[0].target, NavigationMode.FORWARD)

    async def jump(self, target: NodeId) -> bool:
        return await self.navigate(target, NavigationMode.JUMP)

    async def restart(self) -> bool:
        return await self.navigate(None, NavigationMode.RESTART)
