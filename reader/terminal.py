"""Plain-terminal render surface and command parsing for the reader."""

from __future__ import annotations

from dataclasses import dataclass

import click

from story.graph import StoryGraph
from story.models import NodeId, StoryNode

from .navigation import NavigationController, RenderSurface

HELP_TEXT = (
    "[1-9] choose  [n] next  [b] back  [j ID] jump  [r] restart  "
    "[m] mute  [h] history  [q] quit"
)


@dataclass(frozen=True)
class Command:
    action: str  # "choose", "forward", "back", "jump", "restart", "mute", "history", "help", "quit"
    index: int = 0
    target: str | None = None


def resolve_node_id(graph: StoryGraph, raw: str) -> NodeId:
    """Match typed text to a node id; the int form wins when the graph has it."""
    try:
        as_int = int(raw)
    except ValueError:
        return raw
    return as_int if as_int in graph else raw


def parse_command(text: str) -> Command | None:
    """Map one line of reader input to a command (None when unrecognized)."""
    raw = text.strip()
    if not raw or raw.lower() == "n":
        return Command("forward")
    if raw.isdigit():
        return Command("choose", index=int(raw) - 1)

    head, _, rest = raw.partition(" ")
    head = head.lower()
    if head == "j" and rest.strip():
        return Command("jump", target=rest.strip())
    simple = {
        "b": "back",
        "r": "restart",
        "m": "mute",
        "h": "history",
        "?": "help",
        "q": "quit",
    }
    if head in simple and not rest:
        return Command(simple[head])
    return None


def render_node(node: StoryNode) -> str:
    lines: list[str] = []
    for image in node.images:
        lines.append(f"[image: {image}]")
    if node.images:
        lines.append("")
    for scene in node.scenes:
        for paragraph in scene.split("\n"):
            lines.append(paragraph)
            lines.append("")

    if node.choices:
        for number, choice in enumerate(node.choices, start=1):
            lines.append(f"  {number}. {choice.label}")
    else:
        lines.append("  ~ The End ~")

    if node.page is not None:
        lines.append("")
        lines.append(f"Page {node.page}")
    return "\n".join(lines)


class TerminalSurface(RenderSurface):
    """Writes story nodes and reader status to the terminal via click."""

    def __init__(self, width: int = 72):
        self._rule = "─" * width

    def exit(self, node: StoryNode) -> None:
        click.echo(click.style("…", dim=True))

    def enter(self, node: StoryNode) -> None:
        click.echo(self._rule)
        click.echo(render_node(node))
        click.echo(self._rule)

    def settled(self, controller: NavigationController) -> None:
        click.echo(status_line(controller))


def status_line(controller: NavigationController) -> str:
    back = "b:back" if controller.can_go_back() else "b:-"
    forward = "n:next" if controller.can_go_forward() else "n:-"
    sound = "muted" if controller.audio.muted else "sound on"
    return f"{controller.progress():.0%} read | {back} {forward} | {sound}"
