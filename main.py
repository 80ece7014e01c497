"""Entry point for the storybook reader.

Usage:
    python main.py                          # Read the configured story
    python main.py --story path/or/url.json # Read a specific story
    python main.py --fresh                  # Ignore the saved session
    python main.py --fast --mute --verbose  # No transition delays, no sound, debug logging
"""

from __future__ import annotations

import asyncio
import logging
import sys
from pathlib import Path

import click

from reader.audio import AudioController, MixerClipFactory
from reader.config import get_setting, load_config
from reader.navigation import NavigationController
from reader.persistence import DEFAULT_HISTORY_KEY, HistoryStore, KeyValueFile
from reader.terminal import HELP_TEXT, Command, TerminalSurface, parse_command, resolve_node_id
from story import StoryError, StoryGraph, load_story

logger = logging.getLogger(__name__)


def _setup_logging(verbose: bool = False, log_file: str | None = None) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    fmt = "%(asctime)s — %(name)s — %(levelname)s — %(message)s"

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stderr)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))

    logging.basicConfig(level=level, format=fmt, handlers=handlers)

    # Quiet down noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


def resolve_path(root: Path, value: str) -> str:
    """Resolve relative paths against the project root; URLs pass through."""
    if value.startswith(("http://", "https://")):
        return value
    path = Path(value)
    return str(path if path.is_absolute() else root / path)


def project_root(cfg: dict) -> Path:
    return Path(cfg.get("_config_dir", "config")).resolve().parent


def build_history_store(cfg: dict) -> HistoryStore:
    state_file = resolve_path(project_root(cfg), get_setting(cfg, "storage.state_file", "data/session.json"))
    return HistoryStore(
        KeyValueFile(state_file),
        key=get_setting(cfg, "storage.history_key", DEFAULT_HISTORY_KEY),
    )


def build_controller(
    cfg: dict,
    graph: StoryGraph,
    *,
    store: HistoryStore | None = None,
    surface: TerminalSurface | None = None,
    fast: bool = False,
    muted: bool | None = None,
) -> NavigationController:
    """Wire persistence, audio and the render surface around a loaded graph."""
    root = project_root(cfg)
    store = store or build_history_store(cfg)
    audio = AudioController(
        clip_factory=MixerClipFactory(),
        sounds_dir=resolve_path(root, get_setting(cfg, "audio.sounds_dir", "sounds")),
        muted=get_setting(cfg, "audio.muted", False) if muted is None else muted,
    )
    return NavigationController(
        graph,
        store,
        audio=audio,
        surface=surface or TerminalSurface(),
        exit_delay=0.0 if fast else float(get_setting(cfg, "transition.exit_delay", 0.3)),
        settle_delay=0.0 if fast else float(get_setting(cfg, "transition.settle_delay", 0.05)),
    )


async def _dispatch(controller: NavigationController, command: Command) -> bool:
    """Apply one reader command. Returns False when the reader wants to quit."""
    if command.action == "quit":
        return False
    if command.action == "choose":
        moved = await controller.choose(command.index)
    elif command.action == "forward":
        moved = await controller.go_forward()
    elif command.action == "back":
        moved = await controller.go_back()
    elif command.action == "jump":
        moved = await controller.jump(resolve_node_id(controller.graph, command.target))
    elif command.action == "restart":
        moved = await controller.restart()
    elif command.action == "mute":
        controller.audio.set_muted(not controller.audio.muted)
        click.echo("Sound off." if controller.audio.muted else "Sound on.")
        return True
    elif command.action == "history":
        click.echo(" → ".join(str(node_id) for node_id in controller.history))
        return True
    else:
        click.echo(HELP_TEXT)
        return True

    if not moved:
        click.echo("Nothing happens.")
    return True


async def _read_loop(controller: NavigationController) -> None:
    controller.start()
    click.echo(HELP_TEXT)
    while True:
        try:
            text = await asyncio.to_thread(click.prompt, ">", default="", show_default=False)
        except click.Abort:
            break
        command = parse_command(text)
        if command is None:
            click.echo(HELP_TEXT)
            continue
        if not await _dispatch(controller, command):
            break
    controller.audio.stop()


async def _run(cfg: dict, source: str, fresh: bool, mute: bool, fast: bool) -> int:
    timeout = float(get_setting(cfg, "story.timeout", 30))
    try:
        graph = await load_story(source, timeout=timeout)
    except StoryError as exc:
        logger.error("Story failed to load: %s", exc)
        click.echo(f"Could not open the story: {exc}", err=True)
        return 1

    store = build_history_store(cfg)
    if fresh:
        store.clear()
    controller = build_controller(cfg, graph, store=store, fast=fast, muted=True if mute else None)
    await _read_loop(controller)
    return 0


@click.command()
@click.option("--story", "story_source", default=None, help="Story JSON file or URL (overrides config)")
@click.option("--config-dir", type=click.Path(), default=None, help="Config directory")
@click.option("--fresh", is_flag=True, help="Discard the saved session and start from the beginning")
@click.option("--mute", is_flag=True, help="Start with sound muted")
@click.option("--fast", is_flag=True, help="Skip transition delays")
@click.option("--verbose", is_flag=True, help="Enable debug logging")
def main(
    story_source: str | None,
    config_dir: str | None,
    fresh: bool,
    mute: bool,
    fast: bool,
    verbose: bool,
) -> None:
    """Read a branching story in the terminal."""

    cfg = load_config(config_dir)
    _setup_logging(verbose=verbose, log_file=get_setting(cfg, "storage.log_file"))

    source = story_source or resolve_path(project_root(cfg), get_setting(cfg, "story.source", "data/story.json"))

    try:
        code = asyncio.run(_run(cfg, source, fresh, mute, fast))
    except KeyboardInterrupt:
        code = 0
    click.echo("\nThe book closes.")
    sys.exit(code)


if __name__ == "__main__":
    main()
