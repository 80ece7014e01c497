"""Show the saved reading session without opening the reader.

Usage:
    python scripts/inspect_session.py
    python scripts/inspect_session.py --story data/story.json --config-dir config
"""

from __future__ import annotations

import asyncio
import sys
from pathlib import Path

import click

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from main import build_history_store, project_root, resolve_path
from reader.config import get_setting, load_config
from reader.history import HistoryStack
from story import StoryError, load_story


@click.command()
@click.option("--story", "story_source", default=None, help="Story JSON file or URL (overrides config)")
@click.option("--config-dir", type=click.Path(), default=None, help="Config directory")
def inspect(story_source: str | None, config_dir: str | None) -> None:
    """Print the saved history and how much of the story it covers."""

    cfg = load_config(config_dir)
    history = build_history_store(cfg).load_history()
    if not history:
        click.echo("No saved session.")
        return

    source = story_source or resolve_path(project_root(cfg), get_setting(cfg, "story.source", "data/story.json"))
    try:
        graph = asyncio.run(load_story(source, timeout=float(get_setting(cfg, "story.timeout", 30))))
    except StoryError as e:
        click.echo(f"Could not open the story: {e}", err=True)
        sys.exit(1)

    stack = HistoryStack(history)
    missing = [node_id for node_id in stack if node_id not in graph]

    click.echo(f"\nSaved session ({len(stack)} entries):\n")
    click.echo("  " + " → ".join(str(node_id) for node_id in stack))
    click.echo(f"\n  Current node: {stack.top()!r}")
    click.echo(f"  Visited: {stack.unique_count()} of {len(graph)} nodes")
    if missing:
        click.echo(f"  Unknown to this story: {', '.join(map(repr, missing))}", err=True)
    click.echo()


if __name__ == "__main__":
    inspect()
