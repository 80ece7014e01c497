"""Fetch raw story definitions from disk or over HTTP."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import httpx

from .graph import StoryGraph
from .models import StoryError

logger = logging.getLogger(__name__)


class StoryLoadError(StoryError):
    """Raised when the story definition cannot be retrieved or decoded."""

    def __init__(self, message: str, source: str = "", status_code: int = 0):
        self.source = source
        self.status_code = status_code
        super().__init__(message)


def _is_url(source: str) -> bool:
    return source.startswith(("http://", "https://"))


async def _fetch(url: str, timeout: float, transport: httpx.AsyncBaseTransport | None) -> Any:
    try:
        async with httpx.AsyncClient(timeout=timeout, transport=transport) as client:
            resp = await client.get(url)
    except httpx.HTTPError as exc:
        raise StoryLoadError(f"Could not fetch story from {url}: {exc}", source=url) from exc

    if resp.status_code >= 400:
        raise StoryLoadError(
            f"HTTP {resp.status_code} fetching story from {url}",
            source=url,
            status_code=resp.status_code,
        )
    try:
        return resp.json()
    except ValueError as exc:
        raise StoryLoadError(f"Invalid JSON in story from {url}: {exc}", source=url) from exc


def _read(path: Path) -> Any:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as exc:
        raise StoryLoadError(f"Story file not found: {path}", source=str(path)) from exc
    except OSError as exc:
        raise StoryLoadError(f"Unable to read story file: {path}", source=str(path)) from exc

    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise StoryLoadError(f"Invalid JSON in {path}: {exc}", source=str(path)) from exc


async def load_definition(
    source: str | Path,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> Any:
    """Return the decoded story definition from a file path or http(s) URL."""
    source_str = str(source)
    if _is_url(source_str):
        logger.info("Fetching story from %s", source_str)
        return await _fetch(source_str, timeout, transport)
    logger.info("Reading story from %s", source_str)
    return _read(Path(source))


async def load_story(
    source: str | Path,
    timeout: float = 30.0,
    transport: httpx.AsyncBaseTransport | None = None,
) -> StoryGraph:
    """Load and build the story graph in one step."""
    definition = await load_definition(source, timeout=timeout, transport=transport)
    return StoryGraph.load(definition)
