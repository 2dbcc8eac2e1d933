"""Feed list loading.

The feed list is static configuration: a JSON array (``rss-feeds.json``)
or a YAML document, each entry carrying a ``url`` plus an optional display
``name`` and ``category`` hint.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable, List

import yaml

from informed360.logging_setup import get_logger
from informed360.news.models import FeedSource

logger = get_logger("news.sources")


def _entries_from_document(data: Any) -> Iterable[Any]:
    """Accept either a bare list or a mapping with a ``feeds`` list."""
    if isinstance(data, dict):
        data = data.get("feeds", [])
    if not isinstance(data, list):
        return []
    return data


def parse_sources(data: Any) -> List[FeedSource]:
    """Build FeedSource records from a decoded feed-list document."""
    sources: List[FeedSource] = []

    for entry in _entries_from_document(data):
        if isinstance(entry, str):
            entry = {"url": entry}
        if not isinstance(entry, dict):
            logger.warning("Skipping malformed feed entry: %r", entry)
            continue

        url = str(entry.get("url") or "").strip()
        if not url:
            logger.warning("Skipping feed entry without url: %r", entry)
            continue

        sources.append(
            FeedSource(
                url=url,
                name=entry.get("name") or None,
                category=entry.get("category") or None,
            )
        )

    return sources


def load_sources(sources_path: Path) -> List[FeedSource]:
    """Load feed sources from a JSON or YAML file.

    Args:
        sources_path: Path to the feed list (``.json``, ``.yaml`` or ``.yml``).

    Returns:
        Feed sources in file order; empty when the file is missing.

    Raises:
        ValueError: If the file exists but cannot be decoded.
    """
    if not sources_path.exists():
        logger.warning("Sources file not found: %s", sources_path)
        return []

    text = sources_path.read_text(encoding="utf-8")

    try:
        if sources_path.suffix.lower() in {".yaml", ".yml"}:
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise ValueError(f"Could not decode feed list {sources_path}: {e}") from e

    sources = parse_sources(data)
    logger.info("Loaded %d feed sources from %s", len(sources), sources_path)
    return sources
