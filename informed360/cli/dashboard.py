"""Informed360 dashboard CLI.

Runs the aggregation pipeline once and prints the same JSON documents the
dashboard endpoints serve:

- ``news``    ranked articles, optionally filtered by sentiment label
- ``topics``  trending topics derived from the unfiltered article list
- ``mood``    the nation's-mood split of sentiment labels
- ``markets`` ticker quotes
- ``digest``  topic table as CSV plus a category breakdown
"""

from __future__ import annotations

import argparse
import json
import sys
import time
from pathlib import Path
from typing import Any, Dict, List, Optional

from informed360 import __version__
from informed360.logging_setup import get_logger, setup_logging
from informed360.markets import fetch_quotes
from informed360.news.aggregate import FILTER_ALL, fetch_articles
from informed360.news.digest import category_breakdown, compute_mood, write_topics_csv
from informed360.news.models import Article, FeedSource
from informed360.news.sources import load_sources
from informed360.news.topics import aggregate_topics

logger = get_logger("cli.dashboard")


def _updated_at() -> int:
    """Epoch milliseconds, as the front end expects."""
    return int(time.time() * 1000)


def _emit(payload: Dict[str, Any], out: Optional[str]) -> None:
    text = json.dumps(payload, ensure_ascii=False, indent=2)
    if out:
        output_path = Path(out)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text + "\n", encoding="utf-8")
        print(f"Wrote {output_path}")
    else:
        print(text)


def _sources_from_args(args: argparse.Namespace) -> Optional[List[FeedSource]]:
    """Feed list from ``--feeds``, or None to use the configured one."""
    if not args.feeds:
        return None

    feeds_path = Path(args.feeds)
    if not feeds_path.exists():
        print(f"Feeds file not found: {feeds_path}", file=sys.stderr)
        sys.exit(1)

    try:
        return load_sources(feeds_path)
    except ValueError as e:
        print(str(e), file=sys.stderr)
        sys.exit(1)


def _articles(args: argparse.Namespace, filter_label: str = FILTER_ALL) -> List[Article]:
    sources = _sources_from_args(args)
    if sources is not None and not sources:
        return []
    return fetch_articles(filter_label, sources=sources)


def cmd_news(args: argparse.Namespace) -> None:
    """Print ranked articles."""
    articles = _articles(args, args.sentiment)
    _emit({"updatedAt": _updated_at(), "articles": [a.to_dict() for a in articles]}, args.out)


def cmd_topics(args: argparse.Namespace) -> None:
    """Print trending topics."""
    topics = aggregate_topics(_articles(args))
    _emit({"updatedAt": _updated_at(), "topics": [t.to_dict() for t in topics]}, args.out)


def cmd_mood(args: argparse.Namespace) -> None:
    """Print the nation's mood."""
    mood = compute_mood(_articles(args))
    _emit({"updatedAt": _updated_at(), "mood": mood.to_dict()}, args.out)


def cmd_markets(args: argparse.Namespace) -> None:
    """Print market quotes."""
    quotes = fetch_quotes()
    _emit({"updatedAt": _updated_at(), "quotes": [q.to_dict() for q in quotes]}, args.out)


def cmd_digest(args: argparse.Namespace) -> None:
    """Write the topic CSV and print the category breakdown."""
    articles = _articles(args)
    topics = aggregate_topics(articles)

    output_csv = write_topics_csv(topics, Path(args.out))
    print(f"Wrote {len(topics)} topics from {len(articles)} articles to {output_csv}")
    print(category_breakdown(articles).to_string())


def _add_common(p: argparse.ArgumentParser, out_help: str) -> None:
    p.add_argument(
        "--feeds",
        type=str,
        default=None,
        help="Feed list (JSON or YAML); defaults to FEEDS_PATH",
    )
    p.add_argument("--out", type=str, default=None, help=out_help)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="informed360",
        description="Informed360 news dashboard CLI",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
    subparsers = parser.add_subparsers(dest="command", required=True)

    news_p = subparsers.add_parser("news", help="Ranked articles as JSON")
    news_p.add_argument(
        "--sentiment",
        default=FILTER_ALL,
        help="Filter: all, positive, neutral or negative (default: all)",
    )
    _add_common(news_p, "Write JSON here instead of stdout")
    news_p.set_defaults(func=cmd_news)

    topics_p = subparsers.add_parser("topics", help="Trending topics as JSON")
    _add_common(topics_p, "Write JSON here instead of stdout")
    topics_p.set_defaults(func=cmd_topics)

    mood_p = subparsers.add_parser("mood", help="Nation's mood as JSON")
    _add_common(mood_p, "Write JSON here instead of stdout")
    mood_p.set_defaults(func=cmd_mood)

    markets_p = subparsers.add_parser("markets", help="Market quotes as JSON")
    markets_p.add_argument("--out", type=str, default=None, help="Write JSON here instead of stdout")
    markets_p.set_defaults(func=cmd_markets)

    digest_p = subparsers.add_parser("digest", help="Topic CSV and category breakdown")
    digest_p.add_argument(
        "--feeds",
        type=str,
        default=None,
        help="Feed list (JSON or YAML); defaults to FEEDS_PATH",
    )
    digest_p.add_argument("--out", required=True, type=str, help="Output CSV path")
    digest_p.set_defaults(func=cmd_digest)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(level=args.log_level)
    args.func(args)


if __name__ == "__main__":
    main()
