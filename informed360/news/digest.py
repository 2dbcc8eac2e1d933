"""Dashboard digests over an aggregated article list.

Computes the "nation's mood" split of sentiment labels, a category by
label breakdown, and writes the topic table to CSV.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Sequence

import pandas as pd

from informed360.logging_setup import get_logger
from informed360.news.categorize import CATEGORIES
from informed360.news.models import SENTIMENT_LABELS, Article, Topic

logger = get_logger("news.digest")


@dataclass(frozen=True)
class Mood:
    """Share of positive, neutral and negative articles."""

    total: int
    positive_count: int
    neutral_count: int
    negative_count: int
    positive_pct: int
    neutral_pct: int
    negative_pct: int

    def to_dict(self) -> Dict[str, int]:
        return {
            "total": self.total,
            "positive": self.positive_pct,
            "neutral": self.neutral_pct,
            "negative": self.negative_pct,
            "positiveCount": self.positive_count,
            "neutralCount": self.neutral_count,
            "negativeCount": self.negative_count,
        }


def _pct(part: int, total: int) -> int:
    return int(part * 100 / max(1, total) + 0.5)


def compute_mood(articles: Sequence[Article]) -> Mood:
    """Label split across ``articles``; unknown labels count as neutral."""
    positive = sum(1 for a in articles if a.sentiment.label == "positive")
    negative = sum(1 for a in articles if a.sentiment.label == "negative")
    total = len(articles)
    neutral = total - positive - negative

    return Mood(
        total=total,
        positive_count=positive,
        neutral_count=neutral,
        negative_count=negative,
        positive_pct=_pct(positive, total),
        neutral_pct=_pct(neutral, total),
        negative_pct=_pct(negative, total),
    )


def category_breakdown(articles: Sequence[Article]) -> pd.DataFrame:
    """Article counts per category (rows) and sentiment label (columns)."""
    df = pd.DataFrame(
        [{"category": a.category, "label": a.sentiment.label} for a in articles],
        columns=["category", "label"],
    )
    table = pd.crosstab(df["category"], df["label"]) if not df.empty else pd.DataFrame()
    table = table.reindex(index=list(CATEGORIES), columns=list(SENTIMENT_LABELS), fill_value=0)
    table = table.fillna(0).astype(int)
    table["total"] = table.sum(axis=1)
    table.index.name = "category"
    table.columns.name = None
    return table


def topics_frame(topics: Sequence[Topic]) -> pd.DataFrame:
    """Flatten topics into one row each."""
    rows: List[Dict[str, object]] = []
    for rank, topic in enumerate(topics, start=1):
        rows.append(
            {
                "rank": rank,
                "topic": topic.title,
                "count": topic.count,
                "sources": topic.sources,
                "pos": topic.sentiment.pos,
                "neu": topic.sentiment.neu,
                "neg": topic.sentiment.neg,
                "sample_titles": " | ".join(a.title for a in topic.sample),
            }
        )
    return pd.DataFrame(
        rows,
        columns=["rank", "topic", "count", "sources", "pos", "neu", "neg", "sample_titles"],
    )


def write_topics_csv(topics: Sequence[Topic], output_csv: Path) -> Path:
    """Write the topic table to ``output_csv``."""
    output_csv.parent.mkdir(parents=True, exist_ok=True)
    topics_frame(topics).to_csv(output_csv, index=False)
    logger.info("Wrote topic digest to %s (%d topics)", output_csv, len(topics))
    return output_csv
