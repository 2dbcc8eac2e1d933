"""Headline sentiment scoring.

Wraps the VADER analyzer, which returns ``pos``/``neu``/``neg`` fractions
and a ``compound`` score in [-1, 1], and derives whole percentages and a
discrete label from them.

Two labelling rules are supported:

- ``compound`` (default): positive when compound >= +0.05, negative when
  compound <= -0.05, neutral otherwise. This is VADER's documented cut-off.
- ``majority``: positive when posP > negP, negative when negP > posP,
  neutral on a tie.
"""

from __future__ import annotations

import math
from typing import Dict, Optional, Protocol

from vaderSentiment.vaderSentiment import SentimentIntensityAnalyzer

from informed360.config import SentimentConfig, get_config
from informed360.logging_setup import get_logger
from informed360.news.models import Sentiment

logger = get_logger("news.sentiment")

LABEL_RULE_COMPOUND = "compound"
LABEL_RULE_MAJORITY = "majority"
LABEL_RULES = (LABEL_RULE_COMPOUND, LABEL_RULE_MAJORITY)

COMPOUND_THRESHOLD = 0.05


class PolarityAnalyzer(Protocol):
    """Anything exposing VADER's ``polarity_scores`` contract."""

    def polarity_scores(self, text: str) -> Dict[str, float]:
        ...


def to_percent(fraction: float) -> int:
    """Fraction to a whole percentage, rounding halves up, never negative."""
    return max(0, int(math.floor(fraction * 100 + 0.5)))


def label_sentiment(
    compound: float,
    pos_p: int,
    neg_p: int,
    rule: str = LABEL_RULE_COMPOUND,
    threshold: float = COMPOUND_THRESHOLD,
) -> str:
    """Map scores to positive / neutral / negative under ``rule``."""
    if rule == LABEL_RULE_MAJORITY:
        if pos_p > neg_p:
            return "positive"
        if neg_p > pos_p:
            return "negative"
        return "neutral"

    if compound >= threshold:
        return "positive"
    if compound <= -threshold:
        return "negative"
    return "neutral"


class SentimentScorer:
    """Scores text into a ``Sentiment`` record.

    The analyzer is built once and reused; VADER keeps no per-call state.
    """

    def __init__(
        self,
        analyzer: Optional[PolarityAnalyzer] = None,
        rule: str = LABEL_RULE_COMPOUND,
        threshold: float = COMPOUND_THRESHOLD,
    ) -> None:
        if rule not in LABEL_RULES:
            logger.warning("Unknown sentiment label rule %r, using %r", rule, LABEL_RULE_COMPOUND)
            rule = LABEL_RULE_COMPOUND
        self.analyzer = analyzer or SentimentIntensityAnalyzer()
        self.rule = rule
        self.threshold = threshold

    @classmethod
    def from_config(cls, config: Optional[SentimentConfig] = None) -> "SentimentScorer":
        """Build a scorer honouring the configured label rule."""
        config = config or get_config().sentiment
        return cls(rule=config.label_rule, threshold=config.compound_threshold)

    def score(self, text: Optional[str]) -> Sentiment:
        """Score ``text``; empty text scores as fully neutral."""
        scores = self.analyzer.polarity_scores(text or "")

        pos = float(scores.get("pos", 0.0))
        neu = float(scores.get("neu", 0.0))
        neg = float(scores.get("neg", 0.0))
        compound = float(scores.get("compound", 0.0))

        pos_p = to_percent(pos)
        neg_p = to_percent(neg)
        neu_p = to_percent(neu)

        return Sentiment(
            pos=pos,
            neu=neu,
            neg=neg,
            compound=compound,
            pos_p=pos_p,
            neg_p=neg_p,
            neu_p=neu_p,
            label=label_sentiment(compound, pos_p, neg_p, self.rule, self.threshold),
        )
