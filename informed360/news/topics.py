"""Trending topic extraction.

Topics are frequent title words. Each article contributes a word at most
once; per word we keep the article count, the distinct sources, the summed
sentiment percentages and the first few contributing articles.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Dict, FrozenSet, List, Optional, Sequence, Set

from informed360.config import TopicConfig, get_config
from informed360.news.models import Article, Topic, TopicSentiment

# Hard cap; a larger MAX_TOPICS setting is clamped
MAX_TOPICS = 16
MIN_TOKEN_LENGTH = 4

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")

STOP_WORDS: FrozenSet[str] = frozenset(
    {
        "a", "about", "above", "after", "again", "against", "all", "also", "amid",
        "an", "and", "any", "are", "as", "at", "back", "be", "been", "before",
        "being", "below", "between", "both", "but", "by", "can", "could", "day",
        "did", "does", "doing", "down", "during", "each", "even", "every", "few",
        "first", "for", "from", "further", "gets", "had", "has", "have", "having",
        "here", "how", "into", "its", "just", "last", "like", "live", "latest",
        "make", "makes", "many", "more", "most", "much", "must", "near", "news",
        "next", "nor", "not", "now", "off", "once", "only", "other", "ought",
        "our", "ours", "out", "over", "own", "really", "report", "reports", "said",
        "same", "says", "see", "sees", "set", "should", "since", "some", "still",
        "such", "take", "takes", "than", "that", "the", "their", "theirs", "them",
        "then", "there", "these", "they", "this", "those", "through", "today",
        "too", "top", "under", "until", "updates", "upon", "very", "video", "watch",
        "was", "week", "were", "what", "when", "where", "which", "while", "who",
        "whom", "why", "will", "with", "within", "without", "would", "year",
        "years", "you", "your",
    }
)


@dataclass
class TopicAccumulator:
    """Running aggregate for one token within a single run."""

    count: int = 0
    sources: Set[str] = field(default_factory=set)
    pos: int = 0
    neu: int = 0
    neg: int = 0
    sample_indices: List[int] = field(default_factory=list)

    def add(self, index: int, article: Article, sample_size: int) -> None:
        self.count += 1
        self.sources.add(article.source)
        self.pos += article.sentiment.pos_p
        self.neu += article.sentiment.neu_p
        self.neg += article.sentiment.neg_p
        if len(self.sample_indices) < sample_size:
            self.sample_indices.append(index)


def tokenize(
    title: str,
    min_length: int = MIN_TOKEN_LENGTH,
    stop_words: FrozenSet[str] = STOP_WORDS,
) -> List[str]:
    """Lowercase tokens of ``title`` that are long enough and not stop words."""
    words = _NON_ALNUM_RE.sub(" ", (title or "").lower()).split()
    return [w for w in words if len(w) >= min_length and w not in stop_words]


def distinct_tokens(tokens: Sequence[str]) -> List[str]:
    """Tokens in first-seen order with repeats removed."""
    return list(dict.fromkeys(tokens))


def aggregate_topics(
    articles: Sequence[Article],
    max_topics: Optional[int] = None,
    min_length: Optional[int] = None,
    sample_size: Optional[int] = None,
    config: Optional[TopicConfig] = None,
) -> List[Topic]:
    """Top title words across ``articles``, most frequent first.

    Limits left as None come from ``config`` (the global topic config by
    default).

    Args:
        articles: Ranked article list.
        max_topics: Number of topics to return at most.
        min_length: Shortest token kept.
        sample_size: Contributing articles kept per topic.
        config: Topic configuration supplying unset limits.

    Returns:
        Topics sorted by article count descending; ties keep the order in
        which the words first appeared.
    """
    config = config or get_config().topics
    max_topics = config.max_topics if max_topics is None else max_topics
    min_length = config.min_token_length if min_length is None else min_length
    sample_size = config.sample_size if sample_size is None else sample_size

    buckets: Dict[str, TopicAccumulator] = {}

    for index, article in enumerate(articles):
        for token in distinct_tokens(tokenize(article.title, min_length)):
            bucket = buckets.get(token)
            if bucket is None:
                bucket = buckets[token] = TopicAccumulator()
            bucket.add(index, article, sample_size)

    ranked = sorted(buckets.items(), key=lambda kv: kv[1].count, reverse=True)

    return [
        Topic(
            title=token.upper(),
            count=bucket.count,
            sources=len(bucket.sources),
            sentiment=TopicSentiment(pos=bucket.pos, neu=bucket.neu, neg=bucket.neg),
            sample=[articles[i] for i in bucket.sample_indices],
        )
        for token, bucket in ranked[: max(0, min(max_topics, MAX_TOPICS))]
    ]
