"""News aggregation and topic extraction.

Modules:
    sources: Load the static feed list
    pull: Fetch and parse RSS/Atom feeds
    sentiment: Score headlines and label them
    categorize: Keyword-rule categories
    normalize: Raw feed items to Articles
    aggregate: Fetch, filter, dedupe, sort and cap articles
    topics: Trending title words with sentiment and source counts
    digest: Nation's mood and tabular digests
"""

from informed360.news.aggregate import fetch_articles, normalize_filter_label
from informed360.news.categorize import categorize
from informed360.news.digest import compute_mood
from informed360.news.models import Article, FeedSource, Sentiment, Topic
from informed360.news.pull import FeedClient, FeedFailure, FeedSuccess, parse_feed
from informed360.news.sentiment import SentimentScorer
from informed360.news.sources import load_sources
from informed360.news.topics import aggregate_topics

__all__ = [
    "Article",
    "FeedClient",
    "FeedFailure",
    "FeedSource",
    "FeedSuccess",
    "Sentiment",
    "SentimentScorer",
    "Topic",
    "aggregate_topics",
    "categorize",
    "compute_mood",
    "fetch_articles",
    "load_sources",
    "normalize_filter_label",
    "parse_feed",
]
