"""Configuration management for Informed360.

Loads configuration from environment variables with sane defaults.
Uses python-dotenv to load from .env file if present.
"""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

# Load .env file if present
load_dotenv()


def _get_env_float(key: str, default: float) -> float:
    """Get float from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        return default


def _get_env_int(key: str, default: int) -> int:
    """Get int from environment variable."""
    value = os.getenv(key)
    if value is None:
        return default
    try:
        return int(value)
    except ValueError:
        return default


def _get_env_str(key: str, default: str) -> str:
    """Get string from environment variable."""
    return os.getenv(key, default)


def _get_env_bool(key: str, default: bool) -> bool:
    """Get boolean from environment variable ("true"/"1"/"yes" are truthy)."""
    value = os.getenv(key)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True)
class FeedConfig:
    """Feed retrieval configuration."""

    feeds_path: Path
    timeout_seconds: float
    max_items: int
    fetch_delay_seconds: float
    user_agent: str

    @classmethod
    def from_env(cls) -> "FeedConfig":
        """Create FeedConfig from environment variables."""
        return cls(
            feeds_path=Path(_get_env_str("FEEDS_PATH", "./rss-feeds.json")),
            timeout_seconds=_get_env_float("FEED_TIMEOUT_SECONDS", 15.0),
            max_items=_get_env_int("FEED_MAX_ITEMS", 15),
            fetch_delay_seconds=_get_env_float("FEED_FETCH_DELAY_SECONDS", 0.05),
            user_agent=_get_env_str(
                "FEED_USER_AGENT", "Informed360Bot/1.0 (+https://informed360)"
            ),
        )


@dataclass(frozen=True)
class AggregationConfig:
    """Article list ranking configuration."""

    max_articles: int

    @classmethod
    def from_env(cls) -> "AggregationConfig":
        """Create AggregationConfig from environment variables."""
        return cls(max_articles=_get_env_int("MAX_ARTICLES", 80))


@dataclass(frozen=True)
class TopicConfig:
    """Topic extraction configuration."""

    max_topics: int
    min_token_length: int
    sample_size: int

    @classmethod
    def from_env(cls) -> "TopicConfig":
        """Create TopicConfig from environment variables."""
        return cls(
            max_topics=_get_env_int("MAX_TOPICS", 16),
            min_token_length=_get_env_int("TOPIC_MIN_TOKEN_LENGTH", 4),
            sample_size=_get_env_int("TOPIC_SAMPLE_SIZE", 3),
        )


@dataclass(frozen=True)
class SentimentConfig:
    """Sentiment labelling configuration."""

    label_rule: str  # "compound" or "majority"
    compound_threshold: float
    include_snippet: bool

    @classmethod
    def from_env(cls) -> "SentimentConfig":
        """Create SentimentConfig from environment variables."""
        return cls(
            label_rule=_get_env_str("SENTIMENT_LABEL_RULE", "compound").lower(),
            compound_threshold=_get_env_float("SENTIMENT_COMPOUND_THRESHOLD", 0.05),
            include_snippet=_get_env_bool("SENTIMENT_INCLUDE_SNIPPET", False),
        )


@dataclass(frozen=True)
class LoggingConfig:
    """Logging-related configuration."""

    level: str
    format: str

    @classmethod
    def from_env(cls) -> "LoggingConfig":
        """Create LoggingConfig from environment variables."""
        return cls(
            level=_get_env_str("LOG_LEVEL", "INFO"),
            format=_get_env_str("LOG_FORMAT", "json"),
        )


@dataclass(frozen=True)
class Config:
    """Main configuration container."""

    feeds: FeedConfig
    aggregation: AggregationConfig
    topics: TopicConfig
    sentiment: SentimentConfig
    logging: LoggingConfig

    @classmethod
    def from_env(cls) -> "Config":
        """Create Config from environment variables."""
        return cls(
            feeds=FeedConfig.from_env(),
            aggregation=AggregationConfig.from_env(),
            topics=TopicConfig.from_env(),
            sentiment=SentimentConfig.from_env(),
            logging=LoggingConfig.from_env(),
        )


# Global configuration instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config.from_env()
    return _config


def reset_config() -> None:
    """Reset the global configuration (useful for testing)."""
    global _config
    _config = None
