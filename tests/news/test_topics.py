"""Tests for trending topic extraction."""

from informed360.config import TopicConfig
from informed360.news.topics import (
    STOP_WORDS,
    aggregate_topics,
    distinct_tokens,
    tokenize,
)


class TestTokenize:
    """Tests for title tokenization."""

    def test_lowercases_and_splits_on_punctuation(self):
        assert tokenize("Budget-2024: Farmers' RELIEF!") == ["budget", "2024", "farmers", "relief"]

    def test_drops_short_tokens(self):
        assert tokenize("AI to cut red ink") == []

    def test_min_length_configurable(self):
        assert tokenize("big cat ran", min_length=3) == ["big", "cat", "ran"]

    def test_drops_stop_words(self):
        assert "with" in STOP_WORDS
        assert tokenize("Talks with China resume") == ["talks", "china", "resume"]

    def test_distinct_tokens_keeps_first_order(self):
        assert distinct_tokens(["rain", "delhi", "rain"]) == ["rain", "delhi"]


class TestAggregateTopics:
    """Tests for topic aggregation."""

    def test_empty(self):
        assert aggregate_topics([]) == []

    def test_counts_articles_not_occurrences(self, make_article):
        """Test a word repeated in one title counts once for that article."""
        articles = [
            make_article(title="Rain rain everywhere", link="https://e.com/1"),
            make_article(title="Heavy rain in Mumbai", link="https://e.com/2"),
        ]

        topics = {t.title: t for t in aggregate_topics(articles)}

        assert topics["RAIN"].count == 2

    def test_count_matches_tokenized_titles(self, make_article):
        titles = [
            "Monsoon floods Assam villages",
            "Assam floods worsen overnight",
            "Cricket final tickets sold out",
            "Floods floods floods",
        ]
        articles = [make_article(title=t, link=f"https://e.com/{i}") for i, t in enumerate(titles)]

        for topic in aggregate_topics(articles):
            expected = sum(1 for t in titles if topic.title.lower() in tokenize(t))
            assert topic.count == expected
            assert topic.count >= 1

    def test_sorted_and_capped(self, make_article):
        articles = [
            make_article(title=f"word{i:02d} " + " ".join(f"word{j:02d}" for j in range(i)), link=f"https://e.com/{i}")
            for i in range(30)
        ]

        topics = aggregate_topics(articles)

        assert len(topics) == 16
        counts = [t.count for t in topics]
        assert counts == sorted(counts, reverse=True)

    def test_ties_keep_first_appearance(self, make_article):
        articles = [make_article(title="Alpha Bravo Charlie", link="https://e.com/1")]

        assert [t.title for t in aggregate_topics(articles)] == ["ALPHA", "BRAVO", "CHARLIE"]

    def test_sources_counts_distinct_sources(self, make_article):
        articles = [
            make_article(title="Election results", link="https://e.com/1", source="a.com"),
            make_article(title="Election turnout", link="https://e.com/2", source="a.com"),
            make_article(title="Election rally", link="https://e.com/3", source="b.com"),
        ]

        topic = aggregate_topics(articles)[0]

        assert topic.title == "ELECTION"
        assert topic.count == 3
        assert topic.sources == 2

    def test_sentiment_is_summed(self, make_article):
        articles = [
            make_article(title="Budget cheer", link="https://e.com/1", pos_p=40, neu_p=60, neg_p=0),
            make_article(title="Budget gloom", link="https://e.com/2", pos_p=0, neu_p=70, neg_p=30),
            make_article(title="Budget budget", link="https://e.com/3", pos_p=10, neu_p=80, neg_p=10),
        ]

        topic = aggregate_topics(articles)[0]

        assert topic.title == "BUDGET"
        assert topic.sentiment.to_dict() == {"pos": 50, "neu": 210, "neg": 40}

    def test_sample_up_to_three_in_order(self, make_article):
        articles = [make_article(title=f"Strike day{i}", link=f"https://e.com/{i}") for i in range(5)]

        topic = aggregate_topics(articles)[0]

        assert topic.title == "STRIKE"
        assert topic.count == 5
        assert topic.sample == articles[:3]

    def test_to_dict_shape(self, make_article):
        topic = aggregate_topics([make_article(title="Budget session")])[0]

        data = topic.to_dict()

        assert set(data) == {"title", "count", "sources", "sentiment", "sample"}
        assert set(data["sentiment"]) == {"pos", "neu", "neg"}
        assert data["sample"][0]["publishedAt"] == topic.sample[0].published_at

    def test_pure(self, make_article):
        articles = [make_article(title="Budget session", link="https://e.com/1")]

        assert aggregate_topics(articles) == aggregate_topics(articles)


class TestTopicSettings:
    """Tests for topic limits taken from configuration."""

    def _spread(self, make_article):
        return [
            make_article(title="Alpha Bravo Charlie", link="https://e.com/1"),
            make_article(title="Delta Foxtrot Hotel", link="https://e.com/2"),
            make_article(title="India Juliet Kilo", link="https://e.com/3"),
        ]

    def test_max_topics_env(self, make_article, monkeypatch):
        monkeypatch.setenv("MAX_TOPICS", "2")

        assert [t.title for t in aggregate_topics(self._spread(make_article))] == ["ALPHA", "BRAVO"]

    def test_max_topics_env_cannot_exceed_cap(self, make_article, monkeypatch):
        monkeypatch.setenv("MAX_TOPICS", "50")
        articles = [make_article(title=f"word{i:02d}", link=f"https://e.com/{i}") for i in range(30)]

        assert len(aggregate_topics(articles)) == 16

    def test_sample_size_and_min_length_env(self, make_article, monkeypatch):
        monkeypatch.setenv("TOPIC_SAMPLE_SIZE", "1")
        monkeypatch.setenv("TOPIC_MIN_TOKEN_LENGTH", "3")
        articles = [make_article(title=f"Tax row {i}", link=f"https://e.com/{i}") for i in range(3)]

        topic = aggregate_topics(articles)[0]

        assert topic.title == "TAX"
        assert topic.sample == articles[:1]

    def test_explicit_arguments_win(self, make_article, monkeypatch):
        monkeypatch.setenv("MAX_TOPICS", "2")

        assert len(aggregate_topics(self._spread(make_article), max_topics=5)) == 5

    def test_config_object(self, make_article):
        config = TopicConfig(max_topics=1, min_token_length=4, sample_size=3)

        assert [t.title for t in aggregate_topics(self._spread(make_article), config=config)] == ["ALPHA"]
