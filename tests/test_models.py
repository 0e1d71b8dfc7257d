import dataclasses
from datetime import datetime, timezone

import pytest

from newsiq.errors import FetchError
from newsiq.models import SOURCE_TYPE_INTERNAL, Article, FetchOutcome, SourceRef

NOW = datetime(2025, 3, 1, 8, 0, tzinfo=timezone.utc)


def _make_article(**overrides) -> Article:
    defaults = dict(
        id="toi-world-1-0",
        title="Summit ends with agreement",
        description="Leaders sign accord.",
        published_at="2025-03-01T07:00:00+00:00",
        source=SourceRef(name="Times of India", id="the-times-of-india"),
        category="World",
        sentiment="neutral",
        url="https://timesofindia.indiatimes.com/world/1.cms",
    )
    defaults.update(overrides)
    return Article(**defaults)


class TestArticle:
    def test_frozen(self):
        with pytest.raises(dataclasses.FrozenInstanceError):
            _make_article().title = "changed"

    def test_to_dict_camel_case(self):
        d = _make_article().to_dict()
        assert d["publishedAt"] == "2025-03-01T07:00:00+00:00"
        assert d["sourceType"] == "external-feed"
        assert d["source"] == {"name": "Times of India", "id": "the-times-of-india"}
        assert "priority" not in d

    def test_to_dict_priority_when_set(self):
        assert _make_article(priority=1).to_dict()["priority"] == 1


class TestFromDict:
    def test_full_record(self):
        a = Article.from_dict({
            "id": "3",
            "title": "Stock Markets Reach All-Time High",
            "description": "Major indices surge.",
            "publishedAt": "2025-03-01T06:00:00+00:00",
            "source": {"name": "Financial Times"},
            "sentiment": "positive",
            "category": "Business",
        }, now=NOW)
        assert a.id == "3"
        assert a.source == SourceRef(name="Financial Times", id="")
        assert a.category == "Business"
        assert a.sentiment == "positive"
        assert a.source_type == SOURCE_TYPE_INTERNAL

    def test_defaults(self):
        a = Article.from_dict({}, ordinal=7, now=NOW)
        assert a.title == "No Title"
        assert a.category == "General"
        assert a.sentiment == "neutral"
        assert a.published_at == NOW.isoformat()
        assert a.id == f"internal-{int(NOW.timestamp() * 1000)}-7"
        assert a.source.name == "Internal"

    def test_unknown_category_to_general(self):
        assert Article.from_dict({"category": "Environment"}, now=NOW).category == "General"

    def test_feed_key_category_mapped(self):
        assert Article.from_dict({"category": "technology"}, now=NOW).category == "Technology"

    def test_invalid_sentiment_recomputed(self):
        a = Article.from_dict({"title": "Crash and fraud probe", "sentiment": "mixed"}, now=NOW)
        assert a.sentiment == "negative"

    def test_string_source(self):
        assert Article.from_dict({"source": "Wire"}, now=NOW).source.name == "Wire"

    def test_description_cleaned_and_capped(self):
        a = Article.from_dict({"description": "<p>" + "word " * 100 + "</p> (PTI)"}, now=NOW)
        assert len(a.description) <= 200
        assert "<" not in a.description
        assert "(PTI)" not in a.description

    def test_unparseable_published_at_uses_now(self):
        assert Article.from_dict({"publishedAt": "yesterday"}, now=NOW).published_at == NOW.isoformat()

    def test_published_at_normalized_to_iso(self):
        a = Article.from_dict({"publishedAt": "2025-03-01T06:00:00Z"}, now=NOW)
        assert a.published_at == "2025-03-01T06:00:00+00:00"


class TestFetchOutcome:
    def test_ok(self):
        assert FetchOutcome(source="internal", articles=[_make_article()]).ok

    def test_failed(self):
        o = FetchOutcome(source="internal", error=FetchError("u"))
        assert not o.ok
        assert o.articles == []
