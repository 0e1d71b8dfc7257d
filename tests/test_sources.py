import aiohttp
import pytest

from newsiq.errors import FetchError
from newsiq.models import SOURCE_TYPE_INTERNAL
from newsiq.sources.feed_source import FeedSource
from newsiq.sources.internal_source import InternalSource

URL = "http://localhost:3000/api/news"


class _RecordingFetcher:
    def __init__(self):
        self.calls = []
        self.closed = False

    async def fetch(self, category, limit):
        self.calls.append((category, limit))
        return []

    async def close(self):
        self.closed = True


class TestFeedSource:
    @pytest.mark.asyncio
    async def test_maps_app_category(self):
        fetcher = _RecordingFetcher()
        await FeedSource(fetcher).fetch("Technology", 4)
        assert fetcher.calls == [("technology", 4)]

    @pytest.mark.asyncio
    async def test_feed_key_passes_through(self):
        fetcher = _RecordingFetcher()
        await FeedSource(fetcher).fetch("mumbai", 4)
        assert fetcher.calls == [("mumbai", 4)]

    @pytest.mark.asyncio
    async def test_unknown_goes_to_top_stories(self):
        fetcher = _RecordingFetcher()
        await FeedSource(fetcher).fetch("Environment", 4)
        assert fetcher.calls == [("top-stories", 4)]

    @pytest.mark.asyncio
    async def test_close(self):
        fetcher = _RecordingFetcher()
        await FeedSource(fetcher).close()
        assert fetcher.closed

    def test_priority(self):
        assert FeedSource.priority < InternalSource.priority


def _internal(body=None, error=None):
    source = InternalSource(URL)

    async def fake_get_json(category, limit):
        if error is not None:
            raise error
        return body

    source._get_json = fake_get_json
    return source


class TestInternalSource:
    @pytest.mark.asyncio
    async def test_parses_envelope(self):
        body = {"success": True, "data": [
            {"id": "1", "title": "AI Breakthrough in Medical Diagnostics", "category": "Technology",
             "sentiment": "positive", "publishedAt": "2025-03-01T06:00:00+00:00",
             "source": {"name": "Tech Innovations"}},
            {"id": "2", "title": "Global Climate Summit", "category": "Environment"},
        ]}
        articles = await _internal(body).fetch("All News", 5)
        assert [a.id for a in articles] == ["1", "2"]
        assert all(a.source_type == SOURCE_TYPE_INTERNAL for a in articles)
        assert articles[1].category == "General"

    @pytest.mark.asyncio
    async def test_truncates_to_limit(self):
        body = {"success": True, "data": [{"title": f"t{i}"} for i in range(5)]}
        assert len(await _internal(body).fetch("All News", 2)) == 2

    @pytest.mark.asyncio
    async def test_skips_non_dict_items(self):
        body = {"success": True, "data": ["junk", {"title": "ok"}]}
        assert [a.title for a in await _internal(body).fetch("All News", 5)] == ["ok"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("body", [
        {"success": False, "error": "Failed to fetch news"},
        {"data": []},
        ["not", "an", "envelope"],
        {"success": True, "data": "nope"},
    ])
    async def test_bad_envelope_raises(self, body):
        with pytest.raises(FetchError) as exc_info:
            await _internal(body).fetch("All News", 5)
        assert exc_info.value.location == URL

    @pytest.mark.asyncio
    async def test_empty_data_is_fine(self):
        assert await _internal({"success": True, "data": []}).fetch("All News", 5) == []

    @pytest.mark.asyncio
    async def test_transport_error_wrapped(self):
        class _BrokenSession:
            closed = False

            def get(self, url, params=None):
                raise aiohttp.ClientConnectionError("refused")

        source = InternalSource(URL, session=_BrokenSession())
        with pytest.raises(FetchError) as exc_info:
            await source.fetch("All News", 5)
        assert isinstance(exc_info.value.cause, aiohttp.ClientConnectionError)
