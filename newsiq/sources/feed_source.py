import logging
from typing import List

from newsiq.categories import is_feed_key, to_internal_feed_key
from newsiq.models import SOURCE_TYPE_FEED, Article
from newsiq.rss import FeedFetcher
from newsiq.sources.base import NewsSource

log = logging.getLogger("newsiq.sources.feed")


class FeedSource(NewsSource):
    name = "external-feed"
    source_type = SOURCE_TYPE_FEED
    priority = 1

    def __init__(self, fetcher: FeedFetcher):
        self.fetcher = fetcher

    async def fetch(self, category: str, limit: int) -> List[Article]:
        # Feed keys ("mumbai", "education") pass through; app categories are mapped.
        key = category if is_feed_key(category) else to_internal_feed_key(category)
        log.debug("Feed source: category=%s -> key=%s", category, key)
        return await self.fetcher.fetch(key, limit)

    async def close(self) -> None:
        await self.fetcher.close()
