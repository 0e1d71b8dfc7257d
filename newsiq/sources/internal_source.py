import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, List, Optional

import aiohttp

from newsiq.config import FEED_FETCH_TIMEOUT, INTERNAL_NEWS_URL
from newsiq.errors import FetchError
from newsiq.models import SOURCE_TYPE_INTERNAL, Article
from newsiq.sources.base import NewsSource

log = logging.getLogger("newsiq.sources.internal")


class InternalSource(NewsSource):
    """The application's own news endpoint.

    Expects the JSON envelope ``{"success": true, "data": [article, ...]}``
    with articles already in the front-end shape.
    """

    name = "internal"
    source_type = SOURCE_TYPE_INTERNAL
    priority = 2

    def __init__(self, base_url: str = INTERNAL_NEWS_URL,
                 session: Optional[aiohttp.ClientSession] = None,
                 timeout: float = FEED_FETCH_TIMEOUT):
        self.base_url = base_url
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=self.timeout))
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def _get_json(self, category: str, limit: int) -> Any:
        sess = await self._ensure_session()
        params = {"category": category, "limit": str(limit)}
        try:
            async with sess.get(self.base_url, params=params) as resp:
                resp.raise_for_status()
                return await resp.json(content_type=None)
        except (aiohttp.ClientError, asyncio.TimeoutError, ValueError) as e:
            raise FetchError(self.base_url, e) from e

    async def fetch(self, category: str, limit: int) -> List[Article]:
        log.info("Fetching internal news category=%s limit=%d", category, limit)
        body = await self._get_json(category, limit)
        if not isinstance(body, dict) or body.get("success") is not True:
            raise FetchError(self.base_url, message="unsuccessful response envelope")

        data = body.get("data") or []
        if not isinstance(data, list):
            raise FetchError(self.base_url, message="'data' is not a list")

        now = datetime.now(timezone.utc)
        return [
            Article.from_dict(item, ordinal=i, source_type=SOURCE_TYPE_INTERNAL, now=now)
            for i, item in enumerate(data[:limit])
            if isinstance(item, dict)
        ]
