import asyncio
import logging
from datetime import datetime, timezone
from email.utils import parsedate_to_datetime
from typing import Any, List, Optional, Sequence

import aiohttp
import feedparser

from newsiq.categories import to_canonical_category
from newsiq.config import (
    CITY_FEED_URLS,
    FEED_FETCH_TIMEOUT,
    FEED_SOURCE_ID,
    FEED_SOURCE_NAME,
    FEED_URLS,
    SEARCH_CATEGORIES,
    SEARCH_PER_CATEGORY,
    TOP_STORIES_KEY,
    USER_AGENT,
)
from newsiq.errors import FetchError
from newsiq.models import SOURCE_TYPE_FEED, Article, FetchOutcome, SourceRef
from newsiq.sentiment import classify
from newsiq.utils import (
    check_limit,
    clean_content,
    clean_description,
    dedupe_by_title,
    extract_image,
    matches_query,
)

log = logging.getLogger("newsiq.rss")

FEED_HEADERS = {
    "User-Agent": USER_AGENT,
    "Accept": "application/rss+xml, application/xml;q=0.9, */*;q=0.8",
}


def resolve_feed_url(key: Optional[str]) -> str:
    key = key or ""
    if key in CITY_FEED_URLS:
        return CITY_FEED_URLS[key]
    return FEED_URLS.get(key, FEED_URLS[TOP_STORIES_KEY])


# ── entry accessors ───────────────────────────────────────────

def _encoded_content(entry: Any) -> str:
    content = getattr(entry, "content", None)
    if content and isinstance(content, list) and len(content) > 0:
        v = getattr(content[0], "value", None)
        if v is None and isinstance(content[0], dict):
            v = content[0].get("value")
        if v:
            return str(v)
    return ""


def _description(entry: Any) -> str:
    return str(getattr(entry, "description", "") or getattr(entry, "summary", "") or "")


def _entry_html(entry: Any) -> str:
    return _encoded_content(entry) or _description(entry)


def _author(entry: Any) -> str:
    for attr in ("author", "dc_creator", "creator"):
        v = getattr(entry, attr, None)
        if v and str(v).strip():
            return str(v).strip()
    return FEED_SOURCE_NAME


def _published_iso(entry: Any, now: datetime) -> str:
    for attr in ("published_parsed", "updated_parsed"):
        st = getattr(entry, attr, None)
        if st:
            try:
                return datetime(*st[:6], tzinfo=timezone.utc).isoformat()
            except (TypeError, ValueError):
                pass
    for attr in ("published", "pubDate", "updated"):
        raw = getattr(entry, attr, None)
        if not raw:
            continue
        try:
            dt = parsedate_to_datetime(str(raw))
        except (TypeError, ValueError, IndexError):
            continue
        if dt.tzinfo is None:
            dt = dt.replace(tzinfo=timezone.utc)
        return dt.isoformat()
    return now.isoformat()


def entry_to_article(entry: Any, category: str, ordinal: int,
                     now: Optional[datetime] = None) -> Article:
    """Normalize one feed entry. Never raises; missing fields get defaults."""
    now = now or datetime.now(timezone.utc)

    title = str(getattr(entry, "title", "") or "").strip() or "No Title"
    raw_description = _description(entry)

    return Article(
        id=f"toi-{category or TOP_STORIES_KEY}-{int(now.timestamp() * 1000)}-{ordinal}",
        title=title,
        description=clean_description(raw_description),
        published_at=_published_iso(entry, now),
        source=SourceRef(name=FEED_SOURCE_NAME, id=FEED_SOURCE_ID),
        category=to_canonical_category(category),
        sentiment=classify(f"{title} {raw_description}"),
        url=str(getattr(entry, "link", "") or ""),
        image=extract_image(_entry_html(entry)),
        author=_author(entry),
        content=clean_content(_encoded_content(entry)),
        source_type=SOURCE_TYPE_FEED,
    )


# ── fetching ──────────────────────────────────────────────────

class FeedFetcher:
    """Downloads and normalizes syndication feeds. One GET per fetch, no retries."""

    def __init__(self, session: Optional[aiohttp.ClientSession] = None,
                 timeout: float = FEED_FETCH_TIMEOUT):
        self.timeout = timeout
        self._session = session
        self._owns_session = session is None

    async def _ensure_session(self) -> aiohttp.ClientSession:
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession(
                timeout=aiohttp.ClientTimeout(total=self.timeout),
                headers=FEED_HEADERS,
            )
            self._owns_session = True
        return self._session

    async def close(self) -> None:
        if self._owns_session and self._session and not self._session.closed:
            await self._session.close()

    async def __aenter__(self) -> "FeedFetcher":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    async def _download(self, url: str) -> bytes:
        sess = await self._ensure_session()
        try:
            async with sess.get(url) as resp:
                resp.raise_for_status()
                return await resp.read()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            raise FetchError(url, e) from e

    @staticmethod
    def _parse(url: str, payload: bytes) -> Any:
        feed = feedparser.parse(payload)
        entries = getattr(feed, "entries", None) or []
        if getattr(feed, "bozo", False) and not entries:
            cause = getattr(feed, "bozo_exception", None)
            raise FetchError(url, cause, message="" if cause else "unparseable feed")
        return feed

    async def fetch(self, category: str, limit: int) -> List[Article]:
        """Fetch one feed and normalize its first `limit` entries.

        `category` is a feed key ("technology", "mumbai"); unknown values,
        application labels such as "Technology" included, resolve to the
        top-stories feed. Map labels with `to_internal_feed_key` first, as
        `FeedSource` does. Raises FetchError on transport or parse failure.
        """
        limit = check_limit(limit)
        url = resolve_feed_url(category)
        log.info("Fetching feed %s from %s", category, url)

        payload = await self._download(url)
        feed = self._parse(url, payload)

        now = datetime.now(timezone.utc)
        entries = (getattr(feed, "entries", None) or [])[:limit]
        return [entry_to_article(e, category, i, now) for i, e in enumerate(entries)]

    async def _fetch_outcome(self, category: str, limit: int) -> FetchOutcome:
        try:
            return FetchOutcome(source=category, articles=await self.fetch(category, limit))
        except Exception as e:
            log.warning("Feed %s failed, skipped: %s", category, e)
            return FetchOutcome(source=category, error=e)

    async def _fan_out(self, categories: Sequence[str], per_category: int,
                       timeout: Optional[float]) -> List[FetchOutcome]:
        gathered = asyncio.gather(*(self._fetch_outcome(c, per_category) for c in categories))
        if timeout is None:
            return list(await gathered)
        try:
            return list(await asyncio.wait_for(gathered, timeout))
        except asyncio.TimeoutError:
            log.warning("Fan-out over %d feeds timed out after %.1fs", len(categories), timeout)
            return []

    async def search(self, query: str, limit: int,
                     timeout: Optional[float] = None) -> List[Article]:
        """Substring search over a fixed set of category feeds.

        Unreachable feeds are dropped; if every feed fails the result is empty.
        """
        limit = check_limit(limit)
        outcomes = await self._fan_out(SEARCH_CATEGORIES, SEARCH_PER_CATEGORY, timeout)

        pool = [a for o in outcomes if o.ok for a in o.articles]
        found = [a for a in pool if matches_query(a, query)]
        results = dedupe_by_title(found)[:limit]
        log.info("Search %r: %d pooled, %d matched, %d returned", query, len(pool), len(found), len(results))
        return results

    async def fetch_many(self, categories: Sequence[str], limit: int,
                         timeout: Optional[float] = None) -> List[Article]:
        limit = check_limit(limit)
        categories = list(dict.fromkeys(categories or [TOP_STORIES_KEY]))
        outcomes = await self._fan_out(categories, limit, timeout)

        pool = [a for o in outcomes if o.ok for a in o.articles]
        return dedupe_by_title(pool)[: limit * len(categories)]
