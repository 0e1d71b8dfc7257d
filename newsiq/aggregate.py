"""Merge several news sources into one ranked, deduplicated feed."""

import asyncio
import logging
import math
from dataclasses import replace
from typing import Iterable, List, Mapping, Optional

from newsiq.config import FAILURE_ALERT_THRESHOLD
from newsiq.models import AggregateResult, Article, FetchOutcome
from newsiq.monitoring import SourceHealth
from newsiq.sources.base import NewsSource
from newsiq.utils import check_limit, dedupe_by_title, parse_iso

log = logging.getLogger("newsiq.aggregate")

DEFAULT_SELECTORS = ("external-feed", "internal")

# Query values used by the dashboard front end.
SELECTOR_ALIASES = {
    "toi": "external-feed",
    "feed": "external-feed",
    "custom": "internal",
}


def normalize_selectors(selectors: Optional[Iterable[str]]) -> List[str]:
    out: List[str] = []
    for raw in selectors or ():
        s = (raw or "").strip().lower()
        if not s:
            continue
        s = SELECTOR_ALIASES.get(s, s)
        if s not in out:
            out.append(s)
    return out


def merge_key(article: Article):
    return (article.priority or 0, -parse_iso(article.published_at).timestamp())


def unique_ids(articles: Iterable[Article]) -> List[Article]:
    """Suffix repeated ids (`x`, `x-1`, `x-2`, ...) so every id in a response is distinct."""
    seen = set()
    out: List[Article] = []
    for a in articles:
        new_id, n = a.id, 0
        while new_id in seen:
            n += 1
            new_id = f"{a.id}-{n}"
        seen.add(new_id)
        out.append(a if new_id == a.id else replace(a, id=new_id))
    return out


class Aggregator:
    """Fans out to the selected sources, then sorts by (priority, recency).

    A failing source contributes nothing and is recorded in `failed`; it never
    aborts the call.
    """

    def __init__(self, sources: Mapping[str, NewsSource], monitor: Optional[SourceHealth] = None):
        self.sources = dict(sources)
        self.monitor = monitor or SourceHealth(alert_threshold=FAILURE_ALERT_THRESHOLD)

    def _select(self, selectors: Optional[Iterable[str]]) -> List[str]:
        wanted = normalize_selectors(selectors)
        for s in wanted:
            if s not in self.sources:
                log.warning("Unknown source selector %r ignored.", s)
        # Registration order, not request order.
        return [name for name in self.sources if name in wanted]

    async def _fetch_outcome(self, name: str, category: str, budget: int) -> FetchOutcome:
        source = self.sources[name]
        try:
            articles = await source.fetch(category, budget)
        except Exception as e:
            log.warning("Source %s failed for category=%s: %s", name, category, e)
            return FetchOutcome(source=name, error=e)
        return FetchOutcome(
            source=name,
            articles=[replace(a, priority=source.priority) for a in articles],
        )

    async def aggregate(self, category: str, limit: int,
                        selectors: Optional[Iterable[str]] = DEFAULT_SELECTORS,
                        timeout: Optional[float] = None) -> AggregateResult:
        limit = check_limit(limit)
        selected = self._select(selectors)
        if not selected:
            return AggregateResult(articles=[], requested=[], succeeded=[], failed={})

        budget = math.ceil(limit / len(selected))
        gathered = asyncio.gather(*(self._fetch_outcome(n, category, budget) for n in selected))
        try:
            if timeout is None:
                outcomes = list(await gathered)
            else:
                outcomes = list(await asyncio.wait_for(gathered, timeout))
        except asyncio.TimeoutError:
            log.warning("Aggregation for %s timed out after %.1fs", category, timeout)
            outcomes = [
                FetchOutcome(source=n, error=asyncio.TimeoutError(f"timed out after {timeout}s"))
                for n in selected
            ]

        merged: List[Article] = []
        succeeded: List[str] = []
        failed = {}
        for o in outcomes:
            if o.ok:
                self.monitor.record_success(o.source)
                succeeded.append(o.source)
                merged.extend(o.articles)
            else:
                message = str(o.error) or type(o.error).__name__
                self.monitor.record_failure(o.source, message)
                failed[o.source] = message

        ranked = unique_ids(dedupe_by_title(sorted(merged, key=merge_key))[:limit])
        log.info(
            "Aggregated %s: %d merged, %d returned, failed=%s",
            category, len(merged), len(ranked), sorted(failed) or "none",
        )
        return AggregateResult(articles=ranked, requested=selected, succeeded=succeeded, failed=failed)

    async def close(self) -> None:
        for source in self.sources.values():
            await source.close()
