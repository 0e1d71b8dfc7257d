import argparse
import asyncio
import json
import logging
import sys

from newsiq import config
from newsiq.aggregate import DEFAULT_SELECTORS, Aggregator
from newsiq.errors import FetchError
from newsiq.response import STATUS_FAILED, aggregate_response, build_response, error_response
from newsiq.rss import FeedFetcher
from newsiq.sources.feed_source import FeedSource
from newsiq.sources.internal_source import InternalSource

logging.basicConfig(level=config.LOG_LEVEL, format="%(asctime)s %(levelname)s %(name)s %(message)s")
log = logging.getLogger("newsiq")


def _split(value):
    return [p.strip() for p in (value or "").split(",") if p.strip()]


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Fetch, normalize and merge news feeds.")
    p.add_argument("--mode", choices=("combined", "feed", "batch"), default="combined")
    p.add_argument("--category", default=None)
    p.add_argument("--categories", default="", help="comma separated, batch mode")
    p.add_argument("--limit", type=int, default=None)
    p.add_argument("--sources", default=",".join(DEFAULT_SELECTORS))
    p.add_argument("--search", default=None, help="search the feed instead of listing a category")
    p.add_argument("--timeout", type=float, default=None, help="overall deadline for fan-out calls")
    return p


async def run(args) -> dict:
    fetcher = FeedFetcher()
    try:
        if args.search is not None:
            limit = args.limit or config.DEFAULT_LIMIT
            articles = await fetcher.search(args.search, limit, timeout=args.timeout)
            return build_response(articles, category=args.category or "", sources=["external-feed"])

        if args.mode == "feed":
            category = args.category or config.TOP_STORIES_KEY
            try:
                articles = await fetcher.fetch(category, args.limit or config.DEFAULT_LIMIT)
            except FetchError as e:
                log.error("Feed fetch failed: %s", e)
                return error_response("Failed to fetch feed", detail=str(e))
            return build_response(articles, category=category, sources=["external-feed"])

        if args.mode == "batch":
            categories = _split(args.categories) or [config.TOP_STORIES_KEY]
            articles = await fetcher.fetch_many(categories, args.limit or 10, timeout=args.timeout)
            return build_response(articles, category=",".join(categories), sources=["external-feed"])

        category = args.category or "All News"
        aggregator = Aggregator({
            FeedSource.name: FeedSource(fetcher),
            InternalSource.name: InternalSource(config.INTERNAL_NEWS_URL),
        })
        try:
            result = await aggregator.aggregate(
                category, args.limit or config.COMBINED_DEFAULT_LIMIT,
                _split(args.sources), timeout=args.timeout,
            )
        finally:
            await aggregator.close()
        return aggregate_response(result, category)
    finally:
        await fetcher.close()


def main(argv=None) -> int:
    config.validate_config()
    args = build_parser().parse_args(argv)
    try:
        response = asyncio.run(run(args))
    except ValueError as e:
        response = error_response("Invalid request", detail=str(e))
    json.dump(response, sys.stdout, ensure_ascii=False, indent=2)
    sys.stdout.write("\n")
    return 1 if response["status"] == STATUS_FAILED else 0


if __name__ == "__main__":
    sys.exit(main())
