"""Centralized configuration for the newsiq feed pipeline."""

import os
import logging
from typing import Dict, Tuple

log = logging.getLogger("newsiq.config")

# =========================
# Feed registry
# =========================
TOI_RSS_BASE: str = "https://timesofindia.indiatimes.com/rssfeeds"
TOP_STORIES_KEY: str = "top-stories"

FEED_URLS: Dict[str, str] = {
    "top-stories": f"{TOI_RSS_BASE}/-2128936835.cms",
    "business": f"{TOI_RSS_BASE}/1221656.cms",
    "technology": f"{TOI_RSS_BASE}/4719148.cms",
    "sports": f"{TOI_RSS_BASE}/5880659.cms",
    "entertainment": f"{TOI_RSS_BASE}/-2128672765.cms",
    "world": f"{TOI_RSS_BASE}/3907413.cms",
    "politics": f"{TOI_RSS_BASE}/1052732854.cms",
    "science": f"{TOI_RSS_BASE}/-2128672761.cms",
    "health": f"{TOI_RSS_BASE}/3908999.cms",
    "education": f"{TOI_RSS_BASE}/913168846.cms",
}

# Checked before FEED_URLS. All cities currently share the same feed.
CITY_FEED_URLS: Dict[str, str] = {
    "mumbai": f"{TOI_RSS_BASE}/2177298.cms",
    "delhi": f"{TOI_RSS_BASE}/2177298.cms",
    "bangalore": f"{TOI_RSS_BASE}/2177298.cms",
    "chennai": f"{TOI_RSS_BASE}/2177298.cms",
    "kolkata": f"{TOI_RSS_BASE}/2177298.cms",
}

FEED_SOURCE_NAME: str = "Times of India"
FEED_SOURCE_ID: str = "the-times-of-india"

# =========================
# Fetching
# =========================
FEED_FETCH_TIMEOUT: float = float(os.getenv("FEED_FETCH_TIMEOUT", "15"))
USER_AGENT: str = os.getenv("NEWSIQ_USER_AGENT", "newsiq-feed/1.0")
INTERNAL_NEWS_URL: str = os.getenv("INTERNAL_NEWS_URL", "http://localhost:3000/api/news")

# =========================
# Limits
# =========================
DEFAULT_LIMIT: int = int(os.getenv("DEFAULT_LIMIT", "20"))
COMBINED_DEFAULT_LIMIT: int = int(os.getenv("COMBINED_DEFAULT_LIMIT", "30"))
DESCRIPTION_MAX: int = 200

# =========================
# Search
# =========================
SEARCH_CATEGORIES: Tuple[str, ...] = ("top-stories", "business", "technology", "sports", "entertainment")
SEARCH_PER_CATEGORY: int = int(os.getenv("SEARCH_PER_CATEGORY", "10"))

# =========================
# Monitoring
# =========================
FAILURE_ALERT_THRESHOLD: int = int(os.getenv("FAILURE_ALERT_THRESHOLD", "5"))
LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")


def validate_config() -> None:
    """Reject non-positive limits and timeouts. Call at startup."""
    bad = []
    if FEED_FETCH_TIMEOUT <= 0:
        bad.append("FEED_FETCH_TIMEOUT")
    for name, value in (
        ("DEFAULT_LIMIT", DEFAULT_LIMIT),
        ("COMBINED_DEFAULT_LIMIT", COMBINED_DEFAULT_LIMIT),
        ("SEARCH_PER_CATEGORY", SEARCH_PER_CATEGORY),
        ("FAILURE_ALERT_THRESHOLD", FAILURE_ALERT_THRESHOLD),
    ):
        if value <= 0:
            bad.append(name)
    if bad:
        raise EnvironmentError(
            f"Invalid configuration (must be > 0): {', '.join(bad)}"
        )
    if not INTERNAL_NEWS_URL:
        log.warning("INTERNAL_NEWS_URL is empty: the internal source will fail.")
