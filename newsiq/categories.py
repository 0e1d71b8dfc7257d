"""Mapping between application categories and feed keys."""

from typing import Dict, Optional

DEFAULT_FEED_KEY = "top-stories"
DEFAULT_CATEGORY = "General"

# Application category -> feed key
FEED_KEYS: Dict[str, str] = {
    "All News": "top-stories",
    "Technology": "technology",
    "Sports": "sports",
    "Business": "business",
    "Entertainment": "entertainment",
    "Health": "health",
    "Science": "science",
    "Politics": "politics",
    "World": "world",
}

# Feed key -> application category
CANONICAL: Dict[str, str] = {
    "top-stories": "General",
    "business": "Business",
    "technology": "Technology",
    "sports": "Sports",
    "entertainment": "Entertainment",
    "world": "World",
    "politics": "Politics",
    "science": "Science",
    "health": "Health",
    "education": "Education",
    "mumbai": "Mumbai",
    "delhi": "Delhi",
    "bangalore": "Bangalore",
    "chennai": "Chennai",
    "kolkata": "Kolkata",
}

CANONICAL_CATEGORIES = frozenset(CANONICAL.values()) | {DEFAULT_CATEGORY}


def to_internal_feed_key(category: Optional[str]) -> str:
    """Application category -> feed key, top stories when unknown."""
    return FEED_KEYS.get(category or "", DEFAULT_FEED_KEY)


def to_canonical_category(feed_key: Optional[str]) -> str:
    return CANONICAL.get(feed_key or "", DEFAULT_CATEGORY)


def is_feed_key(value: Optional[str]) -> bool:
    return (value or "") in CANONICAL
