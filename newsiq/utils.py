import re
from datetime import datetime, timezone
from typing import Any, Iterable, List, Optional

from bs4 import BeautifulSoup

from newsiq.config import DESCRIPTION_MAX

BOILERPLATE_RE = re.compile(r"Read more at Times of India|TOI\.com|\(PTI\)|\(ANI\)", re.I)
TAG_RE = re.compile(r"<[^>]*>")
WHITESPACE_RE = re.compile(r"\s+")

# Block removal keeps the markup otherwise intact; entities are left encoded.
SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.I)
STYLE_RE = re.compile(r"<style\b[^<]*(?:(?!</style>)<[^<]*)*</style>", re.I)
IFRAME_RE = re.compile(r"<iframe\b[^<]*(?:(?!</iframe>)<[^<]*)*</iframe>", re.I)
AD_BLOCK_RE = re.compile(r'<div class="(?:ad|ads|advertisement)[^>]*>.*?</div>', re.I | re.S)
INLINE_ATTR_RE = re.compile(r'\s*\b(?:class|style)="[^"]*"', re.I)

IMG_SRC_RE = re.compile(r'<img[^>]+src="([^">]+)"', re.I)
CDN_IMAGE_RE = re.compile(r'https://static\.toiimg\.com/[^"\s]+', re.I)

_EPOCH = datetime.min.replace(tzinfo=timezone.utc)


def truncate_text(text: str, limit: int) -> str:
    text = text or ""
    if len(text) > limit:
        return text[: max(0, limit - 3)] + "..."
    return text


def strip_html_to_text(raw_html: str) -> str:
    if not raw_html:
        return ""
    text = BeautifulSoup(raw_html, "html.parser").get_text()
    # get_text() decodes entities, so escaped markup comes back as tags.
    text = TAG_RE.sub("", text)
    return WHITESPACE_RE.sub(" ", text)


def clean_description(description: str) -> str:
    if not description:
        return ""
    clean = strip_html_to_text(description)
    clean = WHITESPACE_RE.sub(" ", BOILERPLATE_RE.sub("", clean))
    return truncate_text(clean.strip(), DESCRIPTION_MAX)


def clean_content(content: str) -> str:
    if not content:
        return ""
    clean = SCRIPT_RE.sub("", content)
    clean = STYLE_RE.sub("", clean)
    clean = IFRAME_RE.sub("", clean)
    clean = AD_BLOCK_RE.sub("", clean)
    clean = INLINE_ATTR_RE.sub("", clean)
    return clean.strip()


def extract_image(content: str) -> str:
    """First <img src> in the markup, else the first TOI CDN image URL."""
    if not content:
        return ""
    m = IMG_SRC_RE.search(content)
    if m:
        return m.group(1)
    m = CDN_IMAGE_RE.search(content)
    return m.group(0) if m else ""


def title_key(title: str) -> str:
    return (title or "").strip().lower()


def dedupe_by_title(articles: Iterable) -> List:
    seen = set()
    out = []
    for a in articles:
        key = title_key(a.title)
        if key in seen:
            continue
        seen.add(key)
        out.append(a)
    return out


def parse_iso(value: Optional[str], default: Optional[datetime] = None) -> datetime:
    """Parse an ISO-8601 timestamp; unparseable values sort as oldest unless a default is given."""
    fallback = default or _EPOCH
    if not value:
        return fallback
    try:
        dt = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return fallback
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt


def matches_query(article, query: str) -> bool:
    q = (query or "").lower()
    return q in (article.title or "").lower() or q in (article.description or "").lower()


def check_limit(limit: Any) -> int:
    if isinstance(limit, bool) or not isinstance(limit, int) or limit <= 0:
        raise ValueError(f"limit must be a positive integer, got {limit!r}")
    return limit
