"""Response envelopes handed to the HTTP/UI layer.

The status is derived from source counts, never from exceptions:
"ok" when nothing failed, "partial" when some sources answered and some did
not, "failed" when every requested source failed. An empty article list is
still a success.
"""

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Mapping, Optional, Sequence

from newsiq.models import AggregateResult, Article

STATUS_OK = "ok"
STATUS_PARTIAL = "partial"
STATUS_FAILED = "failed"


def classify_status(result: AggregateResult) -> str:
    if not result.failed:
        return STATUS_OK
    if result.succeeded:
        return STATUS_PARTIAL
    return STATUS_FAILED


def _timestamp(now: Optional[datetime]) -> str:
    return (now or datetime.now(timezone.utc)).isoformat()


def build_response(articles: Iterable[Article], category: str = "",
                   sources: Sequence[str] = (), failed: Optional[Mapping[str, str]] = None,
                   status: str = STATUS_OK, now: Optional[datetime] = None) -> Dict[str, Any]:
    data = [a.to_dict() for a in articles]
    return {
        "success": status != STATUS_FAILED,
        "status": status,
        "category": category,
        "sources": list(sources),
        "failedSources": dict(failed or {}),
        "count": len(data),
        "data": data,
        "timestamp": _timestamp(now),
    }


def aggregate_response(result: AggregateResult, category: str,
                       now: Optional[datetime] = None) -> Dict[str, Any]:
    return build_response(
        result.articles,
        category=category,
        sources=result.requested,
        failed=result.failed,
        status=classify_status(result),
        now=now,
    )


def error_response(message: str, detail: str = "", now: Optional[datetime] = None) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "success": False,
        "status": STATUS_FAILED,
        "error": message,
        "count": 0,
        "data": [],
        "timestamp": _timestamp(now),
    }
    if detail:
        out["message"] = detail
    return out
