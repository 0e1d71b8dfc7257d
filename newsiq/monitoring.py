"""Failure tracking for upstream news sources."""

import logging
from typing import Dict

log = logging.getLogger("newsiq.monitoring")


class SourceHealth:
    """Tracks consecutive fetch failures per source and flags when to alert."""

    def __init__(self, alert_threshold: int = 5):
        self.alert_threshold = alert_threshold
        self._consecutive_failures: Dict[str, int] = {}
        self._alerted: Dict[str, bool] = {}
        self._last_error: Dict[str, str] = {}

    def record_success(self, source: str) -> None:
        prev = self._consecutive_failures.get(source, 0)
        if prev > 0:
            log.info("%s: recovered after %d consecutive failure(s).", source, prev)
        self._consecutive_failures[source] = 0
        self._alerted[source] = False
        self._last_error.pop(source, None)

    def record_failure(self, source: str, error: str = "") -> bool:
        """Record a failure. Returns True if the alert threshold was just crossed."""
        count = self._consecutive_failures.get(source, 0) + 1
        self._consecutive_failures[source] = count
        self._last_error[source] = error
        log.warning("%s: consecutive failure #%d (%s).", source, count, error or "no detail")

        if count >= self.alert_threshold and not self._alerted.get(source, False):
            self._alerted[source] = True
            log.error("ALERT: %s failed %d times in a row.", source, count)
            return True
        return False

    def get_failures(self, source: str) -> int:
        return self._consecutive_failures.get(source, 0)

    def last_error(self, source: str) -> str:
        return self._last_error.get(source, "")

    def get_status(self) -> Dict[str, int]:
        return dict(self._consecutive_failures)
