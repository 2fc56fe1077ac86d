"""Append-only log of security and analytics events.

Every gate component and several route handlers write here.  Writes never
raise: a failure to record an event is logged and swallowed so that the
request being processed is not affected.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Dict, List, Mapping, Optional

from sitegate.models.Security_event import SecurityEvent
from sitegate.repository.Security_event_repository import SecurityEventRepo
from sitegate.utils.logs import logger
from sitegate.utils.timeutils import utc_now

HIGH_SEVERITY_EVENTS = frozenset(
    {
        "suspicious_request",
        "blocked_country",
        "sql_injection",
        "xss_attempt",
        "malware_detected",
        "brute_force",
    }
)
MEDIUM_SEVERITY_EVENTS = frozenset(
    {
        "rate_limit_exceeded",
        "suspicious_user_agent",
        "potential_scraping",
        "invalid_token",
    }
)


def severity_for(event: str) -> str:
    if event in HIGH_SEVERITY_EVENTS:
        return "high"
    if event in MEDIUM_SEVERITY_EVENTS:
        return "medium"
    return "low"


class EventLog:
    def __init__(self, max_entries: int = 1000, repo: Optional[SecurityEventRepo] = None):
        self.max_entries = max_entries
        self.repo = repo or SecurityEventRepo()

    def log(self, event: str, data: Optional[Mapping[str, Any]] = None) -> Optional[SecurityEvent]:
        severity = severity_for(event)
        payload = dict(data or {})
        try:
            entry = self.repo.append(event, payload, severity, max_entries=self.max_entries)
        except Exception:
            logger.exception("Falha ao registar evento %s", event)
            return None

        if severity == "high":
            logger.warning("Evento de segurança %s: %s", event, payload)
        elif severity == "medium":
            logger.info("Evento de segurança %s: %s", event, payload)
        else:
            logger.debug("Evento %s: %s", event, payload)
        return entry

    # ------------------------------------------------------------------
    # Consultas
    # ------------------------------------------------------------------
    def recent(self, limit: int = 20) -> List[Dict[str, Any]]:
        """Most recent events, newest first."""
        return [entry.to_dict() for entry in self.repo.recent(limit)]

    def export(self) -> List[Dict[str, Any]]:
        return [entry.to_dict() for entry in self.repo.all_in_order()]

    def total(self) -> int:
        return self.repo.count()

    def count_event(self, event: str) -> int:
        return self.repo.count_by_event(event)

    def count_severity(self, severity: str) -> int:
        return self.repo.count_by_severity(severity)

    def count_last(self, period: timedelta) -> int:
        return self.repo.count_since(utc_now() - period)

    def analytics(self) -> Dict[str, Any]:
        return {
            "totalVisits": self.count_event("page_view"),
            "totalContacts": self.count_event("contact_form_submit"),
            "adminLogins": self.count_event("auth_success"),
            "recentActivity": self.recent(50),
        }


__all__ = ["EventLog", "HIGH_SEVERITY_EVENTS", "MEDIUM_SEVERITY_EVENTS", "severity_for"]
