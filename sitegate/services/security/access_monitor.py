"""Anti-clone access monitor: observes every request, never blocks.

Logs requests addressed to unexpected hosts, off-site referers and
scraping-like traffic, and keeps the per-IP request history used for the
access statistics shown in the admin panel.
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, Optional
from urllib.parse import urlparse

from sitegate.app.settings import GatePolicy
from sitegate.services.event_log import EventLog
from sitegate.services.security.request_info import RequestInfo
from sitegate.services.security.state import RequestHistory, SuspicionCounter
from sitegate.utils.logs import logger
from sitegate.utils.security.encryption import DataEncryption

PROTECTION_HEADERS = {
    "X-Frame-Options": "DENY",
    "X-Content-Type-Options": "nosniff",
    "Referrer-Policy": "strict-origin-when-cross-origin",
}


def strip_port(host: str) -> str:
    host = host.strip().lower()
    if host.startswith("["):
        return host[1:].split("]", 1)[0]
    if host.count(":") == 1:
        return host.split(":", 1)[0]
    return host


class AccessMonitor:
    def __init__(
        self,
        policy: GatePolicy,
        event_log: EventLog,
        *,
        history: RequestHistory,
        suspicion: Optional[SuspicionCounter] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.policy = policy
        self.event_log = event_log
        self.history = history
        self.suspicion = suspicion
        self.clock = clock
        self.whitelist = [domain.strip().lower() for domain in policy.domain_whitelist if domain.strip()]
        self.scraper_agents = [agent.lower() for agent in policy.scraper_agents]
        self.fingerprint = DataEncryption.generate_hash("".join(self.whitelist))

    def is_domain_whitelisted(self, host: Optional[str]) -> bool:
        if not host:
            return False
        domain = strip_port(host)
        return any(domain == allowed or domain.endswith("." + allowed) for allowed in self.whitelist)

    def _referer_host(self, referer: str) -> Optional[str]:
        try:
            return urlparse(referer).hostname
        except ValueError:
            return None

    def _scraper_agent(self, user_agent: str) -> bool:
        lowered = (user_agent or "").lower()
        return any(agent in lowered for agent in self.scraper_agents)

    def monitor_access(self, info: RequestInfo) -> Dict[str, Any]:
        now = self.clock()

        host_trusted = self.is_domain_whitelisted(info.host)
        if not host_trusted:
            self.event_log.log(
                "unauthorized_domain_access",
                {
                    "host": info.host,
                    "ip": info.ip,
                    "userAgent": info.user_agent,
                    "referer": info.referer,
                    "url": info.url,
                },
            )

        referer_trusted = True
        if info.referer:
            referer_trusted = self.is_domain_whitelisted(self._referer_host(info.referer))
            if not referer_trusted:
                self.event_log.log(
                    "suspicious_referer",
                    {"host": info.host, "referer": info.referer, "ip": info.ip, "userAgent": info.user_agent},
                )

        self.history.record(info.ip, info.url, now)
        recent = self.history.count_since(info.ip, now - self.policy.scraping_window_seconds)

        scraping_reason = None
        if recent > self.policy.scraping_threshold:
            scraping_reason = "request_rate"
        elif self._scraper_agent(info.user_agent):
            scraping_reason = "user_agent"

        if scraping_reason:
            self.event_log.log(
                "potential_scraping",
                {
                    "ip": info.ip,
                    "userAgent": info.user_agent,
                    "host": info.host,
                    "recentRequests": recent,
                    "reason": scraping_reason,
                },
            )

        return {
            "allowed": True,
            "hostTrusted": host_trusted,
            "refererTrusted": referer_trusted,
            "recentRequests": recent,
            "scraping": scraping_reason,
        }

    def observe(self, info: RequestInfo) -> Dict[str, Any]:
        """``monitor_access`` that never raises."""
        try:
            return self.monitor_access(info)
        except Exception:
            logger.exception("Erro no monitor de acessos para %s", info.ip)
            return {"allowed": True}

    # ------------------------------------------------------------------
    # Manutenção periódica
    # ------------------------------------------------------------------
    def run_maintenance(self) -> Dict[str, Any]:
        now = self.clock()
        cutoff = now - self.policy.history_retention_seconds
        removed = self.history.prune(cutoff)
        forgotten = self.suspicion.prune(cutoff) if self.suspicion is not None else 0
        summary = self.history.summary()
        active_since = now - self.policy.active_window_seconds
        report = {
            "totalIPs": len(summary),
            "activeIPs": sum(1 for item in summary.values() if item["last"] > active_since),
            "prunedEntries": removed,
            "prunedSuspicions": forgotten,
        }
        self.event_log.log("access_report", report)
        logger.debug("Relatório de acessos: %s", report)
        return report

    def stats(self) -> Dict[str, Any]:
        now = self.clock()
        summary = self.history.summary()
        top = sorted(summary.items(), key=lambda item: item[1]["count"], reverse=True)[:10]
        return {
            "totalIPs": len(summary),
            "activeLastHour": sum(1 for item in summary.values() if item["last"] > now - 3600),
            "activeLastDay": sum(1 for item in summary.values() if item["last"] > now - 86400),
            "topIPs": [{"ip": ip, "requests": int(item["count"])} for ip, item in top],
            "scrapingThreshold": self.policy.scraping_threshold,
            "fingerprint": self.fingerprint,
        }


__all__ = ["AccessMonitor", "PROTECTION_HEADERS", "strip_port"]
