"""IP / pattern firewall, the first stage of the request gate."""

from __future__ import annotations

import re
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List, Optional, Pattern

from sitegate.app.settings import GatePolicy
from sitegate.repository.Blocked_ip_repository import BlockedIPRepo
from sitegate.services.event_log import EventLog
from sitegate.services.security.geo import GeoResolver, NullGeoResolver
from sitegate.services.security.request_info import RequestInfo
from sitegate.services.security.state import BlockedIPSet, SuspicionCounter
from sitegate.utils.logs import logger

FIREWALL_BLOCKED = "FIREWALL_BLOCKED"


@dataclass(frozen=True)
class FirewallDecision:
    blocked: bool
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {"blocked": self.blocked}
        if self.reason:
            result["reason"] = self.reason
        return result


ALLOW = FirewallDecision(blocked=False)


def compile_patterns(patterns: List[str]) -> List[Pattern[str]]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern, re.IGNORECASE))
        except re.error:
            logger.error("Padrão suspeito inválido ignorado: %r", pattern)
    return compiled


class Firewall:
    def __init__(
        self,
        policy: GatePolicy,
        event_log: EventLog,
        *,
        blocked: BlockedIPSet,
        suspicion: SuspicionCounter,
        geo: Optional[GeoResolver] = None,
        repo: Optional[BlockedIPRepo] = None,
    ):
        self.policy = policy
        self.event_log = event_log
        self.blocked = blocked
        self.suspicion = suspicion
        self.geo = geo or NullGeoResolver()
        self.repo = repo or BlockedIPRepo()
        self.patterns = compile_patterns(policy.suspicious_patterns)
        self.scanner_agents = [agent.lower() for agent in policy.scanner_agents]

    # ------------------------------------------------------------------
    # Blocked set
    # ------------------------------------------------------------------
    def load_blocked(self) -> int:
        """Replace the in-memory set with the persisted list."""
        addresses = self.repo.all_addresses()
        self.blocked.replace(addresses)
        return len(addresses)

    def is_blocked(self, ip: str) -> bool:
        return ip in self.blocked

    def block_ip(self, ip: str, reason: str) -> None:
        self.blocked.add(ip)
        try:
            self.repo.block(ip, reason)
        except Exception:
            logger.exception("Falha ao persistir bloqueio de %s", ip)
        self.event_log.log("ip_blocked", {"ip": ip, "reason": reason})

    def unblock_ip(self, ip: str) -> bool:
        was_blocked = self.blocked.discard(ip)
        self.suspicion.reset(ip)
        try:
            persisted = self.repo.unblock(ip)
        except Exception:
            logger.exception("Falha ao remover bloqueio persistido de %s", ip)
            persisted = False
        if was_blocked or persisted:
            self.event_log.log("ip_unblocked", {"ip": ip})
            return True
        return False

    # ------------------------------------------------------------------
    # Análise
    # ------------------------------------------------------------------
    def is_suspicious_user_agent(self, user_agent: str) -> bool:
        lowered = (user_agent or "").lower()
        return any(agent in lowered for agent in self.scanner_agents)

    def matches_suspicious_pattern(self, text: str) -> bool:
        return any(pattern.search(text) for pattern in self.patterns)

    def track_suspicious_activity(self, ip: str) -> int:
        hits = self.suspicion.hit(ip)
        if hits >= self.policy.suspicious_hits_before_block and not self.is_blocked(ip):
            self.block_ip(ip, "multiple_suspicious_activities")
        return hits

    def analyze(self, info: RequestInfo) -> FirewallDecision:
        ip = info.ip

        if self.is_blocked(ip):
            self.event_log.log(
                "blocked_ip_attempt", {"ip": ip, "url": info.url, "method": info.method}
            )
            return FirewallDecision(blocked=True, reason="IP blocked")

        if self.policy.blocked_countries:
            country = self.geo.country_for(ip)
            if country and country.upper() in self.policy.blocked_countries:
                self.block_ip(ip, "blocked_country")
                self.event_log.log("blocked_country", {"ip": ip, "country": country})
                return FirewallDecision(blocked=True, reason="Country blocked")

        if self.is_suspicious_user_agent(info.user_agent):
            self.event_log.log(
                "suspicious_user_agent", {"ip": ip, "userAgent": info.user_agent}
            )
            self.track_suspicious_activity(ip)

        if self.matches_suspicious_pattern(info.text):
            self.event_log.log(
                "suspicious_request", {"ip": ip, "url": info.url, "method": info.method}
            )
            self.block_ip(ip, "suspicious_patterns")
            return FirewallDecision(blocked=True, reason="Suspicious patterns detected")

        return ALLOW

    def check(self, info: RequestInfo) -> FirewallDecision:
        """``analyze`` that fails open: internal errors let the request through."""
        try:
            return self.analyze(info)
        except Exception:
            logger.exception("Erro no firewall ao analisar pedido de %s; a deixar passar", info.ip)
            return ALLOW

    # ------------------------------------------------------------------
    # Estatísticas
    # ------------------------------------------------------------------
    def blocked_entries(self) -> List[Dict[str, Any]]:
        return [row.to_dict() for row in self.repo.list_all()]

    def stats(self) -> Dict[str, Any]:
        try:
            return {
                "totalEvents": self.event_log.total(),
                "last24h": self.event_log.count_last(timedelta(hours=24)),
                "blockedIPs": len(self.blocked),
                "highSeverityEvents": self.event_log.count_severity("high"),
                "recentEvents": self.event_log.recent(20),
            }
        except Exception:
            logger.exception("Erro ao calcular estatísticas do firewall")
            return {
                "totalEvents": 0,
                "last24h": 0,
                "blockedIPs": 0,
                "highSeverityEvents": 0,
                "recentEvents": [],
            }


__all__ = ["ALLOW", "FIREWALL_BLOCKED", "Firewall", "FirewallDecision", "compile_patterns"]
