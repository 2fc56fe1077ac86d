"""Pacote do gate de pedidos: firewall, rate limiter e monitor de acessos."""
from .access_monitor import AccessMonitor
from .firewall import FIREWALL_BLOCKED, Firewall, FirewallDecision
from .gate import RequestGate
from .rate_limit import RATE_LIMIT_EXCEEDED, admin_limit, contact_limit
from .state import GateState

__all__ = [
    "AccessMonitor",
    "FIREWALL_BLOCKED",
    "Firewall",
    "FirewallDecision",
    "GateState",
    "RATE_LIMIT_EXCEEDED",
    "RequestGate",
    "admin_limit",
    "contact_limit",
]
