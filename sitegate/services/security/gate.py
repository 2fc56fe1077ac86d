"""Request gate: firewall -> fixed-window rate limiter -> access monitor.

``RequestGate.init_app`` registers the three stages as ``before_request``
hooks in that order (Flask-Limiter registers its own hook when it is
initialised between the other two).  The firewall and the monitor fail
open: an exception inside them never blocks the request.
"""

from __future__ import annotations

import time
from typing import Callable, Optional

from flask import Flask, jsonify, request
from flask_limiter import RateLimitExceeded

from sitegate.app.extensions import limiter
from sitegate.app.settings import GatePolicy
from sitegate.services.event_log import EventLog
from sitegate.services.security.access_monitor import PROTECTION_HEADERS, AccessMonitor
from sitegate.services.security.firewall import FIREWALL_BLOCKED, Firewall
from sitegate.services.security.geo import GeoResolver, build_geo_resolver
from sitegate.services.security.rate_limit import handle_rate_limit_exceeded
from sitegate.services.security.request_info import RequestInfo
from sitegate.services.security.scheduler import MaintenanceScheduler
from sitegate.services.security.state import GateState
from sitegate.utils.logs import logger

GATE_INFO_KEY = "sitegate.gate_request"
ACCESS_DIAGNOSTICS_KEY = "sitegate.access_diagnostics"


class RequestGate:
    def __init__(
        self,
        policy: GatePolicy,
        event_log: EventLog,
        *,
        state: Optional[GateState] = None,
        geo: Optional[GeoResolver] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.policy = policy
        self.event_log = event_log
        self.state = state or GateState(history_max_entries=policy.history_max_entries, clock=clock)
        self.firewall = Firewall(
            policy,
            event_log,
            blocked=self.state.blocked,
            suspicion=self.state.suspicion,
            geo=geo if geo is not None else build_geo_resolver(policy.geoip_database),
        )
        self.monitor = AccessMonitor(
            policy,
            event_log,
            history=self.state.history,
            suspicion=self.state.suspicion,
            clock=clock,
        )
        self.scheduler: Optional[MaintenanceScheduler] = None

    def init_app(self, app: Flask) -> None:
        app.extensions["request_gate"] = self

        with app.app_context():
            loaded = self.firewall.load_blocked()
        logger.info("Firewall iniciado com %d IPs bloqueados", loaded)

        app.before_request(self._firewall_stage)
        limiter.init_app(app)
        app.register_error_handler(RateLimitExceeded, handle_rate_limit_exceeded)
        app.before_request(self._monitor_stage)
        app.after_request(self._protection_headers)

        if self.policy.monitor_scheduler_enabled:
            self.scheduler = MaintenanceScheduler(app, self.monitor, self.policy.monitor_interval_seconds)
            self.scheduler.start()

    # ------------------------------------------------------------------
    # Hooks
    # ------------------------------------------------------------------
    def _request_info(self) -> Optional[RequestInfo]:
        info = request.environ.get(GATE_INFO_KEY)
        if info is None:
            try:
                info = RequestInfo.from_flask(request)
            except Exception:
                logger.exception("Não foi possível inspeccionar o pedido de %s", request.remote_addr)
                return None
            request.environ[GATE_INFO_KEY] = info
        return info

    def _firewall_stage(self):
        info = self._request_info()
        if info is None:
            return None
        decision = self.firewall.check(info)
        if decision.blocked:
            return (
                jsonify({"success": False, "message": "Access denied", "code": FIREWALL_BLOCKED}),
                403,
            )
        return None

    def _monitor_stage(self):
        info = self._request_info()
        if info is not None:
            request.environ[ACCESS_DIAGNOSTICS_KEY] = self.monitor.observe(info)
        return None

    def _protection_headers(self, response):
        for header, value in PROTECTION_HEADERS.items():
            response.headers.setdefault(header, value)
        return response

    # ------------------------------------------------------------------
    def status(self) -> dict:
        return {
            "firewall": self.firewall.stats(),
            "access": self.monitor.stats(),
            "blocked": self.firewall.blocked_entries(),
        }


__all__ = ["RequestGate"]
