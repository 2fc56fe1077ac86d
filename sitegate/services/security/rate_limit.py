"""Fixed-window rate limiting tiers (general, admin, contact) on Flask-Limiter.

The general tier is an application-wide limit configured on the limiter in
``sitegate.app.extensions``; the admin and contact tiers are decorators
applied to their views.  All three read their ceilings from the gate policy
at request time.
"""

from __future__ import annotations

from flask import current_app, jsonify, request
from flask_limiter import RateLimitExceeded

from sitegate.app.extensions import limiter
from sitegate.app.settings import get_app_settings
from sitegate.utils.logs import logger

RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

TIER_MESSAGES = {
    "general": "Too many requests from this IP, please try again later.",
    "admin": "Too many admin requests, please try again later.",
    "contact": "Too many contact form submissions, please try again later.",
}


def _admin_limit() -> str:
    return get_app_settings().gate.rate_limit_admin


def _contact_limit() -> str:
    return get_app_settings().gate.rate_limit_contact


admin_limit = limiter.shared_limit(
    _admin_limit, scope="admin", error_message=TIER_MESSAGES["admin"]
)
contact_limit = limiter.limit(_contact_limit, error_message=TIER_MESSAGES["contact"])


def handle_rate_limit_exceeded(error: RateLimitExceeded):
    description = getattr(error, "description", None)
    message = description if description in TIER_MESSAGES.values() else TIER_MESSAGES["general"]

    gate = current_app.extensions.get("request_gate")
    if gate is not None:
        gate.event_log.log(
            "rate_limit_exceeded",
            {
                "ip": request.remote_addr,
                "url": request.full_path.rstrip("?"),
                "method": request.method,
                "message": message,
            },
        )
    logger.info("Rate limit excedido para %s em %s", request.remote_addr, request.path)

    return (
        jsonify({"success": False, "message": message, "code": RATE_LIMIT_EXCEEDED}),
        403,
    )


__all__ = [
    "RATE_LIMIT_EXCEEDED",
    "TIER_MESSAGES",
    "admin_limit",
    "contact_limit",
    "handle_rate_limit_exceeded",
]
