"""Admin view of the request gate: status, event export and manual IP blocking."""
from __future__ import annotations

import ipaddress
import time

from flask import Blueprint, jsonify
from flask_login import current_user

from sitegate.app.routes.api.common import event_log, fail, ok, parse_body, request_gate
from sitegate.app.routes.api.schemas import BlockRequest
from sitegate.services.security.rate_limit import admin_limit
from sitegate.utils.logs import logger
from sitegate.utils.role.roles import admin_required

security_api_bp = Blueprint("api_security", __name__)


@security_api_bp.route("/status", methods=["GET"])
@admin_limit
@admin_required
def security_status():
    return ok(request_gate().status())


@security_api_bp.route("/logs", methods=["GET"])
@admin_limit
@admin_required
def export_logs():
    events = event_log().export()
    response = jsonify({"success": True, "securityLogs": events, "count": len(events)})
    response.headers["Content-Disposition"] = (
        f"attachment; filename=security-logs-{int(time.time() * 1000)}.json"
    )
    return response


@security_api_bp.route("/block", methods=["POST"])
@admin_limit
@admin_required
def block_ip():
    payload = parse_body(BlockRequest, "Invalid IP address")
    request_gate().firewall.block_ip(payload.ip, payload.reason)
    logger.warning("IP %s bloqueado manualmente por %s", payload.ip, current_user.username)
    return ok({"ip": payload.ip, "reason": payload.reason}, f"IP {payload.ip} blocked")


@security_api_bp.route("/block/<ip>", methods=["DELETE"])
@admin_limit
@admin_required
def unblock_ip(ip: str):
    try:
        address = str(ipaddress.ip_address(ip))
    except ValueError:
        return fail("Invalid IP address", 400)
    if not request_gate().firewall.unblock_ip(address):
        return fail("IP not blocked", 404)
    logger.info("IP %s desbloqueado por %s", address, current_user.username)
    return ok({"ip": address}, f"IP {address} unblocked")
