"""Public read-only content: site data and the services catalogue."""
from __future__ import annotations

from flask import Blueprint

from sitegate.app.routes.api.common import client_context, content, event_log, fail, ok

site_api_bp = Blueprint("api_site", __name__)


@site_api_bp.route("/site-data", methods=["GET"])
def get_site_data():
    data = content().get_site_data()
    event_log().log("page_view", client_context())
    return ok(data)


@site_api_bp.route("/services", methods=["GET"])
def list_services():
    return ok(content().list_services())


@site_api_bp.route("/services/<int:service_id>", methods=["GET"])
def get_service(service_id: int):
    service = content().get_service(service_id)
    if service is None:
        return fail("Service not found", 404)
    return ok(service)
