"""Admin endpoints: login, content editing, contacts, analytics and backups."""
from __future__ import annotations

import time

from flask import Blueprint, current_app, jsonify
from flask_login import current_user

from sitegate.app.routes.api.common import client_context, content, event_log, fail, ok, parse_body
from sitegate.app.routes.api.schemas import (
    AudioSettings,
    ContactStatusUpdate,
    LoginRequest,
    RestoreRequest,
    ServiceCreate,
    ServiceUpdate,
    SiteSettingsUpdate,
)
from sitegate.services.security.rate_limit import admin_limit
from sitegate.utils.logs import logger
from sitegate.utils.role.roles import admin_required

admin_api_bp = Blueprint("api_admin", __name__)


def _actor() -> dict:
    return {"username": getattr(current_user, "username", None), **client_context()}


@admin_api_bp.route("/login", methods=["POST"])
@admin_limit
def login():
    credentials = parse_body(LoginRequest)
    context = client_context()
    result = current_app.extensions["auth_manager"].authenticate(
        credentials.username,
        credentials.password,
        ip=context["ip"],
        user_agent=context["userAgent"],
    )
    if not result.success:
        return fail(result.message, 401)
    return ok(message="Login successful", token=result.token)


# ----------------------------------------------------------------------
# Site data
# ----------------------------------------------------------------------
@admin_api_bp.route("/site-data", methods=["GET"])
@admin_limit
@admin_required
def get_site_data():
    return ok(content().get_site_data())


@admin_api_bp.route("/site-settings", methods=["PUT", "POST"])
@admin_limit
@admin_required
def update_site_settings():
    update = parse_body(SiteSettingsUpdate, "Invalid site settings")
    changes = update.changes()
    data = content().update_site_settings(changes)
    event_log().log("site_settings_updated", {"fields": sorted(changes), **_actor()})
    return ok(data, "Site settings updated successfully")


@admin_api_bp.route("/audio-settings", methods=["POST"])
@admin_limit
@admin_required
def update_audio_settings():
    audio = parse_body(AudioSettings, "Invalid audio settings")
    data = content().update_audio(audio.url, audio.autoplay)
    return ok(data, "Audio settings updated successfully")


# ----------------------------------------------------------------------
# Services
# ----------------------------------------------------------------------
@admin_api_bp.route("/add-service", methods=["POST"])
@admin_limit
@admin_required
def add_service():
    payload = parse_body(ServiceCreate, "Invalid service data")
    service = content().add_service(payload.model_dump())
    return ok(service, "Service added successfully", status=201)


@admin_api_bp.route("/service/<int:service_id>", methods=["PUT"])
@admin_limit
@admin_required
def update_service(service_id: int):
    payload = parse_body(ServiceUpdate, "Invalid service data")
    service = content().update_service(
        service_id, payload.model_dump(exclude_unset=True, exclude_none=True)
    )
    if service is None:
        return fail("Service not found", 404)
    return ok(service, "Service updated successfully")


@admin_api_bp.route("/service/<int:service_id>", methods=["DELETE"])
@admin_limit
@admin_required
def delete_service(service_id: int):
    if not content().delete_service(service_id):
        return fail("Service not found", 404)
    return ok(message="Service deleted successfully")


# ----------------------------------------------------------------------
# Contacts
# ----------------------------------------------------------------------
@admin_api_bp.route("/contacts", methods=["GET"])
@admin_limit
@admin_required
def list_contacts():
    return ok(content().list_contacts())


@admin_api_bp.route("/contact/<int:contact_id>/status", methods=["PUT"])
@admin_limit
@admin_required
def update_contact_status(contact_id: int):
    payload = parse_body(ContactStatusUpdate, "Invalid contact status")
    contact = content().update_contact_status(contact_id, payload.status)
    if contact is None:
        return fail("Contact not found", 404)
    return ok(contact, "Contact status updated")


# ----------------------------------------------------------------------
# Analytics / backup
# ----------------------------------------------------------------------
@admin_api_bp.route("/analytics", methods=["GET"])
@admin_limit
@admin_required
def analytics():
    return ok(event_log().analytics())


@admin_api_bp.route("/backup", methods=["GET"])
@admin_limit
@admin_required
def backup():
    snapshot = content().backup()
    response = jsonify({"success": True, **snapshot})
    response.headers["Content-Disposition"] = (
        f"attachment; filename=backup-{int(time.time() * 1000)}.json"
    )
    logger.info("Backup exportado por %s", getattr(current_user, "username", "?"))
    return response


@admin_api_bp.route("/restore", methods=["POST"])
@admin_limit
@admin_required
def restore():
    payload = parse_body(RestoreRequest, "Invalid backup data")
    if payload.site_data is None:
        return fail("Invalid backup data", 400)
    data = content().restore(payload.site_data.changes())
    event_log().log("data_restored", _actor())
    return ok(data, "Data restored successfully")
