"""Admin media uploads."""
from __future__ import annotations

from flask import Blueprint, current_app, request

from sitegate.app.routes.api.common import fail, ok, upload_store
from sitegate.app.settings import get_app_settings
from sitegate.services.security.rate_limit import admin_limit
from sitegate.services.upload_service import UploadError
from sitegate.utils.role.roles import admin_required

upload_api_bp = Blueprint("api_upload", __name__)


@upload_api_bp.route("/single", methods=["POST"])
@admin_limit
@admin_required
def upload_single():
    try:
        saved = upload_store().save(request.files.get("file"), field="file")
    except UploadError as exc:
        return fail(exc.message, exc.status)
    return ok(saved, "File uploaded successfully")


@upload_api_bp.route("/multiple", methods=["POST"])
@admin_limit
@admin_required
def upload_multiple():
    max_files = get_app_settings().uploads.max_files
    try:
        saved = upload_store().save_many(request.files.getlist("files"), field="files", max_files=max_files)
    except UploadError as exc:
        return fail(exc.message, exc.status)
    return ok(saved, "Files uploaded successfully")


@upload_api_bp.route("/list", methods=["GET"])
@admin_limit
@admin_required
def list_uploads():
    return ok(upload_store().list_files())


@upload_api_bp.route("/<filename>", methods=["DELETE"])
@admin_limit
@admin_required
def delete_upload(filename: str):
    store = upload_store()
    if store.resolve(filename) is None:
        return fail("Invalid filename", 400)
    if not store.delete(filename):
        return fail("File not found", 404)
    current_app.extensions["event_log"].log("file_deleted", {"filename": filename})
    return ok(message="File deleted successfully")
