"""API blueprint aggregator."""
from __future__ import annotations

from flask import Blueprint

api_bp = Blueprint("api", __name__)

from .admin_api import admin_api_bp
from .contact_api import contact_api_bp
from .security_api import security_api_bp
from .site_api import site_api_bp
from .upload_api import upload_api_bp

api_bp.register_blueprint(site_api_bp)
api_bp.register_blueprint(contact_api_bp)
api_bp.register_blueprint(admin_api_bp, url_prefix="/admin")
api_bp.register_blueprint(security_api_bp, url_prefix="/admin/security")
api_bp.register_blueprint(upload_api_bp, url_prefix="/admin/upload")

__all__ = ["api_bp"]
