from flask import current_app, jsonify, request
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from flask_login import LoginManager
from flask_migrate import Migrate
from flask_sqlalchemy import SQLAlchemy

# Inicializar extensões
db = SQLAlchemy()
migrate = Migrate()
login_manager = LoginManager()


def _general_limit() -> str:
    from sitegate.app.settings import get_app_settings

    return get_app_settings().gate.rate_limit_general


# Fixed-window counters; the tier values are read from the gate policy per request.
limiter = Limiter(
    key_func=get_remote_address,
    application_limits=[_general_limit],
    strategy="fixed-window",
)


@login_manager.request_loader
def load_admin_from_request(req):
    """Resolve the admin identity from an ``Authorization: Bearer`` header."""
    header = req.headers.get("Authorization", "")
    if not header.startswith("Bearer "):
        return None
    token = header[len("Bearer "):].strip()
    if not token:
        return None
    auth = current_app.extensions.get("auth_manager")
    if auth is None:
        return None
    return auth.identity_from_token(token, ip=req.remote_addr)


@login_manager.unauthorized_handler
def unauthorized():
    header = request.headers.get("Authorization", "")
    message = "Invalid or expired token" if header.startswith("Bearer ") else "Access token required"
    return jsonify({"success": False, "message": message}), 401
