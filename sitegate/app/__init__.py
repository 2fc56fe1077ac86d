#sitegate/app/__init__.py


from __future__ import annotations

import os
from typing import Any, Mapping, Optional

from flask import Flask
from flask_cors import CORS
from werkzeug.middleware.proxy_fix import ProxyFix

from sitegate.app.errors import register_error_handlers
from sitegate.app.extensions import db, login_manager, migrate
from sitegate.app.settings import AppSettings, load_settings, store_settings
from sitegate.utils.logs import logger, set_level


def _ensure_directories(settings: AppSettings) -> None:
    """Create filesystem paths required by the application when appropriate."""

    try:
        database_uri = settings.database.url
        if database_uri.startswith("sqlite:///"):
            path = database_uri.replace("sqlite:///", "")
            if path and path != ":memory:":
                os.makedirs(os.path.dirname(path) or ".", exist_ok=True)
        os.makedirs(settings.uploads.directory, exist_ok=True)
    except Exception:
        logger.exception("Erro ao criar diretórios (ignorando em ambiente de teste)")


def create_app(
    config_name: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> Flask:

    logger.process("Criando app")
    settings = load_settings(config_name, overrides)
    set_level(settings.log_level)
    app = Flask(__name__)
    app.config.update(settings.as_flask_config())
    app.debug = settings.debug
    app.testing = settings.testing
    store_settings(app, settings)
    logger.info("app criado (%s)", settings.environment)

    logger.process("Configurando app")
    logger.warning(f"USANDO DB: {settings.database.url}")
    if settings.features.trust_proxy:
        app.wsgi_app = ProxyFix(app.wsgi_app, x_for=1, x_proto=1, x_host=1)
        logger.info("ProxyFix activo: IP do cliente lido de X-Forwarded-For")
    _ensure_directories(settings)

    logger.process("Iniciando extensões")
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    CORS(app, resources={r"/api/*": {"origins": settings.features.cors_origins}})
    register_error_handlers(app)
    logger.info("extensões iniciadas")

    from sitegate import models  # noqa: F401  (regista as tabelas)

    with app.app_context():
        db.create_all()
        initialize_services(app, settings)
        logger.info("Registrando blueprints")
        register_blueprints(app)
    logger.info("db criado")

    return app


def initialize_services(app: Flask, settings: AppSettings) -> None:
    """Builds the shared service objects and exposes them on ``app.extensions``."""

    from sitegate.services.auth_service import AuthManager
    from sitegate.services.content_service import ContentService
    from sitegate.services.event_log import EventLog
    from sitegate.services.security.gate import RequestGate
    from sitegate.services.upload_service import UploadStore
    from sitegate.utils.security.encryption import DataEncryption

    event_log = EventLog(max_entries=settings.gate.event_log_max_entries)
    encryption = DataEncryption(settings.secrets.encryption_key)
    content = ContentService(encryption)
    content.ensure_seeded()

    app.extensions["event_log"] = event_log
    app.extensions["encryption"] = encryption
    app.extensions["content"] = content
    app.extensions["auth_manager"] = AuthManager(settings.admin, settings.secrets, event_log)
    app.extensions["uploads"] = UploadStore(
        settings.uploads.directory,
        settings.uploads.allowed_types,
        settings.uploads.max_file_size,
    )

    RequestGate(settings.gate, event_log).init_app(app)


def register_blueprints(app: Flask) -> None:
    from sitegate.app.routes.api import api_bp
    from sitegate.app.routes.main_route import main as main_bp

    app.register_blueprint(main_bp)
    app.register_blueprint(api_bp, url_prefix='/api')
    logger.info("API registrada")
