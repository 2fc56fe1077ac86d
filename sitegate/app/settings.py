"""Application configuration powered by ``pydantic-settings``.

Settings are grouped into typed sections (database, secrets, admin identity,
request gate policy, uploads, mail, feature flags) so the rest of the code
never reads ``os.environ`` directly.  Nested sections are populated from the
environment with a ``__`` delimiter, e.g. ``ADMIN__USERNAME`` or
``GATE__SCRAPING_THRESHOLD``.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Literal, Mapping, Optional

from flask import Flask, current_app
from pydantic import AliasChoices, BaseModel, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

BASE_DIR = Path(__file__).resolve().parent
PROJECT_ROOT = BASE_DIR.parent.parent
DEFAULT_DB_URL = f"sqlite:///{PROJECT_ROOT / 'data' / 'sitegate.db'}"
DEFAULT_TEST_DB_URL = "sqlite:///:memory:"
DEFAULT_UPLOAD_DIR = PROJECT_ROOT / "uploads"

DEFAULT_RATE_LIMIT_GENERAL = "100 per 15 minutes"
DEFAULT_RATE_LIMIT_ADMIN = "10 per 15 minutes"
DEFAULT_RATE_LIMIT_CONTACT = "5 per hour"
TESTING_RATE_LIMIT = "1000 per 15 minutes"

DEFAULT_SUSPICIOUS_PATTERNS: List[str] = [
    r"\b(union|select|insert|delete|drop|create|alter|exec|script)\b",
    r"<script[^>]*>.*?</script>",
    r"javascript:",
    r"vbscript:",
    r"onload|onerror|onclick",
]

DEFAULT_SCANNER_AGENTS: List[str] = [
    "sqlmap", "nikto", "nmap", "masscan", "zap", "burp",
    "wget", "curl", "python-requests", "go-http-client",
]

DEFAULT_SCRAPER_AGENTS: List[str] = [
    "wget", "curl", "scrapy", "bot", "crawler", "spider",
    "python", "java", "go-http", "node-fetch",
]

DEFAULT_UPLOAD_TYPES: Dict[str, str] = {
    "jpeg": "image/jpeg",
    "jpg": "image/jpeg",
    "png": "image/png",
    "gif": "image/gif",
    "webp": "image/webp",
    "mp3": "audio/mpeg",
    "wav": "audio/wav",
    "ogg": "audio/ogg",
    "mp4": "video/mp4",
    "webm": "video/webm",
}


class DatabaseSettings(BaseModel):
    """Database connection related configuration."""

    url: str = DEFAULT_DB_URL
    echo: bool = False
    engine_options: Dict[str, Any] = Field(default_factory=dict)


class SecretsSettings(BaseModel):
    """Secret tokens and keys."""

    secret_key: str = "dev-secret-key-change-in-production"
    jwt_secret: str = "dev-jwt-secret-change-in-production"
    jwt_issuer: str = "sitegate"
    jwt_audience: str = "admin"
    token_ttl_hours: int = 24
    encryption_key: Optional[str] = None


class AdminSettings(BaseModel):
    """The single admin identity allowed to edit the site."""

    username: str = "admin"
    password_hash: Optional[str] = None
    password: Optional[str] = None


class GatePolicy(BaseModel):
    """Thresholds and lists shared by the firewall, rate limiter and access monitor."""

    # firewall
    blocked_countries: List[str] = Field(default_factory=list)
    suspicious_patterns: List[str] = Field(
        default_factory=lambda: list(DEFAULT_SUSPICIOUS_PATTERNS)
    )
    scanner_agents: List[str] = Field(default_factory=lambda: list(DEFAULT_SCANNER_AGENTS))
    suspicious_hits_before_block: int = 5
    geoip_database: Optional[Path] = None

    # rate limiter (fixed window)
    rate_limit_general: str = DEFAULT_RATE_LIMIT_GENERAL
    rate_limit_admin: str = DEFAULT_RATE_LIMIT_ADMIN
    rate_limit_contact: str = DEFAULT_RATE_LIMIT_CONTACT

    # access monitor
    domain_whitelist: List[str] = Field(default_factory=lambda: ["localhost", "127.0.0.1"])
    scraper_agents: List[str] = Field(default_factory=lambda: list(DEFAULT_SCRAPER_AGENTS))
    scraping_threshold: int = 50
    scraping_window_seconds: int = 60
    history_max_entries: int = 100
    history_retention_seconds: int = 3600
    active_window_seconds: int = 300
    monitor_interval_seconds: int = 300
    monitor_scheduler_enabled: bool = True

    # event log
    event_log_max_entries: int = 1000

    @field_validator("blocked_countries")
    @classmethod
    def _upper_countries(cls, value: List[str]) -> List[str]:
        return [code.strip().upper() for code in value if code and code.strip()]


class UploadSettings(BaseModel):
    """Where uploaded media is stored and what is accepted."""

    directory: Path = DEFAULT_UPLOAD_DIR
    max_file_size: int = 10 * 1024 * 1024
    max_files: int = 5
    allowed_types: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_UPLOAD_TYPES))


class MailSettings(BaseModel):
    """SMTP parameters used for contact notifications."""

    server: str = "localhost"
    port: int = 1025
    username: Optional[str] = None
    password: Optional[str] = None
    use_tls: bool = True
    use_ssl: bool = False
    default_sender: str = "website@example.com"
    notify_to: Optional[str] = None
    suppress_send: bool = False


class FeatureFlags(BaseModel):
    """Feature toggles that change runtime behaviour."""

    enable_email: bool = True
    expose_errors: bool = False
    trust_proxy: bool = False
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])


class AppSettings(BaseSettings):
    """Typed application configuration backed by environment variables."""

    model_config = SettingsConfigDict(
        env_file=PROJECT_ROOT / ".env",
        env_nested_delimiter="__",
        extra="ignore",
    )

    environment: Literal["development", "production", "testing"] = Field(
        default="development",
        validation_alias=AliasChoices("APP_ENV", "FLASK_ENV", "ENVIRONMENT"),
    )
    debug: bool = Field(default=False)
    testing: bool = Field(default=False)
    log_level: str = Field(default="INFO", validation_alias=AliasChoices("LOG_LEVEL"))
    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    secrets: SecretsSettings = Field(default_factory=SecretsSettings)
    admin: AdminSettings = Field(default_factory=AdminSettings)
    gate: GatePolicy = Field(default_factory=GatePolicy)
    uploads: UploadSettings = Field(default_factory=UploadSettings)
    mail: MailSettings = Field(default_factory=MailSettings)
    features: FeatureFlags = Field(default_factory=FeatureFlags)
    ratelimit_storage_uri: str = Field(
        default="memory://", validation_alias=AliasChoices("RATELIMIT_STORAGE_URI")
    )

    def with_environment(self, environment: Optional[str]) -> "AppSettings":
        """Return a copy adjusted for the selected environment."""

        env = (environment or self.environment or "development").lower()
        db_settings = self.database
        mail_settings = self.mail
        features = self.features
        gate = self.gate

        debug = self.debug
        testing = self.testing

        if env == "development":
            debug = True
            features = features.model_copy(update={"expose_errors": True})
        elif env == "production":
            debug = False
            features = features.model_copy(update={"expose_errors": False})
        elif env == "testing":
            testing = True
            debug = False
            db_settings = db_settings.model_copy(
                update={"url": DEFAULT_TEST_DB_URL, "engine_options": {}, "echo": False}
            )
            mail_settings = mail_settings.model_copy(update={"suppress_send": True})
            gate_updates: Dict[str, Any] = {"monitor_scheduler_enabled": False}
            for name, default in (
                ("rate_limit_general", DEFAULT_RATE_LIMIT_GENERAL),
                ("rate_limit_admin", DEFAULT_RATE_LIMIT_ADMIN),
                ("rate_limit_contact", DEFAULT_RATE_LIMIT_CONTACT),
            ):
                if getattr(gate, name) == default:
                    gate_updates[name] = TESTING_RATE_LIMIT
            gate = gate.model_copy(update=gate_updates)

        return self.model_copy(
            update={
                "environment": env,
                "debug": debug,
                "testing": testing,
                "database": db_settings,
                "mail": mail_settings,
                "features": features,
                "gate": gate,
            }
        )

    def with_overrides(self, overrides: Optional[Mapping[str, Any]]) -> "AppSettings":
        """Apply explicit overrides; mappings are merged into nested sections."""

        if not overrides:
            return self
        update: Dict[str, Any] = {}
        for key, value in overrides.items():
            current = getattr(self, key, None)
            if isinstance(current, BaseModel) and isinstance(value, Mapping):
                update[key] = current.model_copy(update=dict(value))
            else:
                update[key] = value
        return self.model_copy(update=update)

    def as_flask_config(self) -> Dict[str, Any]:
        """Translate settings into the dict expected by ``Flask``."""

        return {
            "DEBUG": self.debug,
            "TESTING": self.testing,
            "SECRET_KEY": self.secrets.secret_key,
            "SQLALCHEMY_DATABASE_URI": self.database.url,
            "SQLALCHEMY_ECHO": self.database.echo,
            "SQLALCHEMY_ENGINE_OPTIONS": self.database.engine_options,
            "SQLALCHEMY_TRACK_MODIFICATIONS": False,
            "MAX_CONTENT_LENGTH": self.uploads.max_file_size * self.uploads.max_files,
            "UPLOAD_DIR": str(self.uploads.directory),
            "RATELIMIT_STRATEGY": "fixed-window",
            "RATELIMIT_STORAGE_URI": self.ratelimit_storage_uri,
            "RATELIMIT_SWALLOW_ERRORS": True,
            "RATELIMIT_HEADERS_ENABLED": True,
            "EXPOSE_ERRORS": self.features.expose_errors,
            "MAIL_SERVER": self.mail.server,
            "MAIL_PORT": self.mail.port,
            "MAIL_DEFAULT_SENDER": self.mail.default_sender,
            "MAIL_SUPPRESS_SEND": self.mail.suppress_send,
        }


def load_settings(
    config_name: Optional[str] = None,
    overrides: Optional[Mapping[str, Any]] = None,
) -> AppSettings:
    """Instantiate :class:`AppSettings` applying environment and explicit overrides."""

    base = AppSettings()
    return base.with_environment(config_name).with_overrides(overrides)


def store_settings(app: Flask, settings: AppSettings) -> None:
    """Attach the settings object to the Flask application instance."""

    app.extensions["app_settings"] = settings
    app.config["APP_SETTINGS"] = settings


def get_app_settings(app: Optional[Flask] = None) -> AppSettings:
    """Return the settings registered on the Flask application."""

    app_obj = app or current_app
    settings = app_obj.extensions.get("app_settings")
    if isinstance(settings, AppSettings):
        return settings
    raise RuntimeError("AppSettings not initialised for this Flask application")


__all__ = [
    "AdminSettings",
    "AppSettings",
    "DatabaseSettings",
    "FeatureFlags",
    "GatePolicy",
    "MailSettings",
    "SecretsSettings",
    "UploadSettings",
    "get_app_settings",
    "load_settings",
    "store_settings",
]
