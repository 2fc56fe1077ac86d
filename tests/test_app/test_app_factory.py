from sitegate.app.extensions import limiter
from sitegate.app.settings import TESTING_RATE_LIMIT, get_app_settings
from sitegate.services.security.gate import RequestGate


def test_app_uses_testing_config(app):
    settings = get_app_settings(app)
    assert settings.testing is True
    assert settings.database.url == "sqlite:///:memory:"
    assert settings.mail.suppress_send is True
    assert settings.gate.monitor_scheduler_enabled is False
    assert settings.gate.rate_limit_general == TESTING_RATE_LIMIT
    assert app.config["RATELIMIT_STRATEGY"] == "fixed-window"


def test_overrides_are_merged_into_sections(make_app):
    app = make_app(gate={"rate_limit_contact": "2 per 1 minute", "scraping_threshold": 30})
    settings = get_app_settings(app)

    assert settings.gate.rate_limit_contact == "2 per 1 minute"
    assert settings.gate.scraping_threshold == 30
    assert settings.gate.rate_limit_admin == TESTING_RATE_LIMIT
    assert settings.admin.username == "admin"


def test_blueprints_are_registered(app):
    for blueprint_name in ("main", "api", "api.api_admin", "api.api_contact", "api.api_upload"):
        assert blueprint_name in app.blueprints


def test_services_are_exposed_on_extensions(app):
    for name in ("event_log", "auth_manager", "content", "encryption", "uploads"):
        assert name in app.extensions
    assert isinstance(app.extensions["request_gate"], RequestGate)
    assert app.extensions["request_gate"].scheduler is None
    assert "limiter" in app.extensions


def test_health_is_exempt_from_rate_limits(make_app):
    app = make_app(gate={"rate_limit_general": "2 per 1 minute"})
    client = app.test_client()

    for _ in range(5):
        response = client.get("/health")
        assert response.status_code == 200
    assert response.get_json()["success"] is True
    assert response.get_json()["data"]["timestamp"].endswith("Z")


def test_protection_headers(client):
    response = client.get("/health")
    assert response.headers["X-Frame-Options"] == "DENY"
    assert response.headers["X-Content-Type-Options"] == "nosniff"
    assert response.headers["Referrer-Policy"] == "strict-origin-when-cross-origin"


def test_unknown_route_uses_json_envelope(client):
    response = client.get("/api/does-not-exist")
    assert response.status_code == 404
    assert response.get_json() == {"success": False, "message": "Not found"}


def test_method_not_allowed(client):
    response = client.delete("/api/services")
    assert response.status_code == 405
    assert response.get_json()["success"] is False


def test_unexpected_errors_hide_details_by_default(make_app):
    app = make_app()

    @app.route("/boom")
    def boom():
        raise RuntimeError("kaboom")

    response = app.test_client().get("/boom")
    assert response.status_code == 500
    body = response.get_json()
    assert body == {"success": False, "message": "Internal server error"}


def test_unexpected_errors_expose_traceback_when_enabled(make_app):
    app = make_app(features={"expose_errors": True})

    @app.route("/boom")
    def boom():
        raise RuntimeError("kaboom")

    body = app.test_client().get("/boom").get_json()
    assert body["error"] == "kaboom"
    assert "RuntimeError" in body["traceback"]


def test_limiter_is_shared_instance(app):
    assert limiter in app.extensions["limiter"]
