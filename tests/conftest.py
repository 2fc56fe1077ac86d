# tests/conftest.py
import pytest

from sitegate.app import create_app
from sitegate.app.extensions import db as _db
from sitegate.app.extensions import limiter

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "s3cret-pass"


class RecordingEventLog:
    """Event log em memória para testar componentes do gate sem base de dados."""

    def __init__(self):
        self.events = []

    def log(self, event, data=None):
        self.events.append((event, dict(data or {})))
        return None

    def names(self):
        return [name for name, _ in self.events]

    def count(self, event):
        return sum(1 for name, _ in self.events if name == event)


class MemoryBlockedRepo:
    def __init__(self, addresses=()):
        self.rows = {ip: "seed" for ip in addresses}

    def all_addresses(self):
        return list(self.rows)

    def block(self, ip, reason=None):
        self.rows[ip] = reason

    def unblock(self, ip):
        return self.rows.pop(ip, None) is not None


class FakeClock:
    def __init__(self, start=1_000_000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def make_app(tmp_path):
    """Fábrica de apps em modo testing; aceita overrides por secção."""
    created = []

    def _make(**sections):
        overrides = {
            "admin": {"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD},
            "secrets": {"jwt_secret": "test-jwt-secret", "secret_key": "test-secret-key"},
            "uploads": {"directory": tmp_path / "uploads"},
        }
        for section, values in sections.items():
            if isinstance(values, dict) and isinstance(overrides.get(section), dict):
                overrides[section] = {**overrides[section], **values}
            else:
                overrides[section] = values
        app = create_app("testing", overrides)
        created.append(app)
        return app

    yield _make

    for app in created:
        with app.app_context():
            _db.session.remove()
            _db.drop_all()
    limiter.reset()


@pytest.fixture
def app(make_app):
    """App sem contexto activo: cada pedido do client cria o seu."""
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    """Contexto da app com a base em memória; não misturar com ``client``."""
    with app.app_context():
        yield _db
        _db.session.remove()


@pytest.fixture
def event_log(app, db):
    return app.extensions["event_log"]


@pytest.fixture
def recording_log():
    return RecordingEventLog()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def login(client):
    def _login(username=ADMIN_USERNAME, password=ADMIN_PASSWORD):
        return client.post("/api/admin/login", json={"username": username, "password": password})

    return _login


@pytest.fixture
def admin_headers(login):
    response = login()
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.get_json()['token']}"}


@pytest.fixture
def blocked_repo():
    return MemoryBlockedRepo()
