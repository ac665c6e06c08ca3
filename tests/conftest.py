import pytest

from app import create_app
from config import Config
from models import db


PASSPHRASE = "dndforever"
NOW = 1_700_000_000


class GatekeeperTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    AUTO_CREATE_TABLES = True
    FRONTEND_URL = "http://localhost:3000"
    LOGIN_PASSPHRASE = PASSPHRASE
    LOGIN_PASSPHRASE_HASH = None
    BCRYPT_ROUNDS = 4
    SESSION_COOKIE_SECURE = False
    AUTH_TOKEN_TTL_SECONDS = None
    TRUST_PROXY_HEADERS = False
    LOGIN_RATE_SCOPE = "global"
    # Most tests are about lockout, not throttling
    LOGIN_RATE_MAX_REQUESTS = 1000


class FakeClock:
    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


def _make_app(**overrides):
    config = type("Config", (GatekeeperTestConfig,), overrides)
    app = create_app(config)
    return app


@pytest.fixture
def make_app():
    apps = []

    def factory(**overrides):
        app = _make_app(**overrides)
        apps.append(app)
        return app

    yield factory

    for app in apps:
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def clock(monkeypatch):
    fake = FakeClock()
    monkeypatch.setattr("security.bruteforce.now_ts", fake)
    monkeypatch.setattr("security.tokens.now_ts", fake)
    return fake


def login(client, password=PASSPHRASE, username="", ip="10.0.0.1"):
    return client.post(
        "/api/auth/login",
        json={"username": username, "password": password},
        environ_base={"REMOTE_ADDR": ip},
    )
