"""Shared fixtures: test settings, fake collaborators and an app client wired to them."""

import os
import time

import pytest

os.environ.setdefault("SESSION_SECRET_KEY", "test-session-secret")
os.environ.setdefault("ADMIN_LOGIN_FAILURE_DELAY", "0")

from fastapi.testclient import TestClient  # noqa: E402

from src.app import app  # noqa: E402
from src.shared.contact.dns_check import get_domain_resolver  # noqa: E402
from src.shared.contact.mailer import MailDeliveryError, get_mail_transport  # noqa: E402
from src.shared.settings import Settings, get_settings  # noqa: E402
from src.shared.site_mode.store import FileSiteModeStore, get_site_mode_store  # noqa: E402

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "correct horse battery staple"


class FakeTransport:
    """Records messages instead of sending them."""

    def __init__(self):
        self.sent = []
        self.fail = False

    def send(self, msg):
        if self.fail:
            raise MailDeliveryError("connection refused")
        self.sent.append(msg)


class FakeResolver:
    """Answers DNS questions from a fixed set of domains."""

    def __init__(self, domains=("example.com",)):
        self.domains = set(domains)
        self.lookups = []

    def has_mail_records(self, domain):
        self.lookups.append(domain)
        return domain in self.domains


class FakeClock:
    """Stands in for the ``time`` module inside a route or service module."""

    def __init__(self, start=None):
        self.now = start if start is not None else time.time()
        self.sleeps = []

    def time(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)

    def advance(self, seconds):
        self.now += seconds


@pytest.fixture
def settings(tmp_path):
    return Settings(
        SITE_MODE_FILE=str(tmp_path / "data" / "site-mode.json"),
        SITE_MODE_DATABASE_URL=None,
        RECIPIENTS_FILE=None,
        ADMIN_USERNAME=ADMIN_USERNAME,
        ADMIN_PASSWORD=ADMIN_PASSWORD,
        ADMIN_PASSWORD_HASH=None,
        ADMIN_LOGIN_FAILURE_DELAY=0,
    )


@pytest.fixture
def store(settings):
    return FileSiteModeStore(settings.SITE_MODE_FILE)


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def resolver():
    return FakeResolver()


@pytest.fixture
def client(settings, store, transport, resolver):
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_site_mode_store] = lambda: store
    app.dependency_overrides[get_mail_transport] = lambda: transport
    app.dependency_overrides[get_domain_resolver] = lambda: resolver
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def admin_client(client):
    """A client whose session is logged in as the admin."""
    response = client.post(
        "/admin-auth?action=login",
        json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD}
    )
    assert response.status_code == 200
    return client


@pytest.fixture
def clock():
    return FakeClock()
