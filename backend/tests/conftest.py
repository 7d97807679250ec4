from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from privacyweave.config import Settings, settings
from privacyweave.database import get_engine
from privacyweave.dependencies import get_email_notifier, get_storage, get_whatsapp_notifier
from privacyweave.main import app
from privacyweave.schemas.user import UserCreate
from privacyweave.services import email_service
from privacyweave.services.auth_service import register_user, session_store
from privacyweave.services.email_service import EmailNotifier
from privacyweave.services.whatsapp_service import WhatsAppNotifier
from privacyweave.storage.memory import MemoryStorage
from privacyweave.storage.sql import DatabaseStorage

BLANK_NOTIFIER_SETTINGS = {
    "email_service": None,
    "email_user": None,
    "email_password": None,
    "email_recipients": None,
    "email_host": None,
    "email_port": None,
    "twilio_account_sid": None,
    "twilio_auth_token": None,
    "twilio_phone_number": None,
    "whatsapp_recipient_number": None,
}


class FakeSMTP:
    """Stands in for smtplib.SMTP / SMTP_SSL; records every message sent."""

    outbox: list = []
    connections: list = []
    fail_with: Exception | None = None

    def __init__(self, host, port, timeout=None):
        self.host = host
        self.port = port
        self.timeout = timeout
        self.tls = False
        self.logged_in_as = None
        FakeSMTP.connections.append(self)

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def starttls(self):
        self.tls = True

    def login(self, user, password):
        if FakeSMTP.fail_with is not None:
            raise FakeSMTP.fail_with
        self.logged_in_as = user

    def send_message(self, message):
        FakeSMTP.outbox.append(message)


class FakeTwilioClient:
    def __init__(self, outbox: list, fail_with: Exception | None = None):
        self.outbox = outbox
        self.fail_with = fail_with
        self.messages = self

    def create(self, **kwargs):
        if self.fail_with is not None:
            raise self.fail_with
        self.outbox.append(kwargs)
        return SimpleNamespace(sid=f"SM{len(self.outbox):032d}")


@pytest.fixture
def notifier_settings():
    return Settings(
        _env_file=None,
        **{
            **BLANK_NOTIFIER_SETTINGS,
            "email_service": "gmail",
            "email_user": "noreply@privacyweave.com",
            "email_password": "app-password",
            "twilio_account_sid": "AC1234567890abcdef",
            "twilio_auth_token": "twilio-token",
            "twilio_phone_number": "+14155238886",
            "whatsapp_recipient_number": "+919876543210",
        },
    )


@pytest.fixture
def blank_settings():
    return Settings(_env_file=None, **BLANK_NOTIFIER_SETTINGS)


@pytest.fixture
def smtp_outbox(monkeypatch):
    FakeSMTP.outbox = []
    FakeSMTP.connections = []
    FakeSMTP.fail_with = None
    monkeypatch.setattr(email_service.smtplib, "SMTP", FakeSMTP)
    monkeypatch.setattr(email_service.smtplib, "SMTP_SSL", FakeSMTP)
    return FakeSMTP.outbox


@pytest.fixture
def whatsapp_outbox():
    return []


@pytest.fixture
def twilio_client(whatsapp_outbox):
    return FakeTwilioClient(whatsapp_outbox)


@pytest.fixture
def email_notifier(notifier_settings, smtp_outbox):
    return EmailNotifier(notifier_settings)


@pytest.fixture
def whatsapp_notifier(notifier_settings, twilio_client):
    return WhatsAppNotifier(notifier_settings, client_factory=lambda sid, token: twilio_client)


@pytest.fixture
def upload_dir(tmp_path, monkeypatch):
    path = tmp_path / "uploads"
    monkeypatch.setattr(settings, "upload_dir", path)
    return path


@pytest.fixture
def storage(tmp_path):
    db = DatabaseStorage(get_engine(f"sqlite:///{tmp_path / 'test.db'}"))
    db.init_schema()
    return db


@pytest.fixture(params=["database", "memory"])
def any_storage(request, tmp_path):
    if request.param == "memory":
        return MemoryStorage()
    db = DatabaseStorage(get_engine(f"sqlite:///{tmp_path / 'any.db'}"))
    db.init_schema()
    return db


@pytest.fixture
def client(storage, email_notifier, whatsapp_notifier, upload_dir):
    app.dependency_overrides[get_storage] = lambda: storage
    app.dependency_overrides[get_email_notifier] = lambda: email_notifier
    app.dependency_overrides[get_whatsapp_notifier] = lambda: whatsapp_notifier
    session_store.clear()
    with TestClient(app) as c:
        yield c
    session_store.clear()
    app.dependency_overrides.clear()


@pytest.fixture
def unconfigured_notifiers(client, blank_settings):
    """Swap in notifiers with no credentials for the current test."""
    app.dependency_overrides[get_email_notifier] = lambda: EmailNotifier(blank_settings)
    app.dependency_overrides[get_whatsapp_notifier] = lambda: WhatsAppNotifier(blank_settings)


def _login(client, username, password):
    r = client.post("/api/login", json={"username": username, "password": password})
    assert r.status_code == 200
    return {"Authorization": f"Bearer {r.json()['token']}"}


@pytest.fixture
def admin_headers(client, storage):
    register_user(
        storage,
        UserCreate(username="admin", email="admin@privacyweave.com", name="Admin", password="admin-pass-123"),
        role="admin",
    )
    return _login(client, "admin", "admin-pass-123")


@pytest.fixture
def user_headers(client):
    r = client.post("/api/register", json={
        "username": "visitor",
        "email": "visitor@example.com",
        "name": "Visitor",
        "password": "visitor-pass-123",
    })
    assert r.status_code == 201
    return {"Authorization": f"Bearer {r.json()['token']}"}
