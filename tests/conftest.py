"""
Shared fixtures: a fresh app per test backed by in-memory SQLite, a temp
upload folder and a notifier that records instead of sending mail.
"""
import io

import pytest

from app import create_app
from extensions import db
from notifier import Outbox

TEST_MAX_UPLOAD_BYTES = 1024


class RecordingNotifier:
    def __init__(self):
        self.sent = []

    def send(self, notification):
        self.sent.append(notification)


class FailingNotifier:
    def __init__(self):
        self.calls = 0

    def send(self, notification):
        self.calls += 1
        raise ConnectionRefusedError("smtp down")


def make_app(tmp_path, **overrides):
    config = {
        "TESTING": True,
        "SQLALCHEMY_DATABASE_URI": "sqlite://",
        "UPLOAD_FOLDER": str(tmp_path / "uploads"),
        "JWT_SECRET": "test-secret",
        # cheap hashing keeps the suite fast
        "PASSWORD_HASH_METHOD": "pbkdf2:sha256:1000",
        "MAX_UPLOAD_BYTES": TEST_MAX_UPLOAD_BYTES,
        "FORM_OVERHEAD_BYTES": 1024,
        "NOTIFY_SYNC": True,
        "SMTP_HOST": None,
        "OPERATOR_EMAIL": "operator@school.test",
    }
    config.update(overrides)
    return create_app(config)


@pytest.fixture
def app(tmp_path):
    app = make_app(tmp_path)
    app.extensions["outbox"] = Outbox(RecordingNotifier())
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def sent(app):
    """Notifications delivered so far."""
    return app.extensions["outbox"].notifier.sent


@pytest.fixture
def file_store(app):
    return app.extensions["file_store"]


def register(client, name="Ana Perez", email="ana@school.test",
             password="s3cret-pass", student_id="A12345"):
    return client.post("/api/register", json={
        "name": name,
        "email": email,
        "password": password,
        "studentId": student_id,
    })


def login(client, email="ana@school.test", password="s3cret-pass"):
    return client.post("/api/login", json={"email": email, "password": password})


def auth_headers(client, **kwargs):
    resp = login(client, **kwargs)
    assert resp.status_code == 200, resp.get_json()
    return {"Authorization": f"Bearer {resp.get_json()['token']}"}


def upload(client, headers=None, name="Essay 1", content=b"hello world",
           filename="essay.txt", field="file"):
    data = {}
    if name is not None:
        data["name"] = name
    if content is not None:
        data[field] = (io.BytesIO(content), filename)
    return client.post(
        "/api/upload",
        data=data,
        headers=headers or {},
        content_type="multipart/form-data",
    )


@pytest.fixture
def signed_in(client):
    """Register the default student and return bearer headers."""
    assert register(client).status_code == 201
    return auth_headers(client)
