from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest
from botocore.exceptions import ClientError

from proofviral import create_app
from proofviral.config import TestConfig
from proofviral.extensions import db
from proofviral.models.review import Review
from proofviral.services import rasterizer, sentiment, storage

PASSWORD = "SecurePass123"


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture(autouse=True)
def reset_clients():
    sentiment.anthropic_client = None
    sentiment._working_model = None
    sentiment._in_flight.clear()
    storage._s3_client = None
    yield
    sentiment._in_flight.clear()


def signup(client, email="owner@acme.test", business_name="Acme Coffee"):
    response = client.post('/api/auth/signup', json={
        "email": email,
        "password": PASSWORD,
        "business_name": business_name,
        "business_url": "https://acme.test"
    })
    assert response.status_code == 201, response.get_json()
    return response.get_json()


def auth_headers(account):
    return {"Authorization": f"Bearer {account['access_token']}"}


@pytest.fixture
def account(client):
    return signup(client)


@pytest.fixture
def headers(account):
    return auth_headers(account)


_base_time = datetime(2026, 1, 1, 12, 0, 0)


def add_review(business_id, rating=5, status='pending', text="Great coffee and friendly staff.",
               name="Jane Doe", minutes=0):
    review = Review(
        business_id=business_id,
        customer_name=name,
        customer_email="jane@example.com",
        rating=rating,
        review_text=text,
        status=status,
        created_at=_base_time + timedelta(minutes=minutes)
    )
    db.session.add(review)
    db.session.commit()
    return review


class FakeS3:
    def __init__(self, fail=False):
        self.objects = {}
        self.fail = fail
        self.calls = 0

    def head_object(self, Bucket, Key):
        self.calls += 1
        if (Bucket, Key) not in self.objects:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")
        return {}

    def put_object(self, Bucket, Key, Body, **kwargs):
        self.calls += 1
        if self.fail:
            raise ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject")
        self.objects[(Bucket, Key)] = Body
        return {}


@pytest.fixture
def fake_s3(monkeypatch):
    s3 = FakeS3()
    monkeypatch.setattr(storage, 'get_s3_client', lambda: s3)
    return s3


@pytest.fixture
def failing_s3(monkeypatch):
    s3 = FakeS3(fail=True)
    monkeypatch.setattr(storage, 'get_s3_client', lambda: s3)
    return s3


class FakeMessages:
    def __init__(self, replies):
        self.replies = list(replies)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        reply = self.replies.pop(0) if len(self.replies) > 1 else self.replies[0]
        if isinstance(reply, Exception):
            raise reply
        return SimpleNamespace(content=[SimpleNamespace(type='text', text=reply)])


class FakeAnthropic:
    def __init__(self, *replies):
        self.messages = FakeMessages(replies)


@pytest.fixture
def claude(monkeypatch):
    """Install a fake Claude client; call it with the replies to return."""
    def install(*replies):
        fake = FakeAnthropic(*replies)
        monkeypatch.setattr(sentiment, 'get_anthropic_client', lambda: fake)
        return fake
    return install


PNG_BYTES = b'\x89PNG\r\n\x1a\nfake-image'


@pytest.fixture
def fake_rasterizer(monkeypatch):
    calls = []

    def render_png(html, width, height):
        calls.append({"html": html, "width": width, "height": height})
        return PNG_BYTES

    monkeypatch.setattr(rasterizer, 'render_png', render_png)
    return calls
