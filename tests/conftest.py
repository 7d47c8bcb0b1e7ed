# tests/conftest.py
import hashlib
import hmac
import json
import os
import time
from decimal import Decimal

# ustawienia musza byc w env zanim zaimportujemy app.*
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["STRIPE_WEBHOOK_SECRET"] = "whsec_test"
os.environ["IDENTITY_PROVIDER"] = "local"

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import app.utils.security as security
from app.api import create_app
from app.data.database import Base, get_db
from app.data.models import ProductModel
from app.services.identity_provider import LocalIdentityProvider
from app.services.payment_gateway import PaymentGateway

WEBHOOK_SECRET = "whsec_test"


class FakePaymentIntents:
    def __init__(self):
        self.created = []
        self.cancelled = []
        self.fail_create = False

    def create(self, **kwargs):
        if self.fail_create:
            raise RuntimeError("stripe is down")
        n = len(self.created) + 1
        intent = {"id": f"pi_test_{n}", "client_secret": f"pi_test_{n}_secret_abc", **kwargs}
        self.created.append(intent)
        return intent

    def cancel(self, intent, **kwargs):
        self.cancelled.append(intent)


class FakeStripe:
    def __init__(self):
        self.PaymentIntent = FakePaymentIntents()


class FakeLockService:
    def __init__(self):
        self.locks = {}

    def acquire(self, key, owner, ttl):
        if key in self.locks:
            return False
        self.locks[key] = owner
        return True

    def release(self, key, owner):
        if self.locks.get(key) == owner:
            del self.locks[key]
            return True
        return False


@pytest.fixture(autouse=True)
def fast_bcrypt(monkeypatch):
    monkeypatch.setattr(security, "BCRYPT_ROUNDS", 4)


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fake_stripe():
    return FakeStripe()


@pytest.fixture
def payment_gateway(fake_stripe):
    return PaymentGateway(api_key="sk_test", webhook_secret=WEBHOOK_SECRET, stripe_client=fake_stripe)


@pytest.fixture
def lock_service():
    return FakeLockService()


@pytest.fixture
def app(session_factory, payment_gateway, lock_service):
    application = create_app(
        payment_gateway=payment_gateway,
        lock_service=lock_service,
        identity_provider=LocalIdentityProvider(session_factory),
        use_lifespan=False,
    )

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    application.dependency_overrides[get_db] = override_get_db
    return application


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_product(db):
    def _make(price="100.00", in_stock=True, name="Toyota Camry 2023", brand="Toyota", model="Camry"):
        product = ProductModel(
            name=name,
            price=Decimal(price),
            brand=brand,
            model=model,
            year=2023,
            image_urls=[],
            in_stock=in_stock,
        )
        db.add(product)
        db.commit()
        return product

    return _make


def signup(client, email="a@x.com", password="secret1", **extra):
    resp = client.post("/auth/signup", json={"email": email, "password": password, **extra})
    assert resp.status_code == 200, resp.text
    return resp.json()["data"]


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def user(client):
    """Zarejestrowany user: dict z id, accessToken i gotowymi naglowkami."""
    data = signup(client)
    data["headers"] = auth_headers(data["accessToken"])
    return data


@pytest.fixture
def other_user(client):
    data = signup(client, email="b@x.com", password="secret2")
    data["headers"] = auth_headers(data["accessToken"])
    return data


def sign_payload(payload: str, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> str:
    ts = timestamp or int(time.time())
    signature = hmac.new(secret.encode(), f"{ts}.{payload}".encode(), hashlib.sha256).hexdigest()
    return f"t={ts},v1={signature}"


def make_event(
    event_type: str,
    order_id,
    intent_id: str = "pi_test_1",
    event_id: str = "evt_1",
    created: int = 1_700_000_000,
) -> str:
    metadata = {} if order_id is None else {"orderId": str(order_id), "userId": "1"}
    return json.dumps(
        {
            "id": event_id,
            "type": event_type,
            "created": created,
            "data": {"object": {"id": intent_id, "object": "payment_intent", "metadata": metadata}},
        }
    )
