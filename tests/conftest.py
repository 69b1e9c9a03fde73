import hashlib
import hmac
import json
import os
import time
from datetime import datetime, timedelta
from types import SimpleNamespace

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_checkout")
os.environ.setdefault("STRIPE_CONNECT_WEBHOOK_SECRET", "whsec_test_connect")
os.environ.setdefault("APP_URL", "http://testserver.local")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from sipdepot.api.deps import get_stripe_gateway
from sipdepot.core.config import settings
from sipdepot.core.exceptions import PaymentProviderError
from sipdepot.core.security import create_access_token, get_password_hash
from sipdepot.db.session import Base, get_db
from sipdepot.main import app
from sipdepot.models import Booking, BookingStatus, Event, EventStatus, User

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


class FakeStripeGateway:
    """Stands in for StripeGateway; records every call it receives."""

    currency = "usd"

    def __init__(self):
        self.accounts = {}
        self.created_accounts = []
        self.account_sessions = []
        self.checkout_sessions = []
        self.fail = False

    def _maybe_fail(self):
        if self.fail:
            raise PaymentProviderError("Stripe is unavailable", cause=RuntimeError("api.stripe.com timed out"))

    def retrieve_account(self, account_id):
        self._maybe_fail()
        return self.accounts[account_id]

    def create_express_account(self):
        self._maybe_fail()
        account_id = f"acct_test_{len(self.created_accounts) + 1}"
        self.created_accounts.append(account_id)
        return account_id

    def create_account_session(self, account_id, components):
        self._maybe_fail()
        self.account_sessions.append({"account": account_id, "components": components})
        return f"accs_secret_{len(self.account_sessions)}"

    def create_checkout_session(self, **params):
        self._maybe_fail()
        self.checkout_sessions.append(params)
        session_id = f"cs_test_{len(self.checkout_sessions)}"
        return SimpleNamespace(id=session_id, url=f"https://checkout.stripe.test/pay/{session_id}")


def sign_payload(payload: str, secret: str, timestamp: int = None) -> str:
    """Build a Stripe-Signature header the way Stripe does."""
    timestamp = timestamp or int(time.time())
    signature = hmac.new(
        secret.encode("utf-8"),
        f"{timestamp}.{payload}".encode("utf-8"),
        hashlib.sha256,
    ).hexdigest()
    return f"t={timestamp},v1={signature}"


@pytest.fixture
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def gateway():
    return FakeStripeGateway()


@pytest.fixture
def client(db, gateway):
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_stripe_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def host(db):
    user = User(
        email="host@example.com",
        name="Hannah Host",
        hashed_password=get_password_hash("paint-and-sip"),
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers_for(user) -> dict:
    token = create_access_token({"sub": user.email, "user_id": str(user.id)})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def auth_headers(host):
    return auth_headers_for(host)


@pytest.fixture
def make_event(db, host):
    counter = {"n": 0}

    def _make_event(**overrides):
        counter["n"] += 1
        fields = dict(
            host_id=host.id,
            title=f"Starry Night Social {counter['n']}",
            slug=f"starry-night-social-{counter['n']}",
            start_date_time=datetime.utcnow() + timedelta(days=7),
            location_name="The Vine Room",
            address="12 Grape Street",
            city="Austin",
            state="TX",
            zip="78701",
            ticket_price_cents=3500,
            capacity=10,
            sales_cutoff_hours=48,
            status=EventStatus.PUBLISHED,
        )
        fields.update(overrides)
        event = Event(**fields)
        db.add(event)
        db.commit()
        db.refresh(event)
        return event

    return _make_event


@pytest.fixture
def make_booking(db):
    counter = {"n": 0}

    def _make_booking(event, status=BookingStatus.PAID, quantity=1, **overrides):
        counter["n"] += 1
        fields = dict(
            event_id=event.id,
            purchaser_name="Guest",
            purchaser_email=f"guest{counter['n']}@example.com",
            quantity=quantity,
            amount_paid_cents=event.ticket_price_cents * quantity,
            status=status,
            stripe_checkout_session_id=f"cs_existing_{counter['n']}",
        )
        fields.update(overrides)
        booking = Booking(**fields)
        db.add(booking)
        db.commit()
        db.refresh(booking)
        return booking

    return _make_booking


@pytest.fixture
def post_webhook(client):
    """POST a signed event to a webhook endpoint."""

    def _post(event: dict, path: str = "/webhooks/stripe", secret: str = None, signature: str = None):
        payload = json.dumps(event)
        if signature is None:
            signature = sign_payload(payload, secret or settings.STRIPE_WEBHOOK_SECRET)
        return client.post(
            path,
            content=payload,
            headers={"stripe-signature": signature, "content-type": "application/json"},
        )

    return _post
