from datetime import datetime, timedelta, timezone

import pytest
from fastapi.testclient import TestClient

from app.core.config import settings

# Every TestClient lifespan gets a fresh in-memory database
settings.DATABASE_URL = "sqlite+aiosqlite:///:memory:"
settings.LOG_DIR = ""

from main import app  # noqa: E402
from app.api.dependencies import get_mailer, get_payment_gateway  # noqa: E402
from app.services.email_service import EmailDeliveryError  # noqa: E402
from app.database import connection  # noqa: E402
from app.services.razorpay_service import RazorpayService, PaymentGatewayError, generate_signature  # noqa: E402

GATEWAY_SECRET = "test_razorpay_secret"
DEFAULT_PASSWORD = "secret123"


class FakeMailer:
    """Captures OTP codes instead of sending mail"""

    def __init__(self):
        self.codes = {}
        self.sent = []

    async def send_otp(self, recipient, code, subject, ttl_minutes):
        self.codes[recipient] = code
        self.sent.append((recipient, code))


class FailingMailer(FakeMailer):
    async def send_otp(self, recipient, code, subject, ttl_minutes):
        self.codes[recipient] = code
        raise EmailDeliveryError("SMTP connection refused")


class FakeGateway(RazorpayService):
    """Real signature checks, canned order creation"""

    def __init__(self):
        super().__init__(key_id="rzp_test_key", key_secret=GATEWAY_SECRET)
        self.orders = []

    async def create_order(self, amount, currency, receipt):
        order = {
            "id": f"order_test{len(self.orders) + 1:04d}",
            "entity": "order",
            "amount": amount,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
        }
        self.orders.append(order)
        return order


class UnavailableGateway(FakeGateway):
    async def create_order(self, amount, currency, receipt):
        raise PaymentGatewayError("502 Bad Gateway from api.razorpay.com")


class SteppingClock:
    """utcnow replacement that can be moved by hand"""

    def __init__(self, now=None, step=None):
        self.now = now or datetime(2024, 1, 1, 12, 0, tzinfo=timezone.utc)
        self.step = step

    def __call__(self):
        current = self.now
        if self.step:
            self.now = self.now + self.step
        return current

    def advance(self, **kwargs):
        self.now = self.now + timedelta(**kwargs)


def profile_payload(email, name="Ananya Rao", gender="female", date_of_birth="1995-05-20", **sections):
    payload = {
        "personalInfo": {
            "email": email,
            "name": name,
            "mobile": "9876543210",
            "gender": gender,
            "lookingFor": "groom" if gender == "female" else "bride",
            "hobbies": "Reading, Carnatic music",
            "about": "Simple and family oriented",
        },
        "demographics": {
            "dateOfBirth": date_of_birth,
            "height": "5'4\"",
            "maritalStatus": "Never Married",
            "religion": "Hindu",
            "community": "Vokkaliga",
            "motherTongue": "Kannada",
            "horoscope": True,
        },
        "professionalInfo": {
            "education": "B.E. Computer Science",
            "occupation": "Software Engineer",
            "income": "10-15 LPA",
        },
        "location": {"city": "Bengaluru", "state": "Karnataka"},
        "credentials": {"password": DEFAULT_PASSWORD, "rememberMe": False},
        "family": {"father": "Ramesh Rao", "mother": "Lakshmi Rao"},
        "appVersion": "1.0.0",
    }
    for section, values in sections.items():
        payload[section] = {**payload.get(section, {}), **values}
    return payload


def sign(order_id, payment_id):
    return generate_signature(order_id, payment_id, GATEWAY_SECRET)


@pytest.fixture
def mailer():
    return FakeMailer()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def client(mailer, gateway):
    app.dependency_overrides[get_mailer] = lambda: mailer
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def verify_email(client, mailer):
    def _verify(email):
        response = client.post("/api/send-email-otp", json={"email": email})
        assert response.status_code == 200, response.text
        response = client.post("/api/verify-email-otp", json={"email": email, "otp": mailer.codes[email]})
        assert response.status_code == 200, response.text
    return _verify


@pytest.fixture
def register(client, verify_email):
    """Run the whole signup flow and return the new external profile ID"""
    def _register(email, **overrides):
        verify_email(email)
        response = client.post("/api/create-profile", json=profile_payload(email, **overrides))
        assert response.status_code == 201, response.text
        return response.json()["profileId"]
    return _register


@pytest.fixture
def db_call(client):
    """Run an async function with a fresh session on the app's event loop"""
    def _call(fn):
        async def _run():
            async with connection.get_session() as session:
                return await fn(session)
        return client.portal.call(_run)
    return _call
