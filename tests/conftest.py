import os

# Configuration is read at import time; set it before barbershop is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("MERCADO_PAGO_ACCESS_TOKEN", "TEST-token")
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SECURITY_HEADERS_ENABLED"] = "true"
os.environ.setdefault("SHOP_OWNER_EMAIL", "owner@barbearia.test")
os.environ.pop("REDIS_URL", None)
os.environ.pop("SMTP_HOST", None)

import itertools  # noqa: E402
from typing import Optional  # noqa: E402

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from barbershop import email_service, rate_limiter  # noqa: E402
from barbershop.database import Base, get_db  # noqa: E402
from barbershop.domain.payments.mercadopago_service import get_payment_gateway  # noqa: E402
from barbershop.domain.payments.schemas import CardCheckout, PixCharge  # noqa: E402
from barbershop.errors import GatewayError  # noqa: E402
from barbershop.main import app  # noqa: E402


class FakeGateway:
    """In-process stand-in for MercadoPagoService"""

    def __init__(self):
        self._ids = itertools.count(1000)
        self.statuses: dict[str, str] = {}
        self.fail_pix = False
        self.fail_checkout = False
        self.fail_status = False
        self.pix_calls = 0
        self.checkout_calls = 0

    async def create_pix_charge(self, amount, description, payer_email, payer_name) -> PixCharge:
        self.pix_calls += 1
        if self.fail_pix:
            raise GatewayError()
        payment_id = str(next(self._ids))
        self.statuses[payment_id] = "pending"
        return PixCharge(
            external_id=payment_id,
            qr_text=f"00020126pix-{payment_id}",
            qr_image_base64="iVBORw0KGgo=",
        )

    async def create_card_checkout(
        self,
        amount,
        description,
        payer_email,
        payer_name,
        success_url,
        failure_url,
        pending_url,
        external_reference: Optional[str] = None,
    ) -> CardCheckout:
        self.checkout_calls += 1
        if self.fail_checkout:
            raise GatewayError()
        return CardCheckout(
            checkout_url=f"https://mp.test/checkout?pref={external_reference}",
            preference_id=f"pref-{external_reference}",
        )

    async def get_payment_status(self, external_id: str) -> str:
        if self.fail_status:
            raise GatewayError()
        return self.statuses.get(external_id, "pending")


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
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing email instead of delivering it"""
    sent = []

    async def fake_send_email(to, subject, mjml_content, from_address=None):
        sent.append({"to": to, "subject": subject, "body": mjml_content})
        return {"id": "test"}

    monkeypatch.setattr(email_service, "send_email", fake_send_email)
    return sent


@pytest.fixture(autouse=True)
def clear_rate_limits():
    rate_limiter.memory_cache.clear()
    yield
    rate_limiter.memory_cache.clear()


@pytest.fixture
def client(engine, gateway, sent_emails):
    session_factory = sessionmaker(autocommit=False, autoflush=False, bind=engine)

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_payment_gateway] = lambda: gateway
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def booking_payload():
    return {
        "name": "João Silva",
        "email": "Joao@Example.com",
        "date": "2024-05-01",
        "time": "14:30",
        "service": "Corte + Barba",
        "price": 50.0,
    }
