from sqlalchemy import Column, DateTime, Float, Integer, String, UniqueConstraint
from sqlalchemy.sql import func

from .database import Base

PAYMENT_PENDING = "pending"
PAYMENT_APPROVED = "approved"


class Account(Base):
    __tablename__ = "accounts"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)  # stored lower-cased
    password_hash = Column(String(255), nullable=False)  # bcrypt, never the plaintext
    reset_token = Column(String(255), nullable=True, index=True)
    reset_token_expiry = Column(DateTime, nullable=True)  # naive UTC, set together with reset_token
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())


class Appointment(Base):
    __tablename__ = "appointments"
    # One appointment per slot; the insert path relies on this constraint, not on the pre-check
    __table_args__ = (UniqueConstraint("date", "time", name="uq_appointment_slot"),)

    id = Column(Integer, primary_key=True, index=True)
    customer_name = Column(String(255), nullable=False)
    customer_email = Column(String(255), nullable=False, index=True)
    date = Column(String(20), nullable=False, index=True)  # opaque slot key, e.g. 2024-05-01
    time = Column(String(10), nullable=False)  # opaque slot key, e.g. 14:30
    service = Column(String(255), nullable=False)
    price = Column(Float, nullable=False)  # BRL

    # Mercado Pago
    payment_id = Column(String(255), nullable=True, unique=True, index=True)
    payment_status = Column(String(20), nullable=False, default=PAYMENT_PENDING)  # pending, approved, error
    pix_code = Column(String(2000), nullable=True)
    pix_qr_image = Column(String, nullable=True)  # base64 PNG
    card_checkout_url = Column(String(1000), nullable=True)

    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())
