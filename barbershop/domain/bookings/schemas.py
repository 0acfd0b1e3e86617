"""Booking domain schemas - Pydantic models for validation"""

import math
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, field_validator


class BookingCreate(BaseModel):
    """Schema for booking a slot"""

    name: str
    email: str
    date: str
    time: str
    service: str
    price: float

    @field_validator("name", "date", "time", "service")
    @classmethod
    def validate_required(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("field is required")
        return v

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("invalid email")
        return v

    @field_validator("price", mode="before")
    @classmethod
    def parse_price(cls, v):
        # Accept "35,00" as typed in Brazilian forms
        if isinstance(v, str):
            v = v.strip().replace(",", ".")
        return v

    @field_validator("price")
    @classmethod
    def validate_price(cls, v: float) -> float:
        if not math.isfinite(v) or v <= 0:
            raise ValueError("price must be a finite number greater than 0")
        return v


class BookingResponse(BaseModel):
    """Schema for a successful booking"""

    message: str
    appointmentId: int
    paymentId: str
    pixCode: str
    qrImageBase64: str
    cardCheckoutUrl: Optional[str] = None


class AppointmentResponse(BaseModel):
    """Schema for appointment listings"""

    id: int
    customerName: str
    customerEmail: str
    date: str
    time: str
    service: str
    price: float
    paymentId: Optional[str] = None
    paymentStatus: str
    pixCode: Optional[str] = None
    pixQrImage: Optional[str] = None
    cardCheckoutUrl: Optional[str] = None
    createdAt: Optional[datetime] = None


class PaymentStatusResponse(BaseModel):
    status: str


class MessageResponse(BaseModel):
    message: str
