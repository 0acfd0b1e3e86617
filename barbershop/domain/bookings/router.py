"""Booking router - FastAPI endpoints for appointments and payments"""

import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ...database import get_db
from ...errors import BadInput, BarbershopError
from ...models import Appointment
from ...rate_limiter import create_rate_limiter
from ..payments.mercadopago_service import MercadoPagoService, get_payment_gateway
from .schemas import (
    AppointmentResponse,
    BookingCreate,
    BookingResponse,
    MessageResponse,
    PaymentStatusResponse,
)
from .service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Bookings"])

rate_limit_booking = create_rate_limiter(limit=30, window_seconds=3600, key_prefix="booking")


def get_booking_service(
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    gateway: MercadoPagoService = Depends(get_payment_gateway),
) -> BookingService:
    """Dependency injection for BookingService"""
    return BookingService(db, gateway, background_tasks)


def to_appointment_response(a: Appointment) -> AppointmentResponse:
    return AppointmentResponse(
        id=a.id,
        customerName=a.customer_name,
        customerEmail=a.customer_email,
        date=a.date,
        time=a.time,
        service=a.service,
        price=a.price,
        paymentId=a.payment_id,
        paymentStatus=a.payment_status,
        pixCode=a.pix_code,
        pixQrImage=a.pix_qr_image,
        cardCheckoutUrl=a.card_checkout_url,
        createdAt=a.created_at,
    )


@router.get("/agendamentos/ocupados", response_model=list[str])
async def get_occupied_times(
    date: Optional[str] = Query(None),
    service: BookingService = Depends(get_booking_service),
):
    """Times already booked on a date"""
    if not date or not date.strip():
        raise BadInput("Data é obrigatória")
    return service.occupied_times(date.strip())


@router.post("/agendar", response_model=BookingResponse, status_code=201)
async def create_booking(
    data: BookingCreate,
    service: BookingService = Depends(get_booking_service),
    _: None = Depends(rate_limit_booking),
):
    """Book a slot and return the PIX / card payment artifacts"""
    appointment = await service.create_booking(data)
    return BookingResponse(
        message="Agendamento realizado com sucesso! ✅",
        appointmentId=appointment.id,
        paymentId=appointment.payment_id,
        pixCode=appointment.pix_code,
        qrImageBase64=appointment.pix_qr_image,
        cardCheckoutUrl=appointment.card_checkout_url,
    )


@router.get("/status-pagamento/{payment_id}", response_model=PaymentStatusResponse)
async def get_payment_status(
    payment_id: str,
    service: BookingService = Depends(get_booking_service),
):
    """Poll the gateway for a payment and reconcile the stored status"""
    try:
        status = await service.check_payment_status(payment_id)
    except BarbershopError as e:
        logger.error(f"❌ Payment status check failed for {payment_id}: {e.message}")
        return JSONResponse(status_code=500, content={"status": "error"})
    return PaymentStatusResponse(status=status)


@router.get("/agendamentos", response_model=list[AppointmentResponse])
async def list_appointments(service: BookingService = Depends(get_booking_service)):
    """All appointments (admin panel)"""
    return [to_appointment_response(a) for a in service.list_appointments()]


@router.get("/meus-agendamentos", response_model=list[AppointmentResponse])
async def my_appointments(
    email: Optional[str] = Query(None),
    service: BookingService = Depends(get_booking_service),
):
    """Appointments booked with an email"""
    if not email or not email.strip():
        raise BadInput("E-mail obrigatório")
    return [to_appointment_response(a) for a in service.appointments_for_email(email)]


@router.delete("/agendamentos/{appointment_id}", response_model=MessageResponse)
async def delete_appointment(
    appointment_id: int,
    service: BookingService = Depends(get_booking_service),
):
    """Remove an appointment"""
    service.delete_appointment(appointment_id)
    return MessageResponse(message="Agendamento removido!")
