"""Booking service - Booking workflow and payment reconciliation"""

import logging
from typing import Optional

from fastapi import BackgroundTasks
from sqlalchemy.orm import Session

from ...config import CARD_CHECKOUT_ENABLED, FRONTEND_URL
from ...email_service import (
    send_booking_confirmation,
    send_new_booking_alert,
    send_payment_confirmed,
)
from ...errors import AppointmentNotFound, SlotTaken
from ...models import PAYMENT_APPROVED, PAYMENT_PENDING, Appointment
from ...security_utils import mask_email
from ..payments.mercadopago_service import MercadoPagoService
from ..payments.schemas import CardCheckout
from .repository import BookingRepository
from .schemas import BookingCreate

logger = logging.getLogger(__name__)


class BookingService:
    """Service layer for the booking workflow"""

    def __init__(
        self,
        db: Session,
        gateway: MercadoPagoService,
        background_tasks: Optional[BackgroundTasks] = None,
        card_checkout_enabled: bool = CARD_CHECKOUT_ENABLED,
    ):
        self.db = db
        self.gateway = gateway
        self.background_tasks = background_tasks if background_tasks is not None else BackgroundTasks()
        self.card_checkout_enabled = card_checkout_enabled
        self.repo = BookingRepository()

    async def create_booking(self, data: BookingCreate) -> Appointment:
        """
        Book a slot: check the slot, create the charge(s), persist, then
        schedule the customer and owner notifications.

        Raises SlotTaken when the slot is occupied (before or during insert) and
        GatewayError when a charge cannot be created; nothing is persisted in
        either case.
        """
        logger.info(f"📥 Booking request for {data.date} {data.time} ({mask_email(data.email)})")

        if self.repo.find_by_slot(self.db, data.date, data.time):
            logger.info(f"Slot {data.date} {data.time} already booked")
            raise SlotTaken()

        description = f"{data.service} - {data.date} {data.time}"
        pix = await self.gateway.create_pix_charge(
            amount=data.price,
            description=description,
            payer_email=data.email,
            payer_name=data.name,
        )

        checkout: Optional[CardCheckout] = None
        if self.card_checkout_enabled:
            checkout = await self.gateway.create_card_checkout(
                amount=data.price,
                description=description,
                payer_email=data.email,
                payer_name=data.name,
                success_url=f"{FRONTEND_URL}/pagamento/sucesso",
                failure_url=f"{FRONTEND_URL}/pagamento/falha",
                pending_url=f"{FRONTEND_URL}/pagamento/pendente",
                external_reference=pix.external_id,
            )

        try:
            appointment = self.repo.insert(
                self.db,
                customer_name=data.name,
                customer_email=data.email,
                date=data.date,
                time=data.time,
                service=data.service,
                price=data.price,
                payment_id=pix.external_id,
                payment_status=PAYMENT_PENDING,
                pix_code=pix.qr_text,
                pix_qr_image=pix.qr_image_base64,
                card_checkout_url=checkout.checkout_url if checkout else None,
            )
        except SlotTaken:
            # Lost the race after the charge was created; the PIX charge expires unpaid
            logger.warning(f"⚠️ Orphan PIX charge {pix.external_id} for taken slot {data.date} {data.time}")
            raise

        logger.info(f"✅ Appointment {appointment.id} booked for {data.date} {data.time}")

        self.background_tasks.add_task(
            send_booking_confirmation,
            to=appointment.customer_email,
            customer_name=appointment.customer_name,
            date=appointment.date,
            time=appointment.time,
            service=appointment.service,
            price=appointment.price,
            pix_code=appointment.pix_code,
            card_checkout_url=appointment.card_checkout_url,
        )
        self.background_tasks.add_task(
            send_new_booking_alert,
            customer_name=appointment.customer_name,
            customer_email=appointment.customer_email,
            service=appointment.service,
            date=appointment.date,
            time=appointment.time,
            price=appointment.price,
        )

        return appointment

    async def check_payment_status(self, payment_id: str) -> str:
        """
        Reconcile a payment with the gateway and return the raw gateway status.

        The stored status is only moved to approved when it is not approved
        already, in one conditional UPDATE; only the poll that made the change
        sends the payment confirmation.
        """
        status = await self.gateway.get_payment_status(payment_id)

        if status == PAYMENT_APPROVED:
            appointment = self.repo.find_by_payment_id(self.db, payment_id)
            if not appointment:
                logger.warning(f"⚠️ Approved payment {payment_id} has no appointment")
            elif self.repo.update_status_by_payment_id(self.db, payment_id, PAYMENT_APPROVED):
                logger.info(f"💳 Payment {payment_id} approved for appointment {appointment.id}")
                self.background_tasks.add_task(
                    send_payment_confirmed,
                    to=appointment.customer_email,
                    customer_name=appointment.customer_name,
                    date=appointment.date,
                    time=appointment.time,
                    service=appointment.service,
                    price=appointment.price,
                )

        return status

    def occupied_times(self, date: str) -> list[str]:
        """Times already booked on a date"""
        return self.repo.list_times_for_date(self.db, date)

    def list_appointments(self) -> list[Appointment]:
        return self.repo.list_all(self.db)

    def appointments_for_email(self, email: str) -> list[Appointment]:
        return self.repo.find_by_email(self.db, email.strip().lower())

    def delete_appointment(self, appointment_id: int) -> None:
        """Delete an appointment; unknown ids are an error, not a silent success"""
        if not self.repo.delete_by_id(self.db, appointment_id):
            raise AppointmentNotFound()
        logger.info(f"🗑️ Appointment {appointment_id} removed")
