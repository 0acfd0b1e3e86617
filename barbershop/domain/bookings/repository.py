"""Booking repository - Database operations for appointments"""

import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ...errors import SlotTaken, StoreError
from ...models import Appointment

logger = logging.getLogger(__name__)


class BookingRepository:
    """Repository for appointment database operations"""

    @staticmethod
    def find_by_slot(db: Session, date: str, time: str) -> Optional[Appointment]:
        """Get the appointment occupying a (date, time) slot"""
        return (
            db.query(Appointment)
            .filter(Appointment.date == date, Appointment.time == time)
            .first()
        )

    @staticmethod
    def insert(db: Session, **appointment_data) -> Appointment:
        """
        Insert a new appointment.

        The (date, time) unique constraint is authoritative: a violation means a
        concurrent request took the slot after our pre-check.
        """
        appointment = Appointment(**appointment_data)
        db.add(appointment)
        try:
            db.commit()
        except IntegrityError as e:
            db.rollback()
            logger.warning(
                f"⚠️ Slot {appointment_data.get('date')} {appointment_data.get('time')} "
                f"taken at insert time: {e.orig}"
            )
            raise SlotTaken() from e
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Failed to save appointment: {e}")
            raise StoreError() from e
        db.refresh(appointment)
        return appointment

    @staticmethod
    def find_by_email(db: Session, email: str) -> list[Appointment]:
        """Get all appointments booked with an email"""
        return (
            db.query(Appointment)
            .filter(Appointment.customer_email == email)
            .order_by(Appointment.date, Appointment.time)
            .all()
        )

    @staticmethod
    def find_by_payment_id(db: Session, payment_id: str) -> Optional[Appointment]:
        """Get an appointment by its gateway payment id"""
        return db.query(Appointment).filter(Appointment.payment_id == payment_id).first()

    @staticmethod
    def update_status_by_payment_id(db: Session, payment_id: str, status: str) -> bool:
        """
        Set the payment status of the appointment holding a payment id.

        Only rows not already in that status are touched, in a single UPDATE.
        Returns True when this call made the change.
        """
        try:
            updated = (
                db.query(Appointment)
                .filter(Appointment.payment_id == payment_id, Appointment.payment_status != status)
                .update({Appointment.payment_status: status}, synchronize_session="fetch")
            )
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Failed to update payment {payment_id} to {status}: {e}")
            raise StoreError() from e
        return updated == 1

    @staticmethod
    def list_all(db: Session) -> list[Appointment]:
        """Get every appointment"""
        return db.query(Appointment).order_by(Appointment.date, Appointment.time).all()

    @staticmethod
    def list_times_for_date(db: Session, date: str) -> list[str]:
        """Get the occupied times of a date"""
        rows = (
            db.query(Appointment.time)
            .filter(Appointment.date == date)
            .distinct()
            .order_by(Appointment.time)
            .all()
        )
        return [row[0] for row in rows]

    @staticmethod
    def delete_by_id(db: Session, appointment_id: int) -> bool:
        """Delete an appointment. Returns False when the id does not exist"""
        appointment = db.query(Appointment).filter(Appointment.id == appointment_id).first()
        if not appointment:
            return False
        try:
            db.delete(appointment)
            db.commit()
        except SQLAlchemyError as e:
            db.rollback()
            logger.error(f"❌ Failed to delete appointment {appointment_id}: {e}")
            raise StoreError("Erro ao excluir") from e
        return True
