import pytest
from fastapi import BackgroundTasks
from sqlalchemy.orm import sessionmaker

from barbershop.domain.bookings.repository import BookingRepository
from barbershop.domain.bookings.schemas import BookingCreate
from barbershop.domain.bookings.service import BookingService
from barbershop.email_service import send_payment_confirmed
from barbershop.errors import AppointmentNotFound, GatewayError, SlotTaken
from barbershop.models import PAYMENT_APPROVED, PAYMENT_PENDING


def booking(**overrides):
    data = {
        "name": "João Silva",
        "email": "joao@example.com",
        "date": "2024-05-01",
        "time": "14:30",
        "service": "Corte",
        "price": 35.0,
    }
    data.update(overrides)
    return BookingCreate(**data)


def make_service(db, gateway, card_checkout_enabled=True):
    return BookingService(db, gateway, BackgroundTasks(), card_checkout_enabled=card_checkout_enabled)


async def test_create_booking_persists_payment_artifacts_and_schedules_two_emails(db, gateway):
    service = make_service(db, gateway)

    appointment = await service.create_booking(booking())

    assert appointment.id is not None
    assert appointment.payment_status == PAYMENT_PENDING
    assert appointment.payment_id == "1000"
    assert appointment.pix_code == "00020126pix-1000"
    assert appointment.pix_qr_image == "iVBORw0KGgo="
    assert appointment.card_checkout_url == "https://mp.test/checkout?pref=1000"
    assert len(service.background_tasks.tasks) == 2


async def test_create_booking_without_card_checkout(db, gateway):
    service = make_service(db, gateway, card_checkout_enabled=False)

    appointment = await service.create_booking(booking())

    assert appointment.card_checkout_url is None
    assert gateway.checkout_calls == 0


async def test_taken_slot_is_rejected_before_charging(db, gateway):
    await make_service(db, gateway).create_booking(booking())
    service = make_service(db, gateway)

    with pytest.raises(SlotTaken):
        await service.create_booking(booking(email="maria@example.com"))

    assert gateway.pix_calls == 1
    assert service.background_tasks.tasks == []


async def test_gateway_failure_persists_nothing(db, gateway):
    gateway.fail_pix = True
    service = make_service(db, gateway)

    with pytest.raises(GatewayError):
        await service.create_booking(booking())

    assert BookingRepository.list_all(db) == []
    assert service.background_tasks.tasks == []


async def test_card_checkout_failure_persists_nothing(db, gateway):
    gateway.fail_checkout = True
    service = make_service(db, gateway)

    with pytest.raises(GatewayError):
        await service.create_booking(booking())

    assert BookingRepository.list_all(db) == []


async def test_slot_lost_between_check_and_insert(db, gateway, monkeypatch):
    await make_service(db, gateway).create_booking(booking())

    # Simulate a concurrent request that passed the pre-check at the same time
    monkeypatch.setattr(BookingRepository, "find_by_slot", staticmethod(lambda db, date, time: None))
    service = make_service(db, gateway)

    with pytest.raises(SlotTaken):
        await service.create_booking(booking(email="maria@example.com"))

    assert len(BookingRepository.list_all(db)) == 1
    assert service.background_tasks.tasks == []


async def test_approved_payment_is_reconciled_once(db, gateway):
    appointment = await make_service(db, gateway).create_booking(booking())
    gateway.statuses[appointment.payment_id] = "approved"

    first = make_service(db, gateway)
    assert await first.check_payment_status(appointment.payment_id) == "approved"
    second = make_service(db, gateway)
    assert await second.check_payment_status(appointment.payment_id) == "approved"

    stored = BookingRepository.find_by_payment_id(db, appointment.payment_id)
    assert stored.payment_status == PAYMENT_APPROVED
    assert [t.func for t in first.background_tasks.tasks] == [send_payment_confirmed]
    assert second.background_tasks.tasks == []


async def test_concurrent_poll_that_loses_the_update_sends_nothing(db, engine, gateway, monkeypatch):
    appointment = await make_service(db, gateway).create_booking(booking())
    gateway.statuses[appointment.payment_id] = "approved"
    find_by_payment_id = BookingRepository.find_by_payment_id

    def find_then_approve_elsewhere(session, payment_id):
        found = find_by_payment_id(session, payment_id)
        # Another poll approves the payment between our read and our update
        other = sessionmaker(bind=engine)()
        BookingRepository.update_status_by_payment_id(other, payment_id, PAYMENT_APPROVED)
        other.close()
        return found

    monkeypatch.setattr(BookingRepository, "find_by_payment_id", staticmethod(find_then_approve_elsewhere))
    service = make_service(db, gateway)

    assert await service.check_payment_status(appointment.payment_id) == "approved"
    assert service.background_tasks.tasks == []


async def test_non_approved_status_is_returned_without_changes(db, gateway):
    appointment = await make_service(db, gateway).create_booking(booking())
    gateway.statuses[appointment.payment_id] = "rejected"
    service = make_service(db, gateway)

    assert await service.check_payment_status(appointment.payment_id) == "rejected"

    stored = BookingRepository.find_by_payment_id(db, appointment.payment_id)
    assert stored.payment_status == PAYMENT_PENDING
    assert service.background_tasks.tasks == []


async def test_approved_payment_without_appointment(db, gateway):
    gateway.statuses["999"] = "approved"
    service = make_service(db, gateway)

    assert await service.check_payment_status("999") == "approved"
    assert service.background_tasks.tasks == []


async def test_status_lookup_failure_propagates(db, gateway):
    appointment = await make_service(db, gateway).create_booking(booking())
    gateway.fail_status = True

    with pytest.raises(GatewayError):
        await make_service(db, gateway).check_payment_status(appointment.payment_id)

    stored = BookingRepository.find_by_payment_id(db, appointment.payment_id)
    assert stored.payment_status == PAYMENT_PENDING


async def test_appointments_for_email_is_case_insensitive(db, gateway):
    await make_service(db, gateway).create_booking(booking())

    service = make_service(db, gateway)
    assert len(service.appointments_for_email("  JOAO@example.com ")) == 1
    assert service.appointments_for_email("other@example.com") == []


async def test_delete_unknown_appointment(db, gateway):
    with pytest.raises(AppointmentNotFound):
        make_service(db, gateway).delete_appointment(12345)
