import pytest

from barbershop import config, email_service
from barbershop.email_templates import (
    booking_confirmation_template,
    format_brl,
    new_booking_alert_template,
)
from barbershop.errors import NotificationError


async def test_send_notification_swallows_delivery_failures(monkeypatch):
    async def broken_send_email(to, subject, mjml_content, from_address=None):
        raise NotificationError("provider down")

    monkeypatch.setattr(email_service, "send_email", broken_send_email)

    assert await email_service.send_notification("joao@example.com", "Oi", "<mjml></mjml>") is False


async def test_send_notification_without_recipient(sent_emails):
    assert await email_service.send_notification(None, "Oi", "<mjml></mjml>") is False
    assert sent_emails == []


async def test_owner_alert_skipped_without_owner_email(monkeypatch, sent_emails):
    monkeypatch.setattr(config, "SHOP_OWNER_EMAIL", None)

    sent = await email_service.send_new_booking_alert(
        "João", "joao@example.com", "Corte", "2024-05-01", "14:30", 35.0
    )

    assert sent is False
    assert sent_emails == []


async def test_booking_confirmation_goes_to_customer(sent_emails):
    sent = await email_service.send_booking_confirmation(
        to="joao@example.com",
        customer_name="João",
        date="2024-05-01",
        time="14:30",
        service="Corte",
        price=35.0,
        pix_code="00020126pix",
    )

    assert sent is True
    assert sent_emails[0]["to"] == "joao@example.com"
    assert "00020126pix" in sent_emails[0]["body"]


async def test_send_email_without_transport_raises(monkeypatch):
    monkeypatch.setattr(config, "SMTP_HOST", None)
    monkeypatch.setattr(config, "RESEND_API_KEY", None)
    monkeypatch.setattr(email_service, "compile_mjml_to_html", lambda mjml: "<html></html>")

    with pytest.raises(NotificationError):
        await email_service.send_email("joao@example.com", "Oi", "<mjml></mjml>")


def test_format_brl():
    assert format_brl(35) == "R$ 35,00"
    assert format_brl(1234.5) == "R$ 1.234,50"


def test_templates_escape_customer_input():
    body = booking_confirmation_template("<b>João</b>", "2024-05-01", "14:30", "Corte", 35.0)
    assert "<b>João</b>" not in body
    assert "&lt;b&gt;João&lt;/b&gt;" in body

    alert = new_booking_alert_template("João", "joao@example.com", "Corte", "2024-05-01", "14:30", 35.0)
    assert "joao@example.com" in alert
    assert "R$ 35,00" in alert
