"""
Email Service using Resend or Custom SMTP
Provides booking, payment and account notifications using MJML templates.

Every pre-built sender is best-effort: delivery failures are logged and
swallowed so that route handlers can schedule them as background tasks
without their outcome affecting the response.
"""

import asyncio
import logging
import smtplib
import ssl
from datetime import datetime, timezone
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional, Union

import resend
from mjml import mjml_to_html

from . import config
from .email_templates import (
    booking_confirmation_template,
    new_booking_alert_template,
    password_reset_template,
    payment_confirmed_template,
    welcome_email_template,
)
from .errors import NotificationError
from .security_utils import mask_email

logger = logging.getLogger(__name__)

resend.api_key = config.RESEND_API_KEY


def send_via_smtp(
    to: list[str],
    subject: str,
    html_content: str,
    from_address: str,
) -> dict:
    """Send email via the configured SMTP server"""
    try:
        msg = MIMEMultipart("mixed")
        msg["Subject"] = subject
        msg["From"] = from_address
        msg["To"] = ", ".join(to)
        msg.attach(MIMEText(html_content, "html"))

        if config.SMTP_PORT == 465:
            context = ssl.create_default_context()
            server = smtplib.SMTP_SSL(config.SMTP_HOST, config.SMTP_PORT, context=context, timeout=30)
        else:
            server = smtplib.SMTP(config.SMTP_HOST, config.SMTP_PORT, timeout=30)
            if config.SMTP_USE_TLS:
                context = ssl.create_default_context()
                server.starttls(context=context)

        if config.SMTP_USERNAME:
            server.login(config.SMTP_USERNAME, config.SMTP_PASSWORD or "")
        server.sendmail(from_address.split("<")[-1].rstrip(">"), to, msg.as_string())
        server.quit()

        logger.info(f"✅ SMTP email sent successfully via {config.SMTP_HOST}")
        return {"id": f"smtp-{datetime.now(timezone.utc).timestamp()}", "success": True}

    except Exception as e:
        logger.error(f"❌ SMTP send failed: {e}")
        raise NotificationError(f"SMTP failed: {str(e)}") from e


def compile_mjml_to_html(mjml_content: str) -> str:
    """Compile MJML template to production-ready HTML"""
    try:
        result = mjml_to_html(mjml_content)
        # mjml_to_html returns a dict-like with 'html' and 'errors' keys
        if isinstance(result, dict):
            if result.get("errors"):
                logger.warning(f"MJML compilation warnings: {result['errors']}")
            return result.get("html", "")
        return str(result)
    except Exception as e:
        logger.error(f"MJML compilation error: {e}")
        raise NotificationError(f"Failed to compile MJML template: {str(e)}") from e


async def send_email(
    to: Union[str, list[str]],
    subject: str,
    mjml_content: str,
    from_address: Optional[str] = None,
) -> dict:
    """
    Send an email using SMTP (if configured) or Resend

    Args:
        to: Recipient email(s)
        subject: Email subject line
        mjml_content: MJML template content (will be compiled to HTML)
        from_address: Optional custom from address

    Returns:
        Send response dict

    Raises:
        NotificationError: when no transport is configured or delivery fails
    """
    html_content = compile_mjml_to_html(mjml_content)

    recipients = [to] if isinstance(to, str) else to
    sender = from_address or config.EMAIL_FROM_ADDRESS

    if config.SMTP_HOST:
        logger.info(f"📧 Sending email via SMTP: {config.SMTP_HOST}")
        return await asyncio.to_thread(send_via_smtp, recipients, subject, html_content, sender)

    if not config.RESEND_API_KEY:
        logger.error("❌ No email service configured - RESEND_API_KEY missing and no SMTP_HOST")
        raise NotificationError("Email service not configured")

    try:
        logger.info(f"📧 Sending email via Resend to: {[mask_email(r) for r in recipients]}")
        email_data = {
            "from": sender,
            "to": recipients,
            "subject": subject,
            "html": html_content,
        }
        response = await asyncio.to_thread(resend.Emails.send, email_data)
        logger.info(f"✅ Email sent successfully via Resend: {response}")
        return response
    except Exception as e:
        logger.error(f"❌ Email send error to {[mask_email(r) for r in recipients]}: {e}")
        raise NotificationError(f"Failed to send email: {str(e)}") from e


async def send_notification(to: Optional[str], subject: str, mjml_content: str) -> bool:
    """
    Best-effort wrapper around send_email.

    Never raises: failures are logged and reported through the return value.
    """
    if not to:
        logger.warning(f"⚠️ Skipping email '{subject}': no recipient configured")
        return False
    try:
        await send_email(to=to, subject=subject, mjml_content=mjml_content)
        return True
    except Exception as e:
        logger.error(f"❌ Notification '{subject}' to {mask_email(to)} failed: {e}")
        return False


# ============================================
# Pre-built Email Templates for Common Events
# ============================================


async def send_booking_confirmation(
    to: str,
    customer_name: str,
    date: str,
    time: str,
    service: str,
    price: float,
    pix_code: Optional[str] = None,
    card_checkout_url: Optional[str] = None,
) -> bool:
    """Confirm a new booking to the customer"""
    mjml_content = booking_confirmation_template(
        customer_name, date, time, service, price, pix_code, card_checkout_url
    )
    return await send_notification(
        to=to,
        subject=f"Agendamento Confirmado - {config.SHOP_NAME} ✅",
        mjml_content=mjml_content,
    )


async def send_new_booking_alert(
    customer_name: str,
    customer_email: str,
    service: str,
    date: str,
    time: str,
    price: float,
) -> bool:
    """Alert the shop owner about a new booking"""
    mjml_content = new_booking_alert_template(customer_name, customer_email, service, date, time, price)
    return await send_notification(
        to=config.SHOP_OWNER_EMAIL,
        subject=f"🔔 NOVO CLIENTE: {customer_name} às {time}",
        mjml_content=mjml_content,
    )


async def send_payment_confirmed(
    to: str,
    customer_name: str,
    date: str,
    time: str,
    service: str,
    price: float,
) -> bool:
    """Tell the customer their payment was approved"""
    mjml_content = payment_confirmed_template(customer_name, date, time, service, price)
    return await send_notification(
        to=to,
        subject=f"Pagamento Confirmado - {config.SHOP_NAME} 💳",
        mjml_content=mjml_content,
    )


async def send_password_reset_email(to: str, reset_link: str) -> bool:
    """Send password reset email"""
    return await send_notification(
        to=to,
        subject=f"Redefinição de Senha - {config.SHOP_NAME}",
        mjml_content=password_reset_template(reset_link),
    )


async def send_welcome_email(to: str, user_name: str) -> bool:
    """Send welcome email to new accounts"""
    return await send_notification(
        to=to,
        subject=f"Bem-vindo à {config.SHOP_NAME}",
        mjml_content=welcome_email_template(user_name),
    )
