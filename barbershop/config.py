import logging
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Load .env from project root
env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(dotenv_path=env_path)

DATABASE_URL = os.getenv("DATABASE_URL")

# Mercado Pago Configuration
MERCADO_PAGO_ACCESS_TOKEN = os.getenv("MERCADO_PAGO_ACCESS_TOKEN")
MERCADO_PAGO_API_URL = os.getenv("MERCADO_PAGO_API_URL", "https://api.mercadopago.com").rstrip("/")
PAYMENT_GATEWAY_TIMEOUT = float(os.getenv("PAYMENT_GATEWAY_TIMEOUT", "15"))
# When enabled every booking also gets a hosted card checkout link next to the PIX charge
CARD_CHECKOUT_ENABLED = os.getenv("CARD_CHECKOUT_ENABLED", "true").lower() == "true"

# Frontend base URL for CORS, reset links and checkout redirects
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173").rstrip("/")
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.getenv("ALLOWED_ORIGINS", FRONTEND_URL).split(",")
    if origin.strip()
]

# Resend Email Configuration
RESEND_API_KEY = os.getenv("RESEND_API_KEY")
EMAIL_FROM_ADDRESS = os.getenv(
    "EMAIL_FROM_ADDRESS", "Barbearia do Rod <rdbarbercontato@gmail.com>"
)
SHOP_OWNER_EMAIL = os.getenv("SHOP_OWNER_EMAIL")
SHOP_NAME = os.getenv("SHOP_NAME", "Barbearia do Rod")

# Optional SMTP transport (takes priority over Resend when SMTP_HOST is set)
SMTP_HOST = os.getenv("SMTP_HOST")
SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
SMTP_USERNAME = os.getenv("SMTP_USERNAME")
SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"

# Password reset
RESET_TOKEN_TTL_MINUTES = int(os.getenv("RESET_TOKEN_TTL_MINUTES", "60"))

# Rate limiting / security
REDIS_URL = os.getenv("REDIS_URL")
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
SECURITY_HEADERS_ENABLED = os.getenv("SECURITY_HEADERS_ENABLED", "true").lower() == "true"

PORT = int(os.getenv("PORT", "3001"))


def validate_required_settings() -> None:
    """Exit the process when the database or payment gateway is not configured"""
    missing = [
        name
        for name, value in (
            ("DATABASE_URL", DATABASE_URL),
            ("MERCADO_PAGO_ACCESS_TOKEN", MERCADO_PAGO_ACCESS_TOKEN),
        )
        if not value
    ]
    if missing:
        logger.error(f"❌ Missing required configuration: {', '.join(missing)}")
        sys.exit(1)
