"""Mercado Pago service - Integration with the Mercado Pago REST API"""

import logging
import uuid
from typing import Optional

import httpx

from ...config import MERCADO_PAGO_ACCESS_TOKEN, MERCADO_PAGO_API_URL, PAYMENT_GATEWAY_TIMEOUT
from ...errors import GatewayError
from .schemas import CardCheckout, PixCharge

logger = logging.getLogger(__name__)


class MercadoPagoService:
    """Service for Mercado Pago API operations: PIX charges, card checkouts and status lookups"""

    def __init__(
        self,
        access_token: Optional[str] = MERCADO_PAGO_ACCESS_TOKEN,
        base_url: str = MERCADO_PAGO_API_URL,
        timeout: float = PAYMENT_GATEWAY_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.access_token = access_token
        self.client = httpx.AsyncClient(
            base_url=base_url,
            timeout=timeout,
            transport=transport,
            headers={"Content-Type": "application/json"},
        )

        if not self.access_token:
            logger.warning(
                "MERCADO_PAGO_ACCESS_TOKEN not set; payment endpoints will fail until configured"
            )
        else:
            logger.info(f"Mercado Pago client initialized (base_url={base_url})")

    def is_available(self) -> bool:
        """Check if the Mercado Pago client has credentials"""
        return bool(self.access_token)

    async def aclose(self) -> None:
        await self.client.aclose()

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> dict:
        """Perform an authenticated call and return the decoded JSON body"""
        if not self.is_available():
            raise GatewayError("Mercado Pago client not configured")

        headers = {"Authorization": f"Bearer {self.access_token}"}
        if method == "POST":
            # Lets Mercado Pago deduplicate a retried POST
            headers["X-Idempotency-Key"] = str(uuid.uuid4())

        try:
            response = await self.client.request(method, path, json=json, headers=headers)
        except httpx.TimeoutException as e:
            logger.error(f"❌ Mercado Pago timeout on {method} {path}: {e}")
            raise GatewayError("Tempo esgotado ao contatar o gateway de pagamento.") from e
        except httpx.HTTPError as e:
            logger.error(f"❌ Mercado Pago network error on {method} {path}: {e}")
            raise GatewayError() from e

        if response.status_code not in (200, 201):
            logger.error(
                f"❌ Mercado Pago {method} {path} failed: {response.status_code} {response.text[:300]}"
            )
            raise GatewayError()

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"❌ Mercado Pago returned a non-JSON body for {method} {path}")
            raise GatewayError() from e

    async def create_pix_charge(
        self,
        amount: float,
        description: str,
        payer_email: str,
        payer_name: str,
    ) -> PixCharge:
        """Create a PIX payment and return its id and QR code artifacts"""
        payload = {
            "transaction_amount": round(float(amount), 2),
            "description": description,
            "payment_method_id": "pix",
            "payer": {"email": payer_email, "first_name": payer_name},
        }
        data = await self._request("POST", "/v1/payments", json=payload)

        transaction_data = (data.get("point_of_interaction") or {}).get("transaction_data") or {}
        payment_id = data.get("id")
        qr_text = transaction_data.get("qr_code")
        qr_image = transaction_data.get("qr_code_base64")
        if payment_id is None or not qr_text or not qr_image:
            logger.error(f"❌ PIX response missing fields (id={payment_id}, status={data.get('status')})")
            raise GatewayError("Falha ao gerar o PIX.")

        logger.info(f"💳 PIX charge created: {payment_id} ({data.get('status')})")
        return PixCharge(external_id=str(payment_id), qr_text=qr_text, qr_image_base64=qr_image)

    async def create_card_checkout(
        self,
        amount: float,
        description: str,
        payer_email: str,
        payer_name: str,
        success_url: str,
        failure_url: str,
        pending_url: str,
        external_reference: Optional[str] = None,
    ) -> CardCheckout:
        """Create a checkout preference and return the hosted checkout link"""
        payload = {
            "items": [
                {
                    "title": description,
                    "quantity": 1,
                    "unit_price": round(float(amount), 2),
                    "currency_id": "BRL",
                }
            ],
            "payer": {"email": payer_email, "name": payer_name},
            "back_urls": {
                "success": success_url,
                "failure": failure_url,
                "pending": pending_url,
            },
            "auto_return": "approved",
            "payment_methods": {"excluded_payment_types": [{"id": "ticket"}]},
        }
        if external_reference:
            payload["external_reference"] = external_reference

        data = await self._request("POST", "/checkout/preferences", json=payload)

        checkout_url = data.get("init_point")
        if not checkout_url:
            logger.error(f"❌ Checkout preference {data.get('id')} has no init_point")
            raise GatewayError("Falha ao gerar o link de pagamento com cartão.")

        logger.info(f"💳 Card checkout created: {data.get('id')}")
        return CardCheckout(checkout_url=checkout_url, preference_id=str(data.get("id") or ""))

    async def get_payment_status(self, external_id: str) -> str:
        """Get the raw gateway status of a payment (pending, approved, rejected, ...)"""
        data = await self._request("GET", f"/v1/payments/{external_id}")
        status = data.get("status")
        if not status:
            logger.error(f"❌ Payment {external_id} lookup returned no status")
            raise GatewayError()
        return status


# Global service instance, closed in the application lifespan
mercadopago_service = MercadoPagoService()


def get_payment_gateway() -> MercadoPagoService:
    """Dependency injection for the payment gateway"""
    return mercadopago_service
