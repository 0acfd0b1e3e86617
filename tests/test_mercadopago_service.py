import json

import httpx
import pytest

from barbershop.domain.payments.mercadopago_service import MercadoPagoService
from barbershop.errors import GatewayError


def make_service(handler, access_token="TEST-token"):
    return MercadoPagoService(
        access_token=access_token,
        base_url="https://api.mercadopago.test",
        timeout=5,
        transport=httpx.MockTransport(handler),
    )


async def test_create_pix_charge():
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["method"] = request.method
        seen["path"] = request.url.path
        seen["headers"] = request.headers
        seen["payload"] = json.loads(request.content)
        return httpx.Response(
            201,
            json={
                "id": 123456789,
                "status": "pending",
                "point_of_interaction": {
                    "transaction_data": {"qr_code": "00020126pix", "qr_code_base64": "iVBORw0KGgo="}
                },
            },
        )

    service = make_service(handler)
    charge = await service.create_pix_charge(
        amount=35, description="Corte - 2024-05-01 14:30", payer_email="joao@example.com", payer_name="João"
    )
    await service.aclose()

    assert charge.external_id == "123456789"
    assert charge.qr_text == "00020126pix"
    assert charge.qr_image_base64 == "iVBORw0KGgo="
    assert seen["method"] == "POST"
    assert seen["path"] == "/v1/payments"
    assert seen["headers"]["Authorization"] == "Bearer TEST-token"
    assert seen["headers"]["X-Idempotency-Key"]
    assert seen["payload"]["payment_method_id"] == "pix"
    assert seen["payload"]["transaction_amount"] == 35.0
    assert seen["payload"]["payer"]["email"] == "joao@example.com"


async def test_pix_response_without_qr_code_is_an_error():
    def handler(request):
        return httpx.Response(201, json={"id": 1, "status": "pending"})

    service = make_service(handler)
    with pytest.raises(GatewayError):
        await service.create_pix_charge(35, "Corte", "joao@example.com", "João")


async def test_non_success_status_is_an_error():
    def handler(request):
        return httpx.Response(400, json={"message": "invalid payer"})

    service = make_service(handler)
    with pytest.raises(GatewayError):
        await service.create_pix_charge(35, "Corte", "joao@example.com", "João")


async def test_timeout_is_an_error():
    def handler(request):
        raise httpx.ReadTimeout("timed out", request=request)

    service = make_service(handler)
    with pytest.raises(GatewayError):
        await service.get_payment_status("123")


async def test_missing_access_token_is_an_error():
    def handler(request):
        raise AssertionError("no request should be sent")

    service = make_service(handler, access_token=None)
    assert service.is_available() is False
    with pytest.raises(GatewayError):
        await service.get_payment_status("123")


async def test_create_card_checkout():
    seen = {}

    def handler(request):
        seen["path"] = request.url.path
        seen["payload"] = json.loads(request.content)
        return httpx.Response(
            201, json={"id": "pref-1", "init_point": "https://www.mercadopago.com.br/checkout/v1/redirect?pref_id=pref-1"}
        )

    service = make_service(handler)
    checkout = await service.create_card_checkout(
        amount=50.0,
        description="Corte + Barba",
        payer_email="joao@example.com",
        payer_name="João",
        success_url="http://localhost:5173/pagamento/sucesso",
        failure_url="http://localhost:5173/pagamento/falha",
        pending_url="http://localhost:5173/pagamento/pendente",
        external_reference="123",
    )

    assert checkout.checkout_url.endswith("pref_id=pref-1")
    assert checkout.preference_id == "pref-1"
    assert seen["path"] == "/checkout/preferences"
    assert seen["payload"]["items"][0]["unit_price"] == 50.0
    assert seen["payload"]["back_urls"]["success"] == "http://localhost:5173/pagamento/sucesso"
    assert seen["payload"]["external_reference"] == "123"


async def test_checkout_without_init_point_is_an_error():
    def handler(request):
        return httpx.Response(201, json={"id": "pref-1"})

    service = make_service(handler)
    with pytest.raises(GatewayError):
        await service.create_card_checkout(
            50.0, "Corte", "joao@example.com", "João", "s", "f", "p"
        )


async def test_get_payment_status():
    def handler(request):
        assert request.method == "GET"
        assert request.url.path == "/v1/payments/123"
        assert "X-Idempotency-Key" not in request.headers
        return httpx.Response(200, json={"id": 123, "status": "approved"})

    service = make_service(handler)
    assert await service.get_payment_status("123") == "approved"
