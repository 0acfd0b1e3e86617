"""Payment domain schemas - gateway results"""

from pydantic import BaseModel


class PixCharge(BaseModel):
    """A PIX charge created at the gateway"""

    external_id: str
    qr_text: str
    qr_image_base64: str


class CardCheckout(BaseModel):
    """A hosted card checkout link"""

    checkout_url: str
    preference_id: str = ""
