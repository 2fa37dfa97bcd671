from pydantic import BaseModel


class CheckoutSessionResponse(BaseModel):
    url: str


class WebhookAck(BaseModel):
    received: bool = True
