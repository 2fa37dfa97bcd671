import logging

import stripe
from fastapi import APIRouter, Header, HTTPException, Request

from fitplan.schemas.billing import CheckoutSessionResponse, WebhookAck
from fitplan.services import billing_service
from fitplan.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

router = APIRouter(tags=["billing"])


@router.post("/create-checkout-session", response_model=CheckoutSessionResponse)
def create_checkout_session():
    try:
        url = billing_service.create_checkout_session()
    except ConfigurationError as e:
        raise HTTPException(status_code=500, detail=str(e))
    except stripe.StripeError as e:
        logger.error(f"Error creating Stripe Checkout session: {e}")
        raise HTTPException(status_code=500, detail=f"Failed to create checkout session: {e}")
    return {"url": url}


@router.post("/webhook", response_model=WebhookAck)
async def stripe_webhook(request: Request, stripe_signature: str = Header(default=None)):
    # Signature verification needs the raw bytes, not parsed JSON
    payload = await request.body()
    try:
        event = billing_service.construct_event(payload, stripe_signature)
    except ConfigurationError as e:
        logger.error("Stripe webhook secret is not configured.")
        raise HTTPException(status_code=400, detail=f"Webhook Error: {e}")
    except (ValueError, stripe.SignatureVerificationError) as e:
        logger.warning(f"Webhook signature verification failed: {e}")
        raise HTTPException(status_code=400, detail=f"Webhook Error: {e}")

    billing_service.handle_event(event)
    return {"received": True}
