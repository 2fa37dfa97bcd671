import logging
from typing import Any

import stripe

import config
from fitplan.utils.errors import ConfigurationError

logger = logging.getLogger(__name__)

"""
Billing Service
---------------
Thin relay to Stripe:
1. Creates subscription Checkout Sessions for the configured price.
2. Verifies and dispatches webhook events.
No subscription state is stored locally.
"""


def _configure():
    if not config.STRIPE_SECRET_KEY:
        raise ConfigurationError("Stripe secret key is not configured.")
    stripe.api_key = config.STRIPE_SECRET_KEY


def create_checkout_session(customer_email: str = None) -> str:
    """Returns the hosted Checkout URL for a one-seat subscription."""
    price_id = config.STRIPE_PRICE_ID
    if not price_id:
        raise ConfigurationError("Stripe Price ID is not configured.")
    _configure()

    base_url = config.CLIENT_BASE_URL.rstrip("/")
    params = {
        "payment_method_types": ["card"],
        "mode": "subscription",
        "line_items": [{"price": price_id, "quantity": 1}],
        "success_url": f"{base_url}/payment-success?session_id={{CHECKOUT_SESSION_ID}}",
        "cancel_url": f"{base_url}/payment-cancelled",
    }
    if customer_email:
        params["customer_email"] = customer_email

    session = stripe.checkout.Session.create(**params)
    logger.info(f"Created checkout session {session.id}")
    return session.url


def construct_event(payload: bytes, signature: str) -> Any:
    """Raises ValueError (bad payload) or stripe.SignatureVerificationError (bad signature)."""
    if not config.STRIPE_WEBHOOK_SECRET:
        raise ConfigurationError("Missing webhook secret configuration.")
    return stripe.Webhook.construct_event(payload, signature, config.STRIPE_WEBHOOK_SECRET)


def handle_event(event: Any) -> str:
    """Logs the events we care about. Returns the event type."""
    event_type = event["type"]
    obj = event["data"]["object"]

    if event_type == "checkout.session.completed":
        logger.info(f"Checkout session completed for session ID: {obj.get('id')}")
    elif event_type == "invoice.payment_succeeded":
        logger.info(f"Invoice payment succeeded for invoice ID: {obj.get('id')}")
    elif event_type == "invoice.payment_failed":
        logger.warning(f"Invoice payment failed for invoice ID: {obj.get('id')}")
    else:
        logger.info(f"Unhandled event type {event_type}")
    return event_type
