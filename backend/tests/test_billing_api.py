from unittest.mock import MagicMock, patch

import pytest
import stripe

import config


@pytest.fixture()
def stripe_config():
    with patch.object(config, "STRIPE_SECRET_KEY", "sk_test_123"), \
            patch.object(config, "STRIPE_PRICE_ID", "price_123"), \
            patch.object(config, "STRIPE_WEBHOOK_SECRET", "whsec_123"), \
            patch.object(config, "CLIENT_BASE_URL", "http://localhost:5173"):
        yield


def test_checkout_session_returns_url(client, stripe_config):
    session = MagicMock(id="cs_test_1", url="https://checkout.stripe.com/c/pay/cs_test_1")
    with patch("stripe.checkout.Session.create", return_value=session) as create:
        response = client.post("/create-checkout-session")

    assert response.status_code == 200
    assert response.json() == {"url": session.url}
    kwargs = create.call_args.kwargs
    assert kwargs["mode"] == "subscription"
    assert kwargs["line_items"] == [{"price": "price_123", "quantity": 1}]
    assert kwargs["success_url"].startswith("http://localhost:5173/payment-success")
    assert kwargs["cancel_url"] == "http://localhost:5173/payment-cancelled"


def test_checkout_without_price_id(client, stripe_config):
    with patch.object(config, "STRIPE_PRICE_ID", None):
        response = client.post("/create-checkout-session")
    assert response.status_code == 500
    assert response.json()["detail"] == "Stripe Price ID is not configured."


def test_checkout_stripe_failure(client, stripe_config):
    with patch("stripe.checkout.Session.create", side_effect=stripe.StripeError("card network down")):
        response = client.post("/create-checkout-session")
    assert response.status_code == 500
    assert "card network down" in response.json()["detail"]


def test_webhook_acknowledges_verified_event(client, stripe_config):
    event = {"type": "checkout.session.completed", "data": {"object": {"id": "cs_test_1"}}}
    with patch("stripe.Webhook.construct_event", return_value=event) as construct:
        response = client.post("/webhook", content=b'{"id": "evt_1"}', headers={"Stripe-Signature": "t=1,v1=abc"})

    assert response.status_code == 200
    assert response.json() == {"received": True}
    payload, signature, secret = construct.call_args.args
    assert payload == b'{"id": "evt_1"}'
    assert signature == "t=1,v1=abc"
    assert secret == "whsec_123"


def test_webhook_bad_signature(client, stripe_config):
    error = stripe.SignatureVerificationError("No signatures found", "t=1,v1=abc")
    with patch("stripe.Webhook.construct_event", side_effect=error):
        response = client.post("/webhook", content=b"{}", headers={"Stripe-Signature": "t=1,v1=abc"})
    assert response.status_code == 400
    assert response.json()["detail"].startswith("Webhook Error:")


def test_webhook_without_secret(client, stripe_config):
    with patch.object(config, "STRIPE_WEBHOOK_SECRET", None):
        response = client.post("/webhook", content=b"{}", headers={"Stripe-Signature": "sig"})
    assert response.status_code == 400
    assert "webhook secret" in response.json()["detail"]
