"""Tests for the Stripe billing endpoint."""

import pytest
import stripe

from agenly.core.exceptions import BillingError
from agenly.services.billing import BillingService


@pytest.mark.asyncio
async def test_create_customer(client, stripe_client):
    response = await client.post(
        "/api/stripe",
        json={"action": "create-customer", "userId": "jane@example.com"},
    )
    assert response.status_code == 200
    assert response.json()["data"] == {"customerId": "cus_123"}

    params = stripe_client.customers.create.call_args.kwargs["params"]
    assert params == {"email": "jane@example.com", "metadata": {"userId": "jane@example.com"}}


@pytest.mark.asyncio
async def test_create_subscription(client, stripe_client):
    response = await client.post(
        "/api/stripe",
        json={"action": "create-subscription", "priceId": "price_1", "customerId": "cus_123"},
    )
    assert response.status_code == 200
    assert response.json()["data"] == {"subscriptionId": "sub_123", "clientSecret": "pi_secret"}

    params = stripe_client.subscriptions.create.call_args.kwargs["params"]
    assert params["customer"] == "cus_123"
    assert params["items"] == [{"price": "price_1"}]
    assert params["expand"] == ["latest_invoice.payment_intent"]


@pytest.mark.asyncio
async def test_create_subscription_requires_ids(client, stripe_client):
    response = await client.post(
        "/api/stripe",
        json={"action": "create-subscription", "priceId": "price_1"},
    )
    assert response.status_code == 400
    assert response.json()["error"] == "Price ID and customer ID are required"
    stripe_client.subscriptions.create.assert_not_called()


@pytest.mark.asyncio
async def test_create_checkout_session(client, stripe_client):
    response = await client.post(
        "/api/stripe",
        json={"action": "create-checkout-session", "priceId": "price_1", "userId": "user-1"},
    )
    assert response.status_code == 200
    assert response.json()["data"] == {
        "sessionId": "cs_123",
        "url": "https://checkout.stripe.com/c/cs_123",
    }

    params = stripe_client.checkout.sessions.create.call_args.kwargs["params"]
    assert params["mode"] == "subscription"
    assert params["success_url"] == "http://app.test/?success=true"
    assert params["cancel_url"] == "http://app.test/?canceled=true"
    assert params["metadata"] == {"userId": "user-1"}


@pytest.mark.asyncio
async def test_checkout_requires_price(client):
    response = await client.post("/api/stripe", json={"action": "create-checkout-session"})
    assert response.status_code == 400
    assert response.json()["error"] == "Price ID is required"


@pytest.mark.asyncio
async def test_invalid_action(client):
    response = await client.post("/api/stripe", json={"action": "refund-everything"})
    assert response.status_code == 400
    assert response.json()["error"] == "Invalid action"


@pytest.mark.asyncio
async def test_missing_action(client):
    response = await client.post("/api/stripe", json={})
    assert response.status_code == 400
    assert "action" in response.json()["details"]


@pytest.mark.asyncio
async def test_stripe_error_is_generic_500(client, stripe_client):
    stripe_client.customers.create.side_effect = stripe.StripeError("card_declined: secret detail")

    response = await client.post(
        "/api/stripe",
        json={"action": "create-customer", "userId": "user-1"},
    )
    assert response.status_code == 500

    body = response.json()
    assert body["error"] == "Stripe operation failed"
    assert "secret detail" not in response.text


@pytest.mark.asyncio
async def test_missing_secret_key(settings):
    billing = BillingService(settings.model_copy(update={"stripe_secret_key": ""}))

    with pytest.raises(BillingError):
        await billing.create_customer("user-1")
