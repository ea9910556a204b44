"""Stripe billing: customers, subscriptions and checkout sessions."""

import asyncio
from typing import Any

import stripe
import structlog

from agenly.core.config import Settings
from agenly.core.exceptions import BillingError, ValidationFailed

logger = structlog.get_logger()

STRIPE_FAILED = "Stripe operation failed"


class BillingService:
    """Thin wrapper around the Stripe client.

    The Stripe SDK is synchronous, so calls run in a worker thread.
    """

    ACTIONS = ("create-customer", "create-subscription", "create-checkout-session")

    def __init__(self, settings: Settings, client: stripe.StripeClient | None = None) -> None:
        self.settings = settings
        self._client = client

    def _get_client(self) -> stripe.StripeClient:
        if self._client is None:
            if not self.settings.stripe_secret_key:
                logger.error("STRIPE_SECRET_KEY is not configured")
                raise BillingError(STRIPE_FAILED)
            self._client = stripe.StripeClient(self.settings.stripe_secret_key)
        return self._client

    async def handle_action(
        self,
        action: str,
        user_id: str | None = None,
        price_id: str | None = None,
        customer_id: str | None = None,
    ) -> dict[str, Any]:
        """Dispatch one POST /api/stripe action.

        Raises:
            ValidationFailed: unknown action or missing ids
            BillingError: Stripe rejected the call
        """
        if action == "create-customer":
            return await self.create_customer(user_id or "")
        if action == "create-subscription":
            if not price_id or not customer_id:
                raise ValidationFailed("Price ID and customer ID are required")
            return await self.create_subscription(customer_id, price_id)
        if action == "create-checkout-session":
            if not price_id:
                raise ValidationFailed("Price ID is required")
            return await self.create_checkout_session(price_id, user_id or "")
        raise ValidationFailed("Invalid action", details={"action": action})

    async def create_customer(self, user_id: str) -> dict[str, Any]:
        customer = await self._call(
            "create-customer",
            lambda client: client.customers.create(
                params={"email": user_id, "metadata": {"userId": user_id}}
            ),
        )
        logger.info("Stripe customer created", customer_id=customer.id, user_id=user_id)
        return {"customerId": customer.id}

    async def create_subscription(self, customer_id: str, price_id: str) -> dict[str, Any]:
        subscription = await self._call(
            "create-subscription",
            lambda client: client.subscriptions.create(
                params={
                    "customer": customer_id,
                    "items": [{"price": price_id}],
                    "payment_behavior": "default_incomplete",
                    "payment_settings": {"save_default_payment_method": "on_subscription"},
                    "expand": ["latest_invoice.payment_intent"],
                }
            ),
        )
        logger.info("Stripe subscription created", subscription_id=subscription.id)
        return {
            "subscriptionId": subscription.id,
            "clientSecret": self._client_secret(subscription),
        }

    async def create_checkout_session(self, price_id: str, user_id: str) -> dict[str, Any]:
        app_url = self.settings.app_url
        session = await self._call(
            "create-checkout-session",
            lambda client: client.checkout.sessions.create(
                params={
                    "mode": "subscription",
                    "payment_method_types": ["card"],
                    "line_items": [{"price": price_id, "quantity": 1}],
                    "success_url": f"{app_url}/?success=true",
                    "cancel_url": f"{app_url}/?canceled=true",
                    "metadata": {"userId": user_id},
                }
            ),
        )
        logger.info("Stripe checkout session created", session_id=session.id)
        return {"sessionId": session.id, "url": session.url}

    async def _call(self, action: str, fn):
        client = self._get_client()
        try:
            return await asyncio.to_thread(fn, client)
        except stripe.StripeError as e:
            logger.error("Stripe error", action=action, error=str(e))
            raise BillingError(STRIPE_FAILED, action=action) from e

    @staticmethod
    def _client_secret(subscription: Any) -> str | None:
        invoice = getattr(subscription, "latest_invoice", None)
        payment_intent = getattr(invoice, "payment_intent", None) if invoice else None
        return getattr(payment_intent, "client_secret", None) if payment_intent else None
