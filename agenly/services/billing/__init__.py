"""Billing service - Stripe."""

from agenly.services.billing.stripe_billing import BillingService

__all__ = ["BillingService"]
