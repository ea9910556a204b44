"""Stripe billing endpoint."""

from typing import Any

from fastapi import APIRouter
from pydantic import Field

from agenly.api.dependencies import BillingDep
from agenly.api.responses import ok
from agenly.models.deployment import CamelModel

router = APIRouter(tags=["Billing"])


class StripeRequest(CamelModel):
    action: str = Field(..., min_length=1)
    user_id: str | None = None
    price_id: str | None = None
    customer_id: str | None = None


@router.post("/stripe")
async def stripe_action(body: StripeRequest, billing: BillingDep) -> dict[str, Any]:
    """Run one billing action: create-customer, create-subscription or create-checkout-session."""
    data = await billing.handle_action(
        body.action,
        user_id=body.user_id,
        price_id=body.price_id,
        customer_id=body.customer_id,
    )
    return ok(data)
