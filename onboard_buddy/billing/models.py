"""Subscription plans and the per-account subscription record."""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, Field

from onboard_buddy.core.store import utc_now


class Plan(str, Enum):
    FREE = "free"
    PREMIUM = "premium"


class PlanInfo(BaseModel):
    name: str
    price: int
    features: list[str]


PLAN_FEATURES: dict[str, PlanInfo] = {
    Plan.FREE.value: PlanInfo(
        name="Free",
        price=0,
        features=[
            "Basic onboarding template creation",
            "Limited customization options",
            "Preview functionality",
            "Single user access",
        ],
    ),
    Plan.PREMIUM.value: PlanInfo(
        name="Premium",
        price=49,
        features=[
            "Everything in Free, plus:",
            "Full template customization",
            "Multiple templates",
            "Admin dashboard",
            "Secure sharing with access codes",
            "Email integration",
            "Progress tracking",
            "Template sharing between admins",
            "Real-time updates",
            "Comment system",
        ],
    ),
}


class Subscription(BaseModel):
    """
    Subscription row, written by the payment webhook and read by the app.

    ``plan`` and ``status`` are kept as the payment provider reports them
    (e.g. "trialing", "past_due"), not narrowed to an enum.
    """

    user_id: str
    plan: str = Plan.FREE.value
    status: str = "active"
    stripe_customer_id: str | None = None
    stripe_subscription_id: str | None = None
    current_period_end: datetime | None = None
    cancel_at_period_end: bool = False
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


def is_premium(subscription: Subscription | None) -> bool:
    return (
        subscription is not None
        and subscription.plan == Plan.PREMIUM.value
        and subscription.status == "active"
    )
