"""
Billing API endpoints: payment webhook and subscription lookup.

The webhook answers 400 on a bad signature (the provider retries) and 200
for every verified event, handled or not.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, Header, HTTPException, Request
from pydantic import BaseModel

from onboard_buddy.api.dependencies import get_workspace
from onboard_buddy.billing import PLAN_FEATURES, Subscription, handle_event, is_premium, verify_signature
from onboard_buddy.billing.models import PlanInfo
from onboard_buddy.config import WEBHOOK_SECRET
from onboard_buddy.errors import WebhookSignatureError
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.observability.telemetry import counter
from onboard_buddy.workspace import Workspace

router = APIRouter(prefix="/api/billing", tags=["billing"])
logger = get_logger(__name__)


class SubscriptionResponse(BaseModel):
    subscription: Subscription
    is_premium: bool
    features: list[str]


@router.get("/plans", response_model=dict[str, PlanInfo])
async def list_plans() -> dict[str, PlanInfo]:
    return PLAN_FEATURES


@router.get("/subscriptions/{user_id}", response_model=SubscriptionResponse)
async def get_subscription(user_id: str, workspace: Workspace = Depends(get_workspace)) -> SubscriptionResponse:
    if workspace.subscriptions is None:
        raise HTTPException(status_code=503, detail="Subscriptions are not configured")
    subscription = workspace.subscriptions.get(user_id)
    if subscription is None:
        raise HTTPException(status_code=404, detail="Subscription not found")
    plan = PLAN_FEATURES.get(subscription.plan)
    return SubscriptionResponse(
        subscription=subscription,
        is_premium=is_premium(subscription),
        features=plan.features if plan else [],
    )


@router.post("/webhook")
async def payment_webhook(
    request: Request,
    stripe_signature: str | None = Header(None, alias="Stripe-Signature"),
    workspace: Workspace = Depends(get_workspace),
) -> dict[str, Any]:
    if workspace.subscriptions is None:
        raise HTTPException(status_code=503, detail="Subscriptions are not configured")

    payload = await request.body()
    secret = getattr(request.app.state, "webhook_secret", WEBHOOK_SECRET)
    try:
        event = verify_signature(payload, stripe_signature, secret)
    except WebhookSignatureError as e:
        logger.warning("Rejected webhook: %s", e)
        counter("webhook.rejected")
        raise HTTPException(status_code=400, detail="Failed to handle webhook") from None

    try:
        updated = handle_event(event, workspace.subscriptions)
    except Exception as e:
        logger.error("Error handling webhook %s: %s", event.get("type"), e)
        raise HTTPException(status_code=400, detail="Failed to handle webhook") from None

    return {"received": True, "updated": updated}
