"""
Payment provider webhook handling (Stripe event format).

Only subscription lifecycle events are acted on. Events for customers that
have no linked subscription row, and event types we do not know, are
acknowledged and ignored.
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from datetime import UTC, datetime
from typing import Any

from onboard_buddy.billing.repository import SubscriptionRepository
from onboard_buddy.config import WEBHOOK_TOLERANCE_SECONDS
from onboard_buddy.errors import WebhookSignatureError
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.observability.telemetry import counter, log_event

logger = get_logger(__name__)

SUBSCRIPTION_UPSERT_EVENTS = {"customer.subscription.created", "customer.subscription.updated"}
SUBSCRIPTION_DELETED_EVENT = "customer.subscription.deleted"


def compute_signature(payload: bytes, timestamp: int, secret: str) -> str:
    signed = f"{timestamp}.".encode() + payload
    return hmac.new(secret.encode(), signed, hashlib.sha256).hexdigest()


def verify_signature(
    payload: bytes,
    header: str | None,
    secret: str,
    tolerance: int = WEBHOOK_TOLERANCE_SECONDS,
    now: float | None = None,
) -> dict[str, Any]:
    """
    Verify a ``t=<ts>,v1=<sig>[,v1=<sig>...]`` signature header and parse the event.

    Returns:
        The decoded event

    Raises:
        WebhookSignatureError: Missing/malformed header, stale timestamp,
            no matching signature, or a body that is not JSON
    """
    if not secret:
        raise WebhookSignatureError("Webhook secret is not configured")
    if not header:
        raise WebhookSignatureError("Missing signature header")

    timestamp: int | None = None
    signatures: list[str] = []
    for part in header.split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                raise WebhookSignatureError("Malformed signature timestamp") from None
        elif key == "v1":
            signatures.append(value)

    if timestamp is None or not signatures:
        raise WebhookSignatureError("Malformed signature header")

    current = time.time() if now is None else now
    if abs(current - timestamp) > tolerance:
        raise WebhookSignatureError("Signature timestamp outside tolerance")

    expected = compute_signature(payload, timestamp, secret)
    if not any(hmac.compare_digest(expected, candidate) for candidate in signatures):
        raise WebhookSignatureError("No matching signature")

    try:
        return json.loads(payload)
    except ValueError:
        raise WebhookSignatureError("Payload is not valid JSON") from None


def _plan_from(subscription: dict[str, Any]) -> str | None:
    items = subscription.get("items", {}).get("data") or []
    if not items:
        return None
    return items[0].get("price", {}).get("lookup_key")


def handle_event(event: dict[str, Any], repository: SubscriptionRepository) -> bool:
    """
    Apply a verified event to the subscriptions table.

    Returns:
        True if a subscription row was changed
    """
    event_type = event.get("type", "")
    subscription = event.get("data", {}).get("object", {})
    customer_id = subscription.get("customer")
    counter(f"webhook.{event_type or 'unknown'}")

    if not customer_id or (
        event_type not in SUBSCRIPTION_UPSERT_EVENTS and event_type != SUBSCRIPTION_DELETED_EVENT
    ):
        logger.info("Ignoring webhook event %s", event_type or "<untyped>")
        return False

    if event_type in SUBSCRIPTION_UPSERT_EVENTS:
        if repository.get_by_customer(customer_id) is None:
            logger.info("Ignoring %s for unknown customer %s", event_type, customer_id)
            return False

        fields: dict[str, Any] = {
            "stripe_subscription_id": subscription.get("id"),
            "status": subscription.get("status"),
            "cancel_at_period_end": bool(subscription.get("cancel_at_period_end")),
        }
        plan = _plan_from(subscription)
        if plan:
            fields["plan"] = plan
        period_end = subscription.get("current_period_end")
        if period_end:
            fields["current_period_end"] = datetime.fromtimestamp(int(period_end), UTC)
        updated = repository.update_by_customer(customer_id, **fields)
    else:
        updated = repository.update_by_customer(
            customer_id,
            status="canceled",
            current_period_end=None,
            cancel_at_period_end=False,
        )

    if updated:
        log_event("subscription.updated", customer=customer_id, event=event_type)
    return updated
