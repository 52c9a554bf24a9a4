"""
Tests for subscription storage and payment webhook handling.

Validates:
1. Signature verification accepts only fresh, correctly signed payloads
2. Subscription lifecycle events update the linked row
3. Events for unknown customers or unknown types change nothing
"""

from __future__ import annotations

import json
from datetime import UTC, datetime

import pytest

from onboard_buddy.billing import SubscriptionRepository, handle_event, is_premium, verify_signature
from onboard_buddy.billing.webhook import compute_signature
from onboard_buddy.errors import NotFoundError, WebhookSignatureError
from onboard_buddy.observability.telemetry import get_counter

SECRET = "whsec_test"
NOW = 1_736_150_400  # 2025-01-06T08:00:00Z


def _signed(event: dict, timestamp: int = NOW, secret: str = SECRET) -> tuple[bytes, str]:
    payload = json.dumps(event).encode()
    return payload, f"t={timestamp},v1={compute_signature(payload, timestamp, secret)}"


def _subscription_event(event_type: str, **overrides) -> dict:
    subscription = {
        "id": "sub_123",
        "customer": "cus_123",
        "status": "active",
        "cancel_at_period_end": False,
        "current_period_end": 1_738_800_000,
        "items": {"data": [{"price": {"lookup_key": "premium"}}]},
    }
    subscription.update(overrides)
    return {"type": event_type, "data": {"object": subscription}}


@pytest.fixture
def repository(database):
    repository = SubscriptionRepository(database)
    repository.link_customer("user-1", "cus_123")
    return repository


# ============================================================================
# Signature verification
# ============================================================================


def test_valid_signature_returns_event():
    event = {"type": "ping"}
    payload, header = _signed(event)

    assert verify_signature(payload, header, SECRET, now=NOW + 10) == event


def test_any_matching_v1_signature_is_accepted():
    payload, header = _signed({"type": "ping"})

    assert verify_signature(payload, f"t={NOW},v1=deadbeef,{header.split(',')[1]}", SECRET, now=NOW)


@pytest.mark.parametrize(
    ("header_factory", "secret", "now", "message"),
    [
        (lambda h: h, "", NOW, "secret is not configured"),
        (lambda h: None, SECRET, NOW, "Missing signature header"),
        (lambda h: "v1=abc", SECRET, NOW, "Malformed signature header"),
        (lambda h: "t=soon,v1=abc", SECRET, NOW, "Malformed signature timestamp"),
        (lambda h: h, SECRET, NOW + 301, "outside tolerance"),
        (lambda h: h, "whsec_other", NOW, "No matching signature"),
    ],
)
def test_signature_rejections(header_factory, secret, now, message):
    payload, header = _signed({"type": "ping"})

    with pytest.raises(WebhookSignatureError, match=message):
        verify_signature(payload, header_factory(header), secret, now=now)


def test_tampered_payload_is_rejected():
    _, header = _signed({"type": "ping"})

    with pytest.raises(WebhookSignatureError):
        verify_signature(b'{"type": "pong"}', header, SECRET, now=NOW)


# ============================================================================
# Repository
# ============================================================================


def test_ensure_default_is_idempotent(database):
    repository = SubscriptionRepository(database)

    first = repository.ensure_default("user-9")
    second = repository.ensure_default("user-9")

    assert first.plan == second.plan == "free"
    assert first.status == "active"
    assert not is_premium(first)


def test_update_by_customer_rejects_unknown_fields(repository):
    with pytest.raises(ValueError):
        repository.update_by_customer("cus_123", user_id="someone-else")


def test_update_unknown_customer_returns_false(repository):
    assert repository.update_by_customer("cus_missing", status="active") is False


def test_require_raises_for_missing_user(repository):
    with pytest.raises(NotFoundError):
        repository._require("nobody")


# ============================================================================
# Event handling
# ============================================================================


def test_subscription_updated_applies_plan_and_period(repository):
    assert handle_event(_subscription_event("customer.subscription.updated"), repository) is True

    subscription = repository.get("user-1")
    assert subscription.plan == "premium"
    assert subscription.stripe_subscription_id == "sub_123"
    assert subscription.current_period_end == datetime.fromtimestamp(1_738_800_000, UTC)
    assert subscription.cancel_at_period_end is False
    assert is_premium(subscription)
    assert get_counter("webhook.customer.subscription.updated") == 1


def test_trialing_status_is_kept_verbatim(repository):
    handle_event(_subscription_event("customer.subscription.created", status="trialing"), repository)

    subscription = repository.get("user-1")
    assert subscription.status == "trialing"
    assert not is_premium(subscription)


def test_subscription_deleted_cancels(repository):
    handle_event(_subscription_event("customer.subscription.updated", cancel_at_period_end=True), repository)

    assert handle_event(_subscription_event("customer.subscription.deleted"), repository) is True

    subscription = repository.get("user-1")
    assert subscription.status == "canceled"
    assert subscription.current_period_end is None
    assert subscription.cancel_at_period_end is False


def test_unknown_customer_is_ignored(repository):
    event = _subscription_event("customer.subscription.updated", customer="cus_unknown")

    assert handle_event(event, repository) is False
    assert repository.get("user-1").plan == "free"


def test_unrelated_event_type_is_ignored(repository):
    assert handle_event(_subscription_event("invoice.paid"), repository) is False
    assert repository.get("user-1").status == "active"
