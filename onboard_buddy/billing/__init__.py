"""
Billing - subscription records kept current by the payment webhook.
"""

from onboard_buddy.billing.models import PLAN_FEATURES, Plan, Subscription, is_premium
from onboard_buddy.billing.repository import SubscriptionRepository
from onboard_buddy.billing.webhook import handle_event, verify_signature

__all__ = [
    "PLAN_FEATURES",
    "Plan",
    "Subscription",
    "SubscriptionRepository",
    "handle_event",
    "is_premium",
    "verify_signature",
]
