"""
Database schema for Onboard Buddy.

Store snapshots are opaque versioned JSON blobs keyed by store name.
Subscriptions are a real table because the billing webhook updates them out
of band, keyed by Stripe customer id.
"""

from __future__ import annotations

SCHEMA_SQL = """
    CREATE TABLE IF NOT EXISTS store_snapshots (
        name TEXT PRIMARY KEY,
        version INTEGER NOT NULL,
        state TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE TABLE IF NOT EXISTS subscriptions (
        user_id TEXT PRIMARY KEY,
        plan TEXT NOT NULL DEFAULT 'free',
        status TEXT NOT NULL DEFAULT 'active',
        stripe_customer_id TEXT UNIQUE,
        stripe_subscription_id TEXT,
        current_period_end TEXT,
        cancel_at_period_end INTEGER NOT NULL DEFAULT 0,
        created_at TEXT NOT NULL,
        updated_at TEXT NOT NULL
    );

    CREATE INDEX IF NOT EXISTS idx_subscriptions_customer
        ON subscriptions(stripe_customer_id);
"""
