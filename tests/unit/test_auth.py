"""
Tests for the auth provider client and the auth store.

The provider is exercised through ``httpx.MockTransport`` so request shapes
(paths, headers, bodies) are asserted without a live auth service.
"""

from __future__ import annotations

import json

import httpx
import pytest

from onboard_buddy.auth import AuthStore, HttpAuthProvider, validate_signup
from onboard_buddy.auth.store import CONNECTION_FAILED
from onboard_buddy.billing import SubscriptionRepository
from onboard_buddy.errors import AuthError, SignupValidationError

USER = {
    "id": "user-1",
    "email": "ada@example.com",
    "user_metadata": {"name": "Ada", "company": "Analytical", "start_date": "2025-01-13"},
}


class AuthService:
    """Minimal GoTrue-like handler for MockTransport."""

    def __init__(self, healthy: bool = True):
        self.healthy = healthy
        self.requests: list[httpx.Request] = []
        self.signup_error: str | None = None

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if path == "/auth/v1/health":
            return httpx.Response(200 if self.healthy else 503, json={})
        if path == "/auth/v1/token":
            body = json.loads(request.content)
            if body["password"] != "correct-horse":
                return httpx.Response(400, json={"error_description": "Invalid login credentials"})
            return httpx.Response(200, json={"access_token": "tok-1", "user": USER})
        if path == "/auth/v1/signup":
            if self.signup_error:
                return httpx.Response(422, json={"msg": self.signup_error})
            body = json.loads(request.content)
            user = {"id": "user-2", "email": body["email"], "user_metadata": body["data"]}
            return httpx.Response(200, json={"access_token": "tok-2", "user": user})
        if path == "/auth/v1/logout":
            return httpx.Response(204)
        if path == "/auth/v1/user":
            if request.headers.get("Authorization") != "Bearer tok-1":
                return httpx.Response(401, json={"msg": "invalid JWT"})
            return httpx.Response(200, json=USER)
        return httpx.Response(404)

    def paths(self) -> list[str]:
        return [r.url.path for r in self.requests]


@pytest.fixture
def service():
    return AuthService()


@pytest.fixture
def provider(service):
    provider = HttpAuthProvider(
        base_url="https://auth.test", api_key="anon-key", transport=httpx.MockTransport(service)
    )
    yield provider
    provider.close()


@pytest.fixture
def auth(provider, clock):
    return AuthStore(provider, clock=clock, super_admin_emails=["boss@example.com"])


# ============================================================================
# Provider client
# ============================================================================


def test_requests_carry_api_key(provider, service):
    provider.health()

    assert service.requests[0].headers["apikey"] == "anon-key"


def test_sign_in_error_message_is_extracted(provider):
    with pytest.raises(AuthError, match="Invalid login credentials"):
        provider.sign_in("ada@example.com", "wrong")


def test_get_user_is_cached(provider, service):
    provider.get_user("tok-1")
    provider.get_user("tok-1")

    assert service.paths().count("/auth/v1/user") == 1


def test_network_failure_becomes_auth_error():
    def offline(request):
        raise httpx.ConnectError("connection refused", request=request)

    provider = HttpAuthProvider(base_url="https://auth.test", transport=httpx.MockTransport(offline))

    assert provider.health() is False
    with pytest.raises(AuthError, match="Network error"):
        provider.sign_in("a@b.co", "x")


# ============================================================================
# Store
# ============================================================================


def test_login_success(auth, service):
    user = auth.login("ada@example.com", "correct-horse")

    assert auth.is_authenticated
    assert user.name == "Ada"
    assert user.roles == ["new_hire"]
    assert auth.access_token == "tok-1"
    assert service.paths() == ["/auth/v1/health", "/auth/v1/token"]


def test_login_failure_records_error(auth):
    with pytest.raises(AuthError):
        auth.login("ada@example.com", "wrong")

    assert not auth.is_authenticated
    assert auth.last_error == "Invalid login credentials"

    auth.clear_error()
    assert auth.last_error is None


def test_login_when_service_down(service, provider, clock):
    service.healthy = False
    auth = AuthStore(provider, clock=clock, super_admin_emails=[])

    with pytest.raises(AuthError, match="Database connection failed"):
        auth.login("ada@example.com", "correct-horse")

    assert auth.last_error == CONNECTION_FAILED


def test_super_admin_skips_provider(auth, service):
    user = auth.login("Boss@Example.com", "anything")

    assert service.requests == []
    assert user.id == "super-admin"
    assert auth.has_permission("employees:delete")
    assert auth.has_role("hr")


def test_regular_user_permissions(auth):
    auth.login("ada@example.com", "correct-horse")

    assert auth.has_role("new_hire")
    assert not auth.has_role("super_admin")
    assert not auth.has_permission("employees:delete")


@pytest.mark.parametrize(
    ("form", "errors"),
    [
        (("", "password1", "Ada", "Co"), ["All fields are required"]),
        (("ada@example.com", "short", "Ada", "Co"), ["Password must be at least 8 characters long"]),
        (
            ("ada", "short", "Ada", "Co"),
            ["Password must be at least 8 characters long", "Please enter a valid email address"],
        ),
    ],
)
def test_validate_signup(form, errors):
    assert validate_signup(*form) == errors


def test_signup_creates_free_subscription(provider, database, clock):
    subscriptions = SubscriptionRepository(database)
    auth = AuthStore(provider, subscriptions=subscriptions, clock=clock, super_admin_emails=[])

    user = auth.signup("grace@example.com", "password123", "Grace", "Navy")

    assert user.id == "user-2"
    assert user.company == "Navy"
    assert user.start_date == "2025-01-06"
    assert subscriptions.get("user-2").plan == "free"


def test_signup_invalid_form_never_calls_provider(auth, service):
    with pytest.raises(SignupValidationError):
        auth.signup("grace@example.com", "short", "Grace", "Navy")

    assert service.requests == []
    assert auth.last_error == "Password must be at least 8 characters long"


def test_signup_provider_error_is_made_friendly(auth, service):
    service.signup_error = "User already registered"

    with pytest.raises(AuthError, match="already exists"):
        auth.signup("ada@example.com", "password123", "Ada", "Co")


def test_logout_clears_session_and_calls_provider(auth, service):
    auth.login("ada@example.com", "correct-horse")

    auth.logout()

    assert not auth.is_authenticated
    assert auth.access_token is None
    logout = service.requests[-1]
    assert logout.url.path == "/auth/v1/logout"
    assert logout.headers["Authorization"] == "Bearer tok-1"


def test_restore_session(auth):
    assert auth.restore_session("tok-1").email == "ada@example.com"

    assert auth.restore_session("stale") is None
    assert not auth.is_authenticated


def test_session_persists_across_instances(provider, snapshots, clock):
    auth = AuthStore(provider, snapshots=snapshots, clock=clock, super_admin_emails=[])
    auth.login("ada@example.com", "correct-horse")

    restored = AuthStore(provider, snapshots=snapshots, clock=clock, super_admin_emails=[])
    restored.hydrate()

    assert restored.user.id == "user-1"
    assert restored.access_token == "tok-1"
