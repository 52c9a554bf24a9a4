"""
Auth Store - the signed-in user and session.

Provider failures on login/signup are surfaced (the user is waiting on
them) and recorded in ``last_error``; logout always clears the local
session even when the provider call fails.
"""

from __future__ import annotations

import re
from typing import Any

from onboard_buddy.auth.models import ALL_PERMISSIONS, NEW_HIRE_ROLE, SUPER_ADMIN_ROLE, User
from onboard_buddy.auth.provider import AuthProvider
from onboard_buddy.billing.repository import SubscriptionRepository
from onboard_buddy.config import SUPER_ADMIN_EMAILS
from onboard_buddy.core.store import Clock, Store, utc_now
from onboard_buddy.errors import AuthError, SignupValidationError
from onboard_buddy.infrastructure.snapshots import SnapshotStore
from onboard_buddy.observability.logging import get_logger
from onboard_buddy.observability.telemetry import log_event

logger = get_logger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
CONNECTION_FAILED = "Database connection failed. Please check your internet connection and try again."

# Provider message fragment -> message shown to the user
_SIGNUP_ERRORS = [
    ("User already registered", "An account with this email already exists. Please try logging in instead."),
    ("Invalid email", "Please enter a valid email address."),
    ("Password", "Password must be at least 8 characters long."),
    ("network", "Network error. Please check your internet connection and try again."),
]


def validate_signup(email: str, password: str, name: str, company: str) -> list[str]:
    if not email or not password or not name or not company:
        return ["All fields are required"]
    errors: list[str] = []
    if len(password) < 8:
        errors.append("Password must be at least 8 characters long")
    if not EMAIL_RE.match(email):
        errors.append("Please enter a valid email address")
    return errors


class AuthStore(Store):
    name = "auth-storage"
    version = 1

    def __init__(
        self,
        provider: AuthProvider,
        subscriptions: SubscriptionRepository | None = None,
        snapshots: SnapshotStore | None = None,
        clock: Clock = utc_now,
        super_admin_emails: list[str] | None = None,
    ):
        super().__init__(snapshots, clock)
        self._provider = provider
        self._subscriptions = subscriptions
        self._super_admins = [
            e.lower() for e in (SUPER_ADMIN_EMAILS if super_admin_emails is None else super_admin_emails)
        ]
        self.user: User | None = None
        self.access_token: str | None = None
        self.last_error: str | None = None

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    def has_permission(self, permission: str) -> bool:
        return self.user is not None and self.user.has_permission(permission)

    def has_role(self, role: str) -> bool:
        return self.user is not None and self.user.has_role(role)

    def clear_error(self) -> None:
        self.last_error = None
        self._commit()

    def _today(self) -> str:
        return self._clock().date().isoformat()

    def _user_from(self, payload: dict[str, Any], name: str = "", company: str = "") -> User:
        metadata = payload.get("user_metadata") or {}
        return User(
            id=payload["id"],
            email=payload.get("email", ""),
            name=metadata.get("name") or name,
            company=metadata.get("company") or company,
            start_date=metadata.get("start_date") or metadata.get("startDate") or self._today(),
            roles=[NEW_HIRE_ROLE],
            permissions=[],
        )

    def _fail(self, message: str) -> None:
        self.user = None
        self.access_token = None
        self.last_error = message
        self._commit()

    def _signed_in(self, user: User, access_token: str | None) -> User:
        self.user = user
        self.access_token = access_token
        self.last_error = None
        self._commit()
        return user

    def login(self, email: str, password: str) -> User:
        """
        Sign in.

        Raises:
            AuthError: Provider unreachable or credentials rejected
        """
        self.last_error = None

        if email.lower() in self._super_admins:
            log_event("auth.super_admin_login", email=email)
            return self._signed_in(
                User(
                    id="super-admin",
                    email=email,
                    name="Super Admin",
                    start_date=self._today(),
                    roles=[SUPER_ADMIN_ROLE],
                    permissions=[ALL_PERMISSIONS],
                ),
                None,
            )

        if not self._provider.health():
            self._fail(CONNECTION_FAILED)
            raise AuthError(CONNECTION_FAILED)

        try:
            session = self._provider.sign_in(email, password)
        except AuthError as e:
            logger.warning("Login failed for %s: %s", email, e)
            self._fail(str(e) or "Login failed")
            raise

        user = self._user_from(session["user"])
        logger.info("Login successful for %s", user.email)
        return self._signed_in(user, session.get("access_token"))

    def signup(self, email: str, password: str, name: str, company: str) -> User:
        """
        Create an account and sign in.

        Raises:
            SignupValidationError: Form is incomplete or invalid
            AuthError: Provider unreachable or refused the signup

        Side Effects:
            - Creates a free subscription row; failure there is logged only
        """
        self.last_error = None

        errors = validate_signup(email, password, name, company)
        if errors:
            error = SignupValidationError(errors)
            self._fail(str(error))
            raise error

        if not self._provider.health():
            self._fail(CONNECTION_FAILED)
            raise AuthError(CONNECTION_FAILED)

        try:
            response = self._provider.sign_up(
                email, password, {"name": name, "company": company, "start_date": self._today()}
            )
        except AuthError as e:
            message = next(
                (friendly for fragment, friendly in _SIGNUP_ERRORS if fragment in str(e)),
                f"Account creation failed: {e}",
            )
            logger.warning("Signup failed for %s: %s", email, e)
            self._fail(message)
            raise AuthError(message) from e

        payload = response.get("user") or (response if "id" in response else None)
        if not payload:
            message = "Account creation failed. No user data returned."
            self._fail(message)
            raise AuthError(message)

        user = self._user_from(payload, name=name, company=company)

        if self._subscriptions is not None:
            try:
                self._subscriptions.ensure_default(user.id)
            except Exception as e:
                logger.warning("Failed to create subscription record for %s: %s", user.id, e)

        log_event("auth.signup", user_id=user.id)
        return self._signed_in(user, response.get("access_token"))

    def logout(self) -> None:
        """
        Sign out locally, then tell the provider.

        Raises:
            AuthError: Provider rejected the logout (local session is still cleared)
        """
        token = self.access_token
        self.user = None
        self.access_token = None
        self.last_error = None
        self._commit()

        if token is None:
            return
        try:
            self._provider.sign_out(token)
        except AuthError as e:
            logger.error("Error signing out: %s", e)
            raise

    def restore_session(self, access_token: str | None = None) -> User | None:
        """
        Re-validate a persisted (or given) access token with the provider.

        Returns:
            The user, or None if there is no valid session
        """
        token = access_token or self.access_token
        if token is None:
            return self.user

        try:
            payload = self._provider.get_user(token)
        except AuthError as e:
            logger.info("Stored session rejected: %s", e)
            self._fail(str(e))
            return None

        return self._signed_in(self._user_from(payload), token)

    def to_state(self) -> dict[str, Any]:
        return {
            "user": self.user.model_dump(mode="json") if self.user else None,
            "access_token": self.access_token,
        }

    def load_state(self, state: dict[str, Any]) -> None:
        self.user = User.model_validate(state["user"]) if state.get("user") else None
        self.access_token = state.get("access_token")
        self.last_error = None

    def migrate(self, state: dict[str, Any], from_version: int) -> dict[str, Any]:
        if from_version == 0:
            return {"user": None, "access_token": None}
        return state
