"""Exception hierarchy shared by all Onboard Buddy stores."""

from __future__ import annotations


class OnboardBuddyError(Exception):
    """Base exception for Onboard Buddy errors."""

    pass


class ValidationFailedError(OnboardBuddyError, ValueError):
    """One or more validation rules were violated.

    All violations are collected before raising, so ``errors`` holds every
    message and ``str(exc)`` joins them into a single line.
    """

    def __init__(self, errors: list[str]):
        self.errors = list(errors)
        super().__init__(", ".join(self.errors))


class MissionValidationError(ValidationFailedError):
    """Mission draft or patch failed validation."""

    pass


class EmployeeValidationError(ValidationFailedError):
    """Employee record failed validation."""

    pass


class SignupValidationError(ValidationFailedError):
    """Signup form failed validation."""

    pass


class InvalidDueDateError(OnboardBuddyError, ValueError):
    """Task due date falls outside the allowed business-day window."""

    pass


class NotFoundError(OnboardBuddyError, LookupError):
    """Requested entity does not exist."""

    pass


class EmployeeNotFoundError(NotFoundError):
    """Employee not found (or not in the state the operation requires)."""

    pass


class AuthError(OnboardBuddyError):
    """Authentication collaborator rejected the request or is unreachable."""

    pass


class ImageStorageError(OnboardBuddyError):
    """Object storage operation failed for a user-facing request."""

    pass


class SnapshotVersionError(OnboardBuddyError):
    """Persisted snapshot was written by a newer schema version."""

    pass


class WebhookSignatureError(OnboardBuddyError):
    """Webhook payload signature is missing, stale or does not match."""

    pass
