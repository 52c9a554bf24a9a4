"""
Auth - session state over a GoTrue-compatible auth service.
"""

from onboard_buddy.auth.models import User
from onboard_buddy.auth.provider import AuthProvider, HttpAuthProvider
from onboard_buddy.auth.store import AuthStore, validate_signup

__all__ = ["AuthProvider", "AuthStore", "HttpAuthProvider", "User", "validate_signup"]
