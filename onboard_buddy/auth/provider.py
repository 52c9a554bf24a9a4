"""
Auth provider client (GoTrue-compatible REST API).

The store talks to the provider through the ``AuthProvider`` protocol so
tests can swap in a fake or an ``httpx.MockTransport``.
"""

from __future__ import annotations

from typing import Any, Protocol

import httpx
from cachetools import TTLCache

from onboard_buddy.config import (
    AUTH_API_KEY,
    AUTH_BASE_URL,
    AUTH_CACHE_MAX_SIZE,
    AUTH_CACHE_TTL_SECONDS,
    AUTH_TIMEOUT_SECONDS,
)
from onboard_buddy.errors import AuthError
from onboard_buddy.observability.logging import get_logger

logger = get_logger(__name__)


class AuthProvider(Protocol):
    def health(self) -> bool: ...

    def sign_in(self, email: str, password: str) -> dict[str, Any]: ...

    def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> dict[str, Any]: ...

    def sign_out(self, access_token: str) -> None: ...

    def get_user(self, access_token: str) -> dict[str, Any]: ...


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or f"HTTP {response.status_code}"
    for key in ("error_description", "msg", "message", "error"):
        if isinstance(body, dict) and body.get(key):
            return str(body[key])
    return f"HTTP {response.status_code}"


class HttpAuthProvider:
    """Synchronous httpx client for the auth service."""

    def __init__(
        self,
        base_url: str = AUTH_BASE_URL,
        api_key: str = AUTH_API_KEY,
        timeout: float = AUTH_TIMEOUT_SECONDS,
        transport: httpx.BaseTransport | None = None,
    ):
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers={"apikey": api_key, "Content-Type": "application/json"},
            timeout=timeout,
            transport=transport,
        )
        # access token -> user payload
        self._user_cache: TTLCache[str, dict[str, Any]] = TTLCache(
            maxsize=AUTH_CACHE_MAX_SIZE, ttl=AUTH_CACHE_TTL_SECONDS
        )

    def close(self) -> None:
        self._client.close()

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        try:
            return self._client.request(method, url, **kwargs)
        except httpx.TimeoutException:
            logger.warning("Auth service timed out: %s %s", method, url)
            raise AuthError("Authentication service unavailable") from None
        except httpx.RequestError as e:
            logger.error("Auth service request failed: %s", e)
            raise AuthError("Network error. Please check your internet connection and try again.") from e

    def health(self) -> bool:
        try:
            response = self._request("GET", "/auth/v1/health")
        except AuthError:
            return False
        return response.status_code == 200

    def sign_in(self, email: str, password: str) -> dict[str, Any]:
        response = self._request(
            "POST",
            "/auth/v1/token",
            params={"grant_type": "password"},
            json={"email": email, "password": password},
        )
        if response.status_code != 200:
            raise AuthError(_error_message(response))
        return response.json()

    def sign_up(self, email: str, password: str, metadata: dict[str, Any]) -> dict[str, Any]:
        response = self._request(
            "POST",
            "/auth/v1/signup",
            json={"email": email, "password": password, "data": metadata},
        )
        if response.status_code not in (200, 201):
            raise AuthError(_error_message(response))
        return response.json()

    def sign_out(self, access_token: str) -> None:
        self._user_cache.pop(access_token, None)
        response = self._request(
            "POST", "/auth/v1/logout", headers={"Authorization": f"Bearer {access_token}"}
        )
        if response.status_code not in (200, 204):
            raise AuthError(_error_message(response))

    def get_user(self, access_token: str) -> dict[str, Any]:
        if access_token in self._user_cache:
            return self._user_cache[access_token]

        response = self._request(
            "GET", "/auth/v1/user", headers={"Authorization": f"Bearer {access_token}"}
        )
        if response.status_code != 200:
            raise AuthError("Invalid or expired session")

        user = response.json()
        self._user_cache[access_token] = user
        return user
