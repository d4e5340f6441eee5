"""Service-account access tokens for the Google Calendar API (JWT bearer grant)."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone

import httpx
import jwt

from spinbook.application.exceptions import (
    InternalError,
    UpstreamAuthError,
    UpstreamConnectionError,
    UpstreamRateLimitError,
    UpstreamTimeoutError,
)

CALENDAR_SCOPES = (
    "https://www.googleapis.com/auth/calendar",
    "https://www.googleapis.com/auth/calendar.events",
)
JWT_BEARER_GRANT = "urn:ietf:params:oauth:grant-type:jwt-bearer"
ASSERTION_LIFETIME_SECONDS = 3600

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ServiceAccountCredentials:
    client_email: str
    private_key: str


class TokenCache:
    """Cache for the current access token."""

    def __init__(self) -> None:
        self._token: str | None = None
        self._expires_at: datetime | None = None

    def get(self) -> str | None:
        if self._token and self._expires_at:
            now = datetime.now(timezone.utc)
            if now < (self._expires_at - timedelta(seconds=60)):
                return self._token
        return None

    def set(self, token: str, expires_in: int) -> None:
        now = datetime.now(timezone.utc)
        self._token = token
        self._expires_at = now + timedelta(seconds=expires_in)

    def clear(self) -> None:
        self._token = None
        self._expires_at = None


class ServiceAccountTokenProvider:
    def __init__(
        self,
        credentials: ServiceAccountCredentials,
        http: httpx.Client,
        token_url: str,
    ) -> None:
        self._credentials = credentials
        self._http = http
        self._token_url = token_url
        self._cache = TokenCache()

    def get_token(self) -> str:
        cached = self._cache.get()
        if cached:
            return cached

        try:
            response = self._http.post(
                self._token_url,
                data={"grant_type": JWT_BEARER_GRANT, "assertion": self._build_assertion()},
            )
        except httpx.TimeoutException as exc:
            raise UpstreamTimeoutError(detail=f"token_timeout: {exc}") from exc
        except httpx.HTTPError as exc:
            raise UpstreamConnectionError(detail=f"token_connection_failed: {exc}") from exc

        if response.status_code in {400, 401, 403}:
            error = _oauth_error(response)
            logger.error("Service account token rejected", extra={"code": response.status_code, "reason": error})
            raise UpstreamAuthError(detail=f"Google authentication failed: {error}")
        if response.status_code == 429:
            raise UpstreamRateLimitError(detail="token endpoint rate limited")
        if response.status_code >= 400:
            raise InternalError(detail=f"token_error_{response.status_code}")

        data = response.json()
        token = data.get("access_token")
        if not token:
            raise UpstreamAuthError(detail="No access token returned by the token endpoint")
        self._cache.set(token, int(data.get("expires_in", ASSERTION_LIFETIME_SECONDS)))
        return token

    def invalidate(self) -> None:
        self._cache.clear()

    def _build_assertion(self) -> str:
        now = int(time.time())
        claims = {
            "iss": self._credentials.client_email,
            "scope": " ".join(CALENDAR_SCOPES),
            "aud": self._token_url,
            "iat": now,
            "exp": now + ASSERTION_LIFETIME_SECONDS,
        }
        try:
            return jwt.encode(claims, self._credentials.private_key, algorithm="RS256")
        except (jwt.PyJWTError, ValueError, TypeError) as exc:
            raise UpstreamAuthError(detail=f"Private key could not sign the assertion: {exc}") from exc


def _oauth_error(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200]
    return str(body.get("error_description") or body.get("error") or response.status_code)
