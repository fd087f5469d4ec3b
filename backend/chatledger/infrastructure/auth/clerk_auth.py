"""
Clerk (JWT/JWKS) authentication provider.
"""

from __future__ import annotations

import time
from typing import Any

import httpx
from jose import JWTError, jwt

from chatledger.core.config import Settings
from chatledger.core.exceptions import AuthenticationError
from chatledger.core.logger import setup_logger
from chatledger.interfaces.auth_provider import IAuthProvider, User

logger = setup_logger(__name__)


class ClerkAuthProvider(IAuthProvider):
    """Validates Clerk session tokens against the instance JWKS."""

    def __init__(self, settings: Settings, http_client: httpx.AsyncClient | None = None):
        if not settings.CLERK_JWKS_URL:
            raise ValueError("CLERK_JWKS_URL must be set for Clerk auth")
        self._settings = settings
        self._http_client = http_client
        self._jwks_ttl_seconds = settings.CLERK_JWKS_TTL_SECONDS
        self._jwks_cache: dict[str, Any] | None = None
        self._jwks_cache_expiry: float = 0.0
        if not settings.CLERK_AUDIENCE:
            logger.warning("CLERK_AUDIENCE is not set; audience claim will not be checked.")

    @property
    def issuer(self) -> str:
        if self._settings.CLERK_ISSUER:
            return self._settings.CLERK_ISSUER.rstrip("/")
        return self._settings.CLERK_JWKS_URL.split("/.well-known/")[0]

    async def _fetch_jwks(self) -> dict[str, Any]:
        if self._http_client is not None:
            response = await self._http_client.get(self._settings.CLERK_JWKS_URL)
            response.raise_for_status()
            return response.json()
        async with httpx.AsyncClient(timeout=5.0) as client:
            response = await client.get(self._settings.CLERK_JWKS_URL)
            response.raise_for_status()
            return response.json()

    async def _get_jwks(self) -> dict[str, Any]:
        now = time.time()
        if self._jwks_cache and now < self._jwks_cache_expiry:
            return self._jwks_cache

        try:
            jwks = await self._fetch_jwks()
        except httpx.HTTPError as e:
            # Serve stale keys rather than locking every user out
            if self._jwks_cache:
                logger.warning(f"JWKS refresh failed, using cached keys: {e}")
                return self._jwks_cache
            raise AuthenticationError("Unable to fetch signing keys") from e

        self._jwks_cache = jwks
        self._jwks_cache_expiry = now + self._jwks_ttl_seconds
        return jwks

    async def _decode_token(self, token: str) -> dict[str, Any]:
        if token.count(".") != 2:
            raise AuthenticationError("Token is not a valid JWT")
        try:
            header = jwt.get_unverified_header(token)
        except JWTError as e:
            raise AuthenticationError(f"Malformed token header: {e}") from e

        jwks = await self._get_jwks()
        key = None
        for candidate in jwks.get("keys", []):
            if candidate.get("kid") == header.get("kid"):
                key = candidate
                break
        if not key:
            raise AuthenticationError("Signing key not found")

        audience = self._settings.CLERK_AUDIENCE or None
        try:
            return jwt.decode(
                token,
                key,
                algorithms=["RS256"],
                audience=audience,
                issuer=self.issuer,
                options={"verify_aud": bool(audience)},
            )
        except JWTError as e:
            raise AuthenticationError(f"Token verification failed: {e}") from e

    async def verify_token(self, token: str) -> User:
        claims = await self._decode_token(token)
        subject = claims.get("sub")
        if not subject:
            raise AuthenticationError("Missing subject")
        return User(
            id=subject,
            email=claims.get("email"),
            display_name=claims.get("name"),
        )
