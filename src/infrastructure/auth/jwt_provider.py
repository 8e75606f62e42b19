"""JWT authentication provider.

Accepts identity-provider tokens signed with ES256 (public keys fetched
from the provider's JWKS endpoint) and locally minted HS256 tokens used
by tests and internal tooling. User IDs are opaque strings taken from the
``sub`` claim.

Expected claims:
    {
        "sub": "<opaque user id>",
        "email": "jo@example.com",
        "role": "authenticated",
        "user_metadata": { "display_name": "Jo" },
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import httpx
from jose import JWTError, jwt
from jose.backends import ECKey

from core.config import settings
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

# kid -> JWK, shared by every provider instance in the process
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys(refresh: bool = False) -> dict[str, Any]:
    """Return the JWKS keys by kid, fetching them on first use."""
    global _jwks_cache
    if _jwks_cache is not None and not refresh:
        return _jwks_cache

    jwks_url = settings.supabase_jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            keys = response.json().get("keys", [])
    except Exception:
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}

    _jwks_cache = {key["kid"]: key for key in keys if key.get("kid")}
    logger.info("Fetched %d JWKS keys", len(_jwks_cache))
    return _jwks_cache


def _display_name(claims: dict[str, Any]) -> Optional[str]:
    metadata = claims.get("user_metadata") or {}
    return (
        metadata.get("display_name")
        or metadata.get("name")
        or metadata.get("full_name")
        or claims.get("name")
    )


class JWTAuthProvider:
    """Validates bearer tokens and mints HS256 tokens for tests."""

    def __init__(
        self,
        secret_key: str = settings.jwt_secret_key,
        algorithm: str = settings.jwt_algorithm,
        expire_minutes: int = settings.jwt_expire_minutes,
    ) -> None:
        self._secret_key = secret_key
        self._algorithm = algorithm
        self._expire_minutes = expire_minutes

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate a JWT and return the user it identifies.

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid, expired or missing claims
        """
        try:
            claims = await self._decode(token)
        except JWTError:
            return None

        if not claims:
            return None

        user_id = claims.get("sub")
        email = claims.get("email")
        if not user_id or not email:
            return None

        return TokenUser(
            id=str(user_id),
            email=email,
            display_name=_display_name(claims),
            role=claims.get("role"),
        )

    async def _decode(self, token: str) -> Optional[dict[str, Any]]:
        header = jwt.get_unverified_header(token)
        if header.get("alg", self._algorithm) == "ES256":
            return await self._decode_es256(token, header)
        return jwt.decode(
            token,
            self._secret_key,
            algorithms=[self._algorithm],
            options={"verify_aud": False},
        )

    async def _decode_es256(self, token: str, header: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Verify an ES256 token against the JWKS key named by its kid."""
        kid = header.get("kid")
        if not kid:
            return None

        key_data = (await _get_jwks_keys()).get(kid)
        if not key_data:
            # Unknown kid: the provider may have rotated keys.
            key_data = (await _get_jwks_keys(refresh=True)).get(kid)
        if not key_data:
            logger.warning("JWKS key not found for kid=%s", kid)
            return None

        return jwt.decode(
            token,
            ECKey(key_data, algorithm="ES256"),
            algorithms=["ES256"],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create an HS256 JWT for a user.

        Args:
            user: The user to create a token for

        Returns:
            The encoded token
        """
        claims: dict[str, Any] = {
            "sub": user.id,
            "email": user.email,
            "aud": "authenticated",
            "role": user.role or "authenticated",
            "exp": datetime.utcnow() + timedelta(minutes=self._expire_minutes),
            "user_metadata": {"display_name": user.display_name},
        }
        return jwt.encode(claims, self._secret_key, algorithm=self._algorithm)
