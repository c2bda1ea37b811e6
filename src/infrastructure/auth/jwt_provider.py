"""JWT authentication provider implementation.

Supports identity-provider JWTs signed with an asymmetric key published as
JWKS (ES256 for Supabase, RS256 for Clerk) and locally-created tokens
(HS256, shared secret, used in tests).

Claims are read from standard OIDC fields first and from Supabase's
``user_metadata`` second:

    {
        "sub": "user_2abc...",
        "email": "jane@example.com",
        "preferred_username": "jane",
        "given_name": "Jane",
        "family_name": "Doe",
        "name": "Jane Doe",
        "user_metadata": { "username": "...", "full_name": "..." },
        "exp": 1234567890
    }
"""

import logging
from datetime import datetime, timedelta
from typing import Any, Optional

import httpx
from jose import JWTError, jwk, jwt

from core.config import settings
from domain.entities.profile import IdentityClaims
from infrastructure.auth.provider import TokenUser

logger = logging.getLogger(__name__)

ASYMMETRIC_ALGORITHMS = ("ES256", "RS256")

# Module-level JWKS cache (fetched once, reused across requests)
_jwks_cache: dict[str, Any] | None = None


async def _get_jwks_keys() -> dict[str, Any]:
    """Fetch and cache the identity provider's JWKS keys."""
    global _jwks_cache
    if _jwks_cache is not None:
        return _jwks_cache

    jwks_url = settings.jwks_url
    if not jwks_url:
        return {}

    try:
        async with httpx.AsyncClient() as client:
            response = await client.get(jwks_url, timeout=10.0)
            response.raise_for_status()
            jwks_data = response.json()
    except (httpx.HTTPError, ValueError):
        logger.exception("Failed to fetch JWKS from %s", jwks_url)
        return {}

    _jwks_cache = {
        key_data["kid"]: key_data
        for key_data in jwks_data.get("keys", [])
        if key_data.get("kid")
    }
    logger.info("Fetched %d JWKS keys from %s", len(_jwks_cache), jwks_url)
    return _jwks_cache


def _first(*values: Any) -> Optional[str]:
    for value in values:
        if isinstance(value, str) and value.strip():
            return value
    return None


def claims_from_payload(payload: dict[str, Any]) -> IdentityClaims:
    """Build identity claims from a decoded token payload."""
    metadata = payload.get("user_metadata")
    if not isinstance(metadata, dict):
        metadata = {}
    return IdentityClaims(
        username=_first(
            payload.get("username"),
            payload.get("preferred_username"),
            metadata.get("username"),
        ),
        email=_first(payload.get("email"), metadata.get("email")),
        first_name=_first(
            payload.get("given_name"),
            payload.get("first_name"),
            metadata.get("first_name"),
        ),
        last_name=_first(
            payload.get("family_name"),
            payload.get("last_name"),
            metadata.get("last_name"),
        ),
        full_name=_first(
            payload.get("name"),
            metadata.get("full_name"),
            metadata.get("name"),
            metadata.get("display_name"),
        ),
    )


class JWTAuthProvider:
    """JWT-based authentication provider.

    Handles validation of identity-provider (ES256/RS256 via JWKS) and
    locally-created (HS256) JWTs.
    """

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
        Validate a JWT token and extract the identity.

        Detects the signing algorithm from the token header:
        - ES256/RS256 (identity provider): validates via JWKS public key
        - HS256 (local/test): validates via shared secret

        Args:
            token: The JWT to validate

        Returns:
            TokenUser if valid, None if invalid, expired or missing ``sub``
        """
        try:
            header = jwt.get_unverified_header(token)
            alg = header.get("alg", self._algorithm)

            if alg in ASYMMETRIC_ALGORITHMS:
                payload = await self._validate_asymmetric(token, header, alg)
            else:
                payload = jwt.decode(
                    token,
                    self._secret_key,
                    algorithms=[self._algorithm],
                    options={"verify_aud": False},
                )

            if payload is None:
                return None

            subject = payload.get("sub")
            if not isinstance(subject, str) or not subject.strip():
                return None

            return TokenUser(
                subject=subject,
                claims=claims_from_payload(payload),
                role=payload.get("role"),
            )

        except JWTError:
            return None

    async def _validate_asymmetric(
        self, token: str, header: dict, alg: str
    ) -> Optional[dict]:
        """Validate an ES256/RS256-signed JWT using JWKS public keys."""
        kid = header.get("kid")
        if not kid:
            return None

        jwks_keys = await _get_jwks_keys()
        key_data = jwks_keys.get(kid)
        if not key_data:
            # Key not found, refetch once in case the provider rotated keys
            global _jwks_cache
            _jwks_cache = None
            jwks_keys = await _get_jwks_keys()
            key_data = jwks_keys.get(kid)
            if not key_data:
                logger.warning("JWKS key not found for kid=%s", kid)
                return None

        public_key = jwk.construct(key_data, algorithm=alg)
        return jwt.decode(
            token,
            public_key,
            algorithms=[alg],
            options={"verify_aud": False},
        )

    def create_token(self, user: TokenUser) -> str:
        """
        Create a JWT token for a user (HS256, used for tests).

        Args:
            user: The user to create a token for

        Returns:
            The generated JWT string
        """
        expire = datetime.utcnow() + timedelta(minutes=self._expire_minutes)

        payload: dict = {
            "sub": user.subject,
            "aud": "authenticated",
            "role": user.role or "authenticated",
            "exp": expire,
        }
        optional_claims = {
            "email": user.claims.email,
            "preferred_username": user.claims.username,
            "given_name": user.claims.first_name,
            "family_name": user.claims.last_name,
            "name": user.claims.full_name,
        }
        payload.update({k: v for k, v in optional_claims.items() if v is not None})

        return jwt.encode(payload, self._secret_key, algorithm=self._algorithm)
