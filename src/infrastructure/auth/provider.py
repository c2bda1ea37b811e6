"""Authentication provider protocol."""

from dataclasses import dataclass, field
from typing import Optional, Protocol

from domain.entities.profile import IdentityClaims


@dataclass
class TokenUser:
    """Represents an identity extracted from an auth token.

    ``subject`` is the identity provider's opaque user id (Supabase UUID or
    Clerk ``user_...`` string); everything else is best-effort.
    """

    subject: str
    claims: IdentityClaims = field(default_factory=IdentityClaims)
    role: Optional[str] = None

    @property
    def email(self) -> Optional[str]:
        return self.claims.email


class IAuthProvider(Protocol):
    """Protocol for authentication providers."""

    async def validate_token(self, token: str) -> Optional[TokenUser]:
        """
        Validate an authentication token.

        Args:
            token: The bearer token to validate

        Returns:
            TokenUser if valid, None if invalid
        """
        ...

    def create_token(self, user: TokenUser) -> str:
        """
        Create an authentication token for a user.

        Args:
            user: The user to create a token for

        Returns:
            The generated token string
        """
        ...
