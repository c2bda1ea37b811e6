"""Profile domain entity and identity claims."""

from dataclasses import dataclass, field, fields
from datetime import datetime
from typing import Optional
from uuid import UUID, uuid4


@dataclass(frozen=True)
class IdentityClaims:
    """Optional attributes presented by the identity provider.

    Values are untrusted: surrounding whitespace is stripped and empty
    strings are treated as absent.
    """

    username: Optional[str] = None
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    full_name: Optional[str] = None

    def __post_init__(self) -> None:
        for f in fields(self):
            object.__setattr__(self, f.name, _clean(getattr(self, f.name)))


@dataclass
class Profile:
    """Domain entity for a user profile, one per external identity."""

    external_subject_id: str
    username: str
    email: str
    id: UUID = field(default_factory=uuid4)
    display_name: str | None = None
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        """Ensure updated_at is always at least as recent as created_at."""
        if self.updated_at < self.created_at:
            self.updated_at = self.created_at


def email_local_part(email: str) -> str:
    """Return the part of an email address before the ``@``."""
    return email.split("@", 1)[0]


def _clean(value: object) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None
