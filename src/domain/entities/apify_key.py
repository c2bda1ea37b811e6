"""Apify API key domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID, uuid4


@dataclass
class ApifyKey:
    """An Apify API token a user stored for running scrapes."""

    user_id: UUID
    key_name: str
    api_key: str
    id: UUID = field(default_factory=uuid4)
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.utcnow)
    updated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def masked_key(self) -> str:
        """Last four characters of the token, the rest hidden."""
        if len(self.api_key) <= 4:
            return "*" * len(self.api_key)
        return f"{'*' * 8}{self.api_key[-4:]}"
