"""Stored LinkedIn profile domain entity."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any
from urllib.parse import urlsplit, urlunsplit
from uuid import UUID, uuid4

LINKEDIN_DOMAIN = "linkedin.com"


@dataclass
class LinkedInProfile:
    """Scraped LinkedIn profile data, keyed by its canonical URL."""

    user_id: UUID
    linkedin_url: str
    profile_data: dict[str, Any] = field(default_factory=dict)
    tags: list[str] = field(default_factory=list)
    id: UUID = field(default_factory=uuid4)
    last_updated: datetime = field(default_factory=datetime.utcnow)
    created_at: datetime = field(default_factory=datetime.utcnow)

    def __post_init__(self) -> None:
        self.tags = normalize_tags(self.tags)


@dataclass(frozen=True, slots=True)
class ProfileLookup:
    """Result of checking a batch of URLs against stored profiles."""

    found: list[LinkedInProfile]
    missing: list[str]


def normalize_linkedin_url(url: str) -> str | None:
    """Canonical form of a LinkedIn URL, or None if it is not one.

    Forces https, lowercases the host, drops query string, fragment and
    trailing slash so the same page always maps to the same stored row.
    """
    raw = (url or "").strip()
    if not raw:
        return None
    if "://" not in raw:
        raw = f"https://{raw}"

    try:
        parts = urlsplit(raw)
    except ValueError:
        return None
    if parts.scheme not in ("http", "https"):
        return None
    host = (parts.hostname or "").lower()
    if host != LINKEDIN_DOMAIN and not host.endswith(f".{LINKEDIN_DOMAIN}"):
        return None

    path = parts.path.rstrip("/")
    if not path:
        return None
    return urlunsplit(("https", host, path, "", ""))


def normalize_tags(tags: list[str] | None) -> list[str]:
    """Strip tags, drop empties and duplicates, keep first-seen order."""
    seen: dict[str, None] = {}
    for tag in tags or []:
        cleaned = tag.strip()
        if cleaned:
            seen.setdefault(cleaned, None)
    return list(seen)
