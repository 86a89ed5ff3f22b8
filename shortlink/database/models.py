"""Data models for the link store."""

from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Dict, Mapping


def utcnow() -> datetime:
    """Current UTC time as a naive timestamp (the store keeps no timezone)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


@dataclass(frozen=True)
class Link:
    """A persisted short link."""

    id: str
    target_url: str
    redirect_count: int = 0
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def with_redirect(self, at: datetime) -> "Link":
        """Copy of this link with one more redirect recorded."""
        return replace(self, redirect_count=self.redirect_count + 1, updated_at=at)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the public field names."""
        return {
            "id": self.id,
            "targetUrl": self.target_url,
            "countRedirects": self.redirect_count,
            "createdAt": self.created_at.isoformat(),
            "updatedAt": self.updated_at.isoformat(),
        }

    @classmethod
    def from_record(cls, record: Mapping[str, Any]) -> "Link":
        """Create from a ``links`` table row."""
        return cls(
            id=record["id"],
            target_url=record["target_url"],
            redirect_count=record["count_redirects"],
            created_at=record["created_at"],
            updated_at=record["updated_at"],
        )
