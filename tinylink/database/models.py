"""Data models for the link registry."""

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional, Any


def _parse_timestamp(value: Any) -> Optional[datetime]:
    """Accept a datetime or an ISO string and return an aware UTC datetime."""
    if value is None or value == "":
        return None
    if not isinstance(value, datetime):
        value = datetime.fromisoformat(value)
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value


@dataclass
class Link:
    """Represents a short link in the store."""

    code: str
    target: str
    created_at: datetime
    clicks: int = 0
    last_clicked_at: Optional[datetime] = None
    id: Optional[str] = None

    def to_dict(self) -> dict:
        """Convert to dictionary using the wire field names."""
        return {
            "id": self.id,
            "code": self.code,
            "target": self.target,
            "clicks": self.clicks,
            "last_clicked": self.last_clicked_at.isoformat() if self.last_clicked_at else None,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Link":
        """Create from dictionary (wire names or attribute names)."""
        last_clicked = data.get("last_clicked", data.get("last_clicked_at"))
        link_id = data.get("id")
        return cls(
            id=str(link_id) if link_id is not None else None,
            code=data["code"],
            target=data["target"],
            created_at=_parse_timestamp(data["created_at"]),
            clicks=int(data.get("clicks") or 0),
            last_clicked_at=_parse_timestamp(last_clicked),
        )
