"""Data models for the shortener client."""

import base64
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional


def _parse_timestamp(value) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value
    # Python < 3.11 fromisoformat does not accept a trailing "Z"
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class Link:
    """A shortened URL owned by the current user, as confirmed by the backend."""

    id: str
    original_url: str
    shortened_url: str
    created_at: datetime
    expired_in: Optional[datetime] = None
    logo: Optional[str] = None

    def is_expired(self, now: Optional[datetime] = None) -> bool:
        """Check whether the link has passed its expiration date.

        Links without an expiration date never expire.
        """
        if self.expired_in is None:
            return False
        now = _as_aware(now or datetime.now(timezone.utc))
        return _as_aware(self.expired_in) <= now

    def to_dict(self) -> dict:
        """Convert to a wire-shaped dictionary."""
        return {
            "_id": self.id,
            "originalUrl": self.original_url,
            "shortenUrl": self.shortened_url,
            "logo": self.logo,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "expiredIn": self.expired_in.isoformat() if self.expired_in else None,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Link":
        """Create from a wire-shaped dictionary."""
        return cls(
            id=str(data["_id"] if "_id" in data else data["id"]),
            original_url=data["originalUrl"],
            shortened_url=data.get("shortenUrl") or data["shortenedUrl"],
            created_at=_parse_timestamp(data["createdAt"]),
            expired_in=_parse_timestamp(data.get("expiredIn")),
            logo=data.get("logo"),
        )


@dataclass(frozen=True)
class QrImage:
    """QR code image for a link's shortened URL."""

    link_id: str
    data: bytes
    content_type: str = "image/png"

    def to_data_url(self) -> str:
        """Encode as a ``data:`` URI that an <img> tag can display."""
        encoded = base64.b64encode(self.data).decode("ascii")
        return f"data:{self.content_type};base64,{encoded}"

    @classmethod
    def from_data_url(cls, link_id: str, value: str) -> "QrImage":
        """Decode a ``data:<type>;base64,<payload>`` URI or bare base64 text."""
        content_type = "image/png"
        payload = value
        if value.startswith("data:"):
            header, _, payload = value.partition(",")
            content_type = header[len("data:"):].split(";")[0] or content_type
        return cls(link_id=link_id, data=base64.b64decode(payload), content_type=content_type)
