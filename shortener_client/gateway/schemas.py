"""Pydantic schemas for backend requests and responses."""

from pydantic import AliasChoices, BaseModel, Field
from typing import List, Optional
from datetime import datetime

from .models import Link


class CreateLinkRequest(BaseModel):
    """Body of ``POST /url/short``."""

    originalUrl: str = Field(..., description="The URL to shorten", min_length=1)
    expiredIn: Optional[datetime] = Field(None, description="Expiration date, omitted means never")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "originalUrl": "https://example.com/very/long/path/to/resource",
                    "expiredIn": None
                },
                {
                    "originalUrl": "https://github.com/user/repo",
                    "expiredIn": "2030-01-31T00:00:00Z"
                }
            ]
        }
    }


class LinkPayload(BaseModel):
    """A link as the backend serialises it."""

    id: str = Field(..., validation_alias=AliasChoices("_id", "id"))
    originalUrl: str = Field(..., min_length=1)
    shortenUrl: str = Field(..., validation_alias=AliasChoices("shortenUrl", "shortenedUrl"))
    createdAt: datetime
    expiredIn: Optional[datetime] = None
    logo: Optional[str] = None

    model_config = {"extra": "ignore"}

    def to_link(self) -> Link:
        """Convert to the client-side entity."""
        return Link(
            id=self.id,
            original_url=self.originalUrl,
            shortened_url=self.shortenUrl,
            created_at=self.createdAt,
            expired_in=self.expiredIn,
            logo=self.logo,
        )


class LinkList(BaseModel):
    urls: List[LinkPayload] = Field(default_factory=list)


class LinkListEnvelope(BaseModel):
    """Response of ``GET /url/my``."""

    data: LinkList


class LinkEnvelope(BaseModel):
    """Response of ``POST /url/short``."""

    data: LinkPayload


class QrCodePayload(BaseModel):
    qrcode: str = Field(..., min_length=1, validation_alias=AliasChoices("qrcode", "qrCode", "image"))


class QrCodeEnvelope(BaseModel):
    """JSON variant of the QR code response."""

    data: QrCodePayload


class ErrorPayload(BaseModel):
    """Error body returned by the backend."""

    message: Optional[str] = Field(None, description="Error message")
    error: Optional[str] = Field(None, description="Detailed error information")

    model_config = {"extra": "ignore"}

    @property
    def text(self) -> Optional[str]:
        return self.message or self.error
