"""Input shaping for the "create link" form.

Turns raw form values into the ``(url, expired_in)`` pair the link store
expects. The expiration date is only kept when the expiration toggle is on.
"""

from datetime import date, datetime, time, timezone
from typing import Optional, Tuple

from pydantic import (
    BaseModel,
    Field,
    ValidationError as SchemaValidationError,
    ValidationInfo,
    field_validator,
    model_validator,
)

from .common.validators import is_valid_url
from .errors import ValidationError


class ShortLinkForm(BaseModel):
    """Validated create-link form."""

    url: str = Field("", description="Destination URL")
    expiration_enabled: bool = Field(False, description="Whether the expiration date input is shown")
    expired_in: Optional[datetime] = Field(None, description="Expiration date")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = (v or "").strip()
        if not v:
            raise ValueError("URL can't be empty")
        is_valid, _ = is_valid_url(v)
        if not is_valid:
            raise ValueError("Invalid URL")
        return v

    @field_validator("expired_in", mode="before")
    @classmethod
    def parse_expired_in(cls, v, info: ValidationInfo):
        if not info.data.get("expiration_enabled"):
            return None
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        if isinstance(v, datetime):
            return v
        if isinstance(v, date):
            return datetime.combine(v, time.min, tzinfo=timezone.utc)
        text = str(v).strip()
        try:
            # A bare date from a date picker means midnight UTC of that day
            return datetime.combine(date.fromisoformat(text), time.min, tzinfo=timezone.utc)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00"))
        except ValueError:
            raise ValueError("Invalid expiration date")

    @model_validator(mode="after")
    def apply_expiration_toggle(self) -> "ShortLinkForm":
        if not self.expiration_enabled:
            self.expired_in = None
            return self
        if self.expired_in is not None:
            expires = self.expired_in
            if expires.tzinfo is None:
                expires = expires.replace(tzinfo=timezone.utc)
            if expires <= datetime.now(timezone.utc):
                raise ValueError("Expiration date must be in the future")
        return self

    def to_create_args(self) -> Tuple[str, Optional[datetime]]:
        return self.url, self.expired_in


def shape_link_input(
    url: str,
    expired_in=None,
    expiration_enabled: Optional[bool] = None,
) -> Tuple[str, Optional[datetime]]:
    """Validate raw form values.

    Args:
        url: Destination URL as typed
        expired_in: Optional date string or date
        expiration_enabled: Expiration toggle; defaults to "on" when a date is given

    Returns:
        Tuple of (url, expired_in) ready for ``LinkStore.create_link``

    Raises:
        ValidationError: With the first form error message
    """
    if expiration_enabled is None:
        expiration_enabled = expired_in is not None
    try:
        form = ShortLinkForm(url=url, expiration_enabled=expiration_enabled, expired_in=expired_in)
    except SchemaValidationError as e:
        error = e.errors()[0]
        raise ValidationError(str(error["ctx"]["error"]) if "ctx" in error else error["msg"]) from e
    return form.to_create_args()
