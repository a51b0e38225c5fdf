"""
Pydantic models for the paste entity and request/response validation.
"""
from datetime import datetime, timedelta
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from snipbin.config import settings
from snipbin.ttl import TTL_HOURS


def _utf8_size(value: str, field: str) -> int:
    try:
        return len(value.encode("utf-8"))
    except UnicodeEncodeError:
        raise ValueError(f"{field} must be valid UTF-8 text") from None


def check_title(value: str) -> str:
    """
    Check a title can be stored as the first line of a record.

    Raises:
        ValueError: If the title spans lines or can't be encoded as UTF-8
    """
    if "\n" in value or "\r" in value:
        raise ValueError("title must be a single line")
    _utf8_size(value, "title")
    return value


def check_body(value: str) -> str:
    """
    Check a body is encodable and within MAX_BODY_BYTES.

    Raises:
        ValueError: If the body can't be encoded as UTF-8 or is too large
    """
    if _utf8_size(value, "body") > settings.MAX_BODY_BYTES:
        raise ValueError(f"body must be at most {settings.MAX_BODY_BYTES} bytes")
    return value


class Paste(BaseModel):
    """A stored paste, as returned by PasteRepository.load."""
    id: str
    title: str
    body: bytes
    ttl: str
    created_at: datetime = Field(..., description="File modification time")

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(hours=TTL_HOURS[self.ttl])

    @property
    def text(self) -> str:
        """Body decoded for display."""
        return self.body.decode("utf-8", errors="replace")


class PasteCreate(BaseModel):
    """Schema for creating a new paste."""
    title: str = Field(..., min_length=1, max_length=settings.MAX_TITLE_LENGTH, description="Paste title")
    body: str = Field(..., min_length=1, description="Text content (required, non-empty)")
    ttl: Optional[str] = Field(None, description="TTL label, defaults to the configured default")

    @field_validator("title")
    @classmethod
    def title_is_single_line(cls, value: str) -> str:
        return check_title(value)

    @field_validator("body")
    @classmethod
    def body_within_limit(cls, value: str) -> str:
        return check_body(value)


class PasteResponse(BaseModel):
    """Schema for paste creation response."""
    id: str = Field(..., description="Unique paste ID")
    url: str = Field(..., description="Shareable URL to view the paste")
    ttl: str = Field(..., description="TTL label the paste was stored with")


class PasteView(BaseModel):
    """Schema for fetching a paste."""
    id: str
    title: str
    body: str = Field(..., description="Paste text content")
    ttl: str
    created_at: str = Field(..., description="Creation timestamp (ISO 8601)")
    expires_at: str = Field(..., description="Expiry timestamp (ISO 8601)")


class HealthCheck(BaseModel):
    """Schema for health check response."""
    ok: bool = Field(..., description="Is the application healthy?")
