"""Pydantic schemas for the newsletter signup API."""

from __future__ import annotations

from pydantic import BaseModel, Field


class SubscriptionRequest(BaseModel):
    """Inbound signup payload; the address is validated by the gateway, not here."""

    email: str | None = None


class SubscriptionResult(BaseModel):
    """Normalised signup response returned to the caller."""

    success: bool
    message: str
    status_code: int = Field(default=200, exclude=True)
