"""Pydantic model for published-content metadata."""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, Field


class ContentItem(BaseModel):
    title: str
    pub_date: datetime = Field(validation_alias=AliasChoices("pub_date", "pubDate", "publicationDate"))
    description: str = ""
    author: str | None = None
    tags: list[str] = Field(default_factory=list)
    slug: str
    draft: bool = False
