"""Tweet data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Tweet(BaseModel):
    """A post matching one of the tracked hashtags."""
    id: str
    author: str
    text: str
    published_at: datetime = Field(alias="publishedAt")

    model_config = {"populate_by_name": True, "frozen": True}

    def __str__(self) -> str:
        return f"[{self.published_at:%Y-%m-%d %H:%M}] @{self.author}: {self.text}"
