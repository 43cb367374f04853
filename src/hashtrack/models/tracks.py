"""Track data models."""

from __future__ import annotations

from pydantic import BaseModel, Field


class Track(BaseModel):
    id: str
    hashtag: str
    pretty_name: str = Field(alias="prettyName")

    model_config = {"populate_by_name": True}

    def __str__(self) -> str:
        return self.pretty_name


class CreateTrackRequest(BaseModel):
    hashtag: str = Field(min_length=1)
