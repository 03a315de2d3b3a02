"""Pydantic schemas for the JSON questions API.

Request models forbid extra keys, so the JSON API whitelists `title` and
`body` the same way HTML handlers do with `Parameters.permit`.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class QuestionCreate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str = Field(..., max_length=255)
    body: str


class QuestionUpdate(BaseModel):
    model_config = ConfigDict(extra="forbid")

    title: str | None = Field(default=None, max_length=255)
    body: str | None = None

    def changes(self) -> dict:
        """Return only the attributes the client actually sent."""
        return self.model_dump(exclude_unset=True)


class QuestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    body: str
    created_at: datetime | None = None
    updated_at: datetime | None = None
