"""Review schemas."""
from pydantic import BaseModel, Field

from gamereview.constants import ModerationStatus


class ReviewCreate(BaseModel):
    game_id: str
    rating: int = Field(ge=1, le=5)
    comment: str


class ReviewUpdate(BaseModel):
    rating: int | None = Field(default=None, ge=1, le=5)
    comment: str | None = None
    status: ModerationStatus | None = None
