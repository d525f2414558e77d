"""Game schemas."""
from datetime import date

from pydantic import BaseModel, Field, field_validator

from gamereview.constants import GENRES


def _check_genre(value: str | None) -> str | None:
    if value is not None and value not in GENRES:
        raise ValueError(f"genre must be one of: {', '.join(GENRES)}")
    return value


class GameCreate(BaseModel):
    title: str = Field(min_length=1, max_length=512)
    author: str = Field(min_length=1, max_length=256)
    genre: str
    company_id: str = Field(min_length=1)
    description: str | None = None
    composer: str | None = None
    release_date: date | None = None
    cover_image: str | None = None
    tag_ids: list[str] = []

    @field_validator("genre")
    @classmethod
    def genre_is_known(cls, value):
        return _check_genre(value)


class GameUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=512)
    author: str | None = Field(default=None, min_length=1, max_length=256)
    genre: str | None = None
    company_id: str | None = None
    description: str | None = None
    composer: str | None = None
    release_date: date | None = None
    cover_image: str | None = None
    tag_ids: list[str] | None = None

    @field_validator("genre")
    @classmethod
    def genre_is_known(cls, value):
        return _check_genre(value)
