"""Company and Tag schemas."""
from pydantic import BaseModel, Field


class CompanyCreate(BaseModel):
    name: str = Field(min_length=1, max_length=256)
    description: str | None = None
    founded_year: int | None = Field(default=None, ge=1800, le=2100)
    website: str | None = None
    logo_url: str | None = None
    headquarters: str | None = None


class CompanyUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=1, max_length=256)
    description: str | None = None
    founded_year: int | None = Field(default=None, ge=1800, le=2100)
    website: str | None = None
    logo_url: str | None = None
    headquarters: str | None = None


class TagCreate(BaseModel):
    name: str = Field(min_length=1, max_length=64)
