"""User schemas."""
from pydantic import BaseModel, EmailStr, Field

from gamereview.constants import UserRole


class UserUpdate(BaseModel):
    username: str | None = Field(default=None, min_length=3, max_length=64)
    email: EmailStr | None = None
    password: str | None = Field(default=None, min_length=6)
    avatar_url: str | None = None
    role: UserRole | None = None


class RoleUpdate(BaseModel):
    role: UserRole
