"""User model."""
from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from gamereview.constants import UserRole
from gamereview.models.base import Base
from gamereview.utils import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True, index=True)
    username = Column(String(64), unique=True, nullable=False, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    role = Column(String(16), nullable=False, default=UserRole.USER.value)
    avatar_url = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)

    reviews = relationship("Review", back_populates="user")
    games = relationship("Game", back_populates="created_by")
    activities = relationship("Activity", back_populates="user")

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN.value
