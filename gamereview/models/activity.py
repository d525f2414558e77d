"""Activity feed entries for the admin dashboard. Write-once."""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from gamereview.models.base import Base
from gamereview.utils import utcnow


class Activity(Base):
    __tablename__ = "activities"

    id = Column(String(36), primary_key=True, index=True)
    type = Column(String(32), nullable=False, index=True)
    title = Column(String(512), nullable=False)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, index=True)

    user = relationship("User", back_populates="activities")
