"""Database models."""
from gamereview.models.base import Base
from gamereview.models.user import User
from gamereview.models.game import Game, Company, Tag, GameTag
from gamereview.models.review import Review
from gamereview.models.activity import Activity

__all__ = [
    "Base",
    "User",
    "Game",
    "Company",
    "Tag",
    "GameTag",
    "Review",
    "Activity",
]
