"""Shared enumerations and fixed lookup data."""
import enum


class ModerationStatus(str, enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"


class UserRole(str, enum.Enum):
    USER = "user"
    ADMIN = "admin"


class ActivityType(str, enum.Enum):
    GAME_ADDED = "game_added"
    REVIEW_ADDED = "review_added"
    USER_REGISTERED = "user_registered"


GENRES = [
    "Action",
    "Adventure",
    "RPG",
    "Strategy",
    "Simulation",
    "Sports",
    "Puzzle",
    "Shooter",
    "Platformer",
    "Horror",
    "Racing",
    "Fighting",
    "Educational",
    "Sandbox",
    "Other",
]

UNCATEGORIZED_GENRE = "Uncategorized"

# Default look-back window (days) per stats range when no bounds are given
STATS_DEFAULT_WINDOW_DAYS = {
    "daily": 7,
    "weekly": 30,
    "monthly": 180,
}

GAME_SORTS = ("recent", "newest", "oldest", "highest-rated", "lowest-rated", "most-reviewed")
