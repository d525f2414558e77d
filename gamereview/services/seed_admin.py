"""Seed admin user on startup."""
import urllib.parse

from gamereview.config import settings
from gamereview.constants import UserRole
from gamereview.database import SessionLocal
from gamereview.logging_config import get_logger
from gamereview.models import User
from gamereview.services.auth import get_password_hash
from gamereview.utils import generate_id

logger = get_logger("gamereview.seed_admin")


def default_avatar(username: str) -> str:
    return f"https://api.dicebear.com/7.x/avataaars/svg?seed={urllib.parse.quote(username)}"


def seed_admin_user() -> None:
    """Ensure the configured admin exists and has the admin role."""
    if not settings.admin_password:
        logger.info("ADMIN_PASSWORD not set, skipping admin seed")
        return
    db = SessionLocal()
    try:
        user = (
            db.query(User)
            .filter((User.email == settings.admin_email) | (User.username == settings.admin_username))
            .first()
        )
        if user:
            user.role = UserRole.ADMIN.value
            db.commit()
            return
        user = User(
            id=generate_id(),
            email=settings.admin_email,
            username=settings.admin_username,
            hashed_password=get_password_hash(settings.admin_password),
            avatar_url=default_avatar(settings.admin_username),
            role=UserRole.ADMIN.value,
        )
        db.add(user)
        db.commit()
    finally:
        db.close()
