"""Auth dependencies for protected routes."""
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from gamereview.database import get_db
from gamereview.exceptions import AuthenticationError, AuthorizationError
from gamereview.models import User
from gamereview.services.auth import decode_token

bearer_scheme = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db=Depends(get_db),
) -> User | None:
    """Get current user from JWT. Returns None if not authenticated."""
    if not credentials:
        return None
    user_id = decode_token(credentials.credentials)
    if not user_id:
        return None
    return db.query(User).filter(User.id == user_id).first()


async def get_current_user_required(
    user: User | None = Depends(get_current_user),
) -> User:
    """Require authenticated user. Raises 401 if not logged in."""
    if not user:
        raise AuthenticationError("Not authenticated")
    return user


async def get_current_admin(
    user: User = Depends(get_current_user_required),
) -> User:
    """Require an admin. Raises 403 for everyone else."""
    if not user.is_admin:
        raise AuthorizationError("Admin access required")
    return user
