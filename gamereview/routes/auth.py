"""Auth routes."""
from fastapi import APIRouter, Depends, status

from gamereview.constants import ActivityType, UserRole
from gamereview.database import get_db
from gamereview.exceptions import AuthenticationError, ConflictError
from gamereview.logging_config import get_logger
from gamereview.models import User
from gamereview.schemas.auth import RegisterRequest, LoginRequest, TokenResponse
from gamereview.serializers import user_to_dict
from gamereview.services.activity import record_activity
from gamereview.services.auth import get_password_hash, verify_password, create_access_token
from gamereview.services.seed_admin import default_avatar
from gamereview.middleware.auth import get_current_user_required
from gamereview.utils import generate_id

router = APIRouter(prefix="/auth", tags=["auth"])

logger = get_logger("gamereview.auth")


@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(data: RegisterRequest, db=Depends(get_db)):
    username = data.username.strip()
    if db.query(User).filter(User.email == data.email).first():
        raise ConflictError("Email already in use")
    if db.query(User).filter(User.username == username).first():
        raise ConflictError("Username already taken")
    user = User(
        id=generate_id(),
        username=username,
        email=data.email,
        hashed_password=get_password_hash(data.password),
        avatar_url=default_avatar(username),
        role=UserRole.USER.value,
    )
    db.add(user)
    record_activity(db, ActivityType.USER_REGISTERED, "New user registration", user.id)
    db.commit()
    db.refresh(user)
    logger.info("Registered user %s", user.username)
    return TokenResponse(
        access_token=create_access_token(user.id, user.role),
        user=user_to_dict(user),
    )


@router.post("/login")
def login(data: LoginRequest, db=Depends(get_db)):
    user = db.query(User).filter(User.email == data.email).first()
    if not user or not verify_password(data.password, user.hashed_password):
        logger.warning("Failed login for %s", data.email)
        raise AuthenticationError("Invalid credentials")
    return TokenResponse(
        access_token=create_access_token(user.id, user.role),
        user=user_to_dict(user),
    )


@router.get("/me")
def me(user: User = Depends(get_current_user_required)):
    return user_to_dict(user)
