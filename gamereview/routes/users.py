"""User routes."""
from fastapi import APIRouter, Depends, Query, Response, status

from sqlalchemy import func
from gamereview.database import get_db
from gamereview.exceptions import AuthorizationError, ConflictError, NotFoundError
from gamereview.models import Game, Review, User
from gamereview.schemas.user import UserUpdate
from gamereview.serializers import page, review_to_dict, user_to_dict
from gamereview.services.auth import get_password_hash
from gamereview.services.users import delete_user as delete_user_service
from gamereview.middleware.auth import get_current_admin, get_current_user_required

router = APIRouter(prefix="/users", tags=["users"])


def _require_self_or_admin(user_id: str, current: User, action: str) -> None:
    if current.id != user_id and not current.is_admin:
        raise AuthorizationError(f"You can only {action} your own profile")


def _get_user_or_404(db, user_id: str) -> User:
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    return user


@router.get("")
def list_users(
    _admin: User = Depends(get_current_admin),
    db=Depends(get_db),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    qry = db.query(User).order_by(User.created_at.desc())
    total = qry.count()
    users = qry.offset(offset).limit(limit).all()
    return page([user_to_dict(u) for u in users], total, limit, offset)


@router.get("/{user_id}")
def get_user(
    user_id: str,
    current: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    _require_self_or_admin(user_id, current, "view")
    user = _get_user_or_404(db, user_id)
    d = user_to_dict(user)
    d["reviews_count"] = db.query(func.count(Review.id)).filter(Review.user_id == user_id).scalar() or 0
    d["games_count"] = db.query(func.count(Game.id)).filter(Game.created_by_id == user_id).scalar() or 0
    return d


@router.put("/{user_id}")
def update_user(
    user_id: str,
    data: UserUpdate,
    current: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    _require_self_or_admin(user_id, current, "update")
    user = _get_user_or_404(db, user_id)
    new_username = data.username if data.username and data.username != user.username else None
    new_email = data.email if data.email and data.email != user.email else None
    if new_username and db.query(User).filter(User.username == new_username).first():
        raise ConflictError("Username already taken")
    if new_email and db.query(User).filter(User.email == new_email).first():
        raise ConflictError("Email already in use")

    if new_username:
        user.username = new_username
    if new_email:
        user.email = new_email
    if data.password:
        user.hashed_password = get_password_hash(data.password)
    if data.avatar_url:
        user.avatar_url = data.avatar_url
    if data.role is not None and current.is_admin:
        user.role = data.role.value
    db.commit()
    db.refresh(user)
    return user_to_dict(user)


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(
    user_id: str,
    current: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    delete_user_service(db, user_id, current)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/{user_id}/reviews")
def get_user_reviews(
    user_id: str,
    current: User = Depends(get_current_user_required),
    db=Depends(get_db),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """All of a user's reviews, whatever their moderation status."""
    _require_self_or_admin(user_id, current, "view")
    qry = db.query(Review).filter(Review.user_id == user_id)
    total = qry.count()
    reviews = qry.order_by(Review.created_at.desc()).offset(offset).limit(limit).all()
    return page([review_to_dict(r) for r in reviews], total, limit, offset)
