"""Admin dashboard routes: moderation queues, statistics, user management, exports."""
import csv
import io
from datetime import date, datetime, time, timezone

from fastapi import APIRouter, Depends, Query, Response

from sqlalchemy import or_
from gamereview.constants import ModerationStatus
from gamereview.database import get_db, session_factory_for
from gamereview.exceptions import NotFoundError, ValidationError
from gamereview.logging_config import get_logger
from gamereview.models import Game, Review, User
from gamereview.schemas.common import IdList
from gamereview.schemas.user import RoleUpdate
from gamereview.serializers import game_to_dict, review_to_dict, user_to_dict
from gamereview.services import moderation, stats
from gamereview.middleware.auth import get_current_admin

router = APIRouter(prefix="/admin", tags=["admin"])

logger = get_logger("gamereview.admin")

USER_SORT_FIELDS = {
    "createdAt": User.created_at,
    "created_at": User.created_at,
    "username": User.username,
    "email": User.email,
    "role": User.role,
}

EXPORT_MODELS = {
    "users": (User, ["id", "username", "email", "role", "avatar_url", "created_at"]),
    "games": (
        Game,
        [
            "id", "title", "author", "genre", "release_date", "status",
            "average_rating", "review_count", "company_id", "created_by_id", "created_at",
        ],
    ),
    "reviews": (Review, ["id", "user_id", "game_id", "rating", "comment", "status", "created_at"]),
}


def _day_start(d: date | None) -> datetime | None:
    return datetime.combine(d, time.min, tzinfo=timezone.utc) if d else None


def _day_end(d: date | None) -> datetime | None:
    return datetime.combine(d, time.max, tzinfo=timezone.utc) if d else None


# Dashboard


@router.get("/summary")
def get_summary(
    _admin: User = Depends(get_current_admin),
    db=Depends(get_db),
    limit: int | None = Query(None, ge=1, le=50),
):
    """Totals, moderation queue sizes and the recent activity feed."""
    return stats.summary(db, limit)


@router.get("/stats")
def get_stats(
    _admin: User = Depends(get_current_admin),
    db=Depends(get_db),
    range_: str = Query("monthly", alias="range", description="daily|weekly|monthly"),
    start_date: date | None = Query(None, alias="startDate"),
    end_date: date | None = Query(None, alias="endDate"),
):
    """New games, users and reviews bucketed by day, ISO week or month."""
    return stats.stats_overview(db, range_, _day_start(start_date), _day_end(end_date))


@router.get("/stats/genres")
def get_genre_stats(_admin: User = Depends(get_current_admin), db=Depends(get_db)):
    return stats.genre_distribution(db)


@router.get("/stats/ratings")
def get_rating_stats(_admin: User = Depends(get_current_admin), db=Depends(get_db)):
    return stats.rating_distribution(db)


# Moderation queues


@router.get("/games")
def get_admin_games(
    admin: User = Depends(get_current_admin),
    db=Depends(get_db),
    status_: str = Query("ALL", alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    games, total = moderation.list_games(db, admin, status=status_, sort="recent", limit=limit, offset=offset)
    return {"data": [game_to_dict(g) for g in games], "total": total, "limit": limit, "offset": offset}


@router.get("/games/pending")
def get_pending_games(admin: User = Depends(get_current_admin), db=Depends(get_db)):
    games, _ = moderation.list_games(db, admin, status=ModerationStatus.PENDING.value, limit=500)
    return [game_to_dict(g) for g in games]


@router.post("/games/approve")
def approve_games(data: IdList, admin: User = Depends(get_current_admin), db=Depends(get_db)):
    return moderation.moderate_many(
        session_factory_for(db), "game", data.ids, ModerationStatus.APPROVED, admin
    )


@router.post("/games/reject")
def reject_games(data: IdList, admin: User = Depends(get_current_admin), db=Depends(get_db)):
    return moderation.moderate_many(
        session_factory_for(db), "game", data.ids, ModerationStatus.REJECTED, admin
    )


@router.get("/reviews")
def get_admin_reviews(
    admin: User = Depends(get_current_admin),
    db=Depends(get_db),
    status_: str = Query("ALL", alias="status"),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    reviews, total = moderation.list_reviews(db, admin, status=status_, limit=limit, offset=offset)
    return {"data": [review_to_dict(r) for r in reviews], "total": total, "limit": limit, "offset": offset}


@router.get("/reviews/pending")
def get_pending_reviews(admin: User = Depends(get_current_admin), db=Depends(get_db)):
    reviews, _ = moderation.list_reviews(db, admin, status=ModerationStatus.PENDING.value, limit=500)
    return [review_to_dict(r) for r in reviews]


@router.post("/reviews/approve")
def approve_reviews(data: IdList, admin: User = Depends(get_current_admin), db=Depends(get_db)):
    return moderation.moderate_many(
        session_factory_for(db), "review", data.ids, ModerationStatus.APPROVED, admin
    )


@router.post("/reviews/reject")
def reject_reviews(data: IdList, admin: User = Depends(get_current_admin), db=Depends(get_db)):
    return moderation.moderate_many(
        session_factory_for(db), "review", data.ids, ModerationStatus.REJECTED, admin
    )


# Users


@router.get("/users")
def get_admin_users(
    _admin: User = Depends(get_current_admin),
    db=Depends(get_db),
    search: str = "",
    role: str | None = None,
    sort: str = "createdAt:desc",
    page: int = Query(1, ge=1),
    page_size: int = Query(10, ge=1, le=100),
):
    qry = db.query(User)
    if search.strip():
        pattern = f"%{search.strip()}%"
        qry = qry.filter(or_(User.username.ilike(pattern), User.email.ilike(pattern)))
    if role:
        qry = qry.filter(User.role == role)

    field, _, direction = sort.partition(":")
    column = USER_SORT_FIELDS.get(field)
    if column is None:
        raise ValidationError(f"Cannot sort users by {field}")
    qry = qry.order_by(column.asc() if direction == "asc" else column.desc())

    total = qry.count()
    users = qry.offset((page - 1) * page_size).limit(page_size).all()
    items = []
    for u in users:
        d = user_to_dict(u)
        d["reviews_count"] = db.query(Review).filter(Review.user_id == u.id).count()
        d["games_count"] = db.query(Game).filter(Game.created_by_id == u.id).count()
        items.append(d)
    return {
        "items": items,
        "total_count": total,
        "page": page,
        "page_size": page_size,
        "total_pages": (total + page_size - 1) // page_size,
    }


@router.patch("/users/{user_id}/role")
def update_user_role(
    user_id: str,
    data: RoleUpdate,
    admin: User = Depends(get_current_admin),
    db=Depends(get_db),
):
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")
    user.role = data.role.value
    db.commit()
    db.refresh(user)
    logger.info("User %s role -> %s by %s", user.id, user.role, admin.username)
    return {"id": user.id, "username": user.username, "role": user.role}


# Export


def _export_value(value):
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


@router.get("/export/{kind}")
def export_rows(
    kind: str,
    _admin: User = Depends(get_current_admin),
    db=Depends(get_db),
    format: str = Query("csv", description="csv|json"),
):
    """Dump users, games or reviews as CSV or JSON."""
    if kind not in EXPORT_MODELS:
        raise ValidationError("Invalid export type")
    if format not in ("csv", "json"):
        raise ValidationError("format must be csv or json")
    model, columns = EXPORT_MODELS[kind]
    rows = [
        {col: _export_value(getattr(obj, col)) for col in columns}
        for obj in db.query(model).order_by(model.created_at.asc()).all()
    ]
    if format == "json":
        return rows

    buf = io.StringIO()
    writer = csv.DictWriter(buf, fieldnames=columns)
    writer.writeheader()
    writer.writerows(rows)
    return Response(
        content=buf.getvalue(),
        media_type="text/csv",
        headers={"Content-Disposition": f'attachment; filename="{kind}.csv"'},
    )
