"""Admin dashboard statistics: time series, distributions and the summary card."""
from collections import Counter
from datetime import datetime, timedelta

from sqlalchemy import func
from sqlalchemy.orm import Session

from gamereview.config import settings
from gamereview.constants import (
    ModerationStatus,
    STATS_DEFAULT_WINDOW_DAYS,
    UNCATEGORIZED_GENRE,
)
from gamereview.exceptions import ValidationError
from gamereview.models import Activity, Game, Review, User
from gamereview.utils import as_utc, isoformat, utcnow

ENTITY_MODELS = {
    "user": User,
    "game": Game,
    "review": Review,
}

RANGES = tuple(STATS_DEFAULT_WINDOW_DAYS)


def _check_range(range_: str) -> None:
    if range_ not in STATS_DEFAULT_WINDOW_DAYS:
        raise ValidationError(f"range must be one of: {', '.join(RANGES)}")


def bucket_label(ts: datetime, range_: str) -> str:
    """Bucket key for a timestamp: ``YYYY-MM-DD``, ISO ``YYYY-Www`` or ``YYYY-MM``."""
    ts = as_utc(ts)
    if range_ == "daily":
        return f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}"
    if range_ == "weekly":
        iso_year, iso_week, _ = ts.isocalendar()
        return f"{iso_year:04d}-W{iso_week:02d}"
    return f"{ts.year:04d}-{ts.month:02d}"


def resolve_window(
    range_: str,
    start: datetime | None = None,
    end: datetime | None = None,
    now: datetime | None = None,
) -> tuple[datetime, datetime]:
    """Inclusive ``[start, end]`` window. Missing bounds fall back to the range default."""
    _check_range(range_)
    end = as_utc(end) if end else as_utc(now or utcnow())
    if start:
        start = as_utc(start)
    else:
        start = end - timedelta(days=STATS_DEFAULT_WINDOW_DAYS[range_])
    if start > end:
        raise ValidationError("startDate must not be after endDate")
    return start, end


def time_series(
    db: Session,
    entity: str,
    range_: str,
    start: datetime | None = None,
    end: datetime | None = None,
    now: datetime | None = None,
) -> list[dict]:
    """Creation counts per bucket, ascending. Empty buckets are omitted."""
    model = ENTITY_MODELS.get(entity)
    if model is None:
        raise ValidationError(f"entity must be one of: {', '.join(ENTITY_MODELS)}")
    start, end = resolve_window(range_, start, end, now)
    rows = (
        db.query(model.created_at)
        .filter(model.created_at >= start, model.created_at <= end)
        .all()
    )
    counts = Counter(bucket_label(created_at, range_) for (created_at,) in rows if created_at)
    return [{"bucket": label, "count": counts[label]} for label in sorted(counts)]


def stats_overview(
    db: Session,
    range_: str = "monthly",
    start: datetime | None = None,
    end: datetime | None = None,
) -> dict:
    start, end = resolve_window(range_, start, end)
    out = {"range": range_, "start": isoformat(start), "end": isoformat(end)}
    for entity in ("game", "user", "review"):
        series = time_series(db, entity, range_, start, end)
        out[f"{entity}_stats"] = {
            "time_series": series,
            "total": sum(point["count"] for point in series),
        }
    return out


def genre_distribution(db: Session) -> list[dict]:
    counts: Counter = Counter()
    for genre, count in db.query(Game.genre, func.count(Game.id)).group_by(Game.genre).all():
        counts[genre or UNCATEGORIZED_GENRE] += count
    return [
        {"genre": genre, "count": count}
        for genre, count in sorted(counts.items(), key=lambda item: (-item[1], item[0]))
    ]


def rating_distribution(db: Session) -> list[dict]:
    """Approved reviews per star rating. Always five entries, 1 through 5."""
    rows = (
        db.query(Review.rating, func.count(Review.id))
        .filter(Review.status == ModerationStatus.APPROVED.value)
        .group_by(Review.rating)
        .all()
    )
    counts = {rating: count for rating, count in rows}
    return [{"rating": rating, "count": counts.get(rating, 0)} for rating in range(1, 6)]


def _activity_to_dict(a: Activity) -> dict:
    return {
        "id": a.id,
        "type": a.type,
        "title": a.title,
        "timestamp": isoformat(a.created_at),
        "user": {"id": a.user.id, "username": a.user.username} if a.user else None,
    }


def summary(db: Session, limit: int | None = None) -> dict:
    limit = limit or settings.recent_activity_limit
    pending = ModerationStatus.PENDING.value
    recent = (
        db.query(Activity)
        .order_by(Activity.created_at.desc())
        .limit(limit)
        .all()
    )
    return {
        "total_users": db.query(User).count(),
        "total_games": db.query(Game).count(),
        "total_reviews": db.query(Review).count(),
        "pending_games": db.query(Game).filter(Game.status == pending).count(),
        "pending_reviews": db.query(Review).filter(Review.status == pending).count(),
        "recent_activity": [_activity_to_dict(a) for a in recent],
    }
