"""Moderation workflow for game and review submissions.

Games and reviews carry a PENDING / APPROVED / REJECTED status. Only admins
move content between states, and any state may move to any other. Public
listings only ever show APPROVED rows to non-admin viewers.

Every operation validates and authorizes before it writes anything.
"""
from concurrent.futures import ThreadPoolExecutor
from typing import Callable

from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from gamereview.config import settings
from gamereview.constants import GAME_SORTS, ActivityType, ModerationStatus
from gamereview.exceptions import (
    AuthorizationError,
    ConflictError,
    DependencyError,
    GameReviewError,
    NotFoundError,
    ValidationError,
)
from gamereview.logging_config import get_logger
from gamereview.models import Company, Game, GameTag, Review, Tag, User
from gamereview.schemas.game import GameCreate, GameUpdate
from gamereview.schemas.review import ReviewCreate, ReviewUpdate
from gamereview.services.activity import record_activity
from gamereview.services.ratings import recompute_game_rating
from gamereview.utils import generate_id

logger = get_logger("gamereview.moderation")

APPROVED = ModerationStatus.APPROVED.value
PENDING = ModerationStatus.PENDING.value
ALL_STATUSES = "ALL"


def require_admin(actor: User | None) -> None:
    if actor is None or not actor.is_admin:
        raise AuthorizationError("Admin access required")


def listing_status(viewer: User | None, requested: str | None) -> str | None:
    """Status a listing is restricted to for ``viewer``. None means unrestricted.

    Non-admins always get APPROVED. Admins get APPROVED unless they ask for
    a specific status or ``ALL``.
    """
    if viewer is None or not viewer.is_admin or not requested:
        return APPROVED
    requested = requested.upper()
    if requested == ALL_STATUSES:
        return None
    if requested not in ModerationStatus.__members__:
        raise ValidationError(f"Unknown status: {requested}")
    return requested


def _initial_status(auto_approve: bool) -> str:
    return APPROVED if auto_approve else PENDING


def _required_text(value: str, field: str) -> str:
    value = value.strip()
    if not value:
        raise ValidationError(f"{field} is required")
    return value


def _checked_comment(comment: str) -> str:
    comment = comment.strip()
    if len(comment) < max(settings.min_comment_length, 1):
        raise ValidationError(
            f"Comment must be at least {max(settings.min_comment_length, 1)} characters"
        )
    return comment


def _resolve_company(db: Session, company_id: str) -> Company:
    company = db.query(Company).filter(Company.id == company_id).first()
    if not company:
        raise ValidationError("Invalid company ID")
    return company


def _resolve_tags(db: Session, tag_ids: list[str]) -> list[str]:
    wanted = list(dict.fromkeys(tag_ids))
    if not wanted:
        return []
    found = {t.id for t in db.query(Tag).filter(Tag.id.in_(wanted)).all()}
    missing = [t for t in wanted if t not in found]
    if missing:
        raise ValidationError(f"Unknown tag IDs: {', '.join(missing)}")
    return wanted


def _can_view_game(game: Game, viewer: User | None) -> bool:
    if game.status == APPROVED:
        return True
    return viewer is not None and (viewer.is_admin or viewer.id == game.created_by_id)


def _can_view_review(review: Review, viewer: User | None) -> bool:
    if review.game is None or not _can_view_game(review.game, viewer):
        return False
    if review.status == APPROVED:
        return True
    return viewer is not None and (viewer.is_admin or viewer.id == review.user_id)


# Games


def get_game(db: Session, game_id: str, viewer: User | None = None) -> Game:
    game = db.query(Game).filter(Game.id == game_id).first()
    if not game or not _can_view_game(game, viewer):
        raise NotFoundError("Game not found")
    return game


def _game_order(sort: str | None) -> list:
    if sort == "recent":
        return [Game.created_at.desc()]
    if sort == "newest":
        return [Game.release_date.desc(), Game.title.asc()]
    if sort == "oldest":
        return [Game.release_date.asc(), Game.title.asc()]
    if sort == "highest-rated":
        return [Game.average_rating.desc(), Game.title.asc()]
    if sort == "lowest-rated":
        return [Game.average_rating.asc(), Game.title.asc()]
    if sort == "most-reviewed":
        return [Game.review_count.desc(), Game.title.asc()]
    return [Game.title.asc()]


def list_games(
    db: Session,
    viewer: User | None,
    status: str | None = None,
    genre: str | None = None,
    search: str | None = None,
    sort: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Game], int]:
    if sort and sort not in GAME_SORTS:
        raise ValidationError(f"sort must be one of: {', '.join(GAME_SORTS)}")
    qry = db.query(Game)
    status_filter = listing_status(viewer, status)
    if status_filter:
        qry = qry.filter(Game.status == status_filter)
    if genre and genre.lower() != "any":
        qry = qry.filter(Game.genre == genre)
    if search and search.strip():
        pattern = f"%{search.strip()}%"
        qry = qry.filter(or_(Game.title.ilike(pattern), Game.description.ilike(pattern)))
    total = qry.count()
    games = qry.order_by(*_game_order(sort)).offset(offset).limit(limit).all()
    return games, total


def submit_game(db: Session, data: GameCreate, creator: User) -> Game:
    title = _required_text(data.title, "title")
    author = _required_text(data.author, "author")
    company = _resolve_company(db, data.company_id)
    tag_ids = _resolve_tags(db, data.tag_ids)

    game = Game(
        id=generate_id(),
        title=title,
        author=author,
        composer=data.composer,
        description=data.description,
        genre=data.genre,
        release_date=data.release_date,
        cover_image=data.cover_image,
        status=_initial_status(settings.auto_approve_games),
        average_rating=0.0,
        review_count=0,
        company_id=company.id,
        created_by_id=creator.id,
    )
    game.tags = [GameTag(tag_id=tag_id) for tag_id in tag_ids]
    db.add(game)
    record_activity(db, ActivityType.GAME_ADDED, title, creator.id)
    db.commit()
    db.refresh(game)
    logger.info("Game %s submitted by %s (%s)", game.id, creator.username, game.status)
    return game


def update_game(db: Session, game_id: str, data: GameUpdate, actor: User) -> Game:
    game = db.query(Game).filter(Game.id == game_id).first()
    if not game:
        raise NotFoundError("Game not found")
    if not actor.is_admin and game.created_by_id != actor.id:
        raise AuthorizationError("You can only update your own games")

    fields = {k: v for k, v in data.model_dump(exclude_unset=True).items() if v is not None}
    tag_ids = fields.pop("tag_ids", None)
    if "title" in fields:
        fields["title"] = _required_text(fields["title"], "title")
    if "author" in fields:
        fields["author"] = _required_text(fields["author"], "author")
    if "company_id" in fields:
        _resolve_company(db, fields["company_id"])
    if tag_ids is not None:
        tag_ids = _resolve_tags(db, tag_ids)

    for key, value in fields.items():
        setattr(game, key, value)
    if tag_ids is not None:
        existing = {gt.tag_id: gt for gt in game.tags}
        game.tags = [existing.get(tag_id) or GameTag(tag_id=tag_id) for tag_id in tag_ids]
    db.commit()
    db.refresh(game)
    return game


def delete_game(db: Session, game_id: str, actor: User) -> None:
    """Delete a game with its reviews and tag links. Admin only."""
    require_admin(actor)
    game = db.query(Game).filter(Game.id == game_id).first()
    if not game:
        raise NotFoundError("Game not found")
    db.delete(game)
    db.commit()
    logger.info("Game %s deleted by %s", game_id, actor.username)


def set_game_status(db: Session, game_id: str, status: ModerationStatus, actor: User) -> Game:
    require_admin(actor)
    game = db.query(Game).filter(Game.id == game_id).first()
    if not game:
        raise NotFoundError("Game not found")
    previous = game.status
    game.status = status.value
    db.commit()
    db.refresh(game)
    logger.info("Game %s: %s -> %s by %s", game.id, previous, game.status, actor.username)
    return game


def approve_game(db: Session, game_id: str, actor: User) -> Game:
    return set_game_status(db, game_id, ModerationStatus.APPROVED, actor)


def reject_game(db: Session, game_id: str, actor: User) -> Game:
    return set_game_status(db, game_id, ModerationStatus.REJECTED, actor)


# Reviews


def get_review(db: Session, review_id: str, viewer: User | None = None) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review or not _can_view_review(review, viewer):
        raise NotFoundError("Review not found")
    return review


def list_reviews(
    db: Session,
    viewer: User | None,
    status: str | None = None,
    game_id: str | None = None,
    user_id: str | None = None,
    limit: int = 50,
    offset: int = 0,
) -> tuple[list[Review], int]:
    qry = db.query(Review)
    status_filter = listing_status(viewer, status)
    if status_filter:
        qry = qry.filter(Review.status == status_filter)
    if viewer is None:
        qry = qry.join(Game, Review.game_id == Game.id).filter(Game.status == APPROVED)
    elif not viewer.is_admin:
        qry = qry.join(Game, Review.game_id == Game.id).filter(
            or_(Game.status == APPROVED, Game.created_by_id == viewer.id)
        )
    if game_id:
        qry = qry.filter(Review.game_id == game_id)
    if user_id:
        qry = qry.filter(Review.user_id == user_id)
    total = qry.count()
    reviews = qry.order_by(Review.created_at.desc()).offset(offset).limit(limit).all()
    return reviews, total


def submit_review(db: Session, data: ReviewCreate, author: User) -> Review:
    comment = _checked_comment(data.comment)
    game = db.query(Game).filter(Game.id == data.game_id).first()
    if not game or not _can_view_game(game, author):
        raise NotFoundError("Game not found")
    existing = (
        db.query(Review)
        .filter(Review.game_id == game.id, Review.user_id == author.id)
        .first()
    )
    if existing:
        raise ConflictError("You have already reviewed this game")

    review = Review(
        id=generate_id(),
        user_id=author.id,
        game_id=game.id,
        rating=data.rating,
        comment=comment,
        status=_initial_status(settings.auto_approve_reviews),
    )
    db.add(review)
    record_activity(db, ActivityType.REVIEW_ADDED, f"Review for {game.title}", author.id)
    try:
        db.commit()
    except IntegrityError:
        # A concurrent submission won the unique (user_id, game_id) race
        db.rollback()
        raise ConflictError("You have already reviewed this game")
    db.refresh(review)
    logger.info("Review %s on game %s by %s (%s)", review.id, game.id, author.username, review.status)
    recompute_game_rating(db, review.game_id)
    return review


def update_review(db: Session, review_id: str, data: ReviewUpdate, actor: User) -> Review:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFoundError("Review not found")
    if review.user_id != actor.id and not actor.is_admin:
        raise AuthorizationError("You can only update your own reviews")
    if data.status is not None and not actor.is_admin:
        raise AuthorizationError("Only admins can change review status")
    comment = _checked_comment(data.comment) if data.comment is not None else None

    if comment is not None:
        review.comment = comment
    if data.rating is not None:
        review.rating = data.rating
    if data.status is not None:
        review.status = data.status.value
    db.commit()
    db.refresh(review)
    recompute_game_rating(db, review.game_id)
    return review


def delete_review(db: Session, review_id: str, actor: User) -> None:
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFoundError("Review not found")
    if review.user_id != actor.id and not actor.is_admin:
        raise AuthorizationError("You can only delete your own reviews")
    game_id = review.game_id
    db.delete(review)
    db.commit()
    recompute_game_rating(db, game_id)


def set_review_status(db: Session, review_id: str, status: ModerationStatus, actor: User) -> Review:
    require_admin(actor)
    review = db.query(Review).filter(Review.id == review_id).first()
    if not review:
        raise NotFoundError("Review not found")
    previous = review.status
    review.status = status.value
    db.commit()
    db.refresh(review)
    logger.info("Review %s: %s -> %s by %s", review.id, previous, review.status, actor.username)
    recompute_game_rating(db, review.game_id)
    return review


def approve_review(db: Session, review_id: str, actor: User) -> Review:
    return set_review_status(db, review_id, ModerationStatus.APPROVED, actor)


def reject_review(db: Session, review_id: str, actor: User) -> Review:
    return set_review_status(db, review_id, ModerationStatus.REJECTED, actor)


# Batch


def _settle_ratings(session_factory: sessionmaker, review_ids: list[str]) -> None:
    """Recompute, one game at a time, every game touched by a review batch."""
    if not review_ids:
        return
    db = session_factory()
    try:
        rows = db.query(Review.game_id).filter(Review.id.in_(review_ids)).distinct().all()
        for (game_id,) in rows:
            recompute_game_rating(db, game_id)
    finally:
        db.close()


_STATUS_SETTERS: dict[str, Callable] = {
    "game": set_game_status,
    "review": set_review_status,
}


def moderate_many(
    session_factory: sessionmaker,
    kind: str,
    ids: list[str],
    status: ModerationStatus,
    actor: User,
) -> list[dict]:
    """Apply one status to many games or reviews.

    Each id runs independently in its own session on a thread pool. There is
    no transaction across the batch: the result lists success or failure per
    id, in the order the ids were given.
    """
    require_admin(actor)
    setter = _STATUS_SETTERS.get(kind)
    if setter is None:
        raise ValidationError(f"Unknown moderation target: {kind}")
    unique_ids = list(dict.fromkeys(ids))
    if not unique_ids:
        return []
    actor_id = actor.id

    def _run(entity_id: str) -> dict:
        db = session_factory()
        try:
            worker_actor = db.query(User).filter(User.id == actor_id).first()
            entity = setter(db, entity_id, status, worker_actor)
            return {"id": entity_id, "ok": True, "status": entity.status}
        except GameReviewError as exc:
            db.rollback()
            return {"id": entity_id, "ok": False, "error": exc.message, "code": exc.code}
        except SQLAlchemyError:
            db.rollback()
            logger.exception("Batch %s moderation failed for %s", kind, entity_id)
            return {
                "id": entity_id,
                "ok": False,
                "error": DependencyError.default_message,
                "code": DependencyError.code,
            }
        finally:
            db.close()

    workers = max(1, min(settings.batch_max_workers, len(unique_ids)))
    with ThreadPoolExecutor(max_workers=workers) as pool:
        results = list(pool.map(_run, unique_ids))
    if kind == "review":
        _settle_ratings(session_factory, [r["id"] for r in results if r["ok"]])
    failed = sum(1 for r in results if not r["ok"])
    logger.info(
        "Batch %s -> %s: %d ok, %d failed",
        kind,
        status.value,
        len(results) - failed,
        failed,
    )
    return results
