"""Rating aggregation: keeps Game.average_rating / review_count in step with reviews.

The aggregate is always recomputed from scratch over the game's review set
rather than adjusted incrementally. It runs as its own unit of work after
the review write has been committed, so a failed recompute never undoes
the review. The next trigger on the same game repairs any stale value.
"""
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from gamereview.config import settings
from gamereview.constants import ModerationStatus
from gamereview.logging_config import get_logger
from gamereview.models import Game, Review

logger = get_logger("gamereview.ratings")


def average_rating(ratings: list[int]) -> float:
    """Mean of ``ratings`` rounded half-up to one decimal place, 0 when empty."""
    if not ratings:
        return 0.0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(Decimal("0.1"), rounding=ROUND_HALF_UP))


def counted_ratings(db: Session, game_id: str) -> list[int]:
    """Ratings that count toward the game's public aggregate."""
    qry = db.query(Review.rating).filter(Review.game_id == game_id)
    if settings.rating_scope == "approved":
        qry = qry.filter(Review.status == ModerationStatus.APPROVED.value)
    return [rating for (rating,) in qry.all()]


def recompute_game_rating(db: Session, game_id: str) -> Game | None:
    """Recompute and persist the rating aggregate of one game.

    Returns the updated game, or None when the game no longer exists or the
    write failed. Never raises into the caller.
    """
    try:
        game = db.query(Game).filter(Game.id == game_id).first()
        if not game:
            logger.warning("Skipping rating recompute: game %s not found", game_id)
            return None
        ratings = counted_ratings(db, game_id)
        game.average_rating = average_rating(ratings)
        game.review_count = len(ratings)
        db.commit()
        db.refresh(game)
        logger.debug(
            "Game %s rating -> %.1f over %d reviews",
            game_id,
            game.average_rating,
            game.review_count,
        )
        return game
    except SQLAlchemyError:
        db.rollback()
        logger.exception("Rating recompute failed for game %s", game_id)
        return None
