"""User lifecycle operations that touch other entities."""
from sqlalchemy.orm import Session

from gamereview.exceptions import NotFoundError
from gamereview.logging_config import get_logger
from gamereview.models import Activity, Game, Review, User
from gamereview.services.moderation import require_admin
from gamereview.services.ratings import recompute_game_rating

logger = get_logger("gamereview.users")


def delete_user(db: Session, user_id: str, actor: User) -> None:
    """Remove a user with their reviews, authored games and activity rows.

    Games the user had reviewed (and that survive) get their rating
    aggregate recomputed afterwards.
    """
    require_admin(actor)
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise NotFoundError("User not found")

    authored = db.query(Game).filter(Game.created_by_id == user_id).all()
    authored_ids = {g.id for g in authored}
    reviews = db.query(Review).filter(Review.user_id == user_id).all()
    affected = {r.game_id for r in reviews} - authored_ids

    for review in reviews:
        db.delete(review)
    for game in authored:
        db.delete(game)
    db.query(Activity).filter(Activity.user_id == user_id).delete(synchronize_session=False)
    db.flush()
    db.delete(user)
    db.commit()
    logger.info(
        "User %s deleted by %s (%d reviews, %d games)",
        user_id,
        actor.username,
        len(reviews),
        len(authored),
    )

    for game_id in sorted(affected):
        recompute_game_rating(db, game_id)
