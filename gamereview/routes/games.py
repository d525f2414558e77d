"""Game routes: public catalog, submissions and moderation."""
from fastapi import APIRouter, Depends, Query, Response, status

from gamereview.database import get_db
from gamereview.middleware.auth import get_current_user, get_current_user_required
from gamereview.models import User
from gamereview.schemas.common import ErrorResponse, PaginatedResponse
from gamereview.schemas.game import GameCreate, GameUpdate
from gamereview.serializers import game_to_dict, page, review_to_dict
from gamereview.services import moderation

router = APIRouter(prefix="/games", tags=["games"])


@router.get("", response_model=PaginatedResponse)
def list_games(
    db=Depends(get_db),
    viewer: User | None = Depends(get_current_user),
    status_: str | None = Query(None, alias="status", description="Admins only: PENDING|APPROVED|REJECTED|ALL"),
    genre: str | None = None,
    search: str | None = None,
    sort: str | None = Query(None, description="newest|oldest|highest-rated|lowest-rated|most-reviewed"),
    limit: int = Query(50, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    """Browse the catalog. Non-admins only ever see approved games."""
    games, total = moderation.list_games(
        db,
        viewer,
        status=status_,
        genre=genre,
        search=search,
        sort=sort,
        limit=limit,
        offset=offset,
    )
    return page([game_to_dict(g) for g in games], total, limit, offset)


@router.get("/{game_id}", responses={404: {"model": ErrorResponse}})
def get_game(
    game_id: str,
    db=Depends(get_db),
    viewer: User | None = Depends(get_current_user),
):
    return game_to_dict(moderation.get_game(db, game_id, viewer))


@router.get("/{game_id}/reviews")
def get_game_reviews(
    game_id: str,
    db=Depends(get_db),
    viewer: User | None = Depends(get_current_user),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    moderation.get_game(db, game_id, viewer)
    reviews, total = moderation.list_reviews(db, viewer, game_id=game_id, limit=limit, offset=offset)
    return page([review_to_dict(r, include_game=False) for r in reviews], total, limit, offset)


@router.post("", status_code=status.HTTP_201_CREATED)
def create_game(
    data: GameCreate,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    """Submit a game. It stays PENDING until an admin approves it."""
    return game_to_dict(moderation.submit_game(db, data, user))


@router.api_route("/{game_id}", methods=["PUT", "PATCH"])
def update_game(
    game_id: str,
    data: GameUpdate,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    return game_to_dict(moderation.update_game(db, game_id, data, user))


@router.delete("/{game_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_game(
    game_id: str,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    moderation.delete_game(db, game_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{game_id}/approve")
def approve_game(
    game_id: str,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    game = moderation.approve_game(db, game_id, user)
    return {"id": game.id, "title": game.title, "status": game.status}


@router.post("/{game_id}/reject")
def reject_game(
    game_id: str,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    game = moderation.reject_game(db, game_id, user)
    return {"id": game.id, "title": game.title, "status": game.status}
