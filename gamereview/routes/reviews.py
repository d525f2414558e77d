"""Review routes."""
from fastapi import APIRouter, Depends, Query, Response, status

from gamereview.database import get_db
from gamereview.middleware.auth import get_current_user, get_current_user_required
from gamereview.models import User
from gamereview.schemas.common import ErrorResponse, PaginatedResponse
from gamereview.schemas.review import ReviewCreate, ReviewUpdate
from gamereview.serializers import page, review_to_dict
from gamereview.services import moderation

router = APIRouter(prefix="/reviews", tags=["reviews"])


def _review_status(r) -> dict:
    return {
        "id": r.id,
        "game_id": r.game_id,
        "status": r.status,
        "game_average_rating": r.game.average_rating if r.game else None,
        "game_review_count": r.game.review_count if r.game else None,
    }


@router.get("", response_model=PaginatedResponse)
def list_reviews(
    db=Depends(get_db),
    viewer: User | None = Depends(get_current_user),
    game_id: str | None = None,
    user_id: str | None = None,
    status_: str | None = Query(None, alias="status", description="Admins only: PENDING|APPROVED|REJECTED|ALL"),
    limit: int = Query(20, ge=1, le=100),
    offset: int = Query(0, ge=0),
):
    reviews, total = moderation.list_reviews(
        db,
        viewer,
        status=status_,
        game_id=game_id,
        user_id=user_id,
        limit=limit,
        offset=offset,
    )
    return page([review_to_dict(r) for r in reviews], total, limit, offset)


@router.get("/{review_id}", responses={404: {"model": ErrorResponse}})
def get_review(
    review_id: str,
    db=Depends(get_db),
    viewer: User | None = Depends(get_current_user),
):
    return review_to_dict(moderation.get_review(db, review_id, viewer))


@router.post("", status_code=status.HTTP_201_CREATED)
def create_review(
    data: ReviewCreate,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    return review_to_dict(moderation.submit_review(db, data, user))


@router.api_route("/{review_id}", methods=["PUT", "PATCH"])
def update_review(
    review_id: str,
    data: ReviewUpdate,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    return review_to_dict(moderation.update_review(db, review_id, data, user))


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(
    review_id: str,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    moderation.delete_review(db, review_id, user)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{review_id}/approve")
def approve_review(
    review_id: str,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    return _review_status(moderation.approve_review(db, review_id, user))


@router.post("/{review_id}/reject")
def reject_review(
    review_id: str,
    user: User = Depends(get_current_user_required),
    db=Depends(get_db),
):
    return _review_status(moderation.reject_review(db, review_id, user))
