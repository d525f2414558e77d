"""Genre lookup."""
from fastapi import APIRouter

from gamereview.constants import GENRES

router = APIRouter(prefix="/genres", tags=["genres"])


@router.get("")
async def list_genres():
    return GENRES
