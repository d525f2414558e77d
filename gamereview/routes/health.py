"""Health check endpoints."""
from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from gamereview.database import get_db
from gamereview.logging_config import get_logger

router = APIRouter(prefix="/health", tags=["health"])

logger = get_logger("gamereview.health")


@router.get("")
def health_check(db=Depends(get_db)):
    """Health check for load balancers. Reports whether the database answers."""
    try:
        db.execute(text("SELECT 1"))
        database = "ok"
    except SQLAlchemyError as e:
        logger.warning("Database health check failed: %s", e)
        database = "unavailable"
    return {"status": "ok" if database == "ok" else "degraded", "database": database}
