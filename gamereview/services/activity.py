"""Activity feed writes."""
from sqlalchemy.orm import Session

from gamereview.constants import ActivityType
from gamereview.models import Activity
from gamereview.utils import generate_id


def record_activity(db: Session, type_: ActivityType, title: str, user_id: str | None) -> Activity:
    """Add an activity row to the session. The caller commits."""
    entry = Activity(id=generate_id(), type=type_.value, title=title, user_id=user_id)
    db.add(entry)
    return entry
