from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from salebook.config import settings
from . import models


def record_activity(db: Session, type: str, description: str, person: str = "Internal"):
    """
    Append one feed entry to the current unit of work.
    Never commits: the caller's transaction decides whether it lands.
    """
    activity = models.RecentActivity(
        type=type,
        description=description,
        person=person,
        time=datetime.utcnow(),
    )
    db.add(activity)
    return activity


def list_recent_activities(db: Session, limit: Optional[int] = None):
    return (
        db.query(models.RecentActivity)
        .order_by(models.RecentActivity.time.desc())
        .limit(limit or settings.RECENT_ACTIVITY_LIMIT)
        .all()
    )
