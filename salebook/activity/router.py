from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from salebook.database import get_db
from . import schemas, service

router = APIRouter()


@router.get("/", response_model=List[schemas.RecentActivityOut])
def list_activities(
    limit: Optional[int] = Query(None, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return service.list_recent_activities(db, limit)
