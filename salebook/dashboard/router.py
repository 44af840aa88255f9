from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from salebook.database import get_db
from . import schemas, service

router = APIRouter()


@router.get("/", response_model=schemas.DashboardOut)
def get_dashboard(db: Session = Depends(get_db)):
    return service.get_dashboard(db)
