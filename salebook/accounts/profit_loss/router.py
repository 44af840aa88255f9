from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from datetime import date

from salebook.database import get_db
from . import schemas, service


router = APIRouter()


@router.get("/", response_model=schemas.ProfitLossOut)
def get_profit_loss(
    start_date: date = Query(None, description="Start date for P&L period"),
    end_date: date = Query(None, description="End date for P&L period"),
    db: Session = Depends(get_db),
):
    """
    Profit & Loss report: sales, cost of goods sold, expenses, net result.
    """
    return service.get_profit_and_loss(db, start_date, end_date)
