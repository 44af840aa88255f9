from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response
from sqlalchemy.orm import Session

from salebook.accounts.expenses import service as expense_service
from salebook.database import get_db
from salebook.ledger import schemas, service
from salebook.purchase import service as purchase_service
from salebook.sales import service as sales_service


router = APIRouter()


# delete handlers per posting type
DELETE_HANDLERS = {
    service.SALE: sales_service.delete_sale,
    service.PURCHASE: purchase_service.delete_purchase,
    service.EXPENSE: expense_service.delete_expense,
}


@router.get("/", response_model=schemas.LedgerListOut)
def list_transactions(
    transaction_type: Optional[schemas.TransactionType] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    """
    Sales, purchases and expenses in one feed, grouped by day (newest first),
    with cash flow and profit totals for the same window.
    """
    return service.list_transactions(db, transaction_type, start_date, end_date)


@router.get("/export")
def export_transactions(
    transaction_type: Optional[schemas.TransactionType] = Query(None),
    start_date: Optional[date] = Query(None),
    end_date: Optional[date] = Query(None),
    db: Session = Depends(get_db),
):
    csv_data = service.export_transactions_csv(db, transaction_type, start_date, end_date)
    return Response(
        content=csv_data,
        media_type="text/csv",
        headers={"Content-Disposition": 'attachment; filename="transactions.csv"'},
    )


@router.delete("/{transaction_type}/{transaction_id}")
def delete_transaction(
    transaction_type: schemas.TransactionType,
    transaction_id: str,
    db: Session = Depends(get_db),
):
    return DELETE_HANDLERS[transaction_type](db, transaction_id)
