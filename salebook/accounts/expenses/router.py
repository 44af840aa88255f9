from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session
from datetime import date
from typing import Optional

from salebook.database import get_db
from . import schemas, service


router = APIRouter()


@router.post("/", response_model=schemas.ExpenseOut, status_code=status.HTTP_201_CREATED)
def create_expense(expense: schemas.ExpenseCreate, db: Session = Depends(get_db)):
    return service.create_expense(db, expense)


@router.get("/", response_model=schemas.ExpenseListOut)
def list_expenses(
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    vendor_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return service.list_expenses(db, start_date, end_date, vendor_id)


@router.get("/{expense_id}", response_model=schemas.ExpenseOut)
def get_expense(expense_id: str, db: Session = Depends(get_db)):
    return service.get_expense_by_id(db, expense_id)


@router.put("/{expense_id}", response_model=schemas.ExpenseOut)
def update_expense(
    expense_id: str,
    expense: schemas.ExpenseUpdate,
    db: Session = Depends(get_db),
):
    return service.update_expense(db, expense_id, expense)


@router.delete("/{expense_id}")
def delete_expense(expense_id: str, db: Session = Depends(get_db)):
    return service.delete_expense(db, expense_id)
