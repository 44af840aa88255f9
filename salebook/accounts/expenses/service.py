from datetime import date
from typing import Optional

from fastapi import HTTPException
from loguru import logger
from sqlalchemy.orm import Session

from salebook.activity import service as activity_service
from salebook.ledger import service as ledger_service
from salebook.vendor import service as vendor_service
from . import models, schemas


def _resolve_vendor(db: Session, vendor_id: Optional[str]):
    # an expense may have no vendor, but a given one must exist
    if not vendor_id:
        return None
    return vendor_service.require_vendor(db, vendor_id)


# =========================
# Create Expense
# =========================
def create_expense(db: Session, expense: schemas.ExpenseCreate):

    def work(db: Session):
        vendor = _resolve_vendor(db, expense.vendor_id)
        expense_date = ledger_service.to_business_time(expense.date) or ledger_service.local_now()

        new_expense = models.Expense(
            display_id=ledger_service.next_display_id(db, expense_date),
            description=expense.description,
            amount=expense.amount,
            vendor_id=vendor.id if vendor else None,
            vendor_name=vendor.name if vendor else "",
            date=expense_date,
        )
        db.add(new_expense)

        activity_service.record_activity(
            db,
            type="expense",
            description=f"Expense: {expense.description} for ${expense.amount:.2f}",
            person="Internal",
        )

        db.flush()
        return new_expense

    new_expense = ledger_service.run_atomic(db, work)
    logger.info(f"Expense posted: {new_expense.display_id} ({new_expense.id}) amount={new_expense.amount:.2f}")
    return new_expense


# =========================
# List Expenses
# =========================
def list_expenses(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    vendor_id: Optional[str] = None,
):
    query = db.query(models.Expense)
    query = ledger_service.filter_by_date(query, models.Expense.date, start_date, end_date)

    if vendor_id:
        query = query.filter(models.Expense.vendor_id == vendor_id)

    expenses = query.order_by(models.Expense.date.desc()).all()

    return {
        "total_expenses": sum(exp.amount for exp in expenses),
        "expenses": expenses,
    }


# =========================
# Get Expense by ID
# =========================
def get_expense_by_id(db: Session, expense_id: str):
    expense = db.query(models.Expense).filter(models.Expense.id == expense_id).first()
    if not expense:
        raise HTTPException(status_code=404, detail="Expense not found")
    return expense


# =========================
# Update Expense
# =========================
def update_expense(db: Session, expense_id: str, expense_data: schemas.ExpenseUpdate):

    def work(db: Session):
        expense = db.get(models.Expense, expense_id)
        if expense is None:
            raise HTTPException(status_code=404, detail="Expense not found")

        vendor = _resolve_vendor(db, expense_data.vendor_id)

        expense.description = expense_data.description
        expense.amount = expense_data.amount
        expense.vendor_id = vendor.id if vendor else None
        expense.vendor_name = vendor.name if vendor else ""
        expense.date = ledger_service.to_business_time(expense_data.date) or expense.date

        db.flush()
        return expense

    expense = ledger_service.run_atomic(db, work)
    logger.info(f"Expense updated: {expense.display_id} ({expense.id})")
    return expense


# =========================
# Delete Expense
# =========================
def delete_expense(db: Session, expense_id: str):

    def work(db: Session):
        expense = db.get(models.Expense, expense_id)
        if expense is None:
            raise HTTPException(status_code=404, detail="Expense not found")
        db.delete(expense)

    ledger_service.run_atomic(db, work)
    logger.info(f"Expense deleted: {expense_id}")
    return {
        "id": expense_id,
        "detail": "Expense successfully deleted"
    }
