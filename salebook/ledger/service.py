from collections import defaultdict
from datetime import date, datetime, timedelta
from typing import Callable, Iterable, Optional, TypeVar

import pandas as pd
import pytz
from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from salebook.accounts import aggregations
from salebook.accounts.expenses import models as expense_models
from salebook.config import settings
from salebook.purchase import models as purchase_models
from salebook.sales import models as sales_models
from salebook.stock.products.models import Product
from . import identifiers, models

T = TypeVar("T")

SALE = "Sale"
PURCHASE = "Purchase"
EXPENSE = "Expense"

# stock direction of each posting type
STOCK_SIGN = {SALE: -1, PURCHASE: 1, EXPENSE: 0}


def local_now() -> datetime:
    """Naive wall-clock time in the business timezone."""
    tz = pytz.timezone(settings.TIMEZONE)
    return datetime.now(tz).replace(tzinfo=None)


def to_business_time(value: Optional[datetime]) -> Optional[datetime]:
    """Aware datetimes are converted to the business timezone and stored naive."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(pytz.timezone(settings.TIMEZONE)).replace(tzinfo=None)


# ============================================================
# ATOMIC UNIT
# ============================================================

def _is_counter_race(exc: IntegrityError) -> bool:
    return "counters" in (exc.statement or "")


def run_atomic(db: Session, work: Callable[[Session], T], max_attempts: Optional[int] = None) -> T:
    """
    Run ``work`` and commit, all-or-nothing.

    Rows written by the ledger carry a version counter, so a row changed by
    another committed transaction since we read it fails the flush with
    ``StaleDataError``. A concurrent first insert of the same day counter
    fails with ``IntegrityError`` on ``counters``. Both roll back and re-run
    ``work`` from scratch; anything else, other integrity errors included,
    rolls back and propagates.
    """
    attempts = max_attempts or settings.TRANSACTION_MAX_ATTEMPTS

    for attempt in range(1, attempts + 1):
        try:
            result = work(db)
            db.commit()
            return result
        except StaleDataError as exc:
            db.rollback()
            logger.warning(f"Transaction conflict (attempt {attempt}/{attempts}): {exc}")
        except IntegrityError as exc:
            db.rollback()
            if not _is_counter_race(exc):
                raise
            logger.warning(f"Transaction conflict (attempt {attempt}/{attempts}): {exc}")
        except Exception:
            db.rollback()
            raise

    logger.error(f"Transaction abandoned after {attempts} attempts")
    raise HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail="Transaction conflict, please retry",
    )


# ============================================================
# DAILY COUNTER
# ============================================================

def next_display_id(db: Session, day: date | datetime) -> str:
    """Bump the counter of ``day`` and return the matching display id."""
    key = identifiers.counter_key(day)
    counter = db.get(models.Counter, key)

    if counter is None:
        counter = models.Counter(key=key, count=1)
        db.add(counter)
    else:
        counter.count = counter.count + 1

    return identifiers.format_display_id(day, counter.count)


# ============================================================
# STOCK RECONCILIATION
# ============================================================

def compute_stock_deltas(
    old_type: Optional[str],
    old_items: Iterable,
    new_type: Optional[str],
    new_items: Iterable,
) -> dict[str, int]:
    """
    Net stock change per product when ``old_items`` (posted as ``old_type``)
    are replaced by ``new_items`` (posted as ``new_type``).

    Create passes no old items, delete passes no new items.
    """
    deltas: dict[str, int] = defaultdict(int)

    for item in old_items or []:
        if item.product_id:
            deltas[item.product_id] -= STOCK_SIGN.get(old_type, 0) * item.quantity

    for item in new_items or []:
        if item.product_id:
            deltas[item.product_id] += STOCK_SIGN.get(new_type, 0) * item.quantity

    return dict(deltas)


# ============================================================
# COMBINED LEDGER
# ============================================================

def _transaction_row(tx, transaction_type: str) -> dict:
    if transaction_type == SALE:
        party = tx.client_name
        details = ", ".join(i.product_name for i in tx.items)
    elif transaction_type == PURCHASE:
        party = tx.vendor_name or "-"
        details = ", ".join(i.item_name for i in tx.items)
    else:
        party = tx.vendor_name or "-"
        details = tx.description

    return {
        "id": tx.id,
        "display_id": tx.display_id,
        "transaction_type": transaction_type,
        "date": tx.date,
        "amount": tx.amount,
        "party": party,
        "details": details,
    }


def transaction_rows(sales, purchases, expenses) -> list[dict]:
    """Flat ledger rows, newest first."""
    rows = (
        [_transaction_row(s, SALE) for s in sales]
        + [_transaction_row(p, PURCHASE) for p in purchases]
        + [_transaction_row(e, EXPENSE) for e in expenses]
    )
    rows.sort(key=lambda r: r["date"], reverse=True)
    return rows


def filter_by_date(query, column, start_date: Optional[date], end_date: Optional[date]):
    if start_date:
        query = query.filter(column >= datetime.combine(start_date, datetime.min.time()))
    if end_date:
        # end date is inclusive to the end of that day
        query = query.filter(column < datetime.combine(end_date + timedelta(days=1), datetime.min.time()))
    return query


def load_ledger(
    db: Session,
    transaction_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    """Snapshot of sales, purchases and expenses in the requested window."""
    sales, purchases, expenses = [], [], []

    if transaction_type in (None, SALE):
        sales = filter_by_date(
            db.query(sales_models.Sale), sales_models.Sale.date, start_date, end_date
        ).all()
    if transaction_type in (None, PURCHASE):
        purchases = filter_by_date(
            db.query(purchase_models.Purchase), purchase_models.Purchase.date, start_date, end_date
        ).all()
    if transaction_type in (None, EXPENSE):
        expenses = filter_by_date(
            db.query(expense_models.Expense), expense_models.Expense.date, start_date, end_date
        ).all()

    return sales, purchases, expenses


def list_transactions(
    db: Session,
    transaction_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    sales, purchases, expenses = load_ledger(db, transaction_type, start_date, end_date)
    products = db.query(Product).all()
    rows = transaction_rows(sales, purchases, expenses)

    flow = aggregations.cash_flow(sales, purchases, expenses)
    pnl = aggregations.profit_and_loss(sales, expenses, products)

    return {
        "days": [
            {"date": day, "transactions": items}
            for day, items in aggregations.group_by_day(rows, date_of=lambda r: r["date"]).items()
        ],
        "summary": {
            "cash_in": flow["cash_in"],
            "cash_out": flow["cash_out"],
            "net_cash_flow": flow["net"],
            "cost_of_goods_sold": pnl["cost_of_goods_sold"],
            "total_expenses": pnl["total_expenses"],
            "profit_loss": pnl["net_profit"],
        },
    }


EXPORT_COLUMNS = ["date", "display_id", "transaction_type", "party", "details", "amount"]


def export_transactions_csv(
    db: Session,
    transaction_type: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
) -> str:
    sales, purchases, expenses = load_ledger(db, transaction_type, start_date, end_date)
    rows = transaction_rows(sales, purchases, expenses)

    df = pd.DataFrame(rows, columns=["id", *EXPORT_COLUMNS])
    if not df.empty:
        df["date"] = pd.to_datetime(df["date"]).dt.strftime("%Y-%m-%d %H:%M")
        df["amount"] = df["amount"].round(2)

    logger.info(f"Ledger export: {len(df)} rows")
    return df[EXPORT_COLUMNS].to_csv(index=False)
