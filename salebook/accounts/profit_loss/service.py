from datetime import date
from typing import Optional

from sqlalchemy.orm import Session

from salebook.accounts import aggregations
from salebook.ledger import service as ledger_service
from salebook.stock.products import models as product_models


def get_profit_and_loss(
    db: Session,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    """
    Returns P&L report with the items-sold breakdown.
    - All time when no dates are given
    - End date is inclusive (same-day ranges work)
    - COGS uses each product's current cost
    """
    sales, _, expenses = ledger_service.load_ledger(
        db, start_date=start_date, end_date=end_date
    )
    products = db.query(product_models.Product).all()

    report = aggregations.profit_and_loss(sales, expenses, products)

    return {
        "period": {
            "start_date": start_date,
            "end_date": end_date,
        },
        **report,
        "items_sold": aggregations.items_sold_summary(sales),
    }
