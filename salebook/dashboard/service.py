from sqlalchemy.orm import Session

from salebook.accounts import aggregations
from salebook.activity import service as activity_service
from salebook.clients import models as client_models
from salebook.config import settings
from salebook.ledger import service as ledger_service
from salebook.stock.products import models as product_models


def get_dashboard(db: Session):
    """All-time figures plus today / this month, computed from one snapshot."""
    sales, _, expenses = ledger_service.load_ledger(db)
    clients = db.query(client_models.Client).all()
    products = db.query(product_models.Product).all()
    today = ledger_service.local_now()

    pnl = aggregations.profit_and_loss(sales, expenses, products)

    return {
        "total_sales": pnl["total_sales"],
        "total_clients": len(clients),
        "daily_sales": aggregations.sales_on_day(sales, today),
        "monthly_sales": aggregations.sales_in_month(sales, today),
        "cost_of_goods_sold": pnl["cost_of_goods_sold"],
        "total_expenses": pnl["total_expenses"],
        "profit_or_loss": pnl["net_profit"],
        "top_clients": aggregations.top_clients(sales, clients, settings.TOP_CLIENTS_LIMIT),
        "sales_chart": aggregations.daily_sales(sales, today),
        "recent_activities": activity_service.list_recent_activities(db),
    }
