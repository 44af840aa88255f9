"""
Pure views over an in-memory snapshot of the ledger.

Nothing here touches the database. Arguments are sequences of ORM rows (or
any objects with the same attributes) so the same functions back the
dashboard, the profit & loss report and the ledger listing.
"""
import calendar
from collections import OrderedDict
from datetime import date, datetime
from typing import Callable, Iterable, Optional


def _day(value) -> date:
    return value.date() if isinstance(value, datetime) else value


def total_amount(rows: Iterable) -> float:
    return sum(r.amount for r in rows)


def sales_on_day(sales: Iterable, day: date | datetime) -> float:
    day = _day(day)
    return sum(s.amount for s in sales if _day(s.date) == day)


def sales_in_month(sales: Iterable, day: date | datetime) -> float:
    return sum(
        s.amount for s in sales
        if s.date.year == day.year and s.date.month == day.month
    )


def daily_sales(sales: Iterable, day: date | datetime) -> list[dict]:
    """One point per day of ``day``'s month."""
    days_in_month = calendar.monthrange(day.year, day.month)[1]
    totals = {d: 0.0 for d in range(1, days_in_month + 1)}

    for s in sales:
        if s.date.year == day.year and s.date.month == day.month:
            totals[s.date.day] += s.amount

    return [{"date": f"{d:02d}", "sales": total} for d, total in totals.items()]


# -------------------------
# Cost of goods sold
# -------------------------
def _product_lookup(products: Iterable):
    by_id, by_name = {}, {}
    for p in products:
        by_id[p.id] = p
        by_name[p.name] = p
    return by_id, by_name


def cost_of_goods_sold(sales: Iterable, products: Iterable) -> float:
    """
    Σ item.quantity x product.cost over every sale line.
    Lines whose product is unknown or has no cost contribute nothing.
    """
    by_id, by_name = _product_lookup(products)
    cogs = 0.0

    for sale in sales:
        for item in sale.items or []:
            product = by_id.get(item.product_id) or by_name.get(item.product_name)
            if product and product.cost:
                cogs += product.cost * item.quantity

    return cogs


def profit_and_loss(sales: Iterable, expenses: Iterable, products: Iterable) -> dict:
    sales = list(sales)
    total_sales = total_amount(sales)
    cogs = cost_of_goods_sold(sales, products)
    total_expenses = total_amount(expenses)
    gross_profit = total_sales - cogs

    return {
        "total_sales": total_sales,
        "cost_of_goods_sold": cogs,
        "gross_profit": gross_profit,
        "total_expenses": total_expenses,
        "net_profit": gross_profit - total_expenses,
    }


def cash_flow(sales: Iterable, purchases: Iterable, expenses: Iterable) -> dict:
    cash_in = total_amount(sales)
    cash_out = total_amount(purchases) + total_amount(expenses)
    return {"cash_in": cash_in, "cash_out": cash_out, "net": cash_in - cash_out}


# -------------------------
# Clients
# -------------------------
def _client_key(sale):
    return sale.client_id or sale.client_name


def client_totals(sales: Iterable) -> dict:
    """client key -> (total spent, number of orders)"""
    totals: dict = {}
    for sale in sales:
        key = _client_key(sale)
        spent, orders = totals.get(key, (0.0, 0))
        totals[key] = (spent + sale.amount, orders + 1)
    return totals


def top_clients(sales: Iterable, clients: Iterable, limit: int = 5) -> list[dict]:
    sales = list(sales)
    clients_by_id = {c.id: c for c in clients}
    clients_by_name = {c.name: c for c in clients_by_id.values()}
    names = {_client_key(s): s.client_name for s in sales}

    ranked = sorted(
        client_totals(sales).items(),
        key=lambda kv: kv[1][0],
        reverse=True,
    )[:limit]

    result = []
    for key, (total, _) in ranked:
        client = clients_by_id.get(key) or clients_by_name.get(names[key])
        result.append({
            "client_id": client.id if client else None,
            "name": client.name if client else names[key],
            "phone": client.phone if client else "N/A",
            "total": total,
        })
    return result


# -------------------------
# Stock
# -------------------------
def stock_valuation(products: Iterable) -> dict:
    cost_value = 0.0
    sale_value = 0.0
    for p in products:
        cost_value += p.stock * (p.cost or 0)
        sale_value += p.stock * (p.price or 0)
    return {"cost_value": cost_value, "sale_value": sale_value}


def items_sold_summary(sales: Iterable) -> list[dict]:
    """Quantity and net sales per product name, in first-seen order."""
    summary: "OrderedDict[str, dict]" = OrderedDict()

    for sale in sales:
        for item in sale.items or []:
            row = summary.setdefault(
                item.product_name,
                {"name": item.product_name, "quantity": 0, "total_sales": 0.0},
            )
            row["quantity"] += item.quantity
            row["total_sales"] += item.price * item.quantity - (item.discount or 0)

    return list(summary.values())


def group_by_day(
    transactions: Iterable,
    date_of: Optional[Callable] = None,
) -> "OrderedDict[str, list]":
    """Bucket transactions by ``yyyy-MM-dd``, keeping their order."""
    date_of = date_of or (lambda t: t.date)
    groups: "OrderedDict[str, list]" = OrderedDict()
    for tx in transactions:
        groups.setdefault(date_of(tx).strftime("%Y-%m-%d"), []).append(tx)
    return groups
