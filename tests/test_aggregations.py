from datetime import datetime
from types import SimpleNamespace as NS

from salebook.accounts import aggregations


def item(product_id, name, quantity, price=10.0, discount=0.0):
    return NS(product_id=product_id, product_name=name, quantity=quantity, price=price, discount=discount)


def sale(amount, date, client_id="c1", client_name="Dara", items=()):
    return NS(amount=amount, date=date, client_id=client_id, client_name=client_name, items=list(items))


PRODUCTS = [
    NS(id="p1", name="Case", cost=4.0, price=10.0, stock=3),
    NS(id="p2", name="Cable", cost=None, price=5.0, stock=10),
]


def test_sales_on_day_and_in_month():
    sales = [
        sale(10, datetime(2024, 3, 5, 9)),
        sale(15, datetime(2024, 3, 5, 18)),
        sale(7, datetime(2024, 3, 20)),
        sale(100, datetime(2024, 4, 5)),
    ]
    today = datetime(2024, 3, 5, 12)

    assert aggregations.sales_on_day(sales, today) == 25
    assert aggregations.sales_in_month(sales, today) == 32


def test_daily_sales_has_one_point_per_day_of_month():
    sales = [sale(10, datetime(2024, 2, 1)), sale(5, datetime(2024, 2, 29)), sale(3, datetime(2024, 2, 29))]

    points = aggregations.daily_sales(sales, datetime(2024, 2, 10))

    assert len(points) == 29
    assert points[0] == {"date": "01", "sales": 10}
    assert points[-1] == {"date": "29", "sales": 8}
    assert points[1]["sales"] == 0


def test_cost_of_goods_sold_skips_unknown_or_costless_products():
    sales = [
        sale(0, datetime(2024, 3, 5), items=[item("p1", "Case", 2), item("p2", "Cable", 5)]),
        # product gone from the catalog, matched by name snapshot
        sale(0, datetime(2024, 3, 5), items=[item(None, "Case", 1)]),
        sale(0, datetime(2024, 3, 5), items=[item(None, "Ghost", 9)]),
    ]

    assert aggregations.cost_of_goods_sold(sales, PRODUCTS) == 12


def test_profit_and_loss():
    sales = [sale(50, datetime(2024, 3, 5), items=[item("p1", "Case", 5)])]
    expenses = [NS(amount=8), NS(amount=2)]

    pnl = aggregations.profit_and_loss(sales, expenses, PRODUCTS)

    assert pnl == {
        "total_sales": 50,
        "cost_of_goods_sold": 20,
        "gross_profit": 30,
        "total_expenses": 10,
        "net_profit": 20,
    }


def test_cash_flow():
    flow = aggregations.cash_flow([NS(amount=100)], [NS(amount=30)], [NS(amount=20)])
    assert flow == {"cash_in": 100, "cash_out": 50, "net": 50}


def test_top_clients_ranked_by_total():
    clients = [NS(id="c1", name="Dara", phone="011"), NS(id="c2", name="Sok", phone="022")]
    sales = [
        sale(10, datetime(2024, 3, 5), "c1", "Dara"),
        sale(30, datetime(2024, 3, 5), "c2", "Sok"),
        sale(5, datetime(2024, 3, 6), "c1", "Dara"),
        sale(40, datetime(2024, 3, 6), None, "Walk-in"),
    ]

    top = aggregations.top_clients(sales, clients, limit=2)

    assert top == [
        {"client_id": None, "name": "Walk-in", "phone": "N/A", "total": 40},
        {"client_id": "c2", "name": "Sok", "phone": "022", "total": 30},
    ]


def test_client_totals_count_orders():
    sales = [sale(10, datetime(2024, 3, 5)), sale(5, datetime(2024, 3, 6))]
    assert aggregations.client_totals(sales) == {"c1": (15, 2)}


def test_stock_valuation_treats_missing_cost_as_zero():
    assert aggregations.stock_valuation(PRODUCTS) == {"cost_value": 12, "sale_value": 80}


def test_items_sold_summary_keeps_first_seen_order():
    sales = [
        sale(0, datetime(2024, 3, 5), items=[item("p2", "Cable", 2, price=5), item("p1", "Case", 1)]),
        sale(0, datetime(2024, 3, 6), items=[item("p1", "Case", 3, discount=2)]),
    ]

    assert aggregations.items_sold_summary(sales) == [
        {"name": "Cable", "quantity": 2, "total_sales": 10},
        {"name": "Case", "quantity": 4, "total_sales": 38},
    ]


def test_group_by_day_preserves_order():
    rows = [
        NS(date=datetime(2024, 3, 6, 9), id="b"),
        NS(date=datetime(2024, 3, 6, 8), id="a"),
        NS(date=datetime(2024, 3, 5, 20), id="c"),
    ]

    groups = aggregations.group_by_day(rows)

    assert list(groups) == ["2024-03-06", "2024-03-05"]
    assert [r.id for r in groups["2024-03-06"]] == ["b", "a"]
