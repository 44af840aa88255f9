from sqlalchemy.exc import IntegrityError

from salebook.ledger import identifiers
from salebook.stock.products import service as product_service


def create_product(client, **overrides):
    payload = {"name": "Phone Case", "price": 10, "cost": 4, "stock": 10, "low_stock": 2}
    payload.update(overrides)
    response = client.post("/stock/products/", json=payload)
    assert response.status_code == 201, response.text
    return response.json()


def create_client(client, name="Dara", phone="012345678"):
    response = client.post("/clients/", json={"name": name, "phone": phone, "province": "Phnom Penh"})
    assert response.status_code == 201, response.text
    return response.json()


def post_sale(client, client_id, product_id, quantity, date="2024-03-05T10:00:00", **extra):
    payload = {
        "client_id": client_id,
        "date": date,
        "items": [{"product_id": product_id, "quantity": quantity, "price": 10}],
        **extra,
    }
    return client.post("/sales/", json=payload)


def test_health(client):
    assert client.get("/health").json() == {"status": "ok"}


def test_product_codes_and_stock_lock(client):
    product = create_product(client)

    assert product["code"] == "PD-" + product["id"][:3].upper()
    assert product["is_low_stock"] is False

    response = client.put(f"/stock/products/{product['id']}", json={"stock": 99})
    assert response.status_code == 422

    response = client.put(f"/stock/products/{product['id']}", json={"price": 12})
    assert response.status_code == 200
    assert response.json()["stock"] == 10


def test_duplicate_product_name_rejected(client):
    create_product(client, name="Cable")
    response = client.post("/stock/products/", json={"name": "cable", "price": 5})
    assert response.status_code == 400


def test_duplicate_client_phone_rejected(client):
    first = create_client(client)
    assert first["code"] == identifiers.client_code(first["id"])

    response = client.post("/clients/", json={"name": "Other", "phone": "012345678"})

    assert response.status_code == 400
    assert response.json()["detail"] == 'Client "Dara" with phone number "012345678" is already registered.'


def test_sale_post_and_receipt(client):
    product = create_product(client)
    buyer = create_client(client)

    response = post_sale(client, buyer["id"], product["id"], 3, delivery_fee=2, payment_method="COD")

    assert response.status_code == 201, response.text
    sale = response.json()
    assert sale["display_id"] == "03-05-01"
    assert sale["amount"] == 32
    assert sale["transaction_type"] == "Sale"
    assert client.get(f"/stock/products/{product['id']}").json()["stock"] == 7

    receipt = client.get(f"/sales/{sale['id']}/receipt").json()
    assert receipt["client_phone"] == "012345678"
    assert receipt["client_province"] == "Phnom Penh"

    clients = client.get("/clients/").json()
    assert clients[0]["total_spent"] == 32
    assert clients[0]["orders"] == 1


def test_sale_over_stock_returns_400(client):
    product = create_product(client, name="Charger", stock=5)
    buyer = create_client(client)

    response = post_sale(client, buyer["id"], product["id"], 6)

    assert response.status_code == 400
    assert response.json()["detail"] == "Not enough stock for Charger! Only 5 left."
    assert client.get(f"/stock/products/{product['id']}").json()["stock"] == 5


def test_purchase_updates_vendor(client):
    product = create_product(client, stock=0)
    vendor = client.post("/vendor/", json={"name": "Global Supplies"}).json()
    assert vendor["code"] == "VD-" + vendor["id"][:4].upper()

    response = client.post(
        "/purchase/",
        json={
            "vendor_id": vendor["id"],
            "items": [{"product_id": product["id"], "quantity": 5, "cost": 4}],
        },
    )

    assert response.status_code == 201, response.text
    vendor = client.get(f"/vendor/{vendor['id']}").json()
    assert vendor["orders"] == 1
    assert vendor["total_amount"] == 20
    assert client.get(f"/stock/products/{product['id']}").json()["stock"] == 5


def test_transactions_listing_and_export(client):
    product = create_product(client)
    buyer = create_client(client)
    post_sale(client, buyer["id"], product["id"], 2)
    client.post(
        "/accounts/expenses/",
        json={"description": "Rent", "amount": 5, "date": "2024-03-05T12:00:00"},
    )

    listing = client.get("/transactions/").json()

    assert [day["date"] for day in listing["days"]] == ["2024-03-05"]
    entries = listing["days"][0]["transactions"]
    assert [e["transaction_type"] for e in entries] == ["Expense", "Sale"]
    assert [e["display_id"] for e in entries] == ["03-05-02", "03-05-01"]
    assert listing["summary"]["cash_in"] == 20
    assert listing["summary"]["cash_out"] == 5
    assert listing["summary"]["cost_of_goods_sold"] == 8
    assert listing["summary"]["profit_loss"] == 7

    only_sales = client.get("/transactions/", params={"transaction_type": "Sale"}).json()
    assert len(only_sales["days"][0]["transactions"]) == 1

    export = client.get("/transactions/export")
    assert export.status_code == 200
    assert export.headers["content-type"].startswith("text/csv")
    lines = export.text.strip().splitlines()
    assert lines[0] == "date,display_id,transaction_type,party,details,amount"
    assert len(lines) == 3


def test_generic_delete_restores_stock(client):
    product = create_product(client)
    buyer = create_client(client)
    sale = post_sale(client, buyer["id"], product["id"], 4).json()

    response = client.delete(f"/transactions/Sale/{sale['id']}")

    assert response.status_code == 200
    assert client.get(f"/stock/products/{product['id']}").json()["stock"] == 10
    assert client.get(f"/sales/{sale['id']}").status_code == 404

    assert client.delete("/transactions/Refund/abc").status_code == 422


def test_dashboard_and_activities(client):
    product = create_product(client)
    buyer = create_client(client)
    post_sale(client, buyer["id"], product["id"], 1, date=None)

    dashboard = client.get("/dashboard/").json()

    assert dashboard["total_sales"] == 10
    assert dashboard["daily_sales"] == 10
    assert dashboard["monthly_sales"] == 10
    assert dashboard["total_clients"] == 1
    assert dashboard["profit_or_loss"] == 6
    assert dashboard["top_clients"][0]["name"] == "Dara"

    types = [a["type"] for a in client.get("/activities/").json()]
    assert "sale" in types and "client" in types and "product" in types


def test_profit_loss_report(client):
    product = create_product(client)
    buyer = create_client(client)
    post_sale(client, buyer["id"], product["id"], 2)
    post_sale(client, buyer["id"], product["id"], 1, date="2024-04-01T10:00:00")

    report = client.get(
        "/accounts/profit_loss/",
        params={"start_date": "2024-03-05", "end_date": "2024-03-05"},
    ).json()

    assert report["total_sales"] == 20
    assert report["cost_of_goods_sold"] == 8
    assert report["items_sold"] == [{"name": "Phone Case", "quantity": 2, "total_sales": 20}]


def test_low_stock_inventory(client):
    create_product(client, name="Case", stock=1, low_stock=2)
    create_product(client, name="Cable", stock=20, low_stock=2)

    low = client.get("/stock/inventory/low-stock").json()
    inventory = client.get("/stock/inventory/").json()

    assert [p["name"] for p in low] == ["Case"]
    assert inventory["total_cost_value"] == 84


def test_store_error_answers_503(client, monkeypatch):
    def failing(db, name=None):
        raise IntegrityError("INSERT INTO products (id, name) VALUES (?, ?)", {}, Exception())

    monkeypatch.setattr(product_service, "get_products", failing)

    response = client.get("/stock/products/")

    assert response.status_code == 503
    assert response.json() == {"detail": "Database error"}
