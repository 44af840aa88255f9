from datetime import date
from typing import Optional

from fastapi import HTTPException
from loguru import logger
from sqlalchemy.orm import Session, selectinload

from salebook.activity import service as activity_service
from salebook.clients import models as client_models
from salebook.ledger import service as ledger_service
from salebook.ledger.service import SALE
from salebook.stock.inventory import service as inventory_service
from salebook.stock.products import models as product_models
from . import models, schemas


# ============================================================
# HELPERS
# ============================================================

def require_client(db: Session, client_id: str):
    client = db.get(client_models.Client, client_id)
    if client is None:
        raise HTTPException(status_code=404, detail="Client not found")
    return client


def load_products(db: Session, product_ids) -> dict:
    products = {}
    for product_id in product_ids:
        product = db.get(product_models.Product, product_id)
        if product is None:
            raise HTTPException(status_code=404, detail=f"Product '{product_id}' not found!")
        products[product_id] = product
    return products


def build_sale_items(items, products: dict) -> list:
    return [
        models.SaleItem(
            product_id=item.product_id,
            product_name=products[item.product_id].name,   # snapshot
            quantity=item.quantity,
            price=item.price,
            discount=item.discount,
        )
        for item in items
    ]


def sale_totals(items, delivery_fee: float) -> dict:
    """
    amount = Σ(price x quantity − discount) + delivery fee
    """
    subtotal = sum(i.price * i.quantity - (i.discount or 0) for i in items)
    return {
        "amount": subtotal + (delivery_fee or 0),
        "quantity": sum(i.quantity for i in items),
        "discount": sum(i.discount or 0 for i in items),
    }


# ============================================================
# POST
# ============================================================

def create_sale(db: Session, sale_data: schemas.SaleCreate):
    """
    Post a sale: counter, stock, ledger row and activity entry in one transaction.
    A line that sells more than the product has in stock rejects the whole sale.
    """
    product_ids = {item.product_id for item in sale_data.items}

    def work(db: Session):
        client = require_client(db, sale_data.client_id)
        sale_date = ledger_service.to_business_time(sale_data.date) or ledger_service.local_now()

        # 1️⃣ Daily counter -> display id
        display_id = ledger_service.next_display_id(db, sale_date)

        # 2️⃣ Products (must all exist) + stock check and deduction
        products = load_products(db, product_ids)
        deltas = ledger_service.compute_stock_deltas(None, [], SALE, sale_data.items)
        inventory_service.apply_stock_changes(db, deltas, required_ids=product_ids)

        # 3️⃣ Ledger row
        totals = sale_totals(sale_data.items, sale_data.delivery_fee)
        sale = models.Sale(
            display_id=display_id,
            client_id=client.id,
            client_name=client.name,
            date=sale_date,
            delivery_fee=sale_data.delivery_fee,
            payment_method=sale_data.payment_method,
            items=build_sale_items(sale_data.items, products),
            **totals,
        )
        db.add(sale)

        # 4️⃣ Activity feed
        activity_service.record_activity(
            db,
            type="sale",
            description=f"New sale of ${totals['amount']:.2f} to {client.name}",
            person=client.name,
        )

        db.flush()
        return sale

    sale = ledger_service.run_atomic(db, work)
    logger.info(f"Sale posted: {sale.display_id} ({sale.id}) amount={sale.amount:.2f}")
    return sale


# ============================================================
# EDIT
# ============================================================

def update_sale(db: Session, sale_id: str, sale_data: schemas.SaleUpdate):
    """
    Replace a posted sale. The original items are put back into stock and the
    new ones taken out; the net change must leave every product at >= 0.
    """
    new_ids = {item.product_id for item in sale_data.items}

    def work(db: Session):
        sale = db.get(models.Sale, sale_id)
        if sale is None:
            raise HTTPException(status_code=404, detail="Sale not found")

        client = require_client(db, sale_data.client_id)
        products = load_products(db, new_ids)

        deltas = ledger_service.compute_stock_deltas(SALE, sale.items, SALE, sale_data.items)
        inventory_service.apply_stock_changes(db, deltas, required_ids=new_ids)

        totals = sale_totals(sale_data.items, sale_data.delivery_fee)

        sale.client_id = client.id
        sale.client_name = client.name
        sale.date = ledger_service.to_business_time(sale_data.date) or sale.date
        sale.delivery_fee = sale_data.delivery_fee
        sale.payment_method = sale_data.payment_method
        sale.items = build_sale_items(sale_data.items, products)
        for key, value in totals.items():
            setattr(sale, key, value)

        db.flush()
        return sale

    sale = ledger_service.run_atomic(db, work)
    logger.info(f"Sale updated: {sale.display_id} ({sale.id}) amount={sale.amount:.2f}")
    return sale


# ============================================================
# DELETE
# ============================================================

def delete_sale(db: Session, sale_id: str):
    def work(db: Session):
        sale = db.get(models.Sale, sale_id)
        if sale is None:
            raise HTTPException(status_code=404, detail="Sale not found")

        # restore stock for every product still in the catalog
        deltas = ledger_service.compute_stock_deltas(SALE, sale.items, None, [])
        inventory_service.apply_stock_changes(db, deltas)

        display_id = sale.display_id
        db.delete(sale)
        return display_id

    display_id = ledger_service.run_atomic(db, work)
    logger.info(f"Sale deleted: {display_id} ({sale_id}), stock restored")
    return {"message": "Sale deleted successfully and stock restored"}


# ============================================================
# READ
# ============================================================

def get_sale(db: Session, sale_id: str):
    return (
        db.query(models.Sale)
        .options(selectinload(models.Sale.items))
        .filter(models.Sale.id == sale_id)
        .first()
    )


def list_sales(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    client_id: Optional[str] = None,
):
    query = db.query(models.Sale).options(selectinload(models.Sale.items))
    query = ledger_service.filter_by_date(query, models.Sale.date, start_date, end_date)

    if client_id:
        query = query.filter(models.Sale.client_id == client_id)

    return (
        query
        .order_by(models.Sale.date.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_sale_receipt(db: Session, sale_id: str):
    sale = get_sale(db, sale_id)
    if not sale:
        raise HTTPException(status_code=404, detail="Sale not found")

    receipt = schemas.SaleReceiptOut.model_validate(sale)
    client = sale.client
    if client is None:
        # client row gone or renamed key: fall back to the name snapshot
        client = (
            db.query(client_models.Client)
            .filter(client_models.Client.name == sale.client_name)
            .first()
        )
    if client is not None:
        receipt.client_phone = client.phone
        receipt.client_province = client.province
        receipt.client_location = client.location
    return receipt
