from datetime import date
from typing import Optional

from fastapi import HTTPException
from loguru import logger
from sqlalchemy.orm import Session, selectinload

from salebook.activity import service as activity_service
from salebook.ledger import service as ledger_service
from salebook.ledger.service import PURCHASE
from salebook.sales.service import load_products
from salebook.stock.inventory import service as inventory_service
from salebook.vendor import service as vendor_service
from salebook.purchase import models as purchase_models, schemas as purchase_schemas


def build_purchase_items(items, products: dict) -> list:
    return [
        purchase_models.PurchaseItem(
            product_id=item.product_id,
            item_name=products[item.product_id].name,
            quantity=item.quantity,
            cost=item.cost,
        )
        for item in items
    ]


def purchase_totals(items) -> dict:
    return {
        "amount": sum((i.cost or 0) * i.quantity for i in items),
        "quantity": sum(i.quantity for i in items),
    }


def create_purchase(db: Session, purchase: purchase_schemas.PurchaseCreate):
    product_ids = {item.product_id for item in purchase.items}

    def work(db: Session):
        vendor = vendor_service.require_vendor(db, purchase.vendor_id)
        purchase_date = ledger_service.to_business_time(purchase.date) or ledger_service.local_now()

        # 1️⃣ Daily counter
        display_id = ledger_service.next_display_id(db, purchase_date)

        # 2️⃣ Products + stock in
        products = load_products(db, product_ids)
        deltas = ledger_service.compute_stock_deltas(None, [], PURCHASE, purchase.items)
        inventory_service.apply_stock_changes(db, deltas, required_ids=product_ids)

        # 3️⃣ Purchase record
        totals = purchase_totals(purchase.items)
        db_purchase = purchase_models.Purchase(
            display_id=display_id,
            vendor_id=vendor.id,
            vendor_name=vendor.name,
            date=purchase_date,
            items=build_purchase_items(purchase.items, products),
            **totals,
        )
        db.add(db_purchase)

        # 4️⃣ Vendor aggregates
        vendor_service.apply_vendor_changes(db, {vendor.id: (1, totals["amount"])})

        activity_service.record_activity(
            db,
            type="purchase",
            description=f"New purchase of ${totals['amount']:.2f} from {vendor.name}",
            person=vendor.name,
        )

        db.flush()
        return db_purchase

    db_purchase = ledger_service.run_atomic(db, work)
    logger.info(f"Purchase posted: {db_purchase.display_id} ({db_purchase.id}) amount={db_purchase.amount:.2f}")
    return db_purchase


def list_purchases(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    vendor_id: str | None = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
):
    query = db.query(purchase_models.Purchase).options(
        selectinload(purchase_models.Purchase.items)
    )

    # ===============================
    # VENDOR FILTER
    # ===============================
    if vendor_id:
        query = query.filter(purchase_models.Purchase.vendor_id == vendor_id)

    # ===============================
    # DATE RANGE FILTER
    # ===============================
    query = ledger_service.filter_by_date(
        query, purchase_models.Purchase.date, start_date, end_date
    )

    return (
        query
        .order_by(purchase_models.Purchase.date.desc())
        .offset(skip)
        .limit(limit)
        .all()
    )


def get_purchase(db: Session, purchase_id: str):
    return db.query(purchase_models.Purchase).filter(
        purchase_models.Purchase.id == purchase_id
    ).first()


def _vendor_changes(old_vendor_id, old_amount, new_vendor_id, new_amount) -> dict:
    changes: dict = {}
    if old_vendor_id:
        changes[old_vendor_id] = (-1, -old_amount)
    if new_vendor_id:
        orders, amount = changes.get(new_vendor_id, (0, 0.0))
        changes[new_vendor_id] = (orders + 1, amount + new_amount)
    return changes


def update_purchase(
    db: Session,
    purchase_id: str,
    update_data: purchase_schemas.PurchaseUpdate
):
    new_ids = {item.product_id for item in update_data.items}

    def work(db: Session):
        purchase = db.get(purchase_models.Purchase, purchase_id)
        if purchase is None:
            raise HTTPException(status_code=404, detail="Purchase not found")

        vendor = vendor_service.require_vendor(db, update_data.vendor_id)
        products = load_products(db, new_ids)

        # ===============================
        # INVENTORY: REVERSE → APPLY
        # ===============================
        deltas = ledger_service.compute_stock_deltas(
            PURCHASE, purchase.items, PURCHASE, update_data.items
        )
        inventory_service.apply_stock_changes(db, deltas, required_ids=new_ids)

        totals = purchase_totals(update_data.items)

        # ===============================
        # VENDOR AGGREGATES: REVERSE → APPLY
        # ===============================
        vendor_service.apply_vendor_changes(
            db,
            _vendor_changes(purchase.vendor_id, purchase.amount, vendor.id, totals["amount"]),
        )

        purchase.vendor_id = vendor.id
        purchase.vendor_name = vendor.name
        purchase.date = ledger_service.to_business_time(update_data.date) or purchase.date
        purchase.items = build_purchase_items(update_data.items, products)
        for key, value in totals.items():
            setattr(purchase, key, value)

        db.flush()
        return purchase

    purchase = ledger_service.run_atomic(db, work)
    logger.info(f"Purchase updated: {purchase.display_id} ({purchase.id}) amount={purchase.amount:.2f}")
    return purchase


def delete_purchase(db: Session, purchase_id: str):
    def work(db: Session):
        purchase = db.get(purchase_models.Purchase, purchase_id)
        if purchase is None:
            raise HTTPException(status_code=404, detail="Purchase not found")

        # Revert inventory; goods already sold make this fail
        deltas = ledger_service.compute_stock_deltas(PURCHASE, purchase.items, None, [])
        inventory_service.apply_stock_changes(db, deltas)

        vendor_service.apply_vendor_changes(
            db, _vendor_changes(purchase.vendor_id, purchase.amount, None, 0)
        )

        display_id = purchase.display_id
        db.delete(purchase)
        return display_id

    display_id = ledger_service.run_atomic(db, work)
    logger.info(f"Purchase deleted: {display_id} ({purchase_id}), stock removed")
    return {"message": "Purchase deleted successfully"}
