from fastapi import HTTPException
from loguru import logger
from sqlalchemy.orm import Session

from salebook.accounts import aggregations
from salebook.stock.products.models import Product


# --------------------------
# Read-only: list inventory
# --------------------------
def list_inventory(db: Session, product_name: str | None = None):
    query = db.query(Product)

    if product_name:
        query = query.filter(Product.name.ilike(f"%{product_name}%"))

    products = query.order_by(Product.name.asc()).all()
    valuation = aggregations.stock_valuation(products)

    return {
        "inventory": [
            {
                "product_id": p.id,
                "product_name": p.name,
                "stock": p.stock,
                "low_stock": p.low_stock,
                "is_low_stock": p.stock <= p.low_stock,
                "cost": p.cost or 0,
                "price": p.price,
                "inventory_value": p.stock * (p.cost or 0),
                "sale_value": p.stock * p.price,
            }
            for p in products
        ],
        "total_cost_value": valuation["cost_value"],
        "total_sale_value": valuation["sale_value"],
    }


def list_low_stock(db: Session):
    return (
        db.query(Product)
        .filter(Product.stock <= Product.low_stock)
        .order_by(Product.stock.asc(), Product.name.asc())
        .all()
    )


# --------------------------
# Internal: apply ledger stock deltas
# --------------------------
def apply_stock_changes(
    db: Session,
    deltas: dict[str, int],
    required_ids: set[str] | frozenset[str] = frozenset(),
):
    """
    Apply per-product stock deltas (negative = goods out) inside the
    caller's transaction.

    Every product in ``required_ids`` must exist. Other missing products
    are skipped, they can only come from the reversal of an old posting.
    All resulting stocks are validated before any row is touched, so a
    rejected change leaves every product as it was.
    """
    planned = []

    for product_id, delta in deltas.items():
        product = db.get(Product, product_id)

        if product is None:
            if product_id in required_ids:
                raise HTTPException(
                    status_code=404,
                    detail=f"Product '{product_id}' not found!",
                )
            logger.warning(f"Product {product_id} no longer exists, stock change of {delta} skipped")
            continue

        if delta == 0:
            continue

        new_stock = product.stock + delta
        if new_stock < 0:
            raise HTTPException(
                status_code=400,
                detail=f"Not enough stock for {product.name}! Only {product.stock} left.",
            )
        planned.append((product, new_stock))

    for product, new_stock in planned:
        product.stock = new_stock

    return [product for product, _ in planned]
