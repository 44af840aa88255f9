from typing import Optional

from fastapi import HTTPException
from loguru import logger
from sqlalchemy import func
from sqlalchemy.orm import Session

from salebook.activity import service as activity_service
from salebook.stock.products import models, schemas


def create_product(db: Session, product: schemas.ProductCreate):

    # 1️⃣ Duplicate check (case-insensitive name)
    name = product.name.strip()
    exists = (
        db.query(models.Product)
        .filter(func.lower(models.Product.name) == name.lower())
        .first()
    )
    if exists:
        raise HTTPException(
            status_code=400,
            detail=f"Product '{name}' already exists."
        )

    # 2️⃣ Create product with its opening stock
    db_product = models.Product(
        name=name,
        price=product.price,
        cost=product.cost,
        stock=product.stock,
        low_stock=product.low_stock,
    )
    db.add(db_product)

    activity_service.record_activity(
        db,
        type="product",
        description=f"New product added: {name}",
    )

    # 3️⃣ Commit once (atomic)
    db.commit()
    db.refresh(db_product)

    logger.info(f"Product created: {db_product.id} ({name}), opening stock {db_product.stock}")
    return db_product


def get_products(db: Session, name: Optional[str] = None):
    query = db.query(models.Product)

    if name:
        query = query.filter(
            func.lower(models.Product.name).contains(name.lower().strip())
        )

    return query.order_by(models.Product.name.asc()).all()


def get_product_by_id(db: Session, product_id: str):
    return (
        db.query(models.Product)
        .filter(models.Product.id == product_id)
        .first()
    )


def update_product(db: Session, product_id: str, product: schemas.ProductUpdate):
    db_product = get_product_by_id(db, product_id)
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")

    data = product.model_dump(exclude_unset=True)

    if "name" in data:
        name = data["name"].strip()
        clash = (
            db.query(models.Product)
            .filter(
                func.lower(models.Product.name) == name.lower(),
                models.Product.id != product_id,
            )
            .first()
        )
        if clash:
            raise HTTPException(
                status_code=400,
                detail=f"Product '{name}' already exists."
            )
        data["name"] = name

    for key, value in data.items():
        setattr(db_product, key, value)

    db.commit()
    db.refresh(db_product)
    return db_product


def delete_product(db: Session, product_id: str):
    db_product = get_product_by_id(db, product_id)
    if not db_product:
        raise HTTPException(status_code=404, detail="Product not found")

    db.delete(db_product)
    db.commit()

    logger.info(f"Product deleted: {product_id}")
    return {"message": "Product deleted successfully"}
