from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional

from salebook.database import get_db
from salebook.stock.products import schemas, service


router = APIRouter()


@router.post(
    "/",
    response_model=schemas.ProductOut,
    status_code=status.HTTP_201_CREATED
)
def create_product(
    product: schemas.ProductCreate,
    db: Session = Depends(get_db)
):
    return service.create_product(db, product)


@router.get("/", response_model=List[schemas.ProductOut])
def list_products(
    name: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return service.get_products(db, name=name)


@router.get("/simple", response_model=List[schemas.ProductSimpleSchema])
def list_products_simple(db: Session = Depends(get_db)):
    """
    Product list for pickers (id, name, price, stock).
    """
    return service.get_products(db)


@router.get("/{product_id}", response_model=schemas.ProductOut)
def get_product(product_id: str, db: Session = Depends(get_db)):
    product = service.get_product_by_id(db, product_id)
    if not product:
        raise HTTPException(status_code=404, detail="Product not found")
    return product


@router.put("/{product_id}", response_model=schemas.ProductOut)
def update_product(
    product_id: str,
    product: schemas.ProductUpdate,
    db: Session = Depends(get_db),
):
    return service.update_product(db, product_id, product)


@router.delete("/{product_id}")
def delete_product(product_id: str, db: Session = Depends(get_db)):
    return service.delete_product(db, product_id)
