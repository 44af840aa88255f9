from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List, Optional

from salebook.database import get_db
from salebook.stock.inventory import schemas, service
from salebook.stock.products.schemas import ProductOut

router = APIRouter()


@router.get("/", response_model=schemas.InventoryListOut)
def list_inventory(
    product_name: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return service.list_inventory(db, product_name=product_name)


@router.get("/low-stock", response_model=List[ProductOut])
def list_low_stock(db: Session = Depends(get_db)):
    return service.list_low_stock(db)
