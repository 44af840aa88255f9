from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from salebook.database import get_db
from salebook.purchase import schemas, service

router = APIRouter()


@router.post("/", response_model=schemas.PurchaseOut, status_code=status.HTTP_201_CREATED)
def create_purchase(purchase: schemas.PurchaseCreate, db: Session = Depends(get_db)):
    return service.create_purchase(db, purchase)


@router.get("/", response_model=List[schemas.PurchaseOut])
def list_purchases_route(
    skip: int = 0,
    limit: int = 100,
    vendor_id: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    db: Session = Depends(get_db),
):
    return service.list_purchases(
        db=db,
        skip=skip,
        limit=limit,
        vendor_id=vendor_id,
        start_date=start_date,
        end_date=end_date,
    )


@router.get("/{purchase_id}", response_model=schemas.PurchaseOut)
def get_purchase(purchase_id: str, db: Session = Depends(get_db)):
    purchase = service.get_purchase(db, purchase_id)
    if not purchase:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Purchase not found")
    return purchase


@router.put("/{purchase_id}", response_model=schemas.PurchaseOut)
def update_purchase(
    purchase_id: str,
    update_data: schemas.PurchaseUpdate,
    db: Session = Depends(get_db),
):
    return service.update_purchase(db, purchase_id, update_data)


@router.delete("/{purchase_id}")
def delete_purchase(purchase_id: str, db: Session = Depends(get_db)):
    return service.delete_purchase(db, purchase_id)
