from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session
from typing import List, Optional
from datetime import date

from salebook.database import get_db
from . import schemas, service


router = APIRouter()


@router.post("/", response_model=schemas.SaleOut, status_code=status.HTTP_201_CREATED)
def create_sale_endpoint(
    sale_data: schemas.SaleCreate,
    db: Session = Depends(get_db),
):
    """
    Post a sale + all items in a single transaction.
    """
    return service.create_sale(db, sale_data)


@router.get("/", response_model=List[schemas.SaleOut])
def list_sales(
    skip: int = 0,
    limit: int = 100,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    client_id: Optional[str] = None,
    db: Session = Depends(get_db),
):
    return service.list_sales(
        db=db,
        skip=skip,
        limit=limit,
        start_date=start_date,
        end_date=end_date,
        client_id=client_id,
    )


@router.get("/{sale_id}", response_model=schemas.SaleOut)
def get_sale(sale_id: str, db: Session = Depends(get_db)):
    sale = service.get_sale(db, sale_id)
    if not sale:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Sale not found")
    return sale


@router.get("/{sale_id}/receipt", response_model=schemas.SaleReceiptOut)
def get_sale_receipt(sale_id: str, db: Session = Depends(get_db)):
    """
    Sale with the client's contact details, for printing.
    """
    return service.get_sale_receipt(db, sale_id)


@router.put("/{sale_id}", response_model=schemas.SaleOut)
def update_sale(
    sale_id: str,
    sale_data: schemas.SaleUpdate,
    db: Session = Depends(get_db),
):
    return service.update_sale(db, sale_id, sale_data)


@router.delete("/{sale_id}")
def delete_sale(sale_id: str, db: Session = Depends(get_db)):
    return service.delete_sale(db, sale_id)
