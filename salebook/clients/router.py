from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from salebook.database import get_db
from salebook.clients import schemas, service

router = APIRouter()


@router.post("/", response_model=schemas.ClientOut, status_code=status.HTTP_201_CREATED)
def create_client(client: schemas.ClientCreate, db: Session = Depends(get_db)):
    return service.create_client(db, client)


@router.get("/", response_model=list[schemas.ClientOut])
def list_clients(db: Session = Depends(get_db)):
    """
    All clients by name, each with spend and order count taken from the sales ledger.
    """
    return service.list_clients(db)


@router.get("/{client_id}", response_model=schemas.ClientOut)
def read_client(client_id: str, db: Session = Depends(get_db)):
    return service.get_client_with_totals(db, client_id)


@router.put("/{client_id}", response_model=schemas.ClientOut)
def update_client(client_id: str, client_update: schemas.ClientUpdate, db: Session = Depends(get_db)):
    return service.update_client(db, client_id, client_update)


@router.delete("/{client_id}")
def delete_client(client_id: str, db: Session = Depends(get_db)):
    return service.delete_client(db, client_id)
