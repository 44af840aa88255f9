from fastapi import HTTPException, status
from loguru import logger
from sqlalchemy.orm import Session

from salebook.accounts import aggregations
from salebook.activity import service as activity_service
from salebook.sales import models as sales_models
from . import models, schemas


def get_client_by_phone(db: Session, phone: str):
    return db.query(models.Client).filter(models.Client.phone == phone).first()


def create_client(db: Session, client: schemas.ClientCreate):
    phone = client.phone.strip()

    # read-then-write: two concurrent creations can both pass this check
    existing = get_client_by_phone(db, phone)
    if existing:
        logger.warning(f"Duplicate client phone rejected: {phone}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f'Client "{existing.name}" with phone number "{existing.phone}" is already registered.'
        )

    new_client = models.Client(
        name=client.name.strip(),
        phone=phone,
        province=client.province,
        location=client.location,
    )
    db.add(new_client)

    activity_service.record_activity(
        db,
        type="client",
        description=f"New client registered: {new_client.name}",
        person=new_client.name,
    )

    db.commit()
    db.refresh(new_client)

    logger.info(f"Client created: {new_client.id} ({new_client.name})")
    return serialize_client(new_client)


def get_client(db: Session, client_id: str):
    return db.query(models.Client).filter(models.Client.id == client_id).first()


def serialize_client(client: models.Client, totals: dict | None = None):
    total_spent, orders = (totals or {}).get(client.id, (0.0, 0))
    return schemas.ClientOut(
        id=client.id,
        name=client.name,
        phone=client.phone,
        province=client.province,
        location=client.location,
        total_spent=total_spent,
        orders=orders,
    )


def list_clients(db: Session):
    clients = db.query(models.Client).order_by(models.Client.name.asc()).all()
    sales = db.query(sales_models.Sale).all()
    totals = aggregations.client_totals(sales)
    return [serialize_client(c, totals) for c in clients]


def get_client_with_totals(db: Session, client_id: str):
    client = get_client(db, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    sales = (
        db.query(sales_models.Sale)
        .filter(sales_models.Sale.client_id == client_id)
        .all()
    )
    return serialize_client(client, aggregations.client_totals(sales))


def update_client(db: Session, client_id: str, client_update: schemas.ClientUpdate):
    client = get_client(db, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    data = client_update.model_dump(exclude_unset=True)

    if "phone" in data:
        data["phone"] = data["phone"].strip()
        other = get_client_by_phone(db, data["phone"])
        if other and other.id != client_id:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f'Client "{other.name}" with phone number "{other.phone}" is already registered.'
            )

    for key, value in data.items():
        setattr(client, key, value)

    db.commit()
    db.refresh(client)
    return get_client_with_totals(db, client_id)


def delete_client(db: Session, client_id: str):
    client = get_client(db, client_id)
    if not client:
        raise HTTPException(status_code=404, detail="Client not found")

    db.delete(client)
    db.commit()
    logger.info(f"Client deleted: {client_id}")
    return {"message": "Client deleted successfully"}
