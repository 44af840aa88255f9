from sqlalchemy import Column, String, DateTime
from datetime import datetime
from salebook.database import Base
from salebook.ledger.identifiers import new_id


class Client(Base):
    __tablename__ = "clients"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)

    # uniqueness is checked before insert, not enforced by the table
    phone = Column(String, nullable=False, index=True)

    province = Column(String, nullable=False, default="")
    location = Column(String, nullable=False, default="")

    created_at = Column(DateTime, default=datetime.utcnow)
