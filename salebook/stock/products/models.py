from sqlalchemy import Column, Integer, String, Float, DateTime, CheckConstraint
from datetime import datetime
from salebook.database import Base
from salebook.ledger.identifiers import new_id


class Product(Base):
    __tablename__ = "products"

    id = Column(String(32), primary_key=True, default=new_id)
    name = Column(String, nullable=False, index=True)

    price = Column(Float, nullable=False, default=0)
    cost = Column(Float, nullable=True)

    # changed only by posted sales / purchases
    stock = Column(Integer, nullable=False, default=0)
    low_stock = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)

    # optimistic concurrency: concurrent posts against the same product conflict
    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    __table_args__ = (
        CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),
    )
