from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from datetime import datetime
from salebook.database import Base
from salebook.ledger.identifiers import new_id


class Sale(Base):
    __tablename__ = "sales"

    id = Column(String(32), primary_key=True, default=new_id)
    display_id = Column(String(16), nullable=False, index=True)   # MM-DD-NN

    client_id = Column(
        String(32),
        ForeignKey("clients.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    client_name = Column(String, nullable=False)   # snapshot at posting time

    date = Column(DateTime, nullable=False, index=True)

    amount = Column(Float, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)
    discount = Column(Float, nullable=False, default=0)
    delivery_fee = Column(Float, nullable=False, default=0)
    payment_method = Column(String(10), nullable=False, default="")

    created_at = Column(DateTime, default=datetime.utcnow)

    version = Column(Integer, nullable=False)

    items = relationship(
        "SaleItem",
        back_populates="sale",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="SaleItem.id",
    )

    client = relationship("Client")

    __mapper_args__ = {"version_id_col": version}

    transaction_type = "Sale"


class SaleItem(Base):
    __tablename__ = "sale_items"

    id = Column(Integer, primary_key=True, index=True)
    sale_id = Column(
        String(32),
        ForeignKey("sales.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    product_id = Column(String(32), ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    product_name = Column(String, nullable=False)

    quantity = Column(Integer, nullable=False)
    price = Column(Float, nullable=False)
    discount = Column(Float, nullable=False, default=0)

    sale = relationship("Sale", back_populates="items")

    @property
    def net_amount(self) -> float:
        return self.price * self.quantity - (self.discount or 0)
