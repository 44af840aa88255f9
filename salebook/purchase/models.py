from sqlalchemy import Column, Integer, Float, ForeignKey, DateTime, String
from sqlalchemy.orm import relationship
from datetime import datetime
from salebook.database import Base
from salebook.ledger.identifiers import new_id


class Purchase(Base):
    __tablename__ = "purchases"

    id = Column(String(32), primary_key=True, default=new_id)
    display_id = Column(String(16), nullable=False, index=True)

    vendor_id = Column(
        String(32),
        ForeignKey("vendors.id", ondelete="SET NULL"),
        nullable=True,
        index=True
    )
    vendor_name = Column(String, nullable=False)

    date = Column(DateTime, nullable=False, index=True)
    amount = Column(Float, nullable=False, default=0)
    quantity = Column(Integer, nullable=False, default=0)

    created_at = Column(DateTime, default=datetime.utcnow)

    version = Column(Integer, nullable=False)

    # Relationships
    items = relationship(
        "PurchaseItem",
        back_populates="purchase",
        cascade="all, delete-orphan",
        passive_deletes=True,
        order_by="PurchaseItem.id",
    )

    __mapper_args__ = {"version_id_col": version}

    transaction_type = "Purchase"


class PurchaseItem(Base):
    __tablename__ = "purchase_items"

    id = Column(Integer, primary_key=True, index=True)
    purchase_id = Column(
        String(32),
        ForeignKey("purchases.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    product_id = Column(String(32), ForeignKey("products.id", ondelete="SET NULL"), nullable=True)
    item_name = Column(String, nullable=False)

    quantity = Column(Integer, nullable=False)
    cost = Column(Float, nullable=False)

    purchase = relationship("Purchase", back_populates="items")
