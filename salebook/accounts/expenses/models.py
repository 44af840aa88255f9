from sqlalchemy import Column, Integer, Float, String, DateTime, ForeignKey
from datetime import datetime
from salebook.database import Base
from salebook.ledger.identifiers import new_id


class Expense(Base):
    __tablename__ = "expenses"

    id = Column(String(32), primary_key=True, default=new_id)
    display_id = Column(String(16), nullable=False, index=True)

    description = Column(String, nullable=False)
    amount = Column(Float, nullable=False)

    vendor_id = Column(String(32), ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True)
    vendor_name = Column(String, nullable=False, default="")

    date = Column(DateTime, nullable=False, index=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    transaction_type = "Expense"
