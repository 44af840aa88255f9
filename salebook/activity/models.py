from sqlalchemy import Column, String, DateTime
from datetime import datetime
from salebook.database import Base
from salebook.ledger.identifiers import new_id


class RecentActivity(Base):
    __tablename__ = "recent_activities"

    id = Column(String(32), primary_key=True, default=new_id)
    type = Column(String(20), nullable=False)    # sale, client, product, purchase, expense
    description = Column(String, nullable=False)
    time = Column(DateTime, default=datetime.utcnow, nullable=False, index=True)
    person = Column(String, nullable=False, default="Internal")
