from sqlalchemy import Column, Integer, String

from salebook.database import Base


class Counter(Base):
    """Per-day sequence used to build transaction display ids."""

    __tablename__ = "counters"

    key = Column(String(10), primary_key=True)   # yyyy-MM-dd
    count = Column(Integer, nullable=False, default=0)

    version = Column(Integer, nullable=False)

    __mapper_args__ = {"version_id_col": version}
