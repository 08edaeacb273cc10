"""Named sequence counters"""

from sqlalchemy import Column, String, Integer

from robs.database import Base


class Counter(Base):
    """Monotonic counters bumped atomically with an upsert (e.g. order numbers)"""
    __tablename__ = "counters"

    name = Column(String(64), primary_key=True)
    value = Column(Integer, nullable=False, default=0)
