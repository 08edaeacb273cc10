"""Dining table model"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, Integer, Boolean, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID

from robs.database import Base


class TableStatus(str, enum.Enum):
    """Occupancy states of a table"""
    FREE = "free"
    OCCUPIED = "occupied"
    RESERVED = "reserved"


class Table(Base):
    """Restaurant tables"""
    __tablename__ = "tables"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    number = Column(Integer, unique=True, nullable=False, index=True)
    capacity = Column(Integer, nullable=False, default=4)

    # Occupancy
    status = Column(Enum(TableStatus), nullable=False, default=TableStatus.FREE)
    current_order_id = Column(UUID(as_uuid=True))  # weak reference to orders.id, no FK

    # Grouping: members are every table sharing the same group_id
    group_id = Column(String(64), index=True)
    is_primary = Column(Boolean, nullable=False, default=False)

    # Reservation
    reserved_by = Column(String(255))
    reserved_time = Column(DateTime)

    # Metadata
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    @property
    def is_grouped(self) -> bool:
        return self.group_id is not None

    @property
    def is_secondary(self) -> bool:
        """Grouped but not the primary table of its group"""
        return self.group_id is not None and not self.is_primary
