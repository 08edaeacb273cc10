"""Daily sales rollup model"""

import uuid
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, Date, DateTime, Integer, Numeric
from sqlalchemy.dialects.postgresql import UUID

from robs.database import Base


class DailySales(Base):
    """Per-day settlement totals"""
    __tablename__ = "daily_sales"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    date = Column(Date, unique=True, nullable=False, index=True)
    total_sales = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    total_orders = Column(Integer, nullable=False, default=0)
    average_order_value = Column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
