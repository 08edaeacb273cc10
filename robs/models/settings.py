"""Restaurant settings model"""

import uuid
from datetime import datetime
from decimal import Decimal
from sqlalchemy import Column, String, Boolean, DateTime, JSON, Numeric
from sqlalchemy.dialects.postgresql import UUID

from robs.database import Base


class RestaurantSettings(Base):
    """Single-row, admin-editable pricing settings"""
    __tablename__ = "restaurant_settings"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    restaurant_name = Column(String(255), default="Restaurant")

    # Tax
    tax_rate = Column(Numeric(5, 2), nullable=False, default=Decimal("5.00"))
    tax_enabled = Column(Boolean, nullable=False, default=True)
    currency = Column(String(10), nullable=False, default="₹")

    # Quick discount buttons shown at the till, in percent
    discount_presets = Column(JSON, default=list)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
