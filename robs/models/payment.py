"""Payment transaction model"""

import enum
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Date, ForeignKey, Numeric, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from robs.database import Base
from robs.models.order import PaymentMethod


class PaymentStatus(str, enum.Enum):
    COMPLETED = "completed"
    REFUNDED = "refunded"


class PaymentTransaction(Base):
    """Append-only record of a settlement against an order"""
    __tablename__ = "payment_transactions"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"), nullable=False, index=True)

    amount = Column(Numeric(10, 2), nullable=False)
    method = Column(Enum(PaymentMethod), nullable=False)
    status = Column(Enum(PaymentStatus), nullable=False, default=PaymentStatus.COMPLETED)
    transaction_id = Column(String(255))  # external reference (card terminal, UPI)

    # Day this payment was counted in daily_sales; set once
    ledger_date = Column(Date)

    created_at = Column(DateTime, default=datetime.utcnow)
    refunded_at = Column(DateTime)

    # Relationships
    order = relationship("Order", back_populates="payments")
