"""Order and order item models"""

import enum
import uuid
from datetime import datetime
from decimal import Decimal
from sqlalchemy import (
    Column,
    String,
    DateTime,
    ForeignKey,
    JSON,
    Text,
    Integer,
    Boolean,
    Numeric,
    Enum,
)
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from robs.database import Base


class OrderStatus(str, enum.Enum):
    """Kitchen/service status of an order"""
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class ItemStatus(str, enum.Enum):
    """Kitchen status of a single order line"""
    PENDING = "pending"
    PREPARING = "preparing"
    READY = "ready"
    SERVED = "served"
    CANCELLED = "cancelled"


class DiscountType(str, enum.Enum):
    PERCENTAGE = "percentage"
    AMOUNT = "amount"


class PaymentMethod(str, enum.Enum):
    CASH = "cash"
    CARD = "card"
    UPI = "upi"


class Order(Base):
    """Dine-in orders"""
    __tablename__ = "orders"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_number = Column(Integer, unique=True, nullable=False, index=True)

    # Weak reference to tables.number, no FK
    table_number = Column(Integer, index=True)

    # Status
    status = Column(Enum(OrderStatus), nullable=False, default=OrderStatus.PENDING)
    hold_status = Column(Boolean, nullable=False, default=False)
    cancel_reason = Column(Text)

    # Pricing (total is derived and cached)
    total = Column(Numeric(10, 2), nullable=False, default=Decimal("0.00"))
    discount_type = Column(Enum(DiscountType))
    discount_value = Column(Numeric(10, 2))

    # Settlement
    is_paid = Column(Boolean, nullable=False, default=False)
    payment_method = Column(Enum(PaymentMethod))

    # Dining session: the paid order this one continues
    parent_order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"))

    # Metadata
    created_by = Column(String(255))
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    items = relationship(
        "OrderItem",
        back_populates="order",
        cascade="all, delete-orphan",
        lazy="selectin",
        order_by="OrderItem.created_at",
    )
    payments = relationship(
        "PaymentTransaction",
        back_populates="order",
        lazy="selectin",
        order_by="PaymentTransaction.created_at",
    )

    @property
    def is_open(self) -> bool:
        """Unpaid and not cancelled"""
        return not self.is_paid and self.status != OrderStatus.CANCELLED


class OrderItem(Base):
    """Line items of an order"""
    __tablename__ = "order_items"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    order_id = Column(UUID(as_uuid=True), ForeignKey("orders.id"), nullable=False, index=True)
    menu_item_id = Column(UUID(as_uuid=True), ForeignKey("menu_items.id"), nullable=False)

    # Snapshot of the menu item when ordered
    name = Column(String(255), nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)

    quantity = Column(Integer, nullable=False, default=1)
    notes = Column(Text)
    # [{"id": "...", "name": "Extra cheese", "price": "20.00"}, ...]
    modifiers = Column(JSON, default=list)

    status = Column(Enum(ItemStatus), nullable=False, default=ItemStatus.PENDING)

    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    order = relationship("Order", back_populates="items")
