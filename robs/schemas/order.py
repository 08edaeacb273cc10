"""Order schemas"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from robs.models.order import DiscountType, ItemStatus, OrderStatus, PaymentMethod
from robs.schemas.payment import Money, PaymentResponse


class ModifierCreate(BaseModel):
    """Priced modifier chosen for an item"""
    id: Optional[str] = None
    name: str
    price: Decimal = Decimal("0")


class OrderItemCreate(BaseModel):
    """Create order item"""
    menu_item_id: UUID
    quantity: int = Field(1, ge=1)
    notes: Optional[str] = None
    modifiers: List[ModifierCreate] = []


class OrderCreate(BaseModel):
    """Create order request"""
    table_number: int
    items: List[OrderItemCreate]
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = None
    created_by: Optional[str] = None


class AddItemsRequest(BaseModel):
    items: List[OrderItemCreate]
    created_by: Optional[str] = None


class OrderItemUpdate(BaseModel):
    """Change quantity or notes of a line"""
    quantity: Optional[int] = Field(None, ge=1)
    notes: Optional[str] = None


class OrderStatusUpdate(BaseModel):
    status: OrderStatus
    reason: Optional[str] = None


class ItemStatusUpdate(BaseModel):
    status: ItemStatus


class CancelRequest(BaseModel):
    reason: Optional[str] = None


class HoldRequest(BaseModel):
    hold: bool


class DiscountUpdate(BaseModel):
    """Both fields empty removes the discount"""
    discount_type: Optional[str] = None
    discount_value: Optional[Decimal] = None


class SplitSelection(BaseModel):
    item_id: UUID
    quantity: int = Field(..., ge=1)


class SplitRequest(BaseModel):
    source_order_id: UUID
    items: List[SplitSelection]
    target_table_number: int
    created_by: Optional[str] = None


class MergeRequest(BaseModel):
    source_table_number: int
    target_table_number: int
    created_by: Optional[str] = None


class OrderItemResponse(BaseModel):
    """Order item in response"""
    id: UUID
    order_id: UUID
    menu_item_id: UUID
    name: str
    unit_price: Money
    quantity: int
    notes: Optional[str]
    modifiers: List[Dict[str, Any]] = []
    status: ItemStatus
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderResponse(BaseModel):
    """Order response"""
    id: UUID
    order_number: int
    table_number: Optional[int]
    status: OrderStatus
    created_by: Optional[str]
    total: Money
    discount_type: Optional[DiscountType]
    discount_value: Optional[Money]
    is_paid: bool
    payment_method: Optional[PaymentMethod]
    hold_status: bool
    cancel_reason: Optional[str]
    parent_order_id: Optional[UUID]
    items: List[OrderItemResponse] = []
    payments: List[PaymentResponse] = []
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class OrderListResponse(BaseModel):
    """Paginated order list"""
    items: List[OrderResponse]
    total: int
    page: int
    page_size: int


class DiningSessionResponse(BaseModel):
    """An order with the paid orders that preceded it at the table"""
    order: OrderResponse
    previous_orders: List[OrderResponse]
    previous_paid_total: Money


class SettlementResponse(BaseModel):
    """Settled order and the payment recorded for it"""
    order: OrderResponse
    transaction: PaymentResponse
