"""Payment schemas"""

from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Optional
from uuid import UUID

from pydantic import BaseModel, Field, PlainSerializer

from robs.models.order import PaymentMethod
from robs.models.payment import PaymentStatus

Money = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class PaymentCreate(BaseModel):
    """Settle an order"""
    amount: Decimal = Field(..., ge=0)
    method: PaymentMethod
    transaction_id: Optional[str] = None


class PaymentResponse(BaseModel):
    id: UUID
    order_id: UUID
    amount: Money
    method: PaymentMethod
    status: PaymentStatus
    transaction_id: Optional[str]
    ledger_date: Optional[date]
    created_at: Optional[datetime] = None
    refunded_at: Optional[datetime] = None

    class Config:
        from_attributes = True
