"""Sales report schemas"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel

from robs.schemas.payment import Money


class DailySalesResponse(BaseModel):
    date: date
    total_sales: Money
    total_orders: int
    average_order_value: Money

    class Config:
        from_attributes = True


class DailySalesListResponse(BaseModel):
    """Paginated daily rollups"""
    items: List[DailySalesResponse]
    total: int
    page: int
    page_size: int


class SalesSummaryResponse(BaseModel):
    daily_sales: List[DailySalesResponse]
    total_sales: Money
    total_orders: int
    average_order_value: Money
    days_count: int


class TopItemResponse(BaseModel):
    """Best-seller row"""
    menu_item_id: UUID
    name: str
    category: Optional[str]
    total_quantity: int
    total_orders: int
    total_revenue: Money
