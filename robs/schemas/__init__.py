"""Pydantic schemas for request/response validation"""

from robs.schemas.payment import (
    Money,
    PaymentCreate,
    PaymentResponse,
)
from robs.schemas.order import (
    ModifierCreate,
    OrderItemCreate,
    OrderCreate,
    AddItemsRequest,
    OrderItemUpdate,
    OrderStatusUpdate,
    ItemStatusUpdate,
    CancelRequest,
    HoldRequest,
    DiscountUpdate,
    SplitSelection,
    SplitRequest,
    MergeRequest,
    OrderItemResponse,
    OrderResponse,
    OrderListResponse,
    DiningSessionResponse,
    SettlementResponse,
)
from robs.schemas.table import (
    TableCreate,
    TableResponse,
    GroupRequest,
    GroupResponse,
    ReserveRequest,
    BulkTableCreate,
)
from robs.schemas.sales import (
    DailySalesResponse,
    DailySalesListResponse,
    SalesSummaryResponse,
    TopItemResponse,
)
from robs.schemas.menu import (
    MenuItemResponse,
    MenuAvailabilityUpdate,
)
from robs.schemas.settings import (
    RestaurantSettingsResponse,
    RestaurantSettingsUpdate,
)

__all__ = [
    "Money",
    "PaymentCreate",
    "PaymentResponse",
    "ModifierCreate",
    "OrderItemCreate",
    "OrderCreate",
    "AddItemsRequest",
    "OrderItemUpdate",
    "OrderStatusUpdate",
    "ItemStatusUpdate",
    "CancelRequest",
    "HoldRequest",
    "DiscountUpdate",
    "SplitSelection",
    "SplitRequest",
    "MergeRequest",
    "OrderItemResponse",
    "OrderResponse",
    "OrderListResponse",
    "DiningSessionResponse",
    "SettlementResponse",
    "TableCreate",
    "TableResponse",
    "GroupRequest",
    "GroupResponse",
    "ReserveRequest",
    "BulkTableCreate",
    "DailySalesResponse",
    "DailySalesListResponse",
    "SalesSummaryResponse",
    "TopItemResponse",
    "MenuItemResponse",
    "MenuAvailabilityUpdate",
    "RestaurantSettingsResponse",
    "RestaurantSettingsUpdate",
]
