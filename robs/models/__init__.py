"""Database models"""

from robs.models.table import Table, TableStatus
from robs.models.menu import MenuItem
from robs.models.order import (
    Order,
    OrderItem,
    OrderStatus,
    ItemStatus,
    DiscountType,
    PaymentMethod,
)
from robs.models.payment import PaymentTransaction, PaymentStatus
from robs.models.sales import DailySales
from robs.models.settings import RestaurantSettings
from robs.models.counter import Counter

__all__ = [
    "Table",
    "TableStatus",
    "MenuItem",
    "Order",
    "OrderItem",
    "OrderStatus",
    "ItemStatus",
    "DiscountType",
    "PaymentMethod",
    "PaymentTransaction",
    "PaymentStatus",
    "DailySales",
    "RestaurantSettings",
    "Counter",
]
