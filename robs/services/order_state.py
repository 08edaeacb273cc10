"""Order and item status transitions.

Statuses only move forward (pending -> preparing -> ready -> served or
delivered). Cancellation is allowed from any state before served/delivered.
Moving to the current status is a no-op. Order status is never derived from
item statuses; callers change it explicitly.

Nothing here writes table state.
"""

from typing import Dict, Union

import structlog

from robs.models.order import ItemStatus, Order, OrderItem, OrderStatus
from robs.services.errors import Conflict

logger = structlog.get_logger()

Status = Union[OrderStatus, ItemStatus]

ORDER_RANK: Dict[OrderStatus, int] = {
    OrderStatus.PENDING: 0,
    OrderStatus.PREPARING: 1,
    OrderStatus.READY: 2,
    OrderStatus.SERVED: 3,
    OrderStatus.DELIVERED: 3,
}

ITEM_RANK: Dict[ItemStatus, int] = {
    ItemStatus.PENDING: 0,
    ItemStatus.PREPARING: 1,
    ItemStatus.READY: 2,
    ItemStatus.SERVED: 3,
}

TERMINAL_RANK = 3

REOPENABLE = (OrderStatus.READY, OrderStatus.SERVED, OrderStatus.DELIVERED)


def _can_transition(ranks: Dict, cancelled: Status, current: Status, target: Status) -> bool:
    if current == cancelled:
        return False
    if target == cancelled:
        return ranks[current] < TERMINAL_RANK
    return ranks[target] > ranks[current]


class OrderStateMachine:
    """Validates and applies status changes to orders and their items"""

    @staticmethod
    def can_transition(current: OrderStatus, target: OrderStatus) -> bool:
        return _can_transition(ORDER_RANK, OrderStatus.CANCELLED, current, target)

    @staticmethod
    def can_transition_item(current: ItemStatus, target: ItemStatus) -> bool:
        return _can_transition(ITEM_RANK, ItemStatus.CANCELLED, current, target)

    def transition(self, order: Order, target: OrderStatus) -> bool:
        """Move ``order`` to ``target``.

        Returns False when the order is already in ``target``; raises
        Conflict for backward moves and moves out of a terminal state.
        """
        target = OrderStatus(target)
        current = order.status
        if current == target:
            return False
        if not self.can_transition(current, target):
            raise Conflict(
                f"Cannot move order from '{current.value}' to '{target.value}'",
                order_id=order.id,
                status=current.value,
            )
        order.status = target
        logger.debug("Order status changed", order_id=str(order.id), status=target.value)
        return True

    def transition_item(self, item: OrderItem, target: ItemStatus) -> bool:
        """Same rules as ``transition`` for a single order line"""
        target = ItemStatus(target)
        current = item.status
        if current == target:
            return False
        if not self.can_transition_item(current, target):
            raise Conflict(
                f"Cannot move item from '{current.value}' to '{target.value}'",
                item_id=item.id,
                status=current.value,
            )
        item.status = target
        return True

    def mark_served(self, order: Order) -> bool:
        """Serve the order and every line that is not cancelled"""
        changed = self.transition(order, OrderStatus.SERVED)
        for item in order.items:
            if item.status != ItemStatus.CANCELLED:
                item.status = ItemStatus.SERVED
        return changed

    def reopen(self, order: Order) -> bool:
        """Send an order back to pending after new lines were added.

        The only backward move; applies to unpaid orders that the kitchen
        had already finished.
        """
        if order.status in REOPENABLE:
            order.status = OrderStatus.PENDING
            return True
        return False
