"""Order/table/payment lifecycle coordinator.

Every public operation runs as one database transaction: it either commits
all of its table, order, payment and ledger writes or rolls all of them back
and re-raises. Real-time events are published only after the commit.

Central invariant: a table hosts at most one open (unpaid, not cancelled)
order, and ``Table.current_order_id`` is set exactly when the table is
occupied.
"""

import uuid
from contextlib import asynccontextmanager
from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union
from uuid import UUID

import structlog
from sqlalchemy import select, func, update
from sqlalchemy.ext.asyncio import AsyncSession

from robs.database import upsert
from robs.models.counter import Counter
from robs.models.menu import MenuItem
from robs.models.order import (
    DiscountType,
    ItemStatus,
    Order,
    OrderItem,
    OrderStatus,
    PaymentMethod,
)
from robs.models.payment import PaymentStatus, PaymentTransaction
from robs.models.table import Table, TableStatus
from robs.schemas.order import OrderItemCreate, OrderResponse, SplitSelection
from robs.schemas.table import TableResponse
from robs.services import events
from robs.services.errors import (
    AlreadySettled,
    Conflict,
    LifecycleError,
    NotFound,
    ValidationFailed,
)
from robs.services.events import EventPublisher, get_event_publisher
from robs.services.ledger import DailyLedger, settlement_day
from robs.services.order_state import OrderStateMachine
from robs.services.pricing import (
    ZERO,
    Discount,
    compute_order_total,
    to_decimal,
    validate_discount,
)
from robs.services.settings import get_pricing_settings
from robs.services.tables import TableStateStore

logger = structlog.get_logger()

ORDER_NUMBER_COUNTER = "order_number"

ItemInput = Union[OrderItemCreate, Dict[str, Any]]


def _as_uuid(value: Any, label: str = "Order") -> UUID:
    if isinstance(value, UUID):
        return value
    try:
        return UUID(str(value))
    except ValueError:
        raise NotFound(f"{label} not found", id=value)


def order_payload(order: Order) -> Dict[str, Any]:
    return OrderResponse.model_validate(order).model_dump(mode="json")


def table_payload(table: Table) -> Dict[str, Any]:
    return TableResponse.model_validate(table).model_dump(mode="json")


class LifecycleCoordinator:
    """Cross-entity operations on orders, tables, payments and the ledger"""

    def __init__(self, db: AsyncSession, publisher: Optional[EventPublisher] = None):
        self.db = db
        self.publisher = publisher or get_event_publisher()
        self.tables = TableStateStore(db)
        self.states = OrderStateMachine()
        self.ledger = DailyLedger(db)

    # ------------------------------------------------------------------
    # Plumbing
    # ------------------------------------------------------------------

    @asynccontextmanager
    async def _transaction(self, operation: str, **context: Any):
        try:
            yield
            await self.db.commit()
        except LifecycleError as e:
            await self.db.rollback()
            logger.warning(
                "Operation rejected",
                operation=operation,
                error=e.kind,
                detail=e.message,
                **{k: str(v) for k, v in context.items()},
            )
            raise
        except Exception:
            await self.db.rollback()
            logger.exception(
                "Operation failed",
                operation=operation,
                **{k: str(v) for k, v in context.items()},
            )
            raise

    async def _publish_order(self, event: str, order: Order) -> None:
        await self.publisher.publish(event, order_payload(order))

    async def _publish_tables(self, tables: Iterable[Table]) -> None:
        for table in tables:
            await self.publisher.publish(events.TABLE_STATUS_CHANGED, table_payload(table))

    async def _load_order(self, order_id: Any, lock: bool = False) -> Order:
        order_id = _as_uuid(order_id)
        query = (
            select(Order)
            .where(Order.id == order_id)
            .execution_options(populate_existing=True)
        )
        if lock:
            query = query.with_for_update()
        result = await self.db.execute(query)
        order = result.scalar_one_or_none()
        if not order:
            raise NotFound("Order not found", order_id=order_id)
        return order

    async def _next_order_number(self) -> int:
        """Bump the order counter in one statement; the first bump starts after existing orders"""
        counters = Counter.__table__
        first = select(func.coalesce(func.max(Order.order_number), 0) + 1).scalar_subquery()
        stmt = (
            upsert(self.db, counters)
            .values(name=ORDER_NUMBER_COUNTER, value=first)
            .on_conflict_do_update(
                index_elements=[counters.c.name],
                set_={"value": counters.c.value + 1},
            )
            .returning(counters.c.value)
        )
        result = await self.db.execute(stmt)
        return result.scalar_one()

    async def _open_follow_up(self, order: Order) -> Optional[Order]:
        """The table's open order when it continues ``order``'s dining session"""
        if order.table_number is None:
            return None
        current = await self._open_order_on(order.table_number)
        if current is None:
            return None
        seen = set()
        parent_id = current.parent_order_id
        while parent_id is not None and parent_id not in seen:
            if parent_id == order.id:
                return current
            seen.add(parent_id)
            result = await self.db.execute(select(Order.parent_order_id).where(Order.id == parent_id))
            parent_id = result.scalar_one_or_none()
        return None

    async def _open_order_on(self, table_number: int) -> Optional[Order]:
        result = await self.db.execute(
            select(Order)
            .where(
                Order.table_number == table_number,
                Order.is_paid.is_(False),
                Order.status != OrderStatus.CANCELLED,
            )
            .order_by(Order.created_at.desc())
            .limit(1)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _new_order(self, table_number: Optional[int], **fields: Any) -> Order:
        order = Order(
            id=uuid.uuid4(),
            order_number=await self._next_order_number(),
            table_number=table_number,
            status=fields.pop("status", OrderStatus.PENDING),
            is_paid=False,
            hold_status=False,
            total=ZERO,
            items=[],
            payments=[],
            **fields,
        )
        self.db.add(order)
        return order

    async def _build_items(self, items: Sequence[ItemInput]) -> List[OrderItem]:
        """Resolve menu items and snapshot name and price onto new lines"""
        if not items:
            raise ValidationFailed("Items are required")

        requests = [
            item if isinstance(item, OrderItemCreate) else OrderItemCreate.model_validate(item)
            for item in items
        ]
        menu_ids = {r.menu_item_id for r in requests}
        result = await self.db.execute(select(MenuItem).where(MenuItem.id.in_(menu_ids)))
        menu = {m.id: m for m in result.scalars().all()}

        lines = []
        for request in requests:
            menu_item = menu.get(request.menu_item_id)
            if not menu_item:
                raise NotFound(
                    f"Menu item {request.menu_item_id} not found",
                    menu_item_id=request.menu_item_id,
                )
            if not menu_item.is_available:
                raise ValidationFailed(
                    f"Menu item {menu_item.name} is currently unavailable",
                    menu_item_id=menu_item.id,
                )
            if request.quantity < 1:
                raise ValidationFailed("Quantity must be at least 1", menu_item_id=menu_item.id)
            lines.append(
                OrderItem(
                    id=uuid.uuid4(),
                    menu_item_id=menu_item.id,
                    name=menu_item.name,
                    unit_price=menu_item.price,
                    quantity=request.quantity,
                    notes=request.notes,
                    modifiers=[m.model_dump(mode="json") for m in request.modifiers],
                    status=ItemStatus.PENDING,
                )
            )
        return lines

    async def _reprice(self, *orders: Order) -> None:
        """Recompute cached totals with the current tax settings"""
        pricing = await get_pricing_settings(self.db)
        for order in orders:
            order.total = compute_order_total(order, pricing)

    @staticmethod
    def _ensure_mutable(order: Order) -> None:
        if order.is_paid:
            raise AlreadySettled(order.id, "Paid orders cannot be changed")
        if order.status == OrderStatus.CANCELLED:
            raise Conflict("Order is cancelled", order_id=order.id)

    @staticmethod
    def _find_item(order: Order, item_id: Any) -> OrderItem:
        item_id = _as_uuid(item_id, "Item")
        for item in order.items:
            if item.id == item_id:
                return item
        raise NotFound("Item not found in order", order_id=order.id, item_id=item_id)

    async def _free_if_current(self, order: Order) -> List[Table]:
        """Free the order's table (and group) when it is the table's current order"""
        if order.table_number is None:
            return []
        table = await self.tables.find(order.table_number)
        if table is None or table.current_order_id != order.id:
            return []
        return await self.tables.free(table.number)

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    async def create_order(
        self,
        table_number: int,
        items: Sequence[ItemInput],
        discount: Optional[Discount] = None,
        created_by: Optional[str] = None,
    ) -> Order:
        """Open a new order on a table and seat it"""
        validate_discount(discount)

        async with self._transaction("create_order", table_number=table_number):
            table = await self.tables.resolve_order_target(table_number)
            existing = await self._open_order_on(table.number)
            if existing is not None:
                raise Conflict(
                    f"Table {table.number} already has an open order",
                    table_number=table.number,
                    order_id=existing.id,
                )

            lines = await self._build_items(items)
            order = await self._new_order(
                table.number,
                created_by=created_by,
                discount_type=discount.type if discount else None,
                discount_value=discount.value if discount else None,
            )
            order.items.extend(lines)
            await self._reprice(order)
            seated = await self.tables.occupy(table.number, order.id)

        order = await self._load_order(order.id)
        logger.info(
            "Order created",
            order_id=str(order.id),
            order_number=order.order_number,
            table_number=order.table_number,
            total=str(order.total),
        )
        await self._publish_order(events.ORDER_CREATED, order)
        await self._publish_tables(seated)
        return order

    async def settle_payment(
        self,
        order_id: Any,
        amount: Any,
        method: Union[PaymentMethod, str],
        transaction_id: Optional[str] = None,
        settled_at: Optional[datetime] = None,
    ) -> Tuple[Order, PaymentTransaction]:
        """Record payment, free the table and count the sale.

        Order status is left untouched: a paid order may still be in the
        kitchen.
        """
        try:
            method = PaymentMethod(method)
        except ValueError:
            raise ValidationFailed(f"Unsupported payment method '{method}'", method=method)
        amount = to_decimal(amount)
        if amount < 0:
            raise ValidationFailed("Payment amount cannot be negative", amount=amount)

        async with self._transaction("settle_payment", order_id=order_id):
            order = await self._load_order(order_id, lock=True)
            if order.is_paid:
                raise AlreadySettled(order.id)
            if order.status == OrderStatus.CANCELLED:
                raise Conflict("Cannot settle a cancelled order", order_id=order.id)

            if amount != to_decimal(order.total):
                logger.warning(
                    "Settlement amount differs from order total",
                    order_id=str(order.id),
                    amount=str(amount),
                    total=str(order.total),
                )

            # Conditional flip: a concurrent settlement that committed first leaves no row
            claimed = await self.db.execute(
                update(Order)
                .where(Order.id == order.id, Order.is_paid.is_(False))
                .values(is_paid=True, payment_method=method)
                .execution_options(synchronize_session=False)
            )
            if claimed.rowcount != 1:
                raise AlreadySettled(order.id)
            order.is_paid = True
            order.payment_method = method

            payment = PaymentTransaction(
                id=uuid.uuid4(),
                order_id=order.id,
                amount=amount,
                method=method,
                status=PaymentStatus.COMPLETED,
                transaction_id=transaction_id,
                created_at=settled_at or datetime.utcnow(),
            )
            self.db.add(payment)

            freed = await self._free_if_current(order)
            await self.ledger.record_settlement(settlement_day(settled_at), amount, payment)

        order = await self._load_order(order.id)
        logger.info(
            "Order settled",
            order_id=str(order.id),
            amount=str(amount),
            method=method.value,
            freed_tables=[t.number for t in freed],
        )
        await self._publish_order(events.ORDER_PAID, order)
        await self._publish_tables(freed)
        return order, payment

    async def add_items_to_order(
        self,
        order_id: Any,
        items: Sequence[ItemInput],
        created_by: Optional[str] = None,
    ) -> Order:
        """Append items, or continue the dining session on a new order.

        A paid order is never changed: the items go to a new order on the same
        table, linked back through ``parent_order_id``, and the table is
        seated again. If the table already hosts an open order continuing this
        session, the items are appended to that order instead. Compare the
        returned order's id to detect the handoff.
        """
        async with self._transaction("add_items_to_order", order_id=order_id):
            order = await self._load_order(order_id, lock=True)
            if order.status == OrderStatus.CANCELLED:
                raise Conflict("Cannot add items to a cancelled order", order_id=order.id)
            lines = await self._build_items(items)

            seated: List[Table] = []
            follow_up = await self._open_follow_up(order) if order.is_paid else None
            created = order.is_paid and follow_up is None
            if follow_up is not None:
                target = follow_up
                target.items.extend(lines)
                self.states.reopen(target)
                await self._reprice(target)
            elif order.is_paid:
                if order.table_number is not None:
                    await self.tables.resolve_order_target(order.table_number)
                # Percentage discounts carry over; a fixed amount was spent on the settled bill
                carried = order.discount_type == DiscountType.PERCENTAGE
                target = await self._new_order(
                    order.table_number,
                    created_by=created_by or order.created_by,
                    discount_type=order.discount_type if carried else None,
                    discount_value=order.discount_value if carried else None,
                    parent_order_id=order.id,
                )
                target.items.extend(lines)
                await self._reprice(target)
                if order.table_number is not None:
                    seated = await self.tables.occupy(order.table_number, target.id)
            else:
                target = order
                target.items.extend(lines)
                self.states.reopen(target)
                await self._reprice(target)

        result = await self._load_order(target.id)
        logger.info(
            "Items added",
            order_id=str(result.id),
            source_order_id=str(order.id),
            new_order=created,
            item_count=len(lines),
            total=str(result.total),
        )
        await self._publish_order(events.ORDER_CREATED if created else events.ORDER_UPDATED, result)
        await self._publish_tables(seated)
        return result

    async def split_order(
        self,
        source_order_id: Any,
        selections: Sequence[Union[SplitSelection, Dict[str, Any]]],
        target_table_number: int,
        created_by: Optional[str] = None,
    ) -> Order:
        """Move item quantities from an open order to a new order on a free table"""
        if not selections:
            raise ValidationFailed("Select at least one item to split")
        wanted: Dict[UUID, int] = {}
        for selection in selections:
            if not isinstance(selection, SplitSelection):
                selection = SplitSelection.model_validate(selection)
            wanted[selection.item_id] = wanted.get(selection.item_id, 0) + selection.quantity

        async with self._transaction("split_order", order_id=source_order_id, target_table_number=target_table_number):
            source = await self._load_order(source_order_id, lock=True)
            self._ensure_mutable(source)
            if source.table_number == target_table_number:
                raise ValidationFailed(
                    "Target table must differ from the source table",
                    table_number=target_table_number,
                )

            target_table = await self.tables.resolve_order_target(target_table_number)
            if target_table.status != TableStatus.FREE:
                raise Conflict(
                    f"Target table {target_table_number} is not available",
                    table_number=target_table_number,
                    status=target_table.status.value,
                )

            by_id = {item.id: item for item in source.items}
            for item_id, quantity in wanted.items():
                item = by_id.get(item_id)
                if item is None:
                    raise NotFound("Item not found in order", order_id=source.id, item_id=item_id)
                if quantity > item.quantity:
                    raise ValidationFailed(
                        f"Cannot split {quantity} of {item.name}; only {item.quantity} ordered",
                        item_id=item_id,
                    )

            target = await self._new_order(
                target_table.number,
                status=source.status,
                created_by=created_by or source.created_by,
            )
            for item_id, quantity in wanted.items():
                item = by_id[item_id]
                if quantity == item.quantity:
                    target.items.append(item)
                else:
                    item.quantity -= quantity
                    target.items.append(
                        OrderItem(
                            id=uuid.uuid4(),
                            menu_item_id=item.menu_item_id,
                            name=item.name,
                            unit_price=item.unit_price,
                            quantity=quantity,
                            notes=item.notes,
                            modifiers=list(item.modifiers or []),
                            status=item.status,
                        )
                    )

            await self._reprice(source, target)
            seated = await self.tables.occupy(target_table.number, target.id)

        source = await self._load_order(source.id)
        target = await self._load_order(target.id)
        logger.info(
            "Order split",
            source_order_id=str(source.id),
            order_id=str(target.id),
            target_table_number=target_table_number,
            source_total=str(source.total),
            total=str(target.total),
        )
        await self._publish_order(events.ORDER_UPDATED, source)
        await self._publish_order(events.ORDER_CREATED, target)
        await self._publish_tables(seated)
        return target

    async def merge_order(
        self,
        source_table_number: int,
        target_table_number: int,
        created_by: Optional[str] = None,
    ) -> Order:
        """Move every item of the source table's open order to the target table.

        The target's open order receives the items (one is opened when the
        target has none); the emptied source order is deleted and the source
        table freed.
        """
        if source_table_number == target_table_number:
            raise ValidationFailed("Cannot merge a table into itself", table_number=source_table_number)

        async with self._transaction(
            "merge_order",
            source_table_number=source_table_number,
            target_table_number=target_table_number,
        ):
            source_table = await self.tables.get(source_table_number, lock=True)
            source = await self._open_order_on(source_table.number)
            if source is None:
                raise NotFound(
                    f"Table {source_table_number} has no open order",
                    table_number=source_table_number,
                )

            target_table = await self.tables.resolve_order_target(target_table_number)
            if source_table.group_id and source_table.group_id == target_table.group_id:
                raise ValidationFailed(
                    "Tables are in the same group",
                    group_id=source_table.group_id,
                )

            target = await self._open_order_on(target_table.number)
            opened = target is None
            if opened:
                target = await self._new_order(
                    target_table.number,
                    created_by=created_by or source.created_by,
                )

            moved = list(source.items)
            for item in moved:
                target.items.append(item)
            if not opened and any(
                i.status in (ItemStatus.PENDING, ItemStatus.PREPARING) for i in moved
            ):
                self.states.reopen(target)
            await self._reprice(target)

            freed = await self.tables.free(source_table.number)
            source_id = source.id
            await self.db.delete(source)
            seated = await self.tables.occupy(target_table.number, target.id)

        target = await self._load_order(target.id)
        logger.info(
            "Orders merged",
            source_order_id=str(source_id),
            order_id=str(target.id),
            source_table_number=source_table_number,
            target_table_number=target_table_number,
            item_count=len(moved),
        )
        await self.publisher.publish(events.ORDER_DELETED, {"id": str(source_id)})
        await self._publish_order(events.ORDER_CREATED if opened else events.ORDER_UPDATED, target)
        await self._publish_tables(freed)
        await self._publish_tables(seated)
        return target

    async def cancel_order(self, order_id: Any, reason: Optional[str] = None) -> Order:
        """Cancel an unpaid order and free its table; no sale is recorded"""
        freed: List[Table] = []
        async with self._transaction("cancel_order", order_id=order_id):
            order = await self._load_order(order_id, lock=True)
            if order.is_paid:
                raise AlreadySettled(order.id, "Paid orders cannot be cancelled")
            if self.states.transition(order, OrderStatus.CANCELLED):
                order.cancel_reason = reason
                order.hold_status = False
                freed = await self._free_if_current(order)

        order = await self._load_order(order.id)
        logger.info("Order cancelled", order_id=str(order.id), reason=reason)
        await self._publish_order(events.ORDER_UPDATED, order)
        await self._publish_tables(freed)
        return order

    # ------------------------------------------------------------------
    # Order maintenance
    # ------------------------------------------------------------------

    async def update_order_status(
        self,
        order_id: Any,
        status: Union[OrderStatus, str],
        reason: Optional[str] = None,
    ) -> Order:
        """Explicit, caller-driven status change.

        Serving an order serves its remaining lines; item statuses never move
        the order on their own.
        """
        try:
            status = OrderStatus(status)
        except ValueError:
            raise ValidationFailed(f"Invalid status '{status}'", status=status)
        if status == OrderStatus.CANCELLED:
            return await self.cancel_order(order_id, reason)

        async with self._transaction("update_order_status", order_id=order_id, status=status.value):
            order = await self._load_order(order_id, lock=True)
            if status == OrderStatus.SERVED:
                self.states.mark_served(order)
            else:
                self.states.transition(order, status)

        order = await self._load_order(order.id)
        logger.info("Order status updated", order_id=str(order.id), status=order.status.value)
        await self._publish_order(events.ORDER_UPDATED, order)
        return order

    async def update_item_status(
        self,
        order_id: Any,
        item_id: Any,
        status: Union[ItemStatus, str],
    ) -> Order:
        try:
            status = ItemStatus(status)
        except ValueError:
            raise ValidationFailed(f"Invalid status '{status}'", status=status)

        async with self._transaction("update_item_status", order_id=order_id, item_id=item_id):
            order = await self._load_order(order_id, lock=True)
            item = self._find_item(order, item_id)
            self.states.transition_item(item, status)
            if status == ItemStatus.CANCELLED and order.is_open:
                await self._reprice(order)

        order = await self._load_order(order.id)
        await self._publish_order(events.ORDER_UPDATED, order)
        return order

    async def update_item(
        self,
        order_id: Any,
        item_id: Any,
        quantity: Optional[int] = None,
        notes: Optional[str] = None,
    ) -> Order:
        """Change a line's quantity or notes on an open order"""
        if quantity is not None and quantity < 1:
            raise ValidationFailed("Quantity must be at least 1", item_id=item_id)

        async with self._transaction("update_item", order_id=order_id, item_id=item_id):
            order = await self._load_order(order_id, lock=True)
            self._ensure_mutable(order)
            item = self._find_item(order, item_id)
            if quantity is not None:
                item.quantity = quantity
            if notes is not None:
                item.notes = notes
            await self._reprice(order)

        order = await self._load_order(order.id)
        await self._publish_order(events.ORDER_UPDATED, order)
        return order

    async def remove_item(self, order_id: Any, item_id: Any) -> Order:
        async with self._transaction("remove_item", order_id=order_id, item_id=item_id):
            order = await self._load_order(order_id, lock=True)
            self._ensure_mutable(order)
            item = self._find_item(order, item_id)
            order.items.remove(item)
            await self._reprice(order)

        order = await self._load_order(order.id)
        logger.info("Item removed", order_id=str(order.id), item_id=str(item_id), total=str(order.total))
        await self._publish_order(events.ORDER_UPDATED, order)
        return order

    async def apply_discount(self, order_id: Any, discount: Optional[Discount]) -> Order:
        """Set or clear (``None``) the discount of an open order"""
        validate_discount(discount)

        async with self._transaction("apply_discount", order_id=order_id):
            order = await self._load_order(order_id, lock=True)
            self._ensure_mutable(order)
            order.discount_type = discount.type if discount else None
            order.discount_value = discount.value if discount else None
            await self._reprice(order)

        order = await self._load_order(order.id)
        await self._publish_order(events.ORDER_UPDATED, order)
        return order

    async def set_hold(self, order_id: Any, hold: bool) -> Order:
        async with self._transaction("set_hold", order_id=order_id):
            order = await self._load_order(order_id, lock=True)
            self._ensure_mutable(order)
            order.hold_status = hold

        order = await self._load_order(order.id)
        logger.info("Order hold changed", order_id=str(order.id), hold=hold)
        await self._publish_order(events.ORDER_UPDATED, order)
        return order

    async def refund_payment(self, payment_id: Any) -> PaymentTransaction:
        """Mark a completed payment refunded; the daily ledger is not adjusted"""
        payment_id = _as_uuid(payment_id, "Transaction")
        async with self._transaction("refund_payment", payment_id=payment_id):
            result = await self.db.execute(
                select(PaymentTransaction)
                .where(PaymentTransaction.id == payment_id)
                .with_for_update()
            )
            payment = result.scalar_one_or_none()
            if not payment:
                raise NotFound("Transaction not found", payment_id=payment_id)
            if payment.status == PaymentStatus.REFUNDED:
                raise Conflict("Transaction is already refunded", payment_id=payment_id)
            payment.status = PaymentStatus.REFUNDED
            payment.refunded_at = datetime.utcnow()

        order = await self._load_order(payment.order_id)
        logger.info("Payment refunded", payment_id=str(payment.id), order_id=str(order.id))
        await self._publish_order(events.ORDER_UPDATED, order)
        return payment

    # ------------------------------------------------------------------
    # Tables
    # ------------------------------------------------------------------

    async def group_tables(self, table_numbers: Sequence[int], primary_table_number: int) -> Tuple[str, List[Table]]:
        async with self._transaction("group_tables", primary_table_number=primary_table_number):
            grouped = await self.tables.group(table_numbers, primary_table_number)
        await self._publish_tables(grouped)
        return grouped[0].group_id, grouped

    async def ungroup_tables(self, group_id: str) -> List[Table]:
        async with self._transaction("ungroup_tables", group_id=group_id):
            members = await self.tables.ungroup(group_id)
        await self._publish_tables(members)
        return members

    async def reserve_table(
        self,
        table_number: int,
        reserved_by: str,
        reserved_time: Optional[datetime] = None,
    ) -> Table:
        async with self._transaction("reserve_table", table_number=table_number):
            table = await self.tables.reserve(table_number, reserved_by, reserved_time)
        await self._publish_tables([table])
        return table

    async def release_table(self, table_number: int) -> Table:
        async with self._transaction("release_table", table_number=table_number):
            table = await self.tables.release(table_number)
        await self._publish_tables([table])
        return table

    async def create_table(self, number: int, capacity: int) -> Table:
        async with self._transaction("create_table", table_number=number):
            table = await self.tables.create(number, capacity)
        logger.info("Table created", table_number=number, capacity=capacity)
        return table

    async def create_tables(self, specs: Sequence[Tuple[int, int]]) -> List[Table]:
        """Bulk create; existing numbers are skipped"""
        async with self._transaction("create_tables", count=len(specs)):
            tables = await self.tables.create_many(specs)
        return tables

    async def delete_table(self, table_number: int) -> None:
        async with self._transaction("delete_table", table_number=table_number):
            await self.tables.delete(table_number)
        logger.info("Table deleted", table_number=table_number)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def get_order(self, order_id: Any) -> Order:
        return await self._load_order(order_id)

    async def list_orders(
        self,
        page: int = 1,
        page_size: int = 20,
        status: Optional[OrderStatus] = None,
        table_number: Optional[int] = None,
        is_paid: Optional[bool] = None,
    ) -> Tuple[List[Order], int]:
        query = select(Order)
        count_query = select(func.count(Order.id))

        if status:
            query = query.where(Order.status == status)
            count_query = count_query.where(Order.status == status)

        if table_number is not None:
            query = query.where(Order.table_number == table_number)
            count_query = count_query.where(Order.table_number == table_number)

        if is_paid is not None:
            query = query.where(Order.is_paid.is_(is_paid))
            count_query = count_query.where(Order.is_paid.is_(is_paid))

        total_result = await self.db.execute(count_query)
        total = total_result.scalar()

        offset = (page - 1) * page_size
        query = query.order_by(Order.order_number.desc()).offset(offset).limit(page_size)
        result = await self.db.execute(query)
        return list(result.scalars().all()), total

    async def get_dining_session(self, order_id: Any) -> Tuple[Order, List[Order], Decimal]:
        """The order plus the chain of paid orders it continues, newest first"""
        order = await self._load_order(order_id)
        previous: List[Order] = []
        seen = {order.id}
        parent_id = order.parent_order_id
        while parent_id is not None and parent_id not in seen:
            seen.add(parent_id)
            result = await self.db.execute(select(Order).where(Order.id == parent_id))
            parent = result.scalar_one_or_none()
            if parent is None:
                break
            previous.append(parent)
            parent_id = parent.parent_order_id

        previous_paid_total = sum((to_decimal(o.total) for o in previous if o.is_paid), ZERO)
        return order, previous, previous_paid_total

    async def list_tables(self, status: Optional[TableStatus] = None) -> List[Table]:
        return await self.tables.list_tables(status)
