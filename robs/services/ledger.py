"""Daily sales ledger"""

import uuid
from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

import structlog
from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from robs.database import upsert
from robs.models.menu import MenuItem
from robs.models.order import ItemStatus, Order, OrderItem, OrderStatus
from robs.models.payment import PaymentTransaction
from robs.models.sales import DailySales
from robs.services.pricing import ZERO, round2, to_decimal

logger = structlog.get_logger()


def settlement_day(moment: Optional[datetime] = None) -> date:
    """Calendar day of a settlement; days start at local midnight"""
    return (moment or datetime.now()).date()


class DailyLedger:
    """Accumulates settled payments into one row per calendar day"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def record_settlement(
        self,
        day: date,
        amount,
        payment: Optional[PaymentTransaction] = None,
    ) -> Optional[DailySales]:
        """Add one settled order of ``amount`` to ``day``.

        When ``payment`` is given it is the idempotency key: a payment that
        was already counted is skipped and None is returned.
        """
        if payment is not None and payment.ledger_date is not None:
            logger.warning(
                "Settlement already recorded",
                payment_id=str(payment.id),
                ledger_date=payment.ledger_date.isoformat(),
            )
            return None

        amount = to_decimal(amount)
        sales = DailySales.__table__
        now = datetime.utcnow()
        # Insert-or-increment in one statement; the day row may not exist yet
        await self.db.execute(
            upsert(self.db, sales)
            .values(
                id=uuid.uuid4(),
                date=day,
                total_sales=amount,
                total_orders=1,
                average_order_value=round2(amount),
                created_at=now,
                updated_at=now,
            )
            .on_conflict_do_update(
                index_elements=[sales.c.date],
                set_={
                    "total_sales": sales.c.total_sales + amount,
                    "total_orders": sales.c.total_orders + 1,
                    "updated_at": now,
                },
            )
        )

        result = await self.db.execute(
            select(DailySales)
            .where(DailySales.date == day)
            .execution_options(populate_existing=True)
        )
        record = result.scalar_one()
        record.average_order_value = round2(to_decimal(record.total_sales) / record.total_orders)

        if payment is not None:
            payment.ledger_date = day

        logger.info(
            "Settlement recorded",
            date=day.isoformat(),
            amount=str(amount),
            total_sales=str(record.total_sales),
            total_orders=record.total_orders,
        )
        return record

    async def get_day(self, day: date) -> Optional[DailySales]:
        result = await self.db.execute(select(DailySales).where(DailySales.date == day))
        return result.scalar_one_or_none()

    async def list_days(self, page: int = 1, page_size: int = 30) -> Tuple[List[DailySales], int]:
        """Newest day first"""
        total_result = await self.db.execute(select(func.count(DailySales.id)))
        total = total_result.scalar()

        offset = (page - 1) * page_size
        result = await self.db.execute(
            select(DailySales).order_by(DailySales.date.desc()).offset(offset).limit(page_size)
        )
        return list(result.scalars().all()), total

    async def summarize(self, start: date, end: date) -> dict:
        """Days in [start, end] with combined totals"""
        result = await self.db.execute(
            select(DailySales)
            .where(DailySales.date >= start, DailySales.date <= end)
            .order_by(DailySales.date.asc())
        )
        days = list(result.scalars().all())

        total_sales = sum((to_decimal(d.total_sales) for d in days), ZERO)
        total_orders = sum(d.total_orders for d in days)
        average = round2(total_sales / total_orders) if total_orders else ZERO

        return {
            "daily_sales": days,
            "total_sales": round2(total_sales),
            "total_orders": total_orders,
            "average_order_value": average,
            "days_count": len(days),
        }

    async def top_items(
        self,
        limit: int = 10,
        start: Optional[date] = None,
        end: Optional[date] = None,
    ) -> List[dict]:
        """Best sellers by quantity.

        Revenue uses the unit price snapshot on each line (modifiers, discount
        and tax excluded). Cancelled orders and cancelled lines are left out;
        ``start`` and ``end`` bound the order's creation day, inclusive.
        """
        quantity = func.sum(OrderItem.quantity).label("total_quantity")
        query = (
            select(
                OrderItem.menu_item_id,
                MenuItem.name,
                MenuItem.category,
                quantity,
                func.count(func.distinct(OrderItem.order_id)).label("total_orders"),
                func.sum(OrderItem.unit_price * OrderItem.quantity).label("total_revenue"),
            )
            .join(Order, Order.id == OrderItem.order_id)
            .join(MenuItem, MenuItem.id == OrderItem.menu_item_id)
            .where(
                Order.status != OrderStatus.CANCELLED,
                OrderItem.status != ItemStatus.CANCELLED,
            )
        )

        if start:
            query = query.where(Order.created_at >= datetime.combine(start, time.min))

        if end:
            query = query.where(Order.created_at < datetime.combine(end + timedelta(days=1), time.min))

        query = (
            query.group_by(OrderItem.menu_item_id, MenuItem.name, MenuItem.category)
            .order_by(quantity.desc(), MenuItem.name)
            .limit(limit)
        )
        result = await self.db.execute(query)
        return [
            {
                "menu_item_id": row.menu_item_id,
                "name": row.name,
                "category": row.category,
                "total_quantity": int(row.total_quantity or 0),
                "total_orders": row.total_orders,
                "total_revenue": round2(to_decimal(row.total_revenue)),
            }
            for row in result.all()
        ]
