"""Daily sales ledger tests"""

from datetime import date, datetime
from decimal import Decimal
from uuid import uuid4

import pytest

from robs.models.order import Order, PaymentMethod
from robs.models.payment import PaymentTransaction
from robs.services.ledger import DailyLedger, settlement_day


@pytest.fixture
def ledger(test_db):
    return DailyLedger(test_db)


async def make_payment(db, amount="50.00") -> PaymentTransaction:
    order = Order(order_number=1, table_number=1, total=Decimal(amount), is_paid=True)
    db.add(order)
    await db.flush()
    payment = PaymentTransaction(
        id=uuid4(),
        order_id=order.id,
        amount=Decimal(amount),
        method=PaymentMethod.CASH,
    )
    db.add(payment)
    await db.flush()
    return payment


def test_settlement_day_is_calendar_date():
    assert settlement_day(datetime(2026, 1, 31, 23, 59, 59)) == date(2026, 1, 31)
    assert settlement_day(datetime(2026, 2, 1, 0, 0)) == date(2026, 2, 1)


async def test_record_settlement_upserts_and_averages(ledger, test_db):
    day = date(2026, 5, 4)
    await ledger.record_settlement(day, Decimal("50"))
    record = await ledger.record_settlement(day, Decimal("25.25"))
    await test_db.commit()

    assert record.total_orders == 2
    assert record.total_sales == Decimal("75.25")
    # 37.625 rounds half up
    assert record.average_order_value == Decimal("37.63")


async def test_same_payment_counted_once(ledger, test_db):
    payment = await make_payment(test_db)
    day = date(2026, 5, 4)

    first = await ledger.record_settlement(day, payment.amount, payment)
    second = await ledger.record_settlement(day, payment.amount, payment)
    await test_db.commit()

    assert first is not None
    assert second is None
    assert payment.ledger_date == day
    record = await ledger.get_day(day)
    assert record.total_orders == 1
    assert record.total_sales == Decimal("50.00")


async def test_days_are_separate(ledger, test_db):
    await ledger.record_settlement(date(2026, 5, 3), Decimal("10"))
    await ledger.record_settlement(date(2026, 5, 4), Decimal("20"))
    await ledger.record_settlement(date(2026, 5, 6), Decimal("30"))
    await test_db.commit()

    days, total = await ledger.list_days()
    assert total == 3
    assert [d.date for d in days] == [date(2026, 5, 6), date(2026, 5, 4), date(2026, 5, 3)]

    page, _ = await ledger.list_days(page=2, page_size=2)
    assert [d.date for d in page] == [date(2026, 5, 3)]


async def test_summarize_range(ledger, test_db):
    await ledger.record_settlement(date(2026, 5, 3), Decimal("10"))
    await ledger.record_settlement(date(2026, 5, 4), Decimal("20"))
    await ledger.record_settlement(date(2026, 5, 4), Decimal("40"))
    await ledger.record_settlement(date(2026, 5, 9), Decimal("99"))
    await test_db.commit()

    summary = await ledger.summarize(date(2026, 5, 1), date(2026, 5, 7))
    assert summary["days_count"] == 2
    assert summary["total_orders"] == 3
    assert summary["total_sales"] == Decimal("70.00")
    assert summary["average_order_value"] == Decimal("23.33")


async def test_summarize_empty_range(ledger):
    summary = await ledger.summarize(date(2026, 1, 1), date(2026, 1, 7))
    assert summary["days_count"] == 0
    assert summary["total_orders"] == 0
    assert summary["average_order_value"] == Decimal("0.00")


async def test_top_items_by_quantity(coordinator, test_db, test_menu_items):
    tikka, chai, thali = (test_menu_items[k] for k in ("tikka", "chai", "thali"))
    await coordinator.create_order(1, [{"menu_item_id": chai, "quantity": 3}, {"menu_item_id": tikka, "quantity": 1}])
    await coordinator.create_order(2, [{"menu_item_id": chai, "quantity": 2}])
    dropped = await coordinator.create_order(3, [{"menu_item_id": thali, "quantity": 9}])
    await coordinator.cancel_order(dropped.id)

    ledger = DailyLedger(test_db)
    rows = await ledger.top_items(limit=10)

    assert [r["name"] for r in rows] == ["Masala Chai", "Paneer Tikka"]
    assert rows[0]["menu_item_id"] == chai
    assert rows[0]["total_quantity"] == 5
    assert rows[0]["total_orders"] == 2
    assert rows[0]["total_revenue"] == Decimal("100.00")

    assert len(await ledger.top_items(limit=1)) == 1
    today = datetime.utcnow().date()
    assert len(await ledger.top_items(start=today, end=today)) == 2
    assert await ledger.top_items(start=date(2000, 1, 1), end=date(2000, 1, 2)) == []
