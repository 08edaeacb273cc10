"""Table state store tests"""

from uuid import uuid4

import pytest

from robs.models.order import Order, OrderStatus
from robs.models.table import TableStatus
from robs.services.errors import Conflict, NotFound, ValidationFailed
from robs.services.tables import TableStateStore


@pytest.fixture
def store(test_db, test_tables):
    return TableStateStore(test_db)


async def test_get_missing_table(store):
    with pytest.raises(NotFound):
        await store.get(99)


async def test_occupy_and_free(store):
    order_id = uuid4()
    await store.occupy(1, order_id)
    table = await store.get(1)
    assert table.status == TableStatus.OCCUPIED
    assert table.current_order_id == order_id

    await store.free(1)
    table = await store.get(1)
    assert table.status == TableStatus.FREE
    assert table.current_order_id is None


async def test_occupy_rejects_second_order(store):
    await store.occupy(1, uuid4())
    with pytest.raises(Conflict):
        await store.occupy(1, uuid4())


async def test_occupy_same_order_is_idempotent(store):
    order_id = uuid4()
    await store.occupy(1, order_id)
    members = await store.occupy(1, order_id)
    assert [t.current_order_id for t in members] == [order_id]


async def test_occupy_clears_reservation(store):
    await store.reserve(1, "Mehta")
    await store.occupy(1, uuid4())
    table = await store.get(1)
    assert table.status == TableStatus.OCCUPIED
    assert table.reserved_by is None


async def test_group_moves_together(store):
    grouped = await store.group([2, 3, 4], 2)
    group_id = grouped[0].group_id
    assert group_id.startswith("group_")
    assert [t.is_primary for t in grouped] == [True, False, False]

    order_id = uuid4()
    await store.occupy(2, order_id)
    members = await store.group_members(group_id)
    assert {t.status for t in members} == {TableStatus.OCCUPIED}
    assert {t.current_order_id for t in members} == {order_id}

    await store.free(3)
    members = await store.group_members(group_id)
    assert {t.status for t in members} == {TableStatus.FREE}
    assert {t.current_order_id for t in members} == {None}


async def test_secondary_table_redirects_to_primary(store):
    await store.group([2, 3], 2)
    with pytest.raises(Conflict) as exc_info:
        await store.resolve_order_target(3)
    assert exc_info.value.context["primary_table_number"] == 2

    primary = await store.resolve_order_target(2)
    assert primary.number == 2


@pytest.mark.parametrize(
    "numbers,primary",
    [([1], 1), ([1, 1], 1), ([1, 2], 3)],
)
async def test_group_validation(store, numbers, primary):
    with pytest.raises(ValidationFailed):
        await store.group(numbers, primary)


async def test_group_missing_table(store):
    with pytest.raises(NotFound):
        await store.group([1, 42], 1)


async def test_group_rejects_busy_tables(store):
    await store.occupy(1, uuid4())
    with pytest.raises(Conflict):
        await store.group([1, 2], 1)

    await store.group([3, 4], 3)
    with pytest.raises(Conflict):
        await store.group([4, 5], 5)


async def test_ungroup_keeps_order_on_primary(store):
    grouped = await store.group([2, 3], 2)
    order_id = uuid4()
    await store.occupy(2, order_id)

    await store.ungroup(grouped[0].group_id)
    primary = await store.get(2)
    secondary = await store.get(3)
    assert primary.status == TableStatus.OCCUPIED
    assert primary.current_order_id == order_id
    assert primary.group_id is None and primary.is_primary is False
    assert secondary.status == TableStatus.FREE
    assert secondary.current_order_id is None
    assert secondary.group_id is None


async def test_ungroup_unknown_group(store):
    with pytest.raises(NotFound):
        await store.ungroup("group_missing")


async def test_reserve_and_release(store):
    table = await store.reserve(5, "Iyer")
    assert table.status == TableStatus.RESERVED
    assert table.reserved_by == "Iyer"

    with pytest.raises(Conflict):
        await store.reserve(5, "Someone else")

    table = await store.release(5)
    assert table.status == TableStatus.FREE
    assert table.reserved_by is None

    with pytest.raises(Conflict):
        await store.release(5)


async def test_create_table(store):
    table = await store.create(6, 2)
    assert table.status == TableStatus.FREE

    with pytest.raises(Conflict):
        await store.create(6, 4)
    with pytest.raises(ValidationFailed):
        await store.create(0, 4)
    with pytest.raises(ValidationFailed):
        await store.create(7, 0)


async def test_delete_table_with_orders(store, test_db):
    test_db.add(Order(order_number=1, table_number=4, status=OrderStatus.CANCELLED))
    await test_db.flush()
    with pytest.raises(Conflict):
        await store.delete(4)

    await store.delete(5)
    assert await store.find(5) is None


async def test_list_tables_by_status(store):
    await store.occupy(1, uuid4())
    occupied = await store.list_tables(TableStatus.OCCUPIED)
    assert [t.number for t in occupied] == [1]
    assert len(await store.list_tables()) == 5


async def test_create_many_skips_existing(store):
    created = await store.create_many([(4, 2), (6, 6), (7, 2), (6, 8)])
    assert [(t.number, t.capacity) for t in created] == [(6, 6), (7, 2)]
    assert all(t.status == TableStatus.FREE for t in created)
    assert [t.number for t in await store.list_tables()] == [1, 2, 3, 4, 5, 6, 7]


async def test_create_many_validation(store):
    with pytest.raises(ValidationFailed):
        await store.create_many([])
    with pytest.raises(ValidationFailed):
        await store.create_many([(8, 0)])
