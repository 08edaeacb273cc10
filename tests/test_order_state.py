"""Order status transition tests"""

from types import SimpleNamespace
from uuid import uuid4

import pytest

from robs.models.order import ItemStatus, OrderStatus
from robs.services.errors import Conflict
from robs.services.order_state import OrderStateMachine


def make_order(status=OrderStatus.PENDING, item_statuses=()):
    items = [SimpleNamespace(id=uuid4(), status=s) for s in item_statuses]
    return SimpleNamespace(id=uuid4(), status=status, items=items)


@pytest.fixture
def machine():
    return OrderStateMachine()


@pytest.mark.parametrize(
    "current,target",
    [
        (OrderStatus.PENDING, OrderStatus.PREPARING),
        (OrderStatus.PENDING, OrderStatus.SERVED),
        (OrderStatus.PREPARING, OrderStatus.READY),
        (OrderStatus.READY, OrderStatus.DELIVERED),
        (OrderStatus.READY, OrderStatus.CANCELLED),
    ],
)
def test_forward_moves_allowed(current, target):
    assert OrderStateMachine.can_transition(current, target)


@pytest.mark.parametrize(
    "current,target",
    [
        (OrderStatus.READY, OrderStatus.PENDING),
        (OrderStatus.SERVED, OrderStatus.DELIVERED),
        (OrderStatus.SERVED, OrderStatus.CANCELLED),
        (OrderStatus.CANCELLED, OrderStatus.PENDING),
    ],
)
def test_backward_and_terminal_moves_rejected(current, target):
    assert not OrderStateMachine.can_transition(current, target)


def test_transition_to_current_is_noop(machine):
    order = make_order(OrderStatus.PREPARING)
    assert machine.transition(order, OrderStatus.PREPARING) is False
    assert order.status == OrderStatus.PREPARING


def test_invalid_transition_raises_conflict(machine):
    order = make_order(OrderStatus.READY)
    with pytest.raises(Conflict):
        machine.transition(order, OrderStatus.PREPARING)
    assert order.status == OrderStatus.READY


def test_accepts_status_values(machine):
    order = make_order()
    assert machine.transition(order, "ready") is True
    assert order.status == OrderStatus.READY


def test_mark_served_cascades_to_live_items(machine):
    order = make_order(
        OrderStatus.READY,
        [ItemStatus.READY, ItemStatus.PENDING, ItemStatus.CANCELLED],
    )
    machine.mark_served(order)
    assert order.status == OrderStatus.SERVED
    assert [i.status for i in order.items] == [
        ItemStatus.SERVED,
        ItemStatus.SERVED,
        ItemStatus.CANCELLED,
    ]


def test_item_status_never_moves_order(machine):
    order = make_order(OrderStatus.PREPARING, [ItemStatus.PREPARING])
    machine.transition_item(order.items[0], ItemStatus.READY)
    assert order.items[0].status == ItemStatus.READY
    assert order.status == OrderStatus.PREPARING


def test_item_backward_move_rejected(machine):
    order = make_order(item_statuses=[ItemStatus.SERVED])
    with pytest.raises(Conflict):
        machine.transition_item(order.items[0], ItemStatus.PREPARING)


@pytest.mark.parametrize("status", [OrderStatus.READY, OrderStatus.SERVED, OrderStatus.DELIVERED])
def test_reopen_finished_order(machine, status):
    order = make_order(status)
    assert machine.reopen(order) is True
    assert order.status == OrderStatus.PENDING


def test_reopen_leaves_kitchen_orders_alone(machine):
    order = make_order(OrderStatus.PREPARING)
    assert machine.reopen(order) is False
    assert order.status == OrderStatus.PREPARING
