"""Order lifecycle API endpoints"""

from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query

from robs.api.deps import get_coordinator
from robs.models.order import OrderStatus
from robs.schemas.order import (
    AddItemsRequest,
    CancelRequest,
    DiningSessionResponse,
    DiscountUpdate,
    HoldRequest,
    ItemStatusUpdate,
    MergeRequest,
    OrderCreate,
    OrderItemUpdate,
    OrderListResponse,
    OrderResponse,
    OrderStatusUpdate,
    SplitRequest,
)
from robs.services.lifecycle import LifecycleCoordinator
from robs.services.pricing import Discount

router = APIRouter()


@router.get("", response_model=OrderListResponse)
async def list_orders(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    status: Optional[OrderStatus] = None,
    table_number: Optional[int] = None,
    is_paid: Optional[bool] = None,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """List orders, newest first"""
    orders, total = await coordinator.list_orders(
        page=page,
        page_size=page_size,
        status=status,
        table_number=table_number,
        is_paid=is_paid,
    )
    return OrderListResponse(
        items=[OrderResponse.model_validate(o) for o in orders],
        total=total,
        page=page,
        page_size=page_size,
    )


@router.post("", response_model=OrderResponse, status_code=201)
async def create_order(
    order_data: OrderCreate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Open an order on a table"""
    return await coordinator.create_order(
        order_data.table_number,
        order_data.items,
        discount=Discount.of(order_data.discount_type, order_data.discount_value),
        created_by=order_data.created_by,
    )


@router.post("/split", response_model=OrderResponse, status_code=201)
async def split_order(
    split_data: SplitRequest,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Move selected items to a new order on another table"""
    return await coordinator.split_order(
        split_data.source_order_id,
        split_data.items,
        split_data.target_table_number,
        created_by=split_data.created_by,
    )


@router.post("/merge", response_model=OrderResponse)
async def merge_orders(
    merge_data: MergeRequest,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Move a table's open order onto another table"""
    return await coordinator.merge_order(
        merge_data.source_table_number,
        merge_data.target_table_number,
        created_by=merge_data.created_by,
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_order(
    order_id: UUID,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    return await coordinator.get_order(order_id)


@router.get("/{order_id}/session", response_model=DiningSessionResponse)
async def get_dining_session(
    order_id: UUID,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Order plus the paid orders earlier in the same sitting"""
    order, previous, previous_paid_total = await coordinator.get_dining_session(order_id)
    return DiningSessionResponse(
        order=OrderResponse.model_validate(order),
        previous_orders=[OrderResponse.model_validate(o) for o in previous],
        previous_paid_total=previous_paid_total,
    )


@router.post("/{order_id}/items", response_model=OrderResponse)
async def add_items(
    order_id: UUID,
    items_data: AddItemsRequest,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Add items; a paid order hands off to a new order with a different id"""
    return await coordinator.add_items_to_order(
        order_id,
        items_data.items,
        created_by=items_data.created_by,
    )


@router.patch("/{order_id}/items/{item_id}", response_model=OrderResponse)
async def update_item(
    order_id: UUID,
    item_id: UUID,
    item_data: OrderItemUpdate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    return await coordinator.update_item(
        order_id,
        item_id,
        quantity=item_data.quantity,
        notes=item_data.notes,
    )


@router.delete("/{order_id}/items/{item_id}", response_model=OrderResponse)
async def remove_item(
    order_id: UUID,
    item_id: UUID,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    return await coordinator.remove_item(order_id, item_id)


@router.patch("/{order_id}/items/{item_id}/status", response_model=OrderResponse)
async def update_item_status(
    order_id: UUID,
    item_id: UUID,
    status_data: ItemStatusUpdate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Kitchen progress of a single line"""
    return await coordinator.update_item_status(order_id, item_id, status_data.status)


@router.patch("/{order_id}/status", response_model=OrderResponse)
async def update_order_status(
    order_id: UUID,
    status_data: OrderStatusUpdate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    return await coordinator.update_order_status(order_id, status_data.status, status_data.reason)


@router.post("/{order_id}/cancel", response_model=OrderResponse)
async def cancel_order(
    order_id: UUID,
    cancel_data: CancelRequest,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    return await coordinator.cancel_order(order_id, cancel_data.reason)


@router.patch("/{order_id}/hold", response_model=OrderResponse)
async def set_hold(
    order_id: UUID,
    hold_data: HoldRequest,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    return await coordinator.set_hold(order_id, hold_data.hold)


@router.patch("/{order_id}/discount", response_model=OrderResponse)
async def apply_discount(
    order_id: UUID,
    discount_data: DiscountUpdate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Set the discount, or clear it by sending neither field"""
    discount = Discount.of(discount_data.discount_type, discount_data.discount_value)
    return await coordinator.apply_discount(order_id, discount)
