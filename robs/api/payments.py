"""Payment settlement API endpoints"""

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends

from robs.api.deps import get_coordinator
from robs.schemas.order import OrderResponse, SettlementResponse
from robs.schemas.payment import PaymentCreate, PaymentResponse
from robs.services.lifecycle import LifecycleCoordinator

router = APIRouter()


@router.post("/orders/{order_id}", response_model=SettlementResponse, status_code=201)
async def settle_order(
    order_id: UUID,
    payment_data: PaymentCreate,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Settle an order; frees its table and counts the sale"""
    order, payment = await coordinator.settle_payment(
        order_id,
        payment_data.amount,
        payment_data.method,
        transaction_id=payment_data.transaction_id,
    )
    return SettlementResponse(
        order=OrderResponse.model_validate(order),
        transaction=PaymentResponse.model_validate(payment),
    )


@router.get("/orders/{order_id}", response_model=List[PaymentResponse])
async def list_order_payments(
    order_id: UUID,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    order = await coordinator.get_order(order_id)
    return order.payments


@router.post("/{payment_id}/refund", response_model=PaymentResponse)
async def refund_payment(
    payment_id: UUID,
    coordinator: LifecycleCoordinator = Depends(get_coordinator),
):
    """Mark a payment refunded"""
    return await coordinator.refund_payment(payment_id)
