"""Menu API endpoints"""

from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from robs.database import get_db
from robs.models.menu import MenuItem
from robs.schemas.menu import MenuAvailabilityUpdate, MenuItemResponse

router = APIRouter()


@router.get("", response_model=List[MenuItemResponse])
async def list_menu_items(
    category: Optional[str] = None,
    is_available: Optional[bool] = None,
    db: AsyncSession = Depends(get_db),
):
    """List menu items"""
    query = select(MenuItem)

    if category:
        query = query.where(MenuItem.category == category)

    if is_available is not None:
        query = query.where(MenuItem.is_available == is_available)

    query = query.order_by(MenuItem.category, MenuItem.sort_order, MenuItem.name)

    result = await db.execute(query)
    return result.scalars().all()


@router.get("/{item_id}", response_model=MenuItemResponse)
async def get_menu_item(
    item_id: UUID,
    db: AsyncSession = Depends(get_db),
):
    result = await db.execute(select(MenuItem).where(MenuItem.id == item_id))
    item = result.scalar_one_or_none()

    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")

    return item


@router.patch("/{item_id}/availability", response_model=MenuItemResponse)
async def set_availability(
    item_id: UUID,
    availability: MenuAvailabilityUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Mark an item sold out (or back in stock); existing orders keep their lines"""
    result = await db.execute(select(MenuItem).where(MenuItem.id == item_id))
    item = result.scalar_one_or_none()

    if not item:
        raise HTTPException(status_code=404, detail="Menu item not found")

    item.is_available = availability.is_available
    await db.commit()

    return item
