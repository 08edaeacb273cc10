"""Restaurant settings API endpoints"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from robs.database import get_db
from robs.schemas.settings import RestaurantSettingsResponse, RestaurantSettingsUpdate
from robs.services.settings import get_restaurant_settings, update_restaurant_settings

router = APIRouter()


@router.get("", response_model=RestaurantSettingsResponse)
async def get_settings(db: AsyncSession = Depends(get_db)):
    """Current tax, currency and discount presets"""
    row = await get_restaurant_settings(db)
    await db.commit()
    return row


@router.put("", response_model=RestaurantSettingsResponse)
async def update_settings(
    settings_data: RestaurantSettingsUpdate,
    db: AsyncSession = Depends(get_db),
):
    """Update settings; new values apply to the next order change"""
    return await update_restaurant_settings(db, settings_data.model_dump(exclude_unset=True))
