"""Restaurant settings schemas"""

from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel

from robs.schemas.payment import Money


class RestaurantSettingsResponse(BaseModel):
    restaurant_name: Optional[str]
    tax_rate: Money
    tax_enabled: bool
    currency: str
    discount_presets: List[int] = []

    class Config:
        from_attributes = True


class RestaurantSettingsUpdate(BaseModel):
    restaurant_name: Optional[str] = None
    tax_rate: Optional[Decimal] = None
    tax_enabled: Optional[bool] = None
    currency: Optional[str] = None
    discount_presets: Optional[List[int]] = None
