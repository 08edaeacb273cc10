"""Menu schemas"""

from typing import Optional
from uuid import UUID

from pydantic import BaseModel

from robs.schemas.payment import Money


class MenuItemResponse(BaseModel):
    id: UUID
    name: str
    description: Optional[str]
    price: Money
    category: Optional[str]
    is_available: bool
    preparation_time_minutes: Optional[int]
    sort_order: Optional[int]

    class Config:
        from_attributes = True


class MenuAvailabilityUpdate(BaseModel):
    is_available: bool
