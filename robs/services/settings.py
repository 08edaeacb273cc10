"""Restaurant settings provider.

Pricing reads these values fresh on every computation so admin changes to
tax take effect on the next order mutation.
"""

from typing import Any, Dict

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from robs.config import settings as app_settings
from robs.models.settings import RestaurantSettings
from robs.services.errors import ValidationFailed
from robs.services.pricing import PricingSettings, to_decimal

logger = structlog.get_logger()

EDITABLE_FIELDS = ("restaurant_name", "tax_rate", "tax_enabled", "currency", "discount_presets")


async def get_restaurant_settings(db: AsyncSession) -> RestaurantSettings:
    """Return the settings row, creating it from configured defaults"""
    result = await db.execute(
        select(RestaurantSettings).order_by(RestaurantSettings.updated_at.desc()).limit(1)
    )
    row = result.scalar_one_or_none()
    if row is None:
        row = RestaurantSettings(
            restaurant_name=app_settings.default_restaurant_name,
            tax_rate=app_settings.default_tax_rate,
            tax_enabled=app_settings.default_tax_enabled,
            currency=app_settings.default_currency,
            discount_presets=list(app_settings.default_discount_presets),
        )
        db.add(row)
        await db.flush()
        logger.info("Created default restaurant settings")
    return row


async def get_pricing_settings(db: AsyncSession) -> PricingSettings:
    return PricingSettings.from_settings(await get_restaurant_settings(db))


async def update_restaurant_settings(db: AsyncSession, changes: Dict[str, Any]) -> RestaurantSettings:
    changes = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
    if "tax_rate" in changes:
        changes["tax_rate"] = to_decimal(changes["tax_rate"])
        if changes["tax_rate"] < 0 or changes["tax_rate"] > 100:
            raise ValidationFailed("Tax rate must be between 0 and 100", tax_rate=changes["tax_rate"])

    row = await get_restaurant_settings(db)
    for field, value in changes.items():
        setattr(row, field, value)
    await db.commit()
    logger.info("Restaurant settings updated", fields=sorted(changes))
    return row
