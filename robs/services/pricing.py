"""Order pricing.

``compute_total`` is a pure function of the order lines, the discount and the
pricing settings. Each line's unit price (base plus modifiers) is rounded to
two places before it is multiplied by the quantity; the grand total is
rounded again at the end. Both roundings must stay.
"""

from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Iterable, Optional

from robs.models.order import DiscountType, ItemStatus
from robs.services.errors import ValidationFailed

CENT = Decimal("0.01")
ZERO = Decimal("0.00")
HUNDRED = Decimal("100")


def round2(value: Decimal) -> Decimal:
    """Round half-up to two decimal places"""
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def to_decimal(value: Any) -> Decimal:
    if value is None:
        return ZERO
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class PricingSettings:
    """Snapshot of the restaurant's tax configuration"""
    tax_rate: Decimal = ZERO
    tax_enabled: bool = False
    currency: str = "₹"

    @classmethod
    def from_settings(cls, settings_row) -> "PricingSettings":
        return cls(
            tax_rate=to_decimal(settings_row.tax_rate),
            tax_enabled=bool(settings_row.tax_enabled),
            currency=settings_row.currency,
        )


@dataclass(frozen=True)
class Discount:
    type: DiscountType
    value: Decimal

    @classmethod
    def of(cls, type_: Any, value: Any) -> Optional["Discount"]:
        """Build from stored/request fields; None when both are missing"""
        if type_ is None and value is None:
            return None
        if type_ is None or value is None:
            raise ValidationFailed(
                "Discount type and value must be given together",
                discount_type=type_,
                discount_value=value,
            )
        try:
            discount_type = DiscountType(type_)
        except ValueError:
            raise ValidationFailed(f"Unknown discount type '{type_}'", discount_type=type_)
        return cls(type=discount_type, value=to_decimal(value))


def validate_discount(discount: Optional[Discount]) -> None:
    """Reject out-of-range discounts before they reach the engine"""
    if discount is None:
        return
    if discount.type == DiscountType.PERCENTAGE:
        if discount.value < 0 or discount.value > HUNDRED:
            raise ValidationFailed(
                "Percentage discount must be between 0 and 100",
                discount_value=discount.value,
            )
    elif discount.value < 0:
        raise ValidationFailed(
            "Discount amount cannot be negative",
            discount_value=discount.value,
        )


def line_unit_price(base_price: Any, modifiers: Optional[Iterable[dict]]) -> Decimal:
    """Base price plus modifier prices, rounded to cents"""
    price = to_decimal(base_price)
    for modifier in modifiers or []:
        price += to_decimal(modifier.get("price"))
    return round2(price)


def compute_total(
    items: Iterable[Any],
    discount: Optional[Discount],
    settings: PricingSettings,
) -> Decimal:
    """Total for a set of order lines.

    ``items`` are objects exposing ``unit_price``, ``modifiers``,
    ``quantity`` and optionally ``status``; cancelled lines are not charged.
    """
    gross = ZERO
    for item in items:
        if getattr(item, "status", None) == ItemStatus.CANCELLED:
            continue
        gross += line_unit_price(item.unit_price, item.modifiers) * item.quantity

    after_discount = gross
    if discount is not None:
        if discount.type == DiscountType.PERCENTAGE:
            after_discount = gross * (1 - discount.value / HUNDRED)
        else:
            after_discount = max(ZERO, gross - discount.value)

    tax = ZERO
    if settings.tax_enabled:
        tax = after_discount * (settings.tax_rate / HUNDRED)

    return round2(after_discount + tax)


def order_discount(order) -> Optional[Discount]:
    return Discount.of(order.discount_type, order.discount_value)


def compute_order_total(order, settings: PricingSettings) -> Decimal:
    """Total for an order using its own lines and discount"""
    return compute_total(order.items, order_discount(order), settings)
