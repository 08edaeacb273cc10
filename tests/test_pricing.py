"""Pricing engine tests"""

from decimal import Decimal
from types import SimpleNamespace

import pytest

from robs.models.order import DiscountType, ItemStatus
from robs.services.errors import ValidationFailed
from robs.services.pricing import (
    Discount,
    PricingSettings,
    compute_total,
    line_unit_price,
    validate_discount,
)

NO_TAX = PricingSettings(tax_rate=Decimal("5.00"), tax_enabled=False)
TAX_5 = PricingSettings(tax_rate=Decimal("5.00"), tax_enabled=True)


def line(price, quantity=1, modifiers=None, status=ItemStatus.PENDING):
    return SimpleNamespace(
        unit_price=Decimal(price),
        quantity=quantity,
        modifiers=modifiers or [],
        status=status,
    )


def test_percentage_discount_then_tax():
    discount = Discount(DiscountType.PERCENTAGE, Decimal("10"))
    assert compute_total([line("100.00")], discount, TAX_5) == Decimal("94.50")


def test_no_items_is_zero():
    assert compute_total([], None, TAX_5) == Decimal("0.00")


def test_tax_disabled_ignores_rate():
    assert compute_total([line("50.00")], None, NO_TAX) == Decimal("50.00")


def test_amount_discount_floors_at_zero():
    discount = Discount(DiscountType.AMOUNT, Decimal("500"))
    assert compute_total([line("120.00")], discount, TAX_5) == Decimal("0.00")


def test_amount_discount_before_tax():
    discount = Discount(DiscountType.AMOUNT, Decimal("20"))
    # (100 - 20) * 1.05
    assert compute_total([line("100.00")], discount, TAX_5) == Decimal("84.00")


def test_modifiers_added_to_unit_price():
    modifiers = [{"name": "Extra cheese", "price": "20.00"}, {"name": "Spicy", "price": 0}]
    assert compute_total([line("50.00", quantity=2, modifiers=modifiers)], None, NO_TAX) == Decimal("140.00")


def test_unit_price_rounded_before_quantity():
    # 10.005 rounds to 10.01 per unit, so three units are 30.03 rather than 30.02
    modifiers = [{"name": "Half shot", "price": "0.005"}]
    assert line_unit_price(Decimal("10.00"), modifiers) == Decimal("10.01")
    assert compute_total([line("10.00", quantity=3, modifiers=modifiers)], None, NO_TAX) == Decimal("30.03")


def test_cancelled_lines_not_charged():
    items = [line("50.00"), line("20.00", status=ItemStatus.CANCELLED)]
    assert compute_total(items, None, NO_TAX) == Decimal("50.00")


def test_total_rounds_half_up():
    # 33.33 * 1.05 = 34.9965
    assert compute_total([line("33.33")], None, TAX_5) == Decimal("35.00")


def test_discount_of_missing_fields():
    assert Discount.of(None, None) is None
    assert Discount.of("amount", "15.5") == Discount(DiscountType.AMOUNT, Decimal("15.5"))


@pytest.mark.parametrize("type_, value", [("percentage", None), (None, 10)])
def test_discount_of_half_given_rejected(type_, value):
    with pytest.raises(ValidationFailed):
        Discount.of(type_, value)


def test_discount_of_unknown_type():
    with pytest.raises(ValidationFailed):
        Discount.of("bogo", 10)


@pytest.mark.parametrize(
    "discount",
    [
        Discount(DiscountType.PERCENTAGE, Decimal("150")),
        Discount(DiscountType.PERCENTAGE, Decimal("-1")),
        Discount(DiscountType.AMOUNT, Decimal("-5")),
    ],
)
def test_validate_discount_rejects_out_of_range(discount):
    with pytest.raises(ValidationFailed):
        validate_discount(discount)


def test_validate_discount_accepts_bounds():
    validate_discount(None)
    validate_discount(Discount(DiscountType.PERCENTAGE, Decimal("0")))
    validate_discount(Discount(DiscountType.PERCENTAGE, Decimal("100")))
    validate_discount(Discount(DiscountType.AMOUNT, Decimal("0")))
