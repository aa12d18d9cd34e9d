"""
Unit tests for the food-delivery and quick-commerce extractors.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.schema import Category, FOOD_ORDER_MERCHANT
from extraction.normalize import normalize, split_lines
from extractors import food_delivery, quick_commerce
from extractors.base import amount_in_range, receipt_options
from extractors.food_delivery import FoodDeliveryExtractor, extract_restaurant
from extractors.quick_commerce import QuickCommerceExtractor


def _run(extractor, raw: str):
    text = normalize(raw)
    return extractor.extract(text, split_lines(text))


@pytest.fixture
def food(clock) -> FoodDeliveryExtractor:
    return FoodDeliveryExtractor(clock=clock)


@pytest.fixture
def grocery(clock) -> QuickCommerceExtractor:
    return QuickCommerceExtractor(clock=clock)


# ---------------------------------------------------------------------------
# Food delivery
# ---------------------------------------------------------------------------


def test_swiggy_receipt(food: FoodDeliveryExtractor, swiggy_receipt: str, fixed_now: datetime) -> None:
    expense = _run(food, swiggy_receipt)
    assert expense is not None
    assert expense.amount == pytest.approx(664.70)
    assert expense.category == Category.FOOD
    assert expense.source == "Swiggy"
    assert expense.merchant == FOOD_ORDER_MERCHANT
    assert expense.confidence == 0.85
    assert expense.date == fixed_now


def test_zomato_receipt_with_restaurant_header(food: FoodDeliveryExtractor) -> None:
    raw = (
        "Zomato\nMeghana Foods\nOrder #1234567\n1 x Chicken Biryani ₹350\n"
        "Item Total ₹350\nDelivery Fee ₹40\nTaxes ₹18\nGrand Total ₹408\nDelivered"
    )
    expense = _run(food, raw)
    assert expense is not None
    assert expense.amount == 408.0
    assert expense.merchant == "Meghana Foods"
    assert expense.source == "Zomato"


@pytest.mark.parametrize("heading", ["your order", "order summary", "bill summary", "reorder"])
def test_food_app_heading_not_taken_as_restaurant(heading: str) -> None:
    lines = ["zomato", heading, "behrouz biryani", "grand total ₹525"]
    assert extract_restaurant("\n".join(lines), lines) == "Behrouz Biryani"


def test_zomato_your_order_screen(food: FoodDeliveryExtractor) -> None:
    expense = _run(food, "Zomato\nYour Order\nBehrouz Biryani\n1 x Dum Biryani ₹480\nGrand Total ₹525")
    assert expense is not None
    assert expense.amount == 525.0
    assert expense.merchant == "Behrouz Biryani"


def test_restaurant_from_context() -> None:
    lines = ["swiggy", "₹520 from paradise", "bill total ₹520", "delivered"]
    assert extract_restaurant("\n".join(lines), lines) == "Paradise"


def test_restaurant_from_business_suffix() -> None:
    lines = ["zomato", "order #998877 - nandhini hotel", "bill total ₹300"]
    assert extract_restaurant("\n".join(lines), lines) == "Nandhini Hotel"


def test_default_source_and_merchant(food: FoodDeliveryExtractor) -> None:
    expense = _run(food, "Order Details\nItem Total ₹200\nBill Total ₹250")
    assert expense is not None
    assert expense.amount == 250.0
    assert expense.source == "Food Delivery"
    assert expense.merchant == FOOD_ORDER_MERCHANT


def test_food_without_amount(food: FoodDeliveryExtractor) -> None:
    assert _run(food, "Swiggy\nDelivered") is None


# ---------------------------------------------------------------------------
# Quick commerce
# ---------------------------------------------------------------------------


def test_instamart_receipt(grocery: QuickCommerceExtractor) -> None:
    raw = "Instamart\nItem Bill ₹480\nHandling Fee ₹5\nGrand Total ₹485\n11 Jan 2026"
    expense = _run(grocery, raw)
    assert expense is not None
    assert expense.amount == 485.0
    assert expense.merchant == "Swiggy Instamart"
    assert expense.category == Category.GROCERIES
    assert expense.source == "Instamart"
    assert expense.confidence == 0.9
    assert expense.date == datetime(2026, 1, 11, tzinfo=timezone.utc)


def test_quick_commerce_range_is_wider_than_food() -> None:
    text = "₹20 ₹25000 ₹60000"
    qc = receipt_options(quick_commerce.LABELS, quick_commerce.NOISE_KEYWORDS, (50.0, 50_000.0))
    fd = receipt_options(food_delivery.LABELS, food_delivery.NOISE_KEYWORDS, (50.0, 10_000.0))
    assert amount_in_range(text, [], qc) == 25000.0
    assert amount_in_range(text, [], fd) is None
