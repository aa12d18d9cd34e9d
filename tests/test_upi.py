"""
Unit tests for the UPI receipt extractor.
Tests: full extraction, rejected transactions, payee heuristics, category and source tables, confidence.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.schema import Category, UNKNOWN_MERCHANT
from extraction.normalize import normalize, split_lines
from extractors.upi import (
    UpiExtractor,
    compute_confidence,
    detect_source,
    extract_merchant,
    infer_category,
    is_rejected,
)


def _run(extractor: UpiExtractor, raw: str):
    text = normalize(raw)
    return extractor.extract(text, split_lines(text))


@pytest.fixture
def extractor(clock) -> UpiExtractor:
    return UpiExtractor(clock=clock)


# ---------------------------------------------------------------------------
# Full extraction
# ---------------------------------------------------------------------------


def test_gpay_recharge_receipt(extractor: UpiExtractor, gpay_receipt: str) -> None:
    expense = _run(extractor, gpay_receipt)
    assert expense is not None
    assert expense.amount == 299.0
    assert expense.merchant == "Vi Prepaid"
    assert expense.category == Category.UTILITIES
    assert expense.source == "GPay"
    assert expense.date == datetime(2026, 1, 11, tzinfo=timezone.utc)
    assert expense.confidence == pytest.approx(1.0)


def test_missing_date_falls_back_to_clock(extractor: UpiExtractor, fixed_now: datetime) -> None:
    expense = _run(extractor, "PhonePe\nPaid to Ramesh Kumar\n₹200\nSuccessful")
    assert expense is not None
    assert expense.date == fixed_now
    assert expense.source == "PhonePe"
    assert expense.merchant == "Ramesh Kumar"
    assert expense.confidence == pytest.approx(0.85)


def test_handle_payee_gives_unknown_merchant(extractor: UpiExtractor) -> None:
    expense = _run(extractor, "to: abc@okaxis\n₹150\ncompleted")
    assert expense is not None
    assert expense.amount == 150.0
    assert expense.merchant == UNKNOWN_MERCHANT
    assert expense.category == Category.MISCELLANEOUS
    assert expense.source == "UPI"
    assert expense.confidence == pytest.approx(0.6)


def test_no_amount_returns_none(extractor: UpiExtractor) -> None:
    assert _run(extractor, "Google Pay\nPaid to Ramesh\nCompleted") is None


# ---------------------------------------------------------------------------
# Rejected transactions
# ---------------------------------------------------------------------------


@pytest.mark.parametrize("raw", ["failed ₹500", "Payment pending\n₹500", "Payment FAILED ₹250"])
def test_failed_or_pending_rejected(extractor: UpiExtractor, raw: str) -> None:
    assert _run(extractor, raw) is None


def test_completed_overrides_failed_wording(extractor: UpiExtractor) -> None:
    expense = _run(extractor, "failed attempt earlier\ncompleted\n₹500")
    assert expense is not None
    assert expense.amount == 500.0


def test_is_rejected() -> None:
    assert is_rejected("Payment pending")
    assert not is_rejected("pending earlier, now completed")
    assert not is_rejected("paid to ramesh")


# ---------------------------------------------------------------------------
# Merchant, category, source
# ---------------------------------------------------------------------------


def test_header_line_as_payee() -> None:
    lines = ["google pay", "sharma stores", "₹350", "completed"]
    assert extract_merchant("\n".join(lines), lines) == "Sharma Stores"


@pytest.mark.parametrize("app", ["phonepe", "paytm", "bhim", "amazon pay", "gpay"])
def test_payment_app_title_not_taken_as_payee(app: str) -> None:
    lines = [app, "paid to", "sharma kirana store", "₹450", "transaction successful"]
    assert extract_merchant("\n".join(lines), lines) == "Sharma Kirana Store"


def test_app_name_inside_payee_word_kept() -> None:
    lines = ["phonepe", "abhimanyu stores", "₹120"]
    assert extract_merchant("\n".join(lines), lines) == "Abhimanyu Stores"


def test_phonepe_receipt(extractor: UpiExtractor) -> None:
    expense = _run(extractor, "PhonePe\nPaid to\nSharma Kirana Store\n₹450\nTransaction Successful")
    assert expense is not None
    assert expense.amount == 450.0
    assert expense.merchant == "Sharma Kirana Store"
    assert expense.category == Category.SHOPPING
    assert expense.source == "PhonePe"
    assert expense.confidence == pytest.approx(0.85)


@pytest.mark.parametrize(
    "merchant, text, expected",
    [
        ("D Mart Store", "", Category.SHOPPING),
        ("Ola Cabs", "", Category.TRANSPORT),
        ("Netflix", "", Category.SUBSCRIPTIONS),
        ("Ramesh Kumar", "mobile recharge", Category.UTILITIES),
        ("Coca Cola Kiosk", "", Category.MISCELLANEOUS),
        ("Paradise Biryani", "", Category.FOOD),
    ],
)
def test_infer_category(merchant: str, text: str, expected: Category) -> None:
    assert infer_category(merchant, text) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("gpay\n₹10", "GPay"),
        ("paytm wallet", "Paytm"),
        ("bhim upi", "BHIM"),
        ("amazon pay upi", "Amazon Pay"),
        ("paid to ravi\n₹200\ngoogle transaction id\ncicagd12", "GPay"),
        ("upi ref 1234", "UPI"),
    ],
)
def test_detect_source(text: str, expected: str) -> None:
    assert detect_source(text) == expected


def test_compute_confidence() -> None:
    assert compute_confidence(100.0, UNKNOWN_MERCHANT, False) == pytest.approx(0.6)
    assert compute_confidence(100.0, "Shop", False) == pytest.approx(0.85)
    assert compute_confidence(100.0, "Shop", True) == 1.0
