"""
Unit tests for the bank SMS extractor.
Tests: bank-specific layouts (ICICI, Federal, HDFC), generic fallback, balance ceiling, merchant cleanup.
"""
from __future__ import annotations

from datetime import datetime, timezone

import pytest

from core.schema import Category, UNKNOWN_MERCHANT
from extractors.bank_sms import (
    BankSmsExtractor,
    clean_merchant,
    detect_bank,
    extract_sms_amount,
    infer_category,
)

UTC = timezone.utc


@pytest.fixture
def extractor(clock) -> BankSmsExtractor:
    return BankSmsExtractor(clock=clock)


# ---------------------------------------------------------------------------
# Bank layouts
# ---------------------------------------------------------------------------


def test_icici_card_spend(extractor: BankSmsExtractor, icici_sms: str) -> None:
    expense = extractor.extract(icici_sms)
    assert expense is not None
    assert expense.amount == 2664.0
    assert expense.source == "ICICI Bank"
    assert expense.merchant == "Amazon"
    assert expense.category == Category.SHOPPING
    assert expense.date == datetime(2026, 1, 11, tzinfo=UTC)
    assert expense.confidence == 0.85
    assert expense.raw_text == icici_sms


def test_federal_card_spend(extractor: BankSmsExtractor) -> None:
    sms = "Federal Bank: INR 1,250.00 spent on your credit card ending with 1234 at SWIGGY on 13-01-2026."
    expense = extractor.extract(sms)
    assert expense is not None
    assert expense.amount == 1250.0
    assert expense.source == "Federal Bank"
    assert expense.merchant == "Swiggy"
    assert expense.category == Category.FOOD
    assert expense.date == datetime(2026, 1, 13, tzinfo=UTC)


def test_hdfc_upi_debit_without_year(extractor: BankSmsExtractor, fixed_now: datetime) -> None:
    sms = "Txn Rs.499.00 On HDFC Bank Card 5678 At ZOMATO by UPI 123456789012 On 07-09"
    expense = extractor.extract(sms)
    assert expense is not None
    assert expense.amount == 499.0
    assert expense.source == "HDFC Bank"
    assert expense.merchant == "Zomato"
    assert expense.date == datetime(fixed_now.year, 9, 7, tzinfo=UTC)


def test_generic_layout(extractor: BankSmsExtractor) -> None:
    sms = "Rs 350 debited from A/c XX1234 on 12-01-26 to VPA uber@ybl. Not you? Call 18002586161"
    expense = extractor.extract(sms)
    assert expense is not None
    assert expense.amount == 350.0
    assert expense.source == "Bank SMS"
    assert expense.merchant == "Uber"
    assert expense.category == Category.TRANSPORT
    assert expense.date == datetime(2026, 1, 12, tzinfo=UTC)


def test_no_date_falls_back_to_clock(extractor: BankSmsExtractor, fixed_now: datetime) -> None:
    expense = extractor.extract("Rs 120 debited at CHAI POINT. Avl bal Rs 900")
    assert expense is not None
    assert expense.date == fixed_now
    assert expense.merchant == "Chai Point"


def test_no_amount(extractor: BankSmsExtractor) -> None:
    assert extractor.extract("Your OTP is 123456 do not share") is None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def test_balance_figures_above_ceiling_skipped() -> None:
    assert extract_sms_amount("Avl Bal INR 12,50,000.00 after Rs 1,999 spent") == 1999.0
    assert extract_sms_amount("Avl Bal INR 12,50,000.00") is None


def test_amount_ceiling_configurable() -> None:
    assert extract_sms_amount("INR 5,000 spent", ceiling=1_000.0) is None


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("at AMAZON PAY IN 12345678901", "Amazon"),
        ("to paytm@upi", "Paytm"),
        ("BLUE TOKAI ROASTERS", "Blue Tokai Roasters"),
        (None, UNKNOWN_MERCHANT),
        ("  ", UNKNOWN_MERCHANT),
        ("1234567890", UNKNOWN_MERCHANT),
    ],
)
def test_clean_merchant(raw: str | None, expected: str) -> None:
    assert clean_merchant(raw) == expected


@pytest.mark.parametrize(
    "text, expected",
    [
        ("Dear SBI customer", "SBI"),
        ("Kotak: Rs 100 sent", "Kotak Bank"),
        ("A/c debited", "Bank SMS"),
    ],
)
def test_detect_bank(text: str, expected: str) -> None:
    assert detect_bank(text) == expected


def test_infer_category_defaults_to_miscellaneous() -> None:
    assert infer_category("Apollo Pharmacy") == Category.HEALTH
    assert infer_category("Blue Tokai Roasters") == Category.MISCELLANEOUS
