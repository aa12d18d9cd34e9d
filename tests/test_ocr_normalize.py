"""
Unit tests for OCR amount repair and non-amount masking.
Tests: decimal reinsertion after labels, ₹ misread as letters or digits, standalone runs,
masking of years / IDs / phones / PINs, and that repaired amounts survive masking.
"""
from __future__ import annotations

import pytest

from utils.config import RepairPolicy
from utils.ocr_normalize import mask_non_amounts, normalize_ocr, repair_amounts


# ---------------------------------------------------------------------------
# Label-adjacent integers
# ---------------------------------------------------------------------------


def test_lost_decimal_after_label() -> None:
    """'total amount 61200' is ₹612.00 with the decimal point dropped."""
    assert repair_amounts("total amount 61200") == "total amount ₹612.00"


def test_leading_glyph_and_lost_decimal_after_label() -> None:
    assert repair_amounts("grand total 2166470") == "grand total ₹1664.70"


def test_labelled_value_with_paise_untouched() -> None:
    assert repair_amounts("Total 61200.50") == "Total 61200.50"


def test_label_repair_respects_threshold() -> None:
    policy = RepairPolicy(bare_amount_threshold=100_000)
    assert repair_amounts("total amount 61200", policy) == "total amount 61200"


# ---------------------------------------------------------------------------
# ₹ read as a letter or a digit
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "line, expected",
    [
        ("Total R664.70", "Total ₹664.70"),
        ("Paid F 299", "Paid ₹299"),
        ("Bill I450", "Bill ₹450"),
    ],
)
def test_letter_glyph_on_amount_line(line: str, expected: str) -> None:
    assert repair_amounts(line) == expected


def test_letter_glyph_ignored_without_amount_context() -> None:
    assert repair_amounts("Flat R302 Tower") == "Flat R302 Tower"


def test_letter_glyph_needs_plausible_value() -> None:
    assert repair_amounts("Total R 50000") == "Total R 50000"


@pytest.mark.parametrize(
    "line, expected",
    [
        ("Total 2500", "Total ₹500.00"),
        ("Bill 3250", "Bill ₹250.00"),
    ],
)
def test_digit_glyph_on_amount_line(line: str, expected: str) -> None:
    assert repair_amounts(line) == expected


def test_non_confusable_leading_digit_untouched() -> None:
    assert repair_amounts("Total 4500") == "Total 4500"


def test_year_on_amount_line_untouched() -> None:
    assert repair_amounts("Paid on 2024") == "Paid on 2024"


def test_standalone_run_repaired() -> None:
    """A line holding only '366470' is ₹664.70 with glyph and decimal both misread."""
    assert repair_amounts("Swiggy\n366470") == "Swiggy\n₹664.70"


def test_repair_blank_text() -> None:
    assert repair_amounts("") == ""
    assert repair_amounts("   ") == "   "


# ---------------------------------------------------------------------------
# Masking
# ---------------------------------------------------------------------------


def test_mask_year_and_long_id() -> None:
    assert mask_non_amounts("born in 1990, order id 9988776655") == "born in ____, order id ____"


def test_mask_phone_number() -> None:
    assert mask_non_amounts("Call 98765 43210") == "Call ____"


def test_mask_pin_only_on_address_lines() -> None:
    assert mask_non_amounts("Koramangala, Bengaluru 560034") == "Koramangala, Bengaluru ____"
    assert mask_non_amounts("Order 560034") == "Order 560034"


def test_year_inside_date_kept() -> None:
    assert mask_non_amounts("11 Jan 2026") == "11 Jan 2026"


def test_amounts_after_glyph_never_masked() -> None:
    text = "Paid ₹2025\nTotal ₹1999.00"
    assert mask_non_amounts(text) == text


def test_custom_mask_token() -> None:
    policy = RepairPolicy(mask_token="<num>")
    assert mask_non_amounts("id 12345678901", policy) == "id <num>"


def test_default_mask_token_has_no_digits() -> None:
    assert not any(ch.isdigit() for ch in RepairPolicy().mask_token)


# ---------------------------------------------------------------------------
# Full pass
# ---------------------------------------------------------------------------


def test_repair_runs_before_masking() -> None:
    assert normalize_ocr("total amount 61200\nborn 1990") == "total amount ₹612.00\nborn ____"


def test_normalize_ocr_keeps_clean_receipt() -> None:
    text = "Paid ₹664.70\nSwiggy\nBill Total ₹664.70\nDelivered"
    assert normalize_ocr(text) == text
