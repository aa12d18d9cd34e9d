"""
Unit tests for the text normalizer.
Tests: currency unification, whitespace/newline cleanup, guarded character fixes, idempotence.
"""
from __future__ import annotations

import pytest

from extraction.normalize import normalize, split_lines


# ---------------------------------------------------------------------------
# Currency
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("Rs. 500", "₹500"),
        ("Rs 500", "₹500"),
        ("rs.500", "₹500"),
        ("INR 2,664.00", "₹2,664.00"),
        ("₨ 120", "₹120"),
        ("₹ 99", "₹99"),
    ],
)
def test_currency_markers_collapse_to_glyph(raw: str, expected: str) -> None:
    assert normalize(raw) == expected


def test_currency_abbreviation_inside_words_untouched() -> None:
    assert normalize("Orders 5 hours") == "Orders 5 hours"
    assert normalize("Mainroad") == "Mainroad"


# ---------------------------------------------------------------------------
# Whitespace
# ---------------------------------------------------------------------------


def test_crlf_and_spaces() -> None:
    assert normalize("Total\r\n  ₹ 50\rPaid") == "Total\n₹50\nPaid"
    assert normalize("Bill   Total\t ₹100") == "Bill Total ₹100"


def test_blank_input() -> None:
    assert normalize("") == ""
    assert normalize("   \n  ") == ""


def test_split_lines_drops_blanks() -> None:
    assert split_lines("a\n\n  b \n") == ["a", "b"]


# ---------------------------------------------------------------------------
# Character fixes
# ---------------------------------------------------------------------------


def test_bar_next_to_letters_becomes_i() -> None:
    assert normalize("P|ZZA HUT") == "PIZZA HUT"


def test_bar_run_converted_as_a_whole() -> None:
    assert normalize("I||") == "III"
    assert normalize("Swiggy||") == "SwiggyII"
    assert normalize("7|| a") == "7|| a"


def test_bar_next_to_digits_kept() -> None:
    assert normalize("1|2") == "1|2"
    assert normalize("a | 5") == "a | 5"


def test_letter_o_in_numeric_token_becomes_zero() -> None:
    assert normalize("₹5OO") == "₹500"
    assert normalize("Total 1O.5O") == "Total 10.50"


def test_letter_o_in_words_untouched() -> None:
    assert normalize("BOOK 2 COOL") == "BOOK 2 COOL"
    assert normalize("Order 7") == "Order 7"


# ---------------------------------------------------------------------------
# Idempotence
# ---------------------------------------------------------------------------


@pytest.mark.parametrize(
    "raw",
    [
        "Paid Rs. 664.70\r\nSwiggy",
        "  Total   ₨ 1,2OO  ",
        "P|ZZA | 1|2",
        "INR2664.00 spent",
        "Rs5OO",
        "₹ ₹ 50",
        "",
        "Google Pay\nPaid to Vi Prepaid\n₹299\nCompleted\n11 Jan 2026",
        "Swiggy||",
        "I||",
        "||x|| 5||",
    ],
)
def test_normalize_is_idempotent(raw: str) -> None:
    once = normalize(raw)
    assert normalize(once) == once
