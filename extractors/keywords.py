"""
Keyword tables for source detection, bank detection, merchant canonicalization and category
inference. Every table is an ordered tuple of (keywords, value) rows: first row with a hit wins,
so overlapping keywords ("amazon pay" vs "amazon") are resolved by row order.
Keywords of three characters or fewer match whole words only (see extraction.text.keyword_in).
"""
from __future__ import annotations

from core.schema import Category

KeywordTable = tuple[tuple[tuple[str, ...], str], ...]

# ---------------------------------------------------------------------------
# UPI receipts
# ---------------------------------------------------------------------------

UPI_SOURCES: KeywordTable = (
    (("google pay", "gpay", "g pay", "google transaction id"), "GPay"),
    (("phonepe",), "PhonePe"),
    (("paytm",), "Paytm"),
    (("bhim",), "BHIM"),
    (("amazon pay",), "Amazon Pay"),
)
UPI_DEFAULT_SOURCE = "UPI"

# (category, merchant keywords, full-text keywords)
UPI_CATEGORY_RULES: tuple[tuple[Category, tuple[str, ...], tuple[str, ...]], ...] = (
    (Category.UTILITIES, ("vi", "vi prepaid", "jio", "airtel", "bsnl"), ("recharge", "prepaid")),
    (Category.SUBSCRIPTIONS, ("apple", "netflix", "spotify", "amazon prime", "youtube"), ("subscription",)),
    (Category.FOOD, ("hotel", "restaurant", "cafe", "food", "kitchen", "biryani", "pizza", "burger"), ()),
    (Category.SHOPPING, ("mart", "store", "shop", "mall", "retail"), ()),
    (Category.TRANSPORT, ("uber", "ola", "rapido", "metro", "petrol", "fuel"), ()),
)

# ---------------------------------------------------------------------------
# Food delivery
# ---------------------------------------------------------------------------

FOOD_SOURCES: KeywordTable = (
    (("zomato",), "Zomato"),
    (("swiggy",), "Swiggy"),
)
FOOD_DEFAULT_SOURCE = "Food Delivery"

RESTAURANT_SUFFIXES = ("dhaba", "hotel", "kitchen", "cafe", "restaurant", "biryani", "foods")

# ---------------------------------------------------------------------------
# Bank SMS
# ---------------------------------------------------------------------------

BANKS: KeywordTable = (
    (("icici",), "ICICI Bank"),
    (("hdfc",), "HDFC Bank"),
    (("federal bank",), "Federal Bank"),
    (("sbi", "state bank"), "SBI"),
    (("axis",), "Axis Bank"),
    (("kotak",), "Kotak Bank"),
    (("idfc",), "IDFC Bank"),
    (("yes bank",), "Yes Bank"),
    (("indusind",), "IndusInd Bank"),
    (("bob", "bank of baroda"), "Bank of Baroda"),
    (("pnb", "punjab national"), "PNB"),
    (("canara",), "Canara Bank"),
    (("union bank",), "Union Bank"),
    (("rbl",), "RBL Bank"),
)
BANK_DEFAULT_SOURCE = "Bank SMS"

MERCHANT_ALIASES: KeywordTable = (
    (("amazon pay",), "Amazon"),
    (("swiggy",), "Swiggy"),
    (("zomato",), "Zomato"),
    (("paytm",), "Paytm"),
    (("phonepe",), "PhonePe"),
    (("gpay", "google pay"), "Google Pay"),
    (("flipkart",), "Flipkart"),
    (("myntra",), "Myntra"),
    (("uber",), "Uber"),
    (("ola",), "Ola"),
    (("bigbasket",), "BigBasket"),
    (("blinkit",), "Blinkit"),
    (("zepto",), "Zepto"),
)

BANK_CATEGORY_RULES: KeywordTable = (
    (("swiggy", "zomato", "dominos", "pizza", "mcdonald", "kfc", "starbucks", "cafe"), Category.FOOD.value),
    (("bigbasket", "blinkit", "zepto", "instamart", "grofers", "jiomart", "dmart"), Category.GROCERIES.value),
    (("amazon", "flipkart", "myntra", "ajio", "nykaa", "meesho"), Category.SHOPPING.value),
    (("uber", "ola", "rapido", "metro", "irctc", "redbus"), Category.TRANSPORT.value),
    (("electricity", "water", "gas", "bill", "recharge", "airtel", "jio", "vi", "bsnl"), Category.UTILITIES.value),
    (("netflix", "prime", "hotstar", "spotify", "youtube", "bookmyshow", "pvr", "inox"), Category.ENTERTAINMENT.value),
    (("pharma", "medical", "hospital", "clinic", "apollo", "1mg", "netmeds", "practo"), Category.HEALTH.value),
)
