"""Type-specific extractors: UPI, food delivery, quick commerce, bank SMS."""

from extractors.bank_sms import BankSmsExtractor
from extractors.base import RECEIPT_STRATEGIES, ReceiptExtractor, find_amount, receipt_options
from extractors.food_delivery import FoodDeliveryExtractor
from extractors.quick_commerce import QuickCommerceExtractor
from extractors.upi import UpiExtractor

__all__ = [
    "BankSmsExtractor",
    "RECEIPT_STRATEGIES",
    "ReceiptExtractor",
    "find_amount",
    "receipt_options",
    "FoodDeliveryExtractor",
    "QuickCommerceExtractor",
    "UpiExtractor",
]
