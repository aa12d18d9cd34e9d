"""Shared utilities: config, logger, OCR amount repair."""

from utils.config import AppConfig, ExtractionConfig, RepairPolicy, load_config
from utils.logger import get_logger, log_structured, setup_logging
from utils.ocr_normalize import mask_non_amounts, normalize_ocr, repair_amounts

__all__ = [
    "AppConfig",
    "ExtractionConfig",
    "RepairPolicy",
    "load_config",
    "get_logger",
    "log_structured",
    "setup_logging",
    "mask_non_amounts",
    "normalize_ocr",
    "repair_amounts",
]
