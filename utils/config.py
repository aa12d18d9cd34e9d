"""
Configuration loader: YAML + env overrides.
Every numeric heuristic of the repair layer and the extractors is policy, not a constant.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from core.exceptions import ConfigError
from core.models import AmountOptions


def _coerce_bool(s: Any) -> bool:
    if isinstance(s, bool):
        return s
    return (str(s).strip().lower() in ("1", "true", "yes")) if s else False


def _coerce_float(s: Any, key: str) -> float:
    try:
        return float(s)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key}: expected a number, got {s!r}") from e


def _coerce_int(s: Any, key: str) -> int:
    try:
        return int(s)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"{key}: expected an integer, got {s!r}") from e


def _coerce_range(s: Any, key: str) -> tuple[float, float]:
    if not isinstance(s, (list, tuple)) or len(s) != 2:
        raise ConfigError(f"{key}: expected [low, high], got {s!r}")
    low, high = _coerce_float(s[0], key), _coerce_float(s[1], key)
    if low >= high:
        raise ConfigError(f"{key}: low {low} must be below high {high}")
    return (low, high)


@dataclass(frozen=True)
class RepairPolicy:
    """Thresholds for the OCR amount repair and masking pass."""

    bare_amount_threshold: float = 10_000.0
    label_value_ceiling: float = 10_000_000.0
    plausible_min: float = 1.0
    plausible_max: float = 10_000.0
    confusable_digits: tuple[str, ...] = ("2", "3")
    misread_min: float = 50.0
    misread_max: float = 5_000.0
    misread_ratio: float = 3.0
    year_min: int = 1990
    year_max: int = 2039
    mask_token: str = "____"

    def amount_options(self, *, fix_misread: bool = True) -> AmountOptions:
        """AmountOptions carrying this policy's misread thresholds."""
        return AmountOptions(
            fix_misread=fix_misread,
            confusable_digits=self.confusable_digits,
            misread_min=self.misread_min,
            misread_max=self.misread_max,
            misread_ratio=self.misread_ratio,
            plausible_min=self.plausible_min,
            plausible_max=self.plausible_max,
        )


@dataclass(frozen=True)
class ExtractionConfig:
    """Extractor cascade settings and pipeline thresholds."""

    min_text_length: int = 10
    review_threshold: float = 0.75
    fix_misread_amounts: bool = True
    upi_fallback_range: tuple[float, float] = (50.0, 10_000.0)
    food_fallback_range: tuple[float, float] = (50.0, 10_000.0)
    quick_commerce_fallback_range: tuple[float, float] = (50.0, 50_000.0)
    year_like_min: int = 2020
    year_like_max: int = 2030
    header_scan_lines: int = 10
    restaurant_scan_lines: int = 15
    sms_amount_ceiling: float = 1_000_000.0


@dataclass(frozen=True)
class AppConfig:
    """Immutable application configuration. Built from YAML + env."""

    log_level: str = "INFO"
    max_workers: int = 1
    repair: RepairPolicy = field(default_factory=RepairPolicy)
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)

    def with_overrides(self, **overrides: Any) -> AppConfig:
        """Return new config with replaced keys. Nested sections accept a dict of their own keys."""
        updates: dict[str, Any] = {}
        for k, v in overrides.items():
            if v is None:
                continue
            if k == "repair" and isinstance(v, dict):
                updates[k] = _repair_from_dict({**_as_dict(self.repair), **v})
            elif k == "extraction" and isinstance(v, dict):
                updates[k] = _extraction_from_dict({**_as_dict(self.extraction), **v})
            elif k in ("log_level", "max_workers", "repair", "extraction"):
                updates[k] = v
        cfg = replace(self, **updates)
        _validate(cfg)
        return cfg


def _as_dict(section: Any) -> dict[str, Any]:
    return {f.name: getattr(section, f.name) for f in fields(section)}


def _repair_from_dict(data: dict[str, Any]) -> RepairPolicy:
    d = RepairPolicy()
    digits = data.get("confusable_digits", d.confusable_digits)
    if isinstance(digits, str):
        digits = tuple(digits)
    return RepairPolicy(
        bare_amount_threshold=_coerce_float(data.get("bare_amount_threshold", d.bare_amount_threshold), "repair.bare_amount_threshold"),
        label_value_ceiling=_coerce_float(data.get("label_value_ceiling", d.label_value_ceiling), "repair.label_value_ceiling"),
        plausible_min=_coerce_float(data.get("plausible_min", d.plausible_min), "repair.plausible_min"),
        plausible_max=_coerce_float(data.get("plausible_max", d.plausible_max), "repair.plausible_max"),
        confusable_digits=tuple(str(x) for x in digits),
        misread_min=_coerce_float(data.get("misread_min", d.misread_min), "repair.misread_min"),
        misread_max=_coerce_float(data.get("misread_max", d.misread_max), "repair.misread_max"),
        misread_ratio=_coerce_float(data.get("misread_ratio", d.misread_ratio), "repair.misread_ratio"),
        year_min=_coerce_int(data.get("year_min", d.year_min), "repair.year_min"),
        year_max=_coerce_int(data.get("year_max", d.year_max), "repair.year_max"),
        mask_token=str(data.get("mask_token", d.mask_token)),
    )


def _extraction_from_dict(data: dict[str, Any]) -> ExtractionConfig:
    d = ExtractionConfig()
    return ExtractionConfig(
        min_text_length=_coerce_int(data.get("min_text_length", d.min_text_length), "extraction.min_text_length"),
        review_threshold=_coerce_float(data.get("review_threshold", d.review_threshold), "extraction.review_threshold"),
        fix_misread_amounts=_coerce_bool(data.get("fix_misread_amounts", d.fix_misread_amounts)),
        upi_fallback_range=_coerce_range(data.get("upi_fallback_range", d.upi_fallback_range), "extraction.upi_fallback_range"),
        food_fallback_range=_coerce_range(data.get("food_fallback_range", d.food_fallback_range), "extraction.food_fallback_range"),
        quick_commerce_fallback_range=_coerce_range(
            data.get("quick_commerce_fallback_range", d.quick_commerce_fallback_range),
            "extraction.quick_commerce_fallback_range",
        ),
        year_like_min=_coerce_int(data.get("year_like_min", d.year_like_min), "extraction.year_like_min"),
        year_like_max=_coerce_int(data.get("year_like_max", d.year_like_max), "extraction.year_like_max"),
        header_scan_lines=_coerce_int(data.get("header_scan_lines", d.header_scan_lines), "extraction.header_scan_lines"),
        restaurant_scan_lines=_coerce_int(data.get("restaurant_scan_lines", d.restaurant_scan_lines), "extraction.restaurant_scan_lines"),
        sms_amount_ceiling=_coerce_float(data.get("sms_amount_ceiling", d.sms_amount_ceiling), "extraction.sms_amount_ceiling"),
    )


def _validate(cfg: AppConfig) -> None:
    r, e = cfg.repair, cfg.extraction
    if not 0.0 <= e.review_threshold <= 1.0:
        raise ConfigError(f"extraction.review_threshold must be in [0, 1], got {e.review_threshold}")
    if r.plausible_min >= r.plausible_max:
        raise ConfigError("repair.plausible_min must be below repair.plausible_max")
    if r.misread_min >= r.misread_max:
        raise ConfigError("repair.misread_min must be below repair.misread_max")
    if any(ch.isdigit() for ch in r.mask_token) or not r.mask_token:
        raise ConfigError("repair.mask_token must be non-empty and contain no digits")
    if not all(len(d) == 1 and d.isdigit() for d in r.confusable_digits):
        raise ConfigError("repair.confusable_digits must be single digits")
    if e.min_text_length < 0 or cfg.max_workers < 1:
        raise ConfigError("min_text_length must be >= 0 and max_workers >= 1")


def _load_yaml(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    return data if isinstance(data, dict) else {}


def _config_from_dict(data: dict[str, Any]) -> AppConfig:
    """Build AppConfig from nested dict. Env overrides applied in load_config."""
    cfg = AppConfig(
        log_level=str(data.get("log_level", "INFO")),
        max_workers=_coerce_int(data.get("max_workers", 1), "max_workers"),
        repair=_repair_from_dict(data.get("repair") or {}),
        extraction=_extraction_from_dict(data.get("extraction") or {}),
    )
    _validate(cfg)
    return cfg


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """
    Load config from YAML file, then apply env overrides (.env is read first).
    Env vars: LOG_LEVEL, EXPENSE_MAX_WORKERS, EXPENSE_REVIEW_THRESHOLD,
    EXPENSE_MIN_TEXT_LENGTH, EXPENSE_BARE_AMOUNT_THRESHOLD.
    """
    load_dotenv()
    path = Path(config_path) if config_path else Path("config.yaml")
    cfg = _config_from_dict(_load_yaml(path))
    overrides: dict[str, Any] = {}
    if os.getenv("LOG_LEVEL"):
        overrides["log_level"] = os.getenv("LOG_LEVEL")
    if os.getenv("EXPENSE_MAX_WORKERS"):
        overrides["max_workers"] = _coerce_int(os.getenv("EXPENSE_MAX_WORKERS"), "EXPENSE_MAX_WORKERS")
    extraction: dict[str, Any] = {}
    if os.getenv("EXPENSE_REVIEW_THRESHOLD"):
        extraction["review_threshold"] = os.getenv("EXPENSE_REVIEW_THRESHOLD")
    if os.getenv("EXPENSE_MIN_TEXT_LENGTH"):
        extraction["min_text_length"] = os.getenv("EXPENSE_MIN_TEXT_LENGTH")
    if extraction:
        overrides["extraction"] = extraction
    if os.getenv("EXPENSE_BARE_AMOUNT_THRESHOLD"):
        overrides["repair"] = {"bare_amount_threshold": os.getenv("EXPENSE_BARE_AMOUNT_THRESHOLD")}
    if not overrides:
        return cfg
    return cfg.with_overrides(**overrides)
