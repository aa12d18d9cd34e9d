"""
Expense extraction from OCR receipt text and bank SMS: command-line entry point.

Usage:
  python main.py [FILE ...] [--sms] [--config PATH] [--workers N] [--output PATH] [--log-level LEVEL]

- Each FILE holds one OCR transcript (or one bank SMS with --sms). With no FILE, stdin is read as one text.
- Output: a JSON list with one entry per input: the parsed expense (or null), its sha256 content hash
  and whether it needs manual review. Written to --output, or stdout.
- Logs go to stderr.
"""
from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from core.exceptions import ConfigError
from core.models import ScanResult
from pipeline.expense_pipeline import ExpensePipeline
from services.expense_service import ExpenseService
from utils.config import load_config
from utils.logger import setup_logging


def _read_inputs(paths: list[str]) -> list[tuple[str, str]]:
    """(label, text) per input; stdin when no paths are given."""
    if not paths:
        return [("<stdin>", sys.stdin.read())]
    inputs: list[tuple[str, str]] = []
    for p in paths:
        with open(p, encoding="utf-8") as f:
            inputs.append((p, f.read()))
    return inputs


def _to_record(label: str, result: ScanResult) -> dict[str, Any]:
    return {
        "input": label,
        "content_hash": result.content_hash,
        "needs_review": result.needs_review,
        "expense": result.expense.model_dump(mode="json") if result.expense else None,
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        description="Extract structured expenses from OCR receipt text or bank SMS",
    )
    parser.add_argument("files", nargs="*", help="Text files, one transcript each (default: stdin)")
    parser.add_argument("--sms", action="store_true", help="Inputs are bank SMS messages")
    parser.add_argument("--config", "-c", default=None, help="YAML config path (default: config.yaml)")
    parser.add_argument("--workers", "-w", type=int, default=None, help="Parallel workers (default: config)")
    parser.add_argument("--output", "-o", default=None, help="Write JSON here instead of stdout")
    parser.add_argument(
        "--log-level",
        default=None,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    args = parser.parse_args(argv)

    try:
        config = load_config(args.config)
        if args.log_level or args.workers is not None:
            config = config.with_overrides(log_level=args.log_level, max_workers=args.workers)
    except ConfigError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    setup_logging(config.log_level)
    log = logging.getLogger(__name__)

    try:
        inputs = _read_inputs(args.files)
    except OSError as e:
        log.error("Failed to read input: %s", e)
        return 1

    with ExpenseService(ExpensePipeline(config)) as service:
        results, metrics = service.scan_batch(
            [text for _, text in inputs],
            sms=args.sms,
            max_workers=config.max_workers,
        )

    records = [_to_record(label, r) for (label, _), r in zip(inputs, results)]
    out = json.dumps(records, indent=2, ensure_ascii=False)
    if args.output:
        Path(args.output).write_text(out + "\n", encoding="utf-8")
        log.info("Wrote %d records to %s", len(records), args.output)
    else:
        print(out)
    log.info("Batch metrics: %s", metrics.to_dict())
    return 0 if metrics.parsed_count else 1


if __name__ == "__main__":
    sys.exit(main())
