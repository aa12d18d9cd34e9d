"""Logging setup for the CLI and services; library modules only call logging.getLogger(__name__)."""

from __future__ import annotations

import logging
import sys
from typing import Any

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def get_logger(name: str) -> logging.Logger:
    """Return a logger for the given module/component. No side effects."""
    return logging.getLogger(name)


def setup_logging(
    level: str = "INFO",
    format_string: str | None = None,
    stream: Any = None,
) -> None:
    """
    Configure root logger once. Logs go to stderr so JSON records on stdout stay clean.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=format_string or DEFAULT_FORMAT,
        datefmt="%Y-%m-%dT%H:%M:%S",
        stream=stream or sys.stderr,
        force=True,
    )


def log_structured(logger: logging.Logger, level: int, msg: str, **fields: Any) -> None:
    """Emit msg with key=value fields appended; the fields are also attached as record extras."""
    if fields:
        rendered = " ".join(f"{k}={v}" for k, v in sorted(fields.items()))
        msg = f"{msg} {rendered}"
    logger.log(level, msg, extra=fields)
