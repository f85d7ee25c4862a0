"""
logging.py

Responsibility: the `rpm_builder` logger hierarchy.

Modules ask for `get_logger("<module>")`; the CLI calls `configure_logging`
once per `main()` run to decide how chatty that hierarchy is.
"""

from __future__ import annotations

import logging
import sys
from typing import TextIO

ROOT_LOGGER = "rpm_builder"
LOG_FORMAT = "[rpm-builder] %(levelname)s %(message)s"


def get_logger(module: str | None = None) -> logging.Logger:
    if module is None:
        return logging.getLogger(ROOT_LOGGER)
    return logging.getLogger(f"{ROOT_LOGGER}.{module}")


def configure_logging(*, verbose: bool = False, stream: TextIO | None = None) -> logging.Logger:
    """
    Send `rpm_builder` records to `stream` (stderr by default).

    INFO and above normally; DEBUG too when `verbose`. Calling this again
    replaces the previous handler instead of stacking a second one, and the
    records never reach the root logger.
    """
    level = logging.DEBUG if verbose else logging.INFO
    root = logging.getLogger(ROOT_LOGGER)

    for old in root.handlers[:]:
        root.removeHandler(old)
        old.close()

    handler = logging.StreamHandler(stream if stream is not None else sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(level)

    root.addHandler(handler)
    root.setLevel(level)
    root.propagate = False
    return root


__all__ = ["LOG_FORMAT", "ROOT_LOGGER", "configure_logging", "get_logger"]
