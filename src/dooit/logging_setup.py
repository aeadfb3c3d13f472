# src/dooit/logging_setup.py

from __future__ import annotations

import logging
import sys


def setup_logging(*, level: int | str = logging.WARNING) -> None:
    """
    Configure logging with a single stderr handler.

    stdout is reserved for command output, so diagnostics never mix
    with listed tasks.

    Call this ONCE, very early (before first logger.info).
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.WARNING)

    root = logging.getLogger()
    root.setLevel(level)

    # Remove any pre-existing handlers to avoid duplicates.
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(
        fmt="%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    ch = logging.StreamHandler(sys.stderr)
    ch.setLevel(level)
    ch.setFormatter(fmt)
    root.addHandler(ch)

    # Route warnings.warn(...) into logging as 'py.warnings'
    logging.captureWarnings(True)
