"""Logging helpers for the modchanges CLI."""

from __future__ import annotations

import logging
import os
import sys

LOGGER_NAMESPACE = "modchanges"
LOG_LEVEL_ENV = "MODCHANGES_LOG_LEVEL"


def _resolve_level() -> int:
    raw = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
    if raw:
        return getattr(logging, raw, logging.WARNING)
    return logging.WARNING


def configure_logging(*, verbose: bool = False, timing: bool = False) -> None:
    """Set the modchanges logger level from CLI flags.

    ``--verbose`` wins over the environment; ``--time-execution`` needs at
    least INFO so the timer lines get through.
    """
    level = logging.DEBUG if verbose else _resolve_level()
    if timing and level > logging.INFO:
        level = logging.INFO
    root = logging.getLogger(LOGGER_NAMESPACE)
    root.setLevel(level)
    for existing in list(root.handlers):
        root.removeHandler(existing)
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))
    root.addHandler(handler)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


__all__ = ["LOGGER_NAMESPACE", "configure_logging", "get_logger"]
