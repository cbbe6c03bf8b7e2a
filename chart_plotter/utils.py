"""
utils.py — Shared helpers for the chart_plotter package

This file contains small, reusable utilities used across the package:
- logging setup (setup_logger)
- color cycle lookup
- cyclic list access + numeric clamping

It intentionally does NOT contain:
- any geometry (geometry_common.py)
- any drawing (components.py / rasterizer.py)

Keep it “boring + stable”.
"""

import logging
from typing import Any, Sequence, TypeVar

from .config import settings

T = TypeVar("T")


# ============================================================================
# LOGGING
# ============================================================================

def setup_logger(name: str, level_str: str = settings.LOG_LEVEL) -> logging.Logger:
    """
    Sets up a module logger with a console stream handler.
    Propagation stays ON so host applications can capture chart logs at the root.
    """
    log_level = getattr(logging, level_str.upper(), logging.INFO)
    formatter = logging.Formatter('%(asctime)s - %(levelname)5s | %(name)s | %(message)s')

    logger = logging.getLogger(name)
    logger.setLevel(log_level)

    # Avoid duplicate console handlers on repeated imports
    if not any(isinstance(h, logging.StreamHandler) for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(formatter)
        handler.setLevel(log_level)
        logger.addHandler(handler)

    logger.propagate = True
    return logger


# ============================================================================
# COLOR
# ============================================================================

def get_color_cycle(index: int) -> str:
    """
    Get a color from the default series color cycle.
    Deterministic: driven by the series / slice index, not by hashing.
    """
    colors = settings.SERIES_COLORS
    return colors[index % len(colors)]


# ============================================================================
# SEQUENCES / NUMBERS
# ============================================================================

def get_repeating(items: Sequence[T], index: int) -> T:
    """Cyclic lookup: items[index % len(items)]. Raises IndexError on an empty sequence."""
    if not items:
        raise IndexError("get_repeating() on an empty sequence")
    return items[index % len(items)]


def get_or_none(items: Sequence[T], index: int) -> Any:
    if 0 <= index < len(items):
        return items[index]
    return None


def clamp(value: float, minimum: float, maximum: float) -> float:
    return max(minimum, min(value, maximum))


def half(value: float) -> float:
    return value / 2.0
