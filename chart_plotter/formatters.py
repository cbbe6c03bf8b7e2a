"""
formatters.py — Value formatters for axis and pie labels

Axis formatters are plain callables:  (value, index, ranges) -> str
Pie formatters are plain callables:   (index, value, model)  -> str

Any function with the matching signature can be plugged in; the classes here
are the built-in ones.
"""

from __future__ import annotations

from typing import Callable, Optional

from .models import ChartRanges, PieModel

AxisValueFormatter = Callable[[float, int, ChartRanges], str]
PieValueFormatter = Callable[[int, float, PieModel], str]


def _format_decimal(value: float, max_decimals: int) -> str:
    text = f"{value:.{max_decimals}f}"
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text in {"-0", ""}:
        text = "0"
    return text


class DecimalFormatter:
    """Formats values with at most `max_decimals` decimals, trailing zeros dropped."""

    def __init__(self, max_decimals: int = 2, prefix: str = "", suffix: str = ""):
        if max_decimals < 0:
            raise ValueError("max_decimals cannot be negative")
        self.max_decimals = max_decimals
        self.prefix = prefix
        self.suffix = suffix

    def __call__(self, value: float, index: int, ranges: ChartRanges) -> str:
        return f"{self.prefix}{_format_decimal(value, self.max_decimals)}{self.suffix}"


class PercentageFormatter:
    """
    Formats a value as its percentage of the y range (min_y -> 0%, max_y -> 100%).
    A zero-length range raises ZeroDivisionError; axes turn that into an empty label set.
    """

    def __init__(self, max_decimals: int = 0):
        self.max_decimals = max_decimals

    def __call__(self, value: float, index: int, ranges: ChartRanges) -> str:
        percentage = (value - ranges.min_y) / ranges.y_length * 100.0
        return f"{_format_decimal(percentage, self.max_decimals)}%"


def default_axis_formatter() -> AxisValueFormatter:
    return DecimalFormatter()


def default_pie_value_formatter(index: int, value: float, model: PieModel) -> str:
    """Uses the entry's own label when it has one, the formatted value otherwise."""
    entry: Optional[object] = model.entry_or_none(index)
    label = getattr(entry, "label", None)
    if label:
        return str(label)
    return _format_decimal(value, 2)
