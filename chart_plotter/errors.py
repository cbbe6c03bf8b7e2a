"""
errors.py — Exceptions raised by chart_plotter

Configuration errors are programmer errors: they are raised before any draw
primitive of the failing pass is emitted and are never swallowed internally.
"""

from typing import Any


class ChartConfigurationError(ValueError):
    """Invalid chart / axis / component configuration."""


class UnknownAxisPositionError(ChartConfigurationError):
    def __init__(self, position: Any):
        super().__init__(f"Unknown axis position: {position!r}")
        self.position = position


def require(condition: bool, message: str) -> None:
    """Raise ChartConfigurationError(message) unless condition holds."""
    if not condition:
        raise ChartConfigurationError(message)
