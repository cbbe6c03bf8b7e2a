"""
axis.py — Axis base class, positions, size constraints + factory

This file contains ONLY:
- AxisPosition (START / END / TOP / BOTTOM)
- SizeConstraint variants for vertical axis width
- Axis: shared state + helpers of every axis (bounds, restricted areas, thicknesses)
- create_axis(position, **options) and the start/end/top/bottom shortcuts

It intentionally does NOT contain:
- label count / label placement (vertical_axis.py, horizontal_axis.py)
- the layout coordinator (layout.py)
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, List, Optional

from .components import LineComponent, TextComponent
from .config import settings
from .context import MeasureContext
from .errors import UnknownAxisPositionError
from .formatters import AxisValueFormatter, default_axis_formatter
from .geometry_common import Bounds
from .insets import Insets
from .models import ChartRanges
from .utils import setup_logger

logger = setup_logger(__name__)


class AxisPosition(Enum):
    START = "start"
    END = "end"
    TOP = "top"
    BOTTOM = "bottom"

    @property
    def is_vertical(self) -> bool:
        return self in (AxisPosition.START, AxisPosition.END)

    @property
    def is_horizontal(self) -> bool:
        return not self.is_vertical

    @property
    def is_start(self) -> bool:
        return self is AxisPosition.START

    @property
    def is_end(self) -> bool:
        return self is AxisPosition.END

    @property
    def is_top(self) -> bool:
        return self is AxisPosition.TOP

    @property
    def is_bottom(self) -> bool:
        return self is AxisPosition.BOTTOM

    def is_left(self, is_ltr: bool) -> bool:
        """True if a vertical axis at this position sits on the left edge."""
        return self.is_start == is_ltr


# ============================================================================
# SIZE CONSTRAINTS (vertical axis width)
# ============================================================================

class SizeConstraint:
    @dataclass(frozen=True)
    class Auto:
        """Widest label + half axis thickness + tick length, clamped to [min_dp, max_dp]."""

        min_dp: float = 0.0
        max_dp: float = math.inf

    @dataclass(frozen=True)
    class Exact:
        dp: float

    @dataclass(frozen=True)
    class Fraction:
        """Fraction of the canvas width."""

        fraction: float

        def __post_init__(self) -> None:
            if not 0.0 <= self.fraction <= 0.5:
                raise ValueError(f"Expected a fraction in [0, 0.5], got {self.fraction}")

    @dataclass(frozen=True)
    class TextWidth:
        """As wide as `text` rendered by the axis label."""

        text: str


# ============================================================================
# BASE
# ============================================================================

class Axis:
    """
    Shared behaviour of vertical and horizontal axes.

    Geometry flow per pass (driven by layout.VirtualLayout + AxisManager):
      get_insets / get_horizontal_insets  ->  set_bounds  ->  set_restricted_bounds
      ->  draw_behind_chart  ->  (chart)  ->  draw_above_chart
    """

    def __init__(
        self,
        position: AxisPosition,
        *,
        label: Optional[TextComponent] = None,
        axis_line: Optional[LineComponent] = None,
        tick: Optional[LineComponent] = None,
        guideline: Optional[LineComponent] = None,
        tick_length_dp: float = settings.AXIS_TICK_LENGTH_DP,
        value_formatter: Optional[AxisValueFormatter] = None,
        size_constraint: Any = None,
        label_rotation_degrees: float = 0.0,
    ):
        self.position = position
        self.label = label
        self.axis_line = axis_line
        self.tick = tick
        self.guideline = guideline
        self.tick_length_dp = float(tick_length_dp)
        self.value_formatter: AxisValueFormatter = value_formatter or default_axis_formatter()
        self.size_constraint = size_constraint if size_constraint is not None else SizeConstraint.Auto()
        self.label_rotation_degrees = float(label_rotation_degrees)

        self.bounds = Bounds()
        self.restricted_bounds: List[Bounds] = []

    def __repr__(self) -> str:
        return f"{type(self).__name__}(position={self.position.name})"

    # --- bounds -------------------------------------------------------------

    def set_bounds(self, left: float, top: float, right: float, bottom: float) -> None:
        self.bounds.set(left, top, right, bottom)

    def set_restricted_bounds(self, *bounds: Optional[Bounds]) -> None:
        self.restricted_bounds = [b for b in bounds if b is not None]

    def is_not_in_restricted_bounds(self, left: float, top: float, right: float, bottom: float) -> bool:
        return not any(b.intersects(left, top, right, bottom) for b in self.restricted_bounds)

    # --- sizes --------------------------------------------------------------

    def axis_thickness(self, context: MeasureContext) -> float:
        return self.axis_line.thickness(context) if self.axis_line is not None else 0.0

    def tick_thickness(self, context: MeasureContext) -> float:
        return self.tick.thickness(context) if self.tick is not None else 0.0

    def guideline_thickness(self, context: MeasureContext) -> float:
        return self.guideline.thickness(context) if self.guideline is not None else 0.0

    def tick_length(self, context: MeasureContext) -> float:
        return context.pixels(self.tick_length_dp) if self.tick is not None else 0.0

    def ranges(self, context: MeasureContext) -> ChartRanges:
        return context.chart_ranges.for_axis(self.position)

    def format_value(self, value: float, index: int, ranges: ChartRanges) -> Optional[str]:
        """Formatted label, or None if the formatter cannot handle the range (e.g. zero length)."""
        try:
            return self.value_formatter(value, index, ranges)
        except ArithmeticError as e:
            logger.debug(f"{self}: formatter failed for {value!r}: {e}")
            return None

    # --- contract -----------------------------------------------------------

    def get_insets(self, context: MeasureContext, out_insets: Insets) -> None:
        """Room this axis needs around the plot area, given nothing but its own configuration."""
        raise NotImplementedError

    def get_horizontal_insets(self, context: MeasureContext, available_height: float, out_insets: Insets) -> None:
        """Left/right room, once the available plot height is known."""

    def draw_behind_chart(self, context) -> None:
        raise NotImplementedError

    def draw_above_chart(self, context) -> None:
        raise NotImplementedError


# ============================================================================
# FACTORY
# ============================================================================

def _default_label() -> TextComponent:
    return TextComponent()


def _default_axis_line() -> LineComponent:
    return LineComponent(color=settings.AXIS_LINE_COLOR, thickness_dp=settings.AXIS_LINE_WIDTH_DP)


def _default_tick() -> LineComponent:
    return LineComponent(color=settings.AXIS_LINE_COLOR, thickness_dp=settings.AXIS_LINE_WIDTH_DP)


def _default_guideline() -> LineComponent:
    return LineComponent(color=settings.AXIS_GUIDELINE_COLOR, thickness_dp=settings.AXIS_GUIDELINE_WIDTH_DP)


_COMPONENT_DEFAULTS = {
    "label": _default_label,
    "axis_line": _default_axis_line,
    "tick": _default_tick,
    "guideline": _default_guideline,
}


def create_axis(position: Any, **options: Any) -> Axis:
    """
    Build an axis for `position` (an AxisPosition or its name, e.g. "start").

    Components not passed in options get fresh default instances; pass
    `label=None` (etc.) explicitly to disable one.
    """
    from .horizontal_axis import HorizontalAxis
    from .vertical_axis import VerticalAxis

    if isinstance(position, str):
        try:
            position = AxisPosition[position.upper()]
        except KeyError:
            logger.error(f"Unknown axis position: {position!r}")
            raise UnknownAxisPositionError(position) from None
    if not isinstance(position, AxisPosition):
        logger.error(f"Unknown axis position: {position!r}")
        raise UnknownAxisPositionError(position)

    for name, factory in _COMPONENT_DEFAULTS.items():
        if name not in options:
            options[name] = factory()

    if position.is_vertical:
        return VerticalAxis(position, **options)
    return HorizontalAxis(position, **options)


def start_axis(**options: Any) -> Axis:
    return create_axis(AxisPosition.START, **options)


def end_axis(**options: Any) -> Axis:
    return create_axis(AxisPosition.END, **options)


def top_axis(**options: Any) -> Axis:
    return create_axis(AxisPosition.TOP, **options)


def bottom_axis(**options: Any) -> Axis:
    return create_axis(AxisPosition.BOTTOM, **options)
