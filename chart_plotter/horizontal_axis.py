"""
horizontal_axis.py — Top / bottom axes: tick + label placement under scroll and zoom

Tick layout (all in canvas pixels):

    scroll_adjustment = floor(scroll / segment_width)
    label_center(0)   = left + segment_width / 2 - scroll + segment_width * scroll_adjustment
    tick_center(0)    = left - scroll + segment_width * scroll_adjustment   (MINOR)
                      = label_center(0)                                      (MAJOR)
    visible_cells     = ceil(width / segment_width) + 1
    tick count        = visible_cells + 1 (MINOR) | visible_cells (MAJOR)
    label value(0)    = min_x + scroll_adjustment * x_step

Every following tick / label is one segment_width further; every following
label value is one x_step further.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Tuple

from .axis import Axis, AxisPosition
from .components import VerticalPosition
from .config import settings
from .context import DrawContext, MeasureContext
from .errors import require
from .insets import Insets
from .utils import half, setup_logger

logger = setup_logger(__name__)


class TickType(Enum):
    MINOR = "minor"  # a tick at every cell boundary
    MAJOR = "major"  # a tick at every cell center


@dataclass(frozen=True)
class TickLayout:
    scroll_adjustment: int
    tick_centers: Tuple[float, ...]
    label_centers: Tuple[float, ...]
    label_values: Tuple[float, ...]


class HorizontalAxis(Axis):
    def __init__(self, position: AxisPosition, *, tick_type: TickType = TickType.MINOR, **options: Any):
        require(position.is_horizontal, f"HorizontalAxis cannot be placed at {position.name}.")
        super().__init__(position, **options)
        self.tick_type = tick_type

    # ========================================================================
    # LAYOUT (pure)
    # ========================================================================

    @staticmethod
    def compute_tick_layout(
        bounds_left: float,
        bounds_width: float,
        scroll: float,
        segment_width: float,
        tick_type: TickType,
        min_x: float,
        x_step: float,
        max_x: float,
    ) -> TickLayout:
        """Tick centers, label centers and label values for the visible part of the axis."""
        segment_width = max(segment_width, settings.MIN_SEGMENT_WIDTH_PX)
        scroll_adjustment = int(math.floor(scroll / segment_width))
        visible_cells = int(math.ceil(bounds_width / segment_width)) + 1
        tick_count = visible_cells + 1 if tick_type is TickType.MINOR else visible_cells

        label_start = bounds_left + half(segment_width) - scroll + segment_width * scroll_adjustment
        if tick_type is TickType.MINOR:
            tick_start = bounds_left - scroll + segment_width * scroll_adjustment
        else:
            tick_start = label_start

        tolerance = abs(x_step) * 1e-6
        label_centers = []
        label_values = []
        for index in range(visible_cells):
            value = min_x + (scroll_adjustment + index) * x_step
            if value > max_x + tolerance:
                break
            label_centers.append(label_start + segment_width * index)
            label_values.append(value)

        return TickLayout(
            scroll_adjustment=scroll_adjustment,
            tick_centers=tuple(tick_start + segment_width * i for i in range(tick_count)),
            label_centers=tuple(label_centers),
            label_values=tuple(label_values),
        )

    def _layout(self, context: DrawContext) -> TickLayout:
        ranges = self.ranges(context)
        return self.compute_tick_layout(
            self.bounds.left,
            self.bounds.width,
            context.horizontal_scroll,
            context.segment_properties.segment_width,
            self.tick_type,
            ranges.min_x,
            ranges.x_step,
            ranges.max_x,
        )

    def _push_clip(self, context: DrawContext) -> None:
        extra = half(self.tick_thickness(context)) if self.tick_type is TickType.MINOR else 0.0
        chart_bounds = context.chart_bounds
        context.rasterizer.push_clip(
            self.bounds.left - extra,
            min(self.bounds.top, chart_bounds.top),
            self.bounds.right + extra,
            max(self.bounds.bottom, chart_bounds.bottom),
        )

    # ========================================================================
    # INSETS
    # ========================================================================

    def get_desired_height(self, context: MeasureContext) -> float:
        return (
            (self.axis_thickness(context) if self.position.is_bottom else 0.0)
            + self.tick_length(context)
            + (self.label.get_height(context, rotation_degrees=self.label_rotation_degrees) if self.label is not None else 0.0)
        )

    def get_insets(self, context: MeasureContext, out_insets: Insets) -> None:
        out_insets.set_horizontal(half(self.tick_thickness(context)) if self.tick_type is TickType.MINOR else 0.0)
        height = self.get_desired_height(context)
        out_insets.set(
            top=height if self.position.is_top else 0.0,
            bottom=height if self.position.is_bottom else 0.0,
        )

    # ========================================================================
    # DRAWING
    # ========================================================================

    def draw_behind_chart(self, context: DrawContext) -> None:
        if self.guideline is None or context.segment_properties is None:
            return
        chart_bounds = context.chart_bounds
        layout = self._layout(context)

        self._push_clip(context)
        try:
            for center_x in layout.tick_centers:
                if self.guideline.fits_in_vertical(context, chart_bounds.top, chart_bounds.bottom, center_x, chart_bounds):
                    self.guideline.draw_vertical(context, chart_bounds.top, chart_bounds.bottom, center_x)
        finally:
            context.rasterizer.pop_clip()

    def draw_above_chart(self, context: DrawContext) -> None:
        chart_bounds = context.chart_bounds
        axis_thickness = self.axis_thickness(context)
        tick_length = self.tick_length(context)

        if context.segment_properties is not None:
            tick_top = self.bounds.top if self.position.is_bottom else self.bounds.bottom - tick_length
            tick_bottom = tick_top + axis_thickness + tick_length
            text_y = tick_bottom if self.position.is_bottom else tick_top
            text_position = VerticalPosition.BOTTOM if self.position.is_bottom else VerticalPosition.TOP
            layout = self._layout(context)
            ranges = self.ranges(context)
            segment_width = max(context.segment_properties.segment_width, settings.MIN_SEGMENT_WIDTH_PX)

            self._push_clip(context)
            try:
                if self.tick is not None:
                    for center_x in layout.tick_centers:
                        self.tick.draw_vertical(context, tick_top, tick_bottom, center_x)

                if self.label is not None:
                    for index, (center_x, value) in enumerate(zip(layout.label_centers, layout.label_values)):
                        text = self.format_value(value, index, ranges)
                        if text is None:
                            break
                        self.label.draw_text(
                            context,
                            text,
                            center_x,
                            text_y,
                            vertical_position=text_position,
                            rotation_degrees=self.label_rotation_degrees,
                            max_text_width=segment_width,
                        )
            finally:
                context.rasterizer.pop_clip()

        if self.axis_line is not None:
            base_y = self.bounds.top if self.position.is_bottom else self.bounds.bottom
            self.axis_line.draw_horizontal(context, chart_bounds.left, chart_bounds.right, base_y + half(axis_thickness))
