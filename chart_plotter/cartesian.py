"""
cartesian.py — Column + line charts (per-entity geometry under scroll and zoom)

This file contains ONLY:
- SegmentProperties (cell width + margin = one x step on screen)
- CartesianChart: shared x / y mapping, ranges, scroll extent, drawing model
- ColumnChart (grouped columns) and LineChart (polyline + optional points)

Mapping used by both charts (all pixels):
    scale        = segment_width / unscaled segment width
    x_index      = (x - min_x) / x_step
    cell_left    = bounds.left + x_index * segment_width - scroll
    y_px(value)  = bounds.bottom - (value - min_y) / y_length * bounds.height
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

import numpy as np
from matplotlib.path import Path

from .axis import AxisPosition
from .chart import Chart
from .components import LineComponent, ShapeComponent
from .config import settings
from .context import DrawContext, MeasureContext
from .drawing_model import CartesianDrawingModel, CartesianInfo, DrawingModelInterpolator
from .errors import require
from .geometry_common import Bounds
from .insets import Insets
from .models import ChartModel, ChartRanges, MutableChartRanges
from .utils import get_color_cycle, get_repeating, half, setup_logger

logger = setup_logger(__name__)


@dataclass(frozen=True)
class SegmentProperties:
    cell_width: float
    margin_width: float

    @property
    def segment_width(self) -> float:
        return self.cell_width + self.margin_width

    def scaled(self, factor: float) -> "SegmentProperties":
        return SegmentProperties(self.cell_width * factor, self.margin_width * factor)


# ============================================================================
# BASE
# ============================================================================

class CartesianChart(Chart):
    def __init__(
        self,
        target_vertical_axis_position: Optional[AxisPosition] = None,
        drawing_model_interpolator: Optional[DrawingModelInterpolator] = None,
    ):
        super().__init__(drawing_model_interpolator)
        self.target_vertical_axis_position = target_vertical_axis_position

    # --- segments -----------------------------------------------------------

    def get_unscaled_segment_properties(self, context: MeasureContext, model: ChartModel) -> SegmentProperties:
        raise NotImplementedError

    def get_segment_properties(self, context: MeasureContext, model: ChartModel) -> SegmentProperties:
        """
        Zoomed segment when horizontal scroll is enabled; otherwise the segment
        is stretched / squeezed so that every x cell fits the plot width.
        """
        base = self.get_unscaled_segment_properties(context, model)
        if base.segment_width <= 0:
            return SegmentProperties(cell_width=settings.MIN_SEGMENT_WIDTH_PX, margin_width=0.0)
        if context.is_horizontal_scroll_enabled:
            factor = context.zoom
        else:
            content = max(model.x_count, 1) * base.segment_width
            factor = self.bounds.width / content if content > 0 else 1.0
        segment = base.scaled(factor)
        if segment.segment_width < settings.MIN_SEGMENT_WIDTH_PX:
            logger.debug(f"Segment width {segment.segment_width:.4f}px clamped to {settings.MIN_SEGMENT_WIDTH_PX}px")
            segment = base.scaled(settings.MIN_SEGMENT_WIDTH_PX / base.segment_width)
        return segment

    def get_content_width(self, context: MeasureContext, model: ChartModel) -> float:
        if not context.is_horizontal_scroll_enabled:
            return self.bounds.width
        return max(model.x_count, 1) * self.get_segment_properties(context, model).segment_width

    # --- mapping ------------------------------------------------------------

    def _ranges(self, context: MeasureContext) -> ChartRanges:
        return context.chart_ranges.for_axis(self.target_vertical_axis_position)

    def _y_to_px(self, value: float, ranges: ChartRanges) -> float:
        y_length = max(ranges.y_length, settings.MIN_RANGE_LENGTH)
        return self.bounds.bottom - (value - ranges.min_y) / y_length * self.bounds.height

    def _cell_left(self, context: DrawContext, x: float, ranges: ChartRanges) -> float:
        x_index = (x - ranges.min_x) / ranges.x_step
        return self.bounds.left + x_index * context.segment_properties.segment_width - context.horizontal_scroll

    def _value_and_opacity(
        self,
        drawing_model: Optional[CartesianDrawingModel],
        series_index: int,
        x: float,
        y: float,
    ) -> Tuple[float, float]:
        info = drawing_model.info(series_index, x) if drawing_model is not None else None
        if info is None:
            return y, 1.0
        return info.y, info.opacity

    # --- animation ----------------------------------------------------------

    def to_drawing_model(self, model: ChartModel, old) -> CartesianDrawingModel:
        return CartesianDrawingModel(
            series=tuple({entry.x: CartesianInfo(y=entry.y) for entry in series} for series in model.series)
        )


# ============================================================================
# COLUMNS
# ============================================================================

class ColumnChart(CartesianChart):
    """Grouped columns: one column per series at every x, side by side."""

    def __init__(
        self,
        columns: Optional[Sequence[LineComponent]] = None,
        spacing_dp: float = settings.COLUMN_OUTSIDE_SPACING_DP,
        inner_spacing_dp: float = settings.COLUMN_INSIDE_SPACING_DP,
        **options: Any,
    ):
        super().__init__(**options)
        self.columns = list(columns) if columns is not None else [
            LineComponent(color=get_color_cycle(i), thickness_dp=settings.COLUMN_WIDTH_DP) for i in range(3)
        ]
        require(len(self.columns) > 0, "Columns cannot be empty.")
        require(spacing_dp >= 0 and inner_spacing_dp >= 0, "Column spacing cannot be negative.")
        self.spacing_dp = float(spacing_dp)
        self.inner_spacing_dp = float(inner_spacing_dp)

    def _series_count(self, model: ChartModel) -> int:
        return max(len(model.series), 1)

    def get_unscaled_segment_properties(self, context: MeasureContext, model: ChartModel) -> SegmentProperties:
        count = self._series_count(model)
        cell = sum(get_repeating(self.columns, i).thickness(context) for i in range(count))
        cell += context.pixels(self.inner_spacing_dp) * (count - 1)
        return SegmentProperties(cell_width=cell, margin_width=context.pixels(self.spacing_dp))

    def update_ranges(self, ranges: MutableChartRanges, model: ChartModel) -> None:
        if model.is_empty:
            return
        ranges.try_update(
            min_x=model.min_x,
            max_x=model.max_x,
            min_y=min(model.min_y, 0.0),
            max_y=max(model.max_y, 0.0),
            x_step=model.x_step,
            axis_position=self.target_vertical_axis_position,
        )

    def get_column_rects(self, context: DrawContext, model: ChartModel) -> List[Tuple[int, float, Bounds, float]]:
        """(series index, x, column rect, opacity) for every column intersecting the plot bounds."""
        ranges = self._ranges(context)
        segment = context.segment_properties
        base = self.get_unscaled_segment_properties(context, model)
        scale = segment.segment_width / base.segment_width if base.segment_width > 0 else 1.0
        zero_y = self._y_to_px(0.0, ranges)
        drawing_model = self.get_drawing_model(model)

        rects = []
        for series_index, series in enumerate(model.series):
            offset = half(segment.margin_width)
            for previous in range(series_index):
                offset += (get_repeating(self.columns, previous).thickness(context) + context.pixels(self.inner_spacing_dp)) * scale
            thickness = get_repeating(self.columns, series_index).thickness(context) * scale

            for entry in series:
                value, opacity = self._value_and_opacity(drawing_model, series_index, entry.x, entry.y)
                left = self._cell_left(context, entry.x, ranges) + offset
                right = left + thickness
                if right < self.bounds.left or left > self.bounds.right:
                    continue
                value_y = self._y_to_px(value, ranges)
                rects.append((series_index, entry.x, Bounds(left, min(value_y, zero_y), right, max(value_y, zero_y)), opacity))
        return rects

    def draw(self, context: DrawContext, model: ChartModel) -> None:
        rasterizer = context.rasterizer
        rasterizer.push_clip(*self.bounds.as_tuple())
        try:
            for series_index, _x, rect, opacity in self.get_column_rects(context, model):
                get_repeating(self.columns, series_index).draw(context, *rect.as_tuple(), alpha=opacity)
        finally:
            rasterizer.pop_clip()


# ============================================================================
# LINES
# ============================================================================

@dataclass
class LineSpec:
    """Appearance of one line series."""

    color: str
    thickness_dp: float = settings.LINE_THICKNESS_DP
    point: Optional[ShapeComponent] = None
    point_size_dp: float = settings.POINT_SIZE_DP


class LineChart(CartesianChart):
    def __init__(
        self,
        lines: Optional[Sequence[LineSpec]] = None,
        spacing_dp: float = settings.POINT_SPACING_DP,
        **options: Any,
    ):
        super().__init__(**options)
        self.lines = list(lines) if lines is not None else [LineSpec(color=get_color_cycle(0))]
        require(len(self.lines) > 0, "Lines cannot be empty.")
        require(spacing_dp >= 0, "Point spacing cannot be negative.")
        self.spacing_dp = float(spacing_dp)

    def _max_point_size(self, context: MeasureContext) -> float:
        return max(
            context.pixels(line.point_size_dp) if line.point is not None else context.pixels(line.thickness_dp)
            for line in self.lines
        )

    def get_unscaled_segment_properties(self, context: MeasureContext, model: ChartModel) -> SegmentProperties:
        return SegmentProperties(cell_width=self._max_point_size(context), margin_width=context.pixels(self.spacing_dp))

    def get_insets(self, context: MeasureContext, out_insets: Insets) -> None:
        out_insets.set_vertical(half(self._max_point_size(context)))

    def update_ranges(self, ranges: MutableChartRanges, model: ChartModel) -> None:
        if model.is_empty:
            return
        ranges.try_update(
            min_x=model.min_x,
            max_x=model.max_x,
            min_y=model.min_y,
            max_y=model.max_y,
            x_step=model.x_step,
            axis_position=self.target_vertical_axis_position,
        )

    def get_line_points(self, context: DrawContext, model: ChartModel) -> List[np.ndarray]:
        """Per series, an (n, 3) array of (x px, y px, opacity) at every entry."""
        ranges = self._ranges(context)
        half_segment = half(context.segment_properties.segment_width)
        drawing_model = self.get_drawing_model(model)

        result = []
        for series_index, series in enumerate(model.series):
            rows = []
            for entry in series:
                value, opacity = self._value_and_opacity(drawing_model, series_index, entry.x, entry.y)
                rows.append((self._cell_left(context, entry.x, ranges) + half_segment, self._y_to_px(value, ranges), opacity))
            result.append(np.array(rows, dtype=float).reshape(-1, 3))
        return result

    def draw(self, context: DrawContext, model: ChartModel) -> None:
        rasterizer = context.rasterizer
        rasterizer.push_clip(*self.bounds.as_tuple())
        try:
            for series_index, points in enumerate(self.get_line_points(context, model)):
                if len(points) == 0:
                    continue
                line = get_repeating(self.lines, series_index)
                alpha = float(points[:, 2].max())
                if len(points) > 1:
                    codes = [Path.MOVETO] + [Path.LINETO] * (len(points) - 1)
                    rasterizer.draw_path(
                        Path(points[:, :2], codes),
                        color=line.color,
                        alpha=alpha,
                        fill=False,
                        thickness=context.pixels(line.thickness_dp),
                    )
                if line.point is None:
                    continue
                half_point = half(context.pixels(line.point_size_dp))
                for x, y, opacity in points:
                    if self.bounds.left - half_point <= x <= self.bounds.right + half_point:
                        line.point.draw_point(context, x, y, half_point, alpha=opacity)
        finally:
            rasterizer.pop_clip()