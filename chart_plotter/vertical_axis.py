"""
vertical_axis.py — Start / end axes: label count, width negotiation, drawing

This file contains ONLY:
- VerticalAxis (insets, label count reduction, label cache, draw passes)
- HorizontalLabelPosition / VerticalLabelPosition

`count` labels (count - 1 intervals) are spread evenly over the axis' y range:
    value(i) = min_y + (max_y - min_y) / (count - 1) * i      for i in 0..count - 1
A single label sits at min_y.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, List, Optional

from .axis import Axis, AxisPosition, SizeConstraint
from .components import HorizontalPosition, VerticalPosition
from .config import settings
from .context import DrawContext, MeasureContext
from .errors import require
from .insets import Insets
from .models import ChartRanges
from .utils import clamp, half, setup_logger

logger = setup_logger(__name__)

LABELS_KEY = "labels"


class HorizontalLabelPosition(Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"


class VerticalLabelPosition(Enum):
    CENTER = VerticalPosition.CENTER
    TOP = VerticalPosition.TOP
    BOTTOM = VerticalPosition.BOTTOM

    @property
    def text_position(self) -> VerticalPosition:
        return self.value


def _intervals(label_count: int) -> int:
    # One label has no interval; it still needs a non-zero divisor.
    return max(label_count - 1, 1)


class VerticalAxis(Axis):
    def __init__(
        self,
        position: AxisPosition,
        *,
        max_label_count: int = settings.DEF_LABEL_COUNT,
        label_spacing_dp: float = settings.DEF_LABEL_SPACING_DP,
        horizontal_label_position: HorizontalLabelPosition = HorizontalLabelPosition.OUTSIDE,
        vertical_label_position: VerticalLabelPosition = VerticalLabelPosition.CENTER,
        **options: Any,
    ):
        require(position.is_vertical, f"VerticalAxis cannot be placed at {position.name}.")
        require(max_label_count >= 0, "max_label_count cannot be negative.")
        super().__init__(position, **options)
        self.max_label_count = int(max_label_count)
        self.label_spacing_dp = float(label_spacing_dp)
        self.horizontal_label_position = horizontal_label_position
        self.vertical_label_position = vertical_label_position

    # ========================================================================
    # HELPERS
    # ========================================================================

    @property
    def _labels_outside_at_start_or_inside_at_end(self) -> bool:
        outside = self.horizontal_label_position is HorizontalLabelPosition.OUTSIDE
        return (outside and self.position.is_start) or (not outside and self.position.is_end)

    @property
    def _text_horizontal_position(self) -> HorizontalPosition:
        return HorizontalPosition.START if self._labels_outside_at_start_or_inside_at_end else HorizontalPosition.END

    def get_draw_label_count(self, context: MeasureContext, available_height: float) -> int:
        """
        Number of labels drawn this pass: the largest count (<= max_label_count)
        whose stacked label heights fit available_height. Label height is
        estimated as the tallest of the min / mid / max labels.
        """
        if self.label is None:
            return self.max_label_count

        ranges = self.ranges(context)
        samples = (ranges.min_y, (ranges.max_y + ranges.min_y) / 2.0, ranges.max_y)
        avg_height = max(
            self.label.get_height(
                context,
                self.format_value(value, index, ranges) or "",
                rotation_degrees=self.label_rotation_degrees,
            )
            for index, value in enumerate(samples)
        )

        result = 0.0
        for count in range(self.max_label_count):
            if result + avg_height > available_height:
                return count
            result += avg_height
        return self.max_label_count

    def get_labels(self, context: MeasureContext, label_count: int) -> List[str]:
        """
        Formatted strings for `label_count` evenly spaced values, min_y first.
        Cached per position until the chart ranges change.
        """
        key = (LABELS_KEY, self.position)
        cached = context.get_extra(key)
        if cached is not None and cached[0] == label_count:
            return cached[1]

        labels: List[str] = []
        if label_count > 0:
            ranges = self.ranges(context)
            step = (ranges.max_y - ranges.min_y) / _intervals(label_count)
            for index in range(label_count):
                text = self.format_value(ranges.min_y + step * index, index, ranges)
                if text is None:
                    labels = []
                    break
                labels.append(text)

        context.put_extra(key, (label_count, labels))
        return labels

    def _max_label_width(self, context: MeasureContext, labels: List[str]) -> float:
        if self.horizontal_label_position is HorizontalLabelPosition.INSIDE or self.label is None or not labels:
            return 0.0
        return max(self.label.get_width(context, text, rotation_degrees=self.label_rotation_degrees) for text in labels)

    def get_desired_width(self, context: MeasureContext, labels: List[str]) -> float:
        constraint = self.size_constraint
        axis_half = half(self.axis_thickness(context))
        tick_length = self.tick_length(context)

        if isinstance(constraint, SizeConstraint.Auto):
            return clamp(
                self._max_label_width(context, labels) + axis_half + tick_length,
                context.pixels(constraint.min_dp),
                context.pixels(constraint.max_dp),
            )
        if isinstance(constraint, SizeConstraint.Exact):
            return context.pixels(constraint.dp)
        if isinstance(constraint, SizeConstraint.Fraction):
            return context.canvas_bounds.width * constraint.fraction
        if isinstance(constraint, SizeConstraint.TextWidth):
            text_width = (
                self.label.get_width(context, constraint.text, rotation_degrees=self.label_rotation_degrees)
                if self.label is not None
                else 0.0
            )
            return text_width + tick_length + axis_half
        raise TypeError(f"Unsupported size constraint: {constraint!r}")

    def _tick_left_x(self, context: MeasureContext) -> float:
        on_left = self.position.is_left(context.is_ltr)
        base = self.bounds.right if on_left else self.bounds.left
        outside = self.horizontal_label_position is HorizontalLabelPosition.OUTSIDE
        if on_left == outside:
            return base - half(self.axis_thickness(context)) - self.tick_length(context)
        return base

    # ========================================================================
    # INSETS
    # ========================================================================

    def get_insets(self, context: MeasureContext, out_insets: Insets) -> None:
        label_height = self.label.get_height(context) if self.label is not None else 0.0
        line_thickness = max(self.axis_thickness(context), self.tick_thickness(context))

        if self.vertical_label_position is VerticalLabelPosition.CENTER:
            out_insets.set(top=half(label_height) - line_thickness, bottom=half(label_height))
        elif self.vertical_label_position is VerticalLabelPosition.TOP:
            out_insets.set(top=label_height - line_thickness, bottom=line_thickness)
        else:
            out_insets.set(top=half(line_thickness), bottom=label_height)

    def get_horizontal_insets(self, context: MeasureContext, available_height: float, out_insets: Insets) -> None:
        labels = self.get_labels(context, self.get_draw_label_count(context, available_height))
        desired_width = self.get_desired_width(context, labels)
        logger.debug(f"{self}: desired width {desired_width:.2f}px for {len(labels)} labels")

        start = desired_width if self.position.is_start else 0.0
        end = desired_width if self.position.is_end else 0.0
        if context.is_ltr:
            out_insets.set(left=start, right=end)
        else:
            out_insets.set(left=end, right=start)

    # ========================================================================
    # DRAWING
    # ========================================================================

    def draw_behind_chart(self, context: DrawContext) -> None:
        label_count = self.get_draw_label_count(context, self.bounds.height)
        chart_bounds = context.chart_bounds

        if self.guideline is not None and label_count > 0:
            guideline_half = half(self.guideline_thickness(context))
            axis_step = self.bounds.height / _intervals(label_count)
            for index in range(label_count):
                center_y = self.bounds.bottom - axis_step * index + guideline_half
                if self.is_not_in_restricted_bounds(
                    chart_bounds.left, center_y - guideline_half, chart_bounds.right, center_y + guideline_half
                ):
                    self.guideline.draw_horizontal(context, chart_bounds.left, chart_bounds.right, center_y)

        if self.axis_line is not None:
            self.axis_line.draw_vertical(
                context,
                self.bounds.top,
                self.bounds.bottom + self.axis_thickness(context),
                self.bounds.right if self.position.is_left(context.is_ltr) else self.bounds.left,
            )

    def draw_above_chart(self, context: DrawContext) -> None:
        label_count = self.get_draw_label_count(context, self.bounds.height)
        if label_count <= 0:
            return
        labels = self.get_labels(context, label_count)

        tick_left_x = self._tick_left_x(context)
        tick_right_x = tick_left_x + half(self.axis_thickness(context)) + self.tick_length(context)
        label_x = tick_left_x if self._labels_outside_at_start_or_inside_at_end == context.is_ltr else tick_right_x
        tick_half = half(self.tick_thickness(context))

        if isinstance(self.size_constraint, SizeConstraint.Auto):
            max_text_width = None
        else:
            max_text_width = self.bounds.width - self.tick_length(context) - half(self.axis_thickness(context))

        axis_step = self.bounds.height / _intervals(label_count)
        for index in range(label_count):
            tick_center_y = self.bounds.bottom - axis_step * index + tick_half

            if self.tick is not None:
                self.tick.draw_horizontal(context, tick_left_x, tick_right_x, tick_center_y)

            if self.label is None or index >= len(labels):
                continue
            text = labels[index]
            rect = self.label.get_text_rect(
                context,
                text,
                label_x,
                tick_center_y,
                self._text_horizontal_position,
                self.vertical_label_position.text_position,
                self.label_rotation_degrees,
            )
            if self.horizontal_label_position is HorizontalLabelPosition.OUTSIDE:
                visible = context.canvas_bounds.is_empty() or context.canvas_bounds.intersects(*rect.as_tuple())
            else:
                visible = self.is_not_in_restricted_bounds(*rect.as_tuple())
            if not visible:
                continue

            self.label.draw_text(
                context,
                text,
                label_x,
                tick_center_y,
                horizontal_position=self._text_horizontal_position,
                vertical_position=self.vertical_label_position.text_position,
                rotation_degrees=self.label_rotation_degrees,
                max_text_width=max_text_width,
            )
