"""
layout.py — Insets negotiation between axes and the plotted content

This file contains ONLY:
- AxisManager: holds the four optional axes, assigns their bounds + restricted areas
- VirtualLayout: merges every contributor's insets and derives the plot bounds

Negotiation order (one pass):
1) get_insets() of every contributor, merged per side (largest wins)
2) available plot height = content height - vertical insets
3) get_horizontal_insets(available height) of every contributor, merged the same way
4) plot bounds = content bounds minus the merged insets
5) axis bounds are laid around the plot bounds
"""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .axis import Axis, AxisPosition
from .context import MeasureContext
from .errors import require
from .geometry_common import Bounds
from .insets import Insets
from .utils import setup_logger

logger = setup_logger(__name__)


class AxisManager:
    def __init__(self) -> None:
        self._axes: Dict[AxisPosition, Optional[Axis]] = {position: None for position in AxisPosition}

    def set_axis(self, position: AxisPosition, axis: Optional[Axis]) -> None:
        """Assign (or clear, with None) the axis at `position`. Call the owner's update_bounds() afterwards."""
        require(
            axis is None or axis.position is position,
            f"Cannot place a {axis!r} at {position.name}.",
        )
        self._axes[position] = axis

    def get_axis(self, position: AxisPosition) -> Optional[Axis]:
        return self._axes[position]

    @property
    def start_axis(self) -> Optional[Axis]:
        return self._axes[AxisPosition.START]

    @property
    def end_axis(self) -> Optional[Axis]:
        return self._axes[AxisPosition.END]

    @property
    def top_axis(self) -> Optional[Axis]:
        return self._axes[AxisPosition.TOP]

    @property
    def bottom_axis(self) -> Optional[Axis]:
        return self._axes[AxisPosition.BOTTOM]

    @property
    def axes(self) -> List[Axis]:
        return [axis for axis in self._axes.values() if axis is not None]

    def set_axes_bounds(self, context: MeasureContext, content_bounds: Bounds, chart_bounds: Bounds) -> None:
        left_axis, right_axis = (
            (self.start_axis, self.end_axis) if context.is_ltr else (self.end_axis, self.start_axis)
        )
        if left_axis is not None:
            left_axis.set_bounds(content_bounds.left, chart_bounds.top, chart_bounds.left, chart_bounds.bottom)
        if right_axis is not None:
            right_axis.set_bounds(chart_bounds.right, chart_bounds.top, content_bounds.right, chart_bounds.bottom)
        if self.top_axis is not None:
            self.top_axis.set_bounds(chart_bounds.left, content_bounds.top, chart_bounds.right, chart_bounds.top)
        if self.bottom_axis is not None:
            self.bottom_axis.set_bounds(chart_bounds.left, chart_bounds.bottom, chart_bounds.right, content_bounds.bottom)

        for axis in self.axes:
            axis.set_restricted_bounds(*(other.bounds for other in self.axes if other is not axis))

    def draw_behind_chart(self, context) -> None:
        for axis in self.axes:
            axis.draw_behind_chart(context)

    def draw_above_chart(self, context) -> None:
        for axis in self.axes:
            axis.draw_above_chart(context)


class VirtualLayout:
    def __init__(self, axis_manager: AxisManager):
        self.axis_manager = axis_manager
        self.final_insets = Insets()
        self._temp_insets = Insets()

    def set_bounds(
        self,
        context: MeasureContext,
        content_bounds: Bounds,
        chart,
        extra_insetters: Iterable = (),
    ) -> Bounds:
        """
        Negotiate insets and lay out chart + axes inside content_bounds.

        `chart` and each extra insetter expose get_insets(context, out) and
        get_horizontal_insets(context, available_height, out); the chart also
        receives its bounds through set_bounds(). Returns the plot bounds.
        """
        insetters = [*self.axis_manager.axes, chart, *extra_insetters]
        final = self.final_insets.clear()
        temp = self._temp_insets

        for insetter in insetters:
            temp.clear()
            insetter.get_insets(context, temp)
            final.merge_largest(temp)

        available_height = max(0.0, content_bounds.height - final.vertical)

        for insetter in insetters:
            temp.clear()
            insetter.get_horizontal_insets(context, available_height, temp)
            final.merge_largest(temp)

        left = content_bounds.left + final.left
        top = content_bounds.top + final.top
        # Zero available space collapses the plot area instead of inverting it.
        chart_bounds = Bounds(
            left,
            top,
            max(left, content_bounds.right - final.right),
            max(top, content_bounds.bottom - final.bottom),
        )
        logger.debug(f"Layout: content={content_bounds.as_tuple()} insets={final} chart={chart_bounds.as_tuple()}")

        chart.set_bounds(chart_bounds.left, chart_bounds.top, chart_bounds.right, chart_bounds.bottom)
        self.axis_manager.set_axes_bounds(context, content_bounds, chart_bounds)
        return chart_bounds
