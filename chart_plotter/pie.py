"""
pie.py — Pie / donut chart geometry

This file contains ONLY:
- OuterSize / InnerSize (radius policies)
- PieChart: sweep angles, oval bounds negotiation with slice labels,
  spacing wedges + donut hole, drawing, drawing-model conversion

Angles are degrees, measured clockwise from the +x axis (canvas y grows down).

Oval negotiation (per pass):
1) provisional oval at the full outer radius, centered in the chart bounds
2) every slice label reports the insets it needs at its mid-angle (largest wins)
3) radius -= largest inset edge + largest slice offset, then rounded to a whole pixel
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np
from matplotlib.path import Path
from matplotlib.transforms import Affine2D

from .chart import Chart
from .components import Slice
from .context import DrawContext, MeasureContext
from .drawing_model import DrawingModelInterpolator, PieDrawingModel, SliceInfo
from .errors import ChartConfigurationError
from .formatters import PieValueFormatter, default_pie_value_formatter
from .geometry_common import FULL_DEGREES, HALF_TURN_DEGREES, Bounds, point_on_circle, round_half_up
from .insets import Insets
from .models import PieModel
from .utils import get_or_none, get_repeating, setup_logger

logger = setup_logger(__name__)

HOLE_SEGMENTS = 128


# ============================================================================
# SIZE POLICIES
# ============================================================================

@dataclass(frozen=True)
class OuterSize:
    """Outer radius policy. Build with OuterSize.auto() or OuterSize.fixed(max_diameter_dp)."""

    max_diameter_dp: Optional[float] = None

    @classmethod
    def auto(cls) -> "OuterSize":
        return cls()

    @classmethod
    def fixed(cls, max_diameter_dp: float) -> "OuterSize":
        if max_diameter_dp <= 0:
            raise ChartConfigurationError("The outer diameter must be positive.")
        return cls(max_diameter_dp=float(max_diameter_dp))

    def get_radius(self, context: MeasureContext, width: float, height: float) -> float:
        available = min(width, height) / 2.0
        if self.max_diameter_dp is None:
            return available
        return min(context.pixels(self.max_diameter_dp) / 2.0, available)


@dataclass(frozen=True)
class InnerSize:
    """Donut hole policy: InnerSize.zero(), InnerSize.fixed(diameter_dp), InnerSize.fraction(f)."""

    diameter_dp: float = 0.0
    fraction_of_outer: Optional[float] = None

    @classmethod
    def zero(cls) -> "InnerSize":
        return cls()

    @classmethod
    def fixed(cls, diameter_dp: float) -> "InnerSize":
        if diameter_dp < 0:
            raise ChartConfigurationError("The inner diameter cannot be negative.")
        return cls(diameter_dp=float(diameter_dp))

    @classmethod
    def fraction(cls, fraction: float) -> "InnerSize":
        if not 0.0 <= fraction < 1.0:
            raise ChartConfigurationError(f"The inner size fraction must be in [0, 1), got {fraction}.")
        return cls(fraction_of_outer=float(fraction))

    def get_radius(self, context: MeasureContext, outer_radius: float) -> float:
        if self.fraction_of_outer is not None:
            return outer_radius * self.fraction_of_outer
        return context.pixels(self.diameter_dp) / 2.0


# ============================================================================
# CHART
# ============================================================================

class PieChart(Chart):
    def __init__(
        self,
        slices: Sequence[Slice],
        spacing_dp: float = 0.0,
        outer_size: OuterSize = OuterSize.auto(),
        inner_size: InnerSize = InnerSize.zero(),
        start_angle: float = 0.0,
        value_formatter: PieValueFormatter = default_pie_value_formatter,
        drawing_model_interpolator: Optional[DrawingModelInterpolator] = None,
    ):
        super().__init__(drawing_model_interpolator)
        self.slices = list(slices)
        self.spacing_dp = float(spacing_dp)
        self.outer_size = outer_size
        self.inner_size = inner_size
        self.start_angle = float(start_angle)
        self.value_formatter = value_formatter

        # Reused per pass; owned by this instance only.
        self.oval = Bounds()
        self.insets = Insets()

        self.check_parameters()

    def check_parameters(self) -> None:
        if not self.slices:
            logger.error("PieChart configured without slices")
            raise ChartConfigurationError("Slices cannot be empty.")
        if self.spacing_dp < 0:
            logger.error(f"PieChart configured with negative spacing: {self.spacing_dp}")
            raise ChartConfigurationError("The spacing cannot be negative.")

    # ------------------------------------------------------------------------
    # Angles + labels
    # ------------------------------------------------------------------------

    def _formatted_value(self, index: int, model: PieModel) -> Optional[str]:
        entry = model.entry_or_none(index)
        if entry is None:
            return None
        return self.value_formatter(index, entry.value, model)

    def _sweep_angle(self, index: int, model: PieModel, slice_info: Optional[List[SliceInfo]]) -> float:
        info = get_or_none(slice_info, index) if slice_info is not None else None
        if info is not None:
            return info.degrees
        entry = model.entry_or_none(index)
        if entry is None or model.sum_of_values == 0:
            return 0.0
        return entry.value / model.sum_of_values * FULL_DEGREES

    def _label(self, index: int, model: PieModel, slice_info: Optional[List[SliceInfo]]) -> Optional[str]:
        info = get_or_none(slice_info, index) if slice_info is not None else None
        if info is not None and info.label is not None:
            return info.label
        return self._formatted_value(index, model)

    @staticmethod
    def _slice_count(model: PieModel, slice_info: Optional[List[SliceInfo]]) -> int:
        return len(slice_info) if slice_info is not None else len(model.entries)

    def get_slice_angles(
        self,
        model: PieModel,
        slice_info: Optional[List[SliceInfo]] = None,
    ) -> List[Tuple[float, float]]:
        """(start_angle, sweep_angle) of every slice, in drawing order."""
        angles = []
        angle = self.start_angle
        for index in range(self._slice_count(model, slice_info)):
            sweep = self._sweep_angle(index, model, slice_info)
            angles.append((angle, sweep))
            angle += sweep
        return angles

    # ------------------------------------------------------------------------
    # Oval
    # ------------------------------------------------------------------------

    def update_oval_bounds(
        self,
        context: MeasureContext,
        model: PieModel,
        slice_info: Optional[List[SliceInfo]] = None,
    ) -> Bounds:
        self.check_parameters()
        self.insets.clear()

        bounds = self.bounds
        oval_radius = self.outer_size.get_radius(context, bounds.width, bounds.height)
        max_offset_from_center = 0.0

        for index, (start, sweep) in enumerate(self.get_slice_angles(model, slice_info)):
            slice_ = get_repeating(self.slices, index)
            label = self._label(index, model, slice_info)
            if slice_.label is not None and label:
                self.oval.set_circle(bounds.center_x, bounds.center_y, oval_radius)
                slice_.label.get_insets(context, bounds, self.oval, start + sweep / 2.0, label, self.insets)
            max_offset_from_center = max(max_offset_from_center, context.pixels(slice_.offset_from_center_dp))

        oval_radius = round_half_up(oval_radius - (max_offset_from_center + self.insets.largest_edge))
        self.oval.set_circle(bounds.center_x, bounds.center_y, oval_radius)
        logger.debug(
            f"Pie oval radius {oval_radius}px (label insets {self.insets.largest_edge:.2f}, "
            f"slice offset {max_offset_from_center:.2f})"
        )
        return self.oval

    # ------------------------------------------------------------------------
    # Spacing + hole paths
    # ------------------------------------------------------------------------

    def spacing_segment(self, spacing: float, edge_angle: float, sweep_angle: float, side: int) -> Path:
        """
        Strip of width `spacing` along the slice edge at `edge_angle`, from the
        center to past the oval. side=+1 for the start edge (slice lies at
        larger angles), -1 for the end edge.

        A slice wider than a half-turn wraps around the center, so its strip
        starts from the point on the bisector where the inner edges of both
        strips meet: (spacing / 2) / sin(sweep / 2) away from the center.
        """
        half_spacing = spacing / 2.0
        far = self.oval.width / 2.0 + spacing
        points = []
        if sweep_angle > HALF_TURN_DEGREES:
            apex_distance = half_spacing / math.sin(math.radians(sweep_angle / 2.0))
            apex = point_on_circle(0.0, 0.0, apex_distance, side * sweep_angle / 2.0)
            points.append((apex.x, apex.y))
        points += [
            (0.0, side * half_spacing),
            (far, side * half_spacing),
            (far, -side * half_spacing),
            (0.0, -side * half_spacing),
        ]
        points.append(points[0])
        codes = [Path.MOVETO] + [Path.LINETO] * (len(points) - 2) + [Path.CLOSEPOLY]
        transform = Affine2D().rotate_deg(edge_angle).translate(self.oval.center_x, self.oval.center_y)
        return transform.transform_path(Path(points, codes))

    def hole(self, inner_radius: float) -> Path:
        """Circle of inner_radius around the oval center, counter-clockwise."""
        theta = np.linspace(0.0, -2.0 * np.pi, HOLE_SEGMENTS, endpoint=False)
        vertices = np.column_stack([
            self.oval.center_x + inner_radius * np.cos(theta),
            self.oval.center_y + inner_radius * np.sin(theta),
        ])
        vertices = np.vstack([vertices, vertices[:1]])
        codes = [Path.MOVETO] + [Path.LINETO] * (HOLE_SEGMENTS - 1) + [Path.CLOSEPOLY]
        return Path(vertices, codes)

    def build_cutout_path(self, context: MeasureContext, draw_angle: float, sweep_angle: float, inner_radius: float) -> Optional[Path]:
        parts = []
        spacing = context.pixels(self.spacing_dp)
        # A full circle has no neighbours to keep apart.
        if spacing > 0 and sweep_angle < FULL_DEGREES:
            parts.append(self.spacing_segment(spacing, draw_angle, sweep_angle, side=1))
            parts.append(self.spacing_segment(spacing, draw_angle + sweep_angle, sweep_angle, side=-1))
        if inner_radius > 0:
            parts.append(self.hole(inner_radius))
        if not parts:
            return None
        return Path.make_compound_path(*parts)

    # ------------------------------------------------------------------------
    # Drawing
    # ------------------------------------------------------------------------

    def draw(self, context: DrawContext, model: PieModel) -> None:
        drawing_model = self.get_drawing_model(model)
        slice_info = drawing_model.slices if drawing_model is not None else None
        self.update_oval_bounds(context, model, slice_info)

        outer_radius = self.oval.width / 2.0
        if outer_radius <= 0:
            logger.debug(f"No room for the pie in {self.bounds.as_tuple()}, skipping draw")
            return

        inner_radius = self.inner_size.get_radius(context, outer_radius)
        if outer_radius <= inner_radius:
            logger.error(f"Pie outer radius {outer_radius} <= inner radius {inner_radius}")
            raise ChartConfigurationError("The outer size must be greater than the inner size.")

        rasterizer = context.rasterizer
        restore_count = rasterizer.save_layer() if self.spacing_dp > 0 else -1
        try:
            for index, (draw_angle, sweep_angle) in enumerate(self.get_slice_angles(model, slice_info)):
                info = get_or_none(slice_info, index) if slice_info is not None else None
                get_repeating(self.slices, index).draw(
                    context,
                    self.bounds,
                    self.oval,
                    draw_angle,
                    sweep_angle,
                    inner_radius,
                    self._label(index, model, slice_info),
                    self.build_cutout_path(context, draw_angle, sweep_angle, inner_radius),
                    slice_opacity=info.slice_opacity if info is not None else 1.0,
                    label_opacity=info.label_opacity if info is not None else 1.0,
                )
        finally:
            if restore_count >= 0:
                rasterizer.restore_to_count(restore_count)

    # ------------------------------------------------------------------------
    # Animation
    # ------------------------------------------------------------------------

    def to_drawing_model(self, model: PieModel, old: Optional[PieDrawingModel]) -> PieDrawingModel:
        """
        Slices for `model`. When a previous model exists, the list is padded with
        empty slices up to its visible slice count so removed slices shrink away.
        """
        size = len(model.entries)
        if old is not None:
            size = max(size, sum(1 for info in old.slices if info.degrees > 0))

        slices = []
        for index in range(size):
            entry = model.entry_or_none(index)
            degrees = (
                entry.value / model.sum_of_values * FULL_DEGREES
                if entry is not None and model.sum_of_values > 0
                else 0.0
            )
            slices.append(SliceInfo(degrees=degrees, label=self._formatted_value(index, model)))
        return PieDrawingModel.of(slices)
