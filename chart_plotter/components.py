"""
components.py — Reusable drawable components

This file contains ONLY:
- TextComponent (measure + place + draw a text run)
- ShapeComponent / LineComponent (rectangles, ovals, axis lines, ticks, points)
- SliceLabel implementations (InsideSliceLabel / OutsideSliceLabel)
- Slice (appearance of one pie slice)

Components hold configuration only; every size is computed from the context
passed in, so one instance can be shared by several axes or charts of the
same density.
"""

from __future__ import annotations

import math
from enum import Enum
from typing import Optional

from matplotlib.path import Path
from matplotlib.transforms import Affine2D

from .config import settings
from .context import MeasureContext
from .errors import require
from .geometry_common import Bounds, point_on_circle, rotated_extents
from .insets import Insets
from .utils import setup_logger

logger = setup_logger(__name__)


class HorizontalPosition(Enum):
    """Where the text box sits relative to its anchor x."""

    START = "start"  # box ends at the anchor (extends to the left in LTR)
    CENTER = "center"
    END = "end"  # box starts at the anchor


class VerticalPosition(Enum):
    """Where the text box sits relative to its anchor y."""

    TOP = "top"  # box above the anchor
    CENTER = "center"
    BOTTOM = "bottom"  # box below the anchor


# ============================================================================
# TEXT
# ============================================================================

class TextComponent:
    def __init__(
        self,
        color: str = settings.AXIS_LABEL_COLOR,
        text_size_sp: float = settings.AXIS_LABEL_SIZE_SP,
        padding_dp: Optional[Insets] = None,
        ellipsis: str = "…",
    ):
        require(text_size_sp > 0, "Text size must be positive.")
        self.color = color
        self.text_size_sp = float(text_size_sp)
        self.padding_dp = padding_dp if padding_dp is not None else Insets(
            left=settings.AXIS_LABEL_HORIZONTAL_PADDING_DP,
            top=settings.AXIS_LABEL_VERTICAL_PADDING_DP,
            right=settings.AXIS_LABEL_HORIZONTAL_PADDING_DP,
            bottom=settings.AXIS_LABEL_VERTICAL_PADDING_DP,
        )
        self.ellipsis = ellipsis

    def _font_size(self, context: MeasureContext) -> float:
        return context.sp_pixels(self.text_size_sp)

    def _padded_size(self, context: MeasureContext, text: str) -> tuple:
        width, height = context.rasterizer.measure_text(text, self._font_size(context))
        return (
            width + context.pixels(self.padding_dp.horizontal),
            height + context.pixels(self.padding_dp.vertical),
        )

    def get_width(self, context: MeasureContext, text: str, rotation_degrees: float = 0.0) -> float:
        width, height = self._padded_size(context, text)
        return rotated_extents(width, height, rotation_degrees)[0]

    def get_height(
        self,
        context: MeasureContext,
        text: Optional[str] = None,
        rotation_degrees: float = 0.0,
    ) -> float:
        """Height of `text`, or of a single line when text is None."""
        width, height = self._padded_size(context, text or "")
        return rotated_extents(width, height, rotation_degrees)[1]

    def get_text_bounds(self, context: MeasureContext, text: str, rotation_degrees: float = 0.0) -> Bounds:
        width, height = self._padded_size(context, text)
        width, height = rotated_extents(width, height, rotation_degrees)
        return Bounds(0.0, 0.0, width, height)

    def get_text_rect(
        self,
        context: MeasureContext,
        text: str,
        text_x: float,
        text_y: float,
        horizontal_position: HorizontalPosition = HorizontalPosition.CENTER,
        vertical_position: VerticalPosition = VerticalPosition.CENTER,
        rotation_degrees: float = 0.0,
    ) -> Bounds:
        """The box `text` occupies when anchored at (text_x, text_y)."""
        box = self.get_text_bounds(context, text, rotation_degrees)
        if horizontal_position is HorizontalPosition.CENTER:
            left = text_x - box.width / 2.0
        elif (horizontal_position is HorizontalPosition.START) == context.is_ltr:
            left = text_x - box.width
        else:
            left = text_x

        if vertical_position is VerticalPosition.TOP:
            top = text_y - box.height
        elif vertical_position is VerticalPosition.CENTER:
            top = text_y - box.height / 2.0
        else:
            top = text_y
        return box.translate(left, top)

    def ellipsize(self, context: MeasureContext, text: str, max_text_width: float) -> str:
        """Shorten `text` (ellipsis appended) until its padded width fits max_text_width."""
        if self.get_width(context, text) <= max_text_width:
            return text
        for cut in range(len(text) - 1, -1, -1):
            candidate = text[:cut] + self.ellipsis
            if self.get_width(context, candidate) <= max_text_width:
                return candidate
        return ""

    def draw_text(
        self,
        context: MeasureContext,
        text: str,
        text_x: float,
        text_y: float,
        horizontal_position: HorizontalPosition = HorizontalPosition.CENTER,
        vertical_position: VerticalPosition = VerticalPosition.CENTER,
        rotation_degrees: float = 0.0,
        max_text_width: Optional[float] = None,
        alpha: float = 1.0,
    ) -> Optional[Bounds]:
        if max_text_width is not None:
            text = self.ellipsize(context, text, max_text_width)
        if not text:
            return None
        rect = self.get_text_rect(
            context, text, text_x, text_y, horizontal_position, vertical_position, rotation_degrees
        )
        context.rasterizer.draw_text(
            text,
            rect.center_x,
            rect.center_y,
            font_size=self._font_size(context),
            color=self.color,
            rotation_degrees=rotation_degrees,
            alpha=alpha,
        )
        return rect


# ============================================================================
# SHAPES / LINES
# ============================================================================

class Shape(Enum):
    RECTANGLE = "rectangle"
    ROUNDED = "rounded"
    OVAL = "oval"


class ShapeComponent:
    def __init__(self, color: str = settings.AXIS_LINE_COLOR, shape: Shape = Shape.RECTANGLE, corner_radius_dp: float = 0.0):
        self.color = color
        self.shape = shape
        self.corner_radius_dp = float(corner_radius_dp)

    def draw(
        self,
        context: MeasureContext,
        left: float,
        top: float,
        right: float,
        bottom: float,
        alpha: float = 1.0,
    ) -> None:
        if right <= left or bottom <= top:
            return
        if self.shape is Shape.OVAL:
            transform = (
                Affine2D()
                .scale((right - left) / 2.0, (bottom - top) / 2.0)
                .translate((left + right) / 2.0, (top + bottom) / 2.0)
            )
            context.rasterizer.draw_path(transform.transform_path(Path.unit_circle()), color=self.color, alpha=alpha)
            return
        corner = context.pixels(self.corner_radius_dp) if self.shape is Shape.ROUNDED else 0.0
        context.rasterizer.draw_rect(left, top, right, bottom, color=self.color, alpha=alpha, corner_radius=corner)

    def draw_point(self, context: MeasureContext, x: float, y: float, half_point_size: float, alpha: float = 1.0) -> None:
        self.draw(context, x - half_point_size, y - half_point_size, x + half_point_size, y + half_point_size, alpha)


class LineComponent(ShapeComponent):
    """A ShapeComponent drawn as a horizontal or vertical line of fixed thickness."""

    def __init__(
        self,
        color: str = settings.AXIS_LINE_COLOR,
        thickness_dp: float = settings.AXIS_LINE_WIDTH_DP,
        shape: Shape = Shape.RECTANGLE,
        corner_radius_dp: float = 0.0,
    ):
        require(thickness_dp >= 0, "Line thickness cannot be negative.")
        super().__init__(color=color, shape=shape, corner_radius_dp=corner_radius_dp)
        self.thickness_dp = float(thickness_dp)

    def thickness(self, context: MeasureContext) -> float:
        return context.pixels(self.thickness_dp)

    def draw_horizontal(self, context: MeasureContext, left: float, right: float, center_y: float, alpha: float = 1.0) -> None:
        half = self.thickness(context) / 2.0
        self.draw(context, left, center_y - half, right, center_y + half, alpha)

    def draw_vertical(self, context: MeasureContext, top: float, bottom: float, center_x: float, alpha: float = 1.0) -> None:
        half = self.thickness(context) / 2.0
        self.draw(context, center_x - half, top, center_x + half, bottom, alpha)

    def fits_in_vertical(self, context: MeasureContext, top: float, bottom: float, center_x: float, bounding_box: Bounds) -> bool:
        half = self.thickness(context) / 2.0
        return (
            bounding_box.left <= center_x - half
            and center_x + half <= bounding_box.right
            and bounding_box.top <= top
            and bottom <= bounding_box.bottom
        )


# ============================================================================
# PIE SLICE LABELS
# ============================================================================

class SliceLabel:
    """Places a slice's label; may claim insets so the label fits the content bounds."""

    def __init__(self, text_component: Optional[TextComponent] = None):
        self.text_component = text_component if text_component is not None else TextComponent()

    def get_insets(
        self,
        context: MeasureContext,
        content_bounds: Bounds,
        oval: Bounds,
        angle: float,
        label: str,
        out_insets: Insets,
    ) -> None:
        """Merge the room this label needs (largest wins) into out_insets."""

    def draw(
        self,
        context: MeasureContext,
        content_bounds: Bounds,
        oval: Bounds,
        angle: float,
        hole_radius: float,
        label: str,
        alpha: float = 1.0,
    ) -> None:
        raise NotImplementedError


class InsideSliceLabel(SliceLabel):
    """Label centered between the hole and the outer edge; never needs insets."""

    def draw(
        self,
        context: MeasureContext,
        content_bounds: Bounds,
        oval: Bounds,
        angle: float,
        hole_radius: float,
        label: str,
        alpha: float = 1.0,
    ) -> None:
        radius = (hole_radius + oval.width / 2.0) / 2.0
        anchor = point_on_circle(oval.center_x, oval.center_y, radius, angle)
        self.text_component.draw_text(context, label, anchor.x, anchor.y, alpha=alpha)


class OutsideSliceLabel(SliceLabel):
    """Label outside the oval, joined to the slice edge by an optional connector line."""

    def __init__(
        self,
        text_component: Optional[TextComponent] = None,
        line_component: Optional[LineComponent] = None,
        line_length_dp: float = settings.PIE_LABEL_LINE_LENGTH_DP,
    ):
        require(line_length_dp >= 0, "Label line length cannot be negative.")
        super().__init__(text_component)
        self.line_component = line_component
        self.line_length_dp = float(line_length_dp)

    def _text_rect(self, context: MeasureContext, oval: Bounds, angle: float, label: str) -> Bounds:
        anchor = point_on_circle(
            oval.center_x,
            oval.center_y,
            oval.width / 2.0 + context.pixels(self.line_length_dp),
            angle,
        )
        # Right half of the circle -> text grows rightwards; left half -> leftwards.
        horizontal = HorizontalPosition.END if math.cos(math.radians(angle)) >= 0 else HorizontalPosition.START
        return self.text_component.get_text_rect(context, label, anchor.x, anchor.y, horizontal, VerticalPosition.CENTER)

    def get_insets(
        self,
        context: MeasureContext,
        content_bounds: Bounds,
        oval: Bounds,
        angle: float,
        label: str,
        out_insets: Insets,
    ) -> None:
        rect = self._text_rect(context, oval, angle, label)
        out_insets.set_values_if_greater(
            left=max(0.0, content_bounds.left - rect.left),
            top=max(0.0, content_bounds.top - rect.top),
            right=max(0.0, rect.right - content_bounds.right),
            bottom=max(0.0, rect.bottom - content_bounds.bottom),
        )

    def draw(
        self,
        context: MeasureContext,
        content_bounds: Bounds,
        oval: Bounds,
        angle: float,
        hole_radius: float,
        label: str,
        alpha: float = 1.0,
    ) -> None:
        radius = oval.width / 2.0
        if self.line_component is not None and self.line_length_dp > 0:
            start = point_on_circle(oval.center_x, oval.center_y, radius, angle)
            end = point_on_circle(oval.center_x, oval.center_y, radius + context.pixels(self.line_length_dp), angle)
            context.rasterizer.draw_line(
                start.x,
                start.y,
                end.x,
                end.y,
                color=self.line_component.color,
                thickness=self.line_component.thickness(context),
                alpha=alpha,
            )
        rect = self._text_rect(context, oval, angle, label)
        self.text_component.draw_text(context, label, rect.center_x, rect.center_y, alpha=alpha)


# ============================================================================
# PIE SLICE
# ============================================================================

class Slice:
    """Appearance of one pie slice."""

    def __init__(
        self,
        color: str,
        offset_from_center_dp: float = 0.0,
        label: Optional[SliceLabel] = None,
    ):
        require(offset_from_center_dp >= 0, "Slice offset cannot be negative.")
        self.color = color
        self.offset_from_center_dp = float(offset_from_center_dp)
        self.label = label

    def draw(
        self,
        context: MeasureContext,
        content_bounds: Bounds,
        oval: Bounds,
        start_angle: float,
        sweep_angle: float,
        hole_radius: float,
        label: Optional[str],
        spacing_path: Optional[Path],
        slice_opacity: float = 1.0,
        label_opacity: float = 1.0,
    ) -> None:
        mid_angle = start_angle + sweep_angle / 2.0
        slice_oval = oval
        offset = context.pixels(self.offset_from_center_dp)
        if offset > 0:
            shift = point_on_circle(0.0, 0.0, offset, mid_angle)
            slice_oval = oval.copy().translate(shift.x, shift.y)
            if spacing_path is not None:
                spacing_path = Affine2D().translate(shift.x, shift.y).transform_path(spacing_path)

        cutout = spacing_path if spacing_path is not None and len(spacing_path.vertices) else None
        context.rasterizer.draw_slice(
            slice_oval,
            start_angle,
            sweep_angle,
            color=self.color,
            alpha=slice_opacity,
            cutout=cutout,
        )

        if self.label is not None and label:
            self.label.draw(context, content_bounds, slice_oval, mid_angle, hole_radius, label, alpha=label_opacity)
