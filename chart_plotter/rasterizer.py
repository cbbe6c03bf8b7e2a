"""
rasterizer.py — Drawing surface contract + matplotlib-backed implementation

This file contains ONLY:
- Rasterizer: the protocol every drawing surface implements
- MatplotlibRasterizer: reference implementation drawing onto a matplotlib Axes

The geometry core never rasterizes pixels itself. It computes rectangles,
paths and text anchors and hands them to a Rasterizer.

Coordinates are canvas pixels: x to the right, y DOWNWARD. MatplotlibRasterizer
inverts the y-axis of its Axes so the same numbers land in the same place.
"""

from __future__ import annotations

from typing import List, Optional, Protocol, Tuple

import matplotlib.pyplot as plt
from matplotlib.patches import PathPatch, Polygon, Rectangle, FancyBboxPatch, Wedge
from matplotlib.path import Path
from matplotlib.textpath import TextPath

from .config import settings
from .geometry_common import Bounds, normalize_wedge_angles
from .utils import setup_logger

logger = setup_logger(__name__)

LINE_HEIGHT_FACTOR = 1.2


# ============================================================================
# CONTRACT
# ============================================================================

class Rasterizer(Protocol):
    """Primitive drawing operations the charts rely on."""

    def measure_text(self, text: str, font_size: float) -> Tuple[float, float]:
        """(width, line height) of unrotated `text` in pixels."""
        ...

    def draw_text(
        self,
        text: str,
        center_x: float,
        center_y: float,
        *,
        font_size: float,
        color: str,
        rotation_degrees: float = 0.0,
        alpha: float = 1.0,
    ) -> None:
        ...

    def draw_rect(
        self,
        left: float,
        top: float,
        right: float,
        bottom: float,
        *,
        color: str,
        alpha: float = 1.0,
        corner_radius: float = 0.0,
    ) -> None:
        ...

    def draw_line(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        *,
        color: str,
        thickness: float,
        alpha: float = 1.0,
    ) -> None:
        ...

    def draw_path(
        self,
        path: Path,
        *,
        color: str,
        alpha: float = 1.0,
        fill: bool = True,
        thickness: float = 1.0,
    ) -> None:
        ...

    def draw_slice(
        self,
        oval: Bounds,
        start_angle: float,
        sweep_angle: float,
        *,
        color: str,
        alpha: float = 1.0,
        cutout: Optional[Path] = None,
    ) -> None:
        """Fill the pie slice of `oval`, then clear `cutout` (spacing wedges + hole) from it."""
        ...

    def push_clip(self, left: float, top: float, right: float, bottom: float) -> None:
        ...

    def pop_clip(self) -> None:
        ...

    def save_layer(self) -> int:
        ...

    def restore_to_count(self, count: int) -> None:
        ...


# ============================================================================
# MATPLOTLIB IMPLEMENTATION
# ============================================================================

class MatplotlibRasterizer:
    """
    Draws onto a matplotlib Axes whose data coordinates are canvas pixels.

    Use MatplotlibRasterizer.create(width, height) for a fresh figure sized so
    one data unit equals one output pixel at the given dpi.

    Limitations: save_layer / restore_to_count only keep a counter, there is
    no offscreen layer. Slice cut-outs (spacing wedges, donut hole) are painted
    with background_color, so they also cover whatever was drawn beneath them
    earlier, such as guidelines.
    """

    def __init__(
        self,
        ax: plt.Axes,
        width: float,
        height: float,
        *,
        dpi: float = 100.0,
        background_color: str = settings.BACKGROUND_COLOR,
    ):
        self.ax = ax
        self.width = float(width)
        self.height = float(height)
        self.dpi = float(dpi)
        self.background_color = background_color
        self._clips: List[Rectangle] = []
        self._layers = 0

        ax.set_xlim(0, self.width)
        ax.set_ylim(self.height, 0)  # y grows downward
        ax.set_axis_off()
        ax.set_facecolor(background_color)

    @classmethod
    def create(cls, width: float, height: float, dpi: float = 100.0, **kwargs) -> "MatplotlibRasterizer":
        fig = plt.figure(figsize=(width / dpi, height / dpi), dpi=dpi)
        ax = fig.add_axes([0.0, 0.0, 1.0, 1.0])
        return cls(ax, width, height, dpi=dpi, **kwargs)

    @property
    def figure(self) -> plt.Figure:
        return self.ax.figure

    # --- unit helpers -------------------------------------------------------

    def _px_to_pt(self, px: float) -> float:
        return px * 72.0 / self.dpi

    def _finish(self, artist) -> None:
        """Apply the current clip (if any) to a freshly added artist."""
        if self._clips:
            clip = self._clips[-1]
            artist.set_clip_path(Rectangle(clip.get_xy(), clip.get_width(), clip.get_height(), transform=self.ax.transData))

    # --- text ---------------------------------------------------------------

    def measure_text(self, text: str, font_size: float) -> Tuple[float, float]:
        line_height = font_size * LINE_HEIGHT_FACTOR
        if not text:
            return 0.0, line_height
        extents = TextPath((0, 0), text, size=font_size).get_extents()
        return float(extents.width), line_height

    def draw_text(
        self,
        text: str,
        center_x: float,
        center_y: float,
        *,
        font_size: float,
        color: str,
        rotation_degrees: float = 0.0,
        alpha: float = 1.0,
    ) -> None:
        artist = self.ax.text(
            center_x,
            center_y,
            text,
            ha="center",
            va="center",
            fontsize=self._px_to_pt(font_size),
            color=color,
            alpha=alpha,
            # matplotlib rotates counter-clockwise; canvas rotation is clockwise.
            rotation=-rotation_degrees,
            rotation_mode="anchor",
        )
        self._finish(artist)

    # --- shapes -------------------------------------------------------------

    def draw_rect(
        self,
        left: float,
        top: float,
        right: float,
        bottom: float,
        *,
        color: str,
        alpha: float = 1.0,
        corner_radius: float = 0.0,
    ) -> None:
        width = right - left
        height = bottom - top
        if width <= 0 or height <= 0:
            return
        if corner_radius > 0:
            radius = min(corner_radius, width / 2.0, height / 2.0)
            patch = FancyBboxPatch(
                (left, top),
                width,
                height,
                boxstyle=f"round,pad=0,rounding_size={radius}",
                facecolor=color,
                edgecolor="none",
                alpha=alpha,
            )
        else:
            patch = Rectangle((left, top), width, height, facecolor=color, edgecolor="none", alpha=alpha)
        self.ax.add_patch(patch)
        self._finish(patch)

    def draw_line(
        self,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        *,
        color: str,
        thickness: float,
        alpha: float = 1.0,
    ) -> None:
        for ln in self.ax.plot([x0, x1], [y0, y1], color=color, linewidth=self._px_to_pt(thickness), alpha=alpha):
            self._finish(ln)

    def draw_path(
        self,
        path: Path,
        *,
        color: str,
        alpha: float = 1.0,
        fill: bool = True,
        thickness: float = 1.0,
    ) -> None:
        if fill:
            patch = PathPatch(path, facecolor=color, edgecolor="none", alpha=alpha)
        else:
            patch = PathPatch(
                path,
                facecolor="none",
                edgecolor=color,
                linewidth=self._px_to_pt(thickness),
                alpha=alpha,
                joinstyle="round",
                capstyle="round",
            )
        self.ax.add_patch(patch)
        self._finish(patch)

    def draw_slice(
        self,
        oval: Bounds,
        start_angle: float,
        sweep_angle: float,
        *,
        color: str,
        alpha: float = 1.0,
        cutout: Optional[Path] = None,
    ) -> None:
        if sweep_angle <= 0:
            return
        theta1, theta2 = normalize_wedge_angles(start_angle, start_angle + sweep_angle)
        wedge = Wedge((oval.center_x, oval.center_y), oval.width / 2.0, theta1, theta2, facecolor=color, edgecolor="none", alpha=alpha)
        self.ax.add_patch(wedge)
        self._finish(wedge)

        if cutout is None:
            return
        # matplotlib has no CLEAR blend mode; paint each cut-out polygon with the background instead.
        for poly in cutout.to_polygons():
            if len(poly) < 3:
                continue
            patch = Polygon(poly, closed=True, facecolor=self.background_color, edgecolor="none")
            self.ax.add_patch(patch)
            self._finish(patch)

    # --- state --------------------------------------------------------------

    def push_clip(self, left: float, top: float, right: float, bottom: float) -> None:
        self._clips.append(Rectangle((left, top), right - left, bottom - top))

    def pop_clip(self) -> None:
        if not self._clips:
            raise RuntimeError("pop_clip() without a matching push_clip()")
        self._clips.pop()

    def save_layer(self) -> int:
        self._layers += 1
        return self._layers - 1

    def restore_to_count(self, count: int) -> None:
        self._layers = max(0, min(self._layers, count))
