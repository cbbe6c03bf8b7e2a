"""
context.py — Measure / draw contexts handed to every component

MeasureContext carries everything needed to compute sizes (density, zoom,
ranges, a text-measuring rasterizer, a per-pass cache). DrawContext adds the
state that only exists while drawing (scroll, segment properties, plot bounds).
"""

from __future__ import annotations

from typing import Any, Dict, Hashable, Optional

from .geometry_common import Bounds
from .models import ChartRanges
from .rasterizer import Rasterizer
from .utils import setup_logger

logger = setup_logger(__name__)


class MeasureContext:
    def __init__(
        self,
        rasterizer: Rasterizer,
        *,
        density: float = 1.0,
        font_scale: float = 1.0,
        is_ltr: bool = True,
        is_horizontal_scroll_enabled: bool = False,
        zoom: float = 1.0,
        canvas_bounds: Optional[Bounds] = None,
    ):
        self.rasterizer = rasterizer
        self.density = float(density)
        self.font_scale = float(font_scale)
        self.is_ltr = is_ltr
        self.is_horizontal_scroll_enabled = is_horizontal_scroll_enabled
        self.zoom = float(zoom)
        self.canvas_bounds = canvas_bounds if canvas_bounds is not None else Bounds()
        self.chart_ranges: ChartRanges = ChartRanges.EMPTY
        self._extras: Dict[Hashable, Any] = {}

    # --- units --------------------------------------------------------------

    def pixels(self, dp: float) -> float:
        return dp * self.density

    def sp_pixels(self, sp: float) -> float:
        return sp * self.density * self.font_scale

    # --- ranges + cache -----------------------------------------------------

    def update_chart_ranges(self, ranges: ChartRanges) -> bool:
        """
        Install the ranges of the current pass. Cached values (e.g. axis label
        strings) depend on them, so the cache is dropped when they change.
        Returns True if the ranges changed.
        """
        if ranges == self.chart_ranges and ranges.y_ranges == self.chart_ranges.y_ranges:
            return False
        self.chart_ranges = ranges
        self.clear_extras()
        logger.debug(f"Chart ranges changed: {ranges}")
        return True

    def put_extra(self, key: Hashable, value: Any) -> None:
        self._extras[key] = value

    def get_extra(self, key: Hashable) -> Any:
        return self._extras.get(key)

    def clear_extras(self) -> None:
        self._extras.clear()


class DrawContext(MeasureContext):
    """MeasureContext plus per-draw state. Created from a MeasureContext for each pass."""

    def __init__(
        self,
        measure_context: MeasureContext,
        *,
        horizontal_scroll: float = 0.0,
        segment_properties: Any = None,
        chart_bounds: Optional[Bounds] = None,
    ):
        # Share the measure context's state (including its cache) rather than copying it.
        self.__dict__.update(measure_context.__dict__)
        self.horizontal_scroll = float(horizontal_scroll)
        self.segment_properties = segment_properties
        self.chart_bounds = chart_bounds if chart_bounds is not None else Bounds()
