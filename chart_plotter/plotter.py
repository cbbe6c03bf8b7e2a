"""
plotter.py — ChartPlotter: binds a chart, its axes, scroll / zoom state and a rasterizer

This file contains ONLY the host-side coordination:
- measure(width, height, padding)  -> content bounds + layout
- set_axis(...) / set_chart(...) / set_model(...)  followed by an explicit update_bounds()
- draw()  -> axes behind, chart, axes above
- handle_scroll / scroll_to / handle_zoom
- attach_producer / detach_producer (animated snapshots from a ChartModelProducer)

Layout and draw are synchronous. Animation frames only publish (model, ranges)
pairs; the next draw() picks the latest one up.
"""

from __future__ import annotations

import threading
from typing import Any, Optional, Tuple

from .animation import ChartAnimator
from .axis import Axis, AxisPosition
from .chart import Chart
from .config import settings
from .context import DrawContext, MeasureContext
from .geometry_common import Bounds
from .insets import Insets
from .layout import AxisManager, VirtualLayout
from .models import ChartRanges, MutableChartRanges, MutableExtraStore
from .producer import ChartModelProducer
from .rasterizer import Rasterizer
from .scroll import ScrollHandler, ZoomHandler
from .utils import setup_logger

logger = setup_logger(__name__)


class ChartPlotter:
    def __init__(
        self,
        rasterizer: Rasterizer,
        chart: Optional[Chart] = None,
        *,
        density: float = 1.0,
        font_scale: float = 1.0,
        is_ltr: bool = True,
        is_horizontal_scroll_enabled: bool = False,
        is_zoom_enabled: bool = True,
        animator: Optional[ChartAnimator] = None,
        run_initial_animation: bool = settings.RUN_INITIAL_ANIMATION,
    ):
        self.rasterizer = rasterizer
        self.chart = chart
        self.is_zoom_enabled = is_zoom_enabled
        self.run_initial_animation = run_initial_animation
        self.animator = animator

        self.measure_context = MeasureContext(
            rasterizer,
            density=density,
            font_scale=font_scale,
            is_ltr=is_ltr,
            is_horizontal_scroll_enabled=is_horizontal_scroll_enabled,
        )
        self.axis_manager = AxisManager()
        self.virtual_layout = VirtualLayout(self.axis_manager)
        self.scroll_handler = ScrollHandler()
        self.zoom_handler = ZoomHandler()
        self.content_bounds = Bounds()
        self.model: Any = None

        self._extra_store = MutableExtraStore()
        self._producer: Optional[ChartModelProducer] = None
        self._published: Optional[Tuple[Any, ChartRanges]] = None
        self._publish_lock = threading.Lock()

    # ========================================================================
    # CONFIGURATION (set, then update_bounds())
    # ========================================================================

    def set_chart(self, chart: Optional[Chart]) -> None:
        self.chart = chart

    def set_axis(self, position: AxisPosition, axis: Optional[Axis]) -> None:
        self.axis_manager.set_axis(position, axis)

    def set_model(self, model: Any) -> None:
        """Show `model` directly, without animation."""
        self.model = model

    @property
    def is_horizontal_scroll_enabled(self) -> bool:
        return self.measure_context.is_horizontal_scroll_enabled

    def set_horizontal_scroll_enabled(self, enabled: bool) -> None:
        self.measure_context.is_horizontal_scroll_enabled = enabled

    # ========================================================================
    # LAYOUT
    # ========================================================================

    def measure(self, width: float, height: float, padding: Optional[Insets] = None) -> Bounds:
        padding = padding or Insets()
        self.measure_context.canvas_bounds.set(0.0, 0.0, width, height)
        self.content_bounds.set(padding.left, padding.top, width - padding.right, height - padding.bottom)
        self.update_bounds()
        return self.content_bounds

    def compute_ranges(self, model: Any) -> ChartRanges:
        if model is None or self.chart is None:
            return ChartRanges.EMPTY
        # Fresh accumulator: animation frames call this from the animator thread.
        ranges = MutableChartRanges()
        self.chart.update_ranges(ranges, model)
        return ranges.to_immutable()

    def _take_published(self) -> None:
        with self._publish_lock:
            published, self._published = self._published, None
        if published is not None:
            self.model, ranges = published
            self.measure_context.update_chart_ranges(ranges)

    def update_bounds(self) -> Optional[Bounds]:
        """Re-run the insets negotiation. Call after changing chart, axes, model or size."""
        self._take_published()
        if self.chart is None or self.model is None:
            return None
        if self._producer is None:
            self.measure_context.update_chart_ranges(self.compute_ranges(self.model))
        chart_bounds = self.virtual_layout.set_bounds(self.measure_context, self.content_bounds, self.chart)
        self._update_max_scroll_distance()
        return chart_bounds

    def _update_max_scroll_distance(self) -> None:
        if self.chart is None or self.model is None:
            return
        content_width = self.chart.get_content_width(self.measure_context, self.model)
        self.scroll_handler.update_max_scroll_distance(content_width, self.chart.bounds.width)

    # ========================================================================
    # DRAWING
    # ========================================================================

    def draw(self) -> bool:
        """Draw one frame. Returns False if there is nothing to draw yet."""
        if self._published is not None:
            self.update_bounds()
        if self.chart is None or self.model is None:
            return False

        context = DrawContext(
            self.measure_context,
            horizontal_scroll=self.scroll_handler.current_scroll,
            segment_properties=self.chart.get_segment_properties(self.measure_context, self.model),
            chart_bounds=self.chart.bounds,
        )
        self.axis_manager.draw_behind_chart(context)
        self.chart.draw(context, self.model)
        self.axis_manager.draw_above_chart(context)
        self._update_max_scroll_distance()
        return True

    # ========================================================================
    # SCROLL / ZOOM
    # ========================================================================

    def handle_scroll(self, delta: float) -> float:
        if not self.is_horizontal_scroll_enabled:
            return 0.0
        return self.scroll_handler.handle_scroll(delta)

    def scroll_to(self, value: float) -> float:
        return self.scroll_handler.scroll_to(value)

    def handle_zoom(self, focus_x: float, zoom_change: float) -> bool:
        if not self.is_zoom_enabled or self.chart is None:
            return False
        accepted = self.zoom_handler.handle_zoom(self.scroll_handler, focus_x, self.chart.bounds.left, zoom_change)
        if accepted:
            self.measure_context.zoom = self.zoom_handler.zoom
            self._update_max_scroll_distance()
        return accepted

    # ========================================================================
    # PRODUCER
    # ========================================================================

    def attach_producer(self, producer: ChartModelProducer) -> None:
        if self.chart is None:
            raise RuntimeError("attach_producer() needs a chart; call set_chart() first")
        self.detach_producer()
        self._producer = producer
        chart = self.chart
        producer.register_for_updates(
            key=id(self),
            cancel_animation=self._cancel_animation,
            start_animation=self._start_animation,
            prepare_for_transformation=chart.prepare_for_transformation,
            transform=chart.transform,
            extra_store=self._extra_store,
            update_ranges=self.compute_ranges,
            on_model_created=self._on_model_created,
        )

    def detach_producer(self) -> None:
        if self._producer is None:
            return
        self._producer.unregister_from_updates(id(self))
        self._cancel_animation()
        self._producer = None

    def _cancel_animation(self) -> None:
        if self.animator is not None:
            self.animator.cancel_and_join()

    def _start_animation(self, transform_model) -> None:
        has_model = self.model is not None or self._published is not None
        if self.animator is not None and (has_model or self.run_initial_animation):
            self.animator.start(transform_model)
        else:
            transform_model(1.0)

    def _on_model_created(self, model: Any, ranges: ChartRanges) -> None:
        with self._publish_lock:
            self._published = (model, ranges)

    def close(self) -> None:
        self.detach_producer()
        if self.animator is not None:
            self.animator.shutdown()
