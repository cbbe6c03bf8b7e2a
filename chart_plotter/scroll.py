"""
scroll.py — Horizontal scroll offset + zoom factor

ScrollHandler keeps   0 <= current_scroll <= max_scroll_distance   at all times.
ZoomHandler keeps     MIN_ZOOM <= zoom <= MAX_ZOOM; out-of-range requests are rejected.
"""

from __future__ import annotations

from .config import settings
from .errors import require
from .utils import clamp, setup_logger

logger = setup_logger(__name__)


class ScrollHandler:
    def __init__(self, max_scroll_distance: float = 0.0, current_scroll: float = 0.0):
        self._max_scroll_distance = max(0.0, float(max_scroll_distance))
        self._current_scroll = clamp(float(current_scroll), 0.0, self._max_scroll_distance)

    @property
    def max_scroll_distance(self) -> float:
        return self._max_scroll_distance

    @property
    def current_scroll(self) -> float:
        return self._current_scroll

    def set_max_scroll_distance(self, value: float) -> None:
        """Set the scrollable distance; the current offset is re-clamped to it."""
        self._max_scroll_distance = max(0.0, float(value))
        self._current_scroll = clamp(self._current_scroll, 0.0, self._max_scroll_distance)

    def update_max_scroll_distance(self, content_width: float, viewport_width: float) -> float:
        """Recompute the max distance after the content or viewport width changed."""
        self.set_max_scroll_distance(content_width - viewport_width)
        return self._max_scroll_distance

    def scroll_to(self, value: float) -> float:
        self._current_scroll = clamp(float(value), 0.0, self._max_scroll_distance)
        return self._current_scroll

    def handle_scroll(self, delta: float) -> float:
        """Move by `delta` pixels (positive = towards the end). Returns the distance actually moved."""
        previous = self._current_scroll
        self.scroll_to(previous + delta)
        consumed = self._current_scroll - previous
        if consumed != delta:
            logger.debug(f"Scroll clamped: requested {delta:.2f}px, moved {consumed:.2f}px")
        return consumed


class ZoomHandler:
    def __init__(
        self,
        zoom: float = 1.0,
        min_zoom: float = settings.MIN_ZOOM,
        max_zoom: float = settings.MAX_ZOOM,
    ):
        require(0 < min_zoom <= max_zoom, f"Invalid zoom range [{min_zoom}, {max_zoom}].")
        require(min_zoom <= zoom <= max_zoom, f"Initial zoom {zoom} is outside [{min_zoom}, {max_zoom}].")
        self.min_zoom = float(min_zoom)
        self.max_zoom = float(max_zoom)
        self._zoom = float(zoom)

    @property
    def zoom(self) -> float:
        return self._zoom

    def can_zoom(self, zoom_change: float) -> bool:
        return self.min_zoom <= self._zoom * zoom_change <= self.max_zoom

    def handle_zoom(self, scroll_handler: ScrollHandler, focus_x: float, chart_left: float, zoom_change: float) -> bool:
        """
        Multiply the zoom by zoom_change, keeping the content under focus_x in place.

        Returns False (nothing changed) if the new zoom would leave the valid range.
        The caller recomputes the max scroll distance afterwards, since the
        content width depends on the zoom.
        """
        if not self.can_zoom(zoom_change):
            logger.debug(f"Zoom rejected: {self._zoom} * {zoom_change} is outside [{self.min_zoom}, {self.max_zoom}]")
            return False

        focal_x = scroll_handler.current_scroll + focus_x - chart_left
        self._zoom *= zoom_change
        # Max distance is stale here; widen it so the adjusted offset survives until the caller recomputes it.
        target = scroll_handler.current_scroll + focal_x * zoom_change - focal_x
        scroll_handler.set_max_scroll_distance(max(scroll_handler.max_scroll_distance, target))
        scroll_handler.scroll_to(target)
        return True
