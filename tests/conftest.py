"""Pytest fixtures shared across the chart_plotter tests."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import matplotlib

matplotlib.use("Agg")

import pytest

from chart_plotter.context import DrawContext, MeasureContext
from chart_plotter.models import ChartRanges

CHAR_WIDTH_FACTOR = 0.5
LINE_HEIGHT_FACTOR = 1.2


class FakeRasterizer:
    """Records every primitive; text is measured as len(text) * font_size / 2 wide."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, tuple, dict]] = []
        self.clip_depth = 0
        self.layers = 0

    def _record(self, name: str, *args: Any, **kwargs: Any) -> None:
        self.calls.append((name, args, kwargs))

    def named(self, name: str) -> list[tuple[str, tuple, dict]]:
        return [call for call in self.calls if call[0] == name]

    def texts(self) -> list[str]:
        return [call[1][0] for call in self.named("draw_text")]

    def measure_text(self, text: str, font_size: float) -> tuple[float, float]:
        return len(text) * font_size * CHAR_WIDTH_FACTOR, font_size * LINE_HEIGHT_FACTOR

    def draw_text(self, text, center_x, center_y, **kwargs) -> None:
        self._record("draw_text", text, center_x, center_y, **kwargs)

    def draw_rect(self, left, top, right, bottom, **kwargs) -> None:
        self._record("draw_rect", left, top, right, bottom, **kwargs)

    def draw_line(self, x0, y0, x1, y1, **kwargs) -> None:
        self._record("draw_line", x0, y0, x1, y1, **kwargs)

    def draw_path(self, path, **kwargs) -> None:
        self._record("draw_path", path, **kwargs)

    def draw_slice(self, oval, start_angle, sweep_angle, **kwargs) -> None:
        self._record("draw_slice", oval.copy(), start_angle, sweep_angle, **kwargs)

    def push_clip(self, left, top, right, bottom) -> None:
        self.clip_depth += 1
        self._record("push_clip", left, top, right, bottom)

    def pop_clip(self) -> None:
        assert self.clip_depth > 0, "pop_clip() without push_clip()"
        self.clip_depth -= 1
        self._record("pop_clip")

    def save_layer(self) -> int:
        self.layers += 1
        self._record("save_layer")
        return self.layers - 1

    def restore_to_count(self, count: int) -> None:
        self.layers = count
        self._record("restore_to_count", count)


class ManualClock:
    """Frame clock whose sleep() advances time instantly."""

    def __init__(self) -> None:
        self.current = 0.0

    def now(self) -> float:
        return self.current

    def sleep(self, seconds: float) -> None:
        self.current += seconds


@pytest.fixture
def rasterizer() -> FakeRasterizer:
    """Return a fresh recording rasterizer."""

    return FakeRasterizer()


@pytest.fixture
def measure_context(rasterizer) -> MeasureContext:
    """Return an LTR, density 1 measure context on a 400 x 300 canvas."""

    context = MeasureContext(rasterizer)
    context.canvas_bounds.set(0, 0, 400, 300)
    context.update_chart_ranges(ChartRanges(min_x=0.0, max_x=10.0, min_y=0.0, max_y=100.0, x_step=1.0))
    return context


@pytest.fixture
def make_draw_context(measure_context):
    """Return a factory building a DrawContext on top of measure_context."""

    def factory(**kwargs: Any) -> DrawContext:
        return DrawContext(measure_context, **kwargs)

    return factory


@pytest.fixture
def manual_clock() -> ManualClock:
    """Return a clock that only moves when an animation sleeps."""

    return ManualClock()


def pytest_collection_modifyitems(items: Sequence[pytest.Item]) -> None:
    """Tests without an explicit speed marker are unit tests."""

    for item in items:
        if item.get_closest_marker("integration") is None and item.get_closest_marker("unit") is None:
            item.add_marker(pytest.mark.unit)
