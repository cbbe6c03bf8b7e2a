"""Unit tests for pie slice geometry, oval negotiation and drawing."""

from __future__ import annotations

import math

import numpy as np
import pytest

from chart_plotter.components import OutsideSliceLabel, Slice
from chart_plotter.drawing_model import PieDrawingModel, SliceInfo
from chart_plotter.errors import ChartConfigurationError
from chart_plotter.models import MutableExtraStore, PieEntry, PieModel
from chart_plotter.pie import InnerSize, OuterSize, PieChart

pytestmark = pytest.mark.unit


def _pie(**kwargs) -> PieChart:
    kwargs.setdefault("slices", [Slice("tab:blue"), Slice("tab:orange")])
    return PieChart(**kwargs)


def test_slice_angles_follow_values() -> None:
    """Sweeps are proportional to the values and start where the previous slice ended."""

    chart = _pie()
    angles = chart.get_slice_angles(PieModel.of(10, 20, 30, 40))
    starts = [start for start, _ in angles]
    sweeps = [sweep for _, sweep in angles]

    assert sweeps == pytest.approx([36.0, 72.0, 108.0, 144.0])
    assert starts == pytest.approx([0.0, 36.0, 108.0, 216.0])
    assert sum(sweeps) == pytest.approx(360.0)


@pytest.mark.parametrize(
    "values",
    [
        [5.0],
        [1e-6] * 1000,
        [1e-3, 1.0, 1e3, 1e6],
        [7, 11, 13, 17, 19, 23],
        list(range(1, 60)),
    ],
    ids=["single", "many-tiny", "mixed-magnitudes", "primes", "ascending"],
)
def test_sweeps_sum_to_a_full_circle(values) -> None:
    """Positive values always close the circle, and the last slice ends where the first began."""

    chart = _pie(start_angle=-90.0)
    angles = chart.get_slice_angles(PieModel.of(*values))

    assert len(angles) == len(values)
    assert all(sweep > 0 for _, sweep in angles)
    assert math.isclose(sum(sweep for _, sweep in angles), 360.0, abs_tol=1e-3)
    last_start, last_sweep = angles[-1]
    assert math.isclose(last_start + last_sweep, 270.0, abs_tol=1e-3)


@pytest.mark.parametrize("fraction", [0.1, 0.5, 0.9])
def test_mid_animation_sweeps_sum_to_a_full_circle(fraction) -> None:
    """Blending two complete pies, even with a different slice count, still covers 360 degrees."""

    chart = _pie()
    store = MutableExtraStore()
    chart.prepare_for_transformation(PieModel.of(1, 1), store)
    chart.transform(store, 1.0)

    model = PieModel.of(1, 2, 3)
    chart.prepare_for_transformation(model, store)
    chart.transform(store, fraction)
    slice_info = chart.get_drawing_model(model.with_extra_store(store)).slices

    assert len(slice_info) == 3
    sweeps = [sweep for _, sweep in chart.get_slice_angles(model, slice_info)]
    assert math.isclose(sum(sweeps), 360.0, abs_tol=1e-3)


def test_slice_angles_honor_start_angle_and_zero_sum() -> None:
    """The first slice starts at start_angle; an all-zero model has zero sweeps."""

    chart = _pie(start_angle=-90.0)
    assert chart.get_slice_angles(PieModel.of(1, 1))[0] == pytest.approx((-90.0, 180.0))
    assert chart.get_slice_angles(PieModel.of(0, 0)) == [(-90.0, 0.0), (-90.0, 0.0)]


def test_auto_oval_is_inscribed_and_rounded(measure_context) -> None:
    """Without labels the oval is the largest circle in the bounds, radius rounded half up."""

    chart = _pie()
    chart.set_bounds(0, 0, 201, 101)
    oval = chart.update_oval_bounds(measure_context, PieModel.of(1, 2))

    assert oval.width == oval.height == 102.0
    assert oval.center_x == pytest.approx(100.5)
    assert oval.center_y == pytest.approx(50.5)


def test_fixed_outer_size_caps_the_radius(measure_context) -> None:
    """A fixed diameter smaller than the bounds wins over the available room."""

    chart = _pie(outer_size=OuterSize.fixed(60))
    chart.set_bounds(0, 0, 200, 200)
    assert chart.update_oval_bounds(measure_context, PieModel.of(1)).width == 60.0


def test_outside_label_shrinks_the_oval(measure_context) -> None:
    """The label's overflow beyond the content bounds is taken off the radius."""

    chart = _pie(slices=[Slice("tab:blue", label=OutsideSliceLabel())])
    chart.set_bounds(0, 0, 200, 200)
    # One full slice: mid-angle 180, label "A" to the left of the oval.
    # Padded text width = 6 + 8 = 14; anchor x = 100 - (100 + 12) = -12; overflow = 26.
    oval = chart.update_oval_bounds(measure_context, PieModel.of(PieEntry(1.0, "A")))

    assert oval.width / 2.0 == 74.0
    assert chart.insets.left == pytest.approx(26.0)


def test_slice_offset_shrinks_the_oval(measure_context) -> None:
    """Exploded slices keep inside the bounds."""

    chart = _pie(slices=[Slice("tab:blue", offset_from_center_dp=10)])
    chart.set_bounds(0, 0, 100, 100)
    assert chart.update_oval_bounds(measure_context, PieModel.of(1, 1)).width == 80.0


def test_empty_slices_and_negative_spacing_are_rejected() -> None:
    """Configuration errors surface at construction."""

    with pytest.raises(ChartConfigurationError):
        PieChart(slices=[])
    with pytest.raises(ChartConfigurationError):
        _pie(spacing_dp=-1)
    with pytest.raises(ChartConfigurationError):
        InnerSize.fraction(1.0)


def test_inner_size_not_smaller_than_outer_raises_before_drawing(rasterizer, make_draw_context) -> None:
    """No primitive is emitted when the hole would cover the pie."""

    chart = _pie(inner_size=InnerSize.fixed(100))
    chart.set_bounds(0, 0, 100, 100)

    with pytest.raises(ChartConfigurationError, match="outer size must be greater"):
        chart.draw(make_draw_context(chart_bounds=chart.bounds), PieModel.of(1, 2))
    assert rasterizer.calls == []


@pytest.mark.parametrize(
    ("bounds", "slices"),
    [
        ((0, 0, 0, 0), [Slice("tab:blue")]),
        ((0, 0, 100, 100), [Slice("tab:blue", offset_from_center_dp=60)]),
    ],
    ids=["empty-bounds", "offset-eats-radius"],
)
def test_no_room_for_the_pie_draws_nothing(rasterizer, make_draw_context, bounds, slices) -> None:
    """A non-positive outer radius is degenerate geometry: the pass is skipped, not failed."""

    chart = _pie(slices=slices, inner_size=InnerSize.fraction(0.5))
    chart.set_bounds(*bounds)
    chart.draw(make_draw_context(chart_bounds=chart.bounds), PieModel.of(1, 2))

    assert chart.oval.width <= 0
    assert rasterizer.calls == []


def test_draw_emits_one_slice_per_entry_inside_a_layer(rasterizer, make_draw_context) -> None:
    """Spacing draws through a saved layer; every slice gets a cut-out."""

    chart = _pie(spacing_dp=4, inner_size=InnerSize.fraction(0.5))
    chart.set_bounds(0, 0, 100, 100)
    chart.draw(make_draw_context(chart_bounds=chart.bounds), PieModel.of(10, 20, 30, 40))

    slices = rasterizer.named("draw_slice")
    assert len(slices) == 4
    assert [call[1][2] for call in slices] == pytest.approx([36.0, 72.0, 108.0, 144.0])
    assert all(call[2]["cutout"] is not None for call in slices)
    assert [call[2]["color"] for call in slices] == ["tab:blue", "tab:orange", "tab:blue", "tab:orange"]
    assert rasterizer.named("save_layer") and rasterizer.named("restore_to_count")


def test_draw_without_spacing_or_hole_has_no_cutout(rasterizer, make_draw_context) -> None:
    """A plain pie draws slices without cut-outs and without a layer."""

    chart = _pie()
    chart.set_bounds(0, 0, 100, 100)
    chart.draw(make_draw_context(chart_bounds=chart.bounds), PieModel.of(1, 1))

    assert all(call[2]["cutout"] is None for call in rasterizer.named("draw_slice"))
    assert rasterizer.named("save_layer") == []


def test_spacing_segment_covers_the_slice_edge(measure_context) -> None:
    """The strip runs along the edge ray and is `spacing` wide."""

    chart = _pie()
    chart.set_bounds(0, 0, 100, 100)
    chart.update_oval_bounds(measure_context, PieModel.of(1))
    path = chart.spacing_segment(10.0, 90.0, 90.0, side=1)

    assert path.contains_point((50.0, 90.0))
    assert path.contains_point((53.0, 70.0))
    assert not path.contains_point((60.0, 70.0))
    assert not path.contains_point((50.0, 30.0))


def test_spacing_segment_of_a_wide_slice_starts_at_the_apex(measure_context) -> None:
    """Above a half-turn the strip starts on the bisector, (s/2)/sin(sweep/2) from the center."""

    chart = _pie()
    chart.set_bounds(0, 0, 100, 100)
    chart.update_oval_bounds(measure_context, PieModel.of(1))
    path = chart.spacing_segment(10.0, 0.0, 270.0, side=1)

    apex = path.vertices[0]
    distance = 5.0 / math.sin(math.radians(135.0))
    assert apex[0] == pytest.approx(50.0 + distance * math.cos(math.radians(135.0)))
    assert apex[1] == pytest.approx(50.0 + distance * math.sin(math.radians(135.0)))


def test_hole_is_a_circle_around_the_oval_center(measure_context) -> None:
    """Every vertex of the hole lies on the inner radius."""

    chart = _pie()
    chart.set_bounds(0, 0, 100, 100)
    chart.update_oval_bounds(measure_context, PieModel.of(1))
    path = chart.hole(20.0)

    distances = np.hypot(path.vertices[:, 0] - 50.0, path.vertices[:, 1] - 50.0)
    assert np.allclose(distances, 20.0)


def test_full_circle_has_no_spacing_wedges(measure_context) -> None:
    """A single 360 degree slice has no neighbours, so nothing is cut."""

    chart = _pie(spacing_dp=4)
    chart.set_bounds(0, 0, 100, 100)
    chart.update_oval_bounds(measure_context, PieModel.of(1))
    assert chart.build_cutout_path(measure_context, 0.0, 360.0, 0.0) is None
    assert chart.build_cutout_path(measure_context, 0.0, 90.0, 0.0) is not None


def test_drawing_model_pads_to_the_previous_visible_slices() -> None:
    """Removed slices stay in the drawing model with zero sweep so they can shrink away."""

    chart = _pie()
    old = PieDrawingModel.of([SliceInfo(90.0), SliceInfo(90.0), SliceInfo(180.0), SliceInfo(0.0)])
    new = chart.to_drawing_model(PieModel.of(1, 3), old)

    assert [info.degrees for info in new.slices] == pytest.approx([90.0, 270.0, 0.0])
    assert new.slices[2].label is None
    assert [info.label for info in new.slices[:2]] == ["1", "3"]


def test_draw_uses_drawing_model_sweeps(rasterizer, make_draw_context) -> None:
    """While animating, sweeps and opacities come from the drawing model snapshot."""

    chart = _pie()
    chart.set_bounds(0, 0, 100, 100)
    model = PieModel.of(1, 1)
    store = MutableExtraStore()
    chart.prepare_for_transformation(model, store)
    chart.transform(store, 0.5)
    chart.draw(make_draw_context(chart_bounds=chart.bounds), model.with_extra_store(store))

    slices = rasterizer.named("draw_slice")
    assert [call[1][2] for call in slices] == pytest.approx([90.0, 90.0])
    assert [call[2]["alpha"] for call in slices] == pytest.approx([0.5, 0.5])