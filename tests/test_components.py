"""Unit tests for text placement, shapes and pie slice labels."""

from __future__ import annotations

import pytest

from chart_plotter.components import (
    HorizontalPosition,
    InsideSliceLabel,
    LineComponent,
    OutsideSliceLabel,
    Shape,
    ShapeComponent,
    Slice,
    TextComponent,
    VerticalPosition,
)
from chart_plotter.errors import ChartConfigurationError
from chart_plotter.geometry_common import Bounds

pytestmark = pytest.mark.unit


def test_text_size_includes_padding(measure_context) -> None:
    """Width and height are the measured text plus the padding."""

    text = TextComponent()
    assert text.get_width(measure_context, "hello") == pytest.approx(38.0)
    assert text.get_height(measure_context) == pytest.approx(18.4)
    assert text.get_width(measure_context, "hello", rotation_degrees=90) == pytest.approx(18.4)


def test_text_rect_positions_relative_to_the_anchor(measure_context) -> None:
    """START ends at the anchor in LTR and starts there in RTL; TOP sits above it."""

    text = TextComponent()
    rect = text.get_text_rect(measure_context, "hello", 100, 50, HorizontalPosition.START, VerticalPosition.TOP)
    assert rect.as_tuple() == pytest.approx((62.0, 31.6, 100.0, 50.0))

    measure_context.is_ltr = False
    rect = text.get_text_rect(measure_context, "hello", 100, 50, HorizontalPosition.START, VerticalPosition.BOTTOM)
    assert rect.as_tuple() == pytest.approx((100.0, 50.0, 138.0, 68.4))


def test_ellipsize_shortens_until_it_fits(measure_context) -> None:
    """Characters are dropped and an ellipsis appended until the padded text fits."""

    text = TextComponent()
    assert text.ellipsize(measure_context, "hello", 40.0) == "hello"
    assert text.ellipsize(measure_context, "hello", 30.0) == "he…"
    assert text.ellipsize(measure_context, "hello", 5.0) == ""


def test_draw_text_centers_on_its_rect(rasterizer, measure_context) -> None:
    """The rasterizer receives the rect center; a fully ellipsized text is skipped."""

    text = TextComponent()
    rect = text.draw_text(measure_context, "hi", 10, 10, HorizontalPosition.END, VerticalPosition.BOTTOM)
    _, args, kwargs = rasterizer.named("draw_text")[0]
    assert args == ("hi", rect.center_x, rect.center_y)
    assert kwargs["font_size"] == 12.0

    assert text.draw_text(measure_context, "hi", 10, 10, max_text_width=1.0) is None
    assert len(rasterizer.named("draw_text")) == 1


def test_oval_shape_draws_a_path_and_rectangles_draw_rects(rasterizer, measure_context) -> None:
    """Ovals go through draw_path, other shapes through draw_rect; empty boxes draw nothing."""

    ShapeComponent(shape=Shape.OVAL).draw(measure_context, 0, 0, 10, 20)
    ShapeComponent(shape=Shape.ROUNDED, corner_radius_dp=3).draw(measure_context, 0, 0, 10, 20)
    ShapeComponent().draw(measure_context, 5, 5, 5, 10)

    path = rasterizer.named("draw_path")[0][1][0]
    assert path.get_extents().bounds == pytest.approx((0.0, 0.0, 10.0, 20.0))
    assert rasterizer.named("draw_rect")[0][2]["corner_radius"] == 3.0
    assert len(rasterizer.calls) == 2


def test_line_component_fits_in_vertical(measure_context) -> None:
    """A vertical line fits only if its whole thickness is inside the box."""

    line = LineComponent(thickness_dp=2)
    box = Bounds(0, 0, 100, 100)
    assert line.fits_in_vertical(measure_context, 0, 100, 50, box)
    assert not line.fits_in_vertical(measure_context, 0, 100, 0.5, box)
    with pytest.raises(ChartConfigurationError):
        LineComponent(thickness_dp=-1)


def test_inside_label_sits_between_hole_and_edge(rasterizer, measure_context) -> None:
    """The label is centered at the mean of the hole and outer radii."""

    oval = Bounds().set_circle(100, 100, 80)
    InsideSliceLabel().draw(measure_context, Bounds(0, 0, 200, 200), oval, 0.0, 20.0, "x")
    _, args, _ = rasterizer.named("draw_text")[0]
    assert args[1] == pytest.approx(150.0)
    assert args[2] == pytest.approx(100.0)


def test_outside_label_draws_its_connector(rasterizer, measure_context) -> None:
    """The connector runs from the edge outwards, then the text is drawn past it."""

    oval = Bounds().set_circle(100, 100, 50)
    label = OutsideSliceLabel(line_component=LineComponent(), line_length_dp=10)
    label.draw(measure_context, Bounds(0, 0, 200, 200), oval, 0.0, 0.0, "x")

    _, line_args, _ = rasterizer.named("draw_line")[0]
    assert line_args == pytest.approx((150.0, 100.0, 160.0, 100.0))
    _, text_args, _ = rasterizer.named("draw_text")[0]
    assert text_args[1] > 160.0


def test_outside_label_claims_no_insets_when_it_fits(measure_context) -> None:
    """A label inside the content bounds needs no extra room."""

    from chart_plotter.insets import Insets

    insets = Insets()
    oval = Bounds().set_circle(100, 100, 20)
    OutsideSliceLabel().get_insets(measure_context, Bounds(0, 0, 200, 200), oval, 45.0, "x", insets)
    assert insets.largest_edge == 0.0


def test_offset_slice_moves_along_its_mid_angle(rasterizer, measure_context) -> None:
    """An exploded slice is translated by its offset along the mid angle."""

    oval = Bounds().set_circle(100, 100, 50)
    Slice("tab:red", offset_from_center_dp=10).draw(
        measure_context, Bounds(0, 0, 200, 200), oval, 60.0, 60.0, 0.0, None, None
    )
    drawn_oval = rasterizer.named("draw_slice")[0][1][0]
    assert drawn_oval.center_x == pytest.approx(100.0)
    assert drawn_oval.center_y == pytest.approx(110.0)
    assert oval.center_y == 100.0
