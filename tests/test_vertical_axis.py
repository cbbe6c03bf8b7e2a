"""Unit tests for vertical axis label counts, label caching, width negotiation and drawing."""

from __future__ import annotations

import pytest

from chart_plotter.axis import AxisPosition, SizeConstraint, create_axis
from chart_plotter.formatters import DecimalFormatter, PercentageFormatter
from chart_plotter.insets import Insets
from chart_plotter.models import ChartRanges
from chart_plotter.vertical_axis import HorizontalLabelPosition, VerticalLabelPosition

pytestmark = pytest.mark.unit

# Default label: 12px font -> 14.4px line + 4px vertical padding.
LABEL_HEIGHT = 18.4


def test_label_count_is_the_largest_that_fits(measure_context) -> None:
    """Labels are stacked until the next one would overflow the available height."""

    axis = create_axis("start")
    assert axis.get_draw_label_count(measure_context, 100.0) == 5
    assert axis.get_draw_label_count(measure_context, 60.0) == 3
    assert axis.get_draw_label_count(measure_context, 10.0) == 0


def test_label_count_is_capped_by_max_label_count(measure_context) -> None:
    """max_label_count bounds the result; no label component means the cap itself."""

    assert create_axis("start", max_label_count=3).get_draw_label_count(measure_context, 1000.0) == 3
    assert create_axis("start", label=None, max_label_count=7).get_draw_label_count(measure_context, 1.0) == 7


@pytest.mark.parametrize("max_label_count", [1, 2, 3, 7])
def test_drawn_labels_never_exceed_max_label_count(rasterizer, measure_context, make_draw_context, max_label_count) -> None:
    """A tall axis draws exactly max_label_count labels, never one more."""

    measure_context.update_chart_ranges(ChartRanges(min_y=0.0, max_y=30.0))
    axis = create_axis("start", max_label_count=max_label_count, guideline=None)
    axis.set_bounds(0, 20, 40, 280)
    axis.draw_above_chart(make_draw_context())

    assert len(rasterizer.named("draw_text")) == max_label_count
    assert rasterizer.texts()[0] == "0"
    if max_label_count > 1:
        assert rasterizer.texts()[-1] == "30"


def test_drawn_label_count_is_the_largest_that_fits(rasterizer, make_draw_context) -> None:
    """Three labels fit in 60px (3 x 18.4), a fourth would not."""

    axis = create_axis("start", guideline=None)
    axis.set_bounds(0, 0, 40, 60)
    axis.draw_above_chart(make_draw_context())
    assert rasterizer.texts() == ["0", "50", "100"]


def test_labels_are_spread_over_the_y_range(measure_context) -> None:
    """label_count values are evenly spaced from min_y to max_y; one label sits at min_y."""

    axis = create_axis("start")
    assert axis.get_labels(measure_context, 5) == ["0", "25", "50", "75", "100"]
    assert axis.get_labels(measure_context, 1) == ["0"]
    assert axis.get_labels(measure_context, 0) == []


def test_labels_are_cached_until_the_ranges_change(measure_context) -> None:
    """The same count reuses the cached list; new ranges rebuild it."""

    axis = create_axis("start")
    first = axis.get_labels(measure_context, 3)
    assert axis.get_labels(measure_context, 3) is first

    measure_context.update_chart_ranges(ChartRanges(min_y=0.0, max_y=10.0))
    assert axis.get_labels(measure_context, 3) == ["0", "5", "10"]


def test_formatter_failure_gives_no_labels(measure_context) -> None:
    """A formatter that cannot handle a zero-length range yields an empty label set."""

    measure_context.update_chart_ranges(ChartRanges(min_y=3.0, max_y=3.0))
    axis = create_axis("start", value_formatter=PercentageFormatter())
    assert axis.get_labels(measure_context, 3) == []


def test_auto_width_is_widest_label_plus_tick_and_half_axis(measure_context) -> None:
    """Widest label "100": 18 + 8 padding, plus tick 4 and half the 1px axis line."""

    axis = create_axis("start", value_formatter=DecimalFormatter(0))
    insets = Insets()
    axis.get_horizontal_insets(measure_context, 100.0, insets)
    assert insets.left == pytest.approx(30.5)
    assert insets.right == 0.0


def test_start_axis_sits_on_the_right_in_rtl(measure_context) -> None:
    """In right-to-left layouts the start side is the right edge."""

    measure_context.is_ltr = False
    axis = create_axis("start", value_formatter=DecimalFormatter(0))
    insets = Insets()
    axis.get_horizontal_insets(measure_context, 100.0, insets)
    assert insets.left == 0.0
    assert insets.right == pytest.approx(30.5)


@pytest.mark.parametrize(
    ("constraint", "expected"),
    [
        (SizeConstraint.Exact(40), 40.0),
        (SizeConstraint.Fraction(0.25), 100.0),
        (SizeConstraint.TextWidth("0000"), 36.5),
        (SizeConstraint.Auto(min_dp=50), 50.0),
        (SizeConstraint.Auto(max_dp=20), 20.0),
    ],
)
def test_size_constraints(measure_context, constraint, expected) -> None:
    """Each constraint resolves against the label metrics or the 400px canvas."""

    axis = create_axis("end", size_constraint=constraint, value_formatter=DecimalFormatter(0))
    insets = Insets()
    axis.get_horizontal_insets(measure_context, 100.0, insets)
    assert insets.right == pytest.approx(expected)


def test_fraction_constraint_is_validated() -> None:
    """Fractions above one half are rejected."""

    with pytest.raises(ValueError):
        SizeConstraint.Fraction(0.6)


def test_inside_labels_take_no_width(measure_context) -> None:
    """Labels drawn inside the plot only reserve room for the tick and axis line."""

    axis = create_axis("start", horizontal_label_position=HorizontalLabelPosition.INSIDE)
    insets = Insets()
    axis.get_horizontal_insets(measure_context, 100.0, insets)
    assert insets.left == pytest.approx(4.5)


def test_vertical_insets_follow_the_label_position(measure_context) -> None:
    """Centered labels overhang by half a label; top labels by a whole one."""

    centered = Insets()
    create_axis("start").get_insets(measure_context, centered)
    assert centered.top == pytest.approx(LABEL_HEIGHT / 2 - 1.0)
    assert centered.bottom == pytest.approx(LABEL_HEIGHT / 2)

    top = Insets()
    create_axis("start", vertical_label_position=VerticalLabelPosition.TOP).get_insets(measure_context, top)
    assert top.top == pytest.approx(LABEL_HEIGHT - 1.0)
    assert top.bottom == pytest.approx(1.0)


def test_draw_above_chart_draws_a_tick_and_label_per_value(rasterizer, make_draw_context) -> None:
    """Five labels fit in 100px: five ticks and five labels, bottom to top."""

    axis = create_axis("start", guideline=None, value_formatter=DecimalFormatter(0))
    axis.set_bounds(0, 0, 40, 100)
    context = make_draw_context(chart_bounds=axis.bounds.copy().translate(40, 0))
    axis.draw_above_chart(context)

    assert rasterizer.texts() == ["0", "25", "50", "75", "100"]
    label_ys = [call[1][2] for call in rasterizer.named("draw_text")]
    assert label_ys == sorted(label_ys, reverse=True)
    assert len(rasterizer.named("draw_rect")) == 5


def test_zero_label_count_draws_nothing(rasterizer, make_draw_context) -> None:
    """An axis too short for one label draws neither ticks nor labels."""

    axis = create_axis("start", guideline=None)
    axis.set_bounds(0, 0, 40, 10)
    axis.draw_above_chart(make_draw_context())
    assert rasterizer.calls == []


def test_inside_labels_skip_restricted_areas(rasterizer, make_draw_context) -> None:
    """Inside labels overlapping another axis' bounds are not drawn."""

    axis = create_axis("start", horizontal_label_position=HorizontalLabelPosition.INSIDE, guideline=None)
    axis.set_bounds(0, 0, 5, 100)
    axis.set_restricted_bounds(create_axis("bottom").bounds.set(0, 95, 400, 120))
    axis.draw_above_chart(make_draw_context())

    assert "0" not in rasterizer.texts()
    assert "100" in rasterizer.texts()


def test_guidelines_are_drawn_behind_the_chart(rasterizer, make_draw_context) -> None:
    """One guideline per label value plus the axis line."""

    axis = create_axis("start")
    axis.set_bounds(0, 0, 40, 100)
    axis.draw_behind_chart(make_draw_context(chart_bounds=axis.bounds.copy().translate(40, 0)))
    # 5 guidelines + 1 axis line, all drawn as rectangles.
    assert len(rasterizer.named("draw_rect")) == 6


def test_axis_position_must_be_vertical() -> None:
    """A VerticalAxis cannot be built for a horizontal position."""

    from chart_plotter.errors import ChartConfigurationError
    from chart_plotter.vertical_axis import VerticalAxis

    with pytest.raises(ChartConfigurationError):
        VerticalAxis(AxisPosition.BOTTOM)
