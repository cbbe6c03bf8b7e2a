"""
chart_plotter — layout + drawing core for cartesian and pie charts

Typical use:

    from chart_plotter import ChartPlotter, ColumnChart, ChartModel, MatplotlibRasterizer, start_axis

    rasterizer = MatplotlibRasterizer.create(400, 300)
    plotter = ChartPlotter(rasterizer, ColumnChart())
    plotter.set_axis(AxisPosition.START, start_axis())
    plotter.set_model(ChartModel.of([1, 4, 2]))
    plotter.measure(400, 300)
    plotter.draw()
"""

from .animation import AnimationTask, ChartAnimator
from .axis import AxisPosition, SizeConstraint, bottom_axis, create_axis, end_axis, start_axis, top_axis
from .cartesian import ColumnChart, LineChart, LineSpec
from .components import (
    InsideSliceLabel,
    LineComponent,
    OutsideSliceLabel,
    Shape,
    ShapeComponent,
    Slice,
    TextComponent,
)
from .errors import ChartConfigurationError, UnknownAxisPositionError
from .formatters import DecimalFormatter, PercentageFormatter
from .insets import Insets
from .models import ChartModel, Entry, PieEntry, PieModel
from .pie import InnerSize, OuterSize, PieChart
from .plotter import ChartPlotter
from .producer import ChartModelProducer
from .rasterizer import MatplotlibRasterizer
