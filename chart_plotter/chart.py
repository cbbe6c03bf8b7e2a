"""
chart.py — What every chart (cartesian or pie) offers to the layout and animation

A chart is laid out like any other insets contributor (get_insets /
get_horizontal_insets / set_bounds), contributes to the chart ranges, draws one
model snapshot, and animates through its DrawingModelInterpolator:

    prepare_for_transformation(model, extra_store)   # arm old -> new
    transform(extra_store, fraction)                 # publish one snapshot

The current drawing model travels inside the model's extra store under
`drawing_model_key`.
"""

from __future__ import annotations

from typing import Any, Optional

from .context import MeasureContext
from .drawing_model import DrawingModel, DrawingModelInterpolator
from .geometry_common import Bounds
from .insets import Insets
from .models import ExtraStore, MutableChartRanges, MutableExtraStore
from .utils import setup_logger

logger = setup_logger(__name__)


class Chart:
    def __init__(self, drawing_model_interpolator: Optional[DrawingModelInterpolator] = None):
        self.bounds = Bounds()
        self.drawing_model_key = ExtraStore.Key(f"{type(self).__name__}.drawing_model")
        self.drawing_model_interpolator = drawing_model_interpolator or DrawingModelInterpolator()

    def set_bounds(self, left: float, top: float, right: float, bottom: float) -> None:
        self.bounds.set(left, top, right, bottom)

    # --- layout -------------------------------------------------------------

    def get_insets(self, context: MeasureContext, out_insets: Insets) -> None:
        pass

    def get_horizontal_insets(self, context: MeasureContext, available_height: float, out_insets: Insets) -> None:
        pass

    def update_ranges(self, ranges: MutableChartRanges, model: Any) -> None:
        pass

    def get_segment_properties(self, context: MeasureContext, model: Any):
        return None

    def get_content_width(self, context: MeasureContext, model: Any) -> float:
        """Total scrollable content width in pixels (the plot width when nothing scrolls)."""
        return self.bounds.width

    # --- drawing ------------------------------------------------------------

    def draw(self, context, model: Any) -> None:
        raise NotImplementedError

    def get_drawing_model(self, model: Any) -> Optional[DrawingModel]:
        return model.extra_store.get_or_none(self.drawing_model_key)

    # --- animation ----------------------------------------------------------

    def to_drawing_model(self, model: Any, old: Optional[DrawingModel]) -> DrawingModel:
        raise NotImplementedError

    def prepare_for_transformation(self, model: Any, extra_store: MutableExtraStore) -> None:
        old = extra_store.get_or_none(self.drawing_model_key)
        new = self.to_drawing_model(model, old) if model is not None else None
        self.drawing_model_interpolator.set_models(old, new)

    def transform(self, extra_store: MutableExtraStore, fraction: float) -> None:
        snapshot = self.drawing_model_interpolator.transform(fraction)
        if snapshot is None:
            extra_store.remove(self.drawing_model_key)
        else:
            extra_store[self.drawing_model_key] = snapshot
