"""
drawing_model.py — Animatable per-entity draw attributes + their interpolator

This file contains ONLY:
- SliceInfo / CartesianInfo (one entity's animatable attributes)
- DrawingModel + PieDrawingModel / CartesianDrawingModel
- interpolate_models(): pure (old, new, fraction) -> snapshot
- DrawingModelInterpolator: the IDLE / ARMED / INTERPOLATING / SETTLED state machine

Numeric fields are blended as  old * (1 - f) + new * f, so f == 0 gives old
exactly and f == 1 gives new exactly. Labels are not blended: they carry the old
value below the snap fraction and the new value from it on.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Hashable, List, Mapping, Optional, Tuple

from .config import settings
from .geometry_common import lerp
from .utils import clamp, setup_logger

logger = setup_logger(__name__)


# ============================================================================
# ENTITY INFO
# ============================================================================

@dataclass(frozen=True)
class SliceInfo:
    degrees: float
    label: Optional[str] = None
    slice_opacity: float = 1.0
    label_opacity: float = 1.0

    def neutral(self) -> "SliceInfo":
        """Grow-in / fade-out baseline: no sweep, fully transparent, same label."""
        return SliceInfo(degrees=0.0, label=self.label, slice_opacity=0.0, label_opacity=0.0)

    def interpolate(self, other: "SliceInfo", fraction: float, label_snap_fraction: float) -> "SliceInfo":
        return SliceInfo(
            degrees=lerp(self.degrees, other.degrees, fraction),
            label=other.label if fraction >= label_snap_fraction else self.label,
            slice_opacity=lerp(self.slice_opacity, other.slice_opacity, fraction),
            label_opacity=lerp(self.label_opacity, other.label_opacity, fraction),
        )


@dataclass(frozen=True)
class CartesianInfo:
    y: float
    opacity: float = 1.0

    def neutral(self) -> "CartesianInfo":
        return CartesianInfo(y=0.0, opacity=0.0)

    def interpolate(self, other: "CartesianInfo", fraction: float, label_snap_fraction: float) -> "CartesianInfo":
        return CartesianInfo(
            y=lerp(self.y, other.y, fraction),
            opacity=lerp(self.opacity, other.opacity, fraction),
        )


# ============================================================================
# MODELS
# ============================================================================

@dataclass(frozen=True)
class DrawingModel:
    """Per-series mappings of entity key -> info. Never mutated after creation."""

    series: Tuple[Mapping[Hashable, object], ...]

    def __len__(self) -> int:
        return len(self.series)


@dataclass(frozen=True)
class PieDrawingModel(DrawingModel):
    @classmethod
    def of(cls, slices: List[SliceInfo]) -> "PieDrawingModel":
        return cls(series=({index: info for index, info in enumerate(slices)},))

    @property
    def slices(self) -> List[SliceInfo]:
        if not self.series:
            return []
        by_index = self.series[0]
        return [by_index[index] for index in sorted(by_index)]


@dataclass(frozen=True)
class CartesianDrawingModel(DrawingModel):
    """series[i] maps x -> CartesianInfo for series i."""

    def info(self, series_index: int, x: float) -> Optional[CartesianInfo]:
        if not 0 <= series_index < len(self.series):
            return None
        return self.series[series_index].get(x)


def _merge_series(
    old: Mapping[Hashable, object],
    new: Mapping[Hashable, object],
    fraction: float,
    label_snap_fraction: float,
) -> Dict[Hashable, object]:
    merged: Dict[Hashable, object] = {}
    keys = list(new) + [key for key in old if key not in new]
    for key in keys:
        old_info = old.get(key)
        new_info = new.get(key)
        if old_info is None:
            old_info = new_info.neutral()
        if new_info is None:
            new_info = old_info.neutral()
        merged[key] = old_info.interpolate(new_info, fraction, label_snap_fraction)
    return merged


def interpolate_models(
    old: Optional[DrawingModel],
    new: Optional[DrawingModel],
    fraction: float,
    label_snap_fraction: float = settings.LABEL_SNAP_FRACTION,
) -> Optional[DrawingModel]:
    """
    Blend two snapshots. A missing side is replaced entity-by-entity by the
    neutral baseline of its partner; fraction >= 1 returns `new` itself.
    """
    if fraction >= 1.0:
        return new
    if old is None and new is None:
        return None
    template = new if new is not None else old
    old_series = old.series if old is not None else ()
    new_series = new.series if new is not None else ()

    series = []
    for index in range(max(len(old_series), len(new_series))):
        old_map = old_series[index] if index < len(old_series) else {}
        new_map = new_series[index] if index < len(new_series) else {}
        series.append(_merge_series(old_map, new_map, fraction, label_snap_fraction))
    return type(template)(series=tuple(series))


# ============================================================================
# INTERPOLATOR
# ============================================================================

class InterpolatorState(Enum):
    IDLE = "idle"
    ARMED = "armed"
    INTERPOLATING = "interpolating"
    SETTLED = "settled"


class DrawingModelInterpolator:
    """
    Holds the (old, new) pair of one transition and produces snapshots for
    animation fractions. Owns no timers; an animation driver calls transform().
    """

    def __init__(self, label_snap_fraction: float = settings.LABEL_SNAP_FRACTION):
        self.label_snap_fraction = float(label_snap_fraction)
        self._lock = threading.Lock()
        self._old: Optional[DrawingModel] = None
        self._new: Optional[DrawingModel] = None
        self._last_output: Optional[DrawingModel] = None
        self._state = InterpolatorState.IDLE

    @property
    def state(self) -> InterpolatorState:
        return self._state

    def set_models(self, old: Optional[DrawingModel], new: Optional[DrawingModel]) -> None:
        with self._lock:
            if self._state is InterpolatorState.INTERPOLATING:
                # Abandoned mid-flight: continue from what is on screen.
                logger.debug("Transition interrupted; restarting from the last displayed snapshot")
                old = self._last_output
            self._old = old
            self._new = new
            self._state = InterpolatorState.ARMED

    def transform(self, fraction: float) -> Optional[DrawingModel]:
        with self._lock:
            if self._state in (InterpolatorState.IDLE, InterpolatorState.SETTLED):
                self._state = InterpolatorState.IDLE
                return self._new

            fraction = clamp(fraction, 0.0, 1.0)
            if fraction >= 1.0:
                self._old = None
                self._last_output = self._new
                self._state = InterpolatorState.SETTLED
                return self._new

            result = interpolate_models(self._old, self._new, fraction, self.label_snap_fraction)
            self._last_output = result
            self._state = InterpolatorState.INTERPOLATING
            return result
