"""
models.py — Data snapshots consumed by the charts

This file contains ONLY:
- Entry / ChartModel (cartesian data, per-series)
- PieEntry / PieModel (pie data)
- ExtraStore / MutableExtraStore (per-snapshot side data, e.g. drawing models)
- ChartRanges / MutableChartRanges (extrema accumulated during a layout pass)

Models are immutable once built; renderers only read them.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Hashable, Iterable, Mapping, Optional, Sequence, Tuple, Union
import math

from .errors import ChartConfigurationError
from .utils import setup_logger

logger = setup_logger(__name__)


# ============================================================================
# EXTRA STORE
# ============================================================================

class ExtraStore:
    """Read-only mapping of ExtraStore.Key -> value attached to a model snapshot."""

    class Key:
        __slots__ = ("name",)

        def __init__(self, name: str = ""):
            self.name = name

        def __repr__(self) -> str:
            return f"ExtraStore.Key({self.name!r})"

    def __init__(self, data: Optional[Mapping["ExtraStore.Key", Any]] = None):
        self._data: Dict["ExtraStore.Key", Any] = dict(data or {})

    def get(self, key: "ExtraStore.Key") -> Any:
        return self._data[key]

    def get_or_none(self, key: "ExtraStore.Key") -> Any:
        return self._data.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._data

    def __len__(self) -> int:
        return len(self._data)

    def to_immutable(self) -> "ExtraStore":
        return ExtraStore(self._data)


class MutableExtraStore(ExtraStore):
    def __setitem__(self, key: ExtraStore.Key, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: ExtraStore.Key) -> None:
        self._data.pop(key, None)

    def clear(self) -> None:
        self._data.clear()


EMPTY_EXTRA_STORE = ExtraStore()


# ============================================================================
# CARTESIAN DATA
# ============================================================================

@dataclass(frozen=True)
class Entry:
    x: float
    y: float
    metadata: Mapping[str, Any] = field(default_factory=dict, compare=False)


EntryLike = Union[Entry, Tuple[float, float], float, int, None]


def _coerce_entry(raw: EntryLike, index: int) -> Optional[Entry]:
    if raw is None:
        return None
    if isinstance(raw, Entry):
        return raw
    if isinstance(raw, (tuple, list)) and len(raw) == 2:
        return Entry(float(raw[0]), float(raw[1]))
    if isinstance(raw, (int, float)):
        return Entry(float(index), float(raw))
    raise TypeError(f"Cannot build an Entry from {raw!r}")


def _float_gcd(a: float, b: float, tolerance: float = 1e-6) -> float:
    a, b = abs(a), abs(b)
    while b > tolerance:
        a, b = b, math.fmod(a, b)
    return a


def compute_x_step(xs: Iterable[float]) -> float:
    """Greatest common step between sorted distinct x values (1.0 when undefined)."""
    ordered = sorted(set(xs))
    step = 0.0
    for prev, cur in zip(ordered, ordered[1:]):
        step = cur - prev if step == 0.0 else _float_gcd(step, cur - prev)
    return step if step > 0 else 1.0


@dataclass(frozen=True)
class ChartModel:
    """
    Per-series entries of a cartesian chart plus derived aggregates.
    Build with ChartModel.of(*series).
    """

    series: Tuple[Tuple[Entry, ...], ...]
    extra_store: ExtraStore = field(default=EMPTY_EXTRA_STORE, compare=False)
    min_x: float = field(init=False)
    max_x: float = field(init=False)
    min_y: float = field(init=False)
    max_y: float = field(init=False)
    x_step: float = field(init=False)

    def __post_init__(self) -> None:
        entries = [e for s in self.series for e in s]
        xs = [e.x for e in entries]
        ys = [e.y for e in entries]
        object.__setattr__(self, "min_x", min(xs) if xs else 0.0)
        object.__setattr__(self, "max_x", max(xs) if xs else 0.0)
        object.__setattr__(self, "min_y", min(ys) if ys else 0.0)
        object.__setattr__(self, "max_y", max(ys) if ys else 0.0)
        object.__setattr__(self, "x_step", compute_x_step(xs))

    @classmethod
    def of(cls, *series: Sequence[EntryLike]) -> "ChartModel":
        """
        Build a model from one or more series. Each item may be an Entry, an
        (x, y) pair, or a bare number (x = its index). None items are dropped.
        """
        built = []
        for s_idx, raw_series in enumerate(series):
            entries = []
            for i, raw in enumerate(raw_series):
                entry = _coerce_entry(raw, i)
                if entry is None:
                    logger.debug(f"Series {s_idx}: dropping missing entry at index {i}")
                    continue
                entries.append(entry)
            entries.sort(key=lambda e: e.x)
            built.append(tuple(entries))
        return cls(series=tuple(built))

    @property
    def is_empty(self) -> bool:
        return not any(self.series)

    @property
    def x_count(self) -> int:
        """Number of x cells between min_x and max_x (inclusive) at x_step spacing."""
        if self.is_empty:
            return 0
        return int(round((self.max_x - self.min_x) / self.x_step)) + 1

    def with_extra_store(self, extra_store: ExtraStore) -> "ChartModel":
        return ChartModel(series=self.series, extra_store=extra_store.to_immutable())


# ============================================================================
# PIE DATA
# ============================================================================

@dataclass(frozen=True)
class PieEntry:
    value: float
    label: Optional[str] = None


@dataclass(frozen=True)
class PieModel:
    entries: Tuple[PieEntry, ...]
    extra_store: ExtraStore = field(default=EMPTY_EXTRA_STORE, compare=False)
    sum_of_values: float = field(init=False)

    def __post_init__(self) -> None:
        for i, entry in enumerate(self.entries):
            if entry.value < 0 or not math.isfinite(entry.value):
                raise ChartConfigurationError(f"Pie entry {i} has an invalid value: {entry.value!r}")
        object.__setattr__(self, "sum_of_values", float(sum(e.value for e in self.entries)))

    @classmethod
    def of(cls, *values: Union[float, PieEntry]) -> "PieModel":
        entries = tuple(v if isinstance(v, PieEntry) else PieEntry(float(v)) for v in values)
        return cls(entries=entries)

    def entry_or_none(self, index: int) -> Optional[PieEntry]:
        if 0 <= index < len(self.entries):
            return self.entries[index]
        return None

    def with_extra_store(self, extra_store: ExtraStore) -> "PieModel":
        return PieModel(entries=self.entries, extra_store=extra_store.to_immutable())


# ============================================================================
# RANGES
# ============================================================================

@dataclass(frozen=True)
class ChartRanges:
    """Immutable extrema snapshot consumed by axes for label placement + formatting."""

    min_x: float = 0.0
    max_x: float = 0.0
    min_y: float = 0.0
    max_y: float = 0.0
    x_step: float = 1.0
    y_ranges: Mapping[Hashable, Tuple[float, float]] = field(default_factory=dict, compare=False)

    @property
    def y_length(self) -> float:
        return self.max_y - self.min_y

    def for_axis(self, position: Optional[Hashable]) -> "ChartRanges":
        """The same ranges with min_y/max_y replaced by the y range bound to `position`, if any."""
        if position is None or position not in self.y_ranges:
            return self
        min_y, max_y = self.y_ranges[position]
        return ChartRanges(self.min_x, self.max_x, min_y, max_y, self.x_step, self.y_ranges)


ChartRanges.EMPTY = ChartRanges()


class MutableChartRanges:
    """
    Accumulator merging per-chart extrema during one layout pass.
    reset() before each pass, to_immutable() when done.
    """

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self.min_x: Optional[float] = None
        self.max_x: Optional[float] = None
        self.min_y: Optional[float] = None
        self.max_y: Optional[float] = None
        self.x_step: Optional[float] = None
        self._y_ranges: Dict[Hashable, Tuple[float, float]] = {}

    @staticmethod
    def _min(current: Optional[float], value: Optional[float]) -> Optional[float]:
        if value is None:
            return current
        return value if current is None else min(current, value)

    @staticmethod
    def _max(current: Optional[float], value: Optional[float]) -> Optional[float]:
        if value is None:
            return current
        return value if current is None else max(current, value)

    def try_update(
        self,
        min_x: Optional[float] = None,
        max_x: Optional[float] = None,
        min_y: Optional[float] = None,
        max_y: Optional[float] = None,
        x_step: Optional[float] = None,
        axis_position: Optional[Hashable] = None,
    ) -> None:
        self.min_x = self._min(self.min_x, min_x)
        self.max_x = self._max(self.max_x, max_x)
        self.min_y = self._min(self.min_y, min_y)
        self.max_y = self._max(self.max_y, max_y)
        self.x_step = self._min(self.x_step, x_step)
        if axis_position is not None and min_y is not None and max_y is not None:
            lo, hi = self._y_ranges.get(axis_position, (min_y, max_y))
            self._y_ranges[axis_position] = (min(lo, min_y), max(hi, max_y))

    def to_immutable(self) -> ChartRanges:
        return ChartRanges(
            min_x=self.min_x if self.min_x is not None else 0.0,
            max_x=self.max_x if self.max_x is not None else 0.0,
            min_y=self.min_y if self.min_y is not None else 0.0,
            max_y=self.max_y if self.max_y is not None else 0.0,
            x_step=self.x_step if self.x_step else 1.0,
            y_ranges=dict(self._y_ranges),
        )
