"""
geometry_common.py — Shared geometry helpers for chart_plotter

This file contains ONLY:
- small, dependency-light geometry helpers shared by:
  - pie.py / components.py (slice + label geometry)
  - axis modules / layout.py (bounds)
  - rasterizer.py (wedge angle normalization)

Canvas convention: x grows to the right, y grows DOWNWARD, angles are degrees
measured clockwise from the +x axis (screen convention).

Keep this file free of imports from other project modules to avoid cycles.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple
import math


FULL_DEGREES = 360.0
HALF_TURN_DEGREES = 180.0


# ============================================================================
# NUMBERS
# ============================================================================

def round_half_up(value: float) -> float:
    """Round to a whole pixel, halves away from the left (0.5 -> 1, -0.5 -> 0)."""
    return float(math.floor(value + 0.5))


def lerp(start: float, end: float, fraction: float) -> float:
    """Linear interpolation, exact at both fraction == 0 and fraction == 1."""
    return start * (1.0 - fraction) + end * fraction


# ============================================================================
# POINTS / RECTANGLES
# ============================================================================

@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass
class Bounds:
    """
    Mutable axis-aligned rectangle (left, top, right, bottom).

    Instances are reused as per-chart buffers (oval, axis bounds), so callers
    update them with set() rather than creating new ones every pass.
    """

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @property
    def width(self) -> float:
        return self.right - self.left

    @property
    def height(self) -> float:
        return self.bottom - self.top

    @property
    def center_x(self) -> float:
        return (self.left + self.right) / 2.0

    @property
    def center_y(self) -> float:
        return (self.top + self.bottom) / 2.0

    def set(self, left: float, top: float, right: float, bottom: float) -> "Bounds":
        self.left = float(left)
        self.top = float(top)
        self.right = float(right)
        self.bottom = float(bottom)
        return self

    def set_circle(self, center_x: float, center_y: float, radius: float) -> "Bounds":
        return self.set(center_x - radius, center_y - radius, center_x + radius, center_y + radius)

    def copy(self) -> "Bounds":
        return Bounds(self.left, self.top, self.right, self.bottom)

    def translate(self, dx: float, dy: float) -> "Bounds":
        self.left += dx
        self.right += dx
        self.top += dy
        self.bottom += dy
        return self

    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0

    def intersects(self, left: float, top: float, right: float, bottom: float) -> bool:
        return self.left < right and left < self.right and self.top < bottom and top < self.bottom

    def as_tuple(self) -> Tuple[float, float, float, float]:
        return (self.left, self.top, self.right, self.bottom)


# ============================================================================
# ANGLES / ARCS
# ============================================================================

def normalize_arc_angles(theta1: float, theta2: float) -> Tuple[float, float]:
    """
    Ensure theta2 >= theta1 by adding 360 if needed.
    """
    t1 = float(theta1)
    t2 = float(theta2)
    while t2 < t1:
        t2 += FULL_DEGREES
    return t1, t2


def normalize_wedge_angles(theta1: float, theta2: float) -> Tuple[float, float]:
    """
    Matplotlib's Wedge can be flaky when:
      - the sweep is ~0 (theta1 ~= theta2), or
      - the sweep is >= 360.

    We keep angles in a "safe" form:
      - ensure theta2 >= theta1 (like normalize_arc_angles)
      - clamp sweep to < 360 (keep it drawable as a single wedge)
      - avoid exact 0 sweep by nudging by a tiny epsilon
    """
    t1, t2 = normalize_arc_angles(theta1, theta2)

    if t2 - t1 >= FULL_DEGREES:
        t2 = t1 + 359.999

    if abs(t2 - t1) < 1e-9:
        t2 = t1 + 1e-3

    return float(t1), float(t2)


def point_on_circle(center_x: float, center_y: float, radius: float, angle_degrees: float) -> Point:
    t = math.radians(angle_degrees)
    return Point(center_x + radius * math.cos(t), center_y + radius * math.sin(t))


def rotated_extents(width: float, height: float, rotation_degrees: float) -> Tuple[float, float]:
    """Width/height of the axis-aligned box enclosing a (width x height) box rotated by rotation_degrees."""
    if rotation_degrees % HALF_TURN_DEGREES == 0:
        return width, height
    t = math.radians(rotation_degrees)
    c = abs(math.cos(t))
    s = abs(math.sin(t))
    return width * c + height * s, width * s + height * c
