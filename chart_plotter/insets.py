"""
insets.py — Four-sided padding values used by the layout negotiation

Axes, charts and pie slice labels all describe the room they need as Insets.
Several contributors are merged with a "largest wins" policy per side.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass
class Insets:
    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @property
    def horizontal(self) -> float:
        return self.left + self.right

    @property
    def vertical(self) -> float:
        return self.top + self.bottom

    @property
    def largest_edge(self) -> float:
        return max(self.left, self.top, self.right, self.bottom)

    def set(
        self,
        left: Optional[float] = None,
        top: Optional[float] = None,
        right: Optional[float] = None,
        bottom: Optional[float] = None,
    ) -> "Insets":
        """Overwrite the given sides; sides passed as None keep their value."""
        if left is not None:
            self.left = float(left)
        if top is not None:
            self.top = float(top)
        if right is not None:
            self.right = float(right)
        if bottom is not None:
            self.bottom = float(bottom)
        return self

    def set_horizontal(self, value: float) -> "Insets":
        return self.set(left=value, right=value)

    def set_vertical(self, value: float) -> "Insets":
        return self.set(top=value, bottom=value)

    def set_values_if_greater(
        self,
        left: float = 0.0,
        top: float = 0.0,
        right: float = 0.0,
        bottom: float = 0.0,
    ) -> "Insets":
        self.left = max(self.left, float(left))
        self.top = max(self.top, float(top))
        self.right = max(self.right, float(right))
        self.bottom = max(self.bottom, float(bottom))
        return self

    def merge_largest(self, other: "Insets") -> "Insets":
        return self.set_values_if_greater(other.left, other.top, other.right, other.bottom)

    def clear(self) -> "Insets":
        self.left = self.top = self.right = self.bottom = 0.0
        return self

    def copy(self) -> "Insets":
        return Insets(self.left, self.top, self.right, self.bottom)
