"""
Cut primitives: the closed shapes removed from a part's interior.

``CutPrimitive`` is a tagged union of three frozen records. Consumers
dispatch with ``isinstance``; every primitive carries a stable ``id`` so
layouts and exports can refer back to the feature that produced it.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Optional, Tuple, Union

from .geometry import Bounds, Point, bounds, rotate_points_90, translate_points


@dataclass(frozen=True)
class RectCutout:
    id: str
    x: float
    y: float
    w: float
    h: float

    def bounds(self) -> Bounds:
        return Bounds(self.x, self.y, self.x + self.w, self.y + self.h)

    def translated(self, dx: float, dy: float) -> "RectCutout":
        return replace(self, x=self.x + dx, y=self.y + dy)

    def rotated_90(self, w0: float) -> "RectCutout":
        corners = [
            (self.x, self.y),
            (self.x + self.w, self.y),
            (self.x + self.w, self.y + self.h),
            (self.x, self.y + self.h),
        ]
        b = bounds(rotate_points_90(corners, w0))
        return replace(self, x=b.min_x, y=b.min_y, w=b.width, h=b.height)


@dataclass(frozen=True)
class CircleCutout:
    id: str
    cx: float
    cy: float
    r: float

    def bounds(self) -> Bounds:
        return Bounds(self.cx - self.r, self.cy - self.r, self.cx + self.r, self.cy + self.r)

    def translated(self, dx: float, dy: float) -> "CircleCutout":
        return replace(self, cx=self.cx + dx, cy=self.cy + dy)

    def rotated_90(self, w0: float) -> "CircleCutout":
        return replace(self, cx=self.cy, cy=w0 - self.cx)


@dataclass(frozen=True)
class PolyCutout:
    """Open vertex list; the cut implicitly closes it. Corners optionally rounded."""

    id: str
    points: Tuple[Point, ...]
    corner_radius: Optional[float] = None

    def bounds(self) -> Bounds:
        return bounds(self.points)

    def translated(self, dx: float, dy: float) -> "PolyCutout":
        return replace(self, points=tuple(translate_points(self.points, dx, dy)))

    def rotated_90(self, w0: float) -> "PolyCutout":
        return replace(self, points=tuple(rotate_points_90(self.points, w0)))


CutPrimitive = Union[RectCutout, CircleCutout, PolyCutout]


__all__ = ["RectCutout", "CircleCutout", "PolyCutout", "CutPrimitive"]
