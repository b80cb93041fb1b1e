"""
Planar polygon utilities shared by the generator, nesting engine and exporters.

Polygons are plain lists of ``(x, y)`` float tuples. A polygon is *closed*
when its first point is exactly equal to its last point. Signed area follows
the shoelace convention: positive means counter-clockwise.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

Point = Tuple[float, float]
Polygon = List[Point]

PARALLEL_EPS = 1e-9


@dataclass(frozen=True)
class Bounds:
    """Axis-aligned bounding box."""

    min_x: float
    min_y: float
    max_x: float
    max_y: float

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y

    def union(self, other: "Bounds") -> "Bounds":
        return Bounds(
            min(self.min_x, other.min_x),
            min(self.min_y, other.min_y),
            max(self.max_x, other.max_x),
            max(self.max_y, other.max_y),
        )


def lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def bounds(points: Iterable[Point]) -> Bounds:
    """Bounding box of a point set; an empty set yields a zero box."""
    pts = list(points)
    if not pts:
        return Bounds(0.0, 0.0, 0.0, 0.0)
    xs = [p[0] for p in pts]
    ys = [p[1] for p in pts]
    return Bounds(min(xs), min(ys), max(xs), max(ys))


def close_polygon(points: Sequence[Point]) -> Polygon:
    """Return a copy whose last point equals the first (append if needed)."""
    pts = list(points)
    if len(pts) < 3:
        return pts
    if pts[0] == pts[-1]:
        return pts
    return pts + [pts[0]]


def polygon_area(points: Sequence[Point]) -> float:
    """Signed shoelace area. Open polygons are treated as implicitly closed."""
    closed = close_polygon(points)
    if len(closed) < 4:
        return 0.0
    arr = np.asarray(closed, dtype=float)
    x, y = arr[:, 0], arr[:, 1]
    return float(0.5 * np.sum(x[:-1] * y[1:] - x[1:] * y[:-1]))


def is_clockwise(points: Sequence[Point]) -> bool:
    return polygon_area(points) < 0


def ensure_clockwise(points: Sequence[Point]) -> Polygon:
    """Closed, clockwise copy of ``points``."""
    closed = close_polygon(points)
    if polygon_area(closed) > 0:
        return closed[::-1]
    return closed


def point_in_polygon(p: Point, poly: Sequence[Point]) -> bool:
    """Ray-casting parity test. Works with open or closed polygons."""
    px, py = p
    inside = False
    n = len(poly)
    j = n - 1
    for i in range(n):
        ax, ay = poly[i]
        bx, by = poly[j]
        if (ay > py) != (by > py):
            x_cross = (bx - ax) * (py - ay) / (by - ay + 1e-12) + ax
            if px < x_cross:
                inside = not inside
        j = i
    return inside


def all_points_inside(points: Iterable[Point], outline: Sequence[Point]) -> bool:
    return all(point_in_polygon(p, outline) for p in points)


def y_extrema_at_x_or_none(poly: Sequence[Point], x: float) -> Optional[Tuple[float, float]]:
    """
    Top and bottom crossing of the vertical line ``x`` with the polygon edges.

    Returns ``(y_top, y_bottom)`` or ``None`` when no edge reaches ``x``.
    Vertical edges lying on the line contribute both endpoints.
    """
    ys: List[float] = []
    for (ax, ay), (bx, by) in zip(poly[:-1], poly[1:]):
        if x < min(ax, bx) or x > max(ax, bx):
            continue
        if ax == bx:
            if ax == x:
                ys.extend((ay, by))
            continue
        t = (x - ax) / (bx - ax)
        if t < 0 or t > 1:
            continue
        ys.append(ay + t * (by - ay))

    if not ys:
        return None
    return max(ys), min(ys)


def y_extrema_at_x(poly: Sequence[Point], x: float) -> Tuple[float, float]:
    """Like :func:`y_extrema_at_x_or_none` but reports ``(0.0, 0.0)`` for no data."""
    found = y_extrema_at_x_or_none(poly, x)
    return found if found is not None else (0.0, 0.0)


def centroid(points: Sequence[Point]) -> Point:
    """Vertex average (not the area centroid)."""
    arr = np.asarray(points, dtype=float)
    cx, cy = arr.mean(axis=0)
    return float(cx), float(cy)


def inset_toward_centroid(
    points: Sequence[Point], inset: float, collapse_limit: float = 0.45
) -> Optional[Polygon]:
    """
    Move every vertex toward the vertex centroid by ``inset``.

    The move is capped at ``collapse_limit`` of each vertex's distance so the
    shape never inverts. Returns ``None`` for degenerate input.
    """
    if len(points) < 3:
        return None
    cx, cy = centroid(points)
    out: Polygon = []
    for px, py in points:
        vx, vy = cx - px, cy - py
        dist = float(np.hypot(vx, vy))
        if dist <= 1e-6:
            return None
        d = min(inset, dist * collapse_limit)
        out.append((px + vx / dist * d, py + vy / dist * d))
    return out


def translate_points(points: Iterable[Point], dx: float, dy: float) -> Polygon:
    return [(x + dx, y + dy) for x, y in points]


def rotate_points_90(points: Iterable[Point], w0: float) -> Polygon:
    """Quarter turn that keeps a ``[0, w0] x [0, h0]`` box in the positive quadrant."""
    return [(y, w0 - x) for x, y in points]


def unrotate_points_90(points: Iterable[Point], w0: float) -> Polygon:
    """Inverse of :func:`rotate_points_90` for the same pre-rotation width."""
    return [(w0 - y, x) for x, y in points]


def _unit_left_normals(a: np.ndarray, b: np.ndarray) -> np.ndarray:
    d = b - a
    length = np.hypot(d[:, 0], d[:, 1])
    length = np.where(length == 0.0, 1.0, length)
    return np.column_stack((-d[:, 1] / length, d[:, 0] / length))


def offset_polygon(poly: Sequence[Point], delta: float) -> Polygon:
    """
    Miter-join offset of a simple polygon.

    Positive ``delta`` grows the polygon and negative ``delta`` shrinks it,
    whatever the winding. Consecutive offset edges are intersected to find
    each new vertex; nearly parallel edges fall back to the averaged normal.
    The result is always closed.
    """
    closed = close_polygon(poly)
    if len(closed) < 4:
        return list(poly)

    pts = np.asarray(closed[:-1], dtype=float)
    # Left normals point inward on counter-clockwise polygons.
    d = -delta if polygon_area(closed) > 0 else delta

    prev_pts = np.roll(pts, 1, axis=0)
    next_pts = np.roll(pts, -1, axis=0)
    n1 = _unit_left_normals(prev_pts, pts)
    n2 = _unit_left_normals(pts, next_pts)

    a1 = prev_pts + n1 * d
    b1 = pts + n1 * d
    a2 = pts + n2 * d
    b2 = next_pts + n2 * d

    da = b1 - a1
    db = b2 - a2
    denom = da[:, 0] * db[:, 1] - da[:, 1] * db[:, 0]
    parallel = np.abs(denom) < PARALLEL_EPS
    safe_denom = np.where(parallel, 1.0, denom)
    rel = a2 - a1
    t = (rel[:, 0] * db[:, 1] - rel[:, 1] * db[:, 0]) / safe_denom

    miter = a1 + da * t[:, None]
    fallback = pts + (n1 + n2) * 0.5 * d
    out = np.where(parallel[:, None], fallback, miter)

    result = [(float(x), float(y)) for x, y in out]
    result.append(result[0])
    return result


def corner_trims(points: Sequence[Point], radius: float) -> List[Tuple[Point, Point, Point]]:
    """
    For each vertex of a (cyclic) polygon, the entry point, the vertex and the
    exit point of a rounded corner of ``radius``.

    The trim along each edge is capped at half the edge length so adjacent
    corners never overlap.
    """
    pts = list(points)
    if len(pts) >= 2 and pts[0] == pts[-1]:
        pts = pts[:-1]
    n = len(pts)
    trims = []
    for i in range(n):
        vx, vy = pts[i]
        px, py = pts[i - 1]
        nx, ny = pts[(i + 1) % n]
        len_in = float(np.hypot(px - vx, py - vy))
        len_out = float(np.hypot(nx - vx, ny - vy))
        if len_in == 0.0 or len_out == 0.0:
            trims.append(((vx, vy), (vx, vy), (vx, vy)))
            continue
        r = min(radius, 0.5 * len_in, 0.5 * len_out)
        entry = (vx + (px - vx) / len_in * r, vy + (py - vy) / len_in * r)
        exit_ = (vx + (nx - vx) / len_out * r, vy + (ny - vy) / len_out * r)
        trims.append((entry, (vx, vy), exit_))
    return trims


def round_corners(points: Sequence[Point], radius: float, segments: int = 6) -> Polygon:
    """Flatten a polygon with quadratic-Bezier rounded corners into a closed point list."""
    if radius <= 0:
        return close_polygon(points)

    t = np.linspace(0.0, 1.0, max(2, segments + 1))
    out: Polygon = []
    for (ax, ay), (vx, vy), (bx, by) in corner_trims(points, radius):
        xs = (1 - t) ** 2 * ax + 2 * (1 - t) * t * vx + t ** 2 * bx
        ys = (1 - t) ** 2 * ay + 2 * (1 - t) * t * vy + t ** 2 * by
        out.extend((float(x), float(y)) for x, y in zip(xs, ys))
    return close_polygon(out)


__all__ = [
    "Point",
    "Polygon",
    "Bounds",
    "lerp",
    "clamp",
    "bounds",
    "close_polygon",
    "polygon_area",
    "is_clockwise",
    "ensure_clockwise",
    "point_in_polygon",
    "all_points_inside",
    "y_extrema_at_x",
    "y_extrema_at_x_or_none",
    "centroid",
    "inset_toward_centroid",
    "translate_points",
    "rotate_points_90",
    "unrotate_points_90",
    "offset_polygon",
    "corner_trims",
    "round_corners",
]
