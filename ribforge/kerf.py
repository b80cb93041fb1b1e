"""Kerf compensation.

The beam removes ``kerf`` of material centred on the cut path. Outlines are
pushed outward and interior cutouts pulled inward by ``kerf / 2`` so the
finished part comes out at nominal size.
"""

from __future__ import annotations

from dataclasses import replace
from typing import List, Sequence

import numpy as np

from .cutouts import CircleCutout, CutPrimitive, PolyCutout, RectCutout
from .geometry import Point, close_polygon, offset_polygon, polygon_area


def apply_kerf_to_outline(outline: Sequence[Point], kerf: float) -> Sequence[Point]:
    if kerf <= 0:
        return outline
    return offset_polygon(outline, kerf / 2)


def _collapsed(original: Sequence[Point], shrunk: Sequence[Point]) -> bool:
    """
    True when an inward offset went past the polygon's inradius.

    Past that point the miter vertices cross over and every edge flips
    direction, so a triangle comes back turned half round with the same
    winding and a larger area.
    """
    before = np.asarray(close_polygon(original), dtype=float)
    after = np.asarray(shrunk, dtype=float)
    if len(after) != len(before):
        return True
    edges_before = np.diff(before, axis=0)
    edges_after = np.diff(after, axis=0)
    if np.any(np.sum(edges_before * edges_after, axis=1) < 0):
        return True
    return abs(polygon_area(shrunk)) >= abs(polygon_area(original))


def _shrink(cutout: CutPrimitive, delta: float) -> CutPrimitive:
    if isinstance(cutout, RectCutout):
        return replace(
            cutout,
            x=cutout.x + delta,
            y=cutout.y + delta,
            w=max(0.0, cutout.w - 2 * delta),
            h=max(0.0, cutout.h - 2 * delta),
        )
    if isinstance(cutout, CircleCutout):
        return replace(cutout, r=max(0.0, cutout.r - delta))
    if isinstance(cutout, PolyCutout):
        shrunk = offset_polygon(cutout.points, -delta)
        if _collapsed(cutout.points, shrunk):
            return replace(cutout, points=())
        return replace(cutout, points=tuple(shrunk[:-1]))
    raise TypeError(f"Unknown cut primitive: {cutout!r}")


def _is_degenerate(cutout: CutPrimitive) -> bool:
    if isinstance(cutout, RectCutout):
        return cutout.w <= 0 or cutout.h <= 0
    if isinstance(cutout, CircleCutout):
        return cutout.r <= 0
    return len(cutout.points) < 3


def apply_kerf_to_cutouts(cutouts: Sequence[CutPrimitive], kerf: float) -> Sequence[CutPrimitive]:
    """Shrink every cutout by ``kerf / 2`` and drop the ones that vanish."""
    if not cutouts or kerf <= 0:
        return cutouts
    delta = kerf / 2
    shrunk: List[CutPrimitive] = [_shrink(c, delta) for c in cutouts]
    return [c for c in shrunk if not _is_degenerate(c)]


__all__ = ["apply_kerf_to_outline", "apply_kerf_to_cutouts"]
