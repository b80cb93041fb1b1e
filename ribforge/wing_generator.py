"""
Rib generation for a straight-tapered, swept wing.

``WingGenerator`` turns a validated ``WingSpec`` into one flat rib per
half-span station: the airfoil scaled to the local chord, open spar notches
widened for the spar's planform angle, and optional lightening holes fitted
inside the rib perimeter with a safety clearance.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

from config import config
from .airfoil_factory import AirfoilFactory
from .cutouts import CircleCutout, CutPrimitive, PolyCutout, RectCutout
from .geometry import (
    Point,
    Polygon,
    all_points_inside,
    clamp,
    inset_toward_centroid,
    lerp,
    point_in_polygon,
    y_extrema_at_x_or_none,
)
from .spec import SparSpec, WingSpec, validate_spec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Rib:
    """One flat rib at a spanwise station."""

    id: str
    station_y: float          # Distance from centerline along the half-span
    chord: float              # Local chord length
    outline: Tuple[Point, ...]
    cutouts: Tuple[CutPrimitive, ...]


@dataclass(frozen=True)
class WingArtifact:
    """Generation output: the WingSpec snapshot and its ribs, root first."""

    spec: WingSpec
    ribs: Tuple[Rib, ...]


def rib_count(spec: WingSpec) -> int:
    return max(2, int(math.floor(spec.rib_count_per_half)))


def spar_planform_angle(spec: WingSpec, x_frac: float) -> float:
    """
    Planform angle (radians) of the spar line at chord fraction ``x_frac``.

    The spar runs through the same chord fraction at every station, so its
    chordwise position is ``x_le(y) + x_frac * chord(y)``. With linear sweep
    and linear taper the slope is constant along the span.
    """
    half = spec.half_span
    d_xle_dy = spec.sweep_le / half
    d_chord_dy = (spec.tip_chord - spec.root_chord) / half
    return math.atan(d_xle_dy + x_frac * d_chord_dy)


def notch_widen_factor(angle: float) -> float:
    """Slot growth for a square stick crossing the rib plane at ``angle``."""
    return 1.0 / max(config.tuning.notch_cos_floor, math.cos(angle))


def notch_size(spec: WingSpec, spar: SparSpec) -> float:
    """Square notch side for ``spar``, constant across stations."""
    base = spar.stock_size + spec.slot_clearance
    return base * notch_widen_factor(spar_planform_angle(spec, spar.x_frac))


def equilateral_triangle(cx: float, cy: float, r: float, rotation: float) -> Polygon:
    """Vertices on a circle of radius ``r``."""
    return [
        (cx + math.cos(rotation + 2 * math.pi * i / 3) * r,
         cy + math.sin(rotation + 2 * math.pi * i / 3) * r)
        for i in range(3)
    ]


def circle_samples(cx: float, cy: float, r: float, n: int) -> Polygon:
    return [
        (cx + math.cos(2 * math.pi * i / n) * r, cy + math.sin(2 * math.pi * i / n) * r)
        for i in range(n)
    ]


class WingGenerator:
    """Generates flat rib geometry for one half-wing."""

    def __init__(self, spec: WingSpec, factory: Optional[AirfoilFactory] = None):
        validate_spec(spec)
        self.spec = spec
        self.factory = factory if factory is not None else AirfoilFactory()
        self.tuning = config.tuning

    @property
    def inset_margin(self) -> float:
        """Clearance kept between a lightening hole and the rib perimeter."""
        spec = self.spec
        return max(
            spec.kerf,
            spec.material_thickness * self.tuning.inset_thickness_frac,
            self.tuning.inset_floor,
        )

    def _compute_stations(self) -> List[Tuple[float, float]]:
        """(station_y, chord) pairs from root to tip."""
        n = rib_count(self.spec)
        stations = []
        for i in range(n):
            t = i / (n - 1)
            stations.append((t * self.spec.half_span, lerp(self.spec.root_chord, self.spec.tip_chord, t)))
        return stations

    def _spar_notches(self, outline: Polygon, chord: float) -> List[CutPrimitive]:
        notches: List[CutPrimitive] = []
        for k, spar in enumerate(self.spec.spars):
            cx = spar.x_frac * chord
            size = notch_size(self.spec, spar)

            extrema = y_extrema_at_x_or_none(outline, cx)
            if extrema is None:
                logger.debug(f"Spar {k}: no outline crossing at x={cx:.3f}, notch skipped")
                continue
            y_top, y_bottom = extrema

            if spar.edge in ("top", "both"):
                notches.append(RectCutout(f"notch-top-{k}", cx - size / 2, y_top - size, size, size))
            if spar.edge in ("bottom", "both"):
                notches.append(RectCutout(f"notch-bottom-{k}", cx - size / 2, y_bottom, size, size))
        return notches

    def _fit_triangle(
        self, outline: Polygon, cx: float, cy: float, size: float, rotation: float
    ) -> Optional[Polygon]:
        """
        Shrink a triangle until, inset toward its centroid by the clearance
        margin, every vertex lies inside the outline.
        """
        if not point_in_polygon((cx, cy), outline):
            return None

        r = size
        for _ in range(self.tuning.hole_fit_attempts):
            tri = inset_toward_centroid(
                equilateral_triangle(cx, cy, r, rotation),
                self.inset_margin,
                self.tuning.hole_inset_collapse,
            )
            if tri is not None and all_points_inside(tri, outline):
                return tri
            r *= self.tuning.hole_shrink
            if r < size * self.tuning.hole_min_scale:
                break
        return None

    def _fit_circle(self, outline: Polygon, cx: float, cy: float, size: float) -> Optional[float]:
        """Largest tried radius whose clearance ring stays inside the outline."""
        if not point_in_polygon((cx, cy), outline):
            return None

        r = size
        for _ in range(self.tuning.hole_fit_attempts):
            ring = circle_samples(cx, cy, r + self.inset_margin, self.tuning.hole_circle_samples)
            if all_points_inside(ring, outline):
                return r
            r *= self.tuning.hole_shrink
            if r < size * self.tuning.hole_min_scale:
                break
        return None

    def _lightening_holes(self, outline: Polygon, chord: float) -> List[CutPrimitive]:
        lh = self.spec.rib_features.lightening_holes
        if not lh.enabled or lh.count <= 0:
            return []

        tuning = self.tuning
        size = clamp(lh.radius_frac, *tuning.hole_radius_frac_range) * chord
        x0 = clamp(lh.x_start_frac, *tuning.hole_x_frac_range) * chord
        x1 = clamp(lh.x_end_frac, *tuning.hole_x_frac_range) * chord
        base_y = lh.y_offset_frac * chord
        stagger = size * tuning.hole_stagger
        corner = clamp(lh.corner_frac, *tuning.hole_corner_frac_range) * size
        corner_radius = min(corner, size * tuning.hole_corner_cap) if corner > 0 else None

        holes: List[CutPrimitive] = []
        for k in range(lh.count):
            u = 0.5 if lh.count == 1 else k / (lh.count - 1)
            cx = lerp(x0, x1, u)
            cy = base_y + (stagger if k % 2 == 0 else -stagger)

            if lh.shape == "circle":
                r = self._fit_circle(outline, cx, cy, size)
                if r is not None:
                    holes.append(CircleCutout(f"lh-circle-{k}", cx, cy, r))
                    continue
            else:
                # Alternate apex up / apex down.
                rotation = 0.0 if k % 2 == 0 else math.pi
                tri = self._fit_triangle(outline, cx, cy, size, rotation)
                if tri is not None:
                    holes.append(PolyCutout(f"lh-tri-{k}", tuple(tri), corner_radius))
                    continue
            logger.debug(f"Lightening hole {k} at x={cx:.2f} does not fit, omitted")
        return holes

    def generate(self) -> WingArtifact:
        spec = self.spec
        ribs = []
        for i, (station_y, chord) in enumerate(self._compute_stations()):
            outline = self.factory.scaled(spec.airfoil.code, spec.airfoil.samples, chord)
            cutouts = self._spar_notches(outline, chord) + self._lightening_holes(outline, chord)
            ribs.append(
                Rib(
                    id=f"rib-{i}",
                    station_y=station_y,
                    chord=chord,
                    outline=tuple(outline),
                    cutouts=tuple(cutouts),
                )
            )

        logger.info(
            f"Generated {len(ribs)} ribs (NACA {spec.airfoil.code}, "
            f"{sum(len(r.cutouts) for r in ribs)} cutouts)"
        )
        return WingArtifact(spec=spec, ribs=tuple(ribs))


def generate_wing(spec: WingSpec) -> WingArtifact:
    """Validate ``spec`` and generate its ribs. Raises ``SpecValidationError``."""
    return WingGenerator(spec).generate()


__all__ = [
    "Rib",
    "WingArtifact",
    "WingGenerator",
    "generate_wing",
    "rib_count",
    "spar_planform_angle",
    "notch_widen_factor",
    "notch_size",
]
