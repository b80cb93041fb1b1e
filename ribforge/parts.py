"""Flatten wing artifacts into geometry-agnostic cuttable parts."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Tuple

from .cutouts import CutPrimitive
from .geometry import Point
from .wing_generator import WingArtifact, spar_planform_angle


@dataclass(frozen=True)
class RawPart:
    """Fabrication unit handed to the nesting engine."""

    id: str
    outline: Tuple[Point, ...]
    cutouts: Tuple[CutPrimitive, ...] = ()
    label: str = ""


@dataclass(frozen=True)
class SparStrip:
    """Flat strip cut from sheet stock for a spar (optional, not in the default part list)."""

    id: str
    x_frac: float
    length: float
    width: float
    angle_deg: float
    outline: Tuple[Point, ...]


def spar_strips(artifact: WingArtifact) -> List[SparStrip]:
    """
    One strip per spar, as long as the spar's true planform path from root
    to tip and as wide as its stock.
    """
    spec = artifact.spec
    strips = []
    for k, spar in enumerate(spec.spars):
        x_root = spar.x_frac * spec.root_chord
        x_tip = spec.sweep_le + spar.x_frac * spec.tip_chord
        length = math.hypot(spec.half_span, x_tip - x_root)
        w = spar.stock_size
        strips.append(
            SparStrip(
                id=f"spar-{k}",
                x_frac=spar.x_frac,
                length=length,
                width=w,
                angle_deg=math.degrees(spar_planform_angle(spec, spar.x_frac)),
                outline=((0.0, 0.0), (length, 0.0), (length, w), (0.0, w), (0.0, 0.0)),
            )
        )
    return strips


def wing_to_parts(artifact: WingArtifact, include_spars: bool = False) -> List[RawPart]:
    """Ribs (and optionally spar strips) as ``RawPart`` records, no geometry recomputed."""
    parts = [
        RawPart(id=rib.id, outline=rib.outline, cutouts=rib.cutouts, label=rib.id)
        for rib in artifact.ribs
    ]
    if include_spars:
        parts.extend(
            RawPart(id=strip.id, outline=strip.outline, label=strip.id)
            for strip in spar_strips(artifact)
        )
    return parts


__all__ = ["RawPart", "SparStrip", "spar_strips", "wing_to_parts"]
