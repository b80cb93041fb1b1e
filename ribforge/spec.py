"""
Wing description value types.

``WingSpec`` is the canonical, versioned input for rib generation. It is a
plain immutable record: the editor replaces it wholesale on every change
(``dataclasses.replace``) and every pipeline stage is a pure function of it.

The JSON form uses the editor's camelCase keys so a spec copied out of the
UI round-trips losslessly.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field, replace
from typing import Any, Dict, Tuple

from config import config

SUPPORTED_VERSION = 1
UNITS = ("mm", "in")
SPAR_EDGES = ("top", "bottom", "both")
HOLE_SHAPES = ("triangle", "circle")

_NACA4_CODE = re.compile(r"[0-9]{4}")


class SpecValidationError(ValueError):
    """Raised when a ``WingSpec`` violates a structural or range constraint."""

    def __init__(self, field_name: str, message: str):
        self.field = field_name
        super().__init__(f"{field_name}: {message}")


@dataclass(frozen=True)
class AirfoilSpec:
    code: str = "0012"
    samples: int = 80
    type: str = "naca4"


@dataclass(frozen=True)
class SparSpec:
    """Square stock stick passing through open notches in every rib."""

    x_frac: float             # 0 = leading edge, 1 = trailing edge
    stock_size: float
    edge: str = "both"        # "top", "bottom" or "both"


@dataclass(frozen=True)
class LighteningHoles:
    enabled: bool = False
    count: int = 3
    radius_frac: float = 0.06
    x_start_frac: float = 0.35
    x_end_frac: float = 0.75
    y_offset_frac: float = 0.0
    corner_frac: float = 0.2
    shape: str = "triangle"


@dataclass(frozen=True)
class RibFeatures:
    lightening_holes: LighteningHoles = field(default_factory=LighteningHoles)


@dataclass(frozen=True)
class WingSpec:
    """Parametric description of a straight-tapered, ribbed wing."""

    span: float
    root_chord: float
    tip_chord: float
    rib_count_per_half: int
    airfoil: AirfoilSpec = field(default_factory=AirfoilSpec)
    sweep_le: float = 0.0
    dihedral_deg: float = 0.0
    material_thickness: float = 3.0
    kerf: float = 0.15
    slot_clearance: float = 0.25
    spars: Tuple[SparSpec, ...] = ()
    rib_features: RibFeatures = field(default_factory=RibFeatures)
    units: str = "mm"
    version: int = SUPPORTED_VERSION

    @property
    def half_span(self) -> float:
        return self.span / 2

    @classmethod
    def default(cls) -> "WingSpec":
        """The configured starting wing."""
        wing = config.wing
        return cls(
            version=config.spec_version,
            units=wing.units,
            span=wing.span,
            root_chord=wing.root_chord,
            tip_chord=wing.tip_chord,
            sweep_le=wing.sweep_le,
            dihedral_deg=wing.dihedral_deg,
            rib_count_per_half=wing.rib_count_per_half,
            airfoil=AirfoilSpec(code=wing.airfoil_code, samples=wing.airfoil_samples),
            material_thickness=wing.material_thickness,
            kerf=wing.kerf,
            slot_clearance=wing.slot_clearance,
            spars=tuple(SparSpec(x, size, edge) for x, size, edge in wing.spars),
            rib_features=RibFeatures(
                lightening_holes=LighteningHoles(
                    enabled=wing.lightening_holes_enabled,
                    count=wing.lightening_hole_count,
                    radius_frac=wing.lightening_radius_frac,
                    x_start_frac=wing.lightening_x_start_frac,
                    x_end_frac=wing.lightening_x_end_frac,
                    y_offset_frac=wing.lightening_y_offset_frac,
                    corner_frac=wing.lightening_corner_frac,
                    shape=wing.lightening_shape,
                )
            ),
        )

    def with_changes(self, **changes: Any) -> "WingSpec":
        """Copy-on-edit helper."""
        return replace(self, **changes)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        lh = self.rib_features.lightening_holes
        return {
            "version": self.version,
            "units": self.units,
            "span": self.span,
            "rootChord": self.root_chord,
            "tipChord": self.tip_chord,
            "sweepLE": self.sweep_le,
            "dihedralDeg": self.dihedral_deg,
            "ribCountPerHalf": self.rib_count_per_half,
            "airfoil": {
                "type": self.airfoil.type,
                "code": self.airfoil.code,
                "samples": self.airfoil.samples,
            },
            "materialThickness": self.material_thickness,
            "kerf": self.kerf,
            "slotClearance": self.slot_clearance,
            "spars": [
                {"xFrac": s.x_frac, "stockSize": s.stock_size, "edge": s.edge}
                for s in self.spars
            ],
            "ribFeatures": {
                "lighteningHoles": {
                    "enabled": lh.enabled,
                    "count": lh.count,
                    "radiusFrac": lh.radius_frac,
                    "xStartFrac": lh.x_start_frac,
                    "xEndFrac": lh.x_end_frac,
                    "yOffsetFrac": lh.y_offset_frac,
                    "cornerFrac": lh.corner_frac,
                    "shape": lh.shape,
                }
            },
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WingSpec":
        """Build a spec from the editor's JSON shape. Values are not range-checked here."""
        try:
            airfoil = data["airfoil"]
            defaults = LighteningHoles()
            lh = (data.get("ribFeatures") or {}).get("lighteningHoles") or {}
            return cls(
                version=data["version"],
                units=data["units"],
                span=data["span"],
                root_chord=data["rootChord"],
                tip_chord=data["tipChord"],
                sweep_le=data.get("sweepLE", 0.0),
                dihedral_deg=data.get("dihedralDeg", 0.0),
                rib_count_per_half=data["ribCountPerHalf"],
                airfoil=AirfoilSpec(
                    type=airfoil.get("type", "naca4"),
                    code=airfoil["code"],
                    samples=airfoil["samples"],
                ),
                material_thickness=data["materialThickness"],
                kerf=data["kerf"],
                slot_clearance=data["slotClearance"],
                spars=tuple(
                    SparSpec(x_frac=s["xFrac"], stock_size=s["stockSize"], edge=s["edge"])
                    for s in data.get("spars") or []
                ),
                rib_features=RibFeatures(
                    lightening_holes=LighteningHoles(
                        enabled=lh.get("enabled", defaults.enabled),
                        count=lh.get("count", defaults.count),
                        radius_frac=lh.get("radiusFrac", defaults.radius_frac),
                        x_start_frac=lh.get("xStartFrac", defaults.x_start_frac),
                        x_end_frac=lh.get("xEndFrac", defaults.x_end_frac),
                        y_offset_frac=lh.get("yOffsetFrac", defaults.y_offset_frac),
                        corner_frac=lh.get("cornerFrac", defaults.corner_frac),
                        shape=lh.get("shape", defaults.shape),
                    )
                ),
            )
        except KeyError as e:
            raise SpecValidationError(str(e.args[0]), "required field missing") from e

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, text: str) -> "WingSpec":
        return cls.from_dict(json.loads(text))


def validate_spec(spec: WingSpec) -> None:
    """
    Fail fast on structural and range violations.

    Raises:
        SpecValidationError: naming the first offending field.
    """
    if spec.version != SUPPORTED_VERSION:
        raise SpecValidationError(
            "version", f"unsupported spec version {spec.version!r} (expected {SUPPORTED_VERSION})"
        )
    if spec.units not in UNITS:
        raise SpecValidationError("units", f"must be one of {UNITS}, got {spec.units!r}")
    if spec.span <= 0:
        raise SpecValidationError("span", "must be > 0")
    if spec.root_chord <= 0:
        raise SpecValidationError("rootChord", "must be > 0")
    if spec.tip_chord <= 0:
        raise SpecValidationError("tipChord", "must be > 0")
    if spec.rib_count_per_half < 2:
        raise SpecValidationError("ribCountPerHalf", "must be >= 2 (root and tip)")

    if spec.airfoil.type != "naca4":
        raise SpecValidationError("airfoil.type", f"unsupported airfoil type {spec.airfoil.type!r}")
    if not isinstance(spec.airfoil.code, str) or not _NACA4_CODE.fullmatch(spec.airfoil.code):
        raise SpecValidationError("airfoil.code", 'must be a 4-digit string like "0012"')
    if spec.airfoil.samples < config.tuning.min_airfoil_samples:
        raise SpecValidationError(
            "airfoil.samples", f"must be >= {config.tuning.min_airfoil_samples}"
        )

    if spec.slot_clearance < 0:
        raise SpecValidationError("slotClearance", "must be >= 0")
    if spec.kerf < 0:
        raise SpecValidationError("kerf", "must be >= 0")
    if spec.material_thickness < 0:
        raise SpecValidationError("materialThickness", "must be >= 0")

    for i, spar in enumerate(spec.spars):
        if not 0.0 <= spar.x_frac <= 1.0:
            raise SpecValidationError(f"spars[{i}].xFrac", "must be in [0, 1]")
        if spar.stock_size <= 0:
            raise SpecValidationError(f"spars[{i}].stockSize", "must be > 0")
        if spar.edge not in SPAR_EDGES:
            raise SpecValidationError(
                f"spars[{i}].edge", f"must be one of {SPAR_EDGES}, got {spar.edge!r}"
            )

    lh = spec.rib_features.lightening_holes
    if lh.count < 0:
        raise SpecValidationError("ribFeatures.lighteningHoles.count", "must be >= 0")
    if lh.shape not in HOLE_SHAPES:
        raise SpecValidationError(
            "ribFeatures.lighteningHoles.shape", f"must be one of {HOLE_SHAPES}, got {lh.shape!r}"
        )


__all__ = [
    "SUPPORTED_VERSION",
    "SpecValidationError",
    "AirfoilSpec",
    "SparSpec",
    "LighteningHoles",
    "RibFeatures",
    "WingSpec",
    "validate_spec",
]
