"""
RibForge: Single Source of Truth (SSOT)
=======================================

Defines the default wing, default stock sheet, generator tuning constants
and export styling. NEVER hard-code these values elsewhere. The generator,
nesting engine and renderers all read from the ``config`` singleton.

Tuning constants are approximations chosen for hobby laser cutting
(balsa/plywood ribs, 3-6 mm stock), not physical laws.
"""

from dataclasses import dataclass, field
from typing import List, Tuple


@dataclass
class DefaultWing:
    """Starting wing for a fresh editing session - all lengths in mm."""

    units: str = "mm"
    span: float = 1200.0                  # Total wingspan
    root_chord: float = 220.0
    tip_chord: float = 140.0
    sweep_le: float = 0.0                 # LE offset at the tip (distance)
    dihedral_deg: float = 3.0             # Preview only

    rib_count_per_half: int = 9           # Includes root and tip
    airfoil_code: str = "0012"
    airfoil_samples: int = 80

    material_thickness: float = 3.0       # Balsa sheet
    kerf: float = 0.15                    # Typical CO2 laser on balsa
    slot_clearance: float = 0.25

    # (x_frac, stock_size, edge) - 1/8" square stock in mm
    spars: List[Tuple[float, float, str]] = field(default_factory=lambda: [
        (0.25, 3.175, "both"),
        (0.60, 3.175, "both"),
    ])

    lightening_holes_enabled: bool = False
    lightening_hole_count: int = 3
    lightening_radius_frac: float = 0.06
    lightening_x_start_frac: float = 0.35
    lightening_x_end_frac: float = 0.75
    lightening_y_offset_frac: float = 0.0
    lightening_corner_frac: float = 0.2
    lightening_shape: str = "triangle"


@dataclass
class SheetDefaults:
    """Stock sheet used when the caller does not supply one."""

    width: float = 600.0
    height: float = 300.0
    margin: float = 10.0
    spacing: float = 6.0


@dataclass
class GeneratorTuning:
    """Clamp ranges and retry budgets used by the rib generator."""

    # === SPAR NOTCHES ===
    notch_cos_floor: float = 0.2          # widen <= 1 / 0.2 = 5x

    # === AIRFOIL ===
    min_airfoil_samples: int = 20

    # === LIGHTENING HOLES ===
    hole_radius_frac_range: Tuple[float, float] = (0.01, 0.25)
    hole_x_frac_range: Tuple[float, float] = (0.05, 0.95)
    hole_corner_frac_range: Tuple[float, float] = (0.0, 0.5)
    hole_corner_cap: float = 0.45         # Corner radius <= 45% of size
    hole_stagger: float = 0.35            # Vertical zig-zag, fraction of size
    hole_fit_attempts: int = 8
    hole_shrink: float = 0.85
    hole_min_scale: float = 0.25          # Give up below 25% of base size
    hole_inset_collapse: float = 0.45     # Inset <= 45% of vertex distance
    hole_circle_samples: int = 24

    # Perimeter clearance = max(kerf, thickness * frac, floor)
    inset_thickness_frac: float = 0.15
    inset_floor: float = 0.5


@dataclass
class ExportStyle:
    """Layer naming and stroke conventions understood by laser drivers."""

    cut_layer: str = "CUT"
    engrave_layer: str = "ENGRAVE"
    guide_layer: str = "GUIDES"

    cut_color: str = "#000000"            # 100% black = vector cut
    engrave_color: str = "#808080"        # 50% gray = engrave / ignore
    cut_stroke: float = 0.2
    guide_stroke: float = 0.3

    label_scale: float = 0.35             # Font size vs. smaller part side
    label_size_range: Tuple[float, float] = (2.5, 12.0)
    plan_label_size: float = 10.0
    corner_segments: int = 6              # Flattening for DXF rounded corners

    # DXF colour indices (ACI)
    dxf_cut_color: int = 7
    dxf_engrave_color: int = 8


@dataclass
class RibForgeConfig:
    """
    Master configuration singleton.

    ALL core modules import this. Changes here propagate through:
    - rib generation (notch widening, hole fitting)
    - sheet nesting defaults
    - SVG / DXF layer styling
    """

    wing: DefaultWing = field(default_factory=DefaultWing)
    sheet: SheetDefaults = field(default_factory=SheetDefaults)
    tuning: GeneratorTuning = field(default_factory=GeneratorTuning)
    export: ExportStyle = field(default_factory=ExportStyle)

    project_name: str = "RibForge"
    version: str = "0.1.0"
    spec_version: int = 1

    def validate(self) -> List[str]:
        """Validate configuration for internal consistency."""
        errors = []
        tuning = self.tuning

        if not 0.0 < tuning.notch_cos_floor <= 1.0:
            errors.append(
                f"notch_cos_floor ({tuning.notch_cos_floor}) must be in (0, 1]."
            )

        if not 0.0 < tuning.hole_shrink < 1.0:
            errors.append(
                f"hole_shrink ({tuning.hole_shrink}) must be in (0, 1) or hole fitting never converges."
            )

        if tuning.hole_fit_attempts < 1:
            errors.append("hole_fit_attempts must be at least 1.")

        lo, hi = tuning.hole_x_frac_range
        if not 0.0 <= lo <= hi <= 1.0:
            errors.append(f"hole_x_frac_range {tuning.hole_x_frac_range} is not ordered within [0, 1].")

        sheet = self.sheet
        if sheet.width <= 2 * sheet.margin or sheet.height <= 2 * sheet.margin:
            errors.append(
                f"Default sheet {sheet.width}x{sheet.height} has no usable area with margin {sheet.margin}."
            )

        lo, hi = self.export.label_size_range
        if not 0.0 < lo <= hi:
            errors.append(f"label_size_range {self.export.label_size_range} is invalid.")

        return errors

    def summary(self) -> str:
        """Generate human-readable configuration summary."""
        wing = self.wing
        return f"""
RibForge Configuration Summary
==============================
Version: {self.version} (spec v{self.spec_version})

DEFAULT WING
------------
Span: {wing.span:.1f} {wing.units}
Root / Tip Chord: {wing.root_chord:.1f} / {wing.tip_chord:.1f} {wing.units}
Ribs per half: {wing.rib_count_per_half}
Airfoil: NACA {wing.airfoil_code} ({wing.airfoil_samples} samples)
Spars: {len(wing.spars)}

SHEET
-----
Stock: {self.sheet.width:.0f} x {self.sheet.height:.0f} (margin {self.sheet.margin}, spacing {self.sheet.spacing})

TUNING
------
Notch cos floor: {self.tuning.notch_cos_floor}
Hole fit: {self.tuning.hole_fit_attempts} attempts x {self.tuning.hole_shrink}
"""


# Singleton instance - import this throughout the project
config = RibForgeConfig()

# Validate on import
_errors = config.validate()
if _errors:
    import warnings
    for err in _errors:
        warnings.warn(err, UserWarning)
