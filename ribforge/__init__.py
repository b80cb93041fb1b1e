# RibForge Core Module
from .spec import (
    WingSpec, AirfoilSpec, SparSpec, LighteningHoles, RibFeatures,
    SpecValidationError, validate_spec
)
from .airfoil_factory import naca4_polygon, AirfoilFactory
from .cutouts import RectCutout, CircleCutout, PolyCutout, CutPrimitive
from .wing_generator import Rib, WingArtifact, WingGenerator, generate_wing
from .parts import RawPart, SparStrip, spar_strips, wing_to_parts
from .nesting import (
    SheetSpec, PlacedPart, SheetLayout, LayoutResult, NestingPlanner,
    pack_parts, layout_manifest
)
from .kerf import apply_kerf_to_outline, apply_kerf_to_cutouts
from .svg_export import layout_to_sheet_svgs, wing_plan_svg, wing_ribs_svg

__all__ = [
    "WingSpec",
    "AirfoilSpec",
    "SparSpec",
    "LighteningHoles",
    "RibFeatures",
    "SpecValidationError",
    "validate_spec",
    "naca4_polygon",
    "AirfoilFactory",
    "RectCutout",
    "CircleCutout",
    "PolyCutout",
    "CutPrimitive",
    "Rib",
    "WingArtifact",
    "WingGenerator",
    "generate_wing",
    "RawPart",
    "SparStrip",
    "spar_strips",
    "wing_to_parts",
    "SheetSpec",
    "PlacedPart",
    "SheetLayout",
    "LayoutResult",
    "NestingPlanner",
    "pack_parts",
    "layout_manifest",
    "apply_kerf_to_outline",
    "apply_kerf_to_cutouts",
    "layout_to_sheet_svgs",
    "wing_plan_svg",
    "wing_ribs_svg",
]
