"""DXF export of packed sheets for CAM packages that do not read SVG.

Uses the same CUT / ENGRAVE / GUIDES layer convention as the SVG export.
The DXF y axis points up, so sheet coordinates are flipped about the sheet
height to keep the drawing the same way round as the SVG.
"""

from __future__ import annotations

from typing import List, Sequence

import ezdxf
from ezdxf import units
from ezdxf.document import Drawing
from ezdxf.enums import TextEntityAlignment

from config import config
from .cutouts import CircleCutout, PolyCutout, RectCutout
from .geometry import Point, round_corners
from .kerf import apply_kerf_to_cutouts, apply_kerf_to_outline
from .nesting import LayoutResult, PlacedPart, SheetSpec
from .svg_export import label_size

DXF_UNITS = {"mm": units.MM, "in": units.IN}


def _new_document(unit: str) -> Drawing:
    style = config.export
    doc = ezdxf.new("R2010")
    doc.units = DXF_UNITS.get(unit, units.MM)
    doc.layers.add(style.cut_layer, color=style.dxf_cut_color)
    doc.layers.add(style.engrave_layer, color=style.dxf_engrave_color)
    doc.layers.add(style.guide_layer, color=style.dxf_engrave_color)
    return doc


def _to_sheet(points: Sequence[Point], part: PlacedPart, sheet_height: float) -> List[Point]:
    return [(x + part.x, sheet_height - (y + part.y)) for x, y in points]


def _add_part(msp, part: PlacedPart, sheet_height: float, kerf: float) -> None:
    style = config.export
    cut = {"layer": style.cut_layer}

    outline = list(apply_kerf_to_outline(part.outline, kerf))
    if len(outline) > 1 and outline[0] == outline[-1]:
        outline = outline[:-1]
    msp.add_lwpolyline(_to_sheet(outline, part, sheet_height), close=True, dxfattribs=cut)

    for cutout in apply_kerf_to_cutouts(part.cutouts, kerf):
        if isinstance(cutout, RectCutout):
            corners = [
                (cutout.x, cutout.y),
                (cutout.x + cutout.w, cutout.y),
                (cutout.x + cutout.w, cutout.y + cutout.h),
                (cutout.x, cutout.y + cutout.h),
            ]
            msp.add_lwpolyline(_to_sheet(corners, part, sheet_height), close=True, dxfattribs=cut)
        elif isinstance(cutout, CircleCutout):
            (cx, cy), = _to_sheet([(cutout.cx, cutout.cy)], part, sheet_height)
            msp.add_circle((cx, cy), cutout.r, dxfattribs=cut)
        elif isinstance(cutout, PolyCutout):
            pts = round_corners(cutout.points, cutout.corner_radius or 0.0, style.corner_segments)
            msp.add_lwpolyline(_to_sheet(pts[:-1], part, sheet_height), close=True, dxfattribs=cut)


def sheet_to_dxf(
    parts: Sequence[PlacedPart],
    sheet: SheetSpec,
    show_labels: bool = True,
    show_sheet_border: bool = True,
    kerf: float = 0.0,
    unit: str = "mm",
) -> Drawing:
    style = config.export
    doc = _new_document(unit)
    msp = doc.modelspace()

    if show_sheet_border:
        guide = {"layer": style.guide_layer}
        msp.add_lwpolyline(
            [(0, 0), (sheet.width, 0), (sheet.width, sheet.height), (0, sheet.height)],
            close=True,
            dxfattribs=guide,
        )
        m = sheet.margin
        msp.add_lwpolyline(
            [(m, m), (sheet.width - m, m), (sheet.width - m, sheet.height - m), (m, sheet.height - m)],
            close=True,
            dxfattribs=guide,
        )

    for part in parts:
        _add_part(msp, part, sheet.height, kerf)
        if show_labels:
            cx, cy = part.label_position
            msp.add_text(
                part.label or part.id,
                height=label_size(part),
                dxfattribs={"layer": style.engrave_layer},
            ).set_placement((cx, sheet.height - cy), align=TextEntityAlignment.MIDDLE_CENTER)

    return doc


def layout_to_dxf(
    layout: LayoutResult,
    sheet: SheetSpec,
    show_labels: bool = True,
    show_sheet_border: bool = True,
    kerf: float = 0.0,
    unit: str = "mm",
) -> List[Drawing]:
    """One in-memory DXF drawing per packed sheet; callers decide where to save them."""
    return [
        sheet_to_dxf(s.parts, sheet, show_labels, show_sheet_border, kerf, unit)
        for s in layout.sheets
    ]


__all__ = ["sheet_to_dxf", "layout_to_dxf"]
