"""
SVG export for laser cutting.

Every document carries three groups understood by common laser drivers:

- ``CUT``: black, full-opacity hairline strokes that the machine cuts;
- ``ENGRAVE``: 50% gray labels;
- ``GUIDES``: 50% gray alignment geometry (sheet border, planform lines).

All renderers are pure: they return markup strings and never touch the
filesystem. Coordinates are in the wing's units, and the document
width/height carry that unit so the file prints at true scale.
"""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple
from xml.sax.saxutils import escape

from config import config
from .cutouts import CircleCutout, CutPrimitive, PolyCutout, RectCutout
from .geometry import Bounds, Point, bounds, clamp, corner_trims
from .kerf import apply_kerf_to_cutouts, apply_kerf_to_outline
from .nesting import LayoutResult, PlacedPart, SheetSpec
from .parts import spar_strips
from .wing_generator import WingArtifact, spar_planform_angle


def fmt(value: float) -> str:
    """Compact number formatting for path data."""
    text = f"{value:.4f}".rstrip("0").rstrip(".")
    return "0" if text in ("", "-0") else text


def path_d(points: Sequence[Point], dx: float = 0.0, dy: float = 0.0) -> str:
    if not points:
        return ""
    x0, y0 = points[0]
    d = [f"M {fmt(x0 + dx)} {fmt(y0 + dy)}"]
    d.extend(f"L {fmt(x + dx)} {fmt(y + dy)}" for x, y in points[1:])
    d.append("Z")
    return " ".join(d)


def rounded_path_d(points: Sequence[Point], radius: float, dx: float = 0.0, dy: float = 0.0) -> str:
    """Closed path whose corners are quadratic curves controlled by the original vertices."""
    trims = corner_trims(points, radius)
    if not trims:
        return ""
    _, _, (sx, sy) = trims[0]
    d = [f"M {fmt(sx + dx)} {fmt(sy + dy)}"]
    for (ax, ay), (vx, vy), (bx, by) in trims[1:] + trims[:1]:
        d.append(f"L {fmt(ax + dx)} {fmt(ay + dy)}")
        d.append(f"Q {fmt(vx + dx)} {fmt(vy + dy)} {fmt(bx + dx)} {fmt(by + dy)}")
    d.append("Z")
    return " ".join(d)


def cutout_element(cutout: CutPrimitive, dx: float, dy: float) -> str:
    if isinstance(cutout, RectCutout):
        return (
            f'<rect id="{escape(cutout.id)}" x="{fmt(cutout.x + dx)}" y="{fmt(cutout.y + dy)}" '
            f'width="{fmt(cutout.w)}" height="{fmt(cutout.h)}" />'
        )
    if isinstance(cutout, CircleCutout):
        return (
            f'<circle id="{escape(cutout.id)}" cx="{fmt(cutout.cx + dx)}" '
            f'cy="{fmt(cutout.cy + dy)}" r="{fmt(cutout.r)}" />'
        )
    if isinstance(cutout, PolyCutout):
        if cutout.corner_radius:
            d = rounded_path_d(cutout.points, cutout.corner_radius, dx, dy)
        else:
            d = path_d(cutout.points, dx, dy)
        return f'<path id="{escape(cutout.id)}" d="{d}" />'
    raise TypeError(f"Unknown cut primitive: {cutout!r}")


def text_element(text: str, x: float, y: float, size: float, anchor: str = "start") -> str:
    extra = ' dominant-baseline="middle"' if anchor == "middle" else ""
    return (
        f'<text x="{fmt(x)}" y="{fmt(y)}" font-size="{fmt(size)}" '
        f'font-family="sans-serif" text-anchor="{anchor}"{extra}>{escape(text)}</text>'
    )


def svg_document(
    width: float,
    height: float,
    units: str,
    cut: Iterable[str] = (),
    engrave: Iterable[str] = (),
    guides: Iterable[str] = (),
) -> str:
    style = config.export
    indent = "\n    "
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<svg xmlns="http://www.w3.org/2000/svg"
     width="{fmt(width)}{units}" height="{fmt(height)}{units}"
     viewBox="0 0 {fmt(width)} {fmt(height)}">
  <!-- {style.guide_layer}: 50% gray -->
  <g id="{style.guide_layer}" fill="none" stroke="{style.engrave_color}" stroke-width="{fmt(style.guide_stroke)}">
    {indent.join(guides)}
  </g>
  <!-- {style.cut_layer}: 100% black -->
  <g id="{style.cut_layer}" fill="none" stroke="{style.cut_color}" stroke-width="{fmt(style.cut_stroke)}">
    {indent.join(cut)}
  </g>
  <!-- {style.engrave_layer}: 50% gray -->
  <g id="{style.engrave_layer}" fill="{style.engrave_color}" stroke="{style.engrave_color}" stroke-width="{fmt(style.cut_stroke)}">
    {indent.join(engrave)}
  </g>
</svg>
"""


def label_size(part: PlacedPart) -> float:
    style = config.export
    return clamp(style.label_scale * min(part.width, part.height), *style.label_size_range)


def part_elements(part: PlacedPart, kerf: float = 0.0, dx: float = 0.0, dy: float = 0.0) -> List[str]:
    """CUT elements for one placed part, kerf-compensated, in sheet coordinates shifted by (dx, dy)."""
    outline, cutouts = _kerfed(part, kerf)
    x, y = part.x + dx, part.y + dy
    elements = [f'<path id="{escape(part.id)}" d="{path_d(outline, x, y)}" />']
    elements.extend(cutout_element(c, x, y) for c in cutouts)
    return elements


def _kerfed(part: PlacedPart, kerf: float) -> Tuple[Sequence[Point], Sequence[CutPrimitive]]:
    return apply_kerf_to_outline(part.outline, kerf), apply_kerf_to_cutouts(part.cutouts, kerf)


def _cut_extent(part: PlacedPart, kerf: float) -> Bounds:
    """Bounds of the kerfed cut geometry in sheet coordinates."""
    outline, cutouts = _kerfed(part, kerf)
    b = bounds(outline)
    for c in cutouts:
        b = b.union(c.bounds())
    return Bounds(b.min_x + part.x, b.min_y + part.y, b.max_x + part.x, b.max_y + part.y)


def sheet_to_svg(
    parts: Sequence[PlacedPart],
    sheet: SheetSpec,
    show_labels: bool = True,
    show_sheet_border: bool = True,
    kerf: float = 0.0,
    units: str = "mm",
) -> str:
    """
    One sheet as an SVG document.

    A kerf offset can push a part placed on a zero margin past the sheet
    edge; the whole drawing is then shifted so no coordinate is negative.
    """
    cut: List[str] = []
    engrave: List[str] = []
    guides: List[str] = []

    extent = Bounds(0.0, 0.0, sheet.width, sheet.height)
    for part in parts:
        fp = part.footprint
        extent = extent.union(Bounds(fp.min_x, fp.min_y, fp.max_x + sheet.margin, fp.max_y + sheet.margin))
        extent = extent.union(_cut_extent(part, kerf))
    dx, dy = -extent.min_x, -extent.min_y

    if show_sheet_border:
        guides.append(
            f'<rect x="{fmt(dx)}" y="{fmt(dy)}" width="{fmt(sheet.width)}" height="{fmt(sheet.height)}" />'
        )
        guides.append(
            f'<rect x="{fmt(sheet.margin + dx)}" y="{fmt(sheet.margin + dy)}" '
            f'width="{fmt(sheet.usable_width)}" height="{fmt(sheet.usable_height)}" />'
        )

    for part in parts:
        cut.extend(part_elements(part, kerf, dx, dy))
        if show_labels:
            cx, cy = part.label_position
            engrave.append(
                text_element(part.label or part.id, cx + dx, cy + dy, label_size(part), anchor="middle")
            )

    return svg_document(extent.width, extent.height, units, cut, engrave, guides)


def layout_to_sheet_svgs(
    layout: LayoutResult,
    sheet: SheetSpec,
    show_labels: bool = True,
    show_sheet_border: bool = True,
    kerf: float = 0.0,
    units: str = "mm",
) -> List[str]:
    """One SVG document per packed sheet, in sheet order."""
    return [
        sheet_to_svg(s.parts, sheet, show_labels, show_sheet_border, kerf, units)
        for s in layout.sheets
    ]


def wing_plan_svg(
    artifact: WingArtifact,
    margin: float = 10.0,
    show_rib_stations: bool = True,
    show_spar_lines: bool = True,
    show_labels: bool = True,
) -> str:
    """
    Top view of both half-wings as guide lines.

    The root lies on y = 0 with the left half drawn at positive y and the
    mirrored right half at negative y; everything is shifted by ``margin``
    so the document has no negative coordinates.
    """
    spec = artifact.spec
    half = spec.half_span
    root, tip, sweep = spec.root_chord, spec.tip_chord, spec.sweep_le

    left = [(0.0, 0.0), (root, 0.0), (sweep + tip, half), (sweep, half), (0.0, 0.0)]
    right = [(x, -y) for x, y in left]
    b = bounds(left + right)
    dx = margin - b.min_x
    dy = margin - b.min_y

    guides = [f'<path d="{path_d(left, dx, dy)}" />', f'<path d="{path_d(right, dx, dy)}" />']
    engrave: List[str] = []
    font = config.export.plan_label_size

    if show_rib_stations:
        for rib in artifact.ribs:
            x_le = sweep * (rib.station_y / half)
            x_te = x_le + rib.chord
            for y in (rib.station_y, -rib.station_y):
                guides.append(
                    f'<line x1="{fmt(x_le + dx)}" y1="{fmt(y + dy)}" '
                    f'x2="{fmt(x_te + dx)}" y2="{fmt(y + dy)}" />'
                )

    if show_spar_lines:
        for k, spar in enumerate(spec.spars):
            x_root = spar.x_frac * root
            x_tip = sweep + spar.x_frac * tip
            for y_tip in (half, -half):
                guides.append(
                    f'<line x1="{fmt(x_root + dx)}" y1="{fmt(dy)}" '
                    f'x2="{fmt(x_tip + dx)}" y2="{fmt(y_tip + dy)}" />'
                )
            if show_labels:
                angle = math.degrees(spar_planform_angle(spec, spar.x_frac))
                text = (
                    f"spar {k + 1}: x={spar.x_frac:.2f} stock={spar.stock_size:g}{spec.units} "
                    f"edge={spar.edge} angle={angle:.1f}deg"
                )
                engrave.append(text_element(text, x_root + dx + 2, dy + font * 1.2 * (k + 1), font))

    return svg_document(b.width + 2 * margin, b.height + 2 * margin, spec.units, (), engrave, guides)


def wing_ribs_svg(
    artifact: WingArtifact,
    margin: float = 10.0,
    rib_spacing: float = 10.0,
    show_labels: bool = True,
    include_spars: bool = False,
) -> str:
    """Preview of every rib side by side, with optional spar strips in a second row."""
    font = config.export.plan_label_size
    label_gap = font * 1.5 if show_labels else 0.0
    cut: List[str] = []
    engrave: List[str] = []

    cursor_x = margin
    row_bottom = margin
    for rib in artifact.ribs:
        b = bounds(rib.outline)
        dx = cursor_x - b.min_x
        dy = margin - b.min_y
        cut.append(f'<path id="{escape(rib.id)}" d="{path_d(rib.outline, dx, dy)}" />')
        cut.extend(cutout_element(c, dx, dy) for c in rib.cutouts)
        if show_labels:
            engrave.append(text_element(rib.id, cursor_x, margin + b.height + font, font))
        cursor_x += b.width + rib_spacing
        row_bottom = max(row_bottom, margin + b.height + label_gap)
    width = cursor_x - rib_spacing + margin if artifact.ribs else 2 * margin

    if include_spars:
        strips = spar_strips(artifact)
        top = row_bottom + margin
        for strip in strips:
            cut.append(f'<path id="{escape(strip.id)}" d="{path_d(strip.outline, margin, top)}" />')
            if show_labels:
                engrave.append(text_element(strip.id, margin, top + strip.width + font, font))
            top += strip.width + label_gap + rib_spacing
            width = max(width, strip.length + 2 * margin)
        row_bottom = top - rib_spacing if strips else row_bottom

    return svg_document(width, row_bottom + margin, artifact.spec.units, cut, engrave, ())


__all__ = [
    "fmt",
    "path_d",
    "rounded_path_d",
    "cutout_element",
    "svg_document",
    "sheet_to_svg",
    "layout_to_sheet_svgs",
    "wing_plan_svg",
    "wing_ribs_svg",
]
