"""Nesting: greedy shelf packing of parts onto fixed-size stock sheets.

Parts are placed largest-first, left to right in rows ("shelves"). Each part
may be turned a quarter turn when that helps it fit. When a new row would run
off the bottom of the sheet a fresh sheet is started. A part too large for
any sheet is still placed, and the sheet carries a warning.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Tuple

from config import config
from .cutouts import CutPrimitive
from .geometry import Bounds, Point, bounds, close_polygon, rotate_points_90, translate_points
from .parts import RawPart

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SheetSpec:
    """Stock sheet dimensions in the wing's units."""

    width: float
    height: float
    margin: float = 0.0
    spacing: float = 0.0

    @property
    def usable_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def usable_height(self) -> float:
        return self.height - 2 * self.margin

    @classmethod
    def default(cls) -> "SheetSpec":
        s = config.sheet
        return cls(width=s.width, height=s.height, margin=s.margin, spacing=s.spacing)


@dataclass(frozen=True)
class PlacedPart:
    """A part on a sheet. Geometry is in the part's local frame; add (x, y) to draw."""

    id: str
    sheet_index: int
    x: float
    y: float
    width: float
    height: float
    rotation_deg: int
    outline: Tuple[Point, ...]
    cutouts: Tuple[CutPrimitive, ...] = ()
    label: str = ""

    @property
    def label_position(self) -> Tuple[float, float]:
        return self.x + self.width / 2, self.y + self.height / 2

    @property
    def footprint(self) -> Bounds:
        """Bounding box in sheet coordinates."""
        return Bounds(self.x, self.y, self.x + self.width, self.y + self.height)


@dataclass(frozen=True)
class SheetLayout:
    index: int
    parts: Tuple[PlacedPart, ...]
    warnings: Tuple[str, ...] = ()


@dataclass(frozen=True)
class LayoutResult:
    sheets: Tuple[SheetLayout, ...] = field(default_factory=tuple)

    @property
    def parts(self) -> List[PlacedPart]:
        return [p for sheet in self.sheets for p in sheet.parts]

    @property
    def warnings(self) -> List[str]:
        return [w for sheet in self.sheets for w in sheet.warnings]


def choose_rotation(w: float, h: float, usable_w: float, usable_h: float) -> int:
    """0 or 90: the orientation that fits, else the one with the smaller longest side."""
    fits_0 = w <= usable_w and h <= usable_h
    fits_90 = h <= usable_w and w <= usable_h
    if fits_0 and not fits_90:
        return 0
    if fits_90 and not fits_0:
        return 90
    # Both or neither fit. A quarter turn never changes the longest side,
    # so the smaller-longest-side rule always ties and 0 is kept.
    return 0


def place_part(part: RawPart, b: Bounds, rotation: int, x: float, y: float, sheet_index: int) -> PlacedPart:
    """Re-express the part in its local frame (bounding-box minimum at the origin), then rotate."""
    w0, h0 = b.width, b.height
    outline = translate_points(part.outline, -b.min_x, -b.min_y)
    cutouts = [c.translated(-b.min_x, -b.min_y) for c in part.cutouts]

    if rotation == 90:
        outline = rotate_points_90(outline, w0)
        cutouts = [c.rotated_90(w0) for c in cutouts]
        width, height = h0, w0
    else:
        width, height = w0, h0

    return PlacedPart(
        id=part.id,
        sheet_index=sheet_index,
        x=x,
        y=y,
        width=width,
        height=height,
        rotation_deg=rotation,
        outline=tuple(close_polygon(outline)),
        cutouts=tuple(cutouts),
        label=part.label or part.id,
    )


class NestingPlanner:
    """Performs simple shelf-based nesting for parts on one sheet size."""

    def __init__(self, sheet: SheetSpec):
        if sheet.usable_width <= 0 or sheet.usable_height <= 0:
            raise ValueError(
                f"Sheet {sheet.width}x{sheet.height} has no usable area with margin {sheet.margin}"
            )
        self.sheet = sheet

    def pack(self, parts: Iterable[RawPart]) -> LayoutResult:
        """Greedy shelf packer; never drops a part and never emits an empty sheet."""
        sheet = self.sheet
        usable_w, usable_h = sheet.usable_width, sheet.usable_height

        items = [(part, bounds(part.outline)) for part in parts]
        items.sort(key=lambda item: max(item[1].width, item[1].height), reverse=True)

        sheets: List[SheetLayout] = []
        current: List[PlacedPart] = []
        warnings: List[str] = []
        cursor_x = cursor_y = row_height = 0.0

        for part, b in items:
            rotation = choose_rotation(b.width, b.height, usable_w, usable_h)
            w, h = (b.width, b.height) if rotation == 0 else (b.height, b.width)

            # Move to next row if needed
            if cursor_x > 0 and cursor_x + sheet.spacing + w > usable_w:
                cursor_x = 0.0
                cursor_y += row_height + sheet.spacing
                row_height = 0.0

            # Move to next sheet if vertical space is exhausted
            if cursor_y > 0 and cursor_y + h > usable_h:
                sheets.append(SheetLayout(len(sheets), tuple(current), tuple(warnings)))
                current, warnings = [], []
                cursor_x = cursor_y = row_height = 0.0

            gap = sheet.spacing if cursor_x > 0 else 0.0
            placed = place_part(
                part, b, rotation,
                sheet.margin + cursor_x + gap,
                sheet.margin + cursor_y,
                len(sheets),
            )
            current.append(placed)
            cursor_x += gap + w
            row_height = max(row_height, h)

            if w > usable_w or h > usable_h:
                message = (
                    f"{placed.id} exceeds usable area ({usable_w:g}x{usable_h:g}) "
                    f"with part ({w:.1f}x{h:.1f})"
                )
                logger.warning(message)
                warnings.append(message)

        if current:
            sheets.append(SheetLayout(len(sheets), tuple(current), tuple(warnings)))

        logger.info(f"Packed {len(items)} parts onto {len(sheets)} sheet(s)")
        return LayoutResult(sheets=tuple(sheets))


def pack_parts(parts: Iterable[RawPart], sheet: SheetSpec) -> LayoutResult:
    return NestingPlanner(sheet).pack(parts)


def layout_manifest(layout: LayoutResult) -> str:
    """CSV manifest of every placement, suitable for CAM import or a cut checklist."""
    rows: List[str] = ["sheet,part,x,y,width,height,rotation"]
    for sheet in layout.sheets:
        for p in sheet.parts:
            rows.append(
                ",".join(
                    [
                        str(sheet.index),
                        p.id,
                        f"{p.x:.3f}",
                        f"{p.y:.3f}",
                        f"{p.width:.3f}",
                        f"{p.height:.3f}",
                        str(p.rotation_deg),
                    ]
                )
            )
    return "\n".join(rows)


__all__ = [
    "SheetSpec",
    "PlacedPart",
    "SheetLayout",
    "LayoutResult",
    "NestingPlanner",
    "choose_rotation",
    "place_part",
    "pack_parts",
    "layout_manifest",
]
