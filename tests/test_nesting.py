import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import pytest  # noqa: E402

from ribforge.airfoil_factory import AirfoilFactory  # noqa: E402
from ribforge.cutouts import CircleCutout, PolyCutout, RectCutout  # noqa: E402
from ribforge.geometry import bounds, translate_points, unrotate_points_90  # noqa: E402
from ribforge.nesting import (  # noqa: E402
    NestingPlanner,
    SheetSpec,
    choose_rotation,
    layout_manifest,
    pack_parts,
)
from ribforge.parts import RawPart, spar_strips, wing_to_parts  # noqa: E402
from ribforge.spec import AirfoilSpec, SparSpec, WingSpec  # noqa: E402
from ribforge.wing_generator import generate_wing  # noqa: E402

SHEET = SheetSpec(width=600.0, height=300.0, margin=10.0, spacing=6.0)


def _rect(part_id, w, h, x0=0.0, y0=0.0, cutouts=()):
    outline = ((x0, y0), (x0 + w, y0), (x0 + w, y0 + h), (x0, y0 + h), (x0, y0))
    return RawPart(id=part_id, outline=outline, cutouts=tuple(cutouts))


def _separated(a, b, spacing):
    fa, fb = a.footprint, b.footprint
    tol = 1e-9
    return (
        fa.max_x + spacing <= fb.min_x + tol
        or fb.max_x + spacing <= fa.min_x + tol
        or fa.max_y + spacing <= fb.min_y + tol
        or fb.max_y + spacing <= fa.min_y + tol
    )


def test_sixteen_ribs_pack_without_overlap():
    outline = tuple(AirfoilFactory().scaled("0020", 60, 150.0))
    parts = [RawPart(id=f"rib-{i}", outline=outline) for i in range(16)]

    layout = pack_parts(parts, SHEET)

    placed = layout.parts
    assert sorted(p.id for p in placed) == sorted(p.id for p in parts)
    assert layout.warnings == []
    for sheet in layout.sheets:
        assert sheet.parts
        for i, a in enumerate(sheet.parts):
            assert a.x >= SHEET.margin and a.y >= SHEET.margin
            assert a.x + a.width <= SHEET.width - SHEET.margin + 1e-9
            assert a.y + a.height <= SHEET.height - SHEET.margin + 1e-9
            for b in sheet.parts[i + 1:]:
                assert _separated(a, b, SHEET.spacing)


def test_overflow_starts_new_sheets():
    parts = [_rect(f"p{i}", 250.0, 100.0) for i in range(30)]
    layout = pack_parts(parts, SHEET)
    # Two per row, two rows per sheet
    assert len(layout.sheets) == 8
    assert [len(s.parts) for s in layout.sheets] == [4] * 7 + [2]
    assert [s.index for s in layout.sheets] == list(range(8))
    for sheet in layout.sheets:
        assert all(p.sheet_index == sheet.index for p in sheet.parts)


def test_tall_part_is_turned():
    layout = pack_parts([_rect("spar", 50.0, 400.0)], SHEET)
    part = layout.parts[0]
    assert part.rotation_deg == 90
    assert (part.width, part.height) == (400.0, 50.0)
    assert layout.warnings == []


@pytest.mark.parametrize(
    "w, h, expected",
    [(100.0, 50.0, 0), (50.0, 400.0, 90), (400.0, 50.0, 0), (700.0, 700.0, 0)],
)
def test_choose_rotation(w, h, expected):
    assert choose_rotation(w, h, 580.0, 280.0) == expected


def test_oversize_part_placed_with_warning():
    layout = pack_parts([_rect("huge", 700.0, 50.0), _rect("small", 20.0, 20.0)], SHEET)
    assert len(layout.parts) == 2
    assert len(layout.warnings) == 1
    assert "huge" in layout.warnings[0]
    assert layout.sheets[0].warnings == tuple(layout.warnings)


def test_largest_parts_placed_first():
    parts = [_rect("a", 100.0, 10.0), _rect("b", 300.0, 10.0), _rect("c", 200.0, 10.0), _rect("d", 100.0, 10.0)]
    layout = pack_parts(parts, SHEET)
    assert [p.id for p in layout.parts] == ["b", "c", "a", "d"]


def test_parts_expressed_in_local_frame():
    cut = RectCutout("hole", 120.0, 60.0, 10.0, 10.0)
    part = _rect("offset", 100.0, 30.0, x0=100.0, y0=50.0, cutouts=[cut])
    placed = pack_parts([part], SHEET).parts[0]

    xs = [p[0] for p in placed.outline]
    ys = [p[1] for p in placed.outline]
    assert (min(xs), min(ys)) == (0.0, 0.0)
    assert placed.cutouts[0] == RectCutout("hole", 20.0, 10.0, 10.0, 10.0)
    assert (placed.x, placed.y) == (SHEET.margin, SHEET.margin)


def test_rotation_carries_cutouts():
    cuts = [
        RectCutout("r", 10.0, 100.0, 5.0, 20.0),
        CircleCutout("c", 25.0, 200.0, 4.0),
        PolyCutout("t", ((10.0, 10.0), (20.0, 10.0), (15.0, 20.0)), 1.0),
    ]
    placed = pack_parts([_rect("spar", 50.0, 400.0, cutouts=cuts)], SHEET).parts[0]
    rect, circle, poly = placed.cutouts

    assert (rect.x, rect.y, rect.w, rect.h) == pytest.approx((100.0, 35.0, 20.0, 5.0))
    assert (circle.cx, circle.cy, circle.r) == pytest.approx((200.0, 25.0, 4.0))
    assert poly.points == ((10.0, 40.0), (10.0, 30.0), (20.0, 35.0))
    assert poly.corner_radius == 1.0
    for c in placed.cutouts:
        b = c.bounds()
        assert 0.0 <= b.min_x and b.max_x <= placed.width
        assert 0.0 <= b.min_y and b.max_y <= placed.height


def test_unrotating_recovers_original_geometry():
    outline = tuple(AirfoilFactory().scaled("2412", 40, 100.0))
    part = RawPart(id="rib", outline=tuple(translate_points(outline, 0.0, 20.0)))
    sheet = SheetSpec(width=60.0, height=200.0)
    placed = pack_parts([part], sheet).parts[0]
    assert placed.rotation_deg == 90

    b = bounds(part.outline)
    expected = translate_points(part.outline, -b.min_x, -b.min_y)
    recovered = unrotate_points_90(placed.outline, b.width)
    assert len(recovered) == len(expected)
    for (ax, ay), (bx, by) in zip(recovered, expected):
        assert ax == pytest.approx(bx, abs=1e-9)
        assert ay == pytest.approx(by, abs=1e-9)


def test_packing_is_deterministic():
    wing = generate_wing(WingSpec.default())
    parts = wing_to_parts(wing, include_spars=True)
    assert pack_parts(parts, SHEET) == pack_parts(parts, SHEET)


def test_empty_input_gives_no_sheets():
    assert pack_parts([], SHEET).sheets == ()


@pytest.mark.parametrize(
    "sheet",
    [SheetSpec(width=20.0, height=300.0, margin=10.0), SheetSpec(width=600.0, height=0.0)],
)
def test_sheet_without_usable_area_rejected(sheet):
    with pytest.raises(ValueError):
        NestingPlanner(sheet)


def test_label_position_is_footprint_centre():
    placed = pack_parts([_rect("p", 100.0, 40.0)], SHEET).parts[0]
    assert placed.label_position == (60.0, 30.0)
    assert placed.label == "p"


def test_manifest_lists_every_placement():
    layout = pack_parts([_rect(f"p{i}", 250.0, 100.0) for i in range(5)], SHEET)
    rows = layout_manifest(layout).splitlines()
    assert rows[0] == "sheet,part,x,y,width,height,rotation"
    assert len(rows) == 6
    assert rows[1] == "0,p0,10.000,10.000,250.000,100.000,0"
    assert rows[-1].startswith("1,p4,")


def test_spar_strips_follow_planform():
    spec = WingSpec(
        span=1000.0,
        root_chord=200.0,
        tip_chord=200.0,
        rib_count_per_half=4,
        airfoil=AirfoilSpec(code="0012", samples=40),
        sweep_le=500.0,
        spars=(SparSpec(0.3, 3.0),),
    )
    wing = generate_wing(spec)
    (strip,) = spar_strips(wing)
    assert strip.length == pytest.approx(500.0 * 2 ** 0.5)
    assert strip.width == 3.0
    assert strip.angle_deg == pytest.approx(45.0)

    parts = wing_to_parts(wing, include_spars=True)
    assert [p.id for p in parts][-1] == "spar-0"
    assert len(wing_to_parts(wing)) == 4
