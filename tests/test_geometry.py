import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import pytest  # noqa: E402

from ribforge.airfoil_factory import naca4_polygon  # noqa: E402
from ribforge.geometry import (  # noqa: E402
    bounds,
    centroid,
    close_polygon,
    ensure_clockwise,
    inset_toward_centroid,
    offset_polygon,
    point_in_polygon,
    polygon_area,
    rotate_points_90,
    round_corners,
    unrotate_points_90,
    y_extrema_at_x,
    y_extrema_at_x_or_none,
)

SQUARE_CCW = [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]


def test_close_polygon_appends_first_point():
    closed = close_polygon(SQUARE_CCW)
    assert closed[-1] == closed[0]
    assert len(closed) == 5
    assert close_polygon(closed) == closed


def test_shoelace_sign_follows_winding():
    assert polygon_area(SQUARE_CCW) == pytest.approx(1.0)
    assert polygon_area(SQUARE_CCW[::-1]) == pytest.approx(-1.0)
    # Open and closed give the same area
    assert polygon_area(close_polygon(SQUARE_CCW)) == pytest.approx(1.0)


def test_ensure_clockwise_reverses_ccw_input():
    cw = ensure_clockwise(SQUARE_CCW)
    assert cw[0] == cw[-1]
    assert polygon_area(cw) == pytest.approx(-1.0)
    assert ensure_clockwise(cw) == cw


@pytest.mark.parametrize(
    "point, expected",
    [((0.5, 0.5), True), ((1.5, 0.5), False), ((0.5, -0.1), False), ((0.01, 0.99), True)],
)
def test_point_in_polygon(point, expected):
    assert point_in_polygon(point, SQUARE_CCW) is expected
    assert point_in_polygon(point, close_polygon(SQUARE_CCW)) is expected


def test_y_extrema_crossing():
    square = close_polygon(SQUARE_CCW)
    assert y_extrema_at_x(square, 0.5) == pytest.approx((1.0, 0.0))


def test_y_extrema_vertical_edge_contributes_both_ends():
    square = close_polygon(SQUARE_CCW)
    assert y_extrema_at_x(square, 0.0) == pytest.approx((1.0, 0.0))


def test_y_extrema_no_crossing():
    square = close_polygon(SQUARE_CCW)
    assert y_extrema_at_x(square, 2.0) == (0.0, 0.0)
    assert y_extrema_at_x_or_none(square, 2.0) is None


def test_y_extrema_on_airfoil():
    poly = [(x * 100, y * 100) for x, y in naca4_polygon("0012", 80)]
    top, bottom = y_extrema_at_x(poly, 30.0)
    assert top == pytest.approx(6.0, abs=0.05)
    assert bottom == pytest.approx(-6.0, abs=0.05)


def test_offset_square_outward_either_winding():
    grown = offset_polygon(SQUARE_CCW, 0.1)
    assert grown[0] == grown[-1]
    assert polygon_area(grown) == pytest.approx(1.44)

    grown_cw = offset_polygon(SQUARE_CCW[::-1], 0.1)
    assert abs(polygon_area(grown_cw)) == pytest.approx(1.44)


def test_offset_square_inward():
    shrunk = offset_polygon(SQUARE_CCW, -0.1)
    assert polygon_area(shrunk) == pytest.approx(0.64)
    assert bounds(shrunk).min_x == pytest.approx(0.1)


def test_offset_collinear_vertex_uses_averaged_normal():
    pts = [(0.0, 0.0), (0.5, 0.0), (1.0, 0.0), (1.0, 1.0), (0.0, 1.0)]
    grown = offset_polygon(pts, 0.1)
    assert grown[1] == pytest.approx((0.5, -0.1))


def test_offset_area_grows_with_delta():
    outline = [(x * 200, y * 200) for x, y in naca4_polygon("0012", 60)]
    base = abs(polygon_area(outline))
    areas = [abs(polygon_area(offset_polygon(outline, d))) for d in (0.1, 0.5, 1.0)]
    assert base < areas[0] < areas[1] < areas[2]


def test_offset_degenerate_input_returned():
    assert offset_polygon([(0.0, 0.0), (1.0, 1.0)], 0.5) == [(0.0, 0.0), (1.0, 1.0)]


def test_quarter_turn_inverse():
    pts = [(0.0, 0.0), (10.0, 0.0), (10.0, 3.0), (2.0, 3.0)]
    turned = rotate_points_90(pts, 10.0)
    b = bounds(turned)
    assert (b.min_x, b.min_y, b.max_x, b.max_y) == (0.0, 0.0, 3.0, 10.0)
    assert unrotate_points_90(turned, 10.0) == pts


def test_inset_moves_vertices_toward_centroid():
    tri = [(0.0, 0.0), (6.0, 0.0), (3.0, 6.0)]
    cx, cy = centroid(tri)
    inset = inset_toward_centroid(tri, 0.5)
    for (px, py), (qx, qy) in zip(tri, inset):
        before = ((px - cx) ** 2 + (py - cy) ** 2) ** 0.5
        after = ((qx - cx) ** 2 + (qy - cy) ** 2) ** 0.5
        assert after == pytest.approx(before - 0.5)


def test_inset_never_collapses():
    tri = [(0.0, 0.0), (1.0, 0.0), (0.5, 1.0)]
    inset = inset_toward_centroid(tri, 100.0)
    assert abs(polygon_area(inset)) > 0
    assert inset_toward_centroid(tri[:2], 0.1) is None


def test_round_corners_trims_square():
    rounded = round_corners(SQUARE_CCW, 0.2, segments=8)
    assert rounded[0] == rounded[-1]
    assert 0.95 < abs(polygon_area(rounded)) < 1.0
    b = bounds(rounded)
    assert b.min_x >= -1e-12 and b.max_x <= 1.0 + 1e-12


def test_round_corners_zero_radius_is_plain_polygon():
    assert round_corners(SQUARE_CCW, 0.0) == close_polygon(SQUARE_CCW)
