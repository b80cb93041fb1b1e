"""
NACA 4-digit generator checks.

The generated section must be deterministic, clockwise and exactly closed,
and must match the textbook thickness of the designation.
"""

import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(REPO_ROOT))

import pytest  # noqa: E402

from ribforge.airfoil_factory import AirfoilFactory, Naca4Parameters, naca4_polygon  # noqa: E402
from ribforge.geometry import polygon_area  # noqa: E402


def test_decodes_designation():
    params = Naca4Parameters.from_code("2412")
    assert params.max_camber == pytest.approx(0.02)
    assert params.camber_position == pytest.approx(0.4)
    assert params.thickness == pytest.approx(0.12)
    assert not params.is_symmetric


def test_missing_digits_fall_back():
    params = Naca4Parameters.from_code("24")
    assert params.thickness == pytest.approx(0.12)
    assert Naca4Parameters.from_code("").is_symmetric


def test_zero_camber_position_is_symmetric():
    assert Naca4Parameters.from_code("2012").is_symmetric


@pytest.mark.parametrize("code", ["0012", "2412", "4415", "0006"])
def test_polygon_closed_and_clockwise(code):
    poly = naca4_polygon(code, 60)
    assert poly[0] == poly[-1]
    assert polygon_area(poly) < 0


def test_generation_is_deterministic():
    assert naca4_polygon("2412", 73) == naca4_polygon("2412", 73)


def test_sample_count_floor_and_minimum():
    assert len(naca4_polygon("0012", 5)) == len(naca4_polygon("0012", 20))
    assert naca4_polygon("0012", 60.7) == naca4_polygon("0012", 60)


def test_chord_space_extent():
    poly = naca4_polygon("0012", 120)
    xs = [p[0] for p in poly]
    assert min(xs) == pytest.approx(0.0, abs=1e-12)
    assert max(xs) == pytest.approx(1.0, abs=1e-12)


def test_symmetric_section_max_thickness():
    """NACA 0012: 12% thick, surfaces mirror each other."""
    poly = naca4_polygon("0012", 200)
    ys = [p[1] for p in poly]
    assert max(ys) == pytest.approx(0.06, abs=1e-3)
    assert min(ys) == pytest.approx(-0.06, abs=1e-3)

    n = len(poly)
    for i in range(n // 2):
        assert poly[i][1] == pytest.approx(-poly[n - 1 - i][1], abs=1e-12)


def test_cambered_section_lifts_upper_surface():
    poly = naca4_polygon("4412", 120)
    ys = [p[1] for p in poly]
    assert max(ys) > abs(min(ys))


def test_factory_scales_cached_section():
    factory = AirfoilFactory()
    base = factory.load("0012", 40)
    scaled = factory.scaled("0012", 40, 200.0)

    assert len(scaled) == len(base)
    assert scaled[0] == scaled[-1]
    for (x, y), (sx, sy) in zip(base, scaled):
        assert sx == pytest.approx(200.0 * x)
        assert sy == pytest.approx(200.0 * y)


def test_factory_returns_independent_lists():
    factory = AirfoilFactory()
    first = factory.load("0012", 40)
    first.append((9.0, 9.0))
    assert factory.load("0012", 40)[-1] != (9.0, 9.0)
