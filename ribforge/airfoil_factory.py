"""
NACA 4-digit airfoil generation.

Builds the section analytically from the camber/thickness laws, samples it
with cosine spacing so points cluster at the leading and trailing edges, and
guarantees a closed, clockwise polygon in normalized chord space (x in [0, 1]).
"""

from dataclasses import dataclass
from typing import Dict, Tuple

import numpy as np

from config import config
from .geometry import Polygon, ensure_clockwise


@dataclass(frozen=True)
class Naca4Parameters:
    """Decoded NACA MPXX designation."""

    max_camber: float        # m, fraction of chord
    camber_position: float   # p, fraction of chord
    thickness: float         # t, fraction of chord

    @property
    def is_symmetric(self) -> bool:
        return self.max_camber == 0 or self.camber_position == 0

    @classmethod
    def from_code(cls, code: str) -> "Naca4Parameters":
        """Decode a designation such as ``"2412"``; missing digits fall back to ``0`` / ``12``."""
        m_digit = code[0] if len(code) > 0 else "0"
        p_digit = code[1] if len(code) > 1 else "0"
        t_digits = code[2:4] or "12"
        return cls(
            max_camber=int(m_digit) / 100.0,
            camber_position=int(p_digit) / 10.0,
            thickness=int(t_digits) / 100.0,
        )


def cosine_spacing(n: int) -> np.ndarray:
    """Chordwise stations clustered near the leading and trailing edges."""
    u = np.linspace(0.0, 1.0, n)
    return 0.5 * (1.0 - np.cos(np.pi * u))


def thickness_distribution(x: np.ndarray, t: float) -> np.ndarray:
    """Standard NACA half-thickness (open trailing edge coefficient)."""
    return 5.0 * t * (
        0.2969 * np.sqrt(x)
        - 0.1260 * x
        - 0.3516 * x**2
        + 0.2843 * x**3
        - 0.1015 * x**4
    )


def camber_line(x: np.ndarray, params: Naca4Parameters) -> Tuple[np.ndarray, np.ndarray]:
    """Camber height and slope from the two-piece parabolic law."""
    if params.is_symmetric:
        return np.zeros_like(x), np.zeros_like(x)

    m, p = params.max_camber, params.camber_position
    fore = x < p
    yc = np.where(
        fore,
        m / p**2 * (2 * p * x - x**2),
        m / (1 - p) ** 2 * ((1 - 2 * p) + 2 * p * x - x**2),
    )
    dyc = np.where(
        fore,
        2 * m / p**2 * (p - x),
        2 * m / (1 - p) ** 2 * (p - x),
    )
    return yc, dyc


def naca4_polygon(code: str, samples: int) -> Polygon:
    """
    Closed, clockwise NACA 4-digit polygon in chord units.

    Args:
        code: Four-digit designation, e.g. ``"0012"``.
        samples: Points per surface; floored and raised to the configured minimum.

    Returns:
        Upper surface (LE -> TE) followed by the lower surface (TE -> LE),
        with the first point repeated at the end.
    """
    params = Naca4Parameters.from_code(code)
    n = max(config.tuning.min_airfoil_samples, int(np.floor(samples)))

    x = cosine_spacing(n)
    yt = thickness_distribution(x, params.thickness)
    yc, dyc = camber_line(x, params)
    theta = np.arctan(dyc)

    xu = x - yt * np.sin(theta)
    yu = yc + yt * np.cos(theta)
    xl = x + yt * np.sin(theta)
    yl = yc - yt * np.cos(theta)

    upper = [(float(a), float(b)) for a, b in zip(xu, yu)]
    lower = [(float(a), float(b)) for a, b in zip(xl[::-1], yl[::-1])]
    return ensure_clockwise(upper + lower)


class AirfoilFactory:
    """Memoizes normalized airfoil polygons so every rib station reuses one section."""

    def __init__(self):
        self._cache: Dict[Tuple[str, int], Tuple[Tuple[float, float], ...]] = {}

    def load(self, code: str, samples: int) -> Polygon:
        """Get the normalized polygon for ``code`` (a fresh list per call)."""
        cache_key = (code, int(np.floor(samples)))
        if cache_key not in self._cache:
            self._cache[cache_key] = tuple(naca4_polygon(code, samples))
        return list(self._cache[cache_key])

    def scaled(self, code: str, samples: int, chord: float) -> Polygon:
        """Polygon scaled to a physical chord length."""
        return [(x * chord, y * chord) for x, y in self.load(code, samples)]

    def clear(self) -> None:
        self._cache.clear()
