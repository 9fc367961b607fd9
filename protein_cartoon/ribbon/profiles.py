"""Cross-section profiles and their selection along the backbone.

A profile is a closed ring of ``profile_points`` 2D boundary points with
outward unit normals.  ``x`` spans the ribbon width (binormal direction),
``y`` its thickness (guide-normal direction).
"""

from __future__ import annotations
from functools import lru_cache
from typing import NamedTuple

import numpy as np

from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.structure.models import SecondaryStructure


class Profile(NamedTuple):
    points: np.ndarray     # (N, 2)
    normals: np.ndarray    # (N, 2), unit, outward

    @property
    def width(self) -> float:
        return float(self.points[:, 0].max() - self.points[:, 0].min())

    @property
    def thickness(self) -> float:
        return float(self.points[:, 1].max() - self.points[:, 1].min())


def _angles(n: int) -> np.ndarray:
    return np.arange(n) * (2.0 * np.pi / n)


def profile_normals(points: np.ndarray) -> np.ndarray:
    """Outward normals from central differences around the ring."""
    d = np.roll(points, -1, axis=0) - np.roll(points, 1, axis=0)
    normals = np.column_stack([d[:, 1], -d[:, 0]])
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    lengths[lengths < 1e-12] = 1.0
    return normals / lengths


def _profile(points: np.ndarray) -> Profile:
    return Profile(points, profile_normals(points))


def circle_profile(radius: float, n: int = 16) -> Profile:
    a = _angles(n)
    return _profile(np.column_stack([np.cos(a), np.sin(a)]) * radius)


def ellipse_profile(half_width: float, half_height: float, n: int = 16) -> Profile:
    a = _angles(n)
    return _profile(np.column_stack([np.cos(a) * half_width, np.sin(a) * half_height]))


def superellipse_profile(
    half_width: float,
    half_height: float,
    exponent: float = 4.0,
    n: int = 16,
) -> Profile:
    """Rounded rectangle ``|x/a|^e + |y/b|^e = 1`` sampled at even angles."""
    a = _angles(n)
    ca, sa = np.cos(a), np.sin(a)
    r = 1.0 / (np.abs(ca) ** exponent + np.abs(sa) ** exponent) ** (1.0 / exponent)
    return _profile(np.column_stack([ca * r * half_width, sa * r * half_height]))


def lerp_profile(a: Profile, b: Profile, t: float) -> Profile:
    """Blend point/normal pairs; normals are renormalized."""
    points = a.points * (1.0 - t) + b.points * t
    normals = a.normals * (1.0 - t) + b.normals * t
    lengths = np.linalg.norm(normals, axis=1, keepdims=True)
    lengths[lengths < 1e-12] = 1.0
    return Profile(points, normals / lengths)


@lru_cache(maxsize=32)
def base_profile(ss: int, config: CartoonConfig = DEFAULT_CONFIG) -> Profile:
    """Cached cross-section of class *ss*; its arrays are read-only."""
    n = config.profile_points
    if ss == SecondaryStructure.HELIX:
        prof = ellipse_profile(config.helix_width / 2, config.helix_thickness / 2, n)
    elif ss == SecondaryStructure.SHEET:
        prof = superellipse_profile(
            config.sheet_width / 2, config.sheet_thickness / 2,
            config.superellipse_exponent, n,
        )
    else:
        prof = circle_profile(config.coil_radius, n)
    prof.points.flags.writeable = False
    prof.normals.flags.writeable = False
    return prof


def sheet_profile_at_width(width: float, config: CartoonConfig = DEFAULT_CONFIG) -> Profile:
    """Sheet cross-section at *width*; thickness never exceeds the width."""
    width = max(width, config.min_profile_width)
    thickness = min(config.sheet_thickness, width)
    return superellipse_profile(
        width / 2, thickness / 2, config.superellipse_exponent, config.profile_points,
    )


def tip_profile(config: CartoonConfig = DEFAULT_CONFIG) -> Profile:
    return sheet_profile_at_width(config.min_profile_width, config)


def arrow_width_at(u: float, tip: int, config: CartoonConfig = DEFAULT_CONFIG) -> float | None:
    """Arrowhead width at fractional index *u*, or ``None`` outside the taper.

    Linear from ``arrow_width`` at ``tip - arrow_residues`` down to
    ``min_profile_width`` at the tip itself.
    """
    if not tip - config.arrow_residues <= u <= tip:
        return None
    width = config.arrow_width * (tip - u) / config.arrow_residues
    return max(width, config.min_profile_width)


def nearest_index(u: float, count: int) -> int:
    """Round-half-up *u* to a control-point index."""
    return min(int(np.floor(u + 0.5)), count - 1)


def select_profile(
    u: float,
    ss: np.ndarray,
    strand_end_set: set[int],
    config: CartoonConfig = DEFAULT_CONFIG,
) -> Profile:
    """Cross-section at fractional control index *u*.

    Precedence: arrowhead taper near a strand end, then class-boundary
    blending, then the base profile of the nearest control point.  Any
    boundary touching coil snaps to the coil profile; helix/sheet
    boundaries blend linearly.
    """
    n = len(ss)
    nearest = nearest_index(u, n)

    if ss[nearest] == SecondaryStructure.SHEET:
        for tip in sorted(strand_end_set):
            width = arrow_width_at(u, tip, config)
            if width is not None:
                return sheet_profile_at_width(width, config)

    lo = max(0, int(np.floor(u)))
    hi = min(lo + 1, n - 1)
    if lo != hi and ss[lo] != ss[hi]:
        if SecondaryStructure.COIL in (ss[lo], ss[hi]):
            return base_profile(SecondaryStructure.COIL, config)
        if ss[lo] == SecondaryStructure.SHEET and lo in strand_end_set:
            prof_a = tip_profile(config)
        else:
            prof_a = base_profile(int(ss[lo]), config)
        prof_b = base_profile(int(ss[hi]), config)
        return lerp_profile(prof_a, prof_b, u - lo)

    return base_profile(int(ss[nearest]), config)
