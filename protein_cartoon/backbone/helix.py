"""Helix idealization: fit each helix run to an exact circular helix.

For a run of control points ``P_0 .. P_{m-1}``:

  1. centroid + 3x3 covariance of the points about it;
  2. dominant eigenvector by power iteration → helix axis, oriented from the
     first point toward the last;
  3. each point splits into a height along the axis and a radial vector;
     the mean radial length is the helix radius;
  4. radial vectors become angles in a fixed basis perpendicular to the
     axis, unwrapped so consecutive steps never jump by more than π;
  5. angle and height are each fitted as a linear function of the index.

The run's points are then replaced by samples of the fitted screw, and the
parameters are kept on a :class:`HelixRun` so the ribbon builder can sample
position and frame analytically between control points.
"""

from __future__ import annotations
from dataclasses import dataclass

import numpy as np

from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.backbone.trace import find_runs
from protein_cartoon.geometry import EPS, normalize, reference_up
from protein_cartoon.structure.models import SecondaryStructure


@dataclass
class HelixRun:
    start: int                 # first control-point index (inclusive)
    end: int                   # last control-point index (inclusive)
    centroid: np.ndarray
    axis: np.ndarray           # unit, first → last
    basis_u: np.ndarray        # unit, perpendicular to axis
    basis_v: np.ndarray        # axis × basis_u
    phase: float               # angle at local index 0 (radians)
    angular_rate: float        # radians per residue
    height_offset: float       # height at local index 0
    height_rate: float         # Angstroms per residue
    radius: float

    def __len__(self) -> int:
        return self.end - self.start + 1

    def contains(self, index: float) -> bool:
        return self.start <= index <= self.end

    def radial(self, index: float) -> np.ndarray:
        """Unit outward direction from the axis at fractional *index*."""
        angle = self.phase + self.angular_rate * (index - self.start)
        return np.cos(angle) * self.basis_u + np.sin(angle) * self.basis_v

    def position(self, index: float) -> np.ndarray:
        local = index - self.start
        height = self.height_offset + self.height_rate * local
        return self.centroid + height * self.axis + self.radius * self.radial(index)

    def derivative(self, index: float) -> np.ndarray:
        """Derivative of :meth:`position` with respect to index."""
        angle = self.phase + self.angular_rate * (index - self.start)
        swirl = -np.sin(angle) * self.basis_u + np.cos(angle) * self.basis_v
        return self.height_rate * self.axis + self.radius * self.angular_rate * swirl

    def tangent(self, index: float) -> np.ndarray:
        return normalize(self.derivative(index), fallback=self.axis)

    def sample(self, index: float) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
        """Return ``(position, tangent, radial)`` at fractional *index*."""
        return self.position(index), self.tangent(index), self.radial(index)


def dominant_eigenvector(
    matrix: np.ndarray,
    initial: np.ndarray,
    iterations: int = 100,
    tolerance: float = 1e-10,
) -> np.ndarray:
    """Power iteration for the dominant eigenvector of a symmetric 3x3 matrix."""
    v = normalize(initial, fallback=np.array([1.0, 0.0, 0.0]))
    for _ in range(iterations):
        w = matrix @ v
        norm = float(np.linalg.norm(w))
        if norm < EPS:
            break
        w = w / norm
        if float(np.linalg.norm(w - v)) < tolerance:
            v = w
            break
        v = w
    return v


def _linear_fit(x: np.ndarray, y: np.ndarray) -> tuple[float, float]:
    """Least-squares ``y ≈ offset + rate * x``; returns ``(offset, rate)``."""
    x_mean = float(x.mean())
    y_mean = float(y.mean())
    var = float(((x - x_mean) ** 2).sum())
    rate = float(((x - x_mean) * (y - y_mean)).sum()) / var if var > EPS else 0.0
    return y_mean - rate * x_mean, rate


def fit_helix(
    points: np.ndarray,
    start: int,
    config: CartoonConfig = DEFAULT_CONFIG,
) -> HelixRun:
    """Fit an ideal helix to the (m, 3) *points* of a run beginning at *start*."""
    m = len(points)
    centroid = points.mean(axis=0)
    centered = points - centroid
    cov = centered.T @ centered / m

    span = points[-1] - points[0]
    axis = dominant_eigenvector(
        cov, span, config.power_iterations, config.power_tolerance,
    )
    if float(np.dot(axis, span)) < 0:
        axis = -axis

    heights = centered @ axis
    radial = centered - np.outer(heights, axis)
    radius = float(np.linalg.norm(radial, axis=1).mean())

    basis_u = normalize(np.cross(axis, reference_up(axis)))
    basis_v = np.cross(axis, basis_u)
    angles = np.unwrap(np.arctan2(radial @ basis_v, radial @ basis_u))

    local = np.arange(m, dtype=np.float64)
    phase, angular_rate = _linear_fit(local, angles)
    height_offset, height_rate = _linear_fit(local, heights)

    return HelixRun(
        start=start,
        end=start + m - 1,
        centroid=centroid,
        axis=axis,
        basis_u=basis_u,
        basis_v=basis_v,
        phase=phase,
        angular_rate=angular_rate,
        height_offset=height_offset,
        height_rate=height_rate,
        radius=radius,
    )


def idealize_helices(
    points: np.ndarray,
    ss: np.ndarray,
    config: CartoonConfig = DEFAULT_CONFIG,
) -> list[HelixRun]:
    """Replace every helix run of sufficient length by its fitted helix.

    *points* is modified in place.  Runs shorter than
    ``config.min_helix_points`` are left untouched.
    """
    runs: list[HelixRun] = []
    for start, end in find_runs(ss, SecondaryStructure.HELIX):
        if end - start + 1 < config.min_helix_points:
            continue
        run = fit_helix(points[start:end + 1], start, config)
        for i in range(start, end + 1):
            points[i] = run.position(i)
        runs.append(run)
    return runs
