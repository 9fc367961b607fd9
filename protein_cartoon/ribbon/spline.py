"""Uniform Catmull-Rom curves through per-residue samples."""

from __future__ import annotations
import numpy as np
from scipy.interpolate import CubicHermiteSpline


class CatmullRomCurve:
    """C1 curve through (n, d) *points*, parameterized by control index.

    Evaluating at ``u`` in ``[0, n - 1]`` passes through ``points[k]`` at
    ``u == k``.  Interior tangents are ``(P_{k+1} - P_{k-1}) / 2``; the two
    end tangents use the adjacent chord (equivalent to reflected phantom
    end points).  *fixed_slopes* overrides the slope at chosen indices.
    """

    def __init__(
        self,
        points: np.ndarray,
        fixed_slopes: dict[int, np.ndarray] | None = None,
    ) -> None:
        points = np.asarray(points, dtype=np.float64)
        if len(points) < 2:
            raise ValueError("CatmullRomCurve needs at least two points")
        slopes = np.empty_like(points)
        slopes[1:-1] = 0.5 * (points[2:] - points[:-2])
        slopes[0] = points[1] - points[0]
        slopes[-1] = points[-1] - points[-2]
        for k, slope in (fixed_slopes or {}).items():
            slopes[k] = slope
        self.points = points
        self._spline = CubicHermiteSpline(
            np.arange(len(points), dtype=np.float64), points, slopes, axis=0,
        )
        self._derivative = self._spline.derivative()

    def __len__(self) -> int:
        return len(self.points)

    def point(self, u: float | np.ndarray) -> np.ndarray:
        return self._spline(u)

    def derivative(self, u: float | np.ndarray) -> np.ndarray:
        return self._derivative(u)

    def tangent(self, u: float) -> np.ndarray:
        """Unit tangent at *u*, falling back to the enclosing chord."""
        d = np.asarray(self._derivative(u), dtype=np.float64)
        length = float(np.linalg.norm(d))
        if length > 1e-8:
            return d / length
        k = min(max(int(np.floor(u)), 0), len(self.points) - 2)
        chord = self.points[k + 1] - self.points[k]
        chord_len = float(np.linalg.norm(chord))
        return chord / chord_len if chord_len > 1e-8 else np.array([1.0, 0.0, 0.0])
