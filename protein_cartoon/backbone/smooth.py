"""Class-aware smoothing of control points.

Each coil or sheet point is pulled toward the mean of its ±1 window,
counting only neighbours of its own class, so averaging never leaks across
a class boundary.  Helix points are left alone; the idealizer replaces them.
"""

from __future__ import annotations
import numpy as np

from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.structure.models import SecondaryStructure


def smooth_positions(
    points: np.ndarray,
    ss: np.ndarray,
    config: CartoonConfig = DEFAULT_CONFIG,
) -> np.ndarray:
    """Smooth *points* in place and return them.

    A window holding fewer than two same-class points (the point itself
    included) leaves that point unchanged for the iteration, so isolated
    single-point runs never move.
    """
    n = len(points)
    weights = {
        SecondaryStructure.COIL: config.coil_smooth_weight,
        SecondaryStructure.SHEET: config.sheet_smooth_weight,
    }

    for _ in range(config.smooth_iterations):
        prev = points.copy()
        for i in range(n):
            w = weights.get(SecondaryStructure(ss[i]), 0.0)
            if w == 0.0:
                continue
            lo, hi = max(0, i - 1), min(n - 1, i + 1)
            same = [j for j in range(lo, hi + 1) if ss[j] == ss[i]]
            if len(same) < 2:
                continue
            mean = prev[same].mean(axis=0)
            points[i] = prev[i] + (mean - prev[i]) * w
    return points
