"""Per-control-point guide normals (the cross-section "up" direction).

Selection per point, first non-degenerate signal wins:

  (a) helix/sheet only: displacement from the original position to the
      smoothed/idealized one;
  (b) peptide-plane normal ``(C - CA) × (N - CA)``;
  (c) ``(P_i - P_{i-1}) × (P_{i+1} - P_i)``;
  (d) any vector perpendicular to the local chord.

The field is then sign-corrected, smoothed once over a 3-point window and
orthogonalized against the tangent of the smoothed control-point curve.
"""

from __future__ import annotations
import numpy as np

from protein_cartoon.backbone.trace import BackboneTrace
from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.geometry import (
    any_perpendicular, chord_tangents, normalize, orthogonalize,
)
from protein_cartoon.structure.models import SecondaryStructure

_MIN_CROSS_SQ = 1e-8


def _unit_or_none(v: np.ndarray, min_sq: float) -> np.ndarray | None:
    sq = float(np.dot(v, v))
    if not np.isfinite(sq) or sq <= min_sq:
        return None
    return v / np.sqrt(sq)


def _select_normal(trace: BackboneTrace, i: int, threshold_sq: float) -> np.ndarray:
    original = trace.original
    n = len(original)

    if trace.ss[i] != SecondaryStructure.COIL:
        norm = _unit_or_none(original[i] - trace.points[i], threshold_sq)
        if norm is not None:
            return norm

    c_pos, n_pos = trace.c_positions[i], trace.n_positions[i]
    if np.isfinite(c_pos).all() and np.isfinite(n_pos).all():
        norm = _unit_or_none(
            np.cross(c_pos - original[i], n_pos - original[i]), _MIN_CROSS_SQ,
        )
        if norm is not None:
            return norm

    prev, nxt = max(0, i - 1), min(n - 1, i + 1)
    if prev != i and nxt != i:
        norm = _unit_or_none(
            np.cross(original[i] - original[prev], original[nxt] - original[i]),
            _MIN_CROSS_SQ,
        )
        if norm is not None:
            return norm

    chord = original[i + 1] - original[i] if i < n - 1 else original[i] - original[i - 1]
    return any_perpendicular(chord)


def enforce_sign_consistency(normals: np.ndarray) -> np.ndarray:
    """Flip normals in place so consecutive ones never point > 90° apart."""
    for i in range(1, len(normals)):
        if float(np.dot(normals[i], normals[i - 1])) < 0:
            normals[i] = -normals[i]
    return normals


def compute_guide_normals(
    trace: BackboneTrace,
    config: CartoonConfig = DEFAULT_CONFIG,
) -> np.ndarray:
    """Return an (n, 3) array of unit guide normals for *trace*."""
    n = len(trace)
    threshold_sq = config.displacement_threshold ** 2
    normals = np.array([_select_normal(trace, i, threshold_sq) for i in range(n)])

    enforce_sign_consistency(normals)

    smoothed = normals.copy()
    for i in range(1, n - 1):
        smoothed[i] = normalize(
            normals[i - 1] + normals[i] + normals[i + 1], fallback=normals[i],
        )

    tangents = chord_tangents(trace.points)
    for i in range(n):
        smoothed[i] = orthogonalize(smoothed[i], tangents[i])

    # Orthogonalization can tip a nearly-perpendicular pair past 90°
    return enforce_sign_consistency(smoothed)
