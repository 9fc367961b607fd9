"""Small vector helpers shared by the backbone and ribbon stages."""

from __future__ import annotations
import numpy as np

EPS = 1e-8

_Y_AXIS = np.array([0.0, 1.0, 0.0])
_X_AXIS = np.array([1.0, 0.0, 0.0])


def normalize(v: np.ndarray, fallback: np.ndarray | None = None) -> np.ndarray:
    """Return *v* scaled to unit length, or *fallback* when *v* is ~zero."""
    length = float(np.linalg.norm(v))
    if length < EPS:
        if fallback is None:
            return np.zeros(3)
        return np.asarray(fallback, dtype=np.float64)
    return v / length


def reference_up(direction: np.ndarray) -> np.ndarray:
    """A fixed reference vector that is not near-parallel to *direction*."""
    return _Y_AXIS if abs(direction[1]) < 0.9 else _X_AXIS


def any_perpendicular(direction: np.ndarray) -> np.ndarray:
    """Deterministic unit vector perpendicular to *direction*."""
    d = normalize(direction, fallback=_X_AXIS)
    return normalize(np.cross(d, reference_up(d)), fallback=_Y_AXIS)


def orthogonalize(v: np.ndarray, direction: np.ndarray) -> np.ndarray:
    """Gram-Schmidt *v* against unit *direction*; perpendicular fallback."""
    w = v - direction * float(np.dot(v, direction))
    if float(np.dot(w, w)) < 1e-6:
        return any_perpendicular(direction)
    return w / float(np.linalg.norm(w))


def chord_tangents(points: np.ndarray) -> np.ndarray:
    """Forward-difference unit tangents (backward at the last point)."""
    n = len(points)
    tangents = np.zeros((n, 3))
    if n < 2:
        tangents[:] = _X_AXIS
        return tangents
    diffs = np.diff(points, axis=0)
    tangents[:-1] = diffs
    tangents[-1] = diffs[-1]
    for i in range(n):
        fallback = tangents[i - 1] if i > 0 else _X_AXIS
        tangents[i] = normalize(tangents[i], fallback=fallback)
    return tangents
