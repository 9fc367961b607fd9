"""Sweep cross-section profiles along the backbone into a triangle mesh.

Per chain, one Catmull-Rom curve runs through the prepared control points and
a second through the guide normals (treated as points, so the frame rotates
smoothly instead of lerping between normals ~80° apart in a helix).  Both are
sampled ``subdivisions`` times per control interval.  Inside an idealized
helix run, position and frame come from the fitted helix instead; the
backbone curve takes the helix derivative as its slope at run points, and
the guide normal is blended into the run radial over the adjoining
intervals, so the frame stays continuous across run boundaries.

Ring layout: ``ring_count`` rings of ``profile_points + 1`` vertices (the
seam vertex is duplicated so each ring is an open strip), followed by the
start and end cap-centre vertices.
"""

from __future__ import annotations
from dataclasses import dataclass, field

import numpy as np

from protein_cartoon.backbone.helix import HelixRun
from protein_cartoon.backbone.trace import BackboneTrace
from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.geometry import normalize, orthogonalize
from protein_cartoon.ribbon.normals import compute_guide_normals
from protein_cartoon.ribbon.profiles import Profile, nearest_index, select_profile
from protein_cartoon.ribbon.spline import CatmullRomCurve


@dataclass
class RibbonMesh:
    """Triangulated cartoon surface of one chain.

    Topology is fixed after the build; only ``positions``, ``colors`` and
    ``visible`` are rewritten by the per-residue mutators, which reuse the
    preallocated ``ring_visible`` / ``ring_hidden`` masks.
    """
    chain_id: str
    positions: np.ndarray         # (V, 3) float32
    normals: np.ndarray           # (V, 3) float32
    colors: np.ndarray            # (V, 3) float32
    indices: np.ndarray           # (F, 3) uint32
    vertex_control: np.ndarray    # (V,) control-point index per vertex
    vertex_atoms: np.ndarray      # (V,) central atom index per vertex
    control_atoms: np.ndarray     # (n,) central atom index per control point
    control_residues: np.ndarray  # (n,) residue index per control point
    ring_centers: np.ndarray      # (R, 3) float32, curve point of each ring
    base_positions: np.ndarray    # (V, 3) float32, positions as built
    sample_params: np.ndarray     # (R,) fractional control index of each ring
    profile_widths: np.ndarray    # (R,) cross-section width of each ring
    ring_size: int
    ring_atoms: np.ndarray        # (R,) central atom index per ring
    helix_runs: list[HelixRun] = field(default_factory=list)
    strand_ends: list[int] = field(default_factory=list)
    visible: bool = True
    ring_visible: np.ndarray = field(init=False, repr=False)   # (R,) scratch
    ring_hidden: np.ndarray = field(init=False, repr=False)    # (R,) scratch

    def __post_init__(self) -> None:
        self.ring_visible = np.ones(self.ring_count, dtype=bool)
        self.ring_hidden = np.zeros(self.ring_count, dtype=bool)

    @property
    def ring_count(self) -> int:
        return len(self.ring_centers)

    @property
    def vertex_count(self) -> int:
        return len(self.positions)

    @property
    def face_count(self) -> int:
        return len(self.indices)

    @property
    def start_cap(self) -> int:
        return self.ring_count * self.ring_size

    @property
    def end_cap(self) -> int:
        return self.start_cap + 1

    def ring_slice(self, ring: int) -> slice:
        return slice(ring * self.ring_size, (ring + 1) * self.ring_size)


def _smoothstep(t: float) -> float:
    t = min(max(t, 0.0), 1.0)
    return t * t * (3.0 - 2.0 * t)


def _frame_signs(runs: list[HelixRun], guide_normals: np.ndarray) -> np.ndarray:
    """Per-control-point sign applied to the "up" direction.

    Cross-sections are centrally symmetric, so a whole non-helix segment or
    helix run may be flipped.  Signs are chosen left to right so the frame
    never turns more than 90° at a run boundary.
    """
    n = len(guide_normals)
    signs = np.ones(n)
    sign = 1.0
    cursor = 0
    for run in runs:
        signs[cursor:run.start] = sign
        if run.start > 0:
            ref = sign * guide_normals[run.start - 1]
            sign = 1.0 if float(np.dot(run.radial(run.start), ref)) >= 0 else -1.0
        signs[run.start:run.end + 1] = sign
        if run.end + 1 < n:
            exit_normal = sign * run.radial(run.end)
            sign = 1.0 if float(np.dot(guide_normals[run.end + 1], exit_normal)) >= 0 else -1.0
        cursor = run.end + 1
    signs[cursor:] = sign
    return signs


class _SweepFrames:
    """Position and orthonormal frame at any fractional control index.

    Inside an idealized helix run the frame comes from the fitted helix,
    with the outward radial as "up".  Elsewhere it follows the backbone
    curve and the guide-normal curve; over the interval next to a helix run
    the guide normal is blended into the run's end radial so the frame is
    continuous where the two meet.
    """

    def __init__(self, trace: BackboneTrace, guide_normals: np.ndarray) -> None:
        self.runs = trace.helix_runs
        slopes = {
            i: run.derivative(i)
            for run in self.runs
            for i in range(run.start, run.end + 1)
        }
        self.curve = CatmullRomCurve(trace.points, fixed_slopes=slopes)
        self.normal_curve = CatmullRomCurve(guide_normals)
        self.signs = _frame_signs(self.runs, guide_normals)
        self.entering = {run.start: run for run in self.runs}
        self.leaving = {run.end: run for run in self.runs}
        self.last = len(trace) - 1

    def _run_at(self, u: float) -> HelixRun | None:
        for run in self.runs:
            if run.contains(u):
                return run
        return None

    def _guide(self, u: float) -> np.ndarray:
        lo = min(max(int(np.floor(u)), 0), self.last - 1)
        guide = np.asarray(self.normal_curve.point(u), dtype=np.float64)
        run = self.leaving.get(lo)
        if run is not None:
            weight, anchor, side = 1.0 - _smoothstep(u - lo), run.end, lo + 1
        else:
            run = self.entering.get(lo + 1)
            if run is None:
                return guide * self.signs[lo]
            weight, anchor, side = _smoothstep(u - lo), run.start, lo
        radial = run.radial(anchor) * self.signs[anchor]
        return (1.0 - weight) * self.signs[side] * guide + weight * radial

    def __call__(self, u: float) -> tuple[np.ndarray, np.ndarray, np.ndarray, np.ndarray]:
        """Return ``(position, tangent, normal, binormal)`` at *u*."""
        run = self._run_at(u)
        if run is not None:
            pos, tangent, radial = run.sample(u)
            binormal = normalize(np.cross(tangent, radial * self.signs[run.start]))
            normal = np.cross(binormal, tangent)
            if float(np.dot(binormal, binormal)) > 0.5:
                return pos, tangent, normal, binormal
        pos = np.asarray(self.curve.point(u), dtype=np.float64)
        tangent = self.curve.tangent(u)
        normal = orthogonalize(self._guide(u), tangent)
        binormal = normalize(np.cross(tangent, normal))
        return pos, tangent, normal, binormal


def _triangulate(ring_count: int, profile_n: int, start_cap: int, end_cap: int) -> np.ndarray:
    ring_size = profile_n + 1
    s = np.arange(ring_count - 1)[:, None]
    p = np.arange(profile_n)[None, :]
    a0 = (s * ring_size + p).ravel()
    a1 = a0 + 1
    b0 = a0 + ring_size
    b1 = b0 + 1
    tube = np.column_stack([a0, b0, a1, a1, b0, b1]).reshape(-1, 3)

    p = np.arange(profile_n)
    p_next = (p + 1) % profile_n
    first = np.column_stack([np.full(profile_n, start_cap), p, p_next])
    last_ring = (ring_count - 1) * ring_size
    last = np.column_stack([np.full(profile_n, end_cap), last_ring + p_next, last_ring + p])
    return np.vstack([tube, first, last]).astype(np.uint32)


def build_ribbon_mesh(
    trace: BackboneTrace,
    config: CartoonConfig = DEFAULT_CONFIG,
) -> RibbonMesh:
    """Sweep the chain's cross-sections into a :class:`RibbonMesh`.

    *trace* must already have been through the control-point stages
    (see :func:`protein_cartoon.backbone.prepare_backbone`).
    """
    n = len(trace)
    if n < 2:
        raise ValueError(f"chain {trace.chain_id}: need at least two control points")

    guide_normals = compute_guide_normals(trace, config)
    frames = _SweepFrames(trace, guide_normals)
    ends = trace.strand_ends()
    end_set = set(ends)

    profile_n = config.profile_points
    ring_size = profile_n + 1
    ring_count = (n - 1) * config.subdivisions + 1
    vertex_count = ring_count * ring_size + 2

    positions = np.empty((vertex_count, 3), dtype=np.float32)
    normals = np.empty((vertex_count, 3), dtype=np.float32)
    vertex_control = np.empty(vertex_count, dtype=np.int64)
    ring_centers = np.empty((ring_count, 3), dtype=np.float32)
    sample_params = np.arange(ring_count, dtype=np.float64) / config.subdivisions
    profile_widths = np.empty(ring_count, dtype=np.float32)
    seam = np.r_[np.arange(profile_n), 0]

    first_tangent = last_tangent = None
    for s, u in enumerate(sample_params):
        pos, tangent, normal, binormal = frames(u)
        if s == 0:
            first_tangent = tangent
        last_tangent = tangent

        profile: Profile = select_profile(u, trace.ss, end_set, config)
        pts = profile.points[seam]
        pns = profile.normals[seam]

        ring = slice(s * ring_size, (s + 1) * ring_size)
        positions[ring] = pos + pts[:, :1] * binormal + pts[:, 1:] * normal
        vn = pns[:, :1] * binormal + pns[:, 1:] * normal
        lengths = np.linalg.norm(vn, axis=1, keepdims=True)
        lengths[lengths < 1e-12] = 1.0
        normals[ring] = vn / lengths
        vertex_control[ring] = nearest_index(u, n)
        ring_centers[s] = pos
        profile_widths[s] = profile.width

    start_cap = ring_count * ring_size
    end_cap = start_cap + 1
    positions[start_cap] = ring_centers[0]
    normals[start_cap] = -first_tangent
    vertex_control[start_cap] = 0
    positions[end_cap] = ring_centers[-1]
    normals[end_cap] = last_tangent
    vertex_control[end_cap] = n - 1

    return RibbonMesh(
        chain_id=trace.chain_id,
        positions=positions,
        normals=normals,
        colors=np.ones((vertex_count, 3), dtype=np.float32),
        indices=_triangulate(ring_count, profile_n, start_cap, end_cap),
        vertex_control=vertex_control,
        vertex_atoms=trace.atom_indices[vertex_control],
        control_atoms=trace.atom_indices.copy(),
        control_residues=trace.residue_indices.copy(),
        ring_centers=ring_centers,
        base_positions=positions.copy(),
        sample_params=sample_params,
        profile_widths=profile_widths,
        ring_size=ring_size,
        ring_atoms=trace.atom_indices[vertex_control[:start_cap:ring_size]],
        helix_runs=list(trace.helix_runs),
        strand_ends=ends,
    )
