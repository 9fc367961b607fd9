"""Per-residue colour and visibility updates on a built ribbon mesh.

Both operate in place on the mesh buffers and never touch topology.  With
float32 colours and a boolean visibility mask neither allocates per call:
gathers go through ``np.take(..., out=...)`` into the mesh's own buffers.
"""

from __future__ import annotations
import numpy as np

from protein_cartoon.ribbon.mesh import RibbonMesh


def _check_atom_count(mesh: RibbonMesh, count: int, what: str) -> None:
    needed = int(mesh.control_atoms.max()) + 1
    if count < needed:
        raise ValueError(f"{what} covers {count} atoms, chain {mesh.chain_id} needs {needed}")


def apply_colors(mesh: RibbonMesh, atom_colors: np.ndarray) -> None:
    """Copy each vertex's colour from the central atom of its residue.

    *atom_colors* is an ``(n_atoms, 3)`` array of RGB values.
    """
    atom_colors = np.asarray(atom_colors)
    if atom_colors.ndim != 2 or atom_colors.shape[1] != 3:
        raise ValueError(f"atom_colors must have shape (n_atoms, 3), got {atom_colors.shape}")
    _check_atom_count(mesh, len(atom_colors), "atom_colors")
    if atom_colors.dtype == mesh.colors.dtype:
        np.take(atom_colors, mesh.vertex_atoms, axis=0, out=mesh.colors, mode="clip")
    else:
        mesh.colors[:] = atom_colors[mesh.vertex_atoms]


def apply_visibility(
    mesh: RibbonMesh,
    atom_visible: np.ndarray,
    scale_multipliers: np.ndarray | None = None,
) -> bool:
    """Collapse rings of hidden residues onto their centre points.

    A ring whose residue is hidden has every vertex moved to its ring
    centre; visible rings get their built positions back, so hiding and
    re-showing restores the mesh exactly.  Cap centres follow the first and
    last control point.  *scale_multipliers* is accepted for parity with
    other representations and ignored.  Returns ``mesh.visible``, which is
    False only when every ring is hidden.
    """
    atom_visible = np.asarray(atom_visible)
    if atom_visible.dtype != bool:
        atom_visible = atom_visible.astype(bool)
    _check_atom_count(mesh, len(atom_visible), "atom_visible")

    np.take(atom_visible, mesh.ring_atoms, out=mesh.ring_visible, mode="clip")
    np.logical_not(mesh.ring_visible, out=mesh.ring_hidden)

    size = mesh.ring_size
    ring_vertices = mesh.ring_count * size
    rings = mesh.positions[:ring_vertices].reshape(mesh.ring_count, size, 3)
    base = mesh.base_positions[:ring_vertices].reshape(mesh.ring_count, size, 3)
    np.copyto(rings, base, where=mesh.ring_visible[:, None, None])
    np.copyto(rings, mesh.ring_centers[:, None, :], where=mesh.ring_hidden[:, None, None])

    for cap, ring, control in (
        (mesh.start_cap, 0, 0),
        (mesh.end_cap, mesh.ring_count - 1, len(mesh.control_atoms) - 1),
    ):
        if atom_visible[mesh.control_atoms[control]]:
            mesh.positions[cap] = mesh.base_positions[cap]
        else:
            mesh.positions[cap] = mesh.ring_centers[ring]

    mesh.visible = bool(mesh.ring_visible.any())
    return mesh.visible
