"""Conversion of ribbon meshes to trimesh, and validation."""

from __future__ import annotations
import warnings

import numpy as np
import trimesh

from protein_cartoon.ribbon.mesh import RibbonMesh


def ribbon_to_trimesh(ribbon: RibbonMesh) -> trimesh.Trimesh:
    """Wrap *ribbon*'s current buffers in a trimesh.Trimesh (no processing)."""
    colors = np.clip(ribbon.colors * 255.0, 0, 255).astype(np.uint8)
    rgba = np.column_stack([colors, np.full(len(colors), 255, dtype=np.uint8)])
    return trimesh.Trimesh(
        vertices=np.asarray(ribbon.positions, dtype=np.float64),
        faces=np.asarray(ribbon.indices, dtype=np.int64),
        vertex_normals=np.asarray(ribbon.normals, dtype=np.float64),
        vertex_colors=rgba,
        process=False,
    )


def validate_mesh(mesh: trimesh.Trimesh, name: str = "mesh") -> None:
    """Emit warnings for common mesh problems.

    Ring seams duplicate a vertex, so the check runs on a copy with
    coincident vertices merged.
    """
    if len(mesh.faces) == 0:
        warnings.warn(f"{name}: mesh has no faces")
        return
    m = trimesh.Trimesh(vertices=mesh.vertices, faces=mesh.faces, process=False)
    m.merge_vertices()
    if not m.is_watertight:
        warnings.warn(f"{name}: mesh is not watertight (has boundary edges)")
    if not m.is_winding_consistent:
        warnings.warn(f"{name}: winding is inconsistent")
    if len(mesh.faces) > 2_000_000:
        warnings.warn(
            f"{name}: mesh has {len(mesh.faces):,} faces; consider lowering "
            "subdivisions or profile_points"
        )
