"""Ribbon geometry: guide normals, profiles, sweep and per-residue updates."""

from protein_cartoon.ribbon.mesh import RibbonMesh, build_ribbon_mesh
from protein_cartoon.ribbon.mutators import apply_colors, apply_visibility
from protein_cartoon.ribbon.normals import compute_guide_normals

__all__ = [
    "RibbonMesh",
    "apply_colors",
    "apply_visibility",
    "build_ribbon_mesh",
    "compute_guide_normals",
]
