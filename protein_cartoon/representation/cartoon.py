"""Cartoon representation: one swept ribbon mesh per chain."""

from __future__ import annotations
import warnings

import numpy as np
import trimesh
from tqdm import tqdm

from protein_cartoon.backbone import BackboneTrace, prepare_backbone
from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.mesh.clean import ribbon_to_trimesh
from protein_cartoon.ribbon.mesh import RibbonMesh, build_ribbon_mesh
from protein_cartoon.ribbon.mutators import apply_colors, apply_visibility
from protein_cartoon.representation.base import Representation
from protein_cartoon.structure.models import Chain, Structure


class CartoonRepresentation(Representation):
    """Helix ribbons, sheet arrows and coil tubes.

    After :meth:`build`, ``meshes`` holds one :class:`RibbonMesh` per chain
    that produced geometry and ``traces`` the matching prepared backbones.
    A chain whose build raises is skipped with a warning.
    """

    def __init__(self, structure: Structure, config: CartoonConfig = DEFAULT_CONFIG) -> None:
        super().__init__(structure, config)
        self.meshes: list[RibbonMesh] = []
        self.traces: list[BackboneTrace] = []

    def build_chain(self, chain: Chain) -> tuple[BackboneTrace, RibbonMesh] | None:
        trace = prepare_backbone(self.structure, chain, self.config)
        if trace is None:
            return None
        return trace, build_ribbon_mesh(trace, self.config)

    def build(self, verbose: bool = False) -> "CartoonRepresentation":
        self.dispose()
        for chain in tqdm(self.structure.chains, desc="Building cartoon",
                          disable=not verbose, unit="chain", leave=False):
            try:
                result = self.build_chain(chain)
            except Exception as exc:
                warnings.warn(f"chain {chain.chain_id}: cartoon build failed ({exc}); skipping")
                continue
            if result is None:
                continue
            trace, mesh = result
            self.traces.append(trace)
            self.meshes.append(mesh)
        return self

    def apply_colors(self, atom_colors: np.ndarray) -> None:
        atom_colors = np.asarray(atom_colors)
        if len(atom_colors) != self.structure.atom_count:
            raise ValueError(
                f"expected {self.structure.atom_count} atom colours, got {len(atom_colors)}"
            )
        for mesh in self.meshes:
            apply_colors(mesh, atom_colors)

    def apply_visibility(
        self,
        atom_visible: np.ndarray,
        scale_multipliers: np.ndarray | None = None,
    ) -> None:
        atom_visible = np.asarray(atom_visible, dtype=bool)
        if len(atom_visible) != self.structure.atom_count:
            raise ValueError(
                f"expected {self.structure.atom_count} visibility flags, "
                f"got {len(atom_visible)}"
            )
        for mesh in self.meshes:
            apply_visibility(mesh, atom_visible, scale_multipliers)

    def dispose(self) -> None:
        self.meshes = []
        self.traces = []

    def to_trimesh(self, visible_only: bool = True) -> trimesh.Trimesh:
        """Concatenate chain meshes into one trimesh with vertex colours."""
        parts = [ribbon_to_trimesh(m) for m in self.meshes if m.visible or not visible_only]
        if not parts:
            return trimesh.Trimesh()
        if len(parts) == 1:
            return parts[0]
        return trimesh.util.concatenate(parts)
