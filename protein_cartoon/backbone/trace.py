"""Per-chain backbone trace: ordered control points with class annotations."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import numpy as np

from protein_cartoon.structure.models import Chain, SecondaryStructure, Structure

if TYPE_CHECKING:
    from protein_cartoon.backbone.helix import HelixRun


@dataclass
class BackboneTrace:
    """Control points of one chain.

    ``points`` is rewritten in place by the smoothing stages; ``original``
    keeps the pre-smoothing snapshot so the guide-normal builder can use the
    displacement between the two.
    """
    chain_id: str
    atom_indices: np.ndarray        # (n,) central atom index per control point
    residue_indices: np.ndarray     # (n,) residue index per control point
    ss: np.ndarray                  # (n,) int8 SecondaryStructure codes
    original: np.ndarray            # (n, 3)
    points: np.ndarray              # (n, 3)
    c_positions: np.ndarray         # (n, 3), NaN where the atom is absent
    n_positions: np.ndarray         # (n, 3), NaN where the atom is absent
    helix_runs: list["HelixRun"] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.points)

    def runs(self, ss: SecondaryStructure) -> list[tuple[int, int]]:
        return find_runs(self.ss, ss)

    def strand_ends(self) -> list[int]:
        return strand_ends(self.ss)


def find_runs(ss: np.ndarray, target: int) -> list[tuple[int, int]]:
    """Return ``(start, end)`` inclusive index pairs of maximal runs of *target*."""
    runs: list[tuple[int, int]] = []
    start = -1
    for i, value in enumerate(ss):
        if value == target:
            if start < 0:
                start = i
        elif start >= 0:
            runs.append((start, i - 1))
            start = -1
    if start >= 0:
        runs.append((start, len(ss) - 1))
    return runs


def strand_ends(ss: np.ndarray) -> list[int]:
    """Indices of sheet points whose successor is non-sheet or absent."""
    return [end for _, end in find_runs(ss, SecondaryStructure.SHEET)]


def extract_backbone(structure: Structure, chain: Chain) -> BackboneTrace | None:
    """Collect control points for *chain*; ``None`` if fewer than two exist.

    Residues without a central backbone atom are skipped.
    """
    positions = structure.positions
    atom_idx: list[int] = []
    res_idx: list[int] = []
    ss: list[int] = []
    c_pos: list[np.ndarray] = []
    n_pos: list[np.ndarray] = []
    missing = np.full(3, np.nan)

    for ri in range(chain.residue_start, chain.residue_end):
        res = structure.residues[ri]
        if res.ca_index < 0:
            continue
        atom_idx.append(res.ca_index)
        res_idx.append(ri)
        ss.append(int(res.ss))
        c_pos.append(positions[res.c_index] if res.c_index >= 0 else missing)
        n_pos.append(positions[res.n_index] if res.n_index >= 0 else missing)

    if len(atom_idx) < 2:
        return None

    atom_indices = np.asarray(atom_idx, dtype=np.int64)
    original = positions[atom_indices].astype(np.float64)
    return BackboneTrace(
        chain_id=chain.chain_id,
        atom_indices=atom_indices,
        residue_indices=np.asarray(res_idx, dtype=np.int64),
        ss=np.asarray(ss, dtype=np.int8),
        original=original,
        points=original.copy(),
        c_positions=np.array(c_pos, dtype=np.float64),
        n_positions=np.array(n_pos, dtype=np.float64),
    )
