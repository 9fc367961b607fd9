"""Central data structures for the protein_cartoon package."""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import IntEnum

import numpy as np


class SecondaryStructure(IntEnum):
    COIL = 0
    HELIX = 1
    SHEET = 2


@dataclass
class Atom:
    element: str
    name: str
    pos: np.ndarray        # shape (3,), Angstroms
    serial: int = 0
    is_het: bool = False


@dataclass
class Residue:
    name: str
    seq: int
    chain_id: str
    icode: str = " "
    atom_start: int = 0
    atom_end: int = 0                          # exclusive
    ss: SecondaryStructure = SecondaryStructure.COIL
    ca_index: int = -1                         # central backbone atom, -1 if absent
    c_index: int = -1                          # flanking carbonyl carbon
    n_index: int = -1                          # flanking amide nitrogen


@dataclass
class Chain:
    chain_id: str
    residue_start: int
    residue_end: int                           # exclusive

    def __len__(self) -> int:
        return self.residue_end - self.residue_start


@dataclass
class Structure:
    """A parsed model: flat atom arrays plus residue/chain metadata."""
    atoms: list[Atom]
    residues: list[Residue]
    chains: list[Chain]
    pdb_id: str = ""
    title: str = ""
    positions: np.ndarray = field(init=False)  # (N, 3) float64

    def __post_init__(self) -> None:
        if self.atoms:
            self.positions = np.array([a.pos for a in self.atoms], dtype=np.float64)
        else:
            self.positions = np.zeros((0, 3), dtype=np.float64)

    @property
    def atom_count(self) -> int:
        return len(self.atoms)

    def chain_residues(self, chain: Chain) -> list[Residue]:
        return self.residues[chain.residue_start:chain.residue_end]
