"""Shared test fixtures for protein_cartoon."""

from __future__ import annotations

import numpy as np
import pytest

from protein_cartoon.structure.models import (
    Atom, Chain, Residue, SecondaryStructure, Structure,
)

COIL = SecondaryStructure.COIL
HELIX = SecondaryStructure.HELIX
SHEET = SecondaryStructure.SHEET


def helix_ca(
    n: int,
    radius: float = 2.3,
    rise: float = 1.5,
    turn_deg: float = 100.0,
    origin=(0.0, 0.0, 0.0),
) -> np.ndarray:
    """CA positions of an ideal alpha helix along +z."""
    k = np.arange(n)
    a = np.radians(turn_deg) * k
    pts = np.column_stack([radius * np.cos(a), radius * np.sin(a), rise * k])
    return pts + np.asarray(origin, dtype=np.float64)


def zigzag_strand(n: int, step: float = 3.3, amp: float = 0.9, warp: float = 0.4) -> np.ndarray:
    """A pleated strand along +x that is slightly out of plane."""
    k = np.arange(n, dtype=np.float64)
    return np.column_stack([
        step * k,
        warp * np.sin(0.7 * k),
        amp * np.where(k % 2 == 0, 1.0, -1.0),
    ])


def straight_line(n: int, spacing: float = 3.8) -> np.ndarray:
    k = np.arange(n, dtype=np.float64)
    return np.column_stack([spacing * k, np.zeros(n), np.zeros(n)])


def make_structure(
    chains: list[tuple[str, np.ndarray, list]],
    flanks: bool = True,
) -> Structure:
    """Build a Structure with N/CA/C atoms (or CA only) per residue."""
    atoms: list[Atom] = []
    residues: list[Residue] = []
    chain_list: list[Chain] = []

    for chain_id, ca, ss in chains:
        start_res = len(residues)
        n = len(ca)
        for i in range(n):
            prev, nxt = ca[max(i - 1, 0)], ca[min(i + 1, n - 1)]
            t = nxt - prev
            t = t / np.linalg.norm(t) if np.linalg.norm(t) > 1e-9 else np.array([1.0, 0.0, 0.0])
            p = np.cross(t, [0.0, 0.0, 1.0] if abs(t[2]) < 0.9 else [1.0, 0.0, 0.0])
            p = p / np.linalg.norm(p)

            res = Residue(name="ALA", seq=i + 1, chain_id=chain_id,
                          atom_start=len(atoms), ss=SecondaryStructure(ss[i]))
            if flanks:
                res.n_index = len(atoms)
                atoms.append(Atom("N", "N", ca[i] - 1.2 * t + 0.5 * p))
            res.ca_index = len(atoms)
            atoms.append(Atom("C", "CA", np.asarray(ca[i], dtype=np.float64)))
            if flanks:
                res.c_index = len(atoms)
                atoms.append(Atom("C", "C", ca[i] + 1.2 * t + 0.5 * p))
            res.atom_end = len(atoms)
            residues.append(res)
        chain_list.append(Chain(chain_id, start_res, len(residues)))

    return Structure(atoms=atoms, residues=residues, chains=chain_list)


def mixed_chain() -> tuple[np.ndarray, list]:
    """coil(3) → helix(8) → coil(3) → sheet(6) → coil(2), roughly connected."""
    coil_a = straight_line(3) + np.array([-12.0, 0.0, -4.0])
    helix = helix_ca(8, origin=(0.0, 0.0, 0.0))
    coil_b = helix[-1] + np.array([[3.5, 1.0, 1.0], [7.0, 1.5, 1.5], [10.5, 2.5, 1.0]])
    sheet = zigzag_strand(6) + coil_b[-1] + np.array([3.5, 0.0, 0.0])
    coil_c = sheet[-1] + np.array([[3.5, 1.0, 0.0], [7.0, 2.5, 0.5]])
    ca = np.vstack([coil_a, helix, coil_b, sheet, coil_c])
    ss = [COIL] * 3 + [HELIX] * 8 + [COIL] * 3 + [SHEET] * 6 + [COIL] * 2
    return ca, ss


@pytest.fixture
def mixed_structure() -> Structure:
    ca, ss = mixed_chain()
    return make_structure([("A", ca, ss)])


@pytest.fixture
def coil_structure() -> Structure:
    """Ten coil residues on a straight line along +x."""
    return make_structure([("A", straight_line(10), [COIL] * 10)])


@pytest.fixture
def helix_structure() -> Structure:
    return make_structure([("A", helix_ca(8), [HELIX] * 8)])


@pytest.fixture
def sheet_structure() -> Structure:
    """coil(2) → sheet(6) → coil(2)."""
    lead = np.array([[-7.0, 0.0, 0.0], [-3.5, 0.0, 0.5]])
    sheet = zigzag_strand(6)
    tail = sheet[-1] + np.array([[3.5, 1.0, 0.0], [7.0, 2.0, 0.0]])
    ca = np.vstack([lead, sheet, tail])
    ss = [COIL] * 2 + [SHEET] * 6 + [COIL] * 2
    return make_structure([("A", ca, ss)])


def _atom_line(serial, name, res_name, chain, seq, xyz, element, alt=" ", record="ATOM  "):
    padded = f" {name:<3s}" if len(name) < 4 else name
    return (
        f"{record}{serial:5d} {padded}{alt}{res_name:3s} {chain}{seq:4d}    "
        f"{xyz[0]:8.3f}{xyz[1]:8.3f}{xyz[2]:8.3f}  1.00  0.00          {element:>2s}"
    )


def structure_to_pdb(structure: Structure) -> str:
    """Serialize a synthetic Structure with HELIX/SHEET records."""
    from protein_cartoon.backbone.trace import find_runs

    lines = ["HEADER    TEST STRUCTURE                          01-JAN-00   1TST"]
    helix_id = sheet_id = 0
    for chain in structure.chains:
        residues = structure.chain_residues(chain)
        ss = np.array([int(r.ss) for r in residues])
        for start, end in find_runs(ss, HELIX):
            helix_id += 1
            lines.append(
                f"HELIX  {helix_id:3d} {helix_id:>3d} ALA {chain.chain_id} "
                f"{residues[start].seq:4d}  ALA {chain.chain_id} {residues[end].seq:4d}  1"
            )
        for start, end in find_runs(ss, SHEET):
            sheet_id += 1
            lines.append(
                f"SHEET  {sheet_id:3d}   S 1 ALA {chain.chain_id}{residues[start].seq:4d}  "
                f"ALA {chain.chain_id}{residues[end].seq:4d}  0"
            )
    serial = 0
    for res in structure.residues:
        for j in range(res.atom_start, res.atom_end):
            serial += 1
            atom = structure.atoms[j]
            lines.append(_atom_line(serial, atom.name, res.name, res.chain_id,
                                    res.seq, atom.pos, atom.element))
    lines.append("END")
    return "\n".join(lines) + "\n"


@pytest.fixture
def mini_pdb(tmp_path) -> str:
    """Two-chain PDB: chain A mixed secondary structure, chain B a short coil."""
    ca, ss = mixed_chain()
    coil_b = straight_line(5) + np.array([0.0, 30.0, 0.0])
    structure = make_structure([("A", ca, ss), ("B", coil_b, [COIL] * 5)])
    path = tmp_path / "mini.pdb"
    path.write_text(structure_to_pdb(structure))
    return str(path)
