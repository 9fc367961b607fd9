"""Fixed-column PDB parser.

Reads ATOM/HETATM records of the first model, groups them into residues and
chains, and assigns secondary structure from HELIX/SHEET records.
"""

from __future__ import annotations
import re
from pathlib import Path
from typing import NamedTuple

import numpy as np

from protein_cartoon.structure.models import (
    Atom, Chain, Residue, SecondaryStructure, Structure,
)

# Two-letter elements that can appear at the start of an atom name
_TWO_LETTER_ELEMENTS = {
    "FE", "ZN", "MG", "CL", "BR", "SE", "NA", "MN", "CO", "NI", "CU",
}
_ION_RESIDUES = {"CA", "FE", "ZN", "MG", "NA", "MN", "CO", "NI", "CU", "CL", "BR", "K"}


class _SSRange(NamedTuple):
    start_chain: str
    start_seq: int
    start_icode: str
    end_chain: str
    end_seq: int
    end_icode: str
    ss: SecondaryStructure


def _infer_element(atom_name: str, res_name: str = "") -> str:
    """Infer element symbol from PDB atom name when ELEMENT column is absent."""
    stripped = re.sub(r"[^A-Za-z]", "", atom_name).upper()
    if not stripped:
        return "C"
    # A lone ion residue named after its element (e.g. "CA" in residue "CA")
    if res_name.upper() in _ION_RESIDUES and stripped == res_name.upper():
        return stripped
    if atom_name[:1].isalpha() and len(stripped) >= 2 \
            and stripped[:2] in _TWO_LETTER_ELEMENTS and not atom_name.startswith(" "):
        return stripped[:2]
    return stripped[0]


def _int_field(text: str, default: int = 0) -> int:
    try:
        return int(text)
    except ValueError:
        return default


def _char(line: str, col: int, default: str = " ") -> str:
    return line[col] if len(line) > col else default


def _assign_ss(residues: list[Residue], rng: _SSRange) -> None:
    inside = False
    for res in residues:
        if (res.chain_id, res.seq, res.icode) == \
                (rng.start_chain, rng.start_seq, rng.start_icode):
            inside = True
        if inside:
            res.ss = rng.ss
        if (res.chain_id, res.seq, res.icode) == \
                (rng.end_chain, rng.end_seq, rng.end_icode):
            inside = False


def parse_pdb_text(text: str) -> Structure:
    """Parse PDB-format *text* and return a Structure.

    Only the first MODEL is read.  Alternate locations other than blank or
    ``A`` are skipped.  Uses the ELEMENT column (cols 77-78) when present and
    falls back to inferring the element from the atom-name column.
    """
    atoms: list[Atom] = []
    keys: list[tuple[str, int, str]] = []
    res_names: list[str] = []
    ss_ranges: list[_SSRange] = []
    pdb_id = ""
    title_parts: list[str] = []

    seen_model = False
    in_first_model = True

    for line in text.splitlines():
        if len(line) < 6:
            continue
        rec = line[:6]

        if rec == "HEADER":
            pdb_id = line[62:66].strip()
            continue
        if rec == "TITLE ":
            title_parts.append(line[10:].strip())
            continue

        if rec == "MODEL ":
            if seen_model:
                in_first_model = False
            seen_model = True
            continue
        if rec == "ENDMDL":
            in_first_model = False
            continue

        if rec == "HELIX ":
            ss_ranges.append(_SSRange(
                _char(line, 19), _int_field(line[21:25]), _char(line, 25),
                _char(line, 31), _int_field(line[33:37]), _char(line, 37),
                SecondaryStructure.HELIX,
            ))
            continue
        if rec == "SHEET ":
            ss_ranges.append(_SSRange(
                _char(line, 21), _int_field(line[22:26]), _char(line, 26),
                _char(line, 32), _int_field(line[33:37]), _char(line, 37),
                SecondaryStructure.SHEET,
            ))
            continue

        if rec not in ("ATOM  ", "HETATM") or not in_first_model:
            continue

        alt_loc = _char(line, 16)
        if alt_loc not in (" ", "A"):
            continue
        try:
            x = float(line[30:38])
            y = float(line[38:46])
            z = float(line[46:54])
        except ValueError:
            continue

        atom_name = line[12:16]
        res_name = line[17:20].strip()
        element = line[76:78].strip().upper() if len(line) > 76 else ""
        if not element:
            element = _infer_element(atom_name, res_name)

        atoms.append(Atom(
            element=element,
            name=atom_name.strip(),
            pos=np.array([x, y, z], dtype=np.float64),
            serial=_int_field(line[6:11]),
            is_het=rec == "HETATM",
        ))
        chain_id = _char(line, 21)
        if chain_id == " ":
            chain_id = "A"
        keys.append((chain_id, _int_field(line[22:26]), _char(line, 26)))
        res_names.append(res_name)

    if not atoms:
        raise ValueError("No ATOM/HETATM records found")

    # --- Residues ---
    residues: list[Residue] = []
    prev_key = None
    for i, key in enumerate(keys):
        if key != prev_key:
            residues.append(Residue(
                name=res_names[i], seq=key[1], chain_id=key[0], icode=key[2],
                atom_start=i, atom_end=i + 1,
            ))
            prev_key = key
        else:
            residues[-1].atom_end = i + 1

    for res in residues:
        c3_index = -1
        for j in range(res.atom_start, res.atom_end):
            atom = atoms[j]
            if atom.name == "CA" and atom.element == "C":
                res.ca_index = j
            elif atom.name == "C" and atom.element == "C":
                res.c_index = j
            elif atom.name == "N" and atom.element == "N":
                res.n_index = j
            elif atom.name == "C3'":
                c3_index = j
        # Nucleic acids have no CA; C3' traces the backbone instead
        if res.ca_index < 0 and c3_index >= 0:
            res.ca_index = c3_index

    # --- Chains: split on consecutive chain-ID changes ---
    chains: list[Chain] = []
    start = 0
    for ri in range(1, len(residues) + 1):
        if ri == len(residues) or residues[ri].chain_id != residues[start].chain_id:
            chains.append(Chain(residues[start].chain_id, start, ri))
            start = ri

    for rng in ss_ranges:
        _assign_ss(residues, rng)

    return Structure(
        atoms=atoms,
        residues=residues,
        chains=chains,
        pdb_id=pdb_id,
        title=" ".join(title_parts),
    )


def parse_pdb(path: str | Path) -> Structure:
    """Parse a PDB file and return a Structure."""
    path = Path(path)
    try:
        return parse_pdb_text(path.read_text(errors="replace"))
    except ValueError as exc:
        raise ValueError(f"{exc} in {path}") from exc
