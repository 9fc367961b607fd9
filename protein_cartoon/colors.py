"""Per-atom colour arrays for the common colouring schemes."""

from __future__ import annotations
import numpy as np
from matplotlib import colormaps
from matplotlib.colors import to_rgb

from protein_cartoon.structure.models import SecondaryStructure, Structure

# PyMOL-like element palette
ELEMENT_COLORS: dict[str, str] = {
    "C": "#33ff33", "N": "#3333ff", "O": "#ff4444", "S": "#ffff33",
    "H": "#ffffff", "P": "#ff8c00", "FE": "#ff8c00", "ZN": "#7d80b0",
    "MG": "#55ff55", "CA": "#55ff55", "CL": "#33ff33", "BR": "#a62929",
    "SE": "#ffa100", "NA": "#ab5cf2", "K": "#8f40d4", "MN": "#9c7ac7",
    "CO": "#f090a0", "NI": "#50d050", "CU": "#c88033", "F": "#90e050",
}
DEFAULT_COLOR = "#ff69b4"

SS_COLORS: dict[SecondaryStructure, str] = {
    SecondaryStructure.COIL: "#cccccc",
    SecondaryStructure.HELIX: "#ff4466",
    SecondaryStructure.SHEET: "#ffdd44",
}

COLOR_SCHEMES = ("element", "ss", "chain")


def color_by_element(structure: Structure) -> np.ndarray:
    palette = {el: to_rgb(hex_) for el, hex_ in ELEMENT_COLORS.items()}
    default = to_rgb(DEFAULT_COLOR)
    return np.array(
        [palette.get(a.element.upper(), default) for a in structure.atoms],
        dtype=np.float32,
    ).reshape(-1, 3)


def color_by_ss(structure: Structure) -> np.ndarray:
    colors = np.empty((structure.atom_count, 3), dtype=np.float32)
    colors[:] = to_rgb(SS_COLORS[SecondaryStructure.COIL])
    for res in structure.residues:
        colors[res.atom_start:res.atom_end] = to_rgb(SS_COLORS[res.ss])
    return colors


def color_by_chain(structure: Structure, cmap: str = "tab10") -> np.ndarray:
    colormap = colormaps[cmap]
    colors = np.ones((structure.atom_count, 3), dtype=np.float32)
    for ci, chain in enumerate(structure.chains):
        rgb = colormap(ci % colormap.N)[:3]
        for res in structure.chain_residues(chain):
            colors[res.atom_start:res.atom_end] = rgb
    return colors


def atom_colors(structure: Structure, scheme: str = "ss") -> np.ndarray:
    """Return an ``(n_atoms, 3)`` float32 RGB array for *scheme*."""
    if scheme == "element":
        return color_by_element(structure)
    if scheme == "ss":
        return color_by_ss(structure)
    if scheme == "chain":
        return color_by_chain(structure)
    raise ValueError(f"Unknown colour scheme: {scheme!r}. Use one of {COLOR_SCHEMES}.")
