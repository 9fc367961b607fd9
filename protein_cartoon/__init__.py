"""protein_cartoon: cartoon ribbon surfaces (helices, sheets, coils) for protein structures."""

from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.io.pdb_parser import parse_pdb, parse_pdb_text
from protein_cartoon.pipeline import cartoon_pdb, cartoon_structure
from protein_cartoon.representation import CartoonRepresentation, make_representation
from protein_cartoon.ribbon.mesh import RibbonMesh

__all__ = [
    "CartoonConfig",
    "CartoonRepresentation",
    "DEFAULT_CONFIG",
    "RibbonMesh",
    "cartoon_pdb",
    "cartoon_structure",
    "make_representation",
    "parse_pdb",
    "parse_pdb_text",
]
