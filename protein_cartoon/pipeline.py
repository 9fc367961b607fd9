"""Top-level pipeline orchestration for protein_cartoon."""

from __future__ import annotations
from pathlib import Path

import numpy as np

from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.representation.cartoon import CartoonRepresentation
from protein_cartoon.structure.models import Structure

MESH_FORMATS = ("obj", "ply", "glb", "stl")


def atom_visibility(
    structure: Structure,
    hidden: list[tuple[str, int, int]] | None = None,
) -> np.ndarray:
    """Per-atom visibility mask with the ``(chain_id, first, last)`` residue
    ranges in *hidden* switched off (inclusive residue numbers)."""
    visible = np.ones(structure.atom_count, dtype=bool)
    for chain_id, first, last in hidden or []:
        for res in structure.residues:
            if res.chain_id == chain_id and first <= res.seq <= last:
                visible[res.atom_start:res.atom_end] = False
    return visible


def cartoon_structure(
    structure: Structure,
    output_dir: str | Path = ".",
    formats: list[str] | None = None,
    color_by: str = "ss",
    config: CartoonConfig = DEFAULT_CONFIG,
    hidden: list[tuple[str, int, int]] | None = None,
    stem: str = "cartoon",
    verbose: bool = False,
    _step_offset: int = 0,
    _total_steps: int = 3,
) -> CartoonRepresentation:
    """Cartoon pipeline starting from a parsed Structure.

    Parameters
    ----------
    structure:
        Parsed model with residue/chain metadata and secondary structure.
    output_dir:
        Directory for output files.
    formats:
        Output formats, any of ``obj``, ``ply``, ``glb``, ``stl``, ``json``,
        ``txt``, ``png``, ``html``.  Defaults to ``["obj", "json"]``.
    color_by:
        Per-atom colour scheme: ``"ss"``, ``"element"`` or ``"chain"``.
    config:
        Geometry parameters.
    hidden:
        ``(chain_id, first_seq, last_seq)`` residue ranges to hide.
    verbose:
        Print progress messages.
    """
    from protein_cartoon.colors import atom_colors
    from protein_cartoon.mesh.clean import validate_mesh
    from protein_cartoon.output.summary import write_json, write_txt
    from protein_cartoon.output.viz3d import render_3d_html, render_3d_png

    if formats is None:
        formats = ["obj", "json"]

    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    total = _step_offset + _total_steps
    step = _step_offset + 1

    if verbose:
        print(f"[{step}/{total}] Building cartoon geometry …")
    rep = CartoonRepresentation(structure, config).build(verbose=verbose)
    if verbose:
        print(f"      {len(rep.meshes)}/{len(structure.chains)} chains, "
              f"{sum(m.face_count for m in rep.meshes)} faces")

    step += 1
    if verbose:
        print(f"[{step}/{total}] Colouring by {color_by} …")
    rep.apply_colors(atom_colors(structure, color_by))
    if hidden:
        rep.apply_visibility(atom_visibility(structure, hidden))

    step += 1
    if verbose:
        print(f"[{step}/{total}] Writing output …")

    mesh_formats = [f for f in formats if f in MESH_FORMATS]
    if mesh_formats:
        combined = rep.to_trimesh()
        validate_mesh(combined, name=stem)
        if len(combined.faces) == 0:
            mesh_formats = []
        for fmt in mesh_formats:
            path = output_dir / f"{stem}.{fmt}"
            combined.export(str(path))
            if verbose:
                print(f"      Mesh exported → {path}")
    if "json" in formats:
        write_json(rep, output_dir / f"{stem}.json", verbose=verbose)
    if "txt" in formats:
        write_txt(rep, output_dir / f"{stem}.txt", verbose=verbose)
    if "png" in formats:
        render_3d_png(rep, output_dir / f"{stem}.png", verbose=verbose)
    if "html" in formats:
        render_3d_html(rep, output_dir / f"{stem}.html", verbose=verbose)

    if verbose:
        print("Done.")
    return rep


def cartoon_pdb(
    pdb_path: str | Path,
    output_dir: str | Path = ".",
    formats: list[str] | None = None,
    color_by: str = "ss",
    config: CartoonConfig = DEFAULT_CONFIG,
    hidden: list[tuple[str, int, int]] | None = None,
    verbose: bool = False,
) -> CartoonRepresentation:
    """Full pipeline: PDB file → cartoon meshes + output files."""
    from protein_cartoon.io.pdb_parser import parse_pdb

    pdb_path = Path(pdb_path)
    if verbose:
        print(f"[1/4] Parsing structure: {pdb_path}")
    structure = parse_pdb(pdb_path)
    if verbose:
        print(f"      {structure.atom_count} atoms, {len(structure.residues)} residues, "
              f"{len(structure.chains)} chains")

    return cartoon_structure(
        structure,
        output_dir=output_dir,
        formats=formats,
        color_by=color_by,
        config=config,
        hidden=hidden,
        stem=pdb_path.stem,
        verbose=verbose,
        _step_offset=1,
        _total_steps=3,
    )
