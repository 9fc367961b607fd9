"""JSON and plain-text summaries of a built cartoon."""

from __future__ import annotations
import dataclasses
import json
from pathlib import Path

import numpy as np

from protein_cartoon.backbone.helix import HelixRun
from protein_cartoon.representation.cartoon import CartoonRepresentation
from protein_cartoon.structure.models import SecondaryStructure


class _NumpyEncoder(json.JSONEncoder):
    def default(self, obj):
        if isinstance(obj, np.ndarray):
            return obj.tolist()
        if isinstance(obj, (np.integer,)):
            return int(obj)
        if isinstance(obj, (np.floating,)):
            return float(obj)
        return super().default(obj)


def _helix_summary(run: HelixRun) -> dict:
    return {
        "start": run.start,
        "end": run.end,
        "centroid": run.centroid,
        "axis": run.axis,
        "radius": run.radius,
        "angular_rate": run.angular_rate,
        "height_rate": run.height_rate,
        "phase": run.phase,
        "height_offset": run.height_offset,
    }


def _chain_summary(rep: CartoonRepresentation, index: int) -> dict:
    trace = rep.traces[index]
    mesh = rep.meshes[index]
    counts = {ss.name.lower(): int((trace.ss == ss).sum()) for ss in SecondaryStructure}
    return {
        "chain_id": mesh.chain_id,
        "control_points": len(trace),
        "class_counts": counts,
        "num_vertices": mesh.vertex_count,
        "num_faces": mesh.face_count,
        "num_rings": mesh.ring_count,
        "visible": mesh.visible,
        "helix_runs": [_helix_summary(r) for r in mesh.helix_runs],
        "strand_ends": mesh.strand_ends,
    }


def write_json(
    rep: CartoonRepresentation,
    output_path: str | Path,
    verbose: bool = False,
) -> Path:
    """Write a machine-readable summary of the cartoon as JSON."""
    output_path = Path(output_path)
    structure = rep.structure
    data = {
        "pdb_id": structure.pdb_id,
        "title": structure.title,
        "num_atoms": structure.atom_count,
        "num_residues": len(structure.residues),
        "num_chains": len(structure.chains),
        "summary": {
            "chains_built": len(rep.meshes),
            "num_vertices": sum(m.vertex_count for m in rep.meshes),
            "num_faces": sum(m.face_count for m in rep.meshes),
            "helix_runs": sum(len(m.helix_runs) for m in rep.meshes),
            "strands": sum(len(m.strand_ends) for m in rep.meshes),
        },
        "config": dataclasses.asdict(rep.config),
        "chains": [_chain_summary(rep, i) for i in range(len(rep.meshes))],
    }
    output_path.write_text(
        json.dumps(data, indent=2, cls=_NumpyEncoder), encoding="utf-8"
    )
    if verbose:
        print(f"  JSON written → {output_path}")
    return output_path


def write_txt(
    rep: CartoonRepresentation,
    output_path: str | Path,
    verbose: bool = False,
) -> Path:
    """Write a human-readable per-chain report."""
    output_path = Path(output_path)
    structure = rep.structure

    lines: list[str] = []
    lines.append("=" * 60)
    lines.append("CARTOON SUMMARY")
    lines.append("=" * 60)
    if structure.pdb_id:
        lines.append(f"Entry      : {structure.pdb_id}")
    lines.append(f"Atoms      : {structure.atom_count}")
    lines.append(f"Chains     : {len(structure.chains)} ({len(rep.meshes)} built)")
    lines.append(
        f"Mesh       : {sum(m.vertex_count for m in rep.meshes)} vertices, "
        f"{sum(m.face_count for m in rep.meshes)} faces"
    )
    lines.append("")

    skipped = len(structure.chains) - len(rep.meshes)
    if skipped:
        lines.append(f"NOTE: {skipped} chain(s) produced no geometry.")
        lines.append("  They have fewer than two backbone atoms or failed to build.")
        lines.append("")

    lines.append("CHAIN DETAILS")
    lines.append("-" * 40)
    for trace, mesh in zip(rep.traces, rep.meshes):
        lines.append(
            f"Chain {mesh.chain_id:>2s}  residues={len(trace):4d}  "
            f"helices={len(mesh.helix_runs):3d}  strands={len(mesh.strand_ends):3d}  "
            f"faces={mesh.face_count}"
        )
        for run in mesh.helix_runs:
            lines.append(
                f"    helix {run.start:4d}-{run.end:<4d} radius={run.radius:5.2f} Å  "
                f"rise={run.height_rate:5.2f} Å/res  "
                f"turn={np.degrees(run.angular_rate):6.1f}°/res"
            )

    output_path.write_text("\n".join(lines) + "\n", encoding="utf-8")
    if verbose:
        print(f"  TXT written → {output_path}")
    return output_path
