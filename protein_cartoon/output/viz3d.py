"""Static and interactive 3D views of a built cartoon."""

from __future__ import annotations
import warnings
from pathlib import Path

import numpy as np
import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from mpl_toolkits.mplot3d.art3d import Poly3DCollection

from protein_cartoon.representation.cartoon import CartoonRepresentation


def _visible_meshes(rep: CartoonRepresentation):
    return [m for m in rep.meshes if m.visible]


def render_3d_png(
    rep: CartoonRepresentation,
    output_path: str | Path,
    dpi: int = 150,
    max_faces: int = 60_000,
    verbose: bool = False,
) -> Path:
    """Render a matplotlib 3D view of the ribbon surfaces.

    Faces are shaded with the mean colour of their vertices.  Meshes larger
    than *max_faces* are drawn with every k-th face only.
    """
    output_path = Path(output_path)
    meshes = _visible_meshes(rep)

    fig = plt.figure(figsize=(10, 8))
    ax = fig.add_subplot(111, projection="3d")

    total_faces = sum(m.face_count for m in meshes)
    stride = max(1, int(np.ceil(total_faces / max_faces))) if total_faces else 1

    all_verts = []
    for mesh in meshes:
        faces = mesh.indices[::stride].astype(np.int64)
        polys = mesh.positions[faces]
        face_colors = np.clip(mesh.colors[faces].mean(axis=1), 0.0, 1.0)
        ax.add_collection3d(Poly3DCollection(
            polys, facecolors=face_colors, edgecolor="none", alpha=1.0,
        ))
        all_verts.append(mesh.positions)

    if all_verts:
        verts = np.vstack(all_verts)
        lo = verts.min(axis=0)
        hi = verts.max(axis=0)
        ax.set_xlim(lo[0], hi[0])
        ax.set_ylim(lo[1], hi[1])
        ax.set_zlim(lo[2], hi[2])
        ax.set_box_aspect([max(hi[i] - lo[i], 1e-3) for i in range(3)])
    ax.set_xlabel("X (Å)")
    ax.set_ylabel("Y (Å)")
    ax.set_zlabel("Z (Å)")
    title = rep.structure.pdb_id or "structure"
    ax.set_title(f"Cartoon: {title} ({len(meshes)} chains)")

    plt.tight_layout()
    fig.savefig(str(output_path), dpi=dpi)
    plt.close(fig)

    if verbose:
        print(f"  3D PNG written → {output_path}")
    return output_path


def render_3d_html(
    rep: CartoonRepresentation,
    output_path: str | Path,
    verbose: bool = False,
) -> Path | None:
    """Render an interactive Plotly HTML view of the ribbons.

    Returns None and warns if plotly is not installed.
    """
    output_path = Path(output_path)

    try:
        import plotly.graph_objects as go
    except ImportError:
        warnings.warn(
            "plotly is not installed; HTML output skipped.  "
            "Install with: pip install plotly"
        )
        return None

    fig = go.Figure()
    for mesh in _visible_meshes(rep):
        verts = mesh.positions
        faces = mesh.indices
        rgb = np.clip(mesh.colors * 255.0, 0, 255).astype(int)
        fig.add_trace(go.Mesh3d(
            x=verts[:, 0], y=verts[:, 1], z=verts[:, 2],
            i=faces[:, 0], j=faces[:, 1], k=faces[:, 2],
            vertexcolor=[f"rgb({r},{g},{b})" for r, g, b in rgb],
            flatshading=False,
            name=f"chain {mesh.chain_id}",
            showlegend=True,
        ))

    title = rep.structure.pdb_id or "structure"
    fig.update_layout(
        title=f"Cartoon: {title}",
        scene={"aspectmode": "data"},
        margin={"l": 0, "r": 0, "b": 0, "t": 40},
    )
    fig.write_html(str(output_path))

    if verbose:
        print(f"  HTML written → {output_path}")
    return output_path
