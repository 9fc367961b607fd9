"""Sheet flattening and arrow-tip straightening."""

from __future__ import annotations
import numpy as np

from protein_cartoon.backbone.trace import find_runs, strand_ends
from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.geometry import EPS
from protein_cartoon.structure.models import SecondaryStructure


def sheet_plane_normal(points: np.ndarray) -> np.ndarray | None:
    """Best-fit plane normal of a strand, or ``None`` if it is degenerate.

    Cross products of consecutive steps alternate in sign along a zig-zag
    backbone; each one is flipped to agree with the running sum before it
    is accumulated.
    """
    acc = np.zeros(3)
    for i in range(1, len(points) - 1):
        c = np.cross(points[i] - points[i - 1], points[i + 1] - points[i])
        if float(np.dot(c, acc)) < 0:
            c = -c
        acc += c
    length = float(np.linalg.norm(acc))
    if length < EPS:
        return None
    return acc / length


def flatten_sheets(
    points: np.ndarray,
    ss: np.ndarray,
    config: CartoonConfig = DEFAULT_CONFIG,
) -> list[tuple[int, int]]:
    """Project each sheet run onto its best-fit plane, in place.

    Returns the runs that were flattened.
    """
    flattened: list[tuple[int, int]] = []
    for start, end in find_runs(ss, SecondaryStructure.SHEET):
        if end - start + 1 < config.min_sheet_points:
            continue
        run = points[start:end + 1]
        moved = False
        for _ in range(config.flatten_cycles):
            normal = sheet_plane_normal(run)
            if normal is None:
                break
            centroid = run.mean(axis=0)
            run -= np.outer((run - centroid) @ normal, normal)
            moved = True
        if moved:
            flattened.append((start, end))
    return flattened


def refine_arrow_tips(
    points: np.ndarray,
    ss: np.ndarray,
    config: CartoonConfig = DEFAULT_CONFIG,
) -> list[int]:
    """Straighten the last few points of every strand toward a line.

    For each strand end, an anchor ``config.arrow_tip_span`` points back
    (clamped to the run start) and the tip define a line; the points between
    them are pulled ``config.tip_pull`` of the way onto it per iteration.
    Returns the strand ends that were refined.
    """
    refined: list[int] = []
    run_starts = {end: start for start, end in find_runs(ss, SecondaryStructure.SHEET)}
    for tip in strand_ends(ss):
        anchor = max(run_starts[tip], tip - config.arrow_tip_span)
        if tip - anchor - 1 < 2:
            continue
        a = points[anchor]
        direction = points[tip] - a
        length = float(np.linalg.norm(direction))
        if length < EPS:
            continue
        direction = direction / length
        for _ in range(config.tip_iterations):
            for j in range(anchor + 1, tip):
                on_line = a + direction * float(np.dot(points[j] - a, direction))
                points[j] += (on_line - points[j]) * config.tip_pull
        refined.append(tip)
    return refined
