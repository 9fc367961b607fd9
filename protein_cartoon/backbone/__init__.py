"""Backbone control-point preparation: extract, smooth, idealize, flatten."""

from __future__ import annotations

from protein_cartoon.backbone.helix import HelixRun, idealize_helices
from protein_cartoon.backbone.sheet import flatten_sheets, refine_arrow_tips
from protein_cartoon.backbone.smooth import smooth_positions
from protein_cartoon.backbone.trace import (
    BackboneTrace, extract_backbone, find_runs, strand_ends,
)
from protein_cartoon.config import CartoonConfig, DEFAULT_CONFIG
from protein_cartoon.structure.models import Chain, Structure


def prepare_backbone(
    structure: Structure,
    chain: Chain,
    config: CartoonConfig = DEFAULT_CONFIG,
) -> BackboneTrace | None:
    """Run the control-point stages for one chain.

    Returns ``None`` when the chain has fewer than two usable control points.
    """
    trace = extract_backbone(structure, chain)
    if trace is None:
        return None
    smooth_positions(trace.points, trace.ss, config)
    if config.idealize_helices:
        trace.helix_runs = idealize_helices(trace.points, trace.ss, config)
    if config.flatten_sheets:
        flatten_sheets(trace.points, trace.ss, config)
    refine_arrow_tips(trace.points, trace.ss, config)
    return trace


__all__ = [
    "BackboneTrace",
    "HelixRun",
    "extract_backbone",
    "find_runs",
    "flatten_sheets",
    "idealize_helices",
    "prepare_backbone",
    "refine_arrow_tips",
    "smooth_positions",
    "strand_ends",
]
