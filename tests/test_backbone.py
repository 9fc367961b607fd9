"""Tests for backbone extraction and class-aware smoothing."""

import numpy as np

from protein_cartoon.backbone import extract_backbone, prepare_backbone
from protein_cartoon.backbone.smooth import smooth_positions
from protein_cartoon.backbone.trace import find_runs, strand_ends
from protein_cartoon.config import DEFAULT_CONFIG

from conftest import COIL, HELIX, SHEET, make_structure, straight_line


class TestRuns:
    def test_find_runs(self):
        ss = np.array([0, 1, 1, 1, 0, 2, 2, 0, 1])
        assert find_runs(ss, HELIX) == [(1, 3), (8, 8)]
        assert find_runs(ss, SHEET) == [(5, 6)]
        assert find_runs(ss, COIL) == [(0, 0), (4, 4), (7, 7)]

    def test_strand_ends(self):
        ss = np.array([2, 2, 0, 2, 1, 2, 2])
        assert strand_ends(ss) == [1, 3, 6]


class TestExtractBackbone:
    def test_skips_residues_without_central_atom(self, mixed_structure):
        mixed_structure.residues[5].ca_index = -1
        trace = extract_backbone(mixed_structure, mixed_structure.chains[0])
        assert len(trace) == len(mixed_structure.residues) - 1
        assert 5 not in trace.residue_indices
        assert np.all(np.diff(trace.residue_indices) > 0)

    def test_snapshot_is_independent(self, mixed_structure):
        trace = extract_backbone(mixed_structure, mixed_structure.chains[0])
        trace.points[0] += 10.0
        assert not np.allclose(trace.points[0], trace.original[0])

    def test_missing_flanks_are_nan(self):
        s = make_structure([("A", straight_line(4), [COIL] * 4)], flanks=False)
        trace = extract_backbone(s, s.chains[0])
        assert np.isnan(trace.c_positions).all()
        assert np.isnan(trace.n_positions).all()

    def test_single_point_chain_is_skipped(self):
        s = make_structure([("A", straight_line(1) + 1.0, [COIL])])
        assert extract_backbone(s, s.chains[0]) is None
        assert prepare_backbone(s, s.chains[0]) is None


class TestSmoothPositions:
    def test_helix_points_untouched(self, mixed_structure):
        trace = extract_backbone(mixed_structure, mixed_structure.chains[0])
        before = trace.points.copy()
        smooth_positions(trace.points, trace.ss)
        helix = trace.ss == HELIX
        np.testing.assert_array_equal(trace.points[helix], before[helix])

    def test_isolated_point_never_moves(self):
        pts = np.array([[0, 0, 0], [3, 2, 0], [6, 0, 0], [9, 2, 0], [12, 0, 0]], dtype=float)
        ss = np.array([HELIX, HELIX, COIL, HELIX, HELIX])
        before = pts.copy()
        smooth_positions(pts, ss)
        np.testing.assert_array_equal(pts[2], before[2])

    def test_no_leak_across_class_boundary(self):
        pts = np.array([[0, 0, 0], [3, 1, 0], [6, 0, 0], [9, 1, 0]], dtype=float)
        ss = np.array([COIL, COIL, HELIX, HELIX])
        a = pts.copy()
        smooth_positions(a, ss)
        b = pts.copy()
        b[2] += [0.0, 50.0, 50.0]
        smooth_positions(b, ss)
        np.testing.assert_allclose(a[:2], b[:2])

    def test_straight_line_stays_straight(self):
        pts = straight_line(10)
        smooth_positions(pts, np.full(10, COIL))
        np.testing.assert_allclose(pts[:, 1:], 0.0, atol=1e-12)
        assert np.all(np.diff(pts[:, 0]) > 0)

    def test_zigzag_is_reduced(self):
        k = np.arange(8, dtype=float)
        pts = np.column_stack([3.3 * k, np.zeros(8), np.where(k % 2 == 0, 1.0, -1.0)])
        smooth_positions(pts, np.full(8, SHEET))
        assert np.abs(pts[2:-2, 2]).max() < 1.0

    def test_zero_iterations_is_identity(self):
        pts = straight_line(5) + np.random.default_rng(0).normal(size=(5, 3))
        before = pts.copy()
        smooth_positions(pts, np.full(5, COIL), DEFAULT_CONFIG.replace(smooth_iterations=0))
        np.testing.assert_array_equal(pts, before)
