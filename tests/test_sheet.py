"""Tests for sheet flattening and arrow-tip straightening."""

import numpy as np
import pytest

from protein_cartoon.backbone.sheet import (
    flatten_sheets, refine_arrow_tips, sheet_plane_normal,
)
from protein_cartoon.config import DEFAULT_CONFIG

from conftest import COIL, SHEET, straight_line, zigzag_strand


def _out_of_plane(points: np.ndarray) -> float:
    return float(np.linalg.svd(points - points.mean(axis=0))[1][-1])


def _line_distance(p, a, b) -> float:
    d = (b - a) / np.linalg.norm(b - a)
    rel = p - a
    return float(np.linalg.norm(rel - d * np.dot(rel, d)))


class TestSheetPlaneNormal:
    def test_zigzag_normal_is_unit(self):
        n = sheet_plane_normal(zigzag_strand(6, warp=0.0))
        assert np.linalg.norm(n) == pytest.approx(1.0)
        assert abs(n[1]) == pytest.approx(1.0, abs=1e-9)

    def test_collinear_is_degenerate(self):
        assert sheet_plane_normal(straight_line(5)) is None


class TestFlattenSheets:
    def test_strand_becomes_planar(self):
        pts = zigzag_strand(7)
        assert _out_of_plane(pts) > 0.1
        flattened = flatten_sheets(pts, np.full(7, SHEET))
        assert flattened == [(0, 6)]
        assert _out_of_plane(pts) < 1e-9

    def test_short_run_skipped(self):
        pts = np.vstack([straight_line(2) - [10.0, 0.0, 0.0], zigzag_strand(2)])
        ss = np.array([COIL, COIL, SHEET, SHEET])
        before = pts.copy()
        assert flatten_sheets(pts, ss) == []
        np.testing.assert_array_equal(pts, before)

    def test_collinear_run_unchanged(self):
        pts = straight_line(5)
        before = pts.copy()
        assert flatten_sheets(pts, np.full(5, SHEET)) == []
        np.testing.assert_array_equal(pts, before)

    def test_coil_points_untouched(self):
        pts = np.vstack([straight_line(3) - [12.0, 0.0, 0.0], zigzag_strand(5)])
        ss = np.array([COIL] * 3 + [SHEET] * 5)
        before = pts.copy()
        flatten_sheets(pts, ss)
        np.testing.assert_array_equal(pts[:3], before[:3])


class TestRefineArrowTips:
    def test_interior_points_pulled_toward_line(self):
        pts = zigzag_strand(6, warp=0.0)
        before = pts.copy()
        refined = refine_arrow_tips(pts, np.full(6, SHEET))
        assert refined == [5]

        # anchor is three points back from the tip
        anchor, tip = 2, 5
        for j in (3, 4):
            d0 = _line_distance(before[j], before[anchor], before[tip])
            d1 = _line_distance(pts[j], pts[anchor], pts[tip])
            assert d1 == pytest.approx(d0 * 0.5 ** 4, rel=1e-9)
        for j in (0, 1, anchor, tip):
            np.testing.assert_array_equal(pts[j], before[j])

    def test_anchor_clamped_to_run_start(self):
        pts = np.vstack([straight_line(3) - [12.0, 0.0, 0.0], zigzag_strand(4)])
        ss = np.array([COIL] * 3 + [SHEET] * 4)
        before = pts.copy()
        cfg = DEFAULT_CONFIG.replace(arrow_tip_span=5)
        assert refine_arrow_tips(pts, ss, cfg) == [6]
        np.testing.assert_array_equal(pts[:4], before[:4])

    def test_short_strand_untouched(self):
        pts = zigzag_strand(3)
        before = pts.copy()
        assert refine_arrow_tips(pts, np.full(3, SHEET)) == []
        np.testing.assert_array_equal(pts, before)
