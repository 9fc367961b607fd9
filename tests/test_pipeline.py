"""End-to-end tests for protein_cartoon/pipeline.py and the CLI."""

import json

import numpy as np
import trimesh
from click.testing import CliRunner

from protein_cartoon.cli import main
from protein_cartoon.io.pdb_parser import parse_pdb
from protein_cartoon.pipeline import atom_visibility, cartoon_pdb


class TestAtomVisibility:
    def test_ranges_are_inclusive(self, mini_pdb):
        s = parse_pdb(mini_pdb)
        visible = atom_visibility(s, [("A", 2, 4)])
        hidden = [r.seq for r in s.residues if not visible[r.atom_start]]
        assert hidden == [2, 3, 4]

    def test_nothing_hidden(self, mini_pdb):
        s = parse_pdb(mini_pdb)
        assert atom_visibility(s).all()


class TestCartoonPdb:
    def test_writes_outputs(self, mini_pdb, tmp_path):
        out = tmp_path / "out"
        rep = cartoon_pdb(mini_pdb, output_dir=out, formats=["obj", "json", "txt", "png"])
        for ext in ("obj", "json", "txt", "png"):
            assert (out / f"mini.{ext}").exists()
        assert len(rep.meshes) == 2

        data = json.loads((out / "mini.json").read_text())
        assert data["pdb_id"] == "1TST"
        assert data["summary"]["chains_built"] == 2
        assert data["summary"]["helix_runs"] == 1
        assert data["summary"]["strands"] == 1
        assert data["config"]["subdivisions"] == 8
        chain_a = data["chains"][0]
        assert chain_a["class_counts"] == {"coil": 8, "helix": 8, "sheet": 6}
        assert chain_a["helix_runs"][0]["start"] == 3
        assert chain_a["strand_ends"] == [19]

        text = (out / "mini.txt").read_text()
        assert "Chain  A" in text

    def test_obj_round_trip(self, mini_pdb, tmp_path):
        rep = cartoon_pdb(mini_pdb, output_dir=tmp_path, formats=["obj"])
        loaded = trimesh.load(str(tmp_path / "mini.obj"), force="mesh", process=False)
        assert len(loaded.faces) == sum(m.face_count for m in rep.meshes)

    def test_hidden_ranges_applied(self, mini_pdb, tmp_path):
        rep = cartoon_pdb(mini_pdb, output_dir=tmp_path, formats=[], hidden=[("B", 1, 5)])
        assert [m.visible for m in rep.meshes] == [True, False]
        chain_a = rep.meshes[0]
        np.testing.assert_array_equal(chain_a.positions, chain_a.base_positions)


class TestCli:
    def test_basic_run(self, mini_pdb, tmp_path):
        result = CliRunner().invoke(main, [
            mini_pdb, "--output-dir", str(tmp_path), "--formats", "obj,json",
            "--hide", "A:5-8", "--set", "helix_width=2.4", "--subdivisions", "4",
        ])
        assert result.exit_code == 0, result.output
        data = json.loads((tmp_path / "mini.json").read_text())
        assert data["config"]["helix_width"] == 2.4
        assert data["config"]["subdivisions"] == 4
        assert (tmp_path / "mini.obj").exists()

    def test_bad_range(self, mini_pdb, tmp_path):
        result = CliRunner().invoke(main, [mini_pdb, "--output-dir", str(tmp_path),
                                           "--hide", "A10"])
        assert result.exit_code != 0
        assert "Cannot parse residue range" in result.output

    def test_unknown_setting(self, mini_pdb, tmp_path):
        result = CliRunner().invoke(main, [mini_pdb, "--output-dir", str(tmp_path),
                                           "--set", "wobble=3"])
        assert result.exit_code != 0
        assert "Unknown cartoon parameter" in result.output
