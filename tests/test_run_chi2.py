from __future__ import annotations

from pathlib import Path

import pytest

import cgs
import run_chi2
from chi2 import Chi2BC
from particles import Particles
from pid import C12, H1, H1_ter, O16


def test_parse_efficiencies() -> None:
    efficiencies = run_chi2.parse_efficiencies(["C12=1e-3", "B11=0"])
    assert efficiencies["C12"] == 1e-3
    assert efficiencies["B11"] == 0.0
    assert efficiencies["O16"] == run_chi2.DEFAULT_EFFICIENCIES["O16"]
    with pytest.raises(ValueError):
        run_chi2.parse_efficiencies(["C12"])


def test_make_particles() -> None:
    particles = run_chi2.make_particles("C12, H1,O16", run_chi2.DEFAULT_EFFICIENCIES)
    assert particles.pids == [O16, C12, H1, H1_ter]
    assert particles.find(C12).efficiency == run_chi2.DEFAULT_EFFICIENCIES["C12"]


def test_params_from_args() -> None:
    args = run_chi2.build_parser().parse_args(["--vA", "0", "--H", "6", "--id", "1"])
    params = run_chi2.params_from_args(args)
    assert params.v_A == 0.0
    assert params.H == pytest.approx(6.0 * cgs.kpc)
    assert params.id == 1


def test_invalid_input_exit_code() -> None:
    assert run_chi2.main(["--species", "X99"]) == 2
    assert run_chi2.main(["--H", "-1"]) == 2


def test_malformed_data_file_exit_code(tmp_path: Path, monkeypatch, caplog) -> None:
    data = tmp_path / "C.txt"
    data.write_text("R F lo hi\n30 1.0 0.1\n")
    monkeypatch.setattr(Particles, "run", lambda self, T, params: pytest.fail("solved despite bad data"))
    assert run_chi2.main(["--species", "C12", "--data-C", str(data)]) == 2
    assert "invalid data file" in caplog.text


def test_ratio_file_ignores_flux_units(tmp_path: Path, monkeypatch, capsys) -> None:
    data = tmp_path / "BC.txt"
    data.write_text("R F lo hi\n30 0.2 0.02 0.02\n")
    loaded = []
    read_datafile = Chi2BC.read_datafile

    def recording_read(self, filename, units):
        count = read_datafile(self, filename, units)
        loaded.extend(point.F for point in self.data)
        return count

    monkeypatch.setattr(Chi2BC, "read_datafile", recording_read)
    monkeypatch.setattr(Particles, "run", lambda self, T, params: True)
    code = run_chi2.main(["--species", "C12,B11", "--data-BC", str(data), "--units", "1e-4"])
    assert code == 0
    assert loaded == [pytest.approx(0.2)]
    assert "chi2/ndof B/C" in capsys.readouterr().out


def test_main_prints_chi2(tmp_path: Path, capsys) -> None:
    data = tmp_path / "C.txt"
    data.write_text("R F lo hi\n30 1.0 0.1 0.1\n50 0.3 0.05 0.05\n100 0.05 0.01 0.01\n")
    dump_dir = tmp_path / "dump"
    dump_dir.mkdir()
    code = run_chi2.main([
        "--species", "C12",
        "--size", "2",
        "--Tmin", "10",
        "--Tmax", "100",
        "--data-C", str(data),
        "--units", "1e-9",
        "--dump", str(dump_dir),
    ])
    assert code == 0
    assert "chi2/ndof   C" in capsys.readouterr().out
    assert (dump_dir / "particle_6_12.log").exists()
