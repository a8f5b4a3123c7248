from __future__ import annotations

from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402

import cgs  # noqa: E402
from chi2 import Chi2H  # noqa: E402
from particles import Particles  # noqa: E402
from utils.particle_plot_utils import plot_chi2_data, plot_particle_spectra  # noqa: E402


def test_plot_particle_spectra(proton_pipeline, tmp_path: Path) -> None:
    out = tmp_path / "spectra.png"
    fig = plot_particle_spectra(proton_pipeline, 0.6 * cgs.GV, R_min=20.0, R_max=800.0,
                                npoints=20, show=False, save_path=str(out))
    assert out.exists()
    assert len(fig.axes[0].lines) == 2
    plt.close(fig)


def test_plot_chi2_data(proton_pipeline, tmp_path: Path) -> None:
    data = tmp_path / "H.txt"
    data.write_text("R F lo hi\n30 1.0 0.1 0.2\n100 0.1 0.01 0.02\n")
    chi2 = Chi2H(proton_pipeline, phi=0.6 * cgs.GV)
    chi2.read_datafile(str(data), 1e-9)
    out = tmp_path / "H.png"
    fig = plot_chi2_data(chi2, scale=2.7, show=False, save_path=str(out))
    assert out.exists()
    plt.close(fig)


def test_plot_chi2_without_data() -> None:
    fig = plot_chi2_data(Chi2H(Particles([])), show=False)
    assert fig.axes[0].get_xlabel() == "Rigidity [GV]"
    plt.close(fig)
