from __future__ import annotations

import math

import numpy as np
import pytest

import cgs
from errors import DependencyError, DomainError, NumericalError
from interpolation import LogAxis
from params import Params
from particle import Particle, compute_integral_qags
from pid import B10, B11, C12, H1, H1_ter


class NoLosses:
    """Energy losses that vanish, so Lambda_2 cannot be inverted."""

    def get(self, T: float) -> float:
        return 0.0

    def get_derivative(self, T: float) -> float:
        return 0.0


def _built(pid, efficiency=1e-3, params=None) -> Particle:
    params = params or Params()
    particle = Particle(pid, efficiency)
    particle.build_grammage(params)
    particle.build_primary_source(params)
    particle.build_secondary_source([particle], params)
    particle.build_grammage_at_source([particle], params)
    particle.build_interactions(params)
    return particle


# ------------------------------------------------------------------
# quadrature
# ------------------------------------------------------------------

def test_qags_integrates_singular_endpoint() -> None:
    assert compute_integral_qags(lambda x: 1.0 / math.sqrt(x), 0.0, 1.0) == pytest.approx(2.0, rel=1e-5)
    assert compute_integral_qags(math.exp, 1.0, 1.0) == 0.0


def test_qags_rejects_negative_and_nonfinite_results() -> None:
    with pytest.raises(NumericalError):
        compute_integral_qags(lambda x: -1.0, 0.0, 1.0)
    with pytest.raises(NumericalError):
        compute_integral_qags(lambda x: math.nan, 0.0, 1.0)


# ------------------------------------------------------------------
# proton solve
# ------------------------------------------------------------------

def test_proton_only_solve(proton_pipeline, proton_grid) -> None:
    protons = proton_pipeline.find(H1)
    assert protons.done
    assert protons.I_T.size == proton_grid.size
    I_10 = protons.I_T_interpol(10.0 * cgs.GeV)
    I_1000 = protons.I_T_interpol(1.0 * cgs.TeV)
    assert math.isfinite(I_10) and I_10 > 0.0
    assert 1e-6 < I_1000 / I_10 < 1e-2


def test_leaky_box_estimate(proton_pipeline) -> None:
    # above a few GeV losses are slow: I ~ Q / (1/X + sigma/m)
    protons = proton_pipeline.find(H1)
    T = 10.0 * cgs.GeV
    estimate = protons.Q(T) / (1.0 / protons.X.get(T) + protons.sigma.get_ISM(T) / cgs.mean_ism_mass)
    assert protons.I_T_interpol(T) == pytest.approx(estimate, rel=0.1)


def test_interpolation_exact_at_nodes(proton_pipeline) -> None:
    protons = proton_pipeline.find(H1)
    for T, I in zip(protons.T, protons.I_T):
        assert protons.I_T_interpol(T) == pytest.approx(I, rel=1e-12)
    assert protons.I_T_interpol(protons.T[0] * 0.99) == 0.0
    assert protons.I_T_interpol(protons.T[-1] * 1.01) == 0.0


def test_tertiary_channel_is_solved(proton_pipeline) -> None:
    tertiary = proton_pipeline.find(H1_ter)
    protons = proton_pipeline.find(H1)
    assert tertiary.done
    assert tertiary.Q_ter.get(10.0 * cgs.GeV) > 0.0
    assert protons.Q_ter is None
    # degraded protons are a small correction
    assert 0.0 < tertiary.I_T[0] < protons.I_T[0]


@pytest.mark.parametrize("R_GV", [25.0, 60.0, 200.0, 500.0])
@pytest.mark.parametrize("phi_GV", [0.3, 0.6, 1.0])
def test_modulation_lowers_intensity(proton_pipeline, R_GV, phi_GV) -> None:
    protons = proton_pipeline.find(H1)
    R = R_GV * cgs.GV
    LIS = protons.I_R_LIS(R)
    assert LIS > 0.0
    assert protons.I_R_TOA(R, phi_GV * cgs.GV) <= LIS
    assert protons.I_R_TOA(R, 0.0) == pytest.approx(LIS, rel=1e-12)


def test_modulation_zero_outside_grid(proton_pipeline) -> None:
    protons = proton_pipeline.find(H1)
    assert protons.I_R_TOA(5.0 * cgs.GV, 0.6 * cgs.GV) == 0.0
    assert protons.I_R_TOA(1e4 * cgs.GV, 0.6 * cgs.GV) == 0.0


# ------------------------------------------------------------------
# sources and dependencies
# ------------------------------------------------------------------

def test_secondary_vanishes_without_heavier_species() -> None:
    particle = Particle(B10)
    particle.build_secondary_source([particle, Particle(H1)], Params())
    assert particle.Q_sec.is_zero()


def test_secondary_requires_solved_parents() -> None:
    child, parent = Particle(B10), Particle(B11)
    with pytest.raises(DependencyError):
        child.build_secondary_source([parent, child], Params())
    with pytest.raises(DependencyError):
        child.build_grammage_at_source([parent, child], Params())


def test_tertiary_source_is_gated() -> None:
    tertiary, protons = Particle(H1_ter), Particle(H1, 1.0)
    with pytest.raises(DependencyError):
        tertiary.build_tertiary_source([protons])
    with pytest.raises(DependencyError):
        tertiary.build_tertiary_source([])
    with pytest.raises(ValueError):
        Particle(C12).build_tertiary_source([protons])


def test_run_requires_built_models() -> None:
    with pytest.raises(DependencyError):
        Particle(C12, 1e-3).run(LogAxis(cgs.GeV, cgs.TeV, 3))


def test_run_rejects_bad_grid() -> None:
    particle = _built(C12)
    with pytest.raises(DomainError):
        particle.run([10.0 * cgs.GeV, 1.0 * cgs.GeV])


def test_numerical_failure_returns_false() -> None:
    particle = _built(C12)
    particle.dEdx = NoLosses()
    assert particle.run(LogAxis(10.0 * cgs.GeV, 100.0 * cgs.GeV, 2)) is False
    assert not particle.done
    assert particle.I_T.size == 0
    with pytest.raises(NumericalError):
        particle.Lambda_2(cgs.GeV)


def test_combined_source_of_a_primary() -> None:
    particle = _built(C12)
    T = 10.0 * cgs.GeV
    assert particle.Q(T) == pytest.approx(particle.Q_primary.get(T))
    assert particle.Lambda_1(T) > 1.0 / particle.X.get(T)


def test_clear_releases_models() -> None:
    particle = _built(C12)
    particle.clear()
    assert particle.X is None and particle.Q_primary is None and particle.dEdx is None
    assert not particle.done


def test_dump(tmp_path) -> None:
    particle = _built(C12)
    path = particle.dump(tmp_path)
    assert path.name == "particle_6_12.log"
    table = np.loadtxt(path)
    assert table.shape == (74, 7)
    assert table[0, 0] == pytest.approx(1.0)
    assert table[-1, 0] < 1100.0
    assert np.all(np.diff(table[:, 3]) < 0.0)  # grammage
    assert np.all(table[:, 5] == table[0, 5])  # advection time
