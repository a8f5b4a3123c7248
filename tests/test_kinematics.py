from __future__ import annotations

import pytest

import cgs
from errors import DomainError
from kinematics import T_from_R, beta_func, dT_dR, pc_func, rigidity
from pid import B10, C12, H1, He4, O16


@pytest.mark.parametrize("pid", [H1, He4, B10, C12, O16])
@pytest.mark.parametrize("T_GeV", [0.01, 0.1, 1.0, 10.0, 1e3, 1e5])
def test_rigidity_round_trip(pid, T_GeV) -> None:
    T = T_GeV * cgs.GeV
    assert T_from_R(pid, rigidity(pid, T)) == pytest.approx(T, rel=1e-9)


def test_proton_rigidity_is_momentum() -> None:
    T = 10.0 * cgs.GeV
    m = cgs.proton_mass_c2
    assert rigidity(H1, T) == pytest.approx(((T + m) ** 2 - m ** 2) ** 0.5)


def test_jacobian_matches_finite_difference() -> None:
    R = 20.0 * cgs.GV
    h = 1e-6 * R
    numeric = (T_from_R(C12, R + h) - T_from_R(C12, R - h)) / (2.0 * h)
    assert dT_dR(C12, R) == pytest.approx(numeric, rel=1e-6)


def test_beta_limits() -> None:
    assert beta_func(0.0) == 0.0
    assert 0.0 < beta_func(cgs.GeV) < beta_func(cgs.TeV) < 1.0


def test_negative_arguments_raise() -> None:
    with pytest.raises(DomainError):
        pc_func(1, -1.0)
    with pytest.raises(DomainError):
        beta_func(-1.0)
    with pytest.raises(DomainError):
        T_from_R(H1, -1.0)
    with pytest.raises(DomainError):
        dT_dR(H1, -1.0)
