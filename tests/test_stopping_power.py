from __future__ import annotations

import math

import pytest

import cgs
from pid import C12, H1, O16
from stopping_power import IonizationLosses

MEV_CM2_G = cgs.MeV * cgs.cm2 / cgs.gram


def test_losses_are_negative_and_of_mip_size() -> None:
    losses = IonizationLosses(H1)
    for T_GeV in (0.1, 1.0, 10.0, 1000.0):
        assert losses.get(T_GeV * cgs.GeV) < 0.0
    assert 1.0 < -losses.get(3.0 * cgs.GeV) / MEV_CM2_G < 6.0


def test_losses_scale_as_Z2_over_A() -> None:
    T = cgs.GeV
    proton = IonizationLosses(H1).get(T)
    assert IonizationLosses(C12).get(T) / proton == pytest.approx(3.0)
    assert IonizationLosses(O16).get(T) / proton == pytest.approx(4.0)


def test_derivative_sign_below_minimum_ionization() -> None:
    losses = IonizationLosses(H1)
    T = 0.1 * cgs.GeV
    assert losses.get_derivative(T) > 0.0
    h = 1e-4 * T
    numeric = (losses.get(T + h) - losses.get(T - h)) / (2.0 * h)
    assert losses.get_derivative(T) == pytest.approx(numeric, rel=1e-4)


def _analytic_derivative(losses: IonizationLosses, T: float) -> float:
    E0 = cgs.proton_mass_c2
    beta2 = losses.beta2(T)
    bg2 = losses.beta2gamma2(T)
    dbeta2 = 2.0 * E0 ** 2 / (T + E0) ** 3
    dbg2 = 2.0 * (T + E0) / E0 ** 2
    log_term = math.log(2.0 * cgs.electron_mass_c2 / losses.I_mix * bg2)
    prefactor = -losses.get(T) * beta2 / (log_term - beta2)
    return -prefactor * (dbg2 / bg2 / beta2 - log_term * dbeta2 / beta2 ** 2)


@pytest.mark.parametrize("T_GeV", [0.1, 0.3, 10.0, 100.0])
@pytest.mark.parametrize("pid", [H1, C12])
def test_derivative_matches_analytic_form(pid, T_GeV) -> None:
    losses = IonizationLosses(pid)
    T = T_GeV * cgs.GeV
    assert losses.get_derivative(T) == pytest.approx(_analytic_derivative(losses, T), rel=1e-4)
