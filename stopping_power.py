# stopping_power.py
# ---------------------------------------------------------------------
# Ionization energy losses of cosmic-ray nuclei in the neutral H/He ISM,
# per unit grammage and per nucleon:
#
#   dE/dx(T) = - K z^2 (Z/A)_ISM / (A beta^2) *
#              [ ln( 2 m_e c^2 beta^2 gamma^2 / I_ISM ) - beta^2 ]
#
# With:  (beta gamma)^2 = T(T+2E0) / E0^2,  beta^2 = T(T+2E0)/(T+E0)^2,
#        E0 = m_p c^2, T the kinetic energy per nucleon,
#        K = 0.307075 MeV cm^2 g^-1,
#        (Z/A)_ISM = (1 + 2 f_He) / (1 + 4 f_He)   electrons per nucleon mass.
#
# The sign convention is the transport one: dE/dx < 0 for losses, and the
# derivative d(dE/dx)/dT enters the Lambda_1 rate of the solver.
# ---------------------------------------------------------------------

from __future__ import annotations

import math
from dataclasses import dataclass

import cgs
from errors import NumericalError
from pid import PID

K_BETHE = 0.307075 * cgs.MeV * cgs.cm2 / cgs.gram
Z_OVER_A_ISM = (1.0 + 2.0 * cgs.f_He) / (1.0 + 4.0 * cgs.f_He)
DERIVATIVE_STEP = 1e-3  # relative step of the centred difference


@dataclass
class IonizationLosses:
    """
    Parameters
    ----------
    pid : PID
        Projectile; z = Z, losses shared among A nucleons.
    I_mix : float
        Mean excitation energy of the ISM [erg] (19.31 eV for H/He).
    """
    pid: PID
    I_mix: float = 19.31 * cgs.eV

    def __post_init__(self):
        self._prefactor = K_BETHE * self.pid.Z ** 2 * Z_OVER_A_ISM / self.pid.A
        self._log_prefactor = 2.0 * cgs.electron_mass_c2 / self.I_mix

    # --------------------- relativistic helpers ---------------------

    @staticmethod
    def beta2(T: float) -> float:
        E0 = cgs.proton_mass_c2
        return min(T * (T + 2.0 * E0) / (T + E0) ** 2, 1.0)

    @staticmethod
    def beta2gamma2(T: float) -> float:
        E0 = cgs.proton_mass_c2
        return T * (T + 2.0 * E0) / (E0 * E0)

    # --------------------- main API ---------------------------------

    def get(self, T: float) -> float:
        """Signed dE/dx [erg / (g cm^-2)] per nucleon; negative."""
        beta2 = max(self.beta2(T), 1e-10)
        bg2 = max(self.beta2gamma2(T), 1e-20)
        arg = max(self._log_prefactor * bg2, 1.0000001)  # keep the bracket positive
        value = -self._prefactor / beta2 * (math.log(arg) - beta2)
        if not math.isfinite(value):
            raise NumericalError(f"non-finite dE/dx for {self.pid} at T={T}")
        return value

    def get_derivative(self, T: float) -> float:
        """d(dE/dx)/dT [(g cm^-2)^-1], centred finite difference."""
        h = DERIVATIVE_STEP * T
        return (self.get(T + h) - self.get(T - h)) / (2.0 * h)


# ----------------------------- sanity main ----------------------------------
if __name__ == "__main__":
    from pid import C12, H1

    losses = IonizationLosses(H1)
    units = cgs.MeV * cgs.cm2 / cgs.gram
    # minimum ionizing protons lose ~2-4 MeV cm^2/g in H-rich gas
    S_mip = -losses.get(3.0 * cgs.GeV) / units
    assert 1.0 < S_mip < 6.0, S_mip
    # losses fall with energy below the minimum, so the derivative is positive there
    assert losses.get_derivative(0.1 * cgs.GeV) > 0.0
    # per nucleon, carbon loses Z^2/A = 3 times the proton rate
    ratio = IonizationLosses(C12).get(cgs.GeV) / losses.get(cgs.GeV)
    assert abs(ratio - 3.0) < 1e-12
    print(f"|dE/dx|(3 GeV, p) = {S_mip:.3f} MeV cm^2/g")
    print("stopping_power: sanity checks passed ✓")
