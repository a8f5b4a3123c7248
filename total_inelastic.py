# total_inelastic.py
# ---------------------------------------------------------------------
# Total inelastic cross sections of cosmic-ray nuclei on the ISM.
#
#   sigma_pp(T)        : p-p inelastic, Kafexhiu et al. (2014), Eq. 1
#   sigma_H(A, T)      : nucleus on H, Letaw et al. (1983)
#   He target          : geometric (Bradt-Peters) overlap scaling
#                        sigma_He / sigma_H = [(A^1/3 + 4^1/3 - d)/(A^1/3 + 1 - d)]^2
#                        (K_He for protons)
#   sigma_ISM(T)       : per ISM atom, (sigma_H + f_He sigma_He) / (1 + f_He)
#
# Units:
#   T:      kinetic energy per nucleon [erg]
#   sigma:  cm^2
#
# Use in the transport: the catastrophic loss rate per unit grammage is
# sigma_ISM(T) / mean_ism_mass.
# ---------------------------------------------------------------------

from __future__ import annotations

import math
from dataclasses import dataclass

import cgs
from pid import PID

T_TH_PP = 0.2797 * cgs.GeV  # pion production threshold
DELTA_OVERLAP = 1.0


def sigma_pp(T: float) -> float:
    """Inelastic p-p cross section [cm^2] at proton kinetic energy T."""
    if T <= T_TH_PP:
        return 0.0
    L = math.log(T / T_TH_PP)
    sigma_mb = 30.7 - 0.96 * L + 0.18 * L ** 2
    sigma_mb *= (1.0 - (T_TH_PP / T) ** 1.9) ** 3
    return sigma_mb * cgs.mbarn


def letaw_energy_factor(T: float) -> float:
    """Low-energy modulation of Letaw's cross sections, -> 1 above a few GeV/n."""
    E_MeV = max(T / cgs.MeV, 1e-6)
    return 1.0 - 0.62 * math.exp(-E_MeV / 200.0) * math.sin(10.9 * E_MeV ** -0.28)


def geometric_He_ratio(A: int) -> float:
    """sigma(A + He) / sigma(A + p) from the geometric overlap of the two nuclei."""
    if A == 1:
        return cgs.K_He
    a = A ** (1.0 / 3.0)
    return ((a + 4.0 ** (1.0 / 3.0) - DELTA_OVERLAP) / (a + 1.0 - DELTA_OVERLAP)) ** 2


def ism_average(sigma_H: float, He_ratio: float) -> float:
    """Per-atom average over an H/He ISM with He/H = f_He."""
    return sigma_H * (1.0 + cgs.f_He * He_ratio) / (1.0 + cgs.f_He)


@dataclass
class InelasticXsecs:
    """
    Total inelastic cross section of one species on the ISM.

    Parameters
    ----------
    pid : PID
        Projectile. Protons (including the tertiary channel) use sigma_pp.
    """
    pid: PID

    def __post_init__(self):
        self._He_ratio = geometric_He_ratio(self.pid.A)

    def get_H(self, T: float) -> float:
        if self.pid.A == 1:
            return sigma_pp(T)
        A = self.pid.A
        sigma_mb = 45.0 * A ** 0.7 * (1.0 + 0.016 * math.sin(5.3 - 2.63 * math.log(A)))
        return sigma_mb * letaw_energy_factor(T) * cgs.mbarn

    def get_ISM(self, T: float) -> float:
        return ism_average(self.get_H(T), self._He_ratio)

    def __repr__(self) -> str:
        return f"<sigma_inel {self.pid}: sigma_ISM(10 GeV/n)={self.get_ISM(10 * cgs.GeV) / cgs.mbarn:.1f} mb>"


# ------------------------------ sanity main ------------------------------
if __name__ == "__main__":
    from pid import C12, H1, O16

    # p-p is ~ 30-40 mb between 10 GeV and 1 TeV
    for T_GeV in (10.0, 100.0, 1000.0):
        assert 25.0 < sigma_pp(T_GeV * cgs.GeV) / cgs.mbarn < 45.0
    assert sigma_pp(0.1 * cgs.GeV) == 0.0
    # heavier nuclei interact more
    T = 10.0 * cgs.GeV
    assert InelasticXsecs(O16).get_ISM(T) > InelasticXsecs(C12).get_ISM(T) > InelasticXsecs(H1).get_ISM(T)
    for p in (H1, C12, O16):
        print(InelasticXsecs(p))
    print("total_inelastic: sanity checks passed ✓")
