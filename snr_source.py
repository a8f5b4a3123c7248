# snr_source.py
# -------------
# Primary injection by supernova remnants.
#
# Each SNR releases E_SN, at a galactic rate SN_rate, uniformly over a disc
# of radius R_d; a fraction `efficiency` of that power goes into species
# (Z, A) with a power law in momentum, f(p) ~ p^-alpha. Per nucleon and per
# unit disc surface and time:
#
#     xi(T) = K * (p / m_p c)^(2 - alpha) / beta                     (1)
#
# where the 1/beta comes from dp/dT = 1/(beta c). K is fixed by the energy
# budget (quad over the shape, as the other spectra do):
#
#     A * ∫_{T_norm_min}^{∞} T xi(T) dT = efficiency * SN_rate * E_SN / (pi R_d^2)
#
# For a thin disc in a halo of half-height H the steady intensity is
# I = xi X / (4 pi mu), so the source per unit grammage is
#
#     Q(T) = xi(T) / (4 pi mu).                                      (2)

from __future__ import annotations

import math

import numpy as np
from scipy.integrate import quad

import cgs
from params import Params
from pid import PID
from source_term import SourceTerm


class SnrSource(SourceTerm):
    """
    Primary SNR source term for one species.

    Parameters
    ----------
    pid : PID
        Injected species.
    efficiency : float
        Fraction of the SN kinetic energy channelled into this species.
    params : Params
        Injection slope, SN energy and rate, disc radius, gas surface density.
    """

    def __init__(self, pid: PID, efficiency: float, params: Params):
        if efficiency < 0.0:
            raise ValueError(f"efficiency must be non-negative, got {efficiency}")
        self.pid = pid
        self.efficiency = float(efficiency)
        self.alpha = params.injection_slope
        self.mu = params.mu
        self.x_min = params.T_norm_min / cgs.proton_mass_c2
        power = self.efficiency * params.SN_rate * params.E_SN / (math.pi * params.R_d ** 2)
        if power == 0.0:
            self.K = 0.0
        else:
            self.K = power / (pid.A * cgs.proton_mass_c2 ** 2 * self.energy_integral())

    # ---------- Spectral form ----------

    def shape(self, x: float) -> float:
        """
        (p / m_p c)^(2 - alpha) / beta at x = T / m_p c^2.
        """
        p = math.sqrt(x * (x + 2.0))
        beta = p / (x + 1.0)
        return p ** (2.0 - self.alpha) / beta

    def energy_integral(self) -> float:
        """
        Dimensionless energy budget ∫_{x_min}^{∞} x shape(x) dx.
        """
        # noinspection PyTupleAssignmentBalance
        I, abserr = quad(lambda x: x * self.shape(x), self.x_min, np.inf,
                         limit=200, epsabs=0.0, epsrel=1e-6)
        if not np.isfinite(I) or I <= 0.0:
            raise RuntimeError(f"SNR energy integral invalid: I={I}, err={abserr}")
        return I

    def xi(self, T: float) -> float:
        """Injection per nucleon, unit disc surface and time [cm^-2 s^-1 erg^-1]."""
        if self.K == 0.0 or T <= 0.0:
            return 0.0
        return self.K * self.shape(T / cgs.proton_mass_c2)

    def get(self, T: float) -> float:
        return self.xi(T) / (4.0 * math.pi * self.mu)


if __name__ == "__main__":
    import matplotlib.pyplot as plt
    from pid import C12, H1, O16

    params = Params()
    T = np.logspace(-1, 4, 200) * cgs.GeV
    plt.figure(figsize=(7, 5))
    for p, eps in ((H1, 0.07), (C12, 2e-3), (O16, 3e-3)):
        Q = SnrSource(p, eps, params)
        plt.loglog(T / cgs.GeV, [Q.get(t) * (t / cgs.GeV) ** 2.2 for t in T], label=p.name)
    plt.xlabel("Kinetic energy per nucleon [GeV/n]")
    plt.ylabel(r"$T^{2.2}\,Q(T)$ [arb. units]")
    plt.title("SNR injection")
    plt.legend()
    plt.grid(True, which="both", alpha=0.4)
    plt.show()
