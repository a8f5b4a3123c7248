"""
particle.py
----------------------------------------------------------------------
Steady-state transport of one cosmic-ray species in the leaky box with
continuous (ionization) losses, escape and inelastic interactions.

Physics model
-------------
The equilibrium intensity I(T) per unit kinetic energy per nucleon obeys

    I/X + sigma_ISM/m_ISM I - d/dT [ (dE/dx) I ] = Q,

whose solution, integrated from above along the loss characteristic, is

    I(T) = ∫_T^{T_max} dT' Q(T') / Lambda_2(T') *
           exp[ - ∫_T^{T'} Lambda_1(T'') / Lambda_2(T'') dT'' ]      (1)

with
    Lambda_1(T) = 1/X(T) + sigma_ISM(T)/m_ISM + d(dE/dx)/dT
    Lambda_2(T) = |dE/dx(T)|
    T_max       = 1e3 T.

Both integrals are done in u = ln T (dT = T du) with QUADPACK QAGS
(scipy.integrate.quad): the outer integrand is sharply peaked at its
lower end, where the exponential damping sets in.

Source terms
------------
    Q = Q_primary + Q_sec + Q_Xs      (all species but H1_ter)
    Q = Q_ter                         (H1_ter)

Q_sec, Q_ter and Q_Xs are tabulated on 100 log-spaced points in
[0.1 GeV, 10 TeV] from the intensities of species already solved:

    Q_sec(T) = sum_p' sigma_ISM(p' -> p; T) I_p'(T) / m_ISM
    Q_Xs(T)  = sum_p' X_s sigma_ISM(p' -> p; T) Q_primary,p'(T) / m_ISM
    Q_ter(T) = sigma_pp(T') / kappa (1 + K_He f_He)/(1 + f_He)
               (T' + m_p)/(T + m_p) [T(T+2m_p)]^1.5 / [T'(T'+2m_p)]^1.5
               I_H1(T') / m_ISM,                      T' = T / kappa
----------------------------------------------------------------------
"""

from __future__ import annotations

import logging
import math
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Sequence

import numpy as np
from scipy.integrate import quad

import cgs
from cross_section_channels import SpallationXsecs
from errors import DependencyError, NumericalError
from grammage import Grammage
from interpolation import LogAxis, LogLogInterpolator, check_grid
from kinematics import T_from_R, dT_dR, pc_func
from params import Params
from pid import H1, PID
from snr_source import SnrSource
from source_term import SourceTerm, TabulatedSourceTerm
from stopping_power import IonizationLosses
from total_inelastic import InelasticXsecs, sigma_pp

logger = logging.getLogger(__name__)

LIMIT = 1000
EPSREL = 1e-5
ABSERR_TOLERANCE = 1e-3  # accepted relative error of an unconverged quad
T_MAX_FACTOR = 1e3

SOURCE_T_MIN = 0.1 * cgs.GeV
SOURCE_T_MAX = 10.0 * cgs.TeV
SOURCE_SIZE = 100


def source_axis() -> np.ndarray:
    """Energy grid of the tabulated source terms."""
    return LogAxis(SOURCE_T_MIN, SOURCE_T_MAX, SOURCE_SIZE)


def compute_integral_qags(f: Callable[[float], float], x_lo: float, x_hi: float) -> float:
    """
    ∫_{x_lo}^{x_hi} f(x) dx with QAGS, relative tolerance EPSREL.

    Each call owns its own QUADPACK workspace, so calls may nest.

    Raises
    ------
    NumericalError
        If the result is non-finite or negative, or QUADPACK reports a
        failure with an error estimate above ABSERR_TOLERANCE relative.
    """
    if x_hi == x_lo:
        return 0.0
    out = quad(f, x_lo, x_hi, epsabs=0.0, epsrel=EPSREL, limit=LIMIT, full_output=1)
    result, abserr = out[0], out[1]
    if not math.isfinite(result) or result < 0.0:
        raise NumericalError(f"invalid integral {result} on [{x_lo:.6g}, {x_hi:.6g}]")
    if len(out) > 3 and abserr > ABSERR_TOLERANCE * abs(result):
        raise NumericalError(
            f"integral on [{x_lo:.6g}, {x_hi:.6g}] did not converge "
            f"(result={result:.6e}, abserr={abserr:.3e}): {out[3]}"
        )
    return result


class Particle:
    """
    One cosmic-ray species and its transport solution.

    Parameters
    ----------
    pid : PID
        Species identifier.
    efficiency : float
        Fraction of the SN energy injected into this species (0 for pure
        secondaries and for H1_ter).

    Attributes
    ----------
    X, Q_primary, Q_sec, Q_ter, Q_Xs, sigma, dEdx
        Owned models, None until built.
    T, I_T : np.ndarray
        Energy grid and intensities; populated by run().
    done : bool
        True once I_T holds one value per grid point.
    """

    def __init__(self, pid: PID, efficiency: float = 0.0):
        self.pid = pid
        self.efficiency = float(efficiency)
        self.X: Optional[Grammage] = None
        self.Q_primary: Optional[SourceTerm] = None
        self.Q_sec: Optional[TabulatedSourceTerm] = None
        self.Q_ter: Optional[TabulatedSourceTerm] = None
        self.Q_Xs: Optional[TabulatedSourceTerm] = None
        self.sigma: Optional[InelasticXsecs] = None
        self.dEdx: Optional[IonizationLosses] = None
        self.T = np.empty(0)
        self.I_T = np.empty(0)
        self._I_interp: Optional[LogLogInterpolator] = None
        self.done = False

    def __repr__(self) -> str:
        return f"Particle({self.pid}, efficiency={self.efficiency:g}, done={self.done})"

    # ------------------------------------------------------------------
    # Construction of the owned models
    # ------------------------------------------------------------------

    def build_grammage(self, params: Params) -> None:
        self.X = Grammage(self.pid, params)

    def build_primary_source(self, params: Params) -> None:
        self.Q_primary = SnrSource(self.pid, self.efficiency, params)

    def build_interactions(self, params: Params) -> None:
        self.sigma = InelasticXsecs(self.pid)
        self.dEdx = IonizationLosses(self.pid)

    def _solved_heavier(self, particles: Iterable["Particle"]) -> List["Particle"]:
        heavier = [p for p in particles if p.pid.A > self.pid.A]
        missing = [p.pid.name for p in heavier if not p.done]
        if missing:
            raise DependencyError(f"{self.pid}: heavier species not solved yet: {', '.join(missing)}")
        return heavier

    def build_secondary_source(self, particles: Iterable["Particle"], params: Params) -> None:
        parents = self._solved_heavier(particles)
        xsecs = SpallationXsecs.from_params(self.pid, params.id)
        T_s = source_axis()
        Q_s = []
        for T in T_s:
            value = 0.0
            for parent in parents:
                value += xsecs.get_ISM(parent.pid, T) * parent.I_T_interpol(T)
            Q_s.append(value / cgs.mean_ism_mass)
        self.Q_sec = TabulatedSourceTerm(T_s, Q_s)
        logger.debug("%s: secondary source from %d parents", self.pid, len(parents))

    def build_tertiary_source(self, particles: Iterable["Particle"]) -> None:
        if not self.pid.is_tertiary:
            raise ValueError(f"{self.pid} has no tertiary source")
        protons = next((p for p in particles if p.pid == H1), None)
        if protons is None or not protons.done:
            raise DependencyError(f"{self.pid}: H1 must be solved before its tertiary channel")
        m_p = cgs.proton_mass_c2
        He_factor = (1.0 + cgs.K_He * cgs.f_He) / (1.0 + cgs.f_He)
        T_t = source_axis()
        Q_t = []
        for T in T_t:
            T_prime = T / cgs.inelasticity
            value = sigma_pp(T_prime) * He_factor / cgs.inelasticity
            value *= (T_prime + m_p) / (T + m_p)
            value *= (T * (T + 2.0 * m_p)) ** 1.5 / (T_prime * (T_prime + 2.0 * m_p)) ** 1.5
            value *= protons.I_T_interpol(T_prime)
            Q_t.append(value / cgs.mean_ism_mass)
        self.Q_ter = TabulatedSourceTerm(T_t, Q_t)

    def build_grammage_at_source(self, particles: Iterable["Particle"], params: Params) -> None:
        parents = self._solved_heavier(particles)
        xsecs = SpallationXsecs.from_params(self.pid, params.id)
        # primaries are evaluated directly, never through a table
        primaries = [p.Q_primary or SnrSource(p.pid, p.efficiency, params) for p in parents]
        T_X = source_axis()
        Q_X = []
        for T in T_X:
            value = 0.0
            for parent, Q in zip(parents, primaries):
                r = params.X_s / cgs.mean_ism_mass * xsecs.get_ISM(parent.pid, T)
                if r > 0.0:
                    value += r * Q.get(T)
            Q_X.append(value)
        self.Q_Xs = TabulatedSourceTerm(T_X, Q_X)

    def clear(self) -> None:
        """Release the owned models and the solution."""
        self.X = self.Q_primary = self.Q_sec = self.Q_ter = self.Q_Xs = None
        self.sigma = self.dEdx = None
        self.T = np.empty(0)
        self.I_T = np.empty(0)
        self._I_interp = None
        self.done = False

    def _missing_models(self) -> List[str]:
        needed = ["X", "sigma", "dEdx"]
        needed += ["Q_ter"] if self.pid.is_tertiary else ["Q_primary", "Q_sec", "Q_Xs"]
        return [name for name in needed if getattr(self, name) is None]

    # ------------------------------------------------------------------
    # Rates and source
    # ------------------------------------------------------------------

    def Lambda_1(self, T: float) -> float:
        return 1.0 / self.X.get(T) + self.sigma.get_ISM(T) / cgs.mean_ism_mass + self.dEdx.get_derivative(T)

    def Lambda_2(self, T: float) -> float:
        value = abs(self.dEdx.get(T))
        if value == 0.0 or not math.isfinite(value):
            raise NumericalError(f"{self.pid}: |dE/dx| = {value} at T={T:.6e}")
        return value

    def Q(self, T: float) -> float:
        if self.pid.is_tertiary:
            return self.Q_ter.get(T)
        return self.Q_primary.get(T) + self.Q_sec.get(T) + self.Q_Xs.get(T)

    # ------------------------------------------------------------------
    # Nested integrals of Eq. (1)
    # ------------------------------------------------------------------

    def internal_integrand(self, T_second: float) -> float:
        return self.Lambda_1(T_second) / self.Lambda_2(T_second)

    def ExpIntegral(self, T: float, T_prime: float) -> float:
        """∫_T^{T'} Lambda_1/Lambda_2 dT'' in u = ln T''."""

        def integrand(u: float) -> float:
            T_second = math.exp(u)
            return T_second * self.internal_integrand(T_second)

        return compute_integral_qags(integrand, math.log(T), math.log(T_prime))

    def external_integrand(self, T_prime: float, T: float) -> float:
        q = self.Q(T_prime)
        if q == 0.0:
            return 0.0
        return q * math.exp(-self.ExpIntegral(T, T_prime)) / self.Lambda_2(T_prime)

    def compute_integral(self, T: float) -> float:
        """I(T) from Eq. (1)."""

        def integrand(u: float) -> float:
            T_prime = math.exp(u)
            return T_prime * self.external_integrand(T_prime, T)

        return compute_integral_qags(integrand, math.log(T), math.log(T_MAX_FACTOR * T))

    def run(self, T: Sequence[float]) -> bool:
        """
        Solve for I(T) on the grid T.

        Returns False, leaving the species not done, when a quadrature fails.
        """
        check_grid(T, f"{self.pid} energy grid")
        missing = self._missing_models()
        if missing:
            raise DependencyError(f"{self.pid}: models not built: {', '.join(missing)}")
        self.done = False
        self.T = np.asarray(T, dtype=float)
        I_T = []
        try:
            for T_now in self.T:
                I_T.append(self.compute_integral(float(T_now)))
        except NumericalError as exc:
            logger.error("%s: solve failed: %s", self.pid, exc)
            self.I_T = np.empty(0)
            self._I_interp = None
            return False
        self.I_T = np.asarray(I_T)
        self._I_interp = LogLogInterpolator(self.T, self.I_T)
        self.done = self.I_T.size == self.T.size
        logger.info("%s: solved on %d energies", self.pid, self.T.size)
        return self.done

    # ------------------------------------------------------------------
    # Interpolated intensities
    # ------------------------------------------------------------------

    def I_T_interpol(self, T: float) -> float:
        if self._I_interp is None:
            return 0.0
        return self._I_interp(T)

    def I_R_LIS(self, R: float) -> float:
        """Interstellar intensity per unit rigidity."""
        return self.I_T_interpol(T_from_R(self.pid, R)) * dT_dR(self.pid, R)

    def I_R_TOA(self, R: float, modulation_potential: float) -> float:
        """
        Force-field modulated intensity per unit rigidity at Earth.

        Zero unless T(R) lies strictly inside the solved grid; the
        interstellar energy is capped at the last grid point.
        """
        T_now = T_from_R(self.pid, R)
        if not self.done or not (self.T[0] < T_now < self.T[-1]):
            return 0.0
        mp_2 = cgs.proton_mass_c2 ** 2
        Phi = self.pid.Z_over_A * modulation_potential
        T_ISM = min(T_now + Phi, self.T[-1])
        factor = (T_now ** 2 - mp_2) / (T_ISM ** 2 - mp_2)
        return factor * self.I_T_interpol(T_ISM) * dT_dR(self.pid, R)

    # ------------------------------------------------------------------
    # Report
    # ------------------------------------------------------------------

    def make_filename(self) -> str:
        return f"particle_{self.pid.Z}_{self.pid.A}.log"

    def dump(self, directory: str | Path = ".") -> Path:
        """
        Write T, R, Q, X, diffusion and advection times and the interaction
        length, for T from 1 GeV to 1.1 TeV in steps of 10%.
        """
        missing = self._missing_models()
        if missing:
            raise DependencyError(f"{self.pid}: cannot dump, models not built: {', '.join(missing)}")
        rows = []
        T = cgs.GeV
        while T < 1.1 * cgs.TeV:
            rows.append((
                T / cgs.GeV,
                pc_func(self.pid.A, T) / self.pid.Z / cgs.GeV,
                self.Q(T),
                self.X.get(T) / (cgs.gram / cgs.cm2),
                self.X.diffusion_timescale(T) / cgs.year,
                self.X.advection_timescale() / cgs.year,
                cgs.mean_ism_mass / self.sigma.get_ISM(T) / (cgs.gram / cgs.cm2),
            ))
            T *= 1.1
        path = Path(directory) / self.make_filename()
        np.savetxt(path, np.array(rows), fmt="%e", delimiter="\t")
        logger.info("%s: dumped %d rows to %s", self.pid, len(rows), path)
        return path
