"""
chi2.py
----------------------------------------------------------------------
Goodness of fit of the modulated (top-of-atmosphere) model against
rigidity-binned measurements.

For the data inside the open window (R_min, R_max):

    chi2/ndof = (1/N) sum_i (M_i - F_i)^2 / e_i^2

    e_i = F_err_low   if M_i < R_i
          F_err_high  otherwise

The branch compares the model with the rigidity of the datum, not with
the measured flux; it is kept as is for comparability with earlier fits.

Observables
-----------
    Chi2C   C12 + C13 + C14
    Chi2O   O16 + O17 + O18
    Chi2H   H1 + H1_ter
    Chi2B   B10 + B11
    Chi2BC  (B10 + B11) / (C12 + C13 + C14)

Species missing from the pipeline contribute zero.

Data files: one header line, then rows "R F F_err_low F_err_high", R in
GeV, fluxes in units given to read_datafile().
----------------------------------------------------------------------
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple

import numpy as np

import cgs
from errors import DataFormatError, DomainError
from particle import Particle
from particles import Particles
from pid import B10, B11, C12, C13, C14, H1, H1_ter, O16, O17, O18, PID

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DataPoint:
    R: float
    F: float
    F_err_low: float
    F_err_high: float


def chi2_per_dof(
    model: Sequence[float],
    F: Sequence[float],
    err_low: Sequence[float],
    err_high: Sequence[float],
    R: Sequence[float],
) -> float:
    model = np.asarray(model, dtype=float)
    F = np.asarray(F, dtype=float)
    if model.size == 0:
        raise DomainError("chi2 over an empty data set")
    err = np.where(model < np.asarray(R, dtype=float), err_low, err_high)
    return float(np.sum(((model - F) / err) ** 2) / model.size)


def _check_phi(value: float) -> float:
    if value < 0.0:
        raise DomainError(f"modulation potential must be non-negative, got {value}")
    return float(value)


class Chi2:
    """
    chi^2 of one observable, summed over `species`.

    Parameters
    ----------
    particles : Particles
        Pipeline, solved before compute_chi2 is called; the species of the
        observable are looked up once.
    phi : float
        Default modulation potential [energy per unit charge].
    """

    species: Tuple[PID, ...] = ()

    def __init__(self, particles: Particles, phi: float = 0.0):
        self._particles: Dict[PID, Optional[Particle]] = {pid: particles.find(pid) for pid in self.species}
        self.phi = phi
        self.data: List[DataPoint] = []

    @property
    def phi(self) -> float:
        return self._phi

    @phi.setter
    def phi(self, value: float) -> None:
        self._phi = _check_phi(value)

    @property
    def size(self) -> int:
        return len(self.data)

    def present(self) -> List[PID]:
        return [pid for pid, p in self._particles.items() if p is not None]

    # ------------------------------------------------------------------
    def read_datafile(self, filename: str, units: float = 1.0) -> int:
        """
        Load the data table, replacing the current one.

        A missing or unreadable file is logged and leaves the table empty;
        malformed rows raise DataFormatError. Returns the number of points.
        """
        logger.info("reading data from %s", filename)
        self.data = []
        try:
            table = np.loadtxt(filename, skiprows=1, ndmin=2)
        except OSError as exc:
            logger.error("cannot read %s: %s", filename, exc)
            return 0
        except ValueError as exc:
            raise DataFormatError(f"{filename}: {exc}") from exc
        if table.size == 0:
            logger.warning("%s holds no data", filename)
            return 0
        if table.shape[1] != 4:
            raise DataFormatError(f"{filename}: expected 4 columns, found {table.shape[1]}")
        if not np.all(np.isfinite(table)):
            raise DataFormatError(f"{filename}: non-finite values")
        if np.any(table[:, 0] <= 0.0) or np.any(table[:, 2:] <= 0.0):
            raise DataFormatError(f"{filename}: rigidities and errors must be positive")
        self.data = [
            DataPoint(R * cgs.GeV, F * units, lo * units, hi * units)
            for R, F, lo, hi in table
        ]
        logger.info("%s: %d data points", filename, self.size)
        return self.size

    # ------------------------------------------------------------------
    def _sum_TOA(self, pids: Sequence[PID], R: float, phi: float) -> float:
        value = 0.0
        for pid in pids:
            particle = self._particles.get(pid)
            if particle is not None:
                value += particle.I_R_TOA(R, phi)
        return value

    def get_model(self, R: float, phi: float) -> float:
        return self._sum_TOA(self.species, R, phi)

    def compute_chi2(self, R_min: float, R_max: float, phi: Optional[float] = None) -> float:
        """chi^2 per data point inside (R_min, R_max); DomainError if there are none."""
        phi = self.phi if phi is None else _check_phi(phi)
        points = [d for d in self.data if R_min < d.R < R_max]
        if not points:
            raise DomainError(f"no data inside ({R_min:.4g}, {R_max:.4g})")
        model = [self.get_model(d.R, phi) for d in points]
        return chi2_per_dof(
            model,
            [d.F for d in points],
            [d.F_err_low for d in points],
            [d.F_err_high for d in points],
            [d.R for d in points],
        )


class Chi2C(Chi2):
    species = (C12, C13, C14)


class Chi2O(Chi2):
    species = (O16, O17, O18)


class Chi2H(Chi2):
    species = (H1, H1_ter)


class Chi2B(Chi2):
    species = (B10, B11)


class Chi2BC(Chi2):
    species = (B10, B11, C12, C13, C14)
    numerator = (B10, B11)
    denominator = (C12, C13, C14)

    def get_model(self, R: float, phi: float) -> float:
        C = self._sum_TOA(self.denominator, R, phi)
        if C == 0.0:
            return 0.0
        return self._sum_TOA(self.numerator, R, phi) / C
