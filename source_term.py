"""
source_term.py
----------------------------------------------------------------------
Base class for cosmic-ray source terms Q(T) and the tabulated source used
for secondary, tertiary and grammage-at-source production.

Every source term returns the injection per unit grammage,
[intensity] / [g cm^-2], at kinetic energy per nucleon T (CGS).
----------------------------------------------------------------------
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from errors import DomainError
from interpolation import LogLinearInterpolator


class SourceTerm:
    """
    Abstract base class for all source terms.

    Each subclass (primary SNR injection, tabulated production) must
    implement:
        - `get(T)`: the source term at kinetic energy per nucleon T
    """

    def get(self, T: float) -> float:
        raise NotImplementedError("Subclasses must implement `get(T)`")

    def __call__(self, T: float) -> float:
        return self.get(T)


class TabulatedSourceTerm(SourceTerm):
    """
    Source term known on a grid (T_i, Q_i).

    Queried linearly in Q over ln T; zero below the first node and
    saturated at Q_n above the last one.

    Parameters
    ----------
    T : sequence of float
        Strictly increasing, positive kinetic energies per nucleon.
    Q : sequence of float
        Source values on T, same length.
    """

    def __init__(self, T: Sequence[float], Q: Sequence[float]):
        if len(Q) != len(T):
            raise DomainError(f"source-term table has {len(T)} energies but {len(Q)} values")
        self._interp = LogLinearInterpolator(T, Q)
        self.T = self._interp.x
        self.Q = self._interp.y

    def get(self, T: float) -> float:
        return self._interp(T)

    def is_zero(self) -> bool:
        return not np.any(self.Q)

    def __len__(self) -> int:
        return len(self._interp)
