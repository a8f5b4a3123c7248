"""
pid.py
----------------------------------------------------------------------
Particle identifiers for cosmic-ray nuclei.

A PID is the pair (Z, A) plus a flag marking the tertiary proton channel
(protons that survived an inelastic p-p collision and reappear at lower
energy). The tertiary channel shares Z and A with H1 but is a distinct
species for the propagation pipeline.

Ordering:
    PID.sort_key puts heavier nuclei first (A descending), ties broken by
    Z descending, and the tertiary channel after its parent. Solving species
    in this order guarantees every spallation parent is done before its
    fragments are built.
----------------------------------------------------------------------
"""

from __future__ import annotations

import re
from dataclasses import dataclass

ELEMENTS = {
    1: "H", 2: "He", 3: "Li", 4: "Be", 5: "B", 6: "C", 7: "N", 8: "O",
    9: "F", 10: "Ne", 11: "Na", 12: "Mg", 13: "Al", 14: "Si", 26: "Fe",
}
_SYMBOL_TO_Z = {symbol: Z for Z, symbol in ELEMENTS.items()}
_NAME_RE = re.compile(r"^([A-Z][a-z]?)(\d+)(_ter)?$")


@dataclass(frozen=True)
class PID:
    """
    Immutable nucleus identifier.

    Parameters
    ----------
    Z : int
        Charge number.
    A : int
        Mass number.
    tertiary : bool
        True for the tertiary proton channel (only meaningful for H1).
    """
    Z: int
    A: int
    tertiary: bool = False

    def __post_init__(self):
        if self.Z < 1 or self.A < self.Z:
            raise ValueError(f"invalid nucleus Z={self.Z}, A={self.A}")
        if self.tertiary and (self.Z, self.A) != (1, 1):
            raise ValueError("only protons have a tertiary channel")

    @property
    def Z_over_A(self) -> float:
        return self.Z / self.A

    @property
    def is_tertiary(self) -> bool:
        return self.tertiary

    @property
    def name(self) -> str:
        symbol = ELEMENTS.get(self.Z, f"Z{self.Z}")
        return f"{symbol}{self.A}" + ("_ter" if self.tertiary else "")

    @property
    def sort_key(self) -> tuple[int, int, bool]:
        return (-self.A, -self.Z, self.tertiary)

    @classmethod
    def from_name(cls, name: str) -> "PID":
        """Parse names like 'C12', 'B10' or 'H1_ter'."""
        match = _NAME_RE.match(name.strip())
        if match is None or match.group(1) not in _SYMBOL_TO_Z:
            raise ValueError(f"unknown particle name: {name!r}")
        return cls(_SYMBOL_TO_Z[match.group(1)], int(match.group(2)), match.group(3) is not None)

    def __str__(self) -> str:
        return self.name


H1 = PID(1, 1)
H1_ter = PID(1, 1, tertiary=True)
H2 = PID(1, 2)
He3 = PID(2, 3)
He4 = PID(2, 4)
Li6 = PID(3, 6)
Li7 = PID(3, 7)
Be7 = PID(4, 7)
Be9 = PID(4, 9)
Be10 = PID(4, 10)
B10 = PID(5, 10)
B11 = PID(5, 11)
C12 = PID(6, 12)
C13 = PID(6, 13)
C14 = PID(6, 14)
N14 = PID(7, 14)
N15 = PID(7, 15)
O16 = PID(8, 16)
O17 = PID(8, 17)
O18 = PID(8, 18)
