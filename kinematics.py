"""
kinematics.py
=============

Relativistic kinematics for nuclei, with T the kinetic energy PER NUCLEON
(CGS, erg) and every nucleon carrying the proton rest energy m_p c^2:

    pc(A, T) = A * sqrt( T (T + 2 m_p c^2) )
    beta(T)  = sqrt( T (T + 2 m_p c^2) ) / (T + m_p c^2)
    R        = pc / Z

and the inverse map used by the rigidity-domain observables:

    T(R)     = sqrt( (R Z/A)^2 + (m_p c^2)^2 ) - m_p c^2
    dT/dR    = R (Z/A)^2 / sqrt( (R Z/A)^2 + (m_p c^2)^2 )

These are scalar functions (math, not numpy): they sit inside the nested
quadrature integrands and are called hundreds of thousands of times per solve.
"""

from __future__ import annotations

import math

import cgs
from errors import DomainError
from pid import PID

_MP = cgs.proton_mass_c2


def pc_func(A: int, T: float) -> float:
    """Momentum times c [erg] of a nucleus of mass number A and T per nucleon."""
    if T < 0.0:
        raise DomainError(f"negative kinetic energy T={T}")
    return A * math.sqrt(T * (T + 2.0 * _MP))


def beta_func(T: float) -> float:
    """v/c at kinetic energy per nucleon T."""
    if T < 0.0:
        raise DomainError(f"negative kinetic energy T={T}")
    return math.sqrt(T * (T + 2.0 * _MP)) / (T + _MP)


def rigidity(pid: PID, T: float) -> float:
    """R = pc / Z, in energy units per unit charge."""
    return pc_func(pid.A, T) / pid.Z


def T_from_R(pid: PID, R: float) -> float:
    """Kinetic energy per nucleon of a nucleus with rigidity R."""
    if R < 0.0:
        raise DomainError(f"negative rigidity R={R}")
    return math.sqrt((R * pid.Z_over_A) ** 2 + _MP ** 2) - _MP


def dT_dR(pid: PID, R: float) -> float:
    """Jacobian dT/dR used to turn I(T) into I(R)."""
    if R < 0.0:
        raise DomainError(f"negative rigidity R={R}")
    Z_A_squared = pid.Z_over_A ** 2
    return R * Z_A_squared / math.sqrt(Z_A_squared * R ** 2 + _MP ** 2)


# ----------------------------- sanity main ----------------------------------
if __name__ == "__main__":
    from pid import C12, H1

    for p in (H1, C12):
        for T_GeV in (0.1, 1.0, 10.0, 1e3):
            T = T_GeV * cgs.GeV
            R = rigidity(p, T)
            assert abs(T_from_R(p, R) / T - 1.0) < 1e-9
    assert 0.0 < beta_func(cgs.GeV) < 1.0
    print("kinematics: sanity checks passed ✓")
