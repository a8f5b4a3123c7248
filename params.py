"""
params.py
----------------------------------------------------------------------
Propagation and injection parameters.

All values are CGS (see cgs.py). The defaults describe a standard
diffusion-reacceleration halo: a 4 kpc halo, a diffusion coefficient with a
smooth hardening break at ~300 GV, a weak Alfvenic term, and SNR injection
with a single momentum-space slope.
----------------------------------------------------------------------
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass

import cgs
from errors import ConfigurationError


@dataclass(frozen=True)
class Params:
    """
    Parameters
    ----------
    D_0 : float
        Diffusion normalization at R = 1 GV [cm^2 s^-1].
    delta : float
        Low-rigidity slope of D(R).
    ddelta : float
        Slope change at the break (D ~ R^(delta - ddelta) above R_b).
    smoothness : float
        Break width s; s -> 0 gives a sharp break.
    R_b : float
        Break rigidity [energy/charge].
    v_A : float
        Alfven velocity [cm s^-1]; also sets the advective plateau of X(T).
    H : float
        Halo half-height [cm].
    mu : float
        Surface density of the gas disc [g cm^-2].
    X_s : float
        Grammage traversed inside the sources [g cm^-2].
    id : int
        Spallation table selector: 0 default, 1 alternative.
    injection_slope : float
        Momentum-space slope alpha of the SNR injection, f(p) ~ p^-alpha.
    E_SN : float
        Kinetic energy released per supernova [erg].
    SN_rate : float
        Galactic supernova rate [s^-1].
    R_d : float
        Radius of the source disc [cm].
    T_norm_min : float
        Lower kinetic energy per nucleon of the injection energy budget [erg].
    """
    D_0: float = 2.5e28 * cgs.cm2 / cgs.sec
    delta: float = 0.5
    ddelta: float = 0.2
    smoothness: float = 0.1
    R_b: float = 312.0 * cgs.GV
    v_A: float = 5.0 * cgs.km / cgs.sec
    H: float = 4.0 * cgs.kpc
    mu: float = 2.3 * cgs.mgram / cgs.cm2
    X_s: float = 0.2 * cgs.gram / cgs.cm2
    id: int = 0
    injection_slope: float = 4.2
    E_SN: float = 1e51 * cgs.erg
    SN_rate: float = 1.0 / (30.0 * cgs.year)
    R_d: float = 10.0 * cgs.kpc
    T_norm_min: float = 0.1 * cgs.GeV

    def __post_init__(self):
        for name in ("D_0", "H", "mu", "R_b", "smoothness", "E_SN", "SN_rate", "R_d", "T_norm_min"):
            if not getattr(self, name) > 0.0:
                raise ConfigurationError(f"{name} must be positive, got {getattr(self, name)}")
        for name in ("v_A", "X_s"):
            if getattr(self, name) < 0.0:
                raise ConfigurationError(f"{name} must be non-negative, got {getattr(self, name)}")
        if self.id not in (0, 1):
            raise ConfigurationError(f"cross-section table id must be 0 or 1, got {self.id}")
        if self.injection_slope <= 4.0:
            # energy budget integral diverges at high energy otherwise
            raise ConfigurationError(f"injection_slope must exceed 4, got {self.injection_slope}")

    def replace(self, **changes) -> "Params":
        return dataclasses.replace(self, **changes)
