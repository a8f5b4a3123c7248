"""
interpolation.py
----------------------------------------------------------------------
Grids and interpolants shared by the source tables and the particle
intensities.

    LogAxis(min, max, size)          log-spaced grid, both ends included
    LogLogInterpolator(x, y)         linear in (ln x, ln y); zero outside
                                     [x_0, x_n]
    LogLinearInterpolator(x, y)      linear in y over ln x; zero below the
                                     grid, saturated (y_n) above it

Both interpolants wrap scipy.interpolate.interp1d on a log axis and are
called with a scalar, returning a float.
----------------------------------------------------------------------
"""

from __future__ import annotations

from typing import Sequence

import numpy as np
from scipy.interpolate import interp1d

from errors import DomainError


def LogAxis(x_min: float, x_max: float, size: int) -> np.ndarray:
    """Log-spaced grid of `size` points from x_min to x_max (inclusive)."""
    if not (0.0 < x_min < x_max):
        raise DomainError(f"LogAxis needs 0 < x_min < x_max, got {x_min}, {x_max}")
    if size < 2:
        raise DomainError(f"LogAxis needs at least 2 points, got {size}")
    return np.geomspace(x_min, x_max, size)


def check_grid(x: Sequence[float], name: str = "grid") -> None:
    """Raise DomainError unless x is non-empty, positive and strictly increasing."""
    arr = np.asarray(x, dtype=float)
    if arr.ndim != 1 or arr.size == 0:
        raise DomainError(f"{name} must be a non-empty 1D sequence")
    if not np.all(np.isfinite(arr)) or np.any(arr <= 0.0):
        raise DomainError(f"{name} must be finite and positive")
    if not np.all(np.diff(arr) > 0.0):
        raise DomainError(f"{name} must be strictly increasing")


class _LogAxisInterpolator:
    """Common part: a table on a positive, increasing x grid."""

    def __init__(self, x: Sequence[float], y: Sequence[float]):
        check_grid(x, "interpolation grid")
        self.x = np.asarray(x, dtype=float)
        self.y = np.asarray(y, dtype=float)
        if self.y.shape != self.x.shape:
            raise DomainError(f"interpolation table has {self.x.size} nodes but {self.y.size} values")
        self._f = None
        if self.x.size > 1:
            self._f = self._build(np.log(self.x))

    def _build(self, u: np.ndarray):
        raise NotImplementedError

    def _single(self, x: float) -> float:
        return float(self.y[0]) if x == self.x[0] else 0.0

    def __len__(self) -> int:
        return self.x.size


class LogLogInterpolator(_LogAxisInterpolator):
    """
    Log-log linear interpolant, zero outside [x_0, x_n].

    Tables holding zeros cannot be taken in log; those are interpolated
    linearly in y over ln x instead.
    """

    def _build(self, u):
        self._log_y = bool(np.all(self.y > 0.0))
        v = np.log(self.y) if self._log_y else self.y
        fill = -np.inf if self._log_y else 0.0
        return interp1d(u, v, kind="linear", bounds_error=False, fill_value=fill, assume_sorted=True)

    def __call__(self, x: float) -> float:
        if x <= 0.0:
            return 0.0
        if self._f is None:
            return self._single(x)
        v = float(self._f(np.log(x)))
        return float(np.exp(v)) if self._log_y else v


class LogLinearInterpolator(_LogAxisInterpolator):
    """Linear in y over ln x; zero below x_0, y_n above x_n."""

    def _build(self, u):
        return interp1d(u, self.y, kind="linear", bounds_error=False,
                        fill_value=(0.0, self.y[-1]), assume_sorted=True)

    def __call__(self, x: float) -> float:
        if x <= 0.0:
            return 0.0
        if self._f is None:
            return self._single(x) if x <= self.x[0] else float(self.y[0])
        return float(self._f(np.log(x)))
