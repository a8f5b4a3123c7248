from __future__ import annotations

import numpy as np
import pytest

from errors import DomainError
from interpolation import LogAxis, LogLinearInterpolator, LogLogInterpolator, check_grid


def test_log_axis() -> None:
    axis = LogAxis(1.0, 1e4, 5)
    assert axis[0] == pytest.approx(1.0)
    assert axis[-1] == pytest.approx(1e4)
    assert np.allclose(np.diff(np.log(axis)), np.log(10.0))


@pytest.mark.parametrize("args", [(0.0, 1.0, 5), (2.0, 1.0, 5), (1.0, 2.0, 1)])
def test_log_axis_rejects_bad_input(args) -> None:
    with pytest.raises(DomainError):
        LogAxis(*args)


@pytest.mark.parametrize("grid", [[], [1.0, 1.0], [2.0, 1.0], [-1.0, 1.0], [1.0, np.inf]])
def test_check_grid_rejects(grid) -> None:
    with pytest.raises(DomainError):
        check_grid(grid)


def test_loglog_exact_at_nodes_and_zero_outside() -> None:
    x = [1.0, 10.0, 100.0, 1000.0]
    y = [3.0, 0.7, 0.011, 2e-5]
    f = LogLogInterpolator(x, y)
    for xi, yi in zip(x, y):
        assert f(xi) == pytest.approx(yi, rel=1e-12)
    assert f(0.5) == 0.0
    assert f(1001.0) == 0.0
    assert len(f) == 4


def test_loglog_is_exact_for_power_laws() -> None:
    x = [1.0, 10.0, 100.0]
    y = [v ** -2.7 for v in x]
    assert LogLogInterpolator(x, y)(31.6) == pytest.approx(31.6 ** -2.7, rel=1e-12)


def test_loglog_handles_zero_values() -> None:
    f = LogLogInterpolator([1.0, 10.0], [1.0, 0.0])
    assert f(10 ** 0.5) == pytest.approx(0.5)
    assert f(20.0) == 0.0


def test_loglinear_extrapolation() -> None:
    f = LogLinearInterpolator([1.0, 10.0, 100.0], [0.0, 2.0, 4.0])
    assert f(0.1) == 0.0
    assert f(1e3) == 4.0
    assert f(10 ** 1.5) == pytest.approx(3.0)


def test_single_node_tables() -> None:
    assert LogLogInterpolator([2.0], [5.0])(2.0) == 5.0
    assert LogLogInterpolator([2.0], [5.0])(3.0) == 0.0
    assert LogLinearInterpolator([2.0], [5.0])(1.0) == 0.0
    assert LogLinearInterpolator([2.0], [5.0])(3.0) == 5.0


def test_interpolator_validates_table() -> None:
    with pytest.raises(DomainError):
        LogLogInterpolator([1.0, 2.0], [1.0])
    with pytest.raises(DomainError):
        LogLinearInterpolator([2.0, 1.0], [1.0, 1.0])
