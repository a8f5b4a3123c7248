from __future__ import annotations

import pytest

import cgs
from interpolation import LogAxis
from params import Params
from particle import Particle
from particles import Particles
from pid import H1


@pytest.fixture(scope="session")
def proton_grid():
    return LogAxis(10.0 * cgs.GeV, 1.0 * cgs.TeV, 3)


@pytest.fixture(scope="session")
def proton_pipeline(proton_grid) -> Particles:
    """H1 with unit efficiency, plus the automatic H1_ter, solved at default parameters."""
    particles = Particles([Particle(H1, 1.0)])
    assert particles.run(proton_grid, Params())
    return particles
