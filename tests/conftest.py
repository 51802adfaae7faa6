# -- Shared Test Fixtures -- #

'''
Fixtures shared by the PbfSim test suite.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import numpy as np
import pytest

from PbfSim.sph.protocols import SimulationConfig
from PbfSim.sph.kernels import Poly6SpikyKernel
from PbfSim.sph.particles import ParticleSystem


@pytest.fixture
def config() -> SimulationConfig:
    '''Reference constants with a fixed seed.'''
    return SimulationConfig(seed=0)


@pytest.fixture
def weightlessConfig() -> SimulationConfig:
    '''Reference constants without gravity.'''
    return SimulationConfig(gravity=np.array([0.0, 0.0]), seed=0)


@pytest.fixture
def kernel() -> Poly6SpikyKernel:
    '''Lenient poly6/spiky kernel.'''
    return Poly6SpikyKernel()


@pytest.fixture
def makePair():
    '''Factory for two particles stacked vertically, d apart, at rest.'''
    def _makePair(d: float, center: tuple[float, float] = (0.5, 0.5)) -> ParticleSystem:
        x, y = center
        return ParticleSystem.fromPositions(np.array([[x, y], [x, y + d]]))
    return _makePair


@pytest.fixture
def randomParticles() -> ParticleSystem:
    '''40 particles scattered well inside the domain.'''
    rng = np.random.default_rng(1234)
    positions = 0.3 + 0.4 * rng.random((40, 2))
    return ParticleSystem.fromPositions(positions)
