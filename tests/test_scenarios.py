# -- Scenario Tests -- #

'''
Tests for the random fill and block fill scenario builders.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import numpy as np

from PbfSim.sph.protocols import SimulationConfig
from PbfSim.scenarios.randomFill import RandomFillConfig, createRandomFill
from PbfSim.scenarios.blockFill import BlockFillConfig, createBlockFill


def testRandomFillReferenceSetup():
    simConfig, particles = createRandomFill(RandomFillConfig.small2D())

    assert particles.nParticles == 50
    assert np.all(particles.velocities == 0.0)
    assert np.all(particles.positions >= 0.0) and np.all(particles.positions < 1.0)
    assert simConfig.solverIterations == 10


def testRandomFillIsSeeded():
    _, first = createRandomFill(RandomFillConfig(nParticles=20, seed=9))
    _, second = createRandomFill(RandomFillConfig(nParticles=20, seed=9))

    np.testing.assert_array_equal(first.positions, second.positions)


def testRandomFillUsesGivenDomain():
    base = SimulationConfig(domainMin=[1.0, 1.0], domainMax=[3.0, 2.0])
    simConfig, particles = createRandomFill(RandomFillConfig(nParticles=100, seed=1), base)

    assert simConfig is base
    assert np.all(particles.positions[:, 0] >= 1.0) and np.all(particles.positions[:, 0] < 3.0)
    assert np.all(particles.positions[:, 1] >= 1.0) and np.all(particles.positions[:, 1] < 2.0)


def testStandardPresetIsDenser():
    assert RandomFillConfig.standard2D().nParticles > RandomFillConfig.small2D().nParticles


def testBlockFillSitsOnFloorAgainstLeftWall():
    simConfig, particles = createBlockFill(BlockFillConfig.small2D())

    assert particles.nParticles == 48
    assert particles.positions[:, 0].min() > simConfig.domainMin[0]
    assert particles.positions[:, 0].max() < 0.3
    assert particles.positions[:, 1].min() > 0.6
    assert particles.positions[:, 1].max() < simConfig.domainMax[1]
