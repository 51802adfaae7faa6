# -- Particle System Tests -- #

'''
Tests for the particle arena and its constructors.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import numpy as np
import pytest

from PbfSim.sph.particles import ParticleSystem


def testFromPositionsInitializesScratch():
    particles = ParticleSystem.fromPositions([[0.1, 0.2], [0.3, 0.4]])

    assert particles.nParticles == 2
    assert particles.dimensions == 2
    np.testing.assert_array_equal(particles.predictedPositions, particles.positions)
    assert not np.shares_memory(particles.predictedPositions, particles.positions)
    assert np.all(particles.velocities == 0.0)
    assert np.all(particles.densities == 0.0)
    assert np.all(particles.lambdas == 0.0)
    assert len(particles.neighbors) == 2


@pytest.mark.parametrize('positions', [
    np.zeros(4),
    np.zeros((3, 3)),
])
def testFromPositionsRejectsBadShape(positions):
    with pytest.raises(ValueError):
        ParticleSystem.fromPositions(positions)


def testFromPositionsRejectsMismatchedVelocities():
    with pytest.raises(ValueError):
        ParticleSystem.fromPositions(np.zeros((3, 2)), velocities=np.zeros((2, 2)))


def testParticleSnapshot():
    particles = ParticleSystem.fromPositions([[0.1, 0.2], [0.15, 0.2]])
    particles.neighbors = [np.array([1]), np.array([0])]
    particles.densities[:] = [12.0, 13.0]
    particles.lambdas[:] = [-0.5, 0.25]

    snapshot = particles.particle(1)
    assert snapshot.index == 1
    np.testing.assert_array_equal(snapshot.position, [0.15, 0.2])
    assert snapshot.neighbors == (0,)
    assert snapshot.density == 13.0
    assert snapshot.lambda_ == 0.25

    # Snapshots are copies
    snapshot.position[0] = 99.0
    assert particles.positions[1, 0] == 0.15


def testCreateRandomStaysInsideDomain():
    rng = np.random.default_rng(0)
    particles = ParticleSystem.createRandom(200, np.array([0.0, 0.0]), np.array([1.0, 2.0]), rng=rng)

    assert particles.nParticles == 200
    assert np.all(particles.positions >= 0.0)
    assert np.all(particles.positions[:, 0] <= 1.0)
    assert np.all(particles.positions[:, 1] <= 2.0)
    assert np.all(particles.velocities == 0.0)


def testCreateUniformGrid():
    particles = ParticleSystem.createUniform(np.array([0.0, 0.6]), np.array([0.3, 1.0]), 0.05)

    assert particles.nParticles == 6 * 8
    assert particles.positions[:, 0].min() == pytest.approx(0.025)
    assert particles.positions[:, 1].max() == pytest.approx(0.975)


def testDiagnostics():
    particles = ParticleSystem.fromPositions(
        [[0.0, 0.0], [1.0, 1.0]],
        velocities=[[3.0, 4.0], [0.0, 0.0]],
    )
    particles.densities[:] = [900.0, 1200.0]

    assert particles.maxSpeed() == pytest.approx(5.0)
    assert particles.kineticEnergy(2.0) == pytest.approx(25.0)
    assert particles.meanDensity() == pytest.approx(1050.0)
    assert particles.maxDensityError(1000.0) == pytest.approx(0.2)
