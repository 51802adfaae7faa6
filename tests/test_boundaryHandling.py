# -- Boundary Handling Tests -- #

'''
Tests for wall re-insertion with jitter and the lagged boundary test.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import numpy as np
import pytest

from PbfSim.sph.boundaryHandling import BoundaryHandler
from PbfSim.sph.particles import ParticleSystem


def _handler(lagged: bool = True, jitter: float = 0.001, seed: int = 0) -> BoundaryHandler:
    return BoundaryHandler(
        domainMin=np.array([0.0, 0.0]),
        domainMax=np.array([1.0, 1.0]),
        jitter=jitter,
        rng=np.random.default_rng(seed),
        lagged=lagged,
    )


def testOutOfBoundsCommittedPositionJittersPredicted():
    particles = ParticleSystem.fromPositions([
        [1.2, 0.5],
        [-0.1, 0.5],
        [0.5, -0.3],
        [0.5, 1.4],
        [1.1, 1.1],
    ])
    particles.predictedPositions[:] = particles.positions + 0.05

    _handler().constrainParticles(particles)

    newPos = particles.predictedPositions
    assert 0.999 <= newPos[0, 0] <= 1.0
    assert 0.0 <= newPos[1, 0] <= 0.001
    assert 0.0 <= newPos[2, 1] <= 0.001
    assert 0.999 <= newPos[3, 1] <= 1.0
    assert 0.999 <= newPos[4, 0] <= 1.0 and 0.999 <= newPos[4, 1] <= 1.0

    # Untouched axes keep their predicted values
    assert newPos[0, 1] == pytest.approx(0.55)
    assert newPos[2, 0] == pytest.approx(0.55)


def testLaggedCheckIgnoresPredictedOvershoot():
    '''Committed inside, predicted outside: the lagged test leaves it alone.'''
    particles = ParticleSystem.fromPositions([[0.99, 0.5]])
    particles.predictedPositions[:] = [[1.05, 0.5]]

    _handler(lagged=True).constrainParticles(particles)

    np.testing.assert_array_equal(particles.predictedPositions, [[1.05, 0.5]])


def testUnlaggedCheckUsesPredicted():
    particles = ParticleSystem.fromPositions([[0.99, 0.5]])
    particles.predictedPositions[:] = [[1.05, -0.2]]

    _handler(lagged=False).constrainParticles(particles)

    newPos = particles.predictedPositions
    assert 0.999 <= newPos[0, 0] <= 1.0
    assert 0.0 <= newPos[0, 1] <= 0.001


def testCommittedPositionsAreNotModified():
    particles = ParticleSystem.fromPositions([[1.3, -0.3]])
    _handler().constrainParticles(particles)

    np.testing.assert_array_equal(particles.positions, [[1.3, -0.3]])


def testZeroJitterClampsOntoWall():
    particles = ParticleSystem.fromPositions([[1.3, -0.3]])
    _handler(jitter=0.0).constrainParticles(particles)

    np.testing.assert_array_equal(particles.predictedPositions, [[1.0, 0.0]])


def testSeededJitterIsReproducible():
    results = []
    for _ in range(2):
        particles = ParticleSystem.fromPositions([[1.3, -0.3], [-2.0, 2.0]])
        _handler(seed=11).constrainParticles(particles)
        results.append(particles.predictedPositions.copy())

    np.testing.assert_array_equal(results[0], results[1])
