# -- Kernel Tests -- #

'''
Tests for the poly6 density kernel and spiky gradient kernel.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import logging
import math

import numpy as np
import pytest

from PbfSim.sph.kernels import (
    Poly6SpikyKernel,
    NonFiniteGradientError,
    densityKernel,
    gradientKernel,
    createKernel,
)


def testPoly6AtZeroDistance():
    '''W(0, h) = 315 / (64 * pi * h^3).'''
    h = 0.1
    p = np.array([0.5, 0.5])
    expected = 315.0 / (64.0 * math.pi * h ** 3)
    assert densityKernel(p, p, h) == pytest.approx(expected, rel=1e-12)


def testPoly6VanishesAtSupportRadius():
    '''W(h, h) = 0.'''
    h = 0.5
    assert densityKernel(np.array([0.0, 0.0]), np.array([0.5, 0.0]), h) == pytest.approx(0.0, abs=1e-12)


def testPoly6IsSymmetric():
    pi = np.array([0.41, 0.52])
    pj = np.array([0.45, 0.49])
    assert densityKernel(pi, pj, 0.1) == densityKernel(pj, pi, 0.1)


@pytest.mark.parametrize('h', [0.01, 0.1, 1.0, 5.0])
def testGradientZeroForIdenticalPositions(h):
    '''A particle compared with itself has no gradient, for any h.'''
    p = np.array([0.3, 0.7])
    grad = gradientKernel(p, p, h)
    assert grad.shape == (2,)
    assert np.all(grad == 0.0)


def testGradientZeroOutsideSupport():
    grad = gradientKernel(np.array([0.0, 0.0]), np.array([0.2, 0.0]), 0.1)
    assert np.all(grad == 0.0)


def testGradientMagnitudeAndDirection():
    '''The spiky gradient of p_i points toward p_j with magnitude 45/(pi h^6) (h^2 - d^2)^2.'''
    h = 0.1
    d = 0.05
    grad = gradientKernel(np.array([0.5, 0.5]), np.array([0.5, 0.5 + d]), h)

    expected = 45.0 / (math.pi * h ** 6) * (h * h - d * d) ** 2
    assert grad[0] == 0.0
    assert grad[1] > 0.0
    assert grad[1] == pytest.approx(expected, rel=1e-12)


def testGradientIsAntisymmetric():
    pi = np.array([0.41, 0.52])
    pj = np.array([0.45, 0.49])
    np.testing.assert_array_equal(gradientKernel(pi, pj, 0.1), -gradientKernel(pj, pi, 0.1))


def testBatchMatchesScalar(kernel):
    '''Vectorized evaluation agrees with the per-pair functions.'''
    rng = np.random.default_rng(3)
    pi = rng.random((25, 2)) * 0.1
    pj = rng.random((25, 2)) * 0.1
    h = 0.1

    inside = np.linalg.norm(pi - pj, axis=1) <= h
    values = kernel.evaluateBatch(pi - pj, h)
    gradients = kernel.gradientBatch(pi - pj, h)

    for k in range(25):
        if inside[k]:
            assert values[k] == pytest.approx(kernel.evaluate(pi[k], pj[k], h), rel=1e-10)
        np.testing.assert_allclose(gradients[k], kernel.gradient(pi[k], pj[k], h), rtol=1e-10, atol=1e-12)


def testBatchHandlesEmptyInput(kernel):
    empty = np.zeros((0, 2))
    assert kernel.evaluateBatch(empty, 0.1).shape == (0,)
    assert kernel.gradientBatch(empty, 0.1).shape == (0, 2)


def testNonFiniteGradientIsLoggedAndZeroed(kernel, caplog):
    with caplog.at_level(logging.WARNING, logger='PbfSim.sph.kernels'):
        grad = kernel.gradient(np.array([np.nan, 0.0]), np.array([0.0, 0.0]), 0.1)

    assert np.all(grad == 0.0)
    assert 'not finite' in caplog.text


def testNonFiniteBatchRowsAreZeroed(kernel, caplog):
    drVecs = np.array([[np.nan, 0.0], [0.0, 0.05]])
    with caplog.at_level(logging.WARNING, logger='PbfSim.sph.kernels'):
        gradients = kernel.gradientBatch(drVecs, 0.1)

    assert np.all(gradients[0] == 0.0)
    assert np.all(np.isfinite(gradients))
    assert gradients[1, 1] < 0.0
    assert '1 pair(s)' in caplog.text


def testStrictKernelRaisesOnNonFinite():
    kernel = Poly6SpikyKernel(strict=True)
    with pytest.raises(NonFiniteGradientError):
        kernel.gradient(np.array([np.nan, 0.0]), np.array([0.0, 0.0]), 0.1)
    with pytest.raises(NonFiniteGradientError):
        kernel.gradientBatch(np.array([[0.0, np.nan]]), 0.1)


def testCreateKernel():
    kernel = createKernel('poly6Spiky', strict=True)
    assert isinstance(kernel, Poly6SpikyKernel)
    assert kernel.strict

    with pytest.raises(ValueError):
        createKernel('cubicSpline')
