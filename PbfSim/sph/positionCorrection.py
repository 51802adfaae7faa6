# -- Position Corrector -- #

'''
PBF position corrections from the per-particle lambdas.

    dx_i = (1 / rho_0) * sum_{j in N(i)} (lambda_i + lambda_j) * nabla_W(x*_i - x*_j, h)

All corrections are computed from the same snapshot of predicted
positions and lambdas, then applied together (Jacobi).

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import numpy as np

from PbfSim.sph.kernels import SmoothingKernel
from PbfSim.sph.particles import ParticleSystem


def computePositionDeltas(
    particles: ParticleSystem,
    neighborPairs: tuple[np.ndarray, np.ndarray],
    kernel: SmoothingKernel,
    h: float,
    restDensity: float,
) -> None:
    '''
    Compute position corrections into particles.positionDeltas.

    Parameters:
    -----------
    particles : ParticleSystem
        Particle arena (positionDeltas overwritten)
    neighborPairs : tuple[np.ndarray, np.ndarray]
        Directed neighbor pairs (iIdx, jIdx)
    kernel : SmoothingKernel
        Gradient kernel
    h : float
        Kernel support radius
    restDensity : float
        Rest density rho_0
    '''
    deltas = np.zeros((particles.nParticles, 2))

    iIdx, jIdx = neighborPairs
    if len(iIdx) > 0:
        pred = particles.predictedPositions
        dr = pred[iIdx] - pred[jIdx]
        gradients = kernel.gradientBatch(dr, h)

        lambdaSum = particles.lambdas[iIdx] + particles.lambdas[jIdx]
        np.add.at(deltas, iIdx, lambdaSum[:, np.newaxis] * gradients)

    particles.positionDeltas[:] = deltas / restDensity


def applyPositionDeltas(particles: ParticleSystem) -> None:
    '''Move every predicted position by its correction.'''
    particles.predictedPositions += particles.positionDeltas
