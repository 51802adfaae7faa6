# -- Density Constraint and Lambda Solver -- #

'''
SPH density estimation and PBF Lagrange multipliers.

For every particle i with neighbors N(i) at predicted positions x*:

    rho_i    = sum_{j in N(i)} W(x*_i - x*_j, h)
    C_i      = rho_i / rho_0 - 1
    g_ij     = nabla_W(x*_i - x*_j, h) / rho_0
    S_i      = sum_j |g_ij|^2 + |sum_j g_ij|^2
    lambda_i = -C_i / (S_i + epsilon)

The second term of S_i is the gradient of C_i with respect to x_i
itself (k = i in the PBF derivation), not a double count. epsilon
is the constraint force mixing term keeping the denominator away
from zero for particles with few or no neighbors.

Both sweeps are Jacobi: each reads only the predicted positions
(and densities) as they stood when the sweep started, and assigns
the full output array at the end.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import numpy as np

from PbfSim.sph.kernels import SmoothingKernel
from PbfSim.sph.particles import ParticleSystem


######################################################################
# -- Density Evaluation -- #
######################################################################

def computeDensities(
    particles: ParticleSystem,
    neighborPairs: tuple[np.ndarray, np.ndarray],
    kernel: SmoothingKernel,
    h: float,
) -> None:
    '''
    Compute particle densities by kernel summation over neighbors.

    rho_i = sum_j W(x*_i - x*_j, h)

    No self-contribution is included; a particle without neighbors
    has zero density.

    Parameters:
    -----------
    particles : ParticleSystem
        Particle arena (densities overwritten)
    neighborPairs : tuple[np.ndarray, np.ndarray]
        Directed neighbor pairs (iIdx, jIdx)
    kernel : SmoothingKernel
        Density kernel
    h : float
        Kernel support radius
    '''
    densities = np.zeros(particles.nParticles)

    iIdx, jIdx = neighborPairs
    if len(iIdx) > 0:
        pred = particles.predictedPositions
        dr = pred[iIdx] - pred[jIdx]
        np.add.at(densities, iIdx, kernel.evaluateBatch(dr, h))

    particles.densities[:] = densities


######################################################################
# -- Lambda Solver -- #
######################################################################

def computeLambdas(
    particles: ParticleSystem,
    neighborPairs: tuple[np.ndarray, np.ndarray],
    kernel: SmoothingKernel,
    h: float,
    restDensity: float,
    epsilon: float,
) -> None:
    '''
    Compute the Lagrange multiplier lambda_i of every particle.

    Uses the densities from the preceding density sweep.

    Parameters:
    -----------
    particles : ParticleSystem
        Particle arena (lambdas overwritten)
    neighborPairs : tuple[np.ndarray, np.ndarray]
        Directed neighbor pairs (iIdx, jIdx)
    kernel : SmoothingKernel
        Gradient kernel
    h : float
        Kernel support radius
    restDensity : float
        Rest density rho_0
    epsilon : float
        Relaxation added to the denominator
    '''
    nParticles = particles.nParticles
    constraints = particles.densities / restDensity - 1.0

    gradientSumOfSquares = np.zeros(nParticles)
    gradientAccumulator = np.zeros((nParticles, 2))

    iIdx, jIdx = neighborPairs
    if len(iIdx) > 0:
        pred = particles.predictedPositions
        dr = pred[iIdx] - pred[jIdx]
        gradients = kernel.gradientBatch(dr, h) / restDensity  # (nPairs, 2)

        # Neighbor terms |dC_i/dx_j|^2
        np.add.at(gradientSumOfSquares, iIdx, np.sum(gradients * gradients, axis=1))
        np.add.at(gradientAccumulator, iIdx, gradients)

    # Self term |dC_i/dx_i|^2
    gradientSumOfSquares += np.sum(gradientAccumulator * gradientAccumulator, axis=1)

    particles.lambdas[:] = -constraints / (gradientSumOfSquares + epsilon)
