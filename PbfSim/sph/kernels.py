# -- PBF Smoothing Kernels -- #

'''
Smoothing kernel functions for Position-Based Fluids.

Implements the kernel pair of Mueller et al. (2003) in 2D:
- poly6 for density estimation
- spiky gradient for constraint gradients / position corrections

Both are evaluated from the separation vector r = p_i - p_j and a
fixed support radius h. The normalization constants are the 3D ones
of Macklin & Mueller (2013); rest density and epsilon are tuned
against them.

Precondition for poly6: |r| <= h. The neighbor search only ever
hands in pairs inside the support, so no clamping is applied here.

The spiky gradient divides by |r|, so a coincident pair is mapped to
the zero vector. Any non-finite result is treated as an invariant
violation: it is logged and zeroed, or raised in strict mode.

References:
-----------
Mueller, Charypar & Gross (2003) -- Particle-based fluid simulation
    for interactive applications
Macklin & Mueller (2013) -- Position Based Fluids

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import logging
import math
from typing import Protocol

import numpy as np

logger = logging.getLogger(__name__)


class NonFiniteGradientError(ArithmeticError):
    '''Raised in strict mode when the spiky gradient is not finite.'''


######################################################################
# -- Kernel Protocol -- #
######################################################################

class SmoothingKernel(Protocol):
    '''Protocol for PBF smoothing kernels (density + gradient pair).'''

    def evaluate(self, pi: np.ndarray, pj: np.ndarray, h: float) -> float:
        '''
        Evaluate the density kernel W(p_i - p_j, h).

        Parameters:
        -----------
        pi : np.ndarray
            Position of particle i, shape (2,)
        pj : np.ndarray
            Position of particle j, shape (2,)
        h : float
            Kernel support radius

        Returns:
        --------
        float : Kernel value
        '''
        ...

    def gradient(self, pi: np.ndarray, pj: np.ndarray, h: float) -> np.ndarray:
        '''
        Evaluate the gradient kernel nabla_W(p_i - p_j, h).

        Parameters:
        -----------
        pi : np.ndarray
            Position of particle i, shape (2,)
        pj : np.ndarray
            Position of particle j, shape (2,)
        h : float
            Kernel support radius

        Returns:
        --------
        np.ndarray : Gradient vector, shape (2,)
        '''
        ...

    def evaluateBatch(self, drVecs: np.ndarray, h: float) -> np.ndarray:
        '''Density kernel for an array of separation vectors, shape (M,).'''
        ...

    def gradientBatch(self, drVecs: np.ndarray, h: float) -> np.ndarray:
        '''Gradient kernel for an array of separation vectors, shape (M, 2).'''
        ...


######################################################################
# -- Poly6 / Spiky Kernel Pair -- #
######################################################################

class Poly6SpikyKernel:
    '''
    Poly6 density kernel with spiky gradient.

    W_poly6(r, h) = 315 / (64 * pi * h^9) * (h^2 - |r|^2)^3

    grad_W_spiky(r, h) = -45 / (pi * h^6) * (h^2 - |r|^2)^2 * r / |r|
                          for 0 < |r| <= h, zero otherwise

    The spiky gradient does not vanish as |r| -> 0, which keeps
    close particles pushing apart (poly6's gradient would not).

    Parameters:
    -----------
    strict : bool
        If True, a non-finite gradient raises NonFiniteGradientError
        instead of being logged and zeroed
    '''

    def __init__(self, strict: bool = False) -> None:
        self._strict = strict

    @property
    def strict(self) -> bool:
        '''Whether non-finite gradients raise.'''
        return self._strict

    @staticmethod
    def poly6Coefficient(h: float) -> float:
        '''Normalization 315 / (64 * pi * h^9).'''
        return 315.0 / (64.0 * math.pi * h ** 9)

    @staticmethod
    def spikyCoefficient(h: float) -> float:
        '''Gradient normalization -45 / (pi * h^6).'''
        return -45.0 / (math.pi * h ** 6)

    def evaluate(self, pi: np.ndarray, pj: np.ndarray, h: float) -> float:
        '''
        Evaluate poly6 W(p_i - p_j, h).

        Assumes |p_i - p_j| <= h (enforced by the neighbor search).

        Parameters:
        -----------
        pi : np.ndarray
            Position of particle i
        pj : np.ndarray
            Position of particle j
        h : float
            Kernel support radius

        Returns:
        --------
        float : Kernel value
        '''
        r = np.asarray(pi, dtype=float) - np.asarray(pj, dtype=float)
        rSq = float(np.dot(r, r))
        diff = h * h - rSq
        return self.poly6Coefficient(h) * diff * diff * diff

    def gradient(self, pi: np.ndarray, pj: np.ndarray, h: float) -> np.ndarray:
        '''
        Evaluate spiky gradient nabla_W(p_i - p_j, h).

        Returns the zero vector for coincident particles (|r| == 0)
        and for pairs outside the support (|r| > h).

        Parameters:
        -----------
        pi : np.ndarray
            Position of particle i
        pj : np.ndarray
            Position of particle j
        h : float
            Kernel support radius

        Returns:
        --------
        np.ndarray : Gradient vector pointing along p_i - p_j, shape (2,)

        Raises:
        -------
        NonFiniteGradientError : In strict mode, if the result is not finite
        '''
        r = np.asarray(pi, dtype=float) - np.asarray(pj, dtype=float)
        dist = math.sqrt(float(np.dot(r, r)))

        if dist > h or dist == 0.0:
            return np.zeros_like(r)

        diff = np.float64(h * h - dist * dist)
        with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
            scale = self.spikyCoefficient(h) * diff * diff / np.float64(dist)
            result = r * scale

        if not np.all(np.isfinite(result)):
            self._reportNonFinite(1)
            return np.zeros_like(r)

        return result

    ######################################################################
    # -- Vectorized (Batch) Operations -- #
    ######################################################################

    def evaluateBatch(self, drVecs: np.ndarray, h: float) -> np.ndarray:
        '''
        Evaluate poly6 for an array of separation vectors.

        Parameters:
        -----------
        drVecs : np.ndarray
            Separation vectors p_i - p_j, shape (M, 2)
        h : float
            Kernel support radius

        Returns:
        --------
        np.ndarray : Kernel values, shape (M,)
        '''
        rSq = np.sum(drVecs * drVecs, axis=1)
        diff = h * h - rSq
        return self.poly6Coefficient(h) * diff ** 3

    def gradientBatch(self, drVecs: np.ndarray, h: float) -> np.ndarray:
        '''
        Evaluate spiky gradients for an array of separation vectors.

        Parameters:
        -----------
        drVecs : np.ndarray
            Separation vectors p_i - p_j, shape (M, 2)
        h : float
            Kernel support radius

        Returns:
        --------
        np.ndarray : Gradient vectors, shape (M, 2)

        Raises:
        -------
        NonFiniteGradientError : In strict mode, if any row is not finite
        '''
        distances = np.linalg.norm(drVecs, axis=1)
        scale = np.zeros_like(distances)

        active = (distances > 0.0) & (distances <= h)
        dActive = distances[active]
        diff = h * h - dActive * dActive

        with np.errstate(over='ignore', invalid='ignore', divide='ignore'):
            scale[active] = self.spikyCoefficient(h) * diff * diff / dActive
            gradients = scale[:, np.newaxis] * drVecs

        badRows = ~np.all(np.isfinite(gradients), axis=1)
        nBad = int(np.count_nonzero(badRows))
        if nBad:
            self._reportNonFinite(nBad)
            gradients[badRows] = 0.0

        return gradients

    def _reportNonFinite(self, count: int) -> None:
        '''Raise (strict) or log a non-finite gradient evaluation.'''
        message = f'spiky gradient not finite for {count} pair(s)'
        if self._strict:
            raise NonFiniteGradientError(message)
        logger.warning('%s; zeroing', message)


######################################################################
# -- Functional Interface -- #
######################################################################

_defaultKernel = Poly6SpikyKernel()


def densityKernel(pi: np.ndarray, pj: np.ndarray, h: float) -> float:
    '''Poly6 density kernel W(p_i - p_j, h), assuming |p_i - p_j| <= h.'''
    return _defaultKernel.evaluate(pi, pj, h)


def gradientKernel(pi: np.ndarray, pj: np.ndarray, h: float) -> np.ndarray:
    '''Spiky gradient kernel nabla_W(p_i - p_j, h).'''
    return _defaultKernel.gradient(pi, pj, h)


######################################################################
# -- Kernel Factory -- #
######################################################################

def createKernel(kernelType: str, strict: bool = False) -> SmoothingKernel:
    '''
    Create a kernel instance by type name.

    Parameters:
    -----------
    kernelType : str
        Kernel type: 'poly6Spiky'
    strict : bool
        Raise on non-finite gradients instead of logging

    Returns:
    --------
    SmoothingKernel : Kernel instance

    Raises:
    -------
    ValueError : If kernel type is unknown
    '''
    if kernelType == 'poly6Spiky':
        return Poly6SpikyKernel(strict=strict)
    else:
        raise ValueError(f'Unknown kernel type: {kernelType}')
