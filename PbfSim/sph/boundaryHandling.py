# -- PBF Boundary Conditions -- #

'''
Domain boundary enforcement for PBF particles.

The domain is an axis-aligned box (the unit square by default).
Instead of clamping a stray particle exactly onto the wall, its
predicted coordinate is re-inserted a small random distance inside
the wall. Particles clamped exactly onto the edge would all collapse
to the same coordinate and stick there.

The out-of-bounds test reads the *committed* positions (the state at
the start of the step) while it writes the *predicted* positions.
The test therefore lags the correction by one step. This is the
reference behavior and the default; set lagged=False to test the
predicted positions instead.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import numpy as np

from PbfSim.sph.particles import ParticleSystem


class BoundaryHandler:
    '''
    Keeps particles inside a rectangular domain.

    Parameters:
    -----------
    domainMin : np.ndarray
        Lower corner of the domain
    domainMax : np.ndarray
        Upper corner of the domain
    jitter : float
        Max inward offset when re-inserting a particle at a wall
    rng : np.random.Generator | None
        Random generator for the jitter (default: unseeded)
    lagged : bool
        Test committed positions (True) or predicted positions (False)
    '''

    def __init__(
        self,
        domainMin: np.ndarray,
        domainMax: np.ndarray,
        jitter: float = 0.001,
        rng: np.random.Generator | None = None,
        lagged: bool = True,
    ) -> None:
        self._domainMin = np.asarray(domainMin, dtype=float).copy()
        self._domainMax = np.asarray(domainMax, dtype=float).copy()
        self._jitter = jitter
        self._rng = rng if rng is not None else np.random.default_rng()
        self._lagged = lagged

    @property
    def lagged(self) -> bool:
        '''Whether the out-of-bounds test reads committed positions.'''
        return self._lagged

    def constrainParticles(self, particles: ParticleSystem) -> None:
        '''
        Re-insert out-of-bounds particles just inside the domain.

        Checks run in the order x > max, x < min, y < min, y > max.
        A particle found above the max is moved to max - jitter * U(0,1),
        below the min to min + jitter * U(0,1).

        Parameters:
        -----------
        particles : ParticleSystem
            Particle arena (predicted positions modified)
        '''
        newPos = particles.predictedPositions
        checked = particles.positions if self._lagged else newPos

        checks = (
            (0, 'max'),
            (0, 'min'),
            (1, 'min'),
            (1, 'max'),
        )

        for axis, side in checks:
            if side == 'max':
                outside = checked[:, axis] > self._domainMax[axis]
            else:
                outside = checked[:, axis] < self._domainMin[axis]

            nOutside = int(np.count_nonzero(outside))
            if nOutside == 0:
                continue

            offsets = self._jitter * self._rng.random(nOutside)
            if side == 'max':
                newPos[outside, axis] = self._domainMax[axis] - offsets
            else:
                newPos[outside, axis] = self._domainMin[axis] + offsets
