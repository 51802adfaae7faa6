# -- PBF Time Integration -- #

'''
Prediction and commit stages of the PBF time step.

The prediction is a symplectic (semi-implicit) Euler step applied
to the predicted positions only:

    v   <- v + g * dt       (kick)
    x*  <- x + v * dt       (drift, using the updated velocity)

The committed positions are left untouched until the constraint
solver has finished, then copied over from the predicted positions.

Velocities are not re-derived from the position change
((x* - x) / dt) at commit: they carry gravity only.

References:
-----------
Macklin & Mueller (2013) -- Position Based Fluids
Hairer et al. (2003) -- Geometric Numerical Integration

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

from typing import Protocol

import numpy as np

from PbfSim.sph.particles import ParticleSystem


######################################################################
# -- Predictor Protocol -- #
######################################################################

class PositionPredictor(Protocol):
    '''Protocol for the predict / commit stages of a PBF step.'''

    def predict(self, particles: ParticleSystem, dt: float) -> None:
        '''Advance velocities and write predicted positions.'''
        ...

    def commit(self, particles: ParticleSystem) -> None:
        '''Copy predicted positions into committed positions.'''
        ...


######################################################################
# -- Gravity Predictor -- #
######################################################################

class GravityPredictor:
    '''
    Symplectic Euler prediction under a constant body force.

    Parameters:
    -----------
    gravity : np.ndarray
        Gravity vector, shape (2,)
    '''

    def __init__(self, gravity: np.ndarray) -> None:
        self._gravity = np.asarray(gravity, dtype=float).copy()

    @property
    def gravity(self) -> np.ndarray:
        '''Gravity vector.'''
        return self._gravity

    def predict(self, particles: ParticleSystem, dt: float) -> None:
        '''
        Kick velocities and drift predicted positions.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle arena to advance
        dt : float
            Time step size
        '''
        # Kick
        particles.velocities += self._gravity * dt

        # Drift into the working positions
        particles.predictedPositions[:] = particles.positions + particles.velocities * dt

    def commit(self, particles: ParticleSystem) -> None:
        '''
        Commit predicted positions.

        Copies values (not references), so the committed and
        predicted arrays never alias.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle arena to commit
        '''
        particles.positions[:] = particles.predictedPositions
