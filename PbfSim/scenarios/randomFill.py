# -- Random Fill Scenario -- #

'''
Particles scattered uniformly at random over the whole domain.

The reference setup: 50 particles at rest, dropped under gravity
into the unit square. Overlapping particles are pushed apart by the
density constraint while the cloud falls to the floor (y = 1, since
y points down).

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from PbfSim import constants as const
from PbfSim.sph.protocols import SimulationConfig
from PbfSim.sph.particles import ParticleSystem


######################################################################
# -- Random Fill Configuration -- #
######################################################################

@dataclass
class RandomFillConfig:
    '''
    Configuration for a random fill scenario.

    Parameters:
    -----------
    nParticles : int
        Number of particles
    seed : int | None
        Seed for particle placement and boundary jitter
    solverIterations : int
        Jacobi iterations per step
    kernelRadius : float
        Kernel support radius h
    timeStep : float
        Fixed time step [s]
    '''

    nParticles: int = const.defaultParticleCount
    seed: int | None = None
    solverIterations: int = const.solverIterations
    kernelRadius: float = const.kernelRadius
    timeStep: float = const.timeStep

    @classmethod
    def small2D(cls) -> RandomFillConfig:
        '''Reference setup: 50 particles, runs instantly.'''
        return cls(nParticles=50)

    @classmethod
    def standard2D(cls) -> RandomFillConfig:
        '''
        Denser cloud.

        ~300 particles, enough for a visible pool on the floor.
        '''
        return cls(nParticles=300)


######################################################################
# -- Scenario Creation -- #
######################################################################

def createRandomFill(
    fillConfig: RandomFillConfig,
    simConfig: SimulationConfig | None = None,
) -> tuple[SimulationConfig, ParticleSystem]:
    '''
    Create a random fill simulation.

    Parameters:
    -----------
    fillConfig : RandomFillConfig
        Scenario configuration
    simConfig : SimulationConfig | None
        Base simulation constants; when given, its domain and values
        are used as is and only the particles are generated

    Returns:
    --------
    tuple[SimulationConfig, ParticleSystem] : (config, particles)
    '''
    if simConfig is None:
        simConfig = SimulationConfig(
            timeStep=fillConfig.timeStep,
            solverIterations=fillConfig.solverIterations,
            kernelRadius=fillConfig.kernelRadius,
            seed=fillConfig.seed,
        )

    rng = np.random.default_rng(fillConfig.seed)
    particles = ParticleSystem.createRandom(
        fillConfig.nParticles,
        simConfig.domainMin,
        simConfig.domainMax,
        rng=rng,
    )

    return simConfig, particles
