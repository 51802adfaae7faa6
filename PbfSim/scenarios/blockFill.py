# -- Block Fill (Dam Break) Scenario -- #

'''
A rectangular block of particles on a regular grid.

The block sits against the left wall and the floor, so releasing it
gives a small dam break. With y pointing down the floor is at
y = domainMax[1].

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from PbfSim import constants as const
from PbfSim.sph.protocols import SimulationConfig
from PbfSim.sph.particles import ParticleSystem


@dataclass
class BlockFillConfig:
    '''
    Configuration for a block fill scenario.

    Parameters:
    -----------
    blockWidth : float
        Block width (fraction of the unit domain)
    blockHeight : float
        Block height (fraction of the unit domain)
    particleSpacing : float
        Grid spacing between particles
    seed : int | None
        Seed for the boundary jitter
    solverIterations : int
        Jacobi iterations per step
    kernelRadius : float
        Kernel support radius h
    '''

    blockWidth: float = 0.3
    blockHeight: float = 0.4
    particleSpacing: float = 0.05
    seed: int | None = None
    solverIterations: int = const.solverIterations
    kernelRadius: float = const.kernelRadius

    @classmethod
    def small2D(cls) -> BlockFillConfig:
        '''48 particles at half the kernel radius spacing.'''
        return cls(blockWidth=0.3, blockHeight=0.4, particleSpacing=0.05)

    @classmethod
    def standard2D(cls) -> BlockFillConfig:
        '''~250 particles in a taller column.'''
        return cls(blockWidth=0.4, blockHeight=0.6, particleSpacing=0.03)


def createBlockFill(
    blockConfig: BlockFillConfig,
    simConfig: SimulationConfig | None = None,
) -> tuple[SimulationConfig, ParticleSystem]:
    '''
    Create a block fill simulation.

    Parameters:
    -----------
    blockConfig : BlockFillConfig
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
            solverIterations=blockConfig.solverIterations,
            kernelRadius=blockConfig.kernelRadius,
            seed=blockConfig.seed,
        )

    # Bottom-left corner of the domain (y down: floor at domainMax[1])
    blockMin = np.array([
        simConfig.domainMin[0],
        simConfig.domainMax[1] - blockConfig.blockHeight,
    ])
    blockMax = np.array([
        simConfig.domainMin[0] + blockConfig.blockWidth,
        simConfig.domainMax[1],
    ])

    particles = ParticleSystem.createUniform(blockMin, blockMax, blockConfig.particleSpacing)
    return simConfig, particles
