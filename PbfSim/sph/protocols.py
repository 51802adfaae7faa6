# -- PBF Simulation Protocols -- #

'''
Configuration, state dataclasses and solver protocol for PBF.

Defines the simulation constants (SimulationConfig), the per-step
diagnostics snapshot (SimulationState) and the solver protocol the
runner drives.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Protocol, TYPE_CHECKING

import numpy as np

from PbfSim import constants as const

if TYPE_CHECKING:
    from PbfSim.sph.particles import ParticleSystem


######################################################################
# -- Simulation Configuration -- #
######################################################################

@dataclass
class SimulationConfig:
    '''
    Configuration for a PBF simulation.

    Defaults reproduce the reference setup: a unit-square domain,
    60 Hz frames, 10 solver iterations and y pointing down.

    Parameters:
    -----------
    timeStep : float
        Fixed time step dt [s]
    solverIterations : int
        Jacobi iterations per step (0 skips the solve phase)
    restDensity : float
        Rest density rho_0
    kernelRadius : float
        Kernel support radius h
    epsilon : float
        Relaxation added to the lambda denominator
    gravity : np.ndarray
        Gravity vector, shape (2,)
    domainMin : np.ndarray
        Lower domain corner, shape (2,)
    domainMax : np.ndarray
        Upper domain corner, shape (2,)
    boundaryJitter : float
        Max inward offset when re-inserting a particle at a wall
    particleMass : float
        Particle mass (diagnostics only)
    kernelType : str
        Kernel type: 'poly6Spiky'
    laggedBoundaryCheck : bool
        Test committed (True) or predicted (False) positions at the walls
    strictKernel : bool
        Raise on non-finite kernel gradients instead of logging
    seed : int | None
        Seed for the boundary jitter and scenario generators
    '''

    timeStep: float = const.timeStep
    solverIterations: int = const.solverIterations
    restDensity: float = const.restDensity
    kernelRadius: float = const.kernelRadius
    epsilon: float = const.epsilon
    gravity: np.ndarray = field(default_factory=lambda: np.array(const.gravity))
    domainMin: np.ndarray = field(default_factory=lambda: np.array(const.domainMin))
    domainMax: np.ndarray = field(default_factory=lambda: np.array(const.domainMax))
    boundaryJitter: float = const.boundaryJitter
    particleMass: float = const.particleMass
    kernelType: str = const.defaultKernelType
    laggedBoundaryCheck: bool = True
    strictKernel: bool = False
    seed: int | None = None

    def __post_init__(self) -> None:
        self.gravity = np.asarray(self.gravity, dtype=float)
        self.domainMin = np.asarray(self.domainMin, dtype=float)
        self.domainMax = np.asarray(self.domainMax, dtype=float)

        for name in ('gravity', 'domainMin', 'domainMax'):
            if getattr(self, name).shape != (2,):
                raise ValueError(f'{name} must be a 2D vector, got {getattr(self, name)!r}')

        if self.timeStep <= 0.0:
            raise ValueError(f'timeStep must be positive, got {self.timeStep}')
        # JSON numbers may arrive as floats (10.0); accept only whole counts
        if isinstance(self.solverIterations, float) and self.solverIterations.is_integer():
            self.solverIterations = int(self.solverIterations)
        if isinstance(self.solverIterations, bool) or not isinstance(self.solverIterations, (int, np.integer)):
            raise ValueError(f'solverIterations must be an integer, got {self.solverIterations!r}')
        self.solverIterations = int(self.solverIterations)
        if self.solverIterations < 0:
            raise ValueError(f'solverIterations must be >= 0, got {self.solverIterations}')
        if self.restDensity <= 0.0:
            raise ValueError(f'restDensity must be positive, got {self.restDensity}')
        if self.kernelRadius <= 0.0:
            raise ValueError(f'kernelRadius must be positive, got {self.kernelRadius}')
        if self.epsilon < 0.0:
            raise ValueError(f'epsilon must be >= 0, got {self.epsilon}')
        if self.boundaryJitter < 0.0:
            raise ValueError(f'boundaryJitter must be >= 0, got {self.boundaryJitter}')
        if np.any(self.domainMax <= self.domainMin):
            raise ValueError(
                f'domainMax {self.domainMax.tolist()} must exceed domainMin {self.domainMin.tolist()}'
            )

    @property
    def domainSize(self) -> np.ndarray:
        '''Domain extent along each axis.'''
        return self.domainMax - self.domainMin

    @classmethod
    def fromJson(cls, configPath: str) -> SimulationConfig:
        '''
        Load configuration from a JSON file.

        Reads the 'simulation', 'pbf', 'fluid' and 'domain' sections;
        missing keys fall back to the defaults.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file

        Returns:
        --------
        SimulationConfig : Loaded configuration
        '''
        with open(configPath, 'r') as f:
            data = json.load(f)

        return cls.fromDict(data)

    @classmethod
    def fromDict(cls, data: dict) -> SimulationConfig:
        '''
        Build a configuration from parsed JSON sections.

        Parameters:
        -----------
        data : dict
            Parsed configuration with optional 'simulation', 'pbf',
            'fluid' and 'domain' sections

        Returns:
        --------
        SimulationConfig : Configuration
        '''
        simSection = data.get('simulation', {})
        pbfSection = data.get('pbf', {})
        fluidSection = data.get('fluid', {})
        domainSection = data.get('domain', {})

        return cls(
            timeStep=simSection.get('timeStep', const.timeStep),
            seed=simSection.get('seed', None),
            solverIterations=pbfSection.get('solverIterations', const.solverIterations),
            kernelRadius=pbfSection.get('kernelRadius', const.kernelRadius),
            epsilon=pbfSection.get('epsilon', const.epsilon),
            kernelType=pbfSection.get('kernelType', const.defaultKernelType),
            strictKernel=pbfSection.get('strictKernel', False),
            restDensity=fluidSection.get('restDensity', const.restDensity),
            particleMass=fluidSection.get('particleMass', const.particleMass),
            gravity=np.array(fluidSection.get('gravity', const.gravity)),
            domainMin=np.array(domainSection.get('min', const.domainMin)),
            domainMax=np.array(domainSection.get('max', const.domainMax)),
            boundaryJitter=domainSection.get('boundaryJitter', const.boundaryJitter),
            laggedBoundaryCheck=domainSection.get('laggedBoundaryCheck', True),
        )

    def toDict(self) -> dict:
        '''JSON-serializable form, matching the fromDict layout.'''
        return {
            'simulation': {'timeStep': self.timeStep, 'seed': self.seed},
            'pbf': {
                'solverIterations': self.solverIterations,
                'kernelRadius': self.kernelRadius,
                'epsilon': self.epsilon,
                'kernelType': self.kernelType,
                'strictKernel': self.strictKernel,
            },
            'fluid': {
                'restDensity': self.restDensity,
                'particleMass': self.particleMass,
                'gravity': self.gravity.tolist(),
            },
            'domain': {
                'min': self.domainMin.tolist(),
                'max': self.domainMax.tolist(),
                'boundaryJitter': self.boundaryJitter,
                'laggedBoundaryCheck': self.laggedBoundaryCheck,
            },
        }


######################################################################
# -- Simulation State -- #
######################################################################

@dataclass
class SimulationState:
    '''
    Diagnostics snapshot after a simulation step.

    Parameters:
    -----------
    time : float
        Simulation time [s]
    step : int
        Number of completed steps
    dt : float
        Size of the last step [s]
    kineticEnergy : float
        Total kinetic energy
    maxVelocity : float
        Maximum particle speed
    meanDensity : float
        Mean SPH density from the last solver iteration
    maxDensityError : float
        Maximum |rho - rho_0| / rho_0 from the last solver iteration
    meanNeighbors : float
        Mean neighbor count
    '''

    time: float
    step: int
    dt: float
    kineticEnergy: float
    maxVelocity: float
    meanDensity: float
    maxDensityError: float
    meanNeighbors: float


######################################################################
# -- Solver Protocol -- #
######################################################################

class FluidSolver(Protocol):
    '''Protocol for particle fluid solvers driven once per frame.'''

    def step(self, particles: ParticleSystem, dt: float | None = None) -> SimulationState:
        '''Advance the particles by one time step in place.'''
        ...

    @property
    def time(self) -> float:
        '''Accumulated simulation time [s].'''
        ...
