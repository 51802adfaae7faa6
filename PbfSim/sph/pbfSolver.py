# -- Position-Based Fluids Solver -- #

'''
PBF solver for incompressible free-surface flows.

Instead of computing pressure forces, PBF projects the predicted
particle positions onto the density constraint C_i = rho_i/rho_0 - 1 = 0
with a fixed number of Jacobi iterations per step.

All inner loops are vectorized with NumPy over the directed neighbor
pair arrays. Each sub-phase reads the arrays left by the previous
sub-phase and overwrites its own output in one assignment, so every
particle sees the same snapshot (Jacobi, never Gauss-Seidel).

Algorithm per time step:
    1. Predict: v += g * dt, x* = x + v * dt
    2. Find neighbors at x* (once; held fixed for all iterations)
    3. Repeat solverIterations times:
        a. Densities rho_i
        b. Lambdas lambda_i
        c. Position corrections dx_i
        d. Apply x* += dx
        e. Boundary re-insertion
    4. Commit: x = x*

There is no convergence test: the iteration count is fixed.

References:
-----------
Macklin & Mueller (2013) -- Position Based Fluids
Mueller et al. (2003) -- Particle-based fluid simulation for
    interactive applications

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import logging

import numpy as np

from PbfSim.sph.protocols import SimulationConfig, SimulationState
from PbfSim.sph.kernels import SmoothingKernel, createKernel
from PbfSim.sph.particles import ParticleSystem
from PbfSim.sph.neighborSearch import NeighborSearch, BruteForceNeighborSearch, splitPairs
from PbfSim.sph.boundaryHandling import BoundaryHandler
from PbfSim.sph.timeIntegration import PositionPredictor, GravityPredictor
from PbfSim.sph.densityConstraint import computeDensities, computeLambdas
from PbfSim.sph.positionCorrection import computePositionDeltas, applyPositionDeltas

logger = logging.getLogger(__name__)


class PbfSolver:
    '''
    Position-Based Fluids solver.

    The particle arena is owned by the caller and passed into every
    step; the solver only keeps the constants, its collaborators and
    the step/time counters.

    Parameters:
    -----------
    config : SimulationConfig
        Simulation constants
    kernel : SmoothingKernel | None
        Kernel pair (defaults to config.kernelType)
    boundaryHandler : BoundaryHandler | None
        Wall handling (defaults to the config domain)
    neighborSearch : NeighborSearch | None
        Neighbor search (defaults to brute force all-pairs)
    predictor : PositionPredictor | None
        Predict/commit stages (defaults to gravity only)
    '''

    def __init__(
        self,
        config: SimulationConfig,
        kernel: SmoothingKernel | None = None,
        boundaryHandler: BoundaryHandler | None = None,
        neighborSearch: NeighborSearch | None = None,
        predictor: PositionPredictor | None = None,
    ) -> None:
        self._config = config
        self._kernel = kernel or createKernel(config.kernelType, strict=config.strictKernel)
        self._boundaryHandler = boundaryHandler or BoundaryHandler(
            domainMin=config.domainMin,
            domainMax=config.domainMax,
            jitter=config.boundaryJitter,
            rng=np.random.default_rng(config.seed),
            lagged=config.laggedBoundaryCheck,
        )
        self._neighborSearch = neighborSearch or BruteForceNeighborSearch()
        self._predictor = predictor or GravityPredictor(config.gravity)

        self._neighborPairs: tuple[np.ndarray, np.ndarray] = (
            np.array([], dtype=np.intp),
            np.array([], dtype=np.intp),
        )
        self._time: float = 0.0
        self._step: int = 0
        self._dt: float = config.timeStep

    ######################################################################
    # -- Main Time Step -- #
    ######################################################################

    def step(self, particles: ParticleSystem, dt: float | None = None) -> SimulationState:
        '''
        Advance the particles by one PBF time step, in place.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle arena owned by the caller
        dt : float | None
            Time step size (defaults to config.timeStep)

        Returns:
        --------
        SimulationState : Diagnostics after the step

        Raises:
        -------
        ValueError : If dt is not positive
        '''
        dt = self._config.timeStep if dt is None else dt
        if dt <= 0.0:
            raise ValueError(f'dt must be positive, got {dt}')

        # 1. Predict
        self.predictPositions(particles, dt)

        # 2. Neighbors (fixed for the whole step)
        self.findNeighbors(particles)

        # 3. Constraint projection
        for _ in range(self._config.solverIterations):
            self.solveIteration(particles)

        # 4. Commit
        self._predictor.commit(particles)

        self._dt = dt
        self._time += dt
        self._step += 1

        state = self.currentState(particles)
        logger.debug(
            'step %d: t=%.4f maxDensityError=%.4f meanNeighbors=%.2f',
            state.step, state.time, state.maxDensityError, state.meanNeighbors,
        )
        return state

    ######################################################################
    # -- Step Phases -- #
    ######################################################################

    def predictPositions(self, particles: ParticleSystem, dt: float) -> None:
        '''Apply gravity to velocities and write predicted positions.'''
        self._predictor.predict(particles, dt)

    def findNeighbors(self, particles: ParticleSystem) -> None:
        '''
        Rebuild neighbor lists from the predicted positions.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle arena (neighbors overwritten)
        '''
        self._neighborSearch.build(particles.predictedPositions)
        self._neighborPairs = self._neighborSearch.queryPairs(self._config.kernelRadius)
        particles.neighbors = splitPairs(*self._neighborPairs, particles.nParticles)

    def solveIteration(self, particles: ParticleSystem) -> None:
        '''
        One Jacobi iteration of the density constraint solver.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle arena with neighbors already found
        '''
        cfg = self._config
        h = cfg.kernelRadius

        computeDensities(particles, self._neighborPairs, self._kernel, h)
        computeLambdas(
            particles, self._neighborPairs, self._kernel, h,
            cfg.restDensity, cfg.epsilon,
        )
        computePositionDeltas(particles, self._neighborPairs, self._kernel, h, cfg.restDensity)
        applyPositionDeltas(particles)
        self._boundaryHandler.constrainParticles(particles)

    ######################################################################
    # -- Properties -- #
    ######################################################################

    def currentState(self, particles: ParticleSystem) -> SimulationState:
        '''
        Diagnostics snapshot for the given particles.

        Parameters:
        -----------
        particles : ParticleSystem
            Particle arena

        Returns:
        --------
        SimulationState : Current diagnostics
        '''
        nPairs = len(self._neighborPairs[0])
        meanNeighbors = nPairs / particles.nParticles if particles.nParticles else 0.0

        return SimulationState(
            time=self._time,
            step=self._step,
            dt=self._dt,
            kineticEnergy=particles.kineticEnergy(self._config.particleMass),
            maxVelocity=particles.maxSpeed(),
            meanDensity=particles.meanDensity(),
            maxDensityError=particles.maxDensityError(self._config.restDensity),
            meanNeighbors=meanNeighbors,
        )

    @property
    def config(self) -> SimulationConfig:
        '''Simulation constants.'''
        return self._config

    @property
    def kernel(self) -> SmoothingKernel:
        '''Kernel pair in use.'''
        return self._kernel

    @property
    def neighborPairs(self) -> tuple[np.ndarray, np.ndarray]:
        '''Directed neighbor pairs from the last neighbor phase.'''
        return self._neighborPairs

    @property
    def time(self) -> float:
        '''Accumulated simulation time [s].'''
        return self._time

    @property
    def stepCount(self) -> int:
        '''Number of completed steps.'''
        return self._step
