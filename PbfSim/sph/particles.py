# -- PBF Particle System -- #

'''
Dataclass representing the PBF particle arena.

Stores committed positions, velocities, predicted positions, position
corrections, densities and lambdas as contiguous NumPy arrays indexed
by particle id. Neighbor relations are stored as per-particle arrays
of indices into the same arena, recomputed wholesale every step.

The arena is fixed-size: particles are created once by a scenario and
never added or removed while a simulation runs.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

from dataclasses import dataclass, field

import numpy as np


@dataclass(frozen=True)
class Particle:
    '''
    Read-only snapshot of a single particle.

    Parameters:
    -----------
    index : int
        Particle index in the arena
    position : np.ndarray
        Committed position, shape (2,)
    velocity : np.ndarray
        Velocity, shape (2,)
    predictedPosition : np.ndarray
        Working position of the current step, shape (2,)
    positionDelta : np.ndarray
        Last correction applied to the predicted position, shape (2,)
    neighbors : tuple[int, ...]
        Neighbor indices (ascending)
    density : float
        Last computed SPH density
    lambda_ : float
        Last computed Lagrange multiplier
    '''

    index: int
    position: np.ndarray
    velocity: np.ndarray
    predictedPosition: np.ndarray
    positionDelta: np.ndarray
    neighbors: tuple[int, ...]
    density: float
    lambda_: float


@dataclass
class ParticleSystem:
    '''
    PBF particle arena.

    Vector quantities have shape (nParticles, 2), scalar quantities
    shape (nParticles,).

    Parameters:
    -----------
    positions : np.ndarray
        Committed positions, shape (N, 2)
    velocities : np.ndarray
        Velocities, shape (N, 2)
    predictedPositions : np.ndarray
        Predicted (working) positions, shape (N, 2)
    positionDeltas : np.ndarray
        Per-iteration position corrections, shape (N, 2)
    densities : np.ndarray
        SPH densities, shape (N,)
    lambdas : np.ndarray
        Lagrange multipliers, shape (N,)
    neighbors : list[np.ndarray]
        Per-particle neighbor index arrays
    '''

    positions: np.ndarray
    velocities: np.ndarray
    predictedPositions: np.ndarray
    positionDeltas: np.ndarray
    densities: np.ndarray
    lambdas: np.ndarray
    neighbors: list[np.ndarray] = field(default_factory=list)

    @property
    def nParticles(self) -> int:
        '''Number of particles in the arena.'''
        return self.positions.shape[0]

    @property
    def dimensions(self) -> int:
        '''Number of spatial dimensions (always 2).'''
        return self.positions.shape[1]

    def particle(self, index: int) -> Particle:
        '''
        Snapshot of one particle's state.

        Parameters:
        -----------
        index : int
            Particle index

        Returns:
        --------
        Particle : Copy of the particle's attributes
        '''
        neighbors = self.neighbors[index] if index < len(self.neighbors) else np.array([], dtype=np.intp)
        return Particle(
            index=index,
            position=self.positions[index].copy(),
            velocity=self.velocities[index].copy(),
            predictedPosition=self.predictedPositions[index].copy(),
            positionDelta=self.positionDeltas[index].copy(),
            neighbors=tuple(int(j) for j in neighbors),
            density=float(self.densities[index]),
            lambda_=float(self.lambdas[index]),
        )

    ######################################################################
    # -- Diagnostics -- #
    ######################################################################

    def maxSpeed(self) -> float:
        '''
        Maximum velocity magnitude.

        Returns:
        --------
        float : Maximum speed
        '''
        if self.nParticles == 0:
            return 0.0
        return float(np.max(np.linalg.norm(self.velocities, axis=1)))

    def kineticEnergy(self, particleMass: float = 1.0) -> float:
        '''
        Total kinetic energy, KE = (1/2) * m * sum_i |v_i|^2.

        Parameters:
        -----------
        particleMass : float
            Mass per particle

        Returns:
        --------
        float : Kinetic energy
        '''
        speedsSq = np.sum(self.velocities * self.velocities, axis=1)
        return float(0.5 * particleMass * np.sum(speedsSq))

    def meanDensity(self) -> float:
        '''Mean SPH density over all particles.'''
        if self.nParticles == 0:
            return 0.0
        return float(np.mean(self.densities))

    def maxDensityError(self, restDensity: float) -> float:
        '''
        Maximum relative density error.

        Returns max |rho_i - rho_0| / rho_0, i.e. the largest
        constraint violation |C_i|.

        Parameters:
        -----------
        restDensity : float
            Rest density rho_0

        Returns:
        --------
        float : Maximum relative density error (dimensionless)
        '''
        if self.nParticles == 0:
            return 0.0
        errors = np.abs(self.densities - restDensity) / restDensity
        return float(np.max(errors))

    ######################################################################
    # -- Construction -- #
    ######################################################################

    @classmethod
    def fromPositions(
        cls,
        positions: np.ndarray,
        velocities: np.ndarray | None = None,
    ) -> ParticleSystem:
        '''
        Create a particle arena from explicit positions.

        Scratch fields start at zero and predicted positions start at
        the committed positions.

        Parameters:
        -----------
        positions : np.ndarray
            Initial positions, shape (N, 2)
        velocities : np.ndarray | None
            Initial velocities, shape (N, 2) (default: zero)

        Returns:
        --------
        ParticleSystem : New particle arena

        Raises:
        -------
        ValueError : If positions or velocities are not shaped (N, 2)
        '''
        positions = np.array(positions, dtype=float)
        if positions.ndim != 2 or positions.shape[1] != 2:
            raise ValueError(f'positions must have shape (N, 2), got {positions.shape}')

        nParticles = positions.shape[0]
        if velocities is None:
            velocities = np.zeros((nParticles, 2))
        else:
            velocities = np.array(velocities, dtype=float)
            if velocities.shape != positions.shape:
                raise ValueError(
                    f'velocities must have shape {positions.shape}, got {velocities.shape}'
                )

        return cls(
            positions=positions,
            velocities=velocities,
            predictedPositions=positions.copy(),
            positionDeltas=np.zeros((nParticles, 2)),
            densities=np.zeros(nParticles),
            lambdas=np.zeros(nParticles),
            neighbors=[np.array([], dtype=np.intp) for _ in range(nParticles)],
        )

    @classmethod
    def createRandom(
        cls,
        nParticles: int,
        domainMin: np.ndarray,
        domainMax: np.ndarray,
        rng: np.random.Generator | None = None,
    ) -> ParticleSystem:
        '''
        Scatter particles uniformly at random inside a rectangle.

        All particles start at rest.

        Parameters:
        -----------
        nParticles : int
            Number of particles
        domainMin : np.ndarray
            Lower corner of the domain
        domainMax : np.ndarray
            Upper corner of the domain
        rng : np.random.Generator | None
            Random generator (default: fresh unseeded generator)

        Returns:
        --------
        ParticleSystem : Randomly seeded particle arena
        '''
        rng = rng if rng is not None else np.random.default_rng()
        domainMin = np.asarray(domainMin, dtype=float)
        domainMax = np.asarray(domainMax, dtype=float)

        positions = domainMin + rng.random((nParticles, 2)) * (domainMax - domainMin)
        return cls.fromPositions(positions)

    @classmethod
    def createUniform(
        cls,
        blockMin: np.ndarray,
        blockMax: np.ndarray,
        spacing: float,
    ) -> ParticleSystem:
        '''
        Create a regular particle grid filling a rectangular block.

        Particles are offset by half a spacing from the block edges.

        Parameters:
        -----------
        blockMin : np.ndarray
            Lower corner of the fluid block
        blockMax : np.ndarray
            Upper corner of the fluid block
        spacing : float
            Inter-particle spacing

        Returns:
        --------
        ParticleSystem : Particle arena at rest
        '''
        xCoords = np.arange(blockMin[0] + spacing / 2.0, blockMax[0], spacing)
        yCoords = np.arange(blockMin[1] + spacing / 2.0, blockMax[1], spacing)
        xx, yy = np.meshgrid(xCoords, yCoords, indexing='xy')
        positions = np.column_stack([xx.ravel(), yy.ravel()])
        return cls.fromPositions(positions)
