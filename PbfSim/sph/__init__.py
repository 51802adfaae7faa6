# -- PBF Engine Package -- #

'''
Core Position-Based Fluids engine.

Provides the poly6/spiky kernel pair, the particle arena, all-pairs
neighbor search, the density constraint and lambda solver, position
correction, boundary handling and the PBF step orchestrator.

Sean Bowman [02/12/2026]
'''

from PbfSim.sph.protocols import SimulationConfig, SimulationState
from PbfSim.sph.kernels import Poly6SpikyKernel, NonFiniteGradientError, densityKernel, gradientKernel, createKernel
from PbfSim.sph.particles import Particle, ParticleSystem
from PbfSim.sph.pbfSolver import PbfSolver
