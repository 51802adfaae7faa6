# -- Physical Constants for PBF Water Simulation -- #

'''
Physical and numerical constants for the Position-Based Fluids solver.

Units are normalized: the simulation domain is the unit square and
the time step is one display frame. The vertical axis follows the
raster convention (y grows downward), so gravity is positive in y.

References:
-----------
Macklin & Mueller (2013) -- Position Based Fluids
Mueller et al. (2003) -- Particle-based fluid simulation for
    interactive applications

Sean Bowman [02/12/2026]
'''

#--------------------------------------------------------------------#
# -- Fluid Properties -- #
#--------------------------------------------------------------------#

# Rest density rho_0 targeted by the density constraint
restDensity: float = 1000.0

# Particle mass (kernel sums are unweighted, kept for diagnostics)
particleMass: float = 1.0

# Gravitational acceleration, y pointing down [domain units/s^2]
gravity: tuple[float, float] = (0.0, 9.8)

#--------------------------------------------------------------------#
# -- PBF Numerical Parameters -- #
#--------------------------------------------------------------------#

# Fixed time step: one frame at 60 Hz [s]
timeStep: float = 1.0 / 60.0

# Jacobi iterations of the constraint solver per step
solverIterations: int = 10

# Kernel support radius h
kernelRadius: float = 0.1

# Constraint force mixing (relaxation) added to the lambda denominator
epsilon: float = 500.0

# Max jitter used when re-inserting particles at a wall
boundaryJitter: float = 0.001

# Kernel pair: poly6 for density, spiky for gradients
defaultKernelType: str = 'poly6Spiky'

#--------------------------------------------------------------------#
# -- Scenario Defaults -- #
#--------------------------------------------------------------------#

# Number of particles seeded by the random fill scenario
defaultParticleCount: int = 50

# Simulation domain (unit square)
domainMin: tuple[float, float] = (0.0, 0.0)
domainMax: tuple[float, float] = (1.0, 1.0)
