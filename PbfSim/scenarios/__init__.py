# -- Simulation Scenarios Package -- #

'''
Pre-configured initial conditions for the PBF simulation.

Each scenario returns a SimulationConfig and the particle arena the
solver is driven with.

Sean Bowman [02/12/2026]
'''

from PbfSim.scenarios.randomFill import RandomFillConfig, createRandomFill
from PbfSim.scenarios.blockFill import BlockFillConfig, createBlockFill
