# -- PbfSim Package -- #

'''
2D water simulation using Position-Based Fluids (PBF).

A fixed set of particles in the unit square is advanced one frame at
a time; an iterative Jacobi solver corrects the particle positions
so the SPH density stays at the rest density.

Sean Bowman [02/12/2026]
'''

__version__ = '0.1.0'

from PbfSim.runner import PbfRunner
from PbfSim.scenarios.randomFill import RandomFillConfig
from PbfSim.export.frameExporter import FrameExporter
