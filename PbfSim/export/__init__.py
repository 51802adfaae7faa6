# -- Export Package -- #

'''
Data export utilities for PBF simulation results.

Exports frame data as JSON for offline plotting and playback.

Sean Bowman [02/12/2026]
'''

from PbfSim.export.frameExporter import FrameExporter
