# -- Visualization Package -- #

'''
Plotly figures for PBF particle snapshots and diagnostics.

Sean Bowman [02/12/2026]
'''

from PbfSim.visualization.particlePlots import plotParticles, plotFrames, plotDiagnostics
