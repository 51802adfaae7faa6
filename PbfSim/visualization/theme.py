# -- Visualization Theme -- #

'''
Centralized dark-mode theme for all PbfSim Plotly visualizations.

Sean Bowman [02/12/2026]
'''

# Plotly template
TEMPLATE = 'plotly_dark'

# Primary color palette (Material Design, visible on dark backgrounds)
BLUE = '#42A5F5'
RED = '#EF5350'
GREEN = '#66BB6A'
ORANGE = '#FFA726'
PURPLE = '#AB47BC'

# Neutrals
WHITE = '#E0E0E0'
REFERENCE_LINE = '#888888'

# Particle colorscale (density / speed)
PARTICLE_COLORSCALE = 'Blues'

# Marker size in pixels
PARTICLE_SIZE = 8
