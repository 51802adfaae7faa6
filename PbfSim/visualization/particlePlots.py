# -- Particle Visualizations -- #

'''
Plotly-based plots of PBF particle states.

The y axis is drawn reversed: simulation coordinates follow the
raster convention (y grows downward, gravity is +y), so the floor of
the domain appears at the bottom of the figure.

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import numpy as np
import plotly.graph_objects as go
from plotly.subplots import make_subplots

from PbfSim.sph.protocols import SimulationConfig
from PbfSim.sph.particles import ParticleSystem
from PbfSim.visualization import theme


def _addDomain(fig: go.Figure, config: SimulationConfig) -> None:
    '''Outline the simulation domain.'''
    fig.add_shape(
        type='rect',
        x0=config.domainMin[0], y0=config.domainMin[1],
        x1=config.domainMax[0], y1=config.domainMax[1],
        line=dict(color=theme.REFERENCE_LINE, width=1),
    )


def _domainLayout(fig: go.Figure, config: SimulationConfig, title: str) -> None:
    '''Equal-aspect axes over the domain, y pointing down.'''
    margin = 0.05 * float(np.max(config.domainSize))
    fig.update_xaxes(
        range=[config.domainMin[0] - margin, config.domainMax[0] + margin],
        title_text='x',
    )
    fig.update_yaxes(
        range=[config.domainMax[1] + margin, config.domainMin[1] - margin],
        scaleanchor='x',
        scaleratio=1,
        title_text='y (down)',
    )
    fig.update_layout(
        title=title,
        template=theme.TEMPLATE,
        height=600,
        width=640,
    )


def plotParticles(
    particles: ParticleSystem,
    config: SimulationConfig,
    colorBy: str = 'density',
    title: str = 'PBF Particles',
) -> go.Figure:
    '''
    Scatter plot of committed particle positions.

    Parameters:
    -----------
    particles : ParticleSystem
        Particle arena
    config : SimulationConfig
        Simulation configuration (domain bounds)
    colorBy : str
        Marker color: 'density', 'speed' or 'none'
    title : str
        Figure title

    Returns:
    --------
    go.Figure : Plotly figure

    Raises:
    -------
    ValueError : If colorBy is unknown
    '''
    if colorBy == 'density':
        marker = dict(
            size=theme.PARTICLE_SIZE,
            color=particles.densities,
            colorscale=theme.PARTICLE_COLORSCALE,
            colorbar=dict(title='rho'),
        )
    elif colorBy == 'speed':
        marker = dict(
            size=theme.PARTICLE_SIZE,
            color=np.linalg.norm(particles.velocities, axis=1),
            colorscale=theme.PARTICLE_COLORSCALE,
            colorbar=dict(title='|v|'),
        )
    elif colorBy == 'none':
        marker = dict(size=theme.PARTICLE_SIZE, color=theme.BLUE)
    else:
        raise ValueError(f'Unknown colorBy: {colorBy}')

    fig = go.Figure()
    fig.add_trace(go.Scatter(
        x=particles.positions[:, 0],
        y=particles.positions[:, 1],
        mode='markers',
        marker=marker,
        name='particles',
    ))

    _addDomain(fig, config)
    _domainLayout(fig, config, title)

    return fig


def plotFrames(
    frames: list[dict],
    config: SimulationConfig,
    title: str = 'PBF Simulation',
) -> go.Figure:
    '''
    Animated playback of exported frames.

    Parameters:
    -----------
    frames : list[dict]
        Frames as collected by FrameExporter
    config : SimulationConfig
        Simulation configuration (domain bounds)
    title : str
        Figure title

    Returns:
    --------
    go.Figure : Plotly figure with a play button and time slider
    '''
    def scatterFor(frame: dict) -> go.Scatter:
        positions = np.asarray(frame['positions'], dtype=float).reshape(-1, 2)
        return go.Scatter(
            x=positions[:, 0],
            y=positions[:, 1],
            mode='markers',
            marker=dict(size=theme.PARTICLE_SIZE, color=theme.BLUE),
        )

    fig = go.Figure(data=[scatterFor(frames[0])] if frames else [])
    fig.frames = [
        go.Frame(data=[scatterFor(frame)], name=f'{frame["time"]:.3f}')
        for frame in frames
    ]

    fig.update_layout(
        updatemenus=[dict(
            type='buttons',
            showactive=False,
            buttons=[
                dict(label='Run', method='animate',
                     args=[None, dict(frame=dict(duration=50, redraw=True), fromcurrent=True)]),
                dict(label='Pause', method='animate',
                     args=[[None], dict(frame=dict(duration=0, redraw=False), mode='immediate')]),
            ],
        )],
        sliders=[dict(
            currentvalue=dict(prefix='t = '),
            steps=[
                dict(method='animate', label=f'{frame["time"]:.3f}',
                     args=[[f'{frame["time"]:.3f}'], dict(mode='immediate')])
                for frame in frames
            ],
        )],
    )

    _addDomain(fig, config)
    _domainLayout(fig, config, title)

    return fig


def plotDiagnostics(history: dict[str, list[float]]) -> go.Figure:
    '''
    Density error, kinetic energy and neighbor count over time.

    Parameters:
    -----------
    history : dict[str, list[float]]
        Diagnostics history as collected by FrameExporter

    Returns:
    --------
    go.Figure : Plotly figure with 3 stacked subplots
    '''
    times = history['times']

    fig = make_subplots(
        rows=3, cols=1,
        shared_xaxes=True,
        subplot_titles=('Max Density Error', 'Kinetic Energy', 'Mean Neighbors'),
    )

    fig.add_trace(
        go.Scatter(x=times, y=np.asarray(history['maxDensityError']) * 100.0,
                   mode='lines', name='max |C|',
                   line=dict(color=theme.RED, width=2)),
        row=1, col=1,
    )
    fig.add_trace(
        go.Scatter(x=times, y=history['kineticEnergy'], mode='lines', name='KE',
                   line=dict(color=theme.ORANGE, width=2)),
        row=2, col=1,
    )
    fig.add_trace(
        go.Scatter(x=times, y=history['meanNeighbors'], mode='lines', name='neighbors',
                   line=dict(color=theme.GREEN, width=2)),
        row=3, col=1,
    )

    fig.update_yaxes(title_text='%', row=1, col=1)
    fig.update_yaxes(title_text='KE', row=2, col=1)
    fig.update_yaxes(title_text='count', row=3, col=1)
    fig.update_xaxes(title_text='Time (s)', row=3, col=1)

    fig.update_layout(
        title='PBF Diagnostics',
        template=theme.TEMPLATE,
        height=700,
        showlegend=False,
    )

    return fig
