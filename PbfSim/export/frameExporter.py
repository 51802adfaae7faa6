# -- Simulation Frame Exporter -- #

'''
Exports PBF simulation frames as JSON for visualization.

Collects particle state snapshots during a run and writes them to a
single JSON file, along with the simulation constants and a
diagnostics history (density error, kinetic energy, neighbor count).

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import json
import os
from datetime import datetime

import numpy as np

from PbfSim.sph.protocols import SimulationConfig, SimulationState
from PbfSim.sph.particles import ParticleSystem


class FrameExporter:
    '''
    Collects and exports simulation frame data as JSON.

    Usage:
        exporter = FrameExporter()
        # During simulation loop:
        exporter.addFrame(state, particles)
        # After simulation:
        exporter.export(config, outputDir='output')

    Output JSON format:
    {
        "meta": { "type": "pbfSim", "nFrames": 61, "created": "...", ... },
        "config": { "simulation": {...}, "pbf": {...}, "fluid": {...}, "domain": {...} },
        "frames": [
            {
                "time": 0.0,
                "step": 0,
                "positions": [[x0, y0], [x1, y1], ...],
                "velocityMagnitudes": [v0, v1, ...],
                "densities": [rho0, rho1, ...],
                "lambdas": [l0, l1, ...]
            },
            ...
        ],
        "history": {
            "times": [...],
            "maxDensityError": [...],
            "meanDensity": [...],
            "kineticEnergy": [...],
            "meanNeighbors": [...]
        }
    }
    '''

    def __init__(self) -> None:
        self._frames: list[dict] = []
        self._history: dict[str, list[float]] = {
            'times': [],
            'maxDensityError': [],
            'meanDensity': [],
            'kineticEnergy': [],
            'meanNeighbors': [],
        }

    @property
    def nFrames(self) -> int:
        '''Number of collected frames.'''
        return len(self._frames)

    @property
    def frames(self) -> list[dict]:
        '''Collected frames (in recording order).'''
        return self._frames

    @property
    def history(self) -> dict[str, list[float]]:
        '''Diagnostics history, one entry per frame.'''
        return self._history

    def addFrame(self, state: SimulationState, particles: ParticleSystem) -> None:
        '''
        Record a simulation frame.

        Parameters:
        -----------
        state : SimulationState
            Diagnostics of the step that produced this frame
        particles : ParticleSystem
            Current particle arena
        '''
        velMagnitudes = np.linalg.norm(particles.velocities, axis=1)

        frame = {
            'time': round(state.time, 6),
            'step': state.step,
            'positions': np.round(particles.positions, 6).tolist(),
            'velocityMagnitudes': np.round(velMagnitudes, 6).tolist(),
            'densities': np.round(particles.densities, 2).tolist(),
            'lambdas': np.round(particles.lambdas, 8).tolist(),
        }
        self._frames.append(frame)

        self._history['times'].append(round(state.time, 6))
        self._history['maxDensityError'].append(round(state.maxDensityError, 6))
        self._history['meanDensity'].append(round(state.meanDensity, 4))
        self._history['kineticEnergy'].append(round(state.kineticEnergy, 6))
        self._history['meanNeighbors'].append(round(state.meanNeighbors, 3))

    def export(
        self,
        config: SimulationConfig,
        outputDir: str = 'PbfSim/output',
        scenarioName: str = 'randomFill',
    ) -> str:
        '''
        Write all collected frames to a JSON file.

        Parameters:
        -----------
        config : SimulationConfig
            Simulation configuration for metadata
        outputDir : str
            Output directory path
        scenarioName : str
            Scenario name for the filename

        Returns:
        --------
        str : Path to the exported JSON file
        '''
        os.makedirs(outputDir, exist_ok=True)

        timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
        filename = f'pbfSim_{scenarioName}_{timestamp}.json'
        filepath = os.path.join(outputDir, filename)

        output = {
            'meta': {
                'type': 'pbfSim',
                'scenario': scenarioName,
                'nFrames': len(self._frames),
                'nParticles': len(self._frames[0]['positions']) if self._frames else 0,
                'created': datetime.now().isoformat(),
            },
            'config': config.toDict(),
            'frames': self._frames,
            'history': self._history,
        }

        with open(filepath, 'w') as f:
            json.dump(output, f, indent=None, separators=(',', ':'))

        return filepath
