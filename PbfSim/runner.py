# -- PBF Simulation Runner -- #

'''
Command-line entry point for running PBF water simulations.

Sets up a scenario, advances the solver one frame at a time,
displays progress, and optionally exports frame data and Plotly
figures.

Two drive modes:
    - step:  advance a single frame and report it
    - run:   advance a number of frames back to back, optionally
             pacing them at a fixed wall-clock interval

Usage:
    python -m PbfSim                                # 50 random particles, 60 frames
    python -m PbfSim --scenario block --preset standard
    python -m PbfSim --steps 1                      # single step
    python -m PbfSim --steps 120 --interval 0.5     # paced run
    python -m PbfSim --config configs/pbf_default.json --plot

Sean Bowman [02/12/2026]
'''

from __future__ import annotations

import argparse
import json
import logging
import os
import time as timeModule

from PbfSim.loggingConfig import setupLogging
from PbfSim.sph.protocols import SimulationConfig, SimulationState
from PbfSim.sph.pbfSolver import PbfSolver
from PbfSim.sph.particles import ParticleSystem
from PbfSim.scenarios.randomFill import RandomFillConfig, createRandomFill
from PbfSim.scenarios.blockFill import BlockFillConfig, createBlockFill
from PbfSim.export.frameExporter import FrameExporter
from PbfSim.visualization.particlePlots import plotParticles, plotFrames, plotDiagnostics

logger = logging.getLogger(__name__)


#--------------------------------------------------------------------#
# -- CLI Argument Parser -- #
#--------------------------------------------------------------------#

def buildParser() -> argparse.ArgumentParser:
    '''Build the CLI argument parser.'''
    parser = argparse.ArgumentParser(
        description='PbfSim -- Position-Based Fluids water simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        '--config', type=str, default=None,
        help='Path to JSON configuration file',
    )
    parser.add_argument(
        '--scenario', type=str, default='random',
        choices=['random', 'block'],
        help='Initial particle layout (default: random)',
    )
    parser.add_argument(
        '--preset', type=str, default='small',
        choices=['small', 'standard'],
        help='Scenario preset (default: small)',
    )
    parser.add_argument(
        '--steps', type=int, default=60,
        help='Number of frames to simulate (default: 60)',
    )
    parser.add_argument(
        '--interval', type=float, default=0.0,
        help='Wall-clock pause between frames [s] (default: 0)',
    )
    parser.add_argument(
        '--seed', type=int, default=None,
        help='Random seed for particle placement and wall jitter',
    )
    parser.add_argument(
        '--no-export', action='store_true',
        help='Skip frame data export',
    )
    parser.add_argument(
        '--plot', action='store_true',
        help='Write Plotly HTML figures next to the exported frames',
    )
    parser.add_argument(
        '--output-dir', type=str, default='PbfSim/output',
        help='Output directory for exported frames (default: PbfSim/output)',
    )
    parser.add_argument(
        '--log-level', type=str, default='WARNING',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        help='Logging level (default: WARNING)',
    )

    return parser


#--------------------------------------------------------------------#
# -- Runner Class -- #
#--------------------------------------------------------------------#

class PbfRunner:
    '''
    Drives a PBF solver frame by frame and stores results.

    Handles the full pipeline: scenario setup, simulation loop with
    progress reporting, and optional frame / figure export.
    '''

    def __init__(self) -> None:
        self._exporter: FrameExporter = FrameExporter()

    @property
    def exporter(self) -> FrameExporter:
        '''Frame collector for the current run.'''
        return self._exporter

    def stepOnce(self, solver: PbfSolver, particles: ParticleSystem) -> SimulationState:
        '''
        Advance a single frame and record it.

        Parameters:
        -----------
        solver : PbfSolver
            Solver to drive
        particles : ParticleSystem
            Particle arena (mutated in place)

        Returns:
        --------
        SimulationState : Diagnostics after the step
        '''
        state = solver.step(particles)
        self._exporter.addFrame(state, particles)
        return state

    def runFromConfig(
        self,
        configPath: str,
        nSteps: int = 60,
        interval: float = 0.0,
        doExport: bool = True,
        doPlot: bool = False,
        exportDir: str = 'PbfSim/output',
        seed: int | None = None,
    ) -> dict:
        '''
        Run a simulation from a JSON configuration file.

        The optional 'scenario' section selects the initial layout:
        {"type": "random", "nParticles": 50} or {"type": "block", ...}.

        Parameters:
        -----------
        configPath : str
            Path to the JSON configuration file
        nSteps : int
            Number of frames to simulate
        interval : float
            Wall-clock pause between frames [s]
        doExport : bool
            Whether to export frame data
        doPlot : bool
            Whether to write Plotly figures
        exportDir : str
            Output directory
        seed : int | None
            Overrides simulation.seed from the file when given

        Returns:
        --------
        dict : Simulation results summary
        '''
        with open(configPath, 'r') as f:
            data = json.load(f)

        simConfig = SimulationConfig.fromDict(data)
        if seed is not None:
            simConfig.seed = seed

        scenarioSection = data.get('scenario', {})
        scenarioType = scenarioSection.get('type', 'random')

        if scenarioType == 'block':
            blockConfig = BlockFillConfig(
                blockWidth=scenarioSection.get('blockWidth', 0.3),
                blockHeight=scenarioSection.get('blockHeight', 0.4),
                particleSpacing=scenarioSection.get('particleSpacing', 0.05),
                seed=simConfig.seed,
            )
            _, particles = createBlockFill(blockConfig, simConfig)
        else:
            fillConfig = RandomFillConfig(
                nParticles=scenarioSection.get('nParticles', 50),
                seed=simConfig.seed,
            )
            _, particles = createRandomFill(fillConfig, simConfig)

        return self.runSteps(
            simConfig, particles, nSteps,
            interval=interval,
            doExport=doExport,
            doPlot=doPlot,
            exportDir=exportDir,
            scenarioName=scenarioType,
        )

    def runSteps(
        self,
        simConfig: SimulationConfig,
        particles: ParticleSystem,
        nSteps: int,
        interval: float = 0.0,
        doExport: bool = True,
        doPlot: bool = False,
        exportDir: str = 'PbfSim/output',
        scenarioName: str = 'random',
        solver: PbfSolver | None = None,
    ) -> dict:
        '''
        Run a PBF simulation for a fixed number of frames.

        Passing the solver used by earlier stepOnce calls continues the
        same run: its clock and jitter stream carry on and no second
        initial frame is recorded.

        Parameters:
        -----------
        simConfig : SimulationConfig
            Simulation constants
        particles : ParticleSystem
            Initial particle arena (mutated in place)
        nSteps : int
            Number of frames to simulate
        interval : float
            Wall-clock pause between frames [s]
        doExport : bool
            Whether to export frame data
        doPlot : bool
            Whether to write Plotly figures
        exportDir : str
            Output directory
        scenarioName : str
            Scenario name for output filenames
        solver : PbfSolver | None
            Solver to continue (default: a fresh one from simConfig)

        Returns:
        --------
        dict : Simulation results summary

        Raises:
        -------
        ValueError : If frames are already recorded but no solver is given
        '''
        if solver is None:
            if self._exporter.nFrames > 0:
                raise ValueError(
                    f'{self._exporter.nFrames} frame(s) already recorded; '
                    'pass the solver that produced them to continue the run'
                )
            solver = PbfSolver(simConfig)

        print()
        print('=' * 62)
        print('  PBFSIM -- POSITION-BASED FLUIDS SIMULATION')
        print('=' * 62)
        print()

        #--------------------------------------------------------------------#
        # Scenario Setup
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  SCENARIO SETUP')
        print('-' * 62)
        print(f'  Scenario:          {scenarioName:>8s}')
        print(f'  Particles:         {particles.nParticles:8d}')
        print(f'  Time Step:         {simConfig.timeStep:8.4f} s')
        print(f'  Solver Iterations: {simConfig.solverIterations:8d}')
        print(f'  Kernel Radius:     {simConfig.kernelRadius:8.4f}')
        print(f'  Rest Density:      {simConfig.restDensity:8.1f}')
        print(f'  Epsilon:           {simConfig.epsilon:8.1f}')
        print(f'  Frames:            {nSteps:8d}')
        print()

        # Initial frame, only at the start of a run
        if self._exporter.nFrames == 0:
            self._exporter.addFrame(solver.currentState(particles), particles)

        #--------------------------------------------------------------------#
        # Simulation Loop
        #--------------------------------------------------------------------#
        print('-' * 62)
        print('  RUNNING SIMULATION')
        print('-' * 62)
        print()
        print(f'  {"Time":>8}  {"Step":>8}  {"MaxVel":>8}  {"DensErr":>8}  {"MeanRho":>10}  {"Nbrs":>6}')
        print(f'  {"(s)":>8}  {"":>8}  {"":>8}  {"(%)":>8}  {"":>10}  {"":>6}')
        print('  ' + '-' * 58)

        wallClockStart = timeModule.time()
        printEvery = max(1, nSteps // 20)
        state = solver.currentState(particles)

        for stepIndex in range(nSteps):
            state = self.stepOnce(solver, particles)

            if stepIndex % printEvery == 0 or stepIndex == nSteps - 1:
                print(
                    f'  {state.time:8.4f}  {state.step:8d}  {state.maxVelocity:8.4f}  '
                    f'{state.maxDensityError * 100:8.3f}  {state.meanDensity:10.2f}  '
                    f'{state.meanNeighbors:6.2f}'
                )

            if interval > 0.0 and stepIndex < nSteps - 1:
                timeModule.sleep(interval)

        wallClockSeconds = timeModule.time() - wallClockStart
        logger.info('%d steps in %.2f s', nSteps, wallClockSeconds)

        print()
        print(f'  Simulation complete.')
        print(f'  Total steps:       {state.step:8d}')
        print(f'  Wall-clock time:   {wallClockSeconds:8.1f} s')
        print(f'  Frames recorded:   {self._exporter.nFrames:8d}')
        print()

        #--------------------------------------------------------------------#
        # Export
        #--------------------------------------------------------------------#
        exportPath = None
        if doExport:
            print('-' * 62)
            print('  EXPORTING FRAME DATA')
            print('-' * 62)

            exportPath = self._exporter.export(
                config=simConfig,
                outputDir=exportDir,
                scenarioName=scenarioName,
            )
            print(f'  Exported to: {exportPath}')
            print()

        plotPaths: list[str] = []
        if doPlot:
            plotPaths = self._writePlots(simConfig, particles, exportDir, scenarioName)
            for path in plotPaths:
                print(f'  Figure: {path}')
            print()

        #--------------------------------------------------------------------#
        # Summary
        #--------------------------------------------------------------------#
        print('=' * 62)
        print('  SIMULATION SUMMARY')
        print('=' * 62)
        print(f'  Final KE:          {state.kineticEnergy:10.6f}')
        print(f'  Max Density Error: {state.maxDensityError * 100:8.3f} %')
        print(f'  Mean Density:      {state.meanDensity:10.2f}')
        print(f'  Max Velocity:      {state.maxVelocity:8.4f}')
        print('=' * 62)
        print()

        return {
            'finalState': state,
            'wallClockSeconds': wallClockSeconds,
            'nFrames': self._exporter.nFrames,
            'exportPath': exportPath,
            'plotPaths': plotPaths,
        }

    def _writePlots(
        self,
        simConfig: SimulationConfig,
        particles: ParticleSystem,
        outputDir: str,
        scenarioName: str,
    ) -> list[str]:
        '''Write final snapshot, playback and diagnostics figures as HTML.'''
        os.makedirs(outputDir, exist_ok=True)

        figures = {
            'particles': plotParticles(particles, simConfig),
            'playback': plotFrames(self._exporter.frames, simConfig),
            'diagnostics': plotDiagnostics(self._exporter.history),
        }

        paths = []
        for name, fig in figures.items():
            path = os.path.join(outputDir, f'pbfSim_{scenarioName}_{name}.html')
            fig.write_html(path)
            paths.append(path)
        return paths


#--------------------------------------------------------------------#
# -- CLI Entry Point -- #
#--------------------------------------------------------------------#

def main(argv: list[str] | None = None) -> None:
    '''CLI entry point.'''
    parser = buildParser()
    args = parser.parse_args(argv)

    setupLogging(getattr(logging, args.log_level))

    runner = PbfRunner()

    if args.config:
        runner.runFromConfig(
            args.config,
            nSteps=args.steps,
            interval=args.interval,
            doExport=not args.no_export,
            doPlot=args.plot,
            exportDir=args.output_dir,
            seed=args.seed,
        )
        return

    if args.scenario == 'block':
        blockPresets = {
            'small': BlockFillConfig.small2D,
            'standard': BlockFillConfig.standard2D,
        }
        blockConfig = blockPresets[args.preset]()
        blockConfig.seed = args.seed
        simConfig, particles = createBlockFill(blockConfig)
    else:
        randomPresets = {
            'small': RandomFillConfig.small2D,
            'standard': RandomFillConfig.standard2D,
        }
        fillConfig = randomPresets[args.preset]()
        fillConfig.seed = args.seed
        simConfig, particles = createRandomFill(fillConfig)

    runner.runSteps(
        simConfig, particles, args.steps,
        interval=args.interval,
        doExport=not args.no_export,
        doPlot=args.plot,
        exportDir=args.output_dir,
        scenarioName=args.scenario,
    )


if __name__ == '__main__':
    main()
