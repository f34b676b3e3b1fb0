#!/usr/bin/env python3
"""
Living Cells Simulation

Cells wander a bounded plane one step at a time, dodging each other by
looking at an occupancy snapshot taken at the start of every tick.

Usage:
    living-cells [--config configs/default.yaml] [options]

Examples:
    living-cells
    living-cells --config configs/default.yaml --gif --out-dir results/
    living-cells --cells 500 --steps 200 --no-csv --quiet
    living-cells --seed 42
"""

import argparse
import sys
from pathlib import Path
from typing import List, Optional

from .config import default_config, load_config
from .model.engine import SimulationEngine
from .export.csv_writer import CSVWriter
from .export.visualizer import Visualizer
from .export.reporter import Reporter


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog='living-cells',
        description='Living Cells Simulation',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    living-cells
    living-cells --config configs/default.yaml --gif --out-dir results/
    living-cells --cells 500 --steps 200 --no-csv --quiet
    living-cells --seed 42
        """
    )

    parser.add_argument('--config', type=Path, default=None,
                        help='Path to YAML configuration file (default: built-in)')

    # Optional overrides
    parser.add_argument('--steps', type=int, default=None,
                        help='Override max simulation steps')
    parser.add_argument('--cells', type=int, default=None,
                        help='Override number of cells')
    parser.add_argument('--out-dir', type=Path, default=Path('./output'),
                        help='Output directory for exports (default: ./output)')

    # Export toggles
    parser.add_argument('--csv', dest='csv', action='store_true', default=None,
                        help='Enable CSV export (default)')
    parser.add_argument('--no-csv', dest='csv', action='store_false',
                        help='Disable CSV export')

    parser.add_argument('--snapshot', dest='snapshot', action='store_true', default=None,
                        help='Enable final snapshot (default)')
    parser.add_argument('--no-snapshot', dest='snapshot', action='store_false',
                        help='Disable final snapshot')

    parser.add_argument('--gif', action='store_true', default=False,
                        help='Enable GIF animation export')

    parser.add_argument('--quiet', action='store_true', default=False,
                        help='Suppress stdout output')

    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed for reproducibility')

    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    args = parse_args(argv)

    # Load configuration
    try:
        config = load_config(args.config) if args.config else default_config()
    except FileNotFoundError:
        print(f"Error: Configuration file not found: {args.config}", file=sys.stderr)
        return 1
    except Exception as e:
        print(f"Error loading config: {e}", file=sys.stderr)
        return 1

    # Apply CLI overrides
    if args.steps is not None:
        config.max_steps = args.steps
    if args.cells is not None:
        config.cell_count = args.cells
    if args.csv is not None:
        config.csv_enabled = args.csv
    if args.snapshot is not None:
        config.snapshot_enabled = args.snapshot
    if args.gif:
        config.gif_enabled = True
    config.quiet = args.quiet
    if args.seed is not None:
        config.seed = args.seed
    config.out_dir = args.out_dir

    try:
        config.validate()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if not config.quiet:
        print("Initializing simulation...")
        print(f"  Plane: [-{config.plane.half_width:g}, {config.plane.half_width:g}] x "
              f"[-{config.plane.half_height:g}, {config.plane.half_height:g}]")
        print(f"  Cells: {config.cell_count}")
        print(f"  Max steps: {config.max_steps}")

    engine = SimulationEngine(config)

    # Initialize exporters
    csv_writer = None
    if config.csv_enabled:
        csv_writer = CSVWriter(config.out_dir / 'simulation_log.csv')
        csv_writer.open()

    visualizer = Visualizer(engine.plane)

    reporter = Reporter(str(args.config) if args.config else None, config.seed)

    # Main simulation loop
    if not config.quiet:
        print("\nRunning simulation...")

    final_state = None
    try:
        while not engine.is_finished():
            state = engine.step()
            final_state = state

            if csv_writer:
                csv_writer.append(state)

            # Buffer GIF frame (every N steps to reduce memory)
            if config.gif_enabled:
                if state.step % config.frame_interval == 0 or engine.is_finished():
                    visualizer.buffer_frame(state)

            reporter.update(state)

            if not config.quiet and state.step % 100 == 0:
                m = state.metrics
                print(f"  Step {state.step}: {m['alive_cells']} alive, "
                      f"{m['moved']} moved, {m['blocked']} blocked")

    except KeyboardInterrupt:
        if not config.quiet:
            print("\nSimulation interrupted by user.")

    # Exit path: freeze every cell before teardown
    engine.kill_all()

    if csv_writer:
        csv_writer.close()
        if not config.quiet:
            print(f"\nCSV saved: {config.out_dir / 'simulation_log.csv'}")

    if config.snapshot_enabled and final_state:
        snapshot_path = config.out_dir / 'final_state.png'
        visualizer.save_snapshot(final_state, snapshot_path)
        if not config.quiet:
            print(f"Snapshot saved: {snapshot_path}")

    if config.gif_enabled:
        gif_path = config.out_dir / 'simulation.gif'
        if not config.quiet:
            print(f"Generating GIF ({len(visualizer.frames)} frames)...")
        visualizer.generate_gif(gif_path, fps=10)
        if not config.quiet:
            print(f"Animation saved: {gif_path}")

    if not config.quiet and final_state:
        report = reporter.generate_summary(
            final_state,
            config.out_dir,
            config.csv_enabled,
            config.snapshot_enabled,
            config.gif_enabled
        )
        print(report)

    return 0


if __name__ == '__main__':
    sys.exit(main())
