#!/usr/bin/env python3
"""
Run the seeded draw from the command line.

Without a config file the 2021 round of 16 teams are used.
"""

import argparse
import logging
import sys
from pathlib import Path

from seeded_draw import DrawEngine, DrawError
from seeded_draw.simulation import DrawAnalyzer, DrawSimulator
from seeded_draw.utils.config import build_draw_setup, load_config, set_nested_value
from seeded_draw.utils.logging_utils import setup_logging


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Seeded knockout draw")
    parser.add_argument("--config", type=Path, help="YAML configuration file")
    parser.add_argument("--seed", type=int, help="Override the random seed")
    parser.add_argument("--simulate", type=int, metavar="N", help="Run N draws and print statistics")
    parser.add_argument("--heatmap", type=Path, help="Save the pairing heatmap of a simulation")
    parser.add_argument("--log-level", default=None, help="Logging level")
    return parser.parse_args(argv)


def main(argv=None):
    """Main function"""
    args = parse_args(argv)

    config = load_config(args.config) if args.config else {}
    if args.seed is not None:
        set_nested_value(config, 'draw.seed', args.seed)
        set_nested_value(config, 'simulation.seed', args.seed)
    if args.simulate is not None:
        set_nested_value(config, 'simulation.n_draws', args.simulate)
    if args.log_level is not None:
        set_nested_value(config, 'logging.level', args.log_level)

    setup = build_draw_setup(config)
    setup_logging(setup.log_level, draw_progress=setup.draw_progress)
    logger = logging.getLogger("run_draw")

    try:
        if args.simulate is None:
            engine = DrawEngine(setup.first_seeded, setup.second_seeded, config=setup.draw)
            matches = engine.run_full_draw()
            print()
            for match in matches:
                print(f"{match.index}. {match}")
            return 0

        simulator = DrawSimulator(setup.first_seeded, setup.second_seeded, config=setup.simulation)
        result = simulator.run()
    except DrawError as e:
        logger.error(f"Draw failed: {e}")
        return 1

    analyzer = DrawAnalyzer(setup.first_seeded, setup.second_seeded)
    summary = analyzer.summarize(result)
    print()
    for key, value in summary.items():
        print(f"{key}: {value}")
    print()
    print(analyzer.pairing_frequencies(result).round(3).to_string())

    if args.heatmap:
        analyzer.plot_pairing_frequencies(result, save_path=str(args.heatmap))

    return 0


if __name__ == "__main__":
    sys.exit(main())
