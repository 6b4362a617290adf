#!/usr/bin/env python3
"""
Run the star system headless and print a summary.

Examples:
    python scripts/run_simulation.py --steps 5000 --seed 7
    python scripts/run_simulation.py --asteroids-per-1000 10 --verbose
    python scripts/run_simulation.py --config data/sol_system.json --report json
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from solsim.config import load_config, spawn_rate_from_frames_per_thousand
from solsim.events import SimulationEventType
from solsim.report import create_report_from_simulation
from solsim.scenarios import build_sol_system


QUIET_EVENTS = {
    SimulationEventType.ENTITY_SPAWNED,
    SimulationEventType.ENTITY_REMOVED,
    SimulationEventType.MISSILE_FIRED,
    SimulationEventType.MESSAGE,
}


def main():
    parser = argparse.ArgumentParser(
        description="Run the planetary defense simulation without a display",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--steps",
        type=int,
        default=3000,
        help="Number of simulation steps (default: 3000)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for a reproducible run",
    )
    parser.add_argument(
        "--config",
        default=None,
        help="Path to a system configuration JSON (default: data/sol_system.json)",
    )
    parser.add_argument(
        "--asteroids-per-1000",
        type=float,
        default=None,
        help="Average asteroids per 1000 steps (0 disables asteroids)",
    )
    parser.add_argument(
        "--report",
        choices=["text", "json"],
        default="text",
        help="Report format (default: text)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Print messages and notable events as they happen",
    )

    args = parser.parse_args()

    try:
        config = load_config(args.config)
    except (FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.asteroids_per_1000 is not None:
        config.asteroid_spawn_rate = spawn_rate_from_frames_per_thousand(args.asteroids_per_1000)

    sim = build_sol_system(config, seed=args.seed)

    if args.verbose:
        def print_event(event):
            if event.event_type == SimulationEventType.MESSAGE:
                print(f"[{event.step:>6}] {event.data['message']}")
            elif event.event_type not in QUIET_EVENTS:
                print(f"  {event}")
        sim.add_event_callback(print_event)

    sim.run(args.steps)

    report = create_report_from_simulation(sim, name=f"{args.steps} steps, seed {args.seed}")
    if args.report == "json":
        print(report.to_json())
    else:
        print(report.to_text())
    return 0


if __name__ == "__main__":
    sys.exit(main())
