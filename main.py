#!/usr/bin/env python3
"""
Orrery - Star System Orbit Simulator

Command-line entry point for running the orrery headless or with the
interactive viewer.

Usage:
    python main.py                                  # Viewer, real time, now
    python main.py --speed 86400                    # One day per second
    python main.py --start 2000-01-01T12:00:00      # Start at J2000
    python main.py --headless --duration 10         # Headless run
    python main.py --help                           # Show all options
"""

import argparse
import logging
import sys
from datetime import datetime, timezone

logger = logging.getLogger("orrery")


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO 8601 timestamp; naive values are read as UTC."""
    try:
        timestamp = datetime.fromisoformat(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid ISO 8601 timestamp: {value!r}")
    if timestamp.tzinfo is None:
        timestamp = timestamp.replace(tzinfo=timezone.utc)
    return timestamp


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Star System Orbit Simulator and Viewer",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                                    # Built-in solar system, now
  %(prog)s --speed 86400                      # Fast forward, 1 day/s
  %(prog)s --speed -86400                     # Rewind
  %(prog)s --bodies system.json               # Custom body table
  %(prog)s --headless --duration 60 --speed 86400

Controls (visualization mode):
  Arrow keys  : Rotate camera
  +/-         : Zoom in/out
  [ ]         : Decrease/increase time scale
  SPACE       : Pause/Resume
  R           : Reverse time
  T           : Reset time to now
  , .         : Planet scale down/up
  V           : Reset visuals
  TAB         : Focus next body
  ESC         : Quit
        """,
    )

    # -------------------------------------------------------------------------
    # Body table and time
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--bodies",
        "-b",
        type=str,
        default=None,
        help="JSON body table (default: built-in solar system)",
    )
    parser.add_argument(
        "--start",
        type=parse_timestamp,
        default=None,
        help="Start timestamp, ISO 8601 (default: now)",
    )
    parser.add_argument(
        "--speed",
        "-s",
        type=float,
        default=1.0,
        help="Simulated seconds per real second; 0 pauses, negative rewinds (default: 1)",
    )

    # -------------------------------------------------------------------------
    # Visual scale
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--planet-scale",
        type=float,
        default=5.0,
        help="Planet visual scale, multiplies body radii (default: 5)",
    )
    parser.add_argument(
        "--universe-scale",
        type=float,
        default=2.0,
        help="Universe scale, multiplies orbital distances (default: 2)",
    )

    # -------------------------------------------------------------------------
    # Headless mode
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run simulation without visualization",
    )
    parser.add_argument(
        "--duration",
        type=float,
        default=10.0,
        help="Real seconds to simulate in headless mode (default: 10)",
    )
    parser.add_argument(
        "--timestep",
        type=float,
        default=1.0,
        help="Real seconds per tick in headless mode (default: 1)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose output",
    )

    # -------------------------------------------------------------------------
    # Window settings
    # -------------------------------------------------------------------------
    parser.add_argument(
        "--width",
        type=int,
        default=1200,
        help="Window width in pixels (default: 1200)",
    )
    parser.add_argument(
        "--height",
        type=int,
        default=800,
        help="Window height in pixels (default: 800)",
    )
    return parser


def print_body_table(sim) -> None:
    """Print the horizontal-plane world position of each top-level body."""
    print(f"\nDate: {sim.timestamp:%Y-%m-%d %H:%M:%S %Z}  (JD {sim.state.julian_date:.4f})")
    for name, pose in sim.state.poses.items():
        if pose.is_satellite:
            continue
        x, _, z = pose.world_position
        print(f"  {name:<10} {x:8.2f}, {z:8.2f}")


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # Configure logging
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s: %(message)s"
    )

    # -------------------------------------------------------------------------
    # Import simulation components
    # -------------------------------------------------------------------------
    from simulation import Simulation, SimulationConfig

    try:
        config = SimulationConfig(
            bodies_file=args.bodies,
            start_time=args.start,
            speed_multiplier=args.speed,
            planet_visual_scale=args.planet_scale,
            universe_scale=args.universe_scale,
        )
        sim = Simulation(config)
        sim.initialize()
    except (ValueError, OSError) as e:
        logger.error(f"Could not start simulation: {e}")
        return 1

    # -------------------------------------------------------------------------
    # Print configuration summary
    # -------------------------------------------------------------------------
    print("=" * 60)
    print("Orrery - Star System Orbit Simulator")
    print("=" * 60)
    print(f"\nBody Table: {args.bodies or 'built-in solar system'}")
    print(f"Bodies: {sim.num_bodies}")
    print(f"Start: {sim.timestamp.isoformat()}")
    print(f"Speed: {args.speed:g}x ({sim.speed_label})")
    print(f"Planet Scale: {args.planet_scale:g}")
    print(f"Universe Scale: {args.universe_scale:g}")

    # -------------------------------------------------------------------------
    # Run simulation
    # -------------------------------------------------------------------------
    if args.headless:
        if args.timestep <= 0:
            logger.error("Timestep must be positive")
            return 1

        print(f"\n{'=' * 60}")
        print(f"Running headless simulation for {args.duration:g} real seconds...")
        print(f"Timestep: {args.timestep:g} seconds")
        print(f"{'=' * 60}")

        print_body_table(sim)

        elapsed = 0.0
        report_interval = max(args.timestep, args.duration / 5)
        next_report = report_interval

        while elapsed < args.duration:
            sim.step(args.timestep)
            elapsed += args.timestep

            if elapsed >= next_report:
                print_body_table(sim)
                next_report += report_interval

        print(f"\n{'=' * 60}")
        print("Simulation Complete!")
        print(f"{'=' * 60}")
        print(f"Final timestamp: {sim.timestamp.isoformat()}")
        print(f"Steps executed: {sim.state.step_count}")

    else:
        try:
            from visualization import Visualizer
        except ImportError as e:
            print(f"\nError: Could not import visualization module: {e}")
            print("Try running with --headless flag for simulation without graphics.")
            return 1

        print(f"\n{'=' * 60}")
        print("Starting Visualization")
        print(f"{'=' * 60}")

        visualizer = Visualizer(width=args.width, height=args.height)
        visualizer.set_simulation(sim)
        visualizer.run()

    return 0


if __name__ == "__main__":
    sys.exit(main())
