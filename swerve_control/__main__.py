"""
Main entry point when running the swerve_control module with python -m.
"""

import argparse
import asyncio
import logging
import sys

from .commands import DEFAULT_PROFILE, CommandProfile, parse_pose, parse_segment
from .runner import main, setup_logging


def parse_args(args=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the simulated swerve drivetrain against a command profile",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Run the built-in demo profile
  python -m swerve_control

  # Drive forward 1 m/s for 2 s, then spin 90 deg/s for 1 s, as fast as possible
  python -m swerve_control --command 1,0,0,2 --command 0,0,90,1 --fast

  # Start at (1, 2) facing 90 degrees, without recording
  python -m swerve_control --start-pose 1,2,90 --no-record
        """,
    )
    parser.add_argument(
        "--command",
        action="append",
        type=parse_segment,
        default=None,
        metavar="VX,VY,OMEGA_DEG,SECONDS",
        help="Command segment (repeatable). Defaults to a built-in demo profile.",
    )
    parser.add_argument(
        "--start-pose",
        type=parse_pose,
        default=None,
        metavar="X,Y,HEADING_DEG",
        help="Starting pose (default: origin)",
    )
    parser.add_argument(
        "--output-dir", type=str, default=".", help="Base directory for recorded runs"
    )
    parser.add_argument("--no-record", action="store_true", help="Do not record telemetry")
    parser.add_argument(
        "--fast", action="store_true", help="Do not pace ticks to wall-clock time"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose logging with timestamps"
    )
    return parser.parse_args(args)


if __name__ == "__main__":
    args = parse_args()

    # Setup logging based on verbose flag
    setup_logging(args.verbose)

    profile = CommandProfile(args.command) if args.command else DEFAULT_PROFILE

    try:
        asyncio.run(
            main(
                profile,
                start_pose=args.start_pose,
                output_dir=args.output_dir,
                record=not args.no_record,
                realtime=not args.fast,
            )
        )
    except KeyboardInterrupt:
        logging.info("\nExiting...")
        sys.exit(0)
