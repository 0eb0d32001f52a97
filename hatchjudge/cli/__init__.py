#!/usr/bin/env python3
"""
Hatch Judging CLI

Operator tool for judging a hackathon from the command line.

Usage:
    python -m hatchjudge.cli <command> [options]

Commands:
    phases       Phase timeline with lifecycle states
    leaderboard  Ranked leaderboard (overall or one phase)
    score        Record a score for a team in a phase
    eliminate    Eliminate the lowest-ranked teams (use --dry-run to preview)
    history      Elimination audit trail

Environment:
    DATABASE_URL    Database connection string
    LOG_LEVEL       DEBUG|INFO|WARNING|ERROR
"""
import sys
import argparse
import logging
from typing import Optional

from hatchjudge import __version__
from hatchjudge.cli.judging_commands import JudgingCommand


def setup_logging(level: str = "INFO") -> None:
    """Configure logging."""
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )


def create_parser() -> argparse.ArgumentParser:
    """Create CLI argument parser."""
    parser = argparse.ArgumentParser(
        prog="hatchjudge",
        description="Hackathon judging and elimination CLI",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s leaderboard HACK24 --scope overall
  %(prog)s score HACK24 team-7 0 85
  %(prog)s --dry-run eliminate HACK24 --count 2 --scope Ideation
        """
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)"
    )

    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Show what would be done without executing"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    phases_parser = subparsers.add_parser("phases", help="Phase timeline")
    phases_parser.add_argument("code", help="Hackathon code")

    leaderboard_parser = subparsers.add_parser("leaderboard", help="Ranked leaderboard")
    leaderboard_parser.add_argument("code", help="Hackathon code")
    leaderboard_parser.add_argument("--scope", default="overall", help="overall, phase index or phase name")

    score_parser = subparsers.add_parser("score", help="Record a score")
    score_parser.add_argument("code", help="Hackathon code")
    score_parser.add_argument("team_id", help="Team id")
    score_parser.add_argument("phase", help="Phase index or name")
    score_parser.add_argument("score", help="Integer score 0-100")

    eliminate_parser = subparsers.add_parser("eliminate", help="Eliminate lowest-ranked teams")
    eliminate_parser.add_argument("code", help="Hackathon code")
    eliminate_parser.add_argument("--count", "-n", required=True, help="Number of teams to eliminate")
    eliminate_parser.add_argument("--scope", default="overall", help="overall, phase index or phase name")
    eliminate_parser.add_argument("--operator", default="cli", help="Recorded as performed_by")

    history_parser = subparsers.add_parser("history", help="Elimination audit trail")
    history_parser.add_argument("code", help="Hackathon code")

    return parser


def main(args: Optional[list] = None) -> int:
    """Main entry point."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if not parsed.command:
        parser.print_help()
        return 1

    setup_logging(parsed.log_level)

    handler = JudgingCommand(dry_run=parsed.dry_run)
    return handler.execute(parsed)


if __name__ == "__main__":
    sys.exit(main())
