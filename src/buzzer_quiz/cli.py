# Area: Shared
"""
buzzer_quiz.cli — Command-line interface
========================================

Runs a quiz game on the terminal.

Usage:
    python -m buzzer_quiz --clues clues.json
    python -m buzzer_quiz --clues clues.json --config settings.json --teams 3

Settings are read from the config file, then from BUZZER_QUIZ_*
environment variables (or a .env file), then from command line flags.
"""

import argparse
import asyncio
import logging
import sys
from typing import List, Optional

from pydantic import ValidationError

from ._game import JsonFileClueSource
from ._shared import setup_logging
from .collaborators import LoggingAudioPlayer, LoggingPresentation, TerminalConsole
from .game import QuizGame
from .runner import GameRunner
from .settings import Settings, load_settings


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        prog="buzzer-quiz",
        description="Buzzer Quiz - run a timed multi-team quiz from the terminal",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python -m buzzer_quiz --clues examples/clues.json
  python -m buzzer_quiz --clues clues.json --teams 3 --verbose
  BUZZER_QUIZ_TEAM_COUNT=2 python -m buzzer_quiz --clues clues.json
        """,
    )

    parser.add_argument(
        "--clues",
        type=str,
        required=True,
        help="Path to a JSON array of clues",
    )

    parser.add_argument(
        "--config",
        type=str,
        help="Path to JSON settings file",
    )

    parser.add_argument(
        "--teams",
        type=int,
        help="Number of teams (1-9); overrides config and environment",
    )

    parser.add_argument(
        "--log-file",
        type=str,
        help="Path to the JSON log file",
    )

    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log at DEBUG level",
    )

    return parser.parse_args(argv)


def build_settings(args: argparse.Namespace) -> Settings:
    """Load settings and apply command line overrides."""
    settings = load_settings(args.config)
    if args.teams is not None:
        settings.team_count = args.teams
    if args.log_file:
        settings.log_file = args.log_file
    return settings


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = parse_args(argv)

    try:
        settings = build_settings(args)
    except ValidationError as e:
        print(f"Error: Invalid settings:\n{e}", file=sys.stderr)
        return 1

    try:
        clue_source = JsonFileClueSource(args.clues)
    except (OSError, ValueError) as e:
        print(f"Error: Cannot load clues: {e}", file=sys.stderr)
        return 1

    setup_logging(settings.log_file, logging.DEBUG if args.verbose else logging.INFO)

    game = QuizGame(
        clue_source,
        settings=settings,
        presentation=LoggingPresentation(),
        audio=LoggingAudioPlayer(),
        console=TerminalConsole(),
    )

    try:
        return asyncio.run(GameRunner(game).run())
    except KeyboardInterrupt:
        return 0
