"""Command-line entry point.

Run with: ``python -m termtris`` (or the ``termtris`` console script).

With no arguments an interactive game starts in the current terminal.  Use
``--scores`` to print the saved high scores instead, and ``--display=double``
to draw every cell at twice the size.
"""

from __future__ import annotations

import argparse
import curses
import logging
import sys
from typing import List, Optional, Sequence

from . import terminal
from .config import DISPLAY_SCALES, GameConfig
from .engine import GameEngine
from .scores import DEFAULT_SCORES_FILE, ScoreStore, format_scores


LOGGER = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class _HelpOnErrorParser(argparse.ArgumentParser):
    """Argument parser that shows the full help text on bad input."""

    def error(self, message: str) -> None:  # type: ignore[override]
        self.print_help(sys.stderr)
        self.exit(2, f"\n{self.prog}: error: {message}\n")


def _non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from None
    if number < 0:
        raise argparse.ArgumentTypeError("must be zero or greater")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = _HelpOnErrorParser(
        prog="termtris",
        description="Falling-block puzzle game for the terminal.",
        epilog="Controls: left/right arrows move, up rotates, down drops; any other key quits.",
    )
    parser.add_argument(
        "--display",
        choices=sorted(DISPLAY_SCALES),
        default="single",
        help="Cell size on screen (default: single).",
    )
    parser.add_argument(
        "--scores",
        action="store_true",
        help="Print the saved high scores and exit.",
    )
    parser.add_argument(
        "--scores-file",
        default=DEFAULT_SCORES_FILE,
        help=f"Where high scores are kept (default: {DEFAULT_SCORES_FILE}).",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for the piece sequence.")
    parser.add_argument(
        "--level",
        type=_non_negative_int,
        default=0,
        help="Starting level (default: 0).",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        default="WARNING",
        help="Logging level (e.g. DEBUG, INFO, WARNING).",
    )
    parser.add_argument(
        "--log-file",
        default=None,
        help="Write logs to this file; without it only warnings reach stderr.",
    )
    return parser


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


def configure_logging(level_name: str, log_file: Optional[str]) -> None:
    level = getattr(logging, level_name.upper(), logging.WARNING)
    if log_file:
        logging.basicConfig(
            filename=log_file,
            level=level,
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    else:
        # Anything below WARNING would be written over the curses screen.
        logging.basicConfig(level=max(level, logging.WARNING), format="%(message)s")


def report_scores(store: ScoreStore, finished: List[int]) -> None:
    """Record every finished game and tell the player how it went."""

    for index, score in enumerate(finished, start=1):
        result = store.record(score)
        label = f"Game {index}" if len(finished) > 1 else "Game over"
        line = f"{label}: final score {score}"
        if result.rank is not None:
            line += f" (#{result.rank} on the high score table)"
        print(line)
        if not result.saved:
            print(f"warning: could not save score to {store.path}", file=sys.stderr)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)
    configure_logging(args.log_level, args.log_file)
    store = ScoreStore(args.scores_file)

    if args.scores:
        print(format_scores(store.load()))
        return 0

    engine = GameEngine(GameConfig(start_level=args.level, seed=args.seed))
    LOGGER.info("Starting game (display=%s, seed=%s, level=%d)", args.display, args.seed, args.level)
    try:
        finished = terminal.run(engine, DISPLAY_SCALES[args.display])
    except terminal.DisplayError as exc:
        print(f"termtris: {exc}", file=sys.stderr)
        return 1
    except curses.error as exc:
        print(f"termtris: cannot use this terminal: {exc}", file=sys.stderr)
        return 1

    report_scores(store, finished)
    return 0
