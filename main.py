"""Main entry point for the chess melee solver."""

import argparse
import os
import sys

from loguru import logger

from melee.exceptions import CaptureApplicationError, InvalidLayoutError, SearchBudgetExceeded
from melee.layouts import default_board, load_board
from melee.report import format_solution, format_summary
from melee.solver import Solver


def positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"{value!r} is not an integer")
    if number < 1:
        raise argparse.ArgumentTypeError(f"{value} must be at least 1")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chess melee puzzle solver")
    parser.add_argument(
        "--layout",
        "-l",
        type=str,
        default=os.environ.get("MELEE_LAYOUT_PATH"),
        help="Path to a JSON layout file (default: built-in 12-piece puzzle)",
    )
    parser.add_argument(
        "--workers",
        "-w",
        type=positive_int,
        default=os.environ.get("MELEE_WORKERS", "1"),
        help="Number of worker processes (default: 1)",
    )
    parser.add_argument(
        "--max-nodes",
        type=positive_int,
        default=None,
        help="Stop after visiting this many positions",
    )
    parser.add_argument(
        "--strict",
        action="store_true",
        help="Abort when a capture fails to apply instead of skipping it",
    )
    parser.add_argument(
        "--quiet",
        "-q",
        action="store_true",
        help="Only print the summary",
    )
    parser.add_argument(
        "--show-board",
        action="store_true",
        help="Print the starting board before solving",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=["TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL"],
        default=os.environ.get("MELEE_LOG_LEVEL", "WARNING"),
        help="Log level for stderr output (default: WARNING)",
    )
    return parser


def print_solution(solution) -> None:
    for line in format_solution(solution):
        print(line)


def main(argv=None) -> int:
    """Run the solver.

    Returns:
        0 when the search completes, 1 for an unusable layout, 3 when strict mode
        aborts and 4 when the node budget runs out. Bad options exit with 2 from argparse.
    """
    args = build_parser().parse_args(argv)

    logger.remove()
    logger.add(sys.stderr, level=args.log_level)

    try:
        board = load_board(args.layout) if args.layout else default_board()
    except (InvalidLayoutError, OSError) as e:
        logger.error(f"Could not load layout: {e}")
        return 1

    if args.show_board:
        print(board.render())
        print()

    solver = Solver(
        max_nodes=args.max_nodes,
        strict=args.strict,
        workers=args.workers,
        on_solution=None if args.quiet else print_solution,
    )

    try:
        result = solver.solve(board)
    except SearchBudgetExceeded as e:
        logger.warning(f"{e.message}; totals below are partial")
        for line in format_summary(e.result):
            print(line)
        return 4
    except CaptureApplicationError as e:
        logger.error(f"Search aborted: {e.message}")
        return 3

    for line in format_summary(result):
        print(line)
    return 0


if __name__ == "__main__":
    sys.exit(main())
