"""Text reports for solutions and search totals."""

from typing import List, Sequence

from .board import Capture
from .solver import SearchResult


def format_capture(capture: Capture) -> str:
    """Format a capture as '<KindColor> <from> -> <KindColor> <to>'."""
    attacker, target = capture.attacker, capture.target
    return f"{attacker.code} {attacker.square} -> {target.code} {target.square}"


def format_solution(solution: Sequence[Capture]) -> List[str]:
    """Lines for one solution, header first."""
    return ["Solved"] + [format_capture(capture) for capture in solution]


def format_summary(result: SearchResult) -> List[str]:
    lines = [
        f"Solutions: {result.solution_count}",
        f"Dead ends: {result.dead_ends}",
    ]
    # Only shown when something went wrong
    if result.anomalies:
        lines.append(f"Failed captures: {result.anomalies}")
    return lines
