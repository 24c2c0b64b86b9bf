"""Exhaustive depth-first search over capture sequences."""

from concurrent.futures import ProcessPoolExecutor
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Tuple

from loguru import logger

from .board import Board, Capture, Color
from .exceptions import CaptureApplicationError, SearchBudgetExceeded

CaptureSequence = Tuple[Capture, ...]


@dataclass
class SearchResult:
    """Everything found below one search node."""

    solutions: List[CaptureSequence] = field(default_factory=list)
    dead_ends: int = 0
    nodes: int = 0
    anomalies: int = 0  # Captures that failed to apply

    @property
    def solution_count(self) -> int:
        return len(self.solutions)

    def merge(self, other: "SearchResult") -> "SearchResult":
        """Add another result into this one. Solutions keep their order."""
        self.solutions.extend(other.solutions)
        self.dead_ends += other.dead_ends
        self.nodes += other.nodes
        self.anomalies += other.anomalies
        return self


class Solver:
    """Finds every capture sequence that leaves a single piece on the board."""

    def __init__(
        self,
        max_nodes: Optional[int] = None,
        strict: bool = False,
        workers: int = 1,
        on_solution: Optional[Callable[[CaptureSequence], None]] = None,
    ):
        """Initialize solver.

        Args:
            max_nodes: Maximum number of positions to visit (None = unbounded)
            strict: Raise instead of skipping a capture that fails to apply
            workers: Number of processes; above 1 the root captures are solved in parallel
            on_solution: Called with each solution in discovery order
        """
        if max_nodes is not None and max_nodes < 1:
            raise ValueError("max_nodes must be positive")
        if workers < 1:
            raise ValueError("workers must be at least 1")
        self.max_nodes = max_nodes
        self.strict = strict
        self.workers = workers
        self.on_solution = on_solution
        self.nodes_searched = 0

    def solve(self, board: Board, turn_color: Color = Color.WHITE) -> SearchResult:
        """Search every capture sequence from this board.

        The board itself is never modified.
        """
        self.nodes_searched = 0
        logger.debug(f"Solving {len(board)} pieces, {turn_color.name} to capture first")

        if self.workers > 1:
            result = self._solve_parallel(board, turn_color)
        else:
            result = SearchResult()
            try:
                self._solve_recursive(board, turn_color, (), result)
            except SearchBudgetExceeded:
                self.nodes_searched = result.nodes
                raise

        self.nodes_searched = result.nodes
        logger.debug(
            f"Search finished: {result.solution_count} solutions, "
            f"{result.dead_ends} dead ends, {result.nodes} nodes"
        )
        return result

    def _solve_recursive(
        self,
        board: Board,
        turn_color: Color,
        history: CaptureSequence,
        result: SearchResult,
    ) -> None:
        self._count_node(result)

        if len(board) == 1:
            result.solutions.append(history)
            if self.on_solution:
                self.on_solution(history)
            return

        next_color = turn_color.opposite
        for capture, new_board in self._branches(board, turn_color, result):
            self._solve_recursive(new_board, next_color, history + (capture,), result)

    def _branches(
        self, board: Board, turn_color: Color, result: SearchResult
    ) -> Iterator[Tuple[Capture, Board]]:
        """Yield each capture of the side to move with the board it leads to.

        Counts a dead end once the side to move turns out to have no capture.
        """
        capture_found = False
        for piece in board.pieces_of(turn_color):
            captures = piece.legal_captures(board)
            if captures:
                capture_found = True

            for capture in captures:
                new_board = board.duplicate()
                if new_board.apply_capture(capture):
                    yield capture, new_board
                else:
                    self._record_anomaly(capture, result)

        if not capture_found:
            result.dead_ends += 1

    def _count_node(self, result: SearchResult) -> None:
        if self.max_nodes is not None and result.nodes >= self.max_nodes:
            raise SearchBudgetExceeded(
                f"Search stopped after {result.nodes} nodes",
                result,
                {"max_nodes": self.max_nodes},
            )
        result.nodes += 1

    def _record_anomaly(self, capture: Capture, result: SearchResult) -> None:
        result.anomalies += 1
        if self.strict:
            raise CaptureApplicationError(
                f"Capture failed to apply: {capture}", {"capture": str(capture)}
            )
        logger.warning(f"Capture failed to apply, skipping branch: {capture}")

    def _solve_parallel(self, board: Board, turn_color: Color) -> SearchResult:
        """Solve each root capture in its own process and merge in root order."""
        result = SearchResult()
        self._count_node(result)

        if len(board) == 1:
            result.solutions.append(())
            if self.on_solution:
                self.on_solution(())
            return result

        next_color = turn_color.opposite
        branches = list(self._branches(board, turn_color, result))
        if not branches:
            return result

        budgets = _split_budget(self.max_nodes, result.nodes, len(branches))
        tasks = [
            (new_board, next_color, (capture,), self.strict, budget)
            for (capture, new_board), budget in zip(branches, budgets)
        ]

        logger.debug(f"Dispatching {len(tasks)} root captures to {self.workers} workers")
        exceeded = False
        with ProcessPoolExecutor(max_workers=min(self.workers, len(tasks))) as executor:
            for branch_result, branch_exceeded in executor.map(_solve_branch, tasks):
                result.merge(branch_result)
                exceeded = exceeded or branch_exceeded

        if self.on_solution:
            for solution in result.solutions:
                self.on_solution(solution)

        if exceeded:
            self.nodes_searched = result.nodes
            raise SearchBudgetExceeded(
                f"Search stopped after {result.nodes} nodes",
                result,
                {"max_nodes": self.max_nodes},
            )
        return result


def _solve_branch(
    task: Tuple[Board, Color, CaptureSequence, bool, Optional[int]]
) -> Tuple[SearchResult, bool]:
    """Worker entry point: solve one root branch with its own accumulator."""
    board, turn_color, history, strict, max_nodes = task
    if max_nodes == 0:
        return SearchResult(), True
    solver = Solver(max_nodes=max_nodes, strict=strict)
    result = SearchResult()
    try:
        solver._solve_recursive(board, turn_color, history, result)
    except SearchBudgetExceeded:
        return result, True
    return result, False


def _split_budget(max_nodes: Optional[int], used: int, branches: int) -> List[Optional[int]]:
    """Share what is left of the node budget between root branches.

    Earlier branches take the remainder, so the shares add up to the budget left.
    """
    if max_nodes is None:
        return [None] * branches
    share, extra = divmod(max(max_nodes - used, 0), branches)
    return [share + 1 if i < extra else share for i in range(branches)]
