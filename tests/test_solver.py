"""Unit tests for the capture search."""

import pytest
import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from melee import (
    Board, Color, Solver, SearchResult, default_board, format_capture, format_solution,
    CaptureApplicationError, SearchBudgetExceeded,
)

# Two solutions, no dead ends, seven positions visited.
TWO_ROOK_SETUP = {"a1": "Rw", "a5": "Rb", "a8": "Rb", "h5": "Rw"}


def assert_alternates(solution):
    """Attackers alternate colors starting with White."""
    expected = Color.WHITE
    for capture in solution:
        assert capture.attacker.color == expected
        assert capture.target.color != capture.attacker.color
        expected = expected.opposite


class TestTerminalStates:
    """Test solved and dead-end nodes."""

    def test_single_capture_solution(self):
        board = Board(custom_setup={"a1": "Rw", "a8": "Rb"})

        result = Solver().solve(board)

        assert result.solution_count == 1
        assert result.dead_ends == 0
        assert result.nodes == 2
        assert len(result.solutions[0]) == 1
        assert format_capture(result.solutions[0][0]) == "Rw a1 -> Rb a8"

    def test_single_piece_is_already_solved(self):
        board = Board(custom_setup={"d4": "Kw"})

        result = Solver().solve(board)

        assert result.solutions == [()]
        assert result.dead_ends == 0

    def test_dead_end_at_root(self):
        """White has no capture anywhere."""
        board = Board(custom_setup={"a2": "Pw", "h2": "Pw", "e8": "Nb"})

        result = Solver().solve(board)

        assert result.solution_count == 0
        assert result.dead_ends == 1
        assert result.nodes == 1

    def test_dead_end_after_capture(self):
        """Black is left without pieces while two White pieces remain."""
        board = Board(custom_setup={"a1": "Rw", "h2": "Pw", "a8": "Nb"})

        result = Solver().solve(board)

        assert result.solution_count == 0
        assert result.dead_ends == 1
        assert result.nodes == 2

    def test_every_branch_dead(self):
        board = Board(custom_setup={"a1": "Rw", "a8": "Rb", "h1": "Rb"})

        result = Solver().solve(board)

        assert result.solution_count == 0
        assert result.dead_ends == 2
        assert result.nodes == 3


class TestSearch:
    """Test full searches on small positions."""

    def test_two_move_solution(self):
        board = Board(custom_setup={"a1": "Rw", "a5": "Rb", "a8": "Rb"})

        result = Solver().solve(board)

        assert result.solution_count == 1
        assert [format_capture(c) for c in result.solutions[0]] == [
            "Rw a1 -> Rb a5",
            "Rb a8 -> Rw a5",
        ]

    def test_two_solutions(self):
        board = Board(custom_setup=TWO_ROOK_SETUP)

        result = Solver().solve(board)

        assert result.solution_count == 2
        assert result.dead_ends == 0
        assert result.nodes == 7
        assert result.anomalies == 0
        # Root captures are explored in board order
        assert format_capture(result.solutions[0][0]) == "Rw a1 -> Rb a5"
        assert format_capture(result.solutions[1][0]) == "Rw h5 -> Rb a5"
        for solution in result.solutions:
            assert len(solution) == 3
            assert_alternates(solution)

    def test_solution_replays_to_one_piece(self):
        board = Board(custom_setup=TWO_ROOK_SETUP)

        result = Solver().solve(board)

        for solution in result.solutions:
            replay = board.duplicate()
            for capture in solution:
                assert replay.apply_capture(capture)
            assert len(replay) == 1

    def test_black_can_start(self):
        board = Board(custom_setup={"a1": "Rw", "a8": "Rb"})

        result = Solver().solve(board, turn_color=Color.BLACK)

        assert format_capture(result.solutions[0][0]) == "Rb a8 -> Rw a1"

    def test_board_not_modified(self):
        board = Board(custom_setup=TWO_ROOK_SETUP)
        before = [p.duplicate() for p in board.pieces]

        Solver().solve(board)

        assert board.pieces == before

    def test_board_solve_shortcut(self):
        board = Board(custom_setup=TWO_ROOK_SETUP)

        result = board.solve()

        assert result.solution_count == 2
        assert result.nodes == 7

    def test_on_solution_callback(self):
        found = []
        solver = Solver(on_solution=found.append)

        result = solver.solve(Board(custom_setup=TWO_ROOK_SETUP))

        assert found == result.solutions
        assert solver.nodes_searched == 7


class TestDefaultPuzzle:
    """Test the full search of the built-in 12-piece puzzle."""

    @pytest.fixture(scope="class")
    def sequential(self):
        return Solver().solve(default_board())

    def test_totals(self, sequential):
        assert sequential.solution_count == 2
        assert sequential.dead_ends == 2968
        assert sequential.nodes == 7585
        assert sequential.anomalies == 0

    def test_solutions_clear_the_board(self, sequential):
        board = default_board()

        for solution in sequential.solutions:
            lines = format_solution(solution)
            assert lines[0] == "Solved"
            assert len(lines) == len(board)
            assert_alternates(solution)

            replay = board.duplicate()
            for capture in solution:
                assert replay.apply_capture(capture)
            assert len(replay) == 1

    def test_solutions_are_distinct(self, sequential):
        first, second = (format_solution(s) for s in sequential.solutions)

        assert first != second

    def test_parallel_matches_sequential(self, sequential):
        parallel = Solver(workers=2).solve(default_board())

        assert parallel.solution_count == sequential.solution_count
        assert parallel.dead_ends == sequential.dead_ends
        assert parallel.nodes == sequential.nodes
        assert [format_solution(s) for s in parallel.solutions] == [
            format_solution(s) for s in sequential.solutions
        ]

    def test_partial_search(self):
        """Whatever is found within a small budget alternates correctly."""
        board = default_board()

        with pytest.raises(SearchBudgetExceeded) as exc_info:
            Solver(max_nodes=500).solve(board)

        result = exc_info.value.result
        assert result.nodes == 500
        for solution in result.solutions:
            assert len(solution) == len(board) - 1
            assert_alternates(solution)


class TestSearchResult:
    """Test result merging."""

    def test_merge(self):
        first = SearchResult(solutions=[("a",)], dead_ends=1, nodes=3, anomalies=0)
        second = SearchResult(solutions=[("b",)], dead_ends=2, nodes=4, anomalies=1)

        merged = first.merge(second)

        assert merged is first
        assert merged.solutions == [("a",), ("b",)]
        assert merged.dead_ends == 3
        assert merged.nodes == 7
        assert merged.anomalies == 1


class TestBudget:
    """Test node budget."""

    def test_budget_exceeded_keeps_partial_result(self):
        solver = Solver(max_nodes=3)

        with pytest.raises(SearchBudgetExceeded) as exc_info:
            solver.solve(Board(custom_setup=TWO_ROOK_SETUP))

        assert exc_info.value.result.nodes == 3
        assert exc_info.value.result.solution_count == 0
        assert solver.nodes_searched == 3

    def test_budget_partial_solutions(self):
        with pytest.raises(SearchBudgetExceeded) as exc_info:
            Solver(max_nodes=4).solve(Board(custom_setup=TWO_ROOK_SETUP))

        assert exc_info.value.result.solution_count == 1

    def test_exact_budget_completes(self):
        result = Solver(max_nodes=7).solve(Board(custom_setup=TWO_ROOK_SETUP))

        assert result.solution_count == 2

    def test_parallel_budget_is_shared(self):
        solver = Solver(max_nodes=5, workers=2)

        with pytest.raises(SearchBudgetExceeded) as exc_info:
            solver.solve(Board(custom_setup=TWO_ROOK_SETUP))

        # Root plus two root branches of two nodes each
        assert exc_info.value.result.nodes == 5
        assert solver.nodes_searched == 5

    def test_parallel_exact_budget_completes(self):
        result = Solver(max_nodes=7, workers=2).solve(Board(custom_setup=TWO_ROOK_SETUP))

        assert result.solution_count == 2
        assert result.nodes == 7

    def test_parallel_budget_spent_at_root(self):
        with pytest.raises(SearchBudgetExceeded) as exc_info:
            Solver(max_nodes=1, workers=2).solve(Board(custom_setup=TWO_ROOK_SETUP))

        assert exc_info.value.result.nodes == 1

    def test_invalid_options(self):
        with pytest.raises(ValueError):
            Solver(max_nodes=0)
        with pytest.raises(ValueError):
            Solver(workers=0)


class TestFailedCaptures:
    """Test handling of captures that fail to apply."""

    def test_failed_capture_skipped(self, monkeypatch):
        monkeypatch.setattr(Board, "apply_capture", lambda self, capture: False)
        board = Board(custom_setup={"a1": "Rw", "a8": "Rb"})

        result = Solver().solve(board)

        assert result.anomalies == 1
        assert result.solution_count == 0
        # A capture existed, so this is not a dead end
        assert result.dead_ends == 0

    def test_failed_capture_strict(self, monkeypatch):
        monkeypatch.setattr(Board, "apply_capture", lambda self, capture: False)
        board = Board(custom_setup={"a1": "Rw", "a8": "Rb"})

        with pytest.raises(CaptureApplicationError):
            Solver(strict=True).solve(board)


class TestParallel:
    """Test process-parallel search."""

    def test_parallel_matches_sequential(self):
        board = Board(custom_setup=TWO_ROOK_SETUP)

        sequential = Solver().solve(board)
        parallel = Solver(workers=2).solve(board)

        assert parallel.solution_count == sequential.solution_count
        assert parallel.dead_ends == sequential.dead_ends
        assert parallel.nodes == sequential.nodes
        assert [[format_capture(c) for c in s] for s in parallel.solutions] == [
            [format_capture(c) for c in s] for s in sequential.solutions
        ]

    def test_parallel_dead_end_at_root(self):
        board = Board(custom_setup={"a2": "Pw", "h2": "Pw", "e8": "Nb"})

        result = Solver(workers=2).solve(board)

        assert result.dead_ends == 1
        assert result.solution_count == 0

    def test_parallel_callback_order(self):
        found = []
        result = Solver(workers=2, on_solution=found.append).solve(Board(custom_setup=TWO_ROOK_SETUP))

        assert found == result.solutions
