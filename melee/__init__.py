"""Chess melee puzzle solver."""

from .board import Board, Capture, Color, Direction, MoveMode, Piece, PieceKind, MOVE_TABLES
from .solver import Solver, SearchResult
from .squares import decode_square, encode_square, apply_offset, is_valid_square, ALL_SQUARES
from .layouts import Layout, PieceEntry, DEFAULT_LAYOUT, default_board, load_layout, load_board, parse_layout
from .report import format_capture, format_solution, format_summary
from .exceptions import (
    MeleeError, InvalidLayoutError, CaptureApplicationError, SearchBudgetExceeded,
)

__all__ = [
    # Board and pieces
    'Board', 'Capture', 'Color', 'Direction', 'MoveMode', 'Piece', 'PieceKind', 'MOVE_TABLES',
    # Search
    'Solver', 'SearchResult',
    # Squares
    'decode_square', 'encode_square', 'apply_offset', 'is_valid_square', 'ALL_SQUARES',
    # Layouts
    'Layout', 'PieceEntry', 'DEFAULT_LAYOUT', 'default_board', 'load_layout', 'load_board', 'parse_layout',
    # Reporting
    'format_capture', 'format_solution', 'format_summary',
    # Errors
    'MeleeError', 'InvalidLayoutError', 'CaptureApplicationError', 'SearchBudgetExceeded',
]
