"""Melee board representation and capture generation."""

from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING
from dataclasses import dataclass

from .exceptions import InvalidLayoutError
from .squares import BOARD_SIZE, FILES, apply_offset, is_valid_square

if TYPE_CHECKING:
    from .solver import SearchResult

# A slide can cross at most 7 squares on an 8x8 board.
MAX_SLIDE_STEPS = BOARD_SIZE - 1


class Color(Enum):
    """Piece colors."""

    WHITE = "w"  # Captures first
    BLACK = "b"

    @property
    def opposite(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceKind(Enum):
    """Piece kinds."""

    BISHOP = "B"
    KING = "K"
    KNIGHT = "N"
    PAWN = "P"
    QUEEN = "Q"
    ROOK = "R"


class MoveMode(Enum):
    """How a direction is followed."""

    JUMP = "JUMP"  # Exactly one offset
    SLIDE = "SLIDE"  # Repeated until blocked


@dataclass(frozen=True)
class Direction:
    """A move direction of a piece kind."""

    dx: int
    dy: int
    mode: MoveMode


def _jumps(offsets: Iterable[Tuple[int, int]]) -> Tuple[Direction, ...]:
    return tuple(Direction(dx, dy, MoveMode.JUMP) for dx, dy in offsets)


def _slides(offsets: Iterable[Tuple[int, int]]) -> Tuple[Direction, ...]:
    return tuple(Direction(dx, dy, MoveMode.SLIDE) for dx, dy in offsets)


DIAGONALS = [(-1, -1), (-1, 1), (1, -1), (1, 1)]
ORTHOGONALS = [(-1, 0), (0, -1), (0, 1), (1, 0)]
ALL_NEIGHBOURS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
]
KNIGHT_OFFSETS = [
    (-2, -1), (-2, 1), (-1, -2), (-1, 2),
    (1, -2), (1, 2), (2, -1), (2, 1),
]

# Direction table per (kind, color). Only pawns depend on color.
MOVE_TABLES: Dict[Tuple[PieceKind, Color], Tuple[Direction, ...]] = {}
for _color in Color:
    MOVE_TABLES[(PieceKind.BISHOP, _color)] = _slides(DIAGONALS)
    MOVE_TABLES[(PieceKind.KING, _color)] = _jumps(ALL_NEIGHBOURS)
    MOVE_TABLES[(PieceKind.KNIGHT, _color)] = _jumps(KNIGHT_OFFSETS)
    MOVE_TABLES[(PieceKind.QUEEN, _color)] = _slides(DIAGONALS + ORTHOGONALS)
    MOVE_TABLES[(PieceKind.ROOK, _color)] = _slides(ORTHOGONALS)
MOVE_TABLES[(PieceKind.PAWN, Color.WHITE)] = _jumps([(-1, 1), (1, 1)])
MOVE_TABLES[(PieceKind.PAWN, Color.BLACK)] = _jumps([(-1, -1), (1, -1)])


@dataclass
class Piece:
    """Represents a piece on the board.

    Kind and color never change; the square moves whenever the piece captures.
    """

    kind: PieceKind
    color: Color
    square: str

    def __str__(self) -> str:
        return f"{self.code} {self.square}"

    @property
    def code(self) -> str:
        """Kind letter followed by color letter, e.g. 'Nb'."""
        return f"{self.kind.value}{self.color.value}"

    @property
    def directions(self) -> Tuple[Direction, ...]:
        return MOVE_TABLES[(self.kind, self.color)]

    @classmethod
    def from_code(cls, code: str, square: str) -> "Piece":
        """Parse a piece code such as 'Bw' placed on a square."""
        if len(code) != 2:
            raise InvalidLayoutError(f"Invalid piece code: {code!r}", {"code": code})
        try:
            kind = PieceKind(code[0].upper())
            color = Color(code[1].lower())
        except ValueError as e:
            raise InvalidLayoutError(f"Invalid piece code: {code!r}", {"code": code}) from e
        if not is_valid_square(square):
            raise InvalidLayoutError(f"Invalid square: {square!r}", {"square": square})
        return cls(kind, color, square)

    def duplicate(self) -> "Piece":
        return Piece(self.kind, self.color, self.square)

    def legal_captures(self, board: "Board") -> List["Capture"]:
        """Get all captures this piece can make on the board.

        Jump directions look at a single square. Slide directions scan outward
        and stop at the first occupied square, which is captured only if it
        holds an enemy piece.
        """
        captures = []

        for direction in self.directions:
            if direction.mode == MoveMode.JUMP:
                target_square = apply_offset(self.square, direction, 1)
                if target_square is None:
                    continue
                target = board.find_piece_at(target_square)
                if target is not None and target.color != self.color:
                    captures.append(Capture(self.duplicate(), target.duplicate()))
            else:
                for steps in range(1, MAX_SLIDE_STEPS + 1):
                    target_square = apply_offset(self.square, direction, steps)
                    if target_square is None:
                        break
                    target = board.find_piece_at(target_square)
                    if target is None:
                        continue
                    if target.color != self.color:
                        captures.append(Capture(self.duplicate(), target.duplicate()))
                    # Any piece ends the slide, ally or not
                    break

        return captures


@dataclass(frozen=True)
class Capture:
    """An attacker taking a target, as seen on the board that generated it."""

    attacker: Piece
    target: Piece

    def __str__(self) -> str:
        return f"{self.attacker} -> {self.target}"


class Board:
    """Melee board: an ordered list of pieces with unique squares."""

    def __init__(
        self,
        pieces: Optional[List[Piece]] = None,
        custom_setup: Optional[Dict[str, str]] = None,
    ):
        """Initialize board.

        Args:
            pieces: Optional list of pieces, kept in the given order
            custom_setup: Optional dictionary mapping squares (e.g., "e4") to piece codes (e.g., "Bb" for Black Bishop)
        """
        self.pieces: List[Piece] = []
        if pieces:
            self.pieces.extend(pieces)
        if custom_setup:
            for square, code in custom_setup.items():
                self.pieces.append(Piece.from_code(code, square))
        self._check_unique_squares()

    def _check_unique_squares(self) -> None:
        seen = set()
        for piece in self.pieces:
            if piece.square in seen:
                raise InvalidLayoutError(
                    f"Two pieces share square {piece.square}", {"square": piece.square}
                )
            seen.add(piece.square)

    def __len__(self) -> int:
        return len(self.pieces)

    def __repr__(self) -> str:
        return f"Board({', '.join(str(p) for p in self.pieces)})"

    def find_piece_at(self, square: str) -> Optional[Piece]:
        """Get the piece on a square, or None if it is empty."""
        for piece in self.pieces:
            if piece.square == square:
                return piece
        return None

    def pieces_of(self, color: Color) -> List[Piece]:
        return [piece for piece in self.pieces if piece.color == color]

    def duplicate(self) -> "Board":
        """Create a copy of the board that shares no pieces with this one."""
        new_board = Board()
        new_board.pieces = [piece.duplicate() for piece in self.pieces]
        return new_board

    def apply_capture(self, capture: Capture) -> bool:
        """Apply a capture on the board.

        Removes the piece on the target square, then moves the piece standing
        on the attacker's square onto it.

        Returns:
            True if exactly one piece was removed, False otherwise
        """
        initial_count = len(self.pieces)

        for i, piece in enumerate(self.pieces):
            if piece.square == capture.target.square:
                del self.pieces[i]
                break

        attacker = self.find_piece_at(capture.attacker.square)
        if attacker is not None:
            attacker.square = capture.target.square

        return len(self.pieces) == initial_count - 1

    def solve(self, **solver_options) -> "SearchResult":
        """Solve the puzzle from this board with White to capture first.

        Keyword arguments are passed on to Solver.
        """
        from .solver import Solver

        return Solver(**solver_options).solve(self)

    def render(self) -> str:
        """Draw the board as text, rank 8 on top.

        White pieces are upper case and Black pieces lower case.
        """
        rows = []
        for rank in range(BOARD_SIZE, 0, -1):
            cells = []
            for file_char in FILES:
                piece = self.find_piece_at(f"{file_char}{rank}")
                if piece is None:
                    cells.append(".")
                elif piece.color == Color.WHITE:
                    cells.append(piece.kind.value)
                else:
                    cells.append(piece.kind.value.lower())
            rows.append(f"{rank} {' '.join(cells)}")
        rows.append(f"  {' '.join(FILES)}")
        return "\n".join(rows)
