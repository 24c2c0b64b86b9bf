"""Algebraic square helpers for the 8x8 melee board.

Squares are stored as labels ("a1".."h8") and decoded to 1-based (x, y)
pairs only while a move is being calculated.
"""

from typing import List, Optional, Tuple, TYPE_CHECKING

if TYPE_CHECKING:
    from .board import Direction

BOARD_SIZE = 8
FILES = "abcdefgh"


def decode_square(label: str) -> Tuple[int, int]:
    """Convert a square label (e.g., 'e4') to 1-based (x, y)."""
    if len(label) != 2 or label[0] not in FILES or label[1] not in "12345678":
        raise ValueError(f"Invalid square: {label!r}")
    return FILES.index(label[0]) + 1, int(label[1])


def encode_square(x: int, y: int) -> str:
    """Convert 1-based (x, y) back to a square label."""
    return f"{FILES[x - 1]}{y}"


def is_on_board(x: int, y: int) -> bool:
    return 1 <= x <= BOARD_SIZE and 1 <= y <= BOARD_SIZE


def is_valid_square(label: str) -> bool:
    try:
        decode_square(label)
    except ValueError:
        return False
    return True


def apply_offset(label: str, direction: "Direction", steps: int) -> Optional[str]:
    """Move from a square along a direction.

    Args:
        label: Start square
        direction: Direction to apply
        steps: How often the direction is repeated

    Returns:
        The resulting square, or None if it falls off the board
    """
    x, y = decode_square(label)
    x += steps * direction.dx
    y += steps * direction.dy
    if not is_on_board(x, y):
        return None
    return encode_square(x, y)


ALL_SQUARES: List[str] = [
    encode_square(x, y) for y in range(1, BOARD_SIZE + 1) for x in range(1, BOARD_SIZE + 1)
]
