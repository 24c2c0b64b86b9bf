"""Starting layouts: the built-in puzzle and JSON layout files."""

import json
from typing import List, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

from .board import Board, Color, Piece, PieceKind
from .exceptions import InvalidLayoutError
from .squares import is_valid_square


class PieceEntry(BaseModel):
    """One piece of a layout file."""

    kind: str  # "B", "K", "N", "P", "Q" or "R"
    color: str  # "w" or "b"
    square: str  # e.g., "f3"

    @field_validator("kind")
    @classmethod
    def _check_kind(cls, value: str) -> str:
        value = value.upper()
        PieceKind(value)
        return value

    @field_validator("color")
    @classmethod
    def _check_color(cls, value: str) -> str:
        value = value.lower()
        Color(value)
        return value

    @field_validator("square")
    @classmethod
    def _check_square(cls, value: str) -> str:
        value = value.lower()
        if not is_valid_square(value):
            raise ValueError(f"invalid square {value!r}")
        return value

    def to_piece(self) -> Piece:
        return Piece(PieceKind(self.kind), Color(self.color), self.square)


class Layout(BaseModel):
    """A named starting position."""

    name: Optional[str] = None
    pieces: List[PieceEntry] = Field(min_length=1)

    def to_board(self) -> Board:
        return Board(pieces=[entry.to_piece() for entry in self.pieces])


# Listing order fixes the order in which solutions are found.
DEFAULT_LAYOUT = Layout(
    name="melee-12",
    pieces=[
        PieceEntry(kind="B", color="b", square="e4"),
        PieceEntry(kind="B", color="b", square="f2"),
        PieceEntry(kind="B", color="w", square="f3"),
        PieceEntry(kind="N", color="w", square="d6"),
        PieceEntry(kind="N", color="w", square="f7"),
        PieceEntry(kind="N", color="b", square="g3"),
        PieceEntry(kind="P", color="w", square="d3"),
        PieceEntry(kind="P", color="b", square="e5"),
        PieceEntry(kind="P", color="w", square="g2"),
        PieceEntry(kind="P", color="b", square="h3"),
        PieceEntry(kind="Q", color="b", square="c2"),
        PieceEntry(kind="R", color="w", square="g1"),
    ],
)


def default_board() -> Board:
    """Build the built-in 12-piece puzzle."""
    return DEFAULT_LAYOUT.to_board()


def parse_layout(data: dict) -> Layout:
    """Validate layout data already decoded from JSON."""
    try:
        return Layout.model_validate(data)
    except ValidationError as e:
        raise InvalidLayoutError(f"Invalid layout: {e}", {"errors": e.errors()}) from e


def load_layout(path: str) -> Layout:
    """Load a layout from a JSON file.

    Args:
        path: Path to a file shaped like {"name": ..., "pieces": [{"kind", "color", "square"}, ...]}

    Returns:
        The validated layout
    """
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise InvalidLayoutError(f"Layout file {path} is not valid JSON: {e}", {"path": path}) from e
    return parse_layout(data)


def load_board(path: str) -> Board:
    return load_layout(path).to_board()
