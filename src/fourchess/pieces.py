"""Defines the four armies and the types of chess pieces"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from src.core.exceptions import InvalidFENError, InvalidPromotionError


class PieceType(Enum):
    """Values are the letters used in the position notation"""

    PAWN = "P"
    KNIGHT = "N"
    BISHOP = "B"
    ROOK = "R"
    QUEEN = "Q"
    KING = "K"


class Color(Enum):
    """Values are the letters used in the position notation. Declaration order is the turn order."""

    RED = "r"
    BLUE = "b"
    YELLOW = "y"
    GREEN = "g"


TURN_ORDER: tuple[Color, ...] = tuple(Color)

FEN_TO_PIECE: dict[str, PieceType] = {piece.value: piece for piece in PieceType}
FEN_TO_COLOR: dict[str, Color] = {color.value: color for color in Color}

# Vector (delta file, delta rank) in which the pawns of each color move: everybody faces the center of the cross.
PAWN_DIRECTIONS: dict[Color, tuple[int, int]] = {
    Color.RED: (0, 1),
    Color.BLUE: (1, 0),
    Color.YELLOW: (0, -1),
    Color.GREEN: (-1, 0),
}

PROMOTION_OPTIONS: tuple[PieceType, ...] = (
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
)


def next_color(color: Color) -> Color:
    """Red -> Blue -> Yellow -> Green -> Red"""
    return TURN_ORDER[(TURN_ORDER.index(color) + 1) % len(TURN_ORDER)]


def parse_promotion(choice: PieceType | str) -> PieceType:
    """
    Accepts a PieceType, a single letter ('q', 'N') or a name ('queen').
    Only knights, bishops, rooks and queens are valid choices.
    """
    piece_type: PieceType | None
    if isinstance(choice, PieceType):
        piece_type = choice
    else:
        text = str(choice).strip()
        piece_type = FEN_TO_PIECE.get(text.upper()) or PieceType.__members__.get(
            text.upper()
        )

    if piece_type not in PROMOTION_OPTIONS:
        raise InvalidPromotionError(
            f"Cannot promote into {choice!r}. Pick one from {','.join(p.name.lower() for p in PROMOTION_OPTIONS)}"
        )
    return piece_type


@dataclass(frozen=True)
class Piece:
    color: Color
    type: PieceType

    @classmethod
    def from_fen(cls, code: str) -> Self:
        """Two characters: lower case color letter + upper case piece letter, ex. 'rK' is the red king"""
        if len(code) != 2 or code[0] not in FEN_TO_COLOR or code[1] not in FEN_TO_PIECE:
            raise InvalidFENError(f"Cannot interpret {code!r} as a piece.")
        return cls(FEN_TO_COLOR[code[0]], FEN_TO_PIECE[code[1]])

    def to_fen(self) -> str:
        return f"{self.color.value}{self.type.value}"

    def promoted_to(self, new_type: PieceType) -> Self:
        """Pieces are immutable values: promotion creates a new piece of the same color."""
        return type(self)(self.color, new_type)
