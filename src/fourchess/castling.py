"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass
from enum import Enum
from typing import Self

from src.fourchess.pieces import Color
from src.fourchess.square import Square


class CastlingDirection(Enum):
    """The eight castling directions. Values represent their encodings in the position notation."""

    RED_KING_SIDE = "rK"
    RED_QUEEN_SIDE = "rQ"
    BLUE_KING_SIDE = "bK"
    BLUE_QUEEN_SIDE = "bQ"
    YELLOW_KING_SIDE = "yK"
    YELLOW_QUEEN_SIDE = "yQ"
    GREEN_KING_SIDE = "gK"
    GREEN_QUEEN_SIDE = "gQ"

    @property
    def color(self) -> Color:
        return Color(self.value[0])


CASTLING_ORDER: tuple[CastlingDirection, ...] = tuple(CastlingDirection)


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: If castling rights have not been revoked, the king / rook should still be at their starting squares.
    """

    king_from: Square
    king_to: Square
    rook_from: Square
    rook_to: Square

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below (from CastlingDirection) more readable"""
        king_from = Square.from_algebraic(k_from)
        king_to = Square.from_algebraic(k_to)
        rook_from = Square.from_algebraic(r_from)
        rook_to = Square.from_algebraic(r_to)
        return cls(king_from, king_to, rook_from, rook_to)

    @property
    def origins(self) -> tuple[Square, Square]:
        """Any move leaving from or landing on one of these squares ends the right to castle this way."""
        return self.king_from, self.rook_from


# Every army castles the same way relative to where it sits: the king moves two squares towards the rook,
# the rook jumps over to the square the king passed.
CASTLING_RULES: dict[CastlingDirection, CastlingSquares] = {
    CastlingDirection.RED_KING_SIDE: CastlingSquares.from_algebraic(
        "h1", "j1", "k1", "i1"
    ),
    CastlingDirection.RED_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "h1", "f1", "d1", "g1"
    ),
    CastlingDirection.BLUE_KING_SIDE: CastlingSquares.from_algebraic(
        "a7", "a5", "a4", "a6"
    ),
    CastlingDirection.BLUE_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "a7", "a9", "a11", "a8"
    ),
    CastlingDirection.YELLOW_KING_SIDE: CastlingSquares.from_algebraic(
        "g14", "e14", "d14", "f14"
    ),
    CastlingDirection.YELLOW_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "g14", "i14", "k14", "h14"
    ),
    CastlingDirection.GREEN_KING_SIDE: CastlingSquares.from_algebraic(
        "n8", "n10", "n11", "n9"
    ),
    CastlingDirection.GREEN_QUEEN_SIDE: CastlingSquares.from_algebraic(
        "n8", "n6", "n4", "n7"
    ),
}


def castling_options(color: Color) -> list[CastlingDirection]:
    """The two directions belonging to a single army"""
    return [direction for direction in CASTLING_ORDER if direction.color == color]


def castling_from_fen(castle_fen: str) -> dict[CastlingDirection, bool]:
    """parse the part of the notation that encodes castling rights"""
    codes = set(castle_fen.split(","))
    return {direction: (direction.value in codes) for direction in CastlingDirection}


def castling_to_fen(castling_rights: dict[CastlingDirection, bool]) -> str:
    """create the part of the notation that encodes castling rights"""
    castling_codes = ",".join(
        direction.value for direction in CASTLING_ORDER if castling_rights[direction]
    )
    return castling_codes or "-"
