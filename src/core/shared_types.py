"""
Type definitions used across layers
"""

from enum import StrEnum


class FailureReason(StrEnum):
    """Tags attached to every rejected command, so callers can tell failures apart without parsing messages."""

    INVALID_SQUARE = "invalid square"
    INVALID_PROMOTION = "invalid promotion"
    NO_PIECE_TO_MOVE = "no piece to move"
    NOT_YOUR_PIECE = "not your piece"
    WRONG_TURN = "wrong turn"
    ILLEGAL_MOVE = "illegal move"
    MOVES_INTO_CHECK = "moves into check"
    EMPTY_HISTORY = "empty history"
    INVALID_FEN = "invalid fen"
    INVALID_REQUEST = "invalid request"


# --- Color and PieceType for the boundary layer. The domain versions live in src/fourchess/pieces.py
# --- NOTE Same names (Color and PieceType) as that reads clearly; let the imports show which versions are used where


class Color(StrEnum):
    RED = "red"
    BLUE = "blue"
    YELLOW = "yellow"
    GREEN = "green"


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"
