"""Requests and Response models"""

import re
from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidPromotionError, InvalidRequestError
from src.core.shared_types import Color, FailureReason, PieceType

SquareName = str
PieceCode = str

SQUARE_NAME = re.compile(r"^[a-z]\d{1,2}$")
PROMOTION_CHOICES = (
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.ROOK,
    PieceType.QUEEN,
)


# --- REQUEST MODELS ---
class MoveRequest(BaseModel):
    from_square: SquareName
    to_square: SquareName
    promote_to: PieceType = PieceType.QUEEN

    @field_validator(*["from_square", "to_square"])
    @classmethod
    def validate_square(cls, value: str) -> str:
        """
        Only checks the notation (a letter followed by a number).
        Whether the square exists on the board is up to the game: that is a rule, not a typo.
        """
        value = value.strip().lower()
        if not SQUARE_NAME.match(value):
            raise InvalidRequestError(f"Cannot interpret {value!r} as a square name.")
        return value

    @field_validator("promote_to")
    @classmethod
    def validate_promotion(cls, value: PieceType) -> PieceType:
        if value not in PROMOTION_CHOICES:
            raise InvalidPromotionError(
                f"Cannot promote into {value}. Pick one from {','.join(PROMOTION_CHOICES)}"
            )
        return value


# --- RESPONSE MODELS ---
class CommandResponse(BaseModel):
    """Outcome of a move or undo: either it worked, or `reason` says why nothing changed."""

    success: bool
    reason: Optional[FailureReason] = None
    message: str = ""
    move: Optional[str] = None
    fen_state: str


class BoardResponse(BaseModel):
    squares: dict[SquareName, Optional[PieceCode]]
    color_to_move: Color
    in_check: bool


class LegalMovesResponse(BaseModel):
    color: Color
    legal_moves: list[str]


class GameResponse(BaseModel):
    fen_state: str
    starting_state: str
    move_history: list[str]
