"""
Exceptions raised by the domain layer.

Every error carries a `reason` tag, which the service layer passes on to its callers.
None of these are fatal: a rejected command never changes the game.
"""

from src.core.shared_types import FailureReason


class GameError(Exception):
    """Base class for everything the rules engine can reject."""

    reason: FailureReason = FailureReason.ILLEGAL_MOVE


class InvalidSquareError(GameError):
    """Square label could not be read, or names a square that is not on the board."""

    reason = FailureReason.INVALID_SQUARE


class InvalidPromotionError(GameError):
    reason = FailureReason.INVALID_PROMOTION


class WrongTurnError(GameError):
    """The piece on the origin square does not belong to the side to move."""

    reason = FailureReason.WRONG_TURN


class NoPieceToMoveError(WrongTurnError):
    reason = FailureReason.NO_PIECE_TO_MOVE


class NotYourPieceError(WrongTurnError):
    reason = FailureReason.NOT_YOUR_PIECE


class IllegalMoveError(GameError):
    reason = FailureReason.ILLEGAL_MOVE


class MovesIntoCheckError(GameError):
    """Geometry allows the move, but it leaves your own king under attack."""

    reason = FailureReason.MOVES_INTO_CHECK


class EmptyHistoryError(GameError):
    reason = FailureReason.EMPTY_HISTORY


class InvalidFENError(GameError):
    reason = FailureReason.INVALID_FEN


class InvalidRequestError(GameError):
    reason = FailureReason.INVALID_REQUEST
