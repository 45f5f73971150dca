"""Orchestration of communication from the outside world (UI / CLI / network) to the rules engine, and the reverse direction."""

import logging
from typing import Optional

from src.api.models import (
    BoardResponse,
    CommandResponse,
    GameResponse,
    LegalMovesResponse,
    MoveRequest,
)
from src.core.config import EngineSettings
from src.core.exceptions import GameError
from src.core.models import GameModel
from src.core.shared_types import Color
from src.fourchess import pieces
from src.fourchess.game import Game

logger = logging.getLogger(__name__)


class ChessService:
    """
    Thin wrapper around a single Game.

    The Game raises on every rejected command; the service turns that into a response with a tagged reason,
    so callers can always tell a failed command from a successful one.
    """

    def __init__(
        self,
        settings: Optional[EngineSettings] = None,
        game: Optional[Game] = None,
    ) -> None:
        self.settings = settings or EngineSettings()
        self.game = game or Game.new_game(self.settings.starting_fen)

    @classmethod
    def from_model(
        cls, model: GameModel, settings: Optional[EngineSettings] = None
    ) -> "ChessService":
        """Pick up a game that was stored earlier"""
        return cls(settings=settings, game=Game.from_model(model))

    # -- Move command surface --
    def move(self, request: MoveRequest) -> CommandResponse:
        """Make a move attempt for the side to move."""
        promote_to = pieces.PieceType[request.promote_to.name]
        try:
            move = self.game.move(request.from_square, request.to_square, promote_to)
        except GameError as error:
            return self._failure(error)
        return CommandResponse(
            success=True,
            move=move.to_uci(),
            fen_state=self.game.state.to_fen(),
        )

    def undo(self) -> CommandResponse:
        """Take back the last move."""
        try:
            self.game.undo()
        except GameError as error:
            return self._failure(error)
        return CommandResponse(success=True, fen_state=self.game.state.to_fen())

    # -- Board query surface --
    def board(self) -> BoardResponse:
        """Everything a renderer needs: what stands on every square, and whose turn it is."""
        return BoardResponse(
            squares=self.game.board.to_dict(),
            color_to_move=self._to_boundary_color(self.game.color_to_move),
            in_check=self.game.in_check(),
        )

    def legal_moves(self) -> LegalMovesResponse:
        return LegalMovesResponse(
            color=self._to_boundary_color(self.game.color_to_move),
            legal_moves=[move.to_uci() for move in self.game.legal_moves()],
        )

    def game_state(self) -> GameResponse:
        model = self.to_model()
        # Before the first move gets played, the starting state equals the current state.
        starting_fen = model.history_fen[0] if model.history_fen else model.current_fen
        return GameResponse(
            fen_state=model.current_fen,
            starting_state=starting_fen,
            move_history=model.moves_uci,
        )

    def to_model(self) -> GameModel:
        return self.game.to_model()

    # -- Internal helpers --
    def _failure(self, error: GameError) -> CommandResponse:
        logger.warning("Command rejected (%s): %s", error.reason, error)
        return CommandResponse(
            success=False,
            reason=error.reason,
            message=str(error),
            fen_state=self.game.state.to_fen(),
        )

    @staticmethod
    def _to_boundary_color(color: pieces.Color) -> Color:
        return Color[color.name]
