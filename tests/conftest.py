"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures required for testing multiple layers.
"""

from typing import Callable, Optional

import pytest

from src.fourchess.board import EMPTY_POSITION, Board
from src.fourchess.castling import CastlingDirection
from src.fourchess.game import Game
from src.fourchess.pieces import Color, Piece
from src.fourchess.square import Square
from src.fourchess.state import GameState

# Quiet king shuffles for blue, yellow and green: two rounds bring every king back home.
FILLER_MOVES: dict[Color, tuple[str, str]] = {
    Color.BLUE: ("a7b7", "b7a7"),
    Color.YELLOW: ("g14g13", "g13g14"),
    Color.GREEN: ("n8m8", "m8n8"),
}

BoardFactory = Callable[[dict[str, str]], Board]
GameFactory = Callable[..., Game]
PlayMoves = Callable[..., None]
PlayRound = Callable[[Game, str, int], None]


@pytest.fixture
def kings_only() -> dict[str, str]:
    """One king per army, on its starting square. Every army needs a piece so it can take its turn."""
    return {"h1": "rK", "a7": "bK", "g14": "yK", "n8": "gK"}


@pytest.fixture
def board_with_pieces() -> BoardFactory:
    """Call the inner function with a mapping of square name -> piece code, ex. {'h1': 'rK'}"""

    def _create_board(pieces: dict[str, str]) -> Board:
        board = Board.from_fen(EMPTY_POSITION)
        for square_name, code in pieces.items():
            board.place_piece(Piece.from_fen(code), Square.from_algebraic(square_name))
        return board

    return _create_board


@pytest.fixture
def game_with_pieces(board_with_pieces: BoardFactory) -> GameFactory:
    """
    Call the inner function with the pieces to place (see board_with_pieces).
    By default no castling rights, red to move.
    """

    def _create_game(
        pieces: dict[str, str],
        color_to_move: Color = Color.RED,
        castling_rights: Optional[dict[CastlingDirection, bool]] = None,
    ) -> Game:
        state = GameState(
            board=board_with_pieces(pieces),
            color_to_move=color_to_move,
            castling_rights=castling_rights
            or {direction: False for direction in CastlingDirection},
        )
        return Game(state=state)

    return _create_game


@pytest.fixture
def play_moves() -> PlayMoves:
    """Call the inner function with a game and the moves to play, in order."""

    def _play(game: Game, *moves_uci: str) -> None:
        for move_uci in moves_uci:
            game.make_move(move_uci)

    return _play


@pytest.fixture
def play_round(play_moves: PlayMoves) -> PlayRound:
    """Red plays the given move, the other three armies shuffle their king (see FILLER_MOVES)."""

    def _play_round(game: Game, red_move: str, round_number: int = 0) -> None:
        fillers = [FILLER_MOVES[color][round_number % 2] for color in FILLER_MOVES]
        play_moves(game, red_move, *fillers)

    return _play_round
