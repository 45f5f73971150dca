"""
Everything that describes where a game stands (and therefore needs to be saved to undo a move).
"""

from dataclasses import dataclass, field
from typing import Optional, Self

from src.fourchess.board import Board
from src.fourchess.castling import CastlingDirection, castling_from_fen, castling_to_fen
from src.fourchess.fen import (
    STARTING_FEN,
    en_passant_from_fen,
    en_passant_to_fen,
    split_fen,
)
from src.fourchess.pieces import FEN_TO_COLOR, TURN_ORDER, Color, Piece
from src.fourchess.square import Square


def _no_en_passant() -> dict[Color, Optional[Square]]:
    return {color: None for color in TURN_ORDER}


def _all_castling_rights() -> dict[CastlingDirection, bool]:
    return {direction: True for direction in CastlingDirection}


@dataclass(frozen=True)
class HistoryEntry:
    """Immutable snapshot of a GameState. Two snapshots of the same state compare equal."""

    board: tuple[Optional[Piece], ...]
    castling_rights: tuple[tuple[CastlingDirection, bool], ...]
    en_passant: tuple[tuple[Color, Optional[Square]], ...]
    half_move_clock: int
    move_number: int
    color_to_move: Color


@dataclass
class GameState:
    """
    The live data of a game. The part that can be encoded in the position notation (see fen.py).
    """

    board: Board = field(default_factory=Board.starting_position)
    color_to_move: Color = Color.RED
    castling_rights: dict[CastlingDirection, bool] = field(
        default_factory=_all_castling_rights
    )
    en_passant: dict[Color, Optional[Square]] = field(default_factory=_no_en_passant)
    half_move_clock: int = 0
    move_number: int = 1

    @classmethod
    def from_fen(cls, fen: str) -> Self:
        """Parse the notation into data"""
        (
            position,
            active_color,
            castling_str,
            en_passant_str,
            half_move_clock,
            move_number,
        ) = split_fen(fen)

        return cls(
            board=Board.from_fen(position),
            color_to_move=FEN_TO_COLOR[active_color],
            castling_rights=castling_from_fen(castling_str),
            en_passant=en_passant_from_fen(en_passant_str),
            half_move_clock=int(half_move_clock),
            move_number=int(move_number),
        )

    def to_fen(self) -> str:
        """reverse operation: write the notation from the given data"""
        castling_str = castling_to_fen(self.castling_rights)
        en_passant_str = en_passant_to_fen(self.en_passant)
        return (
            f"{self.board.to_fen()} {self.color_to_move.value} {castling_str} "
            f"{en_passant_str} {self.half_move_clock} {self.move_number}"
        )

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_FEN)

    # --- SNAPSHOTS ---
    def snapshot(self) -> HistoryEntry:
        return HistoryEntry(
            board=tuple(self.board.cells),
            castling_rights=tuple(
                (direction, self.castling_rights[direction])
                for direction in CastlingDirection
            ),
            en_passant=tuple((color, self.en_passant[color]) for color in TURN_ORDER),
            half_move_clock=self.half_move_clock,
            move_number=self.move_number,
            color_to_move=self.color_to_move,
        )

    @classmethod
    def from_snapshot(cls, entry: HistoryEntry) -> Self:
        state = cls()
        state.restore(entry)
        return state

    def restore(self, entry: HistoryEntry) -> None:
        """Overwrite every live field with the snapshot's values"""
        self.board = Board(list(entry.board))
        self.castling_rights = dict(entry.castling_rights)
        self.en_passant = dict(entry.en_passant)
        self.half_move_clock = entry.half_move_clock
        self.move_number = entry.move_number
        self.color_to_move = entry.color_to_move

    # --- CASTLING RIGHTS ---
    def can_castle(self, color: Color) -> bool:
        return any(
            allowed
            for direction, allowed in self.castling_rights.items()
            if direction.color == color
        )

    # --- COUNTERS ---
    def increment_half_move_counter(self) -> None:
        self.half_move_clock += 1

    def reset_half_move_counter(self) -> None:
        self.half_move_clock = 0

    def increment_move_counter(self) -> None:
        self.move_number += 1
