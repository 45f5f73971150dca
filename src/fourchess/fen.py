"""
Text notation of a complete game state, in the spirit of FEN (Forsyth-Edwards Notation).

<board position><active color><castling rights><en passant squares><# half move clock><move number>

* The board position is described in the Board class (comma separated tokens, ranks separated by slashes)
* The active color is one of "r", "b", "y", "g"
* Castling rights are listed as comma separated codes, ex. "rK,rQ,yK" ("-" if all rights have been revoked)
* The en passant squares are four comma separated entries, one per army in turn order: a square or "-"
* The half move clock counts the number of moves made since the last pawn move or capture.
* The move number starts at 1 and increments after every move green makes.

ex) The standard starting position:
3,yR,yN,yB,yK,yQ,yB,yN,yR,3/.../3,rR,rN,rB,rQ,rK,rB,rN,rR,3 r rK,rQ,bK,bQ,yK,yQ,gK,gQ -,-,-,- 0 1
"""

from typing import Optional

from src.core.exceptions import InvalidFENError
from src.fourchess.board import STARTING_POSITION
from src.fourchess.castling import CASTLING_ORDER
from src.fourchess.pieces import FEN_TO_COLOR, TURN_ORDER, Color, Piece
from src.fourchess.square import BOARD_DIMENSIONS, Square, is_on_board

NO_SQUARE = "-"
ALL_CASTLING_RIGHTS = ",".join(direction.value for direction in CASTLING_ORDER)
NO_EN_PASSANT = ",".join([NO_SQUARE] * len(TURN_ORDER))
STARTING_FEN = f"{STARTING_POSITION} r {ALL_CASTLING_RIGHTS} {NO_EN_PASSANT} 0 1"


def is_valid_fen(fen: str) -> bool:
    """
    Check if given string follows the notation.
    """

    # there should be 6 parts to the string
    parts = fen.split(" ")
    if len(parts) != 6:
        return False

    position, color, castling, en_passant, half_move_counter, move_counter = parts
    return (
        is_valid_position(position)
        and is_valid_color_code(color)
        and is_valid_castling_rights(castling)
        and is_valid_en_passant(en_passant)
        and is_valid_move_counter(half_move_counter)
        and is_valid_move_counter(move_counter)
    )


def is_valid_position(position: str) -> bool:
    """Only check the part of the notation for the board position."""
    num_files, num_ranks = BOARD_DIMENSIONS
    rank_fens = position.split("/")
    if len(rank_fens) != num_ranks:
        return False

    for rank_idx, rank_fen in enumerate(rank_fens):
        rank = num_ranks - rank_idx
        file = 1
        for token in rank_fen.split(","):
            if token.isdigit():
                file += int(token)
                continue
            try:
                Piece.from_fen(token)
            except InvalidFENError:
                # immediately invalidate if the token is anything else
                return False
            # no pieces in the missing corners
            if not Square(file, rank).is_within_bounds():
                return False
            file += 1

        # make sure you are creating a correctly sized board
        if file != num_files + 1:
            return False
    return True


def is_valid_color_code(color: str) -> bool:
    return color in FEN_TO_COLOR


def is_valid_castling_rights(castling: str) -> bool:
    """Either '-' or distinct, known codes"""
    if castling == NO_SQUARE:
        return True
    codes = castling.split(",")
    known_codes = {direction.value for direction in CASTLING_ORDER}
    return len(set(codes)) == len(codes) and all(code in known_codes for code in codes)


def is_valid_en_passant(en_passant: str) -> bool:
    """One entry per army, each a square on the board or a '-'"""
    entries = en_passant.split(",")
    if len(entries) != len(TURN_ORDER):
        return False
    return all(entry == NO_SQUARE or is_valid_square(entry) for entry in entries)


def is_valid_square(square: str) -> bool:
    """Valid square should be a letter for the file + a number for the rank, and not in one of the cut-off corners"""
    return is_on_board(square)


def is_valid_move_counter(counter: str) -> bool:
    return counter.isdigit()


def en_passant_from_fen(en_passant: str) -> dict[Color, Optional[Square]]:
    return {
        color: (Square.from_algebraic(entry) if entry != NO_SQUARE else None)
        for color, entry in zip(TURN_ORDER, en_passant.split(","))
    }


def en_passant_to_fen(en_passant: dict[Color, Optional[Square]]) -> str:
    entries = []
    for color in TURN_ORDER:
        square = en_passant.get(color)
        entries.append(square.to_algebraic() if square is not None else NO_SQUARE)
    return ",".join(entries)


def split_fen(fen: str) -> list[str]:
    """The six fields, after validation"""
    if not is_valid_fen(fen):
        raise InvalidFENError(f"Cannot interpret supplied string as a game state: {fen}")
    return fen.split(" ")
