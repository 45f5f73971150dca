"""The Game board implements all rules that effect the `position` (in chess: the configuration of pieces on the board)"""

from dataclasses import dataclass, field
from typing import Iterator, Optional, Self

from src.core.exceptions import InvalidFENError
from src.fourchess.moves import ATTACK_RULES, MOVEMENT_RULES, Move
from src.fourchess.pieces import Color, Piece, PieceType
from src.fourchess.square import BOARD_DIMENSIONS, SQUARE_TABLE, Square

STARTING_POSITION = "/".join(
    [
        "3,yR,yN,yB,yK,yQ,yB,yN,yR,3",
        "3,yP,yP,yP,yP,yP,yP,yP,yP,3",
        "14",
        "bR,bP,10,gP,gR",
        "bN,bP,10,gP,gN",
        "bB,bP,10,gP,gB",
        "bQ,bP,10,gP,gK",
        "bK,bP,10,gP,gQ",
        "bB,bP,10,gP,gB",
        "bN,bP,10,gP,gN",
        "bR,bP,10,gP,gR",
        "14",
        "3,rP,rP,rP,rP,rP,rP,rP,rP,3",
        "3,rR,rN,rB,rQ,rK,rB,rN,rR,3",
    ]
)
EMPTY_POSITION = "/".join(["14"] * BOARD_DIMENSIONS[1])


def _empty_cells() -> list[Optional[Piece]]:
    return [None] * len(SQUARE_TABLE)


@dataclass
class Board:
    """
    One cell per on-board square, indexed by the square's dense index (see square.py).
    An empty square holds None.
    """

    cells: list[Optional[Piece]] = field(default_factory=_empty_cells)

    def __post_init__(self) -> None:
        if len(self.cells) != len(SQUARE_TABLE):
            raise ValueError(
                f"A board needs exactly {len(SQUARE_TABLE)} cells, got {len(self.cells)}"
            )

    @classmethod
    def from_fen(cls, fen_str: str) -> Self:
        """Construct a board using a given position string.

        That is, we supply the first part of the notation that denotes the board position
        ex. the top rank of the standard starting position:
        3,yR,yN,yB,yK,yQ,yB,yN,yR,3
        means:
        * 3 empty (here: missing corner) squares a14-c14
        * the yellow rook on d14, the knight on e14, etc.
        * again 3 squares in the corner
        Ranks are separated by slashes and read from the 14th rank down to the 1st.
        """
        board = cls()
        fen_by_ranks = fen_str.split("/")
        if len(fen_by_ranks) != BOARD_DIMENSIONS[1]:
            raise InvalidFENError(
                f"Expected {BOARD_DIMENSIONS[1]} ranks, got {len(fen_by_ranks)}: {fen_str}"
            )
        for rank_idx, fen_one_rank in enumerate(fen_by_ranks):
            # read from top rank (14th) to bottom rank (1st)
            rank = BOARD_DIMENSIONS[1] - rank_idx
            file = 1
            for token in fen_one_rank.split(","):
                if token.isdigit():
                    # A number denotes the amount of empty squares after each other
                    file += int(token)
                    continue
                square = Square(file, rank)
                if not square.is_within_bounds():
                    raise InvalidFENError(
                        f"Piece {token!r} placed on {square.to_algebraic()}, which is not on the board."
                    )
                board.place_piece(Piece.from_fen(token), square)
                file += 1
            if file != BOARD_DIMENSIONS[0] + 1:
                raise InvalidFENError(
                    f"Rank {rank} does not describe {BOARD_DIMENSIONS[0]} squares: {fen_one_rank!r}"
                )
        return board

    @classmethod
    def starting_position(cls) -> Self:
        return cls.from_fen(STARTING_POSITION)

    def to_fen(self) -> str:
        """Ranks are separated by slashes."""
        return "/".join(
            self._rank_to_fen(rank) for rank in range(BOARD_DIMENSIONS[1], 0, -1)
        )

    def _rank_to_fen(self, rank: int) -> str:
        """Position string of a single rank. Missing corner squares are counted as empty squares."""
        tokens: list[str] = []
        empty_count = 0
        for file in range(1, BOARD_DIMENSIONS[0] + 1):
            square = Square(file, rank)
            piece = self.piece(square) if square.is_within_bounds() else None

            if piece is not None:
                if empty_count > 0:
                    tokens.append(str(empty_count))
                    empty_count = 0
                tokens.append(piece.to_fen())
            else:
                empty_count += 1

        # if the entire rank is empty, then we still place this number in the string
        if empty_count > 0:
            tokens.append(str(empty_count))
        return ",".join(tokens)

    # --- QUERIES ---
    def piece(self, square: Square) -> Optional[Piece]:
        """Raises InvalidSquareError for squares that are not on the board"""
        return self.cells[square.index]

    def is_empty(self, square: Square) -> bool:
        return self.piece(square) is None

    def items(self) -> Iterator[tuple[Square, Optional[Piece]]]:
        return zip(SQUARE_TABLE, self.cells)

    def to_dict(self) -> dict[str, Optional[str]]:
        """Read-only view for whoever wants to draw the board: square label -> piece code (None if empty)"""
        return {
            square.to_algebraic(): (piece.to_fen() if piece else None)
            for square, piece in self.items()
        }

    def locate_pieces(self, piece: Piece) -> list[Square]:
        return [square for square, found in self.items() if found == piece]

    def locate_color(self, color: Color) -> list[Square]:
        return [
            square
            for square, piece in self.items()
            if piece is not None and piece.color == color
        ]

    def locate_king(self, color: Color) -> Optional[Square]:
        """None if the king is not on the board (in four player chess a king can get taken before its owner moves)"""
        kings = self.locate_pieces(Piece(color, PieceType.KING))
        return kings[0] if kings else None

    def is_any_occupied(self, squares: list[Square]) -> bool:
        return any(not self.is_empty(square) for square in squares)

    # --- MUTATIONS ---
    def place_piece(self, piece: Optional[Piece], square: Square) -> None:
        self.cells[square.index] = piece

    def remove_piece(self, square: Square) -> None:
        self.place_piece(None, square)

    def move_piece(self, move: Move) -> None:
        """Update the position on the board"""
        piece_that_moved = self.piece(move.from_square)
        self.remove_piece(move.from_square)
        self.place_piece(piece_that_moved, move.to_square)

    def copy(self) -> Self:
        """Pieces are immutable, so copying the list of cells is enough"""
        return type(self)(list(self.cells))

    # --- MOVE GENERATION / ATTACKS ---
    def generate_candidate_moves(self, color: Color) -> list[Move]:
        """
        Before knowing the set of legal moves, we find candidate moves, which will later be tested for legality
        (making sure it does not put yourself in check.)

        Every piece of the given color is tested against every square of the board.
        You cannot land on one of your own pieces.

        ---
        NOTE: En passant and castling are taken care of in the Game class later.
        """
        candidate_moves: list[Move] = []
        for starting_square in self.locate_color(color):
            piece = self.piece(starting_square)
            assert piece is not None
            movement_rule = MOVEMENT_RULES[piece.type]
            for target_square, target in self.items():
                if target is not None and target.color == color:
                    continue
                if movement_rule(starting_square, target_square, self):
                    candidate_moves.append(Move(starting_square, target_square))
        return candidate_moves

    def is_under_attack(self, square: Square, by_colors: list[Color]) -> bool:
        """Is any piece of the given colors threatening the square? Stops at the first attacker found."""
        for attacker_square, attacker in self.items():
            if attacker is None or attacker.color not in by_colors:
                continue
            attack_rule = ATTACK_RULES[attacker.type]
            if attack_rule(attacker_square, square, self):
                return True
        return False

    def is_any_under_attack(self, squares: list[Square], by_colors: list[Color]) -> bool:
        return any(self.is_under_attack(square, by_colors) for square in squares)

    def is_check(self, color: Color) -> bool:
        """Is the king of the given color attacked by any of the other armies?"""
        king_square = self.locate_king(color)
        if king_square is None:
            return False
        opponents = [other for other in Color if other != color]
        return self.is_under_attack(king_square, opponents)
