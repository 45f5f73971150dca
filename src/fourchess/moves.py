"""
Geometry/Base movement and capturing/attacking rules

Key idea: Use strategy pattern to define, per piece type, a predicate
    "can the piece on `from_square` reach / attack `to_square`?"

Candidate moves are the cross product of a player's pieces with every square of the board, filtered by these predicates.
Legality (not leaving your own king under attack) is checked later by Game.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional, Protocol, Self

from src.core.exceptions import InvalidSquareError
from src.fourchess.castling import CASTLING_RULES, CastlingDirection
from src.fourchess.pieces import (
    PAWN_DIRECTIONS,
    Color,
    Piece,
    PieceType,
    parse_promotion,
)
from src.fourchess.square import BOARD_DIMENSIONS, Square

UCI_PATTERN = re.compile(r"^([a-z]\d{1,2})([a-z]\d{1,2})([a-z])?$")


class Board(Protocol):
    """Just the parts the movement strategies need"""

    def piece(self, square: Square) -> Optional[Piece]: ...
    def is_empty(self, square: Square) -> bool: ...


Vector = tuple[int, int]
DIAGONALS: list[Vector] = [(1, 1), (-1, 1), (1, -1), (-1, -1)]


@dataclass
class Move:
    """basic definition of a move to be made"""

    from_square: Square
    to_square: Square
    promote_to: Optional[PieceType] = None
    castling_direction: Optional[CastlingDirection] = None
    is_en_passant: bool = False
    # only for en passant: where the pawn that gets taken is standing
    captured_square: Optional[Square] = None

    @classmethod
    def from_uci(cls, uci: str) -> Self:
        """
        UCI-like notation, adapted to the two-digit ranks of the four player board
        ---

        examples:
        * "h2h4": move the piece that was on h2 to h4
        * "h13h14q" : (pawn) moves from h13 to h14 and promotes to a queen (the q)
        * "h13h14k" : raises InvalidPromotionError, a pawn cannot become a king

        NOTE: Castling / En Passant will be set later by Game class
        """
        match = UCI_PATTERN.match(uci.strip().lower())
        if match is None:
            raise InvalidSquareError(f"Cannot interpret {uci!r} as a move.")
        from_sq = Square.from_algebraic(match.group(1))
        to_sq = Square.from_algebraic(match.group(2))
        move = cls(from_sq, to_sq)
        if match.group(3):
            move.promote_to = parse_promotion(match.group(3))
        return move

    def to_uci(self) -> str:
        """Convert into UCI notation"""
        piece_char = self.promote_to.value.lower() if self.promote_to else ""
        return f"{self.from_square.to_algebraic()}{self.to_square.to_algebraic()}{piece_char}"

    def same_squares(self, other: "Move") -> bool:
        return (self.from_square, self.to_square) == (
            other.from_square,
            other.to_square,
        )


@dataclass(frozen=True)
class AcceptedMove:
    """Snapshot of the pieces involved, taken before the board gets updated."""

    move: Move
    moving_piece: Piece
    captured_piece: Optional[Piece]

    @classmethod
    def from_move_and_board(cls, move: Move, board: Board) -> Self:
        moving_piece = board.piece(move.from_square)
        if moving_piece is None:
            raise InvalidSquareError(
                f"No piece on {move.from_square.to_algebraic()} to accept a move for."
            )
        captured_square = (
            move.captured_square if move.is_en_passant else move.to_square
        )
        captured_piece = board.piece(captured_square) if captured_square else None
        return cls(move, moving_piece, captured_piece)

    @property
    def is_capture(self) -> bool:
        return self.captured_piece is not None

    @property
    def is_pawn_move(self) -> bool:
        return self.moving_piece.type == PieceType.PAWN


# --- GEOMETRY HELPERS ---
def _assert_on_board(square: Square) -> None:
    if not square.is_within_bounds():
        raise InvalidSquareError(
            f"Cannot evaluate a move starting from {square.to_algebraic()!r}: not on the board."
        )


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def delta(from_square: Square, to_square: Square) -> Vector:
    return to_square.file - from_square.file, to_square.rank - from_square.rank


def squares_between(from_square: Square, to_square: Square) -> list[Square]:
    """
    Squares strictly in between two squares that share a file, rank or diagonal.

    NOTE: these may include squares in the missing corners (a diagonal can cut across one).
    """
    df, dr = delta(from_square, to_square)
    on_a_line = (df == 0) or (dr == 0) or (abs(df) == abs(dr))
    if (df, dr) == (0, 0) or not on_a_line:
        raise ValueError(
            f"squares_between requires two distinct squares on a common line. \n from: {from_square}\n to:{to_square}"
        )
    step_f, step_r = _sign(df), _sign(dr)
    distance = max(abs(df), abs(dr))
    return [from_square.offset(step_f * i, step_r * i) for i in range(1, distance)]


def is_path_clear(from_square: Square, to_square: Square, board: Board) -> bool:
    """Sliding pieces are blocked by the first occupied square, and by the missing corners."""
    return all(
        square.is_within_bounds() and board.is_empty(square)
        for square in squares_between(from_square, to_square)
    )


def pawn_line(square: Square, color: Color) -> int:
    """How far up the board the square is, seen from the given army's side (1 = its own edge, 14 = the opposite edge)"""
    fwd_f, fwd_r = PAWN_DIRECTIONS[color]
    num_files, num_ranks = BOARD_DIMENSIONS
    if fwd_r:
        return square.rank if fwd_r > 0 else num_ranks + 1 - square.rank
    return square.file if fwd_f > 0 else num_files + 1 - square.file


def is_pawn_start_square(square: Square, color: Color) -> bool:
    return pawn_line(square, color) == 2


def is_promotion_square(square: Square, color: Color) -> bool:
    return pawn_line(square, color) == BOARD_DIMENSIONS[1]


def pawn_capture_squares(square: Square, color: Color) -> list[Square]:
    """The two squares diagonally in front of a pawn"""
    fwd_f, fwd_r = PAWN_DIRECTIONS[color]
    # perpendicular to the direction of travel
    side_f, side_r = fwd_r, fwd_f
    return [
        square.offset(fwd_f + side_f, fwd_r + side_r),
        square.offset(fwd_f - side_f, fwd_r - side_r),
    ]


def _pawn_color(
    square: Square, board: Board, color: Optional[Color]
) -> Optional[Color]:
    if color is not None:
        return color
    piece = board.piece(square)
    return piece.color if piece else None


# --- ATTACKING RULES ---
def is_king_threat(from_square: Square, to_square: Square, board: Board) -> bool:
    """The king can move by a single square at the time, in any of the eight directions."""
    _assert_on_board(from_square)
    if not to_square.is_within_bounds():
        return False
    df, dr = delta(from_square, to_square)
    return max(abs(df), abs(dr)) == 1


def is_rook_threat(from_square: Square, to_square: Square, board: Board) -> bool:
    """Rooks move either horizontally or vertically, as long as nothing is in the way"""
    _assert_on_board(from_square)
    if not to_square.is_within_bounds():
        return False
    df, dr = delta(from_square, to_square)
    # exactly one of the two must be zero (both zero: not moving at all)
    if (df == 0) == (dr == 0):
        return False
    return is_path_clear(from_square, to_square, board)


def is_bishop_threat(from_square: Square, to_square: Square, board: Board) -> bool:
    """Bishops move diagonally: |delta_rank| = |delta_file|"""
    _assert_on_board(from_square)
    if not to_square.is_within_bounds():
        return False
    df, dr = delta(from_square, to_square)
    if df == 0 or abs(df) != abs(dr):
        return False
    return is_path_clear(from_square, to_square, board)


def is_knight_threat(from_square: Square, to_square: Square, board: Board) -> bool:
    """Knights jump: the offset is one of the L-shapes (1, 2) or (2, 1). Nothing can block them."""
    _assert_on_board(from_square)
    if not to_square.is_within_bounds():
        return False
    df, dr = delta(from_square, to_square)
    return sorted((abs(df), abs(dr))) == [1, 2]


def is_queen_threat(from_square: Square, to_square: Square, board: Board) -> bool:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return is_rook_threat(from_square, to_square, board) or is_bishop_threat(
        from_square, to_square, board
    )


def is_pawn_threat(
    from_square: Square,
    to_square: Square,
    board: Board,
    color: Optional[Color] = None,
) -> bool:
    """
    Pawns take diagonally
    ----

    Occupancy of the target square is ignored: this answers "does this pawn threaten that square?"
    The pawn's color is read from the board, unless given explicitly.
    """
    _assert_on_board(from_square)
    if not to_square.is_within_bounds():
        return False
    pawn_color = _pawn_color(from_square, board, color)
    if pawn_color is None:
        return False
    return to_square in pawn_capture_squares(from_square, pawn_color)


def is_pawn_push(
    from_square: Square,
    to_square: Square,
    board: Board,
    color: Optional[Color] = None,
) -> bool:
    """
    A pawn:
    - moves by a single square forward, onto an empty square.
    - It can move by two in their first move (so when on their starting line), if both squares are empty.
    """
    _assert_on_board(from_square)
    if not to_square.is_within_bounds():
        return False
    pawn_color = _pawn_color(from_square, board, color)
    if pawn_color is None:
        return False

    fwd_f, fwd_r = PAWN_DIRECTIONS[pawn_color]
    one_step = from_square.offset(fwd_f, fwd_r)
    if to_square == one_step:
        return board.is_empty(one_step)

    two_steps = one_step.offset(fwd_f, fwd_r)
    if to_square == two_steps and is_pawn_start_square(from_square, pawn_color):
        return (
            one_step.is_within_bounds()
            and board.is_empty(one_step)
            and board.is_empty(two_steps)
        )
    return False


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsThreatFn = Callable[[Square, Square, Board], bool]
ATTACK_RULES: dict[PieceType, IsThreatFn] = {
    PieceType.PAWN: is_pawn_threat,
    PieceType.KNIGHT: is_knight_threat,
    PieceType.BISHOP: is_bishop_threat,
    PieceType.ROOK: is_rook_threat,
    PieceType.QUEEN: is_queen_threat,
    PieceType.KING: is_king_threat,
}


# --- MOVEMENT RULES ---
def is_pawn_move(from_square: Square, to_square: Square, board: Board) -> bool:
    """
    Pawn pushes go straight forward; diagonal steps only when taking a piece of another army.

    NOTE: En passant will be taken care of separately (see `en_passant_moves()`)
    """
    if is_pawn_push(from_square, to_square, board):
        return True
    if not is_pawn_threat(from_square, to_square, board):
        return False
    mover = board.piece(from_square)
    target = board.piece(to_square)
    return mover is not None and target is not None and target.color != mover.color


# -- STRATEGY PATTERN: MOVEMENT RULES ---
# Apart from the pawn, every piece moves the way it attacks.
MOVEMENT_RULES: dict[PieceType, IsThreatFn] = {
    **ATTACK_RULES,
    PieceType.PAWN: is_pawn_move,
}


# -- CASTLING MOVES ---
def castling_path(direction: CastlingDirection) -> list[Square]:
    """The squares between king and rook: these all need to be empty to castle."""
    rule = CASTLING_RULES[direction]
    return squares_between(rule.king_from, rule.rook_from)


def castling_king_path(direction: CastlingDirection) -> list[Square]:
    """
    The square(s) the king passes over: none of these may be under attack.

    NOTE: Landing on an attacked square is caught like any other move that walks into check.
    """
    rule = CASTLING_RULES[direction]
    return squares_between(rule.king_from, rule.king_to)


def candidate_castling_move(direction: CastlingDirection) -> Move:
    rule = CASTLING_RULES[direction]
    return Move(rule.king_from, rule.king_to, castling_direction=direction)


# -- EN PASSANT MOVES ---
def en_passant_target(move: Move, moving_piece: Piece) -> Optional[Square]:
    """A pawn advancing two squares leaves the square it passed over as the en passant target."""
    if moving_piece.type != PieceType.PAWN:
        return None
    fwd_f, fwd_r = PAWN_DIRECTIONS[moving_piece.color]
    passed_square = move.from_square.offset(fwd_f, fwd_r)
    if move.to_square != passed_square.offset(fwd_f, fwd_r):
        return None
    return passed_square


def en_passant_moves(
    en_passant: dict[Color, Optional[Square]], color: Color, board: Board
) -> list[Move]:
    """
    Given the en passant targets of all the other armies, find the pawns of `color` that can take on them.

    The pawn that gets taken stands one square beyond the target, in the direction its own army moves.
    """
    own_pawn = Piece(color, PieceType.PAWN)
    moves: list[Move] = []
    for other_color, target in en_passant.items():
        if other_color == color or target is None:
            continue
        fwd_f, fwd_r = PAWN_DIRECTIONS[other_color]
        victim_square = target.offset(fwd_f, fwd_r)
        if not (target.is_within_bounds() and victim_square.is_within_bounds()):
            continue
        # the pawn might have been taken (or the square filled) in the meantime
        if not board.is_empty(target):
            continue
        if board.piece(victim_square) != Piece(other_color, PieceType.PAWN):
            continue

        # any capturing pawn stands diagonally next to the target
        for df, dr in DIAGONALS:
            square = target.offset(df, dr)
            if not square.is_within_bounds() or board.piece(square) != own_pawn:
                continue
            if is_pawn_threat(square, target, board, color):
                moves.append(
                    Move(
                        from_square=square,
                        to_square=target,
                        is_en_passant=True,
                        captured_square=victim_square,
                    )
                )
    return moves


# -- PAWN PROMOTION MOVES --
def is_pawn_push_to_promotion_square(move: Move, board: Board) -> bool:
    """check if the move is a pawn move that reaches the opposite edge of the board (seen from the pawn's army)"""
    moving_piece = board.piece(move.from_square)
    if moving_piece is None or moving_piece.type != PieceType.PAWN:
        return False
    return is_promotion_square(move.to_square, moving_piece.color)
