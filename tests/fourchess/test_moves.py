"""Unit tests for /src/fourchess/moves.py"""

import pytest

from src.core.exceptions import InvalidPromotionError, InvalidSquareError
from src.fourchess.board import Board
from src.fourchess.castling import CastlingDirection
from src.fourchess.moves import (
    AcceptedMove,
    Move,
    castling_king_path,
    castling_path,
    en_passant_moves,
    en_passant_target,
    is_bishop_threat,
    is_king_threat,
    is_knight_threat,
    is_pawn_move,
    is_pawn_push,
    is_pawn_push_to_promotion_square,
    is_pawn_threat,
    is_queen_threat,
    is_rook_threat,
    pawn_capture_squares,
    pawn_line,
    squares_between,
)
from src.fourchess.pieces import Color, Piece, PieceType
from src.fourchess.square import Square


@pytest.fixture
def starting_board() -> Board:
    return Board.starting_position()


def _squares(*labels: str) -> list[Square]:
    return [Square.from_algebraic(label) for label in labels]


# --- MOVE NOTATION ---
@pytest.mark.parametrize(
    "uci, from_sq, to_sq, promote_to",
    [
        ("h2h4", "h2", "h4", None),
        ("b7c7", "b7", "c7", None),
        ("g14g13", "g14", "g13", None),
        ("h13h14q", "h13", "h14", PieceType.QUEEN),
        ("m7n7n", "m7", "n7", PieceType.KNIGHT),
    ],
)
def test_move_from_uci(
    uci: str, from_sq: str, to_sq: str, promote_to: PieceType | None
) -> None:
    move = Move.from_uci(uci)
    assert move.from_square == Square.from_algebraic(from_sq)
    assert move.to_square == Square.from_algebraic(to_sq)
    assert move.promote_to == promote_to
    assert move.to_uci() == uci


@pytest.mark.parametrize("uci", ["", "h2", "h2h", "22h4", "h2-h4", "h02h04"])
def test_move_from_uci_invalid(uci: str) -> None:
    with pytest.raises(InvalidSquareError):
        Move.from_uci(uci)


@pytest.mark.parametrize("uci", ["h13h14k", "h13h14p", "h13h14x"])
def test_move_from_uci_invalid_promotion(uci: str) -> None:
    """The squares are fine, the promotion letter is not"""
    with pytest.raises(InvalidPromotionError):
        Move.from_uci(uci)


# --- GEOMETRY ---
def test_squares_between_straight() -> None:
    result = squares_between(Square.from_algebraic("h1"), Square.from_algebraic("k1"))
    assert result == _squares("i1", "j1")


def test_squares_between_diagonal() -> None:
    result = squares_between(Square.from_algebraic("d4"), Square.from_algebraic("g7"))
    assert result == _squares("e5", "f6")


def test_squares_between_neighbours() -> None:
    assert squares_between(Square.from_algebraic("h1"), Square.from_algebraic("h2")) == []


@pytest.mark.parametrize("to_sq", ["h1", "i3", "j6"])
def test_squares_between_not_on_a_line(to_sq: str) -> None:
    with pytest.raises(ValueError):
        squares_between(Square.from_algebraic("h1"), Square.from_algebraic(to_sq))


@pytest.mark.parametrize(
    "square, color, expected",
    [
        ("h2", Color.RED, 2),
        ("h14", Color.RED, 14),
        ("b7", Color.BLUE, 2),
        ("n7", Color.BLUE, 14),
        ("h13", Color.YELLOW, 2),
        ("h1", Color.YELLOW, 14),
        ("m7", Color.GREEN, 2),
        ("a7", Color.GREEN, 14),
    ],
)
def test_pawn_line(square: str, color: Color, expected: int) -> None:
    """Starting line is 2 and the promotion line is 14, for every army"""
    assert pawn_line(Square.from_algebraic(square), color) == expected


@pytest.mark.parametrize(
    "square, color, expected",
    [
        ("h2", Color.RED, ["i3", "g3"]),
        ("b6", Color.BLUE, ["c7", "c5"]),
        ("f13", Color.YELLOW, ["e12", "g12"]),
        ("m7", Color.GREEN, ["l6", "l8"]),
    ],
)
def test_pawn_capture_squares(square: str, color: Color, expected: list[str]) -> None:
    result = pawn_capture_squares(Square.from_algebraic(square), color)
    assert set(result) == set(_squares(*expected))


# --- ATTACK RULES, checked against the starting position ---
@pytest.mark.parametrize(
    "from_sq, to_sq, expected",
    [
        ("a8", "b9", True),
        ("a8", "a9", True),
        ("a8", "a10", False),
        ("a8", "c8", False),
        ("h1", "h2", True),
        ("h1", "i2", True),
        ("h1", "h3", False),
        ("g14", "f13", True),
        ("g14", "g12", False),
        ("n7", "m6", True),
        ("n7", "l7", False),
    ],
)
def test_king_threat(starting_board: Board, from_sq: str, to_sq: str, expected: bool) -> None:
    result = is_king_threat(
        Square.from_algebraic(from_sq), Square.from_algebraic(to_sq), starting_board
    )
    assert result == expected


@pytest.mark.parametrize(
    "from_sq, to_sq, expected",
    [
        ("a4", "b4", True),
        ("a4", "a5", True),
        ("a4", "l4", False),
        ("a4", "a7", False),
        ("a4", "a6", False),
        ("k14", "k13", True),
        ("k14", "j14", True),
        ("k14", "j13", False),
        ("k14", "f14", False),
        ("k14", "k3", False),
        ("n4", "n5", True),
        ("n4", "m4", True),
        ("n4", "m5", False),
        ("n4", "c4", False),
        ("n4", "n8", False),
        ("k1", "j1", True),
        ("k1", "k2", True),
        ("k1", "k3", False),
        ("k1", "k12", False),
        ("k1", "d1", False),
        # an empty square on the board can still be threatened by a rook standing elsewhere
        ("d4", "d11", True),
        ("d4", "k4", True),
        ("d4", "d14", False),
        ("d4", "n4", False),
        ("k11", "k4", True),
        ("k11", "d11", True),
        ("k11", "k1", False),
        ("k11", "a11", False),
    ],
)
def test_rook_threat(starting_board: Board, from_sq: str, to_sq: str, expected: bool) -> None:
    result = is_rook_threat(
        Square.from_algebraic(from_sq), Square.from_algebraic(to_sq), starting_board
    )
    assert result == expected


@pytest.mark.parametrize(
    "from_sq, to_sq, expected",
    [
        ("b4", "a5", True),
        ("b4", "k13", True),
        ("b4", "d2", False),  # the diagonal cuts through the missing corner
        ("b4", "c4", False),
        ("b4", "a6", False),
        ("k2", "b11", True),
        ("k2", "j1", True),
        ("k2", "m4", False),
        ("k2", "b4", False),
        ("k2", "d2", False),
        ("m11", "d2", True),
        ("m11", "n10", True),
        ("m11", "k13", False),
        ("m11", "c4", False),
        ("m11", "m4", False),
        ("d13", "e14", True),
        ("d13", "m4", True),
        ("d13", "b11", False),
        ("d13", "b8", False),
        ("d13", "b7", False),
    ],
)
def test_bishop_threat(starting_board: Board, from_sq: str, to_sq: str, expected: bool) -> None:
    result = is_bishop_threat(
        Square.from_algebraic(from_sq), Square.from_algebraic(to_sq), starting_board
    )
    assert result == expected


@pytest.mark.parametrize(
    "from_sq, to_sq, expected",
    [
        ("a5", "c4", True),
        ("a5", "c6", True),
        ("a5", "b7", True),
        ("a5", "c7", False),
        ("a5", "d5", False),
        ("e14", "d12", True),
        ("e14", "f12", True),
        ("e14", "g13", True),
        ("e14", "g12", False),
        ("e14", "f8", False),
        ("n5", "l4", True),
        ("n5", "l6", True),
        ("n5", "m7", True),
        ("n5", "m8", False),
        ("n5", "n8", False),
        ("j1", "k3", True),
        ("j1", "i3", True),
        ("j1", "h2", True),
        ("j1", "h3", False),
        ("j1", "h4", False),
    ],
)
def test_knight_threat(starting_board: Board, from_sq: str, to_sq: str, expected: bool) -> None:
    result = is_knight_threat(
        Square.from_algebraic(from_sq), Square.from_algebraic(to_sq), starting_board
    )
    assert result == expected


@pytest.mark.parametrize(
    "from_sq, to_sq, expected",
    [
        ("b6", "c7", True),
        ("b6", "c5", True),
        ("b6", "c6", False),
        ("b6", "a7", False),
        ("b6", "a5", False),
        ("f13", "e12", True),
        ("f13", "g12", True),
        ("f13", "f12", False),
        ("f13", "e14", False),
        ("f13", "g14", False),
        ("h2", "i3", True),
        ("h2", "g3", True),
        ("h2", "h3", False),
        ("h2", "i1", False),
        ("h2", "g1", False),
        ("m7", "l8", True),
        ("m7", "l6", True),
        ("m7", "l7", False),
        ("m7", "n8", False),
        ("m7", "n6", False),
    ],
)
def test_pawn_threat(starting_board: Board, from_sq: str, to_sq: str, expected: bool) -> None:
    """Pawns threaten the two squares diagonally in front of them, whether anything stands there or not"""
    result = is_pawn_threat(
        Square.from_algebraic(from_sq), Square.from_algebraic(to_sq), starting_board
    )
    assert result == expected


def test_queen_threat(starting_board: Board) -> None:
    """From the starting position, the red queen is boxed in by her own pieces"""
    g1 = Square.from_algebraic("g1")
    assert is_queen_threat(g1, Square.from_algebraic("g2"), starting_board)
    assert is_queen_threat(g1, Square.from_algebraic("f2"), starting_board)
    assert not is_queen_threat(g1, Square.from_algebraic("g3"), starting_board)
    assert not is_queen_threat(g1, Square.from_algebraic("e3"), starting_board)


def test_threat_to_off_board_square(starting_board: Board) -> None:
    """Targets in the missing corners are never threatened"""
    assert not is_king_threat(
        Square.from_algebraic("d1"), Square.from_algebraic("c1"), starting_board
    )
    assert not is_knight_threat(
        Square.from_algebraic("e1"), Square.from_algebraic("c2"), starting_board
    )


def test_threat_from_off_board_square(starting_board: Board) -> None:
    with pytest.raises(InvalidSquareError):
        is_rook_threat(Square.from_algebraic("a1"), Square.from_algebraic("d1"), starting_board)


# --- PAWN MOVEMENT ---
@pytest.mark.parametrize(
    "from_sq, to_sq, expected",
    [
        ("h2", "h3", True),
        ("h2", "h4", True),
        ("h2", "h5", False),
        ("b7", "c7", True),
        ("b7", "d7", True),
        ("b7", "a7", False),  # backwards
        ("h13", "h12", True),
        ("h13", "h11", True),
        ("m7", "l7", True),
        ("m7", "k7", True),
    ],
)
def test_pawn_push_from_start(
    starting_board: Board, from_sq: str, to_sq: str, expected: bool
) -> None:
    result = is_pawn_push(
        Square.from_algebraic(from_sq), Square.from_algebraic(to_sq), starting_board
    )
    assert result == expected


def test_pawn_push_blocked(board_with_pieces) -> None:
    """A pawn cannot push into (or jump over) an occupied square"""
    board = board_with_pieces({"h2": "rP", "h3": "yN", "i2": "rP", "i4": "bN"})
    h2, i2 = Square.from_algebraic("h2"), Square.from_algebraic("i2")
    assert not is_pawn_push(h2, Square.from_algebraic("h3"), board)
    assert not is_pawn_push(h2, Square.from_algebraic("h4"), board)
    assert is_pawn_push(i2, Square.from_algebraic("i3"), board)
    assert not is_pawn_push(i2, Square.from_algebraic("i4"), board)


def test_pawn_double_push_only_from_start(board_with_pieces) -> None:
    board = board_with_pieces({"h3": "rP"})
    assert not is_pawn_push(Square.from_algebraic("h3"), Square.from_algebraic("h5"), board)


def test_pawn_move_captures_only_other_armies(board_with_pieces) -> None:
    board = board_with_pieces({"h2": "rP", "i3": "gN", "g3": "rN"})
    h2 = Square.from_algebraic("h2")
    assert is_pawn_move(h2, Square.from_algebraic("i3"), board)
    assert not is_pawn_move(h2, Square.from_algebraic("g3"), board)


def test_pawn_move_diagonal_to_empty_square(starting_board: Board) -> None:
    """A pawn threatens an empty diagonal square, but cannot move there (except en passant)"""
    assert not is_pawn_move(
        Square.from_algebraic("h2"), Square.from_algebraic("i3"), starting_board
    )


# --- CASTLING ---
def test_castling_path() -> None:
    assert castling_path(CastlingDirection.RED_KING_SIDE) == _squares("i1", "j1")
    assert castling_path(CastlingDirection.RED_QUEEN_SIDE) == _squares("g1", "f1", "e1")
    assert castling_path(CastlingDirection.GREEN_KING_SIDE) == _squares("n9", "n10")


def test_castling_king_path() -> None:
    """The king passes over exactly one square"""
    assert castling_king_path(CastlingDirection.RED_KING_SIDE) == _squares("i1")
    assert castling_king_path(CastlingDirection.BLUE_QUEEN_SIDE) == _squares("a8")
    assert castling_king_path(CastlingDirection.YELLOW_KING_SIDE) == _squares("f14")


# --- EN PASSANT ---
@pytest.mark.parametrize(
    "uci, code, expected",
    [
        ("h2h4", "rP", "h3"),
        ("b7d7", "bP", "c7"),
        ("h13h11", "yP", "h12"),
        ("m7k7", "gP", "l7"),
        ("h2h3", "rP", None),
        ("h1h3", "rR", None),
    ],
)
def test_en_passant_target(uci: str, code: str, expected: str | None) -> None:
    target = en_passant_target(Move.from_uci(uci), Piece.from_fen(code))
    if expected is None:
        assert target is None
    else:
        assert target == Square.from_algebraic(expected)


def test_en_passant_moves(board_with_pieces) -> None:
    """Red pushed h2h4: a blue pawn on g4 can take on h3"""
    board = board_with_pieces({"h4": "rP", "g4": "bP", "i4": "bP"})
    en_passant = {
        Color.RED: Square.from_algebraic("h3"),
        Color.BLUE: None,
        Color.YELLOW: None,
        Color.GREEN: None,
    }
    moves = en_passant_moves(en_passant, Color.BLUE, board)
    # the blue pawn on i4 moves away from h3 (blue pawns move towards the n-file)
    assert [move.to_uci() for move in moves] == ["g4h3"]
    assert moves[0].is_en_passant
    assert moves[0].captured_square == Square.from_algebraic("h4")


def test_en_passant_moves_not_for_own_target(board_with_pieces) -> None:
    board = board_with_pieces({"h4": "rP", "g3": "rP"})
    en_passant = {color: None for color in Color}
    en_passant[Color.RED] = Square.from_algebraic("h3")
    assert en_passant_moves(en_passant, Color.RED, board) == []


def test_en_passant_moves_pawn_gone(board_with_pieces) -> None:
    """Nothing to take if the pawn that made the double step is no longer there"""
    board = board_with_pieces({"h4": "gN", "g4": "bP"})
    en_passant = {color: None for color in Color}
    en_passant[Color.RED] = Square.from_algebraic("h3")
    assert en_passant_moves(en_passant, Color.BLUE, board) == []


# --- PROMOTION / ACCEPTED MOVE ---
def test_is_pawn_push_to_promotion_square(board_with_pieces) -> None:
    board = board_with_pieces({"h13": "rP", "m7": "bP", "e13": "yP"})
    assert is_pawn_push_to_promotion_square(Move.from_uci("h13h14"), board)
    assert is_pawn_push_to_promotion_square(Move.from_uci("m7n7"), board)
    # yellow pawns promote on the first rank, not the 14th
    assert not is_pawn_push_to_promotion_square(Move.from_uci("e13e14"), board)


def test_accepted_move(board_with_pieces) -> None:
    board = board_with_pieces({"h2": "rP", "i3": "gN"})
    accepted = AcceptedMove.from_move_and_board(Move.from_uci("h2i3"), board)
    assert accepted.moving_piece == Piece.from_fen("rP")
    assert accepted.captured_piece == Piece.from_fen("gN")
    assert accepted.is_capture
    assert accepted.is_pawn_move


def test_accepted_move_without_piece(board_with_pieces) -> None:
    board = board_with_pieces({})
    with pytest.raises(InvalidSquareError):
        AcceptedMove.from_move_and_board(Move.from_uci("h2h3"), board)
