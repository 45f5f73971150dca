"""
The Game class will be the entrypoint into the domain layer for the service layer.
It is responsible for orchestrating all the business logic required to play a move on the four player board:
validating it, applying it (speculatively first), and keeping the history needed to undo it.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, Self

from src.core.exceptions import (
    EmptyHistoryError,
    IllegalMoveError,
    MovesIntoCheckError,
    NoPieceToMoveError,
    NotYourPieceError,
)
from src.core.models import GameModel
from src.fourchess.board import Board
from src.fourchess.castling import (
    CASTLING_RULES,
    CastlingDirection,
    castling_options,
)
from src.fourchess.moves import (
    AcceptedMove,
    Move,
    candidate_castling_move,
    castling_king_path,
    castling_path,
    en_passant_moves,
    en_passant_target,
    is_pawn_push_to_promotion_square,
)
from src.fourchess.pieces import (
    TURN_ORDER,
    Color,
    Piece,
    PieceType,
    next_color,
    parse_promotion,
)
from src.fourchess.square import SQUARE_TABLE, Square, square_index
from src.fourchess.state import GameState, HistoryEntry

logger = logging.getLogger(__name__)


@dataclass
class Game:
    # --- DOMAIN LAYER API CALLED BY SERVICE---

    state: GameState = field(default_factory=GameState.starting_position)
    moves: list[Move] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)

    @classmethod
    def new_game(cls, starting_fen: Optional[str] = None) -> Self:
        """Start a new game from the standard position, or from the given state."""
        state = (
            GameState.from_fen(starting_fen)
            if starting_fen
            else GameState.starting_position()
        )
        return cls(state=state)

    @classmethod
    def from_model(cls, model: GameModel) -> Self:
        """Define how to construct a Game from the information the Service layer actually has"""
        state = GameState.from_fen(model.current_fen)
        history = [GameState.from_fen(fen).snapshot() for fen in model.history_fen]
        moves = [Move.from_uci(uci) for uci in model.moves_uci]
        return cls(state, moves, history)

    def to_model(self) -> GameModel:
        """Encode back into a format the Service layer uses"""
        return GameModel(
            current_fen=self.state.to_fen(),
            history_fen=[
                GameState.from_snapshot(entry).to_fen() for entry in self.history
            ],
            moves_uci=[move.to_uci() for move in self.moves],
        )

    @property
    def board(self) -> Board:
        return self.state.board

    @property
    def color_to_move(self) -> Color:
        return self.state.color_to_move

    def in_check(self, color: Optional[Color] = None) -> bool:
        """Is the king of the given color (default: the side to move) attacked right now?"""
        return self.board.is_check(color or self.color_to_move)

    def candidate_moves(self, color: Optional[Color] = None) -> list[Move]:
        """
        Every move the geometry allows, before checking if it leaves your own king under attack.

        1. generate candidate moves, using the basic movement rules for all pieces (the board does this calculation)
        2. add candidate castling moves
        3. add candidate en passant moves
        """
        color = color or self.color_to_move
        candidate_moves = self.board.generate_candidate_moves(color)
        candidate_moves.extend(self._generate_castling_moves(color))
        candidate_moves.extend(en_passant_moves(self.state.en_passant, color, self.board))
        return candidate_moves

    def legal_moves(self, color: Optional[Color] = None) -> list[Move]:
        """Candidate moves that do not put (or leave) you in check"""
        color = color or self.color_to_move
        return [
            move
            for move in self.candidate_moves(color)
            if not self._is_putting_yourself_in_check(move, color)
        ]

    def make_move(self, move_uci: str) -> Move:
        """Same as `move()`, with the move written as a single string, ex. 'h2h4' or 'h13h14n'"""
        requested = Move.from_uci(move_uci)
        return self.move(
            requested.from_square.to_algebraic(),
            requested.to_square.to_algebraic(),
            requested.promote_to or PieceType.QUEEN,
        )

    def move(
        self,
        from_label: str,
        to_label: str,
        promote_to: PieceType | str = PieceType.QUEEN,
    ) -> Move:
        """
        Attempt to make a move for the side to move
        -----

        1. both squares must be on the board
        2. the promotion choice must be a knight, bishop, rook or queen (even if the move is not a promotion)
        3. you must move one of your own pieces
        4. the move must be one of the candidate moves
        5. apply the move to a copy of the board, and reject it if it leaves your king under attack
        6. commit: store the previous state on the history stack, update the state and pass the turn

        Nothing changes if any of the steps raises.
        """
        from_square = self._resolve_square(from_label)
        to_square = self._resolve_square(to_label)
        promotion = parse_promotion(promote_to)

        player_color = self.color_to_move
        self._assert_your_piece(from_square, player_color)

        move = self._find_candidate_move(from_square, to_square, player_color)
        if is_pawn_push_to_promotion_square(move, self.board):
            move.promote_to = promotion

        # Store move info before update
        accepted_move = AcceptedMove.from_move_and_board(move, self.board)
        board, castling_rights = self._apply_move(accepted_move)
        if board.is_check(player_color):
            logger.debug("Rejected %s: leaves %s king in check", move.to_uci(), player_color.name)
            raise MovesIntoCheckError(
                f"Move {move.to_uci()} leaves your king under attack."
            )

        self._commit(accepted_move, board, castling_rights)
        return move

    def undo(self) -> HistoryEntry:
        """Go back one move: restore the state stored right before the last move was made."""
        if not self.history:
            raise EmptyHistoryError("There is no move to undo.")

        previous_state = self.history.pop()
        self.state.restore(previous_state)
        if self.moves:
            undone = self.moves.pop()
            logger.info("Undid %s, %s to move", undone.to_uci(), self.color_to_move.name)
        return previous_state

    # -- PRIVATE HELPERS ---
    def _resolve_square(self, label: str) -> Square:
        return SQUARE_TABLE[square_index(label)]

    def _assert_your_piece(self, square: Square, color: Color) -> None:
        """You can only move your own pieces"""
        piece = self.board.piece(square)
        if piece is None:
            raise NoPieceToMoveError(f"There is no piece on {square.to_algebraic()}.")
        if piece.color != color:
            raise NotYourPieceError(
                f"The piece on {square.to_algebraic()} is {piece.color.name.lower()}, but it is {color.name.lower()} to move."
            )

    def _find_candidate_move(
        self, from_square: Square, to_square: Square, color: Color
    ) -> Move:
        requested = Move(from_square, to_square)
        for candidate in self.candidate_moves(color):
            if candidate.same_squares(requested):
                return candidate
        logger.debug("Rejected %s: not a candidate move", requested.to_uci())
        raise IllegalMoveError(f"Move not allowed: {requested.to_uci()}")

    def _apply_move(
        self, accepted_move: AcceptedMove
    ) -> tuple[Board, dict[CastlingDirection, bool]]:
        """
        Speculative update: returns the board and castling rights as they would be after the move.
        The live state is not touched.
        """
        board = self.board.copy()
        move = accepted_move.move

        # castling move must displace two pieces on the board, but just add one to the move registry
        if move.castling_direction:
            self._move_castling_pieces(board, move.castling_direction)
        elif move.is_en_passant:
            self._move_en_passant_pieces(board, move)
        else:
            board.move_piece(move)

        if move.promote_to:
            promoted = accepted_move.moving_piece.promoted_to(move.promote_to)
            board.place_piece(promoted, move.to_square)

        return board, self._castling_rights_after(move)

    def _commit(
        self,
        accepted_move: AcceptedMove,
        board: Board,
        castling_rights: dict[CastlingDirection, bool],
    ) -> None:
        """
        Make the speculative update permanent
        -----

        NOTE the state before the move is pushed onto the history stack first
        """
        player_color = self.color_to_move
        self.history.append(self.state.snapshot())

        self.state.board = board
        self.state.castling_rights = castling_rights
        self._update_en_passant(accepted_move, player_color)

        # move counters
        if accepted_move.is_capture or accepted_move.is_pawn_move:
            self.state.reset_half_move_counter()
        else:
            self.state.increment_half_move_counter()

        # a full round has been played once the last army in the turn order moved
        if player_color == TURN_ORDER[-1]:
            self.state.increment_move_counter()

        # NOTE update color to move AFTER the updates that depend on who made the move
        self.state.color_to_move = next_color(player_color)
        self.moves.append(accepted_move.move)
        logger.info(
            "%s played %s, %s to move",
            player_color.name,
            accepted_move.move.to_uci(),
            self.color_to_move.name,
        )

    def _is_putting_yourself_in_check(self, move: Move, color: Color) -> bool:
        """Return True if the move puts you in check

        plan:
        1. Copy the board
        2. make the candidate move
        3. determine if king is in check on the new board
        """
        accepted_move = AcceptedMove.from_move_and_board(move, self.board)
        board, _ = self._apply_move(accepted_move)
        return board.is_check(color)

    # -- CASTLING RULE HELPERS ---
    def _generate_castling_moves(self, color: Color) -> list[Move]:
        """Use CASTLING_RULES to construct corresponding set of moves"""
        return [
            candidate_castling_move(direction)
            for direction in self._legal_castling_directions(color)
        ]

    def _legal_castling_directions(self, color: Color) -> list[CastlingDirection]:
        """
        Find the legal castling directions for the given army
        ---

        **you are allowed to castle if**

        * Castling rights are not yet revoked (and the king and rook are indeed on their starting squares).
        * You are not currently put in check (you cannot castle out of check).
        * All squares in between the king and the rook are empty.
        * The square the king passes over is not under attack.
        """
        if not self.state.can_castle(color):
            return []

        # Cannot castle out of a check.
        if self.board.is_check(color):
            return []

        opponents = [other for other in TURN_ORDER if other != color]
        legal_directions: list[CastlingDirection] = []
        for direction in castling_options(color):
            if not self.state.castling_rights[direction]:
                continue

            rule = CASTLING_RULES[direction]
            if self.board.piece(rule.king_from) != Piece(color, PieceType.KING):
                continue
            if self.board.piece(rule.rook_from) != Piece(color, PieceType.ROOK):
                continue

            # Cannot castle if any of the squares is occupied
            if self.board.is_any_occupied(castling_path(direction)):
                continue

            # Cannot castle through an attacked square
            if self.board.is_any_under_attack(castling_king_path(direction), opponents):
                continue

            legal_directions.append(direction)

        return legal_directions

    def _castling_rights_after(self, move: Move) -> dict[CastlingDirection, bool]:
        """
        A right gets revoked as soon as its king or rook leaves its starting square, or something lands on it:
        ----

        1. castling / moving your king --> revoke both
        2. moving your rook (for the first time) --> revoke the right in that direction
        3. taking a rook on its starting square --> revoke that right of its owner
        """
        castling_rights = dict(self.state.castling_rights)
        for direction, rule in CASTLING_RULES.items():
            if not castling_rights[direction]:
                continue
            if move.from_square in rule.origins or move.to_square in rule.origins:
                castling_rights[direction] = False
        return castling_rights

    def _move_castling_pieces(self, board: Board, direction: CastlingDirection) -> None:
        """Move both the King and the Rook"""
        squares = CASTLING_RULES[direction]
        king_move = Move(from_square=squares.king_from, to_square=squares.king_to)
        rook_move = Move(from_square=squares.rook_from, to_square=squares.rook_to)
        board.move_piece(king_move)
        board.move_piece(rook_move)

    # --- EN PASSANT RULE HELPERS ----
    def _move_en_passant_pieces(self, board: Board, move: Move) -> None:
        """
        1. Move the pawn diagonally onto the en passant square
        2. Remove the opponent's pawn that gets taken (standing just beyond the en passant square)
        """
        # for the typechecker: en passant moves are always created with the captured square filled in
        assert move.captured_square is not None
        board.move_piece(move)
        board.remove_piece(move.captured_square)

    def _update_en_passant(self, accepted_move: AcceptedMove, player_color: Color) -> None:
        """
        * a pawn that got taken en passant leaves no target behind
        * a double pawn push creates a target for the player that made it
        * the next army's target has been available to all other armies for a full round: it expires
        """
        if accepted_move.move.is_en_passant and accepted_move.captured_piece:
            self.state.en_passant[accepted_move.captured_piece.color] = None

        self.state.en_passant[player_color] = en_passant_target(
            accepted_move.move, accepted_move.moving_piece
        )
        self.state.en_passant[next_color(player_color)] = None
