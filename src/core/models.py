"""
Contract for the Service layer.

Domain level data model of information representing a Game.

"""

from dataclasses import dataclass, field


@dataclass
class GameModel:
    """
    Transport-safe representation of a four player chess game.

    * current_fen: the live game state, in the position notation (see src/fourchess/fen.py)
    * history_fen: the states before every move played, oldest first (the undo stack)
    * moves_uci: the moves played, oldest first
    """

    current_fen: str
    history_fen: list[str] = field(default_factory=list)
    moves_uci: list[str] = field(default_factory=list)
