"""
A square on the cross-shaped board

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from src.core.exceptions import InvalidSquareError

# The four player board is a 14x14 grid with the 3x3 corners cut out.
BOARD_DIMENSIONS = (14, 14)
CORNER_SIZE = 3

# no leading zeros: "h02" is not a way of writing "h2"
SQUARE_PATTERN = re.compile(r"^([a-z])([1-9]\d?)$")


def _is_corner(file: int, rank: int) -> bool:
    num_files, num_ranks = BOARD_DIMENSIONS
    in_corner_files = file <= CORNER_SIZE or file > num_files - CORNER_SIZE
    in_corner_ranks = rank <= CORNER_SIZE or rank > num_ranks - CORNER_SIZE
    return in_corner_files and in_corner_ranks


@dataclass(frozen=True)
class Square:
    file: int
    rank: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Square:
        """Algebraic notation: 'a4' - 'n11' get converted to (1,4) - (14,11)

        The square is not required to be on the board, but the notation has to be readable.
        """
        match = SQUARE_PATTERN.match(sq.strip())
        if match is None:
            raise InvalidSquareError(f"Cannot interpret {sq!r} as a square name.")
        file = ord(match.group(1)) - ord("a") + 1
        rank = int(match.group(2))
        return cls(file, rank)

    def to_algebraic(self) -> str:
        return f"{chr(self.file + ord('a') - 1)}{self.rank}"

    def is_within_bounds(self) -> bool:
        """Inside the 14x14 grid AND not in one of the missing corners"""
        num_files, num_ranks = BOARD_DIMENSIONS
        inside_grid = (1 <= self.file <= num_files) and (1 <= self.rank <= num_ranks)
        return inside_grid and not _is_corner(self.file, self.rank)

    def offset(self, df: int, dr: int) -> Square:
        return Square(self.file + df, self.rank + dr)

    @property
    def index(self) -> int:
        """Dense index into the board's cells. Raises for squares that are off the board."""
        try:
            return SQUARE_INDEX[self]
        except KeyError:
            raise InvalidSquareError(
                f"Square {self.to_algebraic()!r} is not on the board."
            ) from None


def _build_square_table() -> tuple[Square, ...]:
    """Row-major enumeration of the on-board squares: top rank first, a-file to n-file."""
    num_files, num_ranks = BOARD_DIMENSIONS
    return tuple(
        Square(file, rank)
        for rank in range(num_ranks, 0, -1)
        for file in range(1, num_files + 1)
        if not _is_corner(file, rank)
    )


SQUARE_TABLE: tuple[Square, ...] = _build_square_table()
SQUARE_INDEX: dict[Square, int] = {
    square: index for index, square in enumerate(SQUARE_TABLE)
}
SQUARE_LABELS: tuple[str, ...] = tuple(square.to_algebraic() for square in SQUARE_TABLE)
LABEL_INDEX: dict[str, int] = {label: index for index, label in enumerate(SQUARE_LABELS)}


def square_index(label: str) -> int:
    """
    Dense index of a square given by its label.

    NOTE: index 0 ('d14') is a perfectly fine square, so a missing label raises instead of returning a default.
    """
    index = LABEL_INDEX.get(label.strip())
    if index is None:
        raise InvalidSquareError(f"Square {label!r} is not on the board.")
    return index


def square_label(index: int) -> str:
    """Reverse lookup of `square_index()`"""
    if not 0 <= index < len(SQUARE_TABLE):
        raise InvalidSquareError(f"No square with index {index}.")
    return SQUARE_LABELS[index]


def is_on_board(label: str) -> bool:
    """Convenience check for labels coming from the outside world"""
    try:
        square_index(label)
    except InvalidSquareError:
        return False
    return True
