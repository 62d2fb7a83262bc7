"""Board model: a 4x4 grid of cells with marking and win detection."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from enum import Enum
from random import Random
from typing import AbstractSet, Iterable, List, Optional, Sequence, Tuple

from .cards import CATALOG, Card

BOARD_SIDE = 4
BOARD_CELLS = BOARD_SIDE * BOARD_SIDE


class InvalidBoard(ValueError):
    """Raised when a board is built from an illegal set of cards."""


class WinCondition(str, Enum):
    ROW = "row"
    COLUMN = "column"
    DIAGONAL = "diagonal"
    FULL_BOARD = "full_board"


ALL_WIN_CONDITIONS: frozenset[WinCondition] = frozenset(WinCondition)

Line = Tuple[int, ...]

ROWS: tuple[Line, ...] = tuple(
    tuple(row * BOARD_SIDE + col for col in range(BOARD_SIDE)) for row in range(BOARD_SIDE)
)
COLUMNS: tuple[Line, ...] = tuple(
    tuple(row * BOARD_SIDE + col for row in range(BOARD_SIDE)) for col in range(BOARD_SIDE)
)
DIAGONALS: tuple[Line, ...] = (
    tuple(i * BOARD_SIDE + i for i in range(BOARD_SIDE)),
    tuple(i * BOARD_SIDE + (BOARD_SIDE - 1 - i) for i in range(BOARD_SIDE)),
)
FULL_BOARD: tuple[Line, ...] = (tuple(range(BOARD_CELLS)),)

# Index patterns that satisfy each condition.
PATTERNS: dict[WinCondition, tuple[Line, ...]] = {
    WinCondition.ROW: ROWS,
    WinCondition.COLUMN: COLUMNS,
    WinCondition.DIAGONAL: DIAGONALS,
    WinCondition.FULL_BOARD: FULL_BOARD,
}


def _new_cell_id() -> str:
    return uuid.uuid4().hex


@dataclass
class Cell:
    card: Card
    is_marked: bool = False
    id: str = field(default_factory=_new_cell_id)


@dataclass
class Board:
    """Sixteen cells stored row-major: ``index = row * 4 + col``."""

    cells: List[Cell]

    def __post_init__(self) -> None:
        if len(self.cells) != BOARD_CELLS:
            raise InvalidBoard(f"Board must contain exactly {BOARD_CELLS} cells.")
        ids = {cell.card.id for cell in self.cells}
        if len(ids) != BOARD_CELLS:
            raise InvalidBoard("Board cards must be unique.")

    @classmethod
    def random(cls, rng: Optional[Random] = None, catalog: Sequence[Card] = CATALOG) -> "Board":
        """Sample 16 distinct cards uniformly from the catalog."""
        if rng is None:
            rng = Random()
        picked = rng.sample(list(catalog), BOARD_CELLS)
        return cls([Cell(card) for card in picked])

    @classmethod
    def from_cards(cls, cards: Iterable[Card]) -> "Board":
        return cls([Cell(card) for card in cards])

    # Marking -----------------------------------------------------------

    def mark(self, card: Card) -> bool:
        """Mark the cell holding ``card``. Return True only for a new mark."""
        for cell in self.cells:
            if cell.card.id == card.id and not cell.is_marked:
                cell.is_marked = True
                return True
        return False

    # Queries -----------------------------------------------------------

    def cell(self, cell_id: str) -> Optional[Cell]:
        return next((cell for cell in self.cells if cell.id == cell_id), None)

    def cell_at(self, row: int, col: int) -> Cell:
        if not (0 <= row < BOARD_SIDE and 0 <= col < BOARD_SIDE):
            raise IndexError(f"Cell ({row}, {col}) is outside the board.")
        return self.cells[row * BOARD_SIDE + col]

    def contains(self, card: Card) -> bool:
        return any(cell.card.id == card.id for cell in self.cells)

    def cards(self) -> list[Card]:
        return [cell.card for cell in self.cells]

    @property
    def marked_count(self) -> int:
        return sum(1 for cell in self.cells if cell.is_marked)

    def _line_complete(self, line: Line) -> bool:
        return all(self.cells[index].is_marked for index in line)

    def completed_lines(self, conditions: AbstractSet[WinCondition]) -> list[Line]:
        """Return every satisfied pattern among the requested conditions."""
        lines: list[Line] = []
        for condition in WinCondition:
            if condition not in conditions:
                continue
            lines.extend(line for line in PATTERNS[condition] if self._line_complete(line))
        return lines

    def check_win(self, conditions: AbstractSet[WinCondition]) -> bool:
        """Return True if the board satisfies ANY of the supplied conditions."""
        for condition in conditions:
            if any(self._line_complete(line) for line in PATTERNS[condition]):
                return True
        return False
