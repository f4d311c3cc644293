from __future__ import annotations

from typing import Iterator, List, Sequence, Tuple

import numpy as np

EMPTY = ""


class Board:
    """
    Represents the grid cells.

    - Cells are addressed by a 0-based index: row = i // size, col = i % size.
    - Each cell holds EMPTY ("") or a player mark.
    - A claimed cell is never overwritten.
    """

    def __init__(self, size: int = 3) -> None:
        if not isinstance(size, int) or size <= 0:
            raise ValueError("size must be a positive integer")
        self._size: int = size
        self._cells: np.ndarray = np.full(size * size, EMPTY, dtype=object)
        self._moves: int = 0

    @classmethod
    def from_cells(cls, size: int, cells: Sequence[str]) -> "Board":
        """Rebuild a board from a flat cell sequence (e.g. a peer snapshot)."""
        if len(cells) != size * size:
            raise ValueError(f"expected {size * size} cells, got {len(cells)}")
        board = cls(size)
        for i, mark in enumerate(cells):
            if mark != EMPTY:
                board.place(i, mark)
        return board

    @property
    def size(self) -> int:
        return self._size

    @property
    def moves(self) -> int:
        return self._moves

    def __len__(self) -> int:
        return self._size * self._size

    # ---------- Indexing ----------

    def in_bounds(self, index: int) -> bool:
        return 0 <= index < len(self)

    def position(self, index: int) -> Tuple[int, int]:
        """Convert a cell index to 0-based (row, col)."""
        if not self.in_bounds(index):
            raise ValueError(f"Out of bounds: {index} for size={self._size}")
        return divmod(index, self._size)

    # ---------- Cell access ----------

    def get(self, index: int) -> str:
        self.position(index)
        return self._cells[index]

    def is_empty(self, index: int) -> bool:
        return self.get(index) == EMPTY

    def place(self, index: int, mark: str) -> None:
        """
        Claim a cell for mark.

        Raises:
            ValueError if out of bounds, occupied, or mark is EMPTY.
        """
        if mark == EMPTY:
            raise ValueError("Cannot place EMPTY")
        if not self.is_empty(index):
            raise ValueError(f"Cell occupied at {index}")
        self._cells[index] = mark
        self._moves += 1

    # ---------- Iteration / helpers ----------

    def cells(self) -> List[str]:
        """Flat snapshot of every cell, in index order."""
        return self._cells.tolist()

    def cells_of(self, mark: str) -> List[int]:
        """Ascending indices of the cells holding mark."""
        return np.flatnonzero(self._cells == mark).tolist()

    def empty_cells(self) -> List[int]:
        return self.cells_of(EMPTY)

    def iter_marks(self) -> Iterator[Tuple[int, str]]:
        """Yield all claimed cells as (index, mark)."""
        for i, mark in enumerate(self._cells):
            if mark != EMPTY:
                yield i, mark

    def is_full(self) -> bool:
        return self._moves == len(self)
