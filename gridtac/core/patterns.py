from __future__ import annotations

from typing import List, Tuple

Pattern = Tuple[int, ...]


def generate_win_patterns(size: int) -> Tuple[Pattern, ...]:
    """
    Build every winning line for a size x size board.

    Order: rows (top to bottom), columns (left to right),
    main diagonal, anti-diagonal. Always 2*size + 2 patterns.
    """
    rows: List[Pattern] = []
    cols: List[Pattern] = []
    for i in range(size):
        rows.append(tuple(i * size + y for y in range(size)))
        cols.append(tuple(i + y * size for y in range(size)))

    main_diag = tuple(i * (size + 1) for i in range(size))
    anti_diag = tuple((size - 1) * (i + 1) for i in range(size))

    return tuple(rows) + tuple(cols) + (main_diag, anti_diag)
