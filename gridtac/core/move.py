from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Move:
    """A claimed cell: index on the board and the mark placed there."""
    cell: int
    mark: str

    def __str__(self) -> str:
        return f"Player {self.mark} at {self.cell}"
