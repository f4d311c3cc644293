from __future__ import annotations

import logging
from enum import Enum
from typing import List, Optional, Sequence, Tuple

import numpy as np

from gridtac.core.board import EMPTY, Board
from gridtac.core.errors import ConfigurationError, InvalidMoveError
from gridtac.core.move import Move
from gridtac.core.patterns import Pattern, generate_win_patterns

logger = logging.getLogger(__name__)


class Outcome(Enum):
    ONGOING = "ongoing"
    WIN = "win"
    DRAW = "draw"


def check_marks(players: Sequence[str]) -> Tuple[str, str]:
    """Return the two marks as a tuple, or raise ConfigurationError."""
    if len(players) != 2:
        raise ConfigurationError("exactly two player marks are required")
    first, second = players
    if not isinstance(first, str) or not isinstance(second, str):
        raise ConfigurationError("player marks must be strings")
    if first.strip() == EMPTY or second.strip() == EMPTY:
        raise ConfigurationError("player marks must not be empty")
    if first == second:
        raise ConfigurationError(f"player marks must differ (both are {first!r})")
    return first, second


class GameState:
    """
    Complete state of one game.

    Owns:
      - Board (cell marks)
      - available: unclaimed cell indices, ascending
      - current_player, is_over, winner
      - win patterns for this board size

    Mutated only through apply_move / advance_turn and the evaluate_*
    operations. Once is_over is set no further move is accepted.
    """

    def __init__(
        self,
        size: int = 3,
        players: Sequence[str] = ("X", "O"),
        *,
        patterns: Optional[Sequence[Sequence[int]]] = None,
    ) -> None:
        if not isinstance(size, int) or isinstance(size, bool) or size < 1:
            raise ConfigurationError(f"board size must be a positive integer, got {size!r}")
        self.players: Tuple[str, str] = check_marks(players)
        self.size: int = size
        self.board = Board(size)
        self.available: List[int] = list(range(size * size))
        self.current_player: str = self.players[0]

        if patterns is None:
            self.patterns: Tuple[Pattern, ...] = generate_win_patterns(size)
        else:
            self.patterns = tuple(tuple(int(c) for c in p) for p in patterns)
        self._pattern_matrix = np.array(self.patterns, dtype=np.int64).reshape(len(self.patterns), size)

        self.is_over: bool = False
        self.winner: Optional[str] = None
        self.winning_pattern: Optional[Pattern] = None
        self.history: List[Move] = []

    # -------------------------
    # Snapshot restore
    # -------------------------

    @classmethod
    def restore(
        cls,
        *,
        size: int,
        players: Sequence[str],
        board: Sequence[str],
        available: Sequence[int],
        patterns: Sequence[Sequence[int]],
        current_player: str,
    ) -> "GameState":
        """
        Build a replica from a peer snapshot.

        Raises:
            ValueError if the snapshot is not self-consistent.
        """
        state = cls(size, players, patterns=patterns)
        cells = size * size

        for p in state.patterns:
            if len(p) != size or any(not 0 <= c < cells for c in p):
                raise ValueError(f"win pattern {list(p)} does not fit a {size}x{size} board")

        for mark in board:
            if mark != EMPTY and mark not in state.players:
                raise ValueError(f"unknown mark {mark!r} on board")
        state.board = Board.from_cells(size, board)

        free = sorted(int(c) for c in available)
        if free != state.board.empty_cells():
            raise ValueError("available positions do not match the empty cells")
        state.available = free

        if current_player not in state.players:
            raise ValueError(f"unknown current player {current_player!r}")
        state.current_player = current_player

        if state.evaluate_win() or state.evaluate_win(state.other_player()):
            return state
        state.evaluate_draw()
        return state

    # -------------------------
    # Read-only views
    # -------------------------

    @property
    def last_move(self) -> Optional[Move]:
        return self.history[-1] if self.history else None

    def other_player(self, mark: Optional[str] = None) -> str:
        mark = self.current_player if mark is None else mark
        return self.players[1] if mark == self.players[0] else self.players[0]

    def player_pattern(self, mark: str) -> List[int]:
        """Ascending cell indices held by mark."""
        return self.board.cells_of(mark)

    def current_player_pattern(self) -> List[int]:
        return self.player_pattern(self.current_player)

    def claimed(self) -> List[int]:
        return [i for i, _ in self.board.iter_marks()]

    def cells(self) -> List[str]:
        return self.board.cells()

    # -------------------------
    # Mutation
    # -------------------------

    def apply_move(self, cell: int) -> Move:
        """
        Claim cell for the current player.

        Raises:
            InvalidMoveError (state unchanged) if the game is over or
            cell is not an available index.
        """
        if self.is_over:
            raise InvalidMoveError(cell, "Game is already over.")
        if isinstance(cell, bool) or not isinstance(cell, (int, np.integer)):
            raise InvalidMoveError(cell, "Cell must be an integer.")
        cell = int(cell)
        if cell not in self.available:
            raise InvalidMoveError(cell)

        self.board.place(cell, self.current_player)
        self.available.remove(cell)
        move = Move(cell=cell, mark=self.current_player)
        self.history.append(move)
        return move

    def advance_turn(self) -> None:
        if self.is_over:
            return
        self.current_player = self.other_player()

    # -------------------------
    # Termination
    # -------------------------

    def evaluate_win(self, mark: Optional[str] = None) -> bool:
        """
        True iff a win pattern is fully held by mark (default: current player).

        Patterns are checked in generation order; the first hit is kept
        as winning_pattern.
        """
        mark = self.current_player if mark is None else mark
        held = self.player_pattern(mark)
        if len(held) < self.size:
            return False

        hits = np.isin(self._pattern_matrix, held).all(axis=1)
        if not hits.any():
            return False

        if not self.is_over:
            self.is_over = True
            self.winner = mark
            self.winning_pattern = self.patterns[int(np.argmax(hits))]
            logger.info("Player %s wins with pattern %s", mark, list(self.winning_pattern))
        return True

    def evaluate_draw(self) -> bool:
        if self.winner is not None or self.available:
            return False
        if not self.is_over:
            self.is_over = True
            logger.info("Board full without a winner")
        return True

    def evaluate(self) -> Outcome:
        """Check win before draw, so a winning final move is never a draw."""
        if self.evaluate_win():
            return Outcome.WIN
        if self.evaluate_draw():
            return Outcome.DRAW
        return Outcome.ONGOING
