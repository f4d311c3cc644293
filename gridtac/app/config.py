from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from gridtac.core.errors import ConfigurationError
from gridtac.core.gamestate import check_marks
from gridtac.net.protocol import DEFAULT_PORT

DEFAULT_BOARD_SIZE = 3
DEFAULT_DELAY_MS = 2000
# Connect timeout only; waits for peer moves are unbounded unless GameConfig.timeout is set.
CONNECT_TIMEOUT_SEC = 10.0


@dataclass
class GameConfig:
    board_size: int = DEFAULT_BOARD_SIZE
    delay_ms: int = DEFAULT_DELAY_MS
    player1: str = "X"
    player2: str = "O"
    human: bool = False
    remote: bool = False
    host: str = "127.0.0.1"
    port: int = DEFAULT_PORT
    timeout: Optional[float] = None
    seed: Optional[int] = None

    @property
    def players(self):
        return (self.player1, self.player2)

    @property
    def delay_sec(self) -> float:
        """Pause before a non-human move; humans pace the game themselves."""
        if self.human:
            return 0.0
        return self.delay_ms / 1000.0

    def validate(self) -> "GameConfig":
        """
        Fail fast on values no game can be built from.

        Raises:
            ConfigurationError
        """
        if not isinstance(self.board_size, int) or isinstance(self.board_size, bool) or self.board_size < 1:
            raise ConfigurationError(f"board size must be a positive integer, got {self.board_size!r}")
        if self.delay_ms < 0:
            raise ConfigurationError(f"delay must be >= 0 ms, got {self.delay_ms}")
        check_marks(self.players)
        if not 0 <= self.port <= 65535:
            raise ConfigurationError(f"port must be in 0..65535, got {self.port}")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")
        return self
