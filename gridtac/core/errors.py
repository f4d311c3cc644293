from __future__ import annotations

from typing import Optional


class GameError(Exception):
    """Base class for every error raised by gridtac."""


class InvalidMoveError(GameError):
    """
    A move was rejected by GameState.apply_move.

    Local and recoverable: the state is unchanged and the caller asks
    its input source for another move.
    """

    def __init__(self, cell: object, reason: str = "Cell is not available.") -> None:
        super().__init__(f"Invalid move {cell!r}: {reason}")
        self.cell = cell
        self.reason = reason


class MalformedNetworkMessage(GameError):
    """A peer line could not be decoded into the message expected next."""

    def __init__(self, reason: str, line: Optional[str] = None) -> None:
        text = reason if line is None else f"{reason} (got {line!r})"
        super().__init__(text)
        self.line = line


class PeerConnectionError(GameError, ConnectionError):
    """Connect refused, connection lost or peer wait timed out."""


class ConfigurationError(GameError, ValueError):
    """Invalid configuration, raised before any game state exists."""


class QuitRequested(GameError):
    """The local user ended the session (/quit or end of input)."""
