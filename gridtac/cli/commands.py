from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence


class CommandType(Enum):
    QUIT = "quit"
    HELP = "help"


@dataclass(frozen=True)
class Command:
    """Parsed command from user input."""
    type: CommandType
    raw: str


@dataclass(frozen=True)
class ParseResult:
    """
    Result of parsing one line input.
    Exactly one of (command, cell) is set on success.
    """
    command: Optional[Command] = None
    cell: Optional[int] = None
    error: str = ""

    @property
    def ok(self) -> bool:
        return self.error == "" and (self.command is not None or self.cell is not None)


class CommandProcessor:
    """
    Parses a user input line into:
      - Command (/quit, /help)
      - a cell index that is currently available

    This class does NOT execute anything. Move sources decide what to do.
    """

    def __init__(self, board_size: int = 3) -> None:
        if board_size <= 0:
            raise ValueError("board_size must be positive")
        self.board_size = board_size

    def help_text(self) -> str:
        last = self.board_size * self.board_size - 1
        return (
            f"Input: a cell index 0-{last} shown on an empty cell.\n"
            f"Commands: /help, /quit"
        )

    def parse(self, text: str, available: Sequence[int]) -> ParseResult:
        raw = (text or "").strip()
        if not raw:
            return ParseResult(error="Invalid input")

        if raw.startswith("/"):
            cmd = raw[1:].strip().lower()
            if cmd == "quit":
                return ParseResult(command=Command(CommandType.QUIT, raw))
            if cmd == "help":
                return ParseResult(command=Command(CommandType.HELP, raw))
            return ParseResult(error=f"Unknown command: {raw}")

        if not (raw.isascii() and raw.isdigit()) or len(raw) > len(str(self.board_size ** 2)):
            return ParseResult(error="Invalid input")

        cell = int(raw)
        if cell not in available:
            return ParseResult(error=f"Cell {cell} is not available")
        return ParseResult(cell=cell)
