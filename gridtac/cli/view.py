from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, TextIO

from gridtac.core.board import EMPTY
from gridtac.core.gamestate import GameState


# =========================
# Message types
# =========================

class MessageType(Enum):
    ERR = "ERR"
    INFO = "INFO"
    TURN = "TURN"
    OVER = "GAME OVER"
    QUIT = "QUIT"


@dataclass(frozen=True)
class Message:
    """
    A UI line printed between boards.
    Examples:
      [ERR] Invalid input
      [GAME OVER] winner is X
    """
    type: MessageType
    text: str = ""

    def render(self) -> str:
        if self.text:
            return f"[{self.type.value}] {self.text}"
        return f"[{self.type.value}]"


# =========================
# View (board + messages)
# =========================

class CliView:
    """
    Responsible ONLY for rendering:
      1) board snapshots
      2) messages (turn, errors, outcome)
      3) the input prompt text

    It does NOT:
      - parse input
      - send network messages
      - execute game logic
    """

    def __init__(
        self,
        *,
        you: Optional[str] = None,
        out: Optional[TextIO] = None,
        prompt: str = "choose from the available options:: ",
    ) -> None:
        self.you = you
        self.out = out if out is not None else sys.stdout
        self.prompt = prompt

    def _print(self, text: str = "") -> None:
        print(text, file=self.out, flush=True)

    def show(self, msg: Message) -> None:
        self._print(msg.render())

    # ---------- Board ----------

    def format_board(self, cells: Sequence[str], size: int) -> str:
        """
        One row per line; empty cells show their index so a human can pick them:
          |  X  |  1  |  2  |
        """
        width = max(len(str(len(cells) - 1)), max((len(c) for c in cells), default=1))
        lines = []
        for row in range(size):
            parts = []
            for col in range(size):
                i = row * size + col
                label = cells[i] if cells[i] != EMPTY else str(i)
                parts.append(f"  {label.center(width)}  ")
            lines.append("|" + "|".join(parts) + "|")
        return "\n".join(lines)

    def render_board(self, cells: Sequence[str], size: int) -> None:
        self._print(self.format_board(cells, size))
        self._print()

    # ---------- Messages ----------

    def show_playing(self, mark: str) -> None:
        who = " (you)" if self.you is not None and mark == self.you else ""
        self.show(Message(MessageType.TURN, f"Player {mark}{who} is playing..."))

    def show_invalid(self, available: Sequence[int], reason: str = "") -> None:
        text = reason or "Invalid input"
        options = ", ".join(str(c) for c in available)
        self.show(Message(MessageType.ERR, f"{text}, your possible options are:\n {options}"))

    def show_outcome(self, state: GameState) -> None:
        if state.winner is not None:
            self.show(Message(MessageType.OVER, f"winner is {state.winner}"))
        else:
            self.show(Message(MessageType.OVER, "there is no winner"))

    def show_info(self, text: str) -> None:
        self.show(Message(MessageType.INFO, text))

    def show_error(self, text: str) -> None:
        self.show(Message(MessageType.ERR, text))

    def show_quit(self, text: str = "Exiting...") -> None:
        self.show(Message(MessageType.QUIT, text))

    def prompt_for(self, mark: str) -> str:
        return f"Player {mark} {self.prompt}"
