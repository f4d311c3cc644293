from __future__ import annotations

import random
from abc import ABC, abstractmethod
from typing import Callable, Optional

from gridtac.cli.commands import CommandProcessor, CommandType
from gridtac.cli.view import CliView
from gridtac.core.errors import QuitRequested
from gridtac.core.gamestate import GameState


class MoveSource(ABC):
    """
    Where the next move for a mark comes from.

    interactive: the source paces itself (human typing, peer waiting),
                 so the controller adds no delay before asking it.
    local:       moves are produced in this process and must be relayed
                 to a peer in remote play.
    """
    interactive: bool = False
    local: bool = True

    @abstractmethod
    def next_move(self, state: GameState) -> int:
        raise NotImplementedError


class RandomSource(MoveSource):
    """Picks uniformly among the available cells. Never suspends."""

    def __init__(self, seed: Optional[int] = None, rng: Optional[random.Random] = None) -> None:
        self._rng = rng if rng is not None else random.Random(seed)

    def next_move(self, state: GameState) -> int:
        return self._rng.choice(state.available)


class HumanSource(MoveSource):
    """
    Reads lines until one names an available cell.

    Invalid input is reported with the legal cells and asked again in a
    loop; only /quit or end of input leave without a move.
    """
    interactive = True

    def __init__(
        self,
        view: CliView,
        *,
        input_fn: Callable[[str], str] = input,
        commands: Optional[CommandProcessor] = None,
    ) -> None:
        self.view = view
        self._input = input_fn
        self._commands = commands

    def next_move(self, state: GameState) -> int:
        cmd = self._commands or CommandProcessor(board_size=state.size)
        while True:
            try:
                line = self._input(self.view.prompt_for(state.current_player))
            except EOFError:
                raise QuitRequested("end of input") from None

            parsed = cmd.parse(line, state.available)
            if not parsed.ok:
                self.view.show_invalid(state.available, parsed.error)
                continue

            if parsed.command is not None:
                if parsed.command.type == CommandType.QUIT:
                    raise QuitRequested("quit requested")
                self.view.show_info(cmd.help_text())
                continue

            return parsed.cell


class RemoteSource(MoveSource):
    """Moves relayed by the peer; receive() blocks until one arrives."""
    interactive = True
    local = False

    def __init__(self, receive: Callable[[], int]) -> None:
        self._receive = receive

    def next_move(self, state: GameState) -> int:
        return self._receive()
