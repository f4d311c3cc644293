from __future__ import annotations

import logging
import time
from abc import ABC, abstractmethod
from enum import Enum
from typing import Optional

from gridtac.app.sources import MoveSource
from gridtac.cli.view import CliView
from gridtac.core.errors import (
    InvalidMoveError,
    MalformedNetworkMessage,
    PeerConnectionError,
    QuitRequested,
)
from gridtac.core.gamestate import GameState, Outcome

logger = logging.getLogger(__name__)


class TurnPhase(Enum):
    NOT_STARTED = "not_started"
    AWAITING_MOVE = "awaiting_move"
    EVALUATING = "evaluating"
    GAME_OVER = "game_over"
    ABORTED = "aborted"


# =========================
# Base Controller
# =========================

class BaseController(ABC):
    """
    Common turn loop:
      - on_start(), then render the initial board
      - ask the current mark's MoveSource for a move
      - apply it, render, relay (remote), evaluate win then draw
      - advance the turn, or stop at GAME_OVER

    Concrete controllers implement:
      - source_for(mark)
      - on_start() / on_move_applied() / on_game_over() / on_stop() (optional)

    OOP rule:
      - Controller orchestrates.
      - GameState handles gameplay.
      - View renders only.
      - MoveSources produce cell indices only.
    """

    def __init__(
        self,
        *,
        state: GameState,
        view: CliView,
        delay_sec: float = 0.0,
    ) -> None:
        self.state = state
        self.view = view
        self.delay_sec = delay_sec
        self.phase = TurnPhase.NOT_STARTED
        self.error: Optional[Exception] = None

    # ---------- Main loop ----------

    def run(self) -> Outcome:
        """
        Play until the game ends or the session is aborted.

        Protocol and connection errors are reported once and end the
        session; they are not re-raised.
        """
        try:
            self.on_start()
            self._render()
            self.phase = TurnPhase.AWAITING_MOVE

            while self.phase == TurnPhase.AWAITING_MOVE:
                self._play_turn()

        except QuitRequested as exc:
            self.phase = TurnPhase.ABORTED
            logger.info("session ended by user: %s", exc)
            self.view.show_quit()
        except (PeerConnectionError, MalformedNetworkMessage) as exc:
            self.phase = TurnPhase.ABORTED
            self.error = exc
            logger.error("session aborted: %s", exc)
            self.view.show_error(str(exc))
        finally:
            self.on_stop()

        if self.phase == TurnPhase.GAME_OVER:
            return Outcome.WIN if self.state.winner is not None else Outcome.DRAW
        return Outcome.ONGOING

    def _play_turn(self) -> None:
        mark = self.state.current_player
        source = self.source_for(mark)

        if not source.interactive and self.delay_sec > 0:
            time.sleep(self.delay_sec)

        self.view.show_playing(mark)
        cell = self._obtain_move(source)

        self.phase = TurnPhase.EVALUATING
        logger.debug("player %s claimed cell %d", mark, cell)
        self._render()
        self.on_move_applied(mark, cell, source)

        outcome = self.state.evaluate()
        if outcome == Outcome.ONGOING:
            self.state.advance_turn()
            self.phase = TurnPhase.AWAITING_MOVE
            return

        self.phase = TurnPhase.GAME_OVER
        self.view.show_outcome(self.state)
        self.on_game_over()

    def _obtain_move(self, source: MoveSource) -> int:
        while True:
            cell = source.next_move(self.state)
            try:
                self.state.apply_move(cell)
                return cell
            except InvalidMoveError as exc:
                if not source.local:
                    raise MalformedNetworkMessage(f"peer sent an illegal move: {exc.reason}", str(cell)) from exc
                self.view.show_invalid(self.state.available, exc.reason)

    # ---------- Rendering ----------

    def _render(self) -> None:
        self.view.render_board(self.state.cells(), self.state.size)

    # =========================
    # Hooks / Abstract methods
    # =========================

    @abstractmethod
    def source_for(self, mark: str) -> MoveSource:
        """Return the MoveSource entitled to play mark."""
        raise NotImplementedError

    def on_start(self) -> None:
        """Optional hook before the initial render."""
        pass

    def on_move_applied(self, mark: str, cell: int, source: MoveSource) -> None:
        """Optional hook after a move is applied and rendered, before evaluation."""
        pass

    def on_game_over(self) -> None:
        """Optional hook once GAME_OVER is reached."""
        pass

    def on_stop(self) -> None:
        """Optional hook after the loop ends, however it ends."""
        pass
