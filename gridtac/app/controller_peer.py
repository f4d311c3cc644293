from __future__ import annotations

import logging
from typing import Optional

from gridtac.app.config import GameConfig
from gridtac.app.controller_base import BaseController
from gridtac.app.sources import HumanSource, MoveSource, RemoteSource
from gridtac.cli.view import CliView
from gridtac.core.errors import PeerConnectionError
from gridtac.core.gamestate import GameState
from gridtac.net.protocol import decode_move, encode_move
from gridtac.net.transport import Transport

logger = logging.getLogger(__name__)


class PeerController(BaseController):
    """
    Shared lock-step loop for the host and joiner roles.

      - The local mark is played by `source` (a human by default).
      - The other mark is played by the peer: its turn blocks on the
        transport until a move line arrives.
      - Every local move is sent to the peer right after it is applied.
      - The connection is closed as soon as the game is over.
    """

    def __init__(
        self,
        *,
        config: GameConfig,
        local_index: int,
        view: Optional[CliView] = None,
        source: Optional[MoveSource] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        self.cfg = config.validate()
        view = view if view is not None else CliView()
        state = GameState(self.cfg.board_size, self.cfg.players)
        super().__init__(state=state, view=view, delay_sec=0.0)

        self.transport = transport
        self.local_index = local_index
        self.local_source: MoveSource = source if source is not None else HumanSource(view)
        self.remote_source = RemoteSource(self.receive_move)
        self.view.you = self.local_mark

    @property
    def local_mark(self) -> str:
        return self.state.players[self.local_index]

    # ---------- Network helpers ----------

    @property
    def connection(self) -> Transport:
        """The open transport; raises PeerConnectionError once it is closed."""
        if self.transport is None:
            raise PeerConnectionError("No connection to peer")
        return self.transport

    def receive_line(self) -> str:
        return self.connection.recv_line(timeout=self.cfg.timeout)

    def receive_move(self) -> int:
        self.view.show_info(f"Waiting for {self.connection.peer_label}...")
        return decode_move(self.receive_line())

    def close(self) -> None:
        if self.transport is None:
            return
        transport, self.transport = self.transport, None
        transport.close()

    # ---------- Base hooks ----------

    def source_for(self, mark: str) -> MoveSource:
        if mark == self.local_mark:
            return self.local_source
        return self.remote_source

    def on_move_applied(self, mark: str, cell: int, source: MoveSource) -> None:
        if not source.local:
            return
        self.connection.send_line(encode_move(cell))

    def on_game_over(self) -> None:
        logger.info("game over, closing connection")
        self.close()

    def on_stop(self) -> None:
        self.close()
