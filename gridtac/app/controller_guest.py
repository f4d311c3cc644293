from __future__ import annotations

import logging
from typing import Optional

from gridtac.app.config import CONNECT_TIMEOUT_SEC, GameConfig
from gridtac.app.controller_peer import PeerController
from gridtac.app.sources import MoveSource
from gridtac.cli.view import CliView
from gridtac.core.errors import MalformedNetworkMessage
from gridtac.net.protocol import decode_init
from gridtac.net.transport import Transport

logger = logging.getLogger(__name__)


class GuestController(PeerController):
    """
    Joiner controller:
      - Connects to the host and plays the second mark
      - The first received line is always the state snapshot and replaces
        the local GameState (marks and win patterns included)
      - Every later line is a move
    """

    def __init__(
        self,
        *,
        config: GameConfig,
        view: Optional[CliView] = None,
        source: Optional[MoveSource] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        super().__init__(config=config, local_index=1, view=view, source=source, transport=transport)
        self.initialized: bool = False

    def on_start(self) -> None:
        if self.transport is None:
            self.view.show_info(f"Connecting to {self.cfg.host}:{self.cfg.port}...")
            self.transport = Transport.connect(self.cfg.host, self.cfg.port, timeout=CONNECT_TIMEOUT_SEC)

        self.adopt_snapshot(self.receive_line())
        self.view.you = self.local_mark
        self.view.show_info(f"Connected to {self.connection.peer_label}. You play {self.local_mark}.")

    def receive_move(self) -> int:
        if not self.initialized:
            raise MalformedNetworkMessage("move requested before the initialization snapshot")
        return super().receive_move()

    def adopt_snapshot(self, line: str) -> None:
        """
        Replace the local GameState with the host's snapshot.

        Runs once per session: the initialized latch rejects a second call.
        """
        if self.initialized:
            raise MalformedNetworkMessage("initialization snapshot already received", line)

        snapshot = decode_init(line)
        self.state = snapshot.to_state()
        self.initialized = True
        logger.info(
            "adopted %dx%d snapshot from host, marks %s/%s",
            self.state.size, self.state.size, *self.state.players,
        )
