from __future__ import annotations

import logging
from typing import Optional

from gridtac.app.config import GameConfig
from gridtac.app.controller_peer import PeerController
from gridtac.app.sources import MoveSource
from gridtac.cli.view import CliView
from gridtac.net.protocol import InitMessage, encode_init
from gridtac.net.transport import Transport

logger = logging.getLogger(__name__)

BIND_HOST = "0.0.0.0"


class HostController(PeerController):
    """
    Host controller:
      - Owns the canonical initial state and plays the first mark
      - Accepts one joiner connection
      - Sends the full state snapshot as the very first line
    """

    def __init__(
        self,
        *,
        config: GameConfig,
        view: Optional[CliView] = None,
        source: Optional[MoveSource] = None,
        transport: Optional[Transport] = None,
    ) -> None:
        super().__init__(config=config, local_index=0, view=view, source=source, transport=transport)

    def on_start(self) -> None:
        if self.transport is None:
            self.view.show_info(f"Listening on {BIND_HOST}:{self.cfg.port} ...")
            self.view.show_info("Waiting for one opponent to join...")
            tr, srv = Transport.listen_and_accept(BIND_HOST, self.cfg.port)
            srv.close()
            self.transport = tr

        self.transport.send_line(encode_init(InitMessage.from_state(self.state)))
        logger.info("sent initialization snapshot to %s", self.transport.peer_label)
        self.view.show_info(f"Connected to {self.transport.peer_label}. You play {self.local_mark}.")
