from __future__ import annotations

from typing import Optional

from gridtac.app.config import GameConfig
from gridtac.app.controller_base import BaseController
from gridtac.app.sources import HumanSource, MoveSource, RandomSource
from gridtac.cli.view import CliView
from gridtac.core.gamestate import GameState


class LocalController(BaseController):
    """
    Offline controller: both marks play in this process.

      - human=False: both marks pick random cells, paced by delay_ms
      - human=True:  both marks are typed at the same terminal (hot seat)
    """

    def __init__(
        self,
        *,
        config: GameConfig,
        view: Optional[CliView] = None,
        source: Optional[MoveSource] = None,
    ) -> None:
        self.cfg = config.validate()
        view = view if view is not None else CliView()
        state = GameState(self.cfg.board_size, self.cfg.players)
        super().__init__(state=state, view=view, delay_sec=self.cfg.delay_sec)

        if source is None:
            source = HumanSource(view) if self.cfg.human else RandomSource(seed=self.cfg.seed)
        self.source = source

    def source_for(self, mark: str) -> MoveSource:
        return self.source
