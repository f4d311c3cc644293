from __future__ import annotations

import json
from dataclasses import dataclass
from typing import List, Tuple

from gridtac.core.errors import MalformedNetworkMessage
from gridtac.core.gamestate import GameState

# Wire format: one UTF-8 line per message, terminated by "\n".
#
#   INIT (host -> joiner, exactly once, first line of the session):
#     {"board": ["", "X", ...], "availablePositions": [0, 2, ...],
#      "winPatterns": [[0, 1, 2], ...], "boardSize": 3,
#      "players": ["X", "O"], "currentPlayer": "X"}
#
#   MOVE (either direction, one per turn):
#     4

DEFAULT_PORT = 33333

_INIT_KEYS = ("board", "availablePositions", "winPatterns", "boardSize")


@dataclass(frozen=True)
class InitMessage:
    """Full state snapshot sent by the host when the joiner connects."""
    board: Tuple[str, ...]
    available_positions: Tuple[int, ...]
    win_patterns: Tuple[Tuple[int, ...], ...]
    board_size: int
    players: Tuple[str, str] = ("X", "O")
    current_player: str = "X"

    @staticmethod
    def from_state(state: GameState) -> "InitMessage":
        return InitMessage(
            board=tuple(state.cells()),
            available_positions=tuple(state.available),
            win_patterns=tuple(tuple(p) for p in state.patterns),
            board_size=state.size,
            players=state.players,
            current_player=state.current_player,
        )

    def to_state(self) -> GameState:
        """
        Build the replica this snapshot describes.

        Raises:
            MalformedNetworkMessage if the snapshot is inconsistent.
        """
        try:
            return GameState.restore(
                size=self.board_size,
                players=self.players,
                board=self.board,
                available=self.available_positions,
                patterns=self.win_patterns,
                current_player=self.current_player,
            )
        except (TypeError, ValueError) as exc:
            raise MalformedNetworkMessage(f"inconsistent initialization snapshot: {exc}") from exc

    def to_dict(self) -> dict:
        return {
            "board": list(self.board),
            "availablePositions": list(self.available_positions),
            "winPatterns": [list(p) for p in self.win_patterns],
            "boardSize": self.board_size,
            "players": list(self.players),
            "currentPlayer": self.current_player,
        }


def _int_list(value: object, key: str, line: str) -> List[int]:
    if not isinstance(value, list) or not all(
        isinstance(v, int) and not isinstance(v, bool) for v in value
    ):
        raise MalformedNetworkMessage(f"'{key}' must be a list of integers", line)
    return value


def encode_init(msg: InitMessage) -> str:
    """Serialize an InitMessage into one line (ending with \\n)."""
    return json.dumps(msg.to_dict(), separators=(",", ":")) + "\n"


def decode_init(line: str) -> InitMessage:
    """
    Parse the first line of a session as an initialization snapshot.

    An integer-looking payload is NOT accepted here: the first line is
    never a move.
    """
    raw = (line or "").strip()
    try:
        data = json.loads(raw)
    except ValueError as exc:
        raise MalformedNetworkMessage("initialization snapshot is not valid JSON", raw) from exc

    if not isinstance(data, dict):
        raise MalformedNetworkMessage("expected initialization snapshot object", raw)
    missing = [k for k in _INIT_KEYS if k not in data]
    if missing:
        raise MalformedNetworkMessage(f"initialization snapshot missing {', '.join(missing)}", raw)

    board = data["board"]
    if not isinstance(board, list) or not all(isinstance(c, str) for c in board):
        raise MalformedNetworkMessage("'board' must be a list of strings", raw)

    size = data["boardSize"]
    if not isinstance(size, int) or isinstance(size, bool) or size < 1:
        raise MalformedNetworkMessage("'boardSize' must be a positive integer", raw)

    available = _int_list(data["availablePositions"], "availablePositions", raw)

    patterns = data["winPatterns"]
    if not isinstance(patterns, list):
        raise MalformedNetworkMessage("'winPatterns' must be a list of lists", raw)
    patterns = [_int_list(p, "winPatterns", raw) for p in patterns]

    # shape checks before any board is allocated for boardSize
    if len(board) != size * size:
        raise MalformedNetworkMessage(
            f"'board' has {len(board)} cells, 'boardSize' {size} needs {size * size}", raw[:64]
        )
    if any(len(p) != size for p in patterns):
        raise MalformedNetworkMessage(f"every win pattern must have {size} cells", raw[:64])

    players = data.get("players", ["X", "O"])
    if (
        not isinstance(players, list)
        or len(players) != 2
        or not all(isinstance(p, str) for p in players)
    ):
        raise MalformedNetworkMessage("'players' must be a list of two strings", raw)

    current = data.get("currentPlayer", players[0])
    if not isinstance(current, str):
        raise MalformedNetworkMessage("'currentPlayer' must be a string", raw)

    return InitMessage(
        board=tuple(board),
        available_positions=tuple(available),
        win_patterns=tuple(tuple(p) for p in patterns),
        board_size=size,
        players=(players[0], players[1]),
        current_player=current,
    )


def encode_move(cell: int) -> str:
    return f"{int(cell)}\n"


def decode_move(line: str) -> int:
    """Parse a move line: the decimal cell index."""
    raw = (line or "").strip()
    if not (raw.isascii() and raw.isdigit()):
        raise MalformedNetworkMessage("expected a cell index", raw)
    try:
        return int(raw)
    except ValueError as exc:
        # longer than int() accepts from a string
        raise MalformedNetworkMessage("expected a cell index", raw[:32]) from exc
