import io
import socket
import threading
from typing import Iterable, List

import pytest

from gridtac.app.config import GameConfig
from gridtac.app.controller_base import TurnPhase
from gridtac.app.controller_guest import GuestController
from gridtac.app.controller_host import HostController
from gridtac.app.controller_local import LocalController
from gridtac.app.sources import HumanSource, MoveSource
from gridtac.cli.view import CliView
from gridtac.core.errors import MalformedNetworkMessage, PeerConnectionError
from gridtac.core.gamestate import GameState, Outcome
from gridtac.net.protocol import InitMessage, encode_init
from gridtac.net.transport import LineSocket, Transport


class Scripted(MoveSource):
    interactive = True

    def __init__(self, cells: Iterable[int]) -> None:
        self.cells = iter(cells)

    def next_move(self, state: GameState) -> int:
        return next(self.cells)


def quiet_view() -> CliView:
    return CliView(out=io.StringIO())


def lines_input(lines: List[str]):
    it = iter(lines)

    def read(prompt: str) -> str:
        try:
            return next(it)
        except StopIteration:
            raise EOFError from None
    return read


# ============================================================
# Offline play
# ============================================================

@pytest.mark.parametrize("seed", [0, 1, 2, 3, 4])
def test_random_game_reaches_terminal_state(seed):
    ctrl = LocalController(config=GameConfig(delay_ms=0, seed=seed), view=quiet_view())
    outcome = ctrl.run()

    assert ctrl.phase == TurnPhase.GAME_OVER
    assert ctrl.state.is_over
    assert outcome in (Outcome.WIN, Outcome.DRAW)
    assert 5 <= len(ctrl.state.history) <= 9
    assert len(ctrl.state.available) + len(ctrl.state.claimed()) == 9
    if outcome == Outcome.DRAW:
        assert ctrl.state.available == []


def test_random_moves_are_paced_by_delay(monkeypatch):
    naps = []
    monkeypatch.setattr("gridtac.app.controller_base.time.sleep", naps.append)
    ctrl = LocalController(config=GameConfig(delay_ms=250, seed=3), view=quiet_view())
    ctrl.run()
    assert naps == [0.25] * len(ctrl.state.history)


def test_hot_seat_reprompts_on_invalid_input():
    view = quiet_view()
    source = HumanSource(view, input_fn=lines_input(["hello", "0", "0", "/help", "1", "3", "4", "6"]))
    ctrl = LocalController(config=GameConfig(human=True), view=view, source=source)

    assert ctrl.run() == Outcome.WIN
    assert ctrl.state.winner == "X"
    assert ctrl.state.player_pattern("X") == [0, 3, 6]
    assert ctrl.state.player_pattern("O") == [1, 4]

    out = view.out.getvalue()
    assert out.count("your possible options are") == 2
    assert "Commands: /help, /quit" in out
    assert "[GAME OVER] winner is X" in out


def test_human_quit_aborts_without_error():
    view = quiet_view()
    source = HumanSource(view, input_fn=lines_input(["4", "/quit"]))
    ctrl = LocalController(config=GameConfig(human=True), view=view, source=source)

    assert ctrl.run() == Outcome.ONGOING
    assert ctrl.phase == TurnPhase.ABORTED
    assert ctrl.error is None
    assert ctrl.state.cells()[4] == "X"


def test_renders_initial_board_and_every_move():
    view = quiet_view()
    ctrl = LocalController(config=GameConfig(human=True), view=view, source=Scripted([0, 1, 3, 4, 6]))
    ctrl.run()
    assert view.out.getvalue().count("|  0  |") == 1
    assert view.out.getvalue().count("|  8  |") == 6


# ============================================================
# Remote play
# ============================================================

def run_in_thread(ctrl):
    t = threading.Thread(target=ctrl.run, daemon=True)
    t.start()
    return t


def test_host_and_joiner_stay_in_sync_until_win():
    a, b = socket.socketpair()
    host = HostController(
        config=GameConfig(),
        view=quiet_view(),
        source=Scripted([0, 3, 6]),
        transport=Transport.from_socket(a, ("joiner", 0)),
    )
    guest = GuestController(
        config=GameConfig(board_size=5, player1="A", player2="B"),
        view=quiet_view(),
        source=Scripted([1, 4]),
        transport=Transport.from_socket(b, ("host", 0)),
    )

    t = run_in_thread(host)
    guest.run()
    t.join(timeout=10)

    assert not t.is_alive()
    for ctrl in (host, guest):
        assert ctrl.phase == TurnPhase.GAME_OVER
        assert ctrl.error is None
        assert ctrl.state.winner == "X"
        assert ctrl.state.winning_pattern == (0, 3, 6)
        assert ctrl.transport is None
    assert guest.initialized
    assert guest.state.size == 3
    assert guest.local_mark == "O"
    assert host.state.cells() == guest.state.cells()
    assert host.state.available == guest.state.available == [2, 5, 7, 8]


def test_joiner_can_win_and_host_sees_it():
    a, b = socket.socketpair()
    host = HostController(
        config=GameConfig(),
        view=quiet_view(),
        source=Scripted([0, 1, 8]),
        transport=Transport.from_socket(a, ("joiner", 0)),
    )
    guest = GuestController(
        config=GameConfig(),
        view=quiet_view(),
        source=Scripted([2, 4, 6]),
        transport=Transport.from_socket(b, ("host", 0)),
    )

    t = run_in_thread(host)
    guest.run()
    t.join(timeout=10)

    assert host.state.winner == guest.state.winner == "O"
    assert host.state.winning_pattern == (2, 4, 6)
    assert host.state.cells() == guest.state.cells()


def test_integer_first_line_is_not_a_move():
    a, b = socket.socketpair()
    guest = GuestController(
        config=GameConfig(),
        view=quiet_view(),
        source=Scripted([]),
        transport=Transport.from_socket(b, ("host", 0)),
    )
    a.sendall(b"4\n")

    assert guest.run() == Outcome.ONGOING
    assert guest.phase == TurnPhase.ABORTED
    assert isinstance(guest.error, MalformedNetworkMessage)
    assert not guest.initialized
    assert guest.state.cells() == [""] * 9
    a.close()


def test_illegal_remote_move_aborts_session():
    a, b = socket.socketpair()
    peer = LineSocket(a)
    guest = GuestController(
        config=GameConfig(),
        view=quiet_view(),
        source=Scripted([1]),
        transport=Transport.from_socket(b, ("host", 0)),
    )
    peer.send_line(encode_init(InitMessage.from_state(GameState(3))))
    peer.send_line("0\n")
    peer.send_line("1\n")

    guest.run()
    assert peer.recv_line() == "1"
    assert guest.phase == TurnPhase.ABORTED
    assert isinstance(guest.error, MalformedNetworkMessage)
    assert guest.state.cells()[:2] == ["X", "O"]
    a.close()


def test_peer_disconnect_is_reported_once():
    a, b = socket.socketpair()
    view = quiet_view()
    guest = GuestController(
        config=GameConfig(),
        view=view,
        source=Scripted([]),
        transport=Transport.from_socket(b, ("host", 0)),
    )
    LineSocket(a).send_line(encode_init(InitMessage.from_state(GameState(3))))
    a.close()

    guest.run()
    assert isinstance(guest.error, PeerConnectionError)
    assert view.out.getvalue().count("[ERR]") == 1


def test_host_gives_up_after_timeout():
    a, b = socket.socketpair()
    peer = LineSocket(b)
    host = HostController(
        config=GameConfig(timeout=0.1),
        view=quiet_view(),
        source=Scripted([4]),
        transport=Transport.from_socket(a, ("joiner", 0)),
    )

    host.run()
    assert isinstance(host.error, PeerConnectionError)
    assert peer.recv_line().startswith("{")
    assert peer.recv_line() == "4"
    b.close()


def test_hot_seat_survives_oversized_number():
    view = quiet_view()
    source = HumanSource(view, input_fn=lines_input(["9" * 5000, "0", "1", "3", "4", "6"]))
    ctrl = LocalController(config=GameConfig(human=True), view=view, source=source)

    assert ctrl.run() == Outcome.WIN
    assert ctrl.state.winner == "X"
    assert "[ERR] Invalid input" in view.out.getvalue()


def test_oversized_move_line_aborts_session():
    a, b = socket.socketpair()
    peer = LineSocket(a)
    guest = GuestController(
        config=GameConfig(),
        view=quiet_view(),
        source=Scripted([]),
        transport=Transport.from_socket(b, ("host", 0)),
    )
    peer.send_line(encode_init(InitMessage.from_state(GameState(3))))
    peer.send_line("9" * 5000 + "\n")

    guest.run()
    assert guest.phase == TurnPhase.ABORTED
    assert isinstance(guest.error, MalformedNetworkMessage)
    a.close()


def test_snapshot_with_huge_board_size_aborts_session():
    a, b = socket.socketpair()
    guest = GuestController(
        config=GameConfig(),
        view=quiet_view(),
        source=Scripted([]),
        transport=Transport.from_socket(b, ("host", 0)),
    )
    a.sendall(b'{"board": [""], "availablePositions": [0], "winPatterns": [[0]], "boardSize": 1000000}\n')

    guest.run()
    assert guest.phase == TurnPhase.ABORTED
    assert isinstance(guest.error, MalformedNetworkMessage)
    assert not guest.initialized
    a.close()


def test_closed_connection_and_second_snapshot_are_errors():
    a, b = socket.socketpair()
    guest = GuestController(
        config=GameConfig(),
        view=quiet_view(),
        source=Scripted([]),
        transport=Transport.from_socket(b, ("host", 0)),
    )
    line = encode_init(InitMessage.from_state(GameState(3))).rstrip("\n")
    guest.adopt_snapshot(line)
    with pytest.raises(MalformedNetworkMessage, match="already received"):
        guest.adopt_snapshot(line)

    guest.close()
    with pytest.raises(PeerConnectionError):
        guest.connection
    with pytest.raises(PeerConnectionError):
        guest.receive_move()
    a.close()
