from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from gridtac.app.config import DEFAULT_BOARD_SIZE, DEFAULT_DELAY_MS, GameConfig
from gridtac.app.controller_base import BaseController
from gridtac.app.controller_guest import GuestController
from gridtac.app.controller_host import HostController
from gridtac.app.controller_local import LocalController
from gridtac.core.errors import ConfigurationError
from gridtac.net.protocol import DEFAULT_PORT


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(prog="gridtac", description="Tic-tac-toe on an N x N grid")
    ap.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--size", type=int, default=DEFAULT_BOARD_SIZE, help="Board dimension N (default: 3)")
    common.add_argument("--player1", default="X", help="Mark of the first player (default: X)")
    common.add_argument("--player2", default="O", help="Mark of the second player (default: O)")

    sub = ap.add_subparsers(dest="mode", required=True)

    ap_play = sub.add_parser("play", parents=[common], help="Play offline")
    ap_play.add_argument(
        "--human",
        action="store_true",
        help="Both players type their moves (default: random moves)",
    )
    ap_play.add_argument(
        "--delay",
        type=int,
        default=DEFAULT_DELAY_MS,
        help="Milliseconds between random moves (default: 2000)",
    )
    ap_play.add_argument("--seed", type=int, default=None, help="Seed for random moves")

    ap_host = sub.add_parser("host", parents=[common], help="Wait for a remote opponent")
    ap_host.add_argument("--port", type=int, default=DEFAULT_PORT)
    ap_host.add_argument("--timeout", type=float, default=None, help="Seconds to wait for each opponent move")

    ap_join = sub.add_parser("join", parents=[common], help="Join a hosted game")
    ap_join.add_argument("--host", required=True)
    ap_join.add_argument("--port", type=int, default=DEFAULT_PORT)
    ap_join.add_argument("--timeout", type=float, default=None, help="Seconds to wait for each opponent move")

    return ap


def config_from_args(args: argparse.Namespace) -> GameConfig:
    cfg = GameConfig(
        board_size=args.size,
        player1=args.player1,
        player2=args.player2,
        human=getattr(args, "human", False),
        delay_ms=getattr(args, "delay", DEFAULT_DELAY_MS),
        seed=getattr(args, "seed", None),
        remote=args.mode in ("host", "join"),
        port=getattr(args, "port", DEFAULT_PORT),
        timeout=getattr(args, "timeout", None),
    )
    if args.mode == "join":
        cfg.host = args.host
        cfg.human = True
    elif args.mode == "host":
        cfg.human = True
    return cfg.validate()


def build_controller(mode: str, cfg: GameConfig) -> BaseController:
    if mode == "host":
        return HostController(config=cfg)
    if mode == "join":
        return GuestController(config=cfg)
    return LocalController(config=cfg)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg = config_from_args(args)
    except ConfigurationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2

    ctrl = build_controller(args.mode, cfg)
    ctrl.run()
    return 1 if ctrl.error is not None else 0


if __name__ == "__main__":
    sys.exit(main())
