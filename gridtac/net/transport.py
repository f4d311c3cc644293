from __future__ import annotations

import logging
import queue
import socket
import threading
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from gridtac.core.errors import MalformedNetworkMessage, PeerConnectionError

logger = logging.getLogger(__name__)

# Longest accepted line, newline excluded. Fits the init snapshot of boards up to ~100x100.
MAX_LINE_BYTES = 1 << 20

# Inbox items: a received line, None on disconnect, or the error that ended reading.
InboxItem = Union[str, None, MalformedNetworkMessage]


class LineSocket:
    """
    Minimal line-based socket wrapper.
    - recv_line(): returns one line without trailing '\\n' or None on disconnect
    - send_line(): sends string (must include '\\n')

    Bytes are buffered until a newline arrives, so one logical message may
    span several recv() calls and one recv() may carry several messages.
    """
    def __init__(self, sock: socket.socket, max_line: int = MAX_LINE_BYTES) -> None:
        self.sock = sock
        self.max_line = max_line
        if sock.family in (socket.AF_INET, socket.AF_INET6):
            self.sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
        self._buf = b""
        self._send_lock = threading.Lock()

    def send_line(self, line: str) -> None:
        data = line.encode("utf-8")
        with self._send_lock:
            self.sock.sendall(data)

    def recv_line(self) -> Optional[str]:
        """
        Raises:
            MalformedNetworkMessage if more than max_line bytes arrive without a newline.
        """
        while b"\n" not in self._buf:
            if len(self._buf) > self.max_line:
                size = len(self._buf)
                self._buf = b""
                raise MalformedNetworkMessage(f"line exceeds {self.max_line} bytes (got {size} without newline)")
            chunk = self.sock.recv(4096)
            if not chunk:
                return None
            self._buf += chunk
        raw, self._buf = self._buf.split(b"\n", 1)
        if len(raw) > self.max_line:
            raise MalformedNetworkMessage(f"line exceeds {self.max_line} bytes (got {len(raw)})")
        return raw.decode("utf-8", errors="replace")


class Receiver(threading.Thread):
    """
    Dedicated receiver thread:
      - reads lines
      - pushes them into the inbox queue
      - pushes None once the connection is gone
      - pushes the MalformedNetworkMessage that stopped reading, then stops

    It never touches game state; the controller thread drains the inbox.
    """
    def __init__(self, ls: LineSocket, inbox: "queue.Queue[InboxItem]") -> None:
        super().__init__(daemon=True)
        self._ls = ls
        self._inbox = inbox
        self._running = True

    def stop(self) -> None:
        self._running = False

    def run(self) -> None:
        while self._running:
            try:
                line = self._ls.recv_line()
            except MalformedNetworkMessage as exc:
                logger.debug("receive rejected: %s", exc)
                self._inbox.put(exc)
                break
            except OSError as exc:
                logger.debug("receive failed: %s", exc)
                line = None

            if line is None:
                self._inbox.put(None)
                break

            logger.debug("recv %r", line)
            self._inbox.put(line)


@dataclass
class Transport:
    """
    High-level transport:
      - send_line(str)
      - recv_line(timeout) for the next received line
      - receiver thread feeding the inbox
    """
    ls: LineSocket
    inbox: "queue.Queue[InboxItem]"
    receiver: Receiver
    peer: Tuple[str, int]

    def send_line(self, line: str) -> None:
        logger.debug("send %r", line.rstrip("\n"))
        try:
            self.ls.send_line(line)
        except OSError as exc:
            raise PeerConnectionError(f"Failed to send to {self.peer_label}: {exc}") from exc

    def recv_line(self, timeout: Optional[float] = None) -> str:
        """
        Block until the next line arrives.

        Raises:
            PeerConnectionError on disconnect, or if timeout (seconds) expires.
            MalformedNetworkMessage if the peer sent an over-long line.
        """
        try:
            line = self.inbox.get(timeout=timeout)
        except queue.Empty:
            raise PeerConnectionError(
                f"No message from {self.peer_label} within {timeout:g}s"
            ) from None
        if line is None:
            raise PeerConnectionError(f"Connection closed by {self.peer_label}")
        if isinstance(line, MalformedNetworkMessage):
            raise line
        return line

    @property
    def peer_label(self) -> str:
        host, port = self.peer
        return f"{host}:{port}" if port else str(host or "peer")

    def close(self) -> None:
        self.receiver.stop()
        try:
            self.ls.sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass  # already disconnected
        self.ls.sock.close()
        logger.debug("closed connection to %s", self.peer_label)

    # ---------- Factory methods ----------

    @staticmethod
    def from_socket(sock: socket.socket, peer: Tuple[str, int]) -> "Transport":
        """Wrap an already connected socket and start its receiver."""
        ls = LineSocket(sock)
        inbox: "queue.Queue[InboxItem]" = queue.Queue()
        recv = Receiver(ls, inbox)
        recv.start()
        return Transport(ls=ls, inbox=inbox, receiver=recv, peer=peer)

    @staticmethod
    def connect(host: str, port: int, timeout: float = 10.0) -> "Transport":
        sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        sock.settimeout(timeout)
        try:
            sock.connect((host, port))
        except OSError as exc:
            sock.close()
            raise PeerConnectionError(f"Could not connect to {host}:{port}: {exc}") from exc
        sock.settimeout(None)
        logger.info("connected to %s:%d", host, port)
        return Transport.from_socket(sock, (host, port))

    @staticmethod
    def listen_and_accept(bind_host: str, port: int, backlog: int = 1) -> Tuple["Transport", socket.socket]:
        """
        Returns (Transport, server_socket) so caller can close server socket separately.
        """
        srv = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        srv.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        try:
            srv.bind((bind_host, port))
            srv.listen(backlog)
            logger.info("listening on %s:%d", bind_host, port)
            conn, addr = srv.accept()
        except OSError as exc:
            srv.close()
            raise PeerConnectionError(f"Could not accept on {bind_host}:{port}: {exc}") from exc

        logger.info("accepted connection from %s:%d", addr[0], addr[1])
        return Transport.from_socket(conn, (addr[0], addr[1])), srv
