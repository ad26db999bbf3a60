from __future__ import annotations

import logging
import socket
from dataclasses import dataclass
from typing import Tuple

from .constants import LISTEN_BACKLOG
from .errors import NetworkError


@dataclass(frozen=True, slots=True)
class Throttle:
    """Caps the bytes moved by a single send/recv call (0 means no cap)."""

    max_segment: int = 0

    def clip(self, view: memoryview) -> memoryview:
        if self.max_segment > 0:
            return view[: self.max_segment]
        return view


class TcpEndpoint:
    def __init__(
        self,
        sock: socket.socket,
        peer: Tuple[str, int] | None = None,
        throttle: Throttle | None = None,
    ):
        self.sock = sock
        self.peer = peer
        self.throttle = throttle or Throttle()

    @classmethod
    def connect(cls, host: str, port: int, throttle: Throttle | None = None) -> "TcpEndpoint":
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise NetworkError(f"socket: {exc}") from exc
        try:
            sock.connect((host, port))
        except OSError as exc:
            sock.close()
            raise NetworkError(f"connect to {host}:{port}: {exc}") from exc
        logging.info("connected to %s:%d", host, port)
        return cls(sock, (host, port), throttle)

    @classmethod
    def listening(
        cls,
        host: str,
        port: int,
        backlog: int = LISTEN_BACKLOG,
        throttle: Throttle | None = None,
    ) -> "TcpEndpoint":
        try:
            sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        except OSError as exc:
            raise NetworkError(f"socket: {exc}") from exc
        try:
            sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            sock.bind((host, port))
            sock.listen(backlog)
        except OSError as exc:
            sock.close()
            raise NetworkError(f"bind/listen on {host}:{port}: {exc}") from exc
        logging.info("listening on %s:%d", *sock.getsockname()[:2])
        return cls(sock, None, throttle)

    @property
    def address(self) -> Tuple[str, int]:
        return self.sock.getsockname()[:2]

    def accept(self) -> "TcpEndpoint":
        try:
            conn, peer = self.sock.accept()
        except OSError as exc:
            raise NetworkError(f"accept: {exc}") from exc
        logging.info("connected from %s:%d", *peer[:2])
        return TcpEndpoint(conn, peer[:2], self.throttle)

    def send(self, data: bytes | memoryview) -> int:
        return self.sock.send(self.throttle.clip(memoryview(data)))

    def recv_into(self, buffer: bytearray | memoryview) -> int:
        return self.sock.recv_into(self.throttle.clip(memoryview(buffer)))

    def close(self) -> None:
        self.sock.close()

    def __enter__(self) -> "TcpEndpoint":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
