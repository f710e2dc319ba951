from __future__ import annotations

import logging
import socket
import time
from dataclasses import dataclass

from .errors import ConnectError, ResolutionError


@dataclass(frozen=True, slots=True)
class Impairment:
    """Caps how much a single send/recv may move, and optionally delays it."""

    max_chunk: int = 0
    delay_ms: int = 0

    def clamp(self, n: int) -> int:
        if self.max_chunk > 0:
            return min(n, self.max_chunk)
        return n

    def sleep_if_needed(self) -> None:
        if self.delay_ms > 0:
            time.sleep(self.delay_ms / 1000.0)


class ImpairedSocket:
    """Stream socket wrapper that forces short sends and short receives."""

    def __init__(self, sock: socket.socket, impairment: Impairment):
        self._sock = sock
        self.impairment = impairment

    def send(self, data: bytes) -> int:
        self.impairment.sleep_if_needed()
        return self._sock.send(data[: self.impairment.clamp(len(data))])

    def recv(self, bufsize: int) -> bytes:
        self.impairment.sleep_if_needed()
        return self._sock.recv(self.impairment.clamp(bufsize))

    def __getattr__(self, item):
        return getattr(self._sock, item)

    def __enter__(self) -> "ImpairedSocket":
        return self

    def __exit__(self, *exc) -> None:
        self._sock.close()


def _resolve(host: str | None, port: str | int, flags: int = 0) -> tuple:
    try:
        infos = socket.getaddrinfo(host, port, socket.AF_INET, socket.SOCK_STREAM, 0, flags)
    except (socket.gaierror, UnicodeError) as e:
        raise ResolutionError(f"cannot resolve {host or '*'}:{port}: {e}") from e
    if not infos:
        raise ResolutionError(f"no addresses for {host or '*'}:{port}")
    return infos[0]


def open_connection(host: str, port: str | int) -> socket.socket:
    """Resolve ``host``:``port`` and return a connected stream socket."""
    family, socktype, proto, _, addr = _resolve(host, port)
    logging.debug("connecting to %s:%d", *addr)
    sock = socket.socket(family, socktype, proto)
    try:
        sock.connect(addr)
    except OSError as e:
        sock.close()
        raise ConnectError(f"connect to {addr[0]}:{addr[1]} failed: {e}") from e
    return sock


def listening_socket(port: str | int, host: str | None = None) -> socket.socket:
    """Bind a passive stream socket on ``port`` and start listening."""
    family, socktype, proto, _, addr = _resolve(host, port, socket.AI_PASSIVE)
    sock = socket.socket(family, socktype, proto)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind(addr)
        sock.listen(socket.SOMAXCONN)
    except OSError as e:
        sock.close()
        raise ConnectError(f"cannot listen on {addr[0]}:{addr[1]}: {e}") from e
    logging.debug("listening on %s:%d", *sock.getsockname())
    return sock
