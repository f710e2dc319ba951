from __future__ import annotations

import io
import logging
import socket
import time
from dataclasses import dataclass, field
from typing import BinaryIO

from .constants import BUFSIZE, HEADER_SIZE
from .errors import TransferError
from .header import decode_header, encode_header


@dataclass(slots=True)
class TransferSession:
    """Per-connection bookkeeping: what was promised vs. what moved."""

    peer: str
    expected: int
    transferred: int = 0
    start_ts: float = field(default_factory=time.monotonic)
    end_ts: float | None = None

    def finish(self, transferred: int) -> None:
        self.transferred = transferred
        self.end_ts = time.monotonic()

    @property
    def complete(self) -> bool:
        return self.transferred == self.expected

    @property
    def duration_s(self) -> float:
        if self.end_ts is None:
            return 0.0
        return max(0.0, self.end_ts - self.start_ts)

    @property
    def throughput_mbps(self) -> float:
        if self.duration_s <= 0:
            return 0.0
        return (self.transferred * 8 / 1_000_000) / self.duration_s


def send_exact(sock: socket.socket, data: bytes, total_length: int) -> int:
    """Send the first ``total_length`` bytes of ``data``.

    Each ``send`` is bounded to ``BUFSIZE`` and may move fewer bytes than
    asked; the loop keeps going until everything is out. A failed send
    raises ``TransferError``.
    """
    if total_length > len(data):
        raise ValueError(f"total_length {total_length} exceeds data length {len(data)}")

    view = memoryview(data)
    total = 0
    while total < total_length:
        size = min(BUFSIZE, total_length - total)
        try:
            sent = sock.send(view[total : total + size])
        except OSError as e:
            raise TransferError(f"send failed after {total} bytes: {e}") from e
        if sent == 0:
            raise TransferError(f"connection broken after {total} bytes")
        total += sent
    return total


def send_stream(sock: socket.socket, f: BinaryIO, total_length: int) -> int:
    """Stream ``total_length`` bytes from ``f`` one buffer at a time.

    Returns the number of bytes sent, which is short if ``f`` hits EOF early.
    """
    total = 0
    while total < total_length:
        chunk = f.read(min(BUFSIZE, total_length - total))
        if not chunk:
            logging.info("EOF found after %d of %d bytes", total, total_length)
            break
        total += send_exact(sock, chunk, len(chunk))
    logging.debug("sent %d bytes", total)
    return total


def recv_exact(sock: socket.socket, sink: BinaryIO, total_length: int) -> int:
    """Receive up to ``total_length`` bytes into ``sink``.

    Stops early if the peer closes. The return value is then smaller than
    ``total_length`` and the caller has to treat it as a short transfer.
    """
    total = 0
    while total < total_length:
        try:
            chunk = sock.recv(min(BUFSIZE, total_length - total))
        except OSError as e:
            raise TransferError(f"recv failed after {total} bytes: {e}") from e
        if not chunk:
            logging.debug("peer closed after %d of %d bytes", total, total_length)
            break
        sink.write(chunk)
        total += len(chunk)
    return total


def send_header(sock: socket.socket, file_size: int) -> int:
    header = encode_header(file_size)
    sent = send_exact(sock, header, HEADER_SIZE)
    logging.info("sent header; file size: %d bytes", file_size)
    return sent


def recv_header(sock: socket.socket) -> int:
    """Read one header and return the declared body size.

    A peer that closes before a full header arrives yields 0, the same value
    a malformed header decodes to.
    """
    buf = io.BytesIO()
    received = recv_exact(sock, buf, HEADER_SIZE)
    if received < HEADER_SIZE:
        logging.debug("header cut short at %d bytes", received)
        return 0
    file_size = decode_header(buf.getvalue())
    logging.info("file size: %d bytes", file_size)
    return file_size
