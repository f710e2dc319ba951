from __future__ import annotations

import logging
import os
from pathlib import Path

from .errors import SourceFileError, TransferError
from .net import open_connection
from .transfer import TransferSession, send_header, send_stream


def source_size(path: str | os.PathLike) -> int:
    try:
        size = os.stat(path).st_size
    except OSError as e:
        raise SourceFileError(f"cannot stat {path}: {e}") from e
    if size == 0:
        raise SourceFileError(f"{path} is empty; zero-byte files cannot be sent")
    return size


def send_file(host: str, port: str | int, path: str | os.PathLike) -> TransferSession:
    """Push one file to a server: connect, header, body, close.

    The header only goes out once the source file is known to be readable
    and its size fits the header field. A body cut short by an early EOF
    raises ``TransferError`` after the connection is closed.
    """
    path = Path(path)
    with open_connection(host, port) as sock:
        size = source_size(path)
        try:
            f = open(path, "rb")
        except OSError as e:
            raise SourceFileError(f"cannot open {path}: {e}") from e

        session = TransferSession(peer=f"{host}:{port}", expected=size)
        with f:
            send_header(sock, size)
            session.finish(send_stream(sock, f, size))

    if not session.complete:
        raise TransferError(
            f"sent {session.transferred} of {session.expected} bytes; {path} shrank while sending"
        )
    logging.info("sent %d bytes", session.transferred)
    if session.duration_s > 0:
        logging.info("done; throughput=%.2f Mbps", session.throughput_mbps)
    return session
