from __future__ import annotations

import logging
import socket
from pathlib import Path
from typing import Tuple

from .errors import TransferError
from .net import listening_socket
from .storage import OutputStore
from .transfer import TransferSession, recv_exact, recv_header


class FileServer:
    """Accepts one client at a time and stores each file it sends.

    ``next_number`` is the only state carried between connections. It only
    moves forward once a body has been received and the output file closed,
    so aborted connections never use up a file number.
    """

    def __init__(self, sock: socket.socket, store: OutputStore, first_number: int = 1):
        self.sock = sock
        self.store = store
        self.next_number = first_number

    @classmethod
    def bind(cls, port: str | int, host: str | None = None, store: OutputStore | None = None) -> "FileServer":
        store = store or OutputStore()
        store.ensure_directory()
        return cls(listening_socket(port, host), store)

    @property
    def address(self) -> Tuple[str, int]:
        host, port = self.sock.getsockname()[:2]
        return host, port

    def serve_forever(self) -> None:
        logging.info("ready for accept on %s:%d", *self.address)
        while True:
            self.serve_one()

    def serve_one(self) -> Path | None:
        """Accept and fully service a single connection."""
        logging.info("waiting for connection ...")
        try:
            conn, addr = self.sock.accept()
        except InterruptedError:
            return None
        except OSError as e:
            logging.error("accept: %s", e)
            return None

        with conn:
            return self.handle_connection(conn, addr)

    def handle_connection(self, conn: socket.socket, addr: Tuple[str, int]) -> Path | None:
        peer = f"{addr[0]}:{addr[1]}"
        logging.info("client addr: %s", peer)

        try:
            file_size = recv_header(conn)
        except TransferError as e:
            logging.error("header from %s: %s", peer, e)
            return None
        if file_size == 0:
            logging.error("the file is not sent by the client %s", peer)
            return None

        number = self.next_number
        path = self.store.path_for(number)
        session = TransferSession(peer=peer, expected=file_size)
        try:
            with open(path, "wb") as out:
                session.finish(recv_exact(conn, out, file_size))
        except (TransferError, OSError) as e:
            logging.error("receiving file %03d from %s failed: %s", number, peer, e)
            return None

        if session.complete:
            logging.info("the file is received successfully (file number: %03d, %.2f Mbps)",
                         number, session.throughput_mbps)
        else:
            logging.warning("the file size (%d) is not correct, expected %d (file number: %03d)",
                            session.transferred, session.expected, number)

        self.next_number += 1
        return path

    def close(self) -> None:
        self.sock.close()

    def __enter__(self) -> "FileServer":
        return self

    def __exit__(self, *exc) -> None:
        self.close()
