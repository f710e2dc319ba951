from __future__ import annotations

import threading

import pytest

from tcpft.server import FileServer
from tcpft.storage import OutputStore


class ServerThread:
    """Runs ``serve_one`` a fixed number of times in the background."""

    def __init__(self, server: FileServer, connections: int):
        self.server = server
        self.results: list = []
        self._t = threading.Thread(target=self._run, args=(connections,), daemon=True)

    def _run(self, connections: int) -> None:
        for _ in range(connections):
            self.results.append(self.server.serve_one())

    def start(self) -> "ServerThread":
        self._t.start()
        return self

    def join(self, timeout: float = 10.0) -> None:
        self._t.join(timeout)
        assert not self._t.is_alive(), "server thread did not finish"


@pytest.fixture
def store(tmp_path):
    return OutputStore(directory=tmp_path / "received_files")


@pytest.fixture
def server(store):
    srv = FileServer.bind(0, host="127.0.0.1", store=store)
    yield srv
    srv.close()


@pytest.fixture
def serve(server):
    def _serve(connections: int) -> ServerThread:
        return ServerThread(server, connections).start()

    return _serve
