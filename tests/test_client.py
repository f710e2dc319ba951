from __future__ import annotations

import socket

import pytest

from tcpft import client
from tcpft.client import send_file
from tcpft.constants import BUFSIZE
from tcpft.errors import ConnectError, ResolutionError, SourceFileError, TransferError


@pytest.mark.parametrize("n", [1, BUFSIZE, 10 * BUFSIZE + 3])
def test_send_file(server, serve, store, tmp_path, n):
    src = tmp_path / "src.bin"
    src.write_bytes(bytes(i % 256 for i in range(n)))
    st = serve(1)
    session = send_file(*server.address, src)
    st.join()
    assert session.complete
    assert session.expected == n
    assert store.path_for(1).read_bytes() == src.read_bytes()


def test_missing_source(server, serve, tmp_path):
    st = serve(1)
    with pytest.raises(SourceFileError):
        send_file(*server.address, tmp_path / "nope")
    st.join()
    assert st.results == [None]


def test_empty_source_sends_nothing(server, serve, tmp_path):
    src = tmp_path / "empty"
    src.write_bytes(b"")
    st = serve(1)
    with pytest.raises(SourceFileError):
        send_file(*server.address, src)
    st.join()
    assert st.results == [None]
    assert server.next_number == 1


def test_connection_refused(tmp_path):
    src = tmp_path / "src.bin"
    src.write_bytes(b"x")
    s = socket.socket()
    s.bind(("127.0.0.1", 0))
    port = s.getsockname()[1]
    s.close()
    with pytest.raises(ConnectError):
        send_file("127.0.0.1", port, src)


def test_resolution_failure(monkeypatch, tmp_path):
    def boom(*a, **kw):
        raise socket.gaierror(socket.EAI_NONAME, "Name or service not known")

    monkeypatch.setattr(socket, "getaddrinfo", boom)
    with pytest.raises(ResolutionError):
        send_file("no.such.host", 50000, tmp_path / "src.bin")


def test_source_shrinking_mid_send_raises(server, serve, store, tmp_path, monkeypatch):
    src = tmp_path / "src.bin"
    src.write_bytes(b"abc")
    monkeypatch.setattr(client, "source_size", lambda path: 10)
    st = serve(1)
    with pytest.raises(TransferError, match="sent 3 of 10"):
        client.send_file(*server.address, src)
    st.join()
    assert st.results == [store.path_for(1)]
