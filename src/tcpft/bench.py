from __future__ import annotations

import os
import tempfile
import threading
from dataclasses import dataclass
from pathlib import Path

from .net import Impairment, ImpairedSocket, open_connection
from .server import FileServer
from .storage import OutputStore
from .transfer import TransferSession, send_header, send_stream


@dataclass(frozen=True, slots=True)
class BenchmarkResult:
    bytes_transferred: int
    duration_s: float
    throughput_mbps: float
    complete: bool


def run_benchmark(
    *,
    size_bytes: int,
    max_chunk: int = 0,
    delay_ms: int = 0,
) -> BenchmarkResult:
    """Send ``size_bytes`` over loopback to an in-process server."""
    if size_bytes <= 0:
        raise ValueError("size_bytes must be positive")
    impair = Impairment(max_chunk=max_chunk, delay_ms=delay_ms)

    with tempfile.TemporaryDirectory() as tmp:
        store = OutputStore(directory=Path(tmp) / "received")
        server = FileServer.bind(0, host="127.0.0.1", store=store)
        host, port = server.address
        result_holder = {}

        def serve_runner():
            try:
                result_holder["path"] = server.serve_one()
            finally:
                server.close()

        t = threading.Thread(target=serve_runner, daemon=True)
        t.start()

        src = Path(tmp) / "payload"
        src.write_bytes(os.urandom(size_bytes))

        with ImpairedSocket(open_connection(host, port), impair) as sock, open(src, "rb") as f:
            session = TransferSession(peer=f"{host}:{port}", expected=size_bytes)
            send_header(sock, size_bytes)
            sent = send_stream(sock, f, size_bytes)

        t.join(timeout=30.0)
        session.finish(sent)

        out = result_holder.get("path")
        complete = out is not None and out.read_bytes() == src.read_bytes()

    duration_s = max(0.001, session.duration_s)
    return BenchmarkResult(
        bytes_transferred=session.transferred,
        duration_s=duration_s,
        throughput_mbps=(session.transferred * 8 / 1_000_000) / duration_s,
        complete=complete,
    )
