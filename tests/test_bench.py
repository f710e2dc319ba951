from __future__ import annotations

import pytest

from tcpft.bench import run_benchmark


def test_bench_plain():
    r = run_benchmark(size_bytes=100_000)
    assert r.complete
    assert r.bytes_transferred == 100_000
    assert r.throughput_mbps > 0


def test_bench_short_io():
    r = run_benchmark(size_bytes=9_000, max_chunk=512)
    assert r.complete


def test_bench_rejects_empty():
    with pytest.raises(ValueError):
        run_benchmark(size_bytes=0)
