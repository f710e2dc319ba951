from __future__ import annotations

import argparse
import json
from dataclasses import asdict
import logging
import sys
from pathlib import Path

from .bench import run_benchmark
from .client import send_file
from .constants import (
    DEFAULT_OUTPUT_DIR,
    DEFAULT_SOURCE_PATH,
    EX_DATAERR,
    EX_NOINPUT,
    EX_OK,
    EX_UNAVAILABLE,
    EX_USAGE,
)
from .errors import ConnectivityError, HeaderOverflowError, SourceFileError, StorageError, TransferError
from .server import FileServer
from .storage import OutputStore

LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def positive_int(value: str) -> int:
    n = int(value)
    if n <= 0:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return n


class UsageParser(argparse.ArgumentParser):
    """ArgumentParser that exits with EX_USAGE instead of 2."""

    def error(self, message: str):
        self.print_usage(sys.stderr)
        self.exit(EX_USAGE, f"{self.prog}: error: {message}\n")


def cmd_client(args: argparse.Namespace) -> int:
    try:
        send_file(args.host, args.port, args.file)
    except ConnectivityError as e:
        logging.error("cannot connect: %s", e)
        return EX_UNAVAILABLE
    except SourceFileError as e:
        logging.error("%s", e)
        return EX_NOINPUT
    except HeaderOverflowError as e:
        logging.error("%s", e)
        return EX_DATAERR
    except TransferError as e:
        logging.error("transfer failed: %s", e)
        return EX_UNAVAILABLE
    return EX_OK


def cmd_server(args: argparse.Namespace) -> int:
    store = OutputStore(directory=Path(args.out_dir))
    try:
        server = FileServer.bind(args.port, host=args.host, store=store)
    except (StorageError, ConnectivityError) as e:
        logging.error("cannot start server: %s", e)
        return EX_UNAVAILABLE

    with server:
        try:
            server.serve_forever()
        except KeyboardInterrupt:
            logging.info("interrupted; shutting down")
    return EX_OK


def cmd_bench(args: argparse.Namespace) -> int:
    r = run_benchmark(
        size_bytes=args.size_bytes,
        max_chunk=args.max_chunk,
        delay_ms=args.delay_ms,
    )
    payload = {"role": "bench", **asdict(r)}
    print(json.dumps(payload, indent=2) if args.json else payload)
    return EX_OK if r.complete else EX_DATAERR


def add_log_level(x: argparse.ArgumentParser) -> None:
    x.add_argument("--log-level", default="INFO", choices=LOG_LEVELS)


def add_client_args(x: argparse.ArgumentParser) -> None:
    x.add_argument("host", help="server hostname or address")
    x.add_argument("port", help="server port number or service name")
    x.add_argument("--file", default=DEFAULT_SOURCE_PATH, help="file to send")
    x.set_defaults(func=cmd_client)


def add_server_args(x: argparse.ArgumentParser) -> None:
    x.add_argument("port", help="port number to listen on")
    x.add_argument("--host", default=None, help="address to bind (default: all)")
    x.add_argument("--out-dir", default=DEFAULT_OUTPUT_DIR, help="directory for received files")
    x.set_defaults(func=cmd_server)


def build_parser() -> argparse.ArgumentParser:
    p = UsageParser(prog="tcpft", description="Length-prefixed file transfer over TCP.")
    add_log_level(p)
    sub = p.add_subparsers(dest="cmd", required=True, parser_class=UsageParser)

    add_client_args(sub.add_parser("client", help="send a file to a server"))
    add_server_args(sub.add_parser("server", help="receive files until killed"))

    bench = sub.add_parser("bench", help="loopback transfer benchmark")
    bench.add_argument("--size-bytes", type=positive_int, default=5_000_000)
    bench.add_argument("--max-chunk", type=int, default=0, help="cap each send/recv (forces short I/O)")
    bench.add_argument("--delay-ms", type=int, default=0)
    bench.add_argument("--json", action="store_true")
    bench.set_defaults(func=cmd_bench)

    return p


def run(p: argparse.ArgumentParser, argv: list[str] | None) -> int:
    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s [%(levelname)s] %(message)s")
    return int(args.func(args))


def main(argv: list[str] | None = None) -> int:
    return run(build_parser(), argv)


def client_main(argv: list[str] | None = None) -> int:
    p = UsageParser(prog="tcpft-client", description="Send one file to a tcpft server.")
    add_log_level(p)
    add_client_args(p)
    return run(p, argv)


def server_main(argv: list[str] | None = None) -> int:
    p = UsageParser(
        prog="tcpft-server",
        description="Receive files from tcpft clients, one connection at a time.",
        epilog="The server must be running before a client connects.",
    )
    add_log_level(p)
    add_server_args(p)
    return run(p, argv)


if __name__ == "__main__":
    raise SystemExit(main())
