from __future__ import annotations


class TcpftError(Exception):
    pass


class ConnectivityError(TcpftError):
    pass


class ResolutionError(ConnectivityError):
    pass


class ConnectError(ConnectivityError):
    pass


class HeaderOverflowError(TcpftError, ValueError):
    pass


class TransferError(TcpftError):
    """A send or recv failed outright. Never retried."""


class SourceFileError(TcpftError):
    pass


class StorageError(TcpftError):
    pass
