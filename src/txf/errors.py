from __future__ import annotations


class TransferError(Exception):
    """Base class for every failure that aborts a transfer attempt."""


class ArgumentError(TransferError):
    pass


class FileNameError(TransferError):
    pass


class FileSizeError(TransferError):
    pass


class TransferIOError(TransferError):
    """File open/read/write failed, or the stream ended short of a block."""


class NetworkError(TransferError):
    pass


class ProtocolError(TransferError):
    pass
