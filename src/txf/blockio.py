from __future__ import annotations

import logging
from typing import Protocol

from .errors import TransferIOError


class StreamEndpoint(Protocol):
    """Blocking byte stream; ``socket.socket`` satisfies it."""

    def send(self, data: bytes | memoryview) -> int: ...

    def recv_into(self, buffer: bytearray | memoryview) -> int: ...


def write_all(endpoint: StreamEndpoint, data: bytes | bytearray | memoryview) -> int:
    """Write ``data`` in full, looping over short writes.

    Returns the number of bytes written; less than ``len(data)`` means the
    stream failed or stopped accepting data.
    """
    view = memoryview(data)
    pos = 0
    while pos < len(view):
        try:
            n = endpoint.send(view[pos:])
        except OSError as exc:
            logging.debug("write failed after %d/%d bytes: %s", pos, len(view), exc)
            break
        if n <= 0:
            logging.debug("write stalled after %d/%d bytes", pos, len(view))
            break
        pos += n
    return pos


def read_all(endpoint: StreamEndpoint, buffer: bytearray | memoryview) -> int:
    """Fill ``buffer`` from the stream, looping over short reads.

    A zero-length read is end of stream. Returns the number of bytes read.
    """
    view = memoryview(buffer)
    pos = 0
    while pos < len(view):
        try:
            n = endpoint.recv_into(view[pos:])
        except OSError as exc:
            logging.debug("read failed after %d/%d bytes: %s", pos, len(view), exc)
            break
        if n <= 0:
            logging.debug("end of stream after %d/%d bytes", pos, len(view))
            break
        pos += n
    return pos


def send_block(endpoint: StreamEndpoint, data: bytes, what: str) -> None:
    sent = write_all(endpoint, data)
    if sent < len(data):
        raise TransferIOError(f"send_block ({what}): wrote {sent} of {len(data)} bytes")


def recv_block(endpoint: StreamEndpoint, size: int, what: str) -> bytes:
    buf = bytearray(size)
    got = read_all(endpoint, buf)
    if got < size:
        raise TransferIOError(f"recv_block ({what}): read {got} of {size} bytes")
    return bytes(buf)
