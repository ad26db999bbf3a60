from __future__ import annotations

import os
import struct
from dataclasses import dataclass, replace
from typing import Iterator

from .constants import (
    BLOCK_SIZE,
    FILENAME_LEN,
    HEADER_FORMAT,
    HEADER_SIZE,
    MAGIC_RCVD,
    MAGIC_SEND,
    MAX_FILE_SIZE,
)
from .errors import FileNameError, FileSizeError, ProtocolError


def base_name(path: str) -> str:
    """Strip directory components from ``path`` and validate what is left.

    The result must encode to 1..FILENAME_LEN bytes; ``.`` and ``..`` are refused.
    """
    name = os.path.basename(path.rsplit("/", 1)[-1])
    size = len(os.fsencode(name))
    if size < 1 or size > FILENAME_LEN:
        raise FileNameError(f"invalid file name {path!r}: must be 1..{FILENAME_LEN} bytes, got {size}")
    if name in (".", ".."):
        raise FileNameError(f"invalid file name {path!r}")
    return name


def check_file_size(size: int) -> int:
    if size < 0 or size > MAX_FILE_SIZE:
        raise FileSizeError(f"invalid file size {size}: must be 0..{MAX_FILE_SIZE:#x}")
    return size


def chunk_sizes(size: int, block_size: int = BLOCK_SIZE) -> Iterator[int]:
    """Yield the length of each block a ``size``-byte payload is moved in."""
    for pos in range(0, size, block_size):
        yield min(block_size, size - pos)


@dataclass(frozen=True, slots=True)
class TransferHeader:
    magic: int
    file_size: int
    file_name: str

    @property
    def is_send(self) -> bool:
        return self.magic == MAGIC_SEND

    @property
    def is_ack(self) -> bool:
        return self.magic == MAGIC_RCVD

    def to_bytes(self) -> bytes:
        name = os.fsencode(self.file_name)
        if len(name) > FILENAME_LEN:
            raise FileNameError(f"file name too long for header: {self.file_name!r}")
        return struct.pack(HEADER_FORMAT, self.magic, self.file_size, name, 0, b"")

    @staticmethod
    def from_bytes(raw: bytes) -> "TransferHeader":
        if len(raw) != HEADER_SIZE:
            raise ProtocolError(f"header must be {HEADER_SIZE} bytes, got {len(raw)}")

        # filename_term is ignored, the name ends at the first NUL or at FILENAME_LEN
        magic, file_size, name, _term, _unused = struct.unpack(HEADER_FORMAT, raw)
        name = name.split(b"\x00", 1)[0]

        return TransferHeader(magic=magic, file_size=file_size, file_name=os.fsdecode(name))

    @staticmethod
    def offer(file_name: str, file_size: int) -> "TransferHeader":
        return TransferHeader(magic=MAGIC_SEND, file_size=check_file_size(file_size), file_name=file_name)

    def acknowledge(self) -> "TransferHeader":
        return replace(self, magic=MAGIC_RCVD)
