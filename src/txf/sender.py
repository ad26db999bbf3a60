from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import BinaryIO, Optional

from .blockio import StreamEndpoint, recv_block, send_block
from .constants import BLOCK_SIZE, HEADER_SIZE
from .errors import FileNameError, FileSizeError, ProtocolError, TransferIOError
from .header import TransferHeader, base_name, check_file_size, chunk_sizes
from .workingset import TransferMetrics


@dataclass(slots=True)
class SendContext:
    f: BinaryIO
    size: int
    header: TransferHeader

    def close(self) -> None:
        self.f.close()


@dataclass(slots=True)
class Transmit:
    block_size: int = BLOCK_SIZE

    def init(self, argument: Optional[str]) -> SendContext:
        if not argument:
            raise FileNameError("no file to send")
        name = base_name(argument)

        try:
            f = open(argument, "rb")
        except OSError as exc:
            raise TransferIOError(f"open {argument}: {exc}") from exc

        try:
            size = f.seek(0, os.SEEK_END)
            f.seek(0, os.SEEK_SET)
            check_file_size(size)
        except OSError as exc:
            f.close()
            raise TransferIOError(f"seek {argument}: {exc}") from exc
        except FileSizeError:
            f.close()
            raise

        logging.info("%s, %d byte", name, size)
        return SendContext(f=f, size=size, header=TransferHeader.offer(name, size))

    def process(self, conn: StreamEndpoint, ctx: SendContext) -> TransferMetrics:
        metrics = TransferMetrics(file_name=ctx.header.file_name)

        send_block(conn, ctx.header.to_bytes(), "header")

        for remain in chunk_sizes(ctx.size, self.block_size):
            try:
                chunk = ctx.f.read(remain)
            except OSError as exc:
                raise TransferIOError(f"read {ctx.header.file_name}: {exc}") from exc
            if len(chunk) < remain:
                raise TransferIOError(f"read {ctx.header.file_name}: file shrank during transfer")
            send_block(conn, chunk, "data")
            metrics.chunks += 1
            metrics.bytes_transferred += remain

        ack = TransferHeader.from_bytes(recv_block(conn, HEADER_SIZE, "ack"))
        if not ack.is_ack:
            raise ProtocolError(f"invalid ack: magic {ack.magic:#010x}")

        metrics.end_ts = time.monotonic()
        logging.info(
            "sent %s; %d bytes in %d chunks, throughput=%.2f Mbit/s",
            metrics.file_name,
            metrics.bytes_transferred,
            metrics.chunks,
            metrics.throughput_mbps,
        )
        return metrics

    def finish(self, ctx: SendContext) -> None:
        ctx.close()
