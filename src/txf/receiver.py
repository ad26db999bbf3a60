from __future__ import annotations

import logging
import os
import time
from dataclasses import dataclass
from typing import Optional

from .blockio import StreamEndpoint, recv_block, send_block
from .constants import BLOCK_SIZE, DEFAULT_OUTPUT_DIR, HEADER_SIZE
from .errors import ProtocolError, TransferIOError
from .header import TransferHeader, base_name, chunk_sizes
from .workingset import TransferMetrics


@dataclass(frozen=True, slots=True)
class ReceiveContext:
    """Nothing to carry between init and process; marks a started receiver."""


@dataclass(slots=True)
class Receive:
    output_dir: str = DEFAULT_OUTPUT_DIR
    block_size: int = BLOCK_SIZE

    def init(self, argument: Optional[str]) -> ReceiveContext:
        return ReceiveContext()

    def process(self, conn: StreamEndpoint, ctx: ReceiveContext) -> TransferMetrics:
        header = TransferHeader.from_bytes(recv_block(conn, HEADER_SIZE, "header"))
        if not header.is_send:
            raise ProtocolError(f"invalid header: magic {header.magic:#010x}")

        # the name came off the wire
        name = base_name(header.file_name)
        size = header.file_size
        logging.info("%s, %d byte", name, size)

        metrics = TransferMetrics(file_name=name)
        path = os.path.join(self.output_dir, name)
        try:
            out = open(path, "wb")
        except OSError as exc:
            raise TransferIOError(f"open {path}: {exc}") from exc

        with out:
            for remain in chunk_sizes(size, self.block_size):
                chunk = recv_block(conn, remain, "data")
                try:
                    out.write(chunk)
                except OSError as exc:
                    raise TransferIOError(f"write {path}: {exc}") from exc
                metrics.chunks += 1
                metrics.bytes_transferred += remain

            try:
                out.flush()
                os.fsync(out.fileno())
            except OSError as exc:
                raise TransferIOError(f"sync {path}: {exc}") from exc

        send_block(conn, header.acknowledge().to_bytes(), "ack")

        metrics.end_ts = time.monotonic()
        logging.info(
            "received %s; %d bytes in %d chunks, throughput=%.2f Mbit/s",
            path,
            metrics.bytes_transferred,
            metrics.chunks,
            metrics.throughput_mbps,
        )
        return metrics

    def finish(self, ctx: ReceiveContext) -> None:
        pass
