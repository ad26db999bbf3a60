from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional, Protocol, TypeVar

from .blockio import StreamEndpoint

C = TypeVar("C")


@dataclass(slots=True)
class TransferMetrics:
    file_name: str = ""
    bytes_transferred: int = 0
    chunks: int = 0
    start_ts: float = field(default_factory=time.monotonic)
    end_ts: float | None = None

    @property
    def duration_s(self) -> float:
        if self.end_ts is None:
            return 0.0
        return max(0.0, self.end_ts - self.start_ts)

    @property
    def throughput_mbps(self) -> float:
        if self.duration_s <= 0:
            return 0.0
        return (self.bytes_transferred * 8 / 1_000_000) / self.duration_s


class WorkingSet(Protocol[C]):
    """One side of a transfer: ``init`` once, ``process`` once, ``finish`` always.

    ``init`` raises if the side cannot start; its return value is handed to
    ``process`` and ``finish``. ``finish`` runs even when ``process`` raises.
    """

    def init(self, argument: Optional[str]) -> C: ...

    def process(self, conn: StreamEndpoint, ctx: C) -> TransferMetrics: ...

    def finish(self, ctx: C) -> None: ...
