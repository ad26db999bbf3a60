from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Optional

from .modes import NetworkRole
from .net import TcpEndpoint, Throttle
from .workingset import TransferMetrics, WorkingSet


@dataclass(slots=True)
class Initiator:
    """Client role: connect out, run one transfer."""

    host: str
    port: int
    throttle: Throttle | None = None

    def run(self, ws: WorkingSet[Any], argument: Optional[str]) -> TransferMetrics:
        logging.info("* client")
        ctx = ws.init(argument)
        try:
            with TcpEndpoint.connect(self.host, self.port, self.throttle) as conn:
                return ws.process(conn, ctx)
        finally:
            ws.finish(ctx)


@dataclass(slots=True)
class Acceptor:
    """Server role: listen, accept exactly one peer, run one transfer.

    ``listener`` may be supplied already bound; it is closed once the peer is served.
    """

    host: str
    port: int
    throttle: Throttle | None = None
    listener: TcpEndpoint | None = None

    def run(self, ws: WorkingSet[Any], argument: Optional[str]) -> TransferMetrics:
        logging.info("* server")
        ctx = ws.init(argument)
        try:
            listener = self.listener or TcpEndpoint.listening(self.host, self.port, throttle=self.throttle)
            with listener:
                with listener.accept() as conn:
                    return ws.process(conn, ctx)
        finally:
            ws.finish(ctx)


def run_transfer(
    network: NetworkRole,
    ws: WorkingSet[Any],
    argument: Optional[str],
    host: str,
    port: int,
) -> TransferMetrics:
    if network is NetworkRole.INITIATOR:
        return Initiator(host, port).run(ws, argument)
    return Acceptor(host, port).run(ws, argument)
