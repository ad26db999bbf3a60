from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .constants import DEFAULT_OUTPUT_DIR
from .errors import ArgumentError
from .receiver import Receive
from .sender import Transmit


class NetworkRole(enum.Enum):
    INITIATOR = "client"
    ACCEPTOR = "server"


class TransferRole(enum.Enum):
    TRANSMIT = "transmit"
    RECEIVE = "receive"


@dataclass(frozen=True, slots=True)
class Mode:
    network: NetworkRole
    transfer: TransferRole
    port: int
    argument: Optional[str]

    def workingset(self, output_dir: str = DEFAULT_OUTPUT_DIR) -> Union[Transmit, Receive]:
        if self.transfer is TransferRole.TRANSMIT:
            return Transmit()
        return Receive(output_dir=output_dir)


def parse_port_token(token: str) -> Tuple[int, bool]:
    """Split a port token into (port, flipped); a leading ``-`` flips the roles."""
    flipped = token.startswith("-")
    digits = token[1:] if flipped else token
    if not digits.isdigit():
        raise ArgumentError(f"invalid port: {token!r}")
    port = int(digits)
    if port > 65535:
        raise ArgumentError(f"port out of range: {token!r}")
    return port, flipped


def resolve_mode(port_token: str, filename: Optional[str] = None) -> Mode:
    """Pick the network and transfer role for this process.

    A filename makes this side the transmitter, otherwise it receives.
    By default the transmitter listens and the receiver connects; a
    negative port swaps that, so the receiver listens instead.
    """
    port, flipped = parse_port_token(port_token)
    transfer = TransferRole.TRANSMIT if filename is not None else TransferRole.RECEIVE

    server_side = TransferRole.RECEIVE if flipped else TransferRole.TRANSMIT
    network = NetworkRole.ACCEPTOR if transfer is server_side else NetworkRole.INITIATOR

    argument = filename if transfer is TransferRole.TRANSMIT else None
    return Mode(network=network, transfer=transfer, port=port, argument=argument)
