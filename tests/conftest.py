from __future__ import annotations

import pytest


class ScriptedConn:
    """In-memory connection: replays ``incoming`` and records every send call."""

    def __init__(self, incoming: bytes = b""):
        self.incoming = incoming
        self.pos = 0
        self.sent: list[bytes] = []

    def send(self, data):
        self.sent.append(bytes(data))
        return len(data)

    def recv_into(self, buffer):
        n = min(len(buffer), len(self.incoming) - self.pos)
        buffer[:n] = self.incoming[self.pos : self.pos + n]
        self.pos += n
        return n

    @property
    def sent_bytes(self) -> bytes:
        return b"".join(self.sent)


@pytest.fixture
def scripted_conn():
    return ScriptedConn
