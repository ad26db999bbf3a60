from __future__ import annotations

import os
import struct

import pytest

from txf.constants import HEADER_FORMAT, MAGIC_SEND
from txf.errors import FileNameError, ProtocolError, TransferIOError
from txf.header import TransferHeader
from txf.receiver import Receive, ReceiveContext


def test_init_ignores_argument():
    ws = Receive()
    assert ws.init(None) == ReceiveContext()
    assert ws.init("whatever") is not None


def test_process_writes_file_and_acks(tmp_path, scripted_conn):
    payload = os.urandom(2500)
    offer = TransferHeader.offer("b.bin", len(payload))
    conn = scripted_conn(offer.to_bytes() + payload)
    ws = Receive(output_dir=str(tmp_path))

    metrics = ws.process(conn, ws.init(None))

    assert (tmp_path / "b.bin").read_bytes() == payload
    assert metrics.chunks == 3
    assert metrics.bytes_transferred == 2500
    ack = TransferHeader.from_bytes(conn.sent_bytes)
    assert ack.is_ack
    assert (ack.file_name, ack.file_size) == ("b.bin", 2500)


def test_process_empty_file(tmp_path, scripted_conn):
    conn = scripted_conn(TransferHeader.offer("a.txt", 0).to_bytes())
    ws = Receive(output_dir=str(tmp_path))
    ws.process(conn, ws.init(None))
    assert (tmp_path / "a.txt").read_bytes() == b""
    assert TransferHeader.from_bytes(conn.sent_bytes).is_ack


def test_process_overwrites_existing(tmp_path, scripted_conn):
    (tmp_path / "a.txt").write_bytes(b"old contents, longer than new")
    conn = scripted_conn(TransferHeader.offer("a.txt", 3).to_bytes() + b"new")
    ws = Receive(output_dir=str(tmp_path))
    ws.process(conn, ws.init(None))
    assert (tmp_path / "a.txt").read_bytes() == b"new"


def test_process_strips_path_from_wire_name(tmp_path, scripted_conn):
    raw = struct.pack(HEADER_FORMAT, MAGIC_SEND, 2, b"../../etc/xx", 0, b"")
    conn = scripted_conn(raw + b"hi")
    ws = Receive(output_dir=str(tmp_path))
    ws.process(conn, ws.init(None))
    assert (tmp_path / "xx").read_bytes() == b"hi"


@pytest.mark.parametrize("name", [b"", b"dir/", b"..", b"a/.."])
def test_process_rejects_bad_wire_name(tmp_path, scripted_conn, name):
    raw = struct.pack(HEADER_FORMAT, MAGIC_SEND, 0, name, 0, b"")
    conn = scripted_conn(raw)
    ws = Receive(output_dir=str(tmp_path))
    with pytest.raises(FileNameError):
        ws.process(conn, ws.init(None))
    assert conn.sent == []


def test_process_rejects_bad_magic(tmp_path, scripted_conn):
    conn = scripted_conn(TransferHeader.offer("a.txt", 0).acknowledge().to_bytes())
    ws = Receive(output_dir=str(tmp_path))
    with pytest.raises(ProtocolError):
        ws.process(conn, ws.init(None))
    assert not (tmp_path / "a.txt").exists()


def test_process_truncated_payload(tmp_path, scripted_conn):
    conn = scripted_conn(TransferHeader.offer("c.bin", 2000).to_bytes() + b"x" * 1500)
    ws = Receive(output_dir=str(tmp_path))
    with pytest.raises(TransferIOError):
        ws.process(conn, ws.init(None))
    # no acknowledgement for an incomplete file
    assert conn.sent == []


def test_process_unwritable_output(tmp_path, scripted_conn):
    conn = scripted_conn(TransferHeader.offer("d.bin", 0).to_bytes())
    ws = Receive(output_dir=str(tmp_path / "missing"))
    with pytest.raises(TransferIOError):
        ws.process(conn, ws.init(None))
