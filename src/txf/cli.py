from __future__ import annotations

import argparse
import json
import logging

from .constants import DEFAULT_LOG_LEVEL, DEFAULT_OUTPUT_DIR
from .errors import ArgumentError, TransferError
from .modes import resolve_mode
from .orchestrator import run_transfer


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="txf",
        description="Send or receive one file over TCP.",
        epilog=(
            "With FILE this side sends and listens on PORT; without it, it receives "
            "and connects. A negative PORT (e.g. -5000) swaps who listens."
        ),
    )
    p.add_argument("address", help="IPv4 address to connect to or bind on")
    p.add_argument("port", help="port; a leading '-' makes the receiver the server")
    p.add_argument("filename", nargs="?", default=None, help="file to send")
    p.add_argument("--log-level", default=DEFAULT_LOG_LEVEL, choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    p.add_argument("--output-dir", default=DEFAULT_OUTPUT_DIR, help="where a received file is written")
    p.add_argument("--json", action="store_true", help="print a JSON summary after a successful transfer")
    return p


def main(argv: list[str] | None = None) -> int:
    p = build_parser()
    args = p.parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format="%(asctime)s [%(levelname)s] %(message)s")

    try:
        mode = resolve_mode(args.port, args.filename)
    except ArgumentError as exc:
        p.error(str(exc))

    logging.debug("mode: %s/%s port=%d", mode.network.value, mode.transfer.value, mode.port)
    ws = mode.workingset(output_dir=args.output_dir)

    try:
        metrics = run_transfer(mode.network, ws, mode.argument, args.address, mode.port)
    except TransferError as exc:
        logging.error("%s failed: %s", mode.transfer.value, exc)
        return 1

    if args.json:
        payload = {
            "role": mode.transfer.value,
            "network": mode.network.value,
            "file": metrics.file_name,
            "bytes": metrics.bytes_transferred,
            "chunks": metrics.chunks,
            "seconds": metrics.duration_s,
            "mbps": metrics.throughput_mbps,
        }
        print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
