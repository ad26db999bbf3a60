"""Single-file transfer over TCP (txf)

One header describes the file, raw bytes follow, and a second header acknowledges receipt.
The package keeps the pieces apart:
- header framing and validation
- full-length block I/O over a byte stream
- interchangeable transmit/receive working sets, driven by a client or server orchestrator
"""

__all__ = []
