from __future__ import annotations

MAGIC_SEND = 0x53454E44  # "SEND"
MAGIC_RCVD = 0x72637664  # "rcvd"

FILENAME_LEN = 20
HEADER_FORMAT = "!II20sB3s"  # magic, filesize, filename, filename_term, unused
HEADER_SIZE = 32

BLOCK_SIZE = 1024
MAX_FILE_SIZE = 0x7FFFFFFF

LISTEN_BACKLOG = 1

DEFAULT_OUTPUT_DIR = "."
DEFAULT_LOG_LEVEL = "INFO"
