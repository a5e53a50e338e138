"""CRC-32 content checksums for sketch files.

Uses the zlib parameterization (reflected polynomial 0xEDB88320,
initial and final XOR 0xFFFFFFFF), the same CRC gzip writes.
"""

import zlib
from pathlib import Path
from typing import Final

CHUNK_SIZE: Final = 64 * 1024


def crc32_bytes(data: bytes) -> int:
    """Compute the CRC-32 of an in-memory byte string."""
    return zlib.crc32(data) & 0xFFFFFFFF


def crc32_file(path: str | Path) -> int:
    """Compute the CRC-32 of a file's entire current content.

    Args:
        path: File to read.

    Returns:
        Unsigned 32-bit checksum.

    Raises:
        OSError: If the file cannot be opened or read.
    """
    crc = 0
    with open(path, "rb") as file:
        while chunk := file.read(CHUNK_SIZE):
            crc = zlib.crc32(chunk, crc)
    return crc & 0xFFFFFFFF


def format_checksum(value: int) -> str:
    """Render a checksum the way the CLI prints it."""
    return f"0x{value:08x}"
