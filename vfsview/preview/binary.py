"""Binary preview tier: offset/hex/ASCII dump of a short file prefix."""

from __future__ import annotations

import posixpath

from ..storage.backend import StorageService

BINARY_PREFIX_BYTES = 512
HEX_DUMP_MAX_BYTES = 1024
BYTES_PER_ROW = 16
TRUNCATED_NOTICE = "... (truncated)"


def hex_dump(data: bytes) -> str:
    """Format ``data`` as ``hexdump -C`` style rows.

    Example row::

        00000000  48 65 6c 6c 6f 20 57 6f  72 6c 64 0a              |Hello World.|
    """
    rows: list[str] = []
    for offset in range(0, len(data), BYTES_PER_ROW):
        chunk = data[offset:offset + BYTES_PER_ROW]
        hex_cells = [f"{byte:02x}" for byte in chunk]
        hex_cells.extend("  " for _ in range(BYTES_PER_ROW - len(chunk)))
        left = " ".join(hex_cells[:8])
        right = " ".join(hex_cells[8:])
        ascii_text = "".join(chr(byte) if 0x20 <= byte < 0x7F else "." for byte in chunk)
        rows.append(f"{offset:08x}  {left}  {right}  |{ascii_text}|")
    return "\n".join(rows)


def render_binary_preview(
    storage: StorageService,
    path: str,
    size: int,
    max_bytes: int = HEX_DUMP_MAX_BYTES,
) -> str:
    prefix = storage.read_file(path, 0, BINARY_PREFIX_BYTES)
    dumped = prefix[: min(max_bytes, len(prefix))]
    lines = [
        f"Binary file: {posixpath.basename(path)}",
        f"Size: {size} bytes",
        "",
        f"Hex dump (first {len(dumped)} bytes):",
        "-" * 60,
        hex_dump(dumped),
    ]
    if size > len(dumped):
        lines.append(TRUNCATED_NOTICE)
    return "\n".join(lines)


__all__ = [
    "BINARY_PREFIX_BYTES",
    "HEX_DUMP_MAX_BYTES",
    "TRUNCATED_NOTICE",
    "hex_dump",
    "render_binary_preview",
]
