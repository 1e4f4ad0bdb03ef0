"""Text preview tier: bounded read plus a text-vs-binary heuristic."""

from __future__ import annotations

import codecs

from ..storage.backend import StorageService

TEXT_PREVIEW_MAX_BYTES = 10 * 1024
# Policy constant, overridable through config ("text_control_ratio").
CONTROL_RATIO_THRESHOLD = 0.05
ALLOWED_CONTROL_BYTES = frozenset({0x09, 0x0A, 0x0D})
BINARY_TEXT_MESSAGE = "[Binary file - cannot preview as text]"


def control_character_ratio(data: bytes) -> float:
    """Fraction of bytes below 0x20 other than tab, newline, carriage return."""
    if not data:
        return 0.0
    control = sum(1 for byte in data if byte < 0x20 and byte not in ALLOWED_CONTROL_BYTES)
    return control / len(data)


def decode_text(data: bytes, truncated: bool) -> str | None:
    """Strictly decode UTF-8, returning ``None`` for malformed input.

    When ``truncated`` is set, a multi-byte sequence cut off by the read cap is
    dropped instead of counting as malformed.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="strict")
    try:
        return decoder.decode(data, final=not truncated)
    except UnicodeDecodeError:
        return None


def render_text_preview(
    storage: StorageService,
    path: str,
    size: int,
    threshold: float = CONTROL_RATIO_THRESHOLD,
    max_bytes: int = TEXT_PREVIEW_MAX_BYTES,
) -> tuple[str, bool]:
    """Return ``(text, is_notice)`` for the first ``max_bytes`` of ``path``.

    ``is_notice`` is ``True`` when the bytes failed validation and the text
    is the binary notice instead of file content.
    """
    data = storage.read_file(path, 0, max_bytes)
    truncated = size > len(data)
    text = decode_text(data, truncated)
    if text is None or control_character_ratio(data) >= threshold:
        return BINARY_TEXT_MESSAGE, True
    return text, False


__all__ = [
    "TEXT_PREVIEW_MAX_BYTES",
    "CONTROL_RATIO_THRESHOLD",
    "BINARY_TEXT_MESSAGE",
    "control_character_ratio",
    "decode_text",
    "render_text_preview",
]
