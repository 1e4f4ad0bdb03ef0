"""File-preview pipeline.

``generate_preview`` classifies a path by extension and dispatches to exactly
one tier (text, image, binary, unsupported). Image decode failures fall back
to the binary tier. The pipeline keeps no state between calls, so detached
tasks may run it concurrently for different paths.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from ..errors import DecodeError
from ..storage.backend import StorageService
from .binary import render_binary_preview
from .classify import FileTypeInfo, PreviewKind, detect_file_type
from .image import render_image_preview
from .text import CONTROL_RATIO_THRESHOLD, render_text_preview

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreviewResult:
    """Rendered preview for one path.

    ``notice`` marks informational text shown in place of file content (for
    example the oversized-image message).
    """

    kind: PreviewKind
    text: str
    notice: bool = False


def generate_preview(
    storage: StorageService,
    path: str,
    viewport_width: int = 0,
    viewport_height: int = 0,
    control_ratio_threshold: float = CONTROL_RATIO_THRESHOLD,
) -> PreviewResult:
    """Produce a bounded, human-readable rendering of ``path``.

    Directories and zero-byte files yield empty text. Storage errors from the
    final (binary) tier propagate to the caller.
    """
    info = detect_file_type(path)
    meta = storage.stat_metadata(path)
    if meta.is_dir or meta.size == 0:
        return PreviewResult(kind=info.kind, text="")

    if info.kind is PreviewKind.TEXT:
        text, notice = render_text_preview(storage, path, meta.size, threshold=control_ratio_threshold)
        return PreviewResult(kind=PreviewKind.TEXT, text=text, notice=notice)

    if info.kind is PreviewKind.IMAGE:
        try:
            text, notice = render_image_preview(storage, path, meta.size, viewport_width, viewport_height)
        except DecodeError as exc:
            LOGGER.debug("image preview fell back to hex dump for %s: %s", path, exc)
        else:
            return PreviewResult(kind=PreviewKind.IMAGE, text=text, notice=notice)
        return PreviewResult(kind=PreviewKind.BINARY, text=render_binary_preview(storage, path, meta.size))

    if info.kind is PreviewKind.BINARY:
        return PreviewResult(kind=PreviewKind.BINARY, text=render_binary_preview(storage, path, meta.size))

    return PreviewResult(kind=PreviewKind.UNSUPPORTED, text=unsupported_message(info), notice=True)


def unsupported_message(info: FileTypeInfo) -> str:
    return f"[Cannot preview {info.description} files]"


__all__ = [
    "PreviewKind",
    "PreviewResult",
    "FileTypeInfo",
    "detect_file_type",
    "generate_preview",
]
