"""Extension-driven preview classification.

The variant is closed: every path maps onto exactly one ``PreviewKind``.
Unknown and missing extensions are treated as text candidates; the text
renderer validates the bytes before showing them. Audio and video containers
get a hex dump like any other binary. ``UNSUPPORTED`` is reserved for kinds
with no renderer at all.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from ..entry import file_extension


class PreviewKind(enum.Enum):
    TEXT = "text"
    IMAGE = "image"
    BINARY = "binary"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class FileTypeInfo:
    kind: PreviewKind
    description: str


IMAGE_EXTENSIONS = frozenset({".png", ".jpg", ".jpeg", ".gif", ".bmp", ".webp", ".tif", ".tiff", ".ico"})

TEXT_EXTENSIONS = frozenset(
    {
        ".txt", ".md", ".go", ".js", ".ts", ".py", ".java", ".c", ".cpp", ".h", ".hpp", ".rs",
        ".sh", ".bash", ".zsh", ".fish", ".json", ".xml", ".yaml", ".yml", ".toml", ".ini",
        ".cfg", ".conf", ".html", ".css", ".scss", ".sass", ".sql", ".log", ".csv", ".tsv",
        ".gitignore", ".dockerfile", ".env", ".svg",
    }
)

BINARY_EXTENSIONS = frozenset(
    {
        ".zip", ".gz", ".tar", ".bz2", ".7z", ".rar", ".xz",
        ".exe", ".dll", ".so", ".dylib", ".bin", ".dat", ".db", ".sqlite",
        ".pdf", ".doc", ".docx", ".xls", ".xlsx", ".ppt", ".pptx",
        ".mp3", ".mp4", ".avi", ".mkv", ".mov", ".webm", ".wav", ".flac", ".ogg",
    }
)


def detect_file_type(name: str) -> FileTypeInfo:
    """Classify ``name`` by its lower-cased extension."""
    ext = file_extension(name)
    if ext in IMAGE_EXTENSIONS:
        return FileTypeInfo(PreviewKind.IMAGE, "Image file")
    if ext in TEXT_EXTENSIONS:
        return FileTypeInfo(PreviewKind.TEXT, "Text file")
    if ext in BINARY_EXTENSIONS:
        return FileTypeInfo(PreviewKind.BINARY, "Binary file")
    if not ext:
        return FileTypeInfo(PreviewKind.TEXT, "Unknown type")
    return FileTypeInfo(PreviewKind.TEXT, "Unknown text file")


__all__ = [
    "PreviewKind",
    "FileTypeInfo",
    "detect_file_type",
    "IMAGE_EXTENSIONS",
    "TEXT_EXTENSIONS",
    "BINARY_EXTENSIONS",
]
