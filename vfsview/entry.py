"""Display-ready snapshot of one node in the store.

Entries are rebuilt on every listing and never mutated. All display helpers
are pure; extension classification is advisory and never raises.
"""

from __future__ import annotations

import enum
import posixpath
from dataclasses import dataclass
from datetime import datetime

from .storage.types import FileMode, Metadata

SIZE_UNITS = "KMGTPE"
DIR_SIZE_LABEL = "<DIR>"
MOUNT_SIZE_LABEL = "<MNT>"
MTIME_FORMAT = "%Y-%m-%d %H:%M:%S"


class FileCategory(enum.Enum):
    MOUNT = "mount"
    FOLDER = "folder"
    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    ARCHIVE = "archive"
    CODE = "code"
    DEFAULT = "default"


CATEGORY_EXTENSIONS: dict[FileCategory, frozenset[str]] = {
    FileCategory.TEXT: frozenset({".txt", ".md", ".log", ".conf", ".cfg", ".ini"}),
    FileCategory.IMAGE: frozenset({".jpg", ".jpeg", ".png", ".gif", ".bmp", ".svg", ".webp"}),
    FileCategory.VIDEO: frozenset({".mp4", ".mkv", ".avi", ".mov", ".webm"}),
    FileCategory.ARCHIVE: frozenset({".zip", ".tar", ".gz", ".bz2", ".xz", ".7z", ".rar"}),
    FileCategory.CODE: frozenset(
        {".go", ".js", ".ts", ".py", ".java", ".c", ".cpp", ".h", ".rs", ".rb", ".php", ".sh"}
    ),
}

CATEGORY_ICONS: dict[FileCategory, str] = {
    FileCategory.MOUNT: "🗃",
    FileCategory.FOLDER: "📂",
    FileCategory.TEXT: "📑",
    FileCategory.IMAGE: "🖼",
    FileCategory.VIDEO: "🎞",
    FileCategory.ARCHIVE: "📦",
    FileCategory.CODE: "📇",
    FileCategory.DEFAULT: "📄",
}


def file_extension(name: str) -> str:
    """Return the lower-cased extension of ``name`` (``""`` when absent)."""
    _root, ext = posixpath.splitext(name)
    return ext.lower()


def classify_name(name: str) -> FileCategory:
    """Map a file name onto a display category by extension."""
    ext = file_extension(name)
    if not ext:
        return FileCategory.DEFAULT
    for category, extensions in CATEGORY_EXTENSIONS.items():
        if ext in extensions:
            return category
    return FileCategory.DEFAULT


def format_size(size: int) -> str:
    """Binary-scaled size: ``"0 B"``, ``"1.5 KB"``, ``"3.0 MB"``..."""
    if size < 1024:
        return f"{size} B"
    divisor = 1024
    exponent = 0
    remaining = size // 1024
    while remaining >= 1024 and exponent < len(SIZE_UNITS) - 1:
        divisor *= 1024
        exponent += 1
        remaining //= 1024
    return f"{size / divisor:.1f} {SIZE_UNITS[exponent]}B"


@dataclass(frozen=True)
class Entry:
    """Read-only view of one file, directory, or mount point."""

    name: str
    path: str
    size: int
    mode: FileMode
    modified_at: datetime
    is_directory: bool
    content_type: str

    @classmethod
    def from_metadata(cls, meta: Metadata, parent_path: str) -> Entry:
        """Build an entry for a child record listed under ``parent_path``."""
        name = meta.name
        return cls(
            name=name,
            path=posixpath.join(parent_path, name),
            size=meta.size,
            mode=FileMode(meta.mode),
            modified_at=meta.modify_time,
            is_directory=meta.mode.is_dir(),
            content_type=meta.content_type,
        )

    @property
    def is_mount(self) -> bool:
        return self.mode.is_mount()

    @property
    def display_name(self) -> str:
        return f"{self.name}/" if self.is_directory else self.name

    @property
    def display_size(self) -> str:
        if self.is_mount:
            return MOUNT_SIZE_LABEL
        if self.is_directory:
            return DIR_SIZE_LABEL
        return format_size(self.size)

    @property
    def display_mode(self) -> str:
        return str(self.mode)

    @property
    def display_modified(self) -> str:
        return self.modified_at.strftime(MTIME_FORMAT)

    @property
    def category(self) -> FileCategory:
        if self.is_mount:
            return FileCategory.MOUNT
        if self.is_directory:
            return FileCategory.FOLDER
        return classify_name(self.name)

    @property
    def icon(self) -> str:
        return CATEGORY_ICONS[self.category]


def sort_entries(entries: list[Entry]) -> list[Entry]:
    """Directories first, then case-insensitive name order."""
    return sorted(entries, key=lambda entry: (not entry.is_directory, entry.name.lower()))


__all__ = [
    "Entry",
    "FileCategory",
    "classify_name",
    "file_extension",
    "format_size",
    "sort_entries",
    "DIR_SIZE_LABEL",
    "MOUNT_SIZE_LABEL",
]
