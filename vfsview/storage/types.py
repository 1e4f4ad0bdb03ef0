"""Datatypes exchanged with the storage collaborator.

``FileMode`` packs permission bits with directory and mount flags.
``Metadata`` is the raw record every listing/stat returns.
"""

from __future__ import annotations

import enum
import mimetypes
import posixpath
from dataclasses import dataclass
from datetime import datetime

MODE_DIR = 1 << 31
MODE_MOUNT = 1 << 30
MODE_PERM = 0o777

DEFAULT_FILE_PERM = 0o644
DEFAULT_DIR_PERM = 0o755


class FileMode(int):
    """Integer file mode with type-flag helpers."""

    @classmethod
    def file(cls, perm: int = DEFAULT_FILE_PERM) -> FileMode:
        return cls(perm & MODE_PERM)

    @classmethod
    def directory(cls, perm: int = DEFAULT_DIR_PERM) -> FileMode:
        return cls(MODE_DIR | (perm & MODE_PERM))

    @classmethod
    def mount(cls, perm: int = DEFAULT_DIR_PERM) -> FileMode:
        return cls(MODE_DIR | MODE_MOUNT | (perm & MODE_PERM))

    def is_dir(self) -> bool:
        return bool(self & MODE_DIR)

    def is_mount(self) -> bool:
        return bool(self & MODE_MOUNT)

    def perm(self) -> int:
        return int(self) & MODE_PERM

    def __str__(self) -> str:
        """Render like ``ls -l``: type character then three ``rwx`` triplets."""
        if self.is_mount():
            kind = "m"
        elif self.is_dir():
            kind = "d"
        else:
            kind = "-"
        bits = self.perm()
        out = [kind]
        for shift in (6, 3, 0):
            triplet = (bits >> shift) & 0o7
            out.append("r" if triplet & 0o4 else "-")
            out.append("w" if triplet & 0o2 else "-")
            out.append("x" if triplet & 0o1 else "-")
        return "".join(out)

    def __repr__(self) -> str:
        return f"FileMode({str(self)!r})"


class OpenFlags(enum.IntFlag):
    READ = 1
    WRITE = 2
    CREATE = 4
    TRUNCATE = 8
    EXCLUSIVE = 16


DIRECTORY_CONTENT_TYPE = "inode/directory"
DEFAULT_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(name: str, is_dir: bool) -> str:
    """Return an advisory MIME-like tag derived from ``name``."""
    if is_dir:
        return DIRECTORY_CONTENT_TYPE
    guessed, _encoding = mimetypes.guess_type(name, strict=False)
    return guessed or DEFAULT_CONTENT_TYPE


@dataclass(frozen=True)
class Metadata:
    """Raw metadata record for one node in the store.

    ``key`` is the node's leaf name relative to the listed directory (or the
    absolute path for ``stat_metadata`` results).
    """

    key: str
    size: int
    mode: FileMode
    modify_time: datetime
    content_type: str = DEFAULT_CONTENT_TYPE

    @property
    def name(self) -> str:
        stripped = self.key.rstrip("/")
        return posixpath.basename(stripped) or "/"

    @property
    def is_dir(self) -> bool:
        return self.mode.is_dir()


__all__ = [
    "MODE_DIR",
    "MODE_MOUNT",
    "MODE_PERM",
    "FileMode",
    "OpenFlags",
    "Metadata",
    "guess_content_type",
    "DIRECTORY_CONTENT_TYPE",
    "DEFAULT_CONTENT_TYPE",
]
