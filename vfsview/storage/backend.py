"""Backend contract plus the storage-service protocol consumed by the UI.

A ``Backend`` serves one mount and sees mount-relative absolute paths
(``/`` is the mount root). ``StorageService`` is the narrow surface the
browser core uses; ``VirtualFileSystem`` is the shipped implementation.
"""

from __future__ import annotations

import abc
from collections.abc import Sequence
from typing import BinaryIO, Protocol

from .types import Metadata, OpenFlags


class Backend(abc.ABC):
    """One mountable storage backend."""

    name: str = "backend"

    @abc.abstractmethod
    def stat(self, path: str) -> Metadata:
        """Return metadata for ``path`` or raise ``NotFoundError``."""

    @abc.abstractmethod
    def list(self, path: str) -> list[Metadata]:
        """Return metadata for the direct children of directory ``path``."""

    @abc.abstractmethod
    def read(self, path: str, offset: int, length: int) -> bytes:
        """Read up to ``length`` bytes starting at ``offset``."""

    @abc.abstractmethod
    def open_write(self, path: str, flags: OpenFlags) -> BinaryIO:
        """Open ``path`` for writing according to ``flags``."""

    @abc.abstractmethod
    def open_read(self, path: str) -> BinaryIO:
        """Open ``path`` for streaming reads."""

    @abc.abstractmethod
    def mkdir(self, path: str) -> None:
        """Create one directory; the parent must exist."""

    @abc.abstractmethod
    def unlink(self, path: str) -> None:
        """Remove one regular file."""

    @abc.abstractmethod
    def rmdir(self, path: str, recursive: bool) -> None:
        """Remove a directory, optionally with its contents."""

    def close(self) -> None:
        """Release backend resources. Default is a no-op."""


class StorageService(Protocol):
    """Operations the interaction engine invokes on the storage collaborator."""

    def list_directory(self, path: str) -> list[Metadata]: ...

    def stat_metadata(self, path: str) -> Metadata: ...

    def read_file(self, path: str, offset: int, length: int) -> bytes: ...

    def open_for_write(self, path: str, flags: OpenFlags) -> BinaryIO: ...

    def open_for_read(self, path: str) -> BinaryIO: ...

    def create_directory(self, path: str) -> None: ...

    def remove_file(self, path: str) -> None: ...

    def remove_directory(self, path: str, recursive: bool) -> None: ...

    def execute(self, tokens: Sequence[str]) -> tuple[str, int]: ...

    def shutdown(self) -> None: ...


__all__ = ["Backend", "StorageService"]
