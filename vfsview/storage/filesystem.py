"""Mount-table router implementing the storage service contract.

Paths are absolute POSIX strings. Each path is served by the backend with the
longest matching mount point; mount points show up in their parent's listing
with the mount flag set so the browser can render them distinctly.
"""

from __future__ import annotations

import logging
import posixpath
import threading
from collections.abc import Sequence
from datetime import datetime
from typing import BinaryIO

from ..errors import (
    AlreadyExistsError,
    NotFoundError,
    PermissionDeniedError,
    StorageError,
    StorageIOError,
)
from .backend import Backend
from .types import DIRECTORY_CONTENT_TYPE, FileMode, Metadata, OpenFlags

LOGGER = logging.getLogger(__name__)


def clean_path(path: str) -> str:
    """Normalize ``path`` into an absolute, slash-rooted form without ``..``."""
    cleaned = posixpath.normpath("/" + (path or "").strip())
    if cleaned.startswith("//"):
        cleaned = "/" + cleaned.lstrip("/")
    return cleaned


def _relative_to_mount(path: str, mount_point: str) -> str:
    if mount_point == "/":
        return path
    rest = path[len(mount_point):]
    return rest if rest else "/"


class VirtualFileSystem:
    """Storage collaborator built from mounted backends."""

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._mounts: dict[str, Backend] = {}
        self._shut_down = False
        self._mount_times: dict[str, datetime] = {}

    def mount(self, mount_point: str, backend: Backend) -> None:
        target = clean_path(mount_point)
        with self._lock:
            if target in self._mounts:
                raise AlreadyExistsError(target)
            self._mounts[target] = backend
            self._mount_times[target] = datetime.now()
        LOGGER.debug("mounted %s backend at %s", backend.name, target)

    def mounts(self) -> list[tuple[str, str]]:
        """Return ``(mount_point, backend_name)`` pairs sorted by mount point."""
        with self._lock:
            return sorted((point, backend.name) for point, backend in self._mounts.items())

    def _resolve(self, path: str) -> tuple[str, Backend, str]:
        if self._shut_down:
            raise StorageIOError("file system is shut down", path)
        target = clean_path(path)
        with self._lock:
            best: str | None = None
            for point in self._mounts:
                if point == "/" or target == point or target.startswith(point + "/"):
                    if best is None or len(point) > len(best):
                        best = point
            if best is None:
                raise NotFoundError(target)
            backend = self._mounts[best]
        return best, backend, _relative_to_mount(target, best)

    def _child_mounts(self, directory: str) -> list[str]:
        with self._lock:
            return sorted(
                point
                for point in self._mounts
                if point != "/" and posixpath.dirname(point) == directory
            )

    def _mount_metadata(self, point: str, key: str) -> Metadata:
        return Metadata(
            key=key,
            size=0,
            mode=FileMode.mount(),
            modify_time=self._mount_times.get(point, datetime.now()),
            content_type=DIRECTORY_CONTENT_TYPE,
        )

    def is_mount_point(self, path: str) -> bool:
        with self._lock:
            return clean_path(path) in self._mounts

    def list_directory(self, path: str) -> list[Metadata]:
        target = clean_path(path)
        _point, backend, relative = self._resolve(target)
        child_mounts = self._child_mounts(target)
        try:
            records = backend.list(relative)
        except NotFoundError:
            if not child_mounts:
                raise
            records = []
        mount_names = {posixpath.basename(point) for point in child_mounts}
        merged = [record for record in records if record.key not in mount_names]
        merged.extend(self._mount_metadata(point, posixpath.basename(point)) for point in child_mounts)
        return merged

    def stat_metadata(self, path: str) -> Metadata:
        target = clean_path(path)
        if target != "/" and self.is_mount_point(target):
            return self._mount_metadata(target, target)
        _point, backend, relative = self._resolve(target)
        record = backend.stat(relative)
        return Metadata(
            key=target,
            size=record.size,
            mode=record.mode,
            modify_time=record.modify_time,
            content_type=record.content_type,
        )

    def read_file(self, path: str, offset: int, length: int) -> bytes:
        _point, backend, relative = self._resolve(path)
        return backend.read(relative, offset, length)

    def open_for_write(self, path: str, flags: OpenFlags) -> BinaryIO:
        target = clean_path(path)
        if self.is_mount_point(target):
            raise PermissionDeniedError(target)
        _point, backend, relative = self._resolve(target)
        return backend.open_write(relative, flags | OpenFlags.WRITE)

    def open_for_read(self, path: str) -> BinaryIO:
        _point, backend, relative = self._resolve(path)
        return backend.open_read(relative)

    def create_directory(self, path: str) -> None:
        target = clean_path(path)
        if self.is_mount_point(target):
            raise AlreadyExistsError(target)
        _point, backend, relative = self._resolve(target)
        backend.mkdir(relative)

    def remove_file(self, path: str) -> None:
        _point, backend, relative = self._resolve(path)
        backend.unlink(relative)

    def remove_directory(self, path: str, recursive: bool) -> None:
        target = clean_path(path)
        if self.is_mount_point(target):
            raise PermissionDeniedError(target)
        _point, backend, relative = self._resolve(target)
        backend.rmdir(relative, recursive)

    def execute(self, tokens: Sequence[str]) -> tuple[str, int]:
        """Run one shell command and return ``(captured_text, exit_code)``."""
        from .commands import run_command

        return run_command(self, list(tokens))

    def shutdown(self) -> None:
        """Close every backend. Calling twice is an error."""
        with self._lock:
            if self._shut_down:
                raise StorageIOError("file system already shut down")
            self._shut_down = True
            backends = list(self._mounts.items())
        first_error: StorageError | None = None
        for point, backend in backends:
            try:
                backend.close()
            except StorageError as exc:
                LOGGER.error("failed to close mount %s: %s", point, exc)
                if first_error is None:
                    first_error = exc
            except OSError as exc:
                LOGGER.error("failed to close mount %s: %s", point, exc)
                if first_error is None:
                    first_error = StorageIOError(str(exc), point)
        LOGGER.info("file system shut down (%d mounts)", len(backends))
        if first_error is not None:
            raise first_error


__all__ = ["VirtualFileSystem", "clean_path"]
