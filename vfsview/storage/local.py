"""Backend exposing a host directory as a mount."""

from __future__ import annotations

import os
import posixpath
import shutil
from datetime import datetime
from pathlib import Path
from typing import BinaryIO

from ..errors import IsDirectoryError, NotDirectoryError, PermissionDeniedError, storage_error_from_os_error
from .backend import Backend
from .types import FileMode, Metadata, OpenFlags, guess_content_type


class LocalBackend(Backend):
    name = "local"

    def __init__(self, root: Path) -> None:
        self.root = Path(root)
        self.root.mkdir(parents=True, exist_ok=True)

    def _host_path(self, path: str) -> Path:
        # normpath on an absolute path collapses "..", so the result stays under root.
        relative = posixpath.normpath("/" + path).lstrip("/")
        return self.root / relative if relative else self.root

    def _metadata(self, host: Path, key: str) -> Metadata:
        st = host.stat()
        is_dir = host.is_dir()
        mode = FileMode.directory(st.st_mode) if is_dir else FileMode.file(st.st_mode)
        return Metadata(
            key=key,
            size=0 if is_dir else int(st.st_size),
            mode=mode,
            modify_time=datetime.fromtimestamp(st.st_mtime),
            content_type=guess_content_type(host.name, is_dir),
        )

    def stat(self, path: str) -> Metadata:
        try:
            return self._metadata(self._host_path(path), path)
        except OSError as exc:
            raise storage_error_from_os_error(exc, path) from exc

    def list(self, path: str) -> list[Metadata]:
        host = self._host_path(path)
        out: list[Metadata] = []
        try:
            with os.scandir(host) as entries:
                for child in entries:
                    try:
                        out.append(self._metadata(Path(child.path), child.name))
                    except OSError:
                        # Entry vanished between scandir and stat.
                        continue
        except OSError as exc:
            raise storage_error_from_os_error(exc, path) from exc
        out.sort(key=lambda meta: meta.key)
        return out

    def read(self, path: str, offset: int, length: int) -> bytes:
        host = self._host_path(path)
        try:
            if host.is_dir():
                raise IsDirectoryError(path)
            with host.open("rb") as handle:
                handle.seek(max(0, offset))
                return handle.read(max(0, length))
        except OSError as exc:
            raise storage_error_from_os_error(exc, path) from exc

    def open_write(self, path: str, flags: OpenFlags) -> BinaryIO:
        host = self._host_path(path)
        os_flags = os.O_WRONLY
        if flags & OpenFlags.CREATE:
            os_flags |= os.O_CREAT
        if flags & OpenFlags.EXCLUSIVE:
            os_flags |= os.O_EXCL
        if flags & OpenFlags.TRUNCATE:
            os_flags |= os.O_TRUNC
        try:
            fd = os.open(host, os_flags, 0o644)
        except OSError as exc:
            raise storage_error_from_os_error(exc, path) from exc
        return os.fdopen(fd, "wb")

    def open_read(self, path: str) -> BinaryIO:
        host = self._host_path(path)
        try:
            if host.is_dir():
                raise IsDirectoryError(path)
            return host.open("rb")
        except OSError as exc:
            raise storage_error_from_os_error(exc, path) from exc

    def mkdir(self, path: str) -> None:
        try:
            self._host_path(path).mkdir()
        except OSError as exc:
            raise storage_error_from_os_error(exc, path) from exc

    def unlink(self, path: str) -> None:
        host = self._host_path(path)
        try:
            if host.is_dir():
                raise IsDirectoryError(path)
            host.unlink()
        except OSError as exc:
            raise storage_error_from_os_error(exc, path) from exc

    def rmdir(self, path: str, recursive: bool) -> None:
        host = self._host_path(path)
        if host == self.root:
            raise PermissionDeniedError(path)
        try:
            if host.exists() and not host.is_dir():
                raise NotDirectoryError(path)
            if recursive:
                shutil.rmtree(host)
            else:
                host.rmdir()
        except OSError as exc:
            raise storage_error_from_os_error(exc, path) from exc


__all__ = ["LocalBackend"]
