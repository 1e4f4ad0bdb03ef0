"""Ephemeral in-memory backend.

Contents live only for the lifetime of the process. Every operation takes
the backend lock because detached UI tasks may hit it concurrently.
"""

from __future__ import annotations

import io
import posixpath
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO

from ..errors import (
    AlreadyExistsError,
    IsDirectoryError,
    NotDirectoryError,
    NotEmptyError,
    NotFoundError,
    PermissionDeniedError,
)
from .backend import Backend
from .types import FileMode, Metadata, OpenFlags, guess_content_type


@dataclass
class _Node:
    is_dir: bool
    data: bytes = b""
    mtime: datetime = field(default_factory=datetime.now)


class _MemoryWriteHandle(io.BytesIO):
    """Buffered writer that commits its bytes back to the backend on close."""

    def __init__(self, backend: MemoryBackend, path: str, initial: bytes) -> None:
        super().__init__(initial)
        self._backend = backend
        self._path = path

    def flush(self) -> None:
        super().flush()
        if not self.closed:
            self._backend._commit(self._path, self.getvalue())

    def close(self) -> None:
        if not self.closed:
            self._backend._commit(self._path, self.getvalue())
        super().close()


class MemoryBackend(Backend):
    name = "memory"

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._nodes: dict[str, _Node] = {"/": _Node(is_dir=True)}

    def _metadata(self, path: str, node: _Node, key: str) -> Metadata:
        name = posixpath.basename(path) or "/"
        mode = FileMode.directory() if node.is_dir else FileMode.file()
        return Metadata(
            key=key,
            size=0 if node.is_dir else len(node.data),
            mode=mode,
            modify_time=node.mtime,
            content_type=guess_content_type(name, node.is_dir),
        )

    def _node(self, path: str) -> _Node:
        node = self._nodes.get(path)
        if node is None:
            raise NotFoundError(path)
        return node

    def _require_parent_dir(self, path: str) -> None:
        parent = self._nodes.get(posixpath.dirname(path))
        if parent is None:
            raise NotFoundError(posixpath.dirname(path))
        if not parent.is_dir:
            raise NotDirectoryError(posixpath.dirname(path))

    def _children(self, path: str) -> list[str]:
        prefix = path.rstrip("/") + "/"
        return [
            candidate
            for candidate in self._nodes
            if candidate != path and candidate.startswith(prefix) and "/" not in candidate[len(prefix):]
        ]

    def _commit(self, path: str, data: bytes) -> None:
        with self._lock:
            node = self._nodes.get(path)
            if node is None or node.is_dir:
                return
            node.data = bytes(data)
            node.mtime = datetime.now()

    def stat(self, path: str) -> Metadata:
        with self._lock:
            return self._metadata(path, self._node(path), path)

    def list(self, path: str) -> list[Metadata]:
        with self._lock:
            node = self._node(path)
            if not node.is_dir:
                raise NotDirectoryError(path)
            out = []
            for child in sorted(self._children(path)):
                out.append(self._metadata(child, self._nodes[child], posixpath.basename(child)))
            return out

    def read(self, path: str, offset: int, length: int) -> bytes:
        with self._lock:
            node = self._node(path)
            if node.is_dir:
                raise IsDirectoryError(path)
            start = max(0, offset)
            return node.data[start:start + max(0, length)]

    def open_write(self, path: str, flags: OpenFlags) -> BinaryIO:
        with self._lock:
            node = self._nodes.get(path)
            if node is not None:
                if node.is_dir:
                    raise IsDirectoryError(path)
                if flags & OpenFlags.CREATE and flags & OpenFlags.EXCLUSIVE:
                    raise AlreadyExistsError(path)
            else:
                if not flags & OpenFlags.CREATE:
                    raise NotFoundError(path)
                self._require_parent_dir(path)
                node = _Node(is_dir=False)
                self._nodes[path] = node
            initial = b"" if flags & OpenFlags.TRUNCATE else node.data
            if flags & OpenFlags.TRUNCATE:
                node.data = b""
            return _MemoryWriteHandle(self, path, initial)

    def open_read(self, path: str) -> BinaryIO:
        with self._lock:
            node = self._node(path)
            if node.is_dir:
                raise IsDirectoryError(path)
            return io.BytesIO(node.data)

    def mkdir(self, path: str) -> None:
        with self._lock:
            if path in self._nodes:
                raise AlreadyExistsError(path)
            self._require_parent_dir(path)
            self._nodes[path] = _Node(is_dir=True)

    def unlink(self, path: str) -> None:
        with self._lock:
            node = self._node(path)
            if node.is_dir:
                raise IsDirectoryError(path)
            del self._nodes[path]

    def rmdir(self, path: str, recursive: bool) -> None:
        with self._lock:
            if path == "/":
                raise PermissionDeniedError(path)
            node = self._node(path)
            if not node.is_dir:
                raise NotDirectoryError(path)
            prefix = path + "/"
            descendants = [candidate for candidate in self._nodes if candidate.startswith(prefix)]
            if descendants and not recursive:
                raise NotEmptyError(path)
            for candidate in descendants:
                del self._nodes[candidate]
            del self._nodes[path]


__all__ = ["MemoryBackend"]
