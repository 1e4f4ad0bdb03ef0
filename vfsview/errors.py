"""Exception taxonomy shared by storage, preview, and runtime layers.

Storage failures subclass ``StorageError`` so task boundaries can catch one
type and turn it into a status message. Validation and decode errors are
raised by the browser itself rather than by the storage collaborator.
"""

from __future__ import annotations

import errno


class VfsViewError(Exception):
    """Base class for every error raised by vfsview."""


class StorageError(VfsViewError):
    """Failure reported by the storage collaborator."""

    def __init__(self, message: str, path: str | None = None) -> None:
        super().__init__(message)
        self.path = path

    def __str__(self) -> str:
        message = super().__str__()
        if self.path:
            return f"{message}: {self.path}"
        return message


class NotFoundError(StorageError):
    def __init__(self, path: str | None = None) -> None:
        super().__init__("no such file or directory", path)


class AlreadyExistsError(StorageError):
    def __init__(self, path: str | None = None) -> None:
        super().__init__("file already exists", path)


class PermissionDeniedError(StorageError):
    def __init__(self, path: str | None = None) -> None:
        super().__init__("permission denied", path)


class IsDirectoryError(StorageError):
    def __init__(self, path: str | None = None) -> None:
        super().__init__("is a directory", path)


class NotDirectoryError(StorageError):
    def __init__(self, path: str | None = None) -> None:
        super().__init__("not a directory", path)


class NotEmptyError(StorageError):
    def __init__(self, path: str | None = None) -> None:
        super().__init__("directory not empty", path)


class StorageIOError(StorageError):
    """Generic I/O failure; wraps host ``OSError`` values."""


class ValidationError(VfsViewError):
    """User input or requested operation is not acceptable."""


class DecodeError(VfsViewError):
    """Preview content could not be decoded (for example a corrupt image)."""


def storage_error_from_os_error(exc: OSError, path: str) -> StorageError:
    """Map a host ``OSError`` onto the storage taxonomy."""
    if isinstance(exc, FileNotFoundError):
        return NotFoundError(path)
    if isinstance(exc, FileExistsError):
        return AlreadyExistsError(path)
    if isinstance(exc, PermissionError):
        return PermissionDeniedError(path)
    if isinstance(exc, IsADirectoryError):
        return IsDirectoryError(path)
    if isinstance(exc, NotADirectoryError):
        return NotDirectoryError(path)
    if exc.errno == errno.ENOTEMPTY:
        return NotEmptyError(path)
    return StorageIOError(exc.strerror or str(exc), path)


__all__ = [
    "VfsViewError",
    "StorageError",
    "NotFoundError",
    "AlreadyExistsError",
    "PermissionDeniedError",
    "IsDirectoryError",
    "NotDirectoryError",
    "NotEmptyError",
    "StorageIOError",
    "ValidationError",
    "DecodeError",
    "storage_error_from_os_error",
]
