"""Store operations invoked from detached UI tasks.

Each helper is synchronous and raises taxonomy errors; the runtime task
wrappers turn those into status messages.
"""

from __future__ import annotations

import posixpath

from .entry import Entry, sort_entries
from .errors import IsDirectoryError, ValidationError
from .storage.backend import StorageService
from .storage.types import OpenFlags

COPY_CHUNK_BYTES = 1 << 20


def list_entries(storage: StorageService, path: str) -> list[Entry]:
    """List ``path`` as display entries, directories first."""
    records = storage.list_directory(path)
    return sort_entries([Entry.from_metadata(record, path) for record in records])


def validate_entry_name(name: str) -> str:
    """Return a stripped leaf name or raise ``ValidationError``."""
    stripped = name.strip()
    if not stripped:
        raise ValidationError("name must not be empty")
    if "/" in stripped:
        raise ValidationError(f"name must not contain '/': {stripped}")
    if stripped in {".", ".."}:
        raise ValidationError(f"invalid name: {stripped}")
    return stripped


def child_path(directory: str, name: str) -> str:
    return posixpath.join(directory, validate_entry_name(name))


def create_file(storage: StorageService, path: str) -> None:
    flags = OpenFlags.WRITE | OpenFlags.CREATE | OpenFlags.EXCLUSIVE
    with storage.open_for_write(path, flags):
        pass


def create_directory(storage: StorageService, path: str) -> None:
    storage.create_directory(path)


def copy_file(storage: StorageService, source: str, destination: str) -> None:
    """Copy a regular file's bytes to ``destination`` (created or truncated)."""
    meta = storage.stat_metadata(source)
    if meta.is_dir:
        raise IsDirectoryError(source)
    flags = OpenFlags.WRITE | OpenFlags.CREATE | OpenFlags.TRUNCATE
    with storage.open_for_write(destination, flags) as handle:
        offset = 0
        while offset < meta.size:
            chunk = storage.read_file(source, offset, min(COPY_CHUNK_BYTES, meta.size - offset))
            if not chunk:
                break
            handle.write(chunk)
            offset += len(chunk)


def rename_destination(entry: Entry, new_name: str) -> str:
    """Return the path ``entry`` would move to, or raise ``ValidationError``.

    Only files can be renamed; directories are refused.
    """
    if entry.is_directory:
        raise ValidationError("Directory rename not yet supported")
    return child_path(posixpath.dirname(entry.path), new_name)


def delete_entry(storage: StorageService, entry: Entry) -> None:
    if entry.is_directory:
        storage.remove_directory(entry.path, True)
    else:
        storage.remove_file(entry.path)


__all__ = [
    "list_entries",
    "validate_entry_name",
    "child_path",
    "create_file",
    "create_directory",
    "copy_file",
    "rename_destination",
    "delete_entry",
]
