"""Reference storage collaborator: mount router, backends, and shell commands.

The browser core only depends on ``StorageService``; everything else in this
package exists so the application has a concrete store to browse.
"""

from __future__ import annotations

from .backend import Backend, StorageService
from .filesystem import VirtualFileSystem, clean_path
from .local import LocalBackend
from .memory import MemoryBackend
from .types import FileMode, Metadata, OpenFlags, guess_content_type

__all__ = [
    "Backend",
    "StorageService",
    "VirtualFileSystem",
    "clean_path",
    "LocalBackend",
    "MemoryBackend",
    "FileMode",
    "Metadata",
    "OpenFlags",
    "guess_content_type",
]
