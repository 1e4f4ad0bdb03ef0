"""Runtime composition layer for vfsview.

Builds the storage collaborator, wires the model to the terminal loop, and
shuts the storage down once the loop has ended.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from ..config import AppConfig, root_store_directory
from ..render import render_frame
from ..storage import LocalBackend, MemoryBackend, OpenFlags, VirtualFileSystem
from .loop import RuntimeLoopCallbacks, default_terminal_size, run_interactive
from .model import Model
from .terminal import TerminalController

LOGGER = logging.getLogger(__name__)

EPHEMERAL_MOUNT = "/ephemeral"
DEMO_MOUNT = "/demo"
DEMO_DIRECTORIES: tuple[str, ...] = (
    "/demo/documents",
    "/demo/downloads",
    "/demo/logs",
    "/demo/config",
)
DEMO_FILES: dict[str, str] = {
    "/demo/readme.txt": "Welcome to the VFS demo!",
    "/demo/documents/notes.txt": "This is a sample document",
    "/demo/downloads/file1.dat": "Download One",
    "/demo/downloads/file2.dat": "Download Two",
    "/demo/config/config.conf": "# Configuration file\nenabled = true",
    "/demo/logs/system.log": "System log entry 1\nSystem log entry 2\nSystem log entry 3",
}


def seed_demo(fs: VirtualFileSystem) -> None:
    """Mount an in-memory ``/demo`` tree with a few sample files."""
    fs.mount(DEMO_MOUNT, MemoryBackend())
    for directory in DEMO_DIRECTORIES:
        fs.create_directory(directory)
    flags = OpenFlags.WRITE | OpenFlags.CREATE | OpenFlags.TRUNCATE
    for path, content in DEMO_FILES.items():
        with fs.open_for_write(path, flags) as handle:
            handle.write(content.encode("utf-8"))
    LOGGER.info("seeded demo mount at %s", DEMO_MOUNT)


def build_storage(config_dir: Path, demo: bool = False) -> VirtualFileSystem:
    """Mount ``/`` on ``<config>/root`` and an ephemeral store at ``/ephemeral``."""
    root = root_store_directory(config_dir)
    root.mkdir(mode=0o700, parents=True, exist_ok=True)
    fs = VirtualFileSystem()
    fs.mount("/", LocalBackend(root))
    fs.mount(EPHEMERAL_MOUNT, MemoryBackend())
    if demo:
        seed_demo(fs)
    return fs


def run_app(config_dir: Path, config: AppConfig, demo: bool = False) -> None:
    """Run the browser until the user quits, then shut the storage down.

    Errors raised by ``shutdown`` propagate to the caller.
    """
    storage = build_storage(config_dir, demo=demo)
    model = Model(storage, config)
    callbacks = RuntimeLoopCallbacks(render=render_frame, terminal_size=default_terminal_size)
    try:
        terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
        run_interactive(model, terminal, sys.stdin.fileno(), callbacks)
    finally:
        LOGGER.info("shutting down storage")
        storage.shutdown()


__all__ = ["DEMO_DIRECTORIES", "DEMO_FILES", "build_storage", "run_app", "seed_demo"]
