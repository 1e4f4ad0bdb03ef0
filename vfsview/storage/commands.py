"""Built-in commands for the embedded shell.

Each command receives the file system, its argument list, and a text buffer
and returns an exit code. Relative paths resolve against ``/``.
"""

from __future__ import annotations

import io
import logging
import posixpath
from collections.abc import Callable
from typing import TYPE_CHECKING

from ..errors import StorageError
from .types import OpenFlags

if TYPE_CHECKING:
    from .filesystem import VirtualFileSystem

LOGGER = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_USAGE = 2
EXIT_UNKNOWN_COMMAND = 127
CAT_MAX_BYTES = 1 << 20

CommandFn = Callable[..., int]


def _absolute(path: str) -> str:
    return posixpath.normpath(posixpath.join("/", path))


def _cmd_help(_fs: VirtualFileSystem, _args: list[str], out: io.StringIO) -> int:
    for name in sorted(COMMANDS):
        usage, summary = COMMAND_USAGE[name]
        out.write(f"{name:<7} {usage:<14} {summary}\n")
    return EXIT_OK


def _cmd_echo(_fs: VirtualFileSystem, args: list[str], out: io.StringIO) -> int:
    out.write(" ".join(args) + "\n")
    return EXIT_OK


def _cmd_ls(fs: VirtualFileSystem, args: list[str], out: io.StringIO) -> int:
    target = _absolute(args[0]) if args else "/"
    for record in fs.list_directory(target):
        suffix = "/" if record.is_dir else ""
        size = "-" if record.is_dir else str(record.size)
        out.write(f"{record.mode} {size:>10} {record.key}{suffix}\n")
    return EXIT_OK


def _cmd_cat(fs: VirtualFileSystem, args: list[str], out: io.StringIO) -> int:
    if not args:
        out.write("usage: cat PATH...\n")
        return EXIT_USAGE
    for raw in args:
        data = fs.read_file(_absolute(raw), 0, CAT_MAX_BYTES)
        text = data.decode("utf-8", errors="replace")
        out.write(text)
        if text and not text.endswith("\n"):
            out.write("\n")
    return EXIT_OK


def _cmd_stat(fs: VirtualFileSystem, args: list[str], out: io.StringIO) -> int:
    if len(args) != 1:
        out.write("usage: stat PATH\n")
        return EXIT_USAGE
    record = fs.stat_metadata(_absolute(args[0]))
    out.write(f"Path:     {record.key}\n")
    out.write(f"Size:     {record.size}\n")
    out.write(f"Mode:     {record.mode}\n")
    out.write(f"Modified: {record.modify_time:%Y-%m-%d %H:%M:%S}\n")
    out.write(f"Type:     {record.content_type}\n")
    return EXIT_OK


def _cmd_mkdir(fs: VirtualFileSystem, args: list[str], out: io.StringIO) -> int:
    if not args:
        out.write("usage: mkdir PATH...\n")
        return EXIT_USAGE
    for raw in args:
        fs.create_directory(_absolute(raw))
    return EXIT_OK


def _cmd_touch(fs: VirtualFileSystem, args: list[str], out: io.StringIO) -> int:
    if not args:
        out.write("usage: touch PATH...\n")
        return EXIT_USAGE
    for raw in args:
        with fs.open_for_write(_absolute(raw), OpenFlags.WRITE | OpenFlags.CREATE):
            pass
    return EXIT_OK


def _cmd_rm(fs: VirtualFileSystem, args: list[str], out: io.StringIO) -> int:
    recursive = False
    paths: list[str] = []
    for arg in args:
        if arg in {"-r", "-rf", "-R"}:
            recursive = True
        else:
            paths.append(arg)
    if not paths:
        out.write("usage: rm [-r] PATH...\n")
        return EXIT_USAGE
    for raw in paths:
        target = _absolute(raw)
        if fs.stat_metadata(target).is_dir:
            fs.remove_directory(target, recursive)
        else:
            fs.remove_file(target)
    return EXIT_OK


def _cmd_write(fs: VirtualFileSystem, args: list[str], out: io.StringIO) -> int:
    if len(args) < 2:
        out.write("usage: write PATH TEXT...\n")
        return EXIT_USAGE
    payload = (" ".join(args[1:]) + "\n").encode("utf-8")
    flags = OpenFlags.WRITE | OpenFlags.CREATE | OpenFlags.TRUNCATE
    with fs.open_for_write(_absolute(args[0]), flags) as handle:
        handle.write(payload)
    out.write(f"wrote {len(payload)} bytes\n")
    return EXIT_OK


def _cmd_mounts(fs: VirtualFileSystem, _args: list[str], out: io.StringIO) -> int:
    for point, backend_name in fs.mounts():
        out.write(f"{point:<20} {backend_name}\n")
    return EXIT_OK


COMMANDS: dict[str, CommandFn] = {
    "help": _cmd_help,
    "echo": _cmd_echo,
    "ls": _cmd_ls,
    "cat": _cmd_cat,
    "stat": _cmd_stat,
    "mkdir": _cmd_mkdir,
    "touch": _cmd_touch,
    "rm": _cmd_rm,
    "write": _cmd_write,
    "mounts": _cmd_mounts,
}

COMMAND_USAGE: dict[str, tuple[str, str]] = {
    "help": ("", "list commands"),
    "echo": ("TEXT...", "print arguments"),
    "ls": ("[PATH]", "list a directory"),
    "cat": ("PATH...", "print file contents"),
    "stat": ("PATH", "show metadata"),
    "mkdir": ("PATH...", "create directories"),
    "touch": ("PATH...", "create empty files"),
    "rm": ("[-r] PATH...", "remove files or directories"),
    "write": ("PATH TEXT...", "replace file contents"),
    "mounts": ("", "list mount points"),
}


def run_command(fs: VirtualFileSystem, tokens: list[str]) -> tuple[str, int]:
    """Execute ``tokens`` and return ``(captured_text, exit_code)``."""
    if not tokens:
        return "", EXIT_OK
    name, args = tokens[0], tokens[1:]
    out = io.StringIO()
    command = COMMANDS.get(name)
    if command is None:
        out.write(f"{name}: command not found\n")
        return out.getvalue(), EXIT_UNKNOWN_COMMAND
    try:
        code = command(fs, args, out)
    except StorageError as exc:
        LOGGER.info("command %s failed: %s", name, exc)
        out.write(f"{name}: {exc}\n")
        code = EXIT_FAILURE
    return out.getvalue(), code


__all__ = ["COMMANDS", "run_command", "EXIT_UNKNOWN_COMMAND"]
